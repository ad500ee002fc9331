"""Centralized configuration for report generation.

Loads configuration from a .env file and the environment and provides typed
access to settings. Missing or malformed values produce clear errors.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path

from ..core.time import DEFAULT_REPORTING_OFFSET, parse_utc_offset

__all__ = [
    "ConfigError",
    "OUTPUT_FORMATS",
    "Settings",
    "load_env_file",
    "load_settings",
]

OUTPUT_FORMATS = ("markdown", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Raised when configuration is missing or invalid."""

    pass


def _expand_home(path: Path) -> Path:
    return path.expanduser()


@dataclass
class Settings:
    """Settings for report generation.

    Attributes
    ----------
    org : str | None
        Default organization (SHIRABERU_ORG)
    username : str | None
        Default user whose activity is reported (SHIRABERU_USERNAME)
    output_format : str
        markdown or json (SHIRABERU_FORMAT)
    output_dir : Path | None
        Directory for written reports (SHIRABERU_OUTPUT_DIR, "~" expanded)
    tz_offset : str
        Fixed reporting UTC offset (SHIRABERU_TZ_OFFSET, default +09:00)
    records_file : Path | None
        Record dump used as the record source (SHIRABERU_RECORDS_FILE)
    log_level : str
        Logging level (SHIRABERU_LOG_LEVEL, default WARNING)
    log_dir : Path | None
        Directory for JSONL logs (SHIRABERU_LOG_DIR)
    """

    org: str | None = None
    username: str | None = None
    output_format: str = "markdown"
    output_dir: Path | None = None
    tz_offset: str = DEFAULT_REPORTING_OFFSET
    records_file: Path | None = None
    log_level: str = "WARNING"
    log_dir: Path | None = None

    def __post_init__(self):
        """Validate settings after initialization."""
        if isinstance(self.output_dir, str):
            self.output_dir = Path(self.output_dir)
        if self.output_dir is not None:
            self.output_dir = _expand_home(self.output_dir)

        if isinstance(self.records_file, str):
            self.records_file = Path(self.records_file)
        if self.records_file is not None:
            self.records_file = _expand_home(self.records_file)

        if isinstance(self.log_dir, str):
            self.log_dir = Path(self.log_dir)

        self.output_format = self.output_format.lower()
        if self.output_format not in OUTPUT_FORMATS:
            raise ConfigError(
                f"SHIRABERU_FORMAT must be one of {', '.join(OUTPUT_FORMATS)}, "
                f"got '{self.output_format}'"
            )

        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(
                f"SHIRABERU_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got '{self.log_level}'"
            )

        try:
            parse_utc_offset(self.tz_offset)
        except ValueError as exc:
            raise ConfigError(
                f"SHIRABERU_TZ_OFFSET is invalid: {exc}. Use a fixed offset such as +09:00"
            ) from exc

    @property
    def reporting_timezone(self) -> tzinfo:
        return parse_utc_offset(self.tz_offset)

    def ensure_output_dir(self) -> Path | None:
        """Create the output directory if one is configured."""
        if self.output_dir is None:
            return None
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigError(f"Cannot create output directory {self.output_dir}: {exc}") from exc
        return self.output_dir

    @classmethod
    def from_env(cls, env_file: Path | str | None = None) -> Settings:
        """Load settings from environment.

        Loads from .env file if present, then reads os.environ.

        Parameters
        ----------
        env_file
            Path to .env file (default: .env in current directory)

        Returns
        -------
        Settings
            Loaded settings

        Raises
        ------
        ConfigError
            If settings are invalid
        """
        if env_file is None:
            env_file = Path(".env")

        if isinstance(env_file, str):
            env_file = Path(env_file)

        if env_file.exists():
            load_env_file(env_file)

        env = os.environ
        return cls(
            org=env.get("SHIRABERU_ORG") or None,
            username=env.get("SHIRABERU_USERNAME") or None,
            output_format=env.get("SHIRABERU_FORMAT", "markdown"),
            output_dir=Path(env["SHIRABERU_OUTPUT_DIR"]) if env.get("SHIRABERU_OUTPUT_DIR") else None,
            tz_offset=env.get("SHIRABERU_TZ_OFFSET", DEFAULT_REPORTING_OFFSET),
            records_file=Path(env["SHIRABERU_RECORDS_FILE"]) if env.get("SHIRABERU_RECORDS_FILE") else None,
            log_level=env.get("SHIRABERU_LOG_LEVEL", "WARNING"),
            log_dir=Path(env["SHIRABERU_LOG_DIR"]) if env.get("SHIRABERU_LOG_DIR") else None,
        )


def load_env_file(env_file: Path) -> None:
    """Load environment variables from .env file.

    Variables already present in the environment are not overridden.

    Parameters
    ----------
    env_file
        Path to .env file
    """
    with open(env_file, encoding="utf-8") as f:
        for line in f:
            line = line.strip()

            # Skip comments and empty lines
            if not line or line.startswith("#"):
                continue

            if line.startswith("export "):
                line = line[len("export "):]

            # Parse KEY=VALUE
            if "=" in line:
                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip()

                # Remove quotes
                if (value.startswith('"') and value.endswith('"')) or (value.startswith("'") and value.endswith("'")):
                    value = value[1:-1]

                os.environ.setdefault(key, value)


def load_settings(env_file: Path | str | None = None) -> Settings:
    """Load settings from the environment and an optional .env file.

    Raises
    ------
    ConfigError
        If settings are invalid
    """
    return Settings.from_env(env_file)
