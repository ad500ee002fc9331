"""Configuration for Shiraberu."""

from .settings import OUTPUT_FORMATS, ConfigError, Settings, load_env_file, load_settings

__all__ = [
    "OUTPUT_FORMATS",
    "ConfigError",
    "Settings",
    "load_env_file",
    "load_settings",
]
