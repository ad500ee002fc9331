"""Common CLI utilities: stable exit codes, output helpers and error mapping."""

from __future__ import annotations

import traceback
from datetime import date, datetime
from enum import IntEnum
from pathlib import Path

import click

from ..adapters.source import FetchError
from ..config.settings import ConfigError
from ..core.period import InvalidPeriodError

__all__ = [
    "CONTEXT_SETTINGS",
    "CLIContext",
    "ExitCode",
    "exit_code_for",
    "handle_cli_error",
    "parse_date_option",
]

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


class ExitCode(IntEnum):
    """Stable exit codes for CLI commands."""

    SUCCESS = 0  # Successful execution
    INVALID_INPUT = 2  # Bad option value or invalid period
    IO_ERROR = 5  # Record source or output file failure
    CONFIG_ERROR = 6  # Configuration error
    UNKNOWN_ERROR = 7  # Unknown/unexpected error


class CLIContext:
    """Context for one CLI invocation: verbosity and output."""

    def __init__(self, *, verbose: bool = False) -> None:
        self.verbose = verbose

    def info(self, message: str) -> None:
        """Progress message on stderr, so stdout stays clean for reports."""
        if self.verbose:
            click.echo(message, err=True)

    def emit(self, content: str, output: Path | None = None) -> None:
        """Write rendered content to a file or stdout.

        Raises
        ------
        OSError
            If the output file cannot be written
        """
        if output is None:
            click.echo(content, nl=not content.endswith("\n"))
            return

        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(content, encoding="utf-8")
        click.echo(f"✅ Report written to {output}", err=True)

    def error(self, message: str) -> None:
        click.echo(f"❌ {message}", err=True)


def exit_code_for(exc: BaseException) -> ExitCode:
    """Map an exception to a stable exit code."""
    if isinstance(exc, ConfigError):
        return ExitCode.CONFIG_ERROR
    if isinstance(exc, (InvalidPeriodError, click.BadParameter)):
        return ExitCode.INVALID_INPUT
    if isinstance(exc, (FetchError, OSError)):
        return ExitCode.IO_ERROR
    return ExitCode.UNKNOWN_ERROR


def handle_cli_error(ctx: CLIContext, exc: Exception) -> int:
    """Report an error and return the matching exit code.

    Args:
        ctx: CLI context
        exc: Exception to handle

    Returns:
        Appropriate exit code
    """
    exit_code = exit_code_for(exc)
    ctx.error(str(exc))

    if ctx.verbose:
        click.echo("\nTraceback:", err=True)
        click.echo(traceback.format_exc(), err=True)

    return int(exit_code)


def parse_date_option(value: str | None, option_name: str) -> date | None:
    """Parse a YYYY-MM-DD option value.

    Raises:
        click.BadParameter: If the value is not a calendar date
    """
    if value is None:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise click.BadParameter(
            f"Invalid date format: {value}. Use YYYY-MM-DD", param_hint=option_name
        ) from exc
