#!/usr/bin/env python3
"""Main CLI module for Shiraberu."""

import sys

import click

from .. import __version__
from .cli_common import CONTEXT_SETTINGS, ExitCode
from .shiraberu_report import demo_command, previous_command, report_command

EPILOG = """
Examples:
  shiraberu report --org acme --user alice --records prs.yaml   # This week so far
  shiraberu report --period month --last --records prs.json     # Last full month
  shiraberu report --period custom --start 2025-01-01 --end 2025-01-07 --demo
  shiraberu previous --start 2025-01-01 --end 2025-01-31 --period month
  shiraberu demo --format json -o demo.json
""".strip()


@click.group(
    context_settings=CONTEXT_SETTINGS,
    help="Shiraberu - pull-request activity reports",
    epilog=EPILOG,
)
@click.version_option(__version__, prog_name="shiraberu")
def cli() -> None:
    """Root CLI command."""


cli.add_command(report_command, "report")
cli.add_command(previous_command, "previous")
cli.add_command(demo_command, "demo")


def main(args: list[str] | None = None) -> int:
    """Main CLI entry point."""

    try:
        normalized_args = list(args) if args is not None else None
        rv = cli.main(args=normalized_args, prog_name="shiraberu", standalone_mode=False)
        return int(rv) if isinstance(rv, int) else 0
    except click.ClickException as exc:
        exc.show()
        return int(ExitCode.INVALID_INPUT)
    except click.Abort:
        click.echo("Aborted!", err=True)
        return int(ExitCode.UNKNOWN_ERROR)
    except SystemExit as exc:  # pragma: no cover - click normalizes exit codes
        return int(exc.code) if exc.code is not None else 0


if __name__ == "__main__":  # pragma: no cover - executable module
    sys.exit(main())
