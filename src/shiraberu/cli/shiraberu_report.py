"""CLI commands for activity reports and previous-period lookups."""

from __future__ import annotations

from datetime import date, timedelta, tzinfo
from pathlib import Path

import click

from ..adapters.demo import DemoRecordSource
from ..adapters.file_source import FileRecordSource
from ..adapters.source import RecordSource
from ..config.settings import OUTPUT_FORMATS, ConfigError, Settings, load_settings
from ..core.period import Period, PeriodType, previous_period
from ..core.time import format_utc_offset, parse_utc_offset, today_in_tz
from ..observability.loguru_config import configure_loguru, get_logger
from ..pipelines.report_pipeline import create_report_pipeline
from ..render.export import render_json
from ..render.markdown import render_markdown
from .cli_common import CONTEXT_SETTINGS, CLIContext, ExitCode, handle_cli_error, parse_date_option

__all__ = ["demo_command", "previous_command", "report_command", "resolve_period"]

DEMO_DAYS = 30

_log = get_logger("cli")


def resolve_period(
    period_type: str,
    start: date | None,
    end: date | None,
    *,
    today: date,
    last: bool = False,
) -> Period:
    """Build the report period from CLI options.

    - week/month with ``--start``: the full week or month containing it
    - week/month without ``--start``: the current one up to today, or the
      last full one with ``--last``
    - custom: ``--start`` through ``--end`` (default: today)

    Raises
    ------
    click.BadParameter
        If a custom period has no start date
    InvalidPeriodError
        If the start is after the end
    """
    kind = PeriodType(period_type)

    if kind is PeriodType.CUSTOM:
        if start is None:
            raise click.BadParameter("A custom period needs --start", param_hint="--start")
        return Period(start, end or today, PeriodType.CUSTOM)

    containing = Period.week_containing if kind is PeriodType.WEEK else Period.month_containing

    if start is not None:
        return containing(start)

    current = containing(today)
    if last:
        return containing(current.start - timedelta(days=1))
    return Period(current.start, today, kind)


def _build_source(records: Path | None, demo: bool, settings: Settings, seed: int, org: str) -> RecordSource:
    if demo:
        return DemoRecordSource(seed=seed, org=org)
    path = records or settings.records_file
    if path is None:
        raise ConfigError("No record source: pass --records FILE, --demo or set SHIRABERU_RECORDS_FILE")
    return FileRecordSource(path)


def _resolve_tz(tz_option: str | None, settings: Settings) -> tzinfo:
    if tz_option is None:
        return settings.reporting_timezone
    try:
        return parse_utc_offset(tz_option)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--tz") from exc


def _render(result, output_format: str) -> str:
    if output_format == "json":
        return render_json(result)
    return render_markdown(result)


def _run_report(
    cli_ctx: CLIContext,
    *,
    settings: Settings,
    source: RecordSource,
    org: str,
    username: str,
    period: Period,
    tz: tzinfo,
    output_format: str,
    output: Path | None,
    include_previous: bool,
) -> int:
    cli_ctx.info(f"📊 Report {period.label()} ({period.period_type.value}) for {username}@{org}, UTC{format_utc_offset(tz)}")

    pipeline = create_report_pipeline(source, org=org, username=username, tz=tz, include_previous=include_previous)
    result = pipeline.run(period)

    for warning in result.warnings:
        click.echo(f"⚠️  {warning}", err=True)

    if output is None and settings.output_dir is not None:
        suffix = "json" if output_format == "json" else "md"
        output = settings.ensure_output_dir() / f"shiraberu-{period.start.isoformat()}-{period.end.isoformat()}.{suffix}"

    cli_ctx.emit(_render(result, output_format), output)
    cli_ctx.info(f"   trace_id={result.trace_id} duration={result.duration_ms:.1f}ms")
    return int(ExitCode.SUCCESS)


def _load_cli_settings(verbose: bool) -> Settings:
    settings = load_settings()
    configure_loguru(log_dir=settings.log_dir, level="DEBUG" if verbose else settings.log_level)
    return settings


@click.command("report", context_settings=CONTEXT_SETTINGS, help="Generate a pull-request activity report")
@click.option("--org", type=str, help="Organization (default: SHIRABERU_ORG)")
@click.option("--user", "username", type=str, help="User to report on (default: SHIRABERU_USERNAME)")
@click.option(
    "--period",
    "period_type",
    type=click.Choice([kind.value for kind in PeriodType]),
    default=PeriodType.WEEK.value,
    show_default=True,
    help="Period type",
)
@click.option("--start", type=str, help="Start date (YYYY-MM-DD)")
@click.option("--end", type=str, help="End date for custom periods (YYYY-MM-DD, default: today)")
@click.option("--last", is_flag=True, help="Last full week/month instead of the current one")
@click.option("--records", type=click.Path(path_type=Path), help="Record dump file (JSON or YAML)")
@click.option("--demo", is_flag=True, help="Use generated demo data")
@click.option("--seed", type=int, default=0, show_default=True, help="Seed for demo data")
@click.option("--format", "output_format", type=click.Choice(OUTPUT_FORMATS), help="Output format (default: SHIRABERU_FORMAT)")
@click.option("--output", "-o", type=click.Path(path_type=Path), help="Write report to file instead of stdout")
@click.option("--tz", "tz_option", type=str, help="Reporting UTC offset, e.g. +09:00 (default: SHIRABERU_TZ_OFFSET)")
@click.option("--no-compare", is_flag=True, help="Skip fetching the previous period")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def report_command(
    ctx: click.Context,
    org: str | None,
    username: str | None,
    period_type: str,
    start: str | None,
    end: str | None,
    last: bool,
    records: Path | None,
    demo: bool,
    seed: int,
    output_format: str | None,
    output: Path | None,
    tz_option: str | None,
    no_compare: bool,
    verbose: bool,
) -> None:
    """Generate a report for one period."""
    cli_ctx = CLIContext(verbose=verbose)

    try:
        settings = _load_cli_settings(verbose)
        tz = _resolve_tz(tz_option, settings)

        org = org or settings.org or ("demo-org" if demo else None)
        username = username or settings.username or ("demo-user" if demo else None)
        if not org or not username:
            raise ConfigError("Organization and user are required: pass --org/--user or set SHIRABERU_ORG/SHIRABERU_USERNAME")

        period = resolve_period(
            period_type,
            parse_date_option(start, "--start"),
            parse_date_option(end, "--end"),
            today=today_in_tz(tz),
            last=last,
        )

        exit_code = _run_report(
            cli_ctx,
            settings=settings,
            source=_build_source(records, demo, settings, seed, org),
            org=org,
            username=username,
            period=period,
            tz=tz,
            output_format=output_format or settings.output_format,
            output=output,
            include_previous=not no_compare,
        )
    except Exception as exc:
        _log.debug("Report command failed: {}", exc)
        exit_code = handle_cli_error(cli_ctx, exc)

    ctx.exit(exit_code)


@click.command("demo", context_settings=CONTEXT_SETTINGS, help="Report on the last 30 days of generated demo data")
@click.option("--seed", type=int, default=0, show_default=True, help="Seed for demo data")
@click.option("--format", "output_format", type=click.Choice(OUTPUT_FORMATS), help="Output format")
@click.option("--output", "-o", type=click.Path(path_type=Path), help="Write report to file instead of stdout")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def demo_command(
    ctx: click.Context,
    seed: int,
    output_format: str | None,
    output: Path | None,
    verbose: bool,
) -> None:
    """Generate a demo report."""
    cli_ctx = CLIContext(verbose=verbose)

    try:
        settings = _load_cli_settings(verbose)
        tz = settings.reporting_timezone
        today = today_in_tz(tz)
        org = "demo-org"

        exit_code = _run_report(
            cli_ctx,
            settings=settings,
            source=DemoRecordSource(seed=seed, org=org),
            org=org,
            username="demo-user",
            period=Period(today - timedelta(days=DEMO_DAYS - 1), today, PeriodType.CUSTOM),
            tz=tz,
            output_format=output_format or settings.output_format,
            output=output,
            include_previous=True,
        )
    except Exception as exc:
        exit_code = handle_cli_error(cli_ctx, exc)

    ctx.exit(exit_code)


@click.command("previous", context_settings=CONTEXT_SETTINGS, help="Show the period preceding a date range")
@click.option("--start", required=True, type=str, help="Start date (YYYY-MM-DD)")
@click.option("--end", required=True, type=str, help="End date (YYYY-MM-DD)")
@click.option(
    "--period",
    "period_type",
    type=click.Choice([kind.value for kind in PeriodType]),
    default=PeriodType.CUSTOM.value,
    show_default=True,
    help="Period type",
)
@click.pass_context
def previous_command(ctx: click.Context, start: str, end: str, period_type: str) -> None:
    """Print the previous period as "START END"."""
    cli_ctx = CLIContext()

    try:
        prev_start, prev_end = previous_period(
            parse_date_option(start, "--start"),
            parse_date_option(end, "--end"),
            period_type,
        )
        click.echo(f"{prev_start.isoformat()} {prev_end.isoformat()}")
        exit_code = int(ExitCode.SUCCESS)
    except Exception as exc:
        exit_code = handle_cli_error(cli_ctx, exc)

    ctx.exit(exit_code)
