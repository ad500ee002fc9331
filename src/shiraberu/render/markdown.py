"""Markdown rendering of a report result.

The PR log lists each active day newest first, one section per category.
A summary header precedes it, with a comparison line only when previous
period data exists.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.models import Category, Record
from ..core.time import format_utc_offset, to_reporting_tz

if TYPE_CHECKING:
    from ..pipelines.report_pipeline import ReportResult
    from ..rollups.comparison import SummaryDiff

__all__ = ["format_delta", "render_markdown"]

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

_SECTIONS = (
    (Category.OPENED, "Opened"),
    (Category.DRAFT, "Draft"),
    (Category.MERGED, "Merged"),
    (Category.REVIEWED, "Reviewed"),
)


def format_delta(value: int) -> str:
    """Signed delta, e.g. "+3", "-1", "±0"."""
    if value > 0:
        return f"+{value}"
    if value < 0:
        return str(value)
    return "±0"


def _record_line(record: Record) -> str:
    state = record.state[:1].upper() + record.state[1:]
    return f"- [{record.title}]({record.url}) - {record.repository} ({state})"


def _generated_line(result: ReportResult) -> str:
    local = to_reporting_tz(result.report.generated_at, result.tz)
    return f"{local.strftime('%Y-%m-%d %H:%M')} ({format_utc_offset(result.tz)})"


def _comparison_line(diff: SummaryDiff) -> str:
    return (
        "vs previous period: "
        f"Opened {format_delta(diff.opened_diff)}, "
        f"Draft {format_delta(diff.draft_diff)}, "
        f"Merged {format_delta(diff.merged_diff)}, "
        f"Reviewed {format_delta(diff.reviewed_diff)}"
    )


def render_markdown(result: ReportResult) -> str:
    """Render a report result as Markdown.

    Parameters
    ----------
    result
        Pipeline result

    Returns
    -------
    str
        Markdown document ending with a newline
    """
    report = result.report
    summary = result.summary

    lines = [
        f"# PR Log ({report.period.label()})",
        "",
        f"Organization: {report.org}",
        f"User: {report.username}",
        f"Generated: {_generated_line(result)}",
        "",
        "## Summary",
        "",
        f"- Opened: {summary.opened_count}",
        f"- Draft: {summary.draft_count}",
        f"- Merged: {summary.merged_count} (+{summary.additions} / -{summary.deletions})",
        f"- Reviewed: {summary.reviewed_count}",
    ]

    if result.diff.has_previous:
        lines += ["", _comparison_line(result.diff)]

    if result.repos:
        lines += ["", "## Repositories", ""]
        lines += [f"- {repo.repository}: {repo.count}" for repo in result.repos]

    lines.append("")

    if not report.days:
        lines += ["No pull requests found.", ""]
        return "\n".join(lines)

    for bucket in report.days:
        lines += [f"## {bucket.date.isoformat()} ({_WEEKDAYS[bucket.date.weekday()]})", ""]
        for category, title in _SECTIONS:
            records = bucket.records(category)
            if not records:
                continue
            lines.append(f"### {title}")
            lines += [_record_line(record) for record in records]
            lines.append("")

    return "\n".join(lines)
