"""JSON export of a report result."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from ..core.models import Category
from ..core.time import format_utc_iso8601, format_utc_offset

if TYPE_CHECKING:
    from ..core.models import Report
    from ..pipelines.report_pipeline import ReportResult

__all__ = ["render_json", "report_to_dict"]


def _period_dict(report: Report) -> dict[str, str]:
    return {
        "start": report.period.start.isoformat(),
        "end": report.period.end.isoformat(),
        "type": report.period.period_type.value,
    }


def report_to_dict(result: ReportResult) -> dict[str, Any]:
    """Convert a report result to a JSON-ready dictionary.

    Parameters
    ----------
    result
        Pipeline result

    Returns
    -------
    dict
        Period, aggregates, comparison and the per-day PR log
    """
    report = result.report

    data: dict[str, Any] = {
        "org": report.org,
        "username": report.username,
        "generated_at": format_utc_iso8601(report.generated_at),
        "timezone": format_utc_offset(result.tz),
        "trace_id": result.trace_id,
        "period": _period_dict(report),
        "previous_period": _period_dict(result.previous) if result.previous else None,
        "summary": result.summary.to_dict(),
        "diff": result.diff.to_dict(),
        "daily": [stat.to_dict() for stat in result.daily],
        "weekly": [stat.to_dict() for stat in result.weekly],
        "monthly": [stat.to_dict() for stat in result.monthly],
        "repositories": [repo.to_dict() for repo in result.repos],
        "days": [
            {
                "date": bucket.date.isoformat(),
                **{category.value: [r.to_dict() for r in bucket.records(category)] for category in Category},
            }
            for bucket in report.days
        ],
    }

    if result.warnings:
        data["warnings"] = list(result.warnings)

    return data


def render_json(result: ReportResult, *, indent: int = 2) -> str:
    return json.dumps(report_to_dict(result), ensure_ascii=False, indent=indent) + "\n"
