"""Report Pipeline - thin orchestration for activity reports.

This pipeline coordinates the flow from record fetching to rollups. It
contains no aggregation logic of its own: bucketing, rollups and comparisons
live in ``shiraberu.rollups``. The pipeline only builds queries, runs the
current and previous fetch side by side, and wires results together.
"""

from __future__ import annotations

import time
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import tzinfo
from typing import TYPE_CHECKING, Any

from ..adapters.source import build_queries
from ..core.models import Report, Stream
from ..core.time import get_current_utc, get_reporting_timezone
from ..observability.loguru_config import get_logger, timing_context
from ..rollups.aggregator import (
    DailyStat,
    MonthlyStat,
    RepoStat,
    Summary,
    WeeklyStat,
    compute_daily_stats,
    compute_monthly_stats,
    compute_repo_stats,
    compute_summary,
    compute_weekly_stats,
)
from ..rollups.bucketer import group_by_date
from ..rollups.comparison import SummaryDiff, diff_summaries
from ..rollups.time_windows import compute_period_boundaries

if TYPE_CHECKING:
    from ..adapters.source import RecordSource
    from ..core.period import Period

__all__ = [
    "ReportPipeline",
    "ReportPipelineConfig",
    "ReportResult",
    "create_report_pipeline",
]


@dataclass
class ReportPipelineConfig:
    """Configuration for report pipeline."""

    org: str
    username: str
    tz: tzinfo = field(default_factory=get_reporting_timezone)
    include_previous: bool = True
    max_workers: int = 2


@dataclass
class ReportResult:
    """Result of report generation.

    ``previous`` is None when the previous period was not requested or could
    not be fetched; ``diff.has_previous`` tells the two apart from an
    unchanged period.
    """

    report: Report
    previous: Report | None
    daily: list[DailyStat]
    weekly: list[WeeklyStat]
    monthly: list[MonthlyStat]
    summary: Summary
    diff: SummaryDiff
    repos: list[RepoStat]
    tz: tzinfo
    trace_id: str
    duration_ms: float
    warnings: list[str] = field(default_factory=list)

    @property
    def period(self) -> Period:
        return self.report.period


class ReportPipeline:
    """Thin orchestration pipeline for report generation.

    Responsibilities:
    - Build the three stream queries for a period
    - Fetch the current and previous period concurrently
    - Group records into daily buckets and compute rollups
    - Emit timing logs with trace IDs

    Example:
        >>> from shiraberu.adapters import DemoRecordSource
        >>> pipeline = create_report_pipeline(DemoRecordSource(seed=1), org="demo-org", username="me")
        >>> result = pipeline.run(Period.week_containing(date(2025, 1, 8)))
        >>> len(result.daily)
        7
    """

    def __init__(self, source: RecordSource, config: ReportPipelineConfig) -> None:
        """Initialize report pipeline.

        Parameters
        ----------
        source
            Record source answering stream queries
        config
            Pipeline configuration
        """
        self.source = source
        self.config = config
        self.logger = get_logger("pipeline")

    def fetch_report(self, period: Period, *, trace_id: str | None = None) -> Report:
        """Fetch and bucket the records of one period.

        All three streams are fully materialized before bucketing.

        Raises
        ------
        FetchError
            If the record source fails
        """
        since, until = compute_period_boundaries(period, self.config.tz)
        queries = build_queries(self.config.org, self.config.username, since, until)

        with timing_context(
            "fetch_period",
            component="pipeline",
            trace_id=trace_id,
            start=period.start.isoformat(),
            end=period.end.isoformat(),
        ) as ctx:
            fetched = {stream: list(self.source.fetch(query)) for stream, query in queries.items()}
            ctx["records"] = {stream.value: len(records) for stream, records in fetched.items()}

        days = group_by_date(
            fetched[Stream.OPENED],
            fetched[Stream.MERGED],
            fetched[Stream.REVIEWED],
            self.config.tz,
        )

        return Report(
            period=period,
            org=self.config.org,
            username=self.config.username,
            generated_at=get_current_utc(),
            days=days,
        )

    def run(self, period: Period) -> ReportResult:
        """Generate the report for a period, compared against the previous one.

        Parameters
        ----------
        period
            Report period

        Returns
        -------
        ReportResult
            Current report, rollups and the comparison

        Raises
        ------
        FetchError
            If the current period cannot be fetched
        """
        trace_id = f"report-{uuid.uuid4().hex[:12]}"
        start_time = time.time()
        warnings: list[str] = []

        self.logger.info(
            "Report started",
            trace_id=trace_id,
            org=self.config.org,
            username=self.config.username,
            period=period.label(),
            period_type=period.period_type.value,
        )

        previous_report: Report | None = None

        with ThreadPoolExecutor(max_workers=self.config.max_workers) as pool:
            current_future = pool.submit(self.fetch_report, period, trace_id=trace_id)
            previous_future: Future[Report] | None = None
            if self.config.include_previous:
                previous_future = pool.submit(self.fetch_report, period.previous(), trace_id=trace_id)

            try:
                report = current_future.result()
            except Exception:
                if previous_future is not None:
                    previous_future.cancel()
                self.logger.error("Current period fetch failed", trace_id=trace_id)
                raise

            if previous_future is not None:
                try:
                    previous_report = previous_future.result()
                except Exception as exc:
                    warnings.append(f"Previous period unavailable: {exc}")
                    self.logger.warning("Previous period unavailable: {}", exc, trace_id=trace_id)

        with timing_context("rollups", component="pipeline", trace_id=trace_id):
            summary = compute_summary(report.days)
            previous_summary = compute_summary(previous_report.days) if previous_report else None

            result = ReportResult(
                report=report,
                previous=previous_report,
                daily=compute_daily_stats(period, report.days),
                weekly=compute_weekly_stats(period, report.days),
                monthly=compute_monthly_stats(period, report.days),
                summary=summary,
                diff=diff_summaries(summary, previous_summary),
                repos=compute_repo_stats(report.days),
                tz=self.config.tz,
                trace_id=trace_id,
                duration_ms=0.0,
                warnings=warnings,
            )

        result.duration_ms = (time.time() - start_time) * 1000

        self.logger.info(
            "Report completed",
            trace_id=trace_id,
            days_with_activity=len(report.days),
            has_previous=result.diff.has_previous,
            duration_ms=result.duration_ms,
        )

        return result


def create_report_pipeline(
    source: RecordSource,
    *,
    org: str,
    username: str,
    tz: tzinfo | None = None,
    include_previous: bool = True,
    **kwargs: Any,
) -> ReportPipeline:
    """Factory function to create report pipeline.

    Parameters
    ----------
    source
        Record source
    org
        Organization to report on
    username
        User whose activity is reported
    tz
        Reporting timezone (default: UTC+9)
    include_previous
        Fetch the previous period for comparison
    **kwargs
        Additional config parameters

    Returns
    -------
    ReportPipeline
        Configured pipeline instance
    """
    config = ReportPipelineConfig(
        org=org,
        username=username,
        tz=tz if tz is not None else get_reporting_timezone(),
        include_previous=include_previous,
        **kwargs,
    )
    return ReportPipeline(source, config)
