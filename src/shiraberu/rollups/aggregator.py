"""Dense per-day, per-week and per-month rollups of daily buckets.

Every day, ISO week and month touched by the report period gets an entry,
including those without activity. Buckets dated outside the period are
ignored by the dense rollups.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import date, timedelta
from typing import Any, Iterable

from loguru import logger

from ..core.models import DailyBucket
from ..core.period import Period
from .time_windows import iso_week_key, iter_month_starts, iter_week_starts, month_bounds, month_key

__all__ = [
    "DailyStat",
    "MonthlyStat",
    "RepoStat",
    "Summary",
    "WeeklyStat",
    "compute_daily_stats",
    "compute_monthly_stats",
    "compute_repo_stats",
    "compute_summary",
    "compute_weekly_stats",
]

_log = logger.bind(component="rollup")


@dataclass
class _CategoryCounts:
    opened_count: int = 0
    draft_count: int = 0
    merged_count: int = 0
    reviewed_count: int = 0
    additions: int = 0
    deletions: int = 0

    def add_day(self, bucket: DailyBucket) -> None:
        """Add a day's records. Sums are order-independent."""
        self.opened_count += len(bucket.opened)
        self.draft_count += len(bucket.draft)
        self.merged_count += len(bucket.merged)
        self.reviewed_count += len(bucket.reviewed)
        self.additions += bucket.additions
        self.deletions += bucket.deletions

    @property
    def total_count(self) -> int:
        return self.opened_count + self.draft_count + self.merged_count + self.reviewed_count

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["total_count"] = self.total_count
        for key, value in data.items():
            if isinstance(value, date):
                data[key] = value.isoformat()
        return data


@dataclass
class DailyStat(_CategoryCounts):
    """Statistics for one calendar day."""

    date: date = field(default=date.min)


@dataclass
class WeeklyStat(_CategoryCounts):
    """Statistics for one ISO week (Monday-Sunday).

    Attributes
    ----------
    key : str
        ISO week identifier ("2025-W01")
    label : str
        Human-readable label ("12/30 ~ 1/5")
    start_date : date
        Monday of the week
    end_date : date
        Sunday of the week
    covered_start : date
        First day of the week inside the report period
    covered_end : date
        Last day of the week inside the report period
    """

    key: str = ""
    label: str = ""
    start_date: date = field(default=date.min)
    end_date: date = field(default=date.min)
    covered_start: date = field(default=date.min)
    covered_end: date = field(default=date.min)


@dataclass
class MonthlyStat(_CategoryCounts):
    """Statistics for one calendar month.

    ``start_date``/``end_date`` are the true first and last day of the
    month; ``covered_start``/``covered_end`` clip them to the report period.
    """

    key: str = ""
    label: str = ""
    start_date: date = field(default=date.min)
    end_date: date = field(default=date.min)
    covered_start: date = field(default=date.min)
    covered_end: date = field(default=date.min)


@dataclass
class Summary:
    """Report-wide totals.

    Additions and deletions only count merged records: open and draft pull
    requests are not final, so their size does not compare across periods.
    """

    opened_count: int = 0
    draft_count: int = 0
    merged_count: int = 0
    reviewed_count: int = 0
    additions: int = 0
    deletions: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass
class RepoStat:
    repository: str
    count: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _days_in_period(period: Period, days: Iterable[DailyBucket]) -> list[DailyBucket]:
    in_range = []
    for bucket in days:
        if period.contains(bucket.date):
            in_range.append(bucket)
        else:
            _log.debug(
                "Ignoring bucket {} outside period {}..{}",
                bucket.date.isoformat(),
                period.start.isoformat(),
                period.end.isoformat(),
            )
    return in_range


def compute_daily_stats(period: Period, days: Iterable[DailyBucket]) -> list[DailyStat]:
    """Dense daily statistics for every day of the period, ascending.

    Parameters
    ----------
    period
        Report period (inclusive)
    days
        Daily buckets, possibly sparse and in any order

    Returns
    -------
    list[DailyStat]
        Exactly ``period.num_days`` entries; days without records are zero
    """
    stats = {day: DailyStat(date=day) for day in period.days()}

    for bucket in _days_in_period(period, days):
        stats[bucket.date].add_day(bucket)

    return [stats[day] for day in sorted(stats)]


def _week_label(monday: date, sunday: date) -> str:
    return f"{monday.month}/{monday.day} ~ {sunday.month}/{sunday.day}"


def compute_weekly_stats(period: Period, days: Iterable[DailyBucket]) -> list[WeeklyStat]:
    """Dense ISO-week statistics for every week the period touches.

    Weeks start on Monday and are keyed by ISO year and week number, so a
    week spanning New Year belongs to a single ISO year.
    """
    stats: dict[str, WeeklyStat] = {}
    for monday in iter_week_starts(period):
        sunday = monday + timedelta(days=6)
        key = iso_week_key(monday)
        stats[key] = WeeklyStat(
            key=key,
            label=_week_label(monday, sunday),
            start_date=monday,
            end_date=sunday,
            covered_start=max(monday, period.start),
            covered_end=min(sunday, period.end),
        )

    for bucket in _days_in_period(period, days):
        stats[iso_week_key(bucket.date)].add_day(bucket)

    return sorted(stats.values(), key=lambda stat: stat.start_date)


def compute_monthly_stats(period: Period, days: Iterable[DailyBucket]) -> list[MonthlyStat]:
    """Dense calendar-month statistics for every month the period touches."""
    stats: dict[str, MonthlyStat] = {}
    for first_day in iter_month_starts(period):
        _, last_day = month_bounds(first_day)
        key = month_key(first_day)
        stats[key] = MonthlyStat(
            key=key,
            label=first_day.strftime("%b %Y"),
            start_date=first_day,
            end_date=last_day,
            covered_start=max(first_day, period.start),
            covered_end=min(last_day, period.end),
        )

    for bucket in _days_in_period(period, days):
        stats[month_key(bucket.date)].add_day(bucket)

    return sorted(stats.values(), key=lambda stat: stat.start_date)


def compute_summary(days: Iterable[DailyBucket]) -> Summary:
    """Report-wide totals; additions/deletions from merged records only."""
    summary = Summary()
    for bucket in days:
        summary.opened_count += len(bucket.opened)
        summary.draft_count += len(bucket.draft)
        summary.merged_count += len(bucket.merged)
        summary.reviewed_count += len(bucket.reviewed)
        for record in bucket.merged:
            summary.additions += record.additions
            summary.deletions += record.deletions
    return summary


def compute_repo_stats(days: Iterable[DailyBucket]) -> list[RepoStat]:
    """Records per repository across all categories, busiest first."""
    counts: Counter[str] = Counter()
    for bucket in days:
        for record in (*bucket.opened, *bucket.draft, *bucket.merged, *bucket.reviewed):
            counts[record.repository] += 1

    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [RepoStat(repository=repo, count=count) for repo, count in ordered]
