"""Calendar window calculations for rollups.

Day, ISO-week and month windows over calendar dates in the reporting
timezone, plus the instant boundaries of a period used to build fetch
queries.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta, tzinfo

from ..core.period import Period

__all__ = [
    "compute_period_boundaries",
    "get_week_start",
    "iso_week_key",
    "iter_month_starts",
    "iter_week_starts",
    "month_bounds",
    "month_key",
]


def get_week_start(day: date) -> date:
    """Monday of the ISO week containing ``day``."""
    return day - timedelta(days=day.weekday())


def iso_week_key(day: date) -> str:
    """ISO-8601 week identifier, e.g. "2025-W01".

    Uses the ISO year, so 2024-12-30 (a Monday) is "2025-W01" and
    2021-01-01 is "2020-W53".
    """
    iso_year, iso_week, _ = day.isocalendar()
    return f"{iso_year}-W{iso_week:02d}"


def month_key(day: date) -> str:
    return day.strftime("%Y-%m")


def month_bounds(day: date) -> tuple[date, date]:
    """First and last calendar day of the month containing ``day``.

    The last day comes from the calendar, so February is 28 or 29 days.
    """
    last_day = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last_day)


def iter_week_starts(period: Period) -> list[date]:
    """Mondays of every ISO week touched by the period, ascending."""
    starts = []
    current = get_week_start(period.start)
    while current <= period.end:
        starts.append(current)
        current += timedelta(days=7)
    return starts


def iter_month_starts(period: Period) -> list[date]:
    """First days of every calendar month touched by the period, ascending."""
    starts = []
    current = period.start.replace(day=1)
    while current <= period.end:
        starts.append(current)
        # Step to the first of next month
        if current.month == 12:
            current = date(current.year + 1, 1, 1)
        else:
            current = date(current.year, current.month + 1, 1)
    return starts


def compute_period_boundaries(period: Period, tz: tzinfo) -> tuple[datetime, datetime]:
    """Instant boundaries of a period in the reporting timezone.

    Parameters
    ----------
    period
        Report period
    tz
        Reporting timezone

    Returns
    -------
    tuple[datetime, datetime]
        (start, end): midnight of the first day and midnight after the last
        day, both aware in ``tz``. The window is half-open, so an instant
        ``ts`` belongs to the period when ``start <= ts < end``

    Example
    -------
    >>> start, end = compute_period_boundaries(
    ...     Period(date(2025, 1, 1), date(2025, 1, 7)),
    ...     pytz.FixedOffset(540),
    ... )
    >>> start.isoformat()
    '2025-01-01T00:00:00+09:00'
    >>> end.isoformat()
    '2025-01-08T00:00:00+09:00'
    """
    local_start = datetime.combine(period.start, time(0, 0, 0))
    local_end = datetime.combine(period.end + timedelta(days=1), time(0, 0, 0))

    if hasattr(tz, "localize"):
        return tz.localize(local_start), tz.localize(local_end)

    return local_start.replace(tzinfo=tz), local_end.replace(tzinfo=tz)
