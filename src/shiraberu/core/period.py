"""Report periods and previous-period arithmetic.

A period is an inclusive range of calendar dates in the reporting timezone
with a classification that decides what "the previous period" means:

- week: the 7 days ending the day before ``start``
- month: the full calendar month before the month containing ``start``
- custom: the same number of days, ending the day before ``start``

Week and month shapes are assumed, not verified: callers that need a true
Monday-Sunday week or a full month should build it with
``Period.week_containing`` / ``Period.month_containing``.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum

__all__ = [
    "InvalidPeriodError",
    "Period",
    "PeriodType",
    "previous_period",
]


class InvalidPeriodError(ValueError):
    """Raised when a period starts after it ends."""

    pass


class PeriodType(str, Enum):
    """Classification of a report period."""

    WEEK = "week"
    MONTH = "month"
    CUSTOM = "custom"


def _check_range(start: date, end: date) -> None:
    if start > end:
        raise InvalidPeriodError(
            f"Period start {start.isoformat()} is after end {end.isoformat()}"
        )


def previous_period(
    start: date,
    end: date,
    period_type: PeriodType | str = PeriodType.CUSTOM,
) -> tuple[date, date]:
    """Compute the previous period of equivalent shape.

    Parameters
    ----------
    start
        First day of the current period (inclusive)
    end
        Last day of the current period (inclusive)
    period_type
        week, month or custom (unknown values behave as custom)

    Returns
    -------
    tuple[date, date]
        (prev_start, prev_end), both inclusive

    Raises
    ------
    InvalidPeriodError
        If ``start`` is after ``end``

    Examples
    --------
    >>> previous_period(date(2025, 1, 1), date(2025, 1, 7), "custom")
    (datetime.date(2024, 12, 25), datetime.date(2024, 12, 31))
    >>> previous_period(date(2024, 3, 1), date(2024, 3, 31), "month")
    (datetime.date(2024, 2, 1), datetime.date(2024, 2, 29))
    """
    _check_range(start, end)

    try:
        kind = PeriodType(period_type)
    except ValueError:
        kind = PeriodType.CUSTOM

    prev_end = start - timedelta(days=1)

    if kind is PeriodType.WEEK:
        return prev_end - timedelta(days=6), prev_end

    if kind is PeriodType.MONTH:
        return prev_end.replace(day=1), prev_end

    duration = (end - start) + timedelta(days=1)
    prev_start = prev_end - (duration - timedelta(days=1))
    return prev_start, prev_end


@dataclass(frozen=True)
class Period:
    """Inclusive calendar-date range with a classification.

    Attributes
    ----------
    start : date
        First day (inclusive)
    end : date
        Last day (inclusive)
    period_type : PeriodType
        week, month or custom
    """

    start: date
    end: date
    period_type: PeriodType = PeriodType.CUSTOM

    def __post_init__(self) -> None:
        _check_range(self.start, self.end)
        if not isinstance(self.period_type, PeriodType):
            object.__setattr__(self, "period_type", PeriodType(self.period_type))

    @classmethod
    def week_containing(cls, day: date) -> Period:
        """Monday-Sunday week containing ``day``."""
        monday = day - timedelta(days=day.weekday())
        return cls(monday, monday + timedelta(days=6), PeriodType.WEEK)

    @classmethod
    def month_containing(cls, day: date) -> Period:
        """Full calendar month containing ``day``."""
        last_day = calendar.monthrange(day.year, day.month)[1]
        return cls(day.replace(day=1), day.replace(day=last_day), PeriodType.MONTH)

    @property
    def num_days(self) -> int:
        return (self.end - self.start).days + 1

    def days(self) -> list[date]:
        """Every calendar day in the period, ascending."""
        return [self.start + timedelta(days=i) for i in range(self.num_days)]

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def previous(self) -> Period:
        """Previous period with the same classification."""
        prev_start, prev_end = previous_period(self.start, self.end, self.period_type)
        return Period(prev_start, prev_end, self.period_type)

    def label(self) -> str:
        if self.start == self.end:
            return self.start.strftime("%Y/%m/%d")
        return f"{self.start.strftime('%Y/%m/%d')} ~ {self.end.strftime('%Y/%m/%d')}"
