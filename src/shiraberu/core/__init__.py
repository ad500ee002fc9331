"""Core domain: records, periods and reporting-timezone handling."""

from .models import Category, DailyBucket, Record, Report, Stream
from .period import InvalidPeriodError, Period, PeriodType, previous_period
from .time import (
    DEFAULT_REPORTING_OFFSET,
    format_utc_iso8601,
    get_reporting_timezone,
    parse_utc_iso8601,
    parse_utc_offset,
    to_report_date,
    to_reporting_tz,
)

__all__ = [
    # Models
    "Category",
    "DailyBucket",
    "Record",
    "Report",
    "Stream",
    # Periods
    "InvalidPeriodError",
    "Period",
    "PeriodType",
    "previous_period",
    # Time
    "DEFAULT_REPORTING_OFFSET",
    "format_utc_iso8601",
    "get_reporting_timezone",
    "parse_utc_iso8601",
    "parse_utc_offset",
    "to_report_date",
    "to_reporting_tz",
]
