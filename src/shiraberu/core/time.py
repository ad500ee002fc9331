"""Time and timezone utilities for report bucketing.

Every timestamp is normalized into one fixed reporting timezone before it is
truncated to a calendar date:
- The reporting timezone is a fixed UTC offset (default +09:00)
- It is configured explicitly, never derived from the host machine
- Naive datetimes are interpreted as UTC
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone, tzinfo

import pytz

__all__ = [
    "DEFAULT_REPORTING_OFFSET",
    "format_utc_iso8601",
    "format_utc_offset",
    "get_current_utc",
    "get_reporting_timezone",
    "parse_utc_iso8601",
    "parse_utc_offset",
    "to_report_date",
    "to_reporting_tz",
    "today_in_tz",
]

DEFAULT_REPORTING_OFFSET = "+09:00"

_OFFSET_RE = re.compile(r"^(?:UTC)?([+-])(\d{1,2})(?::?(\d{2}))?$")


def parse_utc_offset(value: str | int) -> tzinfo:
    """Parse a fixed UTC offset into a tzinfo.

    Parameters
    ----------
    value
        Offset string ("+09:00", "-0530", "UTC+9", "Z", "UTC") or an
        integer number of minutes east of UTC

    Returns
    -------
    tzinfo
        Fixed-offset timezone

    Raises
    ------
    ValueError
        If the offset cannot be parsed or is out of range

    Example
    -------
    >>> parse_utc_offset("+09:00").utcoffset(None)
    datetime.timedelta(seconds=32400)
    """
    if isinstance(value, int):
        minutes = value
    else:
        text = value.strip().upper()
        if text in ("Z", "UTC", "+00:00", "-00:00"):
            return pytz.UTC

        match = _OFFSET_RE.match(text)
        if not match:
            raise ValueError(f"Invalid UTC offset: {value!r} (expected e.g. +09:00)")

        sign, hours, mins = match.groups()
        if int(mins or 0) > 59:
            raise ValueError(f"Invalid UTC offset: {value!r} (minutes must be 00-59)")
        minutes = int(hours) * 60 + int(mins or 0)
        if sign == "-":
            minutes = -minutes

    if abs(minutes) >= 24 * 60:
        raise ValueError(f"UTC offset out of range: {value!r}")

    if minutes == 0:
        return pytz.UTC
    return pytz.FixedOffset(minutes)


def format_utc_offset(tz: tzinfo) -> str:
    """Format a fixed-offset tzinfo as "+HH:MM"."""
    offset = tz.utcoffset(None) or timedelta(0)
    total_minutes = int(offset.total_seconds() // 60)
    sign = "-" if total_minutes < 0 else "+"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{sign}{hours:02d}:{minutes:02d}"


def get_reporting_timezone(offset: str | int | None = None) -> tzinfo:
    """Get the reporting timezone (default: UTC+9)."""
    return parse_utc_offset(DEFAULT_REPORTING_OFFSET if offset is None else offset)


def get_current_utc() -> datetime:
    """Get current time in UTC with timezone info."""
    return datetime.now(timezone.utc)


def today_in_tz(tz: tzinfo) -> date:
    """Get today's calendar date in the given timezone."""
    return get_current_utc().astimezone(tz).date()


def to_reporting_tz(dt: datetime, tz: tzinfo) -> datetime:
    """Express an instant in the reporting timezone.

    Parameters
    ----------
    dt
        Datetime in any timezone (naive values are taken as UTC)
    tz
        Reporting timezone

    Returns
    -------
    datetime
        The same instant with ``tz`` as its tzinfo
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(tz)


def to_report_date(dt: datetime, tz: tzinfo) -> date:
    """Calendar date an instant belongs to in the reporting timezone.

    An instant recorded at 20:00 UTC is already the next day at UTC+9,
    so it buckets under the next calendar date.

    Example
    -------
    >>> to_report_date(datetime(2025, 1, 10, 20, 0, tzinfo=timezone.utc), parse_utc_offset("+09:00"))
    datetime.date(2025, 1, 11)
    """
    return to_reporting_tz(dt, tz).date()


def format_utc_iso8601(dt: datetime) -> str:
    """Format datetime as ISO-8601 UTC string.

    Parameters
    ----------
    dt
        Datetime to format (naive values are taken as UTC)

    Returns
    -------
    str
        ISO-8601 UTC string (e.g., "2025-10-08T12:30:00+00:00")
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)

    return dt.isoformat()


def parse_utc_iso8601(iso_string: str) -> datetime:
    """Parse ISO-8601 string to UTC datetime.

    Parameters
    ----------
    iso_string
        ISO-8601 formatted string ("Z" suffix accepted)

    Returns
    -------
    datetime
        Datetime in UTC

    Raises
    ------
    ValueError
        If string is not valid ISO-8601

    Example
    -------
    >>> parse_utc_iso8601("2025-10-08T14:30:00+02:00").hour
    12
    """
    iso_string = iso_string.strip().replace("Z", "+00:00")

    dt = datetime.fromisoformat(iso_string)

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)

    return dt
