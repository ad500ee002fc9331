"""Group fetched records into per-day buckets.

Each stream decides which timestamp places a record on a day:
- opened (and draft): creation time
- merged: merge time (records without one are dropped)
- reviewed: last update time, the closest available proxy for review time

Timestamps are normalized into the reporting timezone before truncation to
a calendar date.
"""

from __future__ import annotations

from datetime import date, tzinfo
from typing import Iterable

from loguru import logger

from ..core.models import Category, DailyBucket, Record, Stream
from ..core.time import to_report_date

__all__ = [
    "group_by_date",
    "route_category",
    "sort_buckets",
]

_log = logger.bind(component="rollup")


def route_category(record: Record, stream: Stream) -> Category:
    """Category list a record lands in.

    The draft flag only matters on the opened stream; a draft that shows up
    as reviewed is still counted as a review.
    """
    if stream is Stream.OPENED:
        return Category.DRAFT if record.is_draft else Category.OPENED
    if stream is Stream.MERGED:
        return Category.MERGED
    return Category.REVIEWED


def sort_buckets(buckets: Iterable[DailyBucket], *, descending: bool = True) -> list[DailyBucket]:
    return sorted(buckets, key=lambda bucket: bucket.date, reverse=descending)


def group_by_date(
    opened: list[Record],
    merged: list[Record],
    reviewed: list[Record],
    tz: tzinfo,
    *,
    descending: bool = True,
) -> list[DailyBucket]:
    """Group the three record streams into daily buckets.

    Parameters
    ----------
    opened
        Records authored and still open (drafts included)
    merged
        Records authored and merged
    reviewed
        Records reviewed by the user
    tz
        Reporting timezone
    descending
        Newest date first when True (log order), oldest first when False
        (chart order)

    Returns
    -------
    list[DailyBucket]
        One bucket per date that has at least one record
    """
    buckets: dict[date, DailyBucket] = {}
    dropped = 0

    streams = (
        (Stream.OPENED, opened),
        (Stream.MERGED, merged),
        (Stream.REVIEWED, reviewed),
    )

    for stream, records in streams:
        for record in records:
            ts = record.timestamp_for(stream)
            if ts is None:
                dropped += 1
                _log.debug(
                    "Dropping record without {} timestamp: {}",
                    stream.value,
                    record.url,
                )
                continue

            day = to_report_date(ts, tz)
            bucket = buckets.get(day)
            if bucket is None:
                bucket = buckets[day] = DailyBucket(date=day)
            bucket.add(record, route_category(record, stream))

    if dropped:
        _log.debug("Dropped {} record(s) with no usable timestamp", dropped)

    return sort_buckets(buckets.values(), descending=descending)
