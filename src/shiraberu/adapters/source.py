"""Record source protocol: the single capability the report pipeline needs.

A record source answers one query at a time with fully materialized records.
Transport, authentication and retries belong to the implementation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol, runtime_checkable

from ..core.models import Record, Stream

__all__ = [
    "FetchError",
    "RecordQuery",
    "RecordSource",
    "build_queries",
]


class FetchError(Exception):
    """Raised when a record source cannot answer a query."""

    pass


# Search qualifiers per stream, and the timestamp each stream filters on
_STREAM_QUALIFIERS = {
    Stream.OPENED: ("is:pr author:{user} is:open", "created"),
    Stream.MERGED: ("is:pr author:{user} is:merged", "merged"),
    Stream.REVIEWED: ("is:pr reviewed-by:{user} -author:{user}", "updated"),
}


@dataclass(frozen=True)
class RecordQuery:
    """One stream of records for a user within an instant window.

    Attributes
    ----------
    org : str
        Organization owning the repositories
    username : str
        Author (opened/merged) or reviewer (reviewed)
    stream : Stream
        Which stream to fetch
    since : datetime
        Window start, aware, inclusive
    until : datetime
        Window end, aware, exclusive
    """

    org: str
    username: str
    stream: Stream
    since: datetime
    until: datetime

    @property
    def category_query(self) -> str:
        template, _ = _STREAM_QUALIFIERS[self.stream]
        return template.format(user=self.username)

    @property
    def date_filter(self) -> str:
        """Inclusive date range qualifier, ending one second before ``until``."""
        _, field_name = _STREAM_QUALIFIERS[self.stream]
        last = self.until - timedelta(seconds=1)
        return f"{field_name}:{self.since.isoformat()}..{last.isoformat()}"

    @property
    def search_string(self) -> str:
        """Equivalent search-API query string."""
        return f"org:{self.org} {self.category_query} {self.date_filter}"

    def contains(self, ts: datetime) -> bool:
        return self.since <= ts < self.until


@runtime_checkable
class RecordSource(Protocol):
    """Anything that can answer a RecordQuery."""

    def fetch(self, query: RecordQuery) -> list[Record]:
        """Return every record matching the query.

        Raises
        ------
        FetchError
            If the query cannot be answered
        """
        ...


def build_queries(
    org: str,
    username: str,
    since: datetime,
    until: datetime,
) -> dict[Stream, RecordQuery]:
    """Queries for the three streams of one report window."""
    return {
        stream: RecordQuery(org=org, username=username, stream=stream, since=since, until=until)
        for stream in (Stream.OPENED, Stream.MERGED, Stream.REVIEWED)
    }
