"""Domain models for pull-request records and per-day buckets."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from .time import format_utc_iso8601, parse_utc_iso8601

if TYPE_CHECKING:
    from .period import Period

__all__ = [
    "Category",
    "DailyBucket",
    "Record",
    "Report",
    "Stream",
]


class Category(str, Enum):
    """Lifecycle category of a record within one report."""

    OPENED = "opened"
    DRAFT = "draft"
    MERGED = "merged"
    REVIEWED = "reviewed"


class Stream(str, Enum):
    """Fetch stream a record arrives on. Drafts arrive on the opened stream."""

    OPENED = "opened"
    MERGED = "merged"
    REVIEWED = "reviewed"


def _parse_optional_ts(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        # YAML loaders hand back datetimes, naive ones meaning UTC
        return parse_utc_iso8601(value.isoformat())
    return parse_utc_iso8601(str(value))


def _parse_flag(value: Any) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"Expected true or false, got {value!r}")
    return value


@dataclass(frozen=True)
class Record:
    """One pull request as returned by a record source.

    Timestamps are optional: a record missing the timestamp that selects its
    day is dropped during bucketing rather than rejected here.
    """

    title: str
    url: str
    repository: str
    state: str = "open"
    is_draft: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    merged_at: datetime | None = None
    additions: int = 0
    deletions: int = 0
    changed_files: int = 0
    comments: int = 0
    org: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Record:
        """Build a record from a plain dictionary (JSON/YAML dump).

        Raises
        ------
        KeyError
            If title, url or repository is missing
        ValueError
            If a timestamp is not ISO-8601 or is_draft is not a boolean
        """
        return cls(
            title=str(data["title"]),
            url=str(data["url"]),
            repository=str(data["repository"]),
            state=str(data.get("state", "open")),
            is_draft=_parse_flag(data.get("is_draft")),
            created_at=_parse_optional_ts(data.get("created_at")),
            updated_at=_parse_optional_ts(data.get("updated_at")),
            merged_at=_parse_optional_ts(data.get("merged_at")),
            additions=int(data.get("additions", 0)),
            deletions=int(data.get("deletions", 0)),
            changed_files=int(data.get("changed_files", 0)),
            comments=int(data.get("comments", 0)),
            org=data.get("org"),
        )

    def timestamp_for(self, stream: Stream) -> datetime | None:
        """Timestamp that places this record on a day for the given stream.

        Reviews have no timestamp of their own, so the last update stands in.
        """
        if stream is Stream.MERGED:
            return self.merged_at
        if stream is Stream.REVIEWED:
            return self.updated_at
        return self.created_at

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "url": self.url,
            "repository": self.repository,
            "state": self.state,
            "is_draft": self.is_draft,
            "created_at": format_utc_iso8601(self.created_at) if self.created_at else None,
            "updated_at": format_utc_iso8601(self.updated_at) if self.updated_at else None,
            "merged_at": format_utc_iso8601(self.merged_at) if self.merged_at else None,
            "additions": self.additions,
            "deletions": self.deletions,
            "changed_files": self.changed_files,
            "comments": self.comments,
            "org": self.org,
        }


@dataclass
class DailyBucket:
    """Records of one calendar day in the reporting timezone.

    Attributes
    ----------
    date : date
        Calendar date (bucket key)
    opened : list[Record]
        Non-draft records created that day
    draft : list[Record]
        Draft records created that day
    merged : list[Record]
        Records merged that day
    reviewed : list[Record]
        Records reviewed (last updated) that day
    """

    date: date
    opened: list[Record] = field(default_factory=list)
    draft: list[Record] = field(default_factory=list)
    merged: list[Record] = field(default_factory=list)
    reviewed: list[Record] = field(default_factory=list)

    def records(self, category: Category) -> list[Record]:
        return getattr(self, category.value)

    def add(self, record: Record, category: Category) -> None:
        self.records(category).append(record)

    @property
    def total_count(self) -> int:
        return len(self.opened) + len(self.draft) + len(self.merged) + len(self.reviewed)

    @property
    def additions(self) -> int:
        """Additions across opened, draft and merged records."""
        return sum(r.additions for r in (*self.opened, *self.draft, *self.merged))

    @property
    def deletions(self) -> int:
        """Deletions across opened, draft and merged records."""
        return sum(r.deletions for r in (*self.opened, *self.draft, *self.merged))


@dataclass
class Report:
    """Bucketed records for one period, newest day first."""

    period: Period
    org: str
    username: str
    generated_at: datetime
    days: list[DailyBucket] = field(default_factory=list)
