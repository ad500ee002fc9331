"""Demo record source producing plausible pull-request activity.

Records for a day are derived from ``(seed, date)`` only, so the same day
yields the same records no matter which query or period asks for it.
"""

from __future__ import annotations

import random
from datetime import date, datetime, time, timedelta, tzinfo

from ..core.models import Record, Stream
from .source import RecordQuery

__all__ = ["DemoRecordSource"]

DEMO_REPOS = (
    "api-server",
    "web-frontend",
    "mobile-app",
    "infra-terraform",
    "shared-libs",
)

DEMO_TITLES = (
    "feat: Add user authentication",
    "fix: Resolve memory leak in cache",
    "refactor: Extract common utilities",
    "docs: Update API documentation",
    "chore: Bump dependencies",
    "feat: Implement dark mode",
    "fix: Handle edge case in parser",
    "feat: Add export to CSV feature",
    "refactor: Migrate to new database",
    "fix: Correct timezone handling",
    "feat: Add notification system",
    "chore: Update CI/CD pipeline",
    "feat: Implement search functionality",
    "fix: Fix pagination bug",
    "refactor: Improve error handling",
)

WEEKEND_ACTIVITY_RATE = 0.3
DRAFT_RATE = 0.3
MAX_OPENED = 3
MAX_MERGED = 4
MAX_REVIEWED = 3
ADDITIONS_RANGE = (10, 509)
DELETIONS_RANGE = (5, 204)
MAX_CHANGED_FILES = 20
MAX_COMMENTS = 9


class DemoRecordSource:
    """Seeded generator answering record queries with fake activity.

    Parameters
    ----------
    seed
        Random seed; equal seeds give equal data
    org
        Organization name used in generated URLs
    """

    def __init__(self, seed: int = 0, org: str = "demo-org") -> None:
        self.seed = seed
        self.org = org
        self._days: dict[tuple[date, str], dict[Stream, list[Record]]] = {}

    def fetch(self, query: RecordQuery) -> list[Record]:
        tz = query.since.tzinfo
        first = query.since.date()
        last = (query.until - timedelta(microseconds=1)).astimezone(tz).date()

        records = []
        day = first
        while day <= last:
            for record in self._records_for_day(day, tz)[query.stream]:
                ts = record.timestamp_for(query.stream)
                if ts is not None and query.contains(ts):
                    records.append(record)
            day += timedelta(days=1)
        return records

    def _records_for_day(self, day: date, tz: tzinfo | None) -> dict[Stream, list[Record]]:
        cache_key = (day, str(tz))
        if cache_key in self._days:
            return self._days[cache_key]

        rng = random.Random(f"{self.seed}:{day.isoformat()}")
        midnight = datetime.combine(day, time(0, 0))
        midnight = tz.localize(midnight) if hasattr(tz, "localize") else midnight.replace(tzinfo=tz)

        generated: dict[Stream, list[Record]] = {stream: [] for stream in Stream}

        # Weekends are quiet most of the time
        if day.weekday() >= 5 and rng.random() > WEEKEND_ACTIVITY_RATE:
            self._days[cache_key] = generated
            return generated

        for _ in range(rng.randint(0, MAX_OPENED)):
            generated[Stream.OPENED].append(self._make_record(rng, midnight, "open"))

        if rng.random() < DRAFT_RATE:
            generated[Stream.OPENED].append(self._make_record(rng, midnight, "draft"))

        for _ in range(rng.randint(0, MAX_MERGED)):
            record = self._make_record(rng, midnight, "merged")
            generated[Stream.MERGED].append(record)

        for _ in range(rng.randint(0, MAX_REVIEWED)):
            generated[Stream.REVIEWED].append(self._make_record(rng, midnight, "open"))

        self._days[cache_key] = generated
        return generated

    def _make_record(self, rng: random.Random, midnight: datetime, state: str) -> Record:
        repo = rng.choice(DEMO_REPOS)
        created_at = midnight + timedelta(hours=rng.randint(0, 11), minutes=rng.randint(0, 59))
        updated_at = created_at + timedelta(hours=rng.randint(0, 11))
        merged_at = updated_at if state == "merged" else None

        return Record(
            title=rng.choice(DEMO_TITLES),
            url=f"https://github.com/{self.org}/{repo}/pull/{rng.randint(1000, 9999)}",
            repository=repo,
            state=state,
            is_draft=state == "draft",
            created_at=created_at,
            updated_at=updated_at,
            merged_at=merged_at,
            additions=rng.randint(*ADDITIONS_RANGE),
            deletions=rng.randint(*DELETIONS_RANGE),
            changed_files=rng.randint(1, MAX_CHANGED_FILES),
            comments=rng.randint(0, MAX_COMMENTS),
            org=self.org,
        )
