"""Shared fixtures for Shiraberu tests."""

from __future__ import annotations

import itertools
from datetime import datetime

import pytest
from loguru import logger

from shiraberu.core.models import Record
from shiraberu.core.time import parse_utc_iso8601


@pytest.fixture(autouse=True)
def reset_loguru():
    """Drop sinks added by a test (CLI runs bind sinks to captured streams)."""
    yield
    logger.remove()


@pytest.fixture
def make_record():
    """Factory building records with ISO-8601 string timestamps."""
    counter = itertools.count(1)

    def _make(
        *,
        created: str | None = None,
        updated: str | None = None,
        merged: str | None = None,
        repository: str = "api-server",
        state: str = "open",
        is_draft: bool = False,
        additions: int = 0,
        deletions: int = 0,
        org: str | None = None,
    ) -> Record:
        number = next(counter)

        def ts(value: str | None) -> datetime | None:
            return parse_utc_iso8601(value) if value else None

        return Record(
            title=f"PR {number}",
            url=f"https://github.com/acme/{repository}/pull/{number}",
            repository=repository,
            state=state,
            is_draft=is_draft,
            created_at=ts(created),
            updated_at=ts(updated),
            merged_at=ts(merged),
            additions=additions,
            deletions=deletions,
            org=org,
        )

    return _make
