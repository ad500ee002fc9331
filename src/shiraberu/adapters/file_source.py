"""Record source backed by a JSON or YAML dump of pull requests.

Dump layout::

    opened:
      - {title: ..., url: ..., repository: ..., created_at: "2025-01-10T20:00:00Z", ...}
    merged: [...]
    reviewed: [...]

Queries are answered by filtering the requested stream on the timestamp
that stream is keyed on. Records without that timestamp are passed through
so the bucketer can decide what to do with them.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from ..core.models import Record, Stream
from .source import FetchError, RecordQuery

__all__ = [
    "FileRecordSource",
    "RecordFormatError",
    "load_record_dump",
]

_log = logger.bind(component="adapter")


class RecordFormatError(FetchError):
    """Raised when a record dump cannot be parsed."""

    pass


def load_record_dump(path: Path) -> dict[Stream, list[Record]]:
    """Load a record dump file.

    Parameters
    ----------
    path
        Path to a .json, .yaml or .yml file

    Returns
    -------
    dict[Stream, list[Record]]
        Records per stream (missing streams are empty)

    Raises
    ------
    FetchError
        If the file cannot be read
    RecordFormatError
        If the content is not a valid dump
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FetchError(f"Cannot read record dump {path}: {exc}") from exc

    try:
        if path.suffix.lower() == ".json":
            raw: Any = json.loads(text)
        else:
            raw = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise RecordFormatError(f"Invalid record dump {path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise RecordFormatError(f"Record dump {path} must be a mapping of streams")

    dump: dict[Stream, list[Record]] = {}
    for stream in Stream:
        entries = raw.get(stream.value) or []
        if not isinstance(entries, list):
            raise RecordFormatError(f"Stream '{stream.value}' in {path} must be a list")

        records = []
        for index, entry in enumerate(entries):
            try:
                records.append(Record.from_dict(entry))
            except (KeyError, TypeError, ValueError) as exc:
                raise RecordFormatError(
                    f"Invalid record #{index} in stream '{stream.value}' of {path}: {exc}"
                ) from exc
        dump[stream] = records

    return dump


class FileRecordSource:
    """Answer record queries from a dump file, loaded once."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._dump: dict[Stream, list[Record]] | None = None

    def _load(self) -> dict[Stream, list[Record]]:
        if self._dump is None:
            self._dump = load_record_dump(self.path)
            _log.info(
                "Loaded record dump",
                path=str(self.path),
                counts={stream.value: len(records) for stream, records in self._dump.items()},
            )
        return self._dump

    def fetch(self, query: RecordQuery) -> list[Record]:
        matches = []
        for record in self._load()[query.stream]:
            if record.org and record.org != query.org:
                continue

            ts = record.timestamp_for(query.stream)
            if ts is not None and not query.contains(ts):
                continue

            matches.append(record)

        _log.debug("Answered query", query=query.search_string, matches=len(matches))
        return matches
