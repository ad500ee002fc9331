"""Tests for the dump-file record source and stream queries."""

import json
from datetime import datetime

import pytest

from shiraberu.adapters.file_source import FileRecordSource, RecordFormatError, load_record_dump
from shiraberu.adapters.source import FetchError, RecordSource, build_queries
from shiraberu.core.models import Stream
from shiraberu.core.time import parse_utc_offset

JST = parse_utc_offset("+09:00")

DUMP_YAML = """
opened:
  - title: Add login
    url: https://github.com/acme/api/pull/1
    repository: api
    created_at: "2025-01-10T20:00:00Z"
    org: acme
  - title: Other org
    url: https://github.com/other/api/pull/2
    repository: api
    created_at: "2025-01-11T01:00:00Z"
    org: other
  - title: Too old
    url: https://github.com/acme/api/pull/3
    repository: api
    created_at: "2024-12-01T01:00:00Z"
merged:
  - title: Fix cache
    url: https://github.com/acme/api/pull/4
    repository: api
    state: merged
    created_at: 2025-01-09T01:00:00Z
    merged_at: "2025-01-11T02:00:00+09:00"
    additions: 12
    deletions: 3
reviewed: []
"""


@pytest.fixture
def dump_file(tmp_path):
    path = tmp_path / "prs.yaml"
    path.write_text(DUMP_YAML, encoding="utf-8")
    return path


def _window(day_from, day_to):
    since = JST.localize(datetime(2025, 1, day_from, 0, 0, 0))
    until = JST.localize(datetime(2025, 1, day_to + 1))
    return since, until


class TestRecordQuery:
    def test_search_strings(self):
        since, until = _window(1, 7)
        queries = build_queries("acme", "alice", since, until)

        assert set(queries) == {Stream.OPENED, Stream.MERGED, Stream.REVIEWED}
        assert queries[Stream.OPENED].search_string == (
            "org:acme is:pr author:alice is:open "
            "created:2025-01-01T00:00:00+09:00..2025-01-07T23:59:59+09:00"
        )
        assert queries[Stream.OPENED].until.isoformat() == "2025-01-08T00:00:00+09:00"
        assert queries[Stream.MERGED].category_query == "is:pr author:alice is:merged"
        assert queries[Stream.REVIEWED].date_filter.startswith("updated:")
        assert "-author:alice" in queries[Stream.REVIEWED].category_query


class TestLoadRecordDump:
    def test_yaml_dump(self, dump_file):
        dump = load_record_dump(dump_file)

        assert len(dump[Stream.OPENED]) == 3
        assert dump[Stream.REVIEWED] == []
        merged = dump[Stream.MERGED][0]
        assert merged.additions == 12
        # YAML-native timestamps are normalized to aware UTC
        assert merged.created_at.utcoffset().total_seconds() == 0
        assert merged.merged_at.hour == 17

    def test_json_dump(self, tmp_path):
        path = tmp_path / "prs.json"
        path.write_text(
            json.dumps(
                {
                    "merged": [
                        {
                            "title": "t",
                            "url": "u",
                            "repository": "r",
                            "merged_at": "2025-01-01T00:00:00Z",
                        }
                    ]
                }
            )
        )

        dump = load_record_dump(path)

        assert len(dump[Stream.MERGED]) == 1
        assert dump[Stream.OPENED] == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(FetchError, match="Cannot read"):
            load_record_dump(tmp_path / "missing.yaml")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(RecordFormatError):
            load_record_dump(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")

        with pytest.raises(RecordFormatError, match="mapping"):
            load_record_dump(path)

    def test_record_missing_fields(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("opened:\n  - title: no url\n")

        with pytest.raises(RecordFormatError, match="Invalid record #0"):
            load_record_dump(path)

    def test_bad_timestamp(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("opened:\n  - {title: t, url: u, repository: r, created_at: 'last tuesday'}\n")

        with pytest.raises(RecordFormatError):
            load_record_dump(path)

    def test_draft_flag_must_be_boolean(self, tmp_path):
        path = tmp_path / "drafts.yaml"
        path.write_text("opened:\n  - {title: t, url: u, repository: r, is_draft: \"false\"}\n")

        with pytest.raises(RecordFormatError, match="Expected true or false"):
            load_record_dump(path)

    def test_draft_flag_booleans(self, tmp_path):
        path = tmp_path / "drafts.yaml"
        path.write_text(
            "opened:\n"
            "  - {title: a, url: u1, repository: r, is_draft: true}\n"
            "  - {title: b, url: u2, repository: r, is_draft: false}\n"
            "  - {title: c, url: u3, repository: r}\n"
        )

        assert [record.is_draft for record in load_record_dump(path)[Stream.OPENED]] == [True, False, False]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert all(records == [] for records in load_record_dump(path).values())


class TestFileRecordSource:
    def test_is_a_record_source(self, dump_file):
        assert isinstance(FileRecordSource(dump_file), RecordSource)

    def test_filters_by_window_and_org(self, dump_file):
        source = FileRecordSource(dump_file)
        since, until = _window(11, 11)

        opened = source.fetch(build_queries("acme", "alice", since, until)[Stream.OPENED])

        assert [record.title for record in opened] == ["Add login"]

    def test_records_without_org_match_any_org(self, dump_file):
        source = FileRecordSource(dump_file)
        since = JST.localize(datetime(2024, 12, 1))
        until = JST.localize(datetime(2025, 1, 1))

        opened = source.fetch(build_queries("anything", "alice", since, until)[Stream.OPENED])

        assert [record.title for record in opened] == ["Too old"]

    def test_merged_stream_filters_on_merge_time(self, dump_file):
        source = FileRecordSource(dump_file)

        in_window = source.fetch(build_queries("acme", "alice", *_window(11, 11))[Stream.MERGED])
        before = source.fetch(build_queries("acme", "alice", *_window(9, 10))[Stream.MERGED])

        assert len(in_window) == 1
        assert before == []

    def test_missing_file_raises_on_fetch(self, tmp_path):
        source = FileRecordSource(tmp_path / "missing.json")

        with pytest.raises(FetchError):
            source.fetch(build_queries("acme", "alice", *_window(1, 2))[Stream.OPENED])

    def test_keeps_records_in_last_second_of_window(self, tmp_path):
        path = tmp_path / "prs.json"
        path.write_text(
            json.dumps(
                {
                    "merged": [
                        {
                            "title": "Late merge",
                            "url": "https://github.com/acme/api/pull/9",
                            "repository": "api",
                            "state": "merged",
                            "merged_at": "2025-01-07T23:59:59.500+09:00",
                        }
                    ]
                }
            ),
            encoding="utf-8",
        )
        source = FileRecordSource(path)

        last_day = source.fetch(build_queries("acme", "alice", *_window(1, 7))[Stream.MERGED])
        next_day = source.fetch(build_queries("acme", "alice", *_window(8, 8))[Stream.MERGED])

        assert [record.title for record in last_day] == ["Late merge"]
        assert next_day == []
