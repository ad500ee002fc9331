"""Record sources feeding the report pipeline."""

from .demo import DemoRecordSource
from .file_source import FileRecordSource, RecordFormatError, load_record_dump
from .source import FetchError, RecordQuery, RecordSource, build_queries

__all__ = [
    "DemoRecordSource",
    "FetchError",
    "FileRecordSource",
    "RecordFormatError",
    "RecordQuery",
    "RecordSource",
    "build_queries",
    "load_record_dump",
]
