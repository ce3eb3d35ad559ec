"""Parsing module for data paths."""

from json_tables.parsing.path_parser import (
    AppendSegment,
    DataPath,
    IndexSegment,
    KeySegment,
    PathParser,
    format_path,
)

__all__ = [
    "AppendSegment",
    "DataPath",
    "IndexSegment",
    "KeySegment",
    "PathParser",
    "format_path",
]
