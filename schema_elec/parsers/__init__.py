"""Parsers for the wiring schema generator."""

from .point_list_parser import (
    PointListParser,
    PointListParseError,
    COLUMN_ALIASES,
    load_point_records,
    normalize_column_name,
    parse_point_records_json,
)

__all__ = [
    "PointListParser",
    "PointListParseError",
    "COLUMN_ALIASES",
    "load_point_records",
    "normalize_column_name",
    "parse_point_records_json",
]
