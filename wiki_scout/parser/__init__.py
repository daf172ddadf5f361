# File: wiki_scout/parser/__init__.py
"""wiki_scout.parser: Разбор XML-пачек API, записи страниц, фильтр диапазона и курсор."""

from __future__ import annotations

from wiki_scout.parser.cursor import ContinuationCursor, encode_cursor
from wiki_scout.parser.listing_parser import ListingScanner, ParseSession, ScanOutcome
from wiki_scout.parser.models import PageRecord, build_record
from wiki_scout.parser.range_filter import RangeFilter

__all__ = [
    "ContinuationCursor",
    "encode_cursor",
    "ListingScanner",
    "ParseSession",
    "ScanOutcome",
    "PageRecord",
    "build_record",
    "RangeFilter",
]
