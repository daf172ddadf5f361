# File: wiki_scout/report/__init__.py
"""wiki_scout.report: Сериализация записей (текст и JSON) для CLI и тестов."""

from __future__ import annotations

from typing import TextIO, Union

from wiki_scout.report.json_report import JsonPagesWriter, record_to_dict
from wiki_scout.report.text_report import PlainWriter, format_plain

RecordWriter = Union[JsonPagesWriter, PlainWriter]


def open_writer(stream: TextIO, json_format: bool = False) -> RecordWriter:
    """Возвращает writer нужного формата поверх потока stream."""
    if json_format:
        return JsonPagesWriter(stream)
    return PlainWriter(stream)


__all__ = [
    "JsonPagesWriter",
    "PlainWriter",
    "RecordWriter",
    "format_plain",
    "open_writer",
    "record_to_dict",
]
