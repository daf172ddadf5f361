# File: wiki_scout/report/text_report.py
"""wiki_scout.report.text_report: Текстовый вывод записей, по строке на страницу."""

from __future__ import annotations

from typing import TextIO

from wiki_scout.parser.models import PageRecord


def format_plain(record: PageRecord) -> str:
    """Строка вида ``title<TAB>id<TAB>fullUrl``."""
    return f"{record.title}\t{record.id}\t{record.full_url}"


class PlainWriter:
    """Пишет записи в поток построчно."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self.written = 0

    def __enter__(self) -> PlainWriter:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def write(self, record: PageRecord) -> None:
        self._stream.write(format_plain(record) + "\n")
        self.written += 1

    __call__ = write

    def close(self) -> None:
        self._stream.flush()
