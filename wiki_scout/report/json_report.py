# File: wiki_scout/report/json_report.py
"""
Генерация JSON-вывода для проекта WikiScout.

Записи пишутся по мере поступления в объект ``{"pages": [...]}``; все
значения полей выводятся строками.
"""
from __future__ import annotations

import json
from typing import Dict, Optional, TextIO

from wiki_scout.parser.models import PageRecord


def _text(value: Optional[object]) -> str:
    return "" if value is None else str(value)


def record_to_dict(record: PageRecord) -> Dict[str, str]:
    """
    Представление записи для JSON: все значения строки, отсутствующее поле даёт "".

    Пример:
    ```python
    from wiki_scout.report.json_report import record_to_dict
    record_to_dict(record)
    # {'title': 'Banana', 'id': '7', 'namespace': '0', 'fullUrl': '...',
    #  'touched': '2023-04-01T12:30:00+00:00', 'revid': '42'}
    ```
    """
    return {
        "title": record.title,
        "id": record.id,
        "namespace": _text(record.namespace),
        "fullUrl": _text(record.full_url),
        "touched": record.touched.isoformat() if record.touched is not None else "",
        "revid": str(record.revision_id),
    }


class JsonPagesWriter:
    """Потоковая запись ``{"pages":[...]}``: открывающая часть при первой записи или закрытии."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._opened = False
        self._closed = False
        self.written = 0

    def __enter__(self) -> JsonPagesWriter:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _open(self) -> None:
        if not self._opened:
            self._stream.write('{"pages":[\n')
            self._opened = True

    def write(self, record: PageRecord) -> None:
        self._open()
        if self.written:
            self._stream.write(",\n")
        self._stream.write(json.dumps(record_to_dict(record), ensure_ascii=False))
        self.written += 1

    __call__ = write

    def close(self) -> None:
        if self._closed:
            return
        self._open()
        if self.written:
            self._stream.write("\n")
        self._stream.write("]}\n")
        self._stream.flush()
        self._closed = True
