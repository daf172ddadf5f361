# File: wiki_scout/parser/cursor.py
"""wiki_scout.parser.cursor: Курсор продолжения, указывающий начало следующей пачки."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote_plus

from wiki_scout.errors import EncodingError

__all__ = ["ContinuationCursor", "encode_cursor"]


def encode_cursor(raw: str) -> str:
    """Кодирует строку курсора для query string (UTF-8, пробел → ``+``)."""
    try:
        return quote_plus(raw, safe="*", encoding="utf-8", errors="strict")
    except UnicodeEncodeError as exc:
        raise EncodingError(f"Cannot encode cursor {raw!r}: {exc}") from exc


@dataclass(frozen=True, slots=True)
class ContinuationCursor:
    """Уже закодированный курсор или его отсутствие (``value is None``)."""

    value: Optional[str] = None

    @classmethod
    def absent(cls) -> ContinuationCursor:
        return cls(None)

    @classmethod
    def from_raw(cls, raw: Optional[str]) -> ContinuationCursor:
        """Создаёт курсор из исходной строки, кодируя её ровно один раз."""
        if raw is None:
            return cls.absent()
        return cls(encode_cursor(raw))

    def has_next(self) -> bool:
        """Есть ли следующая пачка."""
        return self.value is not None

    def __str__(self) -> str:
        return "" if self.value is None else self.value
