# File: wiki_scout/parser/range_filter.py
"""wiki_scout.parser.range_filter: Проверка, входит ли заголовок в запрошенный диапазон."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class RangeFilter:
    """Фильтр по границе диапазона.

    Без границы принимается любой заголовок. С границей принимаются только
    заголовки, начинающиеся с неё как с буквального префикса: при границе
    ``"Ban"`` заголовок ``"Banana"`` принимается, а ``"Apple"`` нет.
    """

    end: Optional[str] = None

    def accept(self, title: str) -> bool:
        """Возвращает True, пока заголовок остаётся в диапазоне."""
        if self.end is None:
            return True
        return title.startswith(self.end)
