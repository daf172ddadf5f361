# File: wiki_scout/errors.py
"""wiki_scout.errors: Иерархия исключений WikiScout."""

from __future__ import annotations

__all__ = [
    "WikiScoutError",
    "ParseError",
    "FormatError",
    "EncodingError",
    "FetchError",
]


class WikiScoutError(Exception):
    """Базовое исключение проекта."""


class ParseError(WikiScoutError):
    """Документ со списком страниц не удалось разобрать."""


class FormatError(ParseError):
    """Обязательный атрибут записи отсутствует или имеет неверный формат."""


class EncodingError(WikiScoutError):
    """Курсор продолжения невозможно закодировать в UTF-8."""


class FetchError(WikiScoutError):
    """HTTP-запрос к API завершился ошибкой после всех повторов."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status
