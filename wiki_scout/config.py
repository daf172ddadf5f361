# === FILE: wiki_scout/config.py ===
"""
Модуль для загрузки и валидации конфигурации WikiScout.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import json
import os
import errno
import re
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from wiki_scout import __version__

_LANG_RE = re.compile(r"^[a-z][a-z0-9-]*$")

DEFAULT_API_URL = "https://{lang}.wikipedia.org/w/api.php"
DEFAULT_BATCH_SIZE = 500


class ExtractorConfig(BaseModel):
    """Конфигурация одного запуска выгрузки списка страниц."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    start: str = Field("", description="Начало диапазона (включительно), исходная строка курсора.")
    end: Optional[str] = Field(None, description="Граница диапазона: префикс допустимых заголовков.")
    lang: str = Field("en", description="Языковой раздел Википедии.")
    limit: Optional[int] = Field(None, ge=0, description="Лимит числа записей (проверяется между пачками).")
    api_url: str = Field(DEFAULT_API_URL, min_length=1, description="Шаблон адреса API, {lang} подставляется.")
    batch_size: int = Field(DEFAULT_BATCH_SIZE, ge=1, le=500, description="Размер пачки (gaplimit).")
    timeout: float = Field(30.0, gt=0, description="Таймаут на один запрос (секунд).")
    retry_times: int = Field(3, ge=0, description="Число повторных попыток при 429/5xx.")
    user_agent: str = Field(
        f"WikiScout/{__version__} (https://github.com/wiki-scout)",
        min_length=1,
        description="Заголовок User-Agent.",
    )
    json_format: bool = Field(False, description="Выводить записи в JSON.")
    verbose: bool = Field(False, description="Подробный вывод в stderr.")

    @field_validator("lang", mode="before")
    def _normalize_lang(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().lower()
            if not _LANG_RE.match(v):
                raise ValueError(f"Неверный код языка: {v!r}")
        return v

    @model_validator(mode="after")
    def _check_api_url(self) -> ExtractorConfig:
        if not self.api_url.startswith(("http://", "https://")):
            raise ValueError(f"api_url должен начинаться с http(s)://, получено {self.api_url!r}")
        return self

    @property
    def effective_batch_size(self) -> int:
        """Размер пачки с учётом лимита: при limit < batch_size запрашиваем меньше."""
        if self.limit is not None and 0 < self.limit < self.batch_size:
            return self.limit
        return self.batch_size

    @property
    def endpoint(self) -> str:
        """Адрес API для выбранного языка."""
        return self.api_url.format(lang=self.lang)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> ExtractorConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект ExtractorConfig.
    Без пути возвращает конфигурацию по умолчанию.
    """
    if path is None:
        return ExtractorConfig()

    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    try:
        return ExtractorConfig(**data)
    except ValidationError:
        raise


__all__ = ["ExtractorConfig", "load_config", "DEFAULT_API_URL", "DEFAULT_BATCH_SIZE"]
