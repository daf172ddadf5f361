# File: wiki_scout/crawler/urls.py
"""wiki_scout.crawler.urls: Построение адреса запроса очередной пачки."""

from __future__ import annotations

from typing import Sequence, Tuple

from wiki_scout.config import ExtractorConfig
from wiki_scout.logger import logger
from wiki_scout.parser.cursor import ContinuationCursor

__all__: Sequence[str] = ("LISTING_QUERY", "build_listing_url")

#: Неизменная часть запроса; rawcontinue=1 возвращает курсор в <query-continue><allpages>.
LISTING_QUERY: Tuple[Tuple[str, str], ...] = (
    ("action", "query"),
    ("generator", "allpages"),
    ("prop", "info"),
    ("inprop", "url"),
    ("format", "xml"),
    ("rawcontinue", "1"),
)


def build_listing_url(config: ExtractorConfig, cursor: ContinuationCursor) -> str:
    """Возвращает URL пачки, начинающейся с курсора.

    Курсор уже закодирован и добавляется в ``gapfrom`` как есть; размер пачки
    уменьшается до лимита, если лимит меньше стандартного.
    """
    params = list(LISTING_QUERY)
    params.append(("gaplimit", str(config.effective_batch_size)))
    query = "&".join(f"{key}={value}" for key, value in params)
    url = f"{config.endpoint}?{query}&gapfrom={cursor}"
    logger.debug("Listing URL: %s", url)
    return url
