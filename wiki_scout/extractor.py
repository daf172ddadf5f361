# File: wiki_scout/extractor.py
"""wiki_scout.extractor: Цикл выгрузки: загрузка пачки → разбор → сбор записей → решение о продолжении."""

from __future__ import annotations

from typing import AsyncIterator, Callable, Optional

from aiohttp import ClientSession

from wiki_scout.config import ExtractorConfig
from wiki_scout.crawler.fetcher import Fetcher
from wiki_scout.crawler.urls import build_listing_url
from wiki_scout.logger import logger
from wiki_scout.parser.cursor import ContinuationCursor
from wiki_scout.parser.listing_parser import ListingScanner, ParseSession, ScanOutcome
from wiki_scout.parser.models import PageRecord

__all__ = ["Extractor", "run_extraction"]

RecordSink = Callable[[PageRecord], None]


class Extractor:
    """Последовательно выгружает пачки списка страниц.

    В каждый момент выполняется ровно один запрос. Лимит проверяется только
    между пачками, поэтому итоговое число записей может его превысить.
    """

    def __init__(self, config: ExtractorConfig, fetcher: Optional[Fetcher] = None) -> None:
        self.config = config
        self.scanner = ListingScanner(config.end)
        self.total = 0
        self._fetcher = fetcher
        self._session: Optional[ClientSession] = None

    async def __aenter__(self) -> Extractor:
        if self._fetcher is None:
            self._session = ClientSession(headers={"User-Agent": self.config.user_agent})
            self._fetcher = Fetcher(self._session, self.config)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None
            self._fetcher = None

    def _should_continue(self, cursor: ContinuationCursor) -> bool:
        limit = self.config.limit
        return (limit is None or self.total < limit) and cursor.has_next()

    async def iter_batches(self) -> AsyncIterator[ParseSession]:
        """Отдаёт сессию каждой пачки.

        Пачка с ошибкой разбора сначала отдаётся (её записи валидны), затем
        ошибка пробрасывается. После остановки по диапазону цикл завершается.
        """
        if self._fetcher is None:
            raise RuntimeError("Extractor must be used as 'async with Extractor(...)'")

        cursor = ContinuationCursor.from_raw(self.config.start)
        self.total = 0
        while self._should_continue(cursor):
            url = build_listing_url(self.config, cursor)
            async with self._fetcher.stream(url) as chunks:
                session = await self.scanner.scan_async(chunks)
            self.total += session.count
            logger.info("retrieved %d records", self.total)

            yield session

            if session.outcome is ScanOutcome.FAILED:
                session.raise_for_error()
            if session.outcome is ScanOutcome.TERMINATED_BY_RANGE:
                break
            cursor = session.cursor

        logger.info("Processed %d records, bye ...", self.total)

    async def run(self, sink: RecordSink) -> int:
        """Передаёт все записи в *sink* и возвращает их количество."""
        async for session in self.iter_batches():
            for record in session.records:
                sink(record)
        return self.total


async def run_extraction(cfg: ExtractorConfig, sink: RecordSink) -> int:
    """
    Запускает выгрузку в собственной HTTP-сессии.

    Parameters
    ----------
    cfg : ExtractorConfig
        Конфигурация выгрузки.
    sink : Callable[[PageRecord], None]
        Получатель записей (например, writer из wiki_scout.report).

    Returns
    -------
    int
        Число выгруженных записей.
    """
    async with Extractor(cfg) as extractor:
        return await extractor.run(sink)
