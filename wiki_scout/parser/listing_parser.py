# File: wiki_scout/parser/listing_parser.py
"""wiki_scout.parser.listing_parser: Потоковый разбор XML-ответа API со списком страниц.

Ответ ``generator=allpages`` содержит элементы ``<page>`` с атрибутами записи
и, в самом конце, ``<query-continue><allpages gapcontinue="..."/>`` с курсором
следующей пачки. Документ читается одним проходом через
:class:`lxml.etree.XMLPullParser`: дерево целиком не строится, обработанные
элементы сразу очищаются, а разбор можно прервать на первом заголовке за
границей диапазона.

Пример:
```python
from wiki_scout.parser.listing_parser import ListingScanner, ScanOutcome

scanner = ListingScanner(end="Ban")
with open("batch.xml", "rb") as f:
    session = scanner.scan(f)
for record in session.records:
    print(record.title)
if session.outcome is ScanOutcome.TERMINATED_BY_RANGE:
    print("вышли за границу диапазона")
```
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import AsyncIterable, BinaryIO, List, Optional

from lxml import etree

from wiki_scout.errors import FetchError, FormatError, ParseError, WikiScoutError
from wiki_scout.logger import logger
from wiki_scout.parser.cursor import ContinuationCursor
from wiki_scout.parser.models import PageRecord, build_record
from wiki_scout.parser.range_filter import RangeFilter

__all__ = ["ScanOutcome", "ParseSession", "ListingScanner"]

RECORD_TAG = "page"
CONTINUATION_TAG = "allpages"
CURSOR_ATTRIBUTE = "gapcontinue"
CHUNK_SIZE = 64 * 1024


class ScanOutcome(enum.Enum):
    """Состояние разбора одной пачки."""

    SCANNING = "scanning"
    EXHAUSTED = "exhausted"
    TERMINATED_BY_RANGE = "terminated_by_range"
    FAILED = "failed"


@dataclass(slots=True)
class ParseSession:
    """Результат одного вызова ``scan``: записи пачки, исход и курсор."""

    records: List[PageRecord] = field(default_factory=list)
    outcome: ScanOutcome = ScanOutcome.SCANNING
    cursor: ContinuationCursor = field(default_factory=ContinuationCursor.absent)
    error: Optional[WikiScoutError] = None
    rejected_title: Optional[str] = None

    @property
    def count(self) -> int:
        return len(self.records)

    @property
    def finished(self) -> bool:
        return self.outcome is not ScanOutcome.SCANNING

    def has_next(self) -> bool:
        return self.cursor.has_next()

    def raise_for_error(self) -> None:
        """Пробрасывает ошибку разбора или загрузки, если пачка завершилась с FAILED."""
        if self.outcome is ScanOutcome.FAILED and self.error is not None:
            raise self.error

    def _finish(self, outcome: ScanOutcome, error: Optional[WikiScoutError] = None) -> None:
        # terminal states never change
        if self.finished:
            return
        self.outcome = outcome
        self.error = error


class _ScanRun:
    """Состояние одного прохода: pull-парсер lxml и заполняемая сессия."""

    def __init__(self, range_filter: RangeFilter) -> None:
        self.session = ParseSession()
        self._range = range_filter
        self._parser = etree.XMLPullParser(
            events=("start", "end"),
            resolve_entities=False,
            no_network=True,
        )

    def feed(self, data: bytes) -> None:
        if self.session.finished:
            return
        error: Optional[ParseError] = None
        try:
            self._parser.feed(data)
        except etree.LxmlError as exc:
            error = ParseError(f"Malformed listing XML: {exc}")
        self._drain()
        if error is not None:
            self.session._finish(ScanOutcome.FAILED, error)

    def abort(self, error: WikiScoutError) -> None:
        self._drain()
        self.session._finish(ScanOutcome.FAILED, error)

    def close(self) -> None:
        if self.session.finished:
            return
        error: Optional[ParseError] = None
        try:
            self._parser.close()
        except etree.LxmlError as exc:
            error = ParseError(f"Malformed listing XML: {exc}")
        self._drain()
        if error is not None:
            self.session._finish(ScanOutcome.FAILED, error)
        else:
            self.session._finish(ScanOutcome.EXHAUSTED)

    def _drain(self) -> None:
        for event, elem in self._parser.read_events():
            if self.session.finished:
                break
            if event == "start":
                self._on_start(elem)
            else:
                self._on_end(elem)

    def _on_start(self, elem: etree._Element) -> None:
        name = etree.QName(elem).localname.lower()
        if name == RECORD_TAG:
            self._on_record(elem.attrib)
        elif name == CONTINUATION_TAG:
            self._on_continuation(elem.attrib)

    def _on_record(self, attrs) -> None:
        title = attrs.get("title")
        if title is not None and not self._range.accept(title):
            logger.info("Title %r is outside of the range, stopping", title)
            self.session.rejected_title = title
            self.session._finish(ScanOutcome.TERMINATED_BY_RANGE)
            return
        try:
            record = build_record(
                attrs.get("pageid"),
                title,
                attrs.get("ns"),
                attrs.get("fullurl"),
                attrs.get("touched"),
                attrs.get("lastrevid"),
            )
        except FormatError as exc:
            self.session._finish(ScanOutcome.FAILED, exc)
            return
        self.session.records.append(record)

    def _on_continuation(self, attrs) -> None:
        raw = attrs.get(CURSOR_ATTRIBUTE)
        if raw is None:
            logger.warning("<%s> without %s attribute", CONTINUATION_TAG, CURSOR_ATTRIBUTE)
            return
        if self.session.cursor.has_next():
            logger.warning("Repeated continuation %r ignored", raw)
            return
        self.session.cursor = ContinuationCursor.from_raw(raw)
        logger.info("will continue with: %s", self.session.cursor.value)

    @staticmethod
    def _on_end(elem: etree._Element) -> None:
        # drop processed subtrees, memory stays flat on long listings
        elem.clear(keep_tail=True)
        parent = elem.getparent()
        if parent is not None:
            while elem.getprevious() is not None:
                del parent[0]


class ListingScanner:
    """Однопроходный сканер пачек; хранит только неизменяемую границу диапазона.

    Каждый вызов :meth:`scan` / :meth:`scan_async` начинает с новой
    :class:`ParseSession`: записи и курсор предыдущей пачки в неё не попадают.
    Ошибки структуры и формата не выбрасываются, а возвращаются в сессии с
    исходом ``FAILED``.
    """

    def __init__(self, end: Optional[str] = None) -> None:
        self._range = RangeFilter(end)

    @property
    def range_filter(self) -> RangeFilter:
        return self._range

    def scan(self, stream: BinaryIO, chunk_size: int = CHUNK_SIZE) -> ParseSession:
        """Разбирает бинарный поток (файл, BytesIO, тело ответа) до конца или до остановки."""
        run = _ScanRun(self._range)
        while not run.session.finished:
            chunk = stream.read(chunk_size)
            if not chunk:
                run.close()
                break
            run.feed(chunk)
        return run.session

    async def scan_async(self, chunks: AsyncIterable[bytes]) -> ParseSession:
        """То же, что :meth:`scan`, но для асинхронного потока кусков тела ответа.

        Обрыв загрузки (FetchError из потока) завершает сессию с FAILED, уже
        разобранные записи пачки сохраняются.
        """
        run = _ScanRun(self._range)
        try:
            async for chunk in chunks:
                if chunk:
                    run.feed(chunk)
                if run.session.finished:
                    break
        except FetchError as exc:
            run.abort(exc)
        run.close()
        return run.session
