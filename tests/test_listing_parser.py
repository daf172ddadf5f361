# File: tests/test_listing_parser.py
"""Тесты потокового сканера пачек: записи, курсор, остановка по диапазону и ошибки."""
import io
from urllib.parse import quote_plus

import pytest

from conftest import listing_xml, page_xml, titled_pages
from wiki_scout.errors import FetchError, FormatError, ParseError
from wiki_scout.parser.listing_parser import ListingScanner, ParseSession, ScanOutcome


def scan_bytes(scanner: ListingScanner, data: bytes, chunk_size: int = 64 * 1024) -> ParseSession:
    return scanner.scan(io.BytesIO(data), chunk_size=chunk_size)


async def as_chunks(data: bytes, size: int):
    for pos in range(0, len(data), size):
        yield data[pos:pos + size]


def test_all_records_in_order_without_continuation():
    titles = ["Apple", "Banana", "Cherry", "Date"]
    session = scan_bytes(ListingScanner(), listing_xml(titled_pages(titles)))

    assert session.outcome is ScanOutcome.EXHAUSTED
    assert [r.title for r in session.records] == titles
    assert session.count == 4
    assert not session.has_next()
    assert session.error is None


def test_record_fields_are_mapped():
    data = listing_xml([page_xml("Banana", pageid="77", ns="0", lastrevid="555")])
    record = scan_bytes(ListingScanner(), data).records[0]

    assert record.id == "77"
    assert record.namespace == "0"
    assert record.full_url == "https://en.wikipedia.org/wiki/Banana"
    assert record.revision_id == 555
    assert record.touched is not None and record.touched.year == 2023


@pytest.mark.parametrize("cursor", ["M", "Foo bar", "AC/DC", "Ærø"])
def test_continuation_cursor_is_percent_encoded(cursor):
    session = scan_bytes(ListingScanner(), listing_xml(titled_pages(["A"]), cursor=cursor))

    assert session.outcome is ScanOutcome.EXHAUSTED
    assert session.has_next()
    assert session.cursor.value == quote_plus(cursor)


def test_small_chunks_give_same_result():
    titles = [f"Title {i}" for i in range(30)]
    data = listing_xml(titled_pages(titles), cursor="Title 30")
    session = scan_bytes(ListingScanner(), data, chunk_size=7)

    assert [r.title for r in session.records] == titles
    assert session.cursor.value == "Title+30"


def test_rejected_title_stops_scan_and_keeps_previous_records():
    titles = ["Bad", "Bag", "Ban", "Cat", "Bat"]
    data = listing_xml(titled_pages(titles), cursor="Dog")
    session = scan_bytes(ListingScanner(end="Ba"), data)

    assert session.outcome is ScanOutcome.TERMINATED_BY_RANGE
    assert [r.title for r in session.records] == ["Bad", "Bag", "Ban"]
    assert session.rejected_title == "Cat"
    assert session.error is None
    # continuation comes after the records and is never reached
    assert not session.has_next()


def test_first_record_rejected_gives_empty_session():
    session = scan_bytes(ListingScanner(end="Z"), listing_xml(titled_pages(["Apple", "Zoo"])))
    assert session.outcome is ScanOutcome.TERMINATED_BY_RANGE
    assert session.records == []


def test_twelve_records_with_cursor():
    titles = [f"Page {i:02d}" for i in range(12)]
    session = scan_bytes(ListingScanner(), listing_xml(titled_pages(titles), cursor="M"))

    assert session.count == 12
    assert session.cursor.value == "M"


def test_invalid_revision_id_fails_and_keeps_earlier_records():
    pages = titled_pages(["Alpha", "Beta"]) + [page_xml("Gamma", lastrevid="abc")] + titled_pages(["Delta"])
    session = scan_bytes(ListingScanner(), listing_xml(pages, cursor="Z"))

    assert session.outcome is ScanOutcome.FAILED
    assert isinstance(session.error, FormatError)
    assert [r.title for r in session.records] == ["Alpha", "Beta"]
    with pytest.raises(FormatError):
        session.raise_for_error()


def test_bad_timestamp_does_not_fail():
    session = scan_bytes(ListingScanner(), listing_xml([page_xml("A", touched="not a date")]))
    assert session.outcome is ScanOutcome.EXHAUSTED
    assert session.records[0].touched is None


def test_malformed_xml_fails_with_parse_error():
    data = b'<?xml version="1.0"?><api><query><pages>' + page_xml("Alpha").encode() + b"<page title="
    session = scan_bytes(ListingScanner(), data)

    assert session.outcome is ScanOutcome.FAILED
    assert isinstance(session.error, ParseError)
    assert not isinstance(session.error, FormatError)


def test_empty_body_fails():
    session = scan_bytes(ListingScanner(), b"")
    assert session.outcome is ScanOutcome.FAILED
    assert isinstance(session.error, ParseError)


def test_other_elements_are_ignored():
    data = (
        b'<?xml version="1.0"?><api><warnings><info>deprecated</info></warnings>'
        b'<query><normalized/><pages>' + page_xml("Alpha").encode() + b"</pages></query></api>"
    )
    session = scan_bytes(ListingScanner(), data)
    assert [r.title for r in session.records] == ["Alpha"]
    assert session.outcome is ScanOutcome.EXHAUSTED


def test_element_names_are_case_insensitive():
    data = (
        b'<api><PAGE pageid="1" title="Alpha" lastrevid="5" />'
        b'<AllPages gapcontinue="Beta" /></api>'
    )
    session = scan_bytes(ListingScanner(), data)
    assert [r.title for r in session.records] == ["Alpha"]
    assert session.cursor.value == "Beta"


def test_continuation_without_attribute_leaves_cursor_absent():
    data = b'<api><query-continue><allpages /></query-continue></api>'
    session = scan_bytes(ListingScanner(), data)
    assert session.outcome is ScanOutcome.EXHAUSTED
    assert not session.has_next()


def test_second_continuation_is_ignored():
    data = b'<api><allpages gapcontinue="First" /><allpages gapcontinue="Second" /></api>'
    session = scan_bytes(ListingScanner(), data)
    assert session.cursor.value == "First"


def test_scanner_reuse_does_not_leak_state():
    scanner = ListingScanner()
    first = scan_bytes(scanner, listing_xml(titled_pages(["A", "B", "C"]), cursor="D"))
    second = scan_bytes(scanner, listing_xml(titled_pages(["X"])))

    assert first.count == 3 and first.has_next()
    assert [r.title for r in second.records] == ["X"]
    assert not second.has_next()
    assert second is not first


@pytest.mark.asyncio()
async def test_scan_async_matches_sync_scan():
    titles = [f"T{i}" for i in range(20)]
    data = listing_xml(titled_pages(titles), cursor="T20")
    session = await ListingScanner().scan_async(as_chunks(data, 11))

    assert session.outcome is ScanOutcome.EXHAUSTED
    assert [r.title for r in session.records] == titles
    assert session.cursor.value == "T20"


@pytest.mark.asyncio()
async def test_scan_async_stops_consuming_after_range_end():
    consumed = []

    async def tracking_chunks(data: bytes):
        async for chunk in as_chunks(data, 64):
            consumed.append(chunk)
            yield chunk

    titles = ["Ba"] + [f"Zz{i}" for i in range(200)]
    data = listing_xml(titled_pages(titles))
    session = await ListingScanner(end="B").scan_async(tracking_chunks(data))

    assert session.outcome is ScanOutcome.TERMINATED_BY_RANGE
    assert [r.title for r in session.records] == ["Ba"]
    assert sum(len(c) for c in consumed) < len(data)


@pytest.mark.asyncio()
async def test_scan_async_truncated_stream_fails():
    data = listing_xml(titled_pages(["A", "B"]))[:-10]
    session = await ListingScanner().scan_async(as_chunks(data, 16))
    assert session.outcome is ScanOutcome.FAILED
    assert [r.title for r in session.records] == ["A", "B"]


@pytest.mark.asyncio()
async def test_scan_async_interrupted_download_keeps_parsed_records():
    data = listing_xml(titled_pages(["Alpha", "Beta", "Gamma"]), cursor="Delta")
    cut = data.index(b'title="Gamma"')

    async def interrupted():
        yield data[:cut]
        raise FetchError("Body of listing interrupted")

    session = await ListingScanner().scan_async(interrupted())

    assert session.outcome is ScanOutcome.FAILED
    assert isinstance(session.error, FetchError)
    assert [r.title for r in session.records] == ["Alpha", "Beta"]
    assert not session.has_next()
    with pytest.raises(FetchError):
        session.raise_for_error()
