# File: tests/conftest.py
from typing import Iterable, Optional, Sequence
from xml.sax.saxutils import quoteattr

import pytest

from wiki_scout.config import ExtractorConfig
from wiki_scout.logger import configure


def page_xml(
    title: str,
    pageid: str = "1",
    ns: str = "0",
    touched: Optional[str] = "2023-04-01T12:30:00Z",
    lastrevid: Optional[str] = "100",
) -> str:
    """Build one <page> element as returned by prop=info&inprop=url."""
    attrs = {
        "pageid": pageid,
        "ns": ns,
        "title": title,
        "touched": touched,
        "lastrevid": lastrevid,
        "fullurl": f"https://en.wikipedia.org/wiki/{title.replace(' ', '_')}",
    }
    rendered = " ".join(f"{k}={quoteattr(v)}" for k, v in attrs.items() if v is not None)
    return f"<page {rendered} />"


def listing_xml(pages: Iterable[str], cursor: Optional[str] = None) -> bytes:
    """Build an API response body; the continuation element goes last, like the real API."""
    body = "".join(pages)
    tail = ""
    if cursor is not None:
        tail = f"<query-continue><allpages gapcontinue={quoteattr(cursor)} /></query-continue>"
    doc = f'<?xml version="1.0"?><api><query><pages>{body}</pages></query>{tail}</api>'
    return doc.encode("utf-8")


def titled_pages(titles: Sequence[str], first_id: int = 1) -> list[str]:
    return [page_xml(t, pageid=str(first_id + i), lastrevid=str(1000 + first_id + i)) for i, t in enumerate(titles)]


@pytest.fixture(autouse=True)
def reset_logger():
    """CliRunner swaps stderr; restore a clean handler after every test."""
    yield
    configure()


@pytest.fixture()
def basic_config() -> ExtractorConfig:
    return ExtractorConfig(start="", lang="en", retry_times=0, timeout=5.0)
