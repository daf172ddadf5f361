# wiki_scout/parser/models.py
"""
Data models for listed wiki pages.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from wiki_scout.errors import FormatError
from wiki_scout.logger import logger

#: Textual format of the ``touched`` attribute, e.g. ``2023-04-01T12:30:00Z``.
TOUCHED_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


@dataclass(frozen=True, slots=True)
class PageRecord:
    """One page of the listing: identifiers, address and last change."""

    id: str
    title: str
    namespace: Optional[str]
    full_url: Optional[str]
    touched: Optional[datetime]
    revision_id: int


def parse_touched(text: Optional[str]) -> Optional[datetime]:
    """Parse a ``touched`` timestamp as UTC; ``None`` when it does not match."""
    if text is None:
        return None
    try:
        return datetime.strptime(text, TOUCHED_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        logger.debug("Unparsable touched timestamp: %r", text)
        return None


def build_record(
    page_id: Optional[str],
    title: Optional[str],
    namespace: Optional[str],
    full_url: Optional[str],
    touched_text: Optional[str],
    revid_text: Optional[str],
) -> PageRecord:
    """Build a :class:`PageRecord` from raw attribute values.

    A bad timestamp is tolerated (``touched`` is left empty); a missing id or
    title, or a revision id that is not an integer, raises :class:`FormatError`.
    """
    if page_id is None:
        raise FormatError(f"Page {title!r} has no pageid")
    if title is None:
        raise FormatError(f"Page {page_id!r} has no title")
    if revid_text is None:
        raise FormatError(f"Page {title!r} has no lastrevid")
    try:
        revision_id = int(revid_text.strip())
    except ValueError as exc:
        raise FormatError(f"Page {title!r} has invalid lastrevid {revid_text!r}") from exc

    return PageRecord(
        id=page_id,
        title=title,
        namespace=namespace,
        full_url=full_url,
        touched=parse_touched(touched_text),
        revision_id=revision_id,
    )
