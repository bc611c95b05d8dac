"""Standardization of free-form chapter references into canonical keys."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from .constants import BibleReference, chapter_key, default_reference

logger = logging.getLogger(__name__)

UNKNOWN_BOOK = "unknown_book"
CHAPTER_OUT_OF_RANGE = "chapter_out_of_range"
UNPARSEABLE = "unparseable"

KEY_RE = re.compile(r"^(?P<abbrev>\S+?)-(?P<chapter>\d+)$")
CHAPTER_RE = re.compile(r"^\d+$")


@dataclass(frozen=True)
class Standardized:
    """Outcome of standardizing one raw reference: a key or a failure reason."""

    raw: str
    key: str | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.key is not None


def _split_reference(text: str, reference: BibleReference) -> tuple[str, str]:
    match = KEY_RE.match(text)
    if match and reference.by_abbrev(match.group("abbrev")):
        return match.group("abbrev"), match.group("chapter")
    parts = text.rsplit(None, 1)
    if len(parts) == 2 and CHAPTER_RE.match(parts[1]):
        return parts[0], parts[1]
    logger.warning("Reference %r has no chapter number; assuming chapter 1", text)
    return text, "1"


def standardize(raw: str, reference: BibleReference | None = None) -> Standardized:
    """Parse ``"<book> <chapter>"`` or ``"<abbrev>-<chapter>"`` into a chapter key.

    Never raises; a failed parse carries one of UNKNOWN_BOOK,
    CHAPTER_OUT_OF_RANGE or UNPARSEABLE as its reason.
    """
    reference = reference or default_reference()
    if not isinstance(raw, str) or not raw.strip():
        return Standardized(raw=str(raw), reason=UNPARSEABLE)
    text = raw.strip()
    book_text, chapter_text = _split_reference(text, reference)
    book = reference.find(book_text)
    if book is None:
        return Standardized(raw=raw, reason=UNKNOWN_BOOK)
    chapter = int(chapter_text)
    if not 1 <= chapter <= book.chapters:
        return Standardized(raw=raw, reason=CHAPTER_OUT_OF_RANGE)
    return Standardized(raw=raw, key=chapter_key(book.abbrev, chapter))


def format_reference(key: str, reference: BibleReference | None = None) -> str:
    """Readable form of a chapter key: ``gn-1`` becomes ``Gênesis 1``."""
    reference = reference or default_reference()
    abbrev, sep, chapter = key.rpartition("-")
    if not sep or not abbrev:
        return key
    name = reference.book_name(abbrev)
    return f"{name} {chapter}" if name else key
