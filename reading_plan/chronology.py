"""Loading and parsing of the chronological reading plan."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Iterable

from .constants import BibleReference, BookInfo, chapter_key

logger = logging.getLogger(__name__)

PLAN_PATH = Path(__file__).resolve().parent / "data" / "chronological_plan.json"

SEGMENT_RE = re.compile(r"^(?P<book>.*?[^\d\s,\-])\s*(?P<chapters>[\d,\-\s]*)$")


def load_readings(path: Path = PLAN_PATH) -> list[str]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
        raise ValueError(f"{path.name} must be a JSON array of reading strings")
    return data


def parse_chapter_list(text: str, book: BookInfo, context: str = "") -> list[int]:
    """Expand a chapter list such as ``"1, 3, 5-7"`` for ``book``.

    Invalid pieces are logged and skipped; the rest is returned in order.
    """
    chapters: list[int] = []
    if re.search(r"[^\d,\-\s]", text):
        logger.warning("Invalid characters in chapter list %r for %s %s", text, book.name, context)
        return chapters
    for piece in text.split(","):
        piece = piece.strip()
        if not piece:
            continue
        if "-" in piece:
            bounds = piece.split("-")
            if len(bounds) != 2 or not all(part.strip().isdigit() for part in bounds):
                logger.warning("Invalid range format %r for %s %s", piece, book.name, context)
                continue
            start, end = (int(part) for part in bounds)
            if start < 1 or start > end:
                logger.warning("Invalid range values %r for %s %s", piece, book.name, context)
                continue
            for chapter in range(start, end + 1):
                if chapter <= book.chapters:
                    chapters.append(chapter)
                else:
                    logger.warning(
                        "Chapter %d out of range (max %d) for %s %s",
                        chapter,
                        book.chapters,
                        book.name,
                        context,
                    )
            continue
        if not piece.isdigit() or int(piece) < 1:
            logger.warning("Invalid chapter %r for %s %s", piece, book.name, context)
            continue
        chapter = int(piece)
        if chapter > book.chapters:
            logger.warning(
                "Chapter %d out of range (max %d) for %s %s",
                chapter,
                book.chapters,
                book.name,
                context,
            )
            continue
        chapters.append(chapter)
    return chapters


def parse_reading(text: str, reference: BibleReference) -> list[str]:
    """Turn one plan entry (``;``-separated segments) into chapter keys."""
    keys: list[str] = []
    for segment in text.split(";"):
        segment = segment.strip()
        if not segment:
            continue
        match = SEGMENT_RE.match(segment)
        if not match:
            logger.warning("Could not parse segment %r of %r", segment, text)
            continue
        book = reference.find(match.group("book"))
        if book is None:
            logger.warning("Unknown book %r in %r", match.group("book"), text)
            continue
        chapter_text = match.group("chapters").strip()
        if not chapter_text:
            if book.chapters == 1:
                keys.append(chapter_key(book.abbrev, 1))
            else:
                logger.warning("Book %s listed without chapters in %r", book.name, text)
            continue
        for chapter in parse_chapter_list(chapter_text, book, context=f"in {text!r}"):
            keys.append(chapter_key(book.abbrev, chapter))
    return keys


def build_chronological_order(
    readings: Iterable[str], reference: BibleReference
) -> tuple[str, ...]:
    order: list[str] = []
    seen: set[str] = set()
    for reading in readings:
        for key in parse_reading(reading, reference):
            if key not in seen:
                seen.add(key)
                order.append(key)
    missing = [key for key in reference.sequential_keys() if key not in seen]
    if missing:
        logger.warning(
            "Chronological plan is missing %d chapters; appending them in sequential order",
            len(missing),
        )
        order.extend(missing)
    logger.debug("Built chronological order with %d chapters", len(order))
    return tuple(order)
