"""Canonical metadata for Bible books and the reference lookup table."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Collection, Iterable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookInfo:
    number: int
    name: str
    abbrev: str
    chapters: int
    testament: str
    aliases: tuple[str, ...] = ()


BOOKS: tuple[BookInfo, ...] = (
    BookInfo(1, "Gênesis", "gn", 50, "OT", ("Genesis",)),
    BookInfo(2, "Êxodo", "ex", 40, "OT", ("Exodus", "Exodo")),
    BookInfo(3, "Levítico", "lv", 27, "OT", ("Leviticus", "Levitico")),
    BookInfo(4, "Números", "nm", 36, "OT", ("Numbers", "Numeros")),
    BookInfo(5, "Deuteronômio", "dt", 34, "OT", ("Deuteronomy", "Deuteronomio")),
    BookInfo(6, "Josué", "js", 24, "OT", ("Joshua", "Josue")),
    BookInfo(7, "Juízes", "jz", 21, "OT", ("Judges", "Juizes")),
    BookInfo(8, "Rute", "rt", 4, "OT", ("Ruth",)),
    BookInfo(9, "1 Samuel", "1sm", 31, "OT"),
    BookInfo(10, "2 Samuel", "2sm", 24, "OT"),
    BookInfo(11, "1 Reis", "1rs", 22, "OT", ("1 Kings",)),
    BookInfo(12, "2 Reis", "2rs", 25, "OT", ("2 Kings",)),
    BookInfo(13, "1 Crônicas", "1cr", 29, "OT", ("1 Chronicles", "1 Cronicas")),
    BookInfo(14, "2 Crônicas", "2cr", 36, "OT", ("2 Chronicles", "2 Cronicas")),
    BookInfo(15, "Esdras", "ed", 10, "OT", ("Ezra",)),
    BookInfo(16, "Neemias", "ne", 13, "OT", ("Nehemiah",)),
    BookInfo(17, "Ester", "et", 10, "OT", ("Esther",)),
    BookInfo(18, "Jó", "jó", 42, "OT", ("Job",)),
    BookInfo(19, "Salmos", "sl", 150, "OT", ("Psalms", "Salmo")),
    BookInfo(20, "Provérbios", "pv", 31, "OT", ("Proverbs", "Proverbios")),
    BookInfo(21, "Eclesiastes", "ec", 12, "OT", ("Ecclesiastes",)),
    BookInfo(
        22,
        "Cânticos",
        "ct",
        8,
        "OT",
        ("Song of Solomon", "Canticos", "Cantares", "Cântico dos Cânticos"),
    ),
    BookInfo(23, "Isaías", "is", 66, "OT", ("Isaiah", "Isaias")),
    BookInfo(24, "Jeremias", "jr", 52, "OT", ("Jeremiah",)),
    BookInfo(
        25,
        "Lamentações",
        "lm",
        5,
        "OT",
        ("Lamentations", "Lamentacoes", "Lamentações de Jeremias"),
    ),
    BookInfo(26, "Ezequiel", "ez", 48, "OT", ("Ezekiel",)),
    BookInfo(27, "Daniel", "dn", 12, "OT"),
    BookInfo(28, "Oséias", "os", 14, "OT", ("Hosea", "Oseias")),
    BookInfo(29, "Joel", "jl", 3, "OT"),
    BookInfo(30, "Amós", "am", 9, "OT", ("Amos",)),
    BookInfo(31, "Obadias", "ob", 1, "OT", ("Obadiah",)),
    BookInfo(32, "Jonas", "jn", 4, "OT", ("Jonah",)),
    BookInfo(33, "Miquéias", "mq", 7, "OT", ("Micah", "Miqueias")),
    BookInfo(34, "Naum", "na", 3, "OT", ("Nahum",)),
    BookInfo(35, "Habacuque", "hc", 3, "OT", ("Habakkuk",)),
    BookInfo(36, "Sofonias", "sf", 3, "OT", ("Zephaniah",)),
    BookInfo(37, "Ageu", "ag", 2, "OT", ("Haggai",)),
    BookInfo(38, "Zacarias", "zc", 14, "OT", ("Zechariah",)),
    BookInfo(39, "Malaquias", "ml", 4, "OT", ("Malachi",)),
    BookInfo(40, "Mateus", "mt", 28, "NT", ("Matthew",)),
    BookInfo(41, "Marcos", "mc", 16, "NT", ("Mark",)),
    BookInfo(42, "Lucas", "lc", 24, "NT", ("Luke",)),
    BookInfo(43, "João", "jo", 21, "NT", ("John", "Joao")),
    BookInfo(44, "Atos", "atos", 28, "NT", ("Acts",)),
    BookInfo(45, "Romanos", "rm", 16, "NT", ("Romans",)),
    BookInfo(46, "1 Coríntios", "1co", 16, "NT", ("1 Corinthians", "1 Corintios")),
    BookInfo(47, "2 Coríntios", "2co", 13, "NT", ("2 Corinthians", "2 Corintios")),
    BookInfo(48, "Gálatas", "gl", 6, "NT", ("Galatians", "Galatas")),
    BookInfo(49, "Efésios", "ef", 6, "NT", ("Ephesians", "Efesios")),
    BookInfo(50, "Filipenses", "fp", 4, "NT", ("Philippians",)),
    BookInfo(51, "Colossenses", "cl", 4, "NT", ("Colossians",)),
    BookInfo(52, "1 Tessalonicenses", "1ts", 5, "NT", ("1 Thessalonians",)),
    BookInfo(53, "2 Tessalonicenses", "2ts", 3, "NT", ("2 Thessalonians",)),
    BookInfo(54, "1 Timóteo", "1tm", 6, "NT", ("1 Timothy", "1 Timoteo")),
    BookInfo(55, "2 Timóteo", "2tm", 4, "NT", ("2 Timothy", "2 Timoteo")),
    BookInfo(56, "Tito", "tt", 3, "NT", ("Titus",)),
    BookInfo(57, "Filemom", "fm", 1, "NT", ("Philemon", "Filemon")),
    BookInfo(58, "Hebreus", "hb", 13, "NT", ("Hebrews",)),
    BookInfo(59, "Tiago", "tg", 5, "NT", ("James",)),
    BookInfo(60, "1 Pedro", "1pe", 5, "NT", ("1 Peter",)),
    BookInfo(61, "2 Pedro", "2pe", 3, "NT", ("2 Peter",)),
    BookInfo(62, "1 João", "1jo", 5, "NT", ("1 John", "1 Joao")),
    BookInfo(63, "2 João", "2jo", 1, "NT", ("2 John", "2 Joao")),
    BookInfo(64, "3 João", "3jo", 1, "NT", ("3 John", "3 Joao")),
    BookInfo(65, "Judas", "jd", 1, "NT", ("Jude",)),
    BookInfo(66, "Apocalipse", "ap", 22, "NT", ("Revelation",)),
)

# Testament sections ("ot", "nt") are derived from BookInfo.testament.
SECTION_BOOKS: dict[str, tuple[str, ...]] = {
    "pentateuch": ("gn", "ex", "lv", "nm", "dt"),
    "gospels": ("mt", "mc", "lc", "jo"),
}
SECTIONS = ("pentateuch", "gospels", "ot", "nt")


def normalize_book_key(value: str) -> str:
    return value.strip().lower().replace(".", "").replace(" ", "")


def chapter_key(abbrev: str, chapter: int) -> str:
    """Canonical chapter key, e.g. ``gn-1``."""
    return f"{abbrev}-{chapter}"


class BibleReference:
    """Immutable lookup table over a tuple of books in canonical order."""

    def __init__(self, books: Iterable[BookInfo] = BOOKS) -> None:
        self._books = tuple(books)
        self._by_abbrev = {book.abbrev: book for book in self._books}
        self._by_normalized: dict[str, BookInfo] = {}
        for book in self._books:
            for value in (book.abbrev, book.name, *book.aliases):
                key = normalize_book_key(value)
                existing = self._by_normalized.get(key)
                if existing is None:
                    self._by_normalized[key] = book
                elif existing is not book:
                    logger.warning(
                        "Book key %r for %s already maps to %s; keeping the first",
                        value,
                        book.name,
                        existing.name,
                    )

    @property
    def total_chapters(self) -> int:
        return sum(book.chapters for book in self._books)

    def find(self, value: str) -> BookInfo | None:
        return self._by_normalized.get(normalize_book_key(value))

    def by_abbrev(self, abbrev: str) -> BookInfo | None:
        return self._by_abbrev.get(abbrev.strip().lower())

    def book_name(self, abbrev: str) -> str | None:
        book = self.by_abbrev(abbrev)
        return book.name if book else None

    def book_list(self) -> list[BookInfo]:
        return list(self._books)

    def sequential_keys(self) -> tuple[str, ...]:
        return tuple(
            chapter_key(book.abbrev, chapter)
            for book in self._books
            for chapter in range(1, book.chapters + 1)
        )

    def section_books(self, section_id: str) -> list[BookInfo]:
        section = section_id.strip().lower()
        if section in ("ot", "nt"):
            return [book for book in self._books if book.testament == section.upper()]
        if section not in SECTION_BOOKS:
            logger.warning("Unknown section %r", section_id)
            return []
        books = []
        for abbrev in SECTION_BOOKS[section]:
            book = self.by_abbrev(abbrev)
            if book is not None:
                books.append(book)
        return books

    def chapters_for_book(self, abbrev: str) -> list[str]:
        book = self.by_abbrev(abbrev)
        if book is None:
            return []
        return [chapter_key(book.abbrev, chapter) for chapter in range(1, book.chapters + 1)]

    def chapters_for_section(self, section_id: str) -> list[str]:
        return [
            key
            for book in self.section_books(section_id)
            for key in self.chapters_for_book(book.abbrev)
        ]

    def completed_book(self, abbrev: str, completed: Collection[str] | None) -> bool:
        """True when every chapter of the book is in ``completed``; False for unknown books."""
        chapters = self.chapters_for_book(abbrev)
        return bool(completed) and bool(chapters) and all(key in completed for key in chapters)

    def completed_section(self, section_id: str, completed: Collection[str] | None) -> bool:
        chapters = self.chapters_for_section(section_id)
        return bool(completed) and bool(chapters) and all(key in completed for key in chapters)


@lru_cache(maxsize=1)
def default_reference() -> BibleReference:
    return BibleReference(BOOKS)


TOTAL_CHAPTERS = sum(book.chapters for book in BOOKS)
