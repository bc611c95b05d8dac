from __future__ import annotations

import logging

from reading_plan.constants import (
    BOOKS,
    SECTION_BOOKS,
    TOTAL_CHAPTERS,
    BibleReference,
    BookInfo,
    default_reference,
)


def test_canon_has_66_books_and_1189_chapters():
    assert len(BOOKS) == 66
    assert TOTAL_CHAPTERS == 1189
    assert default_reference().total_chapters == 1189


def test_abbreviations_are_unique():
    abbrevs = [book.abbrev for book in BOOKS]
    assert len(set(abbrevs)) == len(abbrevs)


def test_find_accepts_names_aliases_and_abbreviations():
    reference = default_reference()
    assert reference.find("Gênesis").abbrev == "gn"
    assert reference.find("genesis").abbrev == "gn"
    assert reference.find("GN").abbrev == "gn"
    assert reference.find("1 Samuel").abbrev == "1sm"
    assert reference.find("1samuel").abbrev == "1sm"
    assert reference.find("Song of Solomon").abbrev == "ct"
    assert reference.find("Job").abbrev == "jó"
    assert reference.find("jo").name == "João"
    assert reference.find("Livro") is None


def test_sequential_keys_follow_canonical_order():
    keys = default_reference().sequential_keys()
    assert keys[:3] == ("gn-1", "gn-2", "gn-3")
    assert keys[-1] == "ap-22"
    assert keys.index("mt-1") == 929


def test_book_name_lookup():
    reference = default_reference()
    assert reference.book_name("ap") == "Apocalipse"
    assert reference.book_name("zz") is None


def test_colliding_keys_keep_first_book(caplog):
    books = (
        BookInfo(1, "Alpha", "al", 2, "OT", ("shared",)),
        BookInfo(2, "Beta", "be", 3, "OT", ("shared",)),
    )
    with caplog.at_level(logging.WARNING, logger="reading_plan.constants"):
        reference = BibleReference(books)
    assert reference.find("shared").name == "Alpha"
    assert "already maps to Alpha" in caplog.text
    assert reference.sequential_keys() == ("al-1", "al-2", "be-1", "be-2", "be-3")



def test_chapters_for_book_and_section():
    reference = default_reference()
    assert reference.chapters_for_book("rt") == ["rt-1", "rt-2", "rt-3", "rt-4"]
    assert reference.chapters_for_book("Rt") == ["rt-1", "rt-2", "rt-3", "rt-4"]
    assert reference.chapters_for_book("zz") == []
    assert len(reference.chapters_for_section("pentateuch")) == 187
    assert len(reference.chapters_for_section("gospels")) == 89
    assert len(reference.chapters_for_section("OT")) == 929
    assert len(reference.chapters_for_section("nt")) == 260
    assert reference.chapters_for_section("gospels")[0] == "mt-1"
    assert reference.chapters_for_section("gospels")[-1] == "jo-21"


def test_unknown_section_is_empty(caplog):
    with caplog.at_level(logging.WARNING, logger="reading_plan.constants"):
        assert default_reference().chapters_for_section("wisdom") == []
    assert "Unknown section" in caplog.text


def test_completed_book_and_section():
    reference = default_reference()
    ruth = set(reference.chapters_for_book("rt"))
    assert reference.completed_book("rt", ruth)
    assert not reference.completed_book("rt", ruth - {"rt-4"})
    assert not reference.completed_book("rt", None)
    assert not reference.completed_book("zz", ruth)

    gospels = set(reference.chapters_for_section("gospels"))
    assert reference.completed_section("gospels", gospels | ruth)
    assert not reference.completed_section("gospels", gospels - {"lc-24"})
    assert not reference.completed_section("nt", gospels)
    assert not reference.completed_section("wisdom", gospels)
    assert all(reference.completed_book(abbrev, gospels) for abbrev in SECTION_BOOKS["gospels"])
