from __future__ import annotations

import logging

import pytest

from reading_plan.constants import BOOKS
from reading_plan.parser import (
    CHAPTER_OUT_OF_RANGE,
    UNKNOWN_BOOK,
    UNPARSEABLE,
    format_reference,
    standardize,
)


@pytest.mark.parametrize(
    "raw, key",
    [
        ("Gênesis 1", "gn-1"),
        ("gn 50", "gn-50"),
        ("gn-3", "gn-3"),
        ("  Genesis   12 ", "gn-12"),
        ("1 Samuel 3", "1sm-3"),
        ("1sm-3", "1sm-3"),
        ("JOÃO 3", "jo-3"),
        ("Jó 42", "jó-42"),
        ("Job 1", "jó-1"),
        ("Song of Solomon 2", "ct-2"),
        ("Salmos 150", "sl-150"),
    ],
)
def test_standardize_valid_references(raw, key):
    result = standardize(raw)
    assert result.ok
    assert result.key == key
    assert result.raw == raw


@pytest.mark.parametrize(
    "raw, reason",
    [
        ("Gênesis 51", CHAPTER_OUT_OF_RANGE),
        ("Salmos 0", CHAPTER_OUT_OF_RANGE),
        ("gn-51", CHAPTER_OUT_OF_RANGE),
        ("Livro 2", UNKNOWN_BOOK),
        ("zz-1", UNKNOWN_BOOK),
        ("Gênesis um", UNKNOWN_BOOK),
        ("", UNPARSEABLE),
        ("   ", UNPARSEABLE),
    ],
)
def test_standardize_failures_are_tagged(raw, reason):
    result = standardize(raw)
    assert not result.ok
    assert result.key is None
    assert result.reason == reason


def test_book_without_chapter_defaults_to_chapter_one(caplog):
    with caplog.at_level(logging.WARNING, logger="reading_plan.parser"):
        result = standardize("Obadias")
    assert result.key == "ob-1"
    assert "assuming chapter 1" in caplog.text


def test_every_abbreviation_and_chapter_bound_standardizes():
    for book in BOOKS:
        assert standardize(f"{book.abbrev} 1").key == f"{book.abbrev}-1"
        last = book.chapters
        assert standardize(f"{book.abbrev} {last}").key == f"{book.abbrev}-{last}"
        assert standardize(f"{book.abbrev} {last + 1}").reason == CHAPTER_OUT_OF_RANGE


def test_format_reference():
    assert format_reference("gn-1") == "Gênesis 1"
    assert format_reference("1sm-3") == "1 Samuel 3"
    assert format_reference("zz-1") == "zz-1"
    assert format_reference("nonsense") == "nonsense"
