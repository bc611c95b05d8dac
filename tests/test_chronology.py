from __future__ import annotations

import logging

from reading_plan.chronology import (
    build_chronological_order,
    load_readings,
    parse_chapter_list,
    parse_reading,
)
from reading_plan.constants import default_reference


def test_parse_chapter_list_expands_ranges():
    book = default_reference().find("Gênesis")
    assert parse_chapter_list("1, 3, 5-7", book) == [1, 3, 5, 6, 7]


def test_parse_chapter_list_drops_out_of_range_chapters(caplog):
    book = default_reference().find("Rute")
    with caplog.at_level(logging.WARNING, logger="reading_plan.chronology"):
        assert parse_chapter_list("3-6", book) == [3, 4]
    assert "out of range" in caplog.text


def test_parse_chapter_list_rejects_bad_input():
    book = default_reference().find("Gênesis")
    assert parse_chapter_list("1:3", book) == []
    assert parse_chapter_list("5-2", book) == []
    assert parse_chapter_list("1-2-3, 4", book) == [4]


def test_parse_reading_handles_multiple_books_and_single_chapter_books():
    reference = default_reference()
    keys = parse_reading("2 Reis 1-2; Obadias; Salmos 82", reference)
    assert keys == ["2rs-1", "2rs-2", "ob-1", "sl-82"]


def test_parse_reading_skips_unknown_books_and_bare_multi_chapter_books(caplog):
    reference = default_reference()
    with caplog.at_level(logging.WARNING, logger="reading_plan.chronology"):
        keys = parse_reading("Livro 1; Gênesis; Rute 1", reference)
    assert keys == ["rt-1"]
    assert "Unknown book" in caplog.text
    assert "without chapters" in caplog.text


def test_build_order_appends_missing_chapters_and_drops_duplicates(caplog):
    reference = default_reference()
    with caplog.at_level(logging.WARNING, logger="reading_plan.chronology"):
        order = build_chronological_order(["Apocalipse 22; Gênesis 1", "Apocalipse 22"], reference)
    assert order[:3] == ("ap-22", "gn-1", "gn-2")
    assert len(order) == 1189
    assert len(set(order)) == 1189
    assert "missing 1187 chapters" in caplog.text


def test_shipped_plan_covers_every_chapter_once(caplog):
    reference = default_reference()
    with caplog.at_level(logging.WARNING, logger="reading_plan.chronology"):
        order = build_chronological_order(load_readings(), reference)
    assert [record for record in caplog.records if record.name == "reading_plan.chronology"] == []
    assert sorted(order) == sorted(reference.sequential_keys())
    assert order[0] == "gn-1"
    assert order[11] == "jó-1"
    assert order[-1] == "ap-22"


def test_shipped_plan_lists_no_chapter_twice():
    reference = default_reference()
    parsed = [key for reading in load_readings() for key in parse_reading(reading, reference)]
    assert len(parsed) == len(set(parsed)) == 1189
