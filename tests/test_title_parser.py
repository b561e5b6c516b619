"""Tests for extracting class codes and dates from video titles."""
from datetime import date

from schedule_engine.classes import DEFAULT_CLASSES, class_index
from schedule_engine.title_parser import (
    parse_class_code,
    parse_lecture_date,
    parse_title,
    title_mentions_class,
)


def test_compact_and_spaced_tokens_map_to_same_code() -> None:
    """Test that "AVC185" and "AVC 185" both resolve to avc185."""
    assert parse_class_code("AVC185 8/25/2025") == "avc185"
    assert parse_class_code("AVC 185 8/25/2025") == "avc185"


def test_class_match_is_case_insensitive() -> None:
    """Test that lowercase titles still match."""
    assert parse_class_code("avc 240 lighting 9/3/2025") == "avc240"


def test_first_class_in_table_order_wins() -> None:
    """Test that a title naming two classes resolves to the earlier table entry."""
    assert parse_class_code("AVC285 review for AVC200 8/25/2025") == "avc200"


def test_unknown_class_is_none() -> None:
    """Test that titles without a known class token yield no class."""
    assert parse_class_code("Office hours 8/25/2025") is None


def test_date_uses_us_ordering() -> None:
    """Test that dates are read month/day/year."""
    assert parse_lecture_date("AVC185 8/12/2025") == date(2025, 8, 12)
    assert parse_lecture_date("AVC185 12/1/2025 part 2") == date(2025, 12, 1)


def test_first_date_wins() -> None:
    """Test that only the first date in the title is used."""
    assert parse_lecture_date("AVC185 9/1/2025 (makeup for 8/25/2025)") == date(2025, 9, 1)


def test_missing_or_impossible_date_is_none() -> None:
    """Test that titles without a real date yield no date."""
    assert parse_lecture_date("AVC185 lecture") is None
    assert parse_lecture_date("AVC185 8/25/25") is None
    assert parse_lecture_date("AVC185 2/30/2025") is None


def test_parse_title_reports_fields_independently() -> None:
    """Test that a partial parse keeps the part that did match."""
    parsed = parse_title("AVC200 welcome stream")
    assert parsed.class_code == "avc200"
    assert parsed.lecture_date is None
    assert not parsed.complete

    parsed = parse_title("Stream 8/27/2025")
    assert parsed.class_code is None
    assert parsed.lecture_date == date(2025, 8, 27)
    assert not parsed.complete


def test_parse_title_complete() -> None:
    """Test that a well-formed title yields both fields."""
    parsed = parse_title("AVC 285 Async Session 8/28/2025", DEFAULT_CLASSES)
    assert parsed.class_code == "avc285"
    assert parsed.lecture_date == date(2025, 8, 28)
    assert parsed.complete


def test_title_mentions_class_checks_literal_tokens() -> None:
    """Test the literal token check used for cross-validation."""
    classes = class_index()
    assert title_mentions_class("avc 240 8/25/2025", classes["avc240"])
    assert not title_mentions_class("AVC200 8/25/2025", classes["avc240"])
