"""
Tests for the normalization primitives: strings, lengths and ISO 8601 dates.
"""

import pytest

from events_api.core.validation import (
    ABSENT,
    TYPE_ERROR,
    MAX_DESCRIPTION,
    MAX_LOCATION,
    MAX_TITLE,
    is_valid_datetime,
    normalize_string,
    parse_datetime,
    validate_max_len,
)


def test_normalize_absent():
    assert normalize_string() is ABSENT
    assert normalize_string(ABSENT) is ABSENT


def test_normalize_null():
    assert normalize_string(None) is None


@pytest.mark.parametrize("value", [42, 3.5, True, ["x"], {"x": 1}])
def test_normalize_non_string_is_type_error(value):
    assert normalize_string(value) is TYPE_ERROR


def test_normalize_trims_whitespace():
    assert normalize_string("  x  ") == "x"
    assert normalize_string("\t\nLyon \r\n") == "Lyon"


def test_normalize_keeps_empty_string():
    """Emptiness is the caller's decision, not normalization's."""
    assert normalize_string("   ") == ""


def test_normalize_does_not_check_length():
    long_value = "a" * (MAX_DESCRIPTION * 2)
    assert normalize_string(long_value) == long_value


def test_normalize_is_pure():
    assert normalize_string(" x ") == normalize_string(" x ")
    assert normalize_string(42) is normalize_string(42)


def test_max_len_boundary():
    assert validate_max_len("a" * MAX_TITLE, MAX_TITLE) is True
    assert validate_max_len("a" * (MAX_TITLE + 1), MAX_TITLE) is False


def test_max_len_for_optional_fields():
    assert validate_max_len("a" * MAX_LOCATION, MAX_LOCATION)
    assert validate_max_len("a" * MAX_DESCRIPTION, MAX_DESCRIPTION)
    assert not validate_max_len("a" * (MAX_DESCRIPTION + 1), MAX_DESCRIPTION)


def test_max_len_counts_code_points():
    assert validate_max_len("é" * 200, 200)
    assert validate_max_len("🎉" * 200, 200)
    assert not validate_max_len("🎉" * 201, 200)


@pytest.mark.parametrize(
    "value",
    [
        "2026-01-27",
        "2026-01-27T10:00",
        "2026-01-27T10:00:00",
        "2026-01-27T10:00:00Z",
        "2026-01-27 10:00:00",
        "2026-01-27T10:00:00.5Z",
        "2026-01-27T10:00:00.123+02:00",
        "2026-01-27T23:59:59-05:30",
        "2024-02-29",
    ],
)
def test_accepts_iso_8601(value):
    assert is_valid_datetime(value) is True


@pytest.mark.parametrize(
    "value",
    [
        "27/01/2026",
        "2026/01/27",
        "20260127",
        "2026-1-27",
        "2026-01-27T10",
        "2026-01-27T10:00:00.1234Z",
        "2026-01-27T10:00.5",
        "2026-01-27Z",
        "2026-01-27T10:00:00+0200",
        "2026-01-27\n",
        "",
    ],
)
def test_rejects_foreign_syntax(value):
    assert is_valid_datetime(value) is False


@pytest.mark.parametrize(
    "value",
    [
        "2026-13-40",
        "2026-13-01",
        "2026-00-10",
        "2026-01-32",
        "2026-02-30",
        "2025-02-29",
        "2026-01-27T24:00",
        "2026-01-27T10:60",
        "2026-01-27T10:00:61",
        "2026-01-27T10:00:00+24:00",
        "2026-01-27T10:00:00+02:75",
        "0000-01-01",
    ],
)
def test_rejects_impossible_dates(value):
    """Matches the grammar but is not a real point in time."""
    assert is_valid_datetime(value) is False


def test_parse_datetime_offset_and_fraction():
    parsed = parse_datetime("2026-01-27T10:00:00.25+02:00")
    assert parsed is not None
    assert parsed.microsecond == 250000
    assert parsed.utcoffset().total_seconds() == 7200


def test_parse_date_only_is_naive_midnight():
    parsed = parse_datetime("2026-01-27")
    assert (parsed.hour, parsed.minute, parsed.tzinfo) == (0, 0, None)
