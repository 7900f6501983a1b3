"""Tests for request parameter validators."""

from __future__ import annotations

import pytest

from market_sync.api.validators import MAX_TITLE_LENGTH, parse_market_id, parse_title_query
from market_sync.errors import InputValidationError


def test_parse_market_id_numeric() -> None:
    """Test parsing a plain numeric market ID."""
    assert parse_market_id("20396617") == "20396617"


def test_parse_market_id_dotted() -> None:
    """Test parsing a dotted market ID."""
    assert parse_market_id("1.234567890") == "1.234567890"


def test_parse_market_id_strips_whitespace() -> None:
    """Test surrounding whitespace is removed."""
    assert parse_market_id("  42  ") == "42"


def test_parse_market_id_empty_string() -> None:
    """Test parsing empty string raises InputValidationError."""
    with pytest.raises(InputValidationError, match="non-empty"):
        parse_market_id("   ")


def test_parse_market_id_invalid_characters() -> None:
    """Test IDs with path or query characters are rejected."""
    for raw in ("12/34", "12?x=1", "12 34", "$where"):
        with pytest.raises(InputValidationError, match="invalid characters"):
            parse_market_id(raw)


def test_parse_market_id_dots_only() -> None:
    """Test IDs made only of dots or separators are rejected."""
    for raw in (".", "..", "...", "-", "._-"):
        with pytest.raises(InputValidationError, match="letter or digit"):
            parse_market_id(raw)


def test_parse_market_id_too_long() -> None:
    """Test overly long IDs are rejected."""
    with pytest.raises(InputValidationError, match="at most"):
        parse_market_id("1" * 65)


def test_parse_title_query_none() -> None:
    """Test missing title means no filter."""
    assert parse_title_query(None) is None


def test_parse_title_query_blank() -> None:
    """Test blank title means no filter."""
    assert parse_title_query("   ") is None


def test_parse_title_query_strips() -> None:
    """Test title is stripped but otherwise kept as given."""
    assert parse_title_query("  Foo Bar ") == "Foo Bar"


def test_parse_title_query_too_long() -> None:
    """Test overly long titles are rejected."""
    with pytest.raises(InputValidationError, match="title must be at most"):
        parse_title_query("x" * (MAX_TITLE_LENGTH + 1))
