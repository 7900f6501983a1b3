"""Validation of path and query parameters."""

from __future__ import annotations

import re

from beartype import beartype

from market_sync.errors import InputValidationError

MAX_MARKET_ID_LENGTH = 64
MAX_TITLE_LENGTH = 200

_MARKET_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")
_ALNUM_PATTERN = re.compile(r"[A-Za-z0-9]")


@beartype
def parse_market_id(raw: str) -> str:
    """
    Validate a market ID taken from the request path.

    Args:
        raw: Path segment (e.g., "20396617" or "1.234567890")

    Returns:
        The market ID, stripped of surrounding whitespace

    Raises:
        InputValidationError: If the ID is empty, too long or has unexpected characters
    """
    market_id = raw.strip()
    if not market_id:
        raise InputValidationError("marketId must be a non-empty string")

    if len(market_id) > MAX_MARKET_ID_LENGTH:
        raise InputValidationError(f"marketId must be at most {MAX_MARKET_ID_LENGTH} characters")

    if not _MARKET_ID_PATTERN.match(market_id):
        raise InputValidationError(f"marketId contains invalid characters: {market_id!r}")

    # "." and ".." would be resolved as path segments by the upstream URL
    if not _ALNUM_PATTERN.search(market_id):
        raise InputValidationError(f"marketId must contain a letter or digit: {market_id!r}")

    return market_id


@beartype
def parse_title_query(raw: str | None) -> str | None:
    """
    Normalize the optional title search parameter.

    Args:
        raw: Value of the "title" query parameter, if given

    Returns:
        The stripped title, or None when no filter should be applied

    Raises:
        InputValidationError: If the title is too long
    """
    if raw is None:
        return None

    title = raw.strip()
    if not title:
        return None

    if len(title) > MAX_TITLE_LENGTH:
        raise InputValidationError(f"title must be at most {MAX_TITLE_LENGTH} characters")

    return title
