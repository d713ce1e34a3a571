"""Input validation for resolution queries."""

from __future__ import annotations

import re

from exceptions import ValidationError

MIN_QUERY_LENGTH = 4
MAX_QUERY_LENGTH = 20

_DIGITS_ONLY = re.compile(r"[0-9]+")
_INVALID_CHARS = re.compile(r"[^A-Za-z0-9\-\s]")


def validate_query(query: object) -> str:
    """Return the trimmed query or raise ValidationError."""
    if not query or not isinstance(query, str):
        raise ValidationError("Query is required and must be a string")

    trimmed = query.strip()

    if len(trimmed) < MIN_QUERY_LENGTH:
        raise ValidationError(
            f"Query too short (minimum {MIN_QUERY_LENGTH} characters)",
            detail={"length": len(trimmed)},
        )

    if len(trimmed) > MAX_QUERY_LENGTH:
        raise ValidationError(
            f"Query too long (maximum {MAX_QUERY_LENGTH} characters)",
            detail={"length": len(trimmed)},
        )

    # Bare numbers this short are OCR noise
    if _DIGITS_ONLY.fullmatch(trimmed) and len(trimmed) < 6:
        raise ValidationError("Query appears to be invalid (too few characters)")

    if _INVALID_CHARS.search(trimmed):
        raise ValidationError("Query contains invalid characters")

    return trimmed
