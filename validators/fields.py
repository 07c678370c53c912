"""
validators/fields.py
--------------------
Field checks shared by the request validators.

Each check takes the raw value and an ``ErrorCollector``; it records a
failure (at most one per field) and returns the cleaned value, or None if
the field failed.
"""

import re
from typing import Any, Optional

from utils.errors import ValidationError
from utils.profanities import contains_profanity

COMMENT_MIN_LENGTH = 10
COMMENT_MAX_LENGTH = 1000
SEARCH_TERM_MAX_LENGTH = 50

_COMMENT_PATTERN = re.compile(r"^[A-Za-z0-9\s.,!?'\"\-():;]*$")


class ErrorCollector:
    """Accumulates field errors for one request."""

    def __init__(self):
        self.details: list[dict] = []

    def add(self, field: str, message: str) -> None:
        self.details.append({"field": field, "message": message})

    def raise_if_any(self) -> None:
        """
        Raises:
            ValidationError: Carrying every recorded field error.
        """
        if self.details:
            raise ValidationError(self.details[0]["message"], list(self.details))


def required_string(
    value: Any, field: str, label: str, errors: ErrorCollector
) -> Optional[str]:
    """A present, non-empty string. Surrounding whitespace is stripped."""
    if value is None:
        errors.add(field, f"{label} must exist.")
        return None
    if not isinstance(value, str):
        errors.add(field, f"{label} must be a string.")
        return None
    value = value.strip()
    if not value:
        errors.add(field, f"{label} must exist.")
        return None
    return value


def rating(value: Any, errors: ErrorCollector) -> Optional[int]:
    """An integer from 1 to 5. Booleans and floats are rejected."""
    if value is None:
        errors.add("rating", "Rating must exist.")
        return None
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 5:
        errors.add("rating", "Rating must be an integer between 1 and 5.")
        return None
    return value


def comment(value: Any, errors: ErrorCollector) -> Optional[str]:
    """
    Optional review text. An absent comment is None; a present one is
    trimmed and must be 10-1000 characters of plain punctuation and
    alphanumerics, free of profanity.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        errors.add("comment", "Comment must be a string.")
        return None
    value = value.strip()
    if not COMMENT_MIN_LENGTH <= len(value) <= COMMENT_MAX_LENGTH:
        errors.add(
            "comment",
            f"Comment must be between {COMMENT_MIN_LENGTH} and "
            f"{COMMENT_MAX_LENGTH} characters.",
        )
        return None
    if not _COMMENT_PATTERN.match(value):
        errors.add("comment", "Comment contains invalid characters.")
        return None
    if contains_profanity(value):
        errors.add("comment", "Comment must not contain profanity.")
        return None
    return value


def search_term(value: Any, errors: ErrorCollector) -> Optional[str]:
    value = value.strip() if isinstance(value, str) else ""
    if not 1 <= len(value) <= SEARCH_TERM_MAX_LENGTH:
        errors.add(
            "term",
            f"Search term must be between 1 and {SEARCH_TERM_MAX_LENGTH} characters.",
        )
        return None
    return value
