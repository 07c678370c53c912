"""
validators/review_validators.py
--------------------------------
Request bodies of the /api/review endpoints.
"""

from typing import Optional

from validators import fields
from validators.fields import ErrorCollector


def validate_make_review(body: dict) -> tuple[str, int, Optional[str]]:
    """
    Returns:
        (composition_id, rating, comment)

    Raises:
        ValidationError: With every failing field.
    """
    errors = ErrorCollector()
    composition_id = fields.required_string(
        body.get("compositionId"), "compositionId", "Composition ID", errors
    )
    rating = fields.rating(body.get("rating"), errors)
    comment = fields.comment(body.get("comment"), errors)
    errors.raise_if_any()
    return composition_id, rating, comment


def validate_change_review(body: dict) -> tuple[str, int, Optional[str]]:
    """
    Returns:
        (review_id, rating, comment)
    """
    errors = ErrorCollector()
    review_id = fields.required_string(
        body.get("reviewId"), "reviewId", "Review ID", errors
    )
    rating = fields.rating(body.get("rating"), errors)
    comment = fields.comment(body.get("comment"), errors)
    errors.raise_if_any()
    return review_id, rating, comment


def validate_review_id(body: dict) -> str:
    """Body of delete-review, like and unlike: just a review ID."""
    errors = ErrorCollector()
    review_id = fields.required_string(
        body.get("reviewId"), "reviewId", "Review ID", errors
    )
    errors.raise_if_any()
    return review_id
