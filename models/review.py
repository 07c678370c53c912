"""
models/review.py
----------------
Domain models for reviews and review likes.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from models import iso


@dataclass
class Review:
    """
    Represents one user's review of one composition.

    Attributes:
        review_id: Database primary key.
        composition_id: The reviewed composition.
        user_id: The author.
        rating: Integer rating between 1 and 5.
        comment: Optional free-text comment.
        num_liked: Number of users who liked this review.
        created_at: Timestamp when the review was written.
        last_modified_at: Timestamp of the last change.
    """
    review_id: str
    composition_id: str
    user_id: str
    rating: int
    comment: Optional[str] = None
    num_liked: int = 0
    created_at: Optional[datetime] = None
    last_modified_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "review_id": self.review_id,
            "composition_id": self.composition_id,
            "user_id": self.user_id,
            "rating": self.rating,
            "comment": self.comment,
            "num_liked": self.num_liked,
            "created_at": iso(self.created_at),
            "last_modified_at": iso(self.last_modified_at),
        }


@dataclass
class LikedReview:
    """A (user, review) like."""
    user_id: str
    review_id: str
    liked_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "review_id": self.review_id,
            "liked_at": iso(self.liked_at),
        }
