"""
models/composer.py
------------------
Domain model for composers.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from models import iso


@dataclass
class Composer:
    """
    Represents a composer.

    Attributes:
        composer_id: Database primary key.
        name: Full name.
        date_of_birth: Optional birth date.
        date_of_death: Optional death date (None while living).
        image_url: Optional portrait location.
        average_review: Mean rating over all reviews of this composer's works.
        total_reviews: Number of reviews of this composer's works.
    """
    composer_id: str
    name: str
    date_of_birth: Optional[date] = None
    date_of_death: Optional[date] = None
    image_url: Optional[str] = None
    average_review: float = 0.0
    total_reviews: int = 0

    def to_dict(self) -> dict:
        return {
            "composer_id": self.composer_id,
            "name": self.name,
            "date_of_birth": iso(self.date_of_birth),
            "date_of_death": iso(self.date_of_death),
            "image_url": self.image_url,
            "average_review": self.average_review,
            "total_reviews": self.total_reviews,
        }
