"""
models/composition.py
---------------------
Domain model for compositions (works).
"""

from dataclasses import asdict, dataclass
from typing import Optional


@dataclass
class Composition:
    """
    Represents a single work by a composer.

    Attributes:
        composition_id: Database primary key.
        composer_id: The owning composer.
        title: Title of the work.
        subtitle: Optional subtitle (catalogue number, nickname...).
        genre: Optional genre (Orchestral, Chamber, Keyboard...).
        average_review: Mean rating over the reviews of this work.
        total_reviews: Number of reviews of this work.
    """
    composition_id: str
    composer_id: str
    title: str
    subtitle: Optional[str] = None
    genre: Optional[str] = None
    average_review: float = 0.0
    total_reviews: int = 0

    def to_dict(self) -> dict:
        return asdict(self)
