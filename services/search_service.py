"""
services/search_service.py
---------------------------
Read-only lookups of composers, compositions and public user profiles.
"""

from typing import Optional

from models.identifiers import ByUsername
from repositories.composer_repo import ComposerRepository
from repositories.composition_repo import CompositionRepository
from repositories.review_repo import ReviewRepository
from repositories.user_repo import UserRepository
from utils.errors import ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)


class SearchService:
    """Builds the response bodies of the search endpoints."""

    def __init__(
        self,
        composer_repo: Optional[ComposerRepository] = None,
        composition_repo: Optional[CompositionRepository] = None,
        review_repo: Optional[ReviewRepository] = None,
        user_repo: Optional[UserRepository] = None,
    ):
        self.composer_repo = composer_repo or ComposerRepository()
        self.composition_repo = composition_repo or CompositionRepository()
        self.review_repo = review_repo or ReviewRepository()
        self.user_repo = user_repo or UserRepository()

    def search_composers(self, term: str) -> dict:
        composers = self.composer_repo.get_composers(term)
        logger.debug(f"Composer search '{term}' matched {len(composers)}")
        return {"composers": [c.to_dict() for c in composers]}

    def search_compositions(self, term: str) -> dict:
        compositions = self.composition_repo.get_compositions(term)
        logger.debug(f"Composition search '{term}' matched {len(compositions)}")
        return {"compositions": [c.to_dict() for c in compositions]}

    def get_composer(self, composer_id: str) -> dict:
        """
        A composer and their works.

        Raises:
            ValidationError: If the composer does not exist.
        """
        composer = self.composer_repo.get_composer(composer_id)
        if composer is None:
            raise ValidationError.single("composerId", "Composer does not exist.")
        works = self.composition_repo.get_composer_works(composer_id)
        return {
            "composer": composer.to_dict(),
            "works": [w.to_dict() for w in works],
        }

    def get_composition(self, composition_id: str) -> dict:
        """
        A composition and its reviews, most liked first.

        Raises:
            ValidationError: If the composition does not exist.
        """
        composition = self.composition_repo.get_composition(composition_id)
        if composition is None:
            raise ValidationError.single("compositionId", "Composition does not exist.")
        reviews = self.review_repo.get_composition_reviews(composition_id)
        return {
            "composition": composition.to_dict(),
            "reviews": [r.to_dict() for r in reviews],
        }

    def get_user(self, username: str) -> dict:
        """
        Public profile of a user and the reviews they wrote.

        Raises:
            ValidationError: If no user has that username.
        """
        user = self.user_repo.get_user(ByUsername(username))
        if user is None:
            raise ValidationError.single("username", "User does not exist.")
        reviews = self.review_repo.get_user_reviews(user.user_id)
        return {
            "user": user.to_public_dict(),
            "reviews": [r.to_dict() for r in reviews],
        }
