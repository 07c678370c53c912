"""
services/review_service.py
---------------------------
Business logic for the review lifecycle.

A review touches four tables: the review row itself and the rating
aggregates on its author, its composition and the composition's
composer. Each workflow below runs inside one transaction, so the
aggregates either move together with the review row or not at all.

Per review:
    NonExistent -> Active -> Changed (resets likes) ... -> Deleted
with an independent liked / not-liked state per user while Active.
"""

from contextlib import AbstractContextManager
from typing import Callable, Optional

from db.connection import transaction
from models.review import Review
from repositories.composer_repo import ComposerRepository
from repositories.composition_repo import CompositionRepository
from repositories.liked_review_repo import LikedReviewRepository
from repositories.review_repo import ReviewRepository
from repositories.user_repo import UserRepository
from utils.errors import ConflictError, ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)


class ReviewService:
    """Creates, changes, deletes, likes and unlikes reviews."""

    def __init__(
        self,
        review_repo: Optional[ReviewRepository] = None,
        liked_review_repo: Optional[LikedReviewRepository] = None,
        user_repo: Optional[UserRepository] = None,
        composition_repo: Optional[CompositionRepository] = None,
        composer_repo: Optional[ComposerRepository] = None,
        transaction_scope: Callable[[], AbstractContextManager] = transaction,
    ):
        self.review_repo = review_repo or ReviewRepository()
        self.liked_review_repo = liked_review_repo or LikedReviewRepository()
        self.user_repo = user_repo or UserRepository()
        self.composition_repo = composition_repo or CompositionRepository()
        self.composer_repo = composer_repo or ComposerRepository()
        self.transaction = transaction_scope

    # ── CREATE ────────────────────────────────────────────

    def make_review(
        self,
        user_id: str,
        composition_id: str,
        rating: int,
        comment: Optional[str] = None,
    ) -> Review:
        """
        Create a review and fold its rating into the user, composition
        and composer aggregates.

        Raises:
            ValidationError: If the composition does not exist.
            ConflictError: If the user already reviewed the composition.
            StorageError: If any step fails; nothing is kept.
        """
        with self.transaction():
            if not self.composition_repo.exists(composition_id):
                raise ValidationError.single("compositionId", "Composition does not exist.")
            if self.review_repo.user_review_exists(user_id, composition_id):
                raise ConflictError("Review already exists on this composition.")

            review = self.review_repo.insert_review(composition_id, user_id, rating, comment)
            self.user_repo.increment_review_data(rating, user_id)
            composition = self.composition_repo.increment_review_data(rating, composition_id)
            self.composer_repo.increment_review_data(rating, composition.composer_id)

        logger.info(
            f"User {user_id} reviewed composition {composition_id} with rating {rating}"
        )
        return review

    # ── UPDATE ────────────────────────────────────────────

    def change_review(
        self,
        user_id: str,
        review_id: str,
        rating: int,
        comment: Optional[str] = None,
    ) -> Review:
        """
        Replace a review's rating and comment. A changed review loses
        all of its likes.

        The old rating is read (under a row lock) before the review row is
        overwritten, then swapped for the new one in every aggregate.
        """
        with self.transaction():
            review = self._owned_review(user_id, review_id)
            old_rating = review.rating

            self.liked_review_repo.remove_review_likes(review_id)
            self.review_repo.reset_likes(review_id)
            updated = self.review_repo.update_review(review_id, rating, comment)

            self.user_repo.update_review_data(user_id, old_rating, rating)
            composition = self.composition_repo.update_review_data(
                review.composition_id, old_rating, rating
            )
            self.composer_repo.update_review_data(composition.composer_id, old_rating, rating)

        logger.info(f"User {user_id} changed review #{review_id}: {old_rating} -> {rating}")
        return updated

    # ── DELETE ────────────────────────────────────────────

    def delete_review(self, user_id: str, review_id: str) -> Review:
        """
        Delete a review and take its rating back out of the user,
        composition and composer aggregates.
        """
        with self.transaction():
            review = self._owned_review(user_id, review_id)
            self.review_repo.delete_review(review_id)

            self.user_repo.remove_review_data(review.rating, user_id)
            composition = self.composition_repo.remove_review_data(
                review.rating, review.composition_id
            )
            self.composer_repo.remove_review_data(review.rating, composition.composer_id)

        logger.info(f"User {user_id} deleted review #{review_id}")
        return review

    # ── LIKES ─────────────────────────────────────────────

    def like_review(self, user_id: str, review_id: str) -> Review:
        """
        Raises:
            ValidationError: If the review does not exist or is already liked.
        """
        with self.transaction():
            self._existing_review(review_id)
            if self.liked_review_repo.is_liked(user_id, review_id):
                raise ValidationError.single("reviewId", "Review is already liked.")
            self.liked_review_repo.insert_liked_review(user_id, review_id)
            review = self.review_repo.increment_likes(review_id)

        logger.info(f"User {user_id} liked review #{review_id}")
        return review

    def unlike_review(self, user_id: str, review_id: str) -> Review:
        """
        Raises:
            ValidationError: If the review does not exist or is not liked.
        """
        with self.transaction():
            self._existing_review(review_id)
            if not self.liked_review_repo.is_liked(user_id, review_id):
                raise ValidationError.single("reviewId", "Review is not liked.")
            self.liked_review_repo.remove_liked_review(user_id, review_id)
            review = self.review_repo.decrement_likes(review_id)

        logger.info(f"User {user_id} unliked review #{review_id}")
        return review

    # ── HELPERS ───────────────────────────────────────────

    def _existing_review(self, review_id: str, for_update: bool = False) -> Review:
        review = self.review_repo.get_review(review_id, for_update=for_update)
        if review is None:
            raise ValidationError.single("reviewId", "Review does not exist.")
        return review

    def _owned_review(self, user_id: str, review_id: str) -> Review:
        review = self._existing_review(review_id, for_update=True)
        if review.user_id != user_id:
            raise ValidationError.single("reviewId", "Review does not match user ID.")
        return review
