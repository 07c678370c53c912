"""
repositories/liked_review_repo.py
----------------------------------
Data access layer for review likes.
"""

import psycopg2
from psycopg2 import errors

from db.connection import dict_cursor, transaction
from models.review import LikedReview
from utils.errors import NotFoundError, StorageError, ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)


class LikedReviewRepository:
    """Repository for operations on the liked_reviews table."""

    def insert_liked_review(self, user_id: str, review_id: str) -> LikedReview:
        """
        Record that a user liked a review.

        Raises:
            ValidationError: If the user already liked it.
        """
        sql = """
            INSERT INTO liked_reviews (user_id, review_id)
            VALUES (%s, %s)
            RETURNING *;
        """
        try:
            with transaction() as conn, dict_cursor(conn) as cur:
                cur.execute(sql, (user_id, review_id))
                row = cur.fetchone()
        except errors.UniqueViolation as e:
            raise ValidationError.single("reviewId", "Review is already liked.") from e
        except psycopg2.Error as e:
            logger.error(f"Failed to insert like of review {review_id} by {user_id}: {e}")
            raise StorageError("Database error while inserting liked review.") from e
        return self._row_to_liked_review(row)

    def get_liked_reviews(self, user_id: str) -> list[LikedReview]:
        """All reviews a user has liked, newest like first."""
        sql = """
            SELECT *
            FROM liked_reviews
            WHERE user_id = %s
            ORDER BY liked_at DESC;
        """
        try:
            with transaction() as conn, dict_cursor(conn) as cur:
                cur.execute(sql, (user_id,))
                return [self._row_to_liked_review(r) for r in cur.fetchall()]
        except psycopg2.Error as e:
            logger.error(f"Failed to get liked reviews of user {user_id}: {e}")
            raise StorageError("Database error while getting liked reviews.") from e

    def is_liked(self, user_id: str, review_id: str) -> bool:
        sql = """
            SELECT 1
            FROM liked_reviews
            WHERE user_id = %s AND review_id = %s
            LIMIT 1;
        """
        try:
            with transaction() as conn, conn.cursor() as cur:
                cur.execute(sql, (user_id, review_id))
                return cur.fetchone() is not None
        except psycopg2.Error as e:
            logger.error(f"Failed to check like of review {review_id} by {user_id}: {e}")
            raise StorageError("Database error while checking liked review.") from e

    def remove_liked_review(self, user_id: str, review_id: str) -> None:
        """
        Raises:
            NotFoundError: If the user had not liked the review.
        """
        sql = "DELETE FROM liked_reviews WHERE user_id = %s AND review_id = %s;"
        try:
            with transaction() as conn, conn.cursor() as cur:
                cur.execute(sql, (user_id, review_id))
                deleted = cur.rowcount > 0
        except psycopg2.Error as e:
            logger.error(f"Failed to remove like of review {review_id} by {user_id}: {e}")
            raise StorageError("Database error while removing liked review.") from e
        if not deleted:
            raise NotFoundError("No rows affected while removing liked review.", 500)

    def remove_review_likes(self, review_id: str) -> int:
        """
        Remove every like of a review.

        Returns:
            Number of likes removed.
        """
        sql = "DELETE FROM liked_reviews WHERE review_id = %s;"
        try:
            with transaction() as conn, conn.cursor() as cur:
                cur.execute(sql, (review_id,))
                removed = cur.rowcount
        except psycopg2.Error as e:
            logger.error(f"Failed to remove likes of review {review_id}: {e}")
            raise StorageError("Database error while removing review likes.") from e
        if removed:
            logger.info(f"Removed {removed} like(s) from review #{review_id}")
        return removed

    @staticmethod
    def _row_to_liked_review(row: dict) -> LikedReview:
        return LikedReview(
            user_id=str(row["user_id"]),
            review_id=str(row["review_id"]),
            liked_at=row.get("liked_at"),
        )
