"""
repositories/review_repo.py
----------------------------
Data access layer for reviews.
All SQL queries related to the `reviews` table live here.
"""

from typing import Optional

import psycopg2
from psycopg2 import errors

from db.connection import dict_cursor, transaction
from models.identifiers import is_valid_id
from models.review import Review
from utils.errors import ConflictError, NotFoundError, StorageError
from utils.logger import get_logger

logger = get_logger(__name__)


class ReviewRepository:
    """Repository for CRUD operations on the reviews table."""

    # ── CREATE ────────────────────────────────────────────

    def insert_review(
        self,
        composition_id: str,
        user_id: str,
        rating: int,
        comment: Optional[str] = None,
    ) -> Review:
        """
        Insert a new review.

        Returns:
            The inserted Review with its ID and timestamps populated.
        """
        sql = """
            INSERT INTO reviews (composition_id, user_id, rating, comment)
            VALUES (%s, %s, %s, %s)
            RETURNING *;
        """
        row = self._fetch_one(
            sql,
            (composition_id, user_id, rating, comment),
            "inserting review",
            conflict_message="Review already exists on this composition.",
        )
        if row is None:
            raise NotFoundError("No rows affected while inserting review.", 500)
        review = self._row_to_review(row)
        logger.info(f"Added review #{review.review_id} by user {user_id}")
        return review

    # ── READ ──────────────────────────────────────────────

    def user_review_exists(self, user_id: str, composition_id: str) -> bool:
        """True if the user already reviewed the composition."""
        sql = """
            SELECT 1
            FROM reviews
            WHERE user_id = %s AND composition_id = %s
            LIMIT 1;
        """
        row = self._fetch_one(
            sql, (user_id, composition_id), "checking if user review exists"
        )
        return row is not None

    def get_review(self, review_id: str, for_update: bool = False) -> Optional[Review]:
        """
        Fetch a single review by ID.

        Args:
            review_id: Primary key.
            for_update: Lock the row until the surrounding transaction ends.

        Returns:
            A Review or None if not found.
        """
        if not is_valid_id(review_id):
            return None
        sql = "SELECT * FROM reviews WHERE review_id = %s"
        sql += " FOR UPDATE;" if for_update else ";"
        row = self._fetch_one(sql, (review_id,), "getting review")
        return self._row_to_review(row) if row else None

    def get_composition_reviews(self, composition_id: str) -> list[Review]:
        """All reviews of a composition, most liked first."""
        sql = """
            SELECT *
            FROM reviews
            WHERE composition_id = %s
            ORDER BY num_liked DESC, created_at DESC;
        """
        return self._fetch_all(sql, (composition_id,), "getting composition reviews")

    def get_user_reviews(self, user_id: str) -> list[Review]:
        """All reviews written by a user, newest first."""
        sql = """
            SELECT *
            FROM reviews
            WHERE user_id = %s
            ORDER BY created_at DESC;
        """
        return self._fetch_all(sql, (user_id,), "getting user reviews")

    # ── UPDATE ────────────────────────────────────────────

    def update_review(
        self, review_id: str, rating: int, comment: Optional[str] = None
    ) -> Review:
        """
        Overwrite a review's rating and comment.

        Raises:
            NotFoundError: If no review has that ID.
        """
        sql = """
            UPDATE reviews
            SET rating = %s, comment = %s, last_modified_at = NOW()
            WHERE review_id = %s
            RETURNING *;
        """
        row = self._fetch_one(sql, (rating, comment, review_id), "updating review")
        if row is None:
            raise NotFoundError("No rows affected while updating review.", 500)
        return self._row_to_review(row)

    def increment_likes(self, review_id: str) -> Review:
        sql = """
            UPDATE reviews
            SET num_liked = num_liked + 1
            WHERE review_id = %s
            RETURNING *;
        """
        row = self._fetch_one(sql, (review_id,), "incrementing review likes")
        if row is None:
            raise NotFoundError("No rows affected while incrementing review likes.", 500)
        return self._row_to_review(row)

    def decrement_likes(self, review_id: str) -> Review:
        sql = """
            UPDATE reviews
            SET num_liked = GREATEST(num_liked - 1, 0)
            WHERE review_id = %s
            RETURNING *;
        """
        row = self._fetch_one(sql, (review_id,), "decrementing review likes")
        if row is None:
            raise NotFoundError("No rows affected while decrementing review likes.", 500)
        return self._row_to_review(row)

    def reset_likes(self, review_id: str) -> Review:
        sql = """
            UPDATE reviews
            SET num_liked = 0
            WHERE review_id = %s
            RETURNING *;
        """
        row = self._fetch_one(sql, (review_id,), "resetting review likes")
        if row is None:
            raise NotFoundError("No rows affected while resetting review likes.", 500)
        return self._row_to_review(row)

    # ── DELETE ────────────────────────────────────────────

    def delete_review(self, review_id: str) -> Review:
        """
        Delete a review. Its likes go with it (ON DELETE CASCADE).

        Returns:
            The deleted Review.

        Raises:
            NotFoundError: If no review has that ID.
        """
        sql = "DELETE FROM reviews WHERE review_id = %s RETURNING *;"
        row = self._fetch_one(sql, (review_id,), "deleting review")
        if row is None:
            raise NotFoundError("No rows affected while deleting review.", 500)
        logger.info(f"Deleted review #{review_id}")
        return self._row_to_review(row)

    # ── HELPERS ───────────────────────────────────────────

    def _fetch_one(
        self,
        sql: str,
        params: tuple,
        action: str,
        conflict_message: Optional[str] = None,
    ) -> Optional[dict]:
        try:
            with transaction() as conn, dict_cursor(conn) as cur:
                cur.execute(sql, params)
                return cur.fetchone()
        except errors.UniqueViolation as e:
            if conflict_message is None:
                logger.error(f"Failed {action}: {e}")
                raise StorageError(f"Database error while {action}.") from e
            raise ConflictError(conflict_message) from e
        except psycopg2.Error as e:
            logger.error(f"Failed {action}: {e}")
            raise StorageError(f"Database error while {action}.") from e

    def _fetch_all(self, sql: str, params: tuple, action: str) -> list[Review]:
        try:
            with transaction() as conn, dict_cursor(conn) as cur:
                cur.execute(sql, params)
                return [self._row_to_review(r) for r in cur.fetchall()]
        except psycopg2.Error as e:
            logger.error(f"Failed {action}: {e}")
            raise StorageError(f"Database error while {action}.") from e

    @staticmethod
    def _row_to_review(row: dict) -> Review:
        """Convert a database row to a Review domain object."""
        return Review(
            review_id=str(row["review_id"]),
            composition_id=str(row["composition_id"]),
            user_id=str(row["user_id"]),
            rating=int(row["rating"]),
            comment=row.get("comment"),
            num_liked=int(row.get("num_liked") or 0),
            created_at=row.get("created_at"),
            last_modified_at=row.get("last_modified_at"),
        )
