"""
repositories/aggregate_repo.py
-------------------------------
Shared rating-aggregate updates for the users, compositions and
composers tables. Each of those rows stores a denormalized
``average_review`` / ``total_reviews`` pair that is maintained
incrementally as reviews come and go.

Every update is one UPDATE statement, so the count and the mean can
never be observed out of step with each other.
"""

from typing import Any, Callable

import psycopg2

from db.connection import dict_cursor, transaction
from models.identifiers import is_valid_id
from utils.errors import NotFoundError, StorageError
from utils.logger import get_logger

logger = get_logger(__name__)


def contains_pattern(term: str) -> str:
    """ILIKE pattern matching ``term`` literally anywhere, for use with ESCAPE '\\'."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class AggregateRepository:
    """
    Base class for repositories whose table carries rating aggregates.

    Subclasses set:
        table: Table name.
        key: Primary-key column.
        label: Human-readable entity name used in messages.
        row_mapper: Callable turning a dict row into a domain object.
    """

    table: str = ""
    key: str = ""
    label: str = ""
    row_mapper: Callable[[dict], Any]

    # ── EXISTENCE ─────────────────────────────────────────

    def exists(self, entity_id: str) -> bool:
        """True if a row with the given primary key exists."""
        if not is_valid_id(entity_id):
            return False
        sql = f"SELECT 1 FROM {self.table} WHERE {self.key} = %s LIMIT 1;"
        try:
            with transaction() as conn, conn.cursor() as cur:
                cur.execute(sql, (entity_id,))
                return cur.fetchone() is not None
        except psycopg2.Error as e:
            logger.error(f"Failed to check {self.label} {entity_id}: {e}")
            raise StorageError(
                f"Database error while checking if {self.label} exists."
            ) from e

    # ── AGGREGATES ────────────────────────────────────────

    def increment_review_data(self, rating: int, entity_id: str):
        """
        Add one rating to the aggregate.

        ``total = total + 1``, ``average = (average * total + rating) / (total + 1)``,
        both computed from the pre-update row.

        Returns:
            The updated domain object.

        Raises:
            NotFoundError: If no row was affected.
            StorageError: If the query fails.
        """
        sql = f"""
            UPDATE {self.table}
            SET
                total_reviews = total_reviews + 1,
                average_review = (average_review * total_reviews + %s) / (total_reviews + 1)
            WHERE {self.key} = %s
            RETURNING *;
        """
        return self._update_one(
            sql, (rating, entity_id), "incrementing", entity_id
        )

    def update_review_data(self, entity_id: str, old_rating: int, new_rating: int):
        """
        Swap one rating for another; ``total_reviews`` is unchanged.

        ``average = (average * total - old_rating + new_rating) / total``.
        """
        sql = f"""
            UPDATE {self.table}
            SET
                average_review = CASE
                    WHEN total_reviews = 0 THEN average_review
                    ELSE (average_review * total_reviews - %s + %s) / total_reviews
                END
            WHERE {self.key} = %s
            RETURNING *;
        """
        return self._update_one(
            sql, (old_rating, new_rating, entity_id), "updating", entity_id
        )

    def remove_review_data(self, rating: int, entity_id: str):
        """
        Take one rating out of the aggregate.

        ``total = total - 1``, ``average = (average * total - rating) / (total - 1)``,
        and ``average = 0`` once the last rating is gone.
        """
        sql = f"""
            UPDATE {self.table}
            SET
                total_reviews = GREATEST(total_reviews - 1, 0),
                average_review = CASE
                    WHEN total_reviews <= 1 THEN 0
                    ELSE (average_review * total_reviews - %s) / (total_reviews - 1)
                END
            WHERE {self.key} = %s
            RETURNING *;
        """
        return self._update_one(
            sql, (rating, entity_id), "removing", entity_id
        )

    # ── HELPERS ───────────────────────────────────────────

    def _update_one(self, sql: str, params: tuple, action: str, entity_id: str):
        try:
            with transaction() as conn, dict_cursor(conn) as cur:
                cur.execute(sql, params)
                row = cur.fetchone()
        except psycopg2.Error as e:
            logger.error(f"Failed {action} review data for {self.label} {entity_id}: {e}")
            raise StorageError(
                f"Database error while {action} {self.label} review data."
            ) from e
        if row is None:
            raise NotFoundError(
                f"No rows affected while {action} {self.label} review data.", 500
            )
        logger.info(f"{action.capitalize()} review data for {self.label} {entity_id}")
        return self.row_mapper(row)
