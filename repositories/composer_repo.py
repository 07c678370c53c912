"""
repositories/composer_repo.py
------------------------------
Data access layer for composers.
"""

from datetime import date
from typing import Optional

import psycopg2

from db.connection import dict_cursor, transaction
from models.composer import Composer
from models.identifiers import is_valid_id
from repositories.aggregate_repo import AggregateRepository, contains_pattern
from utils.errors import StorageError
from utils.logger import get_logger

logger = get_logger(__name__)


class ComposerRepository(AggregateRepository):
    """Repository for operations on the composers table."""

    table = "composers"
    key = "composer_id"
    label = "composer"

    # ── CREATE ────────────────────────────────────────────

    def insert_composer(
        self,
        name: str,
        birth_date: Optional[date] = None,
        death_date: Optional[date] = None,
    ) -> Composer:
        """
        Insert a composer.

        Returns:
            The inserted Composer.
        """
        sql = """
            INSERT INTO composers (name, date_of_birth, date_of_death)
            VALUES (%s, %s, %s)
            RETURNING *;
        """
        try:
            with transaction() as conn, dict_cursor(conn) as cur:
                cur.execute(sql, (name, birth_date or None, death_date or None))
                row = cur.fetchone()
        except psycopg2.Error as e:
            logger.error(f"Failed to insert composer {name}: {e}")
            raise StorageError("Error while inserting composer into database.") from e
        logger.info(f"Inserted composer {name}")
        return self.row_mapper(row)

    # ── READ ──────────────────────────────────────────────

    def get_composers(self, search_term: str) -> list[Composer]:
        """Accent- and case-insensitive name search, ordered by name."""
        sql = """
            SELECT *
            FROM composers
            WHERE UNACCENT(name) ILIKE UNACCENT(%s) ESCAPE '\\'
            ORDER BY name ASC;
        """
        try:
            with transaction() as conn, dict_cursor(conn) as cur:
                cur.execute(sql, (contains_pattern(search_term),))
                return [self.row_mapper(r) for r in cur.fetchall()]
        except psycopg2.Error as e:
            logger.error(f"Failed to search composers for '{search_term}': {e}")
            raise StorageError("Database error while getting composers.") from e

    def get_composer(self, composer_id: str) -> Optional[Composer]:
        """Fetch a composer by ID, or None."""
        if not is_valid_id(composer_id):
            return None
        sql = "SELECT * FROM composers WHERE composer_id = %s;"
        try:
            with transaction() as conn, dict_cursor(conn) as cur:
                cur.execute(sql, (composer_id,))
                row = cur.fetchone()
        except psycopg2.Error as e:
            logger.error(f"Failed to get composer {composer_id}: {e}")
            raise StorageError("Database error while getting composer.") from e
        return self.row_mapper(row) if row else None

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def row_mapper(row: dict) -> Composer:
        """Convert a database row to a Composer domain object."""
        return Composer(
            composer_id=str(row["composer_id"]),
            name=row["name"],
            date_of_birth=row.get("date_of_birth"),
            date_of_death=row.get("date_of_death"),
            image_url=row.get("image_url"),
            average_review=float(row.get("average_review") or 0),
            total_reviews=int(row.get("total_reviews") or 0),
        )
