"""
repositories/composition_repo.py
---------------------------------
Data access layer for compositions.
"""

from typing import Optional

import psycopg2

from db.connection import dict_cursor, transaction
from models.composition import Composition
from models.identifiers import is_valid_id
from repositories.aggregate_repo import AggregateRepository, contains_pattern
from utils.errors import StorageError
from utils.logger import get_logger

logger = get_logger(__name__)


class CompositionRepository(AggregateRepository):
    """Repository for operations on the compositions table."""

    table = "compositions"
    key = "composition_id"
    label = "composition"

    # ── CREATE ────────────────────────────────────────────

    def insert_composition(
        self,
        composer_id: str,
        title: str,
        subtitle: Optional[str] = None,
        genre: Optional[str] = None,
    ) -> Composition:
        """
        Insert a composition for a composer.

        Returns:
            The inserted Composition.
        """
        sql = """
            INSERT INTO compositions (composer_id, title, subtitle, genre)
            VALUES (%s, %s, %s, %s)
            RETURNING *;
        """
        try:
            with transaction() as conn, dict_cursor(conn) as cur:
                cur.execute(sql, (composer_id, title, subtitle, genre))
                row = cur.fetchone()
        except psycopg2.Error as e:
            logger.error(f"Failed to insert composition '{title}': {e}")
            raise StorageError("Database error while inserting composition.") from e
        return self.row_mapper(row)

    # ── READ ──────────────────────────────────────────────

    def get_compositions(self, search_term: str) -> list[Composition]:
        """Accent- and case-insensitive title search, ordered by title."""
        sql = """
            SELECT *
            FROM compositions
            WHERE UNACCENT(title) ILIKE UNACCENT(%s) ESCAPE '\\'
            ORDER BY title ASC;
        """
        try:
            with transaction() as conn, dict_cursor(conn) as cur:
                cur.execute(sql, (contains_pattern(search_term),))
                return [self.row_mapper(r) for r in cur.fetchall()]
        except psycopg2.Error as e:
            logger.error(f"Failed to search compositions for '{search_term}': {e}")
            raise StorageError("Database error while getting compositions.") from e

    def get_composer_works(self, composer_id: str) -> list[Composition]:
        """All compositions of one composer, ordered by title."""
        sql = """
            SELECT *
            FROM compositions
            WHERE composer_id = %s
            ORDER BY title ASC;
        """
        try:
            with transaction() as conn, dict_cursor(conn) as cur:
                cur.execute(sql, (composer_id,))
                return [self.row_mapper(r) for r in cur.fetchall()]
        except psycopg2.Error as e:
            logger.error(f"Failed to get works of composer {composer_id}: {e}")
            raise StorageError("Database error while getting composer works.") from e

    def get_composition(self, composition_id: str) -> Optional[Composition]:
        """Fetch a composition by ID, or None."""
        if not is_valid_id(composition_id):
            return None
        sql = "SELECT * FROM compositions WHERE composition_id = %s;"
        try:
            with transaction() as conn, dict_cursor(conn) as cur:
                cur.execute(sql, (composition_id,))
                row = cur.fetchone()
        except psycopg2.Error as e:
            logger.error(f"Failed to get composition {composition_id}: {e}")
            raise StorageError("Database error while getting composition.") from e
        return self.row_mapper(row) if row else None

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def row_mapper(row: dict) -> Composition:
        """Convert a database row to a Composition domain object."""
        return Composition(
            composition_id=str(row["composition_id"]),
            composer_id=str(row["composer_id"]),
            title=row["title"],
            subtitle=row.get("subtitle"),
            genre=row.get("genre"),
            average_review=float(row.get("average_review") or 0),
            total_reviews=int(row.get("total_reviews") or 0),
        )
