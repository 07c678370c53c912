"""
repositories/token_repo.py
---------------------------
Data access layer for stored refresh tokens.
"""

from datetime import datetime, timedelta, timezone

import psycopg2

from config import REFRESH_TOKEN_TTL_DAYS
from db.connection import transaction
from utils.errors import StorageError
from utils.logger import get_logger

logger = get_logger(__name__)


class TokenRepository:
    """Repository for operations on the refresh_tokens table."""

    def insert_token(self, user_id: str, token: str) -> str:
        """
        Store a refresh token for a user.

        Returns:
            The token that was stored.
        """
        sql = """
            INSERT INTO refresh_tokens (user_id, token, expires_at)
            VALUES (%s, %s, %s);
        """
        expires_at = datetime.now(timezone.utc) + timedelta(days=REFRESH_TOKEN_TTL_DAYS)
        try:
            with transaction() as conn, conn.cursor() as cur:
                cur.execute(sql, (user_id, token, expires_at))
        except psycopg2.Error as e:
            logger.error(f"Failed to insert refresh token for user {user_id}: {e}")
            raise StorageError("Database error while inserting refresh token.") from e
        return token

    def token_exists(self, user_id: str, token: str) -> bool:
        """True if the token is stored for the user and not expired."""
        sql = """
            SELECT 1
            FROM refresh_tokens
            WHERE user_id = %s AND token = %s AND expires_at > NOW()
            LIMIT 1;
        """
        try:
            with transaction() as conn, conn.cursor() as cur:
                cur.execute(sql, (user_id, token))
                return cur.fetchone() is not None
        except psycopg2.Error as e:
            logger.error(f"Failed to look up refresh token for user {user_id}: {e}")
            raise StorageError("Database error while checking refresh token.") from e

    def remove_existing_tokens(self, user_id: str) -> int:
        """
        Remove every refresh token of a user.

        Returns:
            Number of tokens removed.
        """
        sql = "DELETE FROM refresh_tokens WHERE user_id = %s;"
        try:
            with transaction() as conn, conn.cursor() as cur:
                cur.execute(sql, (user_id,))
                return cur.rowcount or 0
        except psycopg2.Error as e:
            logger.error(f"Failed to remove refresh tokens for user {user_id}: {e}")
            raise StorageError(
                "Database error while removing existing refresh tokens."
            ) from e
