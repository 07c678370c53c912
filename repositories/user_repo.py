"""
repositories/user_repo.py
--------------------------
Data access layer for user records.
"""

from typing import Optional, Union

import psycopg2
from psycopg2 import errors

from db.connection import dict_cursor, transaction
from models.identifiers import ById, UserIdentifier, identifier_column, is_valid_id
from models.user import User
from repositories.aggregate_repo import AggregateRepository
from utils.errors import NotFoundError, StorageError, ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)


class UserRepository(AggregateRepository):
    """Repository for CRUD operations on the users table."""

    table = "users"
    key = "user_id"
    label = "user"

    # ── CREATE ────────────────────────────────────────────

    def create_user(self, username: str, email: str, password_hash: str) -> User:
        """
        Insert a new, unverified user.

        Args:
            username: Unique username.
            email: Unique email address.
            password_hash: bcrypt hash of the password.

        Returns:
            The inserted User.
        """
        sql = """
            INSERT INTO users (username, email, password_hash)
            VALUES (%s, %s, %s)
            RETURNING *;
        """
        try:
            with transaction() as conn, dict_cursor(conn) as cur:
                cur.execute(sql, (username, email, password_hash))
                row = cur.fetchone()
        except errors.UniqueViolation as e:
            raise self._taken_error(e) from e
        except psycopg2.Error as e:
            logger.error(f"Failed to create user {username}: {e}")
            raise StorageError("Database error while creating user.") from e
        logger.info(f"Created user {username}")
        return self.row_mapper(row)

    # ── READ ──────────────────────────────────────────────

    def exists(self, identifier: Union[UserIdentifier, str]) -> bool:
        """
        True if a user matches the identifier. A bare string is taken
        as a user ID.
        """
        if isinstance(identifier, str):
            identifier = ById(identifier)
        column, value = identifier_column(identifier)
        if column == "user_id" and not is_valid_id(value):
            return False
        return self._value_exists(column, value, "checking if user exists")

    def is_username_taken(self, username: str) -> bool:
        return self._value_exists("username", username, "checking username uniqueness")

    def is_email_taken(self, email: str) -> bool:
        return self._value_exists("email", email, "checking email uniqueness")

    def get_user(self, identifier: UserIdentifier) -> Optional[User]:
        """
        Fetch a user by any identifier variant.

        Returns:
            User or None.
        """
        column, value = identifier_column(identifier)
        if column == "user_id" and not is_valid_id(value):
            return None
        sql = f"SELECT * FROM users WHERE {column} = %s;"
        try:
            with transaction() as conn, dict_cursor(conn) as cur:
                cur.execute(sql, (value,))
                row = cur.fetchone()
        except psycopg2.Error as e:
            logger.error(f"Failed to get user by {column}: {e}")
            raise StorageError("Database error while getting user.") from e
        return self.row_mapper(row) if row else None

    def get_password_hash(self, identifier: UserIdentifier) -> str:
        """
        Raises:
            NotFoundError: If no user matches.
        """
        user = self.get_user(identifier)
        if user is None:
            raise NotFoundError("User does not exist.", 400)
        return user.password_hash

    def get_user_id(self, identifier: UserIdentifier) -> str:
        """
        Raises:
            NotFoundError: If no user matches.
        """
        user = self.get_user(identifier)
        if user is None:
            raise NotFoundError("User does not exist.", 400)
        return user.user_id

    def is_verified(self, identifier: UserIdentifier) -> bool:
        user = self.get_user(identifier)
        return bool(user and user.verified)

    # ── UPDATE ────────────────────────────────────────────

    def verify_user(self, user_id: str) -> User:
        """
        Mark a user's email as verified.

        Raises:
            NotFoundError: If no user has that ID.
        """
        sql = """
            UPDATE users
            SET verified = TRUE, last_modified_at = NOW()
            WHERE user_id = %s
            RETURNING *;
        """
        try:
            with transaction() as conn, dict_cursor(conn) as cur:
                cur.execute(sql, (user_id,))
                row = cur.fetchone()
        except psycopg2.Error as e:
            logger.error(f"Failed to verify user {user_id}: {e}")
            raise StorageError("Database error while verifying user.") from e
        if row is None:
            raise NotFoundError("No rows affected while verifying user.", 400)
        logger.info(f"Verified user {user_id}")
        return self.row_mapper(row)

    # ── HELPERS ───────────────────────────────────────────

    def _value_exists(self, column: str, value: str, action: str) -> bool:
        sql = f"SELECT 1 FROM users WHERE {column} = %s LIMIT 1;"
        try:
            with transaction() as conn, conn.cursor() as cur:
                cur.execute(sql, (value,))
                return cur.fetchone() is not None
        except psycopg2.Error as e:
            logger.error(f"Failed {action}: {e}")
            raise StorageError(f"Database error while {action}.") from e

    @staticmethod
    def _taken_error(error: errors.UniqueViolation) -> ValidationError:
        """Turn a unique-constraint hit on users into the matching field error."""
        diag = getattr(error, "diag", None)
        constraint = (diag.constraint_name if diag else None) or str(error)
        if "email" in constraint:
            return ValidationError.single("email", "Email is already in use.")
        return ValidationError.single("username", "Username is already in use.")

    @staticmethod
    def row_mapper(row: dict) -> User:
        """Convert a database row to a User domain object."""
        return User(
            user_id=str(row["user_id"]),
            username=row["username"],
            email=row["email"],
            password_hash=row.get("password_hash", ""),
            bio=row.get("bio"),
            profile_picture_url=row.get("profile_picture_url"),
            verified=bool(row.get("verified")),
            average_review=float(row.get("average_review") or 0),
            total_reviews=int(row.get("total_reviews") or 0),
            created_at=row.get("created_at"),
            last_modified_at=row.get("last_modified_at"),
        )
