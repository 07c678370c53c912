"""
db/connection.py
----------------
Manages the PostgreSQL connection pool and the transaction scope.
Uses psycopg2's ThreadedConnectionPool since Flask serves requests
on worker threads.

A transaction binds one pooled connection to the current context.
Repository calls made inside an open transaction join it instead of
committing on their own, so a service can make a multi-table workflow
commit or roll back as a unit.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

import psycopg2
from psycopg2 import pool, extras
from config import DATABASE_URL, DB_POOL_MIN, DB_POOL_MAX
from utils.logger import get_logger

logger = get_logger(__name__)

_pool: pool.ThreadedConnectionPool | None = None
_active_connection: ContextVar = ContextVar("active_connection", default=None)

# Lets psycopg2 hand back UUID columns as uuid.UUID
extras.register_uuid()


def init_pool(min_conn: int = DB_POOL_MIN, max_conn: int = DB_POOL_MAX) -> None:
    """
    Initialize the database connection pool.

    Args:
        min_conn: Minimum number of connections to keep open.
        max_conn: Maximum number of connections allowed.

    Raises:
        psycopg2.OperationalError: If the database is unreachable.
    """
    global _pool
    if _pool is not None:
        return
    try:
        _pool = pool.ThreadedConnectionPool(min_conn, max_conn, DATABASE_URL)
        logger.info("Database connection pool initialized successfully.")
    except psycopg2.OperationalError as e:
        logger.error(f"Failed to initialize database pool: {e}")
        raise


def get_connection():
    """
    Get a connection from the pool.

    Returns:
        A psycopg2 connection object.

    Raises:
        RuntimeError: If the pool has not been initialized.
    """
    if _pool is None:
        raise RuntimeError("Database pool not initialized. Call init_pool() first.")
    return _pool.getconn()


def release_connection(conn) -> None:
    """
    Return a connection back to the pool.

    Args:
        conn: The psycopg2 connection to release.
    """
    if _pool is not None:
        _pool.putconn(conn)


def close_pool() -> None:
    """Close all connections in the pool."""
    global _pool
    if _pool is not None:
        _pool.closeall()
        _pool = None
        logger.info("Database connection pool closed.")


@contextmanager
def transaction() -> Iterator:
    """
    Open a transaction, or join the one already open in this context.

    The outermost scope commits on success and rolls back on any
    exception, then returns the connection to the pool. Inner scopes
    only hand out the shared connection.

    Usage:
        with transaction() as conn:
            with conn.cursor() as cur:
                ...
    """
    active = _active_connection.get()
    if active is not None:
        yield active
        return

    conn = get_connection()
    token = _active_connection.set(conn)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        _active_connection.reset(token)
        release_connection(conn)


def dict_cursor(conn):
    """Cursor whose rows are dicts keyed by column name."""
    return conn.cursor(cursor_factory=extras.RealDictCursor)
