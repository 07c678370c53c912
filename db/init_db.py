"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import transaction
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
CREATE EXTENSION IF NOT EXISTS pgcrypto;
CREATE EXTENSION IF NOT EXISTS unaccent;

-- Users table: accounts, verification state and the user's rating aggregate
CREATE TABLE IF NOT EXISTS users (
    user_id                 UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    username                VARCHAR(32) UNIQUE NOT NULL,
    email                   VARCHAR(254) UNIQUE NOT NULL,
    password_hash           TEXT NOT NULL,
    bio                     TEXT,
    profile_picture_url     TEXT,
    verified                BOOLEAN NOT NULL DEFAULT FALSE,
    last_verification_sent  TIMESTAMPTZ DEFAULT NOW(),
    average_review          NUMERIC NOT NULL DEFAULT 0,
    total_reviews           INT NOT NULL DEFAULT 0,
    created_at              TIMESTAMPTZ DEFAULT NOW(),
    last_modified_at        TIMESTAMPTZ DEFAULT NOW()
);

-- Refresh tokens table: one live refresh token per session
CREATE TABLE IF NOT EXISTS refresh_tokens (
    token_id        UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    user_id         UUID NOT NULL REFERENCES users(user_id) ON DELETE CASCADE,
    token           TEXT NOT NULL,
    created_at      TIMESTAMPTZ DEFAULT NOW(),
    expires_at      TIMESTAMPTZ NOT NULL
);

-- Composers table
CREATE TABLE IF NOT EXISTS composers (
    composer_id     UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    name            VARCHAR(200) NOT NULL,
    date_of_birth   DATE,
    date_of_death   DATE,
    image_url       TEXT,
    average_review  NUMERIC NOT NULL DEFAULT 0,
    total_reviews   INT NOT NULL DEFAULT 0
);

-- Compositions table: many compositions per composer
CREATE TABLE IF NOT EXISTS compositions (
    composition_id  UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    composer_id     UUID NOT NULL REFERENCES composers(composer_id) ON DELETE CASCADE,
    title           TEXT NOT NULL,
    subtitle        TEXT,
    genre           VARCHAR(50),
    average_review  NUMERIC NOT NULL DEFAULT 0,
    total_reviews   INT NOT NULL DEFAULT 0
);

-- Reviews table: at most one review per (user, composition)
CREATE TABLE IF NOT EXISTS reviews (
    review_id           UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    composition_id      UUID NOT NULL REFERENCES compositions(composition_id) ON DELETE CASCADE,
    user_id             UUID NOT NULL REFERENCES users(user_id) ON DELETE CASCADE,
    rating              SMALLINT NOT NULL CHECK (rating BETWEEN 1 AND 5),
    comment             TEXT,
    num_liked           INT NOT NULL DEFAULT 0,
    created_at          TIMESTAMPTZ DEFAULT NOW(),
    last_modified_at    TIMESTAMPTZ DEFAULT NOW(),
    UNIQUE(user_id, composition_id)
);

-- Liked reviews table: at most one like per (user, review)
CREATE TABLE IF NOT EXISTS liked_reviews (
    user_id         UUID NOT NULL REFERENCES users(user_id) ON DELETE CASCADE,
    review_id       UUID NOT NULL REFERENCES reviews(review_id) ON DELETE CASCADE,
    liked_at        TIMESTAMPTZ DEFAULT NOW(),
    PRIMARY KEY (user_id, review_id)
);

-- Indexes for faster queries
CREATE INDEX IF NOT EXISTS idx_reviews_composition ON reviews(composition_id, num_liked DESC);
CREATE INDEX IF NOT EXISTS idx_reviews_user ON reviews(user_id);
CREATE INDEX IF NOT EXISTS idx_compositions_composer ON compositions(composer_id);
CREATE INDEX IF NOT EXISTS idx_refresh_tokens_user ON refresh_tokens(user_id);
"""


def create_tables() -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    try:
        with transaction() as conn:
            with conn.cursor() as cur:
                cur.execute(SCHEMA_SQL)
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        logger.error(f"Failed to initialize schema: {e}")
        raise


if __name__ == "__main__":
    from db.connection import init_pool
    init_pool()
    create_tables()
    print("Database schema created successfully.")
