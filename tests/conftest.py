"""Shared fixtures. Environment is set before any application module loads config."""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-key-with-enough-length-for-hs256")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402

from fakes import (  # noqa: E402
    FakeComposerRepository,
    FakeCompositionRepository,
    FakeLikedReviewRepository,
    FakeReviewRepository,
    FakeStore,
    FakeTokenRepository,
    FakeUserRepository,
)


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def repos(store):
    """One fake of every repository, all sharing ``store``."""
    return {
        "user_repo": FakeUserRepository(store),
        "composer_repo": FakeComposerRepository(store),
        "composition_repo": FakeCompositionRepository(store),
        "review_repo": FakeReviewRepository(store),
        "liked_review_repo": FakeLikedReviewRepository(store),
        "token_repo": FakeTokenRepository(store),
    }
