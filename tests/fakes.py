"""
In-memory stand-ins for the repositories, sharing one FakeStore.

They apply the same aggregate arithmetic as the SQL in
repositories/aggregate_repo.py, and FakeStore.transaction() restores the
store on error the way a rolled-back PostgreSQL transaction would.
"""

import copy
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone

from models.composer import Composer
from models.composition import Composition
from models.identifiers import identifier_column
from models.review import LikedReview, Review
from models.user import User
from utils.errors import ConflictError, NotFoundError


def new_id() -> str:
    return str(uuid.uuid4())


class FakeStore:
    def __init__(self):
        self.users: dict[str, User] = {}
        self.composers: dict[str, Composer] = {}
        self.compositions: dict[str, Composition] = {}
        self.reviews: dict[str, Review] = {}
        self.likes: set[tuple[str, str]] = set()
        self.tokens: dict[str, set[str]] = {}
        self._depth = 0
        self.commits = 0
        self.rollbacks = 0

    def _state(self) -> dict:
        return {
            "users": self.users,
            "composers": self.composers,
            "compositions": self.compositions,
            "reviews": self.reviews,
            "likes": self.likes,
            "tokens": self.tokens,
        }

    @contextmanager
    def transaction(self):
        if self._depth:
            self._depth += 1
            try:
                yield self
            finally:
                self._depth -= 1
            return

        snapshot = copy.deepcopy(self._state())
        self._depth = 1
        try:
            yield self
            self.commits += 1
        except Exception:
            for name, value in snapshot.items():
                setattr(self, name, value)
            self.rollbacks += 1
            raise
        finally:
            self._depth = 0

    # ── seeding ───────────────────────────────────────────

    def add_user(self, username="alice", verified=True, password_hash="") -> User:
        user = User(
            user_id=new_id(),
            username=username,
            email=f"{username}@example.com",
            password_hash=password_hash,
            verified=verified,
        )
        self.users[user.user_id] = user
        return user

    def add_composer(self, name="Johann Sebastian Bach") -> Composer:
        composer = Composer(composer_id=new_id(), name=name)
        self.composers[composer.composer_id] = composer
        return composer

    def add_composition(self, composer: Composer, title="Goldberg Variations") -> Composition:
        composition = Composition(
            composition_id=new_id(), composer_id=composer.composer_id, title=title
        )
        self.compositions[composition.composition_id] = composition
        return composition


class FakeAggregateRepository:
    table = ""
    label = ""

    def __init__(self, store: FakeStore):
        self.store = store

    def _rows(self) -> dict:
        return getattr(self.store, self.table)

    def _row(self, entity_id: str):
        row = self._rows().get(entity_id)
        if row is None:
            raise NotFoundError(f"No rows affected while updating {self.label} review data.", 500)
        return row

    def exists(self, entity_id: str) -> bool:
        return entity_id in self._rows()

    def increment_review_data(self, rating: int, entity_id: str):
        row = self._row(entity_id)
        row.average_review = (row.average_review * row.total_reviews + rating) / (
            row.total_reviews + 1
        )
        row.total_reviews += 1
        return row

    def update_review_data(self, entity_id: str, old_rating: int, new_rating: int):
        row = self._row(entity_id)
        if row.total_reviews:
            row.average_review = (
                row.average_review * row.total_reviews - old_rating + new_rating
            ) / row.total_reviews
        return row

    def remove_review_data(self, rating: int, entity_id: str):
        row = self._row(entity_id)
        if row.total_reviews <= 1:
            row.average_review = 0.0
        else:
            row.average_review = (row.average_review * row.total_reviews - rating) / (
                row.total_reviews - 1
            )
        row.total_reviews = max(row.total_reviews - 1, 0)
        return row


class FakeComposerRepository(FakeAggregateRepository):
    table = "composers"
    label = "composer"

    def get_composers(self, search_term: str) -> list[Composer]:
        term = search_term.lower()
        return sorted(
            (c for c in self.store.composers.values() if term in c.name.lower()),
            key=lambda c: c.name,
        )

    def get_composer(self, composer_id: str):
        return self.store.composers.get(composer_id)


class FakeCompositionRepository(FakeAggregateRepository):
    table = "compositions"
    label = "composition"

    def get_compositions(self, search_term: str) -> list[Composition]:
        term = search_term.lower()
        return sorted(
            (c for c in self.store.compositions.values() if term in c.title.lower()),
            key=lambda c: c.title,
        )

    def get_composer_works(self, composer_id: str) -> list[Composition]:
        return sorted(
            (c for c in self.store.compositions.values() if c.composer_id == composer_id),
            key=lambda c: c.title,
        )

    def get_composition(self, composition_id: str):
        return self.store.compositions.get(composition_id)


class FakeUserRepository(FakeAggregateRepository):
    table = "users"
    label = "user"

    def create_user(self, username: str, email: str, password_hash: str) -> User:
        user = User(user_id=new_id(), username=username, email=email, password_hash=password_hash)
        self.store.users[user.user_id] = user
        return user

    def get_user(self, identifier):
        column, value = identifier_column(identifier)
        attribute = {"user_id": "user_id", "username": "username", "email": "email"}[column]
        for user in self.store.users.values():
            if getattr(user, attribute) == value:
                return user
        return None

    def is_username_taken(self, username: str) -> bool:
        return any(u.username == username for u in self.store.users.values())

    def is_email_taken(self, email: str) -> bool:
        return any(u.email == email for u in self.store.users.values())

    def verify_user(self, user_id: str) -> User:
        user = self.store.users.get(user_id)
        if user is None:
            raise NotFoundError("No rows affected while verifying user.", 400)
        user.verified = True
        return user


class FakeReviewRepository:
    def __init__(self, store: FakeStore):
        self.store = store

    def insert_review(self, composition_id, user_id, rating, comment=None) -> Review:
        if self.user_review_exists(user_id, composition_id):
            raise ConflictError("Review already exists on this composition.")
        now = datetime.now(timezone.utc)
        review = Review(
            review_id=new_id(),
            composition_id=composition_id,
            user_id=user_id,
            rating=rating,
            comment=comment,
            created_at=now,
            last_modified_at=now,
        )
        self.store.reviews[review.review_id] = review
        return review

    def user_review_exists(self, user_id, composition_id) -> bool:
        return any(
            r.user_id == user_id and r.composition_id == composition_id
            for r in self.store.reviews.values()
        )

    def get_review(self, review_id, for_update=False):
        review = self.store.reviews.get(review_id)
        return copy.copy(review) if review else None

    def get_composition_reviews(self, composition_id):
        return sorted(
            (r for r in self.store.reviews.values() if r.composition_id == composition_id),
            key=lambda r: r.num_liked,
            reverse=True,
        )

    def get_user_reviews(self, user_id):
        return [r for r in self.store.reviews.values() if r.user_id == user_id]

    def _existing(self, review_id, action) -> Review:
        review = self.store.reviews.get(review_id)
        if review is None:
            raise NotFoundError(f"No rows affected while {action}.", 500)
        return review

    def update_review(self, review_id, rating, comment=None) -> Review:
        review = self._existing(review_id, "updating review")
        review.rating = rating
        review.comment = comment
        review.last_modified_at = datetime.now(timezone.utc)
        return review

    def increment_likes(self, review_id) -> Review:
        review = self._existing(review_id, "incrementing review likes")
        review.num_liked += 1
        return review

    def decrement_likes(self, review_id) -> Review:
        review = self._existing(review_id, "decrementing review likes")
        review.num_liked = max(review.num_liked - 1, 0)
        return review

    def reset_likes(self, review_id) -> Review:
        review = self._existing(review_id, "resetting review likes")
        review.num_liked = 0
        return review

    def delete_review(self, review_id) -> Review:
        review = self._existing(review_id, "deleting review")
        del self.store.reviews[review_id]
        self.store.likes = {like for like in self.store.likes if like[1] != review_id}
        return review


class FakeLikedReviewRepository:
    def __init__(self, store: FakeStore):
        self.store = store

    def insert_liked_review(self, user_id, review_id) -> LikedReview:
        self.store.likes.add((user_id, review_id))
        return LikedReview(user_id=user_id, review_id=review_id)

    def get_liked_reviews(self, user_id) -> list[LikedReview]:
        return [
            LikedReview(user_id=u, review_id=r) for u, r in self.store.likes if u == user_id
        ]

    def is_liked(self, user_id, review_id) -> bool:
        return (user_id, review_id) in self.store.likes

    def remove_liked_review(self, user_id, review_id) -> None:
        if (user_id, review_id) not in self.store.likes:
            raise NotFoundError("No rows affected while removing liked review.", 500)
        self.store.likes.discard((user_id, review_id))

    def remove_review_likes(self, review_id) -> int:
        before = len(self.store.likes)
        self.store.likes = {like for like in self.store.likes if like[1] != review_id}
        return before - len(self.store.likes)


class FakeTokenRepository:
    def __init__(self, store: FakeStore):
        self.store = store

    def insert_token(self, user_id, token) -> str:
        self.store.tokens.setdefault(user_id, set()).add(token)
        return token

    def token_exists(self, user_id, token) -> bool:
        return token in self.store.tokens.get(user_id, set())

    def remove_existing_tokens(self, user_id) -> int:
        return len(self.store.tokens.pop(user_id, set()))
