"""Tests for SearchService lookups."""

import pytest

from fakes import new_id
from services.search_service import SearchService
from utils.errors import ValidationError


@pytest.fixture
def service(repos):
    return SearchService(
        composer_repo=repos["composer_repo"],
        composition_repo=repos["composition_repo"],
        review_repo=repos["review_repo"],
        user_repo=repos["user_repo"],
    )


def test_search_composers_matches_substring(service, store):
    store.add_composer("Johann Sebastian Bach")
    store.add_composer("Carl Philipp Emanuel Bach")
    store.add_composer("Antonín Dvořák")

    result = service.search_composers("bach")

    assert [c["name"] for c in result["composers"]] == [
        "Carl Philipp Emanuel Bach",
        "Johann Sebastian Bach",
    ]


def test_get_composer_with_works(service, store):
    composer = store.add_composer()
    store.add_composition(composer, "The Art of Fugue")
    store.add_composition(composer, "Brandenburg Concerto No. 3")

    result = service.get_composer(composer.composer_id)

    assert result["composer"]["composer_id"] == composer.composer_id
    assert [w["title"] for w in result["works"]] == [
        "Brandenburg Concerto No. 3",
        "The Art of Fugue",
    ]


def test_get_composition_orders_reviews_by_likes(service, store, repos):
    composition = store.add_composition(store.add_composer())
    quiet = repos["review_repo"].insert_review(
        composition.composition_id, store.add_user("a").user_id, 3
    )
    popular = repos["review_repo"].insert_review(
        composition.composition_id, store.add_user("b").user_id, 5
    )
    popular.num_liked = 7

    result = service.get_composition(composition.composition_id)

    assert [r["review_id"] for r in result["reviews"]] == [popular.review_id, quiet.review_id]


def test_get_user_hides_private_fields(service, store):
    store.add_user("clara")

    result = service.get_user("clara")

    assert result["user"]["username"] == "clara"
    assert "email" not in result["user"]
    assert "password_hash" not in result["user"]
    assert result["reviews"] == []


@pytest.mark.parametrize(
    "method, message",
    [
        ("get_composer", "Composer does not exist."),
        ("get_composition", "Composition does not exist."),
        ("get_user", "User does not exist."),
    ],
)
def test_missing_entities(service, method, message):
    with pytest.raises(ValidationError) as exc:
        getattr(service, method)(new_id())

    assert exc.value.details[0]["message"] == message
