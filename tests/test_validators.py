"""Tests for request validators."""

from unittest.mock import Mock

import pytest

from utils.errors import ValidationError
from validators.account_validators import (
    validate_login,
    validate_refresh_cookie,
    validate_registration,
)
from validators.review_validators import (
    validate_change_review,
    validate_make_review,
    validate_review_id,
)
from validators.search_validators import validate_query_id, validate_search_term

COMPOSITION_ID = "0b7d4f7e-8a55-4c0e-9a44-7d1f7f6c2a10"


def _messages(exc_info) -> list[str]:
    return [d["message"] for d in exc_info.value.details]


@pytest.fixture
def user_repo():
    repo = Mock()
    repo.is_username_taken.return_value = False
    repo.is_email_taken.return_value = False
    return repo


# ── reviews ───────────────────────────────────────────────


def test_make_review_accepts_valid_body():
    body = {"compositionId": COMPOSITION_ID, "rating": 5, "comment": "  A towering performance.  "}

    assert validate_make_review(body) == (COMPOSITION_ID, 5, "A towering performance.")


def test_make_review_comment_is_optional():
    assert validate_make_review({"compositionId": COMPOSITION_ID, "rating": 1}) == (
        COMPOSITION_ID,
        1,
        None,
    )


@pytest.mark.parametrize("rating", [0, 6, 3.5, "4", True])
def test_rating_must_be_integer_in_range(rating):
    with pytest.raises(ValidationError) as exc:
        validate_make_review({"compositionId": COMPOSITION_ID, "rating": rating})

    assert _messages(exc) == ["Rating must be an integer between 1 and 5."]


def test_make_review_collects_every_failure():
    with pytest.raises(ValidationError) as exc:
        validate_make_review({"comment": "short"})

    assert _messages(exc) == [
        "Composition ID must exist.",
        "Rating must exist.",
        "Comment must be between 10 and 1000 characters.",
    ]


@pytest.mark.parametrize(
    "comment, message",
    [
        ("x" * 1001, "Comment must be between 10 and 1000 characters."),
        ("Lovely phrasing <script>", "Comment contains invalid characters."),
        ("What a load of bullshit.", "Comment must not contain profanity."),
    ],
)
def test_comment_rules(comment, message):
    with pytest.raises(ValidationError) as exc:
        validate_change_review({"reviewId": COMPOSITION_ID, "rating": 3, "comment": comment})

    assert _messages(exc) == [message]


def test_review_id_must_exist():
    with pytest.raises(ValidationError) as exc:
        validate_review_id({})

    assert exc.value.details == [{"field": "reviewId", "message": "Review ID must exist."}]


# ── accounts ──────────────────────────────────────────────


def test_registration_accepts_valid_body(user_repo):
    body = {"username": "clara", "email": "Clara@Example.com", "password": "Sonata#1801"}

    assert validate_registration(body, user_repo) == ("clara", "clara@example.com", "Sonata#1801")


@pytest.mark.parametrize(
    "password",
    ["Short#1", "nouppercase#1", "NOLOWERCASE#1", "NoDigits#here", "NoSymbols123", "Bad~Symbol1"],
)
def test_weak_passwords_are_rejected(user_repo, password):
    body = {"username": "clara", "email": "clara@example.com", "password": password}

    with pytest.raises(ValidationError) as exc:
        validate_registration(body, user_repo)

    assert [d["field"] for d in exc.value.details] == ["password"]


def test_taken_username_and_email(user_repo):
    user_repo.is_username_taken.return_value = True
    user_repo.is_email_taken.return_value = True
    body = {"username": "clara", "email": "clara@example.com", "password": "Sonata#1801"}

    with pytest.raises(ValidationError) as exc:
        validate_registration(body, user_repo)

    assert _messages(exc) == ["Username is already in use.", "Email is already in use."]


@pytest.mark.parametrize(
    "username, message",
    [
        ("c", "Username must be between 2 and 32 characters long."),
        ("clara_s", 'Username must follow "en-US" language code and can not contain symbols.'),
        ("shitposter", "Username must not contain profanity."),
    ],
)
def test_username_rules(user_repo, username, message):
    body = {"username": username, "email": "clara@example.com", "password": "Sonata#1801"}

    with pytest.raises(ValidationError) as exc:
        validate_registration(body, user_repo)

    assert _messages(exc) == [message]
    user_repo.is_username_taken.assert_not_called()


def test_login_requires_fields():
    with pytest.raises(ValidationError) as exc:
        validate_login({"username": 42})

    assert _messages(exc) == ["Username must be a string.", "Password field must exist."]


def test_refresh_cookie_must_exist():
    with pytest.raises(ValidationError) as exc:
        validate_refresh_cookie({})

    assert _messages(exc) == ["Refresh token is missing."]


# ── search ────────────────────────────────────────────────


def test_search_term_is_trimmed():
    assert validate_search_term({"term": "  bach "}) == "bach"


@pytest.mark.parametrize("args", [{}, {"term": "   "}, {"term": "b" * 51}])
def test_search_term_length(args):
    with pytest.raises(ValidationError) as exc:
        validate_search_term(args)

    assert _messages(exc) == ["Search term must be between 1 and 50 characters."]


def test_query_id_must_exist():
    with pytest.raises(ValidationError) as exc:
        validate_query_id({}, "composerId", "Composer ID")

    assert _messages(exc) == ["Composer ID must exist."]
