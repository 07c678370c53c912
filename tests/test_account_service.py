"""
Tests for AccountService: registration, verification and refresh-token sessions.
"""

from unittest.mock import Mock

import pytest

from security.passwords import hash_password
from security.tokens import (
    ACCESS,
    REFRESH,
    create_access_token,
    create_email_verification_token,
    create_refresh_token,
    verify_token,
)
from services.account_service import AccountService
from utils.errors import EmailDeliveryError, NotFoundError, ValidationError

PASSWORD = "Sonata#1801"


@pytest.fixture
def email_sender():
    return Mock()


@pytest.fixture
def service(store, repos, email_sender):
    return AccountService(
        user_repo=repos["user_repo"],
        token_repo=repos["token_repo"],
        review_repo=repos["review_repo"],
        liked_review_repo=repos["liked_review_repo"],
        transaction_scope=store.transaction,
        email_sender=email_sender,
    )


@pytest.fixture
def verified_user(store):
    return store.add_user("clara", verified=True, password_hash=hash_password(PASSWORD))


# ── registration ──────────────────────────────────────────


def test_register_creates_unverified_user_and_sends_email(service, store, email_sender):
    user = service.register_user("robert", "robert@example.com", PASSWORD)

    assert store.users[user.user_id].verified is False
    assert store.users[user.user_id].password_hash != PASSWORD
    email_sender.assert_called_once()
    username, email, token = email_sender.call_args.args
    assert (username, email) == ("robert", "robert@example.com")
    assert verify_token(token, "email_verification") == user.user_id


def test_register_rolls_back_when_email_fails(service, store, email_sender):
    """Test that a failed verification email leaves no user behind."""
    email_sender.side_effect = EmailDeliveryError(
        "Error while sending email verification", "robert@example.com"
    )

    with pytest.raises(EmailDeliveryError) as exc:
        service.register_user("robert", "robert@example.com", PASSWORD)

    assert exc.value.context == {"recipient": "robert@example.com", "emailType": "Verification"}
    assert store.users == {}


def test_verify_user_flips_verified(service, store):
    user = store.add_user("robert", verified=False)

    service.verify_user(create_email_verification_token(user.user_id))

    assert store.users[user.user_id].verified is True


def test_verify_user_rejects_access_token(service, store):
    user = store.add_user("robert", verified=False)

    with pytest.raises(ValidationError):
        service.verify_user(create_access_token(user.user_id))

    assert store.users[user.user_id].verified is False


# ── login ─────────────────────────────────────────────────


def test_login_issues_and_stores_tokens(service, store, verified_user):
    access_token, refresh_token = service.login_user("clara", PASSWORD)

    assert verify_token(access_token, ACCESS) == verified_user.user_id
    assert verify_token(refresh_token, REFRESH) == verified_user.user_id
    assert store.tokens[verified_user.user_id] == {refresh_token}


@pytest.mark.parametrize(
    "username, password, message",
    [
        ("nobody", PASSWORD, "User does not exist."),
        ("clara", "Wrong#Pass1", "Incorrect password."),
    ],
)
def test_login_rejections(service, verified_user, username, password, message):
    with pytest.raises(ValidationError) as exc:
        service.login_user(username, password)

    assert exc.value.details[0]["message"] == message


def test_login_unverified_user_is_rejected(service, store):
    store.add_user("johannes", verified=False, password_hash=hash_password(PASSWORD))

    with pytest.raises(ValidationError) as exc:
        service.login_user("johannes", PASSWORD)

    assert exc.value.details[0]["message"] == "User is not verified."


# ── refresh / logout ──────────────────────────────────────


def test_refresh_rotates_stored_token(service, store, verified_user):
    _, old_refresh = service.login_user("clara", PASSWORD)

    access_token, new_refresh = service.refresh_tokens(old_refresh)

    assert verify_token(access_token, ACCESS) == verified_user.user_id
    assert new_refresh != old_refresh
    assert store.tokens[verified_user.user_id] == {new_refresh}


def test_refresh_with_unknown_token_is_rejected(service, verified_user):
    with pytest.raises(ValidationError) as exc:
        service.refresh_tokens(create_refresh_token(verified_user.user_id))

    assert exc.value.details[0]["message"] == "Refresh token is invalid."


def test_access_token_cannot_refresh(service, store, verified_user):
    access_token, refresh_token = service.login_user("clara", PASSWORD)

    with pytest.raises(ValidationError):
        service.refresh_tokens(access_token)

    assert store.tokens[verified_user.user_id] == {refresh_token}


def test_logout_removes_tokens(service, store, verified_user):
    _, refresh_token = service.login_user("clara", PASSWORD)

    service.logout_user(refresh_token)

    assert verified_user.user_id not in store.tokens


# ── info ──────────────────────────────────────────────────


def test_get_info(service, store, repos, verified_user):
    composer = store.add_composer()
    composition = store.add_composition(composer)
    review = repos["review_repo"].insert_review(composition.composition_id, verified_user.user_id, 4)
    store.likes.add((verified_user.user_id, review.review_id))

    info = service.get_info(verified_user.user_id)

    assert info["userDetails"]["username"] == "clara"
    assert "password_hash" not in info["userDetails"]
    assert [r["review_id"] for r in info["userReviews"]] == [review.review_id]
    assert info["likedReviews"] == [review.review_id]


def test_get_info_for_missing_user(service):
    with pytest.raises(NotFoundError):
        service.get_info("00000000-0000-0000-0000-000000000000")
