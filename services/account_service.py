"""
services/account_service.py
----------------------------
Business logic for accounts: registration, email verification and
refresh-token sessions.
"""

from contextlib import AbstractContextManager
from typing import Callable, Optional

import jwt

from db.connection import transaction
from models.identifiers import ById, ByUsername
from models.user import User
from repositories.liked_review_repo import LikedReviewRepository
from repositories.review_repo import ReviewRepository
from repositories.token_repo import TokenRepository
from repositories.user_repo import UserRepository
from security.passwords import hash_password, is_valid_password
from security.tokens import (
    EMAIL_VERIFICATION,
    REFRESH,
    create_access_token,
    create_email_verification_token,
    create_refresh_token,
    verify_token,
)
from utils.email_sender import send_verification_email
from utils.errors import NotFoundError, ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)


class AccountService:
    """
    Handles the account lifecycle.

    Workflow:
        1. register_user creates an unverified user and emails a link.
        2. verify_user redeems the link's token.
        3. login_user issues an access token and a stored refresh token.
        4. refresh_tokens rotates the refresh token; logout_user drops it.
    """

    def __init__(
        self,
        user_repo: Optional[UserRepository] = None,
        token_repo: Optional[TokenRepository] = None,
        review_repo: Optional[ReviewRepository] = None,
        liked_review_repo: Optional[LikedReviewRepository] = None,
        transaction_scope: Callable[[], AbstractContextManager] = transaction,
        email_sender: Callable[[str, str, str], None] = send_verification_email,
    ):
        self.user_repo = user_repo or UserRepository()
        self.token_repo = token_repo or TokenRepository()
        self.review_repo = review_repo or ReviewRepository()
        self.liked_review_repo = liked_review_repo or LikedReviewRepository()
        self.transaction = transaction_scope
        self.send_email = email_sender

    # ── REGISTRATION ──────────────────────────────────────

    def register_user(self, username: str, email: str, password: str) -> User:
        """
        Create an unverified user and send the verification email.

        The user row only survives if the email was handed to the SMTP
        server, so a failed send leaves the username and email free.

        Raises:
            EmailDeliveryError: If the verification email could not be sent.
        """
        password_hash = hash_password(password)
        with self.transaction():
            user = self.user_repo.create_user(username, email, password_hash)
            token = create_email_verification_token(user.user_id)
            self.send_email(username, email, token)

        logger.info(f"Registered user {username} ({user.user_id})")
        return user

    def verify_user(self, token: str) -> User:
        """
        Mark the token's user as verified.

        Raises:
            ValidationError: If the token is not a valid email verification token.
        """
        try:
            user_id = verify_token(token, EMAIL_VERIFICATION)
        except jwt.InvalidTokenError as e:
            logger.warning(f"Rejected email verification token: {e}")
            raise ValidationError.single("token", "Verification token is invalid.") from e
        return self.user_repo.verify_user(user_id)

    # ── SESSIONS ──────────────────────────────────────────

    def login_user(self, username: str, password: str) -> tuple[str, str]:
        """
        Check credentials and start a session.

        Returns:
            (access_token, refresh_token)

        Raises:
            ValidationError: If the user does not exist, is not verified or
                the password is wrong.
        """
        identifier = ByUsername(username)
        user = self.user_repo.get_user(identifier)
        if user is None:
            raise ValidationError.single("username", "User does not exist.")
        if not user.verified:
            raise ValidationError.single("username", "User is not verified.")
        if not is_valid_password(password, user.password_hash):
            raise ValidationError.single("password", "Incorrect password.")

        with self.transaction():
            tokens = self._start_session(user.user_id)

        logger.info(f"User {username} logged in")
        return tokens

    def logout_user(self, refresh_token: str) -> None:
        """
        Drop every stored refresh token of the token's user.

        Raises:
            ValidationError: If the token is not a valid refresh token.
        """
        user_id = self._refresh_token_user(refresh_token)
        removed = self.token_repo.remove_existing_tokens(user_id)
        logger.info(f"User {user_id} logged out ({removed} token(s) removed)")

    def refresh_tokens(self, refresh_token: str) -> tuple[str, str]:
        """
        Exchange a stored refresh token for a new access/refresh pair.

        Returns:
            (access_token, refresh_token)

        Raises:
            ValidationError: If the token is invalid or no longer stored.
        """
        user_id = self._refresh_token_user(refresh_token)
        with self.transaction():
            if not self.token_repo.token_exists(user_id, refresh_token):
                raise ValidationError.single("refreshToken", "Refresh token is invalid.")
            tokens = self._start_session(user_id)

        logger.info(f"Rotated refresh token for user {user_id}")
        return tokens

    # ── INFO ──────────────────────────────────────────────

    def get_info(self, user_id: str) -> dict:
        """
        Account details for the logged-in user.

        Returns:
            Dict with 'userDetails', 'userReviews' and 'likedReviews'.
        """
        user = self.user_repo.get_user(ById(user_id))
        if user is None:
            raise NotFoundError("User does not exist.")
        reviews = self.review_repo.get_user_reviews(user_id)
        liked = self.liked_review_repo.get_liked_reviews(user_id)
        return {
            "userDetails": user.to_dict(),
            "userReviews": [r.to_dict() for r in reviews],
            "likedReviews": [like.review_id for like in liked],
        }

    # ── HELPERS ───────────────────────────────────────────

    def _start_session(self, user_id: str) -> tuple[str, str]:
        refresh_token = create_refresh_token(user_id)
        self.token_repo.remove_existing_tokens(user_id)
        self.token_repo.insert_token(user_id, refresh_token)
        return create_access_token(user_id), refresh_token

    @staticmethod
    def _refresh_token_user(refresh_token: str) -> str:
        try:
            return verify_token(refresh_token, REFRESH)
        except jwt.InvalidTokenError as e:
            logger.warning(f"Rejected refresh token: {e}")
            raise ValidationError.single("refreshToken", "Refresh token is invalid.") from e
