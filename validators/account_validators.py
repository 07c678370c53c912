"""
validators/account_validators.py
---------------------------------
Request bodies and cookies of the /api/account endpoints.
"""

import re
from typing import Any, Optional

from repositories.user_repo import UserRepository
from utils.profanities import contains_profanity
from validators import fields
from validators.fields import ErrorCollector

USERNAME_MIN_LENGTH = 2
USERNAME_MAX_LENGTH = 32
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 64
PASSWORD_SYMBOLS = "!@#$%^&*"

_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9]+$")
_EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,}$")
_PASSWORD_PATTERN = re.compile(r"^[A-Za-z0-9!@#$%^&*]+$")


def validate_registration(body: dict, user_repo: UserRepository) -> tuple[str, str, str]:
    """
    Check a registration request, including username and email uniqueness.

    Returns:
        (username, email, password) with the email lower-cased.

    Raises:
        ValidationError: With every failing field.
    """
    errors = ErrorCollector()
    username = _username(body.get("username"), errors, user_repo)
    email = _email(body.get("email"), errors, user_repo)
    password = _password(body.get("password"), errors)
    errors.raise_if_any()
    return username, email, password


def validate_login(body: dict) -> tuple[str, str]:
    """
    Shape check only. Existence, verification and the password itself are
    checked by AccountService.login_user.
    """
    errors = ErrorCollector()
    username = _string(body.get("username"), "username", "Username field", "Username", errors)
    password = _string(body.get("password"), "password", "Password field", "Password", errors)
    errors.raise_if_any()
    return username, password


def validate_verification_token(body: dict) -> str:
    errors = ErrorCollector()
    token = _string(
        body.get("token"), "token", "Verification token", "Verification token", errors
    )
    errors.raise_if_any()
    return token


def validate_refresh_cookie(cookies: dict) -> str:
    """
    Raises:
        ValidationError: "Refresh token is missing." if there is no cookie.
    """
    errors = ErrorCollector()
    token = cookies.get("refreshToken")
    if not token:
        errors.add("refreshToken", "Refresh token is missing.")
    errors.raise_if_any()
    return token


# ── FIELDS ────────────────────────────────────────────────

def _string(
    value: Any, field: str, exist_label: str, type_label: str, errors: ErrorCollector
) -> Optional[str]:
    if value is None:
        errors.add(field, f"{exist_label} must exist.")
        return None
    if not isinstance(value, str):
        errors.add(field, f"{type_label} must be a string.")
        return None
    return value


def _username(value: Any, errors: ErrorCollector, user_repo: UserRepository) -> Optional[str]:
    value = _string(value, "username", "Username field", "Username", errors)
    if value is None:
        return None
    value = value.strip()
    if not USERNAME_MIN_LENGTH <= len(value) <= USERNAME_MAX_LENGTH:
        errors.add(
            "username",
            f"Username must be between {USERNAME_MIN_LENGTH} and "
            f"{USERNAME_MAX_LENGTH} characters long.",
        )
    elif not _USERNAME_PATTERN.match(value):
        errors.add(
            "username",
            'Username must follow "en-US" language code and can not contain symbols.',
        )
    elif contains_profanity(value):
        errors.add("username", "Username must not contain profanity.")
    elif user_repo.is_username_taken(value):
        errors.add("username", "Username is already in use.")
    else:
        return value
    return None


def _email(value: Any, errors: ErrorCollector, user_repo: UserRepository) -> Optional[str]:
    value = _string(value, "email", "Email field", "Email", errors)
    if value is None:
        return None
    value = value.strip().lower()
    if not _EMAIL_PATTERN.match(value):
        errors.add("email", "Email address must be in standard format.")
    elif user_repo.is_email_taken(value):
        errors.add("email", "Email is already in use.")
    else:
        return value
    return None


def _password(value: Any, errors: ErrorCollector) -> Optional[str]:
    value = _string(value, "password", "Password field", "Password", errors)
    if value is None:
        return None
    if not PASSWORD_MIN_LENGTH <= len(value) <= PASSWORD_MAX_LENGTH:
        errors.add(
            "password",
            f"Password must be between {PASSWORD_MIN_LENGTH}-{PASSWORD_MAX_LENGTH} characters.",
        )
    elif not _PASSWORD_PATTERN.match(value):
        errors.add(
            "password",
            'Password must be alphanumeric following "en-US" language code '
            f'excluding the characters "{PASSWORD_SYMBOLS}".',
        )
    elif not (
        any(c.islower() for c in value)
        and any(c.isupper() for c in value)
        and any(c.isdigit() for c in value)
        and any(c in PASSWORD_SYMBOLS for c in value)
    ):
        errors.add(
            "password",
            "Password must contain at least one lowercase, one uppercase, "
            "one number and one symbol.",
        )
    else:
        return value
    return None
