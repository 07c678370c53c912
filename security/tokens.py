"""
security/tokens.py
------------------
Purpose-typed JSON web tokens.

Every token carries ``{"userId", "purpose"}`` plus ``iat``/``exp`` and a
random ``jti``, so two tokens issued in the same second still differ. A token
issued for one purpose is rejected when presented for another, so an
email-verification link can never be replayed as a bearer credential.
"""

import uuid
from datetime import datetime, timedelta, timezone

import jwt

from config import (
    ACCESS_TOKEN_TTL_MINUTES,
    EMAIL_TOKEN_TTL_HOURS,
    JWT_ALGORITHM,
    JWT_SECRET,
    REFRESH_TOKEN_TTL_DAYS,
)

ACCESS = "access"
REFRESH = "refresh"
EMAIL_VERIFICATION = "email_verification"


class TokenError(jwt.InvalidTokenError):
    """The token is well-formed and signed but fails a claim check."""


def _create_token(user_id: str, purpose: str, lifetime: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "userId": user_id,
        "purpose": purpose,
        "iat": now,
        "exp": now + lifetime,
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def create_access_token(user_id: str) -> str:
    return _create_token(user_id, ACCESS, timedelta(minutes=ACCESS_TOKEN_TTL_MINUTES))


def create_refresh_token(user_id: str) -> str:
    return _create_token(user_id, REFRESH, timedelta(days=REFRESH_TOKEN_TTL_DAYS))


def create_email_verification_token(user_id: str) -> str:
    return _create_token(
        user_id, EMAIL_VERIFICATION, timedelta(hours=EMAIL_TOKEN_TTL_HOURS)
    )


def decode_token(token: str) -> dict:
    """
    Check signature, structure and expiry.

    Returns:
        The decoded claims.

    Raises:
        jwt.InvalidTokenError: On any failure.
    """
    claims = jwt.decode(
        token,
        JWT_SECRET,
        algorithms=[JWT_ALGORITHM],
        options={"require": ["exp", "iat"]},
    )
    if not isinstance(claims.get("userId"), str) or not claims["userId"]:
        raise TokenError("Token does not carry a user ID.")
    return claims


def verify_token(token: str, purpose: str) -> str:
    """
    Verify a token for one purpose.

    Args:
        token: The encoded JWT.
        purpose: One of ``access``, ``refresh``, ``email_verification``.

    Returns:
        The user ID the token was issued to.

    Raises:
        jwt.InvalidTokenError: On bad structure, signature, expiry or purpose.
    """
    claims = decode_token(token)
    if claims.get("purpose") != purpose:
        raise TokenError(f"Token is not for the purpose of {purpose}.")
    return claims["userId"]
