"""
security/auth.py
-----------------
Bearer-token authentication for Flask views.
Resolves the acting user from an ``Authorization: Bearer <jwt>`` header.
"""

from functools import wraps
from typing import Callable, Optional

import jwt
from flask import request

from security.tokens import ACCESS, verify_token
from utils.errors import AuthenticationError
from utils.logger import get_logger

logger = get_logger(__name__)


def resolve_bearer(header: Optional[str], message: str) -> str:
    """
    Extract and verify the access token from an Authorization header.

    Args:
        header: Raw header value (may be None).
        message: Error message to raise with.

    Returns:
        The acting user's ID.

    Raises:
        AuthenticationError: If the header is missing, is not a bearer
            credential, or holds a token that is not a valid access token.
    """
    if not header:
        raise AuthenticationError(message)
    scheme, _, token = header.partition(" ")
    token = token.strip()
    if scheme != "Bearer" or not token:
        raise AuthenticationError(message)
    try:
        return verify_token(token, ACCESS)
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise AuthenticationError(message) from e


def bearer_required(message: str):
    """
    Decorator that authenticates a view and passes ``user_id`` to it.

    Usage:
        @bp.post("/reviews")
        @bearer_required("Authentication error encountered while making a review")
        def make_review(user_id):
            ...

    Behavior:
        - Authentication runs before any body validation.
        - Failures raise AuthenticationError, turned into a 401 by the
          error boundary.
    """
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            user_id = resolve_bearer(request.headers.get("Authorization"), message)
            return func(user_id, *args, **kwargs)

        return wrapper

    return decorator
