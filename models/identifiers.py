"""
models/identifiers.py
---------------------
A user can be looked up by id, username or email. ``UserIdentifier``
is the union of the three variants; repositories dispatch on the
variant's type to pick the column.
"""

from dataclasses import dataclass
from typing import Union
from uuid import UUID


@dataclass(frozen=True)
class ById:
    user_id: str


@dataclass(frozen=True)
class ByUsername:
    username: str


@dataclass(frozen=True)
class ByEmail:
    email: str


UserIdentifier = Union[ById, ByUsername, ByEmail]


def identifier_column(identifier: UserIdentifier) -> tuple[str, str]:
    """
    Map an identifier to the users column it matches and the value.

    Raises:
        TypeError: If ``identifier`` is not one of the three variants.
    """
    if isinstance(identifier, ById):
        return "user_id", identifier.user_id
    if isinstance(identifier, ByUsername):
        return "username", identifier.username
    if isinstance(identifier, ByEmail):
        return "email", identifier.email
    raise TypeError(f"Unsupported user identifier: {identifier!r}")


def is_valid_id(value) -> bool:
    """True if ``value`` is a string that parses as a UUID primary key."""
    if not isinstance(value, str):
        return False
    try:
        UUID(value)
    except ValueError:
        return False
    return True
