"""
security/passwords.py
---------------------
bcrypt password hashing.
"""

import bcrypt

from config import BCRYPT_ROUNDS


def hash_password(password: str) -> str:
    """Hash a plaintext password with a fresh salt."""
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


def is_valid_password(password: str, password_hash: str) -> bool:
    """True if ``password`` matches ``password_hash``. Malformed hashes never match."""
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False
