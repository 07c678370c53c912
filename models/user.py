"""
models/user.py
--------------
Domain model for user accounts.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from models import iso


@dataclass
class User:
    """
    Represents a registered account.

    Attributes:
        user_id: Database primary key.
        username: Unique display name.
        email: Unique email address.
        password_hash: bcrypt hash; never serialized.
        bio: Optional free-text biography.
        profile_picture_url: Optional avatar location.
        verified: True once the email verification token was redeemed.
        average_review: Mean of the ratings this user has given.
        total_reviews: Number of reviews this user has written.
        created_at: Timestamp when the account was created.
        last_modified_at: Timestamp of the last profile change.
    """
    user_id: str
    username: str
    email: str
    password_hash: str = ""
    bio: Optional[str] = None
    profile_picture_url: Optional[str] = None
    verified: bool = False
    average_review: float = 0.0
    total_reviews: int = 0
    created_at: Optional[datetime] = None
    last_modified_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Account details as returned to the account owner."""
        return {
            "user_id": self.user_id,
            "username": self.username,
            "email": self.email,
            "bio": self.bio,
            "profile_picture_url": self.profile_picture_url,
            "verified": self.verified,
            "average_review": self.average_review,
            "total_reviews": self.total_reviews,
            "created_at": iso(self.created_at),
            "last_modified_at": iso(self.last_modified_at),
        }

    def to_public_dict(self) -> dict:
        """Profile as shown to other users (no email)."""
        details = self.to_dict()
        details.pop("email")
        details.pop("verified")
        return details
