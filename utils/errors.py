"""
utils/errors.py
---------------
Error taxonomy shared by every layer.

Three tiers:
    - ValidationError: client input is malformed or a precondition that can be
      checked before any mutation fails. Carries a list of field errors.
    - DomainError and its subclasses: a single message, an HTTP status code
      and optional context.
    - Anything else is unexpected and is reported with a generic message.
"""

from typing import Any, Optional


class ValidationError(Exception):
    """Input or precondition failure detected before any mutation (400)."""

    status_code = 400

    def __init__(self, message: str, details: list[dict]):
        super().__init__(message)
        self.message = message
        self.details = details

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        """Build a ValidationError carrying one field error."""
        return cls(message, [{"field": field, "message": message}])


class DomainError(Exception):
    """Base class for errors that carry one message and a status code."""

    status_code = 500

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        context: Optional[Any] = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.context = context


class StorageError(DomainError):
    """A database query failed."""

    status_code = 500


class NotFoundError(DomainError):
    """A row expected to exist was not found or not affected."""

    status_code = 404


class AuthenticationError(DomainError):
    """The bearer credential is missing, malformed or for the wrong purpose."""

    status_code = 401


class EmailDeliveryError(DomainError):
    """An email could not be sent. Context: {recipient, emailType}."""

    status_code = 500

    def __init__(self, message: str, recipient: str, email_type: str = "Verification"):
        super().__init__(
            message, context={"recipient": recipient, "emailType": email_type}
        )
        self.recipient = recipient
        self.email_type = email_type


class ConflictError(DomainError):
    """The request conflicts with existing state (e.g. duplicate review)."""

    status_code = 409
