"""
handlers/error_handler.py
--------------------------
Error boundary for the Flask app. Every error leaves the server as
``{"success": false, "message": ...}``:

    - ValidationError  -> 400, message is the list of field errors
    - DomainError      -> its own status code and message
    - HTTPException    -> Flask's status code and description (404, 405...)
    - anything else    -> 500, "An unexpected error occurred"
"""

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from utils.errors import DomainError, ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


def _envelope(message, status_code: int):
    return jsonify({"success": False, "message": message}), status_code


def handle_validation_error(error: ValidationError):
    logger.warning(f"Validation failed: {error.details}")
    return _envelope(error.details, error.status_code)


def handle_domain_error(error: DomainError):
    if error.status_code >= 500:
        logger.error(
            f"{type(error).__name__}: {error.message} (context={error.context})",
            exc_info=error,
        )
    else:
        logger.warning(f"{type(error).__name__}: {error.message}")
    return _envelope(error.message, error.status_code)


def handle_http_exception(error: HTTPException):
    return _envelope(error.description, error.code or 500)


def handle_unexpected_error(error: Exception):
    logger.exception(f"Unhandled {type(error).__name__}: {error}")
    return _envelope(UNEXPECTED_ERROR_MESSAGE, 500)


def register_error_handlers(app: Flask) -> None:
    """Attach the handlers above to ``app``."""
    app.register_error_handler(ValidationError, handle_validation_error)
    app.register_error_handler(DomainError, handle_domain_error)
    app.register_error_handler(HTTPException, handle_http_exception)
    app.register_error_handler(Exception, handle_unexpected_error)
