"""
handlers/account_handler.py
----------------------------
Routes under /api/account: registration, email verification, sessions
and the logged-in user's details.
"""

from flask import Blueprint, Response, jsonify, request

from config import IS_PRODUCTION, REFRESH_TOKEN_TTL_DAYS
from security.auth import bearer_required
from services.account_service import AccountService
from validators.account_validators import (
    validate_login,
    validate_refresh_cookie,
    validate_registration,
    validate_verification_token,
)

account_service = AccountService()

account_bp = Blueprint("account", __name__, url_prefix="/api/account")

REFRESH_COOKIE = "refreshToken"
REFRESH_COOKIE_PATH = "/api/account"


def _set_refresh_cookie(response: Response, refresh_token: str) -> Response:
    response.set_cookie(
        REFRESH_COOKIE,
        refresh_token,
        max_age=REFRESH_TOKEN_TTL_DAYS * 24 * 60 * 60,
        path=REFRESH_COOKIE_PATH,
        httponly=True,
        secure=IS_PRODUCTION,
        samesite="Strict" if IS_PRODUCTION else None,
    )
    return response


@account_bp.post("/register")
def register():
    body = request.get_json(silent=True) or {}
    username, email, password = validate_registration(body, account_service.user_repo)
    account_service.register_user(username, email, password)
    return jsonify({"success": True, "message": "User has successfully registered"}), 201


@account_bp.put("/verify-email")
def verify_email():
    body = request.get_json(silent=True) or {}
    token = validate_verification_token(body)
    account_service.verify_user(token)
    return jsonify({"success": True, "message": "User has been successfully verified."}), 200


@account_bp.post("/sessions")
def login():
    """Log in: the access token goes in the body, the refresh token in a cookie."""
    body = request.get_json(silent=True) or {}
    username, password = validate_login(body)
    access_token, refresh_token = account_service.login_user(username, password)
    response = jsonify({"success": True, "accessToken": access_token})
    response.status_code = 201
    return _set_refresh_cookie(response, refresh_token)


@account_bp.post("/logout")
def logout():
    refresh_token = validate_refresh_cookie(request.cookies)
    account_service.logout_user(refresh_token)
    response = jsonify({"success": True, "message": "Logged out successfully"})
    response.delete_cookie(REFRESH_COOKIE, path=REFRESH_COOKIE_PATH)
    return response, 200


@account_bp.post("/refresh-tokens")
def refresh_tokens():
    refresh_token = validate_refresh_cookie(request.cookies)
    access_token, new_refresh_token = account_service.refresh_tokens(refresh_token)
    response = jsonify({"success": True, "accessToken": access_token})
    return _set_refresh_cookie(response, new_refresh_token), 200


@account_bp.get("/info")
@bearer_required("Authentication error encountered while getting user info")
def info(user_id: str):
    details = account_service.get_info(user_id)
    return jsonify({"success": True, **details}), 200
