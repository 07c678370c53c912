"""
handlers/review_handler.py
---------------------------
Routes under /api/review. Every route needs a bearer access token;
authentication runs before the body is validated.
"""

from flask import Blueprint, jsonify, request

from security.auth import bearer_required
from services.review_service import ReviewService
from validators.review_validators import (
    validate_change_review,
    validate_make_review,
    validate_review_id,
)

review_service = ReviewService()

review_bp = Blueprint("review", __name__, url_prefix="/api/review")


def _message(message: str, status: int):
    return jsonify({"success": True, "message": message}), status


@review_bp.post("/reviews")
@bearer_required("Authentication error encountered while making a review")
def make_review(user_id: str):
    composition_id, rating, comment = validate_make_review(request.get_json(silent=True) or {})
    review_service.make_review(user_id, composition_id, rating, comment)
    return _message("Review has been successfully created", 201)


@review_bp.put("/reviews")
@bearer_required("Authentication error encountered while changing a review")
def change_review(user_id: str):
    review_id, rating, comment = validate_change_review(request.get_json(silent=True) or {})
    review_service.change_review(user_id, review_id, rating, comment)
    return _message("Review successfully changed.", 200)


@review_bp.delete("/reviews")
@bearer_required("Authentication error encountered while deleting a review")
def delete_review(user_id: str):
    review_id = validate_review_id(request.get_json(silent=True) or {})
    review_service.delete_review(user_id, review_id)
    return _message("Review successfully deleted.", 200)


@review_bp.post("/likes")
@bearer_required("Authentication error encountered while liking a review")
def like_review(user_id: str):
    review_id = validate_review_id(request.get_json(silent=True) or {})
    review_service.like_review(user_id, review_id)
    return _message("Review successfully liked.", 200)


@review_bp.delete("/likes")
@bearer_required("Authentication error encountered while unliking a review")
def unlike_review(user_id: str):
    review_id = validate_review_id(request.get_json(silent=True) or {})
    review_service.unlike_review(user_id, review_id)
    return _message("Successfully unliked review.", 200)
