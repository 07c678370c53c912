"""
handlers/search_handler.py
---------------------------
Public, read-only routes under /api/search.
"""

from flask import Blueprint, jsonify, request

from services.search_service import SearchService
from validators.search_validators import validate_query_id, validate_search_term

search_service = SearchService()

search_bp = Blueprint("search", __name__, url_prefix="/api/search")


@search_bp.get("/composers")
def search_composers():
    term = validate_search_term(request.args)
    return jsonify({"success": True, **search_service.search_composers(term)}), 200


@search_bp.get("/compositions")
def search_compositions():
    term = validate_search_term(request.args)
    return jsonify({"success": True, **search_service.search_compositions(term)}), 200


@search_bp.get("/composer")
def get_composer():
    composer_id = validate_query_id(request.args, "composerId", "Composer ID")
    return jsonify({"success": True, **search_service.get_composer(composer_id)}), 200


@search_bp.get("/composition")
def get_composition():
    composition_id = validate_query_id(request.args, "compositionId", "Composition ID")
    return jsonify({"success": True, **search_service.get_composition(composition_id)}), 200


@search_bp.get("/user")
def get_user():
    username = validate_query_id(request.args, "username", "Username")
    return jsonify({"success": True, **search_service.get_user(username)}), 200
