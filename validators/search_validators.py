"""
validators/search_validators.py
--------------------------------
Query strings of the /api/search endpoints.
"""

from typing import Mapping

from validators import fields
from validators.fields import ErrorCollector


def validate_search_term(args: Mapping) -> str:
    errors = ErrorCollector()
    term = fields.search_term(args.get("term"), errors)
    errors.raise_if_any()
    return term


def validate_query_id(args: Mapping, field: str, label: str) -> str:
    """
    A required ID in the query string, e.g. ``composerId``.

    Raises:
        ValidationError: "<label> must exist." if it is missing or blank.
    """
    errors = ErrorCollector()
    value = fields.required_string(args.get(field), field, label, errors)
    errors.raise_if_any()
    return value
