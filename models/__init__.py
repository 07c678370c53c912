"""
models/ - Domain Models
=======================
Plain dataclasses for the rows the application works with.
Repositories build them from database rows; handlers turn them into JSON
through ``to_dict()``.
"""

from datetime import date, datetime


def iso(value):
    """Render a date/datetime as an ISO-8601 string, leave anything else as is."""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value
