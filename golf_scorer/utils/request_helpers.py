"""
Request Helper Utilities

Parsing helpers shared by the JSON blueprints. Every helper raises
ValueError with a message fit for the client; routes wrapped in
json_errors turn that into a 400 response.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation

from flask import request


def get_payload():
    """JSON body of the request, or the form data when no JSON was sent."""
    payload = request.get_json(silent=True)
    if payload is None:
        payload = request.form.to_dict()
    return payload


def require_fields(payload, *fields):
    if not isinstance(payload, dict):
        raise ValueError("Expected a JSON object")
    missing = [f for f in fields if payload.get(f) in (None, '')]
    if missing:
        raise ValueError(f"Missing required field(s): {', '.join(missing)}")


def parse_date(value, field='date'):
    """Parse YYYY-MM-DD, None/'' -> None."""
    if value in (None, ''):
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValueError(f"Invalid {field}. Use YYYY-MM-DD.")


def parse_time(value, field='time'):
    """Parse HH:MM (or HH:MM:SS), None/'' -> None."""
    if value in (None, ''):
        return None
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(value, fmt).time()
        except (TypeError, ValueError):
            continue
    raise ValueError(f"Invalid {field}. Use HH:MM.")


def parse_int(value, field):
    """int(value), rejecting fractional values instead of truncating them."""
    if isinstance(value, bool):
        raise ValueError(f"{field} must be a whole number")
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValueError(f"{field} must be a whole number")
    if not isinstance(value, str) and number != value:
        raise ValueError(f"{field} must be a whole number")
    return number


def parse_decimal(value, field):
    if value in (None, ''):
        return None
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"{field} must be a number")
    if not number.is_finite():
        raise ValueError(f"{field} must be a finite number")
    return number


def parse_bool(value):
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')
