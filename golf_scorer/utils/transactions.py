"""
Database transaction helpers.

Commit/rollback wrappers shared by the helper modules and the blueprints so a
failed write never leaves a half-applied session behind.
"""

from functools import wraps
import logging

from flask import jsonify
from sqlalchemy import exc

logger = logging.getLogger(__name__)


def atomic_operation(func):
    """
    Decorator committing the work done by func, or rolling all of it back.

    Usage:
        @atomic_operation
        def enter_player(tournament_id, player_id):
            db.session.add(Tournament_Players(...))
            return entry
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        from golf_scorer.extensions import db

        try:
            result = func(*args, **kwargs)
            db.session.commit()
            return result
        except Exception:
            db.session.rollback()
            raise

    return wrapper


def json_errors(func):
    """
    Decorator turning the usual failures of a JSON route into error responses.

    ValueError -> 400, LookupError -> 404, IntegrityError -> 409. The session
    is rolled back before responding so nothing from the failed request is
    committed later.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        from golf_scorer.extensions import db

        try:
            return func(*args, **kwargs)
        except exc.IntegrityError as e:
            db.session.rollback()
            logger.info(f"Rejected write in {func.__name__}: {e.orig}")
            return jsonify({'error': 'Conflicts with an existing record or a database constraint'}), 409
        except LookupError as e:
            db.session.rollback()
            return jsonify({'error': str(e).strip("'")}), 404
        except ValueError as e:
            db.session.rollback()
            return jsonify({'error': str(e)}), 400

    return wrapper
