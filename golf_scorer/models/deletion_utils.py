"""
Utility functions for deleting players and tournaments with all their related data.
Dependent rows go through the ORM cascades; the counts are collected first so
callers can show what a deletion removed (or would remove).
"""

from ..extensions import db
from .players import Player
from .tournaments import Tournament, Hole, Tournament_Players
from .groups import Group, Group_Players
from .scores import Score
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import logging

logger = logging.getLogger(__name__)


class DeletionResult:
    """Class to track deletion results and statistics"""
    def __init__(self):
        self.success = True
        self.errors = []
        self.deleted_counts = {}

    def add_deleted(self, model_name, count):
        self.deleted_counts[model_name] = self.deleted_counts.get(model_name, 0) + count

    def add_error(self, error_msg):
        # nothing was deleted once the transaction is rolled back
        self.success = False
        self.errors.append(error_msg)
        self.deleted_counts = {}

    def get_summary(self):
        if self.success:
            total_deleted = sum(self.deleted_counts.values())
            return f"Successfully deleted {total_deleted} records across {len(self.deleted_counts)} tables"
        else:
            return f"Deletion failed with {len(self.errors)} errors"

    def to_dict(self):
        return {
            'success': self.success,
            'summary': self.get_summary(),
            'deleted_counts': self.deleted_counts,
            'errors': self.errors,
        }


def _tournament_counts(tournament_id):
    group_ids = [g.id for g in Group.query.filter_by(tournament_id=tournament_id).all()]
    group_players = 0
    if group_ids:
        group_players = Group_Players.query.filter(Group_Players.group_id.in_(group_ids)).count()

    return {
        'Holes': Hole.query.filter_by(tournament_id=tournament_id).count(),
        'Tournament_Players': Tournament_Players.query.filter_by(tournament_id=tournament_id).count(),
        'Groups': len(group_ids),
        'Group_Players': group_players,
        'Scores': Score.query.filter_by(tournament_id=tournament_id).count(),
    }


def _player_counts(player_id):
    return {
        'Tournament_Players': Tournament_Players.query.filter_by(player_id=player_id).count(),
        'Group_Players': Group_Players.query.filter_by(player_id=player_id).count(),
        'Scores': Score.query.filter_by(player_id=player_id).count(),
    }


def get_tournament_deletion_preview(tournament_id):
    """
    Get a preview of what would be deleted when deleting a tournament.
    Returns a dictionary with counts of related records, or None if not found.
    """
    tournament = Tournament.query.filter_by(id=tournament_id).first()
    if not tournament:
        return None

    counts = _tournament_counts(tournament_id)
    return {
        'tournament_name': tournament.name,
        'is_active': bool(tournament.is_active),
        'counts': counts,
        'total_related': sum(counts.values()),
    }


def get_player_deletion_preview(player_id):
    """
    Get a preview of what would be deleted when deleting a player.
    Returns a dictionary with counts of related records, or None if not found.
    """
    player = Player.query.filter_by(id=player_id).first()
    if not player:
        return None

    counts = _player_counts(player_id)
    return {
        'player_name': player.name,
        'counts': counts,
        'total_related': sum(counts.values()),
    }


def delete_tournament_safely(tournament_id):
    """
    Delete a tournament together with its holes, entries, groups (and their
    members) and scores.
    Returns DeletionResult object with success status and details.
    """
    result = DeletionResult()

    try:
        tournament = Tournament.query.filter_by(id=tournament_id).first()
        if not tournament:
            result.add_error(f"Tournament with ID {tournament_id} not found")
            return result

        tournament_name = tournament.name
        for model_name, count in _tournament_counts(tournament_id).items():
            result.add_deleted(model_name, count)

        db.session.delete(tournament)
        result.add_deleted('Tournament', 1)
        db.session.commit()

        logger.info(f"Deleted tournament '{tournament_name}': {result.get_summary()}")
        return result

    except IntegrityError as e:
        db.session.rollback()
        result.add_error(f"Database integrity error when deleting tournament {tournament_id}: {str(e)}")
        return result
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Unexpected error when deleting tournament {tournament_id}: {e}")
        result.add_error(f"Unexpected error when deleting tournament {tournament_id}: {str(e)}")
        return result


def delete_player_safely(player_id):
    """
    Delete a player together with their tournament entries, group memberships
    and scores. Other players' rows are untouched.
    Returns DeletionResult object with success status and details.
    """
    result = DeletionResult()

    try:
        player = Player.query.filter_by(id=player_id).first()
        if not player:
            result.add_error(f"Player with ID {player_id} not found")
            return result

        player_name = player.name
        for model_name, count in _player_counts(player_id).items():
            result.add_deleted(model_name, count)

        db.session.delete(player)
        result.add_deleted('Player', 1)
        db.session.commit()

        logger.info(f"Deleted player '{player_name}': {result.get_summary()}")
        return result

    except IntegrityError as e:
        db.session.rollback()
        result.add_error(f"Database integrity error when deleting player {player_id}: {str(e)}")
        return result
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Unexpected error when deleting player {player_id}: {e}")
        result.add_error(f"Unexpected error when deleting player {player_id}: {str(e)}")
        return result
