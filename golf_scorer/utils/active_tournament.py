"""
Single active tournament.

At most one tournament has is_active = True. Whenever a flush writes a
tournament with the flag set, every other tournament is demoted in the same
transaction, before the triggering row is written. Rolling the transaction
back undoes the demotion together with the write.

The rule is applied by a before_flush listener so plain attribute writes
(`tournament.is_active = True; db.session.commit()`) are covered too. When
one flush carries several tournaments with the flag set, the one flagged
last wins. activate_tournament() is the named operation callers should prefer.
"""

from itertools import count
import logging

from sqlalchemy import event, select, update
from sqlalchemy.orm import Session

from golf_scorer.extensions import db
from golf_scorer.models.tournaments import Tournament
from golf_scorer.utils.transactions import atomic_operation

logger = logging.getLogger(__name__)

_activation_counter = count(1)


@event.listens_for(Tournament.is_active, 'set')
def _record_activation_order(target, value, oldvalue, initiator):
    if value:
        target._activation_order = next(_activation_counter)


def _activation_order(tournament):
    return getattr(tournament, '_activation_order', 0)


@event.listens_for(Session, 'before_flush')
def enforce_single_active_tournament(session, flush_context, instances):
    """Demote all other tournaments when one is written with is_active set."""
    activated = [
        obj for obj in list(session.dirty) + list(session.new)
        if isinstance(obj, Tournament) and obj.is_active and obj not in session.deleted
    ]
    if not activated:
        return

    winner = max(activated, key=_activation_order)

    for obj in list(session.identity_map.values()) + list(session.new):
        if isinstance(obj, Tournament) and obj is not winner and obj.is_active:
            obj.is_active = False

    stmt = update(Tournament).where(Tournament.is_active.is_(True))
    if winner.id is not None:
        stmt = stmt.where(Tournament.id != winner.id)
    session.execute(
        stmt.values(is_active=False).execution_options(synchronize_session=False)
    )


def get_active_tournament():
    """Return the active tournament, or None when no tournament is active."""
    return Tournament.query.filter_by(is_active=True).first()


def tournament_lock_statement():
    """SELECT ... FOR UPDATE over every tournament row, in id order."""
    return select(Tournament.id).order_by(Tournament.id).with_for_update()


@atomic_operation
def activate_tournament(tournament_id):
    """
    Make a tournament the single active tournament.

    Every tournament row is locked first (a no-op on SQLite), so a second
    activation waits for the first to commit and then demotes its winner.

    Raises:
        LookupError: no tournament with that id
    """
    db.session.execute(tournament_lock_statement()).all()

    tournament = db.session.get(Tournament, tournament_id)
    if not tournament:
        raise LookupError(f"Tournament with ID {tournament_id} not found")

    tournament.is_active = True
    logger.info(f"Activating tournament '{tournament.name}' ({tournament.id})")
    return tournament


@atomic_operation
def deactivate_tournament(tournament_id):
    """Clear the active flag of a tournament. Other tournaments are untouched."""
    tournament = Tournament.query.filter_by(id=tournament_id).first()
    if not tournament:
        raise LookupError(f"Tournament with ID {tournament_id} not found")

    if tournament.is_active:
        tournament.is_active = False
        logger.info(f"Deactivating tournament '{tournament.name}' ({tournament.id})")
    return tournament
