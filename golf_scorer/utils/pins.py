"""Group PIN generation and lookup for scoped score entry."""

import random

from golf_scorer.models.groups import Group

PIN_LENGTH = 4


def generate_group_pin(tournament_id, length=PIN_LENGTH):
    """Random numeric PIN not yet used by another group of the tournament."""
    used = {
        g.pin for g in Group.query.filter_by(tournament_id=tournament_id).all() if g.pin
    }
    if len(used) >= 10 ** length:
        raise ValueError("No free group PINs left for this tournament")

    while True:
        pin = ''.join(random.choices('0123456789', k=length))
        if pin not in used:
            return pin


def find_group_by_pin(tournament_id, pin):
    """Group of the tournament holding this PIN, or None."""
    if not pin:
        return None
    return Group.query.filter_by(tournament_id=tournament_id, pin=str(pin).strip()).first()
