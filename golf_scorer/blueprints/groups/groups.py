"""
Groups Blueprint

Playing groups of a tournament: tee times, members, the member who keeps
score and the PIN used for score entry.
"""

from flask import Blueprint, jsonify, request, current_app

from golf_scorer.extensions import db
from golf_scorer.models.players import Player
from golf_scorer.models.tournaments import Tournament
from golf_scorer.models.groups import Group, Group_Players
from golf_scorer.utils.active_tournament import get_active_tournament
from golf_scorer.utils.pins import generate_group_pin, find_group_by_pin
from golf_scorer.utils.transactions import json_errors
from golf_scorer.utils.request_helpers import (
    get_payload, require_fields, parse_int, parse_time, parse_bool
)

groups_bp = Blueprint('groups', __name__)


def _add_member(group, player_id, is_scorer=False):
    player = Player.query.filter_by(id=player_id).first()
    if not player:
        raise LookupError(f"Player with ID {player_id} not found")
    member = Group_Players(group_id=group.id, player_id=player.id, is_scorer=is_scorer)
    db.session.add(member)
    return member


def _next_group_number(tournament_id):
    numbers = [g.group_number for g in Group.query.filter_by(tournament_id=tournament_id).all()]
    return max(numbers, default=0) + 1


@groups_bp.route('/tournament/<tournament_id>', methods=['GET'])
def list_groups(tournament_id):
    """
    Groups of a tournament ordered by group number.

    Query Parameters:
        - include_pin: also return each group's PIN
    """
    tournament = Tournament.query.get_or_404(tournament_id)
    include_pin = parse_bool(request.args.get('include_pin', 'false'))
    return jsonify({'groups': [g.to_dict(include_pin=include_pin) for g in tournament.groups]})


@groups_bp.route('/', methods=['POST'])
@json_errors
def add_group():
    """
    Create a group.

    JSON Fields:
        - tournament_id: required
        - group_number: defaults to the next free number
        - name, tee_time (HH:MM): optional
        - pin: defaults to a random 4 digit PIN unique in the tournament
        - player_ids: members to add
        - scorer_id: member keeping score

    Returns:
        201 with the group including its PIN
    """
    payload = get_payload()
    require_fields(payload, 'tournament_id')
    tournament = Tournament.query.filter_by(id=payload['tournament_id']).first()
    if not tournament:
        raise LookupError(f"Tournament with ID {payload['tournament_id']} not found")

    group_number = payload.get('group_number')
    if group_number in (None, ''):
        group_number = _next_group_number(tournament.id)

    group = Group(
        tournament_id=tournament.id,
        group_number=parse_int(group_number, 'group_number'),
        name=payload.get('name'),
        tee_time=parse_time(payload.get('tee_time'), 'tee_time'),
        pin=str(payload['pin']) if payload.get('pin') else generate_group_pin(tournament.id)
    )
    db.session.add(group)
    db.session.flush()

    scorer_id = payload.get('scorer_id')
    for player_id in payload.get('player_ids') or []:
        _add_member(group, player_id, is_scorer=(player_id == scorer_id))

    db.session.commit()
    current_app.logger.info(f"Group {group.group_number} created for tournament '{tournament.name}'")
    return jsonify(group.to_dict(include_pin=True)), 201


@groups_bp.route('/lookup', methods=['POST'])
@json_errors
def lookup_group():
    """
    Find the group a PIN belongs to.

    JSON Fields:
        - pin: required
        - tournament_id: defaults to the active tournament

    Returns:
        The group and its players, 404 when the PIN matches no group
    """
    payload = get_payload()
    require_fields(payload, 'pin')

    tournament_id = payload.get('tournament_id')
    if not tournament_id:
        active = get_active_tournament()
        if not active:
            raise LookupError("No active tournament")
        tournament_id = active.id

    group = find_group_by_pin(tournament_id, payload['pin'])
    if not group:
        raise LookupError("No group found for this PIN")
    return jsonify(group.to_dict())


@groups_bp.route('/<group_id>', methods=['GET'])
def view_group(group_id):
    group = Group.query.get_or_404(group_id)
    return jsonify(group.to_dict())


@groups_bp.route('/<group_id>', methods=['PUT', 'PATCH'])
@json_errors
def edit_group(group_id):
    """Update group_number, name, tee_time or pin; regenerate_pin draws a new PIN."""
    group = Group.query.get_or_404(group_id)
    payload = get_payload()

    if 'group_number' in payload:
        group.group_number = parse_int(payload['group_number'], 'group_number')
    if 'name' in payload:
        group.name = payload['name']
    if 'tee_time' in payload:
        group.tee_time = parse_time(payload['tee_time'], 'tee_time')
    if 'pin' in payload:
        group.pin = str(payload['pin']) if payload['pin'] not in (None, '') else None
    if parse_bool(payload.get('regenerate_pin', False)):
        group.pin = generate_group_pin(group.tournament_id)

    db.session.commit()
    return jsonify(group.to_dict(include_pin=True))


@groups_bp.route('/<group_id>', methods=['DELETE'])
def delete_group(group_id):
    group = Group.query.get_or_404(group_id)
    db.session.delete(group)
    db.session.commit()
    return jsonify({'deleted': group_id})


@groups_bp.route('/<group_id>/players', methods=['POST'])
@json_errors
def add_group_player(group_id):
    """
    Add a player to the group.

    JSON Fields:
        - player_id: required
        - is_scorer: optional

    Returns:
        201 with the group, 409 if the player is already a member
    """
    group = Group.query.get_or_404(group_id)
    payload = get_payload()
    require_fields(payload, 'player_id')

    _add_member(group, payload['player_id'], is_scorer=parse_bool(payload.get('is_scorer', False)))
    db.session.commit()
    return jsonify(group.to_dict()), 201


@groups_bp.route('/<group_id>/players/<player_id>', methods=['DELETE'])
def remove_group_player(group_id, player_id):
    member = Group_Players.query.filter_by(group_id=group_id, player_id=player_id).first_or_404()
    db.session.delete(member)
    db.session.commit()
    return jsonify({'removed': player_id})


@groups_bp.route('/<group_id>/scorer', methods=['POST'])
@json_errors
def set_scorer(group_id):
    """Make one member the group's scorer; the other members stop being scorer."""
    group = Group.query.get_or_404(group_id)
    payload = get_payload()
    require_fields(payload, 'player_id')

    member_ids = {m.player_id for m in group.members}
    if payload['player_id'] not in member_ids:
        raise ValueError("Scorer must be a member of the group")

    for member in group.members:
        member.is_scorer = member.player_id == payload['player_id']
    db.session.commit()
    return jsonify(group.to_dict())
