"""
Players Blueprint

CRUD for golfers. Deleting a player removes their tournament entries, group
memberships and scores.
"""

from flask import Blueprint, jsonify, current_app

from golf_scorer.extensions import db
from golf_scorer.models.players import Player
from golf_scorer.models.deletion_utils import delete_player_safely, get_player_deletion_preview
from golf_scorer.utils.transactions import json_errors
from golf_scorer.utils.request_helpers import get_payload, require_fields, parse_decimal

players_bp = Blueprint('players', __name__)

PLAYER_TEXT_FIELDS = ('name', 'cdh_number', 'bio', 'photo_url')


@players_bp.route('/', methods=['GET'])
def index():
    players = Player.query.order_by(Player.name).all()
    return jsonify({'players': [p.to_dict() for p in players]})


@players_bp.route('/', methods=['POST'])
@json_errors
def add_player():
    """
    Create a player.

    JSON Fields:
        - name: Display name (required)
        - handicap: Handicap index (required)
        - cdh_number, bio, photo_url: optional

    Returns:
        201 with the created player
    """
    payload = get_payload()
    require_fields(payload, 'name', 'handicap')

    player = Player(
        name=payload['name'].strip(),
        handicap=parse_decimal(payload['handicap'], 'handicap'),
        cdh_number=payload.get('cdh_number'),
        bio=payload.get('bio'),
        photo_url=payload.get('photo_url')
    )
    db.session.add(player)
    db.session.commit()

    current_app.logger.info(f"Player '{player.name}' created")
    return jsonify(player.to_dict()), 201


@players_bp.route('/<player_id>', methods=['GET'])
def view_player(player_id):
    player = Player.query.get_or_404(player_id)
    return jsonify(player.to_dict())


@players_bp.route('/<player_id>', methods=['PUT', 'PATCH'])
@json_errors
def edit_player(player_id):
    """Update any of name, handicap, cdh_number, bio, photo_url."""
    player = Player.query.get_or_404(player_id)
    payload = get_payload()

    for field in PLAYER_TEXT_FIELDS:
        if field in payload:
            setattr(player, field, payload[field])
    if 'handicap' in payload:
        handicap = parse_decimal(payload['handicap'], 'handicap')
        if handicap is None:
            raise ValueError("handicap cannot be empty")
        player.handicap = handicap
    if not player.name:
        raise ValueError("name cannot be empty")

    db.session.commit()
    return jsonify(player.to_dict())


@players_bp.route('/<player_id>/deletion_preview', methods=['GET'])
def deletion_preview(player_id):
    preview = get_player_deletion_preview(player_id)
    if preview is None:
        return jsonify({'error': f"Player with ID {player_id} not found"}), 404
    return jsonify(preview)


@players_bp.route('/<player_id>', methods=['DELETE'])
def delete_player(player_id):
    """
    Delete a player and everything that references them.

    Cascade Deletions:
        - Tournament_Players (tournament entries)
        - Group_Players (group memberships)
        - Score (all scores of the player)
    """
    Player.query.get_or_404(player_id)
    result = delete_player_safely(player_id)
    if not result.success:
        return jsonify(result.to_dict()), 409
    return jsonify(result.to_dict())
