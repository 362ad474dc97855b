"""
Scores Blueprint

Hole by hole gross score entry. Scores are submitted with the group PIN and
only for members of that group; re-submitting a hole corrects the earlier
score instead of creating a second one.
"""

from flask import Blueprint, jsonify, request, current_app

from golf_scorer.extensions import db
from golf_scorer.models.tournaments import Tournament, Hole
from golf_scorer.models.scores import Score
from golf_scorer.utils.active_tournament import get_active_tournament
from golf_scorer.utils.pins import find_group_by_pin
from golf_scorer.utils.scoring import stage_score
from golf_scorer.utils.transactions import json_errors
from golf_scorer.utils.request_helpers import get_payload, require_fields, parse_int

scores_bp = Blueprint('scores', __name__)


@scores_bp.route('/tournament/<tournament_id>', methods=['GET'])
def list_scores(tournament_id):
    """
    Scores entered for a tournament.

    Query Parameters:
        - player_id: only this player's scores
    """
    tournament = Tournament.query.get_or_404(tournament_id)
    query = Score.query.filter_by(tournament_id=tournament.id)
    player_id = request.args.get('player_id')
    if player_id:
        query = query.filter_by(player_id=player_id)
    return jsonify({'scores': [s.to_dict() for s in query.all()]})


def _resolve_hole_id(tournament_id, entry):
    if entry.get('hole_id'):
        return entry['hole_id']
    hole_number = parse_int(entry.get('hole_number'), 'hole_number')
    hole = Hole.query.filter_by(tournament_id=tournament_id, hole_number=hole_number).first()
    if not hole:
        raise LookupError(f"Hole {hole_number} not found in this tournament")
    return hole.id


@scores_bp.route('/submit', methods=['POST'])
@json_errors
def submit_scores():
    """
    Enter or correct scores for members of a group.

    JSON Fields:
        - pin: group PIN (required)
        - tournament_id: defaults to the active tournament
        - player_id, hole_id or hole_number, gross_score: one score
        - scores: list of {player_id, hole_id|hole_number, gross_score}
          to submit several at once

    All scores of one request are committed together.

    Returns:
        200 with the stored scores and how many were created or updated,
        403 when the PIN is wrong or a player is not in the PIN's group
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
        current_app.logger.warning(f"Score submission with unknown PIN for tournament {tournament_id}")
        return jsonify({'error': 'Invalid PIN'}), 403

    entries = payload['scores'] if isinstance(payload.get('scores'), list) else [payload]
    member_ids = {m.player_id for m in group.members}

    stored = []
    created_count = 0
    for entry in entries:
        require_fields(entry, 'player_id')
        if entry['player_id'] not in member_ids:
            db.session.rollback()
            return jsonify({'error': 'Player is not a member of this group'}), 403

        score, created = stage_score(
            tournament_id,
            entry['player_id'],
            _resolve_hole_id(tournament_id, entry),
            entry.get('gross_score')
        )
        stored.append(score)
        created_count += int(created)

    db.session.commit()
    return jsonify({
        'scores': [s.to_dict() for s in stored],
        'created': created_count,
        'updated': len(stored) - created_count,
    })
