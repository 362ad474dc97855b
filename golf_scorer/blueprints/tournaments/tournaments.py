"""
Tournaments Blueprint

This module handles tournament management: creation and editing, the
single active tournament, the course's holes, entered players and the
leaderboard.

Key Features:
    - Tournament CRUD with cascading delete
    - Activation: activating one tournament deactivates every other
    - Holes: par and stroke index per hole, range checked
    - Entrants: players entered into the tournament
    - Leaderboard: gross, net and Stableford standings

Workflow:
    1. Create the tournament with course ratings and dates
    2. Add the 18 holes
    3. Enter players, then create groups (see groups blueprint)
    4. Activate the tournament
    5. Groups submit scores (see scores blueprint)
    6. Follow the leaderboard, mark the tournament completed
"""

from flask import Blueprint, jsonify, request, current_app

from golf_scorer.extensions import db
from golf_scorer.models.players import Player
from golf_scorer.models.tournaments import Tournament, Hole, Tournament_Players
from golf_scorer.models.deletion_utils import delete_tournament_safely, get_tournament_deletion_preview
from golf_scorer.utils.active_tournament import (
    activate_tournament as activate, deactivate_tournament as deactivate, get_active_tournament
)
from golf_scorer.utils.scoring import build_leaderboard, duplicate_stroke_indexes, player_card
from golf_scorer.utils.transactions import json_errors
from golf_scorer.utils.request_helpers import (
    get_payload, require_fields, parse_date, parse_int, parse_decimal, parse_bool
)

tournaments_bp = Blueprint('tournaments', __name__)


def _apply_tournament_fields(tournament, payload):
    if 'name' in payload:
        tournament.name = payload['name']
    if 'year' in payload:
        tournament.year = parse_int(payload['year'], 'year')
    if 'course_name' in payload:
        tournament.course_name = payload['course_name']
    if 'slope_rating' in payload:
        tournament.slope_rating = parse_decimal(payload['slope_rating'], 'slope_rating')
    if 'course_rating' in payload:
        tournament.course_rating = parse_decimal(payload['course_rating'], 'course_rating')
    if 'start_date' in payload:
        tournament.start_date = parse_date(payload['start_date'], 'start_date')
    if 'end_date' in payload:
        tournament.end_date = parse_date(payload['end_date'], 'end_date')
    if 'status' in payload:
        tournament.status = payload['status']
    if 'logo_url' in payload:
        tournament.logo_url = payload['logo_url']
    if 'is_active' in payload:
        tournament.is_active = parse_bool(payload['is_active'])

    if not tournament.name or not tournament.course_name:
        raise ValueError("name and course_name cannot be empty")
    if tournament.start_date and tournament.end_date and tournament.end_date < tournament.start_date:
        raise ValueError("end_date cannot be before start_date")


@tournaments_bp.route('/', methods=['GET'])
def index():
    """
    List tournaments, newest season first.

    Query Parameters:
        - status: only tournaments with this status
        - year: only tournaments of this season
    """
    query = Tournament.query
    status = request.args.get('status')
    if status:
        query = query.filter_by(status=status)
    year = request.args.get('year', type=int)
    if year:
        query = query.filter_by(year=year)

    tournaments = query.order_by(Tournament.year.desc(), Tournament.name).all()
    return jsonify({'tournaments': [t.to_dict() for t in tournaments]})


@tournaments_bp.route('/', methods=['POST'])
@json_errors
def add_tournament():
    """
    Create a new tournament.

    JSON Fields:
        - name, year, course_name: required
        - slope_rating (default 113), course_rating (default 72)
        - start_date, end_date: YYYY-MM-DD
        - status: upcoming (default), active or completed
        - is_active: create it as the active tournament
        - logo_url

    Returns:
        201 with the created tournament
    """
    payload = get_payload()
    require_fields(payload, 'name', 'year', 'course_name')

    tournament = Tournament()
    _apply_tournament_fields(tournament, payload)
    db.session.add(tournament)
    db.session.commit()

    current_app.logger.info(f"Tournament '{tournament.name}' created")
    return jsonify(tournament.to_dict()), 201


@tournaments_bp.route('/active', methods=['GET'])
def active_tournament():
    tournament = get_active_tournament()
    if not tournament:
        return jsonify({'error': 'No active tournament'}), 404
    return jsonify(tournament.to_dict())


@tournaments_bp.route('/<tournament_id>', methods=['GET'])
def view_tournament(tournament_id):
    tournament = Tournament.query.get_or_404(tournament_id)
    data = tournament.to_dict()
    data['holes'] = [h.to_dict() for h in tournament.holes]
    data['total_par'] = tournament.total_par
    data['player_count'] = len(tournament.entries)
    return jsonify(data)


@tournaments_bp.route('/<tournament_id>', methods=['PUT', 'PATCH'])
@json_errors
def edit_tournament(tournament_id):
    """Update tournament details. Setting is_active here obeys the same exclusivity rule."""
    tournament = Tournament.query.get_or_404(tournament_id)
    _apply_tournament_fields(tournament, get_payload())
    db.session.commit()

    current_app.logger.info(f"Tournament '{tournament.name}' updated")
    return jsonify(tournament.to_dict())


@tournaments_bp.route('/<tournament_id>/deletion_preview', methods=['GET'])
def deletion_preview(tournament_id):
    preview = get_tournament_deletion_preview(tournament_id)
    if preview is None:
        return jsonify({'error': f"Tournament with ID {tournament_id} not found"}), 404
    return jsonify(preview)


@tournaments_bp.route('/<tournament_id>', methods=['DELETE'])
def delete_tournament(tournament_id):
    """
    Delete a tournament and all related data.

    Cascade Deletions:
        - Hole (and the scores on those holes)
        - Tournament_Players
        - Group (and its Group_Players)
        - Score
    """
    Tournament.query.get_or_404(tournament_id)
    result = delete_tournament_safely(tournament_id)
    if not result.success:
        return jsonify(result.to_dict()), 409
    return jsonify(result.to_dict())


@tournaments_bp.route('/<tournament_id>/activate', methods=['POST'])
@json_errors
def activate_tournament(tournament_id):
    tournament = activate(tournament_id)
    return jsonify(tournament.to_dict())


@tournaments_bp.route('/<tournament_id>/deactivate', methods=['POST'])
@json_errors
def deactivate_tournament(tournament_id):
    tournament = deactivate(tournament_id)
    return jsonify(tournament.to_dict())


# Holes

@tournaments_bp.route('/<tournament_id>/holes', methods=['GET'])
def list_holes(tournament_id):
    tournament = Tournament.query.get_or_404(tournament_id)
    return jsonify({
        'holes': [h.to_dict() for h in tournament.holes],
        'total_par': tournament.total_par,
        'duplicate_stroke_indexes': duplicate_stroke_indexes(tournament),
    })


@tournaments_bp.route('/<tournament_id>/holes', methods=['POST'])
@json_errors
def add_holes(tournament_id):
    """
    Add one hole, or several at once.

    JSON Body:
        {"hole_number": 1, "par": 4, "stroke_index": 7}
        or {"holes": [{...}, {...}]}

    All holes of one request are written together; a duplicate hole number
    rejects the whole request with 409.

    Returns:
        201 with the created holes
    """
    tournament = Tournament.query.get_or_404(tournament_id)
    payload = get_payload()
    hole_rows = payload.get('holes') if isinstance(payload.get('holes'), list) else [payload]

    created = []
    for row in hole_rows:
        require_fields(row, 'hole_number', 'par', 'stroke_index')
        hole = Hole(
            tournament_id=tournament.id,
            hole_number=parse_int(row['hole_number'], 'hole_number'),
            par=parse_int(row['par'], 'par'),
            stroke_index=parse_int(row['stroke_index'], 'stroke_index')
        )
        db.session.add(hole)
        created.append(hole)
    db.session.commit()

    clashes = duplicate_stroke_indexes(tournament)
    if clashes:
        current_app.logger.warning(
            f"Tournament '{tournament.name}' has holes sharing a stroke index: {clashes}"
        )

    return jsonify({
        'holes': [h.to_dict() for h in created],
        'duplicate_stroke_indexes': clashes,
    }), 201


@tournaments_bp.route('/<tournament_id>/holes/<hole_id>', methods=['PUT', 'PATCH'])
@json_errors
def edit_hole(tournament_id, hole_id):
    hole = Hole.query.filter_by(id=hole_id, tournament_id=tournament_id).first_or_404()
    payload = get_payload()

    for field in ('hole_number', 'par', 'stroke_index'):
        if field in payload:
            setattr(hole, field, parse_int(payload[field], field))
    db.session.commit()
    return jsonify(hole.to_dict())


@tournaments_bp.route('/<tournament_id>/holes/<hole_id>', methods=['DELETE'])
def delete_hole(tournament_id, hole_id):
    """Delete a hole; its scores go with it."""
    hole = Hole.query.filter_by(id=hole_id, tournament_id=tournament_id).first_or_404()
    removed_scores = len(hole.scores)
    db.session.delete(hole)
    db.session.commit()
    return jsonify({'deleted': hole_id, 'scores_deleted': removed_scores})


# Entrants

@tournaments_bp.route('/<tournament_id>/players', methods=['GET'])
def list_entrants(tournament_id):
    tournament = Tournament.query.get_or_404(tournament_id)
    players = sorted((e.player for e in tournament.entries), key=lambda p: p.name)
    return jsonify({'players': [p.to_dict() for p in players]})


@tournaments_bp.route('/<tournament_id>/players', methods=['POST'])
@json_errors
def add_entrant(tournament_id):
    """
    Enter a player into the tournament.

    JSON Fields:
        - player_id: required

    Returns:
        201 on entry, 409 if the player is already entered
    """
    tournament = Tournament.query.get_or_404(tournament_id)
    payload = get_payload()
    require_fields(payload, 'player_id')

    player = Player.query.filter_by(id=payload['player_id']).first()
    if not player:
        raise LookupError(f"Player with ID {payload['player_id']} not found")

    entry = Tournament_Players(tournament_id=tournament.id, player_id=player.id)
    db.session.add(entry)
    db.session.commit()
    return jsonify({'tournament_id': tournament.id, 'player': player.to_dict()}), 201


@tournaments_bp.route('/<tournament_id>/players/<player_id>', methods=['DELETE'])
def remove_entrant(tournament_id, player_id):
    entry = Tournament_Players.query.filter_by(
        tournament_id=tournament_id, player_id=player_id
    ).first_or_404()
    db.session.delete(entry)
    db.session.commit()
    return jsonify({'removed': player_id})


# Leaderboard

@tournaments_bp.route('/<tournament_id>/leaderboard', methods=['GET'])
@json_errors
def leaderboard(tournament_id):
    """
    Standings of the tournament.

    Query Parameters:
        - sort: stableford (default), net or gross
    """
    tournament = Tournament.query.get_or_404(tournament_id)
    sort_by = request.args.get('sort', 'stableford')
    return jsonify({
        'tournament': tournament.to_dict(),
        'sort': sort_by,
        'leaderboard': build_leaderboard(tournament, sort_by=sort_by),
    })


@tournaments_bp.route('/<tournament_id>/players/<player_id>/card', methods=['GET'])
def scorecard(tournament_id, player_id):
    tournament = Tournament.query.get_or_404(tournament_id)
    player = Player.query.get_or_404(player_id)
    return jsonify(player_card(tournament, player))
