"""
Score entry and leaderboard calculation.

Handicaps follow the World Handicap System:

    course handicap = handicap index * slope rating / 113 + (course rating - par)

rounded to the nearest whole number. The course handicap is spread over the
holes by stroke index: every hole gets course_handicap // 18 strokes and the
remaining strokes go to the hardest holes (stroke index 1 upwards). A plus
handicap gives strokes back starting at the easiest hole (stroke index 18).

Net score per hole is gross minus strokes received. Stableford points are
2 for a net par, one more per stroke under, one less per stroke over, never
below zero.
"""

from collections import defaultdict
from decimal import Decimal, ROUND_HALF_UP
import logging

from golf_scorer.extensions import db
from golf_scorer.models.players import Player
from golf_scorer.models.tournaments import Hole
from golf_scorer.models.scores import Score
from golf_scorer.utils.request_helpers import parse_int
from golf_scorer.utils.transactions import atomic_operation

logger = logging.getLogger(__name__)

STANDARD_SLOPE = Decimal(113)
HOLES_PER_ROUND = 18

LEADERBOARD_SORTS = ('stableford', 'net', 'gross')


def _to_decimal(value):
    return value if isinstance(value, Decimal) else Decimal(str(value))


def course_handicap(handicap_index, slope_rating=113, course_rating=None, par=None):
    """
    Playing strokes for a handicap index on a given course.

    The (course rating - par) term is skipped when either is unknown.
    """
    if handicap_index is None:
        return 0

    value = _to_decimal(handicap_index) * _to_decimal(slope_rating or STANDARD_SLOPE) / STANDARD_SLOPE
    if course_rating is not None and par:
        value += _to_decimal(course_rating) - _to_decimal(par)
    return int(value.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def strokes_received(playing_handicap, stroke_index):
    """Handicap strokes received on a hole with the given stroke index."""
    if playing_handicap >= 0:
        base, extra = divmod(playing_handicap, HOLES_PER_ROUND)
        return base + (1 if stroke_index <= extra else 0)

    base, extra = divmod(-playing_handicap, HOLES_PER_ROUND)
    return -(base + (1 if stroke_index > HOLES_PER_ROUND - extra else 0))


def stableford_points(par, net_score):
    return max(0, 2 + par - net_score)


def duplicate_stroke_indexes(tournament):
    """
    Stroke indexes used by more than one hole of the tournament.

    Returns:
        dict: {stroke_index: [hole_number, ...]} for every clash
    """
    by_index = defaultdict(list)
    for hole in tournament.holes:
        by_index[hole.stroke_index].append(hole.hole_number)
    return {si: sorted(numbers) for si, numbers in by_index.items() if len(numbers) > 1}


def stage_score(tournament_id, player_id, hole_id, gross_score):
    """
    Enter or correct a player's gross score on a hole without committing.

    The (tournament, player, hole) row is updated when it exists and created
    otherwise. gross_score None clears the hole. Callers commit, so several
    scores can be stored in one transaction.

    Returns:
        tuple: (Score, created)

    Raises:
        LookupError: unknown player or hole
        ValueError: hole of another tournament, a fractional score or a score below 1
    """
    hole = Hole.query.filter_by(id=hole_id).first()
    if not hole:
        raise LookupError(f"Hole with ID {hole_id} not found")
    if hole.tournament_id != tournament_id:
        raise ValueError(f"Hole {hole.hole_number} does not belong to this tournament")
    if not Player.query.filter_by(id=player_id).first():
        raise LookupError(f"Player with ID {player_id} not found")

    if gross_score is not None:
        gross_score = parse_int(gross_score, 'gross_score')
        if gross_score < 1:
            raise ValueError("gross_score must be at least 1")

    score = Score.query.filter_by(
        tournament_id=tournament_id, player_id=player_id, hole_id=hole_id
    ).first()
    created = score is None
    if created:
        score = Score(
            tournament_id=tournament_id,
            player_id=player_id,
            hole_id=hole_id,
            gross_score=gross_score
        )
        db.session.add(score)
    else:
        logger.debug(f"Correcting score {score.id}: {score.gross_score} -> {gross_score}")
        score.gross_score = gross_score

    return score, created


@atomic_operation
def record_score(tournament_id, player_id, hole_id, gross_score):
    """stage_score() followed by a commit; rolled back on any error."""
    return stage_score(tournament_id, player_id, hole_id, gross_score)


def player_card(tournament, player, holes=None):
    """
    Hole by hole card of one player.

    Returns:
        dict with course_handicap, holes (list of per-hole dicts for every
        hole of the tournament) and the totals over the holes played.
    """
    holes = holes if holes is not None else tournament.holes
    playing_handicap = course_handicap(
        player.handicap, tournament.slope_rating, tournament.course_rating,
        sum(h.par for h in holes)
    )
    gross_by_hole = {
        s.hole_id: s.gross_score
        for s in Score.query.filter_by(tournament_id=tournament.id, player_id=player.id).all()
        if s.gross_score is not None
    }

    card = []
    totals = {'holes_played': 0, 'gross': 0, 'net': 0, 'par': 0, 'stableford': 0}
    for hole in holes:
        strokes = strokes_received(playing_handicap, hole.stroke_index)
        gross = gross_by_hole.get(hole.id)
        entry = {
            'hole_number': hole.hole_number,
            'par': hole.par,
            'stroke_index': hole.stroke_index,
            'strokes_received': strokes,
            'gross': gross,
            'net': None,
            'stableford': None,
        }
        if gross is not None:
            net = gross - strokes
            points = stableford_points(hole.par, net)
            entry['net'] = net
            entry['stableford'] = points
            totals['holes_played'] += 1
            totals['gross'] += gross
            totals['net'] += net
            totals['par'] += hole.par
            totals['stableford'] += points
        card.append(entry)

    return {
        'player_id': player.id,
        'name': player.name,
        'handicap': float(player.handicap) if player.handicap is not None else None,
        'course_handicap': playing_handicap,
        'holes': card,
        'holes_played': totals['holes_played'],
        'gross': totals['gross'],
        'net': totals['net'],
        'gross_to_par': totals['gross'] - totals['par'],
        'net_to_par': totals['net'] - totals['par'],
        'stableford': totals['stableford'],
    }


def _ranking_value(row, sort_by):
    if sort_by == 'stableford':
        return -row['stableford']
    if sort_by == 'net':
        return row['net_to_par']
    return row['gross_to_par']


def build_leaderboard(tournament, sort_by='stableford'):
    """
    Leaderboard of a tournament.

    Every entered player (and anyone else holding a score in the tournament)
    gets a row with the totals of player_card(). Rows are ordered by
    Stableford points (highest first), net to par or gross to par (lowest
    first). Equal values share a position; players without a score yet come
    last with position None.
    """
    if sort_by not in LEADERBOARD_SORTS:
        raise ValueError(f"sort_by must be one of {', '.join(LEADERBOARD_SORTS)}")

    players = {entry.player_id: entry.player for entry in tournament.entries}
    for score in tournament.scores:
        players.setdefault(score.player_id, score.player)

    holes = list(tournament.holes)
    rows = []
    for player in players.values():
        row = player_card(tournament, player, holes)
        del row['holes']
        rows.append(row)

    rows.sort(key=lambda r: (r['holes_played'] == 0, _ranking_value(r, sort_by), r['name']))

    position = 0
    previous = None
    for index, row in enumerate(rows, start=1):
        if row['holes_played'] == 0:
            row['position'] = None
            continue
        value = _ranking_value(row, sort_by)
        if value != previous:
            position = index
            previous = value
        row['position'] = position

    return rows
