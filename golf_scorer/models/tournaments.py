"""Tournament Models - Tournaments, their holes and their entrants.

Key Models:
    Tournament: A competition played on one course over a date range
    Hole: One of the (up to) 18 holes of the tournament's course
    Tournament_Players: Entry of a player into a tournament

Tournament Lifecycle:
    1. Tournament created (status 'upcoming', inactive)
    2. Holes added with par and stroke index
    3. Players entered (Tournament_Players) and grouped (Group, Group_Players)
    4. Tournament activated; only one tournament is active at a time
    5. Scores entered per hole
    6. Tournament marked 'completed'

Active Tournament:
    The is_active flag is exclusive across all tournaments. Setting it on one
    tournament demotes every other tournament in the same transaction, see
    golf_scorer.utils.active_tournament.
"""

from ..extensions import db
from sqlalchemy.orm import validates
from ..utils.request_helpers import parse_int
from datetime import datetime
import uuid
import pytz

# Define EST timezone
EST = pytz.timezone('US/Eastern')

TOURNAMENT_STATUSES = ('upcoming', 'active', 'completed')

MIN_HOLE_NUMBER = 1
MAX_HOLE_NUMBER = 18
MIN_PAR = 3
MAX_PAR = 5


class Tournament(db.Model):
    """Tournament played on one course.

    Columns:
        id: Primary key (UUID string)
        name: Tournament name
        year: Season the tournament belongs to (indexed)
        course_name: Course the tournament is played on
        slope_rating: Slope rating of the tees played (default 113)
        course_rating: Course rating of the tees played (default 72)
        start_date, end_date: Date range (nullable)
        is_active: Whether this is THE active tournament (at most one)
        status: 'upcoming', 'active' or 'completed'
        logo_url: Tournament logo (nullable)
        created_at, updated_at: Timestamps (DateTime, EST)

    Relationships:
        holes: Hole rows ordered by hole number (cascade delete)
        entries: Tournament_Players rows (cascade delete)
        groups: Group rows (cascade delete, see models.groups)
        scores: Score rows (cascade delete, see models.scores)

    Note:
        is_active and status are independent. Activation only touches
        is_active; status is maintained by whoever runs the tournament.
    """
    __tablename__ = 'tournaments'
    __table_args__ = (
        db.CheckConstraint(
            "status IN ('upcoming', 'active', 'completed')", name='ck_tournaments_status'
        ),
    )

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.Text, nullable=False)
    year = db.Column(db.Integer, nullable=False, index=True)
    course_name = db.Column(db.Text, nullable=False)
    slope_rating = db.Column(db.Numeric, default=113)
    course_rating = db.Column(db.Numeric, default=72)
    start_date = db.Column(db.Date, nullable=True)
    end_date = db.Column(db.Date, nullable=True)
    is_active = db.Column(db.Boolean, default=False, nullable=False, index=True)
    status = db.Column(db.String(20), default='upcoming', nullable=False, index=True)
    logo_url = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(EST), nullable=False)
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(EST),
        onupdate=lambda: datetime.now(EST),
        nullable=False
    )

    holes = db.relationship(
        'Hole', backref='tournament', cascade='all, delete', order_by='Hole.hole_number'
    )

    @validates('status')
    def validate_status(self, key, value):
        if value not in TOURNAMENT_STATUSES:
            raise ValueError(f"status must be one of {', '.join(TOURNAMENT_STATUSES)}")
        return value

    @property
    def total_par(self):
        return sum(hole.par for hole in self.holes)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'year': self.year,
            'course_name': self.course_name,
            'slope_rating': float(self.slope_rating) if self.slope_rating is not None else None,
            'course_rating': float(self.course_rating) if self.course_rating is not None else None,
            'start_date': self.start_date.isoformat() if self.start_date else None,
            'end_date': self.end_date.isoformat() if self.end_date else None,
            'is_active': bool(self.is_active),
            'status': self.status,
            'logo_url': self.logo_url,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


class Hole(db.Model):
    """A hole of the tournament's course.

    Columns:
        id: Primary key (UUID string)
        tournament_id: Owning tournament (cascade delete)
        hole_number: 1-18, unique within the tournament
        par: 3-5
        stroke_index: 1-18, difficulty ranking used for handicap strokes
        created_at: When the hole was created (DateTime, EST)

    Validation:
        Range checks are applied both by the model validators (ValueError on
        assignment) and by database check constraints (IntegrityError for
        writes that bypass the ORM).

        stroke_index is range checked only. Two holes of one tournament may
        share a stroke index; see golf_scorer.utils.scoring.duplicate_stroke_indexes.
    """
    __tablename__ = 'holes'
    __table_args__ = (
        db.UniqueConstraint('tournament_id', 'hole_number', name='uq_holes_tournament_hole_number'),
        db.CheckConstraint('hole_number >= 1 AND hole_number <= 18', name='ck_holes_hole_number'),
        db.CheckConstraint('par >= 3 AND par <= 5', name='ck_holes_par'),
        db.CheckConstraint('stroke_index >= 1 AND stroke_index <= 18', name='ck_holes_stroke_index'),
        db.Index('idx_holes_tournament', 'tournament_id', 'hole_number'),
    )

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tournament_id = db.Column(
        db.String(36), db.ForeignKey('tournaments.id', ondelete='CASCADE'), nullable=False
    )
    hole_number = db.Column(db.Integer, nullable=False)
    par = db.Column(db.Integer, nullable=False)
    stroke_index = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(EST), nullable=False)

    @validates('hole_number', 'stroke_index')
    def validate_hole_range(self, key, value):
        value = parse_int(value, key)
        if not MIN_HOLE_NUMBER <= value <= MAX_HOLE_NUMBER:
            raise ValueError(f"{key} must be between {MIN_HOLE_NUMBER} and {MAX_HOLE_NUMBER}")
        return value

    @validates('par')
    def validate_par(self, key, value):
        value = parse_int(value, key)
        if not MIN_PAR <= value <= MAX_PAR:
            raise ValueError(f"par must be between {MIN_PAR} and {MAX_PAR}")
        return value

    def to_dict(self):
        return {
            'id': self.id,
            'tournament_id': self.tournament_id,
            'hole_number': self.hole_number,
            'par': self.par,
            'stroke_index': self.stroke_index,
        }


class Tournament_Players(db.Model):
    """Entry of a player into a tournament.

    One row per (tournament, player); a second entry for the same pair is
    rejected with an IntegrityError.
    """
    __tablename__ = 'tournament_players'
    __table_args__ = (
        db.UniqueConstraint('tournament_id', 'player_id', name='uq_tournament_players_tournament_player'),
    )

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tournament_id = db.Column(
        db.String(36), db.ForeignKey('tournaments.id', ondelete='CASCADE'), nullable=False, index=True
    )
    player_id = db.Column(
        db.String(36), db.ForeignKey('players.id', ondelete='CASCADE'), nullable=False, index=True
    )
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(EST), nullable=False)

    tournament = db.relationship(
        'Tournament', foreign_keys=[tournament_id],
        backref=db.backref('entries', cascade='all, delete')
    )
    player = db.relationship(
        'Player', foreign_keys=[player_id],
        backref=db.backref('tournament_entries', cascade='all, delete')
    )
