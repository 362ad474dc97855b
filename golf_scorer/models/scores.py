"""Score Models - Gross strokes per player per hole.

Key Models:
    Score: Gross stroke count of one player on one hole of one tournament

A score is unique per (tournament, player, hole). Re-entering a score for
the same hole updates the existing row, see golf_scorer.utils.scoring.record_score.
Deleting the tournament, the player or the hole deletes the score.
"""

from ..extensions import db
from datetime import datetime
import uuid
import pytz

# Define EST timezone
EST = pytz.timezone('US/Eastern')


class Score(db.Model):
    """Gross score for one hole.

    Columns:
        id: Primary key (UUID string)
        tournament_id: Tournament (cascade delete)
        player_id: Player (cascade delete)
        hole_id: Hole (cascade delete)
        gross_score: Strokes taken (nullable while a card is incomplete)
        created_at, updated_at: Timestamps (DateTime, EST)

    Relationships:
        tournament: Tournament (backref: scores)
        player: Player (backref: scores)
        hole: Hole (backref: scores)
    """
    __tablename__ = 'scores'
    __table_args__ = (
        db.UniqueConstraint('tournament_id', 'player_id', 'hole_id', name='uq_scores_tournament_player_hole'),
    )

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tournament_id = db.Column(
        db.String(36), db.ForeignKey('tournaments.id', ondelete='CASCADE'), nullable=False, index=True
    )
    player_id = db.Column(
        db.String(36), db.ForeignKey('players.id', ondelete='CASCADE'), nullable=False, index=True
    )
    hole_id = db.Column(
        db.String(36), db.ForeignKey('holes.id', ondelete='CASCADE'), nullable=False, index=True
    )
    gross_score = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(EST), nullable=False)
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(EST),
        onupdate=lambda: datetime.now(EST),
        nullable=False
    )

    tournament = db.relationship(
        'Tournament', foreign_keys=[tournament_id],
        backref=db.backref('scores', cascade='all, delete')
    )
    player = db.relationship(
        'Player', foreign_keys=[player_id],
        backref=db.backref('scores', cascade='all, delete')
    )
    hole = db.relationship(
        'Hole', foreign_keys=[hole_id],
        backref=db.backref('scores', cascade='all, delete')
    )

    def to_dict(self):
        return {
            'id': self.id,
            'tournament_id': self.tournament_id,
            'player_id': self.player_id,
            'hole_id': self.hole_id,
            'hole_number': self.hole.hole_number if self.hole else None,
            'gross_score': self.gross_score,
        }
