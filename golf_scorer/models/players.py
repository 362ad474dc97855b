"""Player Models - Golfers who can be entered into tournaments.

Key Models:
    Player: A golfer with a handicap index and optional profile details

A player exists independently of any tournament. Entries into tournaments
(Tournament_Players), group memberships (Group_Players) and scores all hang
off the player and are removed with it.
"""

from ..extensions import db
from datetime import datetime
import uuid
import pytz

# Define EST timezone
EST = pytz.timezone('US/Eastern')


class Player(db.Model):
    """Golfer with handicap index and profile details.

    Columns:
        id: Primary key (UUID string)
        name: Display name (indexed for lookups)
        handicap: Handicap index (Numeric), negative for plus handicaps
        cdh_number: Official handicap reference number (nullable)
        bio: Free text biography (nullable)
        photo_url: Profile photo location (nullable)
        created_at: When the player was created (DateTime, EST)
        updated_at: Refreshed on every update (DateTime, EST)

    Relationships:
        tournament_entries: Tournament_Players rows (cascade delete)
        group_memberships: Group_Players rows (cascade delete)
        scores: Score rows (cascade delete)
    """
    __tablename__ = 'players'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.Text, nullable=False, index=True)
    handicap = db.Column(db.Numeric, nullable=False)
    cdh_number = db.Column(db.Text, nullable=True)
    bio = db.Column(db.Text, nullable=True)
    photo_url = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(EST), nullable=False)
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(EST),
        onupdate=lambda: datetime.now(EST),
        nullable=False
    )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'handicap': float(self.handicap) if self.handicap is not None else None,
            'cdh_number': self.cdh_number,
            'bio': self.bio,
            'photo_url': self.photo_url,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
