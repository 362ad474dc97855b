"""Group Models - Playing groups within a tournament.

Key Models:
    Group: A playing group (tee time, number, score entry PIN)
    Group_Players: Membership of a player in a group

Score Entry:
    Each group carries a short PIN. Whoever holds the PIN can enter scores
    for the members of that group; the member flagged is_scorer is the one
    expected to do so on the course.
"""

from ..extensions import db
from datetime import datetime
import uuid
import pytz

# Define EST timezone
EST = pytz.timezone('US/Eastern')


class Group(db.Model):
    """Playing group of a tournament.

    Columns:
        id: Primary key (UUID string)
        tournament_id: Owning tournament (cascade delete)
        group_number: Unique within the tournament
        name: Optional display name
        tee_time: Time of day the group tees off (nullable)
        pin: Score entry code, unique within the tournament (nullable)
        created_at: When the group was created (DateTime, EST)

    Relationships:
        tournament: Tournament (backref: groups)
        members: Group_Players rows (cascade delete)
    """
    __tablename__ = 'groups'
    __table_args__ = (
        db.UniqueConstraint('tournament_id', 'group_number', name='uq_groups_tournament_group_number'),
        db.UniqueConstraint('tournament_id', 'pin', name='uq_groups_tournament_pin'),
    )

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tournament_id = db.Column(
        db.String(36), db.ForeignKey('tournaments.id', ondelete='CASCADE'), nullable=False, index=True
    )
    group_number = db.Column(db.Integer, nullable=False)
    name = db.Column(db.Text, nullable=True)
    tee_time = db.Column(db.Time, nullable=True)
    pin = db.Column(db.Text, nullable=True, index=True)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(EST), nullable=False)

    tournament = db.relationship(
        'Tournament', foreign_keys=[tournament_id],
        backref=db.backref('groups', cascade='all, delete', order_by='Group.group_number')
    )
    members = db.relationship('Group_Players', backref='group', cascade='all, delete')

    @property
    def scorer(self):
        for member in self.members:
            if member.is_scorer:
                return member.player
        return None

    def to_dict(self, include_pin=False):
        data = {
            'id': self.id,
            'tournament_id': self.tournament_id,
            'group_number': self.group_number,
            'name': self.name,
            'tee_time': self.tee_time.strftime('%H:%M') if self.tee_time else None,
            'players': [
                {'id': m.player_id, 'name': m.player.name, 'is_scorer': bool(m.is_scorer)}
                for m in self.members
            ],
        }
        if include_pin:
            data['pin'] = self.pin
        return data


class Group_Players(db.Model):
    """Membership of a player in a group.

    One row per (group, player). is_scorer marks the member entering scores.
    """
    __tablename__ = 'group_players'
    __table_args__ = (
        db.UniqueConstraint('group_id', 'player_id', name='uq_group_players_group_player'),
    )

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    group_id = db.Column(
        db.String(36), db.ForeignKey('groups.id', ondelete='CASCADE'), nullable=False, index=True
    )
    player_id = db.Column(
        db.String(36), db.ForeignKey('players.id', ondelete='CASCADE'), nullable=False, index=True
    )
    is_scorer = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(EST), nullable=False)

    player = db.relationship(
        'Player', foreign_keys=[player_id],
        backref=db.backref('group_memberships', cascade='all, delete')
    )
