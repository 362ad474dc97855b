"""Database models of the golf-scorer application."""

from .players import Player
from .tournaments import Tournament, Hole, Tournament_Players
from .groups import Group, Group_Players
from .scores import Score
from .settings import App_Settings

__all__ = [
    'Player',
    'Tournament',
    'Hole',
    'Tournament_Players',
    'Group',
    'Group_Players',
    'Score',
    'App_Settings'
]
