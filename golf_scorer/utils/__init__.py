"""Utility modules for the golf-scorer application."""

from .transactions import (
    atomic_operation,
    json_errors
)

__all__ = [
    'atomic_operation',
    'json_errors'
]
