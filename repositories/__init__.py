"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.session_repository import SessionRepository

__all__ = [
    "BaseRepository",
    "SessionRepository",
]
