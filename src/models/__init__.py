"""ORM models."""

from models.base import Base
from models.match import Match
from models.play_session import PlaySession
from models.player import Player
from models.queue_entry import QueueEntry
from models.rating_history import RatingHistoryEntry

__all__ = [
    "Base",
    "Match",
    "PlaySession",
    "Player",
    "QueueEntry",
    "RatingHistoryEntry",
]
