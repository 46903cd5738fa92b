"""Database repository helpers."""

from __future__ import annotations

from dataclasses import dataclass, field

from repositories.matches import MatchRepository
from repositories.play_sessions import PlaySessionRepository
from repositories.players import PlayerRepository
from repositories.queue import QueueRepository
from repositories.rating_history import RatingHistoryRepository


@dataclass(frozen=True)
class Repositories:
    """One repository per entity, injected into the engine services."""

    players: PlayerRepository = field(default_factory=PlayerRepository)
    sessions: PlaySessionRepository = field(default_factory=PlaySessionRepository)
    matches: MatchRepository = field(default_factory=MatchRepository)
    queue: QueueRepository = field(default_factory=QueueRepository)
    rating_history: RatingHistoryRepository = field(default_factory=RatingHistoryRepository)


__all__ = [
    "MatchRepository",
    "PlayerRepository",
    "PlaySessionRepository",
    "QueueRepository",
    "RatingHistoryRepository",
    "Repositories",
]
