"""Read-only snapshots handed to callers and exporters."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from domain.lifecycle import MatchStatus
from models import Match, PlaySession, Player, QueueEntry, RatingHistoryEntry


@dataclass(frozen=True)
class PlayerView:
    id: int
    display_name: str
    rating: float

    @classmethod
    def from_model(cls, player: Player) -> PlayerView:
        return cls(id=player.id, display_name=player.display_name, rating=player.rating)


@dataclass(frozen=True)
class SessionView:
    id: int
    start_time: datetime
    end_time: datetime
    courts: int
    is_active: bool
    created_at: datetime

    @classmethod
    def from_model(cls, play_session: PlaySession) -> SessionView:
        return cls(
            id=play_session.id,
            start_time=play_session.start_time,
            end_time=play_session.end_time,
            courts=play_session.courts,
            is_active=play_session.is_active,
            created_at=play_session.created_at,
        )


@dataclass(frozen=True)
class QueueEntryView:
    session_id: int
    player_id: int
    position: int
    joined_at: datetime

    @classmethod
    def from_model(cls, entry: QueueEntry) -> QueueEntryView:
        return cls(
            session_id=entry.session_id,
            player_id=entry.player_id,
            position=entry.position,
            joined_at=entry.joined_at,
        )


@dataclass(frozen=True)
class MatchView:
    id: int
    session_id: int
    court: int
    status: MatchStatus
    team1: tuple[int, int]
    team2: tuple[int, int]
    winner_team: int | None
    created_at: datetime
    started_at: datetime | None
    ended_at: datetime | None

    @property
    def player_ids(self) -> tuple[int, int, int, int]:
        return self.team1 + self.team2

    @classmethod
    def from_model(cls, match: Match) -> MatchView:
        return cls(
            id=match.id,
            session_id=match.session_id,
            court=match.court,
            status=match.status,
            team1=match.team1,
            team2=match.team2,
            winner_team=match.winner_team,
            created_at=match.created_at,
            started_at=match.started_at,
            ended_at=match.ended_at,
        )


@dataclass(frozen=True)
class RatingHistoryView:
    player_id: int
    match_id: int | None
    change: float
    rating: float
    created_at: datetime

    @classmethod
    def from_model(cls, entry: RatingHistoryEntry) -> RatingHistoryView:
        return cls(
            player_id=entry.player_id,
            match_id=entry.match_id,
            change=entry.change,
            rating=entry.rating,
            created_at=entry.created_at,
        )


__all__ = [
    "MatchView",
    "PlayerView",
    "QueueEntryView",
    "RatingHistoryView",
    "SessionView",
]
