"""Match state machine: SCHEDULED -> ONGOING -> FINISHED."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from domain.errors import InvalidTransitionError, ValidationError

if TYPE_CHECKING:
    from models.match import Match


class MatchStatus(str, Enum):
    """Progress of one doubles match."""

    SCHEDULED = "SCHEDULED"
    ONGOING = "ONGOING"
    FINISHED = "FINISHED"


# Starting a match is optional, so SCHEDULED may finish directly.
_TRANSITIONS: dict[MatchStatus, frozenset[MatchStatus]] = {
    MatchStatus.SCHEDULED: frozenset({MatchStatus.ONGOING, MatchStatus.FINISHED}),
    MatchStatus.ONGOING: frozenset({MatchStatus.FINISHED}),
    MatchStatus.FINISHED: frozenset(),
}

ACTIVE_STATUSES: tuple[MatchStatus, ...] = (MatchStatus.SCHEDULED, MatchStatus.ONGOING)
WINNER_TEAMS: tuple[int, ...] = (1, 2)


def is_active(status: MatchStatus) -> bool:
    """Whether a match in this status occupies its court."""
    return status in ACTIVE_STATUSES


def can_transition(current: MatchStatus, target: MatchStatus) -> bool:
    return target in _TRANSITIONS[current]


def ensure_transition(current: MatchStatus, target: MatchStatus, *, match_id: int | None = None) -> None:
    if not can_transition(current, target):
        label = f"match_id={match_id}" if match_id is not None else "match"
        raise InvalidTransitionError(
            f"{label} cannot move from {current.value} to {target.value}"
        )


def validate_winner_team(winner_team: int) -> int:
    if isinstance(winner_team, bool) or winner_team not in WINNER_TEAMS:
        raise ValidationError(f"winner_team must be 1 or 2, got {winner_team!r}")
    return int(winner_team)


def mark_started(match: Match, now: datetime) -> None:
    ensure_transition(match.status, MatchStatus.ONGOING, match_id=match.id)
    match.status = MatchStatus.ONGOING
    match.started_at = now


def mark_finished(match: Match, winner_team: int, now: datetime) -> None:
    ensure_transition(match.status, MatchStatus.FINISHED, match_id=match.id)
    match.status = MatchStatus.FINISHED
    match.winner_team = validate_winner_team(winner_team)
    match.ended_at = now


__all__ = [
    "ACTIVE_STATUSES",
    "MatchStatus",
    "WINNER_TEAMS",
    "can_transition",
    "ensure_transition",
    "is_active",
    "mark_finished",
    "mark_started",
    "validate_winner_team",
]
