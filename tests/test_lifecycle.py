"""Tests for the match state machine."""

from __future__ import annotations

from datetime import datetime
from types import SimpleNamespace

import pytest

from domain.errors import InvalidTransitionError, ValidationError
from domain.lifecycle import (
    MatchStatus,
    can_transition,
    ensure_transition,
    is_active,
    mark_finished,
    mark_started,
    validate_winner_team,
)

NOW = datetime(2026, 1, 1, 19, 0, 0)


def _match(status: MatchStatus) -> SimpleNamespace:
    return SimpleNamespace(id=1, status=status, started_at=None, ended_at=None, winner_team=None)


def test_forward_transitions_are_allowed() -> None:
    assert can_transition(MatchStatus.SCHEDULED, MatchStatus.ONGOING)
    assert can_transition(MatchStatus.ONGOING, MatchStatus.FINISHED)
    assert can_transition(MatchStatus.SCHEDULED, MatchStatus.FINISHED)


def test_finished_is_terminal() -> None:
    for target in MatchStatus:
        assert not can_transition(MatchStatus.FINISHED, target)


def test_backward_transitions_are_rejected() -> None:
    assert not can_transition(MatchStatus.ONGOING, MatchStatus.SCHEDULED)
    assert not can_transition(MatchStatus.ONGOING, MatchStatus.ONGOING)
    with pytest.raises(InvalidTransitionError, match="match_id=5"):
        ensure_transition(MatchStatus.ONGOING, MatchStatus.SCHEDULED, match_id=5)


def test_active_statuses_occupy_courts() -> None:
    assert is_active(MatchStatus.SCHEDULED)
    assert is_active(MatchStatus.ONGOING)
    assert not is_active(MatchStatus.FINISHED)


def test_mark_started_stamps_start_time() -> None:
    match = _match(MatchStatus.SCHEDULED)
    mark_started(match, NOW)
    assert match.status is MatchStatus.ONGOING
    assert match.started_at == NOW


def test_mark_started_twice_fails() -> None:
    match = _match(MatchStatus.ONGOING)
    with pytest.raises(InvalidTransitionError):
        mark_started(match, NOW)


def test_mark_finished_from_scheduled_skips_ongoing() -> None:
    match = _match(MatchStatus.SCHEDULED)
    mark_finished(match, 2, NOW)
    assert match.status is MatchStatus.FINISHED
    assert match.winner_team == 2
    assert match.ended_at == NOW
    assert match.started_at is None


def test_mark_finished_on_finished_match_fails() -> None:
    match = _match(MatchStatus.FINISHED)
    with pytest.raises(InvalidTransitionError):
        mark_finished(match, 1, NOW)


@pytest.mark.parametrize("winner_team", [0, 3, True, None])
def test_validate_winner_team_rejects_bad_values(winner_team: object) -> None:
    with pytest.raises(ValidationError):
        validate_winner_team(winner_team)  # type: ignore[arg-type]


def test_validate_winner_team_accepts_one_and_two() -> None:
    assert validate_winner_team(1) == 1
    assert validate_winner_team(2) == 2
