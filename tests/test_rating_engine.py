"""Tests for applying match results to ratings."""

from __future__ import annotations

import pytest
from sqlalchemy.orm import Session, sessionmaker

from domain.engine import OpenPlayEngine
from domain.errors import ConflictError, InvalidTransitionError, NotFoundError, ValidationError
from domain.lifecycle import MatchStatus


def _ratings(engine: OpenPlayEngine) -> dict[int, float]:
    return {player.id: player.rating for player in engine.snapshot_players()}


def _single_match(engine: OpenPlayEngine, make_players, queue_players, ratings, courts: int = 5):
    session_id = engine.start_session(courts=courts).id
    player_ids = make_players(ratings)
    queue_players(session_id, player_ids)
    (match,) = engine.generate_matches(session_id)
    return session_id, player_ids, match


def test_even_match_moves_each_player_by_half_the_team_delta(
    engine: OpenPlayEngine, make_players, queue_players
) -> None:
    _, player_ids, match = _single_match(engine, make_players, queue_players, [1200.0] * 4)

    result = engine.ratings.finish(match.id, 1)

    ratings = _ratings(engine)
    assert [ratings[player_id] for player_id in match.team1] == pytest.approx([1208.0, 1208.0])
    assert [ratings[player_id] for player_id in match.team2] == pytest.approx([1192.0, 1192.0])
    assert [change.delta for change in result.changes] == pytest.approx([8.0, 8.0, -8.0, -8.0])
    assert result.match.status is MatchStatus.FINISHED
    assert result.match.winner_team == 1
    assert result.match.ended_at is not None


def test_applied_deltas_sum_to_zero(engine: OpenPlayEngine, make_players, queue_players) -> None:
    _, player_ids, match = _single_match(
        engine, make_players, queue_players, [1010.0, 1185.0, 1290.0, 1370.0]
    )
    before = _ratings(engine)

    result = engine.ratings.finish(match.id, 2)

    after = _ratings(engine)
    assert result.total_delta() == pytest.approx(0.0)
    assert sum(after[player_id] - before[player_id] for player_id in player_ids) == pytest.approx(0.0)


def test_finish_appends_one_history_row_per_player(
    engine: OpenPlayEngine, make_players, queue_players
) -> None:
    _, player_ids, match = _single_match(engine, make_players, queue_players, [1200.0] * 4)

    engine.finish_match(match.id, 2)

    for player_id in match.team1:
        (entry,) = engine.rating_history(player_id)
        assert entry.match_id == match.id
        assert entry.change == pytest.approx(-8.0)
        assert entry.rating == pytest.approx(1192.0)
    for player_id in match.team2:
        (entry,) = engine.rating_history(player_id)
        assert entry.change == pytest.approx(8.0)
        assert entry.rating == pytest.approx(1208.0)


def test_finish_from_ongoing(engine: OpenPlayEngine, make_players, queue_players) -> None:
    _, _, match = _single_match(engine, make_players, queue_players, [1200.0] * 4)
    engine.start_match(match.id)

    finished = engine.finish_match(match.id, 1)

    assert finished.status is MatchStatus.FINISHED
    assert finished.started_at is not None


def test_finishing_twice_fails_and_leaves_ratings_unchanged(
    engine: OpenPlayEngine, make_players, queue_players
) -> None:
    _, _, match = _single_match(engine, make_players, queue_players, [1200.0] * 4)
    engine.finish_match(match.id, 1)
    before = _ratings(engine)

    with pytest.raises(InvalidTransitionError):
        engine.finish_match(match.id, 2)

    assert _ratings(engine) == before
    for player_id in match.player_ids:
        assert len(engine.rating_history(player_id)) == 1


@pytest.mark.parametrize("winner_team", [0, 3])
def test_invalid_winner_team_is_rejected(
    engine: OpenPlayEngine, make_players, queue_players, winner_team: int
) -> None:
    _, _, match = _single_match(engine, make_players, queue_players, [1200.0] * 4)
    before = _ratings(engine)

    with pytest.raises(ValidationError):
        engine.finish_match(match.id, winner_team)

    assert _ratings(engine) == before
    assert engine.list_matches(match.session_id)[0].status is MatchStatus.SCHEDULED


def test_finish_unknown_match_raises(engine: OpenPlayEngine) -> None:
    with pytest.raises(NotFoundError):
        engine.finish_match(999, 1)


def test_failed_history_write_rolls_back_everything(
    engine: OpenPlayEngine, make_players, queue_players, monkeypatch: pytest.MonkeyPatch
) -> None:
    _, _, match = _single_match(engine, make_players, queue_players, [1200.0] * 4)
    before = _ratings(engine)

    def _fail(*args, **kwargs) -> None:
        raise RuntimeError("storage unavailable")

    monkeypatch.setattr(engine.repositories.rating_history, "append_many", _fail)

    with pytest.raises(RuntimeError, match="storage unavailable"):
        engine.finish_match(match.id, 1)

    assert _ratings(engine) == before
    assert engine.list_matches(match.session_id)[0].status is MatchStatus.SCHEDULED


def test_finish_backfills_freed_court(engine: OpenPlayEngine, make_players, queue_players) -> None:
    session_id = engine.start_session(courts=1).id
    player_ids = make_players([1200.0 + index * 10 for index in range(8)])
    queue_players(session_id, player_ids)
    (match,) = engine.generate_matches(session_id)
    assert len(engine.list_queue(session_id)) == 4

    result = engine.ratings.finish(match.id, 1)

    assert len(result.backfilled) == 1
    backfill = result.backfilled[0]
    assert backfill.court == match.court == 1
    assert backfill.status is MatchStatus.SCHEDULED
    assert set(backfill.player_ids) == set(player_ids[4:])
    assert engine.list_queue(session_id) == []


def test_finish_without_waiting_players_backfills_nothing(
    engine: OpenPlayEngine, make_players, queue_players
) -> None:
    _, _, match = _single_match(engine, make_players, queue_players, [1200.0] * 4)
    result = engine.ratings.finish(match.id, 1)
    assert result.backfilled == ()


def test_finish_in_ended_session_skips_backfill(engine: OpenPlayEngine, make_players, queue_players) -> None:
    session_id = engine.start_session(courts=1).id
    player_ids = make_players([1200.0 + index for index in range(8)])
    queue_players(session_id, player_ids)
    (match,) = engine.generate_matches(session_id)
    engine.end_session(session_id)

    result = engine.ratings.finish(match.id, 2)

    assert result.match.status is MatchStatus.FINISHED
    assert result.backfilled == ()
    assert len(engine.list_queue(session_id)) == 4


def test_finished_players_can_rejoin(engine: OpenPlayEngine, make_players, queue_players) -> None:
    session_id, player_ids, match = _single_match(engine, make_players, queue_players, [1200.0] * 4)
    engine.finish_match(match.id, 1)

    entry = engine.join_queue(session_id, player_ids[0])

    assert entry.player_id == player_ids[0]


def test_history_rows_are_linked_to_the_match(
    engine: OpenPlayEngine,
    session_factory: sessionmaker[Session],
    make_players,
    queue_players,
) -> None:
    _, _, match = _single_match(engine, make_players, queue_players, [1150.0, 1200.0, 1250.0, 1300.0])

    result = engine.ratings.finish(match.id, 1)

    with session_factory() as session:
        entries = engine.repositories.rating_history.for_match(session, match.id)
        rows = [(entry.player_id, entry.change, entry.rating) for entry in entries]
    assert [row[0] for row in rows] == [change.player_id for change in result.changes]
    assert [row[1] for row in rows] == pytest.approx([change.delta for change in result.changes])
    assert [row[2] for row in rows] == pytest.approx([change.rating for change in result.changes])


def test_backfill_conflict_keeps_the_committed_finish(
    engine: OpenPlayEngine, make_players, queue_players, monkeypatch: pytest.MonkeyPatch
) -> None:
    session_id = engine.start_session(courts=1).id
    player_ids = make_players([1200.0 + index * 10 for index in range(8)])
    queue_players(session_id, player_ids)
    (match,) = engine.generate_matches(session_id)

    def _conflict(_session_id: int):
        raise ConflictError(f"generate session_id={_session_id} kept conflicting after 3 attempts")

    monkeypatch.setattr(engine.scheduler, "generate", _conflict)

    result = engine.ratings.finish(match.id, 1)

    assert result.match.status is MatchStatus.FINISHED
    assert result.backfilled == ()
    assert len(engine.rating_history(match.player_ids[0])) == 1
    assert len(engine.list_queue(session_id)) == 4

    monkeypatch.undo()
    (backfill,) = engine.generate_matches(session_id)
    assert backfill.court == 1
