"""Unit tests for doubles Elo calculations."""

from __future__ import annotations

import pytest

from elo.doubles_elo import (
    DoublesEloCalculator,
    RatingParameters,
    calculate_expected_score,
    team_average,
)


def test_rating_parameters_defaults_are_expected_constants() -> None:
    params = RatingParameters()
    assert params.initial_rating == pytest.approx(1200.0)
    assert params.k_factor == pytest.approx(32.0)
    assert params.scale_factor == pytest.approx(400.0)


def test_expected_score_equal_ratings_is_half() -> None:
    assert calculate_expected_score(1200.0, 1200.0, 400.0) == pytest.approx(0.5)


def test_expected_scores_sum_to_one() -> None:
    expected_a = calculate_expected_score(1350.0, 1200.0, 400.0)
    expected_b = calculate_expected_score(1200.0, 1350.0, 400.0)
    assert expected_a + expected_b == pytest.approx(1.0)


def test_expected_score_400_point_gap() -> None:
    assert calculate_expected_score(1600.0, 1200.0, 400.0) == pytest.approx(10.0 / 11.0)


def test_team_average() -> None:
    assert team_average(1100.0, 1300.0) == pytest.approx(1200.0)


def test_even_teams_split_team_delta_between_partners() -> None:
    outcome = DoublesEloCalculator().rate([1200.0, 1200.0], [1200.0, 1200.0], winner_team=1)

    assert outcome.team1_expected == pytest.approx(0.5)
    assert outcome.team1_delta == pytest.approx(16.0)
    assert outcome.team2_delta == pytest.approx(-16.0)
    assert [change.delta for change in outcome.changes] == pytest.approx([8.0, 8.0, -8.0, -8.0])
    assert [change.post_rating for change in outcome.changes] == pytest.approx(
        [1208.0, 1208.0, 1192.0, 1192.0]
    )


def test_uneven_match_is_zero_sum() -> None:
    outcome = DoublesEloCalculator().rate([1050.0, 1390.0], [1180.0, 1240.0], winner_team=2)
    assert outcome.total_delta() == pytest.approx(0.0)
    assert outcome.team1_delta + outcome.team2_delta == pytest.approx(0.0)


def test_partners_always_move_identically() -> None:
    outcome = DoublesEloCalculator().rate([1000.0, 1400.0], [1200.0, 1210.0], winner_team=1)
    assert outcome.changes[0].delta == pytest.approx(outcome.changes[1].delta)
    assert outcome.changes[2].delta == pytest.approx(outcome.changes[3].delta)


def test_underdog_win_moves_more_than_favourite_win() -> None:
    calculator = DoublesEloCalculator()
    underdog = calculator.rate([1000.0, 1000.0], [1300.0, 1300.0], winner_team=1)
    favourite = calculator.rate([1300.0, 1300.0], [1000.0, 1000.0], winner_team=1)
    assert underdog.team1_delta > favourite.team1_delta > 0.0


def test_k_factor_scales_delta() -> None:
    outcome = DoublesEloCalculator(RatingParameters(k_factor=16.0)).rate(
        [1200.0, 1200.0], [1200.0, 1200.0], winner_team=2
    )
    assert outcome.team2_delta == pytest.approx(8.0)
    assert outcome.changes[3].delta == pytest.approx(4.0)


def test_changes_record_slots_and_teams() -> None:
    outcome = DoublesEloCalculator().rate([1200.0, 1210.0], [1220.0, 1230.0], winner_team=1)
    assert [change.slot for change in outcome.changes] == [1, 2, 3, 4]
    assert [change.team for change in outcome.changes] == [1, 1, 2, 2]
    assert outcome.changes[1].pre_rating == pytest.approx(1210.0)


@pytest.mark.parametrize("winner_team", [0, 3, -1])
def test_invalid_winner_team_raises(winner_team: int) -> None:
    with pytest.raises(ValueError, match="winner_team"):
        DoublesEloCalculator().rate([1200.0, 1200.0], [1200.0, 1200.0], winner_team=winner_team)


def test_teams_must_have_two_ratings() -> None:
    with pytest.raises(ValueError, match="two ratings"):
        DoublesEloCalculator().rate([1200.0], [1200.0, 1200.0], winner_team=1)
