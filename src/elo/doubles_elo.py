"""Doubles Elo logic based on team-average ratings."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class RatingParameters:
    initial_rating: float = 1200.0
    k_factor: float = 32.0
    scale_factor: float = 400.0


@dataclass(frozen=True)
class PlayerRatingChange:
    """Rating movement for one of the four match slots (1..4)."""

    slot: int
    team: int
    pre_rating: float
    delta: float
    post_rating: float


@dataclass(frozen=True)
class DoublesRatingOutcome:
    winner_team: int
    team1_average: float
    team2_average: float
    team1_expected: float
    team2_expected: float
    team1_delta: float
    team2_delta: float
    changes: tuple[PlayerRatingChange, PlayerRatingChange, PlayerRatingChange, PlayerRatingChange]

    def total_delta(self) -> float:
        return sum(change.delta for change in self.changes)


def calculate_expected_score(rating: float, opponent_rating: float, scale_factor: float) -> float:
    """Compute the Elo expected score for one side."""
    return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / scale_factor))


def team_average(rating_a: float, rating_b: float) -> float:
    return (rating_a + rating_b) / 2.0


class DoublesEloCalculator:
    """Stateless two-versus-two Elo calculator.

    Each team is rated as the mean of its two players. The team delta
    ``K * (score - expected)`` is split evenly, so both members of a team move
    by the same amount and the four deltas sum to zero.
    """

    def __init__(self, params: RatingParameters | None = None) -> None:
        self.params = params or RatingParameters()

    def rate(
        self,
        team1_ratings: Sequence[float],
        team2_ratings: Sequence[float],
        winner_team: int,
    ) -> DoublesRatingOutcome:
        if len(team1_ratings) != 2 or len(team2_ratings) != 2:
            raise ValueError(
                f"doubles teams need exactly two ratings each, got "
                f"{len(team1_ratings)}/{len(team2_ratings)}"
            )
        if winner_team not in (1, 2):
            raise ValueError(f"winner_team must be 1 or 2, got {winner_team!r}")

        team1_avg = team_average(team1_ratings[0], team1_ratings[1])
        team2_avg = team_average(team2_ratings[0], team2_ratings[1])

        team1_expected = calculate_expected_score(
            rating=team1_avg,
            opponent_rating=team2_avg,
            scale_factor=self.params.scale_factor,
        )
        team2_expected = 1.0 - team1_expected

        team1_actual = 1.0 if winner_team == 1 else 0.0
        team2_actual = 1.0 - team1_actual

        team1_delta = self.params.k_factor * (team1_actual - team1_expected)
        team2_delta = self.params.k_factor * (team2_actual - team2_expected)

        team1_share = team1_delta / 2.0
        team2_share = team2_delta / 2.0
        changes = (
            _change(1, 1, team1_ratings[0], team1_share),
            _change(2, 1, team1_ratings[1], team1_share),
            _change(3, 2, team2_ratings[0], team2_share),
            _change(4, 2, team2_ratings[1], team2_share),
        )

        return DoublesRatingOutcome(
            winner_team=winner_team,
            team1_average=team1_avg,
            team2_average=team2_avg,
            team1_expected=team1_expected,
            team2_expected=team2_expected,
            team1_delta=team1_delta,
            team2_delta=team2_delta,
            changes=changes,
        )


def _change(slot: int, team: int, pre_rating: float, delta: float) -> PlayerRatingChange:
    return PlayerRatingChange(
        slot=slot,
        team=team,
        pre_rating=pre_rating,
        delta=delta,
        post_rating=pre_rating + delta,
    )
