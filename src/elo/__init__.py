"""Elo calculation modules."""

from elo.doubles_elo import (
    DoublesEloCalculator,
    DoublesRatingOutcome,
    PlayerRatingChange,
    RatingParameters,
    calculate_expected_score,
    team_average,
)

__all__ = [
    "DoublesEloCalculator",
    "DoublesRatingOutcome",
    "PlayerRatingChange",
    "RatingParameters",
    "calculate_expected_score",
    "team_average",
]
