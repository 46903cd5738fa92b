"""Apply finished match results to player ratings."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session, sessionmaker

from domain.common import Clock, utcnow
from domain.errors import ConflictError, NotFoundError
from domain.lifecycle import MatchStatus, ensure_transition, mark_finished, validate_winner_team
from domain.locks import SessionLockRegistry
from domain.scheduler import MatchScheduler
from elo.doubles_elo import DoublesEloCalculator, RatingParameters
from models import Match
from repositories import Repositories

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppliedRatingChange:
    player_id: int
    team: int
    pre_rating: float
    delta: float
    rating: float


@dataclass(frozen=True)
class FinishResult:
    """The finished match, its rating changes and the matches that backfilled its court."""

    match: Match
    changes: tuple[AppliedRatingChange, ...]
    backfilled: tuple[Match, ...]

    def total_delta(self) -> float:
        return sum(change.delta for change in self.changes)


class RatingEngine:
    """Finishes matches and recomputes the four players' ratings.

    ``finish`` has a deliberate synchronous cascade: once the rating update has
    committed it calls ``MatchScheduler.generate`` for the same session, so the
    freed court is refilled from the queue before ``finish`` returns.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        repositories: Repositories,
        locks: SessionLockRegistry,
        scheduler: MatchScheduler,
        *,
        params: RatingParameters | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self.session_factory = session_factory
        self.repositories = repositories
        self.locks = locks
        self.scheduler = scheduler
        self.calculator = DoublesEloCalculator(params)
        self.clock = clock

    def finish(self, match_id: int, winner_team: int) -> FinishResult:
        """Record the winner and refill the freed court.

        The rating update commits before the backfill runs. If the backfill
        then hits a ``ConflictError`` the finish stands, the failure is logged
        and ``backfilled`` is empty; calling ``generate`` again fills the court.
        """
        session_id = self.scheduler.session_id_for_match(match_id)
        winner = validate_winner_team(winner_team)

        with self.locks.hold(session_id, reason="finish"):
            match, changes, session_active = self._apply_result(match_id, winner)

            backfilled: list[Match] = []
            if not session_active:
                logger.info("session_id=%s is inactive; skipping backfill", session_id)
            else:
                try:
                    backfilled = self.scheduler.generate(session_id)
                except ConflictError:
                    logger.exception(
                        "backfill after match_id=%s failed; session_id=%s needs another generate",
                        match_id,
                        session_id,
                    )

        return FinishResult(match=match, changes=tuple(changes), backfilled=tuple(backfilled))

    def _apply_result(self, match_id: int, winner_team: int) -> tuple[Match, list[AppliedRatingChange], bool]:
        """Ratings, history rows and the FINISHED transition commit together or not at all."""
        repos = self.repositories
        now = self.clock()
        with self.session_factory() as session, session.begin():
            match = repos.matches.get_for_update(session, match_id)
            if match is None:
                raise NotFoundError(f"match_id={match_id} not found")
            ensure_transition(match.status, MatchStatus.FINISHED, match_id=match.id)

            players = repos.players.get_many(session, match.player_ids, for_update=True)
            missing = [player_id for player_id in match.player_ids if player_id not in players]
            if missing:
                raise NotFoundError(f"match_id={match.id} references missing players {missing}")

            outcome = self.calculator.rate(
                [players[match.p1_id].rating, players[match.p2_id].rating],
                [players[match.p3_id].rating, players[match.p4_id].rating],
                winner_team,
            )

            changes: list[AppliedRatingChange] = []
            for player_id, change in zip(match.player_ids, outcome.changes):
                repos.players.set_rating(players[player_id], change.post_rating, now)
                changes.append(
                    AppliedRatingChange(
                        player_id=player_id,
                        team=change.team,
                        pre_rating=change.pre_rating,
                        delta=change.delta,
                        rating=change.post_rating,
                    )
                )

            repos.rating_history.append_many(
                session,
                [(change.player_id, change.delta, change.rating) for change in changes],
                match_id=match.id,
                created_at=now,
            )
            mark_finished(match, winner_team, now)

            play_session = repos.sessions.get(session, match.session_id)
            session_active = play_session is not None and play_session.is_active

        logger.info(
            "finished match_id=%s winner_team=%d team1_delta=%+.2f team2_delta=%+.2f",
            match.id,
            winner_team,
            outcome.team1_delta,
            outcome.team2_delta,
        )
        return match, changes, session_active


__all__ = ["AppliedRatingChange", "FinishResult", "RatingEngine"]
