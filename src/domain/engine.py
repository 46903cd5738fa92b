"""Facade exposing the engine operations to transport layers."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from sqlalchemy.orm import Session, sessionmaker

from domain.common import Clock, utcnow
from domain.config import EngineConfig
from domain.errors import NotFoundError, ValidationError
from domain.locks import SessionLockRegistry
from domain.queue_store import QueueStore
from domain.rating_engine import RatingEngine
from domain.scheduler import MatchScheduler
from domain.session_manager import SessionManager
from domain.views import MatchView, PlayerView, QueueEntryView, RatingHistoryView, SessionView
from repositories import Repositories

logger = logging.getLogger(__name__)

MAX_DISPLAY_NAME_LENGTH = 64


@dataclass
class OpenPlayEngine:
    """Wires one set of services around a shared session factory."""

    session_factory: sessionmaker[Session]
    config: EngineConfig
    repositories: Repositories
    sessions: SessionManager
    queue: QueueStore
    scheduler: MatchScheduler
    ratings: RatingEngine

    @classmethod
    def from_config(
        cls,
        session_factory: sessionmaker[Session],
        config: EngineConfig | None = None,
        *,
        rng: random.Random | None = None,
        clock: Clock = utcnow,
    ) -> OpenPlayEngine:
        config = config or EngineConfig()
        repositories = Repositories()
        locks = SessionLockRegistry(config.concurrency)
        scheduler = MatchScheduler(
            session_factory,
            repositories,
            locks,
            settings=config.scheduler,
            concurrency=config.concurrency,
            rng=rng,
            clock=clock,
        )
        return cls(
            session_factory=session_factory,
            config=config,
            repositories=repositories,
            sessions=SessionManager(session_factory, repositories, settings=config.session, clock=clock),
            queue=QueueStore(session_factory, repositories, settings=config.concurrency, clock=clock),
            scheduler=scheduler,
            ratings=RatingEngine(
                session_factory,
                repositories,
                locks,
                scheduler,
                params=config.rating,
                clock=clock,
            ),
        )

    # Players

    def register_player(self, display_name: str, rating: float | None = None) -> PlayerView:
        name = display_name.strip()
        if not name or len(name) > MAX_DISPLAY_NAME_LENGTH:
            raise ValidationError(
                f"display_name must be 1..{MAX_DISPLAY_NAME_LENGTH} characters, got {display_name!r}"
            )
        initial_rating = self.config.rating.initial_rating if rating is None else float(rating)

        with self.session_factory() as session, session.begin():
            if self.repositories.players.get_by_name(session, name) is not None:
                raise ValidationError(f"display_name {name!r} is already taken")
            player = self.repositories.players.add(session, display_name=name, rating=initial_rating)

        logger.info("registered player_id=%s name=%s rating=%.1f", player.id, name, initial_rating)
        return PlayerView.from_model(player)

    def leaderboard(self, limit: int | None = None) -> list[PlayerView]:
        limit = self.config.leaderboard_limit if limit is None else limit
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ValidationError(f"limit must be a positive integer, got {limit!r}")
        with self.session_factory() as session:
            players = self.repositories.players.top_by_rating(session, limit)
            return [PlayerView.from_model(player) for player in players]

    def rating_history(self, player_id: int) -> list[RatingHistoryView]:
        with self.session_factory() as session:
            if self.repositories.players.get(session, player_id) is None:
                raise NotFoundError(f"player_id={player_id} not found")
            entries = self.repositories.rating_history.for_player(session, player_id)
            return [RatingHistoryView.from_model(entry) for entry in entries]

    # Sessions

    def start_session(self, courts: int | None = None, duration_hours: int | None = None) -> SessionView:
        return SessionView.from_model(self.sessions.start(courts, duration_hours))

    def active_session(self) -> SessionView | None:
        play_session = self.sessions.active()
        return None if play_session is None else SessionView.from_model(play_session)

    def end_session(self, session_id: int) -> SessionView:
        return SessionView.from_model(self.sessions.end(session_id))

    # Queue

    def join_queue(self, session_id: int, player_id: int) -> QueueEntryView:
        return QueueEntryView.from_model(self.queue.join(session_id, player_id))

    def list_queue(self, session_id: int) -> list[QueueEntryView]:
        return [QueueEntryView.from_model(entry) for entry in self.queue.list(session_id)]

    def leave_queue(self, session_id: int, player_id: int) -> bool:
        return self.queue.leave(session_id, player_id)

    # Matches

    def generate_matches(self, session_id: int) -> list[MatchView]:
        return [MatchView.from_model(match) for match in self.scheduler.generate(session_id)]

    def start_match(self, match_id: int) -> MatchView:
        return MatchView.from_model(self.scheduler.start(match_id))

    def finish_match(self, match_id: int, winner_team: int) -> MatchView:
        """Finish a match, apply ratings, then backfill the session's free courts."""
        return MatchView.from_model(self.ratings.finish(match_id, winner_team).match)

    def list_matches(self, session_id: int) -> list[MatchView]:
        return [MatchView.from_model(match) for match in self.scheduler.list_matches(session_id)]

    # Reporting snapshots

    def snapshot_players(self) -> list[PlayerView]:
        with self.session_factory() as session:
            return [PlayerView.from_model(player) for player in self.repositories.players.top_by_rating(session)]

    def snapshot_matches(self, session_id: int | None = None) -> list[MatchView]:
        if session_id is not None:
            return self.list_matches(session_id)
        with self.session_factory() as session:
            return [MatchView.from_model(match) for match in self.repositories.matches.list_all(session)]


__all__ = ["OpenPlayEngine"]
