"""Waiting queue per play session."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy.orm import Session, sessionmaker

from domain.common import Clock, run_with_conflict_retry, utcnow
from domain.config import ConcurrencySettings
from domain.errors import InvalidSessionError, NotFoundError, ValidationError
from models import QueueEntry
from repositories import Repositories

logger = logging.getLogger(__name__)


class QueueStore:
    """Arrival-ordered queue of players waiting for a court.

    ``join`` does not take the session lock; a concurrent insert that trips the
    (session, player) or (session, position) unique constraint is retried.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        repositories: Repositories,
        *,
        settings: ConcurrencySettings | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self.session_factory = session_factory
        self.repositories = repositories
        self.settings = settings or ConcurrencySettings()
        self.clock = clock

    def join(self, session_id: int, player_id: int) -> QueueEntry:
        """Queue a player; joining twice returns the existing entry."""
        return run_with_conflict_retry(
            lambda: self._join_once(session_id, player_id),
            attempts=self.settings.conflict_retries,
            label=f"join session_id={session_id} player_id={player_id}",
        )

    def _join_once(self, session_id: int, player_id: int) -> QueueEntry:
        repos = self.repositories
        now = self.clock()
        with self.session_factory() as session, session.begin():
            play_session = repos.sessions.get(session, session_id)
            if play_session is None or not play_session.is_open(now):
                raise InvalidSessionError(f"session_id={session_id} is not open for joining")

            if repos.players.get(session, player_id) is None:
                raise NotFoundError(f"player_id={player_id} not found")

            existing = repos.queue.find(session, session_id, player_id)
            if existing is not None:
                return existing

            active_match = repos.matches.active_match_for_player(session, session_id, player_id)
            if active_match is not None:
                raise ValidationError(
                    f"player_id={player_id} is already playing match_id={active_match.id}"
                )

            position = repos.queue.max_position(session, session_id) + 1
            entry = repos.queue.add(
                session,
                session_id=session_id,
                player_id=player_id,
                position=position,
                joined_at=now,
            )

        logger.info("queued player_id=%s session_id=%s position=%d", player_id, session_id, position)
        return entry

    def list(self, session_id: int) -> list[QueueEntry]:
        """Entries by position, ties broken by joined_at."""
        with self.session_factory() as session:
            if self.repositories.sessions.get(session, session_id) is None:
                raise NotFoundError(f"session_id={session_id} not found")
            return list(self.repositories.queue.list_ordered(session, session_id))

    def remove(self, session_id: int, player_ids: Iterable[int]) -> int:
        """Drop entries for the given players; absent players are ignored."""
        ids = list(player_ids)
        with self.session_factory() as session, session.begin():
            removed = self.repositories.queue.delete_players(session, session_id, ids)
        logger.debug("removed %d queue entries session_id=%s", removed, session_id)
        return removed

    def leave(self, session_id: int, player_id: int) -> bool:
        return self.remove(session_id, [player_id]) > 0


__all__ = ["QueueStore"]
