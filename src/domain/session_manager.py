"""Play session lifecycle and court capacity."""

from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy.orm import Session, sessionmaker

from domain.common import Clock, utcnow
from domain.config import SessionSettings
from domain.errors import NotFoundError, ValidationError
from models import PlaySession
from repositories import Repositories

logger = logging.getLogger(__name__)


class SessionManager:
    def __init__(
        self,
        session_factory: sessionmaker[Session],
        repositories: Repositories,
        *,
        settings: SessionSettings | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self.session_factory = session_factory
        self.repositories = repositories
        self.settings = settings or SessionSettings()
        self.clock = clock

    def start(self, courts: int | None = None, duration_hours: int | None = None) -> PlaySession:
        """Open a new active session.

        With ``exclusive_active_session`` enabled every other active session is
        closed in the same transaction.
        """
        settings = self.settings
        courts = settings.default_courts if courts is None else courts
        duration_hours = settings.default_duration_hours if duration_hours is None else duration_hours
        _check_bounds("courts", courts, settings.min_courts, settings.max_courts)
        _check_bounds(
            "duration_hours",
            duration_hours,
            settings.min_duration_hours,
            settings.max_duration_hours,
        )

        now = self.clock()
        repos = self.repositories
        with self.session_factory() as session, session.begin():
            if settings.exclusive_active_session:
                for previous in repos.sessions.all_active(session, for_update=True):
                    previous.is_active = False
                    logger.info("deactivated session_id=%s", previous.id)

            play_session = repos.sessions.add(
                session,
                start_time=now,
                end_time=now + timedelta(hours=duration_hours),
                courts=courts,
                is_active=True,
                created_at=now,
            )

        logger.info(
            "started session_id=%s courts=%d duration_hours=%d",
            play_session.id,
            courts,
            duration_hours,
        )
        return play_session

    def active(self) -> PlaySession | None:
        """Most recently created active session, if any."""
        with self.session_factory() as session:
            return self.repositories.sessions.latest_active(session)

    def get(self, session_id: int) -> PlaySession:
        with self.session_factory() as session:
            play_session = self.repositories.sessions.get(session, session_id)
        if play_session is None:
            raise NotFoundError(f"session_id={session_id} not found")
        return play_session

    def end(self, session_id: int) -> PlaySession:
        with self.session_factory() as session, session.begin():
            play_session = self.repositories.sessions.get_for_update(session, session_id)
            if play_session is None:
                raise NotFoundError(f"session_id={session_id} not found")
            play_session.is_active = False

        logger.info("ended session_id=%s", session_id)
        return play_session


def _check_bounds(name: str, value: int, lower: int, upper: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    if not lower <= value <= upper:
        raise ValidationError(f"{name} must be between {lower} and {upper}, got {value}")


__all__ = ["SessionManager"]
