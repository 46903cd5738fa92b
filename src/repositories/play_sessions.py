"""Play session persistence."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from models import PlaySession
from repositories.base import BaseRepository


class PlaySessionRepository(BaseRepository[PlaySession]):
    def __init__(self) -> None:
        super().__init__(PlaySession)

    def latest_active(self, session: Session) -> PlaySession | None:
        statement = (
            select(PlaySession)
            .where(PlaySession.is_active.is_(True))
            .order_by(PlaySession.created_at.desc(), PlaySession.id.desc())
            .limit(1)
        )
        return session.execute(statement).scalar_one_or_none()

    def all_active(self, session: Session, *, for_update: bool = False) -> Sequence[PlaySession]:
        statement = select(PlaySession).where(PlaySession.is_active.is_(True)).order_by(PlaySession.id)
        if for_update:
            statement = statement.with_for_update()
        return session.execute(statement).scalars().all()
