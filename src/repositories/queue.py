"""Waiting-queue persistence."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from models import QueueEntry
from repositories.base import BaseRepository


class QueueRepository(BaseRepository[QueueEntry]):
    def __init__(self) -> None:
        super().__init__(QueueEntry)

    def find(self, session: Session, session_id: int, player_id: int) -> QueueEntry | None:
        statement = select(QueueEntry).where(
            QueueEntry.session_id == session_id,
            QueueEntry.player_id == player_id,
        )
        return session.execute(statement).scalar_one_or_none()

    def max_position(self, session: Session, session_id: int) -> int:
        statement = select(func.max(QueueEntry.position)).where(QueueEntry.session_id == session_id)
        return int(session.scalar(statement) or 0)

    def list_ordered(self, session: Session, session_id: int) -> Sequence[QueueEntry]:
        """Arrival order: position, then joined_at."""
        statement = (
            select(QueueEntry)
            .where(QueueEntry.session_id == session_id)
            .order_by(QueueEntry.position.asc(), QueueEntry.joined_at.asc(), QueueEntry.id.asc())
        )
        return session.execute(statement).scalars().all()

    def delete_players(self, session: Session, session_id: int, player_ids: Iterable[int]) -> int:
        ids = list(player_ids)
        if not ids:
            return 0
        statement = delete(QueueEntry).where(
            QueueEntry.session_id == session_id,
            QueueEntry.player_id.in_(ids),
        )
        result = session.execute(statement)
        return int(result.rowcount or 0)
