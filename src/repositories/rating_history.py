"""Append-only rating history persistence."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import insert, select
from sqlalchemy.orm import Session

from models import RatingHistoryEntry
from repositories.base import BaseRepository


class RatingHistoryRepository(BaseRepository[RatingHistoryEntry]):
    def __init__(self) -> None:
        super().__init__(RatingHistoryEntry)

    def append_many(
        self,
        session: Session,
        rows: Sequence[tuple[int, float, float]],
        *,
        match_id: int | None,
        created_at: datetime,
    ) -> None:
        """Bulk insert (player_id, change, rating) rows for one match."""
        if not rows:
            return
        payload = [
            {
                "player_id": player_id,
                "match_id": match_id,
                "change": change,
                "rating": rating,
                "created_at": created_at,
            }
            for player_id, change, rating in rows
        ]
        session.execute(insert(RatingHistoryEntry), payload)

    def for_player(self, session: Session, player_id: int) -> Sequence[RatingHistoryEntry]:
        statement = (
            select(RatingHistoryEntry)
            .where(RatingHistoryEntry.player_id == player_id)
            .order_by(RatingHistoryEntry.created_at.asc(), RatingHistoryEntry.id.asc())
        )
        return session.execute(statement).scalars().all()

    def for_match(self, session: Session, match_id: int) -> Sequence[RatingHistoryEntry]:
        statement = (
            select(RatingHistoryEntry)
            .where(RatingHistoryEntry.match_id == match_id)
            .order_by(RatingHistoryEntry.id.asc())
        )
        return session.execute(statement).scalars().all()
