"""Player persistence."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from models import Player
from repositories.base import BaseRepository


class PlayerRepository(BaseRepository[Player]):
    def __init__(self) -> None:
        super().__init__(Player)

    def get_by_name(self, session: Session, display_name: str) -> Player | None:
        statement = select(Player).where(Player.display_name == display_name)
        return session.execute(statement).scalar_one_or_none()

    def get_many(self, session: Session, player_ids: Iterable[int], *, for_update: bool = False) -> dict[int, Player]:
        ids = list(player_ids)
        if not ids:
            return {}
        statement = select(Player).where(Player.id.in_(ids)).order_by(Player.id)
        if for_update:
            statement = statement.with_for_update()
        return {player.id: player for player in session.execute(statement).scalars()}

    def set_rating(self, player: Player, rating: float, now: datetime) -> None:
        player.rating = rating
        player.updated_at = now

    def top_by_rating(self, session: Session, limit: int | None = None) -> Sequence[Player]:
        statement = select(Player).order_by(Player.rating.desc(), Player.id)
        if limit is not None:
            statement = statement.limit(limit)
        return session.execute(statement).scalars().all()
