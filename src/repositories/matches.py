"""Match persistence."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from domain.lifecycle import ACTIVE_STATUSES
from models import Match
from repositories.base import BaseRepository


class MatchRepository(BaseRepository[Match]):
    def __init__(self) -> None:
        super().__init__(Match)

    def count_active(self, session: Session, session_id: int) -> int:
        statement = select(func.count(Match.id)).where(
            Match.session_id == session_id,
            Match.status.in_(ACTIVE_STATUSES),
        )
        return int(session.scalar(statement) or 0)

    def active_courts(self, session: Session, session_id: int) -> set[int]:
        statement = select(Match.court).where(
            Match.session_id == session_id,
            Match.status.in_(ACTIVE_STATUSES),
        )
        return set(session.execute(statement).scalars())

    def active_match_for_player(self, session: Session, session_id: int, player_id: int) -> Match | None:
        statement = (
            select(Match)
            .where(
                Match.session_id == session_id,
                Match.status.in_(ACTIVE_STATUSES),
                or_(
                    Match.p1_id == player_id,
                    Match.p2_id == player_id,
                    Match.p3_id == player_id,
                    Match.p4_id == player_id,
                ),
            )
            .limit(1)
        )
        return session.execute(statement).scalar_one_or_none()

    def list_for_session(self, session: Session, session_id: int) -> Sequence[Match]:
        statement = (
            select(Match)
            .where(Match.session_id == session_id)
            .order_by(Match.created_at.desc(), Match.id.desc())
        )
        return session.execute(statement).scalars().all()

    def list_all(self, session: Session) -> Sequence[Match]:
        statement = select(Match).order_by(Match.created_at.desc(), Match.id.desc())
        return session.execute(statement).scalars().all()
