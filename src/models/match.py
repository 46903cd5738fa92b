"""matches table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Enum, ForeignKey, Index, Integer, text
from sqlalchemy.orm import Mapped, mapped_column

from domain.lifecycle import MatchStatus
from models.base import Base

_ACTIVE_COURT_PREDICATE = text("status IN ('SCHEDULED', 'ONGOING')")


class Match(Base):
    """One doubles match: team 1 is (p1, p2), team 2 is (p3, p4)."""

    __tablename__ = "matches"
    __table_args__ = (
        CheckConstraint("court >= 1", name="ck_matches_court"),
        CheckConstraint(
            "p1_id <> p2_id AND p1_id <> p3_id AND p1_id <> p4_id "
            "AND p2_id <> p3_id AND p2_id <> p4_id AND p3_id <> p4_id",
            name="ck_matches_distinct_players",
        ),
        CheckConstraint(
            "winner_team IS NULL OR winner_team IN (1, 2)",
            name="ck_matches_winner_team",
        ),
        # A court hosts at most one unfinished match per session.
        Index(
            "uq_matches_session_active_court",
            "session_id",
            "court",
            unique=True,
            sqlite_where=_ACTIVE_COURT_PREDICATE,
            postgresql_where=_ACTIVE_COURT_PREDICATE,
        ),
        Index("idx_matches_session_status", "session_id", "status"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    session_id: Mapped[int] = mapped_column(ForeignKey("play_sessions.id"), nullable=False)
    court: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[MatchStatus] = mapped_column(
        Enum(MatchStatus, name="match_status", native_enum=False),
        nullable=False,
        default=MatchStatus.SCHEDULED,
    )
    p1_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    p2_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    p3_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    p4_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    winner_team: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)

    @property
    def player_ids(self) -> tuple[int, int, int, int]:
        return (self.p1_id, self.p2_id, self.p3_id, self.p4_id)

    @property
    def team1(self) -> tuple[int, int]:
        return (self.p1_id, self.p2_id)

    @property
    def team2(self) -> tuple[int, int]:
        return (self.p3_id, self.p4_id)
