"""queue_entries table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class QueueEntry(Base):
    """A player waiting for a match in one session."""

    __tablename__ = "queue_entries"
    __table_args__ = (
        UniqueConstraint("session_id", "player_id", name="uq_queue_entries_session_player"),
        UniqueConstraint("session_id", "position", name="uq_queue_entries_session_position"),
        Index("idx_queue_entries_session_order", "session_id", "position", "joined_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    session_id: Mapped[int] = mapped_column(ForeignKey("play_sessions.id"), nullable=False)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    joined_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
