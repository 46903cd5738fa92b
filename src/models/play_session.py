"""play_sessions table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class PlaySession(Base):
    """A bounded window of open play with a fixed court capacity."""

    __tablename__ = "play_sessions"
    __table_args__ = (
        CheckConstraint("courts >= 1", name="ck_play_sessions_courts"),
        CheckConstraint("end_time > start_time", name="ck_play_sessions_window"),
        Index("idx_play_sessions_active_created", "is_active", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    courts: Mapped[int] = mapped_column(Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)

    def is_open(self, now: datetime) -> bool:
        return self.is_active and now < self.end_time
