"""rating_history table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class RatingHistoryEntry(Base):
    """Append-only audit row for one applied rating change."""

    __tablename__ = "rating_history"
    __table_args__ = (
        Index("idx_rating_history_player_created", "player_id", "created_at"),
        Index("idx_rating_history_match", "match_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    match_id: Mapped[int | None] = mapped_column(ForeignKey("matches.id"), nullable=True)
    change: Mapped[float] = mapped_column(Float, nullable=False)
    rating: Mapped[float] = mapped_column(Float, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
