"""Shared helpers for engine services."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TypeVar

from sqlalchemy.exc import IntegrityError

from domain.errors import ConflictError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
T = TypeVar("T")


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the DateTime(timezone=False) columns."""
    return datetime.now(UTC).replace(tzinfo=None)


def run_with_conflict_retry(operation: Callable[[], T], *, attempts: int, label: str) -> T:
    """Run one transactional unit, retrying when a unique constraint races."""
    if attempts <= 0:
        raise ValueError("attempts must be greater than 0")

    last_error: IntegrityError | None = None
    for attempt in range(1, attempts + 1):
        try:
            return operation()
        except IntegrityError as exc:
            last_error = exc
            logger.warning("%s hit a constraint conflict attempt=%d/%d", label, attempt, attempts)

    raise ConflictError(f"{label} kept conflicting after {attempts} attempts") from last_error


__all__ = ["Clock", "run_with_conflict_retry", "utcnow"]
