"""Process-local per-session locks.

``generate``, ``finish`` and ``start`` read and write the same court and queue
rows of one session, so they run one at a time per session. Locks are
re-entrant: ``finish`` cascades into ``generate`` while still holding the lock.
Different sessions never share a lock.

These locks only serialize callers inside one process. Across processes the
partial unique court index and row locks on the match and players are what
keeps double booking out.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from threading import Lock, RLock

from domain.config import ConcurrencySettings
from domain.errors import ConflictError

logger = logging.getLogger(__name__)


class SessionLockRegistry:
    def __init__(self, settings: ConcurrencySettings | None = None) -> None:
        self.settings = settings or ConcurrencySettings()
        self._guard = Lock()
        self._locks: dict[int, RLock] = {}

    def lock_for(self, session_id: int) -> RLock:
        with self._guard:
            lock = self._locks.get(session_id)
            if lock is None:
                lock = RLock()
                self._locks[session_id] = lock
            return lock

    @contextmanager
    def hold(self, session_id: int, *, reason: str = "") -> Iterator[None]:
        """Hold the session lock, raising ConflictError after bounded attempts."""
        lock = self.lock_for(session_id)
        attempts = self.settings.lock_attempts
        timeout = self.settings.lock_timeout_s

        acquired = False
        for attempt in range(1, attempts + 1):
            acquired = lock.acquire(timeout=timeout)
            if acquired:
                break
            logger.warning(
                "session lock busy session_id=%s reason=%s attempt=%d/%d timeout_s=%.2f",
                session_id,
                reason or "-",
                attempt,
                attempts,
                timeout,
            )

        if not acquired:
            raise ConflictError(
                f"session_id={session_id} is busy ({reason or 'unspecified'}); "
                f"gave up after {attempts} attempts"
            )

        try:
            yield
        finally:
            lock.release()


__all__ = ["SessionLockRegistry"]
