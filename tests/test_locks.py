"""Tests for per-session lock serialization."""

from __future__ import annotations

import threading

import pytest

from domain.config import ConcurrencySettings
from domain.errors import ConflictError
from domain.locks import SessionLockRegistry


def _registry() -> SessionLockRegistry:
    return SessionLockRegistry(ConcurrencySettings(lock_timeout_s=0.05, lock_attempts=2))


def test_same_session_reuses_one_lock() -> None:
    registry = _registry()
    assert registry.lock_for(1) is registry.lock_for(1)
    assert registry.lock_for(1) is not registry.lock_for(2)


def test_hold_is_reentrant_in_one_thread() -> None:
    registry = _registry()
    with registry.hold(1, reason="finish"):
        with registry.hold(1, reason="generate"):
            pass


def test_busy_session_raises_conflict_after_bounded_attempts() -> None:
    registry = _registry()
    held = threading.Event()
    release = threading.Event()

    def _holder() -> None:
        with registry.hold(1, reason="holder"):
            held.set()
            release.wait(timeout=5)

    thread = threading.Thread(target=_holder)
    thread.start()
    try:
        assert held.wait(timeout=5)
        with pytest.raises(ConflictError, match="session_id=1 is busy"):
            with registry.hold(1, reason="generate"):
                pass
    finally:
        release.set()
        thread.join(timeout=5)


def test_other_sessions_are_independent() -> None:
    registry = _registry()
    held = threading.Event()
    release = threading.Event()

    def _holder() -> None:
        with registry.hold(1):
            held.set()
            release.wait(timeout=5)

    thread = threading.Thread(target=_holder)
    thread.start()
    try:
        assert held.wait(timeout=5)
        with registry.hold(2):
            pass
    finally:
        release.set()
        thread.join(timeout=5)


def test_lock_is_released_after_error() -> None:
    registry = _registry()
    with pytest.raises(RuntimeError):
        with registry.hold(1):
            raise RuntimeError("boom")

    acquired = []

    def _other() -> None:
        with registry.hold(1):
            acquired.append(True)

    thread = threading.Thread(target=_other)
    thread.start()
    thread.join(timeout=5)
    assert acquired == [True]
