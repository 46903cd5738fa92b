"""Shared fixtures: an in-memory SQLite database and a deterministic clock."""

from __future__ import annotations

import random
from collections.abc import Callable, Iterator, Sequence
from datetime import datetime, timedelta

import pytest
from sqlalchemy.orm import Session, sessionmaker

from db import create_db_engine, create_session_factory, ensure_schema
from domain.config import EngineConfig, SchedulerSettings
from domain.engine import OpenPlayEngine


class FakeClock:
    """Returns a strictly increasing timestamp on every call."""

    def __init__(
        self,
        start: datetime = datetime(2026, 1, 1, 18, 0, 0),
        step: timedelta = timedelta(seconds=1),
    ) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.now
        self.now += self.step
        return value

    def advance(self, delta: timedelta) -> None:
        self.now += delta


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def session_factory() -> Iterator[sessionmaker[Session]]:
    engine = create_db_engine("sqlite://")
    ensure_schema(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture()
def engine(session_factory: sessionmaker[Session], clock: FakeClock) -> OpenPlayEngine:
    config = EngineConfig(scheduler=SchedulerSettings(swap_probability=0.0))
    return OpenPlayEngine.from_config(session_factory, config, rng=random.Random(7), clock=clock)


@pytest.fixture()
def make_players(engine: OpenPlayEngine) -> Callable[[Sequence[float]], list[int]]:
    counter = {"value": 0}

    def _make(ratings: Sequence[float]) -> list[int]:
        ids = []
        for rating in ratings:
            counter["value"] += 1
            ids.append(engine.register_player(f"player{counter['value']}", rating=rating).id)
        return ids

    return _make


@pytest.fixture()
def queue_players(engine: OpenPlayEngine) -> Callable[[int, Sequence[int]], None]:
    def _queue(session_id: int, player_ids: Sequence[int]) -> None:
        for player_id in player_ids:
            engine.join_queue(session_id, player_id)

    return _queue
