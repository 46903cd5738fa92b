"""Court allocation: drain the waiting queue into doubles matches."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from typing import TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from domain.common import Clock, run_with_conflict_retry, utcnow
from domain.config import ConcurrencySettings, SchedulerSettings
from domain.errors import InvalidSessionError, NotFoundError
from domain.lifecycle import MatchStatus, mark_started
from domain.locks import SessionLockRegistry
from models import Match, Player
from repositories import Repositories

logger = logging.getLogger(__name__)

P = TypeVar("P")

GROUP_SIZE = 4


def order_for_matching(players: Sequence[Player]) -> list[Player]:
    """Rating ascending. The sort is stable, so equal ratings keep arrival order."""
    return sorted(players, key=lambda player: player.rating)


def form_groups(
    players: Sequence[P],
    max_groups: int,
    *,
    rng: random.Random,
    swap_probability: float,
) -> list[tuple[P, P, P, P]]:
    """Cut consecutive groups of four from an already ordered list.

    Before each group is taken, its 4th player trades places with the next one
    in line with ``swap_probability``. This only adds variety between repeated
    generations; it is not a fairness guarantee.
    """
    pool = list(players)
    groups: list[tuple[P, P, P, P]] = []
    index = 0
    while index + GROUP_SIZE <= len(pool) and len(groups) < max_groups:
        has_next = index + GROUP_SIZE < len(pool)
        if has_next and rng.random() < swap_probability:
            pool[index + 3], pool[index + 4] = pool[index + 4], pool[index + 3]
        groups.append((pool[index], pool[index + 1], pool[index + 2], pool[index + 3]))
        index += GROUP_SIZE
    return groups


def lowest_free_courts(used_courts: set[int], count: int) -> list[int]:
    courts: list[int] = []
    court = 1
    while len(courts) < count:
        if court not in used_courts:
            courts.append(court)
        court += 1
    return courts


class MatchScheduler:
    """Turns queued players into SCHEDULED matches, bounded by free courts."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        repositories: Repositories,
        locks: SessionLockRegistry,
        *,
        settings: SchedulerSettings | None = None,
        concurrency: ConcurrencySettings | None = None,
        rng: random.Random | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self.session_factory = session_factory
        self.repositories = repositories
        self.locks = locks
        self.settings = settings or SchedulerSettings()
        self.concurrency = concurrency or ConcurrencySettings()
        self.rng = rng or random.Random(self.settings.seed)
        self.clock = clock

    def generate(self, session_id: int) -> list[Match]:
        """Create as many matches as free courts and waiting players allow.

        No free court or fewer than four waiting players is a normal outcome
        and returns an empty list.
        """
        with self.locks.hold(session_id, reason="generate"):
            return run_with_conflict_retry(
                lambda: self._generate_once(session_id),
                attempts=self.concurrency.conflict_retries,
                label=f"generate session_id={session_id}",
            )

    def _generate_once(self, session_id: int) -> list[Match]:
        repos = self.repositories
        now = self.clock()
        with self.session_factory() as session, session.begin():
            play_session = repos.sessions.get_for_update(session, session_id)
            if play_session is None:
                raise NotFoundError(f"session_id={session_id} not found")
            if not play_session.is_active:
                raise InvalidSessionError(f"session_id={session_id} is not active")

            in_use = repos.matches.count_active(session, session_id)
            available = max(0, play_session.courts - in_use)
            if available == 0:
                logger.debug("no free courts session_id=%s in_use=%d", session_id, in_use)
                return []

            entries = repos.queue.list_ordered(session, session_id)
            players_by_id = repos.players.get_many(session, [entry.player_id for entry in entries])
            waiting = [players_by_id[entry.player_id] for entry in entries]

            groups = form_groups(
                order_for_matching(waiting),
                available,
                rng=self.rng,
                swap_probability=self.settings.swap_probability,
            )
            if not groups:
                logger.debug("not enough players session_id=%s waiting=%d", session_id, len(waiting))
                return []

            courts = lowest_free_courts(repos.matches.active_courts(session, session_id), len(groups))

            created: list[Match] = []
            for group, court in zip(groups, courts):
                match = repos.matches.add(
                    session,
                    session_id=session_id,
                    court=court,
                    status=MatchStatus.SCHEDULED,
                    p1_id=group[0].id,
                    p2_id=group[1].id,
                    p3_id=group[2].id,
                    p4_id=group[3].id,
                    created_at=now,
                )
                repos.queue.delete_players(session, session_id, [player.id for player in group])
                created.append(match)

        for match in created:
            logger.info(
                "scheduled match_id=%s session_id=%s court=%d team1=%s team2=%s",
                match.id,
                session_id,
                match.court,
                match.team1,
                match.team2,
            )
        return created

    def start(self, match_id: int) -> Match:
        """SCHEDULED -> ONGOING."""
        session_id = self.session_id_for_match(match_id)
        with self.locks.hold(session_id, reason="start"):
            with self.session_factory() as session, session.begin():
                match = self.repositories.matches.get_for_update(session, match_id)
                if match is None:
                    raise NotFoundError(f"match_id={match_id} not found")
                mark_started(match, self.clock())

        logger.info("started match_id=%s court=%d", match.id, match.court)
        return match

    def session_id_for_match(self, match_id: int) -> int:
        with self.session_factory() as session:
            session_id = session.scalar(select(Match.session_id).where(Match.id == match_id))
        if session_id is None:
            raise NotFoundError(f"match_id={match_id} not found")
        return int(session_id)

    def list_matches(self, session_id: int) -> list[Match]:
        with self.session_factory() as session:
            if self.repositories.sessions.get(session, session_id) is None:
                raise NotFoundError(f"session_id={session_id} not found")
            return list(self.repositories.matches.list_for_session(session, session_id))


__all__ = [
    "GROUP_SIZE",
    "MatchScheduler",
    "form_groups",
    "lowest_free_courts",
    "order_for_matching",
]
