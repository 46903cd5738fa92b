"""Load engine settings from a TOML file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
import tomllib

from elo.doubles_elo import RatingParameters

ROOT_DIR = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_PATH = ROOT_DIR / "configs" / "engine.toml"


@dataclass(frozen=True)
class SchedulerSettings:
    # Chance of swapping a group's 4th player with the next in line.
    swap_probability: float = 0.2
    seed: int | None = None


@dataclass(frozen=True)
class SessionSettings:
    default_courts: int = 5
    min_courts: int = 1
    max_courts: int = 20
    default_duration_hours: int = 3
    min_duration_hours: int = 1
    max_duration_hours: int = 6
    exclusive_active_session: bool = True


@dataclass(frozen=True)
class ConcurrencySettings:
    lock_timeout_s: float = 5.0
    lock_attempts: int = 3
    conflict_retries: int = 3


@dataclass(frozen=True)
class EngineConfig:
    """All tunables for one engine instance."""

    rating: RatingParameters = field(default_factory=RatingParameters)
    scheduler: SchedulerSettings = field(default_factory=SchedulerSettings)
    session: SessionSettings = field(default_factory=SessionSettings)
    concurrency: ConcurrencySettings = field(default_factory=ConcurrencySettings)
    leaderboard_limit: int = 100
    file_path: Path | None = None

    def as_config_json(self) -> dict[str, Any]:
        return {
            "initial_rating": self.rating.initial_rating,
            "k_factor": self.rating.k_factor,
            "scale_factor": self.rating.scale_factor,
            "swap_probability": self.scheduler.swap_probability,
            "seed": self.scheduler.seed,
            "default_courts": self.session.default_courts,
            "min_courts": self.session.min_courts,
            "max_courts": self.session.max_courts,
            "default_duration_hours": self.session.default_duration_hours,
            "min_duration_hours": self.session.min_duration_hours,
            "max_duration_hours": self.session.max_duration_hours,
            "exclusive_active_session": self.session.exclusive_active_session,
            "lock_timeout_s": self.concurrency.lock_timeout_s,
            "lock_attempts": self.concurrency.lock_attempts,
            "conflict_retries": self.concurrency.conflict_retries,
            "leaderboard_limit": self.leaderboard_limit,
        }


def load_engine_config(file_path: Path | None = None) -> EngineConfig:
    """Load and validate one engine TOML config file."""
    path = file_path or DEFAULT_CONFIG_PATH
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    if not path.is_file():
        raise ValueError(f"Config path is not a file: {path}")

    with path.open("rb") as file:
        raw = tomllib.load(file)
    return parse_engine_config(raw, path)


def parse_engine_config(raw: dict[str, Any], file_path: Path) -> EngineConfig:
    rating_raw = raw.get("rating", {})
    scheduler_raw = raw.get("scheduler", {})
    session_raw = raw.get("session", {})
    concurrency_raw = raw.get("concurrency", {})
    leaderboard_raw = raw.get("leaderboard", {})

    rating = RatingParameters(
        initial_rating=_parse_float(rating_raw, "initial_rating", 1200.0, file_path=file_path, section="rating"),
        k_factor=_parse_float(rating_raw, "k_factor", 32.0, file_path=file_path, section="rating"),
        scale_factor=_parse_float(rating_raw, "scale_factor", 400.0, file_path=file_path, section="rating"),
    )

    scheduler = SchedulerSettings(
        swap_probability=_parse_float(
            scheduler_raw, "swap_probability", 0.2, file_path=file_path, section="scheduler"
        ),
        seed=_parse_int(scheduler_raw, "seed", None, file_path=file_path, section="scheduler"),
    )

    session = SessionSettings(
        default_courts=_parse_int(session_raw, "default_courts", 5, file_path=file_path, section="session"),
        min_courts=_parse_int(session_raw, "min_courts", 1, file_path=file_path, section="session"),
        max_courts=_parse_int(session_raw, "max_courts", 20, file_path=file_path, section="session"),
        default_duration_hours=_parse_int(
            session_raw, "default_duration_hours", 3, file_path=file_path, section="session"
        ),
        min_duration_hours=_parse_int(
            session_raw, "min_duration_hours", 1, file_path=file_path, section="session"
        ),
        max_duration_hours=_parse_int(
            session_raw, "max_duration_hours", 6, file_path=file_path, section="session"
        ),
        exclusive_active_session=_parse_bool(
            session_raw.get("exclusive_active_session", True),
            file_path=file_path,
            key="[session].exclusive_active_session",
        ),
    )

    concurrency = ConcurrencySettings(
        lock_timeout_s=_parse_float(
            concurrency_raw, "lock_timeout_s", 5.0, file_path=file_path, section="concurrency"
        ),
        lock_attempts=_parse_int(concurrency_raw, "lock_attempts", 3, file_path=file_path, section="concurrency"),
        conflict_retries=_parse_int(
            concurrency_raw, "conflict_retries", 3, file_path=file_path, section="concurrency"
        ),
    )

    leaderboard_limit = _parse_int(
        leaderboard_raw, "default_limit", 100, file_path=file_path, section="leaderboard"
    )

    config = EngineConfig(
        rating=rating,
        scheduler=scheduler,
        session=session,
        concurrency=concurrency,
        leaderboard_limit=leaderboard_limit,
        file_path=file_path,
    )
    _validate(file_path=file_path, config=config)
    return config


def _parse_float(raw: dict[str, Any], key: str, default: float, *, file_path: Path, section: str) -> float:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{file_path}: [{section}].{key} must be a number, got {value!r}")
    return float(value)


def _parse_int(
    raw: dict[str, Any], key: str, default: int | None, *, file_path: Path, section: str
) -> int | None:
    value = raw.get(key, default)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{file_path}: [{section}].{key} must be an integer, got {value!r}")
    return value


def _parse_bool(value: Any, *, file_path: Path, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in ("true", "1", "yes", "on"):
            return True
        if normalized in ("false", "0", "no", "off"):
            return False
    raise ValueError(f"{file_path}: {key} must be a boolean")


def _validate(*, file_path: Path, config: EngineConfig) -> None:
    rating = config.rating
    if rating.initial_rating <= 0.0:
        raise ValueError(f"{file_path}: [rating].initial_rating must be > 0")
    if rating.k_factor <= 0.0:
        raise ValueError(f"{file_path}: [rating].k_factor must be > 0")
    if rating.scale_factor <= 0.0:
        raise ValueError(f"{file_path}: [rating].scale_factor must be > 0")

    if not 0.0 <= config.scheduler.swap_probability <= 1.0:
        raise ValueError(f"{file_path}: [scheduler].swap_probability must be between 0 and 1")

    session = config.session
    if session.min_courts < 1:
        raise ValueError(f"{file_path}: [session].min_courts must be >= 1")
    if session.max_courts < session.min_courts:
        raise ValueError(f"{file_path}: [session].max_courts must be >= min_courts")
    if not session.min_courts <= session.default_courts <= session.max_courts:
        raise ValueError(f"{file_path}: [session].default_courts must be within min/max courts")
    if session.min_duration_hours < 1:
        raise ValueError(f"{file_path}: [session].min_duration_hours must be >= 1")
    if session.max_duration_hours < session.min_duration_hours:
        raise ValueError(f"{file_path}: [session].max_duration_hours must be >= min_duration_hours")
    if not session.min_duration_hours <= session.default_duration_hours <= session.max_duration_hours:
        raise ValueError(
            f"{file_path}: [session].default_duration_hours must be within min/max duration"
        )

    concurrency = config.concurrency
    if concurrency.lock_timeout_s <= 0.0:
        raise ValueError(f"{file_path}: [concurrency].lock_timeout_s must be > 0")
    if concurrency.lock_attempts < 1:
        raise ValueError(f"{file_path}: [concurrency].lock_attempts must be >= 1")
    if concurrency.conflict_retries < 1:
        raise ValueError(f"{file_path}: [concurrency].conflict_retries must be >= 1")

    if config.leaderboard_limit < 1:
        raise ValueError(f"{file_path}: [leaderboard].default_limit must be >= 1")


__all__ = [
    "ConcurrencySettings",
    "DEFAULT_CONFIG_PATH",
    "EngineConfig",
    "SchedulerSettings",
    "SessionSettings",
    "load_engine_config",
    "parse_engine_config",
]
