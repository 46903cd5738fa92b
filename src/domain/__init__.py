"""Session scheduling and rating engine."""

from domain.errors import (
    ConflictError,
    EngineError,
    InvalidSessionError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from domain.lifecycle import MatchStatus

__all__ = [
    "ConflictError",
    "EngineError",
    "InvalidSessionError",
    "InvalidTransitionError",
    "MatchStatus",
    "NotFoundError",
    "ValidationError",
]
