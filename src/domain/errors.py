"""Error kinds raised by the session engine."""

from __future__ import annotations


class EngineError(Exception):
    """Base class for every failure reported by the engine."""

    kind = "engine_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


class NotFoundError(EngineError):
    """Session, match or player does not exist."""

    kind = "not_found"


class InvalidSessionError(EngineError):
    """Operation against a session that is missing, inactive or expired."""

    kind = "invalid_session"


class InvalidTransitionError(EngineError):
    """Match state machine violation."""

    kind = "invalid_transition"


class ValidationError(EngineError):
    """Malformed input."""

    kind = "validation"


class ConflictError(EngineError):
    """Lock or transaction contention; the caller may retry."""

    kind = "conflict"


__all__ = [
    "ConflictError",
    "EngineError",
    "InvalidSessionError",
    "InvalidTransitionError",
    "NotFoundError",
    "ValidationError",
]
