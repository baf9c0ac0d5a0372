"""Error kinds raised by the game core."""

from __future__ import annotations

from typing import Any, List, Optional


class GameError(Exception):
    """Base class for errors raised by the game core."""


class ValidationError(GameError, ValueError):
    """Raised when caller supplied data violates an invariant."""

    def __init__(self, message: str, errors: Optional[List[Any]] = None):
        self.errors = list(errors or [])
        super().__init__(message)


class InvalidStateError(GameError, RuntimeError):
    """Raised when an operation is not legal in the current game state."""


__all__ = ["GameError", "InvalidStateError", "ValidationError"]
