"""
Custom exceptions shared by all layers.

Everything a caller is expected to handle derives from GameError.
InternalInconsistencyError deliberately does not: it signals a bug in the engine itself.
"""

from typing import Optional

from src.core.shared_types import TransitionKind


class GameError(Exception):
    """Top-level exception for any rejected game proposal."""


# --- DOMAIN ---
class ConfigurationError(GameError):
    """Illegal board size, non-distinct participants or an invalid color selection."""


class IllegalTransitionError(GameError):
    """A proposed next state violates one of the lifecycle invariants."""

    def __init__(
        self,
        message: str,
        kind: Optional[TransitionKind] = None,
        actor: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.actor = actor


class NotYourTurnError(IllegalTransitionError):
    """Move proposed by a player that does not hold the turn."""


class BoardViolationError(GameError):
    """A move that cannot be placed on the board."""


class InvalidColumnError(BoardViolationError):
    pass


class ColumnFullError(BoardViolationError):
    pass


class CellOccupiedError(BoardViolationError):
    pass


class InternalInconsistencyError(RuntimeError):
    """The engine produced (or was handed) a state it should never produce. Not a normal rejection."""


# --- BOUNDARY ---
class InvalidRequestError(GameError):
    """Request model failed validation."""


class InvalidRecordError(GameError):
    """A stored record cannot be turned back into domain objects."""


class RepositoryError(GameError):
    """Record lookup failed."""
