"""
Type definitions used across layers
"""

from enum import StrEnum


class GameStatus(StrEnum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    ACTIVE = "active"
    COMPLETE = "complete"
    DRAW = "draw"


class Color(StrEnum):
    RED = "red"
    BLUE = "blue"
    YELLOW = "yellow"
    BLACK = "black"


class TransitionKind(StrEnum):
    """The kinds of state transitions GameRules knows how to validate."""

    NEW_GAME = "new game"
    ACCEPT_GAME = "accept game"
    REJECT_GAME = "reject game"
    ACTIVATE = "activate"
    PLAY = "play"
    WINNING_PLAY = "winning play"
    DRAW = "draw"
    COMPLETE_GAME = "complete game"
