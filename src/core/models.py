"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the repository (lower) and the service / API layer (higher) use the records defined here,
without needing to know about the domain objects in src/connect4.
"""

from dataclasses import dataclass, field
from typing import Optional
from uuid import UUID

# Type aliases to make the records easier to read
PlayerName = str
ColorName = str
StatusName = str
# (column, row, occupant)
CellRecord = tuple[int, int, PlayerName]


@dataclass
class GameModel:
    """Transport-safe representation of a game record."""

    game_id: UUID
    initiator: PlayerName
    participant: PlayerName
    initiator_color: ColorName
    participant_color: Optional[ColorName]
    board_size: tuple[int, int]
    status: StatusName
    victor: Optional[PlayerName] = None


@dataclass
class BoardModel:
    """Transport-safe representation of the board record belonging to a game."""

    board_id: UUID
    game_id: UUID
    board_size: tuple[int, int]
    initiator: PlayerName
    participant: PlayerName
    next_turn: PlayerName
    move_number: int
    status: StatusName
    cells: dict[int, CellRecord] = field(default_factory=dict)
