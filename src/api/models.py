"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.connect4.board_size import DEFAULT_BOARD_SIZE
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, GameStatus

PlayerName = str
# (column, row, occupant)
CellView = tuple[int, int, PlayerName]


def _validate_player_name(value: str) -> str:
    """Names are identities: surrounding whitespace would make 'alice' and 'alice ' two different players."""
    name = value.strip()
    if not name:
        raise InvalidRequestError("Player name cannot be empty.")
    if name != value:
        raise InvalidRequestError(
            f"Player name {value!r} cannot start or end with whitespace."
        )
    return value


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    initiator: PlayerName
    participant: PlayerName
    color: Color
    columns: int = DEFAULT_BOARD_SIZE[0]
    rows: int = DEFAULT_BOARD_SIZE[1]

    @field_validator(*["initiator", "participant"])
    @classmethod
    def validate_player(cls, value: str) -> str:
        return _validate_player_name(value)


class AcceptGameRequest(BaseModel):
    game_id: UUID
    player_name: PlayerName
    color: Color


class RejectGameRequest(BaseModel):
    game_id: UUID
    player_name: PlayerName


class MoveRequest(BaseModel):
    game_id: UUID
    player_name: PlayerName
    column: int

    @field_validator("column")
    @classmethod
    def validate_column(cls, value: int) -> int:
        """Negative numbers never address a column. The upper bound depends on the game, so the domain checks that."""
        if value < 0:
            raise InvalidRequestError(f"Cannot interpret column: {value!r} as a column index.")
        return value


class GetGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    initiator: PlayerName
    participant: PlayerName
    colors: dict[PlayerName, Color]
    board_size: tuple[int, int]
    status: GameStatus
    victor: Optional[PlayerName] = None
    next_turn: Optional[PlayerName] = None
    move_number: Optional[int] = None
    moves: dict[int, CellView] = {}
