"""Protocol repository: lookup-by-identifier of the current records. Storage itself is provided by the surrounding platform."""

from typing import Protocol
from uuid import UUID

from src.core.models import BoardModel, GameModel


class GameRepository(Protocol):
    """Persistence layer orchestration"""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        ...

    def create_game(self, game: GameModel) -> GameModel:
        """Store a new game record and return the stored data."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Replace the current record of an existing game."""
        ...

    def get_board(self, game_id: UUID) -> BoardModel | None:
        """Get the current board of a game, if it has one (only after the game got accepted)."""
        ...

    def save_board(self, board: BoardModel) -> BoardModel:
        """Store the board record as the current board of its game."""
        ...
