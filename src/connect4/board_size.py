"""
Board dimensions and a single placed piece.

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

# Both the number of columns and the number of rows must lie in [MIN, MAX]
MIN_BOARD_DIMENSION = 4
MAX_BOARD_DIMENSION = 10
# the classic board: 7 columns, 6 rows
DEFAULT_BOARD_SIZE = (7, 6)
# pieces in a line needed to win
CONNECT_N = 4


@dataclass(frozen=True)
class BoardSize:
    columns: int
    rows: int

    @classmethod
    def from_pair(cls, pair: tuple[int, int]) -> BoardSize:
        columns, rows = pair
        return cls(columns, rows)

    def to_pair(self) -> tuple[int, int]:
        return (self.columns, self.rows)

    @property
    def capacity(self) -> int:
        return self.columns * self.rows

    def is_within_bounds(self) -> bool:
        return (MIN_BOARD_DIMENSION <= self.columns <= MAX_BOARD_DIMENSION) and (
            MIN_BOARD_DIMENSION <= self.rows <= MAX_BOARD_DIMENSION
        )

    def contains(self, column: int, row: int) -> bool:
        """Coordinates are 0-based, row 0 is the bottom of the board."""
        return (0 <= column < self.columns) and (0 <= row < self.rows)


@dataclass(frozen=True)
class Cell:
    column: int
    row: int
    occupant: str

    @property
    def position(self) -> tuple[int, int]:
        return (self.column, self.row)
