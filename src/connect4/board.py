"""The Game board implements all rules that affect the placement of pieces (gravity stacking, full columns, bounds)."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Self

from src.connect4.board_size import BoardSize, Cell
from src.core.exceptions import (
    CellOccupiedError,
    ColumnFullError,
    InternalInconsistencyError,
    InvalidColumnError,
)


@dataclass(frozen=True)
class Board:
    """
    Snapshot of the pieces on the board.
    ----

    `cells` maps the move index (1, 2, ..., N in the order the moves were played) to the placed piece.
    A Board is never changed in place: applying a move returns a new Board. `cells` is stored as a read-only view
    of a private copy, so neither the caller's dict nor the board can be altered afterwards.
    """

    size: BoardSize
    cells: Mapping[int, Cell] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "cells", MappingProxyType(dict(self.cells)))

    @classmethod
    def empty(cls, size: BoardSize) -> Self:
        return cls(size, {})

    @property
    def move_count(self) -> int:
        return len(self.cells)

    def is_full(self) -> bool:
        return self.move_count >= self.size.capacity

    def occupant(self, column: int, row: int) -> Optional[str]:
        """Who occupies the given position (None if empty)"""
        return self.grid().get((column, row))

    def grid(self) -> dict[tuple[int, int], str]:
        """Position lookup: (column, row) -> occupant"""
        return {cell.position: cell.occupant for cell in self.cells.values()}

    def occupied_positions(self) -> set[tuple[int, int]]:
        return {cell.position for cell in self.cells.values()}

    def column_height(self, column: int) -> int:
        rows_in_column = [cell.row for cell in self.cells.values() if cell.column == column]
        return max(rows_in_column) + 1 if rows_in_column else 0

    def open_columns(self) -> list[int]:
        return [
            column
            for column in range(self.size.columns)
            if self.column_height(column) < self.size.rows
        ]

    def next_free_row(self, column: int) -> int:
        return next_free_row(self, column)

    def apply_move(self, column: int, occupant: str, move_number: int) -> "Board":
        return apply_move(self, column, occupant, move_number)


def next_free_row(board: Board, column: int) -> int:
    """
    Row a piece dropped in `column` lands on: one above the highest piece in that column (0 if the column is empty).
    """
    if not (0 <= column < board.size.columns):
        raise InvalidColumnError(
            f"Column {column} is outside the board. Pick one from 0 to {board.size.columns - 1}."
        )

    row = board.column_height(column)
    if row >= board.size.rows:
        raise ColumnFullError(f"Column {column} is full.")
    return row


def apply_move(board: Board, column: int, occupant: str, move_number: int) -> Board:
    """
    Drop a piece for `occupant` in `column`
    ----

    1. find the landing row (raises for an invalid or a full column)
    2. make sure the landing cell is not taken (cannot happen when the landing row is computed correctly, but never trust a board blindly)
    3. make sure the move index continues the sequence of moves without a gap
    4. return a NEW board with the extra cell stored under `move_number`
    """
    row = next_free_row(board, column)

    if (column, row) in board.occupied_positions():
        raise CellOccupiedError(f"Cell ({column}, {row}) is already occupied.")

    expected_move_number = board.move_count + 1
    if move_number != expected_move_number or move_number in board.cells:
        raise InternalInconsistencyError(
            f"Move index {move_number} does not follow the {board.move_count} moves on the board (expected {expected_move_number})."
        )

    cells = dict(board.cells)
    cells[move_number] = Cell(column, row, occupant)
    return Board(board.size, cells)
