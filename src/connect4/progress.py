"""
Win / draw detection

Key idea: walk every line of the board once (columns, rows, rising and falling diagonals) while keeping a run of
consecutive occupants per line. An empty cell breaks the run. A line is won as soon as the last CONNECT_N entries
of its run belong to the same player.

Evaluation order is fixed, so two independent copies of the engine always agree on the result:
1. straight lines (column-major scan)
2. diagonals (rising first, then falling)
3. full board --> draw
"""

import logging
from typing import Iterator, Optional

from src.connect4.board import Board
from src.connect4.board_size import CONNECT_N, BoardSize
from src.core.shared_types import GameStatus

logger = logging.getLogger(__name__)

Grid = dict[tuple[int, int], str]
Position = tuple[int, int]

# (column step, row step)
RISING: tuple[int, int] = (1, 1)
FALLING: tuple[int, int] = (1, -1)


def evaluate_progress(
    board: Board, board_size: Optional[BoardSize] = None
) -> tuple[GameStatus, Optional[str]]:
    """
    Status of the game given the pieces on the board
    ----

    * (COMPLETE, winner) if any player has CONNECT_N in a line. A win beats a full board.
    * (DRAW, None) if the board is full without a winner
    * (ACTIVE, None) otherwise
    """
    size = board_size or board.size
    grid = board.grid()

    winner = straight_line_winner(grid, size) or diagonal_winner(grid, size)
    if winner is not None:
        logger.debug("%s connected %d after %d moves", winner, CONNECT_N, len(grid))
        return GameStatus.COMPLETE, winner

    if len(grid) >= size.capacity:
        logger.debug("Board full after %d moves without a winner", len(grid))
        return GameStatus.DRAW, None

    return GameStatus.ACTIVE, None


def straight_line_winner(grid: Grid, size: BoardSize) -> Optional[str]:
    """
    Single pass over the board, outer loop over the columns, inner loop over the rows.
    ---

    * column_runs[c] grows with every row visited in column c (the vertical run)
    * row_runs[r] grows by one entry per column visited (the horizontal run)
    """
    column_runs: list[list[str]] = [[] for _ in range(size.columns)]
    row_runs: list[list[str]] = [[] for _ in range(size.rows)]

    for column in range(size.columns):
        for row in range(size.rows):
            occupant = grid.get((column, row))
            if occupant is None:
                column_runs[column].clear()
                row_runs[row].clear()
                continue

            column_runs[column].append(occupant)
            row_runs[row].append(occupant)
            if has_connect_n(column_runs[column]) or has_connect_n(row_runs[row]):
                return occupant
    return None


def diagonal_winner(grid: Grid, size: BoardSize) -> Optional[str]:
    """Walk every diagonal long enough to hold CONNECT_N pieces, keeping a run per diagonal."""
    for line in diagonal_lines(size):
        run: list[str] = []
        for position in line:
            occupant = grid.get(position)
            if occupant is None:
                run.clear()
                continue
            run.append(occupant)
            if has_connect_n(run):
                return occupant
    return None


def diagonal_lines(size: BoardSize) -> Iterator[list[Position]]:
    """
    Every diagonal of the board with at least CONNECT_N cells
    ---

    * rising diagonals start on the left edge (bottom to top) or on the bottom edge
    * falling diagonals start on the left edge (top to bottom) or on the top edge

    Each cell lies on exactly one rising and one falling diagonal, so no window of CONNECT_N cells is skipped or
    visited twice, also on rectangular boards.
    """
    rising_starts = [(0, row) for row in range(size.rows)] + [
        (column, 0) for column in range(1, size.columns)
    ]
    falling_starts = [(0, row) for row in range(size.rows - 1, -1, -1)] + [
        (column, size.rows - 1) for column in range(1, size.columns)
    ]

    for direction, starts in ((RISING, rising_starts), (FALLING, falling_starts)):
        for start in starts:
            line = ray(start, direction, size)
            if len(line) >= CONNECT_N:
                yield line


def ray(start: Position, direction: tuple[int, int], size: BoardSize) -> list[Position]:
    """Positions from `start` along `direction` until the edge of the board."""
    positions: list[Position] = []
    column, row = start
    d_column, d_row = direction
    while size.contains(column, row):
        positions.append((column, row))
        column += d_column
        row += d_row
    return positions


def has_connect_n(run: list[str]) -> bool:
    """The last CONNECT_N entries of the run exist and belong to the same player."""
    if len(run) < CONNECT_N:
        return False
    last = run[-CONNECT_N:]
    return all(occupant == last[0] for occupant in last)
