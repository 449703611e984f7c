"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable

import pytest

from src.connect4.board import Board
from src.connect4.board_size import BoardSize, Cell
from src.connect4.game import BoardState, Game, accept_game, create_game, propose_move
from src.core.shared_types import Color

ALICE = "alice"
BOB = "bob"

PlayMoves = Callable[[BoardState, list[int]], BoardState]
BuildBoard = Callable[[BoardSize, dict[tuple[int, int], str]], Board]


@pytest.fixture
def pending_game() -> Game:
    """Alice (red) invites Bob on a classic 7x6 board."""
    return create_game(ALICE, BOB, Color.RED, (7, 6))


@pytest.fixture
def accepted_game(pending_game: Game) -> tuple[Game, BoardState]:
    """Bob accepted with yellow. Empty board, Alice to move."""
    return accept_game(pending_game, Color.YELLOW)


@pytest.fixture
def new_board_state() -> Callable[[tuple[int, int]], BoardState]:
    """Call the inner function with the desired board size to get a freshly accepted, empty board."""

    def _create(board_size: tuple[int, int]) -> BoardState:
        game = create_game(ALICE, BOB, Color.RED, board_size)
        _, board_state = accept_game(game, Color.YELLOW)
        return board_state

    return _create


@pytest.fixture
def play_moves() -> PlayMoves:
    """Play the given columns in turn, starting with whoever holds the turn."""

    def _play(board_state: BoardState, columns: list[int]) -> BoardState:
        for column in columns:
            board_state = propose_move(board_state, column, board_state.next_turn).board_state
        return board_state

    return _play


@pytest.fixture
def build_board() -> BuildBoard:
    """
    Build a board straight from a position -> occupant mapping.
    NOTE: ignores gravity and turn order. Only meant for testing the win / draw detection.
    """

    def _build(size: BoardSize, pieces: dict[tuple[int, int], str]) -> Board:
        cells = {
            move_index: Cell(column, row, occupant)
            for move_index, ((column, row), occupant) in enumerate(sorted(pieces.items()), start=1)
        }
        return Board(size, cells)

    return _build
