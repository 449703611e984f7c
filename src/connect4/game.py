"""
The Game module is the entrypoint into the domain layer for the service layer.
It produces the next state of a game (create, accept, reject, move) as NEW immutable records.
Whether such a proposed state is an acceptable transition is decided separately by src/connect4/rules.py.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Optional, Self
from uuid import UUID, uuid4

from src.connect4.board import Board, apply_move
from src.connect4.board_size import MAX_BOARD_DIMENSION, MIN_BOARD_DIMENSION, BoardSize, Cell
from src.connect4.progress import evaluate_progress
from src.core.exceptions import (
    ConfigurationError,
    IllegalTransitionError,
    InvalidRecordError,
    NotYourTurnError,
)
from src.core.models import BoardModel, GameModel
from src.core.shared_types import Color, GameStatus, TransitionKind

logger = logging.getLogger(__name__)

AVAILABLE_COLOR_NAMES = [color.name for color in Color]


@dataclass(frozen=True)
class Game:
    initiator: str
    participant: str
    initiator_color: Color
    board_size: BoardSize
    participant_color: Optional[Color] = None
    status: GameStatus = GameStatus.PENDING
    victor: Optional[str] = None
    game_id: UUID = field(default_factory=uuid4)

    @property
    def participants(self) -> tuple[str, str]:
        return (self.initiator, self.participant)

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""
        return cls(
            initiator=model.initiator,
            participant=model.participant,
            initiator_color=_color_from_record(model.initiator_color),
            board_size=BoardSize.from_pair(model.board_size),
            participant_color=(
                _color_from_record(model.participant_color)
                if model.participant_color is not None
                else None
            ),
            status=_status_from_record(model.status),
            victor=model.victor,
            game_id=model.game_id,
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            game_id=self.game_id,
            initiator=self.initiator,
            participant=self.participant,
            initiator_color=self.initiator_color.value,
            participant_color=(
                self.participant_color.value if self.participant_color else None
            ),
            board_size=self.board_size.to_pair(),
            status=self.status.value,
            victor=self.victor,
        )


@dataclass(frozen=True)
class BoardState:
    """The board of a game together with whose turn it is. A new BoardState is created for every move."""

    game_id: UUID
    board: Board
    initiator: str
    participant: str
    next_turn: str
    move_number: int = 1
    status: GameStatus = GameStatus.ACTIVE
    board_id: UUID = field(default_factory=uuid4)

    @property
    def board_size(self) -> BoardSize:
        return self.board.size

    @property
    def participants(self) -> tuple[str, str]:
        return (self.initiator, self.participant)

    def opponent_of(self, player: str) -> str:
        return self.participant if player == self.initiator else self.initiator

    @classmethod
    def from_model(cls, model: BoardModel) -> Self:
        size = BoardSize.from_pair(model.board_size)
        cells = {
            move_index: Cell(column, row, occupant)
            for move_index, (column, row, occupant) in sorted(model.cells.items())
        }
        return cls(
            game_id=model.game_id,
            board=Board(size, cells),
            initiator=model.initiator,
            participant=model.participant,
            next_turn=model.next_turn,
            move_number=model.move_number,
            status=_status_from_record(model.status),
            board_id=model.board_id,
        )

    def to_model(self) -> BoardModel:
        return BoardModel(
            board_id=self.board_id,
            game_id=self.game_id,
            board_size=self.board_size.to_pair(),
            initiator=self.initiator,
            participant=self.participant,
            next_turn=self.next_turn,
            move_number=self.move_number,
            status=self.status.value,
            cells={
                move_index: (cell.column, cell.row, cell.occupant)
                for move_index, cell in self.board.cells.items()
            },
        )


@dataclass(frozen=True)
class MoveOutcome:
    """Result of proposing a move: the next board state plus the game status it leads to."""

    board_state: BoardState
    status: GameStatus
    victor: Optional[str] = None

    @property
    def kind(self) -> TransitionKind:
        """Which board transition this outcome corresponds to"""
        if self.status == GameStatus.COMPLETE:
            return TransitionKind.WINNING_PLAY
        if self.status == GameStatus.DRAW:
            return TransitionKind.DRAW
        return TransitionKind.PLAY

    def is_game_over(self) -> bool:
        return self.status != GameStatus.ACTIVE


# --- DOMAIN LAYER API CALLED BY SERVICE ---
def create_game(
    initiator: str,
    participant: str,
    initiator_color: Color | str,
    board_size: BoardSize | tuple[int, int],
) -> Game:
    """The initiator invites the participant to a game on a board of the given size."""
    size = board_size if isinstance(board_size, BoardSize) else BoardSize.from_pair(board_size)
    if not size.is_within_bounds():
        raise ConfigurationError(
            f"Cannot create new game. Board size {size.columns}x{size.rows} must be between "
            f"{MIN_BOARD_DIMENSION}x{MIN_BOARD_DIMENSION} and {MAX_BOARD_DIMENSION}x{MAX_BOARD_DIMENSION}."
        )
    if initiator == participant:
        raise ConfigurationError(
            f"Cannot create new game. {initiator!r} cannot play against themselves."
        )
    color = parse_color(initiator_color)

    game = Game(
        initiator=initiator,
        participant=participant,
        initiator_color=color,
        board_size=size,
    )
    logger.debug("Created game %s: %s invites %s", game.game_id, initiator, participant)
    return game


def accept_game(game: Game, participant_color: Color | str) -> tuple[Game, BoardState]:
    """
    The participant accepts the invitation
    ---

    The accepted game comes together with an empty board on which the initiator makes the first move.
    """
    _assert_status(game.status, GameStatus.PENDING, TransitionKind.ACCEPT_GAME)
    color = parse_color(participant_color)
    if color == game.initiator_color:
        raise ConfigurationError(
            f"Cannot accept game. Color {color} is already taken by {game.initiator}."
        )

    accepted = replace(game, participant_color=color, status=GameStatus.ACCEPTED)
    board_state = BoardState(
        game_id=game.game_id,
        board=Board.empty(game.board_size),
        initiator=game.initiator,
        participant=game.participant,
        next_turn=game.initiator,
    )
    return accepted, board_state


def reject_game(game: Game) -> Game:
    """The participant declines the invitation"""
    _assert_status(game.status, GameStatus.PENDING, TransitionKind.REJECT_GAME)
    return replace(game, status=GameStatus.REJECTED)


def activate_game(game: Game) -> Game:
    """First move played --> the accepted game becomes active"""
    _assert_status(game.status, GameStatus.ACCEPTED, TransitionKind.ACTIVATE)
    return replace(game, status=GameStatus.ACTIVE)


def complete_game(game: Game, status: GameStatus, victor: Optional[str]) -> Game:
    """Record the final outcome (a win or a draw) on the game"""
    _assert_status(game.status, GameStatus.ACTIVE, TransitionKind.COMPLETE_GAME)
    if status not in (GameStatus.COMPLETE, GameStatus.DRAW):
        raise IllegalTransitionError(
            f"A game can only be completed with a victor or a draw, not with status {status}.",
            kind=TransitionKind.COMPLETE_GAME,
        )
    return replace(game, status=status, victor=victor if status == GameStatus.COMPLETE else None)


def propose_move(board_state: BoardState, column: int, mover: str) -> MoveOutcome:
    """
    Attempt to drop a piece
    -----

    1. make sure the board is (still) active
    2. place the piece (board violations are reported regardless of whose turn it is)
    3. make sure it is the mover's turn
    4. evaluate the new board: win, draw or keep playing
    5. hand the turn to the opponent and bump the move number
    """
    if board_state.status != GameStatus.ACTIVE:
        raise IllegalTransitionError(
            f"Board is not active. status: {board_state.status}",
            kind=TransitionKind.PLAY,
            actor=mover,
        )

    board = apply_move(board_state.board, column, mover, board_state.move_number)

    if mover != board_state.next_turn:
        raise NotYourTurnError(
            f"It is not your turn. Waiting for player {board_state.next_turn} to make a move first.",
            kind=TransitionKind.PLAY,
            actor=mover,
        )

    status, victor = evaluate_progress(board)
    next_board_state = replace(
        board_state,
        board=board,
        next_turn=board_state.opponent_of(mover),
        move_number=board_state.move_number + 1,
        status=GameStatus.ACTIVE if status == GameStatus.ACTIVE else GameStatus.COMPLETE,
    )
    logger.debug(
        "Move %d by %s in column %d --> %s",
        board_state.move_number,
        mover,
        column,
        status,
    )
    return MoveOutcome(next_board_state, status, victor)


def parse_color(color: Color | str) -> Color:
    """Accept either the enum or its name (case insensitive)"""
    if isinstance(color, Color):
        return color
    if color.upper() not in AVAILABLE_COLOR_NAMES:
        raise ConfigurationError(
            f"Color {color} not in {','.join([c.lower() for c in AVAILABLE_COLOR_NAMES])}."
        )
    return Color[color.upper()]


# -- PRIVATE HELPERS ---
def _assert_status(actual: GameStatus, expected: GameStatus, kind: TransitionKind) -> None:
    if actual != expected:
        raise IllegalTransitionError(
            f"Cannot {kind}: game status is {actual}, expected {expected}.",
            kind=kind,
        )


def _status_from_record(status_name: str) -> GameStatus:
    if status_name.upper() not in GameStatus.__members__:
        raise InvalidRecordError(
            f"Invalid status code: {status_name!r}. \nPick one from {','.join([status.value for status in GameStatus])}"
        )
    return GameStatus[status_name.upper()]


def _color_from_record(color_name: str) -> Color:
    if color_name.upper() not in AVAILABLE_COLOR_NAMES:
        raise InvalidRecordError(f"Invalid color code: {color_name!r}.")
    return Color[color_name.upper()]
