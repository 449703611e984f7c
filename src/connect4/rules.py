"""
Transition legality
----

Given the records before a transition and the records proposed after it, decide whether the transition may be
committed. Nothing is signed, stored or sent from here: the caller does that once a transition is accepted.

Each transition kind is its own small record carrying only what that kind needs. `validate` dispatches on the
record type. The checks of every kind run in a fixed order and the first violation is raised:

1. shape: which records are consumed / produced
2. content: the state fields of those records
3. actor: who is allowed to propose the transition
"""

import logging
from dataclasses import dataclass
from typing import ClassVar, Optional, TypeVar

from src.connect4.board import apply_move
from src.connect4.board_size import MAX_BOARD_DIMENSION, MIN_BOARD_DIMENSION
from src.connect4.game import BoardState, Game
from src.connect4.progress import evaluate_progress
from src.core.exceptions import (
    CellOccupiedError,
    IllegalTransitionError,
    NotYourTurnError,
)
from src.core.shared_types import Color, GameStatus, TransitionKind

logger = logging.getLogger(__name__)

T = TypeVar("T")


# --- TRANSITIONS ---
@dataclass(frozen=True)
class NewGame:
    proposed_game: Optional[Game]
    prior_game: Optional[Game] = None
    kind: ClassVar[TransitionKind] = TransitionKind.NEW_GAME


@dataclass(frozen=True)
class AcceptGame:
    """Accepting a game also creates its (empty) board."""

    prior_game: Optional[Game]
    proposed_game: Optional[Game]
    proposed_board: Optional[BoardState]
    prior_board: Optional[BoardState] = None
    kind: ClassVar[TransitionKind] = TransitionKind.ACCEPT_GAME


@dataclass(frozen=True)
class RejectGame:
    prior_game: Optional[Game]
    proposed_game: Optional[Game]
    kind: ClassVar[TransitionKind] = TransitionKind.REJECT_GAME


@dataclass(frozen=True)
class Activate:
    """The first move on the board turns the accepted game into an active one."""

    prior_game: Optional[Game]
    proposed_game: Optional[Game]
    prior_board: Optional[BoardState]
    kind: ClassVar[TransitionKind] = TransitionKind.ACTIVATE


@dataclass(frozen=True)
class Play:
    prior_board: Optional[BoardState]
    proposed_board: Optional[BoardState]
    mover: Optional[str]
    kind: ClassVar[TransitionKind] = TransitionKind.PLAY


@dataclass(frozen=True)
class WinningPlay:
    prior_board: Optional[BoardState]
    proposed_board: Optional[BoardState]
    mover: Optional[str]
    kind: ClassVar[TransitionKind] = TransitionKind.WINNING_PLAY


@dataclass(frozen=True)
class Draw:
    prior_board: Optional[BoardState]
    proposed_board: Optional[BoardState]
    mover: Optional[str]
    kind: ClassVar[TransitionKind] = TransitionKind.DRAW


@dataclass(frozen=True)
class CompleteGame:
    """If the final board is supplied, the declared outcome is checked against it."""

    prior_game: Optional[Game]
    proposed_game: Optional[Game]
    proposed_board: Optional[BoardState] = None
    kind: ClassVar[TransitionKind] = TransitionKind.COMPLETE_GAME


Transition = (
    NewGame | AcceptGame | RejectGame | Activate | Play | WinningPlay | Draw | CompleteGame
)
MoveTransition = Play | WinningPlay | Draw

# board transition for each outcome of a move
MOVE_TRANSITIONS: dict[TransitionKind, type[MoveTransition]] = {
    TransitionKind.PLAY: Play,
    TransitionKind.WINNING_PLAY: WinningPlay,
    TransitionKind.DRAW: Draw,
}


# --- ENTRYPOINTS ---
def validate(transition: Transition) -> None:
    """Raise on the first violated invariant. Returning means the transition may be committed."""
    match transition:
        case NewGame():
            _verify_new_game(transition)
        case AcceptGame():
            _verify_accept_game(transition)
        case RejectGame():
            _verify_reject_game(transition)
        case Activate():
            _verify_activate(transition)
        case Play() | WinningPlay() | Draw():
            _verify_move(transition)
        case CompleteGame():
            _verify_complete_game(transition)
        case _:
            raise IllegalTransitionError(f"Unknown transition {transition!r}.")

    logger.debug("%s transition accepted", transition.kind)


def validate_transition(
    kind: TransitionKind,
    prior_game: Optional[Game] = None,
    prior_board: Optional[BoardState] = None,
    proposed_game: Optional[Game] = None,
    proposed_board: Optional[BoardState] = None,
    mover: Optional[str] = None,
) -> None:
    """Build the transition record for `kind` from the supplied records and validate it."""
    transition: Transition
    match kind:
        case TransitionKind.NEW_GAME:
            transition = NewGame(proposed_game=proposed_game, prior_game=prior_game)
        case TransitionKind.ACCEPT_GAME:
            transition = AcceptGame(prior_game, proposed_game, proposed_board, prior_board)
        case TransitionKind.REJECT_GAME:
            transition = RejectGame(prior_game, proposed_game)
        case TransitionKind.ACTIVATE:
            transition = Activate(prior_game, proposed_game, prior_board)
        case TransitionKind.PLAY:
            transition = Play(prior_board, proposed_board, mover)
        case TransitionKind.WINNING_PLAY:
            transition = WinningPlay(prior_board, proposed_board, mover)
        case TransitionKind.DRAW:
            transition = Draw(prior_board, proposed_board, mover)
        case TransitionKind.COMPLETE_GAME:
            transition = CompleteGame(prior_game, proposed_game, proposed_board)
        case _:
            raise IllegalTransitionError(f"Unknown transition kind {kind!r}.")
    validate(transition)


# --- GAME TRANSITIONS ---
def _verify_new_game(transition: NewGame) -> None:
    kind = transition.kind

    # shape
    _require(
        transition.prior_game is None,
        "No previous game can be consumed when creating a new game.",
        kind,
    )
    _require(transition.proposed_game is not None, "There should be one game as an output.", kind)
    game = _present(transition.proposed_game)

    # content
    _verify_distinct_participants(game, kind)
    _require(
        game.status == GameStatus.PENDING,
        "The game should be pending acceptance by the participant.",
        kind,
    )
    _require(
        game.board_size.columns <= MAX_BOARD_DIMENSION and game.board_size.rows <= MAX_BOARD_DIMENSION,
        f"The board size cannot exceed {MAX_BOARD_DIMENSION}x{MAX_BOARD_DIMENSION}.",
        kind,
    )
    _require(
        game.board_size.columns >= MIN_BOARD_DIMENSION and game.board_size.rows >= MIN_BOARD_DIMENSION,
        f"The board size needs to be at least {MIN_BOARD_DIMENSION}x{MIN_BOARD_DIMENSION}.",
        kind,
    )
    _require(isinstance(game.initiator_color, Color), "The initiator should select a color.", kind)
    _require(
        game.participant_color is None,
        "The participant selects a color when accepting, not before.",
        kind,
    )
    _require(game.victor is None, "A new game cannot have a victor.", kind)


def _verify_accept_game(transition: AcceptGame) -> None:
    kind = transition.kind

    # shape
    _require(
        transition.prior_game is not None,
        "One game must be consumed when accepting a game.",
        kind,
    )
    _require(transition.proposed_game is not None, "There should be one game as an output.", kind)
    _require(
        transition.prior_board is None,
        "No previous board can be consumed when creating a new board.",
        kind,
    )
    _require(transition.proposed_board is not None, "There should be one board as an output.", kind)
    prior = _present(transition.prior_game)
    game = _present(transition.proposed_game)
    board = _present(transition.proposed_board)

    # content: the game
    _verify_distinct_participants(game, kind)
    _require(prior.status == GameStatus.PENDING, "The input game should be PENDING.", kind)
    _require(
        game.status == GameStatus.ACCEPTED,
        "The game should be accepted by the participant.",
        kind,
    )
    _verify_game_unchanged(prior, game, kind, allow_color_selection=True)
    _require(
        isinstance(game.participant_color, Color)
        and game.participant_color != game.initiator_color,
        "The participant should select a color different from the initiator's.",
        kind,
    )

    # content: the new board
    _verify_board_of_game(board, game, kind)
    _require(
        board.next_turn == game.initiator,
        "The first move should be by the initiator.",
        kind,
    )
    _require(board.move_number == 1, "The board should start with move number 1.", kind)
    _require(board.board.move_count == 0, "A new board should be empty.", kind)
    _require(board.status == GameStatus.ACTIVE, "A new board should be active.", kind)


def _verify_reject_game(transition: RejectGame) -> None:
    kind = transition.kind

    # shape
    _require(
        transition.prior_game is not None,
        "One game must be consumed when rejecting a game.",
        kind,
    )
    _require(transition.proposed_game is not None, "There should be one game as an output.", kind)
    prior = _present(transition.prior_game)
    game = _present(transition.proposed_game)

    # content
    _verify_distinct_participants(game, kind)
    _require(prior.status == GameStatus.PENDING, "The input game should be PENDING.", kind)
    _require(
        game.status == GameStatus.REJECTED,
        "The game should be rejected by the participant.",
        kind,
    )
    _verify_game_unchanged(prior, game, kind)


def _verify_activate(transition: Activate) -> None:
    kind = transition.kind

    # shape
    _require(
        transition.prior_game is not None,
        "One game must be consumed when activating a game.",
        kind,
    )
    _require(transition.proposed_game is not None, "There should be one game as an output.", kind)
    _require(
        transition.prior_board is not None,
        "The board receiving the first move must be supplied.",
        kind,
    )
    prior = _present(transition.prior_game)
    game = _present(transition.proposed_game)
    board = _present(transition.prior_board)

    # content
    _verify_distinct_participants(game, kind)
    _require(
        prior.status == GameStatus.ACCEPTED and game.status == GameStatus.ACTIVE,
        "The input game must be accepted and the output game must be active.",
        kind,
    )
    _verify_game_unchanged(prior, game, kind)
    _verify_board_of_game(board, game, kind)
    _require(board.move_number == 1, "A game can only be activated by the first move.", kind)


def _verify_complete_game(transition: CompleteGame) -> None:
    kind = transition.kind

    # shape
    _require(
        transition.prior_game is not None,
        "One game must be consumed when completing a game.",
        kind,
    )
    _require(transition.proposed_game is not None, "There should be one game as an output.", kind)
    prior = _present(transition.prior_game)
    game = _present(transition.proposed_game)

    # content
    _verify_distinct_participants(game, kind)
    _require(prior.status == GameStatus.ACTIVE, "The input game should be ACTIVE.", kind)
    _verify_game_unchanged(prior, game, kind)
    match game.status:
        case GameStatus.COMPLETE:
            _require(game.victor is not None, "The game should declare a victor when completed.", kind)
            _require(
                game.victor in game.participants,
                "The victor must be one of the players.",
                kind,
            )
        case GameStatus.DRAW:
            _require(game.victor is None, "The game should not declare a victor when a draw.", kind)
        case _:
            raise IllegalTransitionError(
                "You can only complete a game if there is a victor or a draw.", kind=kind
            )

    if transition.proposed_board is not None:
        board = transition.proposed_board
        _verify_board_of_game(board, game, kind)
        _require(board.status == GameStatus.COMPLETE, "The final board should be completed.", kind)
        _require(
            evaluate_progress(board.board) == (game.status, game.victor),
            "The game outcome must match the final board.",
            kind,
        )


# --- BOARD TRANSITIONS ---
def _verify_move(transition: MoveTransition) -> None:
    """
    Play, WinningPlay and Draw share the same structural checks
    ---

    They only differ in the status of the resulting board and the outcome the new board must evaluate to.
    """
    kind = transition.kind

    # shape
    _require(
        transition.prior_board is not None,
        "One board must be consumed when making a move.",
        kind,
    )
    _require(transition.proposed_board is not None, "There should be one board as an output.", kind)
    prior = _present(transition.prior_board)
    board = _present(transition.proposed_board)

    # content: unchanged fields
    _require(prior.status == GameStatus.ACTIVE, "Cannot play on a board that is no longer active.", kind)
    _require(
        board.board_id == prior.board_id and board.game_id == prior.game_id,
        "The board identity cannot change.",
        kind,
    )
    _require(
        board.participants == prior.participants,
        "The players of a board cannot change.",
        kind,
    )
    _require(board.board_size == prior.board_size, "The board size cannot change.", kind)

    # content: move bookkeeping
    _require(
        prior.move_number >= 1 and set(prior.board.cells) == set(range(1, prior.move_number)),
        "Move indices must be contiguous, starting at 1.",
        kind,
    )
    _require(
        board.move_number == prior.move_number + 1,
        "Move number must increment after each play.",
        kind,
    )
    _require(
        set(board.board.cells) == set(prior.board.cells) | {prior.move_number}
        and all(board.board.cells[index] == cell for index, cell in prior.board.cells.items()),
        "The board must extend the previous board by exactly one move.",
        kind,
    )

    # content: placement of the new piece
    new_cell = board.board.cells[prior.move_number]
    if new_cell.position in prior.board.occupied_positions():
        raise CellOccupiedError(
            f"Cannot have two moves on the same cell: {new_cell.position} is already occupied."
        )
    expected = apply_move(prior.board, new_cell.column, new_cell.occupant, prior.move_number)
    _require(
        expected == board.board,
        "A piece must land on the lowest free row of its column.",
        kind,
    )

    # content: turn and status
    _require(
        board.next_turn != prior.next_turn,
        "A player cannot have two consecutive turns.",
        kind,
    )
    _require(
        board.next_turn in board.participants,
        "The next turn must belong to one of the participants.",
        kind,
    )
    expected_board_status = GameStatus.ACTIVE if kind == TransitionKind.PLAY else GameStatus.COMPLETE
    _require(
        board.status == expected_board_status,
        f"Board state must be {expected_board_status} after a {kind}.",
        kind,
    )

    # content: the declared outcome must be what the board shows
    status, victor = evaluate_progress(board.board)
    match kind:
        case TransitionKind.PLAY:
            _require(
                status == GameStatus.ACTIVE,
                f"This move ends the game ({status}) and cannot be proposed as a regular play.",
                kind,
            )
        case TransitionKind.WINNING_PLAY:
            _require(status == GameStatus.COMPLETE, "A winning play must connect four.", kind)
        case TransitionKind.DRAW:
            _require(
                status == GameStatus.DRAW,
                "A draw requires a full board without a winner.",
                kind,
            )

    # actor
    mover = transition.mover
    _require(mover in prior.participants, f"{mover!r} is not playing on this board.", kind, actor=mover)
    if mover != prior.next_turn:
        raise NotYourTurnError(
            f"It is not your turn. Waiting for player {prior.next_turn} to make a move first.",
            kind=kind,
            actor=mover,
        )
    _require(new_cell.occupant == mover, "The placed piece must belong to the mover.", kind, actor=mover)
    if kind == TransitionKind.WINNING_PLAY:
        _require(victor == mover, "Only the player making the move can win with it.", kind, actor=mover)


# -- PRIVATE HELPERS ---
def _require(
    condition: bool,
    message: str,
    kind: TransitionKind,
    actor: Optional[str] = None,
) -> None:
    if not condition:
        raise IllegalTransitionError(message, kind=kind, actor=actor)


def _present(record: Optional[T]) -> T:
    """for the type checker: only called after the shape checks made sure the record exists"""
    assert record is not None
    return record


def _verify_distinct_participants(game: Game, kind: TransitionKind) -> None:
    _require(
        len(set(game.participants)) == 2,
        "There should be two distinct participants in the game.",
        kind,
    )


def _verify_game_unchanged(
    prior: Game, game: Game, kind: TransitionKind, allow_color_selection: bool = False
) -> None:
    """Only the status (and the participant's color, on acceptance) may change between two game records"""
    _require(game.game_id == prior.game_id, "The game identity cannot change.", kind)
    _require(game.participants == prior.participants, "The participants of a game cannot change.", kind)
    _require(game.initiator_color == prior.initiator_color, "The initiator's color cannot change.", kind)
    _require(game.board_size == prior.board_size, "The board size cannot change.", kind)
    if not allow_color_selection:
        _require(
            game.participant_color == prior.participant_color,
            "The participant's color cannot change.",
            kind,
        )


def _verify_board_of_game(board: BoardState, game: Game, kind: TransitionKind) -> None:
    _require(board.game_id == game.game_id, "The board must belong to the game.", kind)
    _require(board.participants == game.participants, "The board must be played by the game's participants.", kind)
    _require(board.board_size == game.board_size, "The board must have the game's size.", kind)
