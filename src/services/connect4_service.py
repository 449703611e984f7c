"""Orchestration of communication from the caller to the business logic and persistence layers (and the reverse direction)."""

import logging
from typing import Optional, Protocol
from uuid import UUID

from src.api.models import (
    AcceptGameRequest,
    CreateGameRequest,
    GameResponse,
    GetGameRequest,
    MoveRequest,
    RejectGameRequest,
)
from src.connect4.board_size import BoardSize
from src.connect4.game import (
    BoardState,
    Game,
    accept_game,
    activate_game,
    complete_game,
    create_game,
    propose_move,
    reject_game,
)
from src.connect4.rules import (
    MOVE_TRANSITIONS,
    AcceptGame,
    Activate,
    CompleteGame,
    Draw,
    NewGame,
    Play,
    RejectGame,
    Transition,
    WinningPlay,
    validate,
)
from src.core.exceptions import GameError, IllegalTransitionError, RepositoryError
from src.core.shared_types import GameStatus
from src.db.repository import GameRepository

logger = logging.getLogger(__name__)


class TransitionSigner(Protocol):
    """Collects the signatures of the given players over a transition that GameRules accepted."""

    def sign(self, transition: Transition, signers: tuple[str, ...]) -> None: ...


def required_signers(transition: Transition) -> tuple[str, ...]:
    """
    Who has to agree to a transition
    ---

    * creating a game / activating it with the first move: the initiator
    * accepting or rejecting: the invited participant
    * a regular move: the player making it
    * anything that ends the game: both players
    """
    match transition:
        case NewGame(proposed_game=Game() as game):
            return (game.initiator,)
        case AcceptGame(proposed_game=Game() as game) | RejectGame(proposed_game=Game() as game):
            return (game.participant,)
        case Activate(proposed_game=Game() as game):
            return (game.initiator,)
        case Play(mover=str() as mover):
            return (mover,)
        case WinningPlay(proposed_board=BoardState() as board) | Draw(proposed_board=BoardState() as board):
            return board.participants
        case CompleteGame(proposed_game=Game() as game):
            return game.participants
    return ()


class Connect4Service:
    """Orchestration of layers for a game of Connect Four."""

    def __init__(
        self, repository: GameRepository, signer: Optional[TransitionSigner] = None
    ) -> None:
        self.repo = repository
        self.signer = signer

    # -- Caller-facing operations ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """The initiator invites a participant to a new game."""

        game = create_game(
            initiator=request.initiator,
            participant=request.participant,
            initiator_color=request.color,
            board_size=BoardSize(request.columns, request.rows),
        )
        self._commit(NewGame(proposed_game=game))

        stored = self.repo.create_game(game.to_model())
        logger.info("Game %s created by %s", game.game_id, game.initiator)
        return self._create_game_response(Game.from_model(stored), None)

    def accept_game(self, request: AcceptGameRequest) -> GameResponse:
        """The invited participant accepts and picks a color. The (empty) board gets created."""

        game = self._fetch_game(request.game_id)
        self._assert_invited(game, request.player_name)

        accepted, board = accept_game(game, request.color)
        self._commit(AcceptGame(prior_game=game, proposed_game=accepted, proposed_board=board))

        self.repo.update_game(game.game_id, accepted.to_model())
        self.repo.save_board(board.to_model())
        logger.info("Game %s accepted by %s", game.game_id, request.player_name)
        return self._create_game_response(accepted, board)

    def reject_game(self, request: RejectGameRequest) -> GameResponse:
        """The invited participant declines."""

        game = self._fetch_game(request.game_id)
        self._assert_invited(game, request.player_name)

        rejected = reject_game(game)
        self._commit(RejectGame(prior_game=game, proposed_game=rejected))

        self.repo.update_game(game.game_id, rejected.to_model())
        logger.info("Game %s rejected by %s", game.game_id, request.player_name)
        return self._create_game_response(rejected, None)

    def make_move(self, request: MoveRequest) -> GameResponse:
        """
        Make a move attempt
        -----

        1. propose the move on the current board
        2. the board transition: a regular play, a winning play or a draw
        3. the first move activates the game
        4. a move that ends the game completes it

        All transitions are validated before anything gets stored.
        """
        game = self._fetch_game(request.game_id)
        board = self._fetch_board(request.game_id)

        try:
            outcome = propose_move(board, request.column, request.player_name)
        except GameError as exc:
            logger.warning("Move rejected in game %s: %s", game.game_id, exc)
            raise

        move_transition = MOVE_TRANSITIONS[outcome.kind]
        transitions: list[Transition] = [
            move_transition(board, outcome.board_state, request.player_name)
        ]

        current_game = game
        if game.status == GameStatus.ACCEPTED and board.move_number == 1:
            activated = activate_game(current_game)
            transitions.append(Activate(current_game, activated, board))
            current_game = activated

        if outcome.is_game_over():
            completed = complete_game(current_game, outcome.status, outcome.victor)
            transitions.append(CompleteGame(current_game, completed, outcome.board_state))
            current_game = completed

        for transition in transitions:
            self._commit(transition)

        if current_game is not game:
            self.repo.update_game(game.game_id, current_game.to_model())
        self.repo.save_board(outcome.board_state.to_model())
        logger.info(
            "Move %d by %s in game %s --> %s",
            board.move_number,
            request.player_name,
            game.game_id,
            outcome.status,
        )
        return self._create_game_response(current_game, outcome.board_state)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by the other player to check when it is their turn for instance.
        """
        game = self._fetch_game(request.game_id)
        board_model = self.repo.get_board(request.game_id)
        board = BoardState.from_model(board_model) if board_model else None
        return self._create_game_response(game, board)

    # -- Internal helpers --
    def _commit(self, transition: Transition) -> None:
        """Validate a transition and, once accepted, collect the required signatures."""
        try:
            validate(transition)
        except GameError as exc:
            logger.warning("%s transition rejected: %s", transition.kind, exc)
            raise
        if self.signer is not None:
            self.signer.sign(transition, required_signers(transition))

    def _assert_invited(self, game: Game, player: str) -> None:
        """Only the invited participant answers an invitation."""
        if player != game.participant:
            raise IllegalTransitionError(
                f"Only {game.participant} can answer the invitation to game {game.game_id}.",
                actor=player,
            )

    def _create_game_response(
        self, game: Game, board: Optional[BoardState]
    ) -> GameResponse:
        """Convert the game (and its board, once there is one) into a GameResponse."""
        colors = {game.initiator: game.initiator_color}
        if game.participant_color is not None:
            colors[game.participant] = game.participant_color

        return GameResponse(
            game_id=game.game_id,
            initiator=game.initiator,
            participant=game.participant,
            colors=colors,
            board_size=game.board_size.to_pair(),
            status=game.status,
            victor=game.victor,
            next_turn=board.next_turn if board and board.status == GameStatus.ACTIVE else None,
            move_number=board.move_number if board else None,
            moves=board.to_model().cells if board else {},
        )

    def _fetch_game(self, game_id: UUID) -> Game:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return Game.from_model(game_model)

    def _fetch_board(self, game_id: UUID) -> BoardState:
        board_model = self.repo.get_board(game_id)
        if board_model is None:
            raise RepositoryError(f"No board found for game with {game_id=}.")
        return BoardState.from_model(board_model)
