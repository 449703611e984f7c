from uuid import UUID, uuid4

import pytest
from pydantic import ValidationError

from src.api.models import (
    AcceptGameRequest,
    CreateGameRequest,
    GameResponse,
    MoveRequest,
)
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, GameStatus


@pytest.fixture
def mock_id() -> UUID:
    return uuid4()


# -- Validation - CreateGameRequest --
def test_create_game_defaults_to_classic_board() -> None:
    request = CreateGameRequest(initiator="alice", participant="bob", color=Color.RED)
    assert (request.columns, request.rows) == (7, 6)


def test_create_game_color_by_value() -> None:
    request = CreateGameRequest(initiator="alice", participant="bob", color="yellow", columns=10, rows=4)
    assert request.color == Color.YELLOW
    assert (request.columns, request.rows) == (10, 4)


@pytest.mark.parametrize(
    "name",
    [
        "",  # empty
        "   ",  # only whitespace
        " alice",  # leading whitespace
        "bob\n",  # trailing whitespace
    ],
)
def test_invalid_player_name(name: str) -> None:
    with pytest.raises(InvalidRequestError):
        _ = CreateGameRequest(initiator=name, participant="carol", color=Color.RED)
    with pytest.raises(InvalidRequestError):
        _ = CreateGameRequest(initiator="carol", participant=name, color=Color.RED)


def test_unknown_color_rejected() -> None:
    """Not a custom validator: pydantic itself refuses values outside the Color enum."""
    with pytest.raises(ValidationError):
        _ = CreateGameRequest(initiator="alice", participant="bob", color="rainbow")


def test_accept_game_request(mock_id: UUID) -> None:
    request = AcceptGameRequest(game_id=mock_id, player_name="bob", color=Color.BLUE)
    assert request.game_id == mock_id
    assert request.color == Color.BLUE


# -- Validation - MoveRequest --
@pytest.mark.parametrize("column", [0, 3, 9])
def test_valid_column(mock_id: UUID, column: int) -> None:
    request = MoveRequest(game_id=mock_id, player_name="alice", column=column)
    assert request.column == column


@pytest.mark.parametrize("column", [-1, -7])
def test_negative_column(mock_id: UUID, column: int) -> None:
    with pytest.raises(InvalidRequestError):
        _ = MoveRequest(game_id=mock_id, player_name="alice", column=column)


# -- GameResponse --
def test_game_response_defaults(mock_id: UUID) -> None:
    """A pending game has no board yet: no turn, no move number, no moves."""
    response = GameResponse(
        game_id=mock_id,
        initiator="alice",
        participant="bob",
        colors={"alice": Color.RED},
        board_size=(7, 6),
        status=GameStatus.PENDING,
    )
    assert response.victor is None
    assert response.next_turn is None
    assert response.move_number is None
    assert response.moves == {}
