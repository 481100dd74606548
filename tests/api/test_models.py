from uuid import UUID, uuid4

import pytest

from src.api.models import (
    GameSnapshot,
    LegalDestinationsRequest,
    MoveRecordModel,
    MoveRequest,
    PieceModel,
)
from src.core.exceptions import InvalidRequestError, InvariantViolation
from src.rules.board import Board
from src.rules.game import MoveAccepted, try_move
from src.rules.pieces import Color, PieceKind
from src.rules.position import Position


@pytest.fixture
def mock_id() -> UUID:
    return uuid4()


def piece_data(piece_id: str, square: str, kind: str = "knight", color: str = "white") -> dict:
    return {"id": piece_id, "kind": kind, "color": color, "square": square}


# -- SNAPSHOTS --
def test_snapshot_round_trip(starting_board: Board) -> None:
    """Serialize a game in progress and load it again: nothing gets lost on the way"""
    outcome = try_move(
        starting_board, (), Color.WHITE, Position.from_algebraic("e2"), Position.from_algebraic("e4")
    )
    assert isinstance(outcome, MoveAccepted)

    snapshot = GameSnapshot.from_domain(outcome.board, outcome.history, Color.BLACK)
    loaded = GameSnapshot.model_validate_json(snapshot.model_dump_json())
    assert loaded.board() == outcome.board
    assert loaded.moves() == outcome.history
    assert loaded.side_to_move == Color.BLACK


def test_piece_model_round_trip() -> None:
    model = PieceModel(**piece_data("wn1", "b1"))
    piece = model.to_domain()
    assert piece.kind == PieceKind.KNIGHT
    assert piece.position == Position.from_algebraic("b1")
    assert piece.has_moved is None
    assert PieceModel.from_domain(piece) == model


def test_move_record_model_keeps_flags(castling_board: Board) -> None:
    outcome = try_move(
        castling_board, (), Color.WHITE, Position.from_algebraic("e1"), Position.from_algebraic("c1")
    )
    assert isinstance(outcome, MoveAccepted)
    model = MoveRecordModel.from_domain(outcome.record)
    assert model.is_castling
    assert model.from_square == "e1"
    assert model.to_square == "c1"
    assert model.to_domain() == outcome.record


def test_duplicate_piece_ids() -> None:
    with pytest.raises(InvariantViolation):
        GameSnapshot(pieces=[piece_data("wn1", "b1"), piece_data("wn1", "g1")])


def test_two_pieces_on_one_square() -> None:
    with pytest.raises(InvariantViolation):
        GameSnapshot(pieces=[piece_data("wn1", "e4"), piece_data("bb1", "e4", "bishop", "black")])


def test_two_kings_of_one_color() -> None:
    with pytest.raises(InvariantViolation):
        GameSnapshot(
            pieces=[piece_data("wk", "e1", "king"), piece_data("wk2", "e3", "king")]
        )


@pytest.mark.parametrize("square", ["i1", "a9", "a0", "e", "e44"])
def test_piece_on_invalid_square(square: str) -> None:
    with pytest.raises(InvariantViolation):
        GameSnapshot(pieces=[piece_data("wn1", square)])


def test_history_out_of_order(starting_board: Board) -> None:
    knight = starting_board.piece("wn2")
    first = {
        "piece": PieceModel.from_domain(knight).model_dump(),
        "from_square": "g1",
        "to_square": "f3",
        "sequence": 2,
    }
    second = {**first, "sequence": 1}
    with pytest.raises(InvariantViolation):
        GameSnapshot(pieces=[piece_data("wn2", "f3")], history=[first, second])


def test_side_to_move_after_own_move(starting_board: Board) -> None:
    """White just moved, so a snapshot claiming white is to move again is rejected"""
    outcome = try_move(
        starting_board, (), Color.WHITE, Position.from_algebraic("e2"), Position.from_algebraic("e4")
    )
    assert isinstance(outcome, MoveAccepted)
    data = GameSnapshot.from_domain(outcome.board, outcome.history, Color.BLACK).model_dump()
    data["side_to_move"] = "white"

    with pytest.raises(InvariantViolation):
        GameSnapshot.model_validate(data)


# -- Validation - MoveRequest --
def test_valid_square_names(mock_id: UUID) -> None:
    """Test that MoveRequest accepts correctly written squares in algebraic notation."""
    request = MoveRequest(game_id=mock_id, color=Color.WHITE, from_square="e2", to_square="e4")
    assert request.from_square == "e2"
    assert request.to_square == "e4"


@pytest.mark.parametrize(
    "square",
    [
        "nonsense",  # anything more than two characters.
        "11",  # First character is not a letter
        "aa",  # second character is not a number
        "e9",  # off the board
    ],
)
def test_invalid_square_names(mock_id: UUID, square: str) -> None:
    """Test that an exception is raised when using invalid square name."""
    with pytest.raises(InvalidRequestError):
        MoveRequest(game_id=mock_id, color=Color.WHITE, from_square=square, to_square="e4")

    with pytest.raises(InvalidRequestError):
        LegalDestinationsRequest(game_id=mock_id, square=square)
