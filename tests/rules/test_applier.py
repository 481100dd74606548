"""Unit tests for /src/rules/applier.py"""

from dataclasses import replace

import pytest

from src.rules.applier import apply_move, move_effects, record_move
from src.rules.board import Board
from src.rules.pieces import Color, PieceKind
from src.rules.position import Position


def sq(name: str) -> Position:
    return Position.from_algebraic(name)


def play(board: Board, source: str, destination: str) -> Board:
    piece = board.occupant(sq(source))
    assert piece is not None, f"no piece on {source}"
    return apply_move(piece, sq(destination), board)


def test_ordinary_move(starting_board: Board) -> None:
    new_board = play(starting_board, "e2", "e4")
    pawn = new_board.piece("wp5")
    assert pawn.position == sq("e4")
    assert pawn.has_moved is True
    assert new_board.occupant(sq("e2")) is None
    assert len(new_board) == 32

    # the board we started from is untouched
    assert starting_board.piece("wp5").position == sq("e2")
    assert starting_board.piece("wp5").has_moved is False


def test_capture_removes_the_target() -> None:
    board = Board.from_fen("8/8/8/3p4/4P3/8/8/8")
    new_board = play(board, "e4", "d5")
    assert len(new_board) == 1
    assert new_board.occupant(sq("d5")).color == Color.WHITE


def test_en_passant_removes_the_pawn_beside() -> None:
    board = Board.from_fen("8/8/8/3pP3/8/8/8/8")
    new_board = play(board, "e5", "d6")
    assert len(new_board) == 1
    assert new_board.occupant(sq("d5")) is None
    assert new_board.occupant(sq("d6")).kind == PieceKind.PAWN


def test_black_en_passant() -> None:
    board = Board.from_fen("8/8/8/8/3Pp3/8/8/8")
    new_board = play(board, "e4", "d3")
    assert len(new_board) == 1
    assert new_board.occupant(sq("d4")) is None
    assert new_board.occupant(sq("d3")).color == Color.BLACK


def test_no_en_passant_removal_of_friendly_or_non_pawn_pieces() -> None:
    """Stepping diagonally onto an empty square only removes an ENEMY PAWN beside the start square"""
    board = Board.from_fen("8/8/8/3NP3/8/8/8/8")
    new_board = play(board, "e5", "d6")
    assert len(new_board) == 2
    assert new_board.occupant(sq("d5")).kind == PieceKind.KNIGHT

    board = Board.from_fen("8/8/8/3nP3/8/8/8/8")
    assert len(play(board, "e5", "d6")) == 2


@pytest.mark.parametrize(
    "king_from, king_to, rook_from, rook_to",
    [
        ("e1", "g1", "h1", "f1"),
        ("e1", "c1", "a1", "d1"),
        ("e8", "g8", "h8", "f8"),
        ("e8", "c8", "a8", "d8"),
    ],
)
def test_castling_moves_the_rook(
    castling_board: Board, king_from: str, king_to: str, rook_from: str, rook_to: str
) -> None:
    new_board = play(castling_board, king_from, king_to)
    king = new_board.occupant(sq(king_to))
    rook = new_board.occupant(sq(rook_to))
    assert king.kind == PieceKind.KING
    assert king.has_moved is True
    assert rook.kind == PieceKind.ROOK
    assert rook.has_moved is True
    assert new_board.occupant(sq(rook_from)) is None
    assert new_board.occupant(sq(king_from)) is None
    assert len(new_board) == 6


def test_moved_king_does_not_castle(castling_board: Board) -> None:
    king = replace(castling_board.occupant(sq("e1")), has_moved=True)
    effects = move_effects(king, sq("g1"), castling_board.with_piece(king))
    assert not effects.is_castling


@pytest.mark.parametrize(
    "fen, source, destination",
    [
        ("8/4P3/8/8/8/8/8/8", "e7", "e8"),
        ("8/8/8/8/8/8/4p3/8", "e2", "e1"),
        ("3r4/4P3/8/8/8/8/8/8", "e7", "d8"),
    ],
)
def test_promotion_to_queen(fen: str, source: str, destination: str) -> None:
    board = Board.from_fen(fen)
    pawn = board.occupant(sq(source))
    new_board = apply_move(pawn, sq(destination), board)
    promoted = new_board.piece(pawn.id)
    assert promoted.kind == PieceKind.QUEEN
    assert promoted.color == pawn.color
    assert promoted.position == sq(destination)
    assert len(new_board) == 1


def test_flags_only_tracked_kinds(starting_board: Board) -> None:
    new_board = play(starting_board, "g1", "f3")
    assert new_board.occupant(sq("f3")).has_moved is None

    board = Board.from_fen("8/8/8/8/8/8/8/R7")
    assert play(board, "a1", "a5").occupant(sq("a5")).has_moved is True


def test_record_move_for_ordinary_move(starting_board: Board) -> None:
    pawn = starting_board.piece("wp5")
    record = record_move(pawn, sq("e4"), starting_board, sequence=1)
    assert record.piece == pawn
    assert record.source == sq("e2")
    assert record.destination == sq("e4")
    assert record.sequence == 1
    assert not record.is_capture
    assert not record.is_promotion
    assert not record.is_castling
    assert not record.is_en_passant
    assert record.to_uci() == "e2e4"


def test_record_move_flags() -> None:
    board = Board.from_fen("8/8/8/3pP3/8/8/8/8")
    record = record_move(board.occupant(sq("e5")), sq("d6"), board, sequence=3)
    assert record.is_en_passant
    assert record.captured.position == sq("d5")

    board = Board.from_fen("3r4/4P3/8/8/8/8/8/8")
    record = record_move(board.occupant(sq("e7")), sq("d8"), board, sequence=7)
    assert record.promoted_to == PieceKind.QUEEN
    assert record.captured.kind == PieceKind.ROOK
    assert record.to_uci() == "e7d8q"


def test_record_castling(castling_board: Board) -> None:
    record = record_move(castling_board.occupant(sq("e8")), sq("c8"), castling_board, 2)
    assert record.is_castling
    assert record.captured is None
