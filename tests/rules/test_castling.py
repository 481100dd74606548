"""unit tests for src/rules/castling.py"""

import pytest

from src.rules.castling import (
    CastlingSide,
    castling_squares,
    is_castling_step,
    side_of_castling,
    squares_between_on_rank,
)
from src.rules.position import Position


def sq(name: str) -> Position:
    return Position.from_algebraic(name)


@pytest.mark.parametrize(
    "king_from, side, king_to, rook_from, rook_to",
    [
        ("e1", CastlingSide.KING_SIDE, "g1", "h1", "f1"),
        ("e1", CastlingSide.QUEEN_SIDE, "c1", "a1", "d1"),
        ("e8", CastlingSide.KING_SIDE, "g8", "h8", "f8"),
        ("e8", CastlingSide.QUEEN_SIDE, "c8", "a8", "d8"),
    ],
)
def test_castling_squares(
    king_from: str, side: CastlingSide, king_to: str, rook_from: str, rook_to: str
) -> None:
    squares = castling_squares(sq(king_from), side)
    assert squares.king_from == sq(king_from)
    assert squares.king_to == sq(king_to)
    assert squares.rook_from == sq(rook_from)
    assert squares.rook_to == sq(rook_to)


def test_side_of_castling() -> None:
    assert side_of_castling(sq("e1"), sq("g1")) == CastlingSide.KING_SIDE
    assert side_of_castling(sq("e8"), sq("c8")) == CastlingSide.QUEEN_SIDE


@pytest.mark.parametrize(
    "king_from, king_to, expected",
    [("e1", "g1", True), ("e1", "c1", True), ("e1", "f1", False), ("e1", "g2", False)],
)
def test_is_castling_step(king_from: str, king_to: str, expected: bool) -> None:
    assert is_castling_step(sq(king_from), sq(king_to)) == expected


def test_squares_between_on_rank() -> None:
    assert squares_between_on_rank(sq("e1"), sq("a1")) == [sq("d1"), sq("c1"), sq("b1")]
    assert squares_between_on_rank(sq("e8"), sq("h8")) == [sq("f8"), sq("g8")]
    assert squares_between_on_rank(sq("e1"), sq("f1")) == []


def test_squares_between_requires_same_rank() -> None:
    with pytest.raises(ValueError):
        squares_between_on_rank(sq("e1"), sq("e8"))
