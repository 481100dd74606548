"""Helpers for implementing Castling rules. Need to be imported by the move generator, the move applier, and the FEN reader"""

from dataclasses import dataclass
from enum import Enum

from src.core.config import BOARD_SIZE
from src.rules.pieces import Color
from src.rules.position import Position


class CastlingSide(Enum):
    """Values represent the direction the king travels along the rank."""

    KING_SIDE = 1
    QUEEN_SIDE = -1


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: Only the king's starting square is taken from the board, so castling works wherever the king stands on its rank.
    """

    king_from: Position
    king_to: Position
    rook_from: Position
    rook_to: Position


# The rook always starts in the corner of the king's rank
ROOK_FILES: dict[CastlingSide, int] = {
    CastlingSide.KING_SIDE: BOARD_SIZE - 1,
    CastlingSide.QUEEN_SIDE: 0,
}

HOME_RANKS: dict[Color, int] = {Color.WHITE: 0, Color.BLACK: BOARD_SIZE - 1}

# The king steps two squares towards its rook
KING_STEP = 2


def castling_squares(king_from: Position, side: CastlingSide) -> CastlingSquares:
    """The king moves two files towards the rook, the rook lands on the square the king passed over."""
    step = side.value
    king_to = king_from.offset(KING_STEP * step, 0)
    rook_from = Position(ROOK_FILES[side], king_from.rank)
    rook_to = king_to.offset(-step, 0)
    return CastlingSquares(king_from, king_to, rook_from, rook_to)


def side_of_castling(king_from: Position, king_to: Position) -> CastlingSide:
    """Castling to a higher file is king side, to a lower file is queen side"""
    return (
        CastlingSide.KING_SIDE
        if king_to.file > king_from.file
        else CastlingSide.QUEEN_SIDE
    )


def is_castling_step(king_from: Position, king_to: Position) -> bool:
    """A king moving exactly two files along its rank"""
    return (
        king_from.rank == king_to.rank
        and abs(king_to.file - king_from.file) == KING_STEP
    )


def squares_between_on_rank(from_square: Position, to_square: Position) -> list[Position]:
    """
    Find the squares strictly in between the two squares specified that are on the same rank

    Needed for checking if you can still castle (the generator will check which of those are empty)
    """

    if from_square.rank != to_square.rank:
        raise ValueError(
            f"squares_between_on_rank requires both squares to lie on the same rank. \n from: {from_square}\n to:{to_square}"
        )

    step = 1 if to_square.file > from_square.file else -1
    return [
        Position(file, from_square.rank)
        for file in range(from_square.file + step, to_square.file, step)
    ]
