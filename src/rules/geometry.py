"""
Board-bounds and occupancy queries shared by every move generator.
"""

from enum import Enum, auto
from typing import Optional

from src.rules.board import Board
from src.rules.pieces import Color, Piece
from src.rules.position import Position


class AnyPiece(Enum):
    """Color filter that matches a piece of either color"""

    ANY = auto()


ANY_PIECE = AnyPiece.ANY

ColorFilter = Color | AnyPiece


def on_board(position: Position) -> bool:
    return position.is_within_bounds()


def occupant(position: Position, board: Board) -> Optional[Piece]:
    return board.occupant(position)


def occupied_by_color(position: Position, board: Board, color_filter: ColorFilter) -> bool:
    """
    Tell "empty", "enemy" and "friendly" squares apart
    ----

    * ANY_PIECE: True if anything stands on the square
    * a Color: True only if a piece of that color stands on the square
    """
    piece = board.occupant(position)
    if piece is None:
        return False
    if color_filter is ANY_PIECE:
        return True
    return piece.color == color_filter


def opponent(color: Color) -> Color:
    return Color.WHITE if color == Color.BLACK else Color.BLACK
