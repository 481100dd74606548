"""Defines the kinds and colors of chess pieces, and the piece itself"""

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Optional, Self

from src.rules.position import Position

PieceId = str


class PieceKind(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


FEN_TO_KIND: dict[str, PieceKind] = {
    "p": PieceKind.PAWN,
    "n": PieceKind.KNIGHT,
    "b": PieceKind.BISHOP,
    "r": PieceKind.ROOK,
    "q": PieceKind.QUEEN,
    "k": PieceKind.KING,
}

KIND_TO_FEN: dict[PieceKind, str] = {value: key for key, value in FEN_TO_KIND.items()}

# Kinds whose first move changes what they (or the opponent) may do later: castling rights and pawn double steps / en passant.
TRACKS_MOVED: frozenset[PieceKind] = frozenset(
    {PieceKind.KING, PieceKind.ROOK, PieceKind.PAWN}
)


@dataclass(frozen=True)
class Piece:
    """
    A live piece on the board.

    `id` is stable for the whole game. Moving or promoting returns a copy with the same id.
    `has_moved` is tri-state: None means nobody ever set it, which counts as "not moved".
    """

    id: PieceId
    kind: PieceKind
    color: Color
    position: Position
    has_moved: Optional[bool] = None

    @classmethod
    def from_fen(cls, character: str, piece_id: PieceId, position: Position) -> Self:
        # lower case: Black pieces, upper case: White pieces
        color = Color.WHITE if character.isupper() else Color.BLACK
        kind = FEN_TO_KIND[character.lower()]
        return cls(piece_id, kind, color, position)

    def to_fen(self) -> str:
        return (
            KIND_TO_FEN[self.kind].upper()
            if self.color == Color.WHITE
            else KIND_TO_FEN[self.kind].lower()
        )

    @property
    def moved(self) -> bool:
        return bool(self.has_moved)

    def moved_to(self, position: Position) -> Self:
        """Copy standing on a new square. Flags the piece as moved if its kind keeps track of that."""
        has_moved = True if self.kind in TRACKS_MOVED else self.has_moved
        return replace(self, position=position, has_moved=has_moved)

    def promoted_to(self, new_kind: PieceKind) -> Self:
        return replace(self, kind=new_kind)
