"""
Applying a move to a board.

Nothing here checks legality: callers only apply moves that legality.py accepted.
Every function returns a new Board / MoveRecord, the board passed in is never changed.
"""

from dataclasses import dataclass
from typing import Optional

from src.core.config import BOARD_SIZE
from src.rules.board import Board
from src.rules.castling import castling_squares, is_castling_step, side_of_castling
from src.rules.geometry import occupant
from src.rules.moves import MoveRecord
from src.rules.pieces import Color, Piece, PieceKind
from src.rules.position import Position

# The back rank relative to the pawn's color
PROMOTION_RANKS: dict[Color, int] = {Color.WHITE: BOARD_SIZE - 1, Color.BLACK: 0}

# Always promote to a queen. No choice of piece is offered.
PROMOTION_KIND = PieceKind.QUEEN


@dataclass(frozen=True)
class MoveEffects:
    """What a move does besides relocating the moving piece. Computed against the board BEFORE the move."""

    captured: Optional[Piece]
    is_en_passant: bool
    is_castling: bool
    promoted_to: Optional[PieceKind]


def move_effects(piece: Piece, destination: Position, board: Board) -> MoveEffects:
    source = piece.position
    is_en_passant = False

    captured = occupant(destination, board)
    if captured is not None and captured.id == piece.id:
        captured = None

    if captured is None:
        en_passant_victim = _en_passant_victim(piece, destination, board)
        if en_passant_victim is not None:
            captured = en_passant_victim
            is_en_passant = True

    is_castling = (
        piece.kind == PieceKind.KING
        and not piece.moved
        and is_castling_step(source, destination)
    )
    promoted_to = PROMOTION_KIND if _reaches_promotion_rank(piece, destination) else None
    return MoveEffects(captured, is_en_passant, is_castling, promoted_to)


def apply_move(piece: Piece, destination: Position, board: Board) -> Board:
    """
    Produce the board after `piece` moved to `destination`
    ----

    1. Remove whatever stands on the destination (ordinary capture)
    2. A pawn stepping diagonally onto an empty square takes en passant: remove the enemy pawn beside its starting square
    3. An unmoved king moving two files castles: the rook in that corner jumps next to the king (and counts as moved)
    4. Relocate the piece
    5. Kings, rooks and pawns get flagged as moved
    6. A pawn reaching the back rank becomes a queen
    """
    effects = move_effects(piece, destination, board)
    new_board = board

    # 1 + 2: captures (ordinary or en passant)
    if effects.captured is not None:
        new_board = new_board.without(effects.captured.id)

    # 3: castling moves the rook as well
    if effects.is_castling:
        squares = castling_squares(piece.position, side_of_castling(piece.position, destination))
        rook = occupant(squares.rook_from, new_board)
        if rook is not None and rook.kind == PieceKind.ROOK and rook.color == piece.color:
            new_board = new_board.with_piece(rook.moved_to(squares.rook_to))

    # 4 + 5: relocate and flag as moved
    moved_piece = piece.moved_to(destination)

    # 6: auto-promotion
    if effects.promoted_to is not None:
        moved_piece = moved_piece.promoted_to(effects.promoted_to)

    return new_board.with_piece(moved_piece)


def record_move(piece: Piece, destination: Position, board: Board, sequence: int) -> MoveRecord:
    """Snapshot of the move before the board gets updated."""
    effects = move_effects(piece, destination, board)
    return MoveRecord(
        piece=piece,
        source=piece.position,
        destination=destination,
        sequence=sequence,
        captured=effects.captured,
        promoted_to=effects.promoted_to,
        is_castling=effects.is_castling,
        is_en_passant=effects.is_en_passant,
    )


def _en_passant_victim(piece: Piece, destination: Position, board: Board) -> Optional[Piece]:
    """
    The pawn taken en passant stands in the destination's file, on the rank the capturing pawn started from.
    Only called when the destination itself is empty.
    """
    if piece.kind != PieceKind.PAWN:
        return None

    source = piece.position
    is_diagonal_step = (
        abs(destination.file - source.file) == 1
        and abs(destination.rank - source.rank) == 1
    )
    if not is_diagonal_step:
        return None

    victim = occupant(Position(destination.file, source.rank), board)
    if victim is None or victim.kind != PieceKind.PAWN or victim.color == piece.color:
        return None
    return victim


def _reaches_promotion_rank(piece: Piece, destination: Position) -> bool:
    return piece.kind == PieceKind.PAWN and destination.rank == PROMOTION_RANKS[piece.color]
