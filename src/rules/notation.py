"""
Rendering moves in (standard) algebraic notation, ex. 'Nf3', 'exd5', 'O-O', 'e8=Q#'.

Read-only: works from the MoveRecord alone plus the moves played before it.
"""

from typing import Optional

from src.rules.moves import History, MoveRecord
from src.rules.pieces import PieceKind
from src.rules.position import Position
from src.rules.terminal import GamePhase

PIECE_LETTERS: dict[PieceKind, str] = {
    PieceKind.KING: "K",
    PieceKind.QUEEN: "Q",
    PieceKind.ROOK: "R",
    PieceKind.BISHOP: "B",
    PieceKind.KNIGHT: "N",
}

KING_SIDE_CASTLE = "O-O"
QUEEN_SIDE_CASTLE = "O-O-O"
CAPTURE_MARKER = "x"
CHECK_SUFFIX = "+"
CHECKMATE_SUFFIX = "#"


def position_to_algebraic(position: Position) -> str:
    return position.to_algebraic()


def format_move(
    move: MoveRecord, preceding_moves: History, phase: Optional[GamePhase] = None
) -> str:
    """
    Algebraic notation of a move
    ----

    <piece letter><disambiguation><capture><destination><promotion><check/checkmate>

    * pawns have no piece letter, their captures start with the file they came from ('exd5')
    * castling is written 'O-O' (towards the higher files) or 'O-O-O'
    * `phase` is the classification of the position AFTER the move (for the opponent): '+' for check, '#' for checkmate
    """
    if _is_castling(move):
        notation = (
            KING_SIDE_CASTLE
            if move.destination.file > move.source.file
            else QUEEN_SIDE_CASTLE
        )
    else:
        notation = _piece_part(move, preceding_moves)
        notation += _capture_part(move)
        notation += position_to_algebraic(move.destination)
        if move.promoted_to is not None:
            notation += f"={PIECE_LETTERS[move.promoted_to]}"

    if phase == GamePhase.CHECKMATE:
        notation += CHECKMATE_SUFFIX
    elif phase == GamePhase.CHECK:
        notation += CHECK_SUFFIX
    return notation


def _is_castling(move: MoveRecord) -> bool:
    return move.is_castling or (
        move.piece.kind == PieceKind.KING
        and abs(move.destination.file - move.source.file) == 2
    )


def _piece_part(move: MoveRecord, preceding_moves: History) -> str:
    if move.piece.kind == PieceKind.PAWN:
        return ""
    return PIECE_LETTERS[move.piece.kind] + _disambiguation(move, preceding_moves)


def _capture_part(move: MoveRecord) -> str:
    if not move.is_capture:
        return ""
    source_file = (
        position_to_algebraic(move.source)[0]
        if move.piece.kind == PieceKind.PAWN
        else ""
    )
    return source_file + CAPTURE_MARKER


def _disambiguation(move: MoveRecord, preceding_moves: History) -> str:
    """
    Approximation of the disambiguation rule
    ----

    Looks at the pieces of the same kind and color that moved before (where they stood when they moved),
    NOT at which pieces could currently reach the destination.

    * one of them stood on the source's rank --> add the source file
    * one of them stood on the source's file --> add the source rank
    """
    earlier_positions = [
        earlier.piece.position
        for earlier in preceding_moves
        if earlier.piece.kind == move.piece.kind
        and earlier.piece.color == move.piece.color
    ]
    if not earlier_positions:
        return ""

    source = position_to_algebraic(move.source)
    disambiguation = ""
    if any(position.rank == move.source.rank for position in earlier_positions):
        disambiguation += source[0]
    if any(position.file == move.source.file for position in earlier_positions):
        disambiguation += source[1:]
    return disambiguation
