"""
Check detection and legal-move filtering.

A pseudo-legal move (moves.py) is legal if, after making it, your own king is not in check.
"""

from src.core.config import DEFAULT_RULES, RulesConfig
from src.rules.applier import apply_move
from src.rules.board import Board
from src.rules.castling import is_castling_step, side_of_castling
from src.rules.geometry import opponent
from src.rules.moves import History, is_attacked_by, pseudo_legal_moves
from src.rules.pieces import Color, Piece, PieceKind
from src.rules.position import Position


def is_in_check(board: Board, color: Color) -> bool:
    """
    Is the king of `color` attacked?
    ---

    True iff any opposing piece can move onto the king's square.
    En passant can never capture a king, so the opponent's moves are generated without a history.
    NOTE: Without a king on the board this is simply False.
    """
    king = board.king(color)
    if king is None:
        return False

    return any(
        king.position in pseudo_legal_moves(piece, board, ())
        for piece in board.pieces_of(opponent(color))
    )


def is_legal_move(
    piece: Piece,
    destination: Position,
    board: Board,
    history: History,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> bool:
    """The destination follows the piece's movement pattern and does not put (or leave) your own king in check."""
    if destination not in pseudo_legal_moves(piece, board, history):
        return False
    return _is_allowed(piece, destination, board, rules)


def legal_destinations(
    piece: Piece,
    board: Board,
    history: History,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> list[Position]:
    """
    Squares the piece may legally move to
    ----

    1. generate pseudo-legal moves using the movement rules for the piece's kind
    2. keep those that do not put (or leave) you in check
    3. (only with `rules.castling_requires_safe_path`) drop castling out of, or through, check
    """
    return [
        destination
        for destination in pseudo_legal_moves(piece, board, history)
        if _is_allowed(piece, destination, board, rules)
    ]


def has_legal_move(
    board: Board,
    color: Color,
    history: History,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> bool:
    return any(
        legal_destinations(piece, board, history, rules=rules)
        for piece in board.pieces_of(color)
    )


def _is_allowed(piece: Piece, destination: Position, board: Board, rules: RulesConfig) -> bool:
    if _is_putting_yourself_in_check(piece, destination, board):
        return False
    if rules.castling_requires_safe_path and _is_castling(piece, destination):
        return _castling_path_is_safe(piece, destination, board)
    return True


def _is_putting_yourself_in_check(piece: Piece, destination: Position, board: Board) -> bool:
    """Make the move on a scratch board and look at your own king"""
    scratch_board = apply_move(piece, destination, board)
    return is_in_check(scratch_board, piece.color)


def _is_castling(piece: Piece, destination: Position) -> bool:
    return (
        piece.kind == PieceKind.KING
        and not piece.moved
        and is_castling_step(piece.position, destination)
    )


def _castling_path_is_safe(king: Piece, destination: Position, board: Board) -> bool:
    """
    Cannot castle out of a check, and cannot pass over an attacked square.
    (Landing in check is already ruled out by the self-check test.)
    """
    if is_in_check(board, king.color):
        return False

    step = side_of_castling(king.position, destination).value
    passed_square = king.position.offset(step, 0)
    return not is_attacked_by(passed_square, opponent(king.color), board)
