"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define pseudo-legal move sets for each piece kind.


Legality (not leaving your own king in check) is checked later by legality.py
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from src.rules.board import PAWN_START_RANKS, Board
from src.rules.castling import CastlingSide, castling_squares, squares_between_on_rank
from src.rules.geometry import ANY_PIECE, occupant, occupied_by_color, on_board, opponent
from src.rules.pieces import Color, Piece, PieceKind
from src.rules.position import Position

Vector = tuple[int, int]


@dataclass(frozen=True)
class MoveRecord:
    """
    A move that has been played
    ----

    `piece` is the snapshot of the moving piece BEFORE it moved (so its position equals `source`).
    `sequence` numbers the moves of a game, starting at 1.
    """

    piece: Piece
    source: Position
    destination: Position
    sequence: int
    captured: Optional[Piece] = None
    promoted_to: Optional[PieceKind] = None
    is_castling: bool = False
    is_en_passant: bool = False

    @property
    def is_promotion(self) -> bool:
        return self.promoted_to is not None

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    def to_uci(self) -> str:
        """
        Universal Chess Interface notation, ex. 'e2e4', 'e7e8q' (pawn moves to e8 and promotes to a queen)
        """
        promotion = "q" if self.promoted_to == PieceKind.QUEEN else ""
        return f"{self.source.to_algebraic()}{self.destination.to_algebraic()}{promotion}"


History = Sequence[MoveRecord]

DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_DELTAS: list[Vector] = DIAGONALS + STRAIGHTS

# White moves UP the board, black moves DOWN
PAWN_DIRECTIONS: dict[Color, int] = {Color.WHITE: 1, Color.BLACK: -1}


# --- MOVEMENT RULES ---
def raycasting_move(piece: Piece, board: Board, directions: list[Vector]) -> list[Position]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We walk along the directions one square at a time until we hit another piece or
    the edge of the board. A friendly piece blocks the square, an enemy piece can be captured (but blocks what lies behind it).
    """
    enemy = opponent(piece.color)
    moves: list[Position] = []
    for df, dr in directions:
        target = piece.position
        while True:
            target = target.offset(df, dr)
            if not on_board(target):
                break

            if occupied_by_color(target, board, ANY_PIECE):
                # only need to add the first occupied square found if it is the opponent's: then it can be captured.
                if occupied_by_color(target, board, enemy):
                    moves.append(target)
                break

            moves.append(target)
    return moves


def single_step_move(piece: Piece, board: Board, deltas: list[Vector]) -> list[Position]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just jump a single step along a direction"""
    moves: list[Position] = []
    for df, dr in deltas:
        target = piece.position.offset(df, dr)
        if on_board(target) and not occupied_by_color(target, board, piece.color):
            moves.append(target)
    return moves


def candidate_pawn_moves(piece: Piece, board: Board, history: History = ()) -> list[Position]:
    """
    A pawn:
    - moves by a single square forward onto an empty square.
    - It can move by two in their first move (so when on their starting rank) if both squares are empty
    - takes diagonally
    - takes en passant: the opponent's pawn that just advanced two squares next to it.

    NOTE: Promotion happens when applying the move, not here.
    """
    moves: list[Position] = []
    direction = PAWN_DIRECTIONS[piece.color]

    one_step = piece.position.offset(0, direction)
    if on_board(one_step) and not occupied_by_color(one_step, board, ANY_PIECE):
        moves.append(one_step)

        two_steps = piece.position.offset(0, 2 * direction)
        on_start_rank = piece.position.rank == PAWN_START_RANKS[piece.color]
        if (
            not piece.moved
            and on_start_rank
            and on_board(two_steps)
            and not occupied_by_color(two_steps, board, ANY_PIECE)
        ):
            moves.append(two_steps)

    # pawns take diagonally:
    enemy = opponent(piece.color)
    for df in (-1, 1):
        target = piece.position.offset(df, direction)
        if on_board(target) and occupied_by_color(target, board, enemy):
            moves.append(target)

    en_passant = en_passant_target(piece, board, history)
    if en_passant is not None:
        moves.append(en_passant)
    return moves


def en_passant_target(piece: Piece, board: Board, history: History) -> Optional[Position]:
    """
    Only the immediately preceding move matters: an enemy pawn that advanced two squares and now stands right next to this pawn.
    The capturing pawn lands on the square the enemy pawn skipped over.
    """
    if piece.kind != PieceKind.PAWN or not history:
        return None

    last = history[-1]
    is_double_step = (
        last.piece.kind == PieceKind.PAWN
        and last.piece.color != piece.color
        and abs(last.destination.rank - last.source.rank) == 2
    )
    if not is_double_step:
        return None

    is_beside = (
        last.destination.rank == piece.position.rank
        and abs(last.destination.file - piece.position.file) == 1
    )
    if not is_beside:
        return None

    # the pawn that just moved must still be standing there
    passed_pawn = occupant(last.destination, board)
    if passed_pawn is None or passed_pawn.id != last.piece.id:
        return None

    return Position(last.destination.file, piece.position.rank + PAWN_DIRECTIONS[piece.color])


def candidate_knight_moves(piece: Piece, board: Board, history: History = ()) -> list[Position]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    return single_step_move(piece, board, KNIGHT_DELTAS)


def candidate_bishop_moves(piece: Piece, board: Board, history: History = ()) -> list[Position]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return raycasting_move(piece, board, DIAGONALS)


def candidate_rook_moves(piece: Piece, board: Board, history: History = ()) -> list[Position]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(piece, board, STRAIGHTS)


def candidate_queen_moves(piece: Piece, board: Board, history: History = ()) -> list[Position]:
    """
    The Queen combines the bishop moves (diagonal movement) and rook moves (horizontal + vertical movements)
    """
    return candidate_bishop_moves(piece, board) + candidate_rook_moves(piece, board)


def candidate_king_moves(piece: Piece, board: Board, history: History = ()) -> list[Position]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move of two squares (see `castling_moves()`).
    """
    return single_step_move(piece, board, KING_DELTAS) + castling_moves(piece, board)


def castling_moves(king: Piece, board: Board) -> list[Position]:
    """
    **you are allowed to castle if**

    * Your king has never moved.
    * The rook in the corner of the king's rank on that side is yours and has never moved.
    * Every square in between the king and that rook is empty.

    NOTE: Whether the king passes through an attacked square is NOT checked here (see legality.py)
    """
    if king.moved:
        return []

    moves: list[Position] = []
    for side in CastlingSide:
        squares = castling_squares(king.position, side)
        rook = occupant(squares.rook_from, board)
        unmoved_own_rook = (
            rook is not None
            and rook.kind == PieceKind.ROOK
            and rook.color == king.color
            and not rook.moved
        )
        if not unmoved_own_rook:
            continue

        # the king needs to land strictly between its own square and the rook's square
        lands_before_rook = (squares.rook_from.file - squares.king_to.file) * side.value > 0
        if not (on_board(squares.king_to) and lands_before_rook):
            continue

        path = squares_between_on_rank(king.position, squares.rook_from)
        if any(occupied_by_color(square, board, ANY_PIECE) for square in path):
            continue

        moves.append(squares.king_to)
    return moves


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Piece, Board, History], list[Position]]
MOVEMENT_RULES: dict[PieceKind, CandidateMovesFn] = {
    PieceKind.PAWN: candidate_pawn_moves,
    PieceKind.KNIGHT: candidate_knight_moves,
    PieceKind.BISHOP: candidate_bishop_moves,
    PieceKind.ROOK: candidate_rook_moves,
    PieceKind.QUEEN: candidate_queen_moves,
    PieceKind.KING: candidate_king_moves,
}


def pseudo_legal_moves(piece: Piece, board: Board, history: History = ()) -> list[Position]:
    """
    Every square the piece could move to following its movement pattern, ignoring whether your own king is left in check.
    """
    movement_rule = MOVEMENT_RULES[piece.kind]
    return movement_rule(piece, board, history)


# --- CAPTURING RULES / ATTACKING RULES ---
def raycasting_attack(
    square: Position,
    by_color: Color,
    kinds: tuple[PieceKind, ...],
    board: Board,
    directions: list[Vector],
) -> bool:
    """
    Raycasting algorithm for attacks.
    ---

    Where `raycasting_move()` determines
    _"What is the line-of-sight of the piece standing on the specified square?"_

    This function determines:
    _"Is the specified square in the line-of-sight of a piece of the specified color and that
    is allowed to move along the given direction?"_

    ---
    Returns TRUE if the first piece encountered is of the given color and one of the given kinds.
    """
    for df, dr in directions:
        target = square
        while True:
            target = target.offset(df, dr)
            if not on_board(target):
                break

            piece_found = occupant(target, board)
            if piece_found is not None:
                if piece_found.color == by_color and piece_found.kind in kinds:
                    return True
                break
    return False


def single_step_attack(
    square: Position,
    by_color: Color,
    kind: PieceKind,
    board: Board,
    deltas: list[Vector],
) -> bool:
    """Equivalent of `raycasting_attack()` for pieces that jump a single step along a direction."""
    for df, dr in deltas:
        target = square.offset(df, dr)
        if not on_board(target):
            continue

        piece_found = occupant(target, board)
        if piece_found is not None and piece_found.color == by_color and piece_found.kind == kind:
            return True
    return False


def is_attacked_by_pawn(square: Position, by_color: Color, board: Board) -> bool:
    """
    Pawns take diagonally
    ----

    NOTE: Pawn moves are not symmetric, so to check IF a white pawn could take on your square -->
    Must look one rank DOWN the board. Hence the vectors point opposite to the pawn's direction of travel.
    """
    backwards = -PAWN_DIRECTIONS[by_color]
    return single_step_attack(
        square, by_color, PieceKind.PAWN, board, [(1, backwards), (-1, backwards)]
    )


def is_attacked_by_knight(square: Position, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceKind.KNIGHT, board, KNIGHT_DELTAS)


def is_attacked_on_diagonal(square: Position, by_color: Color, board: Board) -> bool:
    """Bishops and queens"""
    return raycasting_attack(
        square, by_color, (PieceKind.BISHOP, PieceKind.QUEEN), board, DIAGONALS
    )


def is_attacked_on_straight(square: Position, by_color: Color, board: Board) -> bool:
    """Rooks and queens"""
    return raycasting_attack(
        square, by_color, (PieceKind.ROOK, PieceKind.QUEEN), board, STRAIGHTS
    )


def is_attacked_by_king(square: Position, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceKind.KING, board, KING_DELTAS)


# --- STRATEGY PATTERN: ATTACKING RULES ---
IsAttackedFn = Callable[[Position, Color, Board], bool]
ATTACK_RULES: list[IsAttackedFn] = [
    is_attacked_by_pawn,
    is_attacked_by_knight,
    is_attacked_on_diagonal,
    is_attacked_on_straight,
    is_attacked_by_king,
]


def is_attacked_by(square: Position, by_color: Color, board: Board) -> bool:
    """Could any piece of `by_color` capture on `square`? (empty squares included: a pawn push is not an attack)"""
    return any(rule(square, by_color, board) for rule in ATTACK_RULES)
