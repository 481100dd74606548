"""
Reading / writing positions as FEN strings. This is a trust boundary: broken input raises InvalidFENError.
"""

from dataclasses import dataclass, replace
from enum import Enum
from string import ascii_lowercase
from typing import Optional, Self

from src.core.config import BOARD_SIZE
from src.core.exceptions import InvalidFENError
from src.rules.board import Board, validate_board
from src.rules.castling import HOME_RANKS, ROOK_FILES, CastlingSide
from src.rules.geometry import occupant, opponent
from src.rules.moves import PAWN_DIRECTIONS, MoveRecord
from src.rules.pieces import FEN_TO_KIND, Color, PieceKind
from src.rules.position import Position

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
VALID_CASTLING_ENCODINGS = [
    "-",
    "K",
    "Q",
    "k",
    "q",
    "KQ",
    "Kk",
    "Kq",
    "Qk",
    "Qq",
    "kq",
    "KQk",
    "KQq",
    "Kkq",
    "Qkq",
    "KQkq",
]


# rank (as written in FEN) of the en passant square, keyed by the active color
EN_PASSANT_RANKS: dict[str, str] = {"w": "6", "b": "3"}


class CastlingDirection(Enum):
    """The four castling directions. Values represent their encodings in FEN string."""

    WHITE_KING_SIDE = "K"
    WHITE_QUEEN_SIDE = "Q"
    BLACK_KING_SIDE = "k"
    BLACK_QUEEN_SIDE = "q"


CASTLING_ORDER: tuple[CastlingDirection, ...] = (
    CastlingDirection.WHITE_KING_SIDE,
    CastlingDirection.WHITE_QUEEN_SIDE,
    CastlingDirection.BLACK_KING_SIDE,
    CastlingDirection.BLACK_QUEEN_SIDE,
)

DIRECTION_SIDES: dict[CastlingDirection, tuple[Color, CastlingSide]] = {
    CastlingDirection.WHITE_KING_SIDE: (Color.WHITE, CastlingSide.KING_SIDE),
    CastlingDirection.WHITE_QUEEN_SIDE: (Color.WHITE, CastlingSide.QUEEN_SIDE),
    CastlingDirection.BLACK_KING_SIDE: (Color.BLACK, CastlingSide.KING_SIDE),
    CastlingDirection.BLACK_QUEEN_SIDE: (Color.BLACK, CastlingSide.QUEEN_SIDE),
}


def castling_from_fen(castle_fen: str) -> dict[CastlingDirection, bool]:
    """parse the part of the FEN string that encodes castling rights"""
    return {
        direction: (direction.value in castle_fen) for direction in CastlingDirection
    }


def castling_to_fen(castling_rights: dict[CastlingDirection, bool]) -> str:
    """create the part of the FEN string that encodes castling rights"""
    castling_chars = "".join(
        [direction.value for direction in CASTLING_ORDER if castling_rights[direction]]
    )
    return castling_chars or "-"


def is_valid_fen(fen: str) -> bool:
    """
    Check if given string follows proper FEN notation.
    """

    # there should be 6 parts to the string
    parts = fen.split(" ")
    if len(parts) != 6:
        return False

    position, color, castling, en_passant, half_move_counter, full_move_counter = parts
    return (
        is_valid_position(position)
        and is_valid_color_code(color)
        and is_valid_castling_rights(castling)
        and is_valid_en_passant(en_passant, color)
        and is_valid_move_counter(half_move_counter)
        and is_valid_move_counter(full_move_counter)
    )


def is_valid_position(position: str) -> bool:
    """Only check the part of the FEN encoding for the board position."""
    rank_fens = position.split("/")
    if len(rank_fens) != BOARD_SIZE:
        return False

    for rank_fen in rank_fens:
        file_count = 0
        for character in rank_fen:
            # make sure every character is valid
            if character.isdigit():
                file_count += int(character)
            elif character.lower() in FEN_TO_KIND:
                file_count += 1
            else:
                # immediately invalidate if the character is anything else
                return False

        # make sure you are creating a correctly sized board
        if file_count != BOARD_SIZE:
            return False
    return True


def is_valid_color_code(color: str) -> bool:
    return color in {"w", "b"}


def is_valid_castling_rights(castling: str) -> bool:
    """A valid castling encoding has either KQkq, KQk, etc. or a '-' if all rights have been revoked."""
    return castling in VALID_CASTLING_ENCODINGS


def is_valid_en_passant(en_passant: str, color: str) -> bool:
    """
    Valid en passant square encoding is a '-' or the square the opponent's pawn just skipped over:
    on the 6th rank with white to move, on the 3rd rank with black to move.
    """
    if en_passant == "-":
        return True
    return is_valid_square(en_passant) and en_passant[1:] == EN_PASSANT_RANKS.get(color)


def is_valid_square(square: str) -> bool:
    """Valid square should be a letter for the file + a number for the rank"""
    if len(square) < 2:
        return False

    file_char, rank_char = square[0], square[1:]
    if file_char not in ascii_lowercase[:BOARD_SIZE]:
        return False

    if not rank_char.isdigit():
        return False

    return 1 <= int(rank_char) <= BOARD_SIZE


def is_valid_move_counter(counter: str) -> bool:
    return counter.isdigit()


@dataclass(frozen=True)
class PositionState:
    """
    Data that can be constructed from a FEN string.
    ----

    FEN, or Forsyth-Edwards Notation, describes a position completely enough to restart a game from it.

    <board position string><active color><castling rights><en passant square><# half move clock><number turns played>

    The engine has no separate castling rights or en passant square. Those are translated into what the engine does look at:
    * castling rights --> the moved flags of the king and the corner rooks
    * en passant square --> a history holding the pawn double step that created it (sequence 0: it happened before this game started)
    """

    board: Board
    color_to_move: Color
    history: tuple[MoveRecord, ...]
    half_move_clock: int = 0
    num_turns: int = 1

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """Parse the FEN into data"""

        # raise an exception if invalid FEN:
        if not is_valid_fen(fen):
            raise InvalidFENError(f"Cannot interpret supplied string as FEN: {fen}")

        (
            placement,
            active_color,
            castling_str,
            en_passant_algebraic,
            half_move_clock,
            num_turns,
        ) = fen.split(" ")

        color_to_move = Color.WHITE if active_color == "w" else Color.BLACK
        board = validate_board(Board.from_fen(placement))
        board = _apply_castling_rights(board, castling_from_fen(castling_str))

        history: tuple[MoveRecord, ...] = ()
        if en_passant_algebraic != "-":
            en_passant_square = Position.from_algebraic(en_passant_algebraic)
            history = _double_step_history(board, en_passant_square, opponent(color_to_move))

        return cls(board, color_to_move, history, int(half_move_clock), int(num_turns))

    def to_fen(self) -> str:
        """reverse operation: write a FEN from the given data"""
        active_color = "w" if self.color_to_move == Color.WHITE else "b"
        castling_str = castling_to_fen(castling_rights_of(self.board))
        en_passant = en_passant_square_of(self.history)
        en_passant_algebraic = en_passant.to_algebraic() if en_passant else "-"
        return f"{self.board.to_fen()} {active_color} {castling_str} {en_passant_algebraic} {self.half_move_clock} {self.num_turns}"

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_FEN)


def castling_rights_of(board: Board) -> dict[CastlingDirection, bool]:
    """A right exists while the king is unmoved on its home rank and the rook in that corner is unmoved."""
    rights: dict[CastlingDirection, bool] = {}
    for direction, (color, side) in DIRECTION_SIDES.items():
        king = board.king(color)
        rook = occupant(Position(ROOK_FILES[side], HOME_RANKS[color]), board)
        rights[direction] = (
            king is not None
            and not king.moved
            and king.position.rank == HOME_RANKS[color]
            and rook is not None
            and rook.kind == PieceKind.ROOK
            and rook.color == color
            and not rook.moved
        )
    return rights


def en_passant_square_of(history: tuple[MoveRecord, ...]) -> Optional[Position]:
    """The square skipped by a pawn double step, if that was the last move"""
    if not history:
        return None
    last = history[-1]
    if last.piece.kind != PieceKind.PAWN or abs(last.destination.rank - last.source.rank) != 2:
        return None
    return Position(last.source.file, (last.source.rank + last.destination.rank) // 2)


def _apply_castling_rights(board: Board, rights: dict[CastlingDirection, bool]) -> Board:
    """Kings keep their castling options only if at least one right remains, corner rooks only with their own right."""
    for color in Color:
        king = board.king(color)
        if king is None or king.position.rank != HOME_RANKS[color]:
            continue
        any_right = any(
            allowed for direction, allowed in rights.items() if DIRECTION_SIDES[direction][0] == color
        )
        board = board.with_piece(replace(king, has_moved=not any_right))

    for direction, allowed in rights.items():
        color, side = DIRECTION_SIDES[direction]
        rook = occupant(Position(ROOK_FILES[side], HOME_RANKS[color]), board)
        if rook is not None and rook.kind == PieceKind.ROOK and rook.color == color:
            board = board.with_piece(replace(rook, has_moved=not allowed))
    return board


def _double_step_history(
    board: Board, en_passant_square: Position, pawn_color: Color
) -> tuple[MoveRecord, ...]:
    """Reconstruct the double step of the pawn that skipped over the en passant square."""
    direction = PAWN_DIRECTIONS[pawn_color]
    source = en_passant_square.offset(0, -direction)
    destination = en_passant_square.offset(0, direction)
    pawn = occupant(destination, board)
    if pawn is None or pawn.kind != PieceKind.PAWN or pawn.color != pawn_color:
        raise InvalidFENError(
            f"En passant square {en_passant_square.to_algebraic()} is not behind a {pawn_color} pawn"
        )
    before_move = replace(pawn, position=source, has_moved=False)
    return (MoveRecord(before_move, source, destination, sequence=0),)
