"""The Board is a snapshot of the live pieces. It holds no rules, those live in moves.py / applier.py / legality.py"""

from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Iterable, Iterator, Optional, Self

from src.core.config import BOARD_SIZE
from src.core.exceptions import InvariantViolation
from src.rules.castling import HOME_RANKS
from src.rules.pieces import FEN_TO_KIND, KIND_TO_FEN, Color, Piece, PieceId, PieceKind
from src.rules.position import Position

STARTING_PLACEMENT = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
EMPTY_PLACEMENT = "/".join(["8"] * BOARD_SIZE)

# white pawns start on the 2nd rank, black pawns on the 7th
PAWN_START_RANKS: dict[Color, int] = {Color.WHITE: 1, Color.BLACK: BOARD_SIZE - 2}

# There is normally only one of these per color, so no number gets attached to their id
_UNNUMBERED_KINDS = (PieceKind.KING, PieceKind.QUEEN)


@dataclass(frozen=True)
class Board:
    """
    Live pieces keyed by their id.
    ----

    Never mutated after construction: every change produces a new Board (see `with_piece` / `without`).
    Absence of a piece on a square means the square is empty.
    """

    pieces: dict[PieceId, Piece] = field(default_factory=dict)

    @classmethod
    def from_pieces(cls, pieces: Iterable[Piece]) -> Self:
        return cls({piece.id: piece for piece in pieces})

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_PLACEMENT)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board from the placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 1 are the white pieces (capital letters)

        Pieces get ids like 'wr1', 'wr2', 'wk', 'bp5' (color, kind letter, count from a1 upwards).
        Kings and rooks standing on their home rank, and pawns on their starting rank, are flagged as not moved.
        Kings/rooks/pawns elsewhere are flagged as moved.
        """
        placed: list[tuple[str, Position]] = []
        fen_by_ranks = fen_str.split("/")
        for rank_idx, fen_one_rank in enumerate(fen_by_ranks):
            # FEN string is read from top rank (8th) to bottom rank (1st)
            rank = BOARD_SIZE - 1 - rank_idx
            file = 0
            for character in fen_one_rank:
                if character.isalpha():
                    placed.append((character, Position(file, rank)))
                    file += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    file += int(character)

        # number pieces from a1 upwards, so the ids do not depend on the order of the FEN string
        placed.sort(key=lambda item: (item[1].rank, item[1].file))
        counts: Counter[str] = Counter()
        pieces: list[Piece] = []
        for character, position in placed:
            counts[character] += 1
            piece = Piece.from_fen(character, _make_id(character, counts[character]), position)
            pieces.append(_with_initial_moved_flag(piece))
        return cls.from_pieces(pieces)

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(
            self._rank_to_fen(rank) for rank in range(BOARD_SIZE - 1, -1, -1)
        )

    def _rank_to_fen(self, rank: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for file in range(BOARD_SIZE):
            piece = self.occupant(Position(file, rank))

            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def __iter__(self) -> Iterator[Piece]:
        return iter(self.pieces.values())

    def __len__(self) -> int:
        return len(self.pieces)

    def piece(self, piece_id: PieceId) -> Optional[Piece]:
        return self.pieces.get(piece_id)

    def occupant(self, position: Position) -> Optional[Piece]:
        return next(
            (piece for piece in self.pieces.values() if piece.position == position),
            None,
        )

    def pieces_of(self, color: Color) -> list[Piece]:
        return [piece for piece in self.pieces.values() if piece.color == color]

    def king(self, color: Color) -> Optional[Piece]:
        return next(
            (
                piece
                for piece in self.pieces.values()
                if piece.kind == PieceKind.KING and piece.color == color
            ),
            None,
        )

    def with_piece(self, piece: Piece) -> Self:
        """New board where the piece (matched by id) is added or replaced"""
        pieces = dict(self.pieces)
        pieces[piece.id] = piece
        return type(self)(pieces)

    def without(self, piece_id: PieceId) -> Self:
        pieces = {key: value for key, value in self.pieces.items() if key != piece_id}
        return type(self)(pieces)


def _make_id(character: str, count: int) -> PieceId:
    color_prefix = "w" if character.isupper() else "b"
    kind = FEN_TO_KIND[character.lower()]
    suffix = "" if (kind in _UNNUMBERED_KINDS and count == 1) else str(count)
    return f"{color_prefix}{KIND_TO_FEN[kind]}{suffix}"


def _with_initial_moved_flag(piece: Piece) -> Piece:
    if piece.kind == PieceKind.PAWN:
        on_start = piece.position.rank == PAWN_START_RANKS[piece.color]
        return replace(piece, has_moved=not on_start)
    if piece.kind in (PieceKind.KING, PieceKind.ROOK):
        at_home = piece.position.rank == HOME_RANKS[piece.color]
        return replace(piece, has_moved=not at_home)
    return piece


def validate_board(board: Board) -> Board:
    """
    Check the invariants the engine relies on. Call at trust boundaries only (deserializing snapshots / FEN strings).

    Raises InvariantViolation when:
    * a piece stands outside the board
    * two pieces share a square
    * a piece's key does not match its id
    * a color has more than one king
    """
    for piece_id, piece in board.pieces.items():
        if piece_id != piece.id:
            raise InvariantViolation(f"Piece stored under {piece_id!r} has id {piece.id!r}")
        if not piece.position.is_within_bounds():
            raise InvariantViolation(
                f"Piece {piece.id!r} stands outside the board: {piece.position}"
            )

    occupied = Counter(piece.position for piece in board)
    shared = [position.to_algebraic() for position, count in occupied.items() if count > 1]
    if shared:
        raise InvariantViolation(f"More than one piece on: {', '.join(sorted(shared))}")

    for color in Color:
        kings = [
            piece for piece in board.pieces_of(color) if piece.kind == PieceKind.KING
        ]
        if len(kings) > 1:
            raise InvariantViolation(f"{color} has {len(kings)} kings on the board")
    return board
