"""Requests, Responses, and the serialized form of a game (the trust boundary of the engine)"""

from typing import Optional, Self
from uuid import UUID

from pydantic import BaseModel, field_validator, model_validator

from src.core.exceptions import InvalidRequestError, InvariantViolation
from src.rules.board import Board, validate_board
from src.rules.fen import is_valid_square
from src.rules.moves import MoveRecord
from src.rules.pieces import Color, Piece, PieceKind
from src.rules.position import Position
from src.rules.terminal import GamePhase


def _validate_algebraic(value: str) -> str:
    if not is_valid_square(value) or len(value) != 2:
        raise InvalidRequestError(
            f"Cannot interpret {value!r} as a valid square name."
        )
    return value


# --- SNAPSHOT MODELS ---
class PieceModel(BaseModel):
    id: str
    kind: PieceKind
    color: Color
    square: str
    has_moved: Optional[bool] = None

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not is_valid_square(value) or len(value) != 2:
            raise InvariantViolation(f"Piece placed on an invalid square: {value!r}")
        return value

    @classmethod
    def from_domain(cls, piece: Piece) -> Self:
        return cls(
            id=piece.id,
            kind=piece.kind,
            color=piece.color,
            square=piece.position.to_algebraic(),
            has_moved=piece.has_moved,
        )

    def to_domain(self) -> Piece:
        return Piece(
            self.id,
            self.kind,
            self.color,
            Position.from_algebraic(self.square),
            self.has_moved,
        )


class MoveRecordModel(BaseModel):
    piece: PieceModel
    from_square: str
    to_square: str
    sequence: int
    captured: Optional[PieceModel] = None
    promoted_to: Optional[PieceKind] = None
    is_castling: bool = False
    is_en_passant: bool = False

    @field_validator("from_square", "to_square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not is_valid_square(value) or len(value) != 2:
            raise InvariantViolation(f"Move recorded with an invalid square: {value!r}")
        return value

    @classmethod
    def from_domain(cls, record: MoveRecord) -> Self:
        return cls(
            piece=PieceModel.from_domain(record.piece),
            from_square=record.source.to_algebraic(),
            to_square=record.destination.to_algebraic(),
            sequence=record.sequence,
            captured=PieceModel.from_domain(record.captured) if record.captured else None,
            promoted_to=record.promoted_to,
            is_castling=record.is_castling,
            is_en_passant=record.is_en_passant,
        )

    def to_domain(self) -> MoveRecord:
        return MoveRecord(
            piece=self.piece.to_domain(),
            source=Position.from_algebraic(self.from_square),
            destination=Position.from_algebraic(self.to_square),
            sequence=self.sequence,
            captured=self.captured.to_domain() if self.captured else None,
            promoted_to=self.promoted_to,
            is_castling=self.is_castling,
            is_en_passant=self.is_en_passant,
        )


class GameSnapshot(BaseModel):
    """
    Everything needed to continue a game: the pieces, the moves played so far, and who is to move.

    Validation fails fast with InvariantViolation, so the engine never sees a malformed board.
    """

    pieces: list[PieceModel]
    history: list[MoveRecordModel] = []
    side_to_move: Color = Color.WHITE

    @model_validator(mode="after")
    def validate_invariants(self) -> Self:
        ids = [piece.id for piece in self.pieces]
        duplicates = sorted({piece_id for piece_id in ids if ids.count(piece_id) > 1})
        if duplicates:
            raise InvariantViolation(f"Duplicate piece ids: {', '.join(duplicates)}")

        # positions, kings, etc.
        validate_board(self.board())

        sequences = [move.sequence for move in self.history]
        if sequences != sorted(set(sequences)):
            raise InvariantViolation("Move history is not in strictly increasing order")

        if self.history and self.history[-1].piece.color == self.side_to_move:
            raise InvariantViolation(
                f"{self.side_to_move} made the last move and cannot be the side to move"
            )
        return self

    def board(self) -> Board:
        return Board.from_pieces(piece.to_domain() for piece in self.pieces)

    def moves(self) -> tuple[MoveRecord, ...]:
        return tuple(move.to_domain() for move in self.history)

    @classmethod
    def from_domain(
        cls, board: Board, history: tuple[MoveRecord, ...], side_to_move: Color
    ) -> Self:
        return cls(
            pieces=[PieceModel.from_domain(piece) for piece in board],
            history=[MoveRecordModel.from_domain(move) for move in history],
            side_to_move=side_to_move,
        )


# --- REQUEST MODELS ---
class MoveRequest(BaseModel):
    game_id: UUID
    color: Color
    from_square: str
    to_square: str

    @field_validator("from_square", "to_square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_algebraic(value)


class LegalDestinationsRequest(BaseModel):
    game_id: UUID
    square: str

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_algebraic(value)


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    snapshot: GameSnapshot
    phase: GamePhase
    notation: list[str]


class MoveResponse(BaseModel):
    game_id: UUID
    accepted: bool
    reason: Optional[str] = None
    notation: Optional[str] = None
    phase: GamePhase
    snapshot: GameSnapshot


class LegalDestinationsResponse(BaseModel):
    game_id: UUID
    square: str
    destinations: list[str]
