"""
The entrypoint into the rules engine for the layers above it.

All state (board, history, side to move) is passed in and handed back. Nothing is kept between calls,
so one process can serve any number of games at the same time.

Attempting a move never raises for a well-formed board: an unacceptable move comes back as a MoveRejected value.
"""

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

from src.core.config import DEFAULT_RULES, RulesConfig
from src.rules import legality, notation, terminal
from src.rules.applier import apply_move, record_move
from src.rules.board import Board
from src.rules.geometry import occupant, opponent
from src.rules.moves import History, MoveRecord
from src.rules.pieces import Color, Piece
from src.rules.position import Position
from src.rules.terminal import GamePhase

_LOGGER = logging.getLogger(__name__)


class RejectionReason(StrEnum):
    NO_PIECE = "no piece at source"
    NOT_YOUR_PIECE = "not your piece"
    NOT_YOUR_TURN = "not your turn"
    ILLEGAL_DESTINATION = "illegal destination"


@dataclass(frozen=True)
class MoveAccepted:
    """The new state after the move. `history` already includes `record` as its last entry."""

    board: Board
    history: tuple[MoveRecord, ...]
    record: MoveRecord


@dataclass(frozen=True)
class MoveRejected:
    reason: RejectionReason
    detail: str = ""


MoveOutcome = MoveAccepted | MoveRejected


def side_to_move(history: History, default: Color = Color.WHITE) -> Color:
    """The opponent of whoever made the last move. Without any moves, `default` starts."""
    if not history:
        return default
    return opponent(history[-1].piece.color)


def next_sequence(history: History) -> int:
    return history[-1].sequence + 1 if history else 1


def legal_destinations(
    piece: Piece,
    board: Board,
    history: History,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> list[Position]:
    """Squares to highlight for the selected piece"""
    return legality.legal_destinations(piece, board, history, rules=rules)


def try_move(
    board: Board,
    history: History,
    mover_color: Color,
    source: Position,
    destination: Position,
    *,
    rules: RulesConfig = DEFAULT_RULES,
    first_to_move: Color = Color.WHITE,
) -> MoveOutcome:
    """
    Attempt a move
    -----

    1. it must be your turn: the opponent of whoever moved last, or `first_to_move` for an empty history
    2. there must be a piece of yours on the source square
    3. the destination must be a legal destination for that piece
    4. record the move (snapshot before the board changes), then apply it
    """
    expected_color = side_to_move(history, default=first_to_move)
    if mover_color != expected_color:
        return _reject(RejectionReason.NOT_YOUR_TURN, f"{expected_color} is to move")

    piece = occupant(source, board)
    if piece is None:
        return _reject(RejectionReason.NO_PIECE, source.to_algebraic())

    if piece.color != mover_color:
        return _reject(
            RejectionReason.NOT_YOUR_PIECE,
            f"{piece.color} {piece.kind} on {source.to_algebraic()}",
        )

    if not legality.is_legal_move(piece, destination, board, history, rules=rules):
        return _reject(
            RejectionReason.ILLEGAL_DESTINATION,
            f"{piece.kind} {source.to_algebraic()} -> {destination.to_algebraic()}",
        )

    record = record_move(piece, destination, board, sequence=next_sequence(history))
    new_board = apply_move(piece, destination, board)
    _LOGGER.debug("Applied move %s: %s", record.sequence, record.to_uci())
    return MoveAccepted(new_board, (*history, record), record)


def classify(
    board: Board,
    color: Color,
    history: History,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> GamePhase:
    phase = terminal.classify(board, color, history, rules=rules)
    if phase in terminal.TERMINAL_PHASES:
        _LOGGER.debug("Game over for %s: %s", color, phase)
    return phase


def notate(
    record: MoveRecord, history: History, phase: Optional[GamePhase] = None
) -> str:
    """
    Notation of `record`. `history` may or may not already contain the record itself:
    only the moves played before it are used for disambiguation.
    """
    preceding = [move for move in history if move.sequence < record.sequence]
    return notation.format_move(record, preceding, phase)


def _reject(reason: RejectionReason, detail: str) -> MoveRejected:
    _LOGGER.debug("Rejected move (%s): %s", reason, detail)
    return MoveRejected(reason, detail)
