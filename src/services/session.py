"""
One game in progress: the board, the moves played, and who is to move.

The rules engine keeps no state. A session is the unit that gets locked, so two requests for the same game
are handled one after the other while different games never wait on each other.
"""

import threading
from dataclasses import dataclass, field
from typing import Optional, Self

from src.core.config import DEFAULT_RULES, RulesConfig
from src.rules.board import Board
from src.rules.fen import PositionState
from src.rules.game import (
    MoveAccepted,
    MoveOutcome,
    MoveRejected,
    RejectionReason,
    classify,
    legal_destinations,
    notate,
    try_move,
)
from src.rules.geometry import occupant, opponent
from src.rules.moves import MoveRecord
from src.rules.pieces import Color
from src.rules.position import Position
from src.rules.terminal import GamePhase


@dataclass(frozen=True)
class TurnResult:
    outcome: MoveOutcome
    phase: GamePhase
    notation: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return isinstance(self.outcome, MoveAccepted)


@dataclass
class GameSession:
    board: Board
    history: tuple[MoveRecord, ...] = ()
    side_to_move: Color = Color.WHITE
    rules: RulesConfig = DEFAULT_RULES
    notation: list[str] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @classmethod
    def new_game(cls, rules: RulesConfig = DEFAULT_RULES) -> Self:
        return cls(board=Board.starting_position(), rules=rules)

    @classmethod
    def from_fen(cls, fen: str, rules: RulesConfig = DEFAULT_RULES) -> Self:
        state = PositionState.from_fen(fen)
        return cls(
            board=state.board,
            history=state.history,
            side_to_move=state.color_to_move,
            rules=rules,
        )

    @classmethod
    def resume(
        cls,
        board: Board,
        history: tuple[MoveRecord, ...],
        side_to_move: Color,
        rules: RulesConfig = DEFAULT_RULES,
    ) -> Self:
        """
        Continue a game from a stored snapshot.
        NOTE: The positions in between are not stored, so the notation of earlier moves comes without '+' / '#'.
        """
        notation = [notate(record, history) for record in history if record.sequence > 0]
        return cls(board, history, side_to_move, rules, notation)

    @property
    def phase(self) -> GamePhase:
        with self._lock:
            return self._classify()

    def destinations(self, source: Position) -> list[Position]:
        """Squares to highlight. Only the pieces of the side to move have any."""
        with self._lock:
            piece = occupant(source, self.board)
            if piece is None or piece.color != self.side_to_move:
                return []
            return legal_destinations(piece, self.board, self.history, rules=self.rules)

    def play(self, color: Color, source: Position, destination: Position) -> TurnResult:
        """
        Play one turn
        -----

        1. attempt the move with the engine
        2. accepted? store the new board and history, pass the turn to the opponent
        3. classify the position for the side that is now to move and write down the move
        """
        with self._lock:
            if color != self.side_to_move:
                outcome: MoveOutcome = MoveRejected(
                    RejectionReason.NOT_YOUR_TURN, f"{self.side_to_move} is to move"
                )
                return TurnResult(outcome, self._classify())

            outcome = try_move(
                self.board,
                self.history,
                color,
                source,
                destination,
                rules=self.rules,
                first_to_move=self.side_to_move,
            )
            if isinstance(outcome, MoveRejected):
                return TurnResult(outcome, self._classify())

            self.board = outcome.board
            self.history = outcome.history
            self.side_to_move = opponent(color)

            phase = self._classify()
            move_notation = notate(outcome.record, self.history, phase)
            self.notation.append(move_notation)
            return TurnResult(outcome, phase, move_notation)

    def _classify(self) -> GamePhase:
        return classify(self.board, self.side_to_move, self.history, rules=self.rules)
