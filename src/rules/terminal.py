"""Classifying a position for the side to move: still playing, check, checkmate, or stalemate"""

from enum import StrEnum

from src.core.config import DEFAULT_RULES, RulesConfig
from src.rules.board import Board
from src.rules.legality import has_legal_move, is_in_check
from src.rules.moves import History
from src.rules.pieces import Color


class GamePhase(StrEnum):
    IN_PROGRESS = "in progress"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"


TERMINAL_PHASES = frozenset({GamePhase.CHECKMATE, GamePhase.STALEMATE})


def is_checkmate(
    board: Board, color: Color, history: History, *, rules: RulesConfig = DEFAULT_RULES
) -> bool:
    """In check, and no move gets you out of it"""
    return is_in_check(board, color) and not has_legal_move(
        board, color, history, rules=rules
    )


def is_stalemate(
    board: Board, color: Color, history: History, *, rules: RulesConfig = DEFAULT_RULES
) -> bool:
    """
    Not in check, but nothing to move either.
    NOTE: Without a king there is nothing to stalemate, so this is False.
    """
    if board.king(color) is None:
        return False
    return not is_in_check(board, color) and not has_legal_move(
        board, color, history, rules=rules
    )


def classify(
    board: Board, color: Color, history: History, *, rules: RulesConfig = DEFAULT_RULES
) -> GamePhase:
    """
    Phase of the game from the point of view of `color` (the side to move).

    NOTE: check and legal moves are each computed once, checkmate and stalemate follow from the combination.
    A board without a king for `color` is never terminal.
    """
    if board.king(color) is None:
        return GamePhase.IN_PROGRESS

    in_check = is_in_check(board, color)
    can_move = has_legal_move(board, color, history, rules=rules)

    if in_check and not can_move:
        return GamePhase.CHECKMATE
    if not can_move:
        return GamePhase.STALEMATE
    if in_check:
        return GamePhase.CHECK
    return GamePhase.IN_PROGRESS
