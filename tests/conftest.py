"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

import pytest

from src.rules.board import Board

CASTLING_PLACEMENT = "r3k2r/8/8/8/8/8/8/R3K2R"
CHECKMATE_PLACEMENT = "k7/1Q6/K7/8/8/8/8/8"  # black king a8, white queen b7, white king a6
STALEMATE_PLACEMENT = "k7/2K5/1Q6/8/8/8/8/8"  # black king a8, white king c7, white queen b6


@pytest.fixture
def starting_board() -> Board:
    return Board.starting_position()


@pytest.fixture
def castling_board() -> Board:
    """A board with only the Kings and the Rooks. Ready to perform any castling move (if allowed)."""
    return Board.from_fen(CASTLING_PLACEMENT)


@pytest.fixture
def checkmate_board() -> Board:
    return Board.from_fen(CHECKMATE_PLACEMENT)


@pytest.fixture
def stalemate_board() -> Board:
    return Board.from_fen(STALEMATE_PLACEMENT)
