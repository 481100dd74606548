"""Unit tests for /src/rules/position.py"""

from string import ascii_lowercase

import pytest

from src.core.config import BOARD_SIZE
from src.rules.position import Position

ALL_SQUARES = [
    (file, rank, f"{ascii_lowercase[file]}{rank + 1}")
    for file in range(BOARD_SIZE)
    for rank in range(BOARD_SIZE)
]


@pytest.mark.parametrize("file, rank, notation", ALL_SQUARES)
def test_creating_from_algebraic(file: int, rank: int, notation: str) -> None:
    """Simply checks if the notation for 'a1' indeed maps to file 0, rank 0, etc."""
    square = Position.from_algebraic(notation)
    assert square.file == file
    assert square.rank == rank


@pytest.mark.parametrize("file, rank, notation", ALL_SQUARES)
def test_to_algebraic_notation(file: int, rank: int, notation: str) -> None:
    square = Position(file, rank)
    assert square.to_algebraic() == notation


def test_offset() -> None:
    e4 = Position.from_algebraic("e4")
    assert e4.offset(1, 2) == Position.from_algebraic("f6")
    assert e4.offset(-4, -3) == Position.from_algebraic("a1")


def test_square_within_bounds() -> None:
    for file in range(BOARD_SIZE):
        for rank in range(BOARD_SIZE):
            assert Position(file, rank).is_within_bounds()


@pytest.mark.parametrize(
    "file, rank", [(BOARD_SIZE, 0), (0, BOARD_SIZE), (-1, 3), (3, -1), (8, 8)]
)
def test_square_out_of_bounds(file: int, rank: int) -> None:
    assert not Position(file, rank).is_within_bounds()
