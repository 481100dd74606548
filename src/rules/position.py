"""
A coordinate on the board

(placed in its own module as every other module of the engine needs to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

from src.core.config import BOARD_SIZE


@dataclass(frozen=True)
class Position:
    """Zero-based (file, rank). a1 is (0, 0), h8 is (7, 7)."""

    file: int
    rank: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Position:
        """Algebraic notation: 'a1' - 'h8' get converted to (0,0) - (7,7)"""
        file = ord(sq[0]) - ord("a")
        rank = int(sq[1:]) - 1
        return cls(file, rank)

    def to_algebraic(self) -> str:
        return f"{chr(self.file + ord('a'))}{self.rank + 1}"

    def offset(self, df: int, dr: int) -> Position:
        return Position(self.file + df, self.rank + dr)

    def is_within_bounds(self) -> bool:
        return (0 <= self.file < BOARD_SIZE) and (0 <= self.rank < BOARD_SIZE)
