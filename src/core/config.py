"""
Configuration of the rules engine.

The board size is fixed. The only rule that can be switched is whether castling needs a path that is free of attacks.
"""

import os
from dataclasses import dataclass
from typing import Self

# Chess board is always 8x8.
BOARD_SIZE = 8

SAFE_PATH_ENV_VAR = "CHESS_CASTLING_SAFE_PATH"
_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class RulesConfig:
    """
    Switches for rule variants
    ----

    * castling_requires_safe_path: When False (default) castling only needs the squares between king and rook to be empty,
      the king may castle out of, through, or into check. When True, the standard chess restriction applies.
    """

    castling_requires_safe_path: bool = False

    @classmethod
    def from_env(cls) -> Self:
        """Read the rule switches from the environment, falling back to the defaults."""
        raw = os.environ.get(SAFE_PATH_ENV_VAR, "")
        return cls(castling_requires_safe_path=raw.strip().lower() in _TRUTHY)


DEFAULT_RULES = RulesConfig()
