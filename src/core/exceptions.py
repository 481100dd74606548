"""
Exceptions shared across layers.

NOTE: Rejecting a move is not an exception (see src/rules/game.py). These are reserved for broken input at the boundaries.
"""


class GameError(Exception):
    """Base class for all errors raised by this application"""


class InvariantViolation(GameError):
    """A board snapshot breaks one of the invariants the engine relies on (two pieces on one square, etc.)"""


class InvalidFENError(InvariantViolation):
    """Text could not be interpreted as a FEN string"""


class InvalidRequestError(GameError):
    """A request coming in from the outside is malformed"""


class GameNotFoundError(GameError):
    """No game session is registered under the requested ID"""
