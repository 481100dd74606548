"""Orchestration of requests from the outside to the rules engine (and the reverse direction)."""

import logging
import threading
from typing import Optional
from uuid import UUID, uuid4

from src.api.models import (
    GameResponse,
    GameSnapshot,
    LegalDestinationsRequest,
    LegalDestinationsResponse,
    MoveRequest,
    MoveResponse,
)
from src.core.config import RulesConfig
from src.core.exceptions import GameNotFoundError
from src.rules.game import MoveRejected
from src.rules.position import Position
from src.services.session import GameSession

_LOGGER = logging.getLogger(__name__)


class ChessService:
    """Keeps the running games in memory, one GameSession per game ID."""

    def __init__(self, rules: Optional[RulesConfig] = None) -> None:
        self.rules = rules if rules is not None else RulesConfig.from_env()
        self._sessions: dict[UUID, GameSession] = {}
        self._registry_lock = threading.Lock()

    # -- API routes logic ---
    def create_game(self, starting_fen: Optional[str] = None) -> GameResponse:
        """Start a new game, from the standard starting position unless a FEN is supplied."""
        session = (
            GameSession.from_fen(starting_fen, rules=self.rules)
            if starting_fen
            else GameSession.new_game(rules=self.rules)
        )
        game_id = self._register(session)
        _LOGGER.info("Created game %s", game_id)
        return self._create_game_response(game_id, session)

    def load_game(self, snapshot: GameSnapshot) -> GameResponse:
        """Continue a game from a snapshot (already validated when the GameSnapshot was constructed)."""
        session = GameSession.resume(
            snapshot.board(), snapshot.moves(), snapshot.side_to_move, rules=self.rules
        )
        game_id = self._register(session)
        _LOGGER.info("Loaded game %s with %d moves", game_id, len(snapshot.history))
        return self._create_game_response(game_id, session)

    def get_game(self, game_id: UUID) -> GameResponse:
        """Retrieve current game state. (used in "polling" loop by a frontend)"""
        session = self._fetch_game(game_id)
        return self._create_game_response(game_id, session)

    def legal_destinations(
        self, request: LegalDestinationsRequest
    ) -> LegalDestinationsResponse:
        session = self._fetch_game(request.game_id)
        destinations = session.destinations(Position.from_algebraic(request.square))
        return LegalDestinationsResponse(
            game_id=request.game_id,
            square=request.square,
            destinations=[square.to_algebraic() for square in destinations],
        )

    def make_move(self, request: MoveRequest) -> MoveResponse:
        """Make a move attempt. A rejected move is reported in the response, not raised."""
        session = self._fetch_game(request.game_id)
        result = session.play(
            request.color,
            Position.from_algebraic(request.from_square),
            Position.from_algebraic(request.to_square),
        )
        reason = (
            str(result.outcome.reason)
            if isinstance(result.outcome, MoveRejected)
            else None
        )
        return MoveResponse(
            game_id=request.game_id,
            accepted=result.accepted,
            reason=reason,
            notation=result.notation,
            phase=result.phase,
            snapshot=self._snapshot(session),
        )

    def delete_game(self, game_id: UUID) -> None:
        with self._registry_lock:
            if self._sessions.pop(game_id, None) is None:
                raise GameNotFoundError(f"Game with {game_id=} not found.")
        _LOGGER.info("Deleted game %s", game_id)

    # -- Internal helpers --
    def _register(self, session: GameSession) -> UUID:
        game_id = uuid4()
        with self._registry_lock:
            self._sessions[game_id] = session
        return game_id

    def _fetch_game(self, game_id: UUID) -> GameSession:
        """Attempt to find the game and raise error if it fails."""
        with self._registry_lock:
            session = self._sessions.get(game_id)
        if session is None:
            raise GameNotFoundError(f"Game with {game_id=} not found.")
        return session

    def _snapshot(self, session: GameSession) -> GameSnapshot:
        return GameSnapshot.from_domain(
            session.board, session.history, session.side_to_move
        )

    def _create_game_response(self, game_id: UUID, session: GameSession) -> GameResponse:
        return GameResponse(
            game_id=game_id,
            snapshot=self._snapshot(session),
            phase=session.phase,
            notation=list(session.notation),
        )
