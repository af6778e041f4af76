"""
API Service - Business logic layer between API and engine.

The service:
1. Creates sessions through the SessionManager
2. Applies moves through the reducer, one at a time per session
3. Enriches sessions with player details from the directory
4. Publishes every accepted move to real-time observers

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Sequence
import logging
import time

from ..engine_core import GameSession, apply_move
from ..errors import NotFound, Unauthorized, error_for
from ..players import InMemoryPlayerDirectory, Player, PlayerDirectory
from ..session import InMemorySessionStore, SessionManager, SessionStore
from .broadcast import NullPublisher, Publisher, UPDATE_GAME_EVENT
from .schemas import PlayerInfo, SessionResponse, SessionStatus

logger = logging.getLogger(__name__)


@dataclass
class GameService:
    """
    Main game service.

    Usage:
        service = GameService()

        # Start a game
        session = service.create_session(alice, "bob@example.com")

        # Play
        session = service.apply_move(session.session_id, alice, board)
    """
    store: SessionStore = field(default_factory=InMemorySessionStore)
    directory: PlayerDirectory = field(default_factory=InMemoryPlayerDirectory)
    publisher: Publisher = field(default_factory=NullPublisher)
    clock: Callable[[], float] = time.time

    session_manager: SessionManager = field(init=False)

    def __post_init__(self):
        self.session_manager = SessionManager(
            store=self.store,
            directory=self.directory,
            clock=self.clock,
        )

    def create_session(self, requester: Player | None, email: str | None) -> SessionResponse:
        """
        Start a game between the requester and the player owning `email`.

        No notification is sent at creation.
        """
        if requester is None:
            raise Unauthorized("User not found")
        session = self.session_manager.create_session(requester, email)
        return self.enrich(session)

    def apply_move(
        self,
        session_id: str,
        requester: Player | None,
        board: Sequence[str],
    ) -> SessionResponse:
        """
        Apply a proposed board to a session.

        The re-read, validation and write happen under the session lock, so
        at most one move is accepted per turn. The enriched session is
        published under the same lock, after the write succeeds, so
        observers see one session's moves in stored order.
        """
        if self.store.get_by_id(session_id) is None:
            raise NotFound("Game not found")
        if requester is None:
            raise Unauthorized("User not found")

        with self.store.lock(session_id):
            session = self.store.get_by_id(session_id)

            result = apply_move(session, requester.player_id, board, now=self.clock())
            if not result.success:
                logger.info(
                    "Move rejected in session %s by %s: %s",
                    session_id, requester.player_id, result.error_code.value,
                )
                raise error_for(result.error_code, result.error)

            self.store.update(result.new_session, expected_version=session.version)

            updated = result.new_session
            logger.info(
                "Move accepted in session %s by %s: %s",
                session_id, requester.player_id, result.classification,
            )
            if updated.is_finished:
                logger.info("Session %s finished: %s", session_id, updated.status.value)

            response = self.enrich(updated)
            self._publish(response)
        return response

    def get_session(self, session_id: str) -> SessionResponse:
        """Get one enriched session."""
        session = self.store.get_by_id(session_id)
        if session is None:
            raise NotFound("Game not found")
        return self.enrich(session)

    def list_sessions(self, player: Player) -> list[SessionResponse]:
        """All sessions of a player, most recently updated first."""
        return [
            self.enrich(session)
            for session in self.store.find_all_for_player(player.player_id)
        ]

    # =========================================================================
    # Helper methods
    # =========================================================================

    def enrich(self, session: GameSession) -> SessionResponse:
        """Convert a GameSession to a SessionResponse with player details."""
        return SessionResponse(
            session_id=session.session_id,
            board=list(session.board),
            turn=session.turn,
            status=SessionStatus(session.status.value),
            player1=self._player_info(session.player1),
            player2=self._player_info(session.player2),
            winner=self._player_info(session.winner) if session.winner else None,
            created_at=session.created_at,
            updated_at=session.updated_at,
        )

    def _player_info(self, player_id: str) -> PlayerInfo:
        player = self.directory.find_by_id(player_id)
        if player is None:
            logger.warning("Player %s not in directory, returning id only", player_id)
            return PlayerInfo(player_id=player_id)
        return PlayerInfo(
            player_id=player.player_id,
            email=player.email,
            name=player.name,
            username=player.username,
        )

    def _publish(self, response: SessionResponse) -> None:
        """Best-effort broadcast; the move is already stored."""
        try:
            self.publisher.publish(UPDATE_GAME_EVENT, response.model_dump(mode="json"))
        except Exception as e:
            logger.warning(
                "Broadcast of session %s failed: %s", response.session_id, e,
            )
