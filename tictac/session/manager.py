"""
Session Manager - Creates game sessions between two players.

LIFECYCLE:
1. A player asks for a game against an opponent's email
2. The request is validated (fail fast, in order):
   - email present and well-formed
   - not the requester's own email
   - opponent exists in the directory
   - no in-progress game between the pair (either player order)
3. A new session is stored: empty board, requester moves first
4. Moves are applied by the reducer until the game is drawn or won

A pair may only have one in-progress game at a time. A player may have
any number of games with different opponents.
"""

from __future__ import annotations
from typing import Callable
import logging
import time

from ..engine_core.state import GameSession
from ..errors import Conflict, InvalidInput, NotFound
from ..players import Player, PlayerDirectory, is_email_valid, normalize_email
from .store import SessionStore

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Manages the creation of game sessions.

    Responsibilities:
    - Validate opponent handles
    - Enforce the one-active-game-per-pair rule
    - Persist new sessions

    Sessions are never deleted here.
    """

    def __init__(
        self,
        store: SessionStore,
        directory: PlayerDirectory,
        clock: Callable[[], float] = time.time,
        email_validator: Callable[[str], bool] = is_email_valid,
    ):
        self.store = store
        self.directory = directory
        self.clock = clock
        self.email_validator = email_validator

    def create_session(self, requester: Player, target_email: str | None) -> GameSession:
        """
        Create a new game session.

        Args:
            requester: Authenticated player asking for the game (moves first)
            target_email: Email of the opponent

        Returns:
            The stored GameSession

        Raises:
            InvalidInput: missing, malformed or own email
            NotFound: no player with that email
            Conflict: the pair already has a game in progress
        """
        if not target_email or not target_email.strip():
            raise InvalidInput("Enter a email")
        if not self.email_validator(target_email):
            raise InvalidInput("Enter a valid email")
        if normalize_email(requester.email) == normalize_email(target_email):
            raise InvalidInput("Enter other user email")

        opponent = self.directory.find_by_email(target_email)
        if opponent is None:
            raise NotFound("User doesn't exist")
        if opponent.player_id == requester.player_id:
            raise InvalidInput("Enter other user email")

        # Duplicate check and insert must not interleave for the same pair
        with self.store.lock(_pair_key(requester.player_id, opponent.player_id)):
            if self.store.find_active_between(requester.player_id, opponent.player_id):
                raise Conflict("Please complete the previous game to start a new one")

            session = GameSession.new(
                player1=requester.player_id,
                player2=opponent.player_id,
                now=self.clock(),
            )
            self.store.insert(session)

        logger.info(
            "Session %s created: %s vs %s",
            session.session_id, session.player1, session.player2,
        )
        return session


def _pair_key(player_a: str, player_b: str) -> str:
    """Order-independent lock key for a pair of players."""
    first, second = sorted((player_a, player_b))
    return f"pair:{first}:{second}"
