"""
Game Session State - The record the engine operates on.

Design principles:
- Immutable-friendly: transitions return a new session
- Only the reducer produces a successor of an existing session
- Terminal sessions (drawn, won) are never mutated again
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
import uuid

from .board import Board, empty_board


class GameStatus(Enum):
    """Lifecycle status of a game session."""
    IN_PROGRESS = "in_progress"
    DRAWN = "drawn"
    WON = "won"

    @property
    def is_terminal(self) -> bool:
        return self is not GameStatus.IN_PROGRESS


@dataclass(frozen=True)
class GameSession:
    """
    One ongoing or completed two-player game.

    Invariants:
    - player1 != player2
    - board has 9 cells, each empty or player1/player2
    - while in progress, turn is player1 or player2 and winner is None
    - status is WON exactly when winner is set
    """
    session_id: str
    player1: str
    player2: str
    board: Board
    turn: str
    status: GameStatus = GameStatus.IN_PROGRESS
    winner: str | None = None
    created_at: float = 0.0
    updated_at: float = 0.0

    # Incremented on every accepted move; used for compare-and-swap writes
    version: int = 0

    @classmethod
    def new(cls, player1: str, player2: str, now: float) -> GameSession:
        """Create a fresh session: empty board, player1 (the creator) moves first."""
        if player1 == player2:
            raise ValueError("A session needs two distinct players")
        return cls(
            session_id=uuid.uuid4().hex,
            player1=player1,
            player2=player2,
            board=empty_board(),
            turn=player1,
            created_at=now,
            updated_at=now,
        )

    @property
    def players(self) -> tuple[str, str]:
        return (self.player1, self.player2)

    @property
    def is_finished(self) -> bool:
        return self.status.is_terminal

    def has_player(self, player_id: str) -> bool:
        return player_id in self.players

    def other_player(self, player_id: str) -> str:
        """The opponent of `player_id` in this session."""
        if player_id == self.player1:
            return self.player2
        if player_id == self.player2:
            return self.player1
        raise ValueError(f"{player_id} does not play in session {self.session_id}")

    def _copy_with(self, **kwargs) -> GameSession:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)
