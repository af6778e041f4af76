"""
Engine Core - Deterministic game session state and move resolution.

The engine is the runtime that:
1. Holds a GameSession
2. Classifies boards (pending, drawn, won)
3. Validates moves (turn, no-op, single legal placement)
4. Produces the successor session via the reducer
"""

from .board import (
    BOARD_SIZE,
    EMPTY,
    WINNING_TRIPLES,
    Board,
    Classification,
    Outcome,
    classify_board,
    empty_board,
    find_winner,
    parse_board,
    validate_move_delta,
)
from .state import GameSession, GameStatus
from .reducer import MoveResult, apply_move, validate_move

__all__ = [
    "BOARD_SIZE",
    "EMPTY",
    "WINNING_TRIPLES",
    "Board",
    "Classification",
    "Outcome",
    "classify_board",
    "empty_board",
    "find_winner",
    "parse_board",
    "validate_move_delta",
    "GameSession",
    "GameStatus",
    "MoveResult",
    "apply_move",
    "validate_move",
]
