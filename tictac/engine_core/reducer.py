"""
Reducer - Applies a proposed board to a game session.

The reducer is the single point of session mutation.
Every accepted move goes through apply_move().

Design principles:
- Pure function: (session, requester, proposed board) -> new session
- Validates before applying, nothing is produced on failure
- Returns MoveResult with success/failure
- Persistence, enrichment and broadcast happen outside
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence

from ..errors import ErrorCode
from .board import (
    BOARD_SIZE,
    Classification,
    Outcome,
    classify_board,
    validate_move_delta,
)
from .state import GameSession, GameStatus


@dataclass
class MoveResult:
    """
    Result of applying a move.

    Contains:
    - Whether the move was accepted
    - The successor session (if accepted)
    - The board classification that drove the transition
    - Error message and code (if rejected)
    """
    success: bool
    new_session: GameSession | None = None
    classification: Classification | None = None
    error: str | None = None
    error_code: ErrorCode | None = None

    @classmethod
    def failure(cls, error: str, error_code: ErrorCode) -> MoveResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def accepted(cls, session: GameSession, classification: Classification) -> MoveResult:
        """Create a success result with the successor session."""
        return cls(success=True, new_session=session, classification=classification)


def validate_move(
    session: GameSession,
    requester: str,
    proposed_board: Sequence[str],
) -> MoveResult | None:
    """
    Check a move against the session, in order.

    Returns a failure result if the move is rejected, None if it is legal.
    """
    if session.is_finished:
        return MoveResult.failure(
            f"Game is already {session.status.value}",
            ErrorCode.GAME_OVER,
        )

    if requester != session.turn:
        return MoveResult.failure("Wait for next player to move!", ErrorCode.OUT_OF_TURN)

    if len(proposed_board) != BOARD_SIZE:
        return MoveResult.failure(
            f"Board must have {BOARD_SIZE} cells",
            ErrorCode.INVALID_INPUT,
        )

    if tuple(proposed_board) == session.board:
        return MoveResult.failure("Make your move!", ErrorCode.NO_OP_MOVE)

    delta_error = validate_move_delta(session.board, proposed_board, requester)
    if delta_error:
        return MoveResult.failure(delta_error, ErrorCode.ILLEGAL_MOVE)

    return None


def apply_move(
    session: GameSession,
    requester: str,
    proposed_board: Sequence[str],
    now: float,
) -> MoveResult:
    """
    Apply a proposed board to the session.

    On a pending board the turn passes to the other player. On a drawn
    or won board the session becomes terminal; the turn is left as is.
    """
    rejection = validate_move(session, requester, proposed_board)
    if rejection:
        return rejection

    board = tuple(proposed_board)
    classification = classify_board(board)

    if classification.outcome is Outcome.PENDING:
        new_session = session._copy_with(
            board=board,
            turn=session.other_player(session.turn),
        )
    elif classification.outcome is Outcome.DRAWN:
        new_session = session._copy_with(
            board=board,
            status=GameStatus.DRAWN,
        )
    else:
        new_session = session._copy_with(
            board=board,
            status=GameStatus.WON,
            winner=classification.winner,
        )

    new_session = new_session._copy_with(
        updated_at=now,
        version=session.version + 1,
    )
    return MoveResult.accepted(new_session, classification)
