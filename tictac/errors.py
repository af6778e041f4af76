"""
Errors - Typed, user-correctable failures.

Every failure the engine, the session manager or the service can report
is a GameError subclass. Each one carries:
- A machine-readable ErrorCode
- A human-readable message, relayed verbatim to the caller
- The HTTP status the API layer answers with

None of these are fatal to the process.
"""

from __future__ import annotations
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Structured error codes."""
    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    OUT_OF_TURN = "OUT_OF_TURN"
    NO_OP_MOVE = "NO_OP_MOVE"
    ILLEGAL_MOVE = "ILLEGAL_MOVE"
    CONFLICT = "CONFLICT"
    GAME_OVER = "GAME_OVER"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class GameError(Exception):
    """Base class for all game service errors."""
    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidInput(GameError):
    code = ErrorCode.INVALID_INPUT
    status_code = 400


class NotFound(GameError):
    code = ErrorCode.NOT_FOUND
    status_code = 404


class Unauthorized(GameError):
    code = ErrorCode.UNAUTHORIZED
    status_code = 401


class OutOfTurn(GameError):
    code = ErrorCode.OUT_OF_TURN
    status_code = 403


class NoOpMove(GameError):
    code = ErrorCode.NO_OP_MOVE
    status_code = 400


class IllegalMove(GameError):
    code = ErrorCode.ILLEGAL_MOVE
    status_code = 400


class Conflict(GameError):
    code = ErrorCode.CONFLICT
    status_code = 409


class GameOver(GameError):
    code = ErrorCode.GAME_OVER
    status_code = 409


_ERRORS_BY_CODE: dict[ErrorCode, type[GameError]] = {
    cls.code: cls
    for cls in (
        InvalidInput,
        NotFound,
        Unauthorized,
        OutOfTurn,
        NoOpMove,
        IllegalMove,
        Conflict,
        GameOver,
    )
}


def error_for(code: ErrorCode | str | None, message: str) -> GameError:
    """Build the GameError matching an error code (unknown codes become internal errors)."""
    try:
        cls = _ERRORS_BY_CODE.get(ErrorCode(code), GameError)
    except ValueError:
        cls = GameError
    return cls(message)
