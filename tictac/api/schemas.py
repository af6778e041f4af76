"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between clients and the game
service. Sessions are always returned enriched: player ids are resolved
to display-ready player details through the player directory.

Error Codes:
- INVALID_INPUT: Malformed or self-referential request data
- NOT_FOUND: Missing user or game
- UNAUTHORIZED: Missing or unknown caller identity
- OUT_OF_TURN: Move submitted by the player who is not on turn
- NO_OP_MOVE: Submitted board identical to the current one
- ILLEGAL_MOVE: Board is not the current one plus one placement by the mover
- CONFLICT: A game is already in progress between the pair
- GAME_OVER: The game is already drawn or won
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, EmailStr, Field

from ..engine_core.board import BOARD_SIZE
from ..errors import ErrorCode


API_VERSION = "v1"


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    IN_PROGRESS = "in_progress"
    DRAWN = "drawn"
    WON = "won"


# =============================================================================
# Shared Models
# =============================================================================

class PlayerInfo(BaseModel):
    """Player details for display."""
    player_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    username: Optional[str] = None

    model_config = {"from_attributes": True}


# =============================================================================
# Request Models
# =============================================================================

class RegisterPlayerRequest(BaseModel):
    """Request to register a player in the directory."""
    email: EmailStr = Field(..., description="Unique email of the player")
    name: str = Field("", description="Display name")
    username: str = Field("", description="Public handle")


class CreateSessionRequest(BaseModel):
    """Request to start a game against another player."""
    email: Optional[str] = Field(None, description="Email of the opponent")


class MoveRequest(BaseModel):
    """Request to submit a move as the full proposed board."""
    board: list[str] = Field(
        ...,
        min_length=BOARD_SIZE,
        max_length=BOARD_SIZE,
        description='9 cells, row-major; "" for empty, otherwise a player id',
    )


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field(API_VERSION, description="API version")


class SessionResponse(BaseModel):
    """An enriched game session."""
    session_id: str
    board: list[str]
    turn: str = Field(..., description="Id of the player expected to move")
    status: SessionStatus
    player1: PlayerInfo
    player2: PlayerInfo
    winner: Optional[PlayerInfo] = None
    created_at: float
    updated_at: float
    api_version: str = API_VERSION


class SessionListResponse(BaseModel):
    """Sessions of the caller, most recently updated first."""
    sessions: list[SessionResponse]
    count: int


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
