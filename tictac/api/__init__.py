"""
API Module - HTTP and WebSocket interface.

Exposes the game service via REST for clients. A client:
1. Registers (or is registered) in the player directory
2. Starts a game against another player's email
3. Submits moves as full boards
4. Receives "update-game" events over the WebSocket

All state lives in the service's store and directory.
"""

from .schemas import (
    # Requests
    RegisterPlayerRequest,
    CreateSessionRequest,
    MoveRequest,
    # Responses
    SessionResponse,
    SessionListResponse,
    ErrorResponse,
    HealthResponse,
    # Shared
    PlayerInfo,
    SessionStatus,
)
from .broadcast import ConnectionHub, NullPublisher, Publisher, UPDATE_GAME_EVENT
from .service import GameService
from .app import create_app

__all__ = [
    # Requests
    "RegisterPlayerRequest",
    "CreateSessionRequest",
    "MoveRequest",
    # Responses
    "SessionResponse",
    "SessionListResponse",
    "ErrorResponse",
    "HealthResponse",
    # Shared
    "PlayerInfo",
    "SessionStatus",
    # Real-time
    "ConnectionHub",
    "NullPublisher",
    "Publisher",
    "UPDATE_GAME_EVENT",
    # Service
    "GameService",
    "create_app",
]
