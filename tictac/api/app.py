"""
FastAPI Application - REST + WebSocket API for the game service.

Endpoints:
    POST   /api/v1/players                     Register a player
    GET    /api/v1/players/me                  Get the calling player
    POST   /api/v1/sessions                    Start a game against an email
    GET    /api/v1/sessions                    List the caller's games
    GET    /api/v1/sessions/{id}               Get one game
    PUT    /api/v1/sessions/{id}/board         Submit a move (full proposed board)
    WS     /api/v1/ws                          Real-time "update-game" events

Callers identify themselves with the X-Player-Id header. Identity is
verified upstream; the service trusts any id known to the directory.

Move Flow:
    1. Client PUTs the board with its mark added
    2. Server validates turn, change and placement under the session lock
    3. Server stores the new session and answers with it
    4. Every WebSocket observer receives {"type": "update-game", "payload": ...}

All responses are JSON with explicit Pydantic schemas. Errors use
ErrorResponse with a machine-readable error_code.
"""

from typing import Annotated, Optional
import json
import logging

from fastapi import Depends, FastAPI, Header, Request, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.websockets import WebSocketDisconnect

from .. import __version__
from ..config import Settings, configure_logging, get_settings
from ..errors import GameError, Unauthorized
from ..players import Player
from .broadcast import ConnectionHub
from .schemas import (
    ErrorResponse,
    HealthResponse,
    PlayerInfo,
    RegisterPlayerRequest,
    CreateSessionRequest,
    MoveRequest,
    SessionListResponse,
    SessionResponse,
)
from .service import GameService

logger = logging.getLogger(__name__)


def create_app(
    service: Optional[GameService] = None,
    settings: Optional[Settings] = None,
    hub: Optional[ConnectionHub] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional GameService (creates one publishing to `hub` if not provided)
        settings: Optional Settings (uses get_settings() if not provided)
        hub: Optional ConnectionHub for WebSocket observers

    Returns:
        FastAPI application instance
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    hub = hub or ConnectionHub()
    game_service = service or GameService(publisher=hub)
    prefix = settings.api_prefix

    app = FastAPI(
        title="Tictac Game API",
        description="""
Two-player 3x3 games with server-side move validation and real-time updates.

## Error Codes

| Code | Description |
|------|-------------|
| `INVALID_INPUT` | Malformed or self-referential request data |
| `NOT_FOUND` | User or game does not exist |
| `UNAUTHORIZED` | Missing or unknown X-Player-Id |
| `OUT_OF_TURN` | Wait for the other player to move |
| `NO_OP_MOVE` | Submitted board is unchanged |
| `ILLEGAL_MOVE` | Board is not one new mark by the mover |
| `CONFLICT` | A game with this player is still in progress |
| `GAME_OVER` | Game is already drawn or won |
        """,
        version=__version__,
        docs_url=f"{prefix}/docs",
        redoc_url=f"{prefix}/redoc",
        debug=settings.debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.service = game_service
    app.state.hub = hub
    app.state.settings = settings

    # =========================================================================
    # Error handling
    # =========================================================================

    @app.exception_handler(GameError)
    async def game_error_handler(request: Request, exc: GameError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=exc.message,
                error_code=exc.code,
                details=exc.details,
            ).model_dump(mode="json"),
        )

    # =========================================================================
    # Caller identity
    # =========================================================================

    def current_player(
        x_player_id: Annotated[Optional[str], Header(description="Id of the calling player")] = None,
    ) -> Optional[Player]:
        if not x_player_id:
            return None
        return game_service.directory.find_by_id(x_player_id)

    def require_player(
        player: Annotated[Optional[Player], Depends(current_player)],
    ) -> Player:
        if player is None:
            raise Unauthorized("User not found")
        return player

    # =========================================================================
    # Player Endpoints
    # =========================================================================

    @app.post(
        f"{prefix}/players",
        response_model=PlayerInfo,
        status_code=201,
        responses={
            400: {"model": ErrorResponse, "description": "Invalid email"},
            409: {"model": ErrorResponse, "description": "Email already registered"},
        },
        tags=["Players"],
        summary="Register a player",
    )
    async def register_player(body: RegisterPlayerRequest) -> PlayerInfo:
        """Register a player in the directory and return its id."""
        player = game_service.directory.register(
            email=body.email,
            name=body.name,
            username=body.username,
        )
        logger.info("Player %s registered", player.player_id)
        return PlayerInfo.model_validate(player)

    @app.get(
        f"{prefix}/players/me",
        response_model=PlayerInfo,
        responses={401: {"model": ErrorResponse}},
        tags=["Players"],
        summary="Get the calling player",
    )
    async def get_me(player: Annotated[Player, Depends(require_player)]) -> PlayerInfo:
        return PlayerInfo.model_validate(player)

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        f"{prefix}/sessions",
        response_model=SessionResponse,
        status_code=201,
        responses={
            400: {"model": ErrorResponse, "description": "Missing, invalid or own email"},
            401: {"model": ErrorResponse, "description": "Unknown caller"},
            404: {"model": ErrorResponse, "description": "Opponent not found"},
            409: {"model": ErrorResponse, "description": "Game already in progress"},
        },
        tags=["Sessions"],
        summary="Start a game against another player",
    )
    async def create_session(
        body: CreateSessionRequest,
        player: Annotated[Player, Depends(require_player)],
    ) -> SessionResponse:
        """
        Start a game against the player registered with `email`.

        The caller is player1 and moves first.
        """
        return game_service.create_session(player, body.email)

    @app.get(
        f"{prefix}/sessions",
        response_model=SessionListResponse,
        responses={401: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="List the caller's games",
    )
    async def list_sessions(
        player: Annotated[Player, Depends(require_player)],
    ) -> SessionListResponse:
        """All games of the caller, most recently updated first."""
        sessions = game_service.list_sessions(player)
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        f"{prefix}/sessions/{{session_id}}",
        response_model=SessionResponse,
        responses={
            401: {"model": ErrorResponse},
            404: {"model": ErrorResponse},
        },
        tags=["Sessions"],
        summary="Get a game",
    )
    async def get_session(
        session_id: str,
        player: Annotated[Player, Depends(require_player)],
    ) -> SessionResponse:
        return game_service.get_session(session_id)

    @app.put(
        f"{prefix}/sessions/{{session_id}}/board",
        response_model=SessionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Unchanged or illegal board"},
            401: {"model": ErrorResponse, "description": "Unknown caller"},
            403: {"model": ErrorResponse, "description": "Not your turn"},
            404: {"model": ErrorResponse, "description": "Game not found"},
            409: {"model": ErrorResponse, "description": "Game over or concurrent move"},
        },
        tags=["Game Loop"],
        summary="Submit a move",
    )
    async def submit_move(
        session_id: str,
        body: MoveRequest,
        player: Annotated[Optional[Player], Depends(current_player)],
    ) -> SessionResponse:
        """
        Submit the full board with one new mark (your player id) added.

        On success every WebSocket observer receives an `update-game` event.
        """
        return game_service.apply_move(session_id, player, body.board)

    # =========================================================================
    # WebSocket Endpoint
    # =========================================================================

    @app.websocket(f"{prefix}/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """
        WebSocket for real-time updates.

        Messages from server:
        - update-game: A move was accepted; payload is the enriched session
        - pong: Reply to ping
        - error: Invalid message

        Messages from client:
        - ping: Keep-alive
        """
        await hub.connect(websocket)
        try:
            while True:
                data = await websocket.receive_text()
                try:
                    message = json.loads(data)
                except json.JSONDecodeError:
                    await websocket.send_json({
                        "type": "error",
                        "payload": {"message": "Invalid JSON"},
                    })
                    continue
                if isinstance(message, dict) and message.get("type") == "ping":
                    await websocket.send_json({"type": "pong"})
        except WebSocketDisconnect as e:
            logger.info("WS: client disconnected code=%s", e.code)
        finally:
            hub.disconnect(websocket)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="tictac",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Tictac Game API",
            "version": __version__,
            "docs": f"{prefix}/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn tictac.api.app:app
app = create_app()
