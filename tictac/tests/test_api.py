"""
Tests for the HTTP/WebSocket layer.

Tests:
- Routes and status codes
- Error responses with error codes
- Caller identity via X-Player-Id
- update-game events over the WebSocket
"""

import asyncio

import pytest
from fastapi.testclient import TestClient

from ..api.app import create_app
from ..api.broadcast import ConnectionHub, UPDATE_GAME_EVENT
from ..api.service import GameService
from ..config import Settings
from .conftest import place


ALICE = {"X-Player-Id": "alice"}
BOB = {"X-Player-Id": "bob"}


@pytest.fixture
def hub() -> ConnectionHub:
    return ConnectionHub()


@pytest.fixture
def client(store, directory, clock, hub):
    """Client for an app wired to the test directory and store."""
    service = GameService(store=store, directory=directory, publisher=hub, clock=clock)
    app = create_app(service=service, settings=Settings(), hub=hub)
    with TestClient(app) as client:
        yield client


def start_game(client) -> dict:
    response = client.post("/api/v1/sessions", json={"email": "bob@example.com"}, headers=ALICE)
    assert response.status_code == 201
    return response.json()


class TestSystem:
    """Tests for system endpoints."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_openapi_lists_routes(self, client):
        """The OpenAPI schema exposes the game routes."""
        paths = client.get("/openapi.json").json()["paths"]
        assert "/api/v1/sessions" in paths
        assert "/api/v1/sessions/{session_id}/board" in paths


class TestPlayers:
    """Tests for player endpoints."""

    def test_register_and_me(self, client):
        """A registered player can identify with its id."""
        response = client.post(
            "/api/v1/players",
            json={"email": "dave@example.com", "name": "Dave"},
        )
        assert response.status_code == 201
        player_id = response.json()["player_id"]

        me = client.get("/api/v1/players/me", headers={"X-Player-Id": player_id})
        assert me.status_code == 200
        assert me.json()["name"] == "Dave"

    def test_register_duplicate(self, client):
        response = client.post("/api/v1/players", json={"email": "ALICE@example.com"})
        assert response.status_code == 409
        assert response.json()["error_code"] == "CONFLICT"

    def test_register_invalid_email(self, client):
        response = client.post("/api/v1/players", json={"email": "nope"})
        assert response.status_code == 422

    def test_register_rejects_dotted_local_part(self, client):
        response = client.post("/api/v1/players", json={"email": ".bob.@example.com"})
        assert response.status_code == 422

    def test_me_requires_identity(self, client):
        response = client.get("/api/v1/players/me")
        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED"


class TestSessions:
    """Tests for session endpoints."""

    def test_create(self, client):
        """Creating a game returns the enriched session."""
        data = start_game(client)

        assert data["turn"] == "alice"
        assert data["status"] == "in_progress"
        assert data["board"] == [""] * 9
        assert data["player2"]["email"] == "bob@example.com"
        assert data["winner"] is None

    def test_create_unknown_caller(self, client):
        response = client.post(
            "/api/v1/sessions",
            json={"email": "bob@example.com"},
            headers={"X-Player-Id": "mallory"},
        )
        assert response.status_code == 401

    def test_create_self(self, client):
        response = client.post(
            "/api/v1/sessions", json={"email": "alice@example.com"}, headers=ALICE,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Enter other user email"

    def test_create_missing_email(self, client):
        response = client.post("/api/v1/sessions", json={}, headers=ALICE)
        assert response.status_code == 400
        assert response.json()["error"] == "Enter a email"

    def test_create_unknown_opponent(self, client):
        response = client.post(
            "/api/v1/sessions", json={"email": "nobody@example.com"}, headers=ALICE,
        )
        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"

    def test_create_duplicate(self, client):
        start_game(client)
        response = client.post(
            "/api/v1/sessions", json={"email": "alice@example.com"}, headers=BOB,
        )
        assert response.status_code == 409
        assert response.json()["error_code"] == "CONFLICT"

    def test_get_and_list(self, client):
        data = start_game(client)

        got = client.get(f"/api/v1/sessions/{data['session_id']}", headers=BOB)
        assert got.status_code == 200
        assert got.json()["session_id"] == data["session_id"]

        listed = client.get("/api/v1/sessions", headers=BOB).json()
        assert listed["count"] == 1
        assert listed["sessions"][0]["session_id"] == data["session_id"]

    def test_get_missing(self, client):
        response = client.get("/api/v1/sessions/missing", headers=ALICE)
        assert response.status_code == 404
        assert response.json()["error"] == "Game not found"


class TestMoves:
    """Tests for the move endpoint."""

    def test_move(self, client):
        data = start_game(client)
        response = client.put(
            f"/api/v1/sessions/{data['session_id']}/board",
            json={"board": place(data["board"], 0, "alice")},
            headers=ALICE,
        )
        assert response.status_code == 200
        assert response.json()["turn"] == "bob"

    def test_move_out_of_turn(self, client):
        data = start_game(client)
        response = client.put(
            f"/api/v1/sessions/{data['session_id']}/board",
            json={"board": place(data["board"], 0, "bob")},
            headers=BOB,
        )
        assert response.status_code == 403
        assert response.json()["error"] == "Wait for next player to move!"

    def test_move_no_op(self, client):
        data = start_game(client)
        response = client.put(
            f"/api/v1/sessions/{data['session_id']}/board",
            json={"board": data["board"]},
            headers=ALICE,
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "NO_OP_MOVE"

    def test_move_anonymous(self, client):
        data = start_game(client)
        response = client.put(
            f"/api/v1/sessions/{data['session_id']}/board",
            json={"board": place(data["board"], 0, "alice")},
        )
        assert response.status_code == 401

    def test_move_missing_session_anonymous(self, client):
        """Missing session wins over missing identity."""
        response = client.put(
            "/api/v1/sessions/missing/board",
            json={"board": [""] * 9},
        )
        assert response.status_code == 404

    def test_move_wrong_board_size(self, client):
        data = start_game(client)
        response = client.put(
            f"/api/v1/sessions/{data['session_id']}/board",
            json={"board": ["alice"]},
            headers=ALICE,
        )
        assert response.status_code == 422


class TestWebSocket:
    """Tests for real-time updates."""

    def test_ping(self, client):
        with client.websocket_connect("/api/v1/ws") as ws:
            ws.send_text('{"type": "ping"}')
            assert ws.receive_json() == {"type": "pong"}

    def test_invalid_json(self, client):
        with client.websocket_connect("/api/v1/ws") as ws:
            ws.send_text("not json")
            assert ws.receive_json()["type"] == "error"

    def test_move_is_broadcast(self, client):
        """Observers receive the enriched session after a move."""
        data = start_game(client)
        with client.websocket_connect("/api/v1/ws") as ws:
            ws.send_text('{"type": "ping"}')
            assert ws.receive_json() == {"type": "pong"}

            client.put(
                f"/api/v1/sessions/{data['session_id']}/board",
                json={"board": place(data["board"], 0, "alice")},
                headers=ALICE,
            )
            message = ws.receive_json()

        assert message["type"] == UPDATE_GAME_EVENT
        assert message["payload"]["session_id"] == data["session_id"]
        assert message["payload"]["turn"] == "bob"


class FakeWebSocket:
    """Stand-in for a connection in hub tests."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []
        self.accepted = False

    async def accept(self):
        self.accepted = True

    async def send_json(self, message):
        if self.fail:
            raise RuntimeError("connection closed")
        self.sent.append(message)


class TestConnectionHub:
    """Tests for WebSocket fan-out."""

    def test_broadcast_drops_dead_connections(self):
        hub = ConnectionHub()
        alive, dead = FakeWebSocket(), FakeWebSocket(fail=True)

        async def scenario():
            await hub.connect(alive)
            await hub.connect(dead)
            await hub.broadcast({"type": "x"})

        asyncio.run(scenario())

        assert alive.accepted
        assert alive.sent == [{"type": "x"}]
        assert hub.connection_count == 1

    def test_publish_schedules_on_running_loop(self):
        hub = ConnectionHub()
        ws = FakeWebSocket()

        async def scenario():
            await hub.connect(ws)
            hub.publish(UPDATE_GAME_EVENT, {"session_id": "s1"})
            await asyncio.sleep(0)

        asyncio.run(scenario())
        assert ws.sent == [{"type": UPDATE_GAME_EVENT, "payload": {"session_id": "s1"}}]

    def test_publish_without_loop(self):
        """Publishing outside an event loop is dropped, not raised."""
        hub = ConnectionHub()
        hub.publish(UPDATE_GAME_EVENT, {"session_id": "s1"})
