"""
Broadcast - Real-time notification of game updates.

The service publishes through the Publisher protocol; it never touches
connections directly. Delivery is fire-and-forget: a failed or dropped
send never affects the move that triggered it.
"""

from __future__ import annotations
from typing import Any, Protocol
import asyncio
import logging

from fastapi import WebSocket

logger = logging.getLogger(__name__)

UPDATE_GAME_EVENT = "update-game"


class Publisher(Protocol):
    """Publishes an event to every connected observer."""

    def publish(self, event: str, payload: dict[str, Any]) -> None:
        ...


class NullPublisher:
    """Publisher that drops every event."""

    def publish(self, event: str, payload: dict[str, Any]) -> None:
        logger.debug("Dropping %s event, no observers configured", event)


class ConnectionHub:
    """
    WebSocket fan-out to all connected observers.

    publish() is synchronous and schedules the sends on the running
    event loop; without a running loop the event is dropped.
    """

    def __init__(self):
        self._connections: list[WebSocket] = []
        self._pending: set[asyncio.Task] = set()

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._connections.append(websocket)
        logger.info("WS: observer connected (%d total)", len(self._connections))

    def disconnect(self, websocket: WebSocket) -> None:
        if websocket in self._connections:
            self._connections.remove(websocket)
            logger.info("WS: observer disconnected (%d total)", len(self._connections))

    def publish(self, event: str, payload: dict[str, Any]) -> None:
        message = {"type": event, "payload": payload}
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop, %s event not delivered", event)
            return
        task = loop.create_task(self.broadcast(message))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def broadcast(self, message: dict[str, Any]) -> None:
        """Send a message to every connection, dropping dead ones."""
        dead_connections = []
        for websocket in list(self._connections):
            try:
                await websocket.send_json(message)
            except Exception as e:
                logger.warning("WS: send failed, dropping connection: %s", e)
                dead_connections.append(websocket)
        for websocket in dead_connections:
            self.disconnect(websocket)
