"""
Pytest fixtures for Tictac tests.
"""

import pytest

from ..api.service import GameService
from ..players import InMemoryPlayerDirectory, Player
from ..session import InMemorySessionStore, SessionManager


class FakeClock:
    """Clock that advances one second per reading."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        self.now += 1.0
        return self.now


class RecordingPublisher:
    """Publisher that keeps every event it is given."""

    def __init__(self):
        self.events: list[tuple[str, dict]] = []

    def publish(self, event: str, payload: dict) -> None:
        self.events.append((event, payload))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def directory() -> InMemoryPlayerDirectory:
    """Directory with three registered players."""
    directory = InMemoryPlayerDirectory()
    directory.register("alice@example.com", name="Alice", username="alice", player_id="alice")
    directory.register("bob@example.com", name="Bob", username="bob", player_id="bob")
    directory.register("carol@example.com", name="Carol", username="carol", player_id="carol")
    return directory


@pytest.fixture
def alice(directory) -> Player:
    return directory.find_by_id("alice")


@pytest.fixture
def bob(directory) -> Player:
    return directory.find_by_id("bob")


@pytest.fixture
def carol(directory) -> Player:
    return directory.find_by_id("carol")


@pytest.fixture
def store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def session_manager(store, directory, clock) -> SessionManager:
    return SessionManager(store=store, directory=directory, clock=clock)


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def service(store, directory, publisher, clock) -> GameService:
    """Service wired to in-memory collaborators and a recording publisher."""
    return GameService(
        store=store,
        directory=directory,
        publisher=publisher,
        clock=clock,
    )


def place(board, index: int, player_id: str) -> list[str]:
    """Copy of `board` with `player_id` written at `index`."""
    new_board = list(board)
    new_board[index] = player_id
    return new_board
