"""
Session Store - Where game sessions live between requests.

PERSISTENCE RULES:
- The store is an external collaborator; the core only needs the
  operations of the SessionStore protocol
- update() is a compare-and-swap on the session version
- lock(key) serializes read-modify-write on one session (or pair);
  different keys never share a lock, and released keys are forgotten

The in-memory store keeps everything in process memory.
"""

from __future__ import annotations
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Protocol
import threading

from ..engine_core.state import GameSession, GameStatus
from ..errors import Conflict, NotFound


@dataclass
class _LockEntry:
    """A per-key lock and the number of callers holding or waiting on it."""
    lock: threading.Lock = field(default_factory=threading.Lock)
    holders: int = 0


class SessionStore(Protocol):
    """Storage operations used by the session manager and the service."""

    def insert(self, session: GameSession) -> None:
        ...

    def get_by_id(self, session_id: str) -> GameSession | None:
        ...

    def find_active_between(self, player_a: str, player_b: str) -> list[GameSession]:
        ...

    def find_all_for_player(self, player_id: str) -> list[GameSession]:
        ...

    def update(self, session: GameSession, expected_version: int) -> None:
        ...

    def lock(self, key: str):
        ...


class InMemorySessionStore:
    """
    Thread-safe in-memory session store.

    Sessions are stored as immutable GameSession values; an update
    replaces the stored value.
    """

    def __init__(self):
        self._sessions: dict[str, GameSession] = {}
        self._guard = threading.Lock()
        self._session_locks: dict[str, _LockEntry] = {}

    def insert(self, session: GameSession) -> None:
        with self._guard:
            if session.session_id in self._sessions:
                raise Conflict(f"Session {session.session_id} already exists")
            self._sessions[session.session_id] = session

    def get_by_id(self, session_id: str) -> GameSession | None:
        with self._guard:
            return self._sessions.get(session_id)

    def find_active_between(self, player_a: str, player_b: str) -> list[GameSession]:
        """In-progress sessions between the pair, in either player order."""
        pair = {player_a, player_b}
        with self._guard:
            return [
                s for s in self._sessions.values()
                if s.status == GameStatus.IN_PROGRESS and set(s.players) == pair
            ]

    def find_all_for_player(self, player_id: str) -> list[GameSession]:
        """All sessions the player takes part in, most recently updated first."""
        with self._guard:
            sessions = [s for s in self._sessions.values() if s.has_player(player_id)]
        return sorted(sessions, key=lambda s: s.updated_at, reverse=True)

    def update(self, session: GameSession, expected_version: int) -> None:
        """Replace a stored session if its version is still `expected_version`."""
        with self._guard:
            current = self._sessions.get(session.session_id)
            if current is None:
                raise NotFound("Game not found")
            if current.version != expected_version:
                raise Conflict("Game was updated by another move, reload and try again")
            self._sessions[session.session_id] = session

    @contextmanager
    def lock(self, key: str) -> Iterator[None]:
        """
        Hold the lock for `key` (a session id, or any other key) for a read-modify-write.

        The entry is dropped once its last holder releases it.
        """
        with self._guard:
            entry = self._session_locks.setdefault(key, _LockEntry())
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._session_locks[key]

    @property
    def lock_count(self) -> int:
        """Number of keys currently locked or waited on."""
        with self._guard:
            return len(self._session_locks)

    def __len__(self) -> int:
        return len(self._sessions)
