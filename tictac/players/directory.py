"""
Player Directory - Lookup of players by email or id.

The directory is an external collaborator of the game core. The
in-memory implementation backs the bundled service and the tests.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Protocol
import threading
import uuid

from ..errors import Conflict, InvalidInput
from .validation import is_email_valid, normalize_email


@dataclass(frozen=True)
class Player:
    """A registered player."""
    player_id: str
    email: str
    name: str = ""
    username: str = ""


class PlayerDirectory(Protocol):
    """Read access to players, as used by the game core."""

    def find_by_email(self, email: str) -> Player | None:
        ...

    def find_by_id(self, player_id: str) -> Player | None:
        ...


class InMemoryPlayerDirectory:
    """
    Thread-safe in-memory player directory.

    Emails are unique and matched case-insensitively.
    """

    def __init__(self):
        self._by_id: dict[str, Player] = {}
        self._by_email: dict[str, str] = {}
        self._lock = threading.Lock()

    def register(
        self,
        email: str,
        name: str = "",
        username: str = "",
        player_id: str | None = None,
    ) -> Player:
        """Register a new player and return it."""
        if not is_email_valid(email):
            raise InvalidInput("Enter a valid email")
        key = normalize_email(email)
        with self._lock:
            if key in self._by_email:
                raise Conflict("User already exists")
            player = Player(
                player_id=player_id or uuid.uuid4().hex,
                email=email.strip(),
                name=name,
                username=username,
            )
            if player.player_id in self._by_id:
                raise Conflict("User already exists")
            self._by_id[player.player_id] = player
            self._by_email[key] = player.player_id
        return player

    def find_by_email(self, email: str) -> Player | None:
        with self._lock:
            player_id = self._by_email.get(normalize_email(email))
            return self._by_id.get(player_id) if player_id else None

    def find_by_id(self, player_id: str) -> Player | None:
        with self._lock:
            return self._by_id.get(player_id)

    def __len__(self) -> int:
        return len(self._by_id)
