"""
Session Module - Creates and stores game sessions.

A session represents one game between two players:
- Created when a player challenges another by email
- Holds the board, whose turn it is and the result
- Mutated only by the reducer, once per accepted move
- Never mutated after it is drawn or won
"""

from .manager import SessionManager
from .store import SessionStore, InMemorySessionStore

__all__ = [
    "SessionManager",
    "SessionStore",
    "InMemorySessionStore",
]
