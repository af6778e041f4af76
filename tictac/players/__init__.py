"""
Players Module - Player identities and their lookup.

Players are owned by the directory; the game core only reads their
identifiers for comparison and their display details for enrichment.
"""

from .directory import Player, PlayerDirectory, InMemoryPlayerDirectory
from .validation import is_email_valid, normalize_email

__all__ = [
    "Player",
    "PlayerDirectory",
    "InMemoryPlayerDirectory",
    "is_email_valid",
    "normalize_email",
]
