"""
Tictac - Two-player 3x3 game service

A turn-based game server where two players are paired into a session,
alternate moves on a 3x3 board, and are notified of every change in
real time. The service provides:
- Session creation with pairing rules
- Server-side move validation
- Deterministic win/draw/pending classification
- WebSocket broadcast of game updates
"""

__version__ = "0.1.0"
