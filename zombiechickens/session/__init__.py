"""
Session Module - Lobby and access control for the running game.

A session represents one play-through:
- Players join a lobby and get a session id
- The first player starts the game
- Each submitted choice is checked against whose input is pending

Sessions are ephemeral: nothing is persisted, and resetting the
session discards the game.
"""

from .errors import SessionError
from .manager import GameSession, PlayerInfo, SessionState

__all__ = [
    "GameSession",
    "PlayerInfo",
    "SessionError",
    "SessionState",
]
