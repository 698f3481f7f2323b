"""
API Module - HTTP interface to the game session.

Exposes the lobby and the running game as a small JSON API:
1. Players join the lobby
2. The first player starts the game
3. Clients poll state and answer prompts

All state is session-scoped. No persistent user accounts required.
"""

from .schemas import (
    ErrorCode,
    ErrorResponse,
    GameStateResponse,
    InputRequest,
    InputResponse,
    JoinRequest,
    JoinResponse,
    LobbyResponse,
    PromptInfo,
)
from .service import APIService
from .app import create_app

__all__ = [
    "APIService",
    "ErrorCode",
    "ErrorResponse",
    "GameStateResponse",
    "InputRequest",
    "InputResponse",
    "JoinRequest",
    "JoinResponse",
    "LobbyResponse",
    "PromptInfo",
    "create_app",
]
