"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between web clients and the
game session. Other players' hands are never sent; a player sees the
head of their own night queue only.

Error Codes:
- GAME_ALREADY_STARTED / GAME_NOT_STARTED / GAME_OVER: lifecycle
- GAME_FULL / NAME_TAKEN / NOT_ENOUGH_PLAYERS / NOT_HOST: lobby
- PLAYER_NOT_FOUND: unknown or eliminated session id
- NOT_YOUR_TURN: the pending prompt belongs to someone else
- NO_INPUT_NEEDED / INVALID_CHOICE: rejected input
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    GAME_ALREADY_STARTED = "GAME_ALREADY_STARTED"
    GAME_NOT_STARTED = "GAME_NOT_STARTED"
    GAME_FULL = "GAME_FULL"
    GAME_OVER = "GAME_OVER"
    NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"
    NAME_TAKEN = "NAME_TAKEN"
    NOT_HOST = "NOT_HOST"
    PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    NO_INPUT_NEEDED = "NO_INPUT_NEEDED"
    INVALID_CHOICE = "INVALID_CHOICE"


class SessionStatus(str, Enum):
    LOBBY = "lobby"
    ACTIVE = "active"
    GAME_OVER = "game_over"


# =============================================================================
# Requests
# =============================================================================

class JoinRequest(BaseModel):
    name: str = Field(min_length=1, max_length=20, description="Display name")


class StartRequest(BaseModel):
    session_id: str


class InputRequest(BaseModel):
    session_id: str
    choice: int = Field(description="One of the pending prompt's valid_choices")


# =============================================================================
# Shared Models
# =============================================================================

class PromptInfo(BaseModel):
    """A decision the game is waiting on."""
    context: str
    message: str
    valid_choices: list[int]
    player_index: int
    render_hint: str
    item: Optional[str] = None
    stack_numbers: list[int] = Field(default_factory=list)


class PlayerInfo(BaseModel):
    """A player as seen by the requesting client."""
    index: int
    name: str
    lives: int
    stacks: list[list[str]] = Field(default_factory=list)
    hand: Optional[list[Optional[str]]] = Field(
        default=None, description="Only present for the requesting player"
    )
    night_card_count: int = 0
    next_night_card: Optional[str] = Field(
        default=None, description="Head of the night queue, own player at night only"
    )
    is_current: bool = False
    is_you: bool = False


class StatsInfo(BaseModel):
    zombies_killed: int = 0
    events_played: int = 0
    lives_lost: int = 0
    players_eliminated: int = 0

    model_config = {"from_attributes": True}


class LobbyPlayer(BaseModel):
    name: str
    index: int


# =============================================================================
# Responses
# =============================================================================

class JoinResponse(BaseModel):
    session_id: str
    name: str
    player_index: int


class LobbyResponse(BaseModel):
    status: SessionStatus
    players: list[LobbyPlayer] = Field(default_factory=list)


class GameStateResponse(BaseModel):
    status: SessionStatus
    phase: str
    night_num: int
    stage: str
    current_player_idx: int
    public_cards: list[str] = Field(default_factory=list)
    players: list[PlayerInfo] = Field(default_factory=list)
    prompt: Optional[PromptInfo] = None
    your_index: Optional[int] = None
    your_turn: bool = False
    day_deck_size: int = 0
    night_deck_size: int = 0
    stats: StatsInfo = Field(default_factory=StatsInfo)


class InputResponse(BaseModel):
    success: bool = True
    game_over: bool = False
    prompt: Optional[PromptInfo] = None


class ResetResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    """Standardized error response."""
    success: bool = False
    error: str
    error_code: ErrorCode
    details: Optional[dict] = None


class HealthResponse(BaseModel):
    status: str = "healthy"
    service: str = "zombiechickens"
    version: str
