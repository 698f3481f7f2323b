"""
API Service - Business logic layer between the API and the game session.

The service:
1. Translates requests into GameSession calls
2. Turns session errors into ErrorResponse values
3. Builds per-client views of the game (hiding other players' hands)

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Union

from ..engine_core.prompt import Prompt
from ..engine_core.state import DayPhase
from ..engine_core.view import GameSnapshot
from ..session import GameSession, SessionError
from .schemas import (
    ErrorCode,
    ErrorResponse,
    GameStateResponse,
    InputResponse,
    JoinResponse,
    LobbyPlayer,
    LobbyResponse,
    PlayerInfo,
    PromptInfo,
    ResetResponse,
    SessionStatus,
    StatsInfo,
)

logger = logging.getLogger(__name__)


def prompt_info(prompt: Prompt | None) -> PromptInfo | None:
    return PromptInfo(**prompt.to_dict()) if prompt else None


@dataclass
class APIService:
    """
    Main API service for web clients.

    Usage:
        service = APIService()
        joined = service.join("Alice")
        service.start(joined.session_id)
        state = service.get_state(joined.session_id)
        service.submit_input(joined.session_id, state.prompt.valid_choices[0])
    """
    session_factory: Callable[[], GameSession] = GameSession
    session: GameSession | None = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def __post_init__(self):
        if self.session is None:
            self.session = self.session_factory()

    def _current(self) -> GameSession:
        """The live session; a reset swaps it under the same lock."""
        with self._lock:
            return self.session

    def _error(self, e: SessionError) -> ErrorResponse:
        logger.debug("Request refused: %s (%s)", e, e.error_code)
        return ErrorResponse(error=str(e), error_code=ErrorCode(e.error_code))

    def join(self, name: str) -> Union[JoinResponse, ErrorResponse]:
        try:
            info = self._current().add_player(name)
        except SessionError as e:
            return self._error(e)
        return JoinResponse(session_id=info.session_id, name=info.name, player_index=info.index)

    def lobby(self) -> LobbyResponse:
        session = self._current()
        return LobbyResponse(
            status=SessionStatus(session.state.value),
            players=[LobbyPlayer(name=p.name, index=p.index) for p in session.players],
        )

    def start(self, session_id: str) -> Union[InputResponse, ErrorResponse]:
        try:
            result = self._current().start_game(session_id)
        except SessionError as e:
            return self._error(e)
        return InputResponse(game_over=not result.continues, prompt=prompt_info(result.prompt))

    def submit_input(self, session_id: str, choice: int) -> Union[InputResponse, ErrorResponse]:
        try:
            result = self._current().submit_input(session_id, choice)
        except SessionError as e:
            return self._error(e)
        return InputResponse(game_over=not result.continues, prompt=prompt_info(result.prompt))

    def get_state(self, session_id: str | None = None) -> Union[GameStateResponse, ErrorResponse]:
        """The game as seen by `session_id` (or a spectator when None)."""
        session = self._current()
        snap, your_index = session.view(session_id)
        if snap is None:
            return ErrorResponse(
                error="game has not started", error_code=ErrorCode.GAME_NOT_STARTED
            )
        return self._state_response(session, snap, your_index)

    def reset(self) -> ResetResponse:
        with self._lock:
            self.session = self.session_factory()
        logger.info("Session reset through the API")
        return ResetResponse()

    def _state_response(
        self, session: GameSession, snap: GameSnapshot, your_index: int | None
    ) -> GameStateResponse:
        is_night = snap.phase is DayPhase.NIGHT
        players = []
        for p in snap.players:
            is_you = p.index == your_index
            players.append(PlayerInfo(
                index=p.index,
                name=p.name,
                lives=p.lives,
                stacks=[[item.value for item in stack] for stack in p.stacks],
                hand=[c.value if c else None for c in p.hand] if is_you else None,
                night_card_count=len(p.night_cards),
                next_night_card=(
                    p.night_cards[0].value if is_you and is_night and p.night_cards else None
                ),
                is_current=p.index == snap.current_player_idx,
                is_you=is_you,
            ))
        return GameStateResponse(
            status=SessionStatus(session.state.value),
            phase=snap.phase.value,
            night_num=snap.night_num,
            stage=snap.stage_label,
            current_player_idx=snap.current_player_idx,
            public_cards=[c.value for c in snap.public_cards],
            players=players,
            prompt=prompt_info(snap.pending_prompt),
            your_index=your_index,
            your_turn=your_index is not None and snap.active_input_player_index == your_index,
            day_deck_size=snap.day_deck_size,
            night_deck_size=snap.night_deck_size,
            stats=StatsInfo.model_validate(snap.stats),
        )
