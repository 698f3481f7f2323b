"""
Game Session - Lobby and single-writer access to the one running game.

LIFECYCLE:
1. Players join the lobby (max 4), each getting a session id
2. The first player starts the game
3. Players submit choices; only the player the pending prompt belongs
   to may answer it
4. The game ends when every player has been eliminated

All reads go through snapshots; the live game is only touched under
the session lock. Nothing is persisted.
"""

from __future__ import annotations
import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum

from ..engine_core.cards import MAX_PLAYERS
from ..engine_core.game import Game, create_new_game
from ..engine_core.prompt import AdvanceResult, Prompt
from ..engine_core.view import GameSnapshot
from .errors import (
    GameAlreadyStartedError,
    GameFullError,
    GameNotStartedError,
    GameOverError,
    InvalidChoiceError,
    NameTakenError,
    NoInputNeededError,
    NotEnoughPlayersError,
    NotHostError,
    NotYourTurnError,
    PlayerNotFoundError,
)

logger = logging.getLogger(__name__)

# Suffixes tried when a player joins with a name already in use.
MAX_NAME_SUFFIX = 10


class SessionState(Enum):
    LOBBY = "lobby"
    ACTIVE = "active"
    GAME_OVER = "game_over"


@dataclass
class PlayerInfo:
    """A client in the lobby. `index` is join order, not game position."""
    session_id: str
    name: str
    index: int


@dataclass
class GameSession:
    """
    One lobby and the game it starts.

    Players are matched to game positions by name, so the mapping
    survives eliminations shifting everyone down.
    """
    seed: int | None = None
    debug_events: bool = False
    created_at: float = field(default_factory=time.time)
    state: SessionState = SessionState.LOBBY
    players: list[PlayerInfo] = field(default_factory=list)
    game: Game | None = None
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    @property
    def is_started(self) -> bool:
        return self.state is not SessionState.LOBBY

    @property
    def is_over(self) -> bool:
        return self.state is SessionState.GAME_OVER

    def add_player(self, name: str) -> PlayerInfo:
        with self._lock:
            if self.is_started:
                raise GameAlreadyStartedError()
            if len(self.players) >= MAX_PLAYERS:
                raise GameFullError()

            info = PlayerInfo(
                session_id=str(uuid.uuid4()),
                name=self._unique_name(name.strip() or "Player"),
                index=len(self.players),
            )
            self.players.append(info)
            logger.info("%s joined the lobby (%d/%d)", info.name, len(self.players), MAX_PLAYERS)
            return info

    def _unique_name(self, name: str) -> str:
        taken = {p.name for p in self.players}
        if name not in taken:
            return name
        for suffix in range(2, MAX_NAME_SUFFIX + 1):
            candidate = f"{name}{suffix}"
            if candidate not in taken:
                return candidate
        raise NameTakenError()

    def get_player(self, session_id: str) -> PlayerInfo | None:
        for player in self.players:
            if player.session_id == session_id:
                return player
        return None

    def start_game(self, session_id: str) -> AdvanceResult:
        """Deal the game and run it up to the first prompt."""
        with self._lock:
            if self.is_started:
                raise GameAlreadyStartedError()
            if not self.players:
                raise NotEnoughPlayersError()
            player = self.get_player(session_id)
            if player is None:
                raise PlayerNotFoundError()
            if player.index != 0:
                raise NotHostError()

            self.game = create_new_game(
                *(p.name for p in self.players),
                seed=self.seed,
                debug_events=self.debug_events,
            )
            self.state = SessionState.ACTIVE
            logger.info("Game started with %d player(s)", len(self.players))
            return self._run(self.game.advance())

    def submit_input(self, session_id: str, choice: int) -> AdvanceResult:
        """Answer the pending prompt on behalf of the client `session_id`."""
        with self._lock:
            if not self.is_started:
                raise GameNotStartedError()
            if self.is_over:
                raise GameOverError()
            player = self.get_player(session_id)
            if player is None:
                raise PlayerNotFoundError()

            game = self.game
            player_idx = game.player_index_by_name(player.name)
            if player_idx is None:
                raise PlayerNotFoundError("player has been eliminated")
            if game.pending_prompt is None:
                raise NoInputNeededError()
            if player_idx != game.active_input_player_index:
                raise NotYourTurnError()
            if not game.pending_prompt.accepts(choice):
                raise InvalidChoiceError()

            return self._run(game.provide_input(choice))

    def _run(self, result: AdvanceResult) -> AdvanceResult:
        """Keep advancing through day boundaries until a prompt or game over."""
        while result.continues and result.prompt is None:
            result = self.game.advance()
        if not result.continues:
            self.state = SessionState.GAME_OVER
            logger.info("Game over")
        return result

    def pending_prompt(self) -> Prompt | None:
        with self._lock:
            return self.game.pending_prompt if self.game else None

    def view(self, session_id: str | None = None) -> tuple[GameSnapshot | None, int | None]:
        """
        A snapshot paired with the game position of `session_id`.

        Both are read under one lock hold, so an elimination cannot land
        between them.
        """
        with self._lock:
            if self.game is None:
                return None, None
            player = self.get_player(session_id) if session_id else None
            index = self.game.player_index_by_name(player.name) if player else None
            return self.game.snapshot(), index

    def snapshot(self) -> GameSnapshot | None:
        with self._lock:
            return self.game.snapshot() if self.game else None

