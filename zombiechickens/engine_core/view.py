"""
Read-only snapshots of a game for presentation layers.

Snapshots are built from immutable tuples and enum members, so holding
on to one is safe while the live game keeps changing.
"""

from __future__ import annotations
from dataclasses import asdict, dataclass
from typing import Any

from .cards import ItemType, NightCard
from .prompt import Prompt
from .stages import GameOver
from .state import DayPhase, GameState, GameStats


@dataclass(frozen=True)
class PlayerSnapshot:
    index: int
    name: str
    lives: int
    hand: tuple[ItemType | None, ...]
    stacks: tuple[tuple[ItemType, ...], ...]
    night_cards: tuple[NightCard, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "name": self.name,
            "lives": self.lives,
            "hand": [card.value if card else None for card in self.hand],
            "stacks": [[item.value for item in stack] for stack in self.stacks],
            "night_cards": [card.value for card in self.night_cards],
        }


@dataclass(frozen=True)
class GameSnapshot:
    players: tuple[PlayerSnapshot, ...]
    current_player_idx: int
    phase: DayPhase
    night_num: int
    public_cards: tuple[ItemType, ...]
    stage_label: str
    pending_prompt: Prompt | None
    day_deck_size: int
    day_discard_size: int
    night_deck_size: int
    night_discard_size: int
    stats: GameStats
    game_over: bool

    @property
    def current_player(self) -> PlayerSnapshot | None:
        if not self.players:
            return None
        return self.players[self.current_player_idx]

    @property
    def active_input_player_index(self) -> int | None:
        return self.pending_prompt.player_index if self.pending_prompt else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "players": [p.to_dict() for p in self.players],
            "current_player_idx": self.current_player_idx,
            "phase": self.phase.value,
            "night_num": self.night_num,
            "public_cards": [card.value for card in self.public_cards],
            "stage": self.stage_label,
            "pending_prompt": self.pending_prompt.to_dict() if self.pending_prompt else None,
            "day_deck_size": self.day_deck_size,
            "day_discard_size": self.day_discard_size,
            "night_deck_size": self.night_deck_size,
            "night_discard_size": self.night_discard_size,
            "stats": asdict(self.stats),
            "game_over": self.game_over,
        }


def snapshot(state: GameState) -> GameSnapshot:
    """Copy everything a renderer needs out of the live state."""
    players = tuple(
        PlayerSnapshot(
            index=i,
            name=p.name,
            lives=p.lives,
            hand=tuple(p.hand),
            stacks=tuple(tuple(s.items) for s in p.farm.stacks),
            night_cards=tuple(p.farm.night_cards),
        )
        for i, p in enumerate(state.players)
    )
    return GameSnapshot(
        players=players,
        current_player_idx=state.current_player_idx,
        phase=state.phase,
        night_num=state.night_num,
        public_cards=tuple(state.public_cards),
        stage_label=state.stage.label,
        pending_prompt=state.pending_prompt,
        day_deck_size=len(state.decks.day),
        day_discard_size=len(state.decks.day.discard_pile),
        night_deck_size=len(state.decks.night),
        night_discard_size=len(state.decks.night.discard_pile),
        stats=GameStats(**asdict(state.stats)),
        game_over=isinstance(state.stage, GameOver),
    )
