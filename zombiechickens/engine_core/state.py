"""
Game State - The mutable data the turn state machine works on.

Design principles:
- One GameState per game, mutated only by the state machine
- Everything needed to resume lives here, including the current
  sub-stage variant and the seeded RNG
- Presentation layers read snapshots (see view.py), never this object
"""

from __future__ import annotations
import random
from collections import Counter
from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum

from .cards import HAND_SIZE, ItemType
from .decks import DeckManager
from .farm import Farm, PlayChoices
from .prompt import Prompt
from .stages import OptionalDiscard, PlaceOnStack, Stage


class DayPhase(Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    NIGHT = "night"


@dataclass
class PlayerState:
    """
    A player: lives, a fixed five-slot hand and a farm.

    Empty hand slots hold None; the hand always has HAND_SIZE slots.
    """
    name: str
    lives: int
    hand: list[ItemType | None] = field(default_factory=lambda: [None] * HAND_SIZE)
    farm: Farm = field(default_factory=Farm)
    play_choices: PlayChoices = field(default_factory=PlayChoices)

    @property
    def is_alive(self) -> bool:
        return self.lives > 0

    def filled_slots(self) -> list[int]:
        """0-based indices of hand slots holding a card."""
        return [i for i, card in enumerate(self.hand) if card is not None]

    def empty_slots(self) -> list[int]:
        return [i for i, card in enumerate(self.hand) if card is None]

    def hand_cards(self) -> list[ItemType]:
        return [card for card in self.hand if card is not None]

    def take_from_hand(self, slot: int) -> ItemType:
        card = self.hand[slot]
        if card is None:
            raise ValueError(f"hand slot {slot + 1} is empty")
        self.hand[slot] = None
        return card


@dataclass
class GameStats:
    zombies_killed: int = 0
    events_played: int = 0
    lives_lost: int = 0
    players_eliminated: int = 0


@dataclass
class GameState:
    """
    Complete state of one game.

    `stage` is the resumption point; `pending_prompt` caches the prompt
    the current stage is waiting on, if any.
    """
    players: list[PlayerState]
    decks: DeckManager
    rng: random.Random
    seed: int | None = None
    current_player_idx: int = 0
    phase: DayPhase = DayPhase.MORNING
    public_cards: list[ItemType] = field(default_factory=list)
    night_num: int = 1
    turns_taken: int = 0
    stage: Stage = field(default_factory=OptionalDiscard)
    pending_prompt: Prompt | None = None
    stats: GameStats = field(default_factory=GameStats)

    @property
    def current_player(self) -> PlayerState:
        return self.players[self.current_player_idx]

    @property
    def has_players(self) -> bool:
        return bool(self.players)

    def player_index_by_name(self, name: str) -> int | None:
        for i, player in enumerate(self.players):
            if player.name == name:
                return i
        return None

    def eliminate_player(self, idx: int) -> PlayerState:
        """
        Remove a player from the game, discarding everything they hold.

        Keeps `current_player_idx` pointing at the same player when an
        earlier player is removed, and wraps it to 0 if it falls off
        the end.
        """
        player = self.players[idx]
        player.farm.discard_all(self.decks.day)
        self.decks.day.discard_all(player.hand_cards())
        player.hand = [None] * HAND_SIZE
        self.decks.night.discard_all(player.farm.night_cards)
        player.farm.night_cards = []

        del self.players[idx]
        if self.current_player_idx > idx:
            self.current_player_idx -= 1
        elif self.current_player_idx >= len(self.players):
            self.current_player_idx = 0
        self.stats.players_eliminated += 1
        return player

    def day_supply(self) -> Counter:
        """Every day card in the game, wherever it is."""
        total = self.decks.day.supply()
        total.update(self.public_cards)
        for player in self.players:
            total.update(player.hand_cards())
            total.update(player.farm.items())
        if isinstance(self.stage, PlaceOnStack):
            total[self.stage.item] += 1
        return total

    def night_supply(self) -> Counter:
        """Every night card in the game, wherever it is."""
        total = self.decks.night.supply()
        for player in self.players:
            total.update(player.farm.night_cards)
        return total

    def clone(self) -> GameState:
        return deepcopy(self)
