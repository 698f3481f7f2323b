"""
Deck Manager - Draw, discard and reshuffle for the day and night decks.

Both decks share the game's seeded RNG so a fixed seed reproduces
every shuffle. A deck and its discard pile can both run dry when every
card is out in hands, on farms or in night queues: `draw` raises
DeckExhaustedError then, `draw_up_to` just returns fewer cards.
"""

from __future__ import annotations
import logging
import random
from collections import Counter
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from .cards import (
    DAY_CARD_AMOUNTS,
    EVENTS,
    ZOMBIES,
    EventKind,
    ItemType,
    NightCard,
)
from .errors import DeckExhaustedError

logger = logging.getLogger(__name__)

C = TypeVar("C")


@dataclass
class Deck(Generic[C]):
    """
    A face-down draw pile with its discard pile.

    The front of `cards` is the top of the deck. With `eager_refill`
    the discard pile is shuffled back in as soon as a draw empties the
    deck, not only when a draw finds it empty.
    """
    name: str
    rng: random.Random
    cards: list[C] = field(default_factory=list)
    discard_pile: list[C] = field(default_factory=list)
    eager_refill: bool = False

    def __len__(self) -> int:
        return len(self.cards)

    def shuffle(self) -> None:
        self.rng.shuffle(self.cards)

    def reshuffle(self) -> None:
        """Move the discard pile under the deck and shuffle."""
        if not self.discard_pile:
            return
        logger.debug(
            "Reshuffling %d discarded card(s) into the %s deck",
            len(self.discard_pile), self.name,
        )
        self.cards.extend(self.discard_pile)
        self.discard_pile.clear()
        self.shuffle()

    def draw(self) -> C:
        if not self.cards:
            self.reshuffle()
        if not self.cards:
            raise DeckExhaustedError(f"{self.name} deck and discard pile are both empty")
        card = self.cards.pop(0)
        if self.eager_refill and not self.cards:
            self.reshuffle()
        return card

    @property
    def can_draw(self) -> bool:
        return bool(self.cards or self.discard_pile)

    def draw_up_to(self, n: int) -> list[C]:
        """Draw n cards, or as many as the deck and discard pile still hold."""
        drawn = []
        while len(drawn) < n and self.can_draw:
            drawn.append(self.draw())
        return drawn

    def discard(self, card: C) -> None:
        self.discard_pile.append(card)

    def discard_all(self, cards) -> None:
        self.discard_pile.extend(cards)

    def supply(self) -> Counter:
        """Count of every card held by the deck and its discard pile."""
        return Counter(self.cards) + Counter(self.discard_pile)


def build_day_deck(rng: random.Random) -> Deck[ItemType]:
    cards: list[ItemType] = []
    for item, amount in DAY_CARD_AMOUNTS.items():
        cards.extend([item] * amount)
    deck: Deck[ItemType] = Deck(name="day", rng=rng, cards=cards, eager_refill=True)
    deck.shuffle()
    return deck


# Order used when debugging events: these come first, the rest of the
# events follow in table order.
DEBUG_EVENT_ORDER = (EventKind.BLOOD_MOON, EventKind.WINTER_SOLSTICE)


def build_night_deck(rng: random.Random, debug_events: bool = False) -> Deck[NightCard]:
    cards: list[NightCard] = []
    for kind, zombie in ZOMBIES.items():
        cards.extend([kind] * zombie.num_in_deck)
    cards.extend(EVENTS.keys())
    deck: Deck[NightCard] = Deck(name="night", rng=rng, cards=cards)
    deck.shuffle()
    if debug_events:
        events = list(DEBUG_EVENT_ORDER) + [
            e for e in EVENTS if e not in DEBUG_EVENT_ORDER
        ]
        rest = [c for c in deck.cards if not isinstance(c, EventKind)]
        deck.cards = events + rest
    return deck


@dataclass
class DeckManager:
    """The two decks of a game."""
    day: Deck[ItemType]
    night: Deck[NightCard]

    @classmethod
    def create(cls, rng: random.Random, debug_events: bool = False) -> DeckManager:
        return cls(
            day=build_day_deck(rng),
            night=build_night_deck(rng, debug_events=debug_events),
        )
