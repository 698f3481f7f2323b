"""
Night event effects.

Each effect runs once, after its card has been confirmed. Effects that
need players to pick what to discard return the EventDiscard stage to
continue with; the rest return None and are finished immediately.
"""

from __future__ import annotations
import logging
from typing import Callable, Optional

from .cards import EventKind, ItemType
from .stages import EventDiscard, NightRound
from .state import GameState

logger = logging.getLogger(__name__)

EventEffect = Callable[[GameState, NightRound, int], Optional[EventDiscard]]

# How many farm items each player must give up.
EVENT_DISCARDS: dict[EventKind, int] = {
    EventKind.LIGHTNING_STORM: 2,
    EventKind.TORNADO: 3,
}

# How many extra night cards each player draws.
EVENT_DRAWS: dict[EventKind, int] = {
    EventKind.BLOOD_MOON: 3,
    EventKind.WINTER_SOLSTICE: 2,
}

EVENT_REMOVES: dict[EventKind, frozenset[ItemType]] = {
    EventKind.SQUIRREL_STAMPEDE: frozenset({ItemType.BOOBY_TRAP}),
    EventKind.HEAVY_RAINFALL: frozenset({ItemType.FLAMETHROWER, ItemType.FUEL}),
}


def start_event_discard(state: GameState, night_round: NightRound, start: int) -> EventDiscard:
    event = state.players[start].farm.night_cards[0]
    owed = EVENT_DISCARDS[event]
    return EventDiscard(
        round=night_round,
        event=event,
        start_index=start,
        offset=0,
        remaining=owed,
        owed=owed,
    )


def draw_extra_night_cards(state: GameState, night_round: NightRound, start: int) -> None:
    event = state.players[start].farm.night_cards[0]
    amount = EVENT_DRAWS[event]
    n = len(state.players)
    for offset in range(n):
        player = state.players[(start + offset) % n]
        player.farm.night_cards.extend(state.decks.night.draw_up_to(amount))
    logger.info("%s: every player draws %d more night card(s)", event.info.name, amount)


def remove_items(state: GameState, night_round: NightRound, start: int) -> None:
    event = state.players[start].farm.night_cards[0]
    kinds = EVENT_REMOVES[event]
    removed = sum(
        player.farm.discard_items_of(kinds, state.decks.day) for player in state.players
    )
    logger.info("%s: %d item(s) discarded from farms", event.info.name, removed)


def silent_night(state: GameState, night_round: NightRound, start: int) -> None:
    """Every pending night card is discarded, except the one being resolved."""
    for i, player in enumerate(state.players):
        queue = player.farm.night_cards
        keep = queue[:1] if i == start else []
        state.decks.night.discard_all(queue[len(keep):])
        player.farm.night_cards = keep


EVENT_EFFECTS: dict[EventKind, EventEffect] = {
    EventKind.LIGHTNING_STORM: start_event_discard,
    EventKind.TORNADO: start_event_discard,
    EventKind.BLOOD_MOON: draw_extra_night_cards,
    EventKind.WINTER_SOLSTICE: draw_extra_night_cards,
    EventKind.SQUIRREL_STAMPEDE: remove_items,
    EventKind.HEAVY_RAINFALL: remove_items,
    EventKind.SILENT_NIGHT: silent_night,
}


def run_event(state: GameState, night_round: NightRound, start: int) -> EventDiscard | None:
    """
    Run the effect of the event at the head of player `start`'s queue.

    The event card itself stays queued; the caller discards it once the
    effect (including any discards it asks for) has finished.
    """
    event = state.players[start].farm.night_cards[0]
    logger.debug("Running event %s for player %d", event.info.name, start)
    return EVENT_EFFECTS[event](state, night_round, start)
