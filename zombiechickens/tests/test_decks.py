"""
Tests for the deck manager.
"""

import random

import pytest

from ..engine_core.cards import EVENTS, EventKind, ItemType, ZombieKind
from ..engine_core.decks import Deck, DeckManager, build_day_deck, build_night_deck
from ..engine_core.errors import DeckExhaustedError


class TestDraw:
    """Tests for drawing and reshuffling."""

    def test_draw_takes_front_card(self, rng):
        deck = Deck(name="test", rng=rng, cards=[ItemType.AMMO, ItemType.FUEL])
        assert deck.draw() is ItemType.AMMO
        assert deck.cards == [ItemType.FUEL]

    def test_empty_deck_reshuffles_discard(self, rng):
        deck = Deck(name="test", rng=rng)
        deck.discard(ItemType.SHIELD)
        deck.discard(ItemType.SHIELD)

        assert deck.draw() is ItemType.SHIELD
        assert deck.discard_pile == []
        assert len(deck) == 1

    def test_eager_refill_after_last_card(self, rng):
        """The day deck refills as soon as its last card is drawn."""
        deck = Deck(name="day", rng=rng, cards=[ItemType.FUEL], eager_refill=True)
        deck.discard(ItemType.AMMO)

        assert deck.draw() is ItemType.FUEL
        assert deck.cards == [ItemType.AMMO]
        assert deck.discard_pile == []

    def test_lazy_refill_waits_for_empty_draw(self, rng):
        deck = Deck(name="night", rng=rng, cards=[ZombieKind.BITER])
        deck.discard(ZombieKind.RAIDER)

        deck.draw()
        assert deck.cards == []
        assert deck.discard_pile == [ZombieKind.RAIDER]

    def test_exhausted_raises(self, rng):
        deck = Deck(name="test", rng=rng)
        with pytest.raises(DeckExhaustedError):
            deck.draw()

    def test_draw_up_to_stops_when_out(self, rng):
        deck = Deck(name="test", rng=rng, cards=[ItemType.AMMO])
        assert deck.draw_up_to(3) == [ItemType.AMMO]
        assert deck.draw_up_to(2) == []

    def test_supply_counts_deck_and_discard(self, rng):
        deck = Deck(name="test", rng=rng, cards=[ItemType.AMMO])
        deck.discard(ItemType.AMMO)
        deck.discard(ItemType.FUEL)
        assert deck.supply() == {ItemType.AMMO: 2, ItemType.FUEL: 1}


class TestBuildDecks:
    """Tests for deck composition."""

    def test_day_deck_composition(self, rng):
        deck = build_day_deck(rng)
        assert len(deck) == 96
        assert deck.supply()[ItemType.HAY_BALE] == 20
        assert deck.eager_refill

    def test_night_deck_composition(self, rng):
        deck = build_night_deck(rng)
        assert len(deck) == 61
        assert deck.supply()[ZombieKind.BITER] == 10
        assert all(deck.supply()[e] == 1 for e in EVENTS)

    def test_same_seed_same_order(self):
        a = DeckManager.create(random.Random(99))
        b = DeckManager.create(random.Random(99))
        assert a.day.cards == b.day.cards
        assert a.night.cards == b.night.cards

    def test_debug_events_on_top(self, rng):
        deck = build_night_deck(rng, debug_events=True)
        assert deck.cards[0] is EventKind.BLOOD_MOON
        assert deck.cards[1] is EventKind.WINTER_SOLSTICE
        assert set(deck.cards[:7]) == set(EventKind)
        assert all(isinstance(c, ZombieKind) for c in deck.cards[7:])
        assert len(deck) == 61
