"""
Pytest fixtures for Zombie Chickens tests.
"""

import random

import pytest

from ..engine_core.decks import Deck
from ..engine_core.game import Game, create_new_game


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def day_deck(rng) -> Deck:
    """An empty day deck to collect discards."""
    return Deck(name="day", rng=rng)


@pytest.fixture
def one_player_game() -> Game:
    return create_new_game("Alice", seed=7)


@pytest.fixture
def two_player_game() -> Game:
    return create_new_game("Alice", "Bob", seed=11)
