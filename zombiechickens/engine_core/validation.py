"""
State validation - Consistency checks over a whole game.

These never fire in correct play. They are run once when a game is
created and are available for tests and debugging.
"""

from __future__ import annotations
from collections import Counter

from .cards import DAY_CARD_AMOUNTS, EVENTS, HAND_SIZE, PUBLIC_CARD_COUNT, STARTING_LIVES, ZOMBIES
from .errors import GameStateValidationError, StackValidationError
from .state import GameState


def initial_day_supply() -> Counter:
    return Counter(DAY_CARD_AMOUNTS)


def initial_night_supply() -> Counter:
    supply = Counter({kind: z.num_in_deck for kind, z in ZOMBIES.items()})
    supply.update({event: 1 for event in EVENTS})
    return supply


def supply_errors(state: GameState) -> list[str]:
    errors = []
    for name, actual, expected in (
        ("day", state.day_supply(), initial_day_supply()),
        ("night", state.night_supply(), initial_night_supply()),
    ):
        if actual != expected:
            diff = {
                card.value: actual[card] - expected[card]
                for card in set(actual) | set(expected)
                if actual[card] != expected[card]
            }
            errors.append(f"{name} card supply changed: {diff}")
    return errors


def assert_new_game(state: GameState) -> None:
    """Check that `state` is exactly what a freshly dealt game should be."""
    errors = []
    expected_lives = STARTING_LIVES.get(len(state.players))
    for player in state.players:
        if player.lives != expected_lives:
            errors.append(f"{player.name} has {player.lives} lives, expected {expected_lives}")
        if len(player.hand_cards()) != HAND_SIZE:
            errors.append(f"{player.name} has {len(player.hand_cards())} cards, expected {HAND_SIZE}")
        if player.farm.stacks:
            errors.append(f"{player.name} starts with a non-empty farm")
        if player.farm.night_cards:
            errors.append(f"{player.name} starts with night cards")
    if len(state.public_cards) != PUBLIC_CARD_COUNT:
        errors.append(f"{len(state.public_cards)} public cards, expected {PUBLIC_CARD_COUNT}")
    if state.night_num != 1:
        errors.append(f"night number is {state.night_num}, expected 1")
    errors.extend(supply_errors(state))
    if errors:
        raise GameStateValidationError(errors)


def assert_consistent(state: GameState) -> None:
    """Every stack is legal and no card has appeared or vanished."""
    stack_errors = []
    for player in state.players:
        try:
            player.farm.assert_legal_stacks()
        except StackValidationError as e:
            stack_errors.extend(f"{player.name} {err}" for err in e.errors)
    if stack_errors:
        raise StackValidationError(stack_errors)
    errors = supply_errors(state)
    if errors:
        raise GameStateValidationError(errors)
