"""
Helpers for building game situations in tests.
"""

from ..engine_core.cards import NightCard
from ..engine_core.farm import Farm, Stack
from ..engine_core.game import Game
from ..engine_core.prompt import InputContext, Prompt
from ..engine_core.stages import NightRound, ProcessCards
from ..engine_core.state import DayPhase, GameState


def farm_of(*stacks) -> Farm:
    """Build a farm from iterables of items, one per stack."""
    return Farm(stacks=[Stack(list(items)) for items in stacks])


def take_night_card(state: GameState, card: NightCard) -> NightCard:
    """Pull a specific card out of the night deck (or its discard pile)."""
    deck = state.decks.night
    if card in deck.cards:
        deck.cards.remove(card)
    else:
        deck.discard_pile.remove(card)
    return card


def start_night(game: Game, queues: dict, farms: dict | None = None) -> None:
    """
    Put the game straight into the night with the given night queues.

    `queues` maps player index to night cards, taken from the night deck
    so the supply stays intact. `farms` replaces players' farms.
    """
    state = game.state
    for idx, farm in (farms or {}).items():
        state.players[idx].farm = farm
    for idx, cards in queues.items():
        state.players[idx].farm.night_cards = [take_night_card(state, c) for c in cards]
    state.phase = DayPhase.NIGHT
    state.current_player_idx = 0
    state.stage = ProcessCards(NightRound())
    state.pending_prompt = None


def simple_choice(prompt: Prompt) -> int:
    """A predictable player: skips discards, draws from the deck, fights when it can."""
    if prompt.context is InputContext.DISCARD:
        return 0
    if prompt.context is InputContext.DRAW:
        return 2
    if prompt.context is InputContext.SHIELD:
        return 1
    return prompt.valid_choices[0]


def play_until(game: Game, predicate, choose=simple_choice, max_steps: int = 500):
    """Answer prompts until `predicate(result)` holds. Returns that result."""
    result = game.advance()
    for _ in range(max_steps):
        if predicate(result):
            return result
        if not result.continues:
            break
        if result.prompt is None:
            result = game.advance()
        else:
            result = game.provide_input(choose(result.prompt))
    raise AssertionError("condition never reached")
