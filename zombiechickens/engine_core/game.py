"""
Game Session Facade - Entry points for creating and driving a game.

    game = create_new_game("Alice", "Bob", seed=42)
    result = game.advance()
    while result.continues:
        if result.prompt:
            result = game.provide_input(pick(result.prompt))
        else:
            result = game.advance()   # a new day

Presentation layers read `game.snapshot()`; they never touch the live
state.
"""

from __future__ import annotations
import logging
import random

from .cards import HAND_SIZE, MAX_PLAYERS, MIN_PLAYERS, PUBLIC_CARD_COUNT, STARTING_LIVES
from .decks import DeckManager
from .errors import InvalidChoiceError, InvalidPlayerCountError
from .farm import PlayChoices
from .machine import TurnStateMachine
from .prompt import AdvanceResult, Prompt
from .stages import GameOver
from .state import GameState, PlayerState
from .validation import assert_new_game
from .view import GameSnapshot, snapshot

logger = logging.getLogger(__name__)


class Game:
    """A game in progress."""

    def __init__(self, state: GameState):
        self.state = state
        self._machine = TurnStateMachine(state)

    def advance(self) -> AdvanceResult:
        """Run until a prompt is needed or the day or game is over."""
        return self._machine.advance()

    def provide_input(self, choice: int) -> AdvanceResult:
        """
        Answer the pending prompt and keep going.

        A choice that is not valid for the pending prompt, or any choice
        when nothing is pending, is rejected with a failure result and
        the game is left as it was.
        """
        try:
            return self._machine.provide_input(choice)
        except InvalidChoiceError as e:
            return AdvanceResult.failure(
                str(e),
                error_code=e.error_code,
                prompt=self.state.pending_prompt,
                continues=not self.is_over,
            )

    @property
    def pending_prompt(self) -> Prompt | None:
        return self.state.pending_prompt

    @property
    def active_input_player_index(self) -> int | None:
        """Index of the player whose input is pending, if any."""
        prompt = self.state.pending_prompt
        return prompt.player_index if prompt else None

    @property
    def has_living_players(self) -> bool:
        return self.state.has_players

    @property
    def is_over(self) -> bool:
        return isinstance(self.state.stage, GameOver)

    def player_index_by_name(self, name: str) -> int | None:
        return self.state.player_index_by_name(name)

    def snapshot(self) -> GameSnapshot:
        return snapshot(self.state)

    def clone(self) -> Game:
        return Game(self.state.clone())


def create_new_game(
    *names: str,
    seed: int | None = None,
    debug_events: bool = False,
    play_choices: PlayChoices | None = None,
) -> Game:
    """
    Create and deal a new game for 1-4 players.

    Two public cards are dealt first, then five cards to each player.
    `debug_events` puts every event at the top of the night deck.
    """
    if len(names) < MIN_PLAYERS:
        raise InvalidPlayerCountError("must provide at least 1 player")
    if len(names) > MAX_PLAYERS:
        raise InvalidPlayerCountError(f"must provide max {MAX_PLAYERS} player names")

    if seed is None:
        seed = random.randrange(2**32)
    rng = random.Random(seed)
    decks = DeckManager.create(rng, debug_events=debug_events)

    public_cards = [decks.day.draw() for _ in range(PUBLIC_CARD_COUNT)]
    lives = STARTING_LIVES[len(names)]
    players = []
    for name in names:
        choices = PlayChoices(**vars(play_choices)) if play_choices else PlayChoices()
        player = PlayerState(name=name, lives=lives, play_choices=choices)
        player.hand = [decks.day.draw() for _ in range(HAND_SIZE)]
        players.append(player)

    state = GameState(
        players=players,
        decks=decks,
        rng=rng,
        seed=seed,
        public_cards=public_cards,
    )
    assert_new_game(state)
    logger.info("New game for %s (seed %d)", ", ".join(names), seed)
    return Game(state)


def advance(game: Game) -> AdvanceResult:
    return game.advance()


def provide_input(game: Game, choice: int) -> AdvanceResult:
    return game.provide_input(choice)
