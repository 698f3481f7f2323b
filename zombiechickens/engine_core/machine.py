"""
Turn State Machine - Runs the day and night until input is needed.

A day is Morning (every player takes a turn), Afternoon (again), then
Night. A turn is:

    OptionalDiscard -> PlayCard(1) -> [PlaceOnStack] -> PlayCard(2)
        -> [PlaceOnStack] -> DrawCards -> next player

The optional discard swaps one hand card for the top of the day deck.

Night deals `night_num` cards to every player and then resolves them in
round-robin rounds: each player's head card, then each player's next
card, until a round resolves nothing.

Every sub-stage has two handlers:
- a step handler, which either moves on by itself (Continue) or builds
  the prompt it is waiting on (NeedsInput) without touching state
- an input handler, which applies an accepted choice

Side effects only happen in input handlers and in stages that never
prompt, so stepping a waiting stage any number of times changes
nothing. Cards are only removed from a night queue after the player
has confirmed what happens to them.
"""

from __future__ import annotations
import logging
from dataclasses import replace
from typing import Callable

from .cards import HAND_SIZE, PUBLIC_CARD_COUNT, EventKind, ItemType, ZombieKind
from .errors import InvalidChoiceError, StateMachineError
from .events import run_event
from .farm import NeedsChoice, describe_defense
from .prompt import (
    CONTINUE,
    DAY_OVER,
    AdvanceResult,
    DayOver,
    InputContext,
    NeedsInput,
    Prompt,
    RenderHint,
    StepResult,
)
from .stages import (
    ChooseDefense,
    ChooseShield,
    ConfirmLifeLoss,
    DrawCards,
    Eliminated,
    EventConfirm,
    EventDiscard,
    GameOver,
    NightRound,
    NoDefense,
    OptionalDiscard,
    PlaceOnStack,
    PlayCard,
    ProcessCards,
    Stage,
    StartNight,
    ZombieAutoKilled,
)
from .state import DayPhase, GameState, PlayerState

logger = logging.getLogger(__name__)

PLAYS_PER_TURN = 2
PUBLIC_DRAW = 1
DECK_DRAW = 2
TAKE_LIFE_LOSS = -1
NEW_STACK = 0


class TurnStateMachine:
    """
    Drives a GameState from one prompt to the next.

    Stateless apart from the GameState it wraps.
    """

    def __init__(self, state: GameState):
        self.state = state
        self._step_handlers: dict[type, Callable[[Stage], StepResult]] = {
            OptionalDiscard: self._step_optional_discard,
            PlayCard: self._step_play_card,
            PlaceOnStack: self._step_place_on_stack,
            DrawCards: self._step_draw,
            StartNight: self._step_start_night,
            ProcessCards: self._step_process_cards,
            ZombieAutoKilled: self._step_zombie_auto_killed,
            NoDefense: self._step_no_defense,
            ChooseDefense: self._step_choose_defense,
            ChooseShield: self._step_choose_shield,
            ConfirmLifeLoss: self._step_confirm_life_loss,
            Eliminated: self._step_eliminated,
            EventConfirm: self._step_event_confirm,
            EventDiscard: self._step_event_discard,
        }
        self._input_handlers: dict[type, Callable[[Stage, int], None]] = {
            OptionalDiscard: self._input_optional_discard,
            PlayCard: self._input_play_card,
            PlaceOnStack: self._input_place_on_stack,
            DrawCards: self._input_draw,
            ZombieAutoKilled: self._input_zombie_auto_killed,
            NoDefense: self._input_life_loss,
            ChooseDefense: self._input_choose_defense,
            ChooseShield: self._input_choose_shield,
            ConfirmLifeLoss: self._input_life_loss,
            Eliminated: self._input_eliminated,
            EventConfirm: self._input_event_confirm,
            EventDiscard: self._input_event_discard,
        }

    # --- Public API ---

    def advance(self) -> AdvanceResult:
        """
        Step until a prompt is needed, the day ends or the game ends.

        Calling this again while a prompt is pending returns the same
        prompt and changes nothing.
        """
        state = self.state
        while True:
            if isinstance(state.stage, GameOver):
                state.pending_prompt = None
                return AdvanceResult(continues=False)

            result = self._get_handler(self._step_handlers, state.stage)(state.stage)

            if isinstance(result, NeedsInput):
                state.pending_prompt = result.prompt
                return AdvanceResult(continues=True, prompt=result.prompt)
            if isinstance(result, DayOver):
                state.pending_prompt = None
                return AdvanceResult(continues=True)

    def provide_input(self, choice: int) -> AdvanceResult:
        """
        Apply `choice` to the pending prompt and advance.

        Raises InvalidChoiceError, leaving state untouched, if nothing
        is pending or the choice is not one of the valid ones.
        """
        prompt = self.state.pending_prompt
        if prompt is None:
            raise InvalidChoiceError("no input needed", error_code="NO_INPUT_NEEDED")
        if not prompt.accepts(choice):
            raise InvalidChoiceError(
                f"invalid choice {choice}, expected one of {list(prompt.valid_choices)}"
            )

        stage = self.state.stage
        handler = self._get_handler(self._input_handlers, stage)
        self.state.pending_prompt = None
        handler(stage, choice)
        return self.advance()

    def _get_handler(self, handlers: dict, stage: Stage):
        handler = handlers.get(type(stage))
        if handler is None:
            raise StateMachineError(f"No handler for sub-stage: {type(stage).__name__}")
        return handler

    # --- Helpers ---

    def _player(self, idx: int | None = None) -> PlayerState:
        return self.state.players[self.state.current_player_idx if idx is None else idx]

    def _prompt(
        self,
        context: InputContext,
        message: str,
        choices,
        player_index: int | None = None,
        render_hint: RenderHint = RenderHint.NORMAL,
        **extra,
    ) -> NeedsInput:
        if player_index is None:
            player_index = self.state.current_player_idx
        return NeedsInput(Prompt(
            context=context,
            message=message,
            valid_choices=tuple(choices),
            player_index=player_index,
            render_hint=render_hint,
            **extra,
        ))

    def _confirm(self, message: str, player_index: int) -> NeedsInput:
        return self._prompt(
            InputContext.CONFIRM, message, (0,),
            player_index=player_index, render_hint=RenderHint.FOR_NIGHT,
        )

    # --- Day ---

    def _step_optional_discard(self, stage: OptionalDiscard) -> StepResult:
        player = self._player()
        filled = player.filled_slots()
        if not filled:
            self.state.stage = PlayCard(1)
            return CONTINUE
        return self._prompt(
            InputContext.DISCARD,
            f"{player.name}: 1-{HAND_SIZE} to discard, 0 to skip",
            [slot + 1 for slot in filled] + [0],
            render_hint=RenderHint.FOR_DISCARD,
        )

    def _input_optional_discard(self, stage: OptionalDiscard, choice: int) -> None:
        if choice:
            player = self._player()
            day = self.state.decks.day
            card = player.take_from_hand(choice - 1)
            day.discard(card)
            # Drawn after discarding, so an empty deck reshuffles the card back.
            player.hand[choice - 1] = day.draw()
            logger.debug("%s discards %s and draws a replacement", player.name, card.display_name)
        self.state.stage = PlayCard(1)

    def _step_play_card(self, stage: PlayCard) -> StepResult:
        player = self._player()
        filled = player.filled_slots()
        if not filled:
            self._after_play(stage.ordinal)
            return CONTINUE
        return self._prompt(
            InputContext.PLAY,
            f"{player.name}: 1-{HAND_SIZE} in your hand to play",
            [slot + 1 for slot in filled],
        )

    def _input_play_card(self, stage: PlayCard, choice: int) -> None:
        player = self._player()
        item = player.take_from_hand(choice - 1)
        outcome = player.farm.place_card(item, player.play_choices)
        if isinstance(outcome, NeedsChoice):
            self.state.stage = PlaceOnStack(
                ordinal=stage.ordinal,
                item=item,
                candidates=outcome.candidates,
                reason=outcome.reason,
            )
            return
        logger.debug("%s plays %s onto stack %d", player.name, item.display_name, outcome.stack_index + 1)
        self._after_play(stage.ordinal)

    def _step_place_on_stack(self, stage: PlaceOnStack) -> StepResult:
        player = self._player()
        numbers = tuple(i + 1 for i in stage.candidates)
        return self._prompt(
            InputContext.PLAY_STACK,
            f"{player.name}: {stage.reason} (stacks: {list(numbers)}, 0 for new stack)",
            numbers + (NEW_STACK,),
            item=stage.item,
            stack_numbers=numbers,
        )

    def _input_place_on_stack(self, stage: PlaceOnStack, choice: int) -> None:
        target = None if choice == NEW_STACK else choice - 1
        self._player().farm.place_on(stage.item, target)
        self._after_play(stage.ordinal)

    def _after_play(self, ordinal: int) -> None:
        if ordinal < PLAYS_PER_TURN:
            self.state.stage = PlayCard(ordinal + 1)
        else:
            self.state.stage = DrawCards()

    def _step_draw(self, stage: DrawCards) -> StepResult:
        player = self._player()
        if not player.empty_slots():
            self._end_turn()
            return CONTINUE
        public = ", ".join(card.display_name for card in self.state.public_cards)
        choices = [PUBLIC_DRAW, DECK_DRAW] if self.state.public_cards else [DECK_DRAW]
        return self._prompt(
            InputContext.DRAW,
            f"{player.name}: 1 for public cards ({public}), 2 for deck",
            choices,
        )

    def _input_draw(self, stage: DrawCards, choice: int) -> None:
        state = self.state
        player = self._player()
        empty = player.empty_slots()
        if choice == PUBLIC_DRAW:
            taken = state.public_cards[:len(empty)]
            state.public_cards = state.public_cards[len(taken):]
            for slot, card in zip(empty, taken):
                player.hand[slot] = card
            empty = empty[len(taken):]
            state.public_cards.extend(
                state.decks.day.draw_up_to(PUBLIC_CARD_COUNT - len(state.public_cards))
            )
        # Slots stay empty if every day card is already out on the farms.
        for slot, card in zip(empty, state.decks.day.draw_up_to(len(empty))):
            player.hand[slot] = card
        self._end_turn()

    def _end_turn(self) -> None:
        state = self.state
        state.turns_taken += 1
        state.current_player_idx = (state.current_player_idx + 1) % len(state.players)
        state.stage = OptionalDiscard()
        if state.turns_taken < len(state.players):
            return
        state.turns_taken = 0
        if state.phase is DayPhase.MORNING:
            state.phase = DayPhase.AFTERNOON
            logger.info("Afternoon of day %d", state.night_num)
        else:
            state.phase = DayPhase.NIGHT
            state.stage = StartNight()

    # --- Night ---

    def _step_start_night(self, stage: StartNight) -> StepResult:
        state = self.state
        for player in state.players:
            player.farm.night_cards.extend(state.decks.night.draw_up_to(state.night_num))
        state.current_player_idx = 0
        state.stage = ProcessCards(NightRound())
        logger.info("Night %d begins: %d card(s) per player", state.night_num, state.night_num)
        return CONTINUE

    def _step_process_cards(self, stage: ProcessCards) -> StepResult:
        state = self.state
        night_round = stage.round

        if night_round.position >= len(state.players):
            if night_round.processed:
                state.stage = ProcessCards(NightRound())
                return CONTINUE
            return self._end_night()

        state.current_player_idx = night_round.position
        farm = self._player().farm
        if not farm.night_cards:
            state.stage = ProcessCards(night_round.next_player())
            return CONTINUE

        card = farm.night_cards[0]
        if isinstance(card, EventKind):
            state.stage = EventConfirm(night_round, card)
            return CONTINUE

        zombie = card.info
        free = farm.free_defenses(zombie)
        if free:
            state.stage = ZombieAutoKilled(night_round, card, free[0])
            return CONTINUE
        matching = farm.matching_defenses(zombie)
        if matching:
            state.stage = ChooseDefense(night_round, card, tuple(matching))
        else:
            state.stage = NoDefense(night_round, card)
        return CONTINUE

    def _end_night(self) -> StepResult:
        state = self.state
        logger.info("Night %d is over, %d player(s) remain", state.night_num, len(state.players))
        state.night_num += 1
        state.phase = DayPhase.MORNING
        state.turns_taken = 0
        state.current_player_idx = 0
        state.stage = OptionalDiscard()
        return DAY_OVER

    def _finish_card(self, night_round: NightRound) -> None:
        """Take the resolved head card off the queue and discard it."""
        queue = self.state.players[night_round.position].farm.night_cards
        self.state.decks.night.discard(queue.pop(0))

    # Zombies

    def _step_zombie_auto_killed(self, stage: ZombieAutoKilled) -> StepResult:
        player = self._player(stage.round.position)
        defense = describe_defense(player.farm.stacks[stage.stack_index])
        return self._confirm(
            f"{player.name}: {stage.zombie.info.name} auto-killed by {defense}, press 0 to continue",
            stage.round.position,
        )

    def _input_zombie_auto_killed(self, stage: ZombieAutoKilled, choice: int) -> None:
        self._kill(stage.round, stage.zombie, stage.stack_index, use_shield=False)

    def _step_no_defense(self, stage: NoDefense) -> StepResult:
        player = self._player(stage.round.position)
        return self._confirm(
            f"{player.name}: no defense against {stage.zombie.info.name}, "
            "will lose a life, press 0 to continue",
            stage.round.position,
        )

    def _step_choose_defense(self, stage: ChooseDefense) -> StepResult:
        player = self._player(stage.round.position)
        numbers = tuple(i + 1 for i in stage.candidates)
        return self._prompt(
            InputContext.DEFENSE,
            f"{player.name}: choose stack to use against {stage.zombie.info.name} "
            f"or -1 to take life (stacks: {list(numbers)})",
            numbers + (TAKE_LIFE_LOSS,),
            player_index=stage.round.position,
            render_hint=RenderHint.FOR_NIGHT,
            stack_numbers=numbers,
        )

    def _input_choose_defense(self, stage: ChooseDefense, choice: int) -> None:
        if choice == TAKE_LIFE_LOSS:
            self.state.stage = ConfirmLifeLoss(stage.round, stage.zombie)
            return
        index = choice - 1
        farm = self._player(stage.round.position).farm
        if (
            stage.zombie.info.is_exploding
            and farm.has_item(ItemType.SHIELD)
            and not farm.stacks[index].has(ItemType.WOLR)
        ):
            self.state.stage = ChooseShield(stage.round, stage.zombie, index)
            return
        self._kill(stage.round, stage.zombie, index, use_shield=False)

    def _step_choose_shield(self, stage: ChooseShield) -> StepResult:
        player = self._player(stage.round.position)
        return self._prompt(
            InputContext.SHIELD,
            f"{player.name}: use shield to save stack from exploding zombie? (1=yes, 0=no)",
            (1, 0),
            player_index=stage.round.position,
            render_hint=RenderHint.FOR_NIGHT,
        )

    def _input_choose_shield(self, stage: ChooseShield, choice: int) -> None:
        self._kill(stage.round, stage.zombie, stage.stack_index, use_shield=choice == 1)

    def _kill(self, night_round: NightRound, zombie: ZombieKind, stack_index: int, use_shield: bool) -> None:
        state = self.state
        player = self._player(night_round.position)
        logger.debug(
            "%s kills %s with %s",
            player.name, zombie.info.name, describe_defense(player.farm.stacks[stack_index]),
        )
        player.farm.apply_defense(stack_index, zombie.info, use_shield, state.decks.day)
        self._finish_card(night_round)
        state.stats.zombies_killed += 1
        state.stage = ProcessCards(night_round.next_player(processed=True))

    def _step_confirm_life_loss(self, stage: ConfirmLifeLoss) -> StepResult:
        player = self._player(stage.round.position)
        return self._confirm(
            f"{player.name}: will lose a life, press 0 to continue", stage.round.position
        )

    def _input_life_loss(self, stage: NoDefense | ConfirmLifeLoss, choice: int) -> None:
        state = self.state
        player = self._player(stage.round.position)
        self._finish_card(stage.round)
        player.lives -= 1
        state.stats.lives_lost += 1
        logger.info("%s loses a life to %s (%d left)", player.name, stage.zombie.info.name, player.lives)
        if player.lives <= 0:
            state.stage = Eliminated(stage.round)
        else:
            state.stage = ProcessCards(stage.round.next_player(processed=True))

    def _step_eliminated(self, stage: Eliminated) -> StepResult:
        player = self._player(stage.round.position)
        return self._confirm(
            f"{player.name} has been eliminated! Press 0 to continue", stage.round.position
        )

    def _input_eliminated(self, stage: Eliminated, choice: int) -> None:
        state = self.state
        player = state.eliminate_player(stage.round.position)
        logger.info("%s has been eliminated", player.name)
        if not state.players:
            logger.info("All players eliminated after %d night(s)", state.night_num)
            state.stage = GameOver()
            return
        # The next player has moved into the eliminated player's position.
        state.stage = ProcessCards(stage.round.stay(processed=True))

    # Events

    def _step_event_confirm(self, stage: EventConfirm) -> StepResult:
        player = self._player(stage.round.position)
        event = stage.event.info
        return self._confirm(
            f"{player.name}: {event.name}! {event.description} Press 0 to continue",
            stage.round.position,
        )

    def _input_event_confirm(self, stage: EventConfirm, choice: int) -> None:
        next_stage = run_event(self.state, stage.round, stage.round.position)
        if next_stage is None:
            self._finish_event(stage.round)
        else:
            self.state.stage = next_stage

    def _finish_event(self, night_round: NightRound) -> None:
        self._finish_card(night_round)
        self.state.stats.events_played += 1
        self.state.stage = ProcessCards(night_round.next_player(processed=True))

    def _step_event_discard(self, stage: EventDiscard) -> StepResult:
        state = self.state
        n = len(state.players)
        if stage.offset >= n:
            self._finish_event(stage.round)
            return CONTINUE

        target = stage.target(n)
        player = state.players[target]
        total = player.farm.total_items()
        if total == 0:
            state.stage = stage.next_target()
            return CONTINUE
        if total <= stage.remaining:
            player.farm.discard_all(state.decks.day)
            logger.debug("%s discards their whole farm (%d item(s))", player.name, total)
            state.stage = stage.next_target()
            return CONTINUE

        done = stage.owed - stage.remaining
        return self._prompt(
            InputContext.EVENT_DISCARD,
            f"{player.name}: choose card to discard ({done + 1}/{stage.owed})",
            range(1, total + 1),
            player_index=target,
            render_hint=RenderHint.FOR_DISCARD,
        )

    def _input_event_discard(self, stage: EventDiscard, choice: int) -> None:
        player = self.state.players[stage.target(len(self.state.players))]
        player.farm.remove_item_by_flat_index(choice - 1, self.state.decks.day)
        remaining = stage.remaining - 1
        if remaining == 0:
            self.state.stage = stage.next_target()
        else:
            self.state.stage = replace(stage, remaining=remaining)
