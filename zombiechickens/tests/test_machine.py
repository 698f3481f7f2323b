"""
Tests for the turn state machine.

Tests:
- Day turn sub-stages and phase changes
- Zombie resolution: auto-kill, no defense, choosing a stack, shields
- Events, including ones that ask players to discard
- Elimination and the night round-robin
"""

from dataclasses import dataclass

import pytest

from ..engine_core.cards import EventKind, ItemType, ZombieKind
from ..engine_core.errors import StateMachineError
from ..engine_core.farm import Farm, PlayChoices
from ..engine_core.game import create_new_game
from ..engine_core.prompt import InputContext, RenderHint
from ..engine_core.stages import GameOver
from ..engine_core.state import DayPhase
from .helpers import farm_of, play_until, start_night

H = ItemType.HAY_BALE
SC = ItemType.SCARECROW
SG = ItemType.SHOTGUN
AM = ItemType.AMMO
BT = ItemType.BOOBY_TRAP
SH = ItemType.SHIELD
FT = ItemType.FLAMETHROWER
FU = ItemType.FUEL
W = ItemType.WOLR


class TestDayTurn:
    """Tests for the day sub-stages."""

    def test_first_prompt_is_optional_discard(self, one_player_game):
        result = one_player_game.advance()

        assert result.continues
        prompt = result.prompt
        assert prompt.context is InputContext.DISCARD
        assert prompt.valid_choices == (1, 2, 3, 4, 5, 0)
        assert prompt.player_index == 0
        assert prompt.render_hint is RenderHint.FOR_DISCARD

    def test_discard_draws_replacement_then_two_plays_then_draw(self, one_player_game):
        game = one_player_game
        state = game.state
        game.advance()

        discarded = state.players[0].hand[0]
        top = state.decks.day.cards[0]
        deck_size = len(state.decks.day)
        result = game.provide_input(1)
        assert state.decks.day.discard_pile == [discarded]
        assert state.players[0].hand[0] == top
        assert None not in state.players[0].hand
        assert len(state.decks.day) == deck_size - 1
        assert result.prompt.context is InputContext.PLAY
        assert result.prompt.valid_choices == (1, 2, 3, 4, 5)

        result = game.provide_input(2)
        assert result.prompt.context is InputContext.PLAY
        assert result.prompt.valid_choices == (1, 3, 4, 5)

        result = game.provide_input(3)
        assert result.prompt.context is InputContext.DRAW
        assert result.prompt.valid_choices == (1, 2)
        assert state.players[0].farm.total_items() == 2
        assert state.players[0].hand[1:3] == [None, None]

        result = game.provide_input(2)
        assert None not in state.players[0].hand
        assert state.phase is DayPhase.AFTERNOON
        assert result.prompt.context is InputContext.DISCARD

    def test_discard_with_empty_deck_redraws_same_card(self, one_player_game):
        game = one_player_game
        day = game.state.decks.day
        day.cards.clear()
        day.discard_pile.clear()
        game.advance()

        discarded = game.state.players[0].hand[0]
        result = game.provide_input(1)

        assert game.state.players[0].hand[0] == discarded
        assert day.discard_pile == []
        assert result.prompt.context is InputContext.PLAY

    def test_draw_public_cards(self, one_player_game):
        game = one_player_game
        state = game.state
        game.advance()
        game.provide_input(0)
        game.provide_input(1)
        game.provide_input(2)

        public = list(state.public_cards)
        game.provide_input(1)

        assert state.players[0].hand[:2] == public
        assert len(state.public_cards) == 2

    def test_turns_rotate_then_afternoon(self, two_player_game):
        game = two_player_game
        result = game.advance()
        assert result.prompt.player_index == 0

        for choice in (0, 1, 2, 2):
            result = game.provide_input(choice)
        assert result.prompt.player_index == 1
        assert game.state.phase is DayPhase.MORNING

        for choice in (0, 1, 2, 2):
            result = game.provide_input(choice)
        assert result.prompt.player_index == 0
        assert game.state.phase is DayPhase.AFTERNOON

    def test_afternoon_leads_to_night(self, one_player_game):
        result = play_until(
            one_player_game, lambda r: one_player_game.state.phase is DayPhase.NIGHT
        )
        assert result.prompt is not None
        # Night 1 deals one card.
        assert len(one_player_game.state.players[0].farm.night_cards) == 1

    def test_manual_placement_asks_for_stack(self):
        game = create_new_game(
            "Alice",
            seed=5,
            play_choices=PlayChoices(autoload_shotgun=False, auto_build_hay_wall=False),
        )
        player = game.state.players[0]
        player.hand = [H, H, SC, SC, SC]
        player.farm = farm_of([H, H])
        game.advance()
        game.provide_input(0)

        result = game.provide_input(1)
        prompt = result.prompt
        assert prompt.context is InputContext.PLAY_STACK
        assert prompt.item is H
        assert prompt.stack_numbers == (1,)
        assert prompt.valid_choices == (1, 0)
        assert "complete wall" in prompt.message

        result = game.provide_input(0)
        assert [s.items for s in player.farm.stacks] == [[H, H], [H]]
        assert result.prompt.context is InputContext.PLAY

    def test_stack_choice_adds_to_existing(self):
        game = create_new_game(
            "Alice",
            seed=5,
            play_choices=PlayChoices(autoload_shotgun=False, auto_build_hay_wall=False),
        )
        player = game.state.players[0]
        player.hand = [H, SC, SC, SC, SC]
        player.farm = farm_of([H, H])
        game.advance()
        game.provide_input(0)
        game.provide_input(1)
        game.provide_input(1)

        assert [s.items for s in player.farm.stacks] == [[H, H, H]]


class TestZombies:
    """Tests for resolving zombie cards."""

    def test_bulletproof_vs_scarecrow_loses_life(self, one_player_game):
        """A scarecrow does nothing against a zombie that isn't timid."""
        game = one_player_game
        state = game.state
        start_night(game, {0: [ZombieKind.RAIDER]}, farms={0: farm_of([SC])})

        result = game.advance()
        assert result.prompt.context is InputContext.CONFIRM
        assert "no defense" in result.prompt.message
        assert state.players[0].lives == 5
        assert state.players[0].farm.night_cards == [ZombieKind.RAIDER]

        result = game.provide_input(0)
        assert state.players[0].lives == 4
        assert state.players[0].farm.night_cards == []
        assert state.decks.night.discard_pile[-1] is ZombieKind.RAIDER
        assert [s.items for s in state.players[0].farm.stacks] == [[SC]]
        assert state.stats.zombies_killed == 0

        # Night over: a new day starts.
        assert result.continues and result.prompt is None
        assert state.night_num == 2
        assert state.phase is DayPhase.MORNING

    def test_free_defense_auto_kills_after_confirm(self, one_player_game):
        game = one_player_game
        state = game.state
        start_night(game, {0: [ZombieKind.CREEPER]}, farms={0: farm_of([H, H, H])})

        result = game.advance()
        assert result.prompt.context is InputContext.CONFIRM
        assert "auto-killed by Hay Wall" in result.prompt.message
        assert state.players[0].farm.night_cards == [ZombieKind.CREEPER]

        game.provide_input(0)
        assert state.stats.zombies_killed == 1
        assert state.players[0].lives == 5
        assert [s.items for s in state.players[0].farm.stacks] == [[H, H, H]]

    def test_costly_defense_asks(self, one_player_game):
        game = one_player_game
        state = game.state
        start_night(game, {0: [ZombieKind.BITER]}, farms={0: farm_of([SG, AM])})

        result = game.advance()
        prompt = result.prompt
        assert prompt.context is InputContext.DEFENSE
        assert prompt.valid_choices == (1, -1)
        assert prompt.stack_numbers == (1,)

        game.provide_input(1)
        assert [s.items for s in state.players[0].farm.stacks] == [[SG]]
        assert state.decks.day.discard_pile[-1] is AM
        assert state.stats.zombies_killed == 1

    def test_take_life_instead(self, one_player_game):
        game = one_player_game
        state = game.state
        start_night(game, {0: [ZombieKind.BITER]}, farms={0: farm_of([SG, AM])})
        game.advance()

        result = game.provide_input(-1)
        assert result.prompt.context is InputContext.CONFIRM
        assert "will lose a life" in result.prompt.message
        assert state.players[0].lives == 5

        game.provide_input(0)
        assert state.players[0].lives == 4
        assert [s.items for s in state.players[0].farm.stacks] == [[SG, AM]]

    def test_exploding_zombie_offers_shield(self, one_player_game):
        game = one_player_game
        state = game.state
        start_night(game, {0: [ZombieKind.WALKER]}, farms={0: farm_of([H, H, H], [SH])})

        result = game.advance()
        assert result.prompt.context is InputContext.DEFENSE
        result = game.provide_input(1)
        assert result.prompt.context is InputContext.SHIELD
        assert result.prompt.valid_choices == (1, 0)

        game.provide_input(1)
        assert [s.items for s in state.players[0].farm.stacks] == [[H, H, H]]
        assert state.decks.day.discard_pile == [SH]

    def test_declining_shield_loses_stack(self, one_player_game):
        game = one_player_game
        state = game.state
        start_night(game, {0: [ZombieKind.WALKER]}, farms={0: farm_of([H, H, H], [SH])})
        game.advance()
        game.provide_input(1)

        game.provide_input(0)
        assert [s.items for s in state.players[0].farm.stacks] == [[SH]]
        assert state.decks.day.discard_pile == [H, H, H]

    def test_wolr_skips_shield_question(self, one_player_game):
        game = one_player_game
        state = game.state
        start_night(
            game, {0: [ZombieKind.WALKER]}, farms={0: farm_of([W], [H, H, H], [SH])}
        )
        result = game.advance()
        assert result.prompt.stack_numbers == (1, 2)

        result = game.provide_input(1)
        assert result.prompt is None
        assert state.players[0].farm.stacks == []
        assert len(state.decks.day.discard_pile) == 5

    def test_cards_resolved_round_robin(self, two_player_game):
        game = two_player_game
        state = game.state
        start_night(
            game,
            {0: [ZombieKind.RAIDER, ZombieKind.BITER], 1: [ZombieKind.CREEPER]},
            farms={0: Farm(), 1: Farm()},
        )

        result = game.advance()
        assert result.prompt.player_index == 0
        assert "Raider" in result.prompt.message
        result = game.provide_input(0)
        assert result.prompt.player_index == 1
        assert "Creeper" in result.prompt.message
        result = game.provide_input(0)
        assert result.prompt.player_index == 0
        assert "Biter" in result.prompt.message
        result = game.provide_input(0)
        assert result.prompt is None
        assert state.players[0].lives == 3
        assert state.players[1].lives == 4


class TestElimination:

    def test_last_life_eliminates(self, one_player_game):
        game = one_player_game
        state = game.state
        state.players[0].lives = 1
        start_night(game, {0: [ZombieKind.RAIDER]}, farms={0: farm_of([H])})
        game.advance()

        result = game.provide_input(0)
        assert result.prompt.message == "Alice has been eliminated! Press 0 to continue"
        assert state.players[0].lives == 0

        result = game.provide_input(0)
        assert not result.continues
        assert result.prompt is None
        assert state.players == []
        assert isinstance(state.stage, GameOver)
        assert game.is_over

    def test_one_life_left_is_not_eliminated(self, one_player_game):
        game = one_player_game
        state = game.state
        state.players[0].lives = 2
        start_night(game, {0: [ZombieKind.RAIDER]}, farms={0: Farm()})
        game.advance()

        result = game.provide_input(0)
        assert result.continues and result.prompt is None
        assert state.players[0].lives == 1

    def test_eliminated_player_cards_discarded(self, two_player_game):
        game = two_player_game
        state = game.state
        state.players[0].lives = 1
        start_night(
            game,
            {0: [ZombieKind.RAIDER, ZombieKind.BITER], 1: [ZombieKind.CREEPER]},
            farms={0: farm_of([SC]), 1: Farm()},
        )
        hand = state.players[0].hand_cards()
        game.advance()
        game.provide_input(0)

        result = game.provide_input(0)
        assert [p.name for p in state.players] == ["Bob"]
        assert ZombieKind.BITER in state.decks.night.discard_pile
        assert SC in state.decks.day.discard_pile
        for card in hand:
            assert card in state.decks.day.discard_pile
        # Bob moved into Alice's position and is not skipped.
        assert result.prompt.player_index == 0
        assert "Bob" in result.prompt.message


class TestEvents:

    def test_blood_moon_confirms_before_drawing(self, one_player_game):
        game = one_player_game
        state = game.state
        start_night(game, {0: [EventKind.BLOOD_MOON]}, farms={0: Farm()})

        result = game.advance()
        assert result.prompt.context is InputContext.CONFIRM
        assert "Blood Moon" in result.prompt.message
        assert len(state.players[0].farm.night_cards) == 1

        result = game.provide_input(0)
        # Event card removed, three drawn.
        assert len(state.players[0].farm.night_cards) == 3
        assert state.decks.night.discard_pile[-1] is EventKind.BLOOD_MOON
        assert state.stats.events_played == 1
        assert result.prompt is not None

    def test_winter_solstice_every_player(self, two_player_game):
        game = two_player_game
        state = game.state
        start_night(game, {0: [EventKind.WINTER_SOLSTICE]}, farms={0: Farm(), 1: Farm()})
        game.advance()
        game.provide_input(0)

        # Alice's event card is gone, replaced by two new ones.
        assert len(state.players[0].farm.night_cards) == 2
        assert len(state.players[1].farm.night_cards) == 2

    def test_tornado_discards_in_turn(self, two_player_game):
        game = two_player_game
        state = game.state
        start_night(
            game,
            {0: [EventKind.TORNADO]},
            farms={0: farm_of([H, H], [SC], [SG, AM]), 1: farm_of([BT], [W])},
        )
        game.advance()

        result = game.provide_input(0)
        prompt = result.prompt
        assert prompt.context is InputContext.EVENT_DISCARD
        assert prompt.player_index == 0
        assert prompt.valid_choices == (1, 2, 3, 4, 5)
        assert prompt.message == "Alice: choose card to discard (1/3)"
        # The event card stays queued until the discards are done.
        assert state.players[0].farm.night_cards == [EventKind.TORNADO]

        result = game.provide_input(1)
        assert result.prompt.message == "Alice: choose card to discard (2/3)"
        assert result.prompt.valid_choices == (1, 2, 3, 4)
        game.provide_input(1)
        result = game.provide_input(1)

        # Bob has only two items, so both go without asking.
        assert result.prompt is None
        assert [s.items for s in state.players[0].farm.stacks] == [[SG, AM]]
        assert state.players[1].farm.stacks == []
        assert state.players[0].farm.night_cards == []
        assert state.stats.events_played == 1

    def test_discard_order_wraps_from_drawing_player(self, two_player_game):
        """Bob drew the storm, so Bob discards before Alice."""
        game = two_player_game
        state = game.state
        start_night(
            game,
            {1: [EventKind.LIGHTNING_STORM]},
            farms={0: farm_of([H, H, H]), 1: farm_of([H, H, H])},
        )
        game.advance()

        result = game.provide_input(0)
        order = []
        while result.prompt is not None and result.prompt.context is InputContext.EVENT_DISCARD:
            order.append(result.prompt.player_index)
            result = game.provide_input(1)

        assert order == [1, 1, 0, 0]
        assert [p.farm.total_items() for p in state.players] == [1, 1]

    def test_discard_skips_empty_farms(self, two_player_game):
        game = two_player_game
        state = game.state
        start_night(
            game,
            {1: [EventKind.LIGHTNING_STORM]},
            farms={0: Farm(), 1: farm_of([H, H, H])},
        )
        game.advance()

        result = game.provide_input(0)
        assert result.prompt.player_index == 1
        assert result.prompt.message == "Bob: choose card to discard (1/2)"

    def test_squirrel_stampede(self, two_player_game):
        game = two_player_game
        state = game.state
        start_night(
            game,
            {0: [EventKind.SQUIRREL_STAMPEDE]},
            farms={0: farm_of([BT], [H]), 1: farm_of([BT])},
        )
        game.advance()
        game.provide_input(0)

        assert [s.items for s in state.players[0].farm.stacks] == [[H]]
        assert state.players[1].farm.stacks == []
        assert state.decks.day.discard_pile.count(BT) == 2

    def test_heavy_rainfall(self, one_player_game):
        game = one_player_game
        state = game.state
        start_night(
            game,
            {0: [EventKind.HEAVY_RAINFALL]},
            farms={0: farm_of([FT, FU], [FU], [SC])},
        )
        game.advance()
        game.provide_input(0)

        assert [s.items for s in state.players[0].farm.stacks] == [[SC]]

    def test_silent_night_clears_queues(self, two_player_game):
        game = two_player_game
        state = game.state
        start_night(
            game,
            {
                0: [EventKind.SILENT_NIGHT, ZombieKind.BITER],
                1: [ZombieKind.RAIDER, ZombieKind.CREEPER],
            },
            farms={0: Farm(), 1: Farm()},
        )
        game.advance()

        result = game.provide_input(0)
        assert result.prompt is None
        assert all(p.farm.night_cards == [] for p in state.players)
        assert state.players[0].lives == 5
        discard = state.decks.night.discard_pile
        assert discard.count(EventKind.SILENT_NIGHT) == 1
        assert {ZombieKind.BITER, ZombieKind.RAIDER, ZombieKind.CREEPER} <= set(discard)

    def test_debug_events_sequence(self):
        """With events on top, night 1 starts with Blood Moon then Winter Solstice."""
        game = create_new_game("Alice", seed=3, debug_events=True)

        def queue():
            return game.state.players[0].farm.night_cards

        result = play_until(
            game, lambda r: r.prompt is not None and r.prompt.context is InputContext.CONFIRM
        )
        assert "Blood Moon" in result.prompt.message
        assert len(queue()) == 1

        result = game.provide_input(0)
        assert "Winter Solstice" in result.prompt.message
        assert len(queue()) == 3

        result = game.provide_input(0)
        assert "Lightning Storm" in result.prompt.message
        assert len(queue()) == 4

        # Four items were played during the day, so two must be picked.
        result = game.provide_input(0)
        assert result.prompt.context is InputContext.EVENT_DISCARD
        assert result.prompt.message == "Alice: choose card to discard (1/2)"


class TestDispatch:

    def test_unknown_stage_raises(self, one_player_game):
        @dataclass(frozen=True)
        class Mystery:
            label = "Mystery"

        one_player_game.state.stage = Mystery()
        with pytest.raises(StateMachineError, match="No handler"):
            one_player_game.advance()

    def test_advance_while_waiting_is_idempotent(self, one_player_game):
        game = one_player_game
        first = game.advance()
        before = game.snapshot()
        second = game.advance()

        assert first.prompt == second.prompt
        assert game.snapshot() == before

    def test_simple_choice_plays_a_full_day(self, one_player_game):
        result = play_until(one_player_game, lambda r: r.continues and r.prompt is None)
        assert result.prompt is None
        assert one_player_game.state.night_num == 2
