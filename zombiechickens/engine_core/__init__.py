"""
Engine Core - Deterministic rules engine for Zombie Chickens.

The engine is the runtime that:
1. Deals a new game from a seeded shuffle
2. Runs turns through the day/night state machine
3. Suspends with a Prompt whenever a player has to decide something
4. Applies the answer and carries on from exactly where it stopped
"""

from .cards import EventKind, ItemType, ZombieKind, ZombieTrait
from .errors import (
    DeckExhaustedError,
    GameStateValidationError,
    InvalidChoiceError,
    InvalidPlayerCountError,
    StackValidationError,
    StateMachineError,
    ZombieChickensError,
)
from .farm import Farm, NeedsChoice, Placed, PlayChoices, Stack
from .game import Game, advance, create_new_game, provide_input
from .prompt import AdvanceResult, InputContext, Prompt, RenderHint
from .state import DayPhase, GameState, PlayerState
from .view import GameSnapshot, PlayerSnapshot

__all__ = [
    "AdvanceResult",
    "DayPhase",
    "DeckExhaustedError",
    "EventKind",
    "Farm",
    "Game",
    "GameSnapshot",
    "GameState",
    "GameStateValidationError",
    "InputContext",
    "InvalidChoiceError",
    "InvalidPlayerCountError",
    "ItemType",
    "NeedsChoice",
    "Placed",
    "PlayChoices",
    "PlayerSnapshot",
    "PlayerState",
    "Prompt",
    "RenderHint",
    "Stack",
    "StackValidationError",
    "StateMachineError",
    "ZombieChickensError",
    "ZombieKind",
    "ZombieTrait",
    "advance",
    "create_new_game",
    "provide_input",
]
