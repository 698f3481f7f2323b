"""
Engine Errors - Exception hierarchy for the rules engine.

Three families:
- Construction errors: a game could not be created (bad player count,
  inconsistent starting state).
- Invalid-choice errors: recoverable, the caller re-prompts.
- Internal invariant violations: programmer errors that should never
  surface in correct play (illegal stack shapes, unhandled sub-stages,
  an empty supply).
"""

from __future__ import annotations


class ZombieChickensError(Exception):
    """Base class for all engine errors."""


class InvalidPlayerCountError(ZombieChickensError, ValueError):
    """Raised when a game is created with 0 or more than 4 players."""


class InvalidChoiceError(ZombieChickensError):
    """A submitted choice is not acceptable for the pending prompt."""

    def __init__(self, message: str, error_code: str = "INVALID_CHOICE"):
        super().__init__(message)
        self.error_code = error_code


class StateMachineError(ZombieChickensError):
    """The turn state machine reached a sub-stage it cannot handle."""


class DeckExhaustedError(ZombieChickensError):
    """Both a deck and its discard pile are empty."""


class StackValidationError(ZombieChickensError):
    """One or more stacks violate the legal-shape table."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class GameStateValidationError(ZombieChickensError):
    """The game state failed a consistency check."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__(
            f"game state validation failed with {len(self.errors)} error(s): "
            + "; ".join(self.errors)
        )
