"""
Prompts and step results.

A Prompt is the explicit value the engine hands back when it needs a
decision: what kind of decision, whose, and the closed set of integers
that answer it. Step results tell the machine loop whether to keep
going (Continue) or suspend (NeedsInput).
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from .cards import ItemType


class InputContext(Enum):
    """What kind of decision a prompt asks for."""
    DISCARD = "discard"
    PLAY = "play"
    PLAY_STACK = "play_stack"
    DRAW = "draw"
    CONFIRM = "confirm"
    DEFENSE = "defense"
    SHIELD = "shield"
    EVENT_DISCARD = "event_discard"


class RenderHint(Enum):
    """How a presentation layer should show the state around a prompt."""
    NORMAL = "normal"
    FOR_DISCARD = "for_discard"
    FOR_NIGHT = "for_night"
    NONE = "none"


@dataclass(frozen=True)
class Prompt:
    """A request for one integer from `valid_choices`, made to one player."""
    context: InputContext
    message: str
    valid_choices: tuple[int, ...]
    player_index: int
    render_hint: RenderHint = RenderHint.NORMAL
    item: ItemType | None = None
    stack_numbers: tuple[int, ...] = ()

    def accepts(self, choice: int) -> bool:
        return choice in self.valid_choices

    def to_dict(self) -> dict[str, Any]:
        return {
            "context": self.context.value,
            "message": self.message,
            "valid_choices": list(self.valid_choices),
            "player_index": self.player_index,
            "render_hint": self.render_hint.value,
            "item": self.item.value if self.item else None,
            "stack_numbers": list(self.stack_numbers),
        }


@dataclass(frozen=True)
class Continue:
    """The sub-stage made progress; keep stepping."""


@dataclass(frozen=True)
class NeedsInput:
    """The sub-stage is waiting on `prompt`."""
    prompt: Prompt


@dataclass(frozen=True)
class DayOver:
    """The night has ended; the next call starts a new morning."""


StepResult = Union[Continue, NeedsInput, DayOver]

CONTINUE = Continue()
DAY_OVER = DayOver()


@dataclass
class AdvanceResult:
    """
    Result of advancing the game.

    `continues` is False once the game is over. `prompt` is set when the
    game is suspended waiting for input; a result with `continues` True
    and no prompt means a full day has finished.
    """
    continues: bool
    prompt: Prompt | None = None
    success: bool = True
    error: str | None = None
    error_code: str | None = None

    @property
    def game_over(self) -> bool:
        return self.success and not self.continues

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str,
        prompt: Prompt | None = None,
        continues: bool = True,
    ) -> AdvanceResult:
        """Rejected input. The game keeps waiting on the same prompt."""
        return cls(
            continues=continues,
            prompt=prompt,
            success=False,
            error=error,
            error_code=error_code,
        )
