"""
Sub-stages - One variant per point where a turn can pause.

Each variant carries exactly the scratch data needed to resume it, so
a game stored at any sub-stage can be picked up again without
recomputing anything from state that may have moved on. Variants are
immutable; the machine swaps in a new one on every transition.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import ClassVar, Union

from .cards import EventKind, ItemType, ZombieKind


# --- Day ---

@dataclass(frozen=True)
class OptionalDiscard:
    label: ClassVar[str] = "Optional Discard"


@dataclass(frozen=True)
class PlayCard:
    """Play the first or second card of the turn."""
    ordinal: int = 1

    @property
    def label(self) -> str:
        return f"Play {self.ordinal}"


@dataclass(frozen=True)
class PlaceOnStack:
    """A played card is waiting for the player to pick its stack."""
    ordinal: int
    item: ItemType
    candidates: tuple[int, ...]
    reason: str

    @property
    def label(self) -> str:
        return f"Play {self.ordinal} Stack"


@dataclass(frozen=True)
class DrawCards:
    label: ClassVar[str] = "Draw"


# --- Night ---

@dataclass(frozen=True)
class NightRound:
    """
    Progress through one round-robin pass of the night.

    `position` is the index of the player whose head card is being
    resolved. `processed` records whether any card was resolved this
    round; a round that resolves nothing ends the night.
    """
    position: int = 0
    processed: bool = False

    def next_player(self, processed: bool = False) -> NightRound:
        return NightRound(self.position + 1, self.processed or processed)

    def stay(self, processed: bool = False) -> NightRound:
        """Same position, used when the player at it has just been removed."""
        return NightRound(self.position, self.processed or processed)


@dataclass(frozen=True)
class StartNight:
    label: ClassVar[str] = "Night"


@dataclass(frozen=True)
class ProcessCards:
    round: NightRound = NightRound()
    label: ClassVar[str] = "Process Night Cards"


@dataclass(frozen=True)
class ZombieAutoKilled:
    round: NightRound
    zombie: ZombieKind
    stack_index: int
    label: ClassVar[str] = "Zombie Auto-Killed"


@dataclass(frozen=True)
class NoDefense:
    round: NightRound
    zombie: ZombieKind
    label: ClassVar[str] = "No Defense"


@dataclass(frozen=True)
class ChooseDefense:
    round: NightRound
    zombie: ZombieKind
    candidates: tuple[int, ...]
    label: ClassVar[str] = "Choose Defense"


@dataclass(frozen=True)
class ChooseShield:
    round: NightRound
    zombie: ZombieKind
    stack_index: int
    label: ClassVar[str] = "Choose Shield"


@dataclass(frozen=True)
class ConfirmLifeLoss:
    round: NightRound
    zombie: ZombieKind
    label: ClassVar[str] = "Confirm Life Loss"


@dataclass(frozen=True)
class Eliminated:
    round: NightRound
    label: ClassVar[str] = "Eliminated"


@dataclass(frozen=True)
class EventConfirm:
    round: NightRound
    event: EventKind
    label: ClassVar[str] = "Event"


@dataclass(frozen=True)
class EventDiscard:
    """
    Players discarding farm items for an event, one player at a time.

    Players are visited from `start_index` onwards; `offset` is how far
    through that order we are and `remaining` how many items the
    current player still owes out of `owed`.
    """
    round: NightRound
    event: EventKind
    start_index: int
    offset: int
    remaining: int
    owed: int
    label: ClassVar[str] = "Event Discard"

    def target(self, num_players: int) -> int:
        return (self.start_index + self.offset) % num_players

    def next_target(self) -> EventDiscard:
        return replace(self, offset=self.offset + 1, remaining=self.owed)


@dataclass(frozen=True)
class GameOver:
    label: ClassVar[str] = "Game Over"


DayStage = Union[OptionalDiscard, PlayCard, PlaceOnStack, DrawCards]
NightStage = Union[
    StartNight,
    ProcessCards,
    ZombieAutoKilled,
    NoDefense,
    ChooseDefense,
    ChooseShield,
    ConfirmLifeLoss,
    Eliminated,
    EventConfirm,
    EventDiscard,
]
Stage = Union[DayStage, NightStage, GameOver]
