"""
Card & Rule Tables - Static game data.

Everything here is immutable lookup data keyed by enum members:
item types and their deck counts, zombie types and trait sets,
night events, stacking compatibility and the starting-lives table.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Union


class ItemType(Enum):
    """Day-deck defensive items."""
    HAY_BALE = "hay_bale"
    SCARECROW = "scarecrow"
    SHOTGUN = "shotgun"
    AMMO = "ammo"
    BOOBY_TRAP = "booby_trap"
    SHIELD = "shield"
    FLAMETHROWER = "flamethrower"
    FUEL = "fuel"
    WOLR = "wolr"  # farm-wiper

    @property
    def display_name(self) -> str:
        return ITEM_NAMES[self]

    @property
    def one_time_use(self) -> bool:
        return self in ONE_TIME_USE


class ZombieTrait(Enum):
    INVISIBLE = "invisible"
    FLYING = "flying"
    CLIMBING = "climbing"
    BULLETPROOF = "bulletproof"
    FIREPROOF = "fireproof"
    TIMID = "timid"
    EXPLODING = "exploding"


class ZombieKind(Enum):
    """Night-deck zombie cards."""
    RAIDER = "raider"
    WALKER = "walker"
    CHOMPER = "chomper"
    CRAWLER = "crawler"
    CLIMBER = "climber"
    CLUCKER = "clucker"
    KABLOOEY = "kablooey"
    BITER = "biter"
    BLASTER = "blaster"
    BOOMER = "boomer"
    STALKER = "stalker"
    THUNDER = "thunder"
    FLOATER = "floater"
    TOASTER = "toaster"
    SNEAKER = "sneaker"
    CREEPER = "creeper"

    @property
    def info(self) -> ZombieType:
        return ZOMBIES[self]


class EventKind(Enum):
    """Night-deck event cards."""
    LIGHTNING_STORM = "lightning_storm"
    TORNADO = "tornado"
    BLOOD_MOON = "blood_moon"
    WINTER_SOLSTICE = "winter_solstice"
    SQUIRREL_STAMPEDE = "squirrel_stampede"
    HEAVY_RAINFALL = "heavy_rainfall"
    SILENT_NIGHT = "silent_night"

    @property
    def info(self) -> EventDefinition:
        return EVENTS[self]


# A night card is either a zombie or an event, discriminated by enum type.
NightCard = Union[ZombieKind, EventKind]


@dataclass(frozen=True)
class ZombieType:
    """A zombie definition: name, traits and how many are in the night deck."""
    name: str
    traits: frozenset[ZombieTrait]
    num_in_deck: int

    def has(self, trait: ZombieTrait) -> bool:
        return trait in self.traits

    @property
    def is_exploding(self) -> bool:
        return ZombieTrait.EXPLODING in self.traits


@dataclass(frozen=True)
class EventDefinition:
    name: str
    description: str


def _zombie(name: str, count: int, *traits: ZombieTrait) -> ZombieType:
    return ZombieType(name=name, traits=frozenset(traits), num_in_deck=count)


_T = ZombieTrait

ZOMBIES: dict[ZombieKind, ZombieType] = {
    ZombieKind.RAIDER: _zombie("Raider", 2, _T.FLYING, _T.BULLETPROOF),
    ZombieKind.WALKER: _zombie("Walker", 4, _T.FIREPROOF, _T.EXPLODING),
    ZombieKind.CHOMPER: _zombie("Chomper", 2, _T.BULLETPROOF, _T.FIREPROOF, _T.TIMID),
    ZombieKind.CRAWLER: _zombie("Crawler", 2, _T.CLIMBING, _T.BULLETPROOF),
    ZombieKind.CLIMBER: _zombie("Climber", 2, _T.CLIMBING, _T.FIREPROOF, _T.EXPLODING),
    ZombieKind.CLUCKER: _zombie("Clucker", 2, _T.EXPLODING),
    ZombieKind.KABLOOEY: _zombie("Kablooey", 4, _T.FLYING, _T.EXPLODING),
    ZombieKind.BITER: _zombie("Biter", 10, _T.FLYING, _T.FIREPROOF),
    ZombieKind.BLASTER: _zombie("Blaster", 2, _T.FLYING, _T.TIMID, _T.EXPLODING),
    ZombieKind.BOOMER: _zombie("Boomer", 6, _T.FLYING, _T.BULLETPROOF, _T.EXPLODING),
    ZombieKind.STALKER: _zombie("Stalker", 4, _T.INVISIBLE, _T.EXPLODING),
    ZombieKind.THUNDER: _zombie("Thunder", 2, _T.INVISIBLE, _T.FLYING, _T.TIMID, _T.EXPLODING),
    ZombieKind.FLOATER: _zombie("Floater", 2, _T.INVISIBLE, _T.FLYING, _T.TIMID),
    ZombieKind.TOASTER: _zombie("Toaster", 2, _T.FLYING, _T.FIREPROOF, _T.TIMID, _T.EXPLODING),
    ZombieKind.SNEAKER: _zombie("Sneaker", 2, _T.INVISIBLE, _T.CLIMBING),
    ZombieKind.CREEPER: _zombie("Creeper", 6, _T.INVISIBLE),
}

EVENTS: dict[EventKind, EventDefinition] = {
    EventKind.LIGHTNING_STORM: EventDefinition(
        "Lightning Storm", "All players discard 2 cards from their farm."
    ),
    EventKind.TORNADO: EventDefinition(
        "Tornado", "All players discard 3 cards from their farm."
    ),
    EventKind.BLOOD_MOON: EventDefinition(
        "Blood Moon",
        "Zombies are flocking tonight!\nAll players draw 3 more Night cards.",
    ),
    EventKind.WINTER_SOLSTICE: EventDefinition(
        "Winter Solstice",
        "It's gonna be a long night! All players draw 2 more Night cards.",
    ),
    EventKind.SQUIRREL_STAMPEDE: EventDefinition(
        "Squirrel Stampede",
        "A squirrel stampede triggers all Booby Traps! "
        "All players discard any Booby Traps on their farm.",
    ),
    EventKind.HEAVY_RAINFALL: EventDefinition(
        "Heavy Rainfall",
        "Water rusts Flamethrowers! "
        "All players discard any Flamethrowers and Fuel on their farm.",
    ),
    EventKind.SILENT_NIGHT: EventDefinition(
        "Silent Night",
        "No more zombies tonight! All players discard any remaining Night cards.",
    ),
}

ITEM_NAMES: dict[ItemType, str] = {
    ItemType.HAY_BALE: "Hay Bale",
    ItemType.SCARECROW: "Scarecrow",
    ItemType.SHOTGUN: "Shotgun",
    ItemType.AMMO: "Ammo",
    ItemType.BOOBY_TRAP: "Booby Trap",
    ItemType.SHIELD: "Shield",
    ItemType.FLAMETHROWER: "Flamethrower",
    ItemType.FUEL: "Fuel",
    ItemType.WOLR: "W.O.L.R.",
}

DAY_CARD_AMOUNTS: dict[ItemType, int] = {
    ItemType.HAY_BALE: 20,
    ItemType.SCARECROW: 6,
    ItemType.SHOTGUN: 14,
    ItemType.AMMO: 24,
    ItemType.BOOBY_TRAP: 10,
    ItemType.SHIELD: 6,
    ItemType.FLAMETHROWER: 6,
    ItemType.FUEL: 6,
    ItemType.WOLR: 4,
}

ONE_TIME_USE: frozenset[ItemType] = frozenset({
    ItemType.AMMO,
    ItemType.WOLR,
    ItemType.BOOBY_TRAP,
    ItemType.SHIELD,
})

# Which item types may share a stack with a given item type.
STACKS_WITH: dict[ItemType, frozenset[ItemType]] = {
    ItemType.HAY_BALE: frozenset({ItemType.HAY_BALE}),
    ItemType.SCARECROW: frozenset(),
    ItemType.SHOTGUN: frozenset({ItemType.AMMO}),
    ItemType.AMMO: frozenset({ItemType.SHOTGUN, ItemType.AMMO}),
    ItemType.BOOBY_TRAP: frozenset(),
    ItemType.SHIELD: frozenset(),
    ItemType.FLAMETHROWER: frozenset({ItemType.FUEL}),
    ItemType.FUEL: frozenset({ItemType.FLAMETHROWER}),
    ItemType.WOLR: frozenset(),
}

STARTING_LIVES: dict[int, int] = {1: 5, 2: 5, 3: 4, 4: 4}

MIN_PLAYERS = 1
MAX_PLAYERS = 4
HAND_SIZE = 5
PUBLIC_CARD_COUNT = 2
HAY_WALL_SIZE = 3


def is_zombie(card: NightCard) -> bool:
    return isinstance(card, ZombieKind)


def is_event(card: NightCard) -> bool:
    return isinstance(card, EventKind)


def night_card_name(card: NightCard) -> str:
    return card.info.name


def total_day_cards() -> int:
    return sum(DAY_CARD_AMOUNTS.values())


def total_night_cards() -> int:
    return sum(z.num_in_deck for z in ZOMBIES.values()) + len(EVENTS)
