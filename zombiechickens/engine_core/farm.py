"""
Farm Engine - Stack composition, defense matching and defense effects.

A farm is a player's defensive area: a list of stacks plus the queue
of night cards still to be resolved tonight. Stacks must always match
one legal shape:

    1-3 hay bales                       (a complete wall has 3)
    one scarecrow / booby trap / shield / W.O.L.R., alone
    one shotgun plus any number of ammo
    ammo alone
    one flamethrower plus at most one fuel, or one fuel alone

Placement is automatic where it is unambiguous (or where the player's
automation preferences make it so) and otherwise reports the candidate
stacks so the caller can ask.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

from .cards import HAY_WALL_SIZE, ItemType, NightCard, ZombieTrait, ZombieType
from .errors import StackValidationError

if TYPE_CHECKING:
    from .decks import Deck

_SINGLETONS = frozenset({
    ItemType.SCARECROW,
    ItemType.BOOBY_TRAP,
    ItemType.SHIELD,
    ItemType.WOLR,
})

# Items whose presence makes a defense cost something.
_COSTLY = frozenset({ItemType.AMMO, ItemType.BOOBY_TRAP, ItemType.WOLR})


@dataclass
class PlayChoices:
    """Per-player automation preferences for card placement."""
    autoload_shotgun: bool = True
    auto_build_hay_wall: bool = True


@dataclass(frozen=True)
class Placed:
    """The card was placed on `stack_index`."""
    stack_index: int


@dataclass(frozen=True)
class NeedsChoice:
    """Placement is ambiguous: pick one of `candidates` or start a new stack."""
    candidates: tuple[int, ...]
    reason: str


PlacementOutcome = Union[Placed, NeedsChoice]


@dataclass
class Stack:
    """One assembled defense: an ordered multiset of items."""
    items: list[ItemType] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def has(self, item: ItemType) -> bool:
        return item in self.items

    def count(self, item: ItemType) -> int:
        return self.items.count(item)

    def only(self, item: ItemType) -> bool:
        """True if the stack is non-empty and holds nothing but `item`."""
        return bool(self.items) and all(i is item for i in self.items)

    def add(self, item: ItemType) -> None:
        self.items.append(item)

    def remove(self, item: ItemType) -> bool:
        if item in self.items:
            self.items.remove(item)
            return True
        return False

    @property
    def is_complete_wall(self) -> bool:
        return self.count(ItemType.HAY_BALE) >= HAY_WALL_SIZE

    @property
    def is_loaded_shotgun(self) -> bool:
        return self.has(ItemType.SHOTGUN) and self.has(ItemType.AMMO)

    @property
    def is_fueled_flamethrower(self) -> bool:
        return self.has(ItemType.FLAMETHROWER) and self.has(ItemType.FUEL)

    def defeats(self, zombie: ZombieType) -> bool:
        if self.has(ItemType.SCARECROW) and zombie.has(ZombieTrait.TIMID):
            return True
        if self.is_complete_wall and not (
            zombie.has(ZombieTrait.FLYING) or zombie.has(ZombieTrait.CLIMBING)
        ):
            return True
        if self.is_loaded_shotgun and not (
            zombie.has(ZombieTrait.BULLETPROOF) or zombie.has(ZombieTrait.INVISIBLE)
        ):
            return True
        if self.is_fueled_flamethrower and not (
            zombie.has(ZombieTrait.FIREPROOF) or zombie.has(ZombieTrait.INVISIBLE)
        ):
            return True
        if self.has(ItemType.BOOBY_TRAP) and not zombie.has(ZombieTrait.FLYING):
            return True
        return self.has(ItemType.WOLR)


def validate_stack(stack: Stack) -> str | None:
    """Return a description of what is wrong with `stack`, or None if legal."""
    if not stack.items:
        return "empty stack"
    counts = Counter(stack.items)
    kinds = frozenset(counts)

    if kinds == {ItemType.HAY_BALE}:
        if counts[ItemType.HAY_BALE] > HAY_WALL_SIZE:
            return f"hay wall has {counts[ItemType.HAY_BALE]} bales (max {HAY_WALL_SIZE})"
        return None
    if len(kinds) == 1 and next(iter(kinds)) in _SINGLETONS:
        item = next(iter(kinds))
        if counts[item] != 1:
            return f"{item.display_name} must be alone in its stack, found {counts[item]}"
        return None
    if kinds == {ItemType.AMMO}:
        return None
    if kinds in ({ItemType.SHOTGUN}, {ItemType.SHOTGUN, ItemType.AMMO}):
        if counts[ItemType.SHOTGUN] != 1:
            return f"stack has {counts[ItemType.SHOTGUN]} shotguns"
        return None
    if kinds in ({ItemType.FLAMETHROWER}, {ItemType.FUEL}, {ItemType.FLAMETHROWER, ItemType.FUEL}):
        for item in kinds:
            if counts[item] != 1:
                return f"stack has {counts[item]} x {item.display_name}"
        return None
    names = ", ".join(sorted(i.display_name for i in kinds))
    return f"illegal combination: {names}"


def describe_defense(stack: Stack) -> str:
    """Name of the defense a stack provides, for messages."""
    if stack.has(ItemType.WOLR):
        return "W.O.L.R."
    if stack.has(ItemType.SCARECROW):
        return "Scarecrow"
    if stack.has(ItemType.HAY_BALE):
        return "Hay Wall"
    if stack.has(ItemType.SHOTGUN):
        return "Shotgun"
    if stack.has(ItemType.FLAMETHROWER):
        return "Flamethrower"
    if stack.has(ItemType.BOOBY_TRAP):
        return "Booby Trap"
    return "defense"


@dataclass
class Farm:
    """A player's stacks and pending night cards."""
    stacks: list[Stack] = field(default_factory=list)
    night_cards: list[NightCard] = field(default_factory=list)

    # --- Queries ---

    def total_items(self) -> int:
        return sum(len(s) for s in self.stacks)

    def items(self) -> list[ItemType]:
        return [item for stack in self.stacks for item in stack]

    def has_item(self, item: ItemType) -> bool:
        return any(s.has(item) for s in self.stacks)

    def _indices(self, predicate) -> list[int]:
        return [i for i, s in enumerate(self.stacks) if predicate(s)]

    def matching_defenses(self, zombie: ZombieType) -> list[int]:
        """Indices of every stack that can kill `zombie`."""
        return self._indices(lambda s: s.defeats(zombie))

    def free_defenses(self, zombie: ZombieType) -> list[int]:
        """Matching stacks that can be used without losing anything."""
        if zombie.is_exploding:
            return []
        return [
            i for i in self.matching_defenses(zombie)
            if not any(self.stacks[i].has(item) for item in _COSTLY)
        ]

    # --- Placement ---

    def place_card(self, item: ItemType, prefs: PlayChoices | None = None) -> PlacementOutcome:
        """
        Place `item` automatically, or report that a choice is needed.

        Tie-breaks with automation on: a shotgun joins the ammo stack
        with the most rounds, ammo loads the shotgun with the fewest,
        hay joins the incomplete wall with the most bales. Lowest index
        wins ties in every case.
        """
        prefs = prefs or PlayChoices()
        if not self.stacks:
            return Placed(self._new_stack(item))

        if item in _SINGLETONS:
            return Placed(self._new_stack(item))

        if item is ItemType.FLAMETHROWER:
            fuel = self._indices(lambda s: s.only(ItemType.FUEL))
            return Placed(self._add_to(fuel[0], item) if fuel else self._new_stack(item))

        if item is ItemType.FUEL:
            flames = self._indices(
                lambda s: s.has(ItemType.FLAMETHROWER) and not s.has(ItemType.FUEL)
            )
            return Placed(self._add_to(flames[0], item) if flames else self._new_stack(item))

        if item is ItemType.SHOTGUN:
            return self._place_shotgun(prefs)
        if item is ItemType.AMMO:
            return self._place_ammo(prefs)
        if item is ItemType.HAY_BALE:
            return self._place_hay(prefs)

        raise ValueError(f"Unknown item type: {item}")

    def place_on(self, item: ItemType, stack_index: int | None) -> int:
        """Put `item` on a chosen stack, or a new one when `stack_index` is None."""
        if stack_index is None:
            return self._new_stack(item)
        return self._add_to(stack_index, item)

    def _place_shotgun(self, prefs: PlayChoices) -> PlacementOutcome:
        ammo_stacks = self._indices(lambda s: s.only(ItemType.AMMO))
        if not ammo_stacks:
            return Placed(self._new_stack(ItemType.SHOTGUN))
        if prefs.autoload_shotgun:
            best = max(ammo_stacks, key=lambda i: (self.stacks[i].count(ItemType.AMMO), -i))
            return Placed(self._add_to(best, ItemType.SHOTGUN))
        return NeedsChoice(
            tuple(ammo_stacks), "choose to load shotgun with ammo or start new stack"
        )

    def _place_ammo(self, prefs: PlayChoices) -> PlacementOutcome:
        shotguns = self._indices(lambda s: s.has(ItemType.SHOTGUN))
        if not shotguns:
            singles = self._indices(
                lambda s: s.only(ItemType.AMMO) and s.count(ItemType.AMMO) == 1
            )
            if singles:
                return Placed(self._add_to(singles[0], ItemType.AMMO))
            return Placed(self._new_stack(ItemType.AMMO))

        if prefs.autoload_shotgun:
            best = min(shotguns, key=lambda i: (self.stacks[i].count(ItemType.AMMO), i))
            return Placed(self._add_to(best, ItemType.AMMO))

        if len(shotguns) == 1:
            only = shotguns[0]
            if self.stacks[only].count(ItemType.AMMO) == 0:
                return Placed(self._add_to(only, ItemType.AMMO))
            return NeedsChoice((only,), "choose to load shotgun or start new ammo stack")

        return NeedsChoice(tuple(shotguns), "choose which shotgun to load with ammo")

    def _place_hay(self, prefs: PlayChoices) -> PlacementOutcome:
        walls = self._indices(
            lambda s: s.only(ItemType.HAY_BALE) and len(s) < HAY_WALL_SIZE
        )
        if not walls:
            return Placed(self._new_stack(ItemType.HAY_BALE))

        if prefs.auto_build_hay_wall:
            best = max(walls, key=lambda i: (len(self.stacks[i]), -i))
            return Placed(self._add_to(best, ItemType.HAY_BALE))

        if len(walls) == 1:
            only = walls[0]
            if len(self.stacks[only]) == 1:
                return Placed(self._add_to(only, ItemType.HAY_BALE))
            return NeedsChoice((only,), "choose to complete wall or start new one")

        return NeedsChoice(tuple(walls), "choose which hay wall to build")

    def _new_stack(self, item: ItemType) -> int:
        self.stacks.append(Stack([item]))
        return len(self.stacks) - 1

    def _add_to(self, index: int, item: ItemType) -> int:
        self.stacks[index].add(item)
        return index

    # --- Removal ---

    def prune(self) -> None:
        """Drop empty stacks."""
        self.stacks = [s for s in self.stacks if s.items]

    def discard_all(self, deck: Deck[ItemType]) -> int:
        """Discard every item on the farm. Returns the number discarded."""
        items = self.items()
        deck.discard_all(items)
        self.stacks = []
        return len(items)

    def discard_items_of(self, kinds: frozenset[ItemType], deck: Deck[ItemType]) -> int:
        """Discard every item whose type is in `kinds`."""
        removed = 0
        for stack in self.stacks:
            keep = []
            for item in stack.items:
                if item in kinds:
                    deck.discard(item)
                    removed += 1
                else:
                    keep.append(item)
            stack.items = keep
        self.prune()
        return removed

    def remove_item_by_flat_index(self, index: int, deck: Deck[ItemType]) -> ItemType:
        """
        Remove and discard the item at 0-based position `index` when all
        stacks are laid end to end.
        """
        if index < 0:
            raise IndexError(f"item index {index} out of range")
        offset = index
        for stack in self.stacks:
            if offset < len(stack):
                item = stack.items.pop(offset)
                deck.discard(item)
                self.prune()
                return item
            offset -= len(stack)
        raise IndexError(f"item index {index} out of range")

    def apply_defense(
        self,
        stack_index: int,
        zombie: ZombieType,
        use_shield: bool,
        deck: Deck[ItemType],
    ) -> None:
        """Spend the stack at `stack_index` killing `zombie`."""
        stack = self.stacks[stack_index]

        if stack.has(ItemType.WOLR):
            self.discard_all(deck)
            return

        if zombie.is_exploding:
            if not (use_shield and self._discard_first(ItemType.SHIELD, deck)):
                deck.discard_all(stack.items)
                stack.items = []
                self.prune()
                return

        for item in (ItemType.AMMO, ItemType.BOOBY_TRAP):
            if stack.remove(item):
                deck.discard(item)
        self.prune()

    def _discard_first(self, item: ItemType, deck: Deck[ItemType]) -> bool:
        for stack in self.stacks:
            if stack.remove(item):
                deck.discard(item)
                return True
        return False

    # --- Validation ---

    def assert_legal_stacks(self) -> None:
        errors = []
        for i, stack in enumerate(self.stacks):
            problem = validate_stack(stack)
            if problem:
                errors.append(f"stack {i + 1}: {problem}")
        if errors:
            raise StackValidationError(errors)
