"""
Text renderer for game snapshots.

Pure presentation: takes a GameSnapshot, returns a string. Colour is a
RenderConfig value chosen by the caller. Stacks are shown with their
items grouped in a stable order, except when the player is picking an
item to discard by position, where the real order is kept so the
numbers line up with the prompt.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass

from .engine_core.cards import ItemType, NightCard, ZombieKind
from .engine_core.prompt import InputContext, Prompt, RenderHint
from .engine_core.state import DayPhase
from .engine_core.view import GameSnapshot, PlayerSnapshot

BOLD = "\033[1m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
CYAN = "\033[36m"
RESET = "\033[0m"

_ITEM_ORDER = {item: i for i, item in enumerate(ItemType)}


@dataclass
class RenderConfig:
    color: bool = True


class TextRenderer:
    """Renders snapshots and prompts as plain or ANSI-coloured text."""

    def __init__(self, config: RenderConfig | None = None):
        self.config = config or RenderConfig()

    def _c(self, text: str, code: str) -> str:
        if not self.config.color:
            return text
        return f"{code}{text}{RESET}"

    # --- Cards ---

    def item_name(self, item: ItemType) -> str:
        name = item.display_name
        return f"{name}*" if item.one_time_use else name

    def night_card_name(self, card: NightCard) -> str:
        if isinstance(card, ZombieKind):
            zombie = card.info
            traits = ", ".join(t.value for t in sorted(zombie.traits, key=lambda t: t.value))
            return f"{self._c(zombie.name, RED)} [{traits}]"
        return self._c(card.info.name, YELLOW)

    def stack_text(self, stack: tuple[ItemType, ...]) -> str:
        counts = Counter(stack)
        parts = []
        for item in sorted(counts, key=_ITEM_ORDER.__getitem__):
            n = counts[item]
            parts.append(self.item_name(item) + (f" x{n}" if n > 1 else ""))
        return " + ".join(parts)

    # --- Players ---

    def farm_lines(self, player: PlayerSnapshot, flat: bool = False) -> list[str]:
        if not player.stacks:
            return ["   Farm: (empty)"]
        if flat:
            lines = ["   Farm:"]
            number = 1
            for s, stack in enumerate(player.stacks):
                items = []
                for item in stack:
                    items.append(f"{number}) {self.item_name(item)}")
                    number += 1
                lines.append(f"     stack {s + 1}: " + "  ".join(items))
            return lines
        stacks = "  ".join(
            f"[{i + 1}] {self.stack_text(stack)}" for i, stack in enumerate(player.stacks)
        )
        return [f"   Farm: {stacks}"]

    def hand_line(self, player: PlayerSnapshot) -> str:
        slots = [
            f"{i + 1}) {self.item_name(card) if card else '-'}"
            for i, card in enumerate(player.hand)
        ]
        return "   Hand: " + "  ".join(slots)

    def player_block(
        self,
        snap: GameSnapshot,
        player: PlayerSnapshot,
        is_viewer: bool,
        flat_farm: bool,
    ) -> list[str]:
        marker = " *" if player.index == snap.current_player_idx else ""
        lives = self._c(f"lives {player.lives}", RED if player.lives <= 1 else GREEN)
        lines = [f"-- {self._c(player.name, BOLD)} ({lives}){marker}"]
        lines.extend(self.farm_lines(player, flat=flat_farm and is_viewer))
        if snap.phase is DayPhase.NIGHT:
            line = f"   Night cards: {len(player.night_cards)}"
            if is_viewer and player.night_cards:
                line += f" (next: {self.night_card_name(player.night_cards[0])})"
            lines.append(line)
        elif is_viewer:
            lines.append(self.hand_line(player))
        return lines

    # --- Game ---

    def render(self, snap: GameSnapshot, viewer_index: int | None = None) -> str:
        """
        Render the whole table.

        Only the viewer's hand and next night card are shown face-up.
        """
        prompt = snap.pending_prompt
        if viewer_index is None and prompt is not None:
            viewer_index = prompt.player_index
        flat_farm = bool(prompt and prompt.context is InputContext.EVENT_DISCARD)

        header = (
            f"=== Night {snap.night_num} | {snap.phase.value.title()} | "
            f"{snap.stage_label} ==="
        )
        lines = [self._c(header, CYAN)]
        if snap.phase is not DayPhase.NIGHT:
            public = ", ".join(self.item_name(c) for c in snap.public_cards)
            lines.append(f"Public cards: {public}")
        lines.append(
            f"Day deck: {snap.day_deck_size} (discard {snap.day_discard_size})  "
            f"Night deck: {snap.night_deck_size} (discard {snap.night_discard_size})"
        )
        for player in snap.players:
            lines.extend(self.player_block(snap, player, player.index == viewer_index, flat_farm))
        return "\n".join(lines)

    def render_stats(self, snap: GameSnapshot) -> str:
        s = snap.stats
        return (
            f"Zombies killed: {s.zombies_killed}  Events: {s.events_played}  "
            f"Lives lost: {s.lives_lost}  Eliminated: {s.players_eliminated}"
        )

    def render_prompt(self, prompt: Prompt) -> str:
        text = prompt.message
        if prompt.render_hint is RenderHint.FOR_NIGHT:
            return self._c(text, YELLOW)
        if prompt.render_hint is RenderHint.FOR_DISCARD:
            return self._c(text, RED)
        return self._c(text, BOLD)
