"""Per-command control flow: gate, dispatch, apply, post-conditions.

CommandProcessor.process(text) is the single write path from a player's
command into the GameStore. Whichever narrator produced the Outcome (the
remote service, the local engine, or an armed exploit), the same apply step
runs, so every invariant is enforced in one place.
"""

import random
from dataclasses import dataclass, field
from enum import StrEnum

from .. import effects
from ..logging import get_logger
from ..narrator import NarratorClient, NarratorUnavailableError, build_request
from . import narratives
from .commands import resolve
from .parser import ParsedCommand, parse_intent
from .state import GameStore, act_of, narrator_entry, player_entry
from .topology import is_terminal, step
from .world import (
    ADMIN_KEYCARD,
    FIREWALL_KEY,
    Enemy,
    GameStatus,
    Intent,
    InventoryItem,
    Location,
    LoreBook,
    LoreEntry,
    Mood,
    Outcome,
)

logger = get_logger(__name__)


class Source(StrEnum):
    """Who answered a command."""

    REJECTED = "rejected"
    GATE = "gate"
    EXPLOIT = "exploit"
    REMOTE = "remote"
    LOCAL = "local"


ENERGY_GATED = frozenset({Intent.HACK, Intent.ATTACK, Intent.MAGIC})

# Trace is the detection meter; noisy intents raise it
TRACE_GAIN = {
    Intent.ATTACK: 8,
    Intent.MAGIC: 10,
    Intent.SEARCH: 3,
    Intent.REST: 4,
}
HACK_TRACE_SUCCESS = 5
HACK_TRACE_FAIL = 15
MOVE_TRACE_FIRST_VISIT = 5
MOVE_TRACE_REVISIT = 2
TRACE_THRESHOLD = 100
TRACE_FLOOR = 40

HUNTER_NAME = "Hunter Protocol"

AMBUSH_SPAWN_CHANCE = {1: 0.0, 2: 0.15, 3: 0.25}

PLAYER_ATTACK_DAMAGE = (8, 16)
MAGIC_ENEMY_DAMAGE = (12, 22)

SEARCH_LORE_CHANCE = 0.6
MAGIC_LORE_CHANCE = 0.25

# (name, hp, damage) per act
ENEMY_ROSTER: dict[int, tuple[tuple[str, int, int], ...]] = {
    1: (
        ("Spam Bot", 18, 4),
        ("Corrupted Fragment", 22, 5),
        ("Glitch Mite", 15, 3),
    ),
    2: (
        ("Security Drone", 30, 8),
        ("Security Crawler", 36, 9),
        ("Hunter Scout", 32, 10),
    ),
    3: (
        ("Elite Sentinel", 48, 14),
        ("Source Tendril", 40, 12),
        ("Firewall Guardian", 55, 15),
    ),
}

QUEST_EVENTS = {
    FIREWALL_KEY.lower(): ("Found the Firewall Key in the Recycle Bin", 1),
    ADMIN_KEYCARD.lower(): ("Found the Admin Keycard in Neon City", 2),
}


@dataclass(frozen=True)
class TurnResult:
    intent: Intent
    source: Source
    narratives: list[str] = field(default_factory=list)
    status: GameStatus = GameStatus.PLAYING


def check_act_gate(current: Location, target: Location, store: GameStore) -> str | None:
    """Return the rejection narrative if moving current -> target is gated."""
    current_act = act_of(current)
    target_act = act_of(target)
    story = store.story
    if current_act == 1 and target_act == 2 and not story.has_firewall_key:
        return narratives.GATE_FIREWALL
    if current_act == 2 and target_act == 3 and not story.has_admin_keycard:
        return narratives.GATE_SOURCE
    if current_act == 1 and target_act == 3:
        return narratives.GATE_SKIP
    return None


class CommandProcessor:
    """Runs player commands against one GameStore."""

    def __init__(
        self,
        store: GameStore,
        *,
        rng: random.Random,
        narrator: NarratorClient | None = None,
        lore: LoreBook | None = None,
        effects_sink: effects.EffectSink | None = None,
    ) -> None:
        self.store = store
        self.rng = rng
        self.narrator = narrator
        self.lore = lore or LoreBook()
        self.effects_sink = effects_sink

    def process(self, raw_text: str) -> TurnResult:
        store = self.store
        text = raw_text.strip()

        if not store.is_playing:
            return TurnResult(Intent.UNKNOWN, Source.REJECTED, [narratives.GAME_OVER], store.status)
        if not text:
            return TurnResult(Intent.UNKNOWN, Source.REJECTED, [narratives.EMPTY_INPUT], store.status)

        parsed = parse_intent(text)
        rejection = self._pre_gate(parsed)
        if rejection is not None:
            store.add_message(player_entry(text))
            store.add_message(narrator_entry(rejection, Mood.DANGER))
            effects.emit(self.effects_sink, effects.ERROR)
            logger.info("command_gated", command=text, intent=str(parsed.intent))
            return TurnResult(parsed.intent, Source.GATE, [rejection], store.status)

        outcome, source = self._dispatch(parsed, text)

        # a move lowers trace, so the threshold is sampled before apply
        traced_out = store.story.trace_level >= TRACE_THRESHOLD
        store.add_message(player_entry(text))
        lines = self._apply(parsed, outcome)
        lines += self._post_conditions(outcome, traced_out)
        effects.emit(self.effects_sink, effects.effect_for(outcome.intent))

        logger.info(
            "command_processed",
            command=text,
            intent=str(outcome.intent),
            source=str(source),
            narrative_id=outcome.narrative_id,
            hp=store.hp,
            mana=store.mana,
            trace=store.story.trace_level,
            status=str(store.status),
        )
        return TurnResult(outcome.intent, source, lines, store.status)

    # Gates and dispatch --------------------------------------------------

    def _pre_gate(self, parsed: ParsedCommand) -> str | None:
        store = self.store
        if parsed.intent in ENERGY_GATED and store.mana <= 0:
            return narratives.ENERGY_DEPLETED
        if parsed.intent == Intent.REST and store.last_rest_tile == store.location.key:
            return narratives.REST_COOLDOWN
        if parsed.intent == Intent.MOVE and parsed.direction is not None:
            target = step(store.location, parsed.direction, self.rng)
            return check_act_gate(store.location, target, store)
        return None

    def _resolve_locally(self, parsed: ParsedCommand, force_success: bool = False) -> Outcome:
        return resolve(
            parsed.intent,
            parsed.direction,
            self.store.location,
            self.rng,
            held_quest_items=self.store.held_quest_items(),
            force_success=force_success,
        )

    def _dispatch(self, parsed: ParsedCommand, text: str) -> tuple[Outcome, Source]:
        if parsed.intent == Intent.HACK and self.store.exploit_ready:
            self.store.set_exploit_ready(False)
            return self._resolve_locally(parsed, force_success=True), Source.EXPLOIT

        if self.narrator is not None:
            try:
                return self.narrator.narrate(build_request(self.store, text)), Source.REMOTE
            except NarratorUnavailableError as exc:
                logger.warning("narrator_unavailable", error=str(exc))

        return self._resolve_locally(parsed), Source.LOCAL

    # Apply ---------------------------------------------------------------

    def _say(self, lines: list[str], text: str, mood: Mood | None = None) -> None:
        self.store.add_message(narrator_entry(text, mood))
        lines.append(text)

    def _apply(self, parsed: ParsedCommand, outcome: Outcome) -> list[str]:
        store = self.store
        lines: list[str] = []
        self._say(lines, outcome.narrative, outcome.mood)

        if outcome.hp_delta:
            store.set_hp(store.hp + outcome.hp_delta)
        if outcome.mana_delta:
            store.set_mana(store.mana + outcome.mana_delta)
        if outcome.new_item is not None:
            self._gain_item(lines, outcome.new_item)

        match outcome.intent:
            case Intent.ATTACK:
                self._strike(lines, PLAYER_ATTACK_DAMAGE, spawn=True)
                store.add_trace(TRACE_GAIN[Intent.ATTACK])
            case Intent.MAGIC:
                if store.active_enemy is not None:
                    self._strike(lines, MAGIC_ENEMY_DAMAGE, spawn=False)
                self._roll_act_lore(lines)
                store.add_trace(TRACE_GAIN[Intent.MAGIC])
            case Intent.HACK:
                if outcome.success:
                    store.update_story_progress(
                        hacks_completed=store.story.hacks_completed + 1,
                    )
                    store.add_story_event("Successful hack", store.story.current_act)
                    store.add_trace(HACK_TRACE_SUCCESS)
                else:
                    store.update_story_progress(hacks_failed=store.story.hacks_failed + 1)
                    store.add_trace(HACK_TRACE_FAIL)
            case Intent.SEARCH:
                self._roll_tile_lore(lines)
                store.add_trace(TRACE_GAIN[Intent.SEARCH])
            case Intent.REST:
                if outcome.hp_delta >= 0:
                    store.set_last_rest_tile(store.location.key)
                store.add_trace(TRACE_GAIN[Intent.REST])
            case Intent.MOVE:
                self._move(lines, parsed, outcome)

        return lines

    def _gain_item(self, lines: list[str], item: InventoryItem) -> None:
        store = self.store
        if store.holds_quest_item(item.name):
            self._say(lines, narratives.QUEST_DUPLICATE.format(name=item.name))
            logger.info("duplicate_quest_item_suppressed", item=item.name)
            return

        store.add_item(item)
        lowered = item.name.lower()
        description, event_act = next(
            (event for fragment, event in QUEST_EVENTS.items() if fragment in lowered),
            (f"Found: {item.name}", store.story.current_act),
        )
        store.add_story_event(description, event_act)
        effects.emit(self.effects_sink, effects.ITEM)

    def _spawn_enemy(self, enemy_act: int) -> Enemy:
        name, hp, damage = self.rng.choice(ENEMY_ROSTER[enemy_act])
        return Enemy(name=name, hp=hp, max_hp=hp, damage=damage, act=enemy_act)

    def _strike(self, lines: list[str], bounds: tuple[int, int], *, spawn: bool) -> None:
        store = self.store
        enemy = store.active_enemy
        if enemy is None:
            if not spawn:
                return
            enemy = self._spawn_enemy(act_of(store.location))
            store.set_active_enemy(enemy)
            self._say(lines, narratives.ENEMY_SPAWN.format(
                name=enemy.name, hp=enemy.hp, max_hp=enemy.max_hp,
            ))

        if store.damage_enemy(self.rng.randint(*bounds)):
            store.update_story_progress(
                enemies_defeated=store.story.enemies_defeated + 1,
            )
            store.add_story_event(
                f"Defeated {enemy.name} at {store.location.name}",
                store.story.current_act,
            )
            self._say(lines, narratives.ENEMY_KILLED.format(name=enemy.name))
        else:
            wounded = store.active_enemy
            self._say(lines, narratives.ENEMY_HIT.format(
                name=wounded.name, hp=wounded.hp, max_hp=wounded.max_hp,
            ))

    def _reveal_lore(self, lines: list[str], entry: LoreEntry) -> None:
        if self.store.discover_lore(entry.id):
            title = narratives.LORE_FOUND.format(title=entry.title)
            self._say(lines, f"{title}\n\n{entry.content}", Mood.MYSTIC)
            logger.info("lore_discovered", lore_id=entry.id)

    def _roll_tile_lore(self, lines: list[str]) -> None:
        entry = self.lore.for_tile(self.store.location.key)
        if entry is None or entry.id in self.store.story.discovered_lore:
            return
        if self.rng.random() < SEARCH_LORE_CHANCE:
            self._reveal_lore(lines, entry)

    def _roll_act_lore(self, lines: list[str]) -> None:
        discovered = self.store.story.discovered_lore
        hidden = [
            e for e in self.lore.for_act(act_of(self.store.location))
            if e.id not in discovered
        ]
        if hidden and self.rng.random() < MAGIC_LORE_CHANCE:
            self._reveal_lore(lines, self.rng.choice(hidden))

    def _move(self, lines: list[str], parsed: ParsedCommand, outcome: Outcome) -> None:
        store = self.store
        origin = store.location
        destination = outcome.new_location or step(origin, parsed.direction, self.rng)

        blocked = check_act_gate(origin, destination, store)
        if blocked is not None:
            self._say(lines, blocked, Mood.DANGER)
            return

        store.set_location(destination)
        if store.visit_tile(destination.key):
            store.reduce_trace(MOVE_TRACE_FIRST_VISIT)
        else:
            store.reduce_trace(MOVE_TRACE_REVISIT)

        dest_act = act_of(destination)
        if dest_act != store.story.current_act:
            store.update_story_progress(current_act=dest_act)
            self._enter_act(dest_act)

        if store.active_enemy is None and self.rng.random() < AMBUSH_SPAWN_CHANCE[dest_act]:
            enemy = self._spawn_enemy(dest_act)
            store.set_active_enemy(enemy)
            self._say(
                lines,
                narratives.AMBUSH_SPAWN.format(
                    name=enemy.name, hp=enemy.hp, max_hp=enemy.max_hp,
                ),
                Mood.DANGER,
            )

    def _enter_act(self, new_act: int) -> None:
        """Record the first entry into act 2 or 3 exactly once."""
        store = self.store
        if new_act == 2 and not store.story.act1_complete:
            store.update_story_progress(act1_complete=True)
        elif new_act == 3 and not store.story.act2_complete:
            store.update_story_progress(act2_complete=True)
        else:
            return
        store.add_story_event(narratives.ACT_ENTRY[new_act], new_act)
        logger.info("act_entered", act=new_act)

    # Post-conditions -----------------------------------------------------

    def _post_conditions(self, outcome: Outcome, traced_out: bool = False) -> list[str]:
        store = self.store
        lines: list[str] = []

        if store.is_playing and (traced_out or store.story.trace_level >= TRACE_THRESHOLD):
            self._spawn_hunter(lines)

        if self._is_victory(outcome):
            if store.set_status(GameStatus.VICTORY):
                logger.info("game_won", tiles_explored=store.story.tiles_explored)

        # set_hp flips to dead on its own; the notice is appended here exactly once
        if store.status == GameStatus.DEAD:
            self._say(lines, narratives.DEATH, Mood.DANGER)
            logger.info("player_died", location=store.location.key)

        return lines

    def _is_victory(self, outcome: Outcome) -> bool:
        if outcome.victory:
            return True
        # Remote outcomes never carry the flag; a logout there wins on location alone
        location = self.store.location
        return outcome.intent == Intent.LOGOUT and is_terminal(location.x, location.y)

    def _spawn_hunter(self, lines: list[str]) -> None:
        store = self.store
        current = act_of(store.location)
        hp = 30 + 15 * current
        hunter = Enemy(name=HUNTER_NAME, hp=hp, max_hp=hp, damage=10 + 5 * current, act=current)
        store.set_active_enemy(hunter)
        self._say(lines, narratives.HUNTER_SPAWN.format(name=hunter.name), Mood.DANGER)
        store.set_hp(store.hp - hunter.damage)
        store.add_story_event("Trace hit 100%. A Hunter Protocol locked on", current)
        store.update_story_progress(trace_level=TRACE_FLOOR)
        logger.info("hunter_spawned", act=current, damage=hunter.damage)
