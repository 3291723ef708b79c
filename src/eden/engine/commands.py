"""Deterministic command resolution.

resolve(intent, direction, location, rng) -> Outcome is the main entry point.
Handlers are pure: they read per-act tuning, roll the injected RNG and
describe what happened. Nothing here touches the game store.
"""

import random
from collections.abc import Callable
from dataclasses import dataclass

from . import narratives
from .topology import act, is_terminal, step
from .world import (
    ADMIN_KEYCARD,
    FIREWALL_KEY,
    Intent,
    ItemTemplate,
    Location,
    Mood,
    Outcome,
)

FIREWALL_KEY_ITEM = ItemTemplate(
    name=FIREWALL_KEY,
    icon="token",
    description="Unlocks the Firewall Gate to Neon City.",
)

ADMIN_KEYCARD_ITEM = ItemTemplate(
    name=ADMIN_KEYCARD,
    icon="token",
    description="Admin-level access to The Source.",
)

ITEM_POOLS: dict[int, tuple[ItemTemplate, ...]] = {
    1: (
        ItemTemplate("Rusty Debug Tool", "debug", "Old but still scrubs a trace."),
        ItemTemplate("Patch 0.9", "patch", "Restores a bit of stability."),
        ItemTemplate("Broken Firewall Shard", "firewall", "Might soak one hit."),
        ItemTemplate("Corrupted Token", "token", "An expired login token."),
        ItemTemplate("Old Stack Trace", "trace", "Shows where errors hide."),
    ),
    2: (
        ItemTemplate("Hunter Protocol Chip", "data", "Contains patrol routes."),
        ItemTemplate("Zero-Day Exploit", "exploit", "Cracks any lock. One use."),
        ItemTemplate("Proxy Mask", "proxy", "Hides you from scanners."),
        ItemTemplate("Energy Cell", "memory", "Restores some energy."),
        ItemTemplate("Firewall Breaker", "rootkit", "Loud but effective."),
    ),
    3: (
        ItemTemplate("Root Access Key", "rootkit", "Admin-level privileges."),
        ItemTemplate("Source Code Fragment", "data", "A piece of the core."),
        ItemTemplate("Sentinel Override", "exploit", "Shuts down one Sentinel."),
    ),
}


@dataclass(frozen=True)
class ActTuning:
    """Balancing surface for one act. Ranges are inclusive (lo, hi)."""

    ambush_chance: float
    ambush_damage: tuple[int, int]
    attack_damage: tuple[int, int]
    hack_success_rate: float
    hack_quest_chance: float
    hack_fail_hp: int
    rest_hp: tuple[int, int]
    rest_mana: tuple[int, int]
    rest_interrupt_chance: float
    search_find_chance: float
    search_quest_chance: float
    search_trap_chance: float
    quest_item: ItemTemplate | None


MOVE_MANA_COST = 5
HACK_SUCCESS_MANA = (10, 19)
HACK_FAIL_MANA = 5
MAGIC_MANA = (15, 26)
REST_INTERRUPT_DAMAGE = (3, 7)
SEARCH_TRAP_DAMAGE = (3, 8)

ACT_TUNING: dict[int, ActTuning] = {
    1: ActTuning(
        ambush_chance=0.0,
        ambush_damage=(0, 0),
        attack_damage=(2, 6),
        hack_success_rate=0.5,
        hack_quest_chance=0.35,
        hack_fail_hp=8,
        rest_hp=(4, 8),
        rest_mana=(5, 12),
        rest_interrupt_chance=0.0,
        search_find_chance=0.7,
        search_quest_chance=0.35,
        search_trap_chance=0.05,
        quest_item=FIREWALL_KEY_ITEM,
    ),
    2: ActTuning(
        ambush_chance=0.3,
        ambush_damage=(5, 12),
        attack_damage=(5, 12),
        hack_success_rate=0.35,
        hack_quest_chance=0.25,
        hack_fail_hp=12,
        rest_hp=(3, 7),
        rest_mana=(2, 6),
        rest_interrupt_chance=0.5,
        search_find_chance=0.5,
        search_quest_chance=0.2,
        search_trap_chance=0.2,
        quest_item=ADMIN_KEYCARD_ITEM,
    ),
    3: ActTuning(
        ambush_chance=0.4,
        ambush_damage=(8, 17),
        attack_damage=(8, 19),
        hack_success_rate=0.25,
        hack_quest_chance=0.0,
        hack_fail_hp=15,
        rest_hp=(1, 3),
        rest_mana=(1, 3),
        rest_interrupt_chance=0.5,
        search_find_chance=0.35,
        search_quest_chance=0.0,
        search_trap_chance=0.35,
        quest_item=None,
    ),
}


@dataclass(frozen=True)
class _Context:
    """Everything a handler needs to know about the turn."""

    direction: str | None
    location: Location
    act: int
    tuning: ActTuning
    rng: random.Random
    held_quest_items: frozenset[str]
    force_success: bool


def _roll(ctx: _Context, chance: float) -> bool:
    return ctx.rng.random() < chance


def _between(ctx: _Context, bounds: tuple[int, int]) -> int:
    return ctx.rng.randint(bounds[0], bounds[1])


def _offer_quest_item(ctx: _Context) -> ItemTemplate | None:
    """The act's quest item, unless the player already holds it."""
    item = ctx.tuning.quest_item
    if item is None or item.name in ctx.held_quest_items:
        return None
    return item


def _resolve_move(ctx: _Context) -> Outcome:
    destination = step(ctx.location, ctx.direction, ctx.rng)
    dest_act = act(destination.x, destination.y)
    dest_tuning = ACT_TUNING[dest_act]

    narrative_id, narrative = narratives.pick(
        ctx.rng, narratives.MOVE[dest_act], f"move:{dest_act}",
    )
    hp_delta = 0
    mood = Mood.MYSTIC

    if dest_tuning.ambush_chance and _roll(ctx, dest_tuning.ambush_chance):
        ambush_id, ambush = narratives.pick(
            ctx.rng, narratives.AMBUSH[dest_act], f"ambush:{dest_act}",
        )
        narrative += "\n\n" + ambush
        narrative_id += "+" + ambush_id
        hp_delta = -_between(ctx, dest_tuning.ambush_damage)
        mood = Mood.DANGER

    return Outcome(
        narrative=narrative,
        narrative_id=narrative_id,
        intent=Intent.MOVE,
        mood=mood,
        hp_delta=hp_delta,
        mana_delta=-MOVE_MANA_COST,
        new_location=destination,
    )


def _resolve_attack(ctx: _Context) -> Outcome:
    narrative_id, narrative = narratives.pick(
        ctx.rng, narratives.ATTACK[ctx.act], f"attack:{ctx.act}",
    )
    return Outcome(
        narrative=narrative,
        narrative_id=narrative_id,
        intent=Intent.ATTACK,
        mood=Mood.DANGER,
        hp_delta=-_between(ctx, ctx.tuning.attack_damage),
    )


def _resolve_hack(ctx: _Context) -> Outcome:
    if ctx.force_success or _roll(ctx, ctx.tuning.hack_success_rate):
        narrative_id, narrative = narratives.pick(
            ctx.rng, narratives.HACK_SUCCESS, "hack:success",
        )
        new_item = None
        template = _offer_quest_item(ctx)
        if template is not None and _roll(ctx, ctx.tuning.hack_quest_chance):
            new_item = template.mint()
            narrative += "\n\n" + narratives.HACK_QUEST_ITEM.format(name=new_item.name)
        return Outcome(
            narrative=narrative,
            narrative_id=narrative_id,
            intent=Intent.HACK,
            mood=Mood.MYSTIC,
            mana_delta=-_between(ctx, HACK_SUCCESS_MANA),
            new_item=new_item,
            success=True,
        )

    narrative_id, narrative = narratives.pick(
        ctx.rng, narratives.HACK_FAIL, "hack:fail",
    )
    return Outcome(
        narrative=narrative,
        narrative_id=narrative_id,
        intent=Intent.HACK,
        mood=Mood.DANGER,
        hp_delta=-ctx.tuning.hack_fail_hp,
        mana_delta=-HACK_FAIL_MANA,
        success=False,
    )


def _resolve_magic(ctx: _Context) -> Outcome:
    narrative_id, narrative = narratives.pick(ctx.rng, narratives.MAGIC, "magic")
    return Outcome(
        narrative=narrative,
        narrative_id=narrative_id,
        intent=Intent.MAGIC,
        mood=Mood.MYSTIC,
        mana_delta=-_between(ctx, MAGIC_MANA),
    )


def _resolve_rest(ctx: _Context) -> Outcome:
    narrative_id, narrative = narratives.pick(
        ctx.rng, narratives.REST[ctx.act], f"rest:{ctx.act}",
    )
    hp_delta = _between(ctx, ctx.tuning.rest_hp)
    mana_delta = _between(ctx, ctx.tuning.rest_mana)
    mood = Mood.NEUTRAL if ctx.act == 1 else Mood.DANGER

    if ctx.tuning.rest_interrupt_chance and _roll(ctx, ctx.tuning.rest_interrupt_chance):
        ambush_id, ambush = narratives.pick(
            ctx.rng, narratives.AMBUSH[ctx.act], f"ambush:{ctx.act}",
        )
        narrative += "\n\n" + ambush
        narrative_id += "+" + ambush_id
        hp_delta = -_between(ctx, REST_INTERRUPT_DAMAGE)
        mood = Mood.DANGER

    return Outcome(
        narrative=narrative,
        narrative_id=narrative_id,
        intent=Intent.REST,
        mood=mood,
        hp_delta=hp_delta,
        mana_delta=mana_delta,
    )


def _resolve_search(ctx: _Context) -> Outcome:
    if not _roll(ctx, ctx.tuning.search_find_chance):
        narrative_id, narrative = narratives.pick(
            ctx.rng, narratives.SEARCH_NOTHING, "search:nothing",
        )
        return Outcome(
            narrative=narrative,
            narrative_id=narrative_id,
            intent=Intent.SEARCH,
        )

    narrative_id, narrative = narratives.pick(
        ctx.rng, narratives.SEARCH[ctx.act], f"search:{ctx.act}",
    )
    template = _offer_quest_item(ctx)
    if template is None or not _roll(ctx, ctx.tuning.search_quest_chance):
        template = ctx.rng.choice(ITEM_POOLS[ctx.act])
    item = template.mint()

    hp_delta = 0
    if _roll(ctx, ctx.tuning.search_trap_chance):
        hp_delta = -_between(ctx, SEARCH_TRAP_DAMAGE)
        narrative += narratives.SEARCH_TRAPPED
    else:
        narrative += narratives.SEARCH_FOUND.format(name=item.name)

    return Outcome(
        narrative=narrative,
        narrative_id=narrative_id,
        intent=Intent.SEARCH,
        mood=Mood.DANGER if hp_delta < 0 else Mood.MYSTIC,
        hp_delta=hp_delta,
        new_item=item,
    )


def _resolve_logout(ctx: _Context) -> Outcome:
    if is_terminal(ctx.location.x, ctx.location.y):
        return Outcome(
            narrative=narratives.LOGOUT_VICTORY,
            narrative_id="logout:victory",
            intent=Intent.LOGOUT,
            mood=Mood.MYSTIC,
            victory=True,
        )
    return Outcome(
        narrative=narratives.LOGOUT_REJECTED,
        narrative_id="logout:rejected",
        intent=Intent.LOGOUT,
    )


def _resolve_unknown(ctx: _Context) -> Outcome:
    narrative_id, narrative = narratives.pick(ctx.rng, narratives.UNKNOWN, "unknown")
    return Outcome(
        narrative=narrative,
        narrative_id=narrative_id,
        intent=Intent.UNKNOWN,
    )


_INTENT_DISPATCH: dict[Intent, Callable[[_Context], Outcome]] = {
    Intent.MOVE: _resolve_move,
    Intent.ATTACK: _resolve_attack,
    Intent.HACK: _resolve_hack,
    Intent.MAGIC: _resolve_magic,
    Intent.REST: _resolve_rest,
    Intent.SEARCH: _resolve_search,
    Intent.LOGOUT: _resolve_logout,
    Intent.UNKNOWN: _resolve_unknown,
}


def resolve(
    intent: Intent,
    direction: str | None,
    location: Location,
    rng: random.Random,
    *,
    held_quest_items: frozenset[str] = frozenset(),
    force_success: bool = False,
) -> Outcome:
    """Resolve one intent at a location into an Outcome."""
    current_act = act(location.x, location.y)
    ctx = _Context(
        direction=direction,
        location=location,
        act=current_act,
        tuning=ACT_TUNING[current_act],
        rng=rng,
        held_quest_items=held_quest_items,
        force_success=force_success,
    )
    return _INTENT_DISPATCH[intent](ctx)
