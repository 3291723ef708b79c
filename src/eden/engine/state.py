"""Mutable per-player game state.

GameStore is the authoritative model for one session. Its fields are
private; the mutator methods below are the only write path and each one
re-establishes the invariants (clamped stats, one-way status, sticky quest
flags) before returning. Story progress and enemies are frozen values that
are replaced, never edited in place.
"""

import datetime as dt
import uuid
from dataclasses import asdict, dataclass, field, replace
from typing import Any

from . import narratives
from .topology import act, location_at, start_location
from .world import (
    ADMIN_KEYCARD,
    FIREWALL_KEY,
    Enemy,
    GameStatus,
    InventoryItem,
    ItemTemplate,
    Location,
    Mood,
)

STAT_MIN = 0
STAT_MAX = 100
START_HP = 100
START_MANA = 80

TRACE_MIN = 0
TRACE_MAX = 100

MAX_KEY_EVENTS = 10

STARTING_ITEMS = (
    ItemTemplate("Old Debug Tool", "debug", "Basic error fixer. Scrubs a little trace."),
    ItemTemplate("Patch 0.1", "patch", "Barely works. Restores a bit of stability."),
)

# Quest item name fragment -> story flag it sets
QUEST_FLAGS = {
    FIREWALL_KEY.lower(): "has_firewall_key",
    ADMIN_KEYCARD.lower(): "has_admin_keycard",
}

# Flags that may only ever go from False to True
STICKY_FLAGS = frozenset(
    {"has_firewall_key", "has_admin_keycard", "act1_complete", "act2_complete"}
)


@dataclass(frozen=True)
class ConsumableEffect:
    """What using an item of a given icon does."""

    label: str
    hp: int = 0
    mana: int = 0
    trace: int = 0
    arms_exploit: bool = False
    message: str = ""


CONSUMABLES: dict[str, ConsumableEffect] = {
    "patch": ConsumableEffect(
        "heal", hp=15, message="Applied {name}. Stability restored by 15%.",
    ),
    "firewall": ConsumableEffect(
        "shield", hp=10, message="Deployed {name}. Shield up, stability +10%.",
    ),
    "memory": ConsumableEffect(
        "energy", mana=20, message="Used {name}. Energy cells recharged by 20%.",
    ),
    "debug": ConsumableEffect(
        "trace", trace=-20, message="Ran {name}. Trace reduced by 20.",
    ),
    "proxy": ConsumableEffect(
        "stealth", trace=-35, message="Activated {name}. Trace reduced by 35.",
    ),
    "exploit": ConsumableEffect(
        "exploit", arms_exploit=True, message="Loaded {name}. Next hack will auto-succeed.",
    ),
}


@dataclass(frozen=True)
class ItemEffect:
    effect: str
    narrative: str


@dataclass(frozen=True)
class HistoryEntry:
    role: str  # "narrator" or "player"
    content: str
    mood: Mood | None = None


@dataclass(frozen=True)
class StoryEvent:
    id: str
    description: str
    act: int
    timestamp: dt.datetime


@dataclass(frozen=True)
class StoryProgress:
    """Durable campaign state. Replace with dataclasses.replace()."""

    current_act: int = 1
    has_firewall_key: bool = False
    has_admin_keycard: bool = False
    act1_complete: bool = False
    act2_complete: bool = False
    enemies_defeated: int = 0
    hacks_completed: int = 0
    hacks_failed: int = 0
    tiles_explored: int = 1
    items_used: int = 0
    key_events: tuple[StoryEvent, ...] = ()
    discovered_lore: frozenset[str] = field(default_factory=frozenset)
    trace_level: int = 0


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def narrator_entry(content: str, mood: Mood | None = None) -> HistoryEntry:
    return HistoryEntry(role="narrator", content=content, mood=mood)


def player_entry(content: str) -> HistoryEntry:
    return HistoryEntry(role="player", content=content)


class GameStore:
    """All mutable per-player state, behind invariant-keeping mutators."""

    def __init__(self) -> None:
        self._load_initial()

    def _load_initial(self) -> None:
        start = start_location()
        self._hp = START_HP
        self._mana = START_MANA
        self._location = start
        self._inventory: list[InventoryItem] = [t.mint() for t in STARTING_ITEMS]
        self._history: list[HistoryEntry] = [
            narrator_entry(narratives.OPENING, Mood.DANGER)
        ]
        self._mood = Mood.DANGER
        self._status = GameStatus.PLAYING
        self._visited_tiles: set[str] = {start.key}
        self._story = StoryProgress()
        self._active_enemy: Enemy | None = None
        self._last_rest_tile: str | None = None
        self._exploit_ready = False

    # Read-only views -----------------------------------------------------

    @property
    def hp(self) -> int:
        return self._hp

    @property
    def mana(self) -> int:
        return self._mana

    @property
    def location(self) -> Location:
        return self._location

    @property
    def inventory(self) -> tuple[InventoryItem, ...]:
        return tuple(self._inventory)

    @property
    def history(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._history)

    @property
    def mood(self) -> Mood:
        return self._mood

    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def is_playing(self) -> bool:
        return self._status == GameStatus.PLAYING

    @property
    def visited_tiles(self) -> frozenset[str]:
        return frozenset(self._visited_tiles)

    @property
    def story(self) -> StoryProgress:
        return self._story

    @property
    def active_enemy(self) -> Enemy | None:
        return self._active_enemy

    @property
    def last_rest_tile(self) -> str | None:
        return self._last_rest_tile

    @property
    def exploit_ready(self) -> bool:
        return self._exploit_ready

    # Stats and status ----------------------------------------------------

    def set_hp(self, value: int) -> None:
        if not self.is_playing:
            return
        self._hp = _clamp(value, STAT_MIN, STAT_MAX)
        if self._hp == 0:
            self._status = GameStatus.DEAD

    def set_mana(self, value: int) -> None:
        if not self.is_playing:
            return
        self._mana = _clamp(value, STAT_MIN, STAT_MAX)

    def set_status(self, status: GameStatus) -> bool:
        """Move along the one-way valve playing -> {dead, victory}."""
        if not self.is_playing or status == GameStatus.PLAYING:
            return False
        self._status = status
        return True

    def set_mood(self, mood: Mood) -> None:
        self._mood = mood

    def add_message(self, entry: HistoryEntry) -> None:
        self._history.append(entry)
        if entry.mood is not None:
            self._mood = entry.mood

    # World position ------------------------------------------------------

    def set_location(self, location: Location) -> None:
        self._location = location

    def visit_tile(self, key: str) -> bool:
        """Mark a tile visited; True on the first visit only."""
        if key in self._visited_tiles:
            return False
        self._visited_tiles.add(key)
        self._story = replace(
            self._story, tiles_explored=self._story.tiles_explored + 1,
        )
        return True

    # Inventory -----------------------------------------------------------

    def add_item(self, item: InventoryItem) -> None:
        self._inventory.append(item)
        lowered = item.name.lower()
        changes = {
            flag: True for fragment, flag in QUEST_FLAGS.items() if fragment in lowered
        }
        if changes:
            self._story = replace(self._story, **changes)

    def remove_item(self, item_id: str) -> InventoryItem | None:
        for index, item in enumerate(self._inventory):
            if item.id == item_id:
                return self._inventory.pop(index)
        return None

    def held_quest_items(self) -> frozenset[str]:
        """Names of the unique quest items already earned."""
        held = set()
        if self._story.has_firewall_key:
            held.add(FIREWALL_KEY)
        if self._story.has_admin_keycard:
            held.add(ADMIN_KEYCARD)
        return frozenset(held)

    def holds_quest_item(self, name: str) -> bool:
        """True if name is a quest item whose flag is already set."""
        lowered = name.lower()
        return any(
            fragment in lowered and getattr(self._story, flag)
            for fragment, flag in QUEST_FLAGS.items()
        )

    def use_item(self, item_id: str) -> ItemEffect | None:
        """Consume an item; None for inert icons or unknown ids."""
        item = next((i for i in self._inventory if i.id == item_id), None)
        if item is None or not self.is_playing:
            return None
        effect = CONSUMABLES.get(item.icon.lower())
        if effect is None:
            return None

        if effect.hp:
            self.set_hp(self._hp + effect.hp)
        if effect.mana:
            self.set_mana(self._mana + effect.mana)
        if effect.trace < 0:
            self.reduce_trace(-effect.trace)
        if effect.arms_exploit:
            self._exploit_ready = True
        self.remove_item(item_id)
        self._story = replace(self._story, items_used=self._story.items_used + 1)
        return ItemEffect(effect=effect.label, narrative=effect.message.format(name=item.name))

    # Story ---------------------------------------------------------------

    def add_story_event(self, description: str, event_act: int) -> StoryEvent:
        event = StoryEvent(
            id=uuid.uuid4().hex,
            description=description,
            act=event_act,
            timestamp=dt.datetime.now(dt.UTC),
        )
        events = (*self._story.key_events, event)[-MAX_KEY_EVENTS:]
        self._story = replace(self._story, key_events=events)
        return event

    def update_story_progress(self, **changes: Any) -> None:
        """Shallow-merge changes; sticky flags are never unset."""
        for flag in changes.keys() & STICKY_FLAGS:
            if getattr(self._story, flag):
                changes[flag] = True
        self._story = replace(self._story, **changes)

    def discover_lore(self, lore_id: str) -> bool:
        if lore_id in self._story.discovered_lore:
            return False
        self._story = replace(
            self._story, discovered_lore=self._story.discovered_lore | {lore_id},
        )
        return True

    def add_trace(self, amount: int) -> None:
        level = _clamp(self._story.trace_level + amount, TRACE_MIN, TRACE_MAX)
        self._story = replace(self._story, trace_level=level)

    def reduce_trace(self, amount: int) -> None:
        self.add_trace(-amount)

    # Combat --------------------------------------------------------------

    def set_active_enemy(self, enemy: Enemy | None) -> None:
        self._active_enemy = enemy

    def damage_enemy(self, amount: int) -> bool:
        """Damage the active enemy; True if it was destroyed."""
        if self._active_enemy is None:
            return False
        remaining = self._active_enemy.hp - amount
        if remaining <= 0:
            self._active_enemy = None
            return True
        self._active_enemy = replace(self._active_enemy, hp=remaining)
        return False

    def set_last_rest_tile(self, key: str | None) -> None:
        self._last_rest_tile = key

    def set_exploit_ready(self, ready: bool) -> None:
        self._exploit_ready = ready

    # Lifecycle -----------------------------------------------------------

    def reset(self) -> None:
        """Replace everything with a fresh initial snapshot."""
        self._load_initial()

    def to_dict(self) -> dict[str, Any]:
        """Plain-data snapshot for save/restore."""
        story = asdict(self._story)
        story["key_events"] = [
            {**asdict(e), "timestamp": e.timestamp.isoformat()}
            for e in self._story.key_events
        ]
        story["discovered_lore"] = sorted(self._story.discovered_lore)
        return {
            "hp": self._hp,
            "mana": self._mana,
            "location": asdict(self._location),
            "inventory": [asdict(i) for i in self._inventory],
            "history": [
                {"role": h.role, "content": h.content, "mood": str(h.mood) if h.mood else None}
                for h in self._history
            ],
            "mood": str(self._mood),
            "status": str(self._status),
            "visited_tiles": sorted(self._visited_tiles),
            "story": story,
            "active_enemy": asdict(self._active_enemy) if self._active_enemy else None,
            "last_rest_tile": self._last_rest_tile,
            "exploit_ready": self._exploit_ready,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GameStore":
        store = cls()
        loc = data["location"]
        story = dict(data["story"])
        story["key_events"] = tuple(
            StoryEvent(
                id=e["id"],
                description=e["description"],
                act=e["act"],
                timestamp=dt.datetime.fromisoformat(e["timestamp"]),
            )
            for e in story["key_events"]
        )
        story["discovered_lore"] = frozenset(story["discovered_lore"])

        store._hp = data["hp"]
        store._mana = data["mana"]
        store._location = location_at(loc["x"], loc["y"])
        store._inventory = [InventoryItem(**i) for i in data["inventory"]]
        store._history = [
            HistoryEntry(
                role=h["role"],
                content=h["content"],
                mood=Mood(h["mood"]) if h.get("mood") else None,
            )
            for h in data["history"]
        ]
        store._mood = Mood(data["mood"])
        store._status = GameStatus(data["status"])
        store._visited_tiles = set(data["visited_tiles"])
        store._story = StoryProgress(**story)
        enemy = data.get("active_enemy")
        store._active_enemy = Enemy(**enemy) if enemy else None
        store._last_rest_tile = data.get("last_rest_tile")
        store._exploit_ready = bool(data.get("exploit_ready", False))
        return store


def current_objective(story: StoryProgress) -> str:
    """The next campaign goal, phrased for the player."""
    if not story.has_firewall_key:
        return "OBJECTIVE: Find the Firewall Key to breach the gate into Neon City"
    if not story.act1_complete:
        return "OBJECTIVE: Head inward to Neon City. You have the Firewall Key"
    if not story.has_admin_keycard:
        return "OBJECTIVE: Find the Admin Keycard to access The Source"
    if not story.act2_complete:
        return "OBJECTIVE: Head inward to The Source. You have the Admin Keycard"
    return "OBJECTIVE: Reach Terminal Zero [0,0] and EXECUTE LOGOUT"


def act_of(location: Location) -> int:
    return act(location.x, location.y)
