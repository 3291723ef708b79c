"""Immutable data structures for the Eden simulation.

Locations, items, enemies and outcomes are frozen values; the mutable
per-player model lives in ``state.py``. Lore is loaded once at startup and
shared across all players.
"""

import uuid
from dataclasses import dataclass, field
from enum import StrEnum


class Intent(StrEnum):
    MOVE = "move"
    ATTACK = "attack"
    HACK = "hack"
    MAGIC = "magic"
    REST = "rest"
    SEARCH = "search"
    LOGOUT = "logout"
    UNKNOWN = "unknown"


class Mood(StrEnum):
    NEUTRAL = "neutral"
    DANGER = "danger"
    MYSTIC = "mystic"


class GameStatus(StrEnum):
    PLAYING = "playing"
    DEAD = "dead"
    VICTORY = "victory"


class TileType(StrEnum):
    """Visual classification of a tile, independent of its name."""

    RECYCLE = "recycle"
    FIREWALL = "firewall"
    NEON = "neon"
    SOURCE = "source"
    TERMINAL = "terminal"
    TRAP = "trap"


# Every icon an item may carry. Anything else from an upstream is coerced.
ICONS = frozenset(
    {
        "debug",
        "patch",
        "exploit",
        "firewall",
        "memory",
        "token",
        "trace",
        "rootkit",
        "data",
        "proxy",
    }
)

FIREWALL_KEY = "Firewall Key"
ADMIN_KEYCARD = "Admin Keycard"


def new_item_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Location:
    """A tile on the grid, carrying its flavour name."""

    x: int
    y: int
    name: str

    @property
    def key(self) -> str:
        return f"{self.x},{self.y}"


@dataclass(frozen=True)
class ItemTemplate:
    """An item before it is minted into an inventory entry."""

    name: str
    icon: str
    description: str = ""

    def mint(self) -> "InventoryItem":
        return InventoryItem(
            id=new_item_id(),
            name=self.name,
            icon=self.icon,
            description=self.description,
        )


@dataclass(frozen=True)
class InventoryItem:
    id: str
    name: str
    icon: str
    description: str = ""


@dataclass(frozen=True)
class Enemy:
    """The single hostile program the player may be engaged with."""

    name: str
    hp: int
    max_hp: int
    damage: int
    act: int


@dataclass(frozen=True)
class Outcome:
    """The structured result of resolving one command.

    Produced by the local engine or coerced from the remote narrator;
    both paths share the same downstream application logic.
    """

    narrative: str
    intent: Intent
    mood: Mood = Mood.NEUTRAL
    hp_delta: int = 0
    mana_delta: int = 0
    new_item: InventoryItem | None = None
    new_location: Location | None = None
    victory: bool = False
    # Only meaningful for hacks; None elsewhere.
    success: bool | None = None
    narrative_id: str = ""


@dataclass(frozen=True)
class LoreEntry:
    """A recoverable document pinned to a tile."""

    id: str
    title: str
    content: str
    act: int
    tile_key: str | None = None


@dataclass
class LoreBook:
    """All lore entries, loaded once from lore.json."""

    entries: dict[str, LoreEntry] = field(default_factory=dict)

    def for_tile(self, tile_key: str) -> LoreEntry | None:
        for entry in self.entries.values():
            if entry.tile_key == tile_key:
                return entry
        return None

    def for_act(self, act: int) -> list[LoreEntry]:
        return [entry for entry in self.entries.values() if entry.act == act]
