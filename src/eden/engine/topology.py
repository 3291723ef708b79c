"""Pure functions describing the shape of the simulation.

Tiles are never stored: acts, names and tile types are derived from the
coordinates themselves, so the same tile always looks the same.
"""

import random

from .world import Location, TileType

# World bounding box (inclusive on both axes)
WORLD_MIN = -1
WORLD_MAX = 5

TERMINAL_NAME = "Terminal Zero"

START_X = 4
START_Y = 4

# Distance thresholds: d >= 5 is act 1, d >= 2 is act 2, everything else act 3
ACT1_DISTANCE = 5
ACT2_DISTANCE = 2

ACT_NAMES = {1: "The Recycle Bin", 2: "Neon City", 3: "The Source"}

DIRECTIONS: dict[str, tuple[int, int]] = {
    "north": (0, -1),
    "south": (0, 1),
    "east": (1, 0),
    "west": (-1, 0),
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}

ACT1_LOCATIONS = (
    "Recycle Bin",
    "Deleted Files Dump",
    "Old Cache Storage",
    "Temp Folder Ruins",
    "Junk Data Field",
    "Crashed Program Lot",
    "Expired Cookie Pile",
    "Defrag Wasteland",
    "Format Graveyard",
)

ACT2_LOCATIONS = (
    "Neon City Gate",
    "Fake Mall District",
    "NPC Boulevard",
    "Hologram Plaza",
    "Pixel Market",
    "Firewall Checkpoint",
    "Data Highway",
    "Clone Alley",
    "Simulation Square",
)

ACT3_LOCATIONS = (
    "The White Void",
    "Monolith Chamber",
    "Source Code Hall",
    "Root Access Point",
    "Kernel Bridge",
    "Terminal Zero Approach",
)

_NAME_POOLS = {1: ACT1_LOCATIONS, 2: ACT2_LOCATIONS, 3: ACT3_LOCATIONS}


def distance(x: int, y: int) -> int:
    """Manhattan distance from Terminal Zero."""
    return abs(x) + abs(y)


def act(x: int, y: int) -> int:
    """Classify a tile into act 1 (outer), 2 (middle) or 3 (core)."""
    d = distance(x, y)
    if d >= ACT1_DISTANCE:
        return 1
    if d >= ACT2_DISTANCE:
        return 2
    return 3


def is_terminal(x: int, y: int) -> bool:
    return x == 0 and y == 0


def tile_key(x: int, y: int) -> str:
    return f"{x},{y}"


def location_name(x: int, y: int) -> str:
    if is_terminal(x, y):
        return TERMINAL_NAME
    pool = _NAME_POOLS[act(x, y)]
    return pool[abs(x * 7 + y * 13 + x * y * 3) % len(pool)]


def tile_type(x: int, y: int) -> TileType:
    """Hash-bucket a tile into its visual type."""
    if is_terminal(x, y):
        return TileType.TERMINAL
    seed = abs(x * 7919 + y * 6271 + x * y * 31) % 100
    tile_act = act(x, y)
    if tile_act == 1:
        if seed < 20:
            return TileType.FIREWALL
        if seed < 35:
            return TileType.TRAP
        return TileType.RECYCLE
    if tile_act == 2:
        if seed < 25:
            return TileType.FIREWALL
        if seed < 40:
            return TileType.TRAP
        return TileType.NEON
    if seed < 30:
        return TileType.TRAP
    return TileType.SOURCE


def clamp_to_world(x: int, y: int) -> tuple[int, int]:
    return (
        max(WORLD_MIN, min(WORLD_MAX, x)),
        max(WORLD_MIN, min(WORLD_MAX, y)),
    )


def location_at(x: int, y: int) -> Location:
    return Location(x=x, y=y, name=location_name(x, y))


def start_location() -> Location:
    return location_at(START_X, START_Y)


def step(
    location: Location, direction: str | None, rng: random.Random,
) -> Location:
    """Return the tile one step away, clamped to the world.

    An unknown or missing direction stumbles in a random direction.
    """
    delta = DIRECTIONS.get(direction or "")
    if delta is None:
        delta = (rng.choice((-1, 0, 1)), rng.choice((-1, 0, 1)))
    x, y = clamp_to_world(location.x + delta[0], location.y + delta[1])
    return location_at(x, y)
