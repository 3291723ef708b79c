"""Parse the lore.json data file into a LoreBook.

The file is a JSON object with a single "entries" list. Each entry needs an
id, title, content and act; tile is an optional "x,y" key pinning the entry
to one tile.
"""

import json
from pathlib import Path
from typing import Any

from .topology import WORLD_MAX, WORLD_MIN, act
from .world import LoreBook, LoreEntry

REQUIRED_FIELDS = ("id", "title", "content", "act")


class LoreFormatError(ValueError):
    """lore.json is malformed or inconsistent with the world."""


def _parse_tile(entry_id: str, raw: Any) -> tuple[int, int] | None:
    if raw is None:
        return None
    try:
        x_str, y_str = str(raw).split(",")
        x, y = int(x_str), int(y_str)
    except ValueError as exc:
        raise LoreFormatError(f"{entry_id}: bad tile key {raw!r}") from exc
    if not (WORLD_MIN <= x <= WORLD_MAX and WORLD_MIN <= y <= WORLD_MAX):
        raise LoreFormatError(f"{entry_id}: tile {raw!r} is outside the world")
    return x, y


def _parse_entry(raw: dict[str, Any]) -> LoreEntry:
    missing = [name for name in REQUIRED_FIELDS if name not in raw]
    if missing:
        raise LoreFormatError(f"lore entry missing fields: {', '.join(missing)}")

    entry_id = str(raw["id"])
    entry_act = raw["act"]
    if entry_act not in (1, 2, 3):
        raise LoreFormatError(f"{entry_id}: act must be 1, 2 or 3")

    tile = _parse_tile(entry_id, raw.get("tile"))
    tile_key = None
    if tile is not None:
        # A pinned entry must live in the act it claims
        if act(*tile) != entry_act:
            raise LoreFormatError(f"{entry_id}: tile {raw['tile']} is not in act {entry_act}")
        tile_key = f"{tile[0]},{tile[1]}"

    return LoreEntry(
        id=entry_id,
        title=str(raw["title"]),
        content=str(raw["content"]),
        act=entry_act,
        tile_key=tile_key,
    )


def load_lore(data_path: Path) -> LoreBook:
    """Parse lore.json and return a populated LoreBook."""
    with open(data_path, encoding="utf-8") as fh:
        try:
            document = json.load(fh)
        except json.JSONDecodeError as exc:
            raise LoreFormatError(f"{data_path}: {exc}") from exc

    if not isinstance(document, dict) or not isinstance(document.get("entries"), list):
        raise LoreFormatError(f"{data_path}: expected an object with an entries list")

    book = LoreBook()
    tiles_seen: set[str] = set()
    for raw in document["entries"]:
        entry = _parse_entry(raw)
        if entry.id in book.entries:
            raise LoreFormatError(f"duplicate lore id {entry.id}")
        if entry.tile_key is not None:
            if entry.tile_key in tiles_seen:
                raise LoreFormatError(f"two lore entries pinned to {entry.tile_key}")
            tiles_seen.add(entry.tile_key)
        book.entries[entry.id] = entry
    return book
