"""Tests for the lore loader."""

import json
from pathlib import Path

import pytest

from eden.engine.loader import LoreFormatError, load_lore
from eden.engine.topology import act
from eden.engine.world import LoreBook


def _write(tmp_path: Path, document) -> Path:
    path = tmp_path / "lore.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


def test_loads_all_entries(lore: LoreBook):
    assert len(lore.entries) == 11
    assert len(lore.for_act(1)) == 4
    assert len(lore.for_act(2)) == 4
    assert len(lore.for_act(3)) == 3


def test_entries_are_pinned_inside_their_act(lore: LoreBook):
    for entry in lore.entries.values():
        x, y = (int(n) for n in entry.tile_key.split(","))
        assert act(x, y) == entry.act


def test_for_tile(lore: LoreBook):
    entry = lore.for_tile("4,3")
    assert entry is not None
    assert entry.id == "lore-1-1"
    assert lore.for_tile("4,4") is None


def test_rejects_missing_fields(tmp_path: Path):
    path = _write(tmp_path, {"entries": [{"id": "x", "title": "t", "act": 1}]})
    with pytest.raises(LoreFormatError, match="content"):
        load_lore(path)


def test_rejects_tile_in_wrong_act(tmp_path: Path):
    entry = {"id": "x", "title": "t", "content": "c", "act": 3, "tile": "4,4"}
    with pytest.raises(LoreFormatError, match="not in act 3"):
        load_lore(_write(tmp_path, {"entries": [entry]}))


def test_rejects_tile_outside_world(tmp_path: Path):
    entry = {"id": "x", "title": "t", "content": "c", "act": 1, "tile": "9,9"}
    with pytest.raises(LoreFormatError, match="outside"):
        load_lore(_write(tmp_path, {"entries": [entry]}))


def test_rejects_duplicate_ids(tmp_path: Path):
    entry = {"id": "x", "title": "t", "content": "c", "act": 1}
    with pytest.raises(LoreFormatError, match="duplicate"):
        load_lore(_write(tmp_path, {"entries": [entry, entry]}))


def test_rejects_invalid_json(tmp_path: Path):
    path = tmp_path / "lore.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(LoreFormatError):
        load_lore(path)


def test_unpinned_entry(tmp_path: Path):
    entry = {"id": "x", "title": "t", "content": "c", "act": 2}
    book = load_lore(_write(tmp_path, {"entries": [entry]}))
    assert book.entries["x"].tile_key is None
