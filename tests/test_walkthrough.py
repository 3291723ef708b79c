"""Test that the game can be played through to completion.

Route from the starting tile (4,4) to Terminal Zero:
  (4,4) search -> Firewall Key
  west x4 -> (0,4), first tile of Neon City
  north x2 -> (0,2)
  (0,2) search -> Admin Keycard
  north x2 -> (0,1) in The Source, then (0,0)
  execute logout
"""

import pytest

from eden.engine import narratives
from eden.engine.orchestrator import CommandProcessor
from eden.engine.state import GameStore, current_objective
from eden.engine.world import ADMIN_KEYCARD, FIREWALL_KEY, GameStatus


def _run(processor: CommandProcessor, commands: list[str]) -> None:
    for cmd in commands:
        result = processor.process(cmd)
        assert result.status == GameStatus.PLAYING, f"Game ended after {cmd!r}"


def _assert_at(store: GameStore, x: int, y: int) -> None:
    assert (store.location.x, store.location.y) == (x, y), (
        f"Expected ({x},{y}), at {store.location.key}"
    )


@pytest.fixture
def game(store, rng, lore):
    return CommandProcessor(store, rng=rng, lore=lore)


def test_full_walkthrough(game: CommandProcessor, store: GameStore, rng):
    """A lucky but legal run from the Recycle Bin to logout."""
    # Act 1: dig up the Firewall Key
    rng.value = 0.0
    _run(game, ["search the junk"])
    assert store.story.has_firewall_key
    assert FIREWALL_KEY in {i.name for i in store.inventory}

    rng.value = 0.99
    _run(game, ["go west", "go west", "go west"])
    _assert_at(store, 1, 4)
    assert store.story.current_act == 1

    # Through the Firewall Gate
    _run(game, ["go west"])
    _assert_at(store, 0, 4)
    assert store.story.current_act == 2
    assert store.story.act1_complete

    _run(game, ["go north", "walk north"])
    _assert_at(store, 0, 2)

    # The Source Gate refuses without a keycard
    blocked = game.process("go north")
    assert blocked.narratives == [narratives.GATE_SOURCE]
    _assert_at(store, 0, 2)

    # Act 2: find the Admin Keycard
    rng.value = 0.0
    _run(game, ["search"])
    assert store.story.has_admin_keycard
    assert ADMIN_KEYCARD in {i.name for i in store.inventory}

    rng.value = 0.99
    _run(game, ["go north"])
    _assert_at(store, 0, 1)
    assert store.story.current_act == 3
    assert store.story.act2_complete
    assert "Terminal Zero" in current_objective(store.story)

    _run(game, ["go north"])
    _assert_at(store, 0, 0)
    assert store.location.name == "Terminal Zero"

    result = game.process("execute logout")
    assert result.status == GameStatus.VICTORY
    assert store.status == GameStatus.VICTORY

    events = [e.description for e in store.story.key_events]
    assert narratives.ACT_ENTRY[2] in events
    assert narratives.ACT_ENTRY[3] in events
    assert store.story.tiles_explored == 9

    # Nothing moves once the game is won
    after = game.process("go south")
    assert after.narratives == [narratives.GAME_OVER]
    _assert_at(store, 0, 0)
