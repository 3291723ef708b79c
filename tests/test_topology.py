"""Tests for world topology."""

import random

import pytest

from eden.engine.topology import (
    ACT1_LOCATIONS,
    ACT2_LOCATIONS,
    ACT3_LOCATIONS,
    WORLD_MAX,
    WORLD_MIN,
    act,
    clamp_to_world,
    location_at,
    location_name,
    start_location,
    step,
    tile_type,
)
from eden.engine.world import TileType


@pytest.mark.parametrize(
    "x, y, expected",
    [
        (4, 4, 1),
        (5, 0, 1),
        (0, 5, 1),
        (3, 1, 2),
        (2, 0, 2),
        (1, 1, 2),
        (1, 0, 3),
        (0, -1, 3),
        (0, 0, 3),
    ],
)
def test_act_thresholds(x, y, expected):
    assert act(x, y) == expected


def test_act_is_monotonic_in_distance():
    """Walking inward never lowers the act number."""
    for x in range(WORLD_MIN, WORLD_MAX + 1):
        for y in range(WORLD_MIN, WORLD_MAX + 1):
            if x > 0:
                assert act(x - 1, y) >= act(x, y)
            if y > 0:
                assert act(x, y - 1) >= act(x, y)


def test_terminal_name():
    assert location_name(0, 0) == "Terminal Zero"


def test_location_name_is_pure_and_from_act_pool():
    for x in range(WORLD_MIN, WORLD_MAX + 1):
        for y in range(WORLD_MIN, WORLD_MAX + 1):
            if (x, y) == (0, 0):
                continue
            name = location_name(x, y)
            assert name == location_name(x, y)
            pool = {1: ACT1_LOCATIONS, 2: ACT2_LOCATIONS, 3: ACT3_LOCATIONS}[act(x, y)]
            assert name in pool


def test_start_location():
    start = start_location()
    assert (start.x, start.y) == (4, 4)
    assert start.name == "Old Cache Storage"
    assert start.key == "4,4"


def test_tile_type_terminal_and_pools():
    assert tile_type(0, 0) == TileType.TERMINAL
    allowed = {
        1: {TileType.FIREWALL, TileType.TRAP, TileType.RECYCLE},
        2: {TileType.FIREWALL, TileType.TRAP, TileType.NEON},
        3: {TileType.TRAP, TileType.SOURCE},
    }
    for x in range(WORLD_MIN, WORLD_MAX + 1):
        for y in range(WORLD_MIN, WORLD_MAX + 1):
            if (x, y) != (0, 0):
                assert tile_type(x, y) in allowed[act(x, y)]


def test_tile_type_hash_bucket():
    # abs(4*7919 + 4*6271 + 16*31) % 100 == 56 -> recycle in act 1
    assert tile_type(4, 4) == TileType.RECYCLE


def test_clamp_to_world():
    assert clamp_to_world(-3, 9) == (WORLD_MIN, WORLD_MAX)
    assert clamp_to_world(2, 2) == (2, 2)


def test_step_known_direction():
    rng = random.Random(1)
    dest = step(location_at(4, 4), "north", rng)
    assert (dest.x, dest.y) == (4, 3)
    assert dest.name == location_name(4, 3)


def test_step_clamps_at_edge():
    dest = step(location_at(5, 5), "east", random.Random(1))
    assert (dest.x, dest.y) == (5, 5)


def test_step_unknown_direction_stays_adjacent():
    rng = random.Random(3)
    for _ in range(50):
        dest = step(location_at(2, 2), None, rng)
        assert abs(dest.x - 2) <= 1
        assert abs(dest.y - 2) <= 1
