"""Tests for the in-memory session registry."""

from eden.session import SessionRegistry


def test_same_id_returns_same_session(lore):
    registry = SessionRegistry(lore=lore, seed=1)
    assert registry.load_or_create("a") is registry.load_or_create("a")
    assert len(registry) == 1


def test_registry_is_capped(lore):
    registry = SessionRegistry(lore=lore, seed=1, max_sessions=3)
    for n in range(10):
        registry.load_or_create(f"player-{n}")
    assert len(registry) == 3


def test_least_recently_used_session_is_evicted(lore):
    registry = SessionRegistry(lore=lore, seed=1, max_sessions=2)
    first = registry.load_or_create("first")
    first.process_command("go north")
    registry.load_or_create("second")

    # touching "first" makes "second" the oldest
    assert registry.load_or_create("first") is first
    registry.load_or_create("third")

    assert registry.load_or_create("first") is first
    assert first.store.location.y == 3
    assert len(registry) == 2
