"""Tests for the intent parser."""

import pytest

from eden.engine.parser import normalize, parse_intent
from eden.engine.world import Intent


@pytest.mark.parametrize(
    "text, intent, direction",
    [
        ("go north", Intent.MOVE, "north"),
        ("NORTH", Intent.MOVE, "north"),
        ("walk west!", Intent.MOVE, "west"),
        ("run left", Intent.MOVE, "left"),
        ("attack the bot", Intent.ATTACK, None),
        ("hack the door", Intent.HACK, None),
        ("sudo open the gate", Intent.HACK, None),
        ("cast fireball", Intent.MAGIC, None),
        ("take a rest", Intent.REST, None),
        ("search the pile", Intent.SEARCH, None),
        ("look around", Intent.SEARCH, None),
        ("logout", Intent.LOGOUT, None),
        ("log out", Intent.LOGOUT, None),
        ("EXECUTE LOGOUT", Intent.LOGOUT, None),
        ("exit", Intent.LOGOUT, None),
        ("dance wildly", Intent.UNKNOWN, None),
    ],
)
def test_parse_intent(text, intent, direction):
    parsed = parse_intent(text)
    assert parsed.intent == intent
    assert parsed.direction == direction


def test_hack_preempts_attack():
    """Hacking words win over overlapping combat words."""
    assert parse_intent("hack and attack").intent == Intent.HACK


def test_movement_preempts_attack():
    assert parse_intent("run north and strike").intent == Intent.MOVE


def test_bare_direction_word_falls_through_to_move():
    """A direction without a movement verb still moves, after other checks."""
    parsed = parse_intent("the exit is to the south")
    assert parsed.intent == Intent.MOVE
    assert parsed.direction == "south"


def test_attack_beats_bare_direction():
    assert parse_intent("attack south").intent == Intent.ATTACK


def test_word_boundaries():
    """Substrings inside other words do not match."""
    assert parse_intent("northern lights").intent == Intent.UNKNOWN
    assert parse_intent("hacker news").intent == Intent.UNKNOWN


def test_exit_only_matches_exactly():
    assert parse_intent("exit").intent == Intent.LOGOUT
    assert parse_intent("find the exit").intent == Intent.SEARCH


def test_execute_logout_anywhere():
    assert parse_intent("now: execute logout, please").intent == Intent.LOGOUT


def test_normalize():
    assert normalize("  Go,   NORTH!! ") == "go north"


def test_empty_is_unknown():
    assert parse_intent("").intent == Intent.UNKNOWN
