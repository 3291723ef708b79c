"""Bag-of-keywords intent classifier.

parse_intent(text) -> ParsedCommand is the only entry point. Checks run in
a fixed order and the first match wins, so hacking vocabulary pre-empts
combat vocabulary and explicit movement pre-empts everything but hacking.
"""

import re
from dataclasses import dataclass

from .topology import DIRECTIONS
from .world import Intent

LOGOUT_PHRASES = {"logout", "log out", "exit"}
LOGOUT_PATTERN = re.compile(r"\bexecute\s*logout\b")

MOVEMENT_VERBS = {"go", "walk", "move", "travel", "head", "run"}

HACK_WORDS = {
    "hack",
    "rewrite",
    "code",
    "sudo",
    "exploit",
    "inject",
    "override",
    "crack",
    "decrypt",
    "bypass",
}

ATTACK_WORDS = {
    "attack",
    "fight",
    "strike",
    "slash",
    "hit",
    "kill",
    "slay",
    "stab",
    "swing",
    "delete",
    "terminate",
}

MAGIC_WORDS = {
    "cast",
    "spell",
    "magic",
    "fireball",
    "heal",
    "enchant",
    "invoke",
    "conjure",
    "channel",
    "compile",
}

REST_WORDS = {
    "rest",
    "sleep",
    "camp",
    "meditate",
    "sit",
    "relax",
    "recover",
    "reboot",
    "repair",
    "recharge",
}

SEARCH_WORDS = {
    "search",
    "look",
    "examine",
    "inspect",
    "investigate",
    "explore",
    "find",
    "loot",
    "open",
    "grab",
    "take",
    "pick",
    "scan",
    "query",
}

_PUNCTUATION = re.compile(r"[^a-z0-9\s]")


@dataclass(frozen=True)
class ParsedCommand:
    intent: Intent
    direction: str | None = None


def normalize(text: str) -> str:
    """Lowercase, strip punctuation and collapse whitespace."""
    return " ".join(_PUNCTUATION.sub(" ", text.lower()).split())


def parse_intent(text: str) -> ParsedCommand:
    """Classify free text into one of the fixed intents."""
    lowered = normalize(text)
    words = set(lowered.split())

    if lowered in LOGOUT_PHRASES or LOGOUT_PATTERN.search(lowered):
        return ParsedCommand(Intent.LOGOUT)

    if words & HACK_WORDS:
        return ParsedCommand(Intent.HACK)

    for direction in DIRECTIONS:
        if lowered == direction:
            return ParsedCommand(Intent.MOVE, direction)
        if direction in words and words & MOVEMENT_VERBS:
            return ParsedCommand(Intent.MOVE, direction)

    if words & ATTACK_WORDS:
        return ParsedCommand(Intent.ATTACK)
    if words & MAGIC_WORDS:
        return ParsedCommand(Intent.MAGIC)
    if words & REST_WORDS:
        return ParsedCommand(Intent.REST)
    if words & SEARCH_WORDS:
        return ParsedCommand(Intent.SEARCH)

    for direction in DIRECTIONS:
        if direction in words:
            return ParsedCommand(Intent.MOVE, direction)

    return ParsedCommand(Intent.UNKNOWN)
