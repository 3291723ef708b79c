"""Remote narrator client and the validating adapter in front of it.

The narrator is an optional HTTP service that answers a command with the
same shape the local engine produces. Nothing it returns is trusted:
coerce_narration() clamps and normalises every field into an Outcome, and
any transport-level failure surfaces as NarratorUnavailableError so the
caller can fall back to the local engine.
"""

import json
import re
from typing import Any

import httpx

from .engine import narratives
from .engine.state import GameStore
from .engine.world import ICONS, Intent, ItemTemplate, Mood, Outcome
from .logging import get_logger

logger = get_logger(__name__)

COMMAND_PATH = "/api/game/command"

HP_RANGE = (-20, 20)
MANA_RANGE = (-25, 15)

RECENT_HISTORY_LINES = 3
RECENT_HISTORY_CHARS = 200
RECENT_KEY_EVENTS = 5

NARRATIVE_KEYS = ("narrative", "text", "response", "message")
FALLBACK_ICON = "data"

GARBLED_HP = -2

_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)
_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


class NarratorUnavailableError(Exception):
    """The narrator could not be reached or answered with garbage HTTP."""


def build_request(store: GameStore, command: str) -> dict[str, Any]:
    """The JSON body sent to the narrator for one command."""
    story = store.story
    recent = [h.content for h in store.history if h.role == "narrator"]
    return {
        "command": command,
        "locationName": store.location.name,
        "locationX": store.location.x,
        "locationY": store.location.y,
        "hp": store.hp,
        "mana": store.mana,
        "recentHistory": [
            line[:RECENT_HISTORY_CHARS] for line in recent[-RECENT_HISTORY_LINES:]
        ],
        "storyProgress": {
            "currentAct": story.current_act,
            "hasFirewallKey": story.has_firewall_key,
            "hasAdminKeycard": story.has_admin_keycard,
            "enemiesDefeated": story.enemies_defeated,
            "hacksCompleted": story.hacks_completed,
            "tilesExplored": story.tiles_explored,
            "keyEvents": [e.description for e in story.key_events[-RECENT_KEY_EVENTS:]],
        },
    }


def strip_code_fences(text: str) -> str:
    text = text.strip()
    match = _FENCE.match(text)
    if match:
        return match.group(1).strip()
    return text


def parse_narrator_json(text: str) -> dict[str, Any] | None:
    """Best-effort decode of raw narrator text into a JSON object."""
    for candidate in (text, strip_code_fences(text)):
        try:
            decoded = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(decoded, dict):
            return decoded
    match = _OBJECT.search(text)
    if match:
        try:
            decoded = json.loads(match.group(0))
        except json.JSONDecodeError:
            return None
        if isinstance(decoded, dict):
            return decoded
    return None


def garbled_outcome() -> Outcome:
    return Outcome(
        narrative=narratives.NARRATOR_GARBLED,
        narrative_id="remote:garbled",
        intent=Intent.UNKNOWN,
        mood=Mood.DANGER,
        hp_delta=GARBLED_HP,
    )


def _clamped_int(value: Any, bounds: tuple[int, int]) -> int:
    if isinstance(value, bool):
        return 0
    try:
        number = int(value or 0)
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(bounds[0], min(bounds[1], number))


def _narrative(raw: dict[str, Any]) -> str:
    for key in NARRATIVE_KEYS:
        value = raw.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return narratives.NARRATOR_FALLBACK


def _enum_or(enum_cls, value: Any, default):
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        return default


def _item(raw: Any):
    if not isinstance(raw, dict):
        return None
    name = str(raw.get("name") or "").strip()
    if not name:
        return None
    icon = str(raw.get("icon") or "").lower()
    if icon not in ICONS:
        icon = FALLBACK_ICON
    description = str(raw.get("description") or "")
    return ItemTemplate(name=name, icon=icon, description=description).mint()


def coerce_narration(raw: Any) -> Outcome:
    """Validate a narrator response body into an Outcome.

    Accepts either a decoded JSON object or a string holding the narrator's
    raw text. Text that cannot be decoded yields the garbled outcome.
    """
    if isinstance(raw, str):
        raw = parse_narrator_json(raw)
    if not isinstance(raw, dict):
        logger.warning("narrator_garbled", body_type=type(raw).__name__)
        return garbled_outcome()

    intent = _enum_or(Intent, raw.get("intent"), Intent.UNKNOWN)
    hp_delta = _clamped_int(raw.get("hpChange"), HP_RANGE)
    return Outcome(
        narrative=_narrative(raw),
        narrative_id="remote",
        intent=intent,
        mood=_enum_or(Mood, raw.get("mood"), Mood.NEUTRAL),
        hp_delta=hp_delta,
        mana_delta=_clamped_int(raw.get("manaChange"), MANA_RANGE),
        new_item=_item(raw.get("newItem")),
        # The contract has no success field; a hack that cost no HP landed
        success=(hp_delta >= 0) if intent == Intent.HACK else None,
    )


class NarratorClient:
    """HTTP client for the remote narrator service."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.client = http_client or httpx.Client(base_url=base_url, timeout=timeout)

    def narrate(self, payload: dict[str, Any]) -> Outcome:
        """POST one command and return the coerced Outcome."""
        try:
            response = self.client.post(COMMAND_PATH, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise NarratorUnavailableError(str(exc) or type(exc).__name__) from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise NarratorUnavailableError("narrator returned a non-JSON body") from exc

        return coerce_narration(body)

    def close(self) -> None:
        self.client.close()
