"""Sound and haptics side-channel.

The engine only names an effect; whatever plays it is a collaborator behind
a plain callable. Emission is fire-and-forget and never reaches the player.
"""

from collections.abc import Callable

from .engine.world import Intent
from .logging import get_logger

logger = get_logger(__name__)

EffectSink = Callable[[str], None]

ITEM = "item"
ERROR = "error"

EFFECT_FOR_INTENT: dict[Intent, str] = {
    Intent.MOVE: "move",
    Intent.ATTACK: "attack",
    Intent.HACK: "hack",
    Intent.SEARCH: "search",
    Intent.REST: "rest",
    Intent.MAGIC: "hack",
}


def effect_for(intent: Intent) -> str | None:
    return EFFECT_FOR_INTENT.get(intent)


def emit(sink: EffectSink | None, effect: str | None) -> None:
    """Hand an effect to the sink, logging and discarding any failure."""
    if sink is None or effect is None:
        return
    try:
        sink(effect)
    except Exception as exc:
        logger.warning("effect_failed", effect=effect, error=str(exc))


def log_effect(effect: str) -> None:
    """Default sink for headless hosts: record the cue and move on."""
    logger.debug("effect_emitted", effect=effect)
