"""Session layer bridging the game engine and the HTTP surface."""

import random
import threading
from collections import OrderedDict
from dataclasses import asdict

from .engine import narratives
from .engine.orchestrator import CommandProcessor, TurnResult
from .engine.state import GameStore, current_objective, narrator_entry
from .engine.topology import ACT_NAMES, tile_type
from .engine.world import LoreBook, Mood
from .effects import EffectSink
from .logging import get_logger
from .narrator import NarratorClient

logger = get_logger(__name__)

MAX_SESSIONS = 1000


class GameSession:
    """Wraps one player's GameStore and the processor that mutates it.

    The store is not thread-safe; every read and write goes through the
    session lock.
    """

    def __init__(self, session_id: str, store: GameStore, processor: CommandProcessor):
        self.session_id = session_id
        self.store = store
        self.processor = processor
        self.lock = threading.Lock()

    @classmethod
    def create(
        cls,
        session_id: str,
        *,
        rng: random.Random,
        narrator: NarratorClient | None = None,
        lore: LoreBook | None = None,
        effects_sink: EffectSink | None = None,
    ) -> "GameSession":
        store = GameStore()
        processor = CommandProcessor(
            store, rng=rng, narrator=narrator, lore=lore, effects_sink=effects_sink,
        )
        logger.info("new_game_started", session_id=session_id)
        return cls(session_id, store, processor)

    def process_command(self, raw_input: str) -> dict:
        """Run one command and return the resulting view."""
        with self.lock:
            result: TurnResult = self.processor.process(raw_input)
            return self._view(result.narratives)

    def use_item(self, item_id: str) -> dict:
        """Consume an inventory item by id."""
        with self.lock:
            store = self.store
            if not store.is_playing:
                return self._view([narratives.GAME_OVER])

            item = next((i for i in store.inventory if i.id == item_id), None)
            if item is None:
                return self._view([narratives.ITEM_MISSING])

            effect = store.use_item(item_id)
            if effect is None:
                line = narratives.ITEM_INERT.format(name=item.name)
            else:
                line = effect.narrative
                logger.info(
                    "item_used",
                    session_id=self.session_id,
                    item=item.name,
                    effect=effect.effect,
                )
            store.add_message(narrator_entry(line, Mood.NEUTRAL))
            return self._view([line])

    def reset(self) -> dict:
        """Reset to a fresh game."""
        with self.lock:
            self.store.reset()
            logger.info("game_reset", session_id=self.session_id)
            return self._view([self.store.history[-1].content])

    def view(self) -> dict:
        with self.lock:
            return self._view([])

    def _view(self, lines: list[str]) -> dict:
        store = self.store
        location = store.location
        current_act = store.story.current_act
        enemy = store.active_enemy
        return {
            "narratives": lines,
            "hp": store.hp,
            "mana": store.mana,
            "location": {"x": location.x, "y": location.y, "name": location.name},
            "tile_type": str(tile_type(location.x, location.y)),
            "act": current_act,
            "act_name": ACT_NAMES[current_act],
            "inventory": [asdict(item) for item in store.inventory],
            "status": str(store.status),
            "mood": str(store.mood),
            "trace": store.story.trace_level,
            "enemy": asdict(enemy) if enemy else None,
            "objective": current_objective(store.story),
            "exploit_ready": store.exploit_ready,
        }


class SessionRegistry:
    """In-memory map of session id -> GameSession.

    Holds at most max_sessions games; the least recently used one is
    dropped when a new session would exceed the cap.
    """

    def __init__(
        self,
        *,
        narrator: NarratorClient | None = None,
        lore: LoreBook | None = None,
        seed: int | None = None,
        effects_sink: EffectSink | None = None,
        max_sessions: int = MAX_SESSIONS,
    ):
        self.narrator = narrator
        self.lore = lore
        self.seed = seed
        self.effects_sink = effects_sink
        self.max_sessions = max(1, max_sessions)
        self._sessions: OrderedDict[str, GameSession] = OrderedDict()
        self._lock = threading.Lock()

    def load_or_create(self, session_id: str) -> GameSession:
        """Return the player's session, starting a new game if needed."""
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                self._sessions.move_to_end(session_id)
                return session

            while len(self._sessions) >= self.max_sessions:
                evicted_id, _ = self._sessions.popitem(last=False)
                logger.info("session_evicted", session_id=evicted_id)

            session = GameSession.create(
                session_id,
                rng=random.Random(self.seed),
                narrator=self.narrator,
                lore=self.lore,
                effects_sink=self.effects_sink,
            )
            self._sessions[session_id] = session
            return session

    def __len__(self) -> int:
        return len(self._sessions)
