"""Shared test fixtures for Eden."""

import random

import pytest

from eden.app import _get_data_path, create_app
from eden.config import Config
from eden.engine.loader import load_lore
from eden.engine.orchestrator import CommandProcessor
from eden.engine.state import GameStore
from eden.engine.world import LoreBook


class StubRandom(random.Random):
    """Predictable RNG: every roll returns value, ranges their low end."""

    def __init__(self, value: float = 0.0):
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value

    def randint(self, a: int, b: int) -> int:
        return a

    def choice(self, seq):
        return seq[0]


class RecordingSink:
    def __init__(self):
        self.effects: list[str] = []

    def __call__(self, effect: str) -> None:
        self.effects.append(effect)


@pytest.fixture
def lore() -> LoreBook:
    return load_lore(_get_data_path())


@pytest.fixture
def store() -> GameStore:
    return GameStore()


@pytest.fixture
def rng() -> StubRandom:
    # Rolls of 0.99 fail every chance check except certainties
    return StubRandom(0.99)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def processor(store: GameStore, rng: StubRandom, lore: LoreBook, sink: RecordingSink):
    return CommandProcessor(store, rng=rng, lore=lore, effects_sink=sink)


@pytest.fixture
def test_config() -> Config:
    return Config(seed=7)


@pytest.fixture
def app(test_config: Config):
    app = create_app(test_config)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def session_headers() -> dict[str, str]:
    return {"X-Eden-Session": "test-session-abc123"}
