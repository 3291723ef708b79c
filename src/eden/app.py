"""Flask application factory for Eden."""

import atexit
from importlib import resources
from pathlib import Path

from flask import Flask

from .config import Config
from .effects import log_effect
from .engine.loader import load_lore
from .logging import get_logger
from .narrator import NarratorClient
from .session import SessionRegistry

logger = get_logger(__name__)


def _get_data_path() -> Path:
    """Locate lore.json via importlib.resources (works when installed in a venv)."""
    return resources.files("eden.data").joinpath("lore.json")


def create_app(config: Config | None = None, narrator: NarratorClient | None = None) -> Flask:
    """Create and configure the Flask application."""
    config = config or Config.from_env()

    app = Flask(__name__)
    app.config["EDEN"] = config

    lore = load_lore(_get_data_path())
    logger.info("lore_loaded", entries=len(lore.entries))

    if narrator is None and config.narrator_url:
        narrator = NarratorClient(config.narrator_url, timeout=config.narrator_timeout)
        atexit.register(narrator.close)
        logger.info("narrator_configured", url=config.narrator_url)
    elif narrator is None:
        logger.info("narrator_disabled")

    app.extensions["eden_sessions"] = SessionRegistry(
        narrator=narrator,
        lore=lore,
        seed=config.seed,
        effects_sink=log_effect,
        max_sessions=config.max_sessions,
    )

    from .routes import home, play

    home.register_routes(app)
    play.register_routes(app)

    logger.info("startup_complete")
    return app


def get_registry(app: Flask) -> SessionRegistry:
    """Get the session registry from the app."""
    return app.extensions["eden_sessions"]
