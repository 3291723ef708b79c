"""Eden: Terminal Zero, a text RPG with an optional remote narrator."""

from .app import create_app
from .config import Config
from .logging import configure_logging, get_logger

__all__ = ["main", "create_app", "Config"]


def main() -> None:
    """Entry point for the eden application."""
    config = Config.from_env()

    configure_logging(
        log_level=config.log_level,
        log_file=config.log_file,
        json_logs=config.json_logs,
        hash_session_ids=config.hash_session_ids,
    )

    logger = get_logger(__name__)
    logger.info(
        "application_starting",
        host=config.host,
        port=config.port,
        log_level=config.log_level,
        narrator_url=config.narrator_url,
    )

    app = create_app(config)
    app.run(host=config.host, port=config.port, threaded=True)
