"""Configuration for Eden."""

import os
from dataclasses import dataclass
from pathlib import Path


def _flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.lower() in ("true", "1", "yes")


@dataclass
class Config:
    """Application configuration."""

    host: str = "127.0.0.1"
    port: int = 5000
    narrator_url: str | None = None
    narrator_timeout: float = 30.0
    seed: int | None = None
    log_level: str = "INFO"
    log_file: Path | None = None
    json_logs: bool = False
    hash_session_ids: bool = True
    max_sessions: int = 1000

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        narrator_url = os.getenv("EDEN_NARRATOR_URL")
        seed = os.getenv("EDEN_SEED")
        log_file = os.getenv("EDEN_LOG_FILE")

        return cls(
            host=os.getenv("EDEN_HOST", cls.host),
            port=int(os.getenv("EDEN_PORT", str(cls.port))),
            narrator_url=narrator_url.rstrip("/") if narrator_url else None,
            narrator_timeout=float(
                os.getenv("EDEN_NARRATOR_TIMEOUT", str(cls.narrator_timeout))
            ),
            seed=int(seed) if seed else None,
            log_level=os.getenv("EDEN_LOG_LEVEL", cls.log_level),
            log_file=Path(log_file) if log_file else None,
            json_logs=_flag("EDEN_JSON_LOGS", False),
            hash_session_ids=_flag("EDEN_HASH_SESSION_IDS", True),
            max_sessions=int(os.getenv("EDEN_MAX_SESSIONS", str(cls.max_sessions))),
        )
