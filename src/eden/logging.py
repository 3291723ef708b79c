"""Logging configuration for Eden."""

import hashlib
import sys
from pathlib import Path
from typing import Any

import structlog

COMMAND_PREVIEW_CHARS = 80


def hash_session_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Hash player session ids in log events for privacy."""
    if "session_id" in event_dict:
        sid = event_dict["session_id"]
        if sid and sid != "unknown":
            hashed = hashlib.sha256(sid.encode()).hexdigest()[:12]
            event_dict["session_hash"] = hashed
            del event_dict["session_id"]
    return event_dict


def truncate_command_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Keep free-text player commands from flooding the log."""
    command = event_dict.get("command")
    if isinstance(command, str) and len(command) > COMMAND_PREVIEW_CHARS:
        event_dict["command"] = command[:COMMAND_PREVIEW_CHARS] + "..."
    return event_dict


def _level_to_int(level: str) -> int:
    levels = {
        "DEBUG": 10,
        "INFO": 20,
        "WARNING": 30,
        "ERROR": 40,
        "CRITICAL": 50,
    }
    return levels.get(level.upper(), 20)


def configure_logging(
    log_level: str = "INFO",
    log_file: Path | None = None,
    json_logs: bool = False,
    hash_session_ids: bool = True,
) -> None:
    """Configure structured logging for the application."""
    if log_file:
        output_stream = open(log_file, "a")
    else:
        output_stream = sys.stdout

    base_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(
            fmt="iso" if json_logs else "%Y-%m-%d %H:%M:%S"
        ),
        truncate_command_processor,
    ]

    if hash_session_ids:
        base_processors.append(hash_session_id_processor)

    if json_logs:
        processors = base_processors + [structlog.processors.JSONRenderer()]
    else:
        processors = base_processors + [
            structlog.dev.ConsoleRenderer(colors=output_stream.isatty())
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_level_to_int(log_level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output_stream),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger instance for a module."""
    return structlog.get_logger(name)
