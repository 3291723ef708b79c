"""Gameplay routes."""

from functools import wraps

from flask import Flask, current_app, jsonify, request

from ..app import get_registry
from ..session import GameSession

SESSION_HEADER = "X-Eden-Session"
MAX_COMMAND_CHARS = 500


def _error(message: str, status: int = 400):
    return jsonify({"error": message}), status


def _json_object() -> dict:
    """The request body if it is a JSON object, otherwise an empty dict."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def require_session(view):
    """Resolve the caller's GameSession from the session header."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        session_id = request.headers.get(SESSION_HEADER, "").strip()
        if not session_id:
            return _error(f"missing {SESSION_HEADER} header")
        game = get_registry(current_app).load_or_create(session_id)
        return view(game, *args, **kwargs)

    return wrapper


def _register_action_routes(app: Flask) -> None:
    """Register command and item routes."""

    @app.post("/api/game/command")
    @require_session
    def command(game: GameSession):
        data = _json_object()
        text = data.get("command")
        if not isinstance(text, str):
            return _error("body must be a JSON object with a string 'command'")
        if len(text) > MAX_COMMAND_CHARS:
            return _error(f"command longer than {MAX_COMMAND_CHARS} characters")
        return jsonify(game.process_command(text))

    @app.post("/api/game/use/<item_id>")
    @require_session
    def use_item(game: GameSession, item_id: str):
        return jsonify(game.use_item(item_id))


def _register_info_routes(app: Flask) -> None:
    """Register state and game management routes."""

    @app.get("/api/game/state")
    @require_session
    def state(game: GameSession):
        return jsonify(game.view())

    @app.post("/api/game/reset")
    @require_session
    def reset(game: GameSession):
        """Reset game with confirmation."""
        data = _json_object()
        if str(data.get("confirm", "")).strip().upper() != "YES":
            return _error('send {"confirm": "YES"} to start over')
        return jsonify(game.reset())


def register_routes(app: Flask) -> None:
    """Register gameplay routes."""
    _register_action_routes(app)
    _register_info_routes(app)
