from __future__ import annotations

from functools import wraps

from flask import current_app, jsonify, request

from ..config import load_settings
from ..services.game import GameService

EXTENSION_KEY = "tambola.game"


def get_game_service() -> GameService:
    return current_app.extensions[EXTENSION_KEY]


def _is_admin() -> bool:
    settings = load_settings()
    api_key = settings.admin_api_key
    if api_key:
        provided = request.headers.get("X-Admin-Token")
        if provided != api_key:
            return False
    return True


def admin_required(view):
    """Reject requests without the host token when ADMIN_API_KEY is configured."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if not _is_admin():
            current_app.logger.warning("Rejected host-only request to %s", request.path)
            return jsonify({"error": "unauthorized"}), 401
        return view(*args, **kwargs)

    return wrapper
