from __future__ import annotations

import random
from typing import Optional

from flask import Flask, jsonify
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from .config import load_settings
from .game.generator import TicketGenerator
from .routes.claims import bp as claims_bp
from .routes.common import EXTENSION_KEY
from .routes.health import bp as health_bp
from .routes.numbers import bp as numbers_bp
from .routes.tickets import bp as tickets_bp
from .services.game import GameError, GameService
from .services.store import GameStore


def _default_store() -> GameStore:
    from .db import init_db
    from .services.sql_store import SqlGameStore

    init_db()
    return SqlGameStore()


def create_app(store: Optional[GameStore] = None, rng: Optional[random.Random] = None) -> Flask:
    settings = load_settings()
    app = Flask(__name__)
    app.config["SECRET_KEY"] = settings.flask.secret_key

    game_store = store if store is not None else _default_store()
    app.extensions[EXTENSION_KEY] = GameService(
        game_store,
        generator=TicketGenerator(rng=rng, max_attempts=settings.ticket_max_attempts),
        prizes=settings.prizes,
        rng=rng,
    )

    app.register_blueprint(health_bp)
    app.register_blueprint(tickets_bp)
    app.register_blueprint(claims_bp)
    app.register_blueprint(numbers_bp)

    @app.errorhandler(GameError)
    def handle_game_error(exc: GameError):
        return jsonify({"success": False, "error": str(exc)}), exc.status_code

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        details = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in exc.errors()
        ]
        return jsonify({"success": False, "error": "invalid request", "details": details}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return jsonify({"success": False, "error": exc.description}), exc.code

    @app.errorhandler(Exception)
    def handle_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        return jsonify({"success": False, "error": "Internal server error", "details": str(exc)}), 500

    return app
