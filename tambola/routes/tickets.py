from __future__ import annotations

import random

from flask import Blueprint, current_app, jsonify, request

from ..config import load_settings
from ..game.generator import TicketGenerator
from ..schemas import MarkUpdateRequest, SubscriptionRequest, TicketResponse
from ..services.store import StoredTicket
from .common import get_game_service

bp = Blueprint("tickets", __name__)


def _ticket_payload(ticket: StoredTicket, message: str, include_called: bool = True):
    payload = {
        "success": True,
        "message": message,
        "ticket": TicketResponse(**ticket.to_dict()).model_dump(),
    }
    if include_called:
        payload["called_numbers"] = get_game_service().called_numbers(ticket.tournament_id)
    return payload


@bp.post("/tournaments/<tournament_id>/subscription")
def subscribe(tournament_id: str):
    payload = request.get_json(force=True, silent=True) or {}
    data = SubscriptionRequest(**payload)
    ticket = get_game_service().subscribe(tournament_id, data.user_id)
    current_app.logger.info("User %s subscribed to tournament %s", data.user_id, tournament_id)
    return jsonify(_ticket_payload(ticket, "Successfully subscribed to tournament", include_called=False)), 201


@bp.delete("/tournaments/<tournament_id>/subscription/<user_id>")
def unsubscribe(tournament_id: str, user_id: str):
    get_game_service().unsubscribe(tournament_id, user_id)
    return jsonify({"success": True, "message": "Successfully unsubscribed from tournament"})


@bp.post("/tournaments/<tournament_id>/tickets")
def create_ticket(tournament_id: str):
    payload = request.get_json(force=True, silent=True) or {}
    data = SubscriptionRequest(**payload)
    ticket = get_game_service().subscribe(tournament_id, data.user_id)
    return jsonify(_ticket_payload(ticket, "Ticket created successfully")), 201


@bp.get("/tournaments/<tournament_id>/tickets/<user_id>")
def get_ticket(tournament_id: str, user_id: str):
    ticket = get_game_service().get_ticket(tournament_id, user_id)
    return jsonify(_ticket_payload(ticket, "Ticket retrieved successfully"))


@bp.put("/tournaments/<tournament_id>/tickets/<user_id>/marks")
def update_marks(tournament_id: str, user_id: str):
    payload = request.get_json(force=True, silent=True) or {}
    data = MarkUpdateRequest(**payload)
    ticket = get_game_service().update_marks(tournament_id, user_id, data.marked_numbers)
    return jsonify(_ticket_payload(ticket, "Ticket updated successfully"))


@bp.post("/tournaments/<tournament_id>/tickets/<user_id>/reset")
def reset_ticket(tournament_id: str, user_id: str):
    ticket = get_game_service().reset_ticket(tournament_id, user_id)
    return jsonify(_ticket_payload(ticket, "Ticket reset successfully"))


@bp.get("/tickets/preview")
def preview_ticket():
    seed = request.args.get("seed")
    if seed is None:
        numbers = get_game_service().preview_ticket()
    else:
        try:
            rng = random.Random(int(seed))
        except ValueError:
            return jsonify({"error": "seed must be an integer"}), 400
        generator = TicketGenerator(rng=rng, max_attempts=load_settings().ticket_max_attempts)
        numbers = generator.generate()
    return jsonify({"numbers": [list(row) for row in numbers], "seed": seed})
