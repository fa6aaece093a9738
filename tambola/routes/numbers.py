from __future__ import annotations

from flask import Blueprint, jsonify, request

from ..schemas import CallNumberRequest, CalledNumbersResponse, DrawRequest
from .common import admin_required, get_game_service

bp = Blueprint("numbers", __name__)


def _numbers_response(tournament_id, called, message, new_numbers=None):
    response = CalledNumbersResponse(
        message=message,
        tournament_id=tournament_id,
        called_numbers=called,
        latest_number=called[-1] if called else None,
        total_called=len(called),
        new_numbers=new_numbers,
    )
    return jsonify(response.model_dump())


@bp.get("/tournaments/<tournament_id>/numbers")
def list_called(tournament_id: str):
    called = get_game_service().called_numbers(tournament_id)
    return _numbers_response(tournament_id, called, "Called numbers retrieved successfully")


@bp.post("/tournaments/<tournament_id>/numbers")
@admin_required
def call_number(tournament_id: str):
    payload = request.get_json(force=True, silent=True) or {}
    data = CallNumberRequest(**payload)
    called = get_game_service().call_number(tournament_id, data.number)
    return _numbers_response(tournament_id, called, f"Number {data.number} called successfully")


@bp.post("/tournaments/<tournament_id>/numbers/draw")
@admin_required
def draw_numbers(tournament_id: str):
    payload = request.get_json(force=True, silent=True) or {}
    data = DrawRequest(**payload)
    drawn, called = get_game_service().draw_numbers(tournament_id, data.count)
    return _numbers_response(
        tournament_id, called, f"Generated {len(drawn)} new numbers", new_numbers=drawn
    )


@bp.delete("/tournaments/<tournament_id>/numbers")
@admin_required
def reset_numbers(tournament_id: str):
    get_game_service().reset_numbers(tournament_id)
    return _numbers_response(tournament_id, [], "Called numbers reset successfully")
