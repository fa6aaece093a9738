from __future__ import annotations

from flask import Blueprint, jsonify, request

from ..game.claims import ClaimOutcome
from ..schemas import ClaimRequest, ClaimResponse
from .common import get_game_service

bp = Blueprint("claims", __name__)


@bp.post("/tournaments/<tournament_id>/claims")
def submit_claim(tournament_id: str):
    payload = request.get_json(force=True, silent=True) or {}
    data = ClaimRequest(**payload)

    result, record = get_game_service().submit_claim(
        tournament_id, data.user_id, data.claim_type, data.marked_numbers
    )
    if record is None:
        response = ClaimResponse(
            success=False,
            message=result.message,
            outcome=result.outcome.value,
            is_valid=False,
        )
        status = 400 if result.outcome is ClaimOutcome.UNKNOWN_CLAIM_TYPE else 200
        return jsonify(response.model_dump()), status

    response = ClaimResponse(
        success=True,
        message=f"{record.claim_type.label} claim accepted successfully!",
        outcome=result.outcome.value,
        is_valid=True,
        claim_id=record.claim_id,
        prize=record.prize.to_dict(),
        created_at=record.created_at.isoformat(),
    )
    return jsonify(response.model_dump())


@bp.get("/tournaments/<tournament_id>/claims/<user_id>")
def claim_history(tournament_id: str, user_id: str):
    claims = get_game_service().claim_history(tournament_id, user_id)
    return jsonify({"success": True, "claims": [claim.to_dict() for claim in claims]})
