from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .game.grid import HIGHEST_NUMBER, LOWEST_NUMBER


def _check_number(value: int) -> int:
    if not LOWEST_NUMBER <= value <= HIGHEST_NUMBER:
        raise ValueError(f"Numbers must be between {LOWEST_NUMBER} and {HIGHEST_NUMBER}.")
    return value


class SubscriptionRequest(BaseModel):
    user_id: str = Field(..., min_length=1, description="Player identity within the tournament.")


class MarkUpdateRequest(BaseModel):
    marked_numbers: List[int] = Field(default_factory=list)

    @field_validator("marked_numbers")
    @classmethod
    def validate_marked(cls, value: List[int]) -> List[int]:
        for n in value:
            _check_number(n)
        if len(set(value)) != len(value):
            raise ValueError("Marked numbers must be unique.")
        return value


class ClaimRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    claim_type: str = Field(..., min_length=1)
    marked_numbers: Optional[List[int]] = Field(
        None, description="Numbers to claim with; defaults to the marks stored on the ticket."
    )


class CallNumberRequest(BaseModel):
    number: int

    @field_validator("number")
    @classmethod
    def validate_number(cls, value: int) -> int:
        return _check_number(value)


class DrawRequest(BaseModel):
    count: int = Field(1, ge=1, le=10)


class PrizeResponse(BaseModel):
    amount: int
    currency: str


class TicketResponse(BaseModel):
    id: str
    tournament_id: str
    user_id: str
    numbers: List[List[Optional[int]]]
    marked_numbers: List[int]
    claim_state: dict
    created_at: str
    is_active: bool


class ClaimResponse(BaseModel):
    success: bool
    message: str
    outcome: str
    is_valid: bool
    claim_id: Optional[str] = None
    prize: Optional[PrizeResponse] = None
    created_at: Optional[str] = None


class CalledNumbersResponse(BaseModel):
    success: bool = True
    message: str
    tournament_id: str
    called_numbers: List[int]
    latest_number: Optional[int] = None
    total_called: int
    new_numbers: Optional[List[int]] = None
