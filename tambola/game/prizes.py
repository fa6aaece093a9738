from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping

from .claims import ClaimType

DEFAULT_CURRENCY = "INR"

DEFAULT_PRIZE_AMOUNTS: Mapping[ClaimType, int] = {
    ClaimType.FAST_FIVE: 100,
    ClaimType.FIRST_ROW: 200,
    ClaimType.SECOND_ROW: 200,
    ClaimType.THIRD_ROW: 200,
    ClaimType.FULL_HOUSE: 1000,
    ClaimType.SECOND_FULL_HOUSE: 500,
}


@dataclass(frozen=True)
class Prize:
    amount: int
    currency: str

    def to_dict(self) -> Dict[str, object]:
        return {"amount": self.amount, "currency": self.currency}


@dataclass(frozen=True)
class PrizeTable:
    amounts: Mapping[ClaimType, int] = field(default_factory=lambda: dict(DEFAULT_PRIZE_AMOUNTS))
    currency: str = DEFAULT_CURRENCY

    def lookup(self, claim_type: ClaimType) -> Prize:
        return Prize(amount=self.amounts.get(claim_type, 0), currency=self.currency)
