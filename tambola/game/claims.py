from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple, Union

from .grid import Cell, row_numbers, ticket_numbers

FAST_FIVE_COUNT = 5


class ClaimType(str, Enum):
    FAST_FIVE = "fast-five"
    FIRST_ROW = "first-row"
    SECOND_ROW = "second-row"
    THIRD_ROW = "third-row"
    FULL_HOUSE = "full-house"
    SECOND_FULL_HOUSE = "second-full-house"

    @classmethod
    def parse(cls, value: Union[str, "ClaimType", None]) -> Optional["ClaimType"]:
        if isinstance(value, ClaimType):
            return value
        try:
            return cls(value)
        except (TypeError, ValueError):
            return None

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def row_index(self) -> Optional[int]:
        return _ROW_INDEX.get(self)


_LABELS = {
    ClaimType.FAST_FIVE: "Fast Five",
    ClaimType.FIRST_ROW: "first row",
    ClaimType.SECOND_ROW: "second row",
    ClaimType.THIRD_ROW: "third row",
    ClaimType.FULL_HOUSE: "full house",
    ClaimType.SECOND_FULL_HOUSE: "second full house",
}

_ROW_INDEX = {
    ClaimType.FIRST_ROW: 0,
    ClaimType.SECOND_ROW: 1,
    ClaimType.THIRD_ROW: 2,
}


class ClaimOutcome(str, Enum):
    VALID = "valid"
    INVALID_NUMBERS = "invalid-numbers"
    INCOMPLETE_CLAIM = "incomplete-claim"
    ALREADY_CLAIMED = "already-claimed"
    UNKNOWN_CLAIM_TYPE = "unknown-claim-type"


@dataclass(frozen=True)
class ClaimState:
    """Which prizes a single ticket has already won."""

    fast_five: bool = False
    first_row: bool = False
    second_row: bool = False
    third_row: bool = False
    full_house: bool = False
    second_full_house: bool = False

    def is_claimed(self, claim_type: ClaimType) -> bool:
        return getattr(self, _field_name(claim_type))

    def mark(self, claim_type: ClaimType) -> "ClaimState":
        return replace(self, **{_field_name(claim_type): True})

    def to_dict(self) -> Dict[str, bool]:
        return {claim_type.value: self.is_claimed(claim_type) for claim_type in ClaimType}

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, bool]]) -> "ClaimState":
        if not data:
            return cls()
        values = {}
        for claim_type in ClaimType:
            if data.get(claim_type.value):
                values[_field_name(claim_type)] = True
        return cls(**values)

    @property
    def claimed(self) -> List[ClaimType]:
        return [claim_type for claim_type in ClaimType if self.is_claimed(claim_type)]


def _field_name(claim_type: ClaimType) -> str:
    return claim_type.value.replace("-", "_")


@dataclass(frozen=True)
class ClaimResult:
    is_valid: bool
    message: str
    outcome: ClaimOutcome

    def to_dict(self) -> Dict[str, object]:
        return {"is_valid": self.is_valid, "message": self.message, "outcome": self.outcome.value}


def _join(numbers: Iterable[object]) -> str:
    return ", ".join(str(n) for n in numbers)


def _display_order(value: object) -> Tuple[int, int, str]:
    if isinstance(value, int) and not isinstance(value, bool):
        return (0, value, "")
    return (1, 0, str(value))


def _fail(outcome: ClaimOutcome, message: str) -> ClaimResult:
    return ClaimResult(is_valid=False, message=message, outcome=outcome)


def validate_claim(
    claim_type: Union[str, ClaimType, None],
    marked_numbers: Iterable[int],
    ticket: Sequence[Sequence[Cell]],
    claim_state: Optional[ClaimState] = None,
) -> ClaimResult:
    """Decide whether `claim_type` can be awarded for `ticket`.

    Checks run in a fixed order and stop at the first failure: the claim
    type must be known, every marked number must be on the ticket, the
    pattern for the claim must be fully marked, and the claim must still
    be open in `claim_state`. Nothing is mutated; recording a successful
    claim is up to the caller.
    """
    parsed = ClaimType.parse(claim_type)
    if parsed is None:
        return _fail(ClaimOutcome.UNKNOWN_CLAIM_TYPE, "Invalid claim type")

    state = claim_state or ClaimState()
    on_ticket = ticket_numbers(ticket)
    allowed = set(on_ticket)
    marked: Set[int] = set()
    off_ticket: List[object] = []
    for value in marked_numbers or ():
        if isinstance(value, int) and not isinstance(value, bool) and value in allowed:
            marked.add(value)
        elif value not in off_ticket:
            off_ticket.append(value)
    off_ticket.sort(key=_display_order)
    if off_ticket:
        return _fail(ClaimOutcome.INVALID_NUMBERS, f"Invalid numbers marked: {_join(off_ticket)}")

    if parsed is ClaimType.FAST_FIVE:
        if len(marked) < FAST_FIVE_COUNT:
            return _fail(
                ClaimOutcome.INCOMPLETE_CLAIM,
                f"Fast Five requires at least {FAST_FIVE_COUNT} marked numbers",
            )
    elif parsed.row_index is not None:
        missing = [n for n in row_numbers(ticket, parsed.row_index) if n not in marked]
        if missing:
            return _fail(
                ClaimOutcome.INCOMPLETE_CLAIM,
                f"{parsed.label} is not complete. Missing numbers: {_join(missing)}",
            )
    else:
        missing = [n for n in on_ticket if n not in marked]
        if missing:
            return _fail(
                ClaimOutcome.INCOMPLETE_CLAIM,
                f"Full House is not complete. Missing numbers: {_join(missing)}",
            )

    if parsed is ClaimType.SECOND_FULL_HOUSE and not state.is_claimed(ClaimType.FULL_HOUSE):
        return _fail(
            ClaimOutcome.ALREADY_CLAIMED,
            "Second full house requires full house to be claimed first",
        )
    if state.is_claimed(parsed):
        return _fail(ClaimOutcome.ALREADY_CLAIMED, f"{parsed.label} has already been claimed")

    return ClaimResult(is_valid=True, message=f"Valid {parsed.label} claim", outcome=ClaimOutcome.VALID)
