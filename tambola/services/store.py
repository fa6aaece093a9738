from __future__ import annotations

import abc
import datetime as dt
from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from ..game.claims import ClaimState, ClaimType
from ..game.grid import Ticket
from ..game.prizes import Prize

TicketKey = Tuple[str, str]


@dataclass(frozen=True)
class StoredTicket:
    ticket_id: str
    tournament_id: str
    user_id: str
    numbers: Ticket
    marked_numbers: FrozenSet[int] = frozenset()
    claim_state: ClaimState = field(default_factory=ClaimState)
    created_at: dt.datetime = field(default_factory=dt.datetime.utcnow)
    is_active: bool = True

    @property
    def key(self) -> TicketKey:
        return (self.tournament_id, self.user_id)

    def with_marks(self, marked: Iterable[int]) -> "StoredTicket":
        return replace(self, marked_numbers=frozenset(marked))

    def with_claim_state(self, state: ClaimState) -> "StoredTicket":
        return replace(self, claim_state=state)

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.ticket_id,
            "tournament_id": self.tournament_id,
            "user_id": self.user_id,
            "numbers": [list(row) for row in self.numbers],
            "marked_numbers": sorted(self.marked_numbers),
            "claim_state": self.claim_state.to_dict(),
            "created_at": self.created_at.isoformat(),
            "is_active": self.is_active,
        }


@dataclass(frozen=True)
class ClaimRecord:
    claim_id: str
    tournament_id: str
    user_id: str
    ticket_id: str
    claim_type: ClaimType
    prize: Prize
    created_at: dt.datetime = field(default_factory=dt.datetime.utcnow)

    def to_dict(self) -> Dict[str, object]:
        return {
            "claim_id": self.claim_id,
            "tournament_id": self.tournament_id,
            "user_id": self.user_id,
            "ticket_id": self.ticket_id,
            "claim_type": self.claim_type.value,
            "is_valid": True,
            "prize": self.prize.to_dict(),
            "created_at": self.created_at.isoformat(),
        }


class GameStore(abc.ABC):
    """Persistence boundary for tickets, called numbers and claim history.

    Tickets are addressed by `(tournament_id, user_id)`; a user holds at most
    one ticket per tournament. Implementations only store and return values,
    game rules live in the service layer.
    """

    @abc.abstractmethod
    def get_ticket(self, tournament_id: str, user_id: str) -> Optional[StoredTicket]:
        ...

    @abc.abstractmethod
    def save_ticket(self, ticket: StoredTicket) -> None:
        """Insert or replace the ticket stored under `ticket.key`."""

    @abc.abstractmethod
    def delete_ticket(self, tournament_id: str, user_id: str) -> bool:
        """Remove a ticket; returns False when nothing was stored."""

    @abc.abstractmethod
    def get_called_numbers(self, tournament_id: str) -> Optional[List[int]]:
        """Numbers called so far in draw order, or None for an unknown tournament."""

    @abc.abstractmethod
    def save_called_numbers(self, tournament_id: str, numbers: List[int]) -> None:
        ...

    @abc.abstractmethod
    def add_claim(self, record: ClaimRecord) -> None:
        ...

    @abc.abstractmethod
    def list_claims(self, tournament_id: str, user_id: str) -> List[ClaimRecord]:
        """Claims for one player, oldest first."""

    @abc.abstractmethod
    def clear_claims(self, ticket_id: str) -> None:
        """Drop every claim recorded against `ticket_id`."""


class InMemoryGameStore(GameStore):
    def __init__(self) -> None:
        self._tickets: Dict[TicketKey, StoredTicket] = {}
        self._called: Dict[str, List[int]] = {}
        self._claims: List[ClaimRecord] = []

    def get_ticket(self, tournament_id: str, user_id: str) -> Optional[StoredTicket]:
        return self._tickets.get((tournament_id, user_id))

    def save_ticket(self, ticket: StoredTicket) -> None:
        self._tickets[ticket.key] = ticket

    def delete_ticket(self, tournament_id: str, user_id: str) -> bool:
        return self._tickets.pop((tournament_id, user_id), None) is not None

    def get_called_numbers(self, tournament_id: str) -> Optional[List[int]]:
        numbers = self._called.get(tournament_id)
        return list(numbers) if numbers is not None else None

    def save_called_numbers(self, tournament_id: str, numbers: List[int]) -> None:
        self._called[tournament_id] = list(numbers)

    def add_claim(self, record: ClaimRecord) -> None:
        self._claims.append(record)

    def list_claims(self, tournament_id: str, user_id: str) -> List[ClaimRecord]:
        return [
            record
            for record in self._claims
            if record.tournament_id == tournament_id and record.user_id == user_id
        ]

    def clear_claims(self, ticket_id: str) -> None:
        self._claims = [record for record in self._claims if record.ticket_id != ticket_id]
