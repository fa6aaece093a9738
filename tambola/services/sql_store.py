from __future__ import annotations

from typing import List, Optional

from ..db import session_scope
from ..game.claims import ClaimState, ClaimType
from ..game.grid import freeze
from ..game.prizes import Prize
from ..models import CalledNumbersRow, ClaimRow, TicketRow
from .store import ClaimRecord, GameStore, StoredTicket


def _to_ticket(row: TicketRow) -> StoredTicket:
    return StoredTicket(
        ticket_id=row.id,
        tournament_id=row.tournament_id,
        user_id=row.user_id,
        numbers=freeze(row.get_numbers()),
        marked_numbers=frozenset(row.get_marked()),
        claim_state=ClaimState.from_dict(row.get_claim_state()),
        created_at=row.created_at,
        is_active=row.is_active,
    )


def _to_claim(row: ClaimRow) -> ClaimRecord:
    return ClaimRecord(
        claim_id=row.id,
        tournament_id=row.tournament_id,
        user_id=row.user_id,
        ticket_id=row.ticket_id,
        claim_type=ClaimType(row.claim_type),
        prize=Prize(amount=row.amount, currency=row.currency),
        created_at=row.created_at,
    )


class SqlGameStore(GameStore):
    def _find_ticket(self, session, tournament_id: str, user_id: str) -> Optional[TicketRow]:
        return (
            session.query(TicketRow)
            .filter(TicketRow.tournament_id == tournament_id, TicketRow.user_id == user_id)
            .one_or_none()
        )

    def get_ticket(self, tournament_id: str, user_id: str) -> Optional[StoredTicket]:
        with session_scope() as session:
            row = self._find_ticket(session, tournament_id, user_id)
            return _to_ticket(row) if row else None

    def save_ticket(self, ticket: StoredTicket) -> None:
        with session_scope() as session:
            row = self._find_ticket(session, ticket.tournament_id, ticket.user_id)
            if row is not None and row.id != ticket.ticket_id:
                session.delete(row)
                session.flush()
                row = None
            if row is None:
                row = TicketRow(
                    id=ticket.ticket_id,
                    tournament_id=ticket.tournament_id,
                    user_id=ticket.user_id,
                    created_at=ticket.created_at,
                )
                session.add(row)
            row.set_numbers([list(r) for r in ticket.numbers])
            row.set_marked(list(ticket.marked_numbers))
            row.set_claim_state(ticket.claim_state.to_dict())
            row.is_active = ticket.is_active
            session.flush()

    def delete_ticket(self, tournament_id: str, user_id: str) -> bool:
        with session_scope() as session:
            row = self._find_ticket(session, tournament_id, user_id)
            if row is None:
                return False
            session.delete(row)
            return True

    def get_called_numbers(self, tournament_id: str) -> Optional[List[int]]:
        with session_scope() as session:
            row = session.get(CalledNumbersRow, tournament_id)
            return row.get_numbers() if row else None

    def save_called_numbers(self, tournament_id: str, numbers: List[int]) -> None:
        with session_scope() as session:
            row = session.get(CalledNumbersRow, tournament_id)
            if row is None:
                row = CalledNumbersRow(tournament_id=tournament_id)
                session.add(row)
            row.set_numbers(list(numbers))
            session.flush()

    def add_claim(self, record: ClaimRecord) -> None:
        with session_scope() as session:
            session.add(
                ClaimRow(
                    id=record.claim_id,
                    tournament_id=record.tournament_id,
                    user_id=record.user_id,
                    ticket_id=record.ticket_id,
                    claim_type=record.claim_type.value,
                    amount=record.prize.amount,
                    currency=record.prize.currency,
                    created_at=record.created_at,
                )
            )

    def list_claims(self, tournament_id: str, user_id: str) -> List[ClaimRecord]:
        with session_scope() as session:
            rows = (
                session.query(ClaimRow)
                .filter(ClaimRow.tournament_id == tournament_id, ClaimRow.user_id == user_id)
                .order_by(ClaimRow.created_at)
                .all()
            )
            return [_to_claim(row) for row in rows]

    def clear_claims(self, ticket_id: str) -> None:
        with session_scope() as session:
            session.query(ClaimRow).filter(ClaimRow.ticket_id == ticket_id).delete()
