from __future__ import annotations

import logging
import random
import threading
import time
from typing import Iterable, List, Optional, Tuple

from ..game.claims import ClaimOutcome, ClaimResult, ClaimState, ClaimType, validate_claim
from ..game.generator import TicketGenerator
from ..game.grid import HIGHEST_NUMBER, LOWEST_NUMBER, Ticket
from ..game.prizes import PrizeTable
from .store import ClaimRecord, GameStore, StoredTicket

MAX_DRAW_COUNT = 10

logger = logging.getLogger("tambola.game")


class GameError(Exception):
    status_code = 400


class TicketNotFound(GameError):
    status_code = 404


class InvalidNumber(GameError):
    pass


class NumberAlreadyCalled(GameError):
    pass


class AllNumbersCalled(GameError):
    pass


class InvalidDrawCount(GameError):
    pass


def _now_ms() -> int:
    return int(time.time() * 1000)


class GameService:
    def __init__(
        self,
        store: GameStore,
        generator: Optional[TicketGenerator] = None,
        prizes: Optional[PrizeTable] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._store = store
        self._generator = generator or TicketGenerator()
        self._prizes = prizes or PrizeTable()
        self._rng = rng or random.Random()
        # serialises read-modify-write cycles against the store
        self._lock = threading.Lock()

    # tickets

    def preview_ticket(self) -> Ticket:
        return self._generator.generate()

    def subscribe(self, tournament_id: str, user_id: str) -> StoredTicket:
        """Deal a fresh ticket, replacing any ticket the user already holds."""
        ticket = StoredTicket(
            ticket_id=f"ticket-{tournament_id}-{user_id}-{_now_ms()}",
            tournament_id=tournament_id,
            user_id=user_id,
            numbers=self._generator.generate(),
        )
        with self._lock:
            self._store.save_ticket(ticket)
            self._called_numbers(tournament_id)
        logger.info("Issued ticket %s to user %s in tournament %s", ticket.ticket_id, user_id, tournament_id)
        return ticket

    def unsubscribe(self, tournament_id: str, user_id: str) -> None:
        with self._lock:
            deleted = self._store.delete_ticket(tournament_id, user_id)
        if not deleted:
            raise TicketNotFound("No ticket found for this user in the tournament")
        logger.info("User %s left tournament %s", user_id, tournament_id)

    def get_ticket(self, tournament_id: str, user_id: str) -> StoredTicket:
        ticket = self._store.get_ticket(tournament_id, user_id)
        if ticket is None:
            raise TicketNotFound("No ticket found for this user in the tournament")
        return ticket

    def update_marks(self, tournament_id: str, user_id: str, marked: Iterable[int]) -> StoredTicket:
        with self._lock:
            ticket = self.get_ticket(tournament_id, user_id).with_marks(marked)
            self._store.save_ticket(ticket)
        logger.debug("Ticket %s marks: %s", ticket.ticket_id, sorted(ticket.marked_numbers))
        return ticket

    def reset_ticket(self, tournament_id: str, user_id: str) -> StoredTicket:
        """Clear marks, claim flags and the claim records of the current ticket."""
        with self._lock:
            ticket = self.get_ticket(tournament_id, user_id).with_marks(()).with_claim_state(ClaimState())
            self._store.save_ticket(ticket)
            self._store.clear_claims(ticket.ticket_id)
        logger.info("Reset ticket %s", ticket.ticket_id)
        return ticket

    # claims

    def submit_claim(
        self,
        tournament_id: str,
        user_id: str,
        claim_type: str,
        marked: Optional[Iterable[int]] = None,
    ) -> Tuple[ClaimResult, Optional[ClaimRecord]]:
        parsed = ClaimType.parse(claim_type)
        if parsed is None:
            logger.info("Rejected unknown claim type %r from user %s", claim_type, user_id)
            return ClaimResult(False, "Invalid claim type", ClaimOutcome.UNKNOWN_CLAIM_TYPE), None

        with self._lock:
            ticket = self.get_ticket(tournament_id, user_id)
            marked_numbers = ticket.marked_numbers if marked is None else frozenset(marked)

            result = validate_claim(parsed, marked_numbers, ticket.numbers, ticket.claim_state)
            if not result.is_valid:
                logger.info(
                    "Rejected %s claim from user %s in tournament %s: %s",
                    parsed.value,
                    user_id,
                    tournament_id,
                    result.message,
                )
                return result, None

            updated = ticket.with_marks(marked_numbers).with_claim_state(ticket.claim_state.mark(parsed))
            self._store.save_ticket(updated)

            record = ClaimRecord(
                claim_id=f"claim-{tournament_id}-{user_id}-{parsed.value}-{_now_ms()}",
                tournament_id=tournament_id,
                user_id=user_id,
                ticket_id=ticket.ticket_id,
                claim_type=parsed,
                prize=self._prizes.lookup(parsed),
            )
            self._store.add_claim(record)

        logger.info(
            "Accepted %s claim %s (%s %s)",
            parsed.value,
            record.claim_id,
            record.prize.amount,
            record.prize.currency,
        )
        return result, record

    def claim_history(self, tournament_id: str, user_id: str) -> List[ClaimRecord]:
        return self._store.list_claims(tournament_id, user_id)

    # called numbers

    def _called_numbers(self, tournament_id: str) -> List[int]:
        numbers = self._store.get_called_numbers(tournament_id)
        if numbers is None:
            numbers = []
            self._store.save_called_numbers(tournament_id, numbers)
        return numbers

    def called_numbers(self, tournament_id: str) -> List[int]:
        with self._lock:
            return self._called_numbers(tournament_id)

    def call_number(self, tournament_id: str, number: int) -> List[int]:
        if not LOWEST_NUMBER <= number <= HIGHEST_NUMBER:
            raise InvalidNumber(f"Number must be between {LOWEST_NUMBER} and {HIGHEST_NUMBER}")
        with self._lock:
            called = self._called_numbers(tournament_id)
            if number in called:
                raise NumberAlreadyCalled(f"Number {number} has already been called")
            called.append(number)
            self._store.save_called_numbers(tournament_id, called)
        logger.info("Called %s in tournament %s (%s total)", number, tournament_id, len(called))
        return called

    def draw_numbers(self, tournament_id: str, count: int = 1) -> Tuple[List[int], List[int]]:
        """Call up to `count` random numbers; returns (new numbers, all called)."""
        if not 1 <= count <= MAX_DRAW_COUNT:
            raise InvalidDrawCount(f"Count must be between 1 and {MAX_DRAW_COUNT}")
        with self._lock:
            called = self._called_numbers(tournament_id)
            remaining = [n for n in range(LOWEST_NUMBER, HIGHEST_NUMBER + 1) if n not in called]
            if not remaining:
                raise AllNumbersCalled("All numbers have been called")

            drawn = self._rng.sample(remaining, min(count, len(remaining)))
            called.extend(drawn)
            self._store.save_called_numbers(tournament_id, called)
        logger.info("Drew %s in tournament %s (%s total)", drawn, tournament_id, len(called))
        return drawn, called

    def reset_numbers(self, tournament_id: str) -> None:
        with self._lock:
            self._store.save_called_numbers(tournament_id, [])
        logger.info("Reset called numbers for tournament %s", tournament_id)
