import random
import threading
import time
import unittest

from tambola.game.claims import ClaimOutcome, ClaimType
from tambola.game.generator import TicketGenerator
from tambola.game.grid import layout_problems, row_numbers, ticket_numbers
from tambola.game.prizes import PrizeTable
from tambola.services.game import (
    AllNumbersCalled,
    GameService,
    InvalidDrawCount,
    InvalidNumber,
    NumberAlreadyCalled,
    TicketNotFound,
)
from tambola.services.store import InMemoryGameStore


class SlowStore(InMemoryGameStore):
    """Widens the gap between reading and writing state."""

    delay = 0.05

    def get_ticket(self, tournament_id, user_id):
        ticket = super().get_ticket(tournament_id, user_id)
        time.sleep(self.delay)
        return ticket

    def get_called_numbers(self, tournament_id):
        numbers = super().get_called_numbers(tournament_id)
        time.sleep(self.delay)
        return numbers


def _run_in_threads(target, count=2):
    results = []
    barrier = threading.Barrier(count)

    def worker():
        barrier.wait()
        results.append(target())

    threads = [threading.Thread(target=worker) for _ in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return results


class GameServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryGameStore()
        self.service = GameService(
            self.store,
            generator=TicketGenerator(rng=random.Random(5)),
            rng=random.Random(9),
        )

    def test_subscribe_stores_ticket_and_opens_draw(self) -> None:
        ticket = self.service.subscribe("t1", "alice")

        self.assertTrue(ticket.ticket_id.startswith("ticket-t1-alice-"))
        self.assertEqual(layout_problems(ticket.numbers), [])
        self.assertEqual(self.store.get_ticket("t1", "alice"), ticket)
        self.assertEqual(self.store.get_called_numbers("t1"), [])

    def test_resubscribe_replaces_ticket(self) -> None:
        first = self.service.subscribe("t1", "alice")
        second = self.service.subscribe("t1", "alice")
        self.assertEqual(self.service.get_ticket("t1", "alice"), second)
        self.assertNotEqual(first.numbers, second.numbers)

    def test_unsubscribe(self) -> None:
        self.service.subscribe("t1", "alice")
        self.service.unsubscribe("t1", "alice")
        with self.assertRaises(TicketNotFound):
            self.service.get_ticket("t1", "alice")
        with self.assertRaises(TicketNotFound):
            self.service.unsubscribe("t1", "alice")

    def test_claim_uses_stored_marks_and_records_prize(self) -> None:
        ticket = self.service.subscribe("t1", "alice")
        row = row_numbers(ticket.numbers, 0)
        self.service.update_marks("t1", "alice", row)

        result, record = self.service.submit_claim("t1", "alice", "first-row")

        self.assertTrue(result.is_valid)
        self.assertIsNotNone(record)
        self.assertEqual(record.claim_type, ClaimType.FIRST_ROW)
        self.assertEqual(record.prize.amount, 200)
        self.assertEqual(record.prize.currency, "INR")
        self.assertTrue(self.service.get_ticket("t1", "alice").claim_state.first_row)
        self.assertEqual(self.service.claim_history("t1", "alice"), [record])

        repeat, repeat_record = self.service.submit_claim("t1", "alice", "first-row")
        self.assertEqual(repeat.outcome, ClaimOutcome.ALREADY_CLAIMED)
        self.assertIsNone(repeat_record)
        self.assertEqual(len(self.service.claim_history("t1", "alice")), 1)

    def test_full_house_sequence_with_custom_prizes(self) -> None:
        prizes = PrizeTable(amounts={ClaimType.FULL_HOUSE: 5000}, currency="USD")
        service = GameService(self.store, generator=TicketGenerator(rng=random.Random(1)), prizes=prizes)
        ticket = service.subscribe("t2", "bob")
        numbers = ticket_numbers(ticket.numbers)

        result, record = service.submit_claim("t2", "bob", "full-house", numbers)
        self.assertTrue(result.is_valid)
        self.assertEqual(record.prize.amount, 5000)
        self.assertEqual(record.prize.currency, "USD")

        result, record = service.submit_claim("t2", "bob", "second-full-house", numbers)
        self.assertTrue(result.is_valid)
        self.assertEqual(record.prize.amount, 0)

        result, record = service.submit_claim("t2", "bob", "second-full-house", numbers)
        self.assertEqual(result.outcome, ClaimOutcome.ALREADY_CLAIMED)
        self.assertIsNone(record)

    def test_rejected_claim_leaves_state_alone(self) -> None:
        self.service.subscribe("t1", "alice")
        result, record = self.service.submit_claim("t1", "alice", "fast-five", [])
        self.assertEqual(result.outcome, ClaimOutcome.INCOMPLETE_CLAIM)
        self.assertIsNone(record)
        self.assertEqual(self.service.get_ticket("t1", "alice").claim_state.claimed, [])
        self.assertEqual(self.service.claim_history("t1", "alice"), [])

    def test_reset_clears_marks_and_claims(self) -> None:
        ticket = self.service.subscribe("t1", "alice")
        numbers = ticket_numbers(ticket.numbers)
        self.service.submit_claim("t1", "alice", "fast-five", numbers[:5])

        reset = self.service.reset_ticket("t1", "alice")

        self.assertEqual(reset.marked_numbers, frozenset())
        self.assertEqual(reset.claim_state.claimed, [])
        self.assertEqual(reset.numbers, ticket.numbers)
        self.assertEqual(self.service.claim_history("t1", "alice"), [])

        result, record = self.service.submit_claim("t1", "alice", "fast-five", numbers[:5])
        self.assertTrue(result.is_valid)
        self.assertEqual(len(self.service.claim_history("t1", "alice")), 1)

    def test_claim_without_ticket(self) -> None:
        with self.assertRaises(TicketNotFound):
            self.service.submit_claim("t1", "nobody", "fast-five", [])

    def test_unknown_claim_type_checked_before_ticket_lookup(self) -> None:
        result, record = self.service.submit_claim("t1", "nobody", "four-corners", [])
        self.assertEqual(result.outcome, ClaimOutcome.UNKNOWN_CLAIM_TYPE)
        self.assertEqual(result.message, "Invalid claim type")
        self.assertIsNone(record)

    def test_call_number_rules(self) -> None:
        self.assertEqual(self.service.call_number("t1", 17), [17])
        self.assertEqual(self.service.call_number("t1", 90), [17, 90])
        with self.assertRaises(NumberAlreadyCalled):
            self.service.call_number("t1", 17)
        with self.assertRaises(InvalidNumber):
            self.service.call_number("t1", 91)
        with self.assertRaises(InvalidNumber):
            self.service.call_number("t1", 0)

    def test_draw_numbers_until_exhausted(self) -> None:
        drawn, called = self.service.draw_numbers("t1", 10)
        self.assertEqual(len(drawn), 10)
        self.assertEqual(len(set(called)), 10)

        while len(called) < 90:
            _, called = self.service.draw_numbers("t1", 10)
        self.assertEqual(sorted(called), list(range(1, 91)))
        with self.assertRaises(AllNumbersCalled):
            self.service.draw_numbers("t1", 1)

        self.service.reset_numbers("t1")
        self.assertEqual(self.service.called_numbers("t1"), [])

    def test_draw_count_bounds(self) -> None:
        for count in (0, 11):
            with self.assertRaises(InvalidDrawCount):
                self.service.draw_numbers("t1", count)


class ConcurrentGameServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = SlowStore()
        self.service = GameService(
            self.store,
            generator=TicketGenerator(rng=random.Random(5)),
            rng=random.Random(9),
        )

    def test_parallel_full_house_claims_pay_once(self) -> None:
        ticket = self.service.subscribe("t1", "alice")
        numbers = ticket_numbers(ticket.numbers)

        results = _run_in_threads(
            lambda: self.service.submit_claim("t1", "alice", "full-house", numbers)
        )

        accepted = [result for result, record in results if result.is_valid]
        rejected = [result for result, record in results if not result.is_valid]
        self.assertEqual(len(accepted), 1)
        self.assertEqual(rejected[0].outcome, ClaimOutcome.ALREADY_CLAIMED)
        self.assertEqual(len(self.service.claim_history("t1", "alice")), 1)
        self.assertTrue(self.service.get_ticket("t1", "alice").claim_state.full_house)

    def test_parallel_draws_keep_every_number(self) -> None:
        results = _run_in_threads(lambda: self.service.draw_numbers("t1", 3))

        drawn = [number for batch, _ in results for number in batch]
        stored = self.service.called_numbers("t1")
        self.assertEqual(len(stored), 6)
        self.assertEqual(len(set(stored)), 6)
        self.assertEqual(sorted(stored), sorted(drawn))

    def test_parallel_calls_keep_both_numbers(self) -> None:
        pending = [17, 42]
        lock = threading.Lock()

        def call_next():
            with lock:
                number = pending.pop()
            return self.service.call_number("t1", number)

        _run_in_threads(call_next)

        self.assertEqual(sorted(self.service.called_numbers("t1")), [17, 42])


if __name__ == "__main__":
    unittest.main()
