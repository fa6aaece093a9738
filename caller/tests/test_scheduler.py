import asyncio
import unittest

from caller.client import CalledNumbers
from caller.config import CallerSettings
from caller.scheduler import CallerScheduler


class FakeFeed:
    def __init__(self, called=()) -> None:
        self.called = list(called)
        self.draws = []
        self.closed = False

    async def get_called_numbers(self, tournament_id: str) -> CalledNumbers:
        return CalledNumbers(tournament_id=tournament_id, numbers=tuple(self.called))

    async def draw(self, tournament_id: str, count: int) -> CalledNumbers:
        self.draws.append((tournament_id, count))
        candidates = [n for n in range(1, 91) if n not in self.called]
        new_numbers = candidates[:count]
        self.called.extend(new_numbers)
        return CalledNumbers(
            tournament_id=tournament_id,
            numbers=tuple(self.called),
            new_numbers=tuple(new_numbers),
        )

    async def close(self) -> None:
        self.closed = True


class CallerSchedulerTests(unittest.TestCase):
    def _settings(self, **overrides) -> CallerSettings:
        settings = CallerSettings(
            base_url="http://game.test",
            tournament_id="t1",
            interval_seconds=0,
            batch_size=3,
        )
        return settings.copy(**overrides)

    def test_requires_tournament(self) -> None:
        with self.assertRaises(RuntimeError):
            CallerScheduler(self._settings(tournament_id=""), FakeFeed())

    def test_run_once_calls_a_batch(self) -> None:
        feed = FakeFeed()
        result = asyncio.run(CallerScheduler(self._settings(), feed).run_once())

        self.assertEqual(result.new_numbers, (1, 2, 3))
        self.assertEqual(result.total_called, 3)
        self.assertEqual(feed.draws, [("t1", 3)])
        self.assertTrue(feed.closed)

    def test_batch_is_trimmed_to_limit(self) -> None:
        feed = FakeFeed(called=range(1, 10))
        settings = self._settings(max_numbers=10)
        result = asyncio.run(CallerScheduler(settings, feed).run_once())

        self.assertEqual(feed.draws, [("t1", 1)])
        self.assertEqual(result.total_called, 10)

    def test_skips_when_limit_reached(self) -> None:
        feed = FakeFeed(called=range(1, 91))
        result = asyncio.run(CallerScheduler(self._settings(), feed).run_once())
        self.assertIsNone(result)
        self.assertEqual(feed.draws, [])

    def test_run_forever_stops_after_all_numbers(self) -> None:
        feed = FakeFeed()
        settings = self._settings(batch_size=10, max_numbers=25)
        asyncio.run(CallerScheduler(settings, feed).run_forever())

        self.assertEqual(len(feed.called), 25)
        self.assertEqual([count for _, count in feed.draws], [10, 10, 5])
        self.assertTrue(feed.closed)


if __name__ == "__main__":
    unittest.main()
