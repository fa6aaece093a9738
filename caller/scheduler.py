from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from .client import CalledNumbers
from .config import CallerSettings

TOTAL_NUMBERS = 90


class NumberFeedProtocol(Protocol):
    async def get_called_numbers(self, tournament_id: str) -> CalledNumbers:
        ...

    async def draw(self, tournament_id: str, count: int) -> CalledNumbers:
        ...

    async def close(self) -> None:
        ...


@dataclass
class CallResult:
    tournament_id: str
    new_numbers: Sequence[int]
    total_called: int


class CallerScheduler:
    def __init__(
        self,
        settings: CallerSettings,
        client: NumberFeedProtocol,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if not settings.tournament_id:
            raise RuntimeError("CALLER_TOURNAMENT_ID is not configured.")
        self._settings = settings
        self._client = client
        self._logger = logger or logging.getLogger("tambola.caller")

    @property
    def _limit(self) -> int:
        return min(self._settings.max_numbers, TOTAL_NUMBERS)

    async def run_forever(self) -> None:
        interval = self._settings.interval_seconds
        self._logger.info(
            "Caller loop started for tournament %s; interval=%s batch=%s",
            self._settings.tournament_id,
            interval,
            self._settings.batch_size,
        )
        try:
            while True:
                try:
                    result = await self._call_next()
                    if result is None:
                        self._logger.info("Calling limit reached; exiting loop.")
                        return
                except Exception as exc:
                    self._logger.exception("Caller iteration failed: %s", exc)
                await asyncio.sleep(interval)
        finally:
            await self._client.close()

    async def run_once(self) -> Optional[CallResult]:
        try:
            return await self._call_next()
        finally:
            await self._client.close()

    async def _call_next(self) -> Optional[CallResult]:
        tournament_id = self._settings.tournament_id
        current = await self._client.get_called_numbers(tournament_id)
        remaining = self._limit - len(current.numbers)
        if remaining <= 0:
            self._logger.debug(
                "Tournament %s already has %s numbers called; nothing to do.",
                tournament_id,
                len(current.numbers),
            )
            return None

        count = min(self._settings.batch_size, remaining)
        snapshot = await self._client.draw(tournament_id, count)
        self._logger.info(
            "Called %s in tournament %s (%s/%s)",
            list(snapshot.new_numbers),
            tournament_id,
            len(snapshot.numbers),
            self._limit,
        )
        return CallResult(
            tournament_id=tournament_id,
            new_numbers=snapshot.new_numbers,
            total_called=len(snapshot.numbers),
        )
