from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import requests

from .config import CallerSettings


@dataclass(frozen=True)
class CalledNumbers:
    """Snapshot of a tournament's draw as reported by the game server."""

    tournament_id: str
    numbers: Sequence[int]
    new_numbers: Sequence[int] = ()

    @property
    def latest(self) -> Optional[int]:
        return self.numbers[-1] if self.numbers else None


class CallerClient:
    """Talk to the game server's called-numbers endpoints."""

    def __init__(self, settings: CallerSettings, session: Optional[requests.Session] = None) -> None:
        self._settings = settings
        self._session = session or requests.Session()

    def _url(self, tournament_id: str, suffix: str = "") -> str:
        return f"{self._settings.base_url}/tournaments/{tournament_id}/numbers{suffix}"

    def _headers(self) -> Dict[str, str]:
        if self._settings.admin_token:
            return {"X-Admin-Token": self._settings.admin_token}
        return {}

    async def get_called_numbers(self, tournament_id: str) -> CalledNumbers:
        payload = await asyncio.to_thread(self._request, "GET", self._url(tournament_id), None)
        return self._parse_payload(tournament_id, payload)

    async def draw(self, tournament_id: str, count: int) -> CalledNumbers:
        payload = await asyncio.to_thread(
            self._request, "POST", self._url(tournament_id, "/draw"), {"count": count}
        )
        return self._parse_payload(tournament_id, payload)

    async def close(self) -> None:
        self._session.close()

    def _request(self, method: str, url: str, body: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
        resp = self._session.request(
            method,
            url,
            json=body,
            headers=self._headers(),
            timeout=self._settings.timeout_seconds,
        )
        if resp.status_code >= 400:
            try:
                detail = resp.json().get("error")
            except ValueError:
                detail = resp.text
            raise RuntimeError(f"{method} {url} failed with {resp.status_code}: {detail}")
        data = resp.json()
        if not isinstance(data, Mapping):
            raise ValueError("Game server returned non-object payload")
        return data

    @classmethod
    def _parse_payload(cls, tournament_id: str, payload: Mapping[str, Any]) -> CalledNumbers:
        try:
            raw_numbers = payload["called_numbers"]
        except KeyError as exc:
            raise ValueError("Missing called_numbers field") from exc
        return CalledNumbers(
            tournament_id=tournament_id,
            numbers=cls._parse_numbers(raw_numbers, "called_numbers"),
            new_numbers=cls._parse_numbers(payload.get("new_numbers") or (), "new_numbers"),
        )

    @staticmethod
    def _parse_numbers(raw: Any, field_name: str) -> Sequence[int]:
        if not isinstance(raw, Iterable) or isinstance(raw, (str, bytes, Mapping)):
            raise ValueError(f"{field_name} field must be a list")
        numbers: List[int] = []
        for value in raw:
            if not isinstance(value, int):
                raise ValueError(f"{field_name} must contain integers")
            numbers.append(value)
        return tuple(numbers)
