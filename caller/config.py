from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


def _int_from_env(value: Optional[str], default: int) -> int:
    if value is None or value == "":
        return default
    return int(value)


def _float_from_env(value: Optional[str], default: float) -> float:
    if value is None or value == "":
        return default
    return float(value)


@dataclass(frozen=True)
class CallerSettings:
    base_url: str = "http://localhost:5000"
    tournament_id: str = ""
    admin_token: Optional[str] = None
    interval_seconds: float = 5.0
    batch_size: int = 1
    max_numbers: int = 90
    timeout_seconds: int = 10

    def copy(self, **updates) -> "CallerSettings":
        return replace(self, **updates)


def load_from_environment() -> CallerSettings:
    return CallerSettings(
        base_url=os.getenv("CALLER_BASE_URL", "http://localhost:5000").rstrip("/"),
        tournament_id=os.getenv("CALLER_TOURNAMENT_ID", ""),
        admin_token=os.getenv("CALLER_ADMIN_TOKEN") or None,
        interval_seconds=_float_from_env(os.getenv("CALLER_INTERVAL_SECONDS"), 5.0),
        batch_size=_int_from_env(os.getenv("CALLER_BATCH_SIZE"), 1),
        max_numbers=_int_from_env(os.getenv("CALLER_MAX_NUMBERS"), 90),
        timeout_seconds=_int_from_env(os.getenv("CALLER_TIMEOUT_SECONDS"), 10),
    )


@lru_cache(maxsize=1)
def load_config(dotenv_path: Optional[str] = None) -> CallerSettings:
    if dotenv_path:
        load_dotenv(dotenv_path)
    else:
        default_path = pathlib.Path(".env")
        if default_path.exists():
            load_dotenv(default_path)
    return load_from_environment()
