from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Optional

from dotenv import load_dotenv

from .game.claims import ClaimType
from .game.generator import DEFAULT_MAX_ATTEMPTS
from .game.prizes import DEFAULT_CURRENCY, DEFAULT_PRIZE_AMOUNTS, PrizeTable


@dataclass(frozen=True)
class FlaskSettings:
    secret_key: str = "tambola-dev-secret"
    debug: bool = True


@dataclass(frozen=True)
class AppSettings:
    flask: FlaskSettings
    database_url: str
    admin_api_key: Optional[str]
    prizes: PrizeTable
    ticket_max_attempts: int = DEFAULT_MAX_ATTEMPTS


def _int_from_env(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable {key} must be an integer, got {value!r}") from exc


def _prize_env_key(claim_type: ClaimType) -> str:
    return "PRIZE_" + claim_type.value.replace("-", "_").upper()


def load_prize_table() -> PrizeTable:
    amounts: Dict[ClaimType, int] = {
        claim_type: _int_from_env(_prize_env_key(claim_type), default)
        for claim_type, default in DEFAULT_PRIZE_AMOUNTS.items()
    }
    return PrizeTable(amounts=amounts, currency=os.getenv("PRIZE_CURRENCY", DEFAULT_CURRENCY))


@lru_cache(maxsize=1)
def load_settings(dotenv_path: Optional[str] = None) -> AppSettings:
    if dotenv_path:
        load_dotenv(dotenv_path)
    else:
        load_dotenv()

    flask_settings = FlaskSettings(
        secret_key=os.getenv("FLASK_SECRET_KEY", "tambola-dev-secret"),
        debug=os.getenv("FLASK_DEBUG", "1") == "1",
    )

    return AppSettings(
        flask=flask_settings,
        database_url=os.getenv("DATABASE_URL", "sqlite:///tambola.db"),
        admin_api_key=os.getenv("ADMIN_API_KEY") or None,
        prizes=load_prize_table(),
        ticket_max_attempts=_int_from_env("TICKET_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS),
    )
