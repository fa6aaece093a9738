from __future__ import annotations

import datetime as dt
import json
from typing import Dict, List, Optional

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class TicketRow(Base):
    __tablename__ = "tickets"
    __table_args__ = (UniqueConstraint("tournament_id", "user_id", name="uq_ticket_owner"),)

    id = Column(String(192), primary_key=True)
    tournament_id = Column(String(64), nullable=False, index=True)
    user_id = Column(String(64), nullable=False)
    numbers = Column(Text, nullable=False)
    marked_numbers = Column(Text, nullable=False, default="[]")
    claim_state = Column(Text, nullable=False, default="{}")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=dt.datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=dt.datetime.utcnow, onupdate=dt.datetime.utcnow, nullable=False)

    def set_numbers(self, numbers: List[List[Optional[int]]]) -> None:
        self.numbers = json.dumps(numbers)

    def get_numbers(self) -> List[List[Optional[int]]]:
        return json.loads(self.numbers)

    def set_marked(self, marked: List[int]) -> None:
        self.marked_numbers = json.dumps(sorted(marked))

    def get_marked(self) -> List[int]:
        return json.loads(self.marked_numbers or "[]")

    def set_claim_state(self, state: Dict[str, bool]) -> None:
        self.claim_state = json.dumps(state)

    def get_claim_state(self) -> Dict[str, bool]:
        return json.loads(self.claim_state or "{}")


class CalledNumbersRow(Base):
    __tablename__ = "called_numbers"

    tournament_id = Column(String(64), primary_key=True)
    numbers = Column(Text, nullable=False, default="[]")
    started_at = Column(DateTime, default=dt.datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=dt.datetime.utcnow, onupdate=dt.datetime.utcnow, nullable=False)

    def set_numbers(self, numbers: List[int]) -> None:
        self.numbers = json.dumps(numbers)

    def get_numbers(self) -> List[int]:
        return json.loads(self.numbers or "[]")


class ClaimRow(Base):
    __tablename__ = "claims"
    __table_args__ = (UniqueConstraint("ticket_id", "claim_type", name="uq_claim_per_ticket"),)

    id = Column(String(256), primary_key=True)
    tournament_id = Column(String(64), nullable=False, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    ticket_id = Column(String(192), nullable=False)
    claim_type = Column(String(32), nullable=False)
    amount = Column(Integer, nullable=False, default=0)
    currency = Column(String(8), nullable=False)
    created_at = Column(DateTime, default=dt.datetime.utcnow, nullable=False)
