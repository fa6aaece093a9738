from .claims import ClaimOutcome, ClaimResult, ClaimState, ClaimType, validate_claim
from .generator import TicketGenerationError, TicketGenerator, generate_ticket
from .grid import Ticket, column_range, freeze, layout_problems, ticket_numbers
from .prizes import Prize, PrizeTable

__all__ = [
    "ClaimOutcome",
    "ClaimResult",
    "ClaimState",
    "ClaimType",
    "validate_claim",
    "TicketGenerationError",
    "TicketGenerator",
    "generate_ticket",
    "Ticket",
    "column_range",
    "freeze",
    "layout_problems",
    "ticket_numbers",
    "Prize",
    "PrizeTable",
]
