from __future__ import annotations

import logging
import random
from typing import List, Optional

from .grid import (
    COLUMN_RANGES,
    COLUMNS,
    NUMBERS_PER_ROW,
    ROWS,
    Cell,
    Ticket,
    empty_grid,
    freeze,
    layout_problems,
)

DEFAULT_MAX_ATTEMPTS = 1000

logger = logging.getLogger("tambola.generator")


class TicketGenerationError(RuntimeError):
    """Raised when no valid layout was produced within the attempt budget."""


class TicketGenerator:
    """Build randomised 3x9 tambola tickets.

    Pass a seeded `random.Random` to make the output reproducible. A layout
    that comes out of the balancing pass broken (typically a column left
    empty) is thrown away and generation starts over with the same source.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._rng = rng or random.Random()
        self._max_attempts = max_attempts

    def generate(self) -> Ticket:
        for attempt in range(1, self._max_attempts + 1):
            ticket = freeze(self._build_layout())
            problems = layout_problems(ticket)
            if not problems:
                return ticket
            logger.debug("Discarding ticket layout (attempt %s): %s", attempt, "; ".join(problems))
        raise TicketGenerationError(
            f"Unable to build a valid ticket in {self._max_attempts} attempts"
        )

    def _build_layout(self) -> List[List[Cell]]:
        grid = empty_grid()
        for column in range(COLUMNS):
            self._fill_column(grid, column)
        for row in range(ROWS):
            self._balance_row(grid, row)
        return grid

    def _fill_column(self, grid: List[List[Cell]], column: int) -> None:
        available = list(COLUMN_RANGES[column])
        self._rng.shuffle(available)
        count = self._rng.randint(1, 2)
        rows = self._rng.sample(range(ROWS), count)
        for index, row in enumerate(rows):
            grid[row][column] = available[index]

    def _balance_row(self, grid: List[List[Cell]], row: int) -> None:
        filled = [c for c in range(COLUMNS) if grid[row][c] is not None]

        if len(filled) < NUMBERS_PER_ROW:
            needed = NUMBERS_PER_ROW - len(filled)
            empty_columns = [c for c in range(COLUMNS) if grid[row][c] is None]
            for column in empty_columns[:needed]:
                used = {cell for line in grid for cell in line if cell is not None}
                candidates = [n for n in COLUMN_RANGES[column] if n not in used]
                if candidates:
                    grid[row][column] = self._rng.choice(candidates)
        elif len(filled) > NUMBERS_PER_ROW:
            while len(filled) > NUMBERS_PER_ROW:
                column = filled.pop(self._rng.randrange(len(filled)))
                grid[row][column] = None


def generate_ticket(rng: Optional[random.Random] = None) -> Ticket:
    return TicketGenerator(rng=rng).generate()
