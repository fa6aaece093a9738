from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

ROWS = 3
COLUMNS = 9
NUMBERS_PER_ROW = 5
LOWEST_NUMBER = 1
HIGHEST_NUMBER = 90

Cell = Optional[int]
Row = Tuple[Cell, ...]
Ticket = Tuple[Row, ...]


def column_range(column: int) -> range:
    if not 0 <= column < COLUMNS:
        raise ValueError(f"Column out of range: {column}")
    if column == 0:
        return range(LOWEST_NUMBER, 10)
    if column == COLUMNS - 1:
        return range(80, HIGHEST_NUMBER + 1)
    return range(column * 10, column * 10 + 10)


COLUMN_RANGES: Tuple[range, ...] = tuple(column_range(c) for c in range(COLUMNS))


def column_for(number: int) -> int:
    if not LOWEST_NUMBER <= number <= HIGHEST_NUMBER:
        raise ValueError(f"Number out of range: {number}")
    return min(number // 10, COLUMNS - 1)


def empty_grid() -> List[List[Cell]]:
    return [[None] * COLUMNS for _ in range(ROWS)]


def freeze(grid: Sequence[Sequence[Cell]]) -> Ticket:
    """Turn a nested list into an immutable ticket, checking only its shape."""
    if len(grid) != ROWS or any(len(row) != COLUMNS for row in grid):
        raise ValueError(f"A ticket must be a {ROWS}x{COLUMNS} grid")
    return tuple(tuple(cell for cell in row) for row in grid)


def row_numbers(ticket: Sequence[Sequence[Cell]], row: int) -> List[int]:
    return [cell for cell in ticket[row] if cell is not None]


def ticket_numbers(ticket: Sequence[Sequence[Cell]]) -> List[int]:
    return [cell for row in ticket for cell in row if cell is not None]


def layout_problems(ticket: Sequence[Sequence[Cell]]) -> List[str]:
    """Describe every way `ticket` breaks the layout rules.

    An empty list means the ticket is well formed: each row holds exactly
    five numbers, each column holds one to three numbers from its own range,
    and no number appears twice.
    """
    if len(ticket) != ROWS or any(len(row) != COLUMNS for row in ticket):
        return [f"ticket must be a {ROWS}x{COLUMNS} grid"]

    problems: List[str] = []
    for r, row in enumerate(ticket):
        filled = sum(1 for cell in row if cell is not None)
        if filled != NUMBERS_PER_ROW:
            problems.append(f"row {r} has {filled} numbers, expected {NUMBERS_PER_ROW}")

    for c in range(COLUMNS):
        allowed = COLUMN_RANGES[c]
        cells = [ticket[r][c] for r in range(ROWS) if ticket[r][c] is not None]
        if not cells:
            problems.append(f"column {c} is empty")
        for value in cells:
            if value not in allowed:
                problems.append(
                    f"{value} does not belong in column {c} ({allowed.start}-{allowed.stop - 1})"
                )

    numbers = ticket_numbers(ticket)
    duplicates = sorted({n for n in numbers if numbers.count(n) > 1})
    if duplicates:
        problems.append("duplicate numbers: " + ", ".join(str(n) for n in duplicates))
    return problems
