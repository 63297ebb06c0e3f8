"""Sudoku board construction, text parsing and consistency checks."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, NamedTuple, Sequence, Union

from solver import EMPTY, GRID_SIZE, SUBGRID_SIZE, Grid, InvalidPuzzleError

SAMPLE_PUZZLE = (
    "53..7....",
    "6..195...",
    ".98....6.",
    "8...6...3",
    "4..8.3..1",
    "7...2...6",
    ".6....28.",
    "...419..5",
    "....8..79",
)

EMPTY_MARKERS = frozenset(".0_*?")
IGNORED_CHARACTERS = frozenset("|-+")

log = logging.getLogger(__name__)


class Conflict(NamedTuple):
    unit: str
    index: int
    digit: int


def empty_board() -> Grid:
    return [[EMPTY] * GRID_SIZE for _ in range(GRID_SIZE)]


def copy_board(board: Sequence[Sequence[int]]) -> Grid:
    return [[int(value) for value in row] for row in board]


def make_sample_board() -> Grid:
    return parse_board("\n".join(SAMPLE_PUZZLE))


def parse_board(text: str) -> Grid:
    """Parse nine rows of nine cells, or a single 81-character string.

    Digits 1-9 are clues and any of ``.0_*?`` marks an empty cell. Whitespace
    and the ``|``, ``-``, ``+`` separators drawn by ``utils.format_board`` are
    skipped.
    """
    cells: List[int] = []
    for line_no, line in enumerate(text.splitlines(), start=1):
        for char in line:
            if char.isspace() or char in IGNORED_CHARACTERS:
                continue
            if char in EMPTY_MARKERS:
                cells.append(EMPTY)
            elif "1" <= char <= "9":
                cells.append(int(char))
            else:
                raise InvalidPuzzleError(f"unexpected character {char!r} on line {line_no}")
    expected = GRID_SIZE * GRID_SIZE
    if len(cells) != expected:
        raise InvalidPuzzleError(f"expected {expected} cells, found {len(cells)}")
    return [cells[row * GRID_SIZE : (row + 1) * GRID_SIZE] for row in range(GRID_SIZE)]


def load_board(path: Union[str, Path]) -> Grid:
    source = Path(path).expanduser()
    if not source.is_file():
        raise FileNotFoundError(f"Unable to read puzzle at {source}")
    log.debug("Reading puzzle from %s", source)
    try:
        text = source.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidPuzzleError(f"{source} is not UTF-8 text: {exc.reason}") from exc
    return parse_board(text)


def given_mask(board: Sequence[Sequence[int]]) -> List[List[bool]]:
    return [[value != EMPTY for value in row] for row in board]


def _repeated(values: Sequence[int]) -> List[int]:
    seen: set[int] = set()
    repeated: List[int] = []
    for value in values:
        if value == EMPTY:
            continue
        if value in seen and value not in repeated:
            repeated.append(value)
        seen.add(value)
    return repeated


def find_conflicts(board: Sequence[Sequence[int]]) -> List[Conflict]:
    """List every digit that appears more than once in a row, column or box."""
    conflicts: List[Conflict] = []
    for row in range(GRID_SIZE):
        values = [board[row][col] for col in range(GRID_SIZE)]
        conflicts.extend(Conflict("row", row, digit) for digit in _repeated(values))

    for col in range(GRID_SIZE):
        values = [board[row][col] for row in range(GRID_SIZE)]
        conflicts.extend(Conflict("column", col, digit) for digit in _repeated(values))

    for box, (start_row, start_col) in enumerate(
        (r, c) for r in range(0, GRID_SIZE, SUBGRID_SIZE) for c in range(0, GRID_SIZE, SUBGRID_SIZE)
    ):
        values = [
            board[r][c]
            for r in range(start_row, start_row + SUBGRID_SIZE)
            for c in range(start_col, start_col + SUBGRID_SIZE)
        ]
        conflicts.extend(Conflict("box", box, digit) for digit in _repeated(values))
    return conflicts


def is_solved_board(board: Sequence[Sequence[int]]) -> bool:
    if any(value == EMPTY for row in board for value in row):
        return False
    return not find_conflicts(board)
