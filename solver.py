"""Backtracking Sudoku solver with row, column and box usage counters."""
from __future__ import annotations

import logging
import numbers
from collections import abc
from typing import List, MutableSequence, Optional, Sequence

import numpy as np

GRID_SIZE = 9
SUBGRID_SIZE = 3
EMPTY = 0
DIGITS = range(1, GRID_SIZE + 1)

Grid = List[List[int]]

log = logging.getLogger(__name__)


class InvalidPuzzleError(ValueError):
    """Raised when a puzzle is malformed or already breaks the Sudoku rules."""


def box_index(row: int, col: int) -> int:
    return (row // SUBGRID_SIZE) * SUBGRID_SIZE + col // SUBGRID_SIZE


class SudokuSolver:
    """Naive depth-first solver: row-major cells, ascending digits, first hit wins.

    ``rows``, ``columns`` and ``boxes`` count how often each digit occupies a
    line, so legality checks never rescan the grid. A digit is placed or
    removed in all three tables at once.
    """

    def __init__(self, max_backtracks: Optional[int] = None) -> None:
        if max_backtracks is not None and max_backtracks < 0:
            raise ValueError(f"max_backtracks must be non-negative, got {max_backtracks}")
        self.max_backtracks = max_backtracks
        self.rows = np.zeros((GRID_SIZE, GRID_SIZE + 1), dtype=int)
        self.columns = np.zeros((GRID_SIZE, GRID_SIZE + 1), dtype=int)
        self.boxes = np.zeros((GRID_SIZE, GRID_SIZE + 1), dtype=int)
        self._board: Optional[MutableSequence[MutableSequence[int]]] = None
        self._solved = False
        self._attempts = 0
        self._cutoff = False
        self.last_status: str = "idle"

    @property
    def attempts(self) -> int:
        return self._attempts

    def reset(self) -> None:
        self.rows.fill(0)
        self.columns.fill(0)
        self.boxes.fill(0)
        self._board = None
        self._solved = False
        self._attempts = 0
        self._cutoff = False
        self.last_status = "idle"

    def seed(self, board: MutableSequence[MutableSequence[int]]) -> None:
        """Count the clues of ``board`` into the usage tables.

        Raises InvalidPuzzleError if the grid is not 9x9, holds anything other
        than 0-9, or repeats a clue within a row, column or box. The board
        itself is not modified, but is bound as the grid that ``place`` and
        ``remove`` write to.
        """
        if not isinstance(board, (abc.Sequence, np.ndarray)):
            raise InvalidPuzzleError(f"expected a grid of rows, got {type(board).__name__}")
        if len(board) != GRID_SIZE:
            raise InvalidPuzzleError(f"expected {GRID_SIZE} rows, got {len(board)}")
        for row in range(GRID_SIZE):
            if not isinstance(board[row], (abc.Sequence, np.ndarray)):
                raise InvalidPuzzleError(f"row {row + 1} is {type(board[row]).__name__}, not a row of cells")
            if len(board[row]) != GRID_SIZE:
                raise InvalidPuzzleError(
                    f"row {row + 1} has {len(board[row])} cells, expected {GRID_SIZE}"
                )
            for col in range(GRID_SIZE):
                value = board[row][col]
                if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                    raise InvalidPuzzleError(f"cell ({row + 1}, {col + 1}) holds {value!r}, not a digit")
                if not EMPTY <= value <= GRID_SIZE:
                    raise InvalidPuzzleError(f"cell ({row + 1}, {col + 1}) holds {value}, outside 0-9")
                if value == EMPTY:
                    continue
                if not self.could_place(int(value), row, col):
                    raise InvalidPuzzleError(
                        f"digit {value} at ({row + 1}, {col + 1}) repeats in its row, column or box"
                    )
                self._count(int(value), row, col, 1)
        self._board = board

    def could_place(self, value: int, row: int, col: int) -> bool:
        return (
            self.rows[row, value] == 0
            and self.columns[col, value] == 0
            and self.boxes[box_index(row, col), value] == 0
        )

    def place(self, value: int, row: int, col: int) -> None:
        self._count(value, row, col, 1)
        self._board[row][col] = value

    def remove(self, value: int, row: int, col: int) -> None:
        self._count(value, row, col, -1)
        self._board[row][col] = EMPTY

    def _count(self, value: int, row: int, col: int, delta: int) -> None:
        self.rows[row, value] += delta
        self.columns[col, value] += delta
        self.boxes[box_index(row, col), value] += delta

    def solve(self, board: MutableSequence[MutableSequence[int]]) -> bool:
        """Fill ``board`` in place and return True, or leave it untouched and return False."""
        self.reset()
        try:
            self.seed(board)
        except InvalidPuzzleError:
            self.last_status = "invalid"
            raise
        log.debug("Seeded %d clues", int(self.rows.sum()))
        try:
            self._backtrack(0, 0)
        finally:
            self._board = None
        if self._solved:
            self.last_status = "solved"
        else:
            self.last_status = "timeout" if self._cutoff else "unsolved"
        log.debug("Search finished: %s after %d placements", self.last_status, self._attempts)
        return self._solved

    def solve_board(self, board: Sequence[Sequence[int]]) -> Optional[Grid]:
        working: Grid = [list(row) for row in board]
        try:
            solved = self.solve(working)
        except InvalidPuzzleError as exc:
            log.debug("Rejected puzzle: %s", exc)
            return None
        return working if solved else None

    def _advance(self, row: int, col: int) -> bool:
        if row == GRID_SIZE - 1 and col == GRID_SIZE - 1:
            self._solved = True
            return True
        if col == GRID_SIZE - 1:
            return self._backtrack(row + 1, 0)
        return self._backtrack(row, col + 1)

    def _backtrack(self, row: int, col: int) -> bool:
        if self._board[row][col] != EMPTY:
            return self._advance(row, col)
        for value in DIGITS:
            if self.max_backtracks is not None and self._attempts >= self.max_backtracks:
                self._cutoff = True
                return False
            if not self.could_place(value, row, col):
                continue
            self.place(value, row, col)
            self._attempts += 1
            if self._advance(row, col):
                return True
            self.remove(value, row, col)
        return False
