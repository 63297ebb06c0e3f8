"""Command-line Sudoku solver using depth-first backtracking."""
from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from solver import InvalidPuzzleError, SudokuSolver
from sudoku_board import copy_board, find_conflicts, given_mask, load_board, make_sample_board, parse_board
from utils import format_board, save_board_image

EXIT_SOLVED = 0
EXIT_UNSOLVED = 1
EXIT_INVALID = 2
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

log = logging.getLogger(__name__)


def run(
    puzzle_path: Optional[str] = None,
    board_text: Optional[str] = None,
    image_out: Optional[str] = None,
    image_width: Optional[int] = None,
    max_backtracks: Optional[int] = None,
) -> int:
    if puzzle_path is not None:
        log.info("Loading puzzle from %s", puzzle_path)
        board = load_board(puzzle_path)
    elif board_text is not None:
        board = parse_board(board_text)
    else:
        log.info("No puzzle given, using the built-in sample")
        board = make_sample_board()

    print(format_board(board))
    print()

    conflicts = find_conflicts(board)
    if conflicts:
        for conflict in conflicts:
            log.error("Digit %d repeats in %s %d", conflict.digit, conflict.unit, conflict.index + 1)
        print(f"Invalid puzzle: {len(conflicts)} repeated clue(s)")
        return EXIT_INVALID

    givens = given_mask(board)
    original = copy_board(board)
    solver = SudokuSolver(max_backtracks=max_backtracks)
    solved = solver.solve(board)
    log.info("Solver status: %s (%d placements)", solver.last_status, solver.attempts)

    if not solved:
        if solver.last_status == "timeout":
            print(f"No solution found within {max_backtracks} placements.")
        else:
            print("No solution found.")
        if image_out:
            save_board_image(image_out, original, givens, width=image_width)
        return EXIT_UNSOLVED

    print(format_board(board))
    if image_out:
        save_board_image(image_out, board, givens, width=image_width)
    return EXIT_SOLVED


def non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid int value: {text!r}") from exc
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or greater, got {value}")
    return value


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sudoku solver using backtracking with constraint tables")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--puzzle", type=str, default=None, help="Path to a text file holding the puzzle")
    source.add_argument(
        "--board",
        type=str,
        default=None,
        help="Puzzle as an 81-character string, '.' or '0' for empty cells",
    )
    parser.add_argument("--image-out", type=str, default=None, help="Save the result as a PNG image")
    parser.add_argument("--image-width", type=int, default=None, help="Resize the saved image to this width")
    parser.add_argument(
        "--max-backtracks",
        type=non_negative_int,
        default=None,
        help="Give up after this many tentative placements (default: unlimited)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format=LOG_FORMAT)
    try:
        return run(
            args.puzzle,
            args.board,
            image_out=args.image_out,
            image_width=args.image_width,
            max_backtracks=args.max_backtracks,
        )
    except InvalidPuzzleError as exc:
        log.error("%s", exc)
        print(f"Invalid puzzle: {exc}")
        return EXIT_INVALID
    except OSError as exc:
        log.error("%s", exc)
        print(f"File error: {exc}")
        return EXIT_INVALID


if __name__ == "__main__":
    raise SystemExit(main())
