"""Text and image rendering helpers for Sudoku boards."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

import cv2
import imutils
import numpy as np
from matplotlib import colormaps

from solver import EMPTY, GRID_SIZE, SUBGRID_SIZE

DEFAULT_CELL_SIZE = 48
BOX_SEPARATOR = "------+-------+------"
GIVEN_COLOR = (40, 40, 40)
GRID_COLOR = (0, 0, 0)
BACKGROUND_COLOR = (255, 255, 255)

# Soft-green palette for solver-filled digits, one entry per digit (BGR)
_DIGIT_COLORS = (colormaps["Greens"](np.linspace(0.55, 0.95, 10))[:, 2::-1] * 255).astype("uint8")

log = logging.getLogger(__name__)


def format_board(board: Sequence[Sequence[int]]) -> str:
    lines: List[str] = []
    for row in range(GRID_SIZE):
        if row % SUBGRID_SIZE == 0 and row != 0:
            lines.append(BOX_SEPARATOR)
        parts: List[str] = []
        for col in range(GRID_SIZE):
            if col % SUBGRID_SIZE == 0 and col != 0:
                parts.append(" |")
            value = board[row][col]
            parts.append(" " + ("." if value == EMPTY else str(value)))
        lines.append("".join(parts))
    return "\n".join(lines)


def render_board_image(
    board: Sequence[Sequence[int]],
    givens: Optional[Sequence[Sequence[bool]]] = None,
    cell_size: int = DEFAULT_CELL_SIZE,
) -> np.ndarray:
    """Draw the board as a BGR image.

    Cells flagged in ``givens`` are drawn in dark ink, every other filled cell
    takes its colour from the green palette. Without ``givens`` all digits are
    treated as clues.
    """
    side = cell_size * GRID_SIZE
    image = np.full((side + 1, side + 1, 3), BACKGROUND_COLOR, dtype="uint8")

    for line in range(GRID_SIZE + 1):
        offset = line * cell_size
        thickness = 3 if line % SUBGRID_SIZE == 0 else 1
        cv2.line(image, (offset, 0), (offset, side), GRID_COLOR, thickness)
        cv2.line(image, (0, offset), (side, offset), GRID_COLOR, thickness)

    font_scale = cell_size / 48.0
    for row in range(GRID_SIZE):
        for col in range(GRID_SIZE):
            value = board[row][col]
            if value == EMPTY:
                continue
            if givens is None or givens[row][col]:
                color = GIVEN_COLOR
            else:
                color = tuple(int(channel) for channel in _DIGIT_COLORS[value])
            text = str(value)
            text_size, _ = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, font_scale, 2)
            text_x = int(col * cell_size + (cell_size - text_size[0]) / 2)
            text_y = int(row * cell_size + (cell_size + text_size[1]) / 2)
            cv2.putText(
                image,
                text,
                (text_x, text_y),
                cv2.FONT_HERSHEY_SIMPLEX,
                font_scale,
                color,
                2,
                cv2.LINE_AA,
            )
    return image


def save_board_image(
    path: Union[str, Path],
    board: Sequence[Sequence[int]],
    givens: Optional[Sequence[Sequence[bool]]] = None,
    width: Optional[int] = None,
) -> Path:
    target = Path(path).expanduser()
    image = render_board_image(board, givens)
    if width is not None:
        image = imutils.resize(image, width=width)
    target.parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(target), image):
        raise OSError(f"Unable to write board image to {target}")
    log.info("Saved board image to %s", target)
    return target
