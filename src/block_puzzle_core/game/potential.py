"""Clearing-potential evaluation.

The evaluator answers "how many lines could this piece complete at once if it
were placed well?" without touching the board. The scan stops at the first
placement completing ``early_exit`` lines, so a result of 2 means *at least*
two; callers only need to tell 0 from 1 from "2 or more".
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from .board import Board, Coordinate
from .pieces import Piece


EARLY_EXIT_CLEARS = 2


def _lines_completed(size: int, row_fill: np.ndarray, col_fill: np.ndarray,
                     piece: Piece, origin: Coordinate) -> int:
    row0, col0 = origin
    added_rows: dict[int, int] = {}
    added_cols: dict[int, int] = {}
    for dr, dc in piece.offsets:
        r, c = row0 + dr, col0 + dc
        added_rows[r] = added_rows.get(r, 0) + 1
        added_cols[c] = added_cols.get(c, 0) + 1
    lines = sum(1 for r, n in added_rows.items() if row_fill[r] + n == size)
    lines += sum(1 for c, n in added_cols.items() if col_fill[c] + n == size)
    return lines


def best_clearing_placement(board: Board, piece: Piece,
                            early_exit: Optional[int] = EARLY_EXIT_CLEARS) -> Tuple[int, Optional[Coordinate]]:
    """Return ``(max_clears, origin)`` over every legal origin for ``piece``.

    ``origin`` is ``None`` when the piece fits nowhere. Pass ``early_exit=None``
    to force a full scan.
    """
    size = board.size
    filled = board.occupancy()
    open_cells = board.placeable_mask()
    row_fill = filled.sum(axis=1)
    col_fill = filled.sum(axis=0)
    best = 0
    best_origin: Optional[Coordinate] = None
    for row in range(size):
        if row + piece.height > size:
            break
        for col in range(size):
            if col + piece.width > size:
                break
            if not all(open_cells[row + dr, col + dc] for dr, dc in piece.offsets):
                continue
            lines = _lines_completed(size, row_fill, col_fill, piece, (row, col))
            if best_origin is None or lines > best:
                best = lines
                best_origin = (row, col)
            if early_exit is not None and best >= early_exit:
                return best, best_origin
    return best, best_origin


def max_simultaneous_clears(board: Board, piece: Piece, early_exit: Optional[int] = EARLY_EXIT_CLEARS) -> int:
    return best_clearing_placement(board, piece, early_exit)[0]
