from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .board import Board


NEAR_COMPLETE_MIN = 3
NEAR_COMPLETE_MAX = 5


@dataclass(frozen=True)
class BoardAnalysis:
    """Gap statistics used to bias the spawn engine toward useful pieces."""

    row_empty: Tuple[int, ...]
    col_empty: Tuple[int, ...]
    exactly_one: int
    exactly_two: int
    near_complete: int
    total_empty: int

    @property
    def size(self) -> int:
        return len(self.row_empty)

    @property
    def fill_ratio(self) -> float:
        cells = self.size * self.size
        return 1.0 - self.total_empty / cells if cells else 0.0


def analyze_board(board: Board) -> BoardAnalysis:
    """Count empty cells per line and bucket the lines by how close they are to complete."""
    open_cells = board.placeable_mask()
    row_empty = open_cells.sum(axis=1).astype(int)
    col_empty = open_cells.sum(axis=0).astype(int)
    counts = np.concatenate([row_empty, col_empty])
    return BoardAnalysis(
        row_empty=tuple(int(v) for v in row_empty),
        col_empty=tuple(int(v) for v in col_empty),
        exactly_one=int(np.count_nonzero(counts == 1)),
        exactly_two=int(np.count_nonzero(counts == 2)),
        near_complete=int(np.count_nonzero((counts >= NEAR_COMPLETE_MIN) & (counts <= NEAR_COMPLETE_MAX))),
        total_empty=int(open_cells.sum()),
    )
