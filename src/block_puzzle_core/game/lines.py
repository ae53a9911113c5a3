from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Set, Tuple

from .board import BlockColor, Board, Coordinate, LineClear, LineKind


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class LineClearResult:
    """Summary of the lines removed after a placement."""

    clears: Tuple[LineClear, ...] = field(default_factory=tuple)
    cells_cleared: int = 0

    @property
    def rows(self) -> List[int]:
        return [c.index for c in self.clears if c.kind is LineKind.ROW]

    @property
    def columns(self) -> List[int]:
        return [c.index for c in self.clears if c.kind is LineKind.COLUMN]

    @property
    def total_cleared_lines(self) -> int:
        return len(self.clears)

    @property
    def unique_positions(self) -> Set[Coordinate]:
        return {pos for clear in self.clears for pos in clear.positions}

    @property
    def fragments(self) -> List[Tuple[Coordinate, BlockColor]]:
        return [frag for clear in self.clears for frag in clear.fragments]

    @property
    def is_empty(self) -> bool:
        return not self.clears


def process_completed_lines(board: Board) -> LineClearResult:
    """Clear every complete row and column in a single batch.

    Detection runs on the pre-clear grid, so a cell shared by a complete row
    and a complete column counts toward both lines but is emptied once.
    Locked cells complete lines but are never removed.
    """
    clears = board.find_completed_lines()
    if not clears:
        return LineClearResult()
    cells = board.clear_cells(pos for clear in clears for pos in clear.positions)
    result = LineClearResult(clears=tuple(clears), cells_cleared=cells)
    LOGGER.info("Cleared %d rows and %d columns", len(result.rows), len(result.columns))
    return result
