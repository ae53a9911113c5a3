from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .errors import CollisionError, OutOfBoundsError


LOGGER = logging.getLogger(__name__)

Coordinate = Tuple[int, int]  # (row, col)

NO_COLOR = -1


class CellKind(IntEnum):
    EMPTY = 0
    OCCUPIED = 1
    LOCKED = 2
    PREVIEW = 3


class BlockColor(IntEnum):
    RED = 0
    BLUE = 1
    GREEN = 2
    YELLOW = 3
    PURPLE = 4
    ORANGE = 5
    CYAN = 6
    PINK = 7


class LineKind(str, Enum):
    ROW = "row"
    COLUMN = "column"


@dataclass(frozen=True)
class Cell:
    kind: CellKind
    color: Optional[BlockColor] = None

    @property
    def is_filled(self) -> bool:
        """Occupied for clearing purposes (placed or locked)."""
        return self.kind in (CellKind.OCCUPIED, CellKind.LOCKED)


@dataclass(frozen=True)
class LineClear:
    """A complete row or column and the colored cells it removes."""

    kind: LineKind
    index: int
    positions: Tuple[Coordinate, ...]
    fragments: Tuple[Tuple[Coordinate, BlockColor], ...]

    @property
    def id(self) -> str:
        prefix = "row" if self.kind is LineKind.ROW else "col"
        return f"{prefix}-{self.index}"

    @property
    def colors(self) -> Tuple[BlockColor, ...]:
        return tuple(color for _, color in self.fragments)


class Board:
    """Square grid of cells with all-or-nothing placement.

    Cell state lives in two parallel ``int8`` arrays: ``kinds`` holds
    :class:`CellKind` values and ``colors`` holds :class:`BlockColor` values
    (``-1`` where a cell has no color).
    """

    def __init__(self, size: int = 10) -> None:
        if size <= 0:
            raise ValueError(f"Board size must be positive, got {size}")
        self.size = int(size)
        self.kinds = np.zeros((self.size, self.size), dtype=np.int8)
        self.colors = np.full((self.size, self.size), NO_COLOR, dtype=np.int8)

    # ---------- Queries ----------
    def is_inside(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def cell(self, position: Coordinate) -> Cell:
        row, col = position
        if not self.is_inside(row, col):
            raise OutOfBoundsError(f"Cell {position} is outside the {self.size}x{self.size} board", position)
        kind = CellKind(int(self.kinds[row, col]))
        raw = int(self.colors[row, col])
        return Cell(kind=kind, color=None if raw == NO_COLOR else BlockColor(raw))

    def can_place(self, position: Coordinate) -> bool:
        """True if the cell exists and is empty or only showing a preview."""
        row, col = position
        if not self.is_inside(row, col):
            return False
        return int(self.kinds[row, col]) in (CellKind.EMPTY, CellKind.PREVIEW)

    def occupancy(self) -> np.ndarray:
        """Boolean mask of cells that count as filled for line completion."""
        return (self.kinds == CellKind.OCCUPIED) | (self.kinds == CellKind.LOCKED)

    def placeable_mask(self) -> np.ndarray:
        return (self.kinds == CellKind.EMPTY) | (self.kinds == CellKind.PREVIEW)

    def is_empty(self) -> bool:
        """True when nothing has been placed; locked obstacles are ignored."""
        return not bool(np.any(self.kinds == CellKind.OCCUPIED))

    def empty_count(self) -> int:
        return int(np.count_nonzero(self.placeable_mask()))

    def filled_ratio(self) -> float:
        return float(np.count_nonzero(self.occupancy())) / float(self.size * self.size)

    def locked_positions(self) -> List[Coordinate]:
        rows, cols = np.nonzero(self.kinds == CellKind.LOCKED)
        return [(int(r), int(c)) for r, c in zip(rows, cols)]

    # ---------- Mutation ----------
    def _check_targets(self, positions: Sequence[Coordinate]) -> None:
        for row, col in positions:
            if not self.is_inside(row, col):
                raise OutOfBoundsError(f"Position {(row, col)} is outside the board", (row, col))
        for row, col in positions:
            if not self.can_place((row, col)):
                raise CollisionError(f"Position {(row, col)} is already filled", (row, col))

    def place_shape(self, positions: Iterable[Coordinate], color: BlockColor) -> int:
        """Fill every target with ``color`` or raise without touching the grid.

        Returns the number of cells placed.
        """
        targets = [(int(r), int(c)) for r, c in positions]
        self._check_targets(targets)
        for row, col in targets:
            self.kinds[row, col] = CellKind.OCCUPIED
            self.colors[row, col] = int(color)
        LOGGER.debug("Placed %d cells with color %s", len(targets), BlockColor(color).name)
        return len(targets)

    def set_preview(self, positions: Iterable[Coordinate], color: BlockColor) -> None:
        for row, col in positions:
            if self.can_place((row, col)):
                self.kinds[row, col] = CellKind.PREVIEW
                self.colors[row, col] = int(color)

    def clear_previews(self) -> None:
        mask = self.kinds == CellKind.PREVIEW
        self.kinds[mask] = CellKind.EMPTY
        self.colors[mask] = NO_COLOR

    def clear_cells(self, positions: Iterable[Coordinate]) -> int:
        """Empty the given occupied cells; locked cells are left alone."""
        cleared = 0
        for row, col in set(positions):
            if int(self.kinds[row, col]) == CellKind.OCCUPIED:
                self.kinds[row, col] = CellKind.EMPTY
                self.colors[row, col] = NO_COLOR
                cleared += 1
        return cleared

    def load_obstacles(self, positions: Iterable[Coordinate], color: BlockColor) -> int:
        """Mark cells as locked obstacles. Out-of-board positions are skipped."""
        loaded = 0
        for row, col in positions:
            if not self.is_inside(row, col):
                LOGGER.warning("Skipping obstacle outside the board at %s", (row, col))
                continue
            self.kinds[row, col] = CellKind.LOCKED
            self.colors[row, col] = int(color)
            loaded += 1
        return loaded

    def reset(self, keep_locked: bool = True) -> None:
        if keep_locked:
            mask = self.kinds != CellKind.LOCKED
            self.kinds[mask] = CellKind.EMPTY
            self.colors[mask] = NO_COLOR
        else:
            self.kinds.fill(CellKind.EMPTY)
            self.colors.fill(NO_COLOR)

    # ---------- Line detection ----------
    def find_completed_lines(self) -> List[LineClear]:
        """Return every complete row and column; the grid is not modified."""
        filled = self.occupancy()
        clears: List[LineClear] = []
        for row in np.where(np.all(filled, axis=1))[0]:
            positions = tuple((int(row), col) for col in range(self.size))
            clears.append(LineClear(LineKind.ROW, int(row), positions, self._fragments(positions)))
        for col in np.where(np.all(filled, axis=0))[0]:
            positions = tuple((row, int(col)) for row in range(self.size))
            clears.append(LineClear(LineKind.COLUMN, int(col), positions, self._fragments(positions)))
        return clears

    def _fragments(self, positions: Sequence[Coordinate]) -> Tuple[Tuple[Coordinate, BlockColor], ...]:
        out = []
        for row, col in positions:
            if int(self.kinds[row, col]) == CellKind.OCCUPIED:
                out.append(((row, col), BlockColor(int(self.colors[row, col]))))
        return tuple(out)

    # ---------- Copies ----------
    def copy(self) -> "Board":
        new_board = Board(self.size)
        new_board.kinds = self.kinds.copy()
        new_board.colors = self.colors.copy()
        return new_board

    def clone_state(self) -> np.ndarray:
        return self.kinds.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (
            self.size == other.size
            and np.array_equal(self.kinds, other.kinds)
            and np.array_equal(self.colors, other.colors)
        )

    def render(self) -> str:
        symbols = {CellKind.EMPTY: "·", CellKind.OCCUPIED: "█", CellKind.LOCKED: "▓", CellKind.PREVIEW: "░"}
        return "\n".join("".join(symbols[CellKind(int(v))] for v in row) for row in self.kinds)
