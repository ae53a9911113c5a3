from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from functools import lru_cache
from typing import Dict, List, Sequence, Tuple

import numpy as np

from .board import BlockColor
from .errors import InvalidPatternError


Pattern = np.ndarray


class Category(IntEnum):
    MONO = 1
    DUO = 2
    TRIO = 3
    TETROMINO = 4
    PENTOMINO = 5
    REWARD = 6  # 6-9 cells


class ShapeId(IntEnum):
    SINGLE = 0
    DOMINO = 1
    TRI_LINE = 2
    TRI_CORNER = 3
    TET_LINE = 4
    TET_SQUARE = 5
    TET_T = 6
    TET_L = 7
    TET_S = 8
    PENT_LINE = 9
    PENT_L = 10
    PENT_P = 11
    PENT_U = 12
    PENT_V = 13
    PENT_T = 14
    PENT_PLUS = 15
    PENT_W = 16
    PENT_Z = 17
    RECT_2X3 = 18
    RECT_2X4 = 19
    SQUARE_3X3 = 20


def _rot90(pattern: Pattern, k: int) -> Pattern:
    k = k % 4
    if k == 0:
        return pattern
    return np.rot90(pattern, k, axes=(1, 0))  # rotate clockwise when k>0


def _is_connected(pattern: Pattern) -> bool:
    cells = {(int(r), int(c)) for r, c in zip(*np.nonzero(pattern))}
    start = next(iter(cells))
    seen = {start}
    stack = [start]
    while stack:
        r, c = stack.pop()
        for nxt in ((r + 1, c), (r - 1, c), (r, c + 1), (r, c - 1)):
            if nxt in cells and nxt not in seen:
                seen.add(nxt)
                stack.append(nxt)
    return len(seen) == len(cells)


def trim(pattern: Sequence[Sequence[bool]] | Pattern) -> Pattern:
    """Return ``pattern`` as a boolean array cropped to its bounding box."""
    rows = [list(r) for r in pattern] if not isinstance(pattern, np.ndarray) else None
    if rows is not None:
        if not rows or any(len(r) != len(rows[0]) for r in rows):
            raise InvalidPatternError("Pattern must be a non-empty rectangular matrix")
        arr = np.array(rows, dtype=bool)
    else:
        arr = pattern.astype(bool)
    if arr.ndim != 2 or arr.size == 0 or not arr.any():
        raise InvalidPatternError("Pattern has no occupied cells")
    occupied_rows = np.where(arr.any(axis=1))[0]
    occupied_cols = np.where(arr.any(axis=0))[0]
    trimmed = arr[occupied_rows[0] : occupied_rows[-1] + 1, occupied_cols[0] : occupied_cols[-1] + 1]
    if not _is_connected(trimmed):
        raise InvalidPatternError("Pattern cells must form a single connected polyomino")
    return np.ascontiguousarray(trimmed)


def generate_orientations(pattern: Sequence[Sequence[bool]] | Pattern, include_mirror: bool = False) -> List[Pattern]:
    """All distinct rotations (and optionally mirrored rotations) of a pattern.

    The first entry is always the trimmed input. Results are deduplicated by
    exact matrix equality, so the list holds 1, 2, 4 or 8 patterns.
    """
    base = trim(pattern)
    sources = [base]
    if include_mirror:
        sources.append(np.fliplr(base))
    orientations: List[Pattern] = []
    for source in sources:
        for k in range(4):
            candidate = trim(_rot90(source, k))
            if not any(np.array_equal(candidate, existing) for existing in orientations):
                orientations.append(candidate)
    return orientations


@dataclass(frozen=True)
class ShapeSpec:
    pattern: Tuple[Tuple[int, ...], ...]
    category: Category
    complexity: int
    mirror: bool = False


# Complexity scores are a tuning table, not derived from the patterns.
SHAPE_TABLE: Dict[ShapeId, ShapeSpec] = {
    ShapeId.SINGLE: ShapeSpec(((1,),), Category.MONO, 1),
    ShapeId.DOMINO: ShapeSpec(((1, 1),), Category.DUO, 2),
    ShapeId.TRI_LINE: ShapeSpec(((1, 1, 1),), Category.TRIO, 3),
    ShapeId.TRI_CORNER: ShapeSpec(((1, 0), (1, 1)), Category.TRIO, 3),
    ShapeId.TET_LINE: ShapeSpec(((1, 1, 1, 1),), Category.TETROMINO, 4),
    ShapeId.TET_SQUARE: ShapeSpec(((1, 1), (1, 1)), Category.TETROMINO, 3),
    ShapeId.TET_T: ShapeSpec(((1, 1, 1), (0, 1, 0)), Category.TETROMINO, 5),
    ShapeId.TET_L: ShapeSpec(((1, 0), (1, 0), (1, 1)), Category.TETROMINO, 5, mirror=True),
    ShapeId.TET_S: ShapeSpec(((0, 1, 1), (1, 1, 0)), Category.TETROMINO, 6, mirror=True),
    ShapeId.PENT_LINE: ShapeSpec(((1, 1, 1, 1, 1),), Category.PENTOMINO, 6),
    ShapeId.PENT_L: ShapeSpec(((1, 0), (1, 0), (1, 0), (1, 1)), Category.PENTOMINO, 7, mirror=True),
    ShapeId.PENT_P: ShapeSpec(((1, 1), (1, 1), (1, 0)), Category.PENTOMINO, 6, mirror=True),
    ShapeId.PENT_U: ShapeSpec(((1, 0, 1), (1, 1, 1)), Category.PENTOMINO, 7),
    ShapeId.PENT_V: ShapeSpec(((1, 0, 0), (1, 0, 0), (1, 1, 1)), Category.PENTOMINO, 7),
    ShapeId.PENT_T: ShapeSpec(((1, 1, 1), (0, 1, 0), (0, 1, 0)), Category.PENTOMINO, 8),
    ShapeId.PENT_PLUS: ShapeSpec(((0, 1, 0), (1, 1, 1), (0, 1, 0)), Category.PENTOMINO, 8),
    ShapeId.PENT_W: ShapeSpec(((1, 0, 0), (1, 1, 0), (0, 1, 1)), Category.PENTOMINO, 9),
    ShapeId.PENT_Z: ShapeSpec(((1, 1, 0), (0, 1, 0), (0, 1, 1)), Category.PENTOMINO, 9, mirror=True),
    ShapeId.RECT_2X3: ShapeSpec(((1, 1, 1), (1, 1, 1)), Category.REWARD, 5),
    ShapeId.RECT_2X4: ShapeSpec(((1, 1, 1, 1), (1, 1, 1, 1)), Category.REWARD, 6),
    ShapeId.SQUARE_3X3: ShapeSpec(((1, 1, 1), (1, 1, 1), (1, 1, 1)), Category.REWARD, 8),
}


@lru_cache(maxsize=None)
def _orientations_for(shape_id: ShapeId) -> Tuple[Pattern, ...]:
    spec = SHAPE_TABLE[shape_id]
    variants = generate_orientations(spec.pattern, include_mirror=spec.mirror)
    for variant in variants:
        variant.setflags(write=False)
    return tuple(variants)


class ShapeCatalog:
    """Static lookup helpers over :data:`SHAPE_TABLE`."""

    @staticmethod
    def spec(shape_id: ShapeId) -> ShapeSpec:
        return SHAPE_TABLE[shape_id]

    @staticmethod
    def orientations(shape_id: ShapeId) -> Tuple[Pattern, ...]:
        return _orientations_for(ShapeId(shape_id))

    @staticmethod
    def category(shape_id: ShapeId) -> Category:
        return SHAPE_TABLE[shape_id].category

    @staticmethod
    def complexity(shape_id: ShapeId) -> int:
        return SHAPE_TABLE[shape_id].complexity

    @staticmethod
    def cell_count(shape_id: ShapeId) -> int:
        return int(np.count_nonzero(SHAPE_TABLE[shape_id].pattern))

    @staticmethod
    def members(category: Category) -> List[ShapeId]:
        return [sid for sid, spec in SHAPE_TABLE.items() if spec.category == category]

    @staticmethod
    def smallest(candidates: Sequence[ShapeId] | None = None) -> ShapeId:
        pool = list(candidates) if candidates else list(ShapeId)
        return min(pool, key=lambda sid: (ShapeCatalog.cell_count(sid), int(sid)))


@dataclass(frozen=True)
class Piece:
    """A shape in one orientation with a cosmetic color."""

    shape_id: ShapeId
    orientation: int = 0
    color: BlockColor = BlockColor.BLUE
    _cells: Tuple[Tuple[int, int], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        variants = ShapeCatalog.orientations(self.shape_id)
        if not 0 <= self.orientation < len(variants):
            raise ValueError(f"{self.shape_id.name} has {len(variants)} orientations, got {self.orientation}")
        rows, cols = np.nonzero(variants[self.orientation])
        object.__setattr__(self, "_cells", tuple((int(r), int(c)) for r, c in zip(rows, cols)))

    def shape(self) -> Pattern:
        return ShapeCatalog.orientations(self.shape_id)[self.orientation]

    @property
    def height(self) -> int:
        return int(self.shape().shape[0])

    @property
    def width(self) -> int:
        return int(self.shape().shape[1])

    @property
    def offsets(self) -> Tuple[Tuple[int, int], ...]:
        return self._cells

    @property
    def cell_count(self) -> int:
        return len(self._cells)

    @property
    def category(self) -> Category:
        return ShapeCatalog.category(self.shape_id)

    @property
    def complexity(self) -> int:
        return ShapeCatalog.complexity(self.shape_id)

    def cells_at(self, origin_row: int, origin_col: int) -> List[Tuple[int, int]]:
        return [(origin_row + dr, origin_col + dc) for dr, dc in self._cells]

    def with_color(self, color: BlockColor) -> "Piece":
        return Piece(self.shape_id, self.orientation, color)
