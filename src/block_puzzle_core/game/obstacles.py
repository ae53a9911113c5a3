"""Pre-placed obstacle layouts.

Obstacles are loaded onto the board as locked cells: they complete lines
like placed blocks do but survive line clears and reset-within-level.
"""

from __future__ import annotations

import random
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Set

from .board import Coordinate


class ObstaclePattern(str, Enum):
    EMPTY = "empty"
    CORNERS = "corners"
    BORDERS = "borders"
    CHECKERBOARD = "checkerboard"
    CROSS = "cross"
    DIAGONAL = "diagonal"
    L_SHAPE = "l_shape"
    SCATTERED = "scattered"
    FRAME = "frame"


def coverage_for(difficulty: int) -> float:
    """Target share of the board covered by obstacles at ``difficulty`` (1-10)."""
    if difficulty <= 2:
        return 0.10
    if difficulty <= 4:
        return 0.15
    if difficulty <= 6:
        return 0.20
    if difficulty <= 8:
        return 0.25
    if difficulty <= 10:
        return 0.30
    return 0.35


def _corners(size: int, count: int) -> List[Coordinate]:
    corners = [(0, 0), (0, size - 1), (size - 1, 0), (size - 1, size - 1)]
    return corners[:count]


def _ring(size: int, thickness: int) -> Set[Coordinate]:
    cells: Set[Coordinate] = set()
    for t in range(thickness):
        for i in range(size):
            cells.update({(t, i), (size - 1 - t, i), (i, t), (i, size - 1 - t)})
    return cells


def _checkerboard(size: int, density: int) -> List[Coordinate]:
    skip = max(1, 10 - density)  # denser at higher difficulty
    return [
        (row, col)
        for row in range(0, size, skip)
        for col in range(0, size, skip)
        if (row + col) % (skip * 2) == 0
    ]


def _cross(size: int, thickness: int) -> Set[Coordinate]:
    center = size // 2
    cells: Set[Coordinate] = set()
    for i in range(size):
        for t in range(thickness):
            for line in (center - t, center + t):
                if 0 <= line < size:
                    cells.add((line, i))
                    cells.add((i, line))
    return cells


def _diagonal(size: int, thickness: int) -> Set[Coordinate]:
    cells: Set[Coordinate] = set()
    for i in range(size):
        for t in range(thickness):
            if i + t < size:
                cells.add((i, i + t))
            if i - t >= 0:
                cells.add((i, size - 1 - (i - t)))
    return cells


def _l_shape(size: int, length: int) -> List[Coordinate]:
    start = 1
    vertical = [(row, start) for row in range(start, min(start + length, size))]
    corner_row = min(start + length, size) - 1
    horizontal = [(corner_row, col) for col in range(start + 1, min(start + length, size))]
    return vertical + horizontal


def _scattered(size: int, count: int, rng: random.Random) -> Set[Coordinate]:
    cells: Set[Coordinate] = set()
    attempts = 0
    while len(cells) < count and attempts < count * 10:
        cells.add((rng.randrange(size), rng.randrange(size)))
        attempts += 1
    return cells


def _open_full_lines(cells: Set[Coordinate], size: int) -> Set[Coordinate]:
    """Punch a gap into any row or column the obstacles would fill completely."""
    cells = set(cells)
    gap = size // 2
    for row in range(size):
        if all((row, col) in cells for col in range(size)):
            cells.discard((row, (gap + row) % size))
    for col in range(size):
        if all((row, col) in cells for row in range(size)):
            cells.discard(((gap + col) % size, col))
    return cells


def generate_obstacles(size: int, difficulty: int, pattern: ObstaclePattern,
                       rng: Optional[random.Random] = None) -> List[Coordinate]:
    """Return the sorted obstacle positions for ``pattern`` on a ``size`` board."""
    rng = rng or random.Random()
    target = int(size * size * coverage_for(difficulty))
    thickness = 1 if difficulty <= 3 else 2
    builders: Dict[ObstaclePattern, Callable[[], Iterable[Coordinate]]] = {
        ObstaclePattern.EMPTY: lambda: [],
        ObstaclePattern.CORNERS: lambda: _corners(size, min(target, 4)),
        ObstaclePattern.BORDERS: lambda: _ring(size, thickness),
        ObstaclePattern.CHECKERBOARD: lambda: _checkerboard(size, difficulty),
        ObstaclePattern.CROSS: lambda: _cross(size, thickness),
        ObstaclePattern.DIAGONAL: lambda: _diagonal(size, thickness),
        ObstaclePattern.L_SHAPE: lambda: _l_shape(size, min(difficulty + 2, size - 1)),
        ObstaclePattern.SCATTERED: lambda: _scattered(size, target, rng),
        ObstaclePattern.FRAME: lambda: _ring(size, thickness + 1),
    }
    cells = set(builders[ObstaclePattern(pattern)]())
    # A wall of locked cells would count as a permanently complete line.
    return sorted(_open_full_lines(cells, size))
