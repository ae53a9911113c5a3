from __future__ import annotations

from typing import Tuple


Coordinate = Tuple[int, int]


class PuzzleError(Exception):
    """Base class for errors raised by the puzzle core."""


class PlacementError(PuzzleError):
    """A piece could not be committed to the board."""

    def __init__(self, message: str, position: Coordinate | None = None) -> None:
        super().__init__(message)
        self.position = position


class OutOfBoundsError(PlacementError):
    pass


class CollisionError(PlacementError):
    pass


class InvalidPatternError(PuzzleError):
    """Pattern is empty, ragged, or not a single connected polyomino."""


class NoValidPositionError(PuzzleError):
    """No origin on the board accepts the given piece."""
