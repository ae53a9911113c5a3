from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from .board import Board, Coordinate
from .errors import CollisionError, NoValidPositionError, OutOfBoundsError
from .pieces import Piece


class PlacementValidator:
    """Fit and collision checks for pieces against a board."""

    def __init__(self, board: Board) -> None:
        self.board = board

    def cells_at(self, piece: Piece, origin: Coordinate) -> List[Coordinate]:
        return piece.cells_at(origin[0], origin[1])

    def fits_bounds(self, piece: Piece, origin: Coordinate) -> bool:
        row, col = origin
        size = self.board.size
        return row >= 0 and col >= 0 and row + piece.height <= size and col + piece.width <= size

    def validate(self, piece: Piece, origin: Coordinate) -> List[Coordinate]:
        """Return the target cells or raise if the piece cannot go at ``origin``."""
        cells = self.cells_at(piece, origin)
        for row, col in cells:
            if not self.board.is_inside(row, col):
                raise OutOfBoundsError(
                    f"{piece.shape_id.name} at {origin} leaves the board at {(row, col)}", (row, col)
                )
        for row, col in cells:
            if not self.board.can_place((row, col)):
                raise CollisionError(f"{piece.shape_id.name} at {origin} overlaps {(row, col)}", (row, col))
        return cells

    def is_valid(self, piece: Piece, origin: Coordinate) -> bool:
        if not self.fits_bounds(piece, origin):
            return False
        return all(self.board.can_place(cell) for cell in self.cells_at(piece, origin))

    def iter_valid_positions(self, piece: Piece) -> Iterable[Coordinate]:
        size = self.board.size
        for row in range(size - piece.height + 1):
            for col in range(size - piece.width + 1):
                if all(self.board.can_place((row + dr, col + dc)) for dr, dc in piece.offsets):
                    yield (row, col)

    def valid_positions(self, piece: Piece) -> List[Coordinate]:
        return list(self.iter_valid_positions(piece))

    def first_valid_position(self, piece: Piece) -> Optional[Coordinate]:
        return next(iter(self.iter_valid_positions(piece)), None)

    def fits_anywhere(self, piece: Piece) -> bool:
        return self.first_valid_position(piece) is not None

    def find_position(self, piece: Piece) -> Coordinate:
        position = self.first_valid_position(piece)
        if position is None:
            raise NoValidPositionError(f"No position on the board accepts {piece.shape_id.name}")
        return position

    def any_fit(self, pieces: Iterable[Optional[Piece]]) -> bool:
        return any(p is not None and self.fits_anywhere(p) for p in pieces)


def valid_actions(board: Board, pieces: Iterable[Optional[Piece]]) -> List[Tuple[int, int, int]]:
    """List of ``(slot, row, col)`` placements available for a hand."""
    validator = PlacementValidator(board)
    actions: List[Tuple[int, int, int]] = []
    for slot, piece in enumerate(pieces):
        if piece is None:
            continue
        for row, col in validator.iter_valid_positions(piece):
            actions.append((slot, row, col))
    return actions
