from __future__ import annotations

from typing import Iterator, List, Optional, Sequence

from .pieces import Piece


class Hand:
    """Fixed-size tray of optional pieces.

    Slots empty one at a time as pieces are committed; the tray is only dealt
    again once every slot is empty.
    """

    def __init__(self, size: int = 3) -> None:
        self.size = int(size)
        self.slots: List[Optional[Piece]] = [None] * self.size

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> Iterator[Optional[Piece]]:
        return iter(self.slots)

    def __getitem__(self, index: int) -> Optional[Piece]:
        return self.slots[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Hand):
            return NotImplemented
        return self.slots == other.slots

    def pieces(self) -> List[Piece]:
        return [p for p in self.slots if p is not None]

    @property
    def remaining(self) -> int:
        return sum(1 for p in self.slots if p is not None)

    def is_empty(self) -> bool:
        return self.remaining == 0

    def fill(self, pieces: Sequence[Optional[Piece]]) -> None:
        if len(pieces) != self.size:
            raise ValueError(f"Hand expects {self.size} slots, got {len(pieces)}")
        self.slots = list(pieces)

    def take(self, index: int) -> Piece:
        """Empty ``index`` and return the piece that was there."""
        piece = self.slots[index]
        if piece is None:
            raise ValueError(f"Hand slot {index} is already empty")
        self.slots[index] = None
        return piece

    def put(self, index: int, piece: Optional[Piece]) -> None:
        self.slots[index] = piece

    def clear(self) -> None:
        self.slots = [None] * self.size

    def copy(self) -> "Hand":
        other = Hand(self.size)
        other.slots = list(self.slots)
        return other
