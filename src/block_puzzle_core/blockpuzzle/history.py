from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, Optional, Tuple

from block_puzzle_core.game.board import Board
from block_puzzle_core.game.pieces import Piece


@dataclass(frozen=True)
class GameSnapshot:
    board: Board
    score: int
    best_score: int
    slots: Tuple[Optional[Piece], ...]
    held: Optional[Piece]
    hold_used: bool
    spawn_state: Dict[str, Any]
    game_over: bool


class UndoHistory:
    """Bounded stack of snapshots; the newest entry is the current state."""

    def __init__(self, max_size: int = 100) -> None:
        self.max_size = max(1, int(max_size))
        self._snapshots: Deque[GameSnapshot] = deque(maxlen=self.max_size)

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def can_undo(self) -> bool:
        return len(self._snapshots) > 1

    @property
    def undo_count(self) -> int:
        return max(0, len(self._snapshots) - 1)

    def record(self, snapshot: GameSnapshot) -> None:
        self._snapshots.append(snapshot)

    def undo(self) -> Optional[GameSnapshot]:
        """Drop the current snapshot and return the one before it."""
        if not self.can_undo:
            return None
        self._snapshots.pop()
        return self._snapshots[-1]

    def clear(self) -> None:
        self._snapshots.clear()
