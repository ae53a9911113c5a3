"""Block puzzle game session.

This package ties the board, hand, score tracker and spawn engine into a
playable session, plus the undo history and the save-game schema.
"""

from .history import GameSnapshot, UndoHistory
from .persistence import SAVE_VERSION, GameSavePayload
from .session import BlockPuzzleGame, GameConfig, PlacementOutcome

__all__ = [
    "GameSnapshot",
    "UndoHistory",
    "SAVE_VERSION",
    "GameSavePayload",
    "BlockPuzzleGame",
    "GameConfig",
    "PlacementOutcome",
]
