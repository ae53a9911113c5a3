"""Game module for the block puzzle core.

Exports the board-level building blocks:
- Board / Cell / CellKind / BlockColor: Grid state and mutation primitives
- ShapeId / Category / Piece / ShapeCatalog: Polyomino catalog and orientations
- PlacementValidator: Fit and collision checks
- analyze_board / max_simultaneous_clears: Board metrics used by the spawner
- process_completed_lines: Row and column clearing
- ScoringRules / ScoreTracker: Score bookkeeping
- Hand: The three-slot tray
"""

from .analysis import BoardAnalysis, analyze_board
from .board import BlockColor, Board, Cell, CellKind, LineClear, LineKind
from .errors import (
    CollisionError,
    InvalidPatternError,
    NoValidPositionError,
    OutOfBoundsError,
    PlacementError,
    PuzzleError,
)
from .hand import Hand
from .lines import LineClearResult, process_completed_lines
from .obstacles import ObstaclePattern, generate_obstacles
from .pieces import Category, Piece, ShapeCatalog, ShapeId, generate_orientations, trim
from .placement import PlacementValidator, valid_actions
from .potential import best_clearing_placement, max_simultaneous_clears
from .rules import ScoreBreakdown, ScoreEvent, ScoreTracker, ScoringRules

__all__ = [
    "BoardAnalysis",
    "analyze_board",
    "BlockColor",
    "Board",
    "Cell",
    "CellKind",
    "LineClear",
    "LineKind",
    "CollisionError",
    "InvalidPatternError",
    "NoValidPositionError",
    "OutOfBoundsError",
    "PlacementError",
    "PuzzleError",
    "Hand",
    "LineClearResult",
    "process_completed_lines",
    "ObstaclePattern",
    "generate_obstacles",
    "Category",
    "Piece",
    "ShapeCatalog",
    "ShapeId",
    "generate_orientations",
    "trim",
    "PlacementValidator",
    "valid_actions",
    "best_clearing_placement",
    "max_simultaneous_clears",
    "ScoreBreakdown",
    "ScoreEvent",
    "ScoreTracker",
    "ScoringRules",
]
