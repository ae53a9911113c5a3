"""Spawn metadata for every catalog shape.

Shapes and their patterns live in :mod:`block_puzzle_core.game.pieces`; this
module adds what only the spawn engine cares about: base weights, the stage
a shape unlocks at, and streak gating.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, FrozenSet, List, Optional

from block_puzzle_core.game.pieces import Category, ShapeCatalog, ShapeId


class Stage(IntEnum):
    EARLY = 0
    MID = 1
    LATE = 2


@dataclass(frozen=True)
class SpawnEntry:
    category: Category
    base_weight: float
    min_stage: Stage = Stage.EARLY
    requires_streak: bool = False
    reward_only: bool = False


SPAWN_TABLE: Dict[ShapeId, SpawnEntry] = {
    ShapeId.SINGLE: SpawnEntry(Category.MONO, 1.0),
    ShapeId.DOMINO: SpawnEntry(Category.DUO, 1.0),
    ShapeId.TRI_LINE: SpawnEntry(Category.TRIO, 1.0),
    ShapeId.TRI_CORNER: SpawnEntry(Category.TRIO, 1.0),
    ShapeId.TET_LINE: SpawnEntry(Category.TETROMINO, 1.0),
    ShapeId.TET_SQUARE: SpawnEntry(Category.TETROMINO, 1.2),
    ShapeId.TET_T: SpawnEntry(Category.TETROMINO, 0.9),
    ShapeId.TET_L: SpawnEntry(Category.TETROMINO, 1.0),
    ShapeId.TET_S: SpawnEntry(Category.TETROMINO, 0.7, min_stage=Stage.MID),
    ShapeId.PENT_LINE: SpawnEntry(Category.PENTOMINO, 0.8),
    ShapeId.PENT_L: SpawnEntry(Category.PENTOMINO, 0.8),
    ShapeId.PENT_P: SpawnEntry(Category.PENTOMINO, 0.8, min_stage=Stage.MID),
    ShapeId.PENT_U: SpawnEntry(Category.PENTOMINO, 0.6, min_stage=Stage.MID),
    ShapeId.PENT_V: SpawnEntry(Category.PENTOMINO, 0.7),
    ShapeId.PENT_T: SpawnEntry(Category.PENTOMINO, 0.5, min_stage=Stage.LATE),
    ShapeId.PENT_PLUS: SpawnEntry(Category.PENTOMINO, 0.4, min_stage=Stage.LATE),
    ShapeId.PENT_W: SpawnEntry(Category.PENTOMINO, 0.3, min_stage=Stage.LATE, requires_streak=True),
    ShapeId.PENT_Z: SpawnEntry(Category.PENTOMINO, 0.3, min_stage=Stage.LATE, requires_streak=True),
    ShapeId.RECT_2X3: SpawnEntry(Category.REWARD, 1.0, requires_streak=True, reward_only=True),
    ShapeId.RECT_2X4: SpawnEntry(Category.REWARD, 0.7, min_stage=Stage.MID, requires_streak=True, reward_only=True),
    ShapeId.SQUARE_3X3: SpawnEntry(Category.REWARD, 0.8, requires_streak=True, reward_only=True),
}

# Bag sizes per category; a bag is refilled only when it runs dry.
CATEGORY_CAPACITY: Dict[Category, int] = {
    Category.MONO: 4,
    Category.DUO: 4,
    Category.TRIO: 6,
    Category.TETROMINO: 10,
    Category.PENTOMINO: 10,
    Category.REWARD: 4,
}

# Order in which the fit and clearing repairs look for substitutes.
REPAIR_ORDER = (Category.MONO, Category.DUO, Category.TRIO, Category.TETROMINO, Category.PENTOMINO)


def is_eligible(shape_id: ShapeId, stage: Stage, streak: bool,
                allowed: Optional[FrozenSet[ShapeId]] = None) -> bool:
    entry = SPAWN_TABLE[shape_id]
    if allowed is not None and shape_id not in allowed:
        return False
    if stage < entry.min_stage:
        return False
    if (entry.requires_streak or entry.reward_only) and not streak:
        return False
    return True


def eligible_members(category: Category, stage: Stage, streak: bool,
                     allowed: Optional[FrozenSet[ShapeId]] = None) -> List[ShapeId]:
    return [sid for sid in ShapeCatalog.members(category) if is_eligible(sid, stage, streak, allowed)]


def repair_candidates(category: Category, streak: bool,
                      allowed: Optional[FrozenSet[ShapeId]] = None) -> List[ShapeId]:
    """Shapes a repair pass may substitute in; stage gating does not apply."""
    return [sid for sid in ShapeCatalog.members(category) if is_eligible(sid, Stage.LATE, streak, allowed)]
