from __future__ import annotations

import random
from typing import Dict, Mapping, Optional, TypeVar

from block_puzzle_core.game.analysis import BoardAnalysis
from block_puzzle_core.game.pieces import Category

from .catalog import SPAWN_TABLE, Stage, eligible_members


T = TypeVar("T")

STAGE_MULTIPLIERS: Dict[Stage, Dict[Category, float]] = {
    Stage.EARLY: {
        Category.MONO: 1.4,
        Category.DUO: 1.3,
        Category.TRIO: 1.2,
        Category.TETROMINO: 1.0,
        Category.PENTOMINO: 0.5,
        Category.REWARD: 0.8,
    },
    Stage.MID: {
        Category.MONO: 0.9,
        Category.DUO: 1.0,
        Category.TRIO: 1.1,
        Category.TETROMINO: 1.2,
        Category.PENTOMINO: 1.0,
        Category.REWARD: 1.0,
    },
    Stage.LATE: {
        Category.MONO: 0.7,
        Category.DUO: 0.8,
        Category.TRIO: 1.0,
        Category.TETROMINO: 1.2,
        Category.PENTOMINO: 1.4,
        Category.REWARD: 1.2,
    },
}

LOCKOUT_MULTIPLIERS: Dict[Category, float] = {
    Category.MONO: 3.0,
    Category.DUO: 2.5,
    Category.TRIO: 1.5,
    Category.TETROMINO: 0.5,
    Category.PENTOMINO: 0.2,
    Category.REWARD: 0.1,
}

MAX_GAP_BIAS = 3.0


def lockout_threshold(grid_size: int) -> int:
    """Empty-cell count below which the board is treated as close to lockout."""
    return max(2 * grid_size, (grid_size * grid_size) // 5)


def board_bias(analysis: BoardAnalysis, threshold: Optional[int] = None) -> Dict[Category, float]:
    """Per-category multiplier derived from the current gaps on the board."""
    if threshold is None:
        threshold = lockout_threshold(analysis.size)
    if analysis.total_empty < threshold:
        return dict(LOCKOUT_MULTIPLIERS)

    ones = analysis.exactly_one
    twos = analysis.exactly_two
    near = analysis.near_complete
    bias = {
        Category.MONO: 1.0 + 0.35 * ones,
        Category.DUO: 1.0 + 0.25 * twos + 0.1 * ones,
        Category.TRIO: 1.0 + 0.15 * near + 0.05 * twos,
        Category.TETROMINO: 1.0 + 0.1 * near,
        Category.PENTOMINO: 1.0 + 0.05 * near,
        Category.REWARD: 1.0,
    }
    return {cat: min(MAX_GAP_BIAS, value) for cat, value in bias.items()}


def category_weights(stage: Stage, streak: bool, analysis: BoardAnalysis, allowed=None,
                     threshold: Optional[int] = None) -> Dict[Category, float]:
    """Weight of every category that currently has at least one eligible member."""
    bias = board_bias(analysis, threshold)
    weights: Dict[Category, float] = {}
    for category in Category:
        members = eligible_members(category, stage, streak, allowed)
        if not members:
            continue
        base = sum(SPAWN_TABLE[sid].base_weight for sid in members)
        weight = base * STAGE_MULTIPLIERS[stage][category] * bias[category]
        if weight > 0:
            weights[category] = weight
    return weights


def weighted_choice(weights: Mapping[T, float], rng: random.Random) -> Optional[T]:
    """Roulette-wheel pick over cumulative weights; ``None`` when nothing has weight."""
    total = sum(w for w in weights.values() if w > 0)
    if total <= 0:
        return None
    target = rng.random() * total
    cumulative = 0.0
    last: Optional[T] = None
    for key, weight in weights.items():
        if weight <= 0:
            continue
        cumulative += weight
        last = key
        if target < cumulative:
            return key
    return last
