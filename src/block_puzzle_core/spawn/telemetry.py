from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Sequence

import numpy as np

from block_puzzle_core.game.pieces import Piece

from .catalog import Stage


NO_FIT_SCORE = -1000.0

STAGE_COMPLEXITY_TARGET: Dict[Stage, float] = {
    Stage.EARLY: 3.0,
    Stage.MID: 5.0,
    Stage.LATE: 7.0,
}


@dataclass
class SpawnTelemetry:
    hands_generated: int = 0
    fit_repairs: int = 0
    clear_repairs: int = 0
    fallback_pieces: int = 0
    dead_deals: int = 0
    last_hand_has_fit: bool = True
    last_dead_deal: bool = False
    last_hand_score: float = 0.0
    clears_per_10: float = 0.0

    def snapshot(self) -> "SpawnTelemetry":
        return replace(self)

    def as_dict(self) -> Dict[str, float]:
        return {
            "hands_generated": self.hands_generated,
            "fit_repairs": self.fit_repairs,
            "clear_repairs": self.clear_repairs,
            "fallback_pieces": self.fallback_pieces,
            "dead_deals": self.dead_deals,
            "last_hand_has_fit": self.last_hand_has_fit,
            "last_dead_deal": self.last_dead_deal,
            "last_hand_score": self.last_hand_score,
            "clears_per_10": self.clears_per_10,
        }


def hand_diagnostic_score(pieces: Sequence[Piece], fits: Sequence[bool],
                          potentials: Sequence[int], stage: Stage) -> float:
    """Heuristic quality of a dealt hand. Logged for tuning, never used to gate."""
    if not pieces or not any(fits):
        return NO_FIT_SCORE
    score = 100.0
    clearing = sum(1 for p in potentials if p > 0)
    if 0 < clearing < len(pieces):
        score += 30.0
    sizes = np.array([p.cell_count for p in pieces], dtype=float)
    complexities = np.array([p.complexity for p in pieces], dtype=float)
    score += 5.0 * float(np.var(sizes)) + 5.0 * float(np.var(complexities))
    score -= 10.0 * abs(float(np.mean(complexities)) - STAGE_COMPLEXITY_TARGET[stage])
    return score
