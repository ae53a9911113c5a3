from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    placement_points_per_cell: int = 1
    line_clear_points: int = 100
    combo_unit: int = 100

    def score_for_lines(self, lines: int) -> int:
        if lines <= 0:
            return 0
        # Combo grows per extra simultaneous line: 100, 300, 600, 1100, ...
        combo = (1 << (lines - 1)) - 1
        return self.line_clear_points * lines + combo * self.combo_unit

    def score_for_cells(self, cells: int) -> int:
        return max(0, cells) * self.placement_points_per_cell


@dataclass(frozen=True)
class ScoreBreakdown:
    placed_cells: int
    lines_cleared: int
    placement_points: int
    line_clear_bonus: int

    @property
    def total_points(self) -> int:
        return self.placement_points + self.line_clear_bonus


@dataclass(frozen=True)
class ScoreEvent:
    """Public score update emitted after a committed placement."""

    placed_cells: int
    lines_cleared: int
    placement_points: int
    line_clear_bonus: int
    total_delta: int
    new_total: int
    high_score: int
    is_new_high_score: bool


class ScoreTracker:
    """Session total plus the best total seen so far."""

    def __init__(self, rules: ScoringRules | None = None) -> None:
        self.rules = rules or ScoringRules()
        self.total_score = 0
        self.best_score = 0

    def reset(self) -> None:
        self.total_score = 0

    def restore(self, total_score: int, best_score: int) -> None:
        self.total_score = max(0, int(total_score))
        self.best_score = max(self.total_score, int(best_score))

    def record_placement(self, placed_cells: int, lines_cleared: int) -> ScoreBreakdown:
        placement_points = self.rules.score_for_cells(placed_cells)
        bonus = self.rules.score_for_lines(lines_cleared)
        self.total_score += placement_points + bonus
        if self.total_score > self.best_score:
            self.best_score = self.total_score
        return ScoreBreakdown(
            placed_cells=max(0, placed_cells),
            lines_cleared=max(0, lines_cleared),
            placement_points=placement_points,
            line_clear_bonus=bonus,
        )
