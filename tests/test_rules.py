import pytest

from block_puzzle_core.game.rules import ScoreTracker, ScoringRules


@pytest.mark.parametrize("lines, bonus", [(0, 0), (1, 100), (2, 300), (3, 600), (4, 1100)])
def test_line_bonus_grows_with_combo(lines, bonus):
    assert ScoringRules().score_for_lines(lines) == bonus


def test_record_placement_tracks_best():
    tracker = ScoreTracker()
    breakdown = tracker.record_placement(placed_cells=4, lines_cleared=1)
    assert breakdown.placement_points == 4
    assert breakdown.line_clear_bonus == 100
    assert breakdown.total_points == 104
    assert tracker.best_score == 104

    tracker.reset()
    assert tracker.total_score == 0
    assert tracker.best_score == 104


def test_restore_clamps_values():
    tracker = ScoreTracker()
    tracker.restore(total_score=-5, best_score=10)
    assert tracker.total_score == 0
    assert tracker.best_score == 10
    tracker.restore(total_score=50, best_score=10)
    assert tracker.best_score == 50


def test_custom_rules():
    rules = ScoringRules(placement_points_per_cell=2, line_clear_points=10, combo_unit=5)
    tracker = ScoreTracker(rules)
    tracker.record_placement(3, 2)
    assert tracker.total_score == 6 + 20 + 5
