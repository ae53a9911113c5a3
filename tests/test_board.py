import numpy as np
import pytest

from block_puzzle_core.game.board import BlockColor, Board, CellKind, LineKind
from block_puzzle_core.game.errors import CollisionError, OutOfBoundsError


def test_new_board_is_empty():
    board = Board(10)
    assert board.is_empty()
    assert board.empty_count() == 100
    assert board.cell((3, 4)).kind is CellKind.EMPTY
    assert board.cell((3, 4)).color is None


def test_cell_outside_board_raises():
    board = Board(5)
    with pytest.raises(OutOfBoundsError):
        board.cell((5, 0))
    assert not board.can_place((-1, 2))


def test_place_shape_changes_exactly_the_targets():
    board = Board(10)
    before = board.copy()
    targets = [(2, 3), (2, 4), (3, 4)]
    assert board.place_shape(targets, BlockColor.GREEN) == 3
    for row in range(10):
        for col in range(10):
            cell = board.cell((row, col))
            if (row, col) in targets:
                assert cell.kind is CellKind.OCCUPIED
                assert cell.color is BlockColor.GREEN
            else:
                assert cell == before.cell((row, col))


def test_place_shape_collision_leaves_grid_untouched():
    board = Board(10)
    board.place_shape([(0, 1)], BlockColor.RED)
    snapshot = board.copy()
    with pytest.raises(CollisionError) as excinfo:
        board.place_shape([(0, 0), (0, 1)], BlockColor.BLUE)
    assert excinfo.value.position == (0, 1)
    assert board == snapshot


def test_place_shape_out_of_bounds_leaves_grid_untouched():
    board = Board(10)
    with pytest.raises(OutOfBoundsError):
        board.place_shape([(9, 9), (9, 10)], BlockColor.BLUE)
    assert board.is_empty()
    assert board.cell((9, 9)).kind is CellKind.EMPTY


def test_clear_previews_is_idempotent():
    board = Board(6)
    board.place_shape([(0, 0)], BlockColor.RED)
    board.set_preview([(1, 1), (1, 2), (0, 0)], BlockColor.CYAN)
    assert board.cell((0, 0)).kind is CellKind.OCCUPIED
    assert board.cell((1, 1)).kind is CellKind.PREVIEW
    board.clear_previews()
    once = board.copy()
    board.clear_previews()
    assert board == once
    assert board.cell((1, 1)).kind is CellKind.EMPTY


def test_preview_cells_stay_placeable_and_never_complete_lines():
    board = Board(4)
    board.place_shape([(0, 0), (0, 1), (0, 2)], BlockColor.RED)
    board.set_preview([(0, 3)], BlockColor.RED)
    assert board.can_place((0, 3))
    assert board.find_completed_lines() == []


def test_completed_lines_never_contain_open_cells():
    rng = np.random.default_rng(7)
    for _ in range(50):
        board = Board(6)
        board.kinds[:] = rng.integers(0, 4, size=(6, 6))
        board.colors[:] = rng.integers(0, len(BlockColor), size=(6, 6))
        for clear in board.find_completed_lines():
            for pos in clear.positions:
                assert board.cell(pos).kind in (CellKind.OCCUPIED, CellKind.LOCKED)


def test_find_completed_lines_reports_rows_then_columns_without_mutating():
    board = Board(5)
    board.place_shape([(2, c) for c in range(5)], BlockColor.BLUE)
    board.place_shape([(r, 4) for r in range(5) if r != 2], BlockColor.RED)
    before = board.copy()
    clears = board.find_completed_lines()
    assert [(c.kind, c.index) for c in clears] == [(LineKind.ROW, 2), (LineKind.COLUMN, 4)]
    assert clears[0].id == "row-2"
    assert clears[1].id == "col-4"
    assert board == before


def test_locked_cells_complete_lines_and_survive_reset():
    board = Board(4)
    board.load_obstacles([(1, 0), (1, 1)], BlockColor.PURPLE)
    board.place_shape([(1, 2), (1, 3)], BlockColor.RED)
    clears = board.find_completed_lines()
    assert len(clears) == 1
    # Only the placed cells carry fragments.
    assert clears[0].colors == (BlockColor.RED, BlockColor.RED)

    board.reset()
    assert board.locked_positions() == [(1, 0), (1, 1)]
    assert board.is_empty()
    board.reset(keep_locked=False)
    assert board.locked_positions() == []


def test_load_obstacles_skips_positions_outside(caplog):
    board = Board(3)
    with caplog.at_level("WARNING", logger="block_puzzle_core.game.board"):
        loaded = board.load_obstacles([(0, 0), (3, 3)], BlockColor.PURPLE)
    assert loaded == 1
    assert "outside the board" in caplog.text


def test_copy_is_independent():
    board = Board(4)
    clone = board.copy()
    clone.place_shape([(0, 0)], BlockColor.RED)
    assert board.is_empty()
    assert board != clone


def test_filled_ratio_counts_locked_cells():
    board = Board(2)
    board.load_obstacles([(0, 0)], BlockColor.PURPLE)
    board.place_shape([(1, 1)], BlockColor.RED)
    assert board.filled_ratio() == pytest.approx(0.5)
