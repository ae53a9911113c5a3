import pytest

from block_puzzle_core.game.board import BlockColor, Board
from block_puzzle_core.game.errors import CollisionError, NoValidPositionError, OutOfBoundsError
from block_puzzle_core.game.pieces import Piece, ShapeId
from block_puzzle_core.game.placement import PlacementValidator, valid_actions


def test_horizontal_five_line_past_right_edge_is_out_of_bounds():
    validator = PlacementValidator(Board(10))
    line = Piece(ShapeId.PENT_LINE, 0)
    assert line.width == 5
    with pytest.raises(OutOfBoundsError):
        validator.validate(line, (0, 6))
    assert not validator.is_valid(line, (0, 6))
    assert validator.is_valid(line, (0, 5))


def test_collision_reports_blocking_cell():
    board = Board(10)
    board.place_shape([(4, 4)], BlockColor.RED)
    validator = PlacementValidator(board)
    with pytest.raises(CollisionError) as excinfo:
        validator.validate(Piece(ShapeId.TET_SQUARE), (3, 3))
    assert excinfo.value.position == (4, 4)


def test_find_position_raises_when_nothing_fits():
    board = Board(3)
    board.place_shape([(1, c) for c in range(3)], BlockColor.RED)
    validator = PlacementValidator(board)
    tall = Piece(ShapeId.TRI_LINE, 1)
    assert tall.height == 3
    assert not validator.fits_anywhere(tall)
    with pytest.raises(NoValidPositionError):
        validator.find_position(tall)
    assert validator.find_position(Piece(ShapeId.TRI_LINE, 0)) == (0, 0)


def test_valid_positions_on_empty_board():
    validator = PlacementValidator(Board(10))
    assert len(validator.valid_positions(Piece(ShapeId.SINGLE))) == 100
    assert len(validator.valid_positions(Piece(ShapeId.SQUARE_3X3))) == 64


def test_preview_cells_accept_pieces():
    board = Board(4)
    board.set_preview([(0, 0)], BlockColor.BLUE)
    assert PlacementValidator(board).is_valid(Piece(ShapeId.SINGLE), (0, 0))


def test_any_fit_skips_empty_slots():
    board = Board(2)
    board.place_shape([(0, 0), (1, 1)], BlockColor.RED)
    validator = PlacementValidator(board)
    assert not validator.any_fit([None, Piece(ShapeId.DOMINO, 0), Piece(ShapeId.DOMINO, 1)])
    assert validator.any_fit([None, Piece(ShapeId.SINGLE)])


def test_valid_actions_lists_slot_row_col():
    board = Board(2)
    actions = valid_actions(board, [Piece(ShapeId.TET_SQUARE), None, Piece(ShapeId.DOMINO, 0)])
    assert actions == [(0, 0, 0), (2, 0, 0), (2, 1, 0)]
