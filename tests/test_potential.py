from block_puzzle_core.game.board import BlockColor, Board
from block_puzzle_core.game.pieces import Piece, ShapeCatalog, ShapeId
from block_puzzle_core.game.potential import best_clearing_placement, max_simultaneous_clears


def _all_pieces():
    for shape_id in ShapeId:
        for orientation in range(len(ShapeCatalog.orientations(shape_id))):
            yield Piece(shape_id, orientation)


def test_empty_board_has_no_clearing_potential():
    board = Board(10)
    for piece in _all_pieces():
        assert max_simultaneous_clears(board, piece) == 0


def test_single_gap_is_found():
    board = Board(10)
    board.place_shape([(0, c) for c in range(9)], BlockColor.RED)
    lines, origin = best_clearing_placement(board, Piece(ShapeId.SINGLE))
    assert lines == 1
    assert origin == (0, 9)


def test_row_and_column_from_one_cell():
    board = Board(10)
    board.place_shape([(0, c) for c in range(1, 10)], BlockColor.RED)
    board.place_shape([(r, 0) for r in range(1, 10)], BlockColor.BLUE)
    assert max_simultaneous_clears(board, Piece(ShapeId.SINGLE)) == 2


def test_early_exit_is_a_lower_bound():
    board = Board(10)
    board.place_shape([(r, c) for r in range(3) for c in range(9)], BlockColor.RED)
    vertical = Piece(ShapeId.TRI_LINE, 1)
    assert max_simultaneous_clears(board, vertical) >= 2
    assert max_simultaneous_clears(board, vertical, early_exit=None) == 3


def test_piece_that_fits_nowhere():
    board = Board(3)
    board.place_shape([(1, 1)], BlockColor.RED)
    assert best_clearing_placement(board, Piece(ShapeId.SQUARE_3X3)) == (0, None)


def test_evaluation_does_not_touch_board():
    board = Board(10)
    board.place_shape([(0, c) for c in range(9)], BlockColor.RED)
    before = board.copy()
    for piece in _all_pieces():
        max_simultaneous_clears(board, piece, early_exit=None)
    assert board == before
