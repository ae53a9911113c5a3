import pytest

from block_puzzle_core.game.analysis import analyze_board
from block_puzzle_core.game.board import BlockColor, Board
from block_puzzle_core.game.hand import Hand
from block_puzzle_core.game.pieces import Piece, ShapeId


def test_empty_board_analysis():
    analysis = analyze_board(Board(10))
    assert analysis.total_empty == 100
    assert analysis.exactly_one == analysis.exactly_two == analysis.near_complete == 0
    assert analysis.fill_ratio == pytest.approx(0.0)


def test_gap_buckets():
    board = Board(10)
    board.place_shape([(0, c) for c in range(9)], BlockColor.RED)   # row 0: one gap
    board.place_shape([(1, c) for c in range(8)], BlockColor.RED)   # row 1: two gaps
    board.place_shape([(2, c) for c in range(6)], BlockColor.RED)   # row 2: four gaps
    board.set_preview([(0, 9)], BlockColor.BLUE)
    analysis = analyze_board(board)
    assert analysis.row_empty[:3] == (1, 2, 4)
    assert analysis.exactly_one == 1
    assert analysis.exactly_two == 1
    assert analysis.near_complete == 1
    assert analysis.total_empty == 100 - 23


def test_hand_slots():
    hand = Hand(3)
    assert hand.is_empty()
    hand.fill([Piece(ShapeId.SINGLE), None, Piece(ShapeId.DOMINO)])
    assert hand.remaining == 2
    assert hand.take(0) == Piece(ShapeId.SINGLE)
    with pytest.raises(ValueError):
        hand.take(0)
    with pytest.raises(ValueError):
        hand.fill([None])
    copy = hand.copy()
    hand.clear()
    assert copy.remaining == 1
    assert hand.is_empty()
