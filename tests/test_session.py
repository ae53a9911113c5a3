import logging

import numpy as np
import pytest

from block_puzzle_core.blockpuzzle import BlockPuzzleGame, GameConfig
from block_puzzle_core.game.board import BlockColor, CellKind
from block_puzzle_core.game.errors import OutOfBoundsError
from block_puzzle_core.game.obstacles import ObstaclePattern
from block_puzzle_core.game.pieces import Piece, ShapeId


SINGLE = Piece(ShapeId.SINGLE)


def _game(**config) -> BlockPuzzleGame:
    config.setdefault("random_seed", 0)
    return BlockPuzzleGame(GameConfig(**config))


def test_new_game_deals_a_full_hand():
    game = _game()
    assert game.hand.remaining == 3
    assert game.score == 0
    assert not game.game_over
    assert game.is_game_active
    assert game.spawn_telemetry().hands_generated == 1


def test_out_of_bounds_placement_is_rejected(caplog):
    game = _game()
    with caplog.at_level(logging.WARNING, logger="block_puzzle_core.blockpuzzle.session"):
        with pytest.raises(OutOfBoundsError):
            game.place_piece(Piece(ShapeId.PENT_LINE, 0), (0, 6))
    assert "Rejected" in caplog.text
    assert game.board.is_empty()
    assert game.score == 0


def test_play_slot_empties_slot_and_refills_when_all_used():
    game = _game()
    game.set_hand([SINGLE, SINGLE, SINGLE])
    outcome = game.play_slot(0, (0, 0))
    assert outcome.cells_placed == 1
    assert game.hand[0] is None
    assert game.hand.remaining == 2
    game.play_slot(1, (0, 1))
    assert game.hand.remaining == 1
    game.play_slot(2, (0, 2))
    assert game.hand.remaining == 3
    assert game.score == 3
    assert game.total_pieces_placed == 3
    assert game.spawn_telemetry().hands_generated == 2


def test_playing_an_empty_slot_raises():
    game = _game()
    game.set_hand([None, SINGLE, SINGLE])
    with pytest.raises(ValueError):
        game.play_slot(0, (0, 0))


def test_completing_a_row_scores_and_clears():
    game = _game()
    game.board.place_shape([(0, c) for c in range(9)], BlockColor.RED)
    game.set_hand([SINGLE, Piece(ShapeId.DOMINO), Piece(ShapeId.DOMINO)])

    outcome = game.play_slot(0, (0, 9))

    assert outcome.lines_cleared == 1
    assert outcome.score_event.total_delta == 101
    assert outcome.score_event.is_new_high_score
    assert outcome.board_cleared
    assert game.last_score_event == outcome.score_event
    assert [c.id for c in game.active_line_clears] == ["row-0"]
    assert game.board.is_empty()
    # A board wipe counts as a full board's worth of extra lines.
    assert game.spawner.recent_clears[-1] == 11


def test_placement_records_spawn_progress():
    game = _game()
    game.set_hand([SINGLE, SINGLE, SINGLE])
    game.play_slot(0, (3, 3))
    assert game.spawner.placements_made == 1
    assert list(game.spawner.recent_clears) == [0]


def test_consume_slot_discards_without_scoring():
    game = _game()
    game.set_hand([SINGLE, SINGLE, SINGLE])
    assert game.consume_slot(0) == SINGLE
    game.consume_slot(1)
    game.consume_slot(2)
    assert game.hand.remaining == 3
    assert game.score == 0
    assert game.board.is_empty()


def test_hold_and_swap():
    game = _game()
    a, b, c = SINGLE, Piece(ShapeId.DOMINO), Piece(ShapeId.TRI_LINE)
    game.set_hand([a, b, c])
    assert game.hold_slot(0)
    assert game.held == a
    assert game.hand[0] is None
    # One hold per placement.
    assert not game.hold_slot(1)

    game.play_slot(1, (5, 5))
    assert game.hold_slot(2)
    assert game.hand[2] == a
    assert game.held == c


def test_holding_the_last_piece_deals_a_new_hand():
    game = _game()
    game.set_hand([None, None, SINGLE])
    assert game.hold_slot(2)
    assert game.held == SINGLE
    assert game.hand.remaining == 3


def test_hold_disabled():
    game = _game(allow_hold=False)
    assert not game.hold_slot(0)
    assert game.held is None


def test_play_held_piece():
    game = _game()
    game.set_hand([SINGLE, SINGLE, SINGLE])
    game.hold_slot(0)
    outcome = game.play_held((0, 0))
    assert outcome.cells_placed == 1
    assert game.held is None
    with pytest.raises(ValueError):
        game.play_held((1, 1))


def test_undo_restores_previous_state():
    game = _game()
    assert not game.undo()
    game.set_hand([SINGLE, SINGLE, SINGLE])
    game.play_slot(0, (0, 0))
    assert game.score == 1

    assert game.undo()
    assert game.board.is_empty()
    assert game.score == 0
    assert game.hand[0] == SINGLE
    assert game.spawner.placements_made == 0


def test_undo_history_is_bounded():
    game = _game(undo_limit=2)
    game.set_hand([SINGLE, SINGLE, SINGLE])
    game.play_slot(0, (0, 0))
    game.play_slot(1, (0, 1))
    assert game.undo()
    assert not game.undo()


def test_preview_marks_valid_placements_only():
    game = _game()
    square = Piece(ShapeId.TET_SQUARE)
    assert game.preview(square, (0, 0))
    assert int(np.count_nonzero(game.board.kinds == CellKind.PREVIEW)) == 4
    assert not game.preview(square, (9, 9))
    assert int(np.count_nonzero(game.board.kinds == CellKind.PREVIEW)) == 0

    game.preview(square, (0, 0))
    game.place_piece(square, (5, 5))
    assert int(np.count_nonzero(game.board.kinds == CellKind.PREVIEW)) == 0


def test_game_over_when_nothing_fits(caplog):
    game = _game()
    game.board.place_shape(
        [(r, c) for r in range(10) for c in range(10) if (r + c) % 2 == 0], BlockColor.RED
    )
    with caplog.at_level(logging.WARNING, logger="block_puzzle_core.blockpuzzle.session"):
        game.set_hand([Piece(ShapeId.DOMINO, 0), Piece(ShapeId.DOMINO, 1), Piece(ShapeId.TET_SQUARE)])
    assert game.game_over
    assert not game.is_game_active
    assert game.get_state()["game_over"]
    assert "No moves left" in caplog.text


def test_held_piece_keeps_game_alive():
    game = _game()
    game.board.place_shape(
        [(r, c) for r in range(10) for c in range(10) if (r + c) % 2 == 0], BlockColor.RED
    )
    game.held = SINGLE
    game.set_hand([Piece(ShapeId.DOMINO, 0), Piece(ShapeId.DOMINO, 1), None])
    assert not game.game_over


def test_reset_keeps_high_score_and_obstacles():
    game = _game()
    game.load_obstacles([(9, 9)])
    game.set_hand([SINGLE, SINGLE, SINGLE])
    game.play_slot(0, (0, 0))
    game.reset_game()
    assert game.score == 0
    assert game.high_score == 1
    assert game.board.locked_positions() == [(9, 9)]
    assert game.board.cell((9, 9)).color is BlockColor.PURPLE
    game.reset_game(keep_obstacles=False)
    assert game.board.locked_positions() == []


def test_load_level_lays_out_obstacles():
    game = _game()
    assert game.load_level(ObstaclePattern.CORNERS, difficulty=1) == 4
    assert game.board.locked_positions() == [(0, 0), (0, 9), (9, 0), (9, 9)]
    assert game.board.is_empty()
    assert game.hand.remaining == 3


def test_restrict_catalog_applies_to_next_deal():
    game = _game()
    game.restrict_catalog([ShapeId.SINGLE])
    for index in range(3):
        game.consume_slot(index)
    assert all(p.shape_id is ShapeId.SINGLE for p in game.hand)


def test_get_state_and_valid_actions():
    game = _game()
    game.set_hand([SINGLE, None, None])
    state = game.get_state()
    assert state["current_pieces"] == [int(ShapeId.SINGLE), None, None]
    assert state["pieces_remaining"] == 1
    assert state["stage"] == "EARLY"
    assert state["grid"].shape == (10, 10)
    assert len(game.get_valid_actions()) == 100


def test_spawn_telemetry_is_a_snapshot():
    game = _game()
    telemetry = game.spawn_telemetry()
    telemetry.hands_generated = 99
    assert game.spawner.telemetry.hands_generated == 1


def test_hold_unlocks_after_place_and_consume():
    game = _game()
    game.set_hand([SINGLE, Piece(ShapeId.DOMINO), Piece(ShapeId.TRI_LINE)])
    assert game.hold_slot(2)
    game.place_piece(game.hand[0], (0, 0))
    game.consume_slot(0)
    assert not game.hold_used
    assert game.hold_slot(1)
    assert game.held == Piece(ShapeId.DOMINO)
    assert game.hand[1] == Piece(ShapeId.TRI_LINE)
