from __future__ import annotations

"""
Block puzzle game session.

Players place pieces from a three-slot hand onto a square grid; complete rows
and columns clear and score. The hand is dealt again once every slot is used,
and the game ends when nothing in the hand (or the hold slot) fits.
"""

import logging
import random
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from block_puzzle_core.game.board import BlockColor, Board, Coordinate, LineClear
from block_puzzle_core.game.errors import PlacementError
from block_puzzle_core.game.hand import Hand
from block_puzzle_core.game.lines import LineClearResult, process_completed_lines
from block_puzzle_core.game.obstacles import ObstaclePattern, generate_obstacles
from block_puzzle_core.game.pieces import Piece, ShapeId
from block_puzzle_core.game.placement import PlacementValidator, valid_actions
from block_puzzle_core.game.rules import ScoreEvent, ScoreTracker, ScoringRules
from block_puzzle_core.spawn.engine import SpawnConfig, SpawnEngine
from block_puzzle_core.spawn.telemetry import SpawnTelemetry

from .history import GameSnapshot, UndoHistory
from .persistence import (
    GameSavePayload,
    board_from_payload,
    board_to_payload,
    hand_from_payload,
    hand_to_payload,
    piece_from_payload,
    piece_to_payload,
)


LOGGER = logging.getLogger(__name__)


@dataclass
class GameConfig:
    """Configuration for a block puzzle session"""
    grid_size: int = 10
    hand_size: int = 3
    random_seed: Optional[int] = None
    undo_limit: int = 100
    allow_hold: bool = True
    obstacle_color: BlockColor = BlockColor.PURPLE


@dataclass(frozen=True)
class PlacementOutcome:
    piece: Piece
    origin: Coordinate
    cells_placed: int
    line_clears: LineClearResult
    score_event: ScoreEvent
    board_cleared: bool
    game_over: bool

    @property
    def lines_cleared(self) -> int:
        return self.line_clears.total_cleared_lines


class BlockPuzzleGame:
    """Owns the board, hand, score and spawn engine for one player."""

    def __init__(self, config: GameConfig | None = None, rules: ScoringRules | None = None,
                 spawn_config: SpawnConfig | None = None, rng: random.Random | None = None):
        self.config = config or GameConfig()
        self.rng = rng or random.Random(self.config.random_seed)
        self.board = Board(self.config.grid_size)
        self.validator = PlacementValidator(self.board)
        self.score_tracker = ScoreTracker(rules)

        spawn_config = replace(spawn_config or SpawnConfig(), hand_size=self.config.hand_size)
        self.spawner = SpawnEngine(spawn_config, rng=self.rng)
        self.spawner.attach(self.board)

        self.hand = Hand(self.config.hand_size)
        self.held: Optional[Piece] = None
        self.hold_used = False
        self.history = UndoHistory(self.config.undo_limit)

        self.last_score_event: Optional[ScoreEvent] = None
        self.active_line_clears: List[LineClear] = []
        self.total_lines_cleared = 0
        self.total_pieces_placed = 0
        self.game_over = False
        self.is_game_active = False

        self.reset_game()

    # ---------- Outbound state ----------
    @property
    def score(self) -> int:
        return self.score_tracker.total_score

    @property
    def high_score(self) -> int:
        return self.score_tracker.best_score

    def spawn_telemetry(self) -> SpawnTelemetry:
        return self.spawner.telemetry.snapshot()

    def get_valid_actions(self) -> List[Tuple[int, int, int]]:
        """List of (slot, row, col) valid actions for the current hand"""
        return valid_actions(self.board, self.hand)

    def can_place_any_piece(self) -> bool:
        return self.validator.any_fit(list(self.hand) + [self.held])

    def get_state(self) -> Dict[str, Any]:
        return {
            "grid": self.board.kinds.copy(),
            "colors": self.board.colors.copy(),
            "current_pieces": [None if p is None else int(p.shape_id) for p in self.hand],
            "pieces_remaining": self.hand.remaining,
            "held_piece": None if self.held is None else int(self.held.shape_id),
            "score": self.score,
            "high_score": self.high_score,
            "total_lines_cleared": self.total_lines_cleared,
            "total_pieces_placed": self.total_pieces_placed,
            "stage": self.spawner.stage.name,
            "streak_active": self.spawner.streak_active,
            "game_over": self.game_over,
            "filled_ratio": self.board.filled_ratio(),
        }

    # ---------- Game lifecycle ----------
    def reset_game(self, keep_obstacles: bool = True) -> None:
        """Start a new game. Locked obstacles survive unless ``keep_obstacles`` is False."""
        self.board.reset(keep_locked=keep_obstacles)
        self.score_tracker.reset()
        self.spawner.reset()
        self.hand.clear()
        self.held = None
        self.hold_used = False
        self.history.clear()
        self.last_score_event = None
        self.active_line_clears = []
        self.total_lines_cleared = 0
        self.total_pieces_placed = 0
        self.game_over = False
        self.is_game_active = True
        self._deal()
        self._update_game_over()
        self._record_snapshot()
        LOGGER.info("New game on a %dx%d board (high score %d)", self.board.size, self.board.size,
                    self.high_score)

    def restrict_catalog(self, allowed: Optional[Iterable[ShapeId]]) -> None:
        """Limit future deals to ``allowed`` shapes; ``None`` lifts the limit."""
        self.spawner.restrict_catalog(allowed)

    def load_obstacles(self, positions: Iterable[Coordinate], color: BlockColor | None = None) -> int:
        color = self.config.obstacle_color if color is None else color
        loaded = self.board.load_obstacles(positions, color)
        LOGGER.info("Loaded %d obstacle cells", loaded)
        self._update_game_over()
        self._record_snapshot()
        return loaded

    def load_level(self, pattern: ObstaclePattern, difficulty: int = 1) -> int:
        """Wipe the board and lay out ``pattern`` as locked obstacles, then start over."""
        positions = generate_obstacles(self.board.size, difficulty, pattern, self.rng)
        self.board.reset(keep_locked=False)
        self.board.load_obstacles(positions, self.config.obstacle_color)
        self.reset_game(keep_obstacles=True)
        LOGGER.info("Level %s (difficulty %d) with %d obstacles", ObstaclePattern(pattern).value,
                    difficulty, len(positions))
        return len(positions)

    # ---------- Placement ----------
    def preview(self, piece: Piece, origin: Coordinate) -> bool:
        """Show a ghost of ``piece`` at ``origin`` if it would fit; returns validity."""
        self.board.clear_previews()
        if not self.validator.is_valid(piece, origin):
            return False
        self.board.set_preview(self.validator.cells_at(piece, origin), piece.color)
        return True

    def clear_preview(self) -> None:
        self.board.clear_previews()

    def place_piece(self, piece: Piece, origin: Coordinate) -> PlacementOutcome:
        """Commit ``piece`` at ``origin`` without touching the hand.

        Raises ``OutOfBoundsError`` or ``CollisionError`` and leaves the board
        unchanged when the placement is illegal.

        ``game_over`` on the outcome reflects the hand before it advances;
        callers driving the hand themselves read ``self.game_over`` after
        ``consume_slot``.
        """
        try:
            cells = self.validator.validate(piece, origin)
        except PlacementError:
            LOGGER.warning("Rejected %s at %s", piece.shape_id.name, origin)
            raise
        self.board.clear_previews()
        placed = self.board.place_shape(cells, piece.color)
        self.hold_used = False
        clears = process_completed_lines(self.board)
        board_cleared = not clears.is_empty and self.board.is_empty()

        previous_best = self.score_tracker.best_score
        breakdown = self.score_tracker.record_placement(placed, clears.total_cleared_lines)
        event = ScoreEvent(
            placed_cells=breakdown.placed_cells,
            lines_cleared=breakdown.lines_cleared,
            placement_points=breakdown.placement_points,
            line_clear_bonus=breakdown.line_clear_bonus,
            total_delta=breakdown.total_points,
            new_total=self.score_tracker.total_score,
            high_score=self.score_tracker.best_score,
            is_new_high_score=self.score_tracker.best_score > previous_best,
        )
        self.spawner.record_placement(clears.total_cleared_lines, board_cleared)

        self.last_score_event = event
        self.active_line_clears = list(clears.clears)
        self.total_lines_cleared += clears.total_cleared_lines
        self.total_pieces_placed += 1
        if event.lines_cleared:
            LOGGER.info("Score +%d (%d lines) -> %d", event.total_delta, event.lines_cleared, event.new_total)
        else:
            LOGGER.debug("Score +%d -> %d", event.total_delta, event.new_total)
        if board_cleared:
            LOGGER.info("Board cleared")

        return PlacementOutcome(
            piece=piece,
            origin=origin,
            cells_placed=placed,
            line_clears=clears,
            score_event=event,
            board_cleared=board_cleared,
            game_over=self.game_over,
        )

    def play_slot(self, index: int, origin: Coordinate) -> PlacementOutcome:
        """Place the piece in hand slot ``index`` and advance the hand."""
        piece = self.hand[index]
        if piece is None:
            raise ValueError(f"Hand slot {index} is empty")
        outcome = self.place_piece(piece, origin)
        self.hand.take(index)
        return self._after_commit(outcome)

    def play_held(self, origin: Coordinate) -> PlacementOutcome:
        if self.held is None:
            raise ValueError("No piece is being held")
        outcome = self.place_piece(self.held, origin)
        self.held = None
        return self._after_commit(outcome)

    def consume_slot(self, index: int) -> Piece:
        """Empty slot ``index`` without placing it, dealing again if the hand runs out."""
        piece = self.hand.take(index)
        if self.hand.is_empty():
            self._deal()
        self._update_game_over()
        self._record_snapshot()
        return piece

    def hold_slot(self, index: int) -> bool:
        """Move the slot's piece to the hold, swapping with any held piece.

        Allowed once per placement; returns False when holding is disabled or
        already used.
        """
        if not self.config.allow_hold or self.hold_used:
            return False
        piece = self.hand.take(index)
        if self.held is not None:
            self.hand.put(index, self.held)
        self.held = piece
        self.hold_used = True
        if self.hand.is_empty():
            self._deal()
        self._update_game_over()
        self._record_snapshot()
        LOGGER.debug("Holding %s", piece.shape_id.name)
        return True

    def set_hand(self, pieces: Sequence[Optional[Piece]]) -> None:
        """Replace the current hand, e.g. for scripted scenarios."""
        self.hand.fill(list(pieces))
        self._update_game_over()
        self._record_snapshot()

    def undo(self) -> bool:
        snapshot = self.history.undo()
        if snapshot is None:
            return False
        self._restore_snapshot(snapshot)
        LOGGER.info("Undo (%d steps left)", self.history.undo_count)
        return True

    # ---------- Persistence ----------
    def to_payload(self) -> GameSavePayload:
        return GameSavePayload(
            score=self.score,
            high_score=self.high_score,
            is_game_active=self.is_game_active,
            grid=board_to_payload(self.board),
            tray=hand_to_payload(self.hand),
            held=piece_to_payload(self.held),
            spawn=self.spawner.state_dict(),
        )

    def load_payload(self, payload: GameSavePayload) -> None:
        board = board_from_payload(payload.grid)
        if board.size != self.board.size:
            raise ValueError(f"Saved board is {board.size}x{board.size}, session uses {self.board.size}")
        hand = hand_from_payload(payload.tray)
        if len(hand) != len(self.hand):
            raise ValueError(f"Saved tray has {len(hand)} slots, session uses {len(self.hand)}")
        self._load_board(board)
        self.hand.fill(list(hand))
        self.held = piece_from_payload(payload.held)
        self.hold_used = False
        self.score_tracker.restore(payload.score, payload.high_score)
        self.spawner.load_state_dict(payload.spawn)
        self.last_score_event = None
        self.active_line_clears = []
        self.is_game_active = payload.is_game_active
        if self.hand.is_empty() and self.held is None:
            self._deal()
        self.history.clear()
        self._update_game_over()
        self._record_snapshot()
        LOGGER.info("Loaded saved game (score %d)", self.score)

    # ---------- Internals ----------
    def _deal(self) -> None:
        self.hand.fill(self.spawner.generate_hand())

    def _after_commit(self, outcome: PlacementOutcome) -> PlacementOutcome:
        if self.hand.is_empty():
            self._deal()
        self._update_game_over()
        self._record_snapshot()
        if self.game_over == outcome.game_over:
            return outcome
        return PlacementOutcome(
            piece=outcome.piece,
            origin=outcome.origin,
            cells_placed=outcome.cells_placed,
            line_clears=outcome.line_clears,
            score_event=outcome.score_event,
            board_cleared=outcome.board_cleared,
            game_over=self.game_over,
        )

    def _update_game_over(self) -> None:
        self.game_over = not self.can_place_any_piece()
        if self.game_over:
            self.is_game_active = False
            LOGGER.warning("No moves left: game over at score %d", self.score)

    def _load_board(self, board: Board) -> None:
        # The validator and spawner hold a reference to self.board.
        self.board.kinds[:] = board.kinds
        self.board.colors[:] = board.colors

    def _snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            board=self.board.copy(),
            score=self.score_tracker.total_score,
            best_score=self.score_tracker.best_score,
            slots=tuple(self.hand),
            held=self.held,
            hold_used=self.hold_used,
            spawn_state=self.spawner.state_dict(),
            game_over=self.game_over,
        )

    def _record_snapshot(self) -> None:
        self.history.record(self._snapshot())

    def _restore_snapshot(self, snapshot: GameSnapshot) -> None:
        self._load_board(snapshot.board)
        self.score_tracker.restore(snapshot.score, max(snapshot.best_score, self.score_tracker.best_score))
        self.hand.fill(list(snapshot.slots))
        self.held = snapshot.held
        self.hold_used = snapshot.hold_used
        self.spawner.load_state_dict(snapshot.spawn_state)
        self.game_over = snapshot.game_over
        self.is_game_active = not snapshot.game_over
        self.active_line_clears = []
        self.last_score_event = None

