"""Hand generation.

The engine deals hands of pieces for the board it is attached to. A deal is
built in three steps:

1. Draw pieces one at a time. Each draw picks a category by weighted roulette
   (catalog weight x stage multiplier x board bias), then pops the next shape
   id from that category's bag.
2. Fit repair: if no piece in the hand fits anywhere, swap one piece for the
   smallest-category shape that does.
3. Clearing repair: on a non-empty board, if no piece can complete a line,
   try to swap one piece for a shape that fits *and* can complete a line.

Both repairs are best-effort and never raise. A hand that still has no fit
when nothing in the catalog fits either is recorded as a dead deal.
"""

from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, FrozenSet, Iterable, List, Optional

import numpy as np

from block_puzzle_core.game.analysis import BoardAnalysis, analyze_board
from block_puzzle_core.game.board import BlockColor, Board
from block_puzzle_core.game.pieces import Category, Piece, ShapeCatalog, ShapeId
from block_puzzle_core.game.placement import PlacementValidator
from block_puzzle_core.game.potential import EARLY_EXIT_CLEARS, max_simultaneous_clears

from .bags import CategoryBags
from .catalog import REPAIR_ORDER, Stage, eligible_members, is_eligible, repair_candidates
from .telemetry import SpawnTelemetry, hand_diagnostic_score
from .weights import category_weights, weighted_choice


LOGGER = logging.getLogger(__name__)


@dataclass
class SpawnConfig:
    hand_size: int = 3
    attempt_budget: int = 12
    history_window: int = 10
    streak_window: int = 3
    streak_min_clears: int = 2
    streak_required: int = 2
    mid_stage_at: int = 6
    late_stage_at: int = 18
    lockout_threshold: Optional[int] = None  # None derives it from the board size
    ensure_clearing: bool = True
    clear_early_exit: int = EARLY_EXIT_CLEARS


class SpawnEngine:
    def __init__(self, config: Optional[SpawnConfig] = None, rng: Optional[random.Random] = None,
                 seed: Optional[int] = None) -> None:
        self.config = config or SpawnConfig()
        self.rng = rng or random.Random(seed)
        self.bags = CategoryBags(self.rng)
        self.placements_made = 0
        self.recent_clears: Deque[int] = deque(maxlen=self.config.history_window)
        self.allowed: Optional[FrozenSet[ShapeId]] = None
        self.telemetry = SpawnTelemetry()
        self._board: Optional[Board] = None

    # ---------- Board coupling ----------
    def attach(self, board: Board) -> None:
        """Point the engine at ``board``. The engine reads it but never mutates it."""
        self._board = board

    def detach(self) -> None:
        self._board = None

    @property
    def board(self) -> Board:
        if self._board is None:
            raise RuntimeError("SpawnEngine has no board attached; call attach(board) first")
        return self._board

    # ---------- Progress state ----------
    @property
    def stage(self) -> Stage:
        if self.placements_made < self.config.mid_stage_at:
            return Stage.EARLY
        if self.placements_made < self.config.late_stage_at:
            return Stage.MID
        return Stage.LATE

    @property
    def streak_active(self) -> bool:
        window = list(self.recent_clears)[-self.config.streak_window:]
        hits = sum(1 for lines in window if lines >= self.config.streak_min_clears)
        return hits >= self.config.streak_required

    def record_placement(self, lines_cleared: int, board_cleared: bool = False) -> None:
        """Feed back the outcome of a committed placement."""
        effective = max(0, int(lines_cleared))
        if board_cleared:
            # A full wipe counts as every row at once for streak purposes.
            effective += self.board.size
        self.placements_made += 1
        self.recent_clears.append(effective)
        self.telemetry.clears_per_10 = self._clears_per_10()

    def _clears_per_10(self) -> float:
        if not self.recent_clears:
            return 0.0
        return float(np.mean(self.recent_clears)) * 10.0

    def restrict_catalog(self, allowed: Optional[Iterable[ShapeId]]) -> None:
        """Limit spawning to ``allowed`` shape ids, or lift the limit with ``None``."""
        restricted = None if allowed is None else frozenset(ShapeId(s) for s in allowed)
        if restricted is not None and not restricted:
            raise ValueError("Catalog restriction must allow at least one shape")
        self.allowed = restricted
        self.bags.rebuild()
        LOGGER.info("Catalog restricted to %s", "all shapes" if self.allowed is None
                    else sorted(s.name for s in self.allowed))

    def reset(self) -> None:
        self.placements_made = 0
        self.recent_clears.clear()
        self.bags.rebuild()
        self.telemetry = SpawnTelemetry()

    def state_dict(self) -> Dict[str, object]:
        return {"placements_made": self.placements_made, "recent_clears": list(self.recent_clears)}

    def load_state_dict(self, state: Dict[str, object]) -> None:
        self.placements_made = int(state.get("placements_made", 0))  # type: ignore[arg-type]
        self.recent_clears.clear()
        self.recent_clears.extend(int(v) for v in state.get("recent_clears", []))  # type: ignore[union-attr]
        self.telemetry.clears_per_10 = self._clears_per_10()

    # ---------- Piece generation ----------
    def random_color(self) -> BlockColor:
        return self.rng.choice(list(BlockColor))

    def random_piece(self, shape_id: ShapeId) -> Piece:
        orientations = ShapeCatalog.orientations(shape_id)
        return Piece(shape_id, self.rng.randrange(len(orientations)), self.random_color())

    def generate_piece(self, analysis: Optional[BoardAnalysis] = None) -> Optional[Piece]:
        if analysis is None:
            analysis = analyze_board(self.board)
        stage, streak = self.stage, self.streak_active
        weights = category_weights(stage, streak, analysis, self.allowed, self.config.lockout_threshold)
        category = weighted_choice(weights, self.rng)
        if category is None:
            return None
        members = eligible_members(category, stage, streak, self.allowed)
        shape_id = self.bags.draw(
            category, members, lambda sid: is_eligible(sid, stage, streak, self.allowed)
        )
        if shape_id is None:
            return None
        return self.random_piece(shape_id)

    def _fallback_shape(self) -> ShapeId:
        return ShapeCatalog.smallest(sorted(self.allowed) if self.allowed is not None else None)

    def generate_hand(self) -> List[Piece]:
        board = self.board
        analysis = analyze_board(board)
        pieces: List[Piece] = []
        attempts = 0
        while len(pieces) < self.config.hand_size and attempts < self.config.attempt_budget:
            attempts += 1
            piece = self.generate_piece(analysis)
            if piece is not None:
                pieces.append(piece)
        while len(pieces) < self.config.hand_size:
            pieces.append(self.random_piece(self._fallback_shape()))
            self.telemetry.fallback_pieces += 1

        validator = PlacementValidator(board)
        pieces = self._ensure_fit(pieces, validator)
        if self.config.ensure_clearing:
            pieces = self._ensure_clearing(pieces, validator)
        self._record_hand(pieces, validator)
        return pieces

    # ---------- Repair passes ----------
    def _potential(self, piece: Piece) -> int:
        return max_simultaneous_clears(self.board, piece, self.config.clear_early_exit)

    def _candidates(self, categories: Iterable[Category]) -> Iterable[Piece]:
        streak = self.streak_active
        color = self.random_color()
        for category in categories:
            for shape_id in repair_candidates(category, streak, self.allowed):
                for orientation in range(len(ShapeCatalog.orientations(shape_id))):
                    yield Piece(shape_id, orientation, color)

    @staticmethod
    def _largest_slot(pieces: List[Piece], skip: Optional[List[bool]] = None) -> int:
        order = sorted(range(len(pieces)), key=lambda i: (-pieces[i].cell_count, i))
        if skip is not None:
            for i in order:
                if not skip[i]:
                    return i
        return order[0]

    def _ensure_fit(self, pieces: List[Piece], validator: PlacementValidator) -> List[Piece]:
        if validator.any_fit(pieces):
            return pieces
        for candidate in self._candidates(REPAIR_ORDER):
            if validator.fits_anywhere(candidate):
                slot = self._largest_slot(pieces)
                LOGGER.info("No piece fits; replacing %s with %s", pieces[slot].shape_id.name,
                            candidate.shape_id.name)
                pieces[slot] = candidate
                self.telemetry.fit_repairs += 1
                return pieces
        LOGGER.warning("No eligible shape fits the board; hand left unchanged (no moves)")
        return pieces

    def _ensure_clearing(self, pieces: List[Piece], validator: PlacementValidator) -> List[Piece]:
        board = self.board
        if board.is_empty():
            return pieces
        if any(self._potential(p) > 0 for p in pieces):
            return pieces
        categories = list(REPAIR_ORDER)
        if self.streak_active:
            categories.append(Category.REWARD)
        fits = [validator.fits_anywhere(p) for p in pieces]
        for candidate in self._candidates(categories):
            if not validator.fits_anywhere(candidate):
                continue
            if self._potential(candidate) <= 0:
                continue
            # Keep a sole fitting piece unless the swap target is itself unplayable.
            slot = self._largest_slot(pieces, skip=fits if sum(fits) == 1 else None)
            LOGGER.debug("Adding clearing opportunity: %s -> %s", pieces[slot].shape_id.name,
                         candidate.shape_id.name)
            pieces[slot] = candidate
            self.telemetry.clear_repairs += 1
            return pieces
        LOGGER.debug("No clearing opportunity available; hand unchanged")
        return pieces

    # ---------- Telemetry ----------
    def catalog_has_fit(self) -> bool:
        validator = PlacementValidator(self.board)
        for shape_id in ShapeId:
            for orientation in range(len(ShapeCatalog.orientations(shape_id))):
                if validator.fits_anywhere(Piece(shape_id, orientation)):
                    return True
        return False

    def _record_hand(self, pieces: List[Piece], validator: PlacementValidator) -> None:
        fits = [validator.fits_anywhere(p) for p in pieces]
        has_fit = any(fits)
        dead = not has_fit and not self.catalog_has_fit()
        potentials = [self._potential(p) for p in pieces]
        score = hand_diagnostic_score(pieces, fits, potentials, self.stage)

        t = self.telemetry
        t.hands_generated += 1
        t.last_hand_has_fit = has_fit
        t.last_dead_deal = dead
        t.last_hand_score = score
        t.clears_per_10 = self._clears_per_10()
        if dead:
            t.dead_deals += 1
            LOGGER.warning("Dead deal: nothing in the catalog fits the board")
        LOGGER.debug(
            "Dealt %s (stage=%s streak=%s fit=%s potentials=%s score=%.1f)",
            [p.shape_id.name for p in pieces], self.stage.name, self.streak_active, fits, potentials, score,
        )
