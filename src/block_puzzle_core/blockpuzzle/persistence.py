"""Save-game schema.

The layout here is what an external persistence layer stores and hands back:
plain dicts, lists, strings and ints, so the payload round-trips through
``json`` unchanged.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from block_puzzle_core.game.board import NO_COLOR, BlockColor, Board, CellKind
from block_puzzle_core.game.hand import Hand
from block_puzzle_core.game.pieces import Piece, ShapeId
from block_puzzle_core.game.rules import ScoreTracker, ScoringRules


SAVE_VERSION = 1

CellPayload = Dict[str, Optional[str]]
PiecePayload = Dict[str, Any]


def board_to_payload(board: Board) -> List[List[CellPayload]]:
    grid: List[List[CellPayload]] = []
    for row in range(board.size):
        cells: List[CellPayload] = []
        for col in range(board.size):
            raw = int(board.colors[row, col])
            cells.append({
                "state": CellKind(int(board.kinds[row, col])).name.lower(),
                "color": None if raw == NO_COLOR else BlockColor(raw).name.lower(),
            })
        grid.append(cells)
    return grid


def board_from_payload(grid: List[List[CellPayload]]) -> Board:
    size = len(grid)
    if any(len(row) != size for row in grid):
        raise ValueError("Saved grid must be square")
    board = Board(size)
    for r, row in enumerate(grid):
        for c, cell in enumerate(row):
            kind = CellKind[str(cell["state"]).upper()]
            color = cell.get("color")
            if color is None and kind in (CellKind.OCCUPIED, CellKind.LOCKED):
                raise ValueError(f"Saved {kind.name.lower()} cell at {(r, c)} has no color")
            board.kinds[r, c] = kind
            board.colors[r, c] = NO_COLOR if color is None else int(BlockColor[color.upper()])
    return board


def piece_to_payload(piece: Optional[Piece]) -> Optional[PiecePayload]:
    if piece is None:
        return None
    return {"shape": piece.shape_id.name, "orientation": piece.orientation, "color": piece.color.name.lower()}


def piece_from_payload(payload: Optional[PiecePayload]) -> Optional[Piece]:
    if payload is None:
        return None
    return Piece(
        ShapeId[payload["shape"]],
        int(payload.get("orientation", 0)),
        BlockColor[str(payload["color"]).upper()],
    )


def hand_to_payload(hand: Hand) -> List[Optional[PiecePayload]]:
    return [piece_to_payload(p) for p in hand]


def hand_from_payload(tray: List[Optional[PiecePayload]]) -> Hand:
    hand = Hand(len(tray))
    hand.fill([piece_from_payload(p) for p in tray])
    return hand


def score_to_payload(tracker: ScoreTracker) -> Dict[str, int]:
    return {"score": tracker.total_score, "high_score": tracker.best_score}


def score_from_payload(payload: Dict[str, int], rules: Optional[ScoringRules] = None) -> ScoreTracker:
    tracker = ScoreTracker(rules)
    tracker.restore(payload.get("score", 0), payload.get("high_score", 0))
    return tracker


@dataclass
class GameSavePayload:
    score: int
    high_score: int
    is_game_active: bool
    grid: List[List[CellPayload]]
    tray: List[Optional[PiecePayload]]
    held: Optional[PiecePayload] = None
    spawn: Dict[str, Any] = field(default_factory=dict)
    version: int = SAVE_VERSION

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameSavePayload":
        version = int(data.get("version", SAVE_VERSION))
        if version > SAVE_VERSION:
            raise ValueError(f"Save version {version} is newer than supported version {SAVE_VERSION}")
        return cls(
            score=int(data["score"]),
            high_score=int(data["high_score"]),
            is_game_active=bool(data.get("is_game_active", True)),
            grid=data["grid"],
            tray=list(data["tray"]),
            held=data.get("held"),
            spawn=dict(data.get("spawn", {})),
            version=version,
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, text: str) -> "GameSavePayload":
        return cls.from_dict(json.loads(text))

