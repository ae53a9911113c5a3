from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from block_puzzle_core.blockpuzzle import BlockPuzzleGame, GameConfig
from block_puzzle_core.game.board import CellKind
from block_puzzle_core.game.errors import PlacementError
from block_puzzle_core.game.pieces import ShapeId


def _compute_action_mask(game: BlockPuzzleGame) -> np.ndarray:
    size = game.board.size
    k = len(game.hand)
    mask = np.zeros((k, size, size), dtype=np.bool_)
    for slot, row, col in game.get_valid_actions():
        mask[slot, row, col] = True
    return mask


class BlockPuzzleEnv(gym.Env):
    metadata = {"render_modes": []}

    def __init__(self, config: Optional[GameConfig] = None,
                 score_scale: float = 0.01,
                 invalid_action_penalty: float = -0.1,
                 step_penalty: float = 0.0,
                 terminal_penalty: float = 0.0,
                 max_episode_steps: int = 10000) -> None:
        super().__init__()
        self.game = BlockPuzzleGame(config)

        self.score_scale = float(score_scale)
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.step_penalty = float(step_penalty)
        self.terminal_penalty = float(terminal_penalty)
        self.max_episode_steps = int(max_episode_steps)

        size = self.game.board.size
        k = len(self.game.hand)

        # Observation space: cell kinds and current pieces (shape ids, -1 for empty)
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=int(max(CellKind)), shape=(size, size), dtype=np.int8),
                "pieces": spaces.Box(low=-1, high=int(max(ShapeId)), shape=(k,), dtype=np.int8),
                "pieces_remaining": spaces.Discrete(k + 1),
            }
        )

        # Action: (slot, row, col)
        self.action_space = spaces.MultiDiscrete((k, size, size))

        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        pieces = np.full((len(self.game.hand),), -1, dtype=np.int8)
        for i, piece in enumerate(self.game.hand):
            if piece is not None:
                pieces[i] = int(piece.shape_id)
        return {
            "grid": self.game.board.kinds.astype(np.int8),
            "pieces": pieces,
            "pieces_remaining": self.game.hand.remaining,
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": _compute_action_mask(self.game),
            "valid_actions": self.game.get_valid_actions(),
            "score": self.game.score,
            "steps": self._steps,
            "spawn": self.game.spawn_telemetry().as_dict(),
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.game.rng.seed(seed)
        self.game.reset_game()
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: np.ndarray | Tuple[int, int, int]):
        slot, row, col = map(int, action)

        reward_components: Dict[str, float] = {}
        gained = 0
        lines = 0
        try:
            outcome = self.game.play_slot(slot, (row, col))
        except (PlacementError, ValueError, IndexError):
            reward_components["invalid"] = self.invalid_action_penalty
        else:
            gained = outcome.score_event.total_delta
            lines = outcome.lines_cleared
            reward_components["score"] = self.score_scale * float(gained)

        reward_components["step"] = self.step_penalty
        terminated = bool(self.game.game_over)
        self._steps += 1
        truncated = self._steps >= self.max_episode_steps
        if terminated:
            reward_components["terminal"] = self.terminal_penalty

        reward = float(sum(reward_components.values()))

        obs = self._get_obs()
        info = self._get_info()
        info["reward_components"] = reward_components
        info["engine_score_delta"] = float(gained)
        info["lines_cleared"] = lines
        return obs, reward, terminated, truncated, info

    def close(self) -> None:
        pass
