from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np
import gymnasium as gym

import block_puzzle_core.env  # noqa: F401  registers the environments


LOGGER = logging.getLogger(__name__)


@dataclass
class RandomRunResult:
    total_reward: float = 0.0
    steps: int = 0
    episode_scores: List[int] = field(default_factory=list)


def run_random(steps: int = 200, seed: Optional[int] = None) -> RandomRunResult:
    """Play uniformly random legal placements drawn from the action mask."""
    env = gym.make("BlockPuzzle-Core-10x10-v0")
    rng = np.random.default_rng(seed)
    result = RandomRunResult()
    obs, info = env.reset(seed=seed)
    for _ in range(steps):
        legal = np.argwhere(info["action_mask"])
        if len(legal) == 0:
            action = env.action_space.sample()
        else:
            action = legal[rng.integers(len(legal))]
        obs, reward, terminated, truncated, info = env.step(action)
        result.total_reward += float(reward)
        result.steps += 1
        if terminated or truncated:
            result.episode_scores.append(int(info["score"]))
            LOGGER.info("Episode finished with score %d", info["score"])
            obs, info = env.reset()
    env.close()
    return result


if __name__ == "__main__":  # pragma: no cover
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    outcome = run_random()
    print(f"Random agent total reward: {outcome.total_reward:.2f} over {len(outcome.episode_scores)} finished games")
