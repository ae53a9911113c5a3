"""Gymnasium environments for the block puzzle core."""

from __future__ import annotations

from gymnasium.envs.registration import register

register(
    id="BlockPuzzle-Core-10x10-v0",
    entry_point="block_puzzle_core.env.block_puzzle_env:BlockPuzzleEnv",
)

__all__ = ["BlockPuzzle-Core-10x10-v0"]
