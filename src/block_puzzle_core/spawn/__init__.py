"""Spawn engine for dealing playable hands.

Exports:
- SpawnEngine / SpawnConfig: weighted, repaired hand generation
- Stage / SpawnEntry / SPAWN_TABLE: per-shape spawn metadata
- SpawnTelemetry: counters for tuning and debugging
"""

from .catalog import SPAWN_TABLE, SpawnEntry, Stage
from .engine import SpawnConfig, SpawnEngine
from .telemetry import SpawnTelemetry, hand_diagnostic_score

__all__ = [
    "SPAWN_TABLE",
    "SpawnEntry",
    "Stage",
    "SpawnConfig",
    "SpawnEngine",
    "SpawnTelemetry",
    "hand_diagnostic_score",
]
