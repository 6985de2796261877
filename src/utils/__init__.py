"""Utility functions and constants for Quiz Conquest."""

from .clock import now_ms
from .constants import (
    DEFAULT_GRID_SIZE,
    DEFAULT_PLAYER_COUNT,
    DEFAULT_TIME_LIMIT,
    GRID_SIZE_RANGE,
    MAP_ROUNDS_PER_CELL,
    MIN_PLAYERS,
    PENALTY_MS,
    RNG_SEED_DEFAULT,
    SNAPSHOT_VERSION,
    STORAGE_KEY,
    TICK_SECONDS,
    TIME_LIMIT_RANGE,
)
from .rng import GameRNG

__all__ = [
    "DEFAULT_GRID_SIZE",
    "DEFAULT_PLAYER_COUNT",
    "DEFAULT_TIME_LIMIT",
    "GRID_SIZE_RANGE",
    "MAP_ROUNDS_PER_CELL",
    "MIN_PLAYERS",
    "PENALTY_MS",
    "RNG_SEED_DEFAULT",
    "SNAPSHOT_VERSION",
    "STORAGE_KEY",
    "TICK_SECONDS",
    "TIME_LIMIT_RANGE",
    "now_ms",
    "GameRNG",
]
