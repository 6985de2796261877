"""Data models for Quiz Conquest."""

from .battle import BattleRecord, BattleState, PendingBattle
from .cell import Cell
from .game import Game
from .grid import Grid
from .phase import GamePhase
from .player import Player, PlayerConfig
from .question import Question
from .settings import GameSettings

__all__ = [
    "BattleRecord",
    "BattleState",
    "Cell",
    "Game",
    "GamePhase",
    "GameSettings",
    "Grid",
    "PendingBattle",
    "Player",
    "PlayerConfig",
    "Question",
]
