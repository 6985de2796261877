"""Analysis module for battle history statistics."""

from .battle_stats import PlayerStats, calculate_player_stats

__all__ = ["calculate_player_stats", "PlayerStats"]
