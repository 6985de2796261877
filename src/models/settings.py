"""Game settings chosen in the menu."""

from dataclasses import dataclass

from ..utils.constants import DEFAULT_GRID_SIZE, DEFAULT_PLAYER_COUNT, DEFAULT_TIME_LIMIT


@dataclass
class GameSettings:
    """Board size, seat count and battle clock for a new game."""

    grid_size: int = DEFAULT_GRID_SIZE
    player_count: int = DEFAULT_PLAYER_COUNT
    time_limit: int = DEFAULT_TIME_LIMIT  # Seconds per side

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.grid_size < 1:
            raise ValueError(f"Invalid grid_size: {self.grid_size} (must be >= 1)")
        if self.player_count < 1:
            raise ValueError(f"Invalid player_count: {self.player_count} (must be >= 1)")
        if self.time_limit < 1:
            raise ValueError(f"Invalid time_limit: {self.time_limit} (must be >= 1)")

    @property
    def capacity(self) -> int:
        """Maximum number of players the board can seat."""
        return self.grid_size * self.grid_size
