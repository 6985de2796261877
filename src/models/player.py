"""Player data model."""

from dataclasses import dataclass


@dataclass
class PlayerConfig:
    """Menu configuration for one seat: display name and colour."""

    name: str
    color: str


@dataclass
class Player:
    """A participant in the active game.

    ``cells_count`` is a cached count of the cells this player owns. It is
    recomputed after every ownership change; once a player loses a battle
    it is zero for the rest of the game and ``is_alive`` stays False.
    """

    id: int  # 0-based seat index, never reused within a game
    name: str
    color: str
    is_alive: bool = True
    cells_count: int = 0

    def __post_init__(self):
        """Validate player data after initialization."""
        if self.id < 0:
            raise ValueError(f"Invalid player id: {self.id} (must be >= 0)")
        if self.cells_count < 0:
            raise ValueError(f"Invalid cells_count: {self.cells_count} (must be >= 0)")

    def eliminate(self) -> None:
        """Mark the player as defeated."""
        self.is_alive = False
        self.cells_count = 0
