"""Engine error types."""


class ConquestError(Exception):
    """Base class for errors raised by the game engine."""


class CapacityError(ConquestError):
    """More players were requested than the board has cells."""

    def __init__(self, player_count: int, capacity: int):
        self.player_count = player_count
        self.capacity = capacity
        super().__init__(
            f"Cannot seat {player_count} players on a board of {capacity} cells "
            f"(maximum {capacity} players)"
        )


class MapGenerationError(ConquestError):
    """Region growing did not fill the board within the safety cap."""
