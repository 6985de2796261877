"""Grid cell data model."""

from dataclasses import dataclass


@dataclass(eq=False)
class Cell:
    """One square of the board.

    A cell's identity is its coordinates; only the owner ever changes.
    Equality and hashing use ``(x, y)`` so cells can live in sets while
    ownership is reassigned.
    """

    x: int
    y: int
    owner_id: int | None = None  # Player ID, or None while unclaimed

    def __post_init__(self):
        """Validate cell data after initialization."""
        if self.x < 0 or self.y < 0:
            raise ValueError(f"Invalid coordinates: ({self.x}, {self.y}) (must be >= 0)")

    @property
    def position(self) -> tuple[int, int]:
        return (self.x, self.y)

    def __eq__(self, other):
        if not isinstance(other, Cell):
            return NotImplemented
        return self.position == other.position

    def __hash__(self):
        return hash(self.position)
