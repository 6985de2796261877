"""Grid model: cell storage and adjacency queries."""

from collections.abc import Iterator

from .cell import Cell

# 4-directional neighbourhood (E, W, S, N); diagonals are not adjacent
NEIGHBOR_OFFSETS = ((1, 0), (-1, 0), (0, 1), (0, -1))


class Grid:
    """Square board of ``size`` x ``size`` cells stored in row-major order.

    The grid owns every Cell. Cells are created once and only re-owned
    afterwards. All queries read the current ownership snapshot; the
    single mutator is ``reassign_owner``.
    """

    def __init__(self, size: int, cells: list[Cell] | None = None):
        if size < 1:
            raise ValueError(f"Invalid grid size: {size} (must be >= 1)")
        self.size = size
        if cells is None:
            cells = [Cell(x, y) for y in range(size) for x in range(size)]
        if len(cells) != size * size:
            raise ValueError(f"Grid of size {size} needs {size * size} cells, got {len(cells)}")
        for index, cell in enumerate(cells):
            if (cell.x, cell.y) != (index % size, index // size):
                raise ValueError(f"Cell ({cell.x}, {cell.y}) out of row-major order at {index}")
        self.cells = cells

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    def __len__(self) -> int:
        return len(self.cells)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def cell_at(self, x: int, y: int) -> Cell | None:
        """Return the cell at (x, y), or None when off the board."""
        if not self.in_bounds(x, y):
            return None
        return self.cells[y * self.size + x]

    def neighbors4(self, cell: Cell) -> list[Cell]:
        """Return the existing N/S/E/W neighbours of a cell (no wraparound)."""
        neighbors = []
        for dx, dy in NEIGHBOR_OFFSETS:
            neighbor = self.cell_at(cell.x + dx, cell.y + dy)
            if neighbor is not None:
                neighbors.append(neighbor)
        return neighbors

    def cells_owned_by(self, player_id: int) -> set[Cell]:
        return {cell for cell in self.cells if cell.owner_id == player_id}

    def count_owned_by(self, player_id: int) -> int:
        return sum(1 for cell in self.cells if cell.owner_id == player_id)

    def unowned_cells(self) -> list[Cell]:
        """Unclaimed cells in row-major order."""
        return [cell for cell in self.cells if cell.owner_id is None]

    def owner_counts(self) -> dict[int, int]:
        """Map each owning player ID to its number of cells."""
        counts: dict[int, int] = {}
        for cell in self.cells:
            if cell.owner_id is not None:
                counts[cell.owner_id] = counts.get(cell.owner_id, 0) + 1
        return counts

    def is_adjacent_to(self, cell: Cell, player_id: int) -> bool:
        """Check whether any cell of ``player_id`` is at Manhattan distance 1.

        Positions outside the board are never adjacent to anything.
        """
        if not self.in_bounds(cell.x, cell.y):
            return False
        return any(neighbor.owner_id == player_id for neighbor in self.neighbors4(cell))

    def reassign_owner(self, from_id: int, to_id: int) -> int:
        """Give every cell of ``from_id`` to ``to_id``.

        Returns:
            Number of cells that changed hands
        """
        moved = 0
        for cell in self.cells:
            if cell.owner_id == from_id:
                cell.owner_id = to_id
                moved += 1
        return moved
