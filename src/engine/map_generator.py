"""Territory map generation by seeded region growing."""

import logging
from dataclasses import dataclass

from ..models import Cell, Grid
from ..utils import MAP_ROUNDS_PER_CELL, GameRNG
from .errors import CapacityError, MapGenerationError

logger = logging.getLogger(__name__)


@dataclass
class MapResult:
    """A fully owned grid and the number of cells each player received.

    Attributes:
        grid: Grid with every cell owned
        cell_counts: Player ID -> number of cells owned
    """

    grid: Grid
    cell_counts: dict[int, int]


def generate_map(
    grid_size: int,
    player_count: int,
    rng: GameRNG,
    max_rounds: int | None = None,
) -> MapResult:
    """Partition a square grid into player territories.

    Algorithm:
    1. Shuffle all cell indices and give the first ``player_count`` of them
       to players 0..P-1 as seed cells
    2. Region growing, in rounds: each player in order claims one unowned
       cell chosen uniformly among those 4-adjacent to its territory
    3. A round in which nobody could grow while cells are still unowned
       gives the first unowned cell to player 0
    4. More than ``max_rounds`` rounds is a fault (MapGenerationError)

    Territories are usually contiguous but this is not guaranteed: the
    fallback in step 3 can leave player 0 with a detached enclave.

    Args:
        grid_size: Side length N of the board
        player_count: Number of players P (1 <= P <= N*N)
        rng: Random number generator
        max_rounds: Safety cap on growing rounds (default MAP_ROUNDS_PER_CELL * N*N)

    Returns:
        MapResult with the owned grid and per-player cell counts

    Raises:
        ValueError: If grid_size or player_count is below 1
        CapacityError: If player_count exceeds grid_size ** 2
        MapGenerationError: If the safety cap is exceeded
    """
    if grid_size < 1:
        raise ValueError(f"Invalid grid_size: {grid_size} (must be >= 1)")
    if player_count < 1:
        raise ValueError(f"Invalid player_count: {player_count} (must be >= 1)")

    total_cells = grid_size * grid_size
    if player_count > total_cells:
        raise CapacityError(player_count, total_cells)

    if max_rounds is None:
        max_rounds = MAP_ROUNDS_PER_CELL * total_cells

    grid = Grid(grid_size)
    cell_counts = {pid: 0 for pid in range(player_count)}

    _place_seeds(grid, player_count, rng, cell_counts)
    empty_cells = total_cells - player_count

    rounds = 0
    while empty_cells > 0:
        if rounds >= max_rounds:
            raise MapGenerationError(
                f"Map generation exceeded {max_rounds} rounds with "
                f"{empty_cells} cells still unowned"
            )
        rounds += 1

        assigned = 0
        for pid in range(player_count):
            frontier = _frontier(grid, pid)
            if not frontier:
                continue
            cell = rng.choice(frontier)
            cell.owner_id = pid
            cell_counts[pid] += 1
            empty_cells -= 1
            assigned += 1
            if empty_cells == 0:
                break

        # Isolation fallback
        if assigned == 0 and empty_cells > 0:
            cell = grid.unowned_cells()[0]
            cell.owner_id = 0
            cell_counts[0] += 1
            empty_cells -= 1
            logger.debug(f"No player could grow; ({cell.x}, {cell.y}) given to player 0")

    logger.info(
        f"Generated {grid_size}x{grid_size} map for {player_count} players "
        f"in {rounds} rounds: {cell_counts}"
    )

    return MapResult(grid=grid, cell_counts=cell_counts)


def _place_seeds(grid: Grid, player_count: int, rng: GameRNG, cell_counts: dict[int, int]) -> None:
    """Assign one distinct random seed cell to each player.

    A full shuffle of the indices is used instead of rejection sampling so
    that seeding finishes in bounded time even when P == N*N.
    """
    indices = list(range(len(grid)))
    rng.shuffle(indices)

    for pid in range(player_count):
        grid.cells[indices[pid]].owner_id = pid
        cell_counts[pid] += 1


def _frontier(grid: Grid, player_id: int) -> list[Cell]:
    """Unowned cells 4-adjacent to the player's territory, in row-major order."""
    candidates: set[Cell] = set()
    for cell in grid.cells_owned_by(player_id):
        for neighbor in grid.neighbors4(cell):
            if neighbor.owner_id is None:
                candidates.add(neighbor)
    return sorted(candidates, key=lambda c: (c.y, c.x))
