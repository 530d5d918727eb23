import logging
from typing import Tuple
from maze_loop.core.grid import Grid, Cell

logger = logging.getLogger(__name__)

def manhattan(a: Cell, b: Cell) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])

def corners(grid: Grid):
    return [
        (0, 0),
        (0, grid.cols - 1),
        (grid.rows - 1, 0),
        (grid.rows - 1, grid.cols - 1),
    ]

def farthest_corner(grid: Grid, origin: Cell) -> Cell:
    """Ties keep the earlier corner; an all-zero case gives (0, 0)."""
    max_distance = 0
    best = corners(grid)[0]
    for corner in corners(grid):
        distance = manhattan(origin, corner)
        if distance > max_distance:
            max_distance = distance
            best = corner
    return best

def select_points(grid: Grid, rng, samples: int = 1000) -> Tuple[Cell, Cell]:
    """
    Samples (start, end) pairs and keeps the first one with the largest
    Manhattan distance. Degenerate grids where every sample collapses to
    a single cell pair the first sampled start with its farthest corner.
    """
    max_distance = 0
    best = None
    first_start = None

    for _ in range(samples):
        start = (rng.randrange(grid.rows), rng.randrange(grid.cols))
        end = (rng.randrange(grid.rows), rng.randrange(grid.cols))
        if first_start is None:
            first_start = start

        distance = manhattan(start, end)
        if start != end and distance > max_distance:
            max_distance = distance
            best = (start, end)

    if best is None:
        end = farthest_corner(grid, first_start)
        logger.debug(f"All samples collapsed, using corner {end} for start {first_start}")
        return first_start, end

    return best

def select_new_end(grid: Grid, start: Cell, min_distance: int, rng, attempts: int = 100) -> Cell:
    """First random cell at least 'min_distance' away from start, else the farthest corner."""
    for _ in range(attempts):
        candidate = (rng.randrange(grid.rows), rng.randrange(grid.cols))
        if manhattan(start, candidate) >= min_distance:
            return candidate

    end = farthest_corner(grid, start)
    logger.debug(f"No end within {attempts} attempts at distance >= {min_distance}, using corner {end}")
    return end
