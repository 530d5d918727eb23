import logging
from typing import Iterator, List, Optional, Tuple
from maze_loop.core.grid import Grid, Cell
from maze_loop.core.scheduler import BatchScheduler
from maze_loop.algo.base import Generator, RunStatus

logger = logging.getLogger(__name__)

# (row, col, direction): the wall on 'direction' side of (row, col)
FrontierWall = Tuple[int, int, int]

class PrimsAlgorithm(Generator):
    """
    Randomized Prim's carving over walls.

    The frontier holds candidate walls leading out of the carved region.
    Entries go stale when their target gets carved through another wall;
    they are checked when popped, not when pushed.
    """
    def __init__(self, grid: Grid, seed: int = None, rng=None, seed_cell: Optional[Cell] = None,
                 batch_size: int = 20, should_continue=None):
        super().__init__(grid, seed=seed, rng=rng, batch_size=batch_size, should_continue=should_continue)
        self.seed_cell = seed_cell
        self.frontier: List[FrontierWall] = []

    def random_seed_cell(self) -> Cell:
        # Odd row and odd col, so the seed has wall room on all sides
        return self._odd_index(self.grid.rows), self._odd_index(self.grid.cols)

    def _odd_index(self, size: int) -> int:
        slots = (size - 1) // 2
        if slots == 0:
            return 0
        return 1 + 2 * self.rng.randrange(slots)

    def add_walls(self, row: int, col: int):
        for direction in Grid.DIRECTIONS:
            nrow, ncol = Grid.neighbor_in_direction(row, col, direction)
            if self.grid.is_valid_cell(nrow, ncol) and not self.grid.is_in_maze(nrow, ncol):
                self.frontier.append((row, col, direction))

    def run(self) -> Iterator[str]:
        scheduler = BatchScheduler(self.batch_size, self.should_continue)

        if self.seed_cell is None:
            self.seed_cell = self.random_seed_cell()
        start_row, start_col = self.seed_cell

        self.grid.set_in_maze(start_row, start_col)
        self.frontier = []
        self.add_walls(start_row, start_col)

        while self.frontier:
            if scheduler.cancelled():
                self.status = RunStatus.ABORTED
                logger.debug(f"Carving aborted with {len(self.frontier)} frontier walls left")
                yield "Aborted"
                return

            # Pop keeps the order of the remaining entries
            row, col, direction = self.frontier.pop(self.rng.randrange(len(self.frontier)))
            nrow, ncol = Grid.neighbor_in_direction(row, col, direction)

            if self.grid.is_valid_cell(nrow, ncol) and not self.grid.is_in_maze(nrow, ncol):
                self.grid.remove_wall_between(row, col, direction)
                self.grid.set_in_maze(nrow, ncol)
                self.grid.set_visited(nrow, ncol)
                self.add_walls(nrow, ncol)
                self.step_count += 1

            if scheduler.tick():
                yield f"Frontier: {len(self.frontier)}"

        self.status = RunStatus.COMPLETED
        yield "Done"
