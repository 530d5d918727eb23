import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, Iterator, List, Optional, Set
from maze_loop.core.grid import Grid, Cell
from maze_loop.core.events import TAG_VISITED, TAG_PATH
from maze_loop.algo.base import RunStatus
from maze_loop.algo.endpoints import manhattan
from maze_loop.algo.pqueue import IndexedPriorityQueue

logger = logging.getLogger(__name__)

class Solver(ABC):
    def __init__(self, grid: Grid, observer=None, should_continue: Optional[Callable[[], bool]] = None):
        self.grid = grid
        self.observer = observer
        self.should_continue = should_continue
        self.path: List[Cell] = []
        self.visited_cells: List[Cell] = []
        self.visited_count = 0
        self.iterations = 0
        self.found = False
        self.status = RunStatus.PENDING

    @abstractmethod
    def run(self, start: Cell, end: Cell) -> Iterator[str]:
        pass

    def run_all(self, start: Cell, end: Cell) -> bool:
        for _ in self.run(start, end):
            pass
        return self.found

    def _cancelled(self) -> bool:
        return self.should_continue is not None and not self.should_continue()

    def _mark(self, cell: Cell, tag: str):
        if self.observer:
            self.observer.cell_marked(cell, tag)

class AStar(Solver):
    """
    A* over the carved maze with a Manhattan heuristic.

    run() yields TAG_VISITED after expanding a cell (Start/End excluded)
    and TAG_PATH after decorating each path cell, so the caller can pace
    the two differently.
    """
    def heuristic(self, a: Cell, b: Cell) -> int:
        return manhattan(a, b)

    def run(self, start: Cell, end: Cell) -> Iterator[str]:
        if start == end:
            self.path = [start]
            self.found = True
            self.status = RunStatus.FOUND
            return

        open_set = IndexedPriorityQueue()
        closed: Set[Cell] = set()
        came_from: Dict[Cell, Cell] = {}
        g_score: Dict[Cell, int] = {start: 0}

        open_set.push(start, 0)
        max_iterations = self.grid.rows * self.grid.cols

        while open_set and self.iterations < max_iterations:
            self.iterations += 1
            current = open_set.pop()

            if current == end:
                yield from self.reconstruct_path(came_from, start, end)
                return

            closed.add(current)

            if current != start:
                self.visited_cells.append(current)
                self.visited_count += 1
                self._mark(current, TAG_VISITED)
                yield TAG_VISITED
                if self._cancelled():
                    self.status = RunStatus.ABORTED
                    logger.debug(f"Search aborted after {self.iterations} iterations")
                    return

            tentative = g_score[current] + 1
            for neighbor in self.grid.get_open_neighbors(*current):
                if neighbor in closed:
                    continue
                if neighbor not in g_score or tentative < g_score[neighbor]:
                    came_from[neighbor] = current
                    g_score[neighbor] = tentative
                    open_set.push_or_update(neighbor, tentative + self.heuristic(neighbor, end))

        self.status = RunStatus.NOT_FOUND
        logger.info(f"No path from {start} to {end} after {self.iterations} iterations")

    def reconstruct_path(self, came_from: Dict[Cell, Cell], start: Cell, end: Cell) -> Iterator[str]:
        curr = end
        path = [curr]
        while curr in came_from:
            curr = came_from[curr]
            path.append(curr)
        path.reverse()

        self.path = path
        self.found = True
        self.status = RunStatus.FOUND

        for cell in path:
            if cell == start or cell == end:
                continue
            self._mark(cell, TAG_PATH)
            yield TAG_PATH
            if self._cancelled():
                # The path is known; only its decoration was cut short
                return
