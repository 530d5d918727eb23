import logging
import random
from typing import Iterator, Optional

from maze_loop.core.config import MazeConfig
from maze_loop.core.events import MazeObserver, TAG_VISITED, TAG_PATH, TAG_START, TAG_END
from maze_loop.core.grid import Grid, Cell
from maze_loop.core.phase import Phase, PhaseGuard
from maze_loop.core.scheduler import Tick
from maze_loop.algo.base import RunStatus
from maze_loop.algo.endpoints import select_points, select_new_end
from maze_loop.algo.prim import PrimsAlgorithm
from maze_loop.algo.solvers import AStar

logger = logging.getLogger(__name__)

class MazeOrchestrator:
    """
    Drives the endless generate -> solve -> advance -> regenerate cycle.

    Everything runs as nested generators yielding Tick values; a driver
    (the pygame renderer or scheduler.drive) resumes the cycle and honours
    each Tick's delay. The first carve of a cycle covers the whole grid,
    later ones keep the previous End as the new Start.
    """
    def __init__(self, rows: int, cols: int, config: MazeConfig = None,
                 observer: MazeObserver = None, rng: random.Random = None):
        self.config = config or MazeConfig()
        self.observer = observer or MazeObserver()
        self.rng = rng if rng is not None else random.Random(self.config.seed)
        self.guard = PhaseGuard()

        self.grid = Grid(rows, cols, observer=self.observer)
        self.start: Optional[Cell] = None
        self.end: Optional[Cell] = None

        self.continue_generation = True
        self.generation_status = RunStatus.PENDING
        self.solver: Optional[AStar] = None
        self.cycles_completed = 0

        self._running = False
        self._cycle = None

    @property
    def phase(self) -> Phase:
        return self.guard.phase

    @property
    def is_running(self) -> bool:
        return self._running or self._cycle is not None

    def _should_continue(self) -> bool:
        return self.continue_generation

    # ----- driver API -----

    def start_cycle(self) -> bool:
        """Arms the cycle. A no-op returning False when one is already active."""
        if self.is_running:
            return False
        self.continue_generation = True
        self._cycle = self.run()
        return True

    def step(self) -> Optional[Tick]:
        """Resumes the cycle once. None when there is nothing left to run."""
        if self._cycle is None:
            return None
        try:
            return next(self._cycle)
        except StopIteration:
            self._cycle = None
            return None

    def stop(self):
        self.continue_generation = False

    def teardown(self):
        self.stop()
        if self._cycle is not None:
            # Runs the cycle's finally blocks at its current yield point
            self._cycle.close()
            self._cycle = None
        self.guard.reset()

    def rebuild(self, rows: int, cols: int):
        """Discards the grid for a new one of a different size. Call start_cycle() afterwards."""
        self.teardown()
        self.grid = Grid(rows, cols, observer=self.observer)
        self.start = self.end = None
        self.solver = None
        self.generation_status = RunStatus.PENDING
        self.continue_generation = True
        logger.info(f"Grid rebuilt at {self.grid.rows}x{self.grid.cols}")
        self.observer.grid_resized(self.grid.rows, self.grid.cols, self.config.cell_size)

    # ----- cycle -----

    def run(self) -> Iterator[Tick]:
        if self._running:
            logger.debug("Cycle already running, ignoring start request")
            return
        self._running = True

        try:
            keep_start = False
            while self.continue_generation:
                generated = yield from self.generate(keep_start=keep_start)
                if not generated or not self.continue_generation:
                    break
                yield Tick(Phase.IDLE, "Generated", self.config.post_generate_pause)

                found = yield from self.solve()
                if not self.continue_generation or not found:
                    break
                self.cycles_completed += 1
                yield Tick(Phase.IDLE, "Solved", self.config.post_solve_pause)

                yield from self.advance()
                keep_start = True
        except Exception:
            logger.exception("Error in infinite maze generation")
            self.continue_generation = False
        finally:
            self.guard.reset()
            self._running = False

    def generate(self, keep_start: bool = False) -> Iterator[Tick]:
        """Carves a maze. Returns True when carving completed."""
        if not self.guard.try_enter(Phase.GENERATING):
            logger.warning(f"Cannot generate maze while {self.guard.phase.value} is in progress")
            return False
        keep_start = keep_start and self.start is not None

        try:
            if keep_start:
                self.grid.reset(keep=self.start)
                seed_cell = self.start
            else:
                self.clear_points()
                self.grid.reset()
                seed_cell = None

            generator = PrimsAlgorithm(
                self.grid,
                rng=self.rng,
                seed_cell=seed_cell,
                batch_size=self.config.batch_size,
                should_continue=self._should_continue,
            )
            for status in generator.run():
                yield Tick(Phase.GENERATING, status, self.config.generation_delay)

            self.generation_status = generator.status
            if generator.status is not RunStatus.COMPLETED:
                logger.info("Maze generation aborted")
                return False

            if keep_start:
                self.end = select_new_end(self.grid, self.start, self.config.min_distance,
                                          self.rng, attempts=self.config.end_attempts)
                self.observer.cell_marked(self.end, TAG_END)
            else:
                self.start, self.end = select_points(self.grid, self.rng, samples=self.config.point_samples)
                self.observer.cell_marked(self.start, TAG_START)
                self.observer.cell_marked(self.end, TAG_END)

            logger.debug(f"Carved {generator.step_count} cells, start={self.start} end={self.end}")
            return True
        except Exception:
            logger.exception("Error during maze generation")
            self.continue_generation = False
            return False
        finally:
            self.guard.leave()

    def solve(self) -> Iterator[Tick]:
        """Runs A* between start and end. Returns True when a path was found."""
        if self.start is None or self.end is None:
            logger.warning("Cannot solve maze without start and end points")
            return False
        if not self.guard.try_enter(Phase.SOLVING):
            logger.warning(f"Cannot solve maze while {self.guard.phase.value} is in progress")
            return False

        try:
            self.solver = AStar(self.grid, observer=self.observer, should_continue=self._should_continue)
            for tag in self.solver.run(self.start, self.end):
                delay = self.config.solve_delay * 2 if tag == TAG_PATH else self.config.solve_delay
                yield Tick(Phase.SOLVING, tag, delay)
        finally:
            self.guard.leave()

        if self.solver.found:
            logger.debug(f"Path of {len(self.solver.path)} cells after {self.solver.visited_count} expansions")
        return self.solver.found

    def advance(self) -> Iterator[Tick]:
        """Promotes End to Start and clears the previous solve's decorations."""
        if self.start is None or self.end is None:
            return
        self.guard.enter(Phase.ADVANCING)

        try:
            self.observer.cell_unmarked(self.end, TAG_END)
            self.observer.cell_unmarked(self.start, TAG_START)
            self.start, self.end = self.end, None
            self.observer.cell_marked(self.start, TAG_START)
            self.clear_solution()
            yield Tick(Phase.ADVANCING, "Advanced", 0.0)
        finally:
            self.guard.leave()

    def clear_solution(self):
        if self.solver is None:
            return
        for cell in self.solver.visited_cells:
            if cell != self.start:
                self.observer.cell_unmarked(cell, TAG_VISITED)
        for cell in self.solver.path[1:-1]:
            self.observer.cell_unmarked(cell, TAG_PATH)
        self.solver = None

    def clear_points(self):
        self.clear_solution()
        if self.start is not None:
            self.observer.cell_unmarked(self.start, TAG_START)
        if self.end is not None:
            self.observer.cell_unmarked(self.end, TAG_END)
        self.start = self.end = None
