import random
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Iterator, Optional
from maze_loop.core.grid import Grid

class RunStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"   # generator carved everything reachable
    FOUND = "found"           # solver reached the end
    NOT_FOUND = "not_found"   # solver exhausted the open set or hit the cap
    ABORTED = "aborted"       # cancelled at a yield point

class Generator(ABC):
    def __init__(self, grid: Grid, seed: int = None, rng: random.Random = None,
                 batch_size: int = 20, should_continue: Optional[Callable[[], bool]] = None):
        self.grid = grid
        self.seed = seed
        self.rng = rng if rng is not None else random.Random(seed)
        self.batch_size = batch_size
        self.should_continue = should_continue
        self.step_count = 0
        self.status = RunStatus.PENDING

    @abstractmethod
    def run(self) -> Iterator[str]:
        """
        Yields status strings or progress updates.
        The actual grid modifications happen in-place on self.grid.
        """
        pass

    def run_all(self) -> RunStatus:
        """Helper to run the generator to completion."""
        for _ in self.run():
            pass
        return self.status
