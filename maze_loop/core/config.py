import math
from dataclasses import dataclass
from typing import Optional, Tuple

from maze_loop.core.errors import ConfigError

@dataclass
class MazeConfig:
    difficulty: int = 5             # 1-10, drives cell size and min distance
    solve_delay: float = 0.02       # seconds per solver expansion
    generation_delay: float = 0.0005  # seconds per generator batch
    batch_size: int = 20            # frontier entries per generator yield
    post_generate_pause: float = 0.5
    post_solve_pause: float = 1.0
    resize_grace: float = 0.2
    point_samples: int = 1000
    end_attempts: int = 100
    seed: Optional[int] = None

    def __post_init__(self):
        if not 1 <= self.difficulty <= 10:
            raise ConfigError(f"difficulty must be in 1..10, got {self.difficulty}")
        if self.batch_size < 1:
            raise ConfigError(f"batch_size must be positive, got {self.batch_size}")
        if self.point_samples < 1 or self.end_attempts < 1:
            raise ConfigError("point_samples and end_attempts must be positive")
        for name in ("solve_delay", "generation_delay", "post_generate_pause",
                     "post_solve_pause", "resize_grace"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} cannot be negative")

    @property
    def cell_size(self) -> int:
        # 20px (hard) to 56px (easy)
        return max(20, 60 - self.difficulty * 4)

    @property
    def min_distance(self) -> int:
        # 10 to 25
        return max(10, math.floor(self.difficulty * 2.5))

    def grid_shape(self, width_px: int, height_px: int) -> Tuple[int, int]:
        """
        Number of (rows, cols) that fit a viewport, forced odd.
        Never smaller than 1x1.
        """
        rows = height_px // self.cell_size
        cols = width_px // self.cell_size
        if rows % 2 == 0:
            rows -= 1
        if cols % 2 == 0:
            cols -= 1
        return max(1, rows), max(1, cols)

    def instant(self) -> "MazeConfig":
        """Copy with every delay zeroed (headless runs, tests)."""
        return MazeConfig(
            difficulty=self.difficulty,
            solve_delay=0.0,
            generation_delay=0.0,
            batch_size=self.batch_size,
            post_generate_pause=0.0,
            post_solve_pause=0.0,
            resize_grace=0.0,
            point_samples=self.point_samples,
            end_attempts=self.end_attempts,
            seed=self.seed,
        )
