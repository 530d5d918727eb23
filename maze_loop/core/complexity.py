from collections import deque
from typing import Dict, List, Optional
from maze_loop.core.grid import Grid, Cell

class MazeAnalyzer:
    @staticmethod
    def popcount_walls(val: int) -> int:
        c = 0
        if val & Grid.TOP: c += 1
        if val & Grid.RIGHT: c += 1
        if val & Grid.BOTTOM: c += 1
        if val & Grid.LEFT: c += 1
        return c

    @staticmethod
    def calculate_stats(grid: Grid):
        dead_ends = 0
        intersections = 0 # 0, 1 walls
        corridors = 0 # 2 walls

        for i in range(grid.rows * grid.cols):
            walls = MazeAnalyzer.popcount_walls(grid.cells[i])
            if walls == 3: dead_ends += 1
            elif walls == 2: corridors += 1
            elif walls <= 1: intersections += 1

        total = grid.rows * grid.cols
        return {
            "dead_ends": dead_ends,
            "corridors": corridors,
            "intersections": intersections,
            "carved": sum(1 for v in grid.cells if v & Grid.IN_MAZE),
            "removed_walls": MazeAnalyzer.removed_wall_count(grid),
            "dead_end_percent": (dead_ends / total) * 100 if total > 0 else 0
        }

    @staticmethod
    def removed_wall_count(grid: Grid) -> int:
        """
        Interior edges open on both sides. Only RIGHT and BOTTOM are
        inspected so each edge is counted once.
        """
        count = 0
        for row in range(grid.rows):
            for col in range(grid.cols):
                if col < grid.cols - 1 and not grid.has_wall(row, col, Grid.RIGHT) \
                        and not grid.has_wall(row, col + 1, Grid.LEFT):
                    count += 1
                if row < grid.rows - 1 and not grid.has_wall(row, col, Grid.BOTTOM) \
                        and not grid.has_wall(row + 1, col, Grid.TOP):
                    count += 1
        return count

    @staticmethod
    def asymmetric_walls(grid: Grid) -> List[tuple]:
        """(cell, direction) pairs whose wall disagrees with the neighbor's."""
        bad = []
        for row in range(grid.rows):
            for col in range(grid.cols):
                for nrow, ncol, direction in grid.get_neighbors(row, col):
                    if grid.has_wall(row, col, direction) != grid.has_wall(nrow, ncol, Grid.OPPOSITE[direction]):
                        bad.append(((row, col), direction))
        return bad

    @staticmethod
    def is_symmetric(grid: Grid) -> bool:
        return not MazeAnalyzer.asymmetric_walls(grid)

    @staticmethod
    def distances_from(grid: Grid, origin: Cell) -> Dict[Cell, int]:
        """BFS edge counts over open corridors."""
        dist = {origin: 0}
        queue = deque([origin])
        while queue:
            current = queue.popleft()
            for neighbor in grid.get_open_neighbors(*current):
                if neighbor not in dist:
                    dist[neighbor] = dist[current] + 1
                    queue.append(neighbor)
        return dist

    @staticmethod
    def tree_distance(grid: Grid, a: Cell, b: Cell) -> Optional[int]:
        return MazeAnalyzer.distances_from(grid, a).get(b)

    @staticmethod
    def is_perfect(grid: Grid) -> bool:
        """
        Connected and acyclic: a symmetric maze whose corridors reach every
        cell with exactly rows*cols - 1 edges is a spanning tree.
        """
        if not MazeAnalyzer.is_symmetric(grid):
            return False
        total = grid.rows * grid.cols
        if MazeAnalyzer.removed_wall_count(grid) != total - 1:
            return False
        return len(MazeAnalyzer.distances_from(grid, (0, 0))) == total
