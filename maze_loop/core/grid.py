from array import array
from typing import Iterator, Optional, Tuple

Cell = Tuple[int, int]

class Grid:
    # Bitmask Constants (walls)
    TOP    = 0b00000001
    RIGHT  = 0b00000010
    BOTTOM = 0b00000100
    LEFT   = 0b00001000

    # Flags
    IN_MAZE = 0b00010000
    VISITED = 0b00100000

    # All walls present by default (T|R|B|L) = 15
    ALL_WALLS = TOP | RIGHT | BOTTOM | LEFT

    # Frontier push order depends on this
    DIRECTIONS = (TOP, RIGHT, BOTTOM, LEFT)

    # Direction Helpers
    DR = {TOP: -1, BOTTOM: 1, RIGHT: 0, LEFT: 0}
    DC = {TOP: 0, BOTTOM: 0, RIGHT: 1, LEFT: -1}
    OPPOSITE = {TOP: BOTTOM, BOTTOM: TOP, RIGHT: LEFT, LEFT: RIGHT}
    NAMES = {TOP: "top", RIGHT: "right", BOTTOM: "bottom", LEFT: "left"}

    __slots__ = ('rows', 'cols', 'cells', 'observer')

    def __init__(self, rows: int, cols: int, observer=None):
        # Odd dimensions leave room for single-cell corridors and walls
        if rows % 2 == 0:
            rows -= 1
        if cols % 2 == 0:
            cols -= 1
        if rows < 1 or cols < 1:
            raise ValueError(f"Grid must be at least 1x1 after odd-forcing, got {rows}x{cols}")

        self.rows = rows
        self.cols = cols
        self.observer = observer
        # 'B' (unsigned char) -> 1 byte per cell
        self.cells = array('B', [self.ALL_WALLS] * (rows * cols))

    def __len__(self) -> int:
        return self.rows * self.cols

    def is_valid_cell(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def get_index(self, row: int, col: int) -> int:
        if 0 <= row < self.rows and 0 <= col < self.cols:
            return row * self.cols + col
        raise IndexError(f"Cell ({row}, {col}) out of bounds")

    @classmethod
    def neighbor_in_direction(cls, row: int, col: int, dir_bit: int) -> Cell:
        """Pure coordinate step. Callers validate the result."""
        return row + cls.DR[dir_bit], col + cls.DC[dir_bit]

    def remove_wall_between(self, row: int, col: int, dir_bit: int):
        """
        Removes the wall on side 'dir_bit' of (row, col) and the OPPOSITE wall
        of the neighbor. If the neighbor lies outside the grid only this
        cell's side is cleared and no observer is told.
        """
        if not self.is_valid_cell(row, col):
            return

        self.cells[row * self.cols + col] &= ~dir_bit

        nrow, ncol = self.neighbor_in_direction(row, col, dir_bit)
        if not self.is_valid_cell(nrow, ncol):
            return
        self.cells[nrow * self.cols + ncol] &= ~self.OPPOSITE[dir_bit]

        if self.observer:
            self.observer.wall_removed((row, col), (nrow, ncol))

    def add_wall(self, row: int, col: int, dir_bit: int):
        idx = row * self.cols + col
        self.cells[idx] |= dir_bit

        # Handle neighbor (strict consistency)
        nrow, ncol = self.neighbor_in_direction(row, col, dir_bit)
        if self.is_valid_cell(nrow, ncol):
            self.cells[nrow * self.cols + ncol] |= self.OPPOSITE[dir_bit]

    def has_wall(self, row: int, col: int, dir_bit: int) -> bool:
        return (self.cells[row * self.cols + col] & dir_bit) != 0

    def set_in_maze(self, row: int, col: int, in_maze: bool = True):
        idx = row * self.cols + col
        if in_maze:
            self.cells[idx] |= self.IN_MAZE
        else:
            self.cells[idx] &= ~self.IN_MAZE

    def is_in_maze(self, row: int, col: int) -> bool:
        return (self.cells[row * self.cols + col] & self.IN_MAZE) != 0

    def set_visited(self, row: int, col: int, visited: bool = True):
        idx = row * self.cols + col
        if visited:
            self.cells[idx] |= self.VISITED
        else:
            self.cells[idx] &= ~self.VISITED

    def reset(self, keep: Optional[Cell] = None):
        """
        Clears every cell back to blank walls.
        'keep' survives with its in-maze/visited flags; its walls are closed
        too so the neighbors it shares walls with stay symmetric.
        """
        keep_idx = -1
        flags = 0
        if keep is not None:
            keep_idx = self.get_index(*keep)
            flags = self.cells[keep_idx] & (self.IN_MAZE | self.VISITED)

        for idx in range(self.rows * self.cols):
            self.cells[idx] = self.ALL_WALLS

        if keep_idx >= 0:
            self.cells[keep_idx] = self.ALL_WALLS | flags | self.IN_MAZE

    def get_neighbors(self, row: int, col: int) -> Iterator[Tuple[int, int, int]]:
        """
        Yields (nrow, ncol, direction_to_neighbor) for all valid grid neighbors
        in TOP, RIGHT, BOTTOM, LEFT order.
        Does NOT check walls (that's for pathfinding).
        """
        if row > 0:
            yield (row - 1, col, self.TOP)
        if col < self.cols - 1:
            yield (row, col + 1, self.RIGHT)
        if row < self.rows - 1:
            yield (row + 1, col, self.BOTTOM)
        if col > 0:
            yield (row, col - 1, self.LEFT)

    def get_open_neighbors(self, row: int, col: int) -> Iterator[Cell]:
        """
        Yields (nrow, ncol) for neighbors that are NOT blocked by a wall.
        """
        val = self.cells[row * self.cols + col]

        if not (val & self.TOP) and row > 0:
            yield (row - 1, col)
        if not (val & self.RIGHT) and col < self.cols - 1:
            yield (row, col + 1)
        if not (val & self.BOTTOM) and row < self.rows - 1:
            yield (row + 1, col)
        if not (val & self.LEFT) and col > 0:
            yield (row, col - 1)
