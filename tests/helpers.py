class FirstChoice:
    """Stand-in RNG whose randrange always picks index 0."""
    def __init__(self):
        self.calls = 0

    def randrange(self, *args):
        self.calls += 1
        return 0

# 3x3 maze carved by PrimsAlgorithm with FirstChoice: the seed is (1, 1)
# and the frontier behaves like a FIFO queue.
# Maps each cell to the directions left OPEN.
FIRST_CHOICE_3X3_OPEN = {
    (0, 0): {"right"},
    (0, 1): {"right", "bottom", "left"},
    (0, 2): {"left"},
    (1, 0): {"right"},
    (1, 1): {"top", "right", "bottom", "left"},
    (1, 2): {"bottom", "left"},
    (2, 0): {"right"},
    (2, 1): {"top", "left"},
    (2, 2): {"top"},
}

def open_directions(grid, row, col):
    from maze_loop.core.grid import Grid
    return {Grid.NAMES[d] for d in Grid.DIRECTIONS if not grid.has_wall(row, col, d)}

def carve_corridor(grid, cells):
    """Opens walls along a list of adjacent cells."""
    from maze_loop.core.grid import Grid
    for (r1, c1), (r2, c2) in zip(cells, cells[1:]):
        for direction in Grid.DIRECTIONS:
            if Grid.neighbor_in_direction(r1, c1, direction) == (r2, c2):
                grid.remove_wall_between(r1, c1, direction)
                break
        else:
            raise ValueError(f"{(r1, c1)} and {(r2, c2)} are not adjacent")
