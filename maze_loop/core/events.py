from typing import Iterator, List, Tuple

# Event Types
EVT_WALL_REMOVED = 0x01
EVT_CELL_MARKED = 0x02
EVT_CELL_UNMARKED = 0x03
EVT_GRID_RESIZED = 0x04

# Decoration Tags
TAG_VISITED = "visited"
TAG_PATH = "path"
TAG_START = "start"
TAG_END = "end"

class MazeObserver:
    """
    Receives cell-level state changes from the grid, solver and orchestrator.
    Every hook is a no-op here; renderers override what they draw.
    """
    def wall_removed(self, a: Tuple[int, int], b: Tuple[int, int]):
        pass

    def cell_marked(self, cell: Tuple[int, int], tag: str):
        pass

    def cell_unmarked(self, cell: Tuple[int, int], tag: str):
        pass

    def grid_resized(self, rows: int, cols: int, cell_size: int):
        pass

class EventLog(MazeObserver):
    """In-memory event stream. Handy for tests and headless runs."""
    def __init__(self):
        self.events: List[Tuple[int, Tuple]] = []

    def wall_removed(self, a, b):
        self.events.append((EVT_WALL_REMOVED, (a, b)))

    def cell_marked(self, cell, tag):
        self.events.append((EVT_CELL_MARKED, (cell, tag)))

    def cell_unmarked(self, cell, tag):
        self.events.append((EVT_CELL_UNMARKED, (cell, tag)))

    def grid_resized(self, rows, cols, cell_size):
        self.events.append((EVT_GRID_RESIZED, (rows, cols, cell_size)))

    def stream_events(self, type_code: int = None) -> Iterator[Tuple[int, Tuple]]:
        for event in self.events:
            if type_code is None or event[0] == type_code:
                yield event

    def marked(self, tag: str) -> List[Tuple[int, int]]:
        """Cells that received 'tag', in order."""
        return [cell for _, (cell, t) in self.stream_events(EVT_CELL_MARKED) if t == tag]

    def decorations(self):
        """
        Replays mark/unmark events into the set of (cell, tag) pairs that
        are currently shown.
        """
        shown = set()
        for type_code, data in self.events:
            if type_code == EVT_CELL_MARKED:
                shown.add(data)
            elif type_code == EVT_CELL_UNMARKED:
                shown.discard(data)
            elif type_code == EVT_GRID_RESIZED:
                shown.clear()
        return shown

    def clear(self):
        self.events.clear()
