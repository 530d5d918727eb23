import unittest
import random
import sys
import os
from unittest import mock

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_loop.core.config import MazeConfig
from maze_loop.core.complexity import MazeAnalyzer
from maze_loop.core.events import EventLog, EVT_GRID_RESIZED, TAG_START, TAG_END
from maze_loop.core.grid import Grid
from maze_loop.core.orchestrator import MazeOrchestrator
from maze_loop.core.phase import Phase
from maze_loop.core.scheduler import Tick
from maze_loop.algo.base import RunStatus
from maze_loop.algo.endpoints import manhattan, farthest_corner

from helpers import FirstChoice, FIRST_CHOICE_3X3_OPEN, open_directions

def make_orchestrator(rows=15, cols=15, seed=1, **kwargs):
    config = MazeConfig(seed=seed).instant()
    log = EventLog()
    orch = MazeOrchestrator(rows, cols, config=config, observer=log, **kwargs)
    return orch, log

def run_cycles(orch, cycles, max_ticks=200000):
    orch.start_cycle()
    for _ in range(max_ticks):
        if orch.cycles_completed >= cycles:
            orch.stop()
        if orch.step() is None:
            return
    raise AssertionError("cycle did not finish")

def drain(gen):
    """Consumes a phase generator and returns its result."""
    try:
        while True:
            next(gen)
    except StopIteration as stop:
        return stop.value

class TestOrchestrator(unittest.TestCase):
    def test_full_generation(self):
        orch, log = make_orchestrator()
        self.assertTrue(drain(orch.generate()))

        self.assertEqual(orch.generation_status, RunStatus.COMPLETED)
        self.assertTrue(MazeAnalyzer.is_perfect(orch.grid))
        self.assertNotEqual(orch.start, orch.end)
        self.assertIn((orch.start, TAG_START), log.decorations())
        self.assertIn((orch.end, TAG_END), log.decorations())
        self.assertEqual(orch.phase, Phase.IDLE)

    def test_cycles_keep_invariants(self):
        orch, log = make_orchestrator(rows=21, cols=21, seed=4)
        run_cycles(orch, 4)

        self.assertEqual(orch.cycles_completed, 4)
        self.assertFalse(orch.is_running)
        self.assertTrue(MazeAnalyzer.is_perfect(orch.grid))

    def test_each_solve_is_optimal(self):
        orch, _ = make_orchestrator(rows=13, cols=17, seed=6)
        for cycle in range(4):
            self.assertTrue(drain(orch.generate(keep_start=cycle > 0)))
            self.assertTrue(MazeAnalyzer.is_perfect(orch.grid))
            if cycle > 0:
                distance = manhattan(orch.start, orch.end)
                self.assertTrue(distance >= orch.config.min_distance
                                or orch.end == farthest_corner(orch.grid, orch.start))

            self.assertTrue(drain(orch.solve()))
            path = orch.solver.path
            self.assertEqual(len(path) - 1, MazeAnalyzer.tree_distance(orch.grid, orch.start, orch.end))
            drain(orch.advance())

    def test_end_to_end_known_maze(self):
        config = MazeConfig(seed=0).instant()
        orch = MazeOrchestrator(3, 3, config=config, rng=FirstChoice())

        self.assertTrue(drain(orch.generate()))
        for (row, col), expected in FIRST_CHOICE_3X3_OPEN.items():
            self.assertEqual(open_directions(orch.grid, row, col), expected)

        # All samples collapse to (0,0), the far corner becomes End
        self.assertEqual((orch.start, orch.end), ((0, 0), (2, 2)))

        self.assertTrue(drain(orch.solve()))
        self.assertEqual(orch.solver.path, [(0, 0), (0, 1), (1, 1), (1, 2), (2, 2)])

    def test_keep_start_cycle(self):
        orch, log = make_orchestrator(rows=11, cols=11, seed=9)
        drain(orch.generate())
        self.assertTrue(drain(orch.solve()))
        old_end = orch.end

        drain(orch.advance())
        self.assertEqual(orch.start, old_end)
        self.assertIsNone(orch.end)
        # Only the new start marker is left on screen
        self.assertEqual(log.decorations(), {(old_end, TAG_START)})

        # Cancelled straight away: shows the reset state
        orch.continue_generation = False
        self.assertFalse(drain(orch.generate(keep_start=True)))
        self.assertEqual(orch.generation_status, RunStatus.ABORTED)
        for row in range(11):
            for col in range(11):
                if (row, col) == old_end:
                    self.assertTrue(orch.grid.is_in_maze(row, col))
                else:
                    self.assertEqual(orch.grid.cells[orch.grid.get_index(row, col)], Grid.ALL_WALLS)
        self.assertTrue(MazeAnalyzer.is_symmetric(orch.grid))

        orch.continue_generation = True
        self.assertTrue(drain(orch.generate(keep_start=True)))
        self.assertEqual(orch.start, old_end)
        self.assertTrue(orch.grid.is_in_maze(*old_end))
        self.assertTrue(MazeAnalyzer.is_perfect(orch.grid))
        self.assertIsNotNone(orch.end)

    def test_generate_rejected_while_solving(self):
        orch, _ = make_orchestrator(rows=15, cols=15, seed=2)
        drain(orch.generate())
        snapshot = orch.grid.cells.tobytes()

        solving = orch.solve()
        next(solving)
        self.assertEqual(orch.phase, Phase.SOLVING)

        with self.assertLogs("maze_loop.core.orchestrator", level="WARNING"):
            self.assertFalse(drain(orch.generate()))
        self.assertEqual(orch.grid.cells.tobytes(), snapshot)
        self.assertEqual(orch.phase, Phase.SOLVING)

        self.assertTrue(drain(solving))
        self.assertEqual(orch.phase, Phase.IDLE)

    def test_solve_requires_points(self):
        orch, _ = make_orchestrator()
        with self.assertLogs("maze_loop.core.orchestrator", level="WARNING"):
            self.assertFalse(drain(orch.solve()))

    def test_start_cycle_is_idempotent(self):
        orch, _ = make_orchestrator()
        self.assertTrue(orch.start_cycle())
        self.assertFalse(orch.start_cycle())
        orch.step()
        self.assertFalse(orch.start_cycle())
        # A second run() while the first is active does nothing
        self.assertEqual(list(orch.run()), [])

    def test_no_path_ends_cycle(self):
        orch, _ = make_orchestrator(rows=11, cols=11, seed=5)
        orch.start_cycle()

        tick = orch.step()
        while tick is not None and tick.status != "Generated":
            tick = orch.step()
        self.assertIsNotNone(tick)

        # Wall off the end before the solve starts
        for direction in Grid.DIRECTIONS:
            orch.grid.add_wall(orch.end[0], orch.end[1], direction)

        while orch.step() is not None:
            pass

        self.assertEqual(orch.cycles_completed, 0)
        self.assertFalse(orch.solver.found)
        self.assertEqual(orch.solver.status, RunStatus.NOT_FOUND)
        self.assertFalse(orch.is_running)

    def test_stop_during_generation(self):
        orch, _ = make_orchestrator(rows=31, cols=31, seed=3)
        orch.start_cycle()
        for _ in range(3):
            self.assertEqual(orch.step().phase, Phase.GENERATING)

        orch.stop()
        while orch.step() is not None:
            pass

        self.assertEqual(orch.generation_status, RunStatus.ABORTED)
        self.assertIsNone(orch.start)
        self.assertFalse(orch.is_running)
        self.assertEqual(orch.phase, Phase.IDLE)

    def test_rebuild(self):
        orch, log = make_orchestrator(rows=15, cols=15, seed=8)
        orch.start_cycle()
        for _ in range(5):
            orch.step()

        orch.rebuild(7, 10)

        self.assertEqual((orch.grid.rows, orch.grid.cols), (7, 9))
        self.assertFalse(orch.is_running)
        self.assertEqual(orch.phase, Phase.IDLE)
        self.assertIsNone(orch.start)
        resized = list(log.stream_events(EVT_GRID_RESIZED))
        self.assertEqual(resized, [(EVT_GRID_RESIZED, (7, 9, orch.config.cell_size))])

        # Fresh cycle on the new grid
        run_cycles(orch, 1)
        self.assertEqual(orch.cycles_completed, 1)
        self.assertEqual(len(orch.grid.cells), 7 * 9)

    def test_teardown_closes_cycle(self):
        orch, _ = make_orchestrator()
        orch.start_cycle()
        orch.step()
        self.assertEqual(orch.phase, Phase.GENERATING)

        orch.teardown()
        self.assertFalse(orch.continue_generation)
        self.assertFalse(orch.is_running)
        self.assertEqual(orch.phase, Phase.IDLE)
        self.assertIsNone(orch.step())

    def test_generation_error_stops_cycle(self):
        orch, _ = make_orchestrator()
        with mock.patch("maze_loop.core.orchestrator.select_points", side_effect=RuntimeError("boom")):
            with self.assertLogs("maze_loop.core.orchestrator", level="ERROR"):
                ticks = list(orch.run())

        self.assertTrue(ticks)
        self.assertFalse(orch.continue_generation)
        self.assertFalse(orch.is_running)
        self.assertEqual(orch.phase, Phase.IDLE)

    def test_cycle_error_is_contained(self):
        orch, _ = make_orchestrator()
        with mock.patch.object(MazeOrchestrator, "solve", side_effect=RuntimeError("boom")):
            with self.assertLogs("maze_loop.core.orchestrator", level="ERROR"):
                list(orch.run())

        self.assertFalse(orch.continue_generation)
        self.assertFalse(orch.is_running)

    def test_tick_delays_follow_config(self):
        config = MazeConfig(seed=3, solve_delay=0.5, generation_delay=0.25,
                            post_generate_pause=2.0, post_solve_pause=3.0)
        orch = MazeOrchestrator(9, 9, config=config, rng=random.Random(3))
        orch.start_cycle()

        seen = {}
        while orch.cycles_completed < 1:
            tick = orch.step()
            seen.setdefault(tick.status, tick.delay)

        self.assertEqual(seen["Generated"], 2.0)
        self.assertEqual(seen["visited"], 0.5)
        self.assertEqual(seen["path"], 1.0)
        self.assertEqual(seen["Done"], 0.25)
        self.assertEqual(seen["Solved"], 3.0)
        self.assertEqual(orch.step(), Tick(Phase.ADVANCING, "Advanced", 0.0))
        orch.teardown()

if __name__ == '__main__':
    unittest.main()
