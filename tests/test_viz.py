import unittest
import re
import sys
import os
from unittest import mock

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

try:
    import pygame
    from maze_loop.viz.renderer import Renderer
    from maze_loop.viz.recorder import VideoRecorder
except ImportError as e:
    pygame = None
    IMPORT_ERROR = e

from maze_loop.core.config import MazeConfig
from maze_loop.core.events import TAG_VISITED, TAG_PATH, TAG_START, TAG_END
from maze_loop.core.complexity import MazeAnalyzer

class TestRenderer(unittest.TestCase):
    def setUp(self):
        if pygame is None:
            self.skipTest(f"Rendering stack unavailable: {IMPORT_ERROR}")

    def make_renderer(self, width=400, height=400, max_ticks_per_frame=2000):
        config = MazeConfig(seed=2).instant()
        return Renderer(config, width=width, height=height, max_ticks_per_frame=max_ticks_per_frame)

    def test_grid_fits_viewport(self):
        renderer = self.make_renderer()
        self.assertEqual((renderer.grid.rows, renderer.grid.cols), (9, 9))

    def test_decorations_follow_events(self):
        renderer = self.make_renderer()
        renderer.cell_marked((1, 1), TAG_VISITED)
        renderer.cell_marked((1, 1), TAG_PATH)
        renderer.cell_unmarked((1, 1), TAG_VISITED)
        self.assertEqual(renderer.decorations, {(1, 1): {TAG_PATH}})

        renderer.cell_unmarked((1, 1), TAG_PATH)
        renderer.cell_unmarked((3, 3), TAG_END)
        self.assertEqual(renderer.decorations, {})

    def test_pump_runs_a_cycle(self):
        # One tick per frame so the check lands right after the solve
        renderer = self.make_renderer(max_ticks_per_frame=1)
        renderer.orchestrator.start_cycle()

        for frame in range(5000):
            renderer.pump(float(frame))
            if renderer.orchestrator.cycles_completed >= 1:
                break
        self.assertGreaterEqual(renderer.orchestrator.cycles_completed, 1)
        self.assertTrue(MazeAnalyzer.is_perfect(renderer.grid))

        tags = set().union(*renderer.decorations.values())
        self.assertTrue({TAG_START, TAG_END, TAG_PATH} <= tags)
        renderer.orchestrator.teardown()

    def test_pending_resize_rebuilds(self):
        renderer = self.make_renderer()
        renderer.orchestrator.start_cycle()
        renderer.pump(0.0)
        renderer.cell_marked((0, 0), TAG_VISITED)

        renderer.orchestrator.stop()
        renderer.pending_resize = (800, 400)
        renderer.resize_at = 5.0

        # Still inside the grace period
        renderer.apply_pending_resize(1.0)
        self.assertEqual(renderer.grid.cols, 9)

        with mock.patch("pygame.display.set_caption"):
            renderer.apply_pending_resize(5.0)

        self.assertIsNone(renderer.pending_resize)
        self.assertEqual((renderer.grid.rows, renderer.grid.cols), (9, 19))
        self.assertEqual(renderer.decorations, {})
        self.assertTrue(renderer.orchestrator.is_running)
        renderer.orchestrator.teardown()

    def test_draw_grid_offscreen(self):
        renderer = self.make_renderer(width=200, height=200)
        renderer.surface = pygame.Surface((200, 200))
        renderer.center_grid()
        renderer.cell_marked((0, 0), TAG_START)

        renderer.draw_grid()

        # Start cell is filled, wall color is on the border
        px = renderer.offset_x + renderer.cell_size // 2
        py = renderer.offset_y + renderer.cell_size // 2
        self.assertEqual(tuple(renderer.surface.get_at((px, py)))[:3], Renderer.COLOR_START)
        self.assertEqual(tuple(renderer.surface.get_at((renderer.offset_x, py)))[:3], Renderer.COLOR_WALL)

class TestRecorder(unittest.TestCase):
    def setUp(self):
        if pygame is None:
            self.skipTest(f"Rendering stack unavailable: {IMPORT_ERROR}")

    def test_inactive_recorder_is_noop(self):
        recorder = VideoRecorder(active=False)
        recorder.capture_frame(pygame.Surface((10, 10)))
        recorder.stop()
        self.assertIsNone(recorder.writer)
        self.assertEqual(recorder.frame_count, 0)
        self.assertIsNone(recorder.output_file)

    def test_default_filename(self):
        name = os.path.basename(VideoRecorder.default_filename(directory="does-not-exist"))
        self.assertRegex(name, re.compile(r"^maze_loop_\d{8}_\d{6}\.mp4$"))

        recorder = VideoRecorder(active=True)
        self.assertTrue(recorder.output_file.endswith(".mp4"))

if __name__ == '__main__':
    unittest.main()
