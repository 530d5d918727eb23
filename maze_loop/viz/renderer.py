import logging
import time
from typing import Dict, Optional, Set, Tuple

import pygame

from maze_loop.core.config import MazeConfig
from maze_loop.core.events import MazeObserver, TAG_VISITED, TAG_PATH, TAG_START, TAG_END
from maze_loop.core.grid import Grid
from maze_loop.core.orchestrator import MazeOrchestrator

logger = logging.getLogger(__name__)

class Renderer(MazeObserver):
    COLOR_BG = (10, 10, 10)
    COLOR_WALL = (200, 200, 200)
    COLOR_VISITED = (60, 100, 160)# Blue tint
    COLOR_SOLUTION = (255, 215, 0)# Gold
    COLOR_START = (26, 188, 156)
    COLOR_END = (231, 76, 60)

    # Later tags paint over earlier ones
    TAG_COLORS = [
        (TAG_VISITED, COLOR_VISITED),
        (TAG_PATH, COLOR_SOLUTION),
        (TAG_START, COLOR_START),
        (TAG_END, COLOR_END),
    ]

    def __init__(self, config: MazeConfig = None, width=1280, height=720, record=False, max_ticks_per_frame=2000):
        self.config = config or MazeConfig()
        self.screen_width = width
        self.screen_height = height
        self.max_ticks_per_frame = max_ticks_per_frame

        self.decorations: Dict[Tuple[int, int], Set[str]] = {}
        self.offset_x = 0
        self.offset_y = 0

        rows, cols = self.config.grid_shape(width, height)
        self.orchestrator = MazeOrchestrator(rows, cols, config=self.config, observer=self)

        # Tools
        from maze_loop.viz.recorder import VideoRecorder
        self.recorder = VideoRecorder(active=record)

        self.font = None
        self.running = True
        self.clock = None
        self.surface = None

        # Driver state
        self.resume_at = 0.0
        self.pending_resize: Optional[Tuple[int, int]] = None
        self.resize_at = 0.0

    @property
    def grid(self) -> Grid:
        return self.orchestrator.grid

    @property
    def cell_size(self) -> int:
        return self.config.cell_size

    # ----- MazeObserver -----

    def cell_marked(self, cell, tag):
        self.decorations.setdefault(cell, set()).add(tag)

    def cell_unmarked(self, cell, tag):
        tags = self.decorations.get(cell)
        if tags is not None:
            tags.discard(tag)
            if not tags:
                del self.decorations[cell]

    def grid_resized(self, rows, cols, cell_size):
        self.decorations.clear()
        self.center_grid()

    # ----- window -----

    def center_grid(self):
        """Center the maze in the window."""
        self.offset_x = (self.screen_width - self.grid.cols * self.cell_size) // 2
        self.offset_y = (self.screen_height - self.grid.rows * self.cell_size) // 2

    def init_window(self):
        pygame.init()
        pygame.display.set_caption(f"Maze Loop - {self.grid.rows}x{self.grid.cols}")
        self.surface = pygame.display.set_mode((self.screen_width, self.screen_height), pygame.RESIZABLE)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("Consolas", 16)
        self.center_grid()

    def handle_input(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.screen_width, self.screen_height = event.w, event.h
                # Stop now, rebuild once the window settles
                self.orchestrator.stop()
                self.pending_resize = (event.w, event.h)
                self.resize_at = time.monotonic() + self.config.resize_grace

    def apply_pending_resize(self, now: float):
        if self.pending_resize is None or now < self.resize_at:
            return
        width, height = self.pending_resize
        self.pending_resize = None
        rows, cols = self.config.grid_shape(width, height)
        logger.info(f"Viewport {width}x{height} -> grid {rows}x{cols}")
        self.orchestrator.rebuild(rows, cols)
        pygame.display.set_caption(f"Maze Loop - {self.grid.rows}x{self.grid.cols}")
        self.orchestrator.start_cycle()
        self.resume_at = now

    def pump(self, now: float):
        """Advance the orchestrator until it asks for a pause longer than this frame."""
        if self.pending_resize is not None or now < self.resume_at:
            return
        waited = 0.0
        for _ in range(self.max_ticks_per_frame):
            tick = self.orchestrator.step()
            if tick is None:
                return
            waited += tick.delay
            if waited * 1000.0 >= 1000.0 / 60:
                self.resume_at = now + waited
                return

    # ----- drawing -----

    def draw_grid(self):
        self.surface.fill(self.COLOR_BG)
        grid = self.grid
        size = self.cell_size

        # 1. Decorations (Pass 1 - Backgrounds)
        for (row, col), tags in self.decorations.items():
            if not grid.is_valid_cell(row, col):
                continue
            color = None
            for tag, tag_color in self.TAG_COLORS:
                if tag in tags:
                    color = tag_color
            if color:
                px = col * size + self.offset_x
                py = row * size + self.offset_y
                pygame.draw.rect(self.surface, color, (px, py, size, size))

        # 2. Draw Walls (Pass 2 - Foreground)
        wall_color = self.COLOR_WALL
        for row in range(grid.rows):
            for col in range(grid.cols):
                cell = grid.cells[row * grid.cols + col]
                px = col * size + self.offset_x
                py = row * size + self.offset_y

                if cell & Grid.BOTTOM:
                    pygame.draw.line(self.surface, wall_color, (px, py + size), (px + size, py + size), 1)
                if cell & Grid.RIGHT:
                    pygame.draw.line(self.surface, wall_color, (px + size, py), (px + size, py + size), 1)
                if row == 0 and (cell & Grid.TOP):
                    pygame.draw.line(self.surface, wall_color, (px, py), (px + size, py), 1)
                if col == 0 and (cell & Grid.LEFT):
                    pygame.draw.line(self.surface, wall_color, (px, py), (px, py + size), 1)

    def draw_hud(self):
        fps = int(self.clock.get_fps())
        rec_status = "REC" if self.recorder.active else ""
        info = [
            f"FPS: {fps}",
            f"Size: {self.grid.rows}x{self.grid.cols}",
            f"Phase: {self.orchestrator.phase.value}",
            f"Cycles: {self.orchestrator.cycles_completed}",
            rec_status
        ]

        for i, text in enumerate(info):
            lbl = self.font.render(text, True, (255, 255, 255))
            self.surface.blit(lbl, (10, 10 + i * 20))

    def run_loop(self):
        self.orchestrator.start_cycle()

        while self.running:
            self.handle_input()
            now = time.monotonic()
            self.apply_pending_resize(now)
            self.pump(now)

            self.draw_grid()
            self.draw_hud()
            pygame.display.flip()

            if self.recorder.active:
                self.recorder.capture_frame(self.surface)

            self.clock.tick(60)

        self.orchestrator.teardown()
        self.recorder.stop()
        pygame.quit()
