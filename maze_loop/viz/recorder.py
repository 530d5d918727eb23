import os
import logging
import pygame
import cv2
import numpy as np
from datetime import datetime

logger = logging.getLogger(__name__)

class VideoRecorder:
    def __init__(self, active=False, output_file=None, fps=30):
        self.active = active
        self.output_file = output_file
        self.fps = fps
        self.writer = None
        self.frame_size = None
        self.frame_count = 0

        if self.active and not self.output_file:
            self.output_file = self.default_filename()

    @staticmethod
    def default_filename(directory="recordings"):
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        fname = f"maze_loop_{ts}.mp4"
        if os.path.isdir(directory):
            return os.path.join(directory, fname)
        return fname

    def capture_frame(self, surface: pygame.Surface):
        if not self.active:
            return

        width, height = surface.get_size()

        # A resized window changes the frame size; start a new segment
        if self.writer is not None and (width, height) != self.frame_size:
            self.stop()
            root, ext = os.path.splitext(self.output_file)
            self.output_file = f"{root}_{width}x{height}{ext}"

        if self.writer is None:
            self.frame_size = (width, height)
            fourcc = cv2.VideoWriter_fourcc(*'mp4v')
            self.writer = cv2.VideoWriter(self.output_file, fourcc, self.fps, self.frame_size)
            self.frame_count = 0
            logger.info(f"Recording started: {self.output_file}")

        view = pygame.surfarray.array3d(surface)
        # view is (width, height, 3) RGB, VideoWriter wants (height, width, 3) BGR
        frame = np.transpose(view, (1, 0, 2))
        frame = cv2.cvtColor(frame, cv2.COLOR_RGB2BGR)

        self.writer.write(frame)
        self.frame_count += 1

    def stop(self):
        if self.writer:
            self.writer.release()
            logger.info(f"Video saved: {self.output_file} ({self.frame_count} frames)")
            self.writer = None
