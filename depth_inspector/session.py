"""
Inspection Session Module
=========================

Per-frame driver tying a frame source, a display and a region inspector
together: the stereo pair goes to the frame window, the colorized depth map
with the region outline to the depth window and the magnified region panel
to the region window. Pointer events on the depth window drive the
inspector.

Author: Sumesh Thakur (sumeshthkr@gmail.com)
"""

import logging
from pathlib import Path
from typing import Optional

import cv2
import numpy as np

from .config import InspectorConfig, create_default_config
from .display import Display
from .frame_source import FrameSource, StreamKind
from .labels import make_depth_info, make_depth_labeler
from .region import InfoFn, LabelFn, RegionInspector
from .visualization import colorize_depth, stack_stereo

logger = logging.getLogger(__name__)

QUIT_KEYS = ("\x1b", "q", "Q")  # ESC/Q
SAVE_KEY = "s"


class InspectionSession:
    """
    Frame loop for interactive depth inspection.

    The raw depth frame is only sampled; the outline is drawn on the
    colorized display copy.
    """

    def __init__(
        self,
        source: FrameSource,
        display: Display,
        config: Optional[InspectorConfig] = None,
        inspector: Optional[RegionInspector] = None,
        value_to_label: Optional[LabelFn] = None,
        info_formatter: Optional[InfoFn] = None,
        stereo_only: bool = False,
        output_dir: Optional[str] = None,
        max_frames: Optional[int] = None
    ):
        """
        Initialize the session.

        Args:
            source: Frame source to pull stereo and depth frames from
            display: Display to show windows on and poll input from
            config: Session settings (defaults if None)
            inspector: Region inspector (built from config.radius if None)
            value_to_label: Cell labeler (depth labeler with the config threshold if None)
            info_formatter: Panel info line (depth position line if None and enabled)
            stereo_only: Show only the stereo pair, no depth or region windows
            output_dir: Directory for frames saved with the 's' key
            max_frames: Stop after this many frames (None = until quit or exhausted)
        """
        self.source = source
        self.display = display
        self.config = config or create_default_config()
        self.inspector = inspector or RegionInspector(self.config.radius)
        self.value_to_label = value_to_label or make_depth_labeler(self.config.invalid_threshold)
        if info_formatter is None and self.config.show_info:
            info_formatter = make_depth_info(self.config.depth_unit)
        self.info_formatter = info_formatter
        self.stereo_only = stereo_only
        self.output_dir = Path(output_dir) if output_dir else None
        self.max_frames = max_frames

        self.frame_idx = 0
        self._last_stereo: Optional[np.ndarray] = None
        self._last_depth: Optional[np.ndarray] = None
        self._last_panel: Optional[np.ndarray] = None

    def setup(self) -> None:
        """Enable streams, create windows and subscribe to pointer events."""
        cfg = self.config
        if self.output_dir is not None:
            self.output_dir.mkdir(parents=True, exist_ok=True)

        self.display.create_window(cfg.frame_window)
        if self.stereo_only:
            return

        self.source.enable_stream(StreamKind.DEPTH)
        self.display.create_window(cfg.depth_window)
        self.display.create_window(cfg.region_window)
        self.display.on_pointer_event(cfg.depth_window, self.inspector.on_mouse)

    def step(self) -> bool:
        """
        Process one set of frames and poll input.

        Returns:
            False when the session should end
        """
        if not self.source.wait_for_frames():
            logger.info("Frame source exhausted")
            return False

        cfg = self.config
        left = self.source.get_frame(StreamKind.LEFT)
        right = self.source.get_frame(StreamKind.RIGHT)
        if left is not None and right is not None:
            self._last_stereo = stack_stereo(left, right)
            self.display.show(cfg.frame_window, self._last_stereo)

        if not self.stereo_only:
            depth = self.source.get_frame(StreamKind.DEPTH)
            if depth is not None:
                self._show_depth(depth)

        self.frame_idx += 1

        key = self.display.poll_key()
        if key in QUIT_KEYS:
            logger.info("Quit requested")
            return False
        if key == SAVE_KEY:
            self.save_current()
        return True

    def _show_depth(self, depth: np.ndarray) -> None:
        cfg = self.config
        colorized = colorize_depth(
            depth,
            max_depth=cfg.max_display_depth,
            invalid_threshold=cfg.invalid_threshold,
        )
        self._last_depth = self.inspector.draw_overlay(colorized)
        self.display.show(cfg.depth_window, self._last_depth)

        panel = self.inspector.render_panel(
            depth, self.value_to_label, cfg.cell_size, self.info_formatter
        )
        if panel is not None:
            self._last_panel = panel
            self.display.show(cfg.region_window, panel)

    def save_current(self) -> int:
        """
        Write the latest displayed images as PNG files.

        Returns:
            Number of files written
        """
        if self.output_dir is None:
            logger.warning("No output directory configured, nothing saved")
            return 0

        written = 0
        images = (
            ("stereo", self._last_stereo),
            ("depth", self._last_depth),
            ("region", self._last_panel),
        )
        for name, image in images:
            if image is None:
                continue
            path = self.output_dir / f"frame_{self.frame_idx:04d}_{name}.png"
            cv2.imwrite(str(path), image)
            written += 1
        logger.info("Saved %d images for frame %d", written, self.frame_idx)
        return written

    def run(self) -> int:
        """
        Run until quit, exhaustion or max_frames.

        Returns:
            Number of processed frames
        """
        if not self.source.start():
            raise RuntimeError("Could not start frame source")

        try:
            self.setup()
            while self.max_frames is None or self.frame_idx < self.max_frames:
                if not self.step():
                    break
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
        finally:
            self.source.stop()
            self.display.close()

        return self.frame_idx
