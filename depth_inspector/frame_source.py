"""
Frame Source Module
===================

Capability interface for stereo frame providers plus three implementations:
- CaptureFrameSource: dual webcams, separate video files or side-by-side video
- ImageSequenceSource: recorded left/right/depth images in a directory
- SyntheticFrameSource: generated stereo pair and millimetre depth map

A source delivers frames only; depth is never computed here. Sources
without a depth stream return empty depth data.

Author: Sumesh Thakur (sumeshthkr@gmail.com)

References:
- OpenCV VideoCapture: https://docs.opencv.org/4.x/dd/d43/tutorial_py_video_display.html
- OpenCV imread flags: https://docs.opencv.org/4.x/d8/d6a/group__imgcodecs__flags.html
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple, Union

import cv2
import numpy as np

from .labels import INVALID_DEPTH

logger = logging.getLogger(__name__)


class StreamKind(Enum):
    """Streams a frame source can provide."""
    LEFT = "left"
    RIGHT = "right"
    DEPTH = "depth"


@dataclass
class StreamData:
    """
    One frame of one stream.

    Attributes:
        frame: Image or depth map, None if not available
        frame_id: Sequential frame number (0 before the first frame)
        timestamp: Frame timestamp in milliseconds
    """
    frame: Optional[np.ndarray] = None
    frame_id: int = 0
    timestamp: float = 0.0

    @property
    def empty(self) -> bool:
        return self.frame is None or self.frame.size == 0


class FrameSource(ABC):
    """
    Blocking provider of synchronized stream sets.

    Usage:
        with source:
            while source.wait_for_frames():
                left = source.get_frame(StreamKind.LEFT)
    """

    def __init__(self):
        self._enabled: Set[StreamKind] = {StreamKind.LEFT, StreamKind.RIGHT}
        self._current: Dict[StreamKind, StreamData] = {}
        self.frame_count = 0

    def enable_stream(self, kind: StreamKind) -> None:
        """Enable an optional stream (depth is off by default)."""
        self._enabled.add(kind)

    def is_enabled(self, kind: StreamKind) -> bool:
        return kind in self._enabled

    @abstractmethod
    def start(self) -> bool:
        """
        Open the underlying inputs.

        Returns:
            True if the source is ready
        """

    @abstractmethod
    def stop(self) -> None:
        """Release the underlying inputs."""

    @abstractmethod
    def _read(self) -> Optional[Dict[StreamKind, np.ndarray]]:
        """Read the next set of frames, None when exhausted."""

    def wait_for_frames(self) -> bool:
        """
        Block until the next set of frames is available.

        Returns:
            False when the source is exhausted or failed
        """
        frames = self._read()
        if frames is None:
            return False

        self.frame_count += 1
        timestamp = time.time() * 1000.0
        self._current = {
            kind: StreamData(frame=frame, frame_id=self.frame_count, timestamp=timestamp)
            for kind, frame in frames.items()
            if kind in self._enabled
        }
        return True

    def get_stream_data(self, kind: StreamKind) -> StreamData:
        """Latest data of a stream; empty for disabled or missing streams."""
        return self._current.get(kind, StreamData(frame_id=self.frame_count))

    def get_frame(self, kind: StreamKind) -> Optional[np.ndarray]:
        """Latest frame of a stream, None if empty."""
        data = self.get_stream_data(kind)
        return None if data.empty else data.frame

    def __enter__(self):
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.stop()


def _downsample(frame: np.ndarray, factor: float) -> np.ndarray:
    new_size = (int(frame.shape[1] / factor), int(frame.shape[0] / factor))
    return cv2.resize(frame, new_size, interpolation=cv2.INTER_AREA)


class CaptureFrameSource(FrameSource):
    """
    Stereo input from OpenCV captures.

    Supports:
    - Dual webcam input (live feed)
    - Separate left/right video files
    - Side-by-side stereo video files (right_source=None)

    Reference: OpenCV VideoCapture documentation
    https://docs.opencv.org/4.x/d8/dfe/classcv_1_1VideoCapture.html
    """

    def __init__(
        self,
        left_source: Union[str, int],
        right_source: Optional[Union[str, int]] = None,
        downsample_factor: float = 1.0
    ):
        """
        Initialize capture source.

        Args:
            left_source: Path to left video file or webcam index
            right_source: Path to right video file or webcam index (None for side-by-side video)
            downsample_factor: Factor to downsample frames (1.0 = no downsampling)
        """
        super().__init__()
        self.left_source = left_source
        self.right_source = right_source
        self.downsample_factor = downsample_factor
        self.is_side_by_side = right_source is None

        self.cap_left: Optional[cv2.VideoCapture] = None
        self.cap_right: Optional[cv2.VideoCapture] = None

    def start(self) -> bool:
        self.cap_left = cv2.VideoCapture(self.left_source)
        if not self.cap_left.isOpened():
            logger.error("Could not open left source: %s", self.left_source)
            self.cap_left.release()
            self.cap_left = None
            return False

        if not self.is_side_by_side:
            self.cap_right = cv2.VideoCapture(self.right_source)
            if not self.cap_right.isOpened():
                logger.error("Could not open right source: %s", self.right_source)
                self.cap_left.release()
                self.cap_left = None
                return False

        logger.info("Opened capture source: left=%s right=%s", self.left_source, self.right_source)
        return True

    def _read(self) -> Optional[Dict[StreamKind, np.ndarray]]:
        if self.cap_left is None:
            return None

        ret_left, frame_left = self.cap_left.read()
        if not ret_left:
            return None

        if self.is_side_by_side:
            mid_x = frame_left.shape[1] // 2
            frame_right = frame_left[:, mid_x:]
            frame_left = frame_left[:, :mid_x]
        else:
            ret_right, frame_right = self.cap_right.read()
            if not ret_right:
                return None

        if self.downsample_factor > 1.0:
            frame_left = _downsample(frame_left, self.downsample_factor)
            frame_right = _downsample(frame_right, self.downsample_factor)

        return {StreamKind.LEFT: frame_left, StreamKind.RIGHT: frame_right}

    def stop(self) -> None:
        if self.cap_left is not None:
            self.cap_left.release()
            self.cap_left = None
        if self.cap_right is not None:
            self.cap_right.release()
            self.cap_right = None


class ImageSequenceSource(FrameSource):
    """
    Recorded frames from a directory.

    Files are matched by prefix and sorted by name:
    left_0000.png, right_0000.png, depth_0000.png, ...
    Depth images are read unchanged, so 16-bit PNGs keep their millimetre values.
    """

    def __init__(self, directory: str, extension: str = "png", loop: bool = False):
        """
        Initialize image sequence source.

        Args:
            directory: Directory containing the images
            extension: Image file extension without the dot
            loop: Restart from the first image when the sequence ends

        Raises:
            FileNotFoundError: If the directory doesn't exist
        """
        super().__init__()
        self.directory = Path(directory)
        if not self.directory.is_dir():
            raise FileNotFoundError(f"Image directory not found: {directory}")
        self.extension = extension
        self.loop = loop

        self._files: Dict[StreamKind, List[Path]] = {}
        self._index = 0

    def _glob(self, kind: StreamKind) -> List[Path]:
        return sorted(self.directory.glob(f"{kind.value}_*.{self.extension}"))

    def start(self) -> bool:
        self._files = {kind: self._glob(kind) for kind in StreamKind}
        if not self._files[StreamKind.LEFT]:
            raise ValueError(f"No left images found in {self.directory}")

        counts = {kind.value: len(paths) for kind, paths in self._files.items()}
        logger.info("Image sequence %s: %s", self.directory, counts)
        self._index = 0
        return True

    def __len__(self) -> int:
        return len(self._files.get(StreamKind.LEFT, []))

    def _read(self) -> Optional[Dict[StreamKind, np.ndarray]]:
        if not self._files:
            return None
        if self._index >= len(self):
            if not self.loop:
                return None
            self._index = 0

        frames = {}
        for kind, paths in self._files.items():
            if self._index >= len(paths):
                continue
            flags = cv2.IMREAD_UNCHANGED if kind is StreamKind.DEPTH else cv2.IMREAD_COLOR
            frame = cv2.imread(str(paths[self._index]), flags)
            if frame is None:
                logger.warning("Could not read %s", paths[self._index])
                continue
            if kind is StreamKind.DEPTH and frame.ndim != 2:
                logger.warning("Dropping %s: depth image is not single-channel", paths[self._index])
                continue
            frames[kind] = frame

        self._index += 1
        return frames

    def stop(self) -> None:
        self._files = {}


class SyntheticFrameSource(FrameSource):
    """
    Generated frames for demos and tests.

    The scene is a tilted plane with a spherical bump. The right image is the
    left image shifted by the disparity of the plane, and the depth map is a
    uint16 millimetre map with a rectangular hole set to the invalid value.
    """

    def __init__(
        self,
        image_size: Tuple[int, int] = (640, 480),
        num_frames: Optional[int] = None,
        near_depth: float = 800.0,
        far_depth: float = 3000.0,
        invalid_value: int = INVALID_DEPTH,
        seed: int = 0
    ):
        """
        Initialize synthetic source.

        Args:
            image_size: Frame dimensions (width, height)
            num_frames: Number of frames before exhaustion (None = endless)
            near_depth: Depth at the top of the plane in millimetres
            far_depth: Depth at the bottom of the plane in millimetres
            invalid_value: Sentinel written into the hole
            seed: Random seed for the texture
        """
        super().__init__()
        self.image_size = image_size
        self.num_frames = num_frames
        self.near_depth = near_depth
        self.far_depth = far_depth
        self.invalid_value = invalid_value
        self.seed = seed

        self._texture: Optional[np.ndarray] = None
        self._depth: Optional[np.ndarray] = None
        self._running = False

    def start(self) -> bool:
        w, h = self.image_size
        rng = np.random.default_rng(self.seed)
        noise = rng.integers(0, 256, (h // 8 + 1, w // 8 + 1), dtype=np.uint8)
        texture = cv2.resize(noise, (w, h), interpolation=cv2.INTER_NEAREST)
        self._texture = cv2.cvtColor(texture, cv2.COLOR_GRAY2BGR)
        self._depth = self._make_depth()
        self._running = True
        return True

    def _make_depth(self) -> np.ndarray:
        w, h = self.image_size
        rows = np.linspace(self.near_depth, self.far_depth, h, dtype=np.float64)
        depth = np.repeat(rows[:, None], w, axis=1)

        # bump in the middle, up to 300 mm closer
        yy, xx = np.mgrid[0:h, 0:w]
        cx, cy, radius = w / 2.0, h / 2.0, min(w, h) / 5.0
        dist2 = (xx - cx) ** 2 + (yy - cy) ** 2
        inside = dist2 < radius ** 2
        depth[inside] -= 300.0 * np.sqrt(1.0 - dist2[inside] / radius ** 2)

        depth = np.clip(depth, 0, np.iinfo(np.uint16).max).astype(np.uint16)
        depth[h // 8:h // 4, w // 8:w // 4] = self.invalid_value
        return depth

    def _read(self) -> Optional[Dict[StreamKind, np.ndarray]]:
        if not self._running:
            return None
        if self.num_frames is not None and self.frame_count >= self.num_frames:
            return None

        shift = max(1, self.image_size[0] // 64)
        left = np.roll(self._texture, self.frame_count, axis=1)
        right = np.roll(left, -shift, axis=1)
        return {
            StreamKind.LEFT: left,
            StreamKind.RIGHT: right,
            StreamKind.DEPTH: self._depth.copy(),
        }

    def stop(self) -> None:
        self._running = False
