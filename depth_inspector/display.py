"""
Display Module
==============

Capability interface for windows, image display, pointer events and key
polling, with an OpenCV HighGUI implementation and a headless one that
records output and replays scripted input.

Author: Sumesh Thakur (sumeshthkr@gmail.com)

References:
- OpenCV HighGUI: https://docs.opencv.org/4.x/d7/dfc/group__highgui.html
"""

import logging
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import cv2
import numpy as np

logger = logging.getLogger(__name__)

# (event_code, x, y, flags) with OpenCV event codes
PointerHandler = Callable[[int, int, int, int], None]

WIN_FLAGS = cv2.WINDOW_AUTOSIZE | cv2.WINDOW_KEEPRATIO | cv2.WINDOW_GUI_NORMAL


class Display(ABC):
    """Windowing and input substrate used by the inspection session."""

    @abstractmethod
    def create_window(self, name: str) -> None:
        """Create a named window."""

    @abstractmethod
    def show(self, name: str, image: np.ndarray) -> None:
        """Display an image in a window."""

    @abstractmethod
    def poll_key(self) -> Optional[str]:
        """Non-blocking key poll, None if no key was pressed."""

    @abstractmethod
    def on_pointer_event(self, name: str, handler: PointerHandler) -> None:
        """Subscribe a handler to pointer events of a window."""

    @abstractmethod
    def close(self) -> None:
        """Destroy all windows."""


class OpenCVDisplay(Display):
    """Display backed by cv2.namedWindow / cv2.imshow / cv2.waitKey."""

    def __init__(self, key_delay_ms: int = 1):
        """
        Args:
            key_delay_ms: Delay passed to cv2.waitKey on each poll
        """
        self.key_delay_ms = key_delay_ms
        self.windows: List[str] = []

    def create_window(self, name: str) -> None:
        cv2.namedWindow(name, WIN_FLAGS)
        self.windows.append(name)

    def show(self, name: str, image: np.ndarray) -> None:
        cv2.imshow(name, image)

    def poll_key(self) -> Optional[str]:
        key = cv2.waitKey(self.key_delay_ms)
        if key < 0:
            return None
        return chr(key & 0xFF)

    def on_pointer_event(self, name: str, handler: PointerHandler) -> None:
        def callback(event, x, y, flags, param):
            handler(event, x, y, flags)
        cv2.setMouseCallback(name, callback)

    def close(self) -> None:
        cv2.destroyAllWindows()
        self.windows = []


@dataclass
class ScriptedInput:
    """
    One poll worth of scripted input.

    Attributes:
        events: (window, event_code, x, y, flags) tuples dispatched before the key
        key: Key returned by the poll, None for no key
    """
    events: List[Tuple[str, int, int, int, int]] = field(default_factory=list)
    key: Optional[str] = None


class HeadlessDisplay(Display):
    """
    Display without a GUI.

    Shown images are kept per window. Each poll consumes one ScriptedInput:
    its pointer events reach the subscribed handlers first (HighGUI also
    dispatches mouse callbacks inside waitKey), then its key is returned.
    """

    def __init__(self, script: Optional[Iterable[ScriptedInput]] = None):
        self.windows: List[str] = []
        self.images: Dict[str, np.ndarray] = {}
        self.show_counts: Dict[str, int] = {}
        self.handlers: Dict[str, PointerHandler] = {}
        self.script = deque(script or [])
        self.closed = False

    def create_window(self, name: str) -> None:
        self.windows.append(name)

    def show(self, name: str, image: np.ndarray) -> None:
        self.images[name] = image.copy()
        self.show_counts[name] = self.show_counts.get(name, 0) + 1

    def last_image(self, name: str) -> Optional[np.ndarray]:
        return self.images.get(name)

    def show_count(self, name: str) -> int:
        return self.show_counts.get(name, 0)

    def inject_pointer(self, name: str, event: int, x: int, y: int, flags: int = 0) -> bool:
        """
        Dispatch a pointer event right away.

        Returns:
            False if no handler is subscribed to the window
        """
        handler = self.handlers.get(name)
        if handler is None:
            logger.debug("Dropped pointer event for window without handler: %s", name)
            return False
        handler(event, x, y, flags)
        return True

    def poll_key(self) -> Optional[str]:
        if not self.script:
            return None
        step = self.script.popleft()
        for name, event, x, y, flags in step.events:
            self.inject_pointer(name, event, x, y, flags)
        return step.key

    def on_pointer_event(self, name: str, handler: PointerHandler) -> None:
        self.handlers[name] = handler

    def close(self) -> None:
        self.closed = True
