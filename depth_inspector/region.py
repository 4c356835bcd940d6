"""
Depth Region Inspector Module
=============================

Interactive inspection of a small neighborhood of a depth (or any numeric)
buffer. The inspector follows the pointer until a click pins it in place,
renders a magnified panel with one label per cell and marks the inspected
region on the displayed image.

Controls:
- Move the pointer: the region follows it while not pinned
- Click: pin the region at the click position
- Click inside the pinned region: release it

Author: Sumesh Thakur (sumeshthkr@gmail.com)

References:
- OpenCV Mouse Events: https://docs.opencv.org/4.x/db/d5b/tutorial_py_mouse_handling.html
- OpenCV Drawing Functions: https://docs.opencv.org/4.x/dc/da5/tutorial_py_drawing_functions.html
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

import cv2
import numpy as np

logger = logging.getLogger(__name__)

LabelFn = Callable[[Any], str]
InfoFn = Callable[[np.ndarray, Tuple[int, int], int], str]

PANEL_BACKGROUND = (255, 255, 255)
CELL_COLOR = (0, 0, 0)
CENTER_COLOR = (0, 0, 255)
INFO_COLOR = (255, 0, 255)
PINNED_COLOR = (0, 255, 0)
FLOATING_COLOR = (0, 0, 255)

FONT = cv2.FONT_HERSHEY_PLAIN


class PointerEvent(Enum):
    """
    Pointer events understood by the inspector.

    MOVE: Pointer moved over the image
    CLICK: Left button pressed
    """
    MOVE = "move"
    CLICK = "click"

    @classmethod
    def from_cv2(cls, code: int) -> Optional["PointerEvent"]:
        """Map an OpenCV mouse event code, None for anything else."""
        if code == cv2.EVENT_MOUSEMOVE:
            return cls.MOVE
        if code == cv2.EVENT_LBUTTONDOWN:
            return cls.CLICK
        return None


@dataclass
class PanelCell:
    """
    One sampled cell of the inspection panel.

    Attributes:
        offset: (i, j) offset from the anchor along x and y
        position: (x, y) coordinate in the source buffer
        value: Buffer value at that coordinate
    """
    offset: Tuple[int, int]
    position: Tuple[int, int]
    value: Any


class RegionInspector:
    """
    Stateful pointer-driven inspector for a square neighborhood of a 2D buffer.

    States are {floating, pinned} x {hidden, visible}. The inspector starts
    floating and hidden, becomes visible on the first recognized pointer
    event and stays visible for the rest of its life.
    """

    def __init__(self, radius: int = 3):
        """
        Initialize the inspector.

        Args:
            radius: Half-width of the inspected square (non-negative)
        """
        if isinstance(radius, bool) or not isinstance(radius, (int, np.integer)):
            raise ValueError(f"radius must be an integer, got {radius!r}")
        if radius < 0:
            raise ValueError(f"radius must be non-negative, got {radius}")

        self._radius = int(radius)
        self.visible = False
        self.pinned = False
        self.anchor: Tuple[int, int] = (0, 0)

    @property
    def radius(self) -> int:
        return self._radius

    @property
    def size(self) -> int:
        """Side length of the inspected square in cells."""
        return 2 * self._radius + 1

    def contains(self, x: int, y: int) -> bool:
        """Whether (x, y) lies inside the inclusive square around the anchor."""
        ax, ay = self.anchor
        r = self._radius
        return ax - r <= x <= ax + r and ay - r <= y <= ay + r

    def handle_pointer_event(self, kind, x: int, y: int, flags: int = 0) -> bool:
        """
        Update the selection state from one pointer event.

        Clicking while pinned releases the region only when the click lands
        inside it; a click anywhere else pins the region again at the new
        position. Every click moves the anchor to the click position.

        Args:
            kind: PointerEvent member; anything else is ignored
            x: Pointer x coordinate in image pixels
            y: Pointer y coordinate in image pixels
            flags: Modifier flags (unused)

        Returns:
            True if the event was recognized
        """
        if kind is not PointerEvent.MOVE and kind is not PointerEvent.CLICK:
            return False

        self.visible = True
        x, y = int(x), int(y)

        if kind is PointerEvent.MOVE:
            if not self.pinned:
                self.anchor = (x, y)
            return True

        if self.pinned and self.contains(x, y):
            self.pinned = False
        else:
            self.pinned = True
        self.anchor = (x, y)
        logger.debug("Region %s at %s", "pinned" if self.pinned else "released", self.anchor)
        return True

    def on_mouse(self, event: int, x: int, y: int, flags: int, param=None) -> None:
        """OpenCV mouse callback adapter (see cv2.setMouseCallback)."""
        self.handle_pointer_event(PointerEvent.from_cv2(event), x, y, flags)

    def sample_cells(self, buffer: np.ndarray) -> List[PanelCell]:
        """
        Collect the cells drawn by the panel.

        Offsets run from -radius to radius + 1 inclusive on both axes, one
        row and column past the symmetric window. Coordinates outside the
        buffer are skipped.

        Args:
            buffer: 2D array indexed as [row, col]

        Returns:
            List of PanelCell in column-major order
        """
        rows, cols = buffer.shape[:2]
        ax, ay = self.anchor
        r = self._radius

        cells = []
        for i in range(-r, r + 2):
            x = ax + i
            if x < 0 or x >= cols:
                continue
            for j in range(-r, r + 2):
                y = ay + j
                if y < 0 or y >= rows:
                    continue
                cells.append(PanelCell(offset=(i, j), position=(x, y), value=buffer[y, x]))
        return cells

    def render_panel(
        self,
        buffer: np.ndarray,
        value_to_label: LabelFn,
        cell_size: int = 40,
        info_formatter: Optional[InfoFn] = None
    ) -> Optional[np.ndarray]:
        """
        Render the magnified, labeled neighborhood of the anchor.

        Args:
            buffer: 2D numeric buffer to sample
            value_to_label: Maps one buffer value to a short display string
            cell_size: Pixel size of each rendered cell
            info_formatter: Optional (buffer, anchor, radius) -> str annotation

        Returns:
            BGR canvas of side (2 * radius + 1) * cell_size, or None while hidden
        """
        if not self.visible:
            return None

        r = self._radius
        side = self.size * cell_size
        panel = np.full((side, side, 3), PANEL_BACKGROUND, dtype=np.uint8)

        for cell in self.sample_cells(buffer):
            i, j = cell.offset
            text = value_to_label(cell.value)
            color = CENTER_COLOR if (i, j) == (0, 0) else CELL_COLOR

            (w, h), _ = cv2.getTextSize(text, FONT, 1, 1)
            org = (
                (i + r) * cell_size + int((cell_size - w) / 2),
                (j + r) * cell_size + int((cell_size + h) / 2),
            )
            cv2.putText(panel, text, org, FONT, 1, color, 1)

        if info_formatter is not None:
            info = info_formatter(buffer, self.anchor, r)
            if info:
                (_, h), _ = cv2.getTextSize(info, FONT, 1, 1)
                cv2.putText(panel, info, (5, 5 + h), FONT, 1, INFO_COLOR, 1)

        return panel

    @property
    def overlay_rect(self) -> Optional[Tuple[Tuple[int, int], Tuple[int, int]]]:
        """Corners of the overlay rectangle, None while hidden."""
        if not self.visible:
            return None
        # one pixel outside the inspected region
        n = max(self._radius, 1) + 1
        ax, ay = self.anchor
        return (ax - n, ay - n), (ax + n, ay + n)

    def draw_overlay(self, image: np.ndarray) -> np.ndarray:
        """
        Draw the region outline on a copy of the image.

        The input is never modified, so the same buffer can still be
        sampled afterwards. Single-channel images are promoted to BGR.

        Args:
            image: Image to annotate

        Returns:
            Annotated copy (green outline when pinned, red when floating)
        """
        rect = self.overlay_rect
        if rect is None:
            return image.copy()

        if image.ndim == 2:
            result = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
        else:
            result = image.copy()

        color = PINNED_COLOR if self.pinned else FLOATING_COLOR
        cv2.rectangle(result, rect[0], rect[1], color, 1)
        return result
