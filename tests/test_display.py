"""
Unit tests for display module.
Author: Sumesh Thakur (sumeshthkr@gmail.com)
"""

import numpy as np
import cv2
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from depth_inspector.display import HeadlessDisplay, OpenCVDisplay, ScriptedInput, WIN_FLAGS
from depth_inspector.region import RegionInspector


class TestHeadlessDisplay:
    """Tests for the headless display."""

    def test_records_shown_images(self):
        """Test shown images are kept per window."""
        display = HeadlessDisplay()
        display.create_window("frame")
        image = np.zeros((10, 10, 3), dtype=np.uint8)

        display.show("frame", image)
        display.show("frame", image)
        image[:] = 255

        assert display.show_count("frame") == 2
        assert display.show_count("depth") == 0
        assert np.all(display.last_image("frame") == 0)
        assert display.last_image("depth") is None

    def test_no_script_returns_no_key(self):
        """Test polling without a script returns None."""
        assert HeadlessDisplay().poll_key() is None

    def test_script_keys(self):
        """Test scripted keys are returned one per poll."""
        display = HeadlessDisplay([ScriptedInput(key="a"), ScriptedInput(), ScriptedInput(key="q")])

        assert [display.poll_key() for _ in range(4)] == ["a", None, "q", None]

    def test_events_dispatched_before_key(self):
        """Test scripted pointer events reach the handler during the poll."""
        received = []
        display = HeadlessDisplay([
            ScriptedInput(events=[("depth", cv2.EVENT_MOUSEMOVE, 3, 4, 0)], key="x"),
        ])
        display.on_pointer_event("depth", lambda e, x, y, f: received.append((e, x, y, f)))

        assert received == []
        assert display.poll_key() == "x"
        assert received == [(cv2.EVENT_MOUSEMOVE, 3, 4, 0)]

    def test_events_for_other_windows_dropped(self):
        """Test events for unsubscribed windows are dropped."""
        display = HeadlessDisplay()

        assert not display.inject_pointer("frame", cv2.EVENT_LBUTTONDOWN, 1, 1)

    def test_drives_inspector(self):
        """Test an inspector subscribed through the display."""
        inspector = RegionInspector(1)
        display = HeadlessDisplay()
        display.on_pointer_event("depth", inspector.on_mouse)

        display.inject_pointer("depth", cv2.EVENT_MOUSEMOVE, 10, 12)
        display.inject_pointer("depth", cv2.EVENT_LBUTTONDOWN, 20, 22)

        assert inspector.visible
        assert inspector.pinned
        assert inspector.anchor == (20, 22)

    def test_close(self):
        """Test close is recorded."""
        display = HeadlessDisplay()
        display.close()
        assert display.closed


class TestOpenCVDisplay:
    """Tests for the OpenCV display that need no window."""

    def test_window_flags(self):
        """Test windows autosize and hide the toolbar."""
        assert WIN_FLAGS & cv2.WINDOW_AUTOSIZE == cv2.WINDOW_AUTOSIZE
        assert WIN_FLAGS & cv2.WINDOW_GUI_NORMAL == cv2.WINDOW_GUI_NORMAL

    def test_initialization(self):
        """Test key delay setting."""
        display = OpenCVDisplay(key_delay_ms=5)
        assert display.key_delay_ms == 5
        assert display.windows == []
