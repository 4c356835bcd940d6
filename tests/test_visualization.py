"""
Unit tests for visualization module.
Author: Sumesh Thakur (sumeshthkr@gmail.com)
"""

import pytest
import numpy as np
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from depth_inspector.visualization import colorize_depth, stack_stereo


class TestColorizeDepth:
    """Tests for depth colorization."""

    def test_colorize_depth(self):
        """Test depth map colorization."""
        depth = np.random.randint(500, 4000, (100, 200)).astype(np.uint16)

        colored = colorize_depth(depth, max_depth=5000.0)

        assert colored.shape == (100, 200, 3)
        assert colored.dtype == np.uint8

    def test_invalid_regions(self):
        """Test zero and sentinel depths use the invalid color."""
        depth = np.full((10, 10), 2000, dtype=np.uint16)
        depth[:5, :] = 0
        depth[5:, :5] = 10000

        colored = colorize_depth(depth, invalid_color=(128, 128, 128))

        assert np.all(colored[:5, :] == 128)
        assert np.all(colored[5:, :5] == 128)
        assert not np.all(colored[5:, 5:] == 128)

    def test_closer_is_brighter(self):
        """Test inverse normalization."""
        depth = np.array([[500, 4500]], dtype=np.uint16)

        colored = colorize_depth(depth, max_depth=5000.0).astype(int)

        assert colored[0, 0].sum() > colored[0, 1].sum()

    def test_input_not_modified(self):
        """Test the depth map is left untouched."""
        depth = np.full((10, 10), 10000, dtype=np.uint16)
        before = depth.copy()

        colorize_depth(depth)

        assert np.array_equal(depth, before)


class TestStackStereo:
    """Tests for side-by-side stereo composition."""

    def test_same_size(self):
        """Test equal frames are concatenated horizontally."""
        left = np.zeros((40, 60, 3), dtype=np.uint8)
        right = np.full((40, 60, 3), 255, dtype=np.uint8)

        stacked = stack_stereo(left, right)

        assert stacked.shape == (40, 120, 3)
        assert np.all(stacked[:, :60] == 0)
        assert np.all(stacked[:, 60:] == 255)

    def test_grayscale_pair(self):
        """Test two grayscale frames stay grayscale."""
        left = np.zeros((40, 60), dtype=np.uint8)

        assert stack_stereo(left, left).shape == (40, 120)

    def test_mixed_channels(self):
        """Test grayscale is promoted when mixed with color."""
        left = np.zeros((40, 60), dtype=np.uint8)
        right = np.zeros((40, 60, 3), dtype=np.uint8)

        assert stack_stereo(left, right).shape == (40, 120, 3)

    def test_height_mismatch(self):
        """Test the right frame is resized to the left height."""
        left = np.zeros((40, 60, 3), dtype=np.uint8)
        right = np.zeros((20, 30, 3), dtype=np.uint8)

        assert stack_stereo(left, right).shape == (40, 120, 3)
