"""
Visualization Module
====================

Display helpers for the inspection session:
- Colorized depth maps with invalid measurements masked
- Side-by-side stereo composition

Author: Sumesh Thakur (sumeshthkr@gmail.com)

References:
- OpenCV Colormaps: https://docs.opencv.org/4.x/d3/d50/group__imgproc__colormap.html
"""

import cv2
import numpy as np
from typing import Tuple

from .labels import INVALID_DEPTH


def colorize_depth(
    depth: np.ndarray,
    max_depth: float = 5000.0,
    invalid_threshold: float = INVALID_DEPTH,
    min_depth: float = 0.0,
    invalid_color: Tuple[int, int, int] = (0, 0, 0)
) -> np.ndarray:
    """
    Apply colormap to depth map for visualization.

    Uses inverse normalization so closer objects appear warmer
    and distant objects appear cooler. The input is not modified.

    Args:
        depth: Depth map (e.g. uint16 millimetres)
        max_depth: Depth mapped to the far end of the colormap
        invalid_threshold: Values at or above this are invalid
        min_depth: Depth mapped to the near end of the colormap
        invalid_color: Color for invalid depth values (BGR)

    Returns:
        Colorized depth map (BGR format)
    """
    depth_f = depth.astype(np.float32)

    # Clip and normalize (inverse so closer = brighter)
    clipped = np.clip(depth_f, min_depth, max_depth)
    normalized = 1.0 - (clipped - min_depth) / (max_depth - min_depth)
    normalized = (normalized * 255).astype(np.uint8)

    colorized = cv2.applyColorMap(normalized, cv2.COLORMAP_MAGMA)

    # Mask invalid regions
    invalid_mask = (depth_f <= 0) | (depth_f >= invalid_threshold)
    colorized[invalid_mask] = invalid_color

    return colorized


def _to_bgr(image: np.ndarray) -> np.ndarray:
    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    return image


def stack_stereo(left: np.ndarray, right: np.ndarray) -> np.ndarray:
    """
    Place the left and right frames side by side.

    Grayscale frames are promoted to BGR when the channel counts differ,
    and the right frame is resized to the left height when they differ.

    Args:
        left: Left camera frame
        right: Right camera frame

    Returns:
        Combined image of width left_w + right_w
    """
    if left.ndim != right.ndim:
        left, right = _to_bgr(left), _to_bgr(right)

    if right.shape[0] != left.shape[0]:
        scale = left.shape[0] / right.shape[0]
        right = cv2.resize(right, (int(round(right.shape[1] * scale)), left.shape[0]))

    if right.dtype != left.dtype:
        right = right.astype(left.dtype)

    return cv2.hconcat([left, right])
