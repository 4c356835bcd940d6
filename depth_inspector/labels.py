"""
Label Formatting Module
=======================

Value-to-label and info-line helpers used by the region inspector for depth
maps. Depth sources mark missing measurements with a sentinel value
(10000 mm, as produced by cv2.reprojectImageTo3D for missing disparities),
which is shown as "invalid" instead of a number.

Author: Sumesh Thakur (sumeshthkr@gmail.com)

References:
- reprojectImageTo3D: https://docs.opencv.org/4.x/d9/d0c/group__calib3d.html#ga1bc1152bd57d63bc524204f21fde6e02
"""

from typing import Callable, Tuple

import numpy as np

INVALID_DEPTH = 10000
INVALID_LABEL = "invalid"


def depth_to_label(value, invalid_threshold: float = INVALID_DEPTH) -> str:
    """
    Convert one depth value to a display label.

    Args:
        value: Depth value (any numeric scalar)
        invalid_threshold: Values at or above this are reported as invalid

    Returns:
        "invalid" or the value as text (integers without a decimal point)
    """
    if value >= invalid_threshold:
        return INVALID_LABEL
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def make_depth_labeler(invalid_threshold: float = INVALID_DEPTH) -> Callable[[object], str]:
    """Build a one-argument labeler bound to the given invalid threshold."""
    def labeler(value) -> str:
        return depth_to_label(value, invalid_threshold)
    return labeler


def make_depth_info(unit: str = "mm") -> Callable[[np.ndarray, Tuple[int, int], int], str]:
    """
    Build the info-line formatter shown at the top of the panel.

    The position is printed row first, e.g. "depth pos: [120, 64]+/-3, unit: mm".
    """
    def depth_info(depth: np.ndarray, point: Tuple[int, int], radius: int) -> str:
        x, y = point
        return f"depth pos: [{y}, {x}]+/-{radius}, unit: {unit}"
    return depth_info
