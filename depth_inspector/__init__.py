"""
Stereo Depth Region Inspector
=============================

Interactive inspection of stereo camera depth maps: hover over the depth
window to see a magnified, labeled neighborhood of the pointer, click to
pin it in place.

Author: Sumesh Thakur (sumeshthkr@gmail.com)

Why did the depth map refuse to answer?
Because every value it knew was invalid! 🎭📸

References:
- OpenCV HighGUI: https://docs.opencv.org/4.x/d7/dfc/group__highgui.html
- OpenCV Stereo Vision: https://docs.opencv.org/4.x/dd/d53/tutorial_py_depthmap.html
"""

from .region import RegionInspector, PointerEvent, PanelCell
from .labels import depth_to_label, make_depth_labeler, make_depth_info
from .config import InspectorConfig, create_default_config, load_config_from_json
from .frame_source import (
    FrameSource,
    StreamKind,
    StreamData,
    CaptureFrameSource,
    ImageSequenceSource,
    SyntheticFrameSource,
)
from .display import Display, OpenCVDisplay, HeadlessDisplay, ScriptedInput
from .session import InspectionSession

__version__ = "1.0.0"
__author__ = "Sumesh Thakur"
__email__ = "sumeshthkr@gmail.com"
