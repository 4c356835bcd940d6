#!/usr/bin/env python3
"""
Stereo Depth Region Inspector - Main Entry Point
================================================

Shows the stereo pair and the depth map of a stereo source, and a magnified
panel of the depth values around the pointer.

Author: Sumesh Thakur (sumeshthkr@gmail.com)

Usage:
    python main.py --synthetic
    python main.py --images recordings/ --config inspector.json
    python main.py --webcam 0 1 --stereo-only
"""

import argparse
import logging
import sys
from dataclasses import asdict

from depth_inspector.config import (
    InspectorConfig,
    create_default_config,
    load_config_from_json,
)
from depth_inspector.display import OpenCVDisplay
from depth_inspector.frame_source import (
    FrameSource,
    CaptureFrameSource,
    ImageSequenceSource,
    SyntheticFrameSource,
)
from depth_inspector.region import RegionInspector
from depth_inspector.session import InspectionSession

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Interactive depth region inspector for stereo cameras",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Generated scene, no camera needed
    python main.py --synthetic

    # Recorded left_*.png / right_*.png / depth_*.png frames
    python main.py --images recordings/ --loop

    # Stereo pair only from two webcams
    python main.py --webcam 0 1 --stereo-only

Author: Sumesh Thakur (sumeshthkr@gmail.com)
        """,
    )

    # Input sources
    input_group = parser.add_mutually_exclusive_group(required=True)
    input_group.add_argument(
        "--webcam",
        nargs=2,
        type=int,
        metavar=("LEFT", "RIGHT"),
        help="Webcam indices for left and right cameras",
    )
    input_group.add_argument("--left", type=str, help="Path to left (or side-by-side) video file")
    input_group.add_argument(
        "--images", type=str, help="Directory with left_*, right_* and depth_* images"
    )
    input_group.add_argument(
        "--synthetic", action="store_true", help="Use a generated scene"
    )

    parser.add_argument(
        "--right",
        type=str,
        help="Path to right video file (omit for side-by-side video)",
    )
    parser.add_argument(
        "--loop", action="store_true", help="Loop image sequences"
    )
    parser.add_argument(
        "--downsample",
        type=float,
        default=1.0,
        help="Downsample factor for captures (default: 1.0 = no downsampling)",
    )

    # Configuration
    parser.add_argument(
        "--config", type=str, help="Path to inspector configuration JSON file"
    )
    parser.add_argument(
        "--radius", type=int, help="Half-width of the inspected region (default: 3)"
    )
    parser.add_argument(
        "--cell-size", type=int, help="Pixel size of one panel cell (default: 80)"
    )
    parser.add_argument(
        "--invalid-threshold",
        type=int,
        help="Depth at or above this is shown as invalid (default: 10000)",
    )

    # Session
    parser.add_argument(
        "--stereo-only",
        action="store_true",
        help="Only show the stereo pair",
    )
    parser.add_argument(
        "--max-frames", type=int, help="Stop after this many frames"
    )
    parser.add_argument(
        "--output", type=str, help="Output directory for frames saved with 's'"
    )
    parser.add_argument(
        "--verbose", "-V", action="store_true", help="Enable debug logging"
    )

    args = parser.parse_args(argv)
    if args.right and not args.left:
        parser.error("--right requires --left")
    return args


def setup_config(args) -> InspectorConfig:
    """Load or create the inspector configuration, applying CLI overrides."""
    if args.config:
        print(f"Loading configuration from: {args.config}")
        config = load_config_from_json(args.config)
    else:
        config = create_default_config()

    overrides = {
        "radius": args.radius,
        "cell_size": args.cell_size,
        "invalid_threshold": args.invalid_threshold,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        config = create_default_config(**{**asdict(config), **overrides})
    return config


def setup_frame_source(args) -> FrameSource:
    """Set up frame source based on arguments."""
    if args.synthetic:
        print("Using synthetic scene")
        return SyntheticFrameSource()
    if args.images:
        print(f"Opening image sequence: {args.images}")
        return ImageSequenceSource(args.images, loop=args.loop)
    if args.webcam:
        left_idx, right_idx = args.webcam
        print(f"Opening webcams: left={left_idx}, right={right_idx}")
        return CaptureFrameSource(left_idx, right_idx, downsample_factor=args.downsample)

    if args.right:
        print(f"Opening video files: left={args.left}, right={args.right}")
    else:
        print(f"Opening side-by-side video: {args.left}")
    return CaptureFrameSource(args.left, args.right, downsample_factor=args.downsample)


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    print("=" * 60)
    print("  Stereo Depth Region Inspector")
    print("=" * 60)
    print()

    try:
        config = setup_config(args)
        source = setup_frame_source(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    logger.debug("Configuration: %s", config)
    print(f"Region radius: {config.radius}")
    print(f"Cell size: {config.cell_size} px")
    print()
    print("Controls:")
    print("  Move over 'depth' - Inspect region")
    print("  Click             - Pin region (click inside to release)")
    print("  's'               - Save frame")
    print("  'q' / ESC         - Quit")
    print()

    session = InspectionSession(
        source,
        OpenCVDisplay(key_delay_ms=config.key_delay_ms),
        config=config,
        inspector=RegionInspector(config.radius),
        stereo_only=args.stereo_only,
        output_dir=args.output,
        max_frames=args.max_frames,
    )

    try:
        frames = session.run()
    except (RuntimeError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"\nProcessed {frames} frames")
    print("Done!")


if __name__ == "__main__":
    main()
