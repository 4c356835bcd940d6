"""
Inspector Configuration Module
==============================

Handles loading and validation of the depth inspector settings.
Supports JSON configuration files or defaults with keyword overrides.

Author: Sumesh Thakur (sumeshthkr@gmail.com)
"""

import json
from dataclasses import dataclass, asdict, fields, replace
from pathlib import Path

from .labels import INVALID_DEPTH


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass
class InspectorConfig:
    """
    Settings for an inspection session.

    Attributes:
        radius: Half-width of the inspected square in pixels
        cell_size: Pixel size of one cell in the region panel
        invalid_threshold: Depth values at or above this are shown as invalid
        depth_unit: Unit printed in the panel info line
        max_display_depth: Far limit for depth colorization (same unit as depth)
        show_info: Draw the info line at the top of the panel
        frame_window: Window name for the stereo pair
        depth_window: Window name for the depth map
        region_window: Window name for the region panel
        key_delay_ms: Delay passed to the key poll each frame
    """
    radius: int = 3
    cell_size: int = 80
    invalid_threshold: int = INVALID_DEPTH
    depth_unit: str = "mm"
    max_display_depth: float = 5000.0
    show_info: bool = True
    frame_window: str = "frame"
    depth_window: str = "depth"
    region_window: str = "region"
    key_delay_ms: int = 1

    def validate(self) -> "InspectorConfig":
        """
        Check value ranges.

        Returns:
            self, for chaining

        Raises:
            ValueError: If any setting is out of range
        """
        if not _is_int(self.radius) or self.radius < 0:
            raise ValueError(f"radius must be a non-negative integer, got {self.radius!r}")
        if not _is_int(self.cell_size) or self.cell_size <= 0:
            raise ValueError(f"cell_size must be a positive integer, got {self.cell_size!r}")
        if not _is_number(self.invalid_threshold) or self.invalid_threshold <= 0:
            raise ValueError(f"invalid_threshold must be a positive number, got {self.invalid_threshold!r}")
        if not _is_number(self.max_display_depth) or self.max_display_depth <= 0:
            raise ValueError(f"max_display_depth must be a positive number, got {self.max_display_depth!r}")
        if not _is_int(self.key_delay_ms) or self.key_delay_ms < 1:
            raise ValueError(f"key_delay_ms must be an integer of at least 1, got {self.key_delay_ms!r}")
        windows = (self.frame_window, self.depth_window, self.region_window)
        if not all(isinstance(name, str) for name in windows):
            raise ValueError("window names must be strings")
        if len(set(windows)) != 3:
            raise ValueError("window names must be distinct")
        return self


def create_default_config(**overrides) -> InspectorConfig:
    """
    Create a configuration with default settings.

    Args:
        **overrides: Field values replacing the defaults

    Returns:
        Validated InspectorConfig

    Raises:
        ValueError: On unknown fields or invalid values
    """
    known = {f.name for f in fields(InspectorConfig)}
    unknown = set(overrides) - known
    if unknown:
        raise ValueError(f"Unknown config fields: {', '.join(sorted(unknown))}")
    return replace(InspectorConfig(), **overrides).validate()


def load_config_from_json(config_path: str) -> InspectorConfig:
    """
    Load inspector configuration from a JSON file.

    Missing fields keep their defaults, e.g. {"radius": 5, "cell_size": 60}.

    Args:
        config_path: Path to the JSON configuration file

    Returns:
        InspectorConfig with loaded settings

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is invalid
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(path, 'r') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError("Configuration must be a JSON object")

    return create_default_config(**data)


def save_config_to_json(config: InspectorConfig, output_path: str) -> None:
    """
    Save inspector configuration to a JSON file.

    Args:
        config: InspectorConfig object to save
        output_path: Path for the output JSON file
    """
    with open(output_path, 'w') as f:
        json.dump(asdict(config), f, indent=4)
