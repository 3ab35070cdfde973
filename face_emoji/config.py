"""
Configuration management for the face emoji pipeline.

This module provides configuration file loading and saving for
PipelineConfig, supporting YAML and JSON formats.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .pipeline import PipelineConfig

logger = logging.getLogger(__name__)

# Default config file locations
DEFAULT_CONFIG_PATHS = [
    Path("face_emoji.yaml"),
    Path("face_emoji.json"),
    Path.home() / ".config" / "face_emoji" / "config.yaml",
    Path.home() / ".config" / "face_emoji" / "config.json",
]


def load_config(
    config_path: Optional[Union[str, Path]] = None
) -> PipelineConfig:
    """
    Load pipeline configuration from file.

    Supports YAML and JSON formats. If no path is specified, searches
    default locations.

    Args:
        config_path: Path to config file, or None to search defaults

    Returns:
        PipelineConfig instance

    Raises:
        FileNotFoundError: If an explicit config path does not exist
        ValueError: If config file is invalid
    """
    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
    else:
        path = None
        for default_path in DEFAULT_CONFIG_PATHS:
            if default_path.exists():
                path = default_path
                break

        if path is None:
            logger.info("No config file found, using defaults")
            return PipelineConfig()

    logger.info(f"Loading config from {path}")

    with open(path, 'r', encoding='utf-8') as f:
        if path.suffix in ('.yaml', '.yml'):
            import yaml
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Failed to parse config file: {e}") from e
        else:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Failed to parse config file: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping, got {type(data).__name__}")

    return _dict_to_config(data)


def save_config(
    config: PipelineConfig,
    config_path: Union[str, Path],
    format: str = "auto"
) -> None:
    """
    Save pipeline configuration to file.

    Args:
        config: Configuration to save
        config_path: Output file path
        format: "yaml", "json", or "auto" (detect from extension)
    """
    path = Path(config_path)

    if format == "auto":
        if path.suffix in ('.yaml', '.yml'):
            format = "yaml"
        else:
            format = "json"

    data = _config_to_dict(config)

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w', encoding='utf-8') as f:
        if format == "yaml":
            import yaml
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(data, f, indent=2)

    logger.info(f"Saved config to {path}")


def _dict_to_config(data: Dict[str, Any]) -> PipelineConfig:
    """Convert dictionary to PipelineConfig."""
    defaults = PipelineConfig()
    try:
        seed = data.get('random_seed', defaults.random_seed)
        return PipelineConfig(
            camera_id=int(data.get('camera_id', defaults.camera_id)),
            frame_width=int(data.get('frame_width', defaults.frame_width)),
            frame_height=int(data.get('frame_height', defaults.frame_height)),
            throttle_interval_ms=float(
                data.get('throttle_interval_ms', defaults.throttle_interval_ms)
            ),
            landmark_model_path=data.get('landmark_model_path', defaults.landmark_model_path),
            min_detection_confidence=float(
                data.get('min_detection_confidence', defaults.min_detection_confidence)
            ),
            min_tracking_confidence=float(
                data.get('min_tracking_confidence', defaults.min_tracking_confidence)
            ),
            random_seed=None if seed is None else int(seed),
            show_video=bool(data.get('show_video', defaults.show_video)),
        )
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid config value: {e}") from e


def _config_to_dict(config: PipelineConfig) -> Dict[str, Any]:
    """Convert PipelineConfig to dictionary."""
    return {
        'camera_id': config.camera_id,
        'frame_width': config.frame_width,
        'frame_height': config.frame_height,
        'throttle_interval_ms': config.throttle_interval_ms,
        'landmark_model_path': config.landmark_model_path,
        'min_detection_confidence': config.min_detection_confidence,
        'min_tracking_confidence': config.min_tracking_confidence,
        'random_seed': config.random_seed,
        'show_video': config.show_video,
    }


def create_default_config(output_path: Union[str, Path]) -> None:
    """
    Create a default configuration file with comments.

    Args:
        output_path: Path to write the config file
    """
    path = Path(output_path)

    if path.suffix in ('.yaml', '.yml'):
        content = """# Face Emoji Configuration
# ========================

# Camera device ID (usually 0 for built-in camera)
camera_id: 0

# Requested capture size in pixels
frame_width: 640
frame_height: 480

# Minimum spacing between classified frames in milliseconds
# Frames arriving sooner are dropped
throttle_interval_ms: 100.0

# Path to MediaPipe face_landmarker.task (null to download on first use)
landmark_model_path: null

# MediaPipe face detection / tracking thresholds [0, 1]
min_detection_confidence: 0.5
min_tracking_confidence: 0.5

# Seed for emoji pool shuffling (null for a fresh random order every run)
random_seed: null

# Show the camera feed with an overlay
show_video: false
"""
    else:
        content = json.dumps(_config_to_dict(PipelineConfig()), indent=2)

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(content)

    logger.info(f"Created default config at {path}")
