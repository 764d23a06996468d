"""Capture config resolution from the well-known JSON file."""

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..utils.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 1920
DEFAULT_HEIGHT = 1080
DEFAULT_DELAY = 0.5


@dataclass(frozen=True)
class CaptureConfig:
    """Resolved parameters for one capture invocation."""

    scene_path: str = ""
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    delay_seconds: float = DEFAULT_DELAY

    @property
    def uses_running_scene(self) -> bool:
        """True when the running scene should be borrowed instead of loading one."""
        return not self.scene_path

    @classmethod
    def from_dict(cls, data: dict) -> "CaptureConfig":
        """
        Create from the parsed JSON object, filling defaults for absent fields.

        Args:
            data: Dictionary with optional 'scene', 'width', 'height' and 'delay' keys.

        Returns:
            CaptureConfig instance.

        Raises:
            ConfigError: If a field cannot be coerced or is out of range.
        """
        scene = data.get("scene")
        scene_path = "" if scene is None else str(scene).strip()

        width = _coerce_int("width", data.get("width", DEFAULT_WIDTH))
        height = _coerce_int("height", data.get("height", DEFAULT_HEIGHT))
        delay = _coerce_float("delay", data.get("delay", DEFAULT_DELAY))

        if width <= 0 or height <= 0:
            raise ConfigError(f"Capture size must be positive, got {width}x{height}")
        if delay < 0:
            raise ConfigError(f"Capture delay must not be negative, got {delay}")

        return cls(scene_path=scene_path, width=width, height=height, delay_seconds=delay)


def _coerce_int(field: str, value: Any) -> int:
    return int(_coerce_float(field, value))


def _coerce_float(field: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ConfigError(f"Invalid value for '{field}': {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise ConfigError(f"Invalid value for '{field}': {value!r}") from e
    if not math.isfinite(number):
        raise ConfigError(f"Value for '{field}' must be finite, got {value!r}")
    return number


def resolve_capture_config(config_file: Path) -> CaptureConfig:
    """
    Load and validate the capture config.

    Args:
        config_file: Path to the JSON config file.

    Returns:
        Resolved CaptureConfig.

    Raises:
        ConfigError: If the file is missing, unreadable or not a JSON object.
    """
    if not config_file.exists():
        raise ConfigError(f"Capture config not found: {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        raise ConfigError(f"Cannot open capture config {config_file}: {e}") from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Error parsing capture config JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Capture config must be a JSON object, got {type(data).__name__}")

    config = CaptureConfig.from_dict(data)
    logger.info(
        f"Capture config: scene={config.scene_path or '<running>'}, "
        f"size={config.width}x{config.height}, delay={config.delay_seconds}s"
    )
    return config
