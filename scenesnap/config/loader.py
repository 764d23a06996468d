"""Configuration loader from YAML file."""

import yaml
from pathlib import Path
from typing import Optional

from .settings import (
    Settings,
    CaptureSettings,
    EngineConfig,
    PathsConfig,
    LoggingConfig,
)
from ..utils.exceptions import ConfigurationError


def load_config(config_path: Optional[Path] = None) -> Settings:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, looks for config.yaml in project root.

    Returns:
        Settings object with loaded configuration.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ConfigurationError: If config file is invalid YAML or not a mapping.
    """
    if config_path is None:
        # Look for config.yaml in project root (parent of scenesnap package)
        project_root = Path(__file__).parent.parent.parent
        config_path = project_root / "config.yaml"

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if config_data is None:
        config_data = {}
    if not isinstance(config_data, dict):
        raise ConfigurationError(f"Expected a mapping at the top of {config_path}")

    settings = Settings()

    # Load capture config
    if "capture" in config_data:
        capture_data = config_data["capture"]
        settings.capture = CaptureSettings(
            flag=capture_data.get("flag", "--screenshot"),
            config_file=capture_data.get("config_file", "screenshot_config.json"),
            output_dir=capture_data.get("output_dir", "screenshots"),
        )

    # Load engine config
    if "engine" in config_data:
        engine_data = config_data["engine"]
        settings.engine = EngineConfig(
            fps=float(engine_data.get("fps", 60.0)),
            main_scene=engine_data.get("main_scene", "res://scenes/main.yaml"),
        )

    # Load paths config
    if "paths" in config_data:
        paths_data = config_data["paths"]
        settings.paths = PathsConfig(
            resources=paths_data.get("resources", "res"),
            logs=paths_data.get("logs", "logs"),
        )

    # Load logging config
    if "logging" in config_data:
        log_data = config_data["logging"]
        settings.logging = LoggingConfig(
            level=log_data.get("level", "INFO"),
            file=log_data.get("file", "logs/scenesnap.log"),
            console=log_data.get("console", True),
            console_stream=log_data.get("console_stream", "stderr"),
            format=log_data.get("format", "%(asctime)s %(levelname)s %(message)s"),
        )

    return settings
