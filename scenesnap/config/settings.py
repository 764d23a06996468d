"""Configuration settings dataclass."""

from dataclasses import dataclass
from pathlib import Path


@dataclass
class CaptureSettings:
    """Capture pipeline activation and file locations."""
    flag: str = "--screenshot"
    config_file: str = "screenshot_config.json"
    output_dir: str = "screenshots"


@dataclass
class EngineConfig:
    """Software engine settings."""
    fps: float = 60.0
    main_scene: str = "res://scenes/main.yaml"


@dataclass
class PathsConfig:
    """Path configuration."""
    resources: str = "res"
    logs: str = "logs"

    def get_resource_path(self, base_path: Path) -> Path:
        """Get absolute resource root path."""
        return (base_path / self.resources).resolve()

    def get_log_path(self, base_path: Path) -> Path:
        """Get absolute log path."""
        return base_path / self.logs


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    file: str = "logs/scenesnap.log"
    console: bool = True
    console_stream: str = "stderr"
    format: str = "%(asctime)s %(levelname)s %(message)s"


@dataclass
class Settings:
    """Main settings container."""

    capture: CaptureSettings = None
    engine: EngineConfig = None
    paths: PathsConfig = None
    logging: LoggingConfig = None

    def __post_init__(self):
        """Initialize default configs if not provided."""
        if self.capture is None:
            self.capture = CaptureSettings()
        if self.engine is None:
            self.engine = EngineConfig()
        if self.paths is None:
            self.paths = PathsConfig()
        if self.logging is None:
            self.logging = LoggingConfig()
