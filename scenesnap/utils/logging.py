"""Logging configuration."""

import logging
import sys
from pathlib import Path

from ..config.settings import LoggingConfig

LOG_PREFIX = "[scenesnap]"


def setup_logging(config: LoggingConfig, log_dir: Path) -> None:
    """
    Set up logging configuration.

    Args:
        config: Logging configuration.
        log_dir: Directory for log files.
    """
    level = getattr(logging, config.level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    root_logger.handlers.clear()

    formatter = logging.Formatter(config.format)

    if config.file:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / Path(config.file).name

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
    else:
        log_file = None

    # Console handler; stdout is reserved for the SUCCESS line by default
    if config.console:
        stream = sys.stdout if config.console_stream == "stdout" else sys.stderr
        console_handler = logging.StreamHandler(stream)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    logging.debug(f"Logging configured: level={config.level}, file={log_file}")
