"""Entry point for SceneSnap."""

import argparse
import dataclasses
import signal
import sys
from pathlib import Path
from typing import List, Optional

from .config.loader import load_config
from .config.settings import Settings
from .utils.exceptions import ConfigurationError, EngineError
from .utils.logging import setup_logging, LOG_PREFIX
from .engine.base import Node
from .engine.software import FrameLoopScheduler, SoftwareEngine
from .capture.guard import guard, is_capture_requested
from .capture.lifecycle import CaptureLifecycle, terminate


def parse_args(argv: List[str]) -> argparse.Namespace:
    """Parse the options SceneSnap itself understands; the rest is left for the host."""
    parser = argparse.ArgumentParser(prog="scenesnap", add_help=True)
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    parser.add_argument("--scene", default=None, help="Scene to run instead of the configured main scene")
    args, _ = parser.parse_known_args(argv)
    return args


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    if argv is None:
        argv = sys.argv[1:]
    args = parse_args(argv)

    project_root = Path.cwd()

    # Load configuration
    config_path = args.config or project_root / "config.yaml"
    try:
        settings = load_config(config_path)
    except FileNotFoundError:
        if args.config is not None:
            print(f"{LOG_PREFIX} Error: Configuration file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        settings = Settings()
    except ConfigurationError as e:
        print(f"{LOG_PREFIX} Error loading configuration: {e}", file=sys.stderr)
        sys.exit(1)

    # Setup logging; an ordinary run stays off the filesystem
    logging_config = settings.logging
    if not is_capture_requested(argv, settings.capture.flag):
        logging_config = dataclasses.replace(logging_config, file="")
    log_dir = settings.paths.get_log_path(project_root)
    setup_logging(logging_config, log_dir)

    resource_root = settings.paths.get_resource_path(project_root)
    try:
        engine = SoftwareEngine(resource_root, fps=settings.engine.fps)
    except EngineError as e:
        print(f"{LOG_PREFIX} Error starting engine: {e}", file=sys.stderr)
        sys.exit(1)

    main_scene = args.scene or settings.engine.main_scene
    if main_scene:
        engine.change_scene(main_scene)

    pipeline_node = Node("ScreenshotPipeline")
    engine.attach(engine.root, pipeline_node)
    engine.start()

    # Setup signal handlers for graceful shutdown
    def signal_handler(sig, frame):
        print("\nReceived interrupt signal, shutting down...", file=sys.stderr)
        engine.quit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    if not guard(argv, engine, pipeline_node, flag=settings.capture.flag):
        sys.exit(engine.wait_until_stopped())

    lifecycle = CaptureLifecycle(
        engine,
        FrameLoopScheduler(engine),
        pipeline_node,
        config_file=resource_root / settings.capture.config_file,
        output_dir=resource_root / settings.capture.output_dir,
    )
    terminate(engine, lifecycle.run())


if __name__ == "__main__":
    main()
