"""Scene capture utility script."""

import argparse
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from scenesnap.config.loader import load_config
from scenesnap.client import CaptureClient
from scenesnap.utils.exceptions import CaptureRequestError


def main():
    """Request one capture from the host and print the image path."""
    project_root = Path(__file__).parent.parent

    parser = argparse.ArgumentParser(description="Capture a scene to PNG")
    parser.add_argument("--scene", default=None, help="Scene resource, e.g. res://demo.tscn")
    parser.add_argument("--width", type=int, default=None)
    parser.add_argument("--height", type=int, default=None)
    parser.add_argument("--delay", type=float, default=None)
    args = parser.parse_args()

    # Load configuration
    try:
        config_path = project_root / "config.yaml"
        settings = load_config(config_path)
    except FileNotFoundError:
        print(f"Error: Configuration file not found: {config_path}")
        sys.exit(1)

    resource_root = settings.paths.get_resource_path(project_root)
    client = CaptureClient(project_root)

    try:
        path = client.capture(
            resource_root / settings.capture.config_file,
            flag=settings.capture.flag,
            scene=args.scene,
            width=args.width,
            height=args.height,
            delay=args.delay,
        )
    except CaptureRequestError as e:
        print(f"Failed to capture scene: {e}")
        sys.exit(1)

    print(f"Screenshot saved to {path}")


if __name__ == "__main__":
    main()
