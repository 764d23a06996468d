"""Client side of a capture: write the request, run the host, parse the result."""

import json
import logging
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

from .capture.lifecycle import SUCCESS_PREFIX
from .utils.exceptions import CaptureRequestError

logger = logging.getLogger(__name__)


def write_capture_request(
    config_file: Path,
    scene: Optional[str] = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
    delay: Optional[float] = None,
) -> None:
    """
    Write the capture config JSON. Omitted fields take the host's defaults.

    Args:
        config_file: Well-known config path inside the resource root.
        scene: Scene resource path, or None for the running scene.
        width: Image width in pixels.
        height: Image height in pixels.
        delay: Settle delay in seconds.
    """
    data = {}
    if scene:
        data["scene"] = scene
    if width is not None:
        data["width"] = width
    if height is not None:
        data["height"] = height
    if delay is not None:
        data["delay"] = delay

    config_file.parent.mkdir(parents=True, exist_ok=True)
    with open(config_file, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    logger.debug(f"Capture request written to {config_file}")


def parse_success_path(output: str) -> Optional[Path]:
    """Return the path from the last SUCCESS line in the host's stdout, if any."""
    path = None
    for line in output.splitlines():
        line = line.strip()
        if line.startswith(SUCCESS_PREFIX):
            path = Path(line[len(SUCCESS_PREFIX):])
    return path


class CaptureClient:
    """Runs the host process in capture mode."""

    def __init__(
        self,
        project_root: Path,
        command: Optional[List[str]] = None,
        timeout: float = 60.0,
    ):
        """
        Initialize capture client.

        Args:
            project_root: Working directory of the host process.
            command: Host command line without the capture flag.
                Defaults to running this package's entry point.
            timeout: Seconds to wait for the host to exit.
        """
        self.project_root = project_root
        self.command = command or [sys.executable, "-m", "scenesnap"]
        self.timeout = timeout

    def capture(self, config_file: Path, flag: str = "--screenshot", **request) -> Path:
        """
        Request one capture and return the written image path.

        Args:
            config_file: Well-known config path the host reads.
            flag: Activation flag.
            **request: scene, width, height and delay for write_capture_request.

        Returns:
            Absolute path of the image.

        Raises:
            CaptureRequestError: If the host fails, times out or reports no image.
        """
        write_capture_request(config_file, **request)

        cmd = self.command + [flag]
        try:
            result = subprocess.run(
                cmd,
                cwd=self.project_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise CaptureRequestError(
                f"Capture timed out after {self.timeout}s: {' '.join(cmd)}"
            ) from e
        except OSError as e:
            raise CaptureRequestError(f"Failed to run capture: {' '.join(cmd)}") from e

        if result.returncode != 0:
            stderr = result.stderr.strip() if result.stderr else "Unknown error"
            raise CaptureRequestError(f"Capture exited with {result.returncode}: {stderr}")

        path = parse_success_path(result.stdout)
        if path is None:
            raise CaptureRequestError("Capture succeeded but reported no image path")

        logger.info(f"Captured {path}")
        return path
