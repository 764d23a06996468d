"""Output file naming."""

from datetime import datetime


def format_timestamp(moment: datetime) -> str:
    """Format a wall-clock time as a filesystem-safe 'YYYY-MM-DD_HH-MM-SS'."""
    return moment.replace(microsecond=0).isoformat().replace(":", "-").replace("T", "_")


def build_filename(
    scene_name: str,
    width: int,
    height: int,
    delay_seconds: float,
    timestamp: datetime,
    extension: str = "png",
) -> str:
    """
    Build the capture filename.

    Two captures in the same second with identical parameters get the same name.

    Returns:
        '<timestamp>_<scene>_<w>x<h>_<delay>s.<ext>'
    """
    return (
        f"{format_timestamp(timestamp)}_{scene_name}_{width}x{height}"
        f"_{delay_seconds:.1f}s.{extension}"
    )
