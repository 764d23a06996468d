"""Pixel readback and image file persistence."""

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from ..engine.base import Engine
from ..utils.exceptions import EncodeError, ReadbackError
from .target import RenderTarget

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutputArtifact:
    """The written image file."""

    absolute_path: Path
    filename: str


def _remove_partial(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove partial file {path}: {e}")


def read_back(engine: Engine, target: RenderTarget) -> np.ndarray:
    """
    Read the render target's current contents.

    Args:
        engine: Host engine.
        target: Synchronized render target.

    Returns:
        RGB pixel buffer of shape (height, width, 3).

    Raises:
        ReadbackError: If no pixel buffer is available.
    """
    pixels = engine.read_pixels(target.surface)
    if pixels is None or pixels.size == 0:
        raise ReadbackError("Render target has no pixel buffer")
    return pixels


def persist(engine: Engine, pixels: np.ndarray, output_dir: Path, filename: str) -> OutputArtifact:
    """
    Encode pixels as PNG and write them under output_dir.

    Args:
        engine: Host engine, used for encoding.
        pixels: RGB pixel buffer.
        output_dir: Destination directory, created if missing.
        filename: Output filename.

    Returns:
        OutputArtifact with the absolute path of the written file.

    Raises:
        EncodeError: If encoding or writing fails.
    """
    output_path = (output_dir / filename).absolute()

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        data = engine.encode_png(pixels)
        output_path.write_bytes(data)
    except OSError as e:
        logger.error(f"Failed to write {output_path}: {e}")
        _remove_partial(output_path)
        raise EncodeError(f"Failed to write image {output_path}: {e}", status=e.errno) from e
    except (ValueError, TypeError) as e:
        raise EncodeError(f"Failed to encode image: {e}") from e

    logger.info(f"Screenshot saved to {output_path}")
    return OutputArtifact(absolute_path=output_path, filename=filename)
