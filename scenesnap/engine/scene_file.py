"""YAML scene resources for the software engine, rasterised with OpenCV."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

import cv2
import numpy as np
import yaml

from .base import Node
from ..utils.exceptions import EngineError

logger = logging.getLogger(__name__)

RESOURCE_SCHEME = "res://"
SHAPE_TYPES = ("rect", "circle", "line", "text", "image")

Color = Tuple[int, int, int]


def resolve_resource(path: str, resource_root: Path) -> Path:
    """
    Map a resource path to a filesystem path.

    Args:
        path: 'res://' path, path relative to the resource root, or absolute path.
        resource_root: Directory that 'res://' refers to.

    Returns:
        Filesystem path (not checked for existence).
    """
    if path.startswith(RESOURCE_SCHEME):
        return resource_root / path[len(RESOURCE_SCHEME):]
    candidate = Path(path)
    if candidate.is_absolute():
        return candidate
    return resource_root / candidate


def _color(value, default: Color = (255, 255, 255)) -> Color:
    if value is None:
        return default
    if isinstance(value, str):
        hex_value = value.lstrip("#")
        if len(hex_value) != 6:
            raise EngineError(f"Invalid colour: {value!r}")
        return tuple(int(hex_value[i:i + 2], 16) for i in (0, 2, 4))
    if len(value) != 3:
        raise EngineError(f"Invalid colour: {value!r}")
    return tuple(int(c) for c in value)


def _point(value, default=(0.0, 0.0)) -> Tuple[float, float]:
    if value is None:
        return default
    if len(value) != 2:
        raise EngineError(f"Expected [x, y], got {value!r}")
    return float(value[0]), float(value[1])


@dataclass
class Shape:
    """One drawable element of a 2D scene."""

    kind: str
    color: Color = (255, 255, 255)
    position: Tuple[float, float] = (0.0, 0.0)
    size: Tuple[float, float] = (0.0, 0.0)
    end: Tuple[float, float] = (0.0, 0.0)
    radius: float = 0.0
    thickness: int = -1
    text: str = ""
    scale: float = 1.0
    velocity: Tuple[float, float] = (0.0, 0.0)
    image: Optional[np.ndarray] = None

    @classmethod
    def from_dict(cls, data: dict, base_dir: Path, resource_root: Path) -> "Shape":
        kind = data.get("type")
        if kind not in SHAPE_TYPES:
            raise EngineError(f"Unknown shape type: {kind!r}")

        shape = cls(
            kind=kind,
            color=_color(data.get("color")),
            position=_point(data.get("position", data.get("center", data.get("start")))),
            size=_point(data.get("size")),
            end=_point(data.get("end")),
            radius=float(data.get("radius", 0.0)),
            thickness=int(data.get("thickness", -1 if kind in ("rect", "circle") else 2)),
            text=str(data.get("text", "")),
            scale=float(data.get("scale", 1.0)),
            velocity=_point(data.get("velocity")),
        )

        if kind == "image":
            source = str(data.get("path", ""))
            if source.startswith(RESOURCE_SCHEME) or Path(source).is_absolute():
                image_path = resolve_resource(source, resource_root)
            else:
                image_path = base_dir / source
            bgr = cv2.imread(str(image_path), cv2.IMREAD_COLOR)
            if bgr is None:
                raise EngineError(f"Could not read image: {image_path}")
            shape.image = cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)
            if shape.size == (0.0, 0.0):
                shape.size = (float(bgr.shape[1]), float(bgr.shape[0]))

        return shape

    def draw(self, canvas: np.ndarray, elapsed: float) -> None:
        """Rasterise onto an RGB canvas, offset by velocity * elapsed."""
        dx = self.velocity[0] * elapsed
        dy = self.velocity[1] * elapsed
        x, y = int(round(self.position[0] + dx)), int(round(self.position[1] + dy))

        if self.kind == "rect":
            x2 = int(round(x + self.size[0]))
            y2 = int(round(y + self.size[1]))
            cv2.rectangle(canvas, (x, y), (x2, y2), self.color, self.thickness)
        elif self.kind == "circle":
            cv2.circle(canvas, (x, y), int(round(self.radius)), self.color, self.thickness)
        elif self.kind == "line":
            end = (int(round(self.end[0] + dx)), int(round(self.end[1] + dy)))
            cv2.line(canvas, (x, y), end, self.color, max(self.thickness, 1))
        elif self.kind == "text":
            cv2.putText(
                canvas,
                self.text,
                (x, y),
                cv2.FONT_HERSHEY_SIMPLEX,
                self.scale,
                self.color,
                max(self.thickness, 1),
                cv2.LINE_AA,
            )
        elif self.kind == "image":
            self._blit(canvas, x, y)

    def _blit(self, canvas: np.ndarray, x: int, y: int) -> None:
        w, h = int(round(self.size[0])), int(round(self.size[1]))
        if w <= 0 or h <= 0:
            return
        image = self.image
        if image.shape[1] != w or image.shape[0] != h:
            image = cv2.resize(image, (w, h), interpolation=cv2.INTER_AREA)

        # Clip to canvas bounds
        x0, y0 = max(x, 0), max(y, 0)
        x1 = min(x + w, canvas.shape[1])
        y1 = min(y + h, canvas.shape[0])
        if x0 >= x1 or y0 >= y1:
            return
        canvas[y0:y1, x0:x1] = image[y0 - y:y1 - y, x0 - x:x1 - x]


class Scene2D(Node):
    """Root node of a loaded 2D scene."""

    def __init__(
        self,
        name: str,
        background: Color = (0, 0, 0),
        shapes: Optional[List[Shape]] = None,
        design_size: Optional[Tuple[int, int]] = None,
    ):
        super().__init__(name)
        self.background = background
        self.shapes = shapes or []
        self.design_size = design_size
        self.elapsed = 0.0

    def advance(self, delta: float) -> None:
        """Move animation time forward."""
        self.elapsed += delta

    def draw(self, width: int, height: int) -> np.ndarray:
        """
        Render to a new RGB buffer of the given size.

        Scenes with a design size are drawn at that size and resampled,
        otherwise coordinates are surface pixels.
        """
        draw_w, draw_h = self.design_size or (width, height)
        canvas = np.empty((draw_h, draw_w, 3), dtype=np.uint8)
        canvas[:] = self.background
        for shape in self.shapes:
            shape.draw(canvas, self.elapsed)

        if (draw_w, draw_h) != (width, height):
            canvas = cv2.resize(canvas, (width, height), interpolation=cv2.INTER_AREA)
        return canvas


@dataclass
class SceneDocument:
    """Parsed scene resource, instantiable any number of times."""

    name: str
    background: Color = (0, 0, 0)
    shapes: List[Shape] = field(default_factory=list)
    design_size: Optional[Tuple[int, int]] = None

    def instantiate(self) -> Scene2D:
        return Scene2D(
            self.name,
            background=self.background,
            shapes=list(self.shapes),
            design_size=self.design_size,
        )


def load_scene_document(scene_file: Path, resource_root: Path) -> SceneDocument:
    """
    Parse a YAML scene resource.

    Args:
        scene_file: Path to the scene file.
        resource_root: Directory that 'res://' refers to.

    Returns:
        SceneDocument.

    Raises:
        EngineError: If the file is missing or malformed.
    """
    if not scene_file.is_file():
        raise EngineError(f"Scene resource not found: {scene_file}")

    try:
        with open(scene_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise EngineError(f"Could not read scene {scene_file}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise EngineError(f"Scene {scene_file} must be a mapping")

    design_size = None
    if data.get("size") is not None:
        w, h = _point(data["size"])
        if w <= 0 or h <= 0:
            raise EngineError(f"Invalid scene size in {scene_file}")
        design_size = (int(w), int(h))

    try:
        shapes = [
            Shape.from_dict(item, scene_file.parent, resource_root)
            for item in data.get("shapes", [])
        ]
    except (TypeError, ValueError, AttributeError) as e:
        raise EngineError(f"Malformed shape in {scene_file}: {e}") from e

    return SceneDocument(
        name=str(data.get("name", scene_file.stem)),
        background=_color(data.get("background"), default=(0, 0, 0)),
        shapes=shapes,
        design_size=design_size,
    )
