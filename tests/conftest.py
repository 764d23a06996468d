"""Shared fixtures: an in-memory engine and a recording scheduler."""

import io
import json
from typing import Callable, Dict, List, Optional

import numpy as np
import pytest
from PIL import Image

from scenesnap.engine.base import Engine, Node, OffscreenSurface, Scheduler, UpdateMode


class FakeEngine(Engine):
    """Engine whose surfaces are filled with a solid colour on every draw."""

    def __init__(self, fill=(10, 20, 30)):
        self._root = Node("root")
        self._current_scene: Optional[Node] = None
        self.scenes: Dict[str, Callable[[], Node]] = {}
        self.fill = fill
        self.freed: List[Node] = []
        self.quit_code: Optional[int] = None
        self.readback_disabled = False

    @property
    def root(self) -> Node:
        return self._root

    @property
    def current_scene(self) -> Optional[Node]:
        return self._current_scene

    def run_scene(self, name: str = "Main") -> Node:
        scene = Node(name)
        self._root.add_child(scene)
        self._current_scene = scene
        return scene

    def load_scene(self, path: str) -> Optional[Node]:
        factory = self.scenes.get(path)
        return factory() if factory else None

    def create_offscreen_surface(self, width: int, height: int) -> OffscreenSurface:
        return OffscreenSurface(width, height)

    def read_pixels(self, surface: OffscreenSurface):
        if self.readback_disabled or surface.image is None:
            return None
        return surface.image.copy()

    def encode_png(self, pixels: np.ndarray) -> bytes:
        buffer = io.BytesIO()
        Image.fromarray(pixels).save(buffer, format="PNG")
        return buffer.getvalue()

    def free(self, node: Node) -> None:
        super().free(node)
        self.freed.append(node)

    def quit(self, exit_code: int = 0) -> None:
        self.quit_code = exit_code

    def draw(self) -> None:
        for node in list(self._root.walk()):
            if isinstance(node, OffscreenSurface) and node.update_mode != UpdateMode.DISABLED:
                node.image = np.full((node.height, node.width, 3), self.fill, dtype=np.uint8)
                if node.update_mode == UpdateMode.ONCE:
                    node.update_mode = UpdateMode.DISABLED


class RecordingScheduler(Scheduler):
    """Records every suspension point and draws on frame-drawn waits."""

    def __init__(self, engine: Optional[FakeEngine] = None):
        self.engine = engine
        self.calls: List[tuple] = []

    def wait_ticks(self, count: int) -> None:
        self.calls.append(("ticks", count))

    def wait_frame_drawn(self) -> None:
        self.calls.append(("drawn",))
        if self.engine is not None:
            self.engine.draw()

    def wait_timer(self, seconds: float) -> None:
        self.calls.append(("timer", seconds))


@pytest.fixture
def engine():
    return FakeEngine()


@pytest.fixture
def scheduler(engine):
    return RecordingScheduler(engine)


@pytest.fixture
def pipeline_node(engine):
    node = Node("ScreenshotPipeline")
    engine.attach(engine.root, node)
    return node


@pytest.fixture
def write_config(tmp_path):
    """Write a capture config JSON and return its path."""

    def _write(data, name="screenshot_config.json"):
        path = tmp_path / name
        if isinstance(data, str):
            path.write_text(data, encoding="utf-8")
        else:
            path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write
