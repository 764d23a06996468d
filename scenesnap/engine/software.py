"""Software reference engine with a threaded frame loop."""

import io
import logging
import threading
import time
from pathlib import Path
from typing import Dict, Optional

import numpy as np
from PIL import Image

from .base import Engine, Node, OffscreenSurface, Scheduler, UpdateMode
from .scene_file import Scene2D, SceneDocument, load_scene_document, resolve_resource
from ..utils.exceptions import EngineError

logger = logging.getLogger(__name__)


class SoftwareEngine(Engine):
    """CPU renderer for YAML scenes, driven by a background frame loop."""

    def __init__(self, resource_root: Path, fps: float = 60.0):
        """
        Initialize software engine.

        Args:
            resource_root: Directory that 'res://' paths resolve against.
            fps: Target frame loop rate.
        """
        if fps <= 0:
            raise EngineError(f"Invalid frame rate: {fps}")
        self.resource_root = Path(resource_root)
        self.frame_interval = 1.0 / fps

        self._root = Node("root")
        self._current_scene: Optional[Node] = None
        self._documents: Dict[Path, SceneDocument] = {}

        self._lock = threading.RLock()
        self.frame_cond = threading.Condition(self._lock)
        self.tick_count = 0
        self.draw_count = 0

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.exit_code: Optional[int] = None

    @property
    def root(self) -> Node:
        return self._root

    @property
    def current_scene(self) -> Optional[Node]:
        with self._lock:
            return self._current_scene

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def change_scene(self, path: str) -> bool:
        """
        Load a scene and make it the running scene.

        Returns:
            True if the scene was loaded, False otherwise.
        """
        scene = self.load_scene(path)
        if scene is None:
            return False
        with self._lock:
            if self._current_scene is not None:
                self.free(self._current_scene)
            self._root.add_child(scene)
            self._current_scene = scene
        logger.info(f"Running scene: {path}")
        return True

    def load_scene(self, path: str) -> Optional[Node]:
        scene_file = resolve_resource(path, self.resource_root).resolve()
        document = self._documents.get(scene_file)
        if document is None:
            try:
                document = load_scene_document(scene_file, self.resource_root)
            except EngineError as e:
                logger.warning(f"Could not load scene {path}: {e}")
                return None
            self._documents[scene_file] = document
        return document.instantiate()

    def create_offscreen_surface(self, width: int, height: int) -> OffscreenSurface:
        return OffscreenSurface(width, height)

    def attach(self, parent: Node, node: Node) -> None:
        with self._lock:
            super().attach(parent, node)

    def detach(self, node: Node) -> Optional[Node]:
        with self._lock:
            if node is self._current_scene:
                self._current_scene = None
            return super().detach(node)

    def set_update_mode(self, surface: OffscreenSurface, mode: UpdateMode) -> None:
        with self._lock:
            super().set_update_mode(surface, mode)

    def free(self, node: Node) -> None:
        with self._lock:
            super().free(node)

    def read_pixels(self, surface: OffscreenSurface) -> Optional[np.ndarray]:
        with self._lock:
            if surface.image is None:
                return None
            return surface.image.copy()

    def encode_png(self, pixels: np.ndarray) -> bytes:
        buffer = io.BytesIO()
        Image.fromarray(pixels).save(buffer, format="PNG")
        return buffer.getvalue()

    def step(self, delta: float) -> None:
        """
        Run one frame: advance scenes, emit the tick, render surfaces, emit frame drawn.

        Args:
            delta: Seconds since the previous frame.
        """
        with self._lock:
            nodes = list(self._root.walk())
            for node in nodes:
                if isinstance(node, Scene2D):
                    node.advance(delta)
            self.tick_count += 1
            self.frame_cond.notify_all()

            for node in nodes:
                if isinstance(node, OffscreenSurface):
                    self._render_surface(node)
            self.draw_count += 1
            self.frame_cond.notify_all()

    def _render_surface(self, surface: OffscreenSurface) -> None:
        if surface.update_mode == UpdateMode.DISABLED:
            return

        width, height = surface.size
        canvas = np.zeros((height, width, 3), dtype=np.uint8)
        for child in surface.children:
            if isinstance(child, Scene2D):
                canvas = child.draw(width, height)
        surface.image = canvas

        if surface.update_mode == UpdateMode.ONCE:
            surface.update_mode = UpdateMode.DISABLED

    def start(self) -> None:
        """Start the frame loop thread."""
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name="frame-loop", daemon=True)
        self._thread.start()
        logger.debug(f"Frame loop started ({1.0 / self.frame_interval:.0f} fps)")

    def _run(self) -> None:
        last = time.monotonic()
        while not self._stop_event.is_set():
            now = time.monotonic()
            try:
                self.step(now - last)
            except Exception as e:
                logger.error(f"Frame loop error: {e}", exc_info=True)
                self.quit(1)
                break
            last = now
            remaining = self.frame_interval - (time.monotonic() - now)
            if remaining > 0:
                self._stop_event.wait(remaining)

    def quit(self, exit_code: int = 0) -> None:
        with self._lock:
            if self.exit_code is None:
                self.exit_code = exit_code
            self._stop_event.set()
            self.frame_cond.notify_all()

    def wait_until_stopped(self) -> int:
        """
        Block until quit() is called.

        Returns:
            The exit code passed to quit().
        """
        self._stop_event.wait()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=1.0)
        return self.exit_code or 0


class FrameLoopScheduler(Scheduler):
    """Scheduler that blocks the calling thread on the engine's frame loop."""

    def __init__(self, engine: SoftwareEngine):
        self.engine = engine

    def _wait_for(self, predicate) -> None:
        with self.engine.frame_cond:
            self.engine.frame_cond.wait_for(lambda: predicate() or self.engine.stopped)
            if self.engine.stopped:
                raise EngineError("Frame loop stopped while waiting")

    def wait_ticks(self, count: int) -> None:
        with self.engine.frame_cond:
            target = self.engine.tick_count + count
            self._wait_for(lambda: self.engine.tick_count >= target)

    def wait_frame_drawn(self) -> None:
        with self.engine.frame_cond:
            target = self.engine.draw_count + 1
            self._wait_for(lambda: self.engine.draw_count >= target)

    def wait_timer(self, seconds: float) -> None:
        time.sleep(seconds)
