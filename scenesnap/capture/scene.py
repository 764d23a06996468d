"""Scene acquisition: load a named scene or borrow the running one."""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath
from typing import Optional

from ..config.capture import CaptureConfig
from ..engine.base import Engine, Node, Scheduler
from ..utils.exceptions import NoActiveSceneError, SceneLoadError

logger = logging.getLogger(__name__)

RUNNING_SCENE_NAME = "main"


class Ownership(Enum):
    """Who owns a scene while it is being captured."""

    BORROWED = "borrowed"
    OWNED = "owned"


@dataclass
class SceneHandle:
    """Reference to the scene being captured."""

    node: Node
    name: str
    ownership: Ownership
    original_parent: Optional[Node] = None

    @property
    def borrowed(self) -> bool:
        return self.ownership is Ownership.BORROWED

    @property
    def owned(self) -> bool:
        return self.ownership is Ownership.OWNED


def scene_name_from_path(scene_path: str) -> str:
    """
    Derive a scene name from a resource path.

    'res://levels/demo.tscn' -> 'demo'
    """
    if "://" in scene_path:
        scene_path = scene_path.split("://", 1)[1]
    return PurePosixPath(scene_path.replace("\\", "/")).stem


class SceneAcquirer:
    """Obtains the scene to capture."""

    def __init__(self, engine: Engine, scheduler: Scheduler):
        """
        Initialize scene acquirer.

        Args:
            engine: Host engine.
            scheduler: Frame loop scheduler.
        """
        self.engine = engine
        self.scheduler = scheduler

    def acquire(self, config: CaptureConfig) -> SceneHandle:
        """
        Acquire the scene named by the config.

        Args:
            config: Resolved capture config.

        Returns:
            SceneHandle, borrowed or owned.

        Raises:
            NoActiveSceneError: If the running scene is requested but none exists.
            SceneLoadError: If the named scene cannot be resolved.
        """
        if config.uses_running_scene:
            return self._borrow_running_scene()
        return self._load_scene(config.scene_path)

    def _borrow_running_scene(self) -> SceneHandle:
        # Let the running scene finish initializing
        self.scheduler.wait_ticks(1)

        scene = self.engine.current_scene
        if scene is None:
            raise NoActiveSceneError("No running scene to capture")

        logger.info(f"Borrowing running scene '{scene.name}'")
        return SceneHandle(node=scene, name=RUNNING_SCENE_NAME, ownership=Ownership.BORROWED)

    def _load_scene(self, scene_path: str) -> SceneHandle:
        node = self.engine.load_scene(scene_path)
        if node is None:
            raise SceneLoadError(f"Could not load scene: {scene_path}")

        logger.info(f"Loaded scene {scene_path}")
        return SceneHandle(
            node=node,
            name=scene_name_from_path(scene_path),
            ownership=Ownership.OWNED,
        )
