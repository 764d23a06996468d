"""Engine collaborator interface: scene graph nodes, engine and scheduler."""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional

import numpy as np

from ..utils.exceptions import EngineError

logger = logging.getLogger(__name__)


class Node:
    """A node in the engine's scene tree."""

    def __init__(self, name: str):
        self.name = name
        self.parent: Optional["Node"] = None
        self.children: List["Node"] = []
        self.freed = False

    def add_child(self, child: "Node") -> None:
        """
        Attach a child node.

        Args:
            child: Node without a parent.

        Raises:
            EngineError: If the child already has a parent or was freed.
        """
        if child.freed:
            raise EngineError(f"Cannot attach freed node '{child.name}'")
        if child.parent is not None:
            raise EngineError(
                f"Node '{child.name}' already has parent '{child.parent.name}'"
            )
        child.parent = self
        self.children.append(child)

    def remove_child(self, child: "Node") -> None:
        """Detach a direct child node."""
        if child.parent is not self:
            raise EngineError(f"Node '{child.name}' is not a child of '{self.name}'")
        self.children.remove(child)
        child.parent = None

    def walk(self):
        """Yield this node and all descendants depth-first."""
        yield self
        for child in list(self.children):
            yield from child.walk()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class UpdateMode(Enum):
    """When an offscreen surface re-renders its content."""

    DISABLED = "disabled"
    ONCE = "once"
    ALWAYS = "always"


class OffscreenSurface(Node):
    """Render surface that is never shown on the primary display."""

    def __init__(self, width: int, height: int, name: str = "OffscreenSurface"):
        super().__init__(name)
        if width <= 0 or height <= 0:
            raise EngineError(f"Invalid surface size {width}x{height}")
        self.size = (width, height)
        self.update_mode = UpdateMode.ALWAYS
        self.transparent_bg = False
        self.image: Optional[np.ndarray] = None

    @property
    def width(self) -> int:
        return self.size[0]

    @property
    def height(self) -> int:
        return self.size[1]


class Engine(ABC):
    """Rendering engine primitives the capture pipeline depends on."""

    @property
    @abstractmethod
    def root(self) -> Node:
        """Root of the running scene tree."""
        pass

    @property
    @abstractmethod
    def current_scene(self) -> Optional[Node]:
        """The scene the host application is running, if any."""
        pass

    @abstractmethod
    def load_scene(self, path: str) -> Optional[Node]:
        """
        Load and instantiate a scene resource.

        Args:
            path: Resource path, e.g. 'res://demo.tscn'.

        Returns:
            A fresh scene node, or None if the resource cannot be resolved.
        """
        pass

    @abstractmethod
    def create_offscreen_surface(self, width: int, height: int) -> OffscreenSurface:
        """Allocate an offscreen surface of exactly width x height pixels."""
        pass

    @abstractmethod
    def read_pixels(self, surface: OffscreenSurface) -> Optional[np.ndarray]:
        """Return the surface's last rendered RGB buffer, or None if unavailable."""
        pass

    @abstractmethod
    def encode_png(self, pixels: np.ndarray) -> bytes:
        """Encode an RGB buffer as PNG bytes."""
        pass

    def attach(self, parent: Node, node: Node) -> None:
        """Attach node under parent."""
        parent.add_child(node)

    def detach(self, node: Node) -> Optional[Node]:
        """
        Detach node from its parent.

        Returns:
            The former parent, or None if the node was not attached.
        """
        parent = node.parent
        if parent is not None:
            parent.remove_child(node)
        return parent

    def set_update_mode(self, surface: OffscreenSurface, mode: UpdateMode) -> None:
        """Change when a surface re-renders."""
        surface.update_mode = mode

    def free(self, node: Node) -> None:
        """Detach and destroy a node and its subtree."""
        self.detach(node)
        for descendant in node.walk():
            descendant.freed = True

    def quit(self, exit_code: int = 0) -> None:
        """Stop the host frame loop."""
        logger.debug(f"Engine quit requested with code {exit_code}")


class Scheduler(ABC):
    """Suspension points tied to the host's frame loop."""

    @abstractmethod
    def wait_ticks(self, count: int) -> None:
        """Block until count scheduling ticks have elapsed."""
        pass

    @abstractmethod
    def wait_frame_drawn(self) -> None:
        """Block until the renderer reports the next frame finished drawing."""
        pass

    @abstractmethod
    def wait_timer(self, seconds: float) -> None:
        """Block for a real-time duration."""
        pass
