"""Offscreen render target setup."""

import logging
from dataclasses import dataclass

from ..config.capture import CaptureConfig
from ..engine.base import Engine, Node, OffscreenSurface, UpdateMode
from .scene import SceneHandle

logger = logging.getLogger(__name__)


@dataclass
class RenderTarget:
    """Offscreen surface holding the captured scene as its sole content."""

    surface: OffscreenSurface
    scene: SceneHandle

    @property
    def size(self):
        return self.surface.size


def create_render_target(
    engine: Engine,
    pipeline_node: Node,
    handle: SceneHandle,
    config: CaptureConfig,
) -> RenderTarget:
    """
    Allocate the offscreen surface, attach the scene and register the surface.

    A borrowed scene is detached from its current parent first; the parent is
    recorded on the handle but never restored.

    Args:
        engine: Host engine.
        pipeline_node: The pipeline's own node in the engine tree.
        handle: Acquired scene.
        config: Resolved capture config.

    Returns:
        RenderTarget.
    """
    surface = engine.create_offscreen_surface(config.width, config.height)
    surface.update_mode = UpdateMode.ALWAYS
    surface.transparent_bg = False

    if handle.borrowed:
        handle.original_parent = engine.detach(handle.node)

    engine.attach(surface, handle.node)
    engine.attach(pipeline_node, surface)

    logger.debug(f"Render target {config.width}x{config.height} attached ({handle.ownership.value})")
    return RenderTarget(surface=surface, scene=handle)


def release_render_target(engine: Engine, target: RenderTarget) -> None:
    """
    Tear down the render target.

    Owned scenes are freed with the surface; borrowed scenes are detached and
    left alive.
    """
    if target.scene.borrowed:
        engine.detach(target.scene.node)
    engine.free(target.surface)
