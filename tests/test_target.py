"""Tests for scenesnap.capture.target."""

import pytest

from scenesnap.capture.scene import Ownership, SceneHandle
from scenesnap.capture.target import create_render_target, release_render_target
from scenesnap.config.capture import CaptureConfig
from scenesnap.engine.base import Node, UpdateMode
from scenesnap.utils.exceptions import EngineError


class TestCreateRenderTarget:
    def test_owned_scene(self, engine, pipeline_node):
        scene = Node("Demo")
        handle = SceneHandle(node=scene, name="demo", ownership=Ownership.OWNED)

        target = create_render_target(engine, pipeline_node, handle, CaptureConfig(width=320, height=200))

        assert target.size == (320, 200)
        assert target.surface.update_mode is UpdateMode.ALWAYS
        assert target.surface.transparent_bg is False
        assert target.surface.children == [scene]
        assert target.surface.parent is pipeline_node
        assert handle.original_parent is None

    def test_borrowed_scene_is_reparented(self, engine, pipeline_node):
        running = engine.run_scene()
        handle = SceneHandle(node=running, name="main", ownership=Ownership.BORROWED)

        target = create_render_target(engine, pipeline_node, handle, CaptureConfig())

        assert handle.original_parent is engine.root
        assert running.parent is target.surface
        assert running not in engine.root.children

    def test_node_cannot_have_two_parents(self, engine):
        parent = Node("A")
        child = Node("child")
        parent.add_child(child)

        with pytest.raises(EngineError):
            Node("B").add_child(child)


class TestReleaseRenderTarget:
    def test_owned_scene_is_freed(self, engine, pipeline_node):
        scene = Node("Demo")
        handle = SceneHandle(node=scene, name="demo", ownership=Ownership.OWNED)
        target = create_render_target(engine, pipeline_node, handle, CaptureConfig(width=8, height=8))

        release_render_target(engine, target)

        assert scene.freed is True
        assert target.surface.parent is None

    def test_borrowed_scene_survives(self, engine, pipeline_node):
        running = engine.run_scene()
        handle = SceneHandle(node=running, name="main", ownership=Ownership.BORROWED)
        target = create_render_target(engine, pipeline_node, handle, CaptureConfig(width=8, height=8))

        release_render_target(engine, target)

        assert running.freed is False
        assert running.parent is None
        assert target.surface.freed is True
