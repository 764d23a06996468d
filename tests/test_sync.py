"""Tests for scenesnap.capture.sync."""

from unittest import mock

from scenesnap.capture.scene import Ownership, SceneHandle
from scenesnap.capture.sync import FrameSynchronizer
from scenesnap.capture.target import create_render_target
from scenesnap.config.capture import CaptureConfig
from scenesnap.engine.base import Node, UpdateMode


def _target(engine, pipeline_node):
    handle = SceneHandle(node=Node("Demo"), name="demo", ownership=Ownership.OWNED)
    return create_render_target(engine, pipeline_node, handle, CaptureConfig(width=16, height=9))


class TestFrameSynchronizer:
    def test_protocol_with_delay(self, engine, scheduler, pipeline_node):
        target = _target(engine, pipeline_node)

        FrameSynchronizer(engine, scheduler).synchronize(target, 1.5)

        assert scheduler.calls == [
            ("ticks", 2),
            ("drawn",),
            ("timer", 1.5),
            ("ticks", 2),
            ("drawn",),
        ]

    def test_zero_delay_skips_timer(self, engine, scheduler, pipeline_node):
        target = _target(engine, pipeline_node)

        FrameSynchronizer(engine, scheduler).synchronize(target, 0.0)

        assert ("timer", 0.0) not in scheduler.calls
        assert scheduler.calls == [("ticks", 2), ("drawn",), ("ticks", 2), ("drawn",)]

    def test_switches_to_update_once(self, engine, scheduler, pipeline_node):
        target = _target(engine, pipeline_node)
        modes = []
        original = scheduler.wait_frame_drawn

        def record_mode():
            modes.append(target.surface.update_mode)
            original()

        scheduler.wait_frame_drawn = record_mode

        FrameSynchronizer(engine, scheduler).synchronize(target, 0)

        assert modes == [UpdateMode.ALWAYS, UpdateMode.ONCE]
        assert target.surface.image is not None
        assert target.surface.update_mode is UpdateMode.DISABLED

    def test_update_mode_changes_through_engine(self, engine, scheduler, pipeline_node):
        target = _target(engine, pipeline_node)

        with mock.patch.object(engine, "set_update_mode", wraps=engine.set_update_mode) as spy:
            FrameSynchronizer(engine, scheduler).synchronize(target, 0)

        spy.assert_called_once_with(target.surface, UpdateMode.ONCE)
