"""Tests for scenesnap.capture.guard."""

from scenesnap.capture.guard import guard, is_capture_requested


class TestGuard:
    def test_flag_present(self, engine, pipeline_node):
        assert guard(["--screenshot"], engine, pipeline_node) is True
        assert pipeline_node.parent is engine.root

    def test_flag_absent_removes_pipeline(self, engine, pipeline_node):
        assert guard(["--fullscreen"], engine, pipeline_node) is False
        assert pipeline_node.parent is None
        assert pipeline_node in engine.freed

    def test_custom_flag(self):
        assert is_capture_requested(["--snap"], flag="--snap") is True
        assert is_capture_requested(["--screenshot"], flag="--snap") is False

    def test_flag_must_match_exactly(self):
        assert is_capture_requested(["--screenshots"]) is False
