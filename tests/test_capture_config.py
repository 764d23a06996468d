"""Tests for scenesnap.config.capture."""

import pytest

from scenesnap.config.capture import CaptureConfig, resolve_capture_config
from scenesnap.utils.exceptions import ConfigError


class TestResolveCaptureConfig:
    """Loading the capture config file."""

    def test_empty_object_fills_defaults(self, write_config):
        config = resolve_capture_config(write_config({}))

        assert config.width == 1920
        assert config.height == 1080
        assert config.delay_seconds == 0.5
        assert config.scene_path == ""
        assert config.uses_running_scene is True

    def test_all_fields(self, write_config):
        config = resolve_capture_config(
            write_config({"scene": "res://demo.tscn", "width": 800, "height": 600, "delay": 0})
        )

        assert config == CaptureConfig(
            scene_path="res://demo.tscn", width=800, height=600, delay_seconds=0.0
        )
        assert config.uses_running_scene is False

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            resolve_capture_config(tmp_path / "absent.json")

    def test_invalid_json(self, write_config):
        with pytest.raises(ConfigError, match="parsing"):
            resolve_capture_config(write_config("{not json"))

    def test_non_object_json(self, write_config):
        with pytest.raises(ConfigError, match="JSON object"):
            resolve_capture_config(write_config([1, 2, 3]))

    def test_directory_cannot_be_opened(self, tmp_path):
        directory = tmp_path / "config_dir"
        directory.mkdir()

        with pytest.raises(ConfigError):
            resolve_capture_config(directory)


class TestCaptureConfigFromDict:
    """Field coercion and validation."""

    def test_numeric_strings_are_coerced(self):
        config = CaptureConfig.from_dict({"width": "640", "height": 480.0, "delay": "0.25"})

        assert config.width == 640
        assert config.height == 480
        assert config.delay_seconds == 0.25

    def test_float_string_width_is_truncated(self):
        assert CaptureConfig.from_dict({"width": "800.0"}).width == 800

    def test_empty_scene_means_running_scene(self):
        assert CaptureConfig.from_dict({"scene": ""}).uses_running_scene is True
        assert CaptureConfig.from_dict({"scene": None}).uses_running_scene is True

    @pytest.mark.parametrize(
        "data",
        [
            {"width": "wide"},
            {"height": [600]},
            {"delay": "soon"},
            {"width": True},
            {"width": 0},
            {"height": -1},
            {"delay": -0.1},
            {"delay": float("nan")},
            {"delay": float("inf")},
            {"width": float("inf")},
            {"height": float("-inf")},
            {"width": "1e999"},
            {"width": 10 ** 400},
        ],
    )
    def test_invalid_values(self, data):
        with pytest.raises(ConfigError):
            CaptureConfig.from_dict(data)

    @pytest.mark.parametrize(
        "content",
        [
            '{"delay": NaN}',
            '{"delay": Infinity}',
            '{"width": Infinity}',
            '{"height": -Infinity}',
            '{"delay": 1e999}',
        ],
    )
    def test_non_finite_json_numbers(self, write_config, content):
        with pytest.raises(ConfigError):
            resolve_capture_config(write_config(content))

    def test_config_is_immutable(self):
        config = CaptureConfig()

        with pytest.raises(AttributeError):
            config.width = 10
