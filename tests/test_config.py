"""
Configuration Tests
===================

Tests for YAML + environment configuration loading.
"""

import json
import logging

import pytest
from pydantic import ValidationError

from ros2_image_loader.config import JsonFormatter, Settings, get_settings, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate every test from the caller's environment and working dir."""
    for name in ("CONFIG", "LOG_LEVEL", "LOG_FORMAT", "ERROR_POLICY", "NUM_ROWS_HINT"):
        monkeypatch.delenv(f"ROS2_IMAGE_LOADER_{name}", raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "loader.yaml"
    path.write_text(
        "parser:\n"
        "  timestamp_timeline: header_stamp\n"
        "  log_every_n_frames: 100\n"
        "loader:\n"
        "  error_policy: skip\n"
        "logging:\n"
        "  level: DEBUG\n"
    )
    return path


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self):
        settings = load_config()
        assert settings == Settings()
        assert settings.parser.timestamp_timeline == "timestamp"
        assert settings.loader.error_policy == "abort"
        assert settings.logging.format == "text"

    def test_yaml_file(self, config_file):
        settings = load_config(str(config_file))
        assert settings.parser.timestamp_timeline == "header_stamp"
        assert settings.parser.log_every_n_frames == 100
        assert settings.loader.error_policy == "skip"
        assert settings.logging.level == "DEBUG"

    def test_config_path_from_env(self, config_file, monkeypatch):
        monkeypatch.setenv("ROS2_IMAGE_LOADER_CONFIG", str(config_file))
        assert load_config().parser.timestamp_timeline == "header_stamp"

    def test_default_file_location(self, tmp_path):
        (tmp_path / "ros2_image_loader.yaml").write_text("loader:\n  default_num_rows: 32\n")
        assert load_config().loader.default_num_rows == 32

    def test_env_overrides_file(self, config_file, monkeypatch):
        monkeypatch.setenv("ROS2_IMAGE_LOADER_ERROR_POLICY", "abort")
        monkeypatch.setenv("ROS2_IMAGE_LOADER_NUM_ROWS_HINT", "256")
        monkeypatch.setenv("ROS2_IMAGE_LOADER_LOG_FORMAT", "json")

        settings = load_config(str(config_file))
        assert settings.loader.error_policy == "abort"
        assert settings.loader.default_num_rows == 256
        assert settings.logging.format == "json"
        assert settings.logging.level == "DEBUG"

    def test_invalid_policy_rejected(self, monkeypatch):
        monkeypatch.setenv("ROS2_IMAGE_LOADER_ERROR_POLICY", "retry")
        with pytest.raises(ValidationError):
            load_config()

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(str(path)) == Settings()


class TestGetSettings:
    """Tests for the cached settings accessor."""

    def test_cached(self):
        assert get_settings() is get_settings()


class TestJsonFormatter:
    """Tests for the json log format."""

    def test_quotes_in_message_stay_valid_json(self):
        record = logging.LogRecord(
            name="ros2_image_loader.plugins.image",
            level=logging.DEBUG,
            pathname=__file__,
            lineno=1,
            msg="last %s",
            args=("ImageFrame(encoding='rgb8', frame_id=\"cam\")\n",),
            exc_info=None,
        )
        entry = json.loads(JsonFormatter().format(record))

        assert entry["message"] == "last ImageFrame(encoding='rgb8', frame_id=\"cam\")\n"
        assert entry["level"] == "DEBUG"
        assert entry["logger"] == "ros2_image_loader.plugins.image"
