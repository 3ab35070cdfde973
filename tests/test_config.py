"""
Tests for configuration loading and saving.
"""

import json

import pytest

from face_emoji import config as config_module
from face_emoji.config import create_default_config, load_config, save_config
from face_emoji.pipeline import PipelineConfig


class TestLoadConfig:

    def test_yaml_round_trip(self, tmp_path):
        path = tmp_path / "config.yaml"
        original = PipelineConfig(camera_id=2, throttle_interval_ms=50.0, random_seed=9)

        save_config(original, path)

        assert load_config(path) == original

    def test_json_round_trip(self, tmp_path):
        path = tmp_path / "config.json"
        original = PipelineConfig(landmark_model_path="models/face.task", show_video=True)

        save_config(original, path)

        assert json.loads(path.read_text(encoding="utf-8"))["show_video"] is True
        assert load_config(path) == original

    def test_explicit_format_overrides_extension(self, tmp_path):
        path = tmp_path / "config.cfg"
        save_config(PipelineConfig(camera_id=3), path, format="json")
        assert json.loads(path.read_text(encoding="utf-8"))["camera_id"] == 3

    def test_partial_file_uses_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("camera_id: 1\n", encoding="utf-8")

        config = load_config(path)

        assert config.camera_id == 1
        assert config.throttle_interval_ms == 100.0
        assert config.random_seed is None

    def test_empty_yaml_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == PipelineConfig()

    def test_missing_explicit_path_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(path)

    def test_invalid_yaml_raises(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("camera_id: [1, 2\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(path)

    def test_non_mapping_raises(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(path)

    def test_bad_value_raises(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"camera_id": "front"}), encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(path)

    def test_default_search(self, tmp_path, monkeypatch):
        first = tmp_path / "missing.yaml"
        second = tmp_path / "found.json"
        second.write_text(json.dumps({"frame_width": 1280}), encoding="utf-8")
        monkeypatch.setattr(config_module, "DEFAULT_CONFIG_PATHS", [first, second])

        assert load_config().frame_width == 1280

    def test_no_config_found_gives_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config_module, "DEFAULT_CONFIG_PATHS", [tmp_path / "a.yaml"])
        assert load_config() == PipelineConfig()


class TestCreateDefaultConfig:

    @pytest.mark.parametrize("name", ["face_emoji.yaml", "face_emoji.json"])
    def test_default_file_loads_as_defaults(self, tmp_path, name):
        path = tmp_path / "nested" / name
        create_default_config(path)

        assert path.exists()
        assert load_config(path) == PipelineConfig()

    def test_yaml_has_comments(self, tmp_path):
        path = tmp_path / "face_emoji.yaml"
        create_default_config(path)
        assert path.read_text(encoding="utf-8").startswith("# Face Emoji Configuration")
