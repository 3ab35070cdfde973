"""
Tests for the face-emoji-run and face-emoji-suggest command line tools.
"""

import json

import pytest

from face_emoji.cli import run as run_cli
from face_emoji.cli import suggest as suggest_cli
from face_emoji.pipeline import PipelineConfig


SMILING_FILE = {
    "bounding_box": {"x": 0.0, "y": 0.0, "width": 1.0, "height": 1.0},
    "landmarks": {
        "left_eyebrow": [[0.40, 0.36], [0.38, 0.36], [0.30, 0.36]],
        "right_eyebrow": [[0.60, 0.36], [0.62, 0.36], [0.70, 0.36]],
        "left_eye": [[0.30, 0.40], [0.40, 0.40]],
        "right_eye": [[0.60, 0.40], [0.70, 0.40]],
        "outer_lips": [[0.40, 0.66], [0.50, 0.72], [0.60, 0.66], [0.50, 0.68]],
        "inner_lips": [[0.45, 0.70], [0.55, 0.70]],
        "nose": [[0.50, 0.45], [0.50, 0.55]],
    },
}


@pytest.fixture
def landmark_file(tmp_path):
    path = tmp_path / "face.json"
    path.write_text(json.dumps(SMILING_FILE), encoding="utf-8")
    return path


class TestSuggestCli:

    def test_json_output(self, landmark_file, capsys):
        assert suggest_cli.main([str(landmark_file), "--json", "--seed", "3"]) == 0

        summary = json.loads(capsys.readouterr().out)
        assert summary["expression"] == "Happy"
        assert summary["outcome"] == "determined"
        assert summary["missing_regions"] == []
        assert 1 <= len(summary["suggestions"]) <= 3
        assert "features" not in summary

    def test_features_flag(self, landmark_file, capsys):
        suggest_cli.main([str(landmark_file), "--json", "--features"])

        summary = json.loads(capsys.readouterr().out)
        assert summary["features"]["smile_score"] == pytest.approx(0.8)

    def test_text_output(self, landmark_file, capsys):
        assert suggest_cli.main([str(landmark_file)]) == 0

        out = capsys.readouterr().out
        assert out.startswith("Expression: Happy")
        assert "1. " in out

    def test_seed_is_reproducible(self, landmark_file, capsys):
        suggest_cli.main([str(landmark_file), "--json", "--seed", "5"])
        first = capsys.readouterr().out
        suggest_cli.main([str(landmark_file), "--json", "--seed", "5"])
        assert capsys.readouterr().out == first

    def test_incomplete_file_falls_back(self, tmp_path, capsys):
        path = tmp_path / "partial.json"
        data = dict(SMILING_FILE, landmarks={"nose": [[0.5, 0.5]]})
        path.write_text(json.dumps(data), encoding="utf-8")

        suggest_cli.main([str(path), "--json"])

        summary = json.loads(capsys.readouterr().out)
        assert summary["expression"] == "Neutral"
        assert summary["confidence"] == 0.5
        assert summary["outcome"] == "fallback"
        assert "left_eyebrow" in summary["missing_regions"]

    def test_missing_file(self, tmp_path):
        assert suggest_cli.main([str(tmp_path / "missing.json")]) == 1

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[1, 2", encoding="utf-8")
        assert suggest_cli.main([str(path)]) == 1

    @pytest.mark.parametrize("data", [
        [],
        {"landmarks": {}},
        {"bounding_box": {"x": 0.0}},
        {"bounding_box": SMILING_FILE["bounding_box"], "landmarks": {"ears": [[0, 0]]}},
    ])
    def test_parse_landmark_data_rejects(self, data):
        with pytest.raises(ValueError):
            suggest_cli.parse_landmark_data(data)


class TestRunCli:

    def test_create_config(self, tmp_path, capsys):
        path = tmp_path / "face_emoji.yaml"

        assert run_cli.main(["--create-config", str(path)]) == 0
        assert path.exists()
        assert "Created default config" in capsys.readouterr().out

    def test_build_config_overrides(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"camera_id": 1, "random_seed": 4}), encoding="utf-8")

        args = run_cli.parse_args([
            "--config", str(path), "--camera", "2", "--throttle-ms", "40",
            "--show-video", "--model", "face.task",
        ])
        config = run_cli.build_config(args)

        assert config.camera_id == 2
        assert config.random_seed == 4
        assert config.throttle_interval_ms == 40.0
        assert config.show_video is True
        assert config.landmark_model_path == "face.task"

    def test_build_config_defaults(self, monkeypatch):
        monkeypatch.setattr("face_emoji.config.DEFAULT_CONFIG_PATHS", [])
        config = run_cli.build_config(run_cli.parse_args([]))
        assert config == PipelineConfig()

    def test_missing_config_file(self, tmp_path):
        assert run_cli.main(["--config", str(tmp_path / "missing.yaml")]) == 1
