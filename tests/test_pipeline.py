import json
from pathlib import Path

import pytest

from neurotrain.training import pipelines


def _config(run_dir: Path, **evaluate):
    config = pipelines.load_preset("synthetic-mlp")
    config["evaluate"].update({"run_dir": str(run_dir), **evaluate})
    return config


def test_pipeline_produces_artifacts(tmp_path):
    result = pipelines.run_pipeline(_config(tmp_path / "run"))

    assert result.batches > 0
    assert result.error > 0
    manifest = json.loads(Path(result.manifest_path).read_text())
    assert manifest["config"]["evaluate"]["seed"] == 7
    assert manifest["dataset"]["type"] == "synthetic"
    assert manifest["network"]["parameters"] == 1 * 8 + 8 + 8 * 1 + 1

    records = [
        json.loads(line)
        for line in Path(result.metrics_path).read_text().splitlines()
        if line
    ]
    assert [r["event"] for r in records] == ["sample_finished"] * result.batches + [
        "testing_finished"
    ]
    assert records[-1]["error"] == pytest.approx(result.error)
    assert records[-1]["batches"] == result.batches
    assert (tmp_path / "run" / "metrics.csv").exists()


def test_pipeline_is_deterministic(tmp_path):
    first = pipelines.run_pipeline(_config(tmp_path / "one"))
    second = pipelines.run_pipeline(_config(tmp_path / "two"))
    assert first.error == second.error


def test_iris_preset_uses_classification_error(tmp_path):
    config = pipelines.load_preset("iris-mlp")
    config["evaluate"]["run_dir"] = str(tmp_path)
    result = pipelines.run_pipeline(config)
    assert 0.0 <= result.error <= 1.0
    assert result.rows == 30
    assert result.batches == 8
    result_json = json.loads((tmp_path / "result.json").read_text())
    assert (result_json["rows"], result_json["batches"]) == (30, 8)


def test_plots_are_written_when_enabled(tmp_path):
    result = pipelines.run_pipeline(_config(tmp_path, enable_plots=True))
    assert Path(result.plot_path).exists()


def test_missing_sections_are_reported():
    with pytest.raises(KeyError, match="network"):
        pipelines.build_trainer({"data": {"name": "synthetic"}, "evaluate": {}})


def test_presets_are_copies():
    preset = pipelines.load_preset("iris-mlp")
    preset["evaluate"]["seed"] = 99
    assert pipelines.load_preset("iris-mlp")["evaluate"]["seed"] == 1
    with pytest.raises(KeyError):
        pipelines.load_preset("missing")
