import json
from pathlib import Path

import pytest

from cli.main import main


def test_cli_basic_preset(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    main(["--preset", "synthetic-mlp"])
    run_dir = Path("runs/synthetic-mlp")
    assert (run_dir / "metrics.jsonl").exists()
    assert (run_dir / "manifest.json").exists()
    payload = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert payload["rows"] >= payload["batches"] > 0


def test_cli_overrides_and_dump_config(tmp_path, capsys):
    dump = tmp_path / "resolved.json"
    main(
        [
            "--preset",
            "iris-mlp",
            "--split",
            "val",
            "--error",
            "mse",
            "--seed",
            "5",
            "--run-dir",
            str(tmp_path / "run"),
            "--dump-config",
            str(dump),
        ]
    )
    resolved = json.loads(dump.read_text())
    assert resolved["evaluate"]["split"] == "val"
    assert resolved["evaluate"]["error"] == "mse"
    assert resolved["data"]["options"]["seed"] == 5
    assert (tmp_path / "run" / "result.json").exists()


def test_cli_lists_presets(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--list-presets"])
    assert exc.value.code == 0
    assert "iris-mlp" in capsys.readouterr().out.split()
