"""Pipeline assembly: build a trainer from a nested config and evaluate it."""

from __future__ import annotations

import json
import logging
import time
from copy import deepcopy
from pathlib import Path
from typing import Dict, List, Mapping

from ..calculation.calculator import FeedForwardLayerCalculator
from ..calculation.errors import REGISTRY as ERROR_REGISTRY
from ..core.architecture import NeuralNetwork, build_mlp
from ..core.initializers import build_initializer
from ..core.types import EvaluationResult
from ..data import DatasetSpec, get_dataset
from ..reporting.artifacts import write_manifest
from ..reporting.console import LoggingListener
from ..reporting.metrics import CsvSink, JsonlSink
from ..reporting.plots import PlotAdapter
from .config import TrainerConfig
from .trainer import Trainer

logger = logging.getLogger(__name__)

_PRESETS: Dict[str, Mapping[str, object]] = {
    "synthetic-mlp": {
        "data": {"name": "synthetic", "options": {"freq": 2, "n_points": 64, "seed": 0}},
        "network": {"hidden": [8], "activation": "tanh", "output_activation": "identity"},
        "initializer": {"name": "normal", "options": {"std": 0.1}},
        "evaluate": {
            "split": "test",
            "batch_size": 1,
            "error": "auto",
            "seed": 7,
            "run_dir": "runs/synthetic-mlp",
            "enable_plots": False,
        },
    },
    "iris-mlp": {
        "data": {"name": "iris", "options": {"seed": 0}},
        "network": {"hidden": [16], "activation": "relu", "output_activation": "softmax"},
        "initializer": {"name": "uniform", "options": {"low": -0.5, "high": 0.5}},
        "evaluate": {
            "split": "test",
            "batch_size": 4,
            "error": "auto",
            "seed": 1,
            "run_dir": "runs/iris-mlp",
            "enable_plots": False,
        },
    },
    "iris-deep": {
        "data": {"name": "iris", "options": {"seed": 0}},
        "network": {"hidden": [16, 16], "activation": "tanh", "output_activation": "softmax"},
        "initializer": {"name": "normal", "options": {"std": 0.2}},
        "evaluate": {
            "split": "val",
            "batch_size": 1,
            "error": "mse",
            "seed": 3,
            "run_dir": "runs/iris-deep",
            "enable_plots": False,
        },
    },
}

_REQUIRED_SECTIONS = {"data", "network", "evaluate"}


def _read_config_file(path: Path) -> Mapping[str, object]:
    text = path.read_text()
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        try:
            import yaml  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load YAML configs") from exc
        data = yaml.safe_load(text) or {}
    elif suffix == ".json":
        data = json.loads(text or "{}")
    else:
        raise ValueError(f"Unsupported config file type: {path.suffix}")

    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    return data


def load_config(path: str | Path) -> Mapping[str, object]:
    return _read_config_file(Path(path))


def presets() -> Mapping[str, Mapping[str, object]]:
    return {name: deepcopy(cfg) for name, cfg in _PRESETS.items()}


def load_preset(name: str) -> Mapping[str, object]:
    try:
        return deepcopy(_PRESETS[name])
    except KeyError as exc:
        raise KeyError(f"Unknown preset: {name}") from exc


def build_network(network_cfg: Mapping[str, object], dataset: DatasetSpec) -> NeuralNetwork:
    dims: List[int] = [dataset.data_spec.d_in]
    dims.extend(int(h) for h in network_cfg.get("hidden", []))  # type: ignore[union-attr]
    dims.append(dataset.data_spec.d_out)
    return build_mlp(
        dims,
        activation=str(network_cfg.get("activation", "relu")),
        output_activation=str(network_cfg.get("output_activation", "identity")),
        bias=bool(network_cfg.get("bias", True)),
    )


def _resolve_error_name(name: str, task_type: str) -> str:
    if name != "auto":
        return name
    if task_type == "regression":
        return "mae"
    if task_type == "multiclass":
        return "classification"
    raise ValueError(f"Unknown task type: {task_type}")


def build_trainer(config: Mapping[str, object]) -> tuple[Trainer, DatasetSpec]:
    """Wire every configured collaborator into a :class:`Trainer`."""

    missing = _REQUIRED_SECTIONS - set(config)
    if missing:
        raise KeyError(f"Config is missing required sections: {', '.join(sorted(missing))}")

    data_cfg = dict(config["data"])  # type: ignore[arg-type]
    network_cfg = dict(config["network"])  # type: ignore[arg-type]
    eval_cfg = dict(config["evaluate"])  # type: ignore[arg-type]
    init_cfg = config.get("initializer")

    dataset = get_dataset(str(data_cfg["name"]), **dict(data_cfg.get("options", {})))
    network = build_network(network_cfg, dataset)

    seed = int(eval_cfg.get("seed", 0))
    batch_size = int(eval_cfg.get("batch_size", 1))
    split = str(eval_cfg.get("split", "test"))
    error_name = _resolve_error_name(str(eval_cfg.get("error", "auto")), dataset.data_spec.task_type)

    initializer = None
    if init_cfg:
        init_name = str(init_cfg["name"])  # type: ignore[index]
        options = dict(init_cfg.get("options", {}))  # type: ignore[union-attr]
        if init_name != "constant":
            options.setdefault("seed", seed)
        initializer = build_initializer(init_name, **options)

    trainer_config = TrainerConfig(
        network=network,
        training_input_provider=dataset.provider("train", batch_size, shuffle=True, seed=seed),
        testing_input_provider=dataset.provider(split, batch_size),
        output_error=ERROR_REGISTRY.create(error_name),
        layer_calculator=FeedForwardLayerCalculator(network),
        random_initializer=initializer,
    )
    return Trainer(trainer_config), dataset


def run_pipeline(config: Mapping[str, object]) -> EvaluationResult:
    """Initialise and evaluate the network described by ``config``."""

    trainer, dataset = build_trainer(config)
    eval_cfg = dict(config["evaluate"])  # type: ignore[arg-type]
    seed = int(eval_cfg.get("seed", 0))
    split = str(eval_cfg.get("split", "test"))
    run_dir = _resolve_run_dir(eval_cfg, dataset.name)
    run_dir.mkdir(parents=True, exist_ok=True)

    jsonl = JsonlSink(run_dir / "metrics.jsonl", split=split, seed=seed)
    csv_sink = CsvSink(run_dir / "metrics.csv", split=split)
    plots = PlotAdapter(run_dir, enable_plots=bool(eval_cfg.get("enable_plots", False)))
    for listener in (LoggingListener(), jsonl, csv_sink, plots):
        trainer.add_event_listener(listener)

    network = trainer.network
    logger.info(
        "Running %s on %s split %r with %d parameters",
        type(trainer).__name__,
        dataset.name,
        split,
        network.parameter_count() if network is not None else 0,
    )

    trainer.train()
    batches = trainer.testing_input_provider.input_size  # type: ignore[union-attr]
    rows = dataset.split_sizes()[split]
    error = trainer.evaluate()
    plot_path = plots.close()

    manifest = write_manifest(
        run_dir / "manifest.json",
        config=json.loads(json.dumps(config)),
        dataset_provenance=dataset.provenance,
        network=_describe_network(network),
    )
    summary = {"error": error, "batches": batches, "rows": rows}
    (run_dir / "result.json").write_text(json.dumps(summary, indent=2))

    return EvaluationResult(
        error=float(error),
        batches=int(batches),
        rows=int(rows),
        metrics_path=str(jsonl.path),
        manifest_path=manifest,
        plot_path=str(plot_path or ""),
    )


def _resolve_run_dir(eval_cfg: Mapping[str, object], dataset: str) -> Path:
    if "run_dir" in eval_cfg:
        return Path(str(eval_cfg["run_dir"]))
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp / dataset


def _describe_network(network: NeuralNetwork | None) -> Mapping[str, object]:
    if network is None:
        return {}
    return {
        "layers": [
            {"name": layer.name, "size": layer.size, "activation": layer.activation}
            for layer in network.layers
        ],
        "connections": [repr(connection) for connection in network.connections],
        "parameters": network.parameter_count(),
    }


__all__ = [
    "build_network",
    "build_trainer",
    "load_config",
    "load_preset",
    "presets",
    "run_pipeline",
]
