"""Command line entry point for neurotrain evaluation runs."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Iterable

from neurotrain.calculation.errors import REGISTRY as ERROR_REGISTRY
from neurotrain.data import available_datasets
from neurotrain.training import pipelines


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(pipelines.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="synthetic-mlp",
        help="Preset configuration to execute",
    )
    parser.add_argument("--config", type=Path, help="Optional JSON/YAML config override")
    parser.add_argument(
        "--dataset",
        choices=sorted(available_datasets()),
        help="Override the dataset used by the run",
    )
    parser.add_argument("--csv-path", help="Path to a CSV file for the csv dataset")
    parser.add_argument("--target-col", help="Target column name for the csv dataset")
    parser.add_argument("--seed", type=int, help="Seed used for initialisation and splits")
    parser.add_argument(
        "--split", choices=["train", "val", "test"], help="Split evaluated by the run"
    )
    parser.add_argument(
        "--error",
        choices=["auto", *ERROR_REGISTRY.names()],
        help="Output error accumulator",
    )
    parser.add_argument("--run-dir", help="Directory receiving run artifacts")
    parser.add_argument(
        "--enable-plots", action="store_true", help="Enable plotting adapters"
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--list-datasets", action="store_true", help="List registered datasets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    parser.add_argument(
        "--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...)"
    )
    return parser.parse_args(argv)


def _merge(base: dict, override: dict) -> dict:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _merge(dict(base[key]), value)
        else:
            base[key] = value
    return base


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    if args.list_datasets:
        for name in available_datasets():
            print(name)
        raise SystemExit(0)

    config = json.loads(json.dumps(pipelines.load_preset(args.preset)))

    if args.config:
        override = dict(pipelines.load_config(args.config))
        if {"data", "network", "evaluate"} <= set(override.keys()):
            config = json.loads(json.dumps(override))
        else:
            config = _merge(config, override)

    if args.dataset:
        options: dict = {}
        if args.dataset == "csv":
            if not args.csv_path:
                raise SystemExit("--csv-path is required for the csv dataset")
            options["csv_path"] = args.csv_path
            if args.target_col:
                options["target_col"] = args.target_col
        config["data"] = {"name": args.dataset, "options": options}

    eval_cfg = config.setdefault("evaluate", {})
    if args.seed is not None:
        eval_cfg["seed"] = int(args.seed)
        config["data"].setdefault("options", {})["seed"] = int(args.seed)
    if args.split:
        eval_cfg["split"] = args.split
    if args.error:
        eval_cfg["error"] = args.error
    if args.run_dir:
        eval_cfg["run_dir"] = args.run_dir
    if args.enable_plots:
        eval_cfg["enable_plots"] = True

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2, sort_keys=True))

    result = pipelines.run_pipeline(config)
    print(json.dumps(asdict(result), sort_keys=True))


if __name__ == "__main__":  # pragma: no cover - CLI entry
    main()
