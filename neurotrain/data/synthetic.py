"""Pure in-memory synthetic datasets."""

from __future__ import annotations

import numpy as np

from .registry import DatasetSpec, DataSpec, partition_rows, register_dataset


def _make_dataset(freq: int, n_points: int, seed: int) -> tuple[np.ndarray, np.ndarray]:
    rng = np.random.default_rng(seed)
    x = np.linspace(-1.0, 1.0, n_points, dtype=np.float32).reshape(-1, 1)
    y_true = np.sin(freq * np.pi * x)
    noise = 0.05 * rng.standard_normal(size=y_true.shape)
    y = (y_true + noise).astype(np.float32)
    return x, y


@register_dataset("synthetic")
def build_synthetic_dataset(
    *,
    freq: int = 3,
    n_points: int = 128,
    seed: int = 0,
    val_split: float = 0.1,
    test_split: float = 0.2,
) -> DatasetSpec:
    """Noisy ``sin(freq * pi * x)`` regression on ``[-1, 1]``."""

    x, y = _make_dataset(freq=freq, n_points=n_points, seed=seed)
    partitions = partition_rows(x.shape[0], val_split=val_split, test_split=test_split, seed=seed)
    provenance = {
        "type": "synthetic",
        "freq": freq,
        "n_points": n_points,
        "seed": seed,
        "val_split": val_split,
        "test_split": test_split,
    }
    return DatasetSpec(
        name="synthetic",
        features=x,
        targets=y,
        partitions=partitions,
        data_spec=DataSpec(d_in=1, d_out=1, task_type="regression"),
        provenance=provenance,
    )


__all__ = ["build_synthetic_dataset"]
