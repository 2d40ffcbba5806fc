"""Generic CSV loader for regression and classification tasks."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
from sklearn.preprocessing import LabelEncoder

from .registry import (
    DatasetSpec,
    DataSpec,
    one_hot,
    partition_rows,
    register_dataset,
    scale_features,
)


def _load_csv(path: Path, target_col: str) -> tuple[np.ndarray, np.ndarray]:
    df = pd.read_csv(path)
    if target_col not in df.columns:
        raise KeyError(f"Target column {target_col!r} not found in CSV")
    y = df.pop(target_col).to_numpy()
    X = df.to_numpy(dtype=np.float32)
    return X, y


@register_dataset("csv")
def load_csv_dataset(
    *,
    csv_path: str | Path,
    target_col: str = "target",
    task_type: str = "regression",
    val_split: float = 0.1,
    test_split: float = 0.2,
    seed: int = 0,
    standardize_inputs: bool = True,
) -> DatasetSpec:
    """Load a dataset from a CSV file with one target column."""

    path = Path(csv_path)
    X, y_raw = _load_csv(path, target_col)

    normalization: dict[str, dict[str, list[float]]] = {}
    if standardize_inputs:
        X, normalization["inputs"] = scale_features(X)

    provenance: dict[str, object] = {
        "path": str(path),
        "target_col": target_col,
        "seed": seed,
        "val_split": val_split,
        "test_split": test_split,
        "standardize_inputs": standardize_inputs,
    }

    if task_type == "regression":
        y = np.asarray(y_raw, dtype=np.float32).reshape(-1, 1)
        data_spec = DataSpec(
            d_in=int(X.shape[1]),
            d_out=1,
            task_type="regression",
            normalization=normalization,
        )
    elif task_type == "multiclass":
        encoder = LabelEncoder()
        y_encoded = encoder.fit_transform(y_raw)
        num_classes = int(np.max(y_encoded)) + 1
        y = one_hot(y_encoded, num_classes)
        data_spec = DataSpec(
            d_in=int(X.shape[1]),
            d_out=num_classes,
            task_type="multiclass",
            num_classes=num_classes,
            normalization=normalization,
        )
        provenance["classes"] = [str(c) for c in encoder.classes_.tolist()]
    else:
        raise ValueError(f"Unsupported task type for CSV datasets: {task_type}")

    partitions = partition_rows(X.shape[0], val_split=val_split, test_split=test_split, seed=seed)
    return DatasetSpec(
        name="csv",
        features=X,
        targets=y,
        partitions=partitions,
        data_spec=data_spec,
        provenance=provenance,
    )


__all__ = ["load_csv_dataset"]
