"""Iris classification dataset bundled with scikit-learn."""

from __future__ import annotations

import numpy as np
from sklearn.datasets import load_iris

from .registry import (
    DatasetSpec,
    DataSpec,
    one_hot,
    partition_rows,
    register_dataset,
    scale_features,
)


@register_dataset("iris")
def build_iris_dataset(
    *,
    seed: int = 0,
    val_split: float = 0.1,
    test_split: float = 0.2,
    standardize_inputs: bool = True,
) -> DatasetSpec:
    """Return the 150-sample iris dataset with one-hot targets."""

    bunch = load_iris()
    X = bunch.data.astype(np.float32)
    labels = bunch.target.astype(int)
    num_classes = len(bunch.target_names)

    normalization: dict[str, dict[str, list[float]]] = {}
    if standardize_inputs:
        X, normalization["inputs"] = scale_features(X)

    partitions = partition_rows(X.shape[0], val_split=val_split, test_split=test_split, seed=seed)
    data_spec = DataSpec(
        d_in=int(X.shape[1]),
        d_out=num_classes,
        task_type="multiclass",
        num_classes=num_classes,
        normalization=normalization,
    )
    provenance = {
        "source": "sklearn.datasets.load_iris",
        "classes": [str(name) for name in bunch.target_names],
        "seed": seed,
        "val_split": val_split,
        "test_split": test_split,
        "standardize_inputs": standardize_inputs,
    }
    return DatasetSpec(
        name="iris",
        features=X,
        targets=one_hot(labels, num_classes),
        partitions=partitions,
        data_spec=data_spec,
        provenance=provenance,
    )


__all__ = ["build_iris_dataset"]
