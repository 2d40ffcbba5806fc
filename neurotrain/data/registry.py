"""Dataset registry and metadata contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Mapping, MutableMapping

import numpy as np
from sklearn.preprocessing import StandardScaler

from ..training.inputs import ArrayInputProvider

TASK_TYPES = frozenset({"regression", "multiclass"})
SPLITS = ("train", "val", "test")


@dataclass(frozen=True)
class DataSpec:
    """Structural information about a dataset.

    Attributes
    ----------
    d_in:
        Flattened dimensionality of the network inputs.
    d_out:
        Dimensionality of the targets as consumed by the network.
    task_type:
        One of ``{"regression", "multiclass"}``.
    num_classes:
        Number of classes when ``task_type`` is ``"multiclass"``.
    normalization:
        Metadata describing scaling applied to inputs or targets, recorded so
        runs stay reproducible.
    """

    d_in: int
    d_out: int
    task_type: str
    num_classes: int | None = None
    normalization: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DatasetSpec:
    """An in-memory dataset; ``partitions`` maps each split name to its row indices."""

    name: str
    features: np.ndarray
    targets: np.ndarray
    partitions: Mapping[str, np.ndarray]
    data_spec: DataSpec
    provenance: Dict[str, Any]

    def provider(
        self,
        split: str,
        batch_size: int = 1,
        *,
        shuffle: bool = False,
        seed: int = 0,
    ) -> ArrayInputProvider:
        """Return an input provider over ``split``."""

        if split not in self.partitions:
            raise ValueError(f"Unknown split: {split}")
        indices = self.partitions[split]
        if indices.size == 0:
            raise ValueError(f"Split {split!r} of dataset {self.name!r} is empty")
        return ArrayInputProvider(
            self.features[indices],
            self.targets[indices],
            batch_size=batch_size,
            shuffle=shuffle,
            seed=seed,
        )

    def split_sizes(self) -> Dict[str, int]:
        return {name: int(rows.size) for name, rows in self.partitions.items()}


def partition_rows(
    n_rows: int,
    *,
    val_split: float = 0.1,
    test_split: float = 0.2,
    seed: int = 0,
) -> Dict[str, np.ndarray]:
    """Shuffle ``n_rows`` row indices with ``seed`` and cut them into named splits.

    A non-zero fraction always yields at least one row; whatever is left over
    goes to ``train``, which must not end up empty.
    """

    test_rows = _rows_for(n_rows, test_split)
    val_rows = _rows_for(n_rows, val_split)
    if test_rows + val_rows >= n_rows:
        raise ValueError(
            f"{n_rows} rows cannot hold val_split={val_split} and test_split={test_split}"
        )
    order = np.random.default_rng(seed).permutation(n_rows)
    held_out = test_rows + val_rows
    return {
        "train": order[held_out:],
        "val": order[test_rows:held_out],
        "test": order[:test_rows],
    }


def _rows_for(n_rows: int, fraction: float) -> int:
    if not 0 <= fraction < 1:
        raise ValueError(f"Split fractions must lie in [0, 1), got {fraction}")
    if fraction == 0:
        return 0
    return max(1, int(round(n_rows * fraction)))


def scale_features(features: np.ndarray) -> tuple[np.ndarray, Dict[str, list[float]]]:
    """Standardise columns to zero mean and unit variance.

    Returns the scaled float32 features and the fitted ``mean``/``std`` so the
    transform can be recorded in :attr:`DataSpec.normalization`.
    """

    scaler = StandardScaler().fit(features)
    scaled = scaler.transform(features).astype(np.float32)
    return scaled, {"mean": scaler.mean_.tolist(), "std": scaler.scale_.tolist()}


def one_hot(codes: np.ndarray, num_classes: int) -> np.ndarray:
    return np.eye(num_classes, dtype=np.float32)[np.asarray(codes, dtype=int).reshape(-1)]


DatasetFactory = Callable[..., DatasetSpec]


_REGISTRY: MutableMapping[str, DatasetFactory] = {}


def register_dataset(
    name: str | None = None,
    factory: DatasetFactory | None = None,
) -> Callable[[DatasetFactory], DatasetFactory] | DatasetFactory:
    """Register a dataset factory.

    ``register_dataset`` can be used both as a decorator::

        @register_dataset("iris")
        def make_iris(**kwargs):
            ...

    or directly::

        register_dataset("iris", make_iris)
    """

    def _decorator(func: DatasetFactory) -> DatasetFactory:
        _REGISTRY[str(name or func.__name__)] = func
        return func

    if factory is not None:
        return _decorator(factory)
    return _decorator


def get_dataset(dataset: str, /, **options: Any) -> DatasetSpec:
    """Return the :class:`DatasetSpec` for ``dataset``."""

    if dataset not in _REGISTRY:
        available = ", ".join(sorted(_REGISTRY))
        raise KeyError(f"Unknown dataset {dataset!r}. Available datasets: {available}")
    spec = _REGISTRY[dataset](**options)
    _validate_spec(spec)
    return spec


def available_datasets() -> Iterable[str]:
    """Return the sorted list of available dataset identifiers."""

    return sorted(_REGISTRY)


def _validate_spec(spec: DatasetSpec) -> None:
    if spec.data_spec.task_type not in TASK_TYPES:
        raise ValueError(f"Invalid task type: {spec.data_spec.task_type}")
    if spec.data_spec.task_type == "multiclass" and spec.data_spec.num_classes is None:
        raise ValueError("Multiclass datasets must define num_classes")
    if spec.features.shape[0] != spec.targets.shape[0]:
        raise ValueError(f"Dataset {spec.name!r} has mismatched features and targets")
    if set(spec.partitions) != set(SPLITS):
        raise ValueError(f"Dataset {spec.name!r} must define the splits {', '.join(SPLITS)}")


__all__ = [
    "DataSpec",
    "DatasetSpec",
    "SPLITS",
    "available_datasets",
    "get_dataset",
    "one_hot",
    "partition_rows",
    "register_dataset",
    "scale_features",
]
