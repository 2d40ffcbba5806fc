"""Output error accumulators used to score a test pass."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Protocol

import numpy as np

from ..core.types import Array


class OutputError(Protocol):
    """Protocol implemented by error accumulators."""

    def add_sample(self, predicted: Array, target: Array) -> None:
        """Record one (prediction, target) pair."""

    def total_error(self) -> float:
        """Return the aggregate error over every recorded sample."""


def _check_shapes(predicted: Array, target: Array) -> None:
    if predicted.shape != target.shape:
        raise ValueError(
            f"Prediction shape {predicted.shape} does not match target shape {target.shape}"
        )


class MeanAbsoluteError:
    """Mean of ``|predicted - target|`` over all recorded elements."""

    name = "mae"

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._sum = 0.0
        self._count = 0

    def add_sample(self, predicted: Array, target: Array) -> None:
        _check_shapes(predicted, target)
        self._sum += float(np.sum(np.abs(predicted - target)))
        self._count += int(np.size(target))

    def total_error(self) -> float:
        return self._sum / self._count if self._count else 0.0


class MeanSquaredError(MeanAbsoluteError):
    """Mean of ``(predicted - target) ** 2`` over all recorded elements."""

    name = "mse"

    def add_sample(self, predicted: Array, target: Array) -> None:
        _check_shapes(predicted, target)
        self._sum += float(np.sum(np.square(predicted - target)))
        self._count += int(np.size(target))


class ClassificationError:
    """Fraction of rows whose argmax prediction differs from the target's."""

    name = "classification"

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._wrong = 0
        self._total = 0

    def add_sample(self, predicted: Array, target: Array) -> None:
        _check_shapes(predicted, target)
        width = predicted.shape[-1] if predicted.ndim else 1
        pred_idx = np.argmax(predicted.reshape(-1, width), axis=1)
        targ_idx = np.argmax(target.reshape(-1, width), axis=1)
        self._wrong += int(np.sum(pred_idx != targ_idx))
        self._total += int(pred_idx.size)

    def total_error(self) -> float:
        return self._wrong / self._total if self._total else 0.0


@dataclass(frozen=True)
class ErrorFactory:
    name: str
    factory: Callable[[], OutputError]

    def __call__(self) -> OutputError:
        return self.factory()


class ErrorRegistry:
    """Central registry for output error accumulators."""

    def __init__(self) -> None:
        self._registry: Dict[str, ErrorFactory] = {}

    def register(self, name: str, factory: Callable[[], OutputError]) -> None:
        self._registry[name] = ErrorFactory(name, factory)

    def names(self) -> Iterable[str]:
        return sorted(self._registry)

    def create(self, name: str) -> OutputError:
        key = name.lower()
        if key not in self._registry:
            available = ", ".join(sorted(self._registry))
            raise KeyError(f"Unknown output error {name!r}. Available errors: {available}")
        return self._registry[key]()


REGISTRY = ErrorRegistry()
REGISTRY.register("mae", MeanAbsoluteError)
REGISTRY.register("mse", MeanSquaredError)
REGISTRY.register("classification", ClassificationError)

__all__ = [
    "OutputError",
    "MeanAbsoluteError",
    "MeanSquaredError",
    "ClassificationError",
    "ErrorRegistry",
    "REGISTRY",
]
