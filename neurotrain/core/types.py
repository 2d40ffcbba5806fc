"""Core typing contracts for neurotrain."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Set

import numpy as np

Array = np.ndarray


@dataclass(frozen=True)
class Example:
    """A single labelled example (or mini-batch of examples).

    ``inputs`` is handed to the network's input layer without copying, so
    providers must produce fresh arrays per call.
    """

    inputs: Array
    targets: Array


@dataclass(frozen=True, eq=False)
class Layer:
    """A node of the computation graph.

    Layers compare and hash by identity: two layers with the same name are
    still distinct nodes.
    """

    name: str
    size: int
    activation: str = "identity"

    def __post_init__(self) -> None:
        if self.size <= 0:
            raise ValueError(f"Layer {self.name!r} must have a positive size, got {self.size}")


ResultsMap = Dict[Layer, Array]
LayerSet = Set[Layer]


@dataclass(frozen=True)
class EvaluationResult:
    """Summary returned by :func:`neurotrain.training.pipelines.run_pipeline`."""

    error: float
    batches: int
    rows: int
    metrics_path: str
    manifest_path: str
    plot_path: str = ""


__all__ = ["Array", "Example", "Layer", "ResultsMap", "LayerSet", "EvaluationResult"]
