"""Layer calculators populate a results map up to a requested layer."""

from __future__ import annotations

import logging
from typing import Protocol, Set

import numpy as np

from ..core.activations import get_inplace
from ..core.architecture import NeuralNetwork
from ..core.types import Array, Layer, LayerSet, ResultsMap

logger = logging.getLogger(__name__)


class LayerCalculator(Protocol):
    """Protocol implemented by forward-computation engines."""

    def calculate(self, calculated: LayerSet, results: ResultsMap, layer: Layer) -> None:
        """Fill ``results[layer]`` and everything it depends on.

        ``calculated`` holds the layers whose values in ``results`` are already
        valid for the current example; implementations add every layer they
        compute to it.
        """


class FeedForwardLayerCalculator:
    """Depth-first calculator for acyclic layer graphs.

    Result buffers already present in ``results`` are reused when their shape
    matches and are assumed to be zero-filled; connections accumulate into
    them before the layer activation is applied in place.
    """

    def __init__(self, network: NeuralNetwork) -> None:
        self.network = network

    def calculate(self, calculated: LayerSet, results: ResultsMap, layer: Layer) -> None:
        self._calculate(calculated, results, layer, set())

    def _calculate(
        self,
        calculated: LayerSet,
        results: ResultsMap,
        layer: Layer,
        in_progress: Set[Layer],
    ) -> None:
        if layer in calculated:
            return
        if layer in in_progress:
            raise ValueError(f"Cycle detected at layer {layer.name!r}")

        inbound = self.network.inbound(layer)
        sources = [src for connection in inbound for src in connection.sources]
        if not sources:
            raise ValueError(
                f"Layer {layer.name!r} has no input connections and no precomputed value"
            )

        in_progress.add(layer)
        for source in sources:
            self._calculate(calculated, results, source, in_progress)
        in_progress.discard(layer)

        out = self._buffer(results, layer, results[sources[0]])
        for connection in inbound:
            connection.accumulate(results, out)
        get_inplace(layer.activation)(out)
        calculated.add(layer)
        logger.debug("Calculated layer %s with shape %s", layer.name, out.shape)

    @staticmethod
    def _buffer(results: ResultsMap, layer: Layer, reference: Array) -> Array:
        shape = reference.shape[:-1] + (layer.size,)
        dtype = np.result_type(reference.dtype, np.float32)
        current = results.get(layer)
        if current is not None and current.shape == shape and current.dtype == dtype:
            return current
        buffer = np.zeros(shape, dtype=dtype)
        results[layer] = buffer
        return buffer


__all__ = ["LayerCalculator", "FeedForwardLayerCalculator"]
