"""Layer graph: layers joined by (optionally weighted) connections."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

import numpy as np

from .activations import available_activations
from .types import Array, Layer


class Connections:
    """An edge (or edge group) feeding ``target`` from ``sources``.

    Subclasses that own learnable weights override :meth:`weight_tensor`;
    callers never need to know the concrete connection type.
    """

    def __init__(self, sources: Sequence[Layer], target: Layer) -> None:
        self.sources: Tuple[Layer, ...] = tuple(sources)
        self.target = target

    def weight_tensor(self) -> Array | None:
        """Return the owned weight array, or ``None`` for weightless edges."""

        return None

    def accumulate(self, results: Mapping[Layer, Array], out: Array) -> None:
        """Add this connection's contribution to ``target`` into ``out``."""

        raise NotImplementedError

    def __repr__(self) -> str:
        names = ", ".join(layer.name for layer in self.sources)
        return f"{type(self).__name__}([{names}] -> {self.target.name})"


class GraphConnections(Connections):
    """Fully connected edge owning a ``(target.size, source.size)`` matrix."""

    def __init__(self, source: Layer, target: Layer, weights: Array | None = None) -> None:
        super().__init__([source], target)
        shape = (target.size, source.size)
        if weights is None:
            weights = np.zeros(shape, dtype=np.float32)
        weights = np.ascontiguousarray(weights, dtype=np.float32)
        if weights.shape != shape:
            raise ValueError(
                f"Weights for {source.name}->{target.name} must have shape {shape}, "
                f"got {weights.shape}"
            )
        self.weights = weights

    @property
    def source(self) -> Layer:
        return self.sources[0]

    def weight_tensor(self) -> Array:
        return self.weights

    def accumulate(self, results: Mapping[Layer, Array], out: Array) -> None:
        out += results[self.source] @ self.weights.T


class BiasConnections(Connections):
    """Per-unit bias for ``target``; owns a ``(target.size,)`` vector."""

    def __init__(self, target: Layer, weights: Array | None = None) -> None:
        super().__init__([], target)
        if weights is None:
            weights = np.zeros(target.size, dtype=np.float32)
        weights = np.ascontiguousarray(weights, dtype=np.float32)
        if weights.shape != (target.size,):
            raise ValueError(
                f"Bias for {target.name} must have shape ({target.size},), got {weights.shape}"
            )
        self.weights = weights

    def weight_tensor(self) -> Array:
        return self.weights

    def accumulate(self, results: Mapping[Layer, Array], out: Array) -> None:
        out += self.weights


class IdentityConnections(Connections):
    """Weightless skip edge copying ``source`` into a same-sized ``target``."""

    def __init__(self, source: Layer, target: Layer) -> None:
        if source.size != target.size:
            raise ValueError(
                f"Identity connection needs equal sizes, got {source.size} and {target.size}"
            )
        super().__init__([source], target)

    def accumulate(self, results: Mapping[Layer, Array], out: Array) -> None:
        out += results[self.sources[0]]


@dataclass
class NeuralNetwork:
    """Directed acyclic graph of layers with one input and one output layer."""

    layers: List[Layer]
    connections: List[Connections]
    input_layer: Layer
    output_layer: Layer
    _inbound: Dict[Layer, List[Connections]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.layers = list(self.layers)
        for layer in (self.input_layer, self.output_layer):
            if layer not in self.layers:
                raise ValueError(f"Layer {layer.name!r} is not part of the network")
        self._inbound = {}
        connections = list(self.connections)
        self.connections = []
        for connection in connections:
            self.add_connection(connection)

    def add_connection(self, connection: Connections) -> None:
        for layer in (*connection.sources, connection.target):
            if layer not in self.layers:
                raise ValueError(f"{connection!r} references a layer outside the network")
        self.connections.append(connection)
        self._inbound.setdefault(connection.target, []).append(connection)

    def inbound(self, layer: Layer) -> List[Connections]:
        """Return the connections whose target is ``layer``."""

        return list(self._inbound.get(layer, []))

    def weighted_connections(self) -> Iterable[Connections]:
        return [c for c in self.connections if c.weight_tensor() is not None]

    def parameter_count(self) -> int:
        return int(sum(int(c.weight_tensor().size) for c in self.weighted_connections()))


def build_mlp(
    layer_dims: Sequence[int],
    *,
    activation: str = "relu",
    output_activation: str = "identity",
    bias: bool = True,
) -> NeuralNetwork:
    """Build a fully connected feed-forward network for ``layer_dims``."""

    dims = [int(d) for d in layer_dims]
    if len(dims) < 2:
        raise ValueError("layer_dims needs at least an input and an output size")
    for name in (activation, output_activation):
        if name.lower() not in available_activations():
            raise ValueError(f"Unknown activation {name!r}")

    layers: List[Layer] = [Layer("input", dims[0])]
    for idx, size in enumerate(dims[1:-1]):
        layers.append(Layer(f"hidden{idx}", size, activation))
    layers.append(Layer("output", dims[-1], output_activation))

    connections: List[Connections] = []
    for source, target in zip(layers[:-1], layers[1:]):
        connections.append(GraphConnections(source, target))
        if bias:
            connections.append(BiasConnections(target))

    return NeuralNetwork(
        layers=layers,
        connections=connections,
        input_layer=layers[0],
        output_layer=layers[-1],
    )


__all__ = [
    "Connections",
    "GraphConnections",
    "BiasConnections",
    "IdentityConnections",
    "NeuralNetwork",
    "build_mlp",
]
