import numpy as np
import pytest

from neurotrain.calculation.calculator import FeedForwardLayerCalculator
from neurotrain.core.activations import available_activations, get_inplace
from neurotrain.core.architecture import (
    BiasConnections,
    GraphConnections,
    IdentityConnections,
    NeuralNetwork,
    build_mlp,
)
from neurotrain.core.initializers import (
    ConstantInitializer,
    NormalInitializer,
    UniformInitializer,
    build_initializer,
)
from neurotrain.core.types import Layer


def _reference(name: str, x: np.ndarray) -> np.ndarray:
    if name == "relu":
        return np.maximum(x, 0.0)
    if name == "sigmoid":
        return 1.0 / (1.0 + np.exp(-x))
    exp = np.exp(x - x.max(axis=-1, keepdims=True))
    return exp / exp.sum(axis=-1, keepdims=True)


def test_inplace_activations_match_reference():
    x = np.array([[-1.0, 0.0, 2.5]], dtype=np.float64)
    for name in ("relu", "sigmoid", "softmax"):
        buf = x.copy()
        out = get_inplace(name)(buf)
        assert out is buf
        assert np.allclose(buf, _reference(name, x))
    buf = x.copy()
    get_inplace("tanh")(buf)
    assert np.allclose(buf, np.tanh(x))
    with pytest.raises(KeyError, match="relu, sigmoid, softmax, tanh"):
        get_inplace("gelu")
    assert "linear" in available_activations()


def test_build_mlp_rejects_unknown_activation():
    with pytest.raises(ValueError, match="gelu"):
        build_mlp([2, 3, 1], activation="gelu")


def test_layers_hash_by_identity():
    first = Layer("hidden", 4)
    second = Layer("hidden", 4)
    assert first != second
    assert len({first, second}) == 2
    with pytest.raises(ValueError):
        Layer("empty", 0)


def test_connection_shape_validation():
    a, b = Layer("a", 2), Layer("b", 3)
    with pytest.raises(ValueError):
        GraphConnections(a, b, np.zeros((2, 3)))
    with pytest.raises(ValueError):
        BiasConnections(b, np.zeros(2))
    with pytest.raises(ValueError):
        IdentityConnections(a, b)
    assert IdentityConnections(a, Layer("c", 2)).weight_tensor() is None
    assert GraphConnections(a, b).weight_tensor().shape == (3, 2)


def test_network_rejects_foreign_layers():
    a, b, c = Layer("a", 1), Layer("b", 1), Layer("c", 1)
    with pytest.raises(ValueError):
        NeuralNetwork(layers=[a, b], connections=[], input_layer=a, output_layer=c)
    with pytest.raises(ValueError):
        NeuralNetwork(
            layers=[a, b],
            connections=[IdentityConnections(a, c)],
            input_layer=a,
            output_layer=b,
        )


def test_build_mlp_structure():
    network = build_mlp([4, 8, 3], activation="tanh", output_activation="softmax")
    assert [layer.size for layer in network.layers] == [4, 8, 3]
    assert network.layers[1].activation == "tanh"
    assert network.output_layer.activation == "softmax"
    assert network.parameter_count() == 4 * 8 + 8 + 8 * 3 + 3
    assert len(network.inbound(network.output_layer)) == 2
    assert network.inbound(network.input_layer) == []


def test_calculator_reuses_zeroed_buffers_and_reallocates_on_shape_change():
    network = build_mlp([2, 3, 1], bias=False)
    ConstantInitializer(1.0).initialize(network.connections[0].weights.reshape(-1))
    ConstantInitializer(1.0).initialize(network.connections[1].weights.reshape(-1))
    calculator = FeedForwardLayerCalculator(network)
    hidden = network.layers[1]

    results = {network.input_layer: np.array([[1.0, 2.0]])}
    calculator.calculate({network.input_layer}, results, network.output_layer)
    assert results[network.output_layer] == pytest.approx(np.array([[9.0]]))
    first = results[hidden]

    for values in results.values():
        values.fill(0)
    results[network.input_layer] = np.array([[1.0, 1.0]])
    calculator.calculate({network.input_layer}, results, network.output_layer)
    assert results[hidden] is first
    assert results[network.output_layer] == pytest.approx(np.array([[6.0]]))

    results[network.input_layer] = np.ones((2, 2))
    calculator.calculate({network.input_layer}, results, network.output_layer)
    assert results[hidden] is not first
    assert results[hidden].shape == (2, 3)


def test_calculator_skips_layers_in_frontier():
    network = build_mlp([1, 2, 1], bias=False)
    calculator = FeedForwardLayerCalculator(network)
    hidden = network.layers[1]
    precomputed = np.array([[5.0, 5.0]])
    ConstantInitializer(1.0).initialize(network.connections[1].weights.reshape(-1))
    results = {network.input_layer: np.zeros((1, 1)), hidden: precomputed}
    calculated = {network.input_layer, hidden}

    calculator.calculate(calculated, results, network.output_layer)

    assert results[hidden] is precomputed
    assert results[network.output_layer] == pytest.approx(np.array([[10.0]]))
    assert network.output_layer in calculated


def test_calculator_rejects_cycles_and_unreachable_inputs():
    a, b, c = Layer("a", 1), Layer("b", 1), Layer("c", 1)
    network = NeuralNetwork(
        layers=[a, b, c],
        connections=[IdentityConnections(b, c), IdentityConnections(c, b)],
        input_layer=a,
        output_layer=c,
    )
    calculator = FeedForwardLayerCalculator(network)
    with pytest.raises(ValueError, match="Cycle"):
        calculator.calculate({a}, {a: np.zeros((1, 1))}, c)

    orphan = NeuralNetwork(layers=[a, b], connections=[], input_layer=a, output_layer=b)
    with pytest.raises(ValueError, match="no input connections"):
        FeedForwardLayerCalculator(orphan).calculate({a}, {a: np.zeros((1, 1))}, b)


def test_initializers_fill_in_place():
    buffer = np.zeros(1000, dtype=np.float32)
    NormalInitializer(mean=1.0, std=0.01, seed=3).initialize(buffer)
    assert abs(float(buffer.mean()) - 1.0) < 0.01

    again = np.zeros(1000, dtype=np.float32)
    NormalInitializer(mean=1.0, std=0.01, seed=3).initialize(again)
    assert np.array_equal(buffer, again)

    UniformInitializer(low=-0.2, high=0.2, seed=0).initialize(buffer)
    assert np.all(np.abs(buffer) <= 0.2 + 1e-6)
    assert np.unique(buffer).size > 1

    ConstantInitializer(0.5).initialize(buffer)
    assert np.all(buffer == 0.5)


def test_build_initializer_by_name():
    assert isinstance(build_initializer("normal", std=0.1), NormalInitializer)
    assert isinstance(build_initializer("Uniform"), UniformInitializer)
    with pytest.raises(ValueError):
        build_initializer("xavier")
    with pytest.raises(ValueError):
        UniformInitializer(low=1.0, high=0.0)
