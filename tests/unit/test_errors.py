import numpy as np
import pytest

from neurotrain.calculation.errors import (
    REGISTRY,
    ClassificationError,
    MeanAbsoluteError,
    MeanSquaredError,
)


def test_mean_absolute_error_averages_over_elements():
    error = MeanAbsoluteError()
    assert error.total_error() == 0.0
    error.add_sample(np.array([[1.0, 2.0]]), np.array([[0.0, 0.0]]))
    error.add_sample(np.array([[0.0, 0.0]]), np.array([[3.0, 0.0]]))
    assert error.total_error() == pytest.approx(6.0 / 4)
    error.reset()
    assert error.total_error() == 0.0


def test_mean_squared_error():
    error = MeanSquaredError()
    error.add_sample(np.array([1.0, -1.0]), np.array([0.0, 1.0]))
    assert error.total_error() == pytest.approx((1.0 + 4.0) / 2)


def test_classification_error_counts_rows():
    error = ClassificationError()
    predicted = np.array([[0.9, 0.1], [0.2, 0.8], [0.6, 0.4]])
    target = np.array([[1.0, 0.0], [1.0, 0.0], [1.0, 0.0]])
    error.add_sample(predicted, target)
    assert error.total_error() == pytest.approx(1 / 3)


def test_shape_mismatch_is_rejected():
    with pytest.raises(ValueError):
        MeanAbsoluteError().add_sample(np.zeros((1, 2)), np.zeros((2, 1)))


def test_registry_creates_fresh_accumulators():
    first = REGISTRY.create("mae")
    second = REGISTRY.create("MAE")
    assert first is not second
    assert isinstance(REGISTRY.create("classification"), ClassificationError)
    assert list(REGISTRY.names()) == ["classification", "mae", "mse"]
    with pytest.raises(KeyError):
        REGISTRY.create("hinge")
