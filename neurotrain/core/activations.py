"""Activation functions applied by the layer calculator."""

from __future__ import annotations

from typing import Callable, Dict

import numpy as np

from .types import Array

InplaceActivation = Callable[[Array], Array]


# Activations overwrite the calculator-owned buffer they are given.


def _identity_(x: Array) -> Array:
    return x


def _relu_(x: Array) -> Array:
    np.maximum(x, 0.0, out=x)
    return x


def _sigmoid_(x: Array) -> Array:
    np.negative(x, out=x)
    np.exp(x, out=x)
    x += 1.0
    np.reciprocal(x, out=x)
    return x


def _tanh_(x: Array) -> Array:
    np.tanh(x, out=x)
    return x


def _softmax_(x: Array) -> Array:
    x -= np.max(x, axis=-1, keepdims=True)
    np.exp(x, out=x)
    x /= np.sum(x, axis=-1, keepdims=True)
    return x


_INPLACE: Dict[str, InplaceActivation] = {
    "identity": _identity_,
    "linear": _identity_,
    "relu": _relu_,
    "sigmoid": _sigmoid_,
    "tanh": _tanh_,
    "softmax": _softmax_,
}


def get_inplace(name: str) -> InplaceActivation:
    """Return the in-place activation registered under ``name``."""

    try:
        return _INPLACE[name.lower()]
    except KeyError as exc:
        available = ", ".join(available_activations())
        raise KeyError(f"Unknown activation {name!r}. Available activations: {available}") from exc


def available_activations() -> list[str]:
    return sorted(_INPLACE)


__all__ = ["get_inplace", "available_activations"]
