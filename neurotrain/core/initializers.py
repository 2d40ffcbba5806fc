"""Random initialisation policies for weight tensors."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

import numpy as np

from .types import Array


class RandomInitializer(Protocol):
    """Protocol implemented by weight initializers."""

    def initialize(self, buffer: Array) -> None:
        """Fill the flat ``buffer`` in place."""


@dataclass
class NormalInitializer:
    """Draw weights from ``N(mean, std**2)``."""

    mean: float = 0.0
    std: float = 0.05
    seed: int | None = None
    rng: np.random.Generator = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.rng = np.random.default_rng(self.seed)

    def initialize(self, buffer: Array) -> None:
        buffer[...] = self.rng.normal(self.mean, self.std, size=buffer.shape)


@dataclass
class UniformInitializer:
    """Draw weights uniformly from ``[low, high)``."""

    low: float = -0.1
    high: float = 0.1
    seed: int | None = None
    rng: np.random.Generator = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.low >= self.high:
            raise ValueError(f"low ({self.low}) must be smaller than high ({self.high})")
        self.rng = np.random.default_rng(self.seed)

    def initialize(self, buffer: Array) -> None:
        buffer[...] = self.rng.uniform(self.low, self.high, size=buffer.shape)


@dataclass
class ConstantInitializer:
    value: float = 0.0

    def initialize(self, buffer: Array) -> None:
        buffer.fill(self.value)


def build_initializer(name: str, **options: object) -> RandomInitializer:
    """Return the initializer registered under ``name``."""

    key = name.lower()
    if key == "normal":
        return NormalInitializer(**options)  # type: ignore[arg-type]
    if key == "uniform":
        return UniformInitializer(**options)  # type: ignore[arg-type]
    if key == "constant":
        return ConstantInitializer(**options)  # type: ignore[arg-type]
    raise ValueError(f"Unknown initializer: {name}")


__all__ = [
    "RandomInitializer",
    "NormalInitializer",
    "UniformInitializer",
    "ConstantInitializer",
    "build_initializer",
]
