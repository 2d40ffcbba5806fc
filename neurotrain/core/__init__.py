"""Core graph and numerical primitives for neurotrain."""

from . import activations, architecture, initializers, types

__all__ = ["activations", "architecture", "initializers", "types"]
