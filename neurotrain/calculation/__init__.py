"""Forward computation and error aggregation collaborators."""

from .calculator import FeedForwardLayerCalculator, LayerCalculator
from .errors import REGISTRY, ClassificationError, MeanAbsoluteError, MeanSquaredError, OutputError

__all__ = [
    "LayerCalculator",
    "FeedForwardLayerCalculator",
    "OutputError",
    "MeanAbsoluteError",
    "MeanSquaredError",
    "ClassificationError",
    "REGISTRY",
]
