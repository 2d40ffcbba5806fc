"""neurotrain public API."""

from .calculation.calculator import FeedForwardLayerCalculator
from .calculation.errors import REGISTRY as ERRORS
from .core import activations, architecture, initializers, types  # noqa: F401
from .core.architecture import NeuralNetwork, build_mlp
from .training.config import ConfigSlot, TrainerConfig
from .training.events import EventBus, EventKind
from .training.inputs import ArrayInputProvider
from .training.pipelines import load_preset, presets, run_pipeline
from .training.trainer import Trainer

__all__ = [
    "ERRORS",
    "ArrayInputProvider",
    "ConfigSlot",
    "EventBus",
    "EventKind",
    "FeedForwardLayerCalculator",
    "NeuralNetwork",
    "Trainer",
    "TrainerConfig",
    "activations",
    "architecture",
    "build_mlp",
    "initializers",
    "load_preset",
    "presets",
    "run_pipeline",
    "types",
]
