"""Trainer orchestration, events, configuration and input providers."""

from .config import ConfigSlot, TrainerConfig
from .events import (
    EventBus,
    EventKind,
    SampleFinished,
    TestingFinished,
    TrainingEvent,
    TrainingFinished,
    TrainingStarted,
)
from .inputs import ArrayInputProvider, InputProvider
from .trainer import Trainer

__all__ = [
    "ConfigSlot",
    "TrainerConfig",
    "EventBus",
    "EventKind",
    "SampleFinished",
    "TestingFinished",
    "TrainingEvent",
    "TrainingFinished",
    "TrainingStarted",
    "ArrayInputProvider",
    "InputProvider",
    "Trainer",
]
