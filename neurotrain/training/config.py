"""Named collaborator slots consumed by :class:`~neurotrain.training.trainer.Trainer`."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..calculation.calculator import LayerCalculator
    from ..calculation.errors import OutputError
    from ..core.architecture import NeuralNetwork
    from ..core.initializers import RandomInitializer
    from .inputs import InputProvider


class ConfigSlot(str, Enum):
    NETWORK = "network"
    TRAINING_INPUT_PROVIDER = "training_input_provider"
    TESTING_INPUT_PROVIDER = "testing_input_provider"
    OUTPUT_ERROR = "output_error"
    LAYER_CALCULATOR = "layer_calculator"
    RANDOM_INITIALIZER = "random_initializer"


@dataclass
class TrainerConfig:
    """One optional value per slot; ``None`` means "not configured"."""

    network: NeuralNetwork | None = None
    training_input_provider: InputProvider | None = None
    testing_input_provider: InputProvider | None = None
    output_error: OutputError | None = None
    layer_calculator: LayerCalculator | None = None
    random_initializer: RandomInitializer | None = None

    def get(self, slot: ConfigSlot | str) -> Any:
        return getattr(self, _resolve(slot).value)

    def set(self, slot: ConfigSlot | str, value: Any) -> None:
        setattr(self, _resolve(slot).value, value)

    def configured(self) -> Dict[str, bool]:
        """Return which slots currently hold a value."""

        return {f.name: getattr(self, f.name) is not None for f in fields(self)}


def _resolve(slot: ConfigSlot | str) -> ConfigSlot:
    if isinstance(slot, ConfigSlot):
        return slot
    try:
        return ConfigSlot(str(slot).lower())
    except ValueError as exc:
        available = ", ".join(s.value for s in ConfigSlot)
        raise KeyError(f"Unknown configuration slot {slot!r}. Available slots: {available}") from exc


__all__ = ["ConfigSlot", "TrainerConfig"]
