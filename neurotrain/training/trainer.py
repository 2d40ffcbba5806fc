"""Trainer base class: the test loop and pre-training initialisation."""

from __future__ import annotations

import logging
from typing import Dict, Sequence

from ..calculation.calculator import LayerCalculator
from ..calculation.errors import OutputError
from ..core.architecture import NeuralNetwork
from ..core.initializers import RandomInitializer
from ..core.types import Array, Layer, LayerSet, ResultsMap
from .config import ConfigSlot, TrainerConfig
from .events import (
    EventBus,
    Listener,
    SampleFinished,
    TestingFinished,
    TrainingEvent,
    TrainingFinished,
    TrainingStarted,
)
from .inputs import InputProvider

logger = logging.getLogger(__name__)


class Trainer:
    """Base class for supervised and unsupervised training.

    The base implementation knows how to score a network against the testing
    input provider (:meth:`evaluate`) and how to randomise its weights
    (:meth:`initialize_randomly`). Subclasses implement the weight update in
    :meth:`run_training`.

    A trainer keeps private scratch buffers between examples and is not safe
    to use from several threads at once; use one instance per worker.
    """

    def __init__(
        self,
        config: TrainerConfig | None = None,
        listeners: Sequence[Listener] | None = None,
    ) -> None:
        self.config = config if config is not None else TrainerConfig()
        self.events = EventBus()
        for listener in listeners or []:
            self.events.subscribe(listener)
        self._calculated: LayerSet = set()
        self._results: ResultsMap = {}

    # ------------------------------------------------------------------
    # Configuration accessors

    @property
    def network(self) -> NeuralNetwork | None:
        return self.config.get(ConfigSlot.NETWORK)

    @network.setter
    def network(self, value: NeuralNetwork | None) -> None:
        self.config.set(ConfigSlot.NETWORK, value)

    @property
    def training_input_provider(self) -> InputProvider | None:
        return self.config.get(ConfigSlot.TRAINING_INPUT_PROVIDER)

    @training_input_provider.setter
    def training_input_provider(self, value: InputProvider | None) -> None:
        self.config.set(ConfigSlot.TRAINING_INPUT_PROVIDER, value)

    @property
    def testing_input_provider(self) -> InputProvider | None:
        return self.config.get(ConfigSlot.TESTING_INPUT_PROVIDER)

    @testing_input_provider.setter
    def testing_input_provider(self, value: InputProvider | None) -> None:
        self.config.set(ConfigSlot.TESTING_INPUT_PROVIDER, value)

    @property
    def output_error(self) -> OutputError | None:
        return self.config.get(ConfigSlot.OUTPUT_ERROR)

    @output_error.setter
    def output_error(self, value: OutputError | None) -> None:
        self.config.set(ConfigSlot.OUTPUT_ERROR, value)

    @property
    def layer_calculator(self) -> LayerCalculator | None:
        return self.config.get(ConfigSlot.LAYER_CALCULATOR)

    @layer_calculator.setter
    def layer_calculator(self, value: LayerCalculator | None) -> None:
        self.config.set(ConfigSlot.LAYER_CALCULATOR, value)

    @property
    def random_initializer(self) -> RandomInitializer | None:
        return self.config.get(ConfigSlot.RANDOM_INITIALIZER)

    @random_initializer.setter
    def random_initializer(self, value: RandomInitializer | None) -> None:
        self.config.set(ConfigSlot.RANDOM_INITIALIZER, value)

    # ------------------------------------------------------------------
    # Events

    def add_event_listener(self, listener: Listener) -> None:
        self.events.subscribe(listener)

    def remove_event_listener(self, listener: Listener) -> None:
        self.events.unsubscribe(listener)

    def trigger_event(self, event: TrainingEvent) -> None:
        self.events.publish(event)

    # ------------------------------------------------------------------
    # Training / testing

    def train(self) -> None:
        """Initialise the weights and run :meth:`run_training`."""

        self.initialize_randomly()
        self.trigger_event(TrainingStarted(self))
        self.run_training()
        self.trigger_event(TrainingFinished(self))

    def run_training(self) -> None:
        """Weight update hook; the base trainer does not learn."""

    def evaluate(self) -> float:
        """Score the network on every example of the testing input provider.

        Returns ``0.0`` without doing anything when the testing provider, the
        output error, the network or the layer calculator is not configured.
        Errors raised by any collaborator propagate unchanged.
        """

        provider = self.testing_input_provider
        output_error = self.output_error
        network = self.network
        calculator = self.layer_calculator

        if provider is None or output_error is None or network is None or calculator is None:
            required = {
                ConfigSlot.TESTING_INPUT_PROVIDER: provider,
                ConfigSlot.OUTPUT_ERROR: output_error,
                ConfigSlot.NETWORK: network,
                ConfigSlot.LAYER_CALCULATOR: calculator,
            }
            missing = [slot.value for slot, value in required.items() if value is None]
            logger.debug("Evaluation skipped, unconfigured slots: %s", ", ".join(missing))
            return 0.0

        calculated = self._calculated
        results = self._results
        input_layer = network.input_layer
        output_layer = network.output_layer
        samples = 0

        while True:
            example = provider.next_input()
            if example is None:
                break
            calculated.clear()
            calculated.add(input_layer)
            results[input_layer] = example.inputs
            try:
                calculator.calculate(calculated, results, output_layer)
                output_error.add_sample(results[output_layer], example.targets)
            finally:
                # buffers must be zero before the next example, even after a failure
                for values in results.values():
                    values.fill(0)

            samples += 1
            logger.debug("Finished sample %d", samples)
            self.trigger_event(SampleFinished(self, example))

        self.trigger_event(TestingFinished(self))
        total = output_error.total_error()
        logger.info("Evaluated %d samples, error %.6f", samples, total)
        return total

    test = evaluate

    def initialize_randomly(self) -> None:
        """Fill every owned weight tensor of the network with random values."""

        initializer = self.random_initializer
        network = self.network
        if initializer is None or network is None:
            return
        count = 0
        for connection in network.connections:
            weights = connection.weight_tensor()
            if weights is None:
                continue
            initializer.initialize(weights.reshape(-1))
            count += 1
        logger.debug("Initialised %d weight tensors", count)

    def should_stop(self, index: int) -> bool:
        """Return ``True`` once ``index`` has covered the testing provider."""

        provider = self.testing_input_provider
        if provider is None:
            return True
        return index >= provider.input_size

    @property
    def results(self) -> Dict[Layer, Array]:
        """Snapshot of the scratch results map (the arrays are shared)."""

        return dict(self._results)


__all__ = ["Trainer"]
