import numpy as np
import pytest

from neurotrain.calculation.errors import MeanAbsoluteError
from neurotrain.core.architecture import build_mlp
from neurotrain.training.config import ConfigSlot, TrainerConfig
from neurotrain.training.inputs import ArrayInputProvider
from neurotrain.training.trainer import Trainer


def test_unconfigured_slots_read_as_none():
    config = TrainerConfig()
    for slot in ConfigSlot:
        assert config.get(slot) is None
    assert not any(config.configured().values())


def test_slots_accept_enum_or_string_and_overwrite():
    config = TrainerConfig()
    first, second = MeanAbsoluteError(), MeanAbsoluteError()
    config.set(ConfigSlot.OUTPUT_ERROR, first)
    config.set("output_error", second)
    assert config.get("OUTPUT_ERROR") is second
    assert config.output_error is second
    with pytest.raises(KeyError):
        config.get("learning_rate")


def test_trainer_accessors_delegate_to_config():
    trainer = Trainer()
    network = build_mlp([2, 1])
    trainer.network = network
    trainer.random_initializer = None
    assert trainer.config.network is network
    assert trainer.config.get(ConfigSlot.NETWORK) is network
    assert trainer.training_input_provider is None
    assert trainer.layer_calculator is None


def test_array_provider_serves_fresh_batches_until_exhausted():
    inputs = np.arange(10, dtype=np.float32).reshape(5, 2)
    targets = np.arange(5, dtype=np.float32)
    provider = ArrayInputProvider(inputs, targets, batch_size=2)
    assert provider.input_size == 3

    batches = list(provider)
    assert [b.inputs.shape[0] for b in batches] == [2, 2, 1]
    assert batches[0].targets.shape == (2, 1)
    assert provider.next_input() is None

    batches[0].inputs.fill(0)
    assert inputs[0, 1] == 1.0

    provider.reset()
    assert np.array_equal(provider.next_input().inputs, inputs[:2])


def test_array_provider_shuffles_each_pass():
    inputs = np.arange(20, dtype=np.float32).reshape(20, 1)
    provider = ArrayInputProvider(inputs, inputs, shuffle=True, seed=4)
    first = np.concatenate([b.inputs for b in provider]).ravel()
    provider.reset()
    second = np.concatenate([b.inputs for b in provider]).ravel()
    assert sorted(first.tolist()) == sorted(second.tolist()) == list(range(20))
    assert not np.array_equal(first, second)


def test_array_provider_validation():
    with pytest.raises(ValueError):
        ArrayInputProvider(np.zeros((3, 1)), np.zeros((2, 1)))
    with pytest.raises(ValueError):
        ArrayInputProvider(np.zeros((3, 1)), np.zeros((3, 1)), batch_size=0)
