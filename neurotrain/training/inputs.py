"""Input providers feeding examples to the trainer."""

from __future__ import annotations

from typing import Iterator, Protocol

import numpy as np

from ..core.types import Array, Example


class InputProvider(Protocol):
    """Protocol implemented by example sources.

    ``next_input`` returns ``None`` once the current pass is exhausted.
    """

    def next_input(self) -> Example | None:
        """Return the next example, or ``None`` when no input is left."""

    @property
    def input_size(self) -> int:
        """Number of examples produced by one full pass."""


class ArrayInputProvider:
    """Serve consecutive row batches of in-memory arrays.

    Every example holds fresh copies of the rows, so the trainer may zero the
    input buffer without touching the backing dataset. With ``shuffle`` the
    row order is redrawn at every :meth:`reset`.
    """

    def __init__(
        self,
        inputs: Array,
        targets: Array,
        *,
        batch_size: int = 1,
        shuffle: bool = False,
        seed: int = 0,
    ) -> None:
        inputs = np.asarray(inputs)
        targets = np.asarray(targets)
        if inputs.ndim == 1:
            inputs = inputs.reshape(-1, 1)
        if targets.ndim == 1:
            targets = targets.reshape(-1, 1)
        if inputs.shape[0] != targets.shape[0]:
            raise ValueError(
                f"inputs and targets disagree on sample count: {inputs.shape[0]} vs {targets.shape[0]}"
            )
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self.inputs = inputs
        self.targets = targets
        self.batch_size = int(batch_size)
        self.shuffle = shuffle
        self._rng = np.random.default_rng(seed)
        self._order = np.arange(inputs.shape[0])
        self._cursor = 0
        self.reset()

    @property
    def input_size(self) -> int:
        return -(-self.inputs.shape[0] // self.batch_size)

    def reset(self) -> None:
        self._cursor = 0
        if self.shuffle:
            self._rng.shuffle(self._order)

    def next_input(self) -> Example | None:
        if self._cursor >= self._order.size:
            return None
        idx = self._order[self._cursor : self._cursor + self.batch_size]
        self._cursor += self.batch_size
        # fancy indexing copies
        return Example(inputs=self.inputs[idx], targets=self.targets[idx])

    def __iter__(self) -> Iterator[Example]:
        while True:
            example = self.next_input()
            if example is None:
                return
            yield example

    def __len__(self) -> int:
        return self.input_size


__all__ = ["InputProvider", "ArrayInputProvider"]
