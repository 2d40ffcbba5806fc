"""Lifecycle events and the synchronous bus that dispatches them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, ClassVar, List, Union

from ..core.types import Example

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    TRAINING_STARTED = "training_started"
    TRAINING_FINISHED = "training_finished"
    SAMPLE_FINISHED = "sample_finished"
    TESTING_FINISHED = "testing_finished"


@dataclass(frozen=True)
class TrainingStarted:
    source: Any
    kind: ClassVar[EventKind] = EventKind.TRAINING_STARTED


@dataclass(frozen=True)
class TrainingFinished:
    source: Any
    kind: ClassVar[EventKind] = EventKind.TRAINING_FINISHED


@dataclass(frozen=True)
class SampleFinished:
    """Published after an example has been scored and the results reset.

    The example's input array has been zeroed by then; its target is intact.
    """

    source: Any
    example: Example
    kind: ClassVar[EventKind] = EventKind.SAMPLE_FINISHED


@dataclass(frozen=True)
class TestingFinished:
    source: Any
    kind: ClassVar[EventKind] = EventKind.TESTING_FINISHED
    __test__: ClassVar[bool] = False


TrainingEvent = Union[TrainingStarted, TrainingFinished, SampleFinished, TestingFinished]
Listener = Callable[[TrainingEvent], None]


class EventBus:
    """Synchronous multicast notifier.

    Listeners run in subscription order on the publishing thread. Each
    :meth:`publish` iterates over a snapshot of the registry, so listeners may
    subscribe or unsubscribe (themselves included) while being notified without
    affecting the current dispatch.

    A listener exception aborts the dispatch: it is logged and re-raised to the
    publisher, and the listeners after it are not called for that event.
    """

    def __init__(self) -> None:
        self._listeners: List[Listener] | None = None

    def subscribe(self, listener: Listener) -> None:
        if self._listeners is None:
            self._listeners = []
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if self._listeners is not None and listener in self._listeners:
            self._listeners.remove(listener)

    def publish(self, event: TrainingEvent) -> None:
        if self._listeners is None:
            return
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.error("Listener %r failed while handling %s", listener, event.kind.value)
                raise

    @property
    def listeners(self) -> List[Listener]:
        return list(self._listeners or [])

    def __len__(self) -> int:
        return len(self._listeners or [])


__all__ = [
    "EventKind",
    "TrainingStarted",
    "TrainingFinished",
    "SampleFinished",
    "TestingFinished",
    "TrainingEvent",
    "Listener",
    "EventBus",
]
