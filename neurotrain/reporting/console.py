"""Listener forwarding trainer events to :mod:`logging`."""

from __future__ import annotations

import logging

from ..training.events import EventKind, TrainingEvent
from .metrics import running_error

logger = logging.getLogger(__name__)


class LoggingListener:
    """Log lifecycle events at ``INFO`` and samples at ``DEBUG``."""

    def __init__(self, log: logging.Logger | None = None, *, every: int = 1) -> None:
        self.log = log or logger
        self.every = max(1, int(every))
        self._samples = 0

    def __call__(self, event: TrainingEvent) -> None:
        if event.kind is EventKind.SAMPLE_FINISHED:
            self._samples += 1
            if self._samples % self.every == 0:
                self.log.debug("sample %d, running error %s", self._samples, running_error(event))
            return
        if event.kind is EventKind.TESTING_FINISHED:
            self.log.info("testing finished after %d samples, error %s", self._samples, running_error(event))
            self._samples = 0
            return
        self.log.info("%s", event.kind.value.replace("_", " "))


__all__ = ["LoggingListener"]
