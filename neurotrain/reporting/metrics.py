"""Metrics sinks recording trainer events."""

from __future__ import annotations

import csv
import json
import subprocess
from pathlib import Path
from typing import Mapping

from ..training.events import EventKind, TrainingEvent


def git_sha() -> str:
    try:
        out = subprocess.check_output(["git", "rev-parse", "HEAD"], stderr=subprocess.DEVNULL)
        return out.decode().strip()
    except (OSError, subprocess.CalledProcessError):  # pragma: no cover - git may be unavailable
        return "unknown"


def running_error(event: TrainingEvent) -> float | None:
    """Return the aggregate error of the event's trainer so far, if any."""

    output_error = getattr(event.source, "output_error", None)
    if output_error is None:
        return None
    return float(output_error.total_error())


class _EventSink:
    """Turn sample/testing events into ``(step, metrics)`` records."""

    def __init__(self) -> None:
        self._step = 0

    def handle_event(self, event: TrainingEvent) -> None:
        if event.kind is EventKind.SAMPLE_FINISHED:
            self._step += 1
            record: dict[str, float] = {}
        elif event.kind is EventKind.TESTING_FINISHED:
            record = {"batches": float(self._step)}
        else:
            return
        error = running_error(event)
        if error is not None:
            record["error"] = error
        self._write(self._step, event.kind.value, record)
        if event.kind is EventKind.TESTING_FINISHED:
            self._step = 0

    __call__ = handle_event

    def _write(self, step: int, kind: str, metrics: Mapping[str, float]) -> None:
        raise NotImplementedError


class JsonlSink(_EventSink):
    """Append-only JSONL writer for metrics."""

    def __init__(
        self,
        path: str | Path,
        *,
        split: str = "test",
        seed: int | None = None,
        sha: str | None = None,
    ) -> None:
        super().__init__()
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")
        self.split = split
        self.seed = seed
        self.sha = sha or git_sha()

    def _write(self, step: int, kind: str, metrics: Mapping[str, float]) -> None:
        record: dict[str, object] = {
            "step": int(step),
            "event": kind,
            "split": self.split,
            "seed": self.seed,
            "sha": self.sha,
        }
        record.update({k: float(v) for k, v in metrics.items() if isinstance(v, (int, float))})
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record) + "\n")


class CsvSink(_EventSink):
    """Write metrics to CSV with a stable schema."""

    fieldnames = ("step", "event", "split", "batches", "error")

    def __init__(self, path: str | Path, *, split: str = "test") -> None:
        super().__init__()
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.split = split

    def _write(self, step: int, kind: str, metrics: Mapping[str, float]) -> None:
        row: dict[str, object] = {"step": int(step), "event": kind, "split": self.split}
        row.update({k: float(v) for k, v in metrics.items() if k in self.fieldnames})
        with self.path.open("a", encoding="utf-8", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=self.fieldnames)
            if handle.tell() == 0:
                writer.writeheader()
            writer.writerow(row)


__all__ = ["JsonlSink", "CsvSink", "git_sha", "running_error"]
