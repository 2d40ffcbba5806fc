"""Headless-safe plotting adapters."""

from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

from ..training.events import EventKind, TrainingEvent
from .metrics import running_error


class PlotAdapter:
    """Collect the running error per sample and optionally plot it."""

    def __init__(self, run_dir: str | Path, enable_plots: bool = False):
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self._history: List[Tuple[int, float]] = []
        if self.enable_plots:
            self.run_dir.mkdir(parents=True, exist_ok=True)

    def handle_event(self, event: TrainingEvent) -> None:
        if not self.enable_plots or event.kind is not EventKind.SAMPLE_FINISHED:
            return
        error = running_error(event)
        if error is not None:
            self._history.append((len(self._history) + 1, error))

    __call__ = handle_event

    @property
    def plot_path(self) -> Path:
        return self.run_dir / "error.png"

    def close(self) -> Path | None:
        if not self.enable_plots or not self._history:
            return None
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt  # imported lazily for headless safety

        samples, errors = zip(*self._history)
        fig, ax = plt.subplots()
        ax.plot(samples, errors)
        ax.set_xlabel("Sample")
        ax.set_ylabel("Running error")
        ax.set_title("Evaluation")
        fig.savefig(self.plot_path)
        plt.close(fig)
        return self.plot_path


__all__ = ["PlotAdapter"]
