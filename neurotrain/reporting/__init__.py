"""Reporting utilities for neurotrain."""

from .artifacts import write_manifest
from .console import LoggingListener
from .metrics import CsvSink, JsonlSink
from .plots import PlotAdapter

__all__ = ["write_manifest", "LoggingListener", "JsonlSink", "CsvSink", "PlotAdapter"]
