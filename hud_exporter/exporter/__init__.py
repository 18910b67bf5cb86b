"""Exporter module for serving HUD metrics in the Prometheus text format."""

from .exporter import MetricsExporter, ExporterState
from .http_listener import MetricsHTTPListener
from .metric_definitions import MetricDefinitions
from .renderer import render_metrics, escape_label_value
from .sampler import Sampler

__all__ = [
    "MetricsExporter",
    "ExporterState",
    "MetricsHTTPListener",
    "MetricDefinitions",
    "render_metrics",
    "escape_label_value",
    "Sampler",
]
