"""
HUD metrics exporter.

Samples live performance metrics from a host application and serves
them at ``/metrics`` in the Prometheus text exposition format.
"""

from .core import Config, ExporterConfig, LiveMetrics, MetricsSnapshot
from .core.config import configure_logging
from .collectors import LiveMetricsBuffer, LocalCollector, MetricsSource
from .exporter import MetricsExporter, ExporterState

__version__ = "1.0.0"

__all__ = [
    "Config",
    "ExporterConfig",
    "LiveMetrics",
    "MetricsSnapshot",
    "configure_logging",
    "LiveMetricsBuffer",
    "LocalCollector",
    "MetricsSource",
    "MetricsExporter",
    "ExporterState",
]
