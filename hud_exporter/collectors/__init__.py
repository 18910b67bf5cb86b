"""Collectors module providing live metrics to the exporter."""

from .base import MetricsSource, LiveMetricsBuffer
from .local_collector import LocalCollector, get_process_identity

__all__ = [
    "MetricsSource",
    "LiveMetricsBuffer",
    "LocalCollector",
    "get_process_identity",
]
