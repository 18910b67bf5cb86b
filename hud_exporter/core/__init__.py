"""Core module containing data models, configuration and shared state."""

from .models import (
    BindTarget,
    LiveMetrics,
    MetricsSnapshot,
    ENGINE_NAMES,
)
from .config import Config, ExporterConfig, LoggingConfig
from .bind_address import resolve_bind_address, DEFAULT_PORT
from .store import SnapshotStore

__all__ = [
    "BindTarget",
    "LiveMetrics",
    "MetricsSnapshot",
    "ENGINE_NAMES",
    "Config",
    "ExporterConfig",
    "LoggingConfig",
    "resolve_bind_address",
    "DEFAULT_PORT",
    "SnapshotStore",
]
