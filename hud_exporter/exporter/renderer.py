"""
Prometheus text exposition rendering.

Serializes one metrics snapshot into the text format (version 0.0.4)
understood by Prometheus and OpenTelemetry collectors.
"""

import time
from typing import Optional

from ..core.models import MetricsSnapshot
from .metric_definitions import MetricDefinitions


CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"

_LABEL_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def escape_label_value(value: str) -> str:
    """Escape a string for use inside a double-quoted label value."""
    return "".join(_LABEL_ESCAPES.get(c, c) for c in value)


def format_labels(snapshot: MetricsSnapshot) -> str:
    """Build the label set shared by every sample of one render."""
    return (
        f'process_name="{escape_label_value(snapshot.process_name)}",'
        f'graphics_api="{escape_label_value(snapshot.graphics_api)}",'
        f'pid="{snapshot.process_pid}"'
    )


def render_metrics(snapshot: MetricsSnapshot, timestamp_ms: Optional[int] = None) -> str:
    """
    Render ``snapshot`` as a Prometheus exposition document.

    Every sample carries the same label set and the same millisecond
    timestamp, taken once per call unless ``timestamp_ms`` is given.
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    labels = format_labels(snapshot)

    lines = []
    for metric in MetricDefinitions.all():
        value = metric.format_value(getattr(snapshot, metric.attribute))
        lines.append(f"# HELP {metric.name} {metric.description}")
        lines.append(f"# TYPE {metric.name} {metric.metric_type}")
        lines.append(f"{metric.name}{{{labels}}} {value} {timestamp_ms}")
    return "\n".join(lines) + "\n"
