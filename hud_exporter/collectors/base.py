"""
Metrics source interface.

The sampler never reads global HUD state directly; it is handed an
object that provides live metrics on demand.
"""

from typing import Optional, Protocol, runtime_checkable

from ..core.models import LiveMetrics


@runtime_checkable
class MetricsSource(Protocol):
    """Anything that can produce the current live metrics."""

    def read_live_metrics(self) -> LiveMetrics:
        ...


class LiveMetricsBuffer:
    """
    Metrics source the host publishes into from its own loop.

    ``publish`` swaps in a fresh ``LiveMetrics`` object, so readers see
    either the old or the new values, never a mix of both.
    """

    def __init__(self, initial: Optional[LiveMetrics] = None):
        self._latest = initial or LiveMetrics()

    def publish(self, metrics: LiveMetrics):
        """Make ``metrics`` the current live values."""
        self._latest = metrics

    def read_live_metrics(self) -> LiveMetrics:
        return self._latest
