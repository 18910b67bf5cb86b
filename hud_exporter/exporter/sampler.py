"""
Sampler - periodic copy of live metrics into the snapshot store.
"""

import logging
import threading
from typing import Callable, Sequence, Tuple

from ..collectors.base import MetricsSource
from ..collectors.local_collector import get_process_identity
from ..core.models import ENGINE_NAMES, MetricsSnapshot, graphics_api_name
from ..core.store import SnapshotStore


logger = logging.getLogger(__name__)


class Sampler:
    """
    Mirrors live metrics into a ``SnapshotStore`` at a fixed interval.

    The wait between ticks is a condition wait on the store's lock, so
    setting the stop token and calling ``wake`` ends the loop at once.
    """

    def __init__(
        self,
        store: SnapshotStore,
        source: MetricsSource,
        interval_seconds: float,
        stop_event: threading.Event,
        identity_provider: Callable[[], Tuple[str, int]] = get_process_identity,
        engine_names: Sequence[str] = ENGINE_NAMES,
    ):
        self.store = store
        self.source = source
        self.interval_seconds = interval_seconds
        self._stop = stop_event
        self._identity_provider = identity_provider
        self._engine_names = engine_names
        self.ticks = 0

    def sample_once(self) -> bool:
        """Take one sample and store it. Returns False if the source failed."""
        try:
            live = self.source.read_live_metrics()
            process_name, pid = self._identity_provider()
        except Exception as e:
            logger.error(f"Failed to read live metrics: {e}")
            return False

        try:
            # Re-derived every tick, the engine can change at runtime
            graphics_api = graphics_api_name(live.engine, self._engine_names)
            snapshot = MetricsSnapshot.from_live(
                live,
                process_name=process_name,
                process_pid=pid,
                graphics_api=graphics_api,
            )
        except (TypeError, ValueError) as e:
            logger.error(f"Discarding malformed live metrics: {e}")
            return False
        self.store.update(snapshot)
        self.ticks += 1
        return True

    def run(self):
        """Sample until the stop token is set."""
        logger.debug(f"Sampler running every {self.interval_seconds * 1000:.0f}ms")
        condition = self.store.condition
        while not self._stop.is_set():
            with condition:
                if condition.wait_for(self._stop.is_set, timeout=self.interval_seconds):
                    break
            self.sample_once()
        logger.debug(f"Sampler stopped after {self.ticks} ticks")

    def wake(self):
        """Wake the sampler so it notices the stop token."""
        with self.store.condition:
            self.store.condition.notify_all()
