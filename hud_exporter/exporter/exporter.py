"""
Metrics Exporter - lifecycle of the sampler and the HTTP listener.

Starts both background tasks, applies the start delay, and shuts them
down in a fixed order: stop token, socket close, sampler wake, join.
"""

import atexit
import dataclasses
import logging
import threading
from enum import Enum
from typing import Callable, Optional, Sequence, Tuple

from ..collectors.base import MetricsSource
from ..collectors.local_collector import LocalCollector, get_process_identity
from ..core.bind_address import resolve_bind_address
from ..core.config import ExporterConfig
from ..core.models import ENGINE_NAMES, BindTarget
from ..core.store import SnapshotStore
from .http_listener import MetricsHTTPListener
from .renderer import render_metrics
from .sampler import Sampler


logger = logging.getLogger(__name__)


class ExporterState(Enum):
    DISABLED = "disabled"
    IDLE = "idle"
    STARTING = "starting"
    RUNNING = "running"
    FAILED = "failed"  # listener could not serve, sampler still running
    STOPPING = "stopping"
    STOPPED = "stopped"


class MetricsExporter:
    """
    In-process Prometheus exporter for live HUD metrics.

    - Samples a ``MetricsSource`` into a snapshot store on its own thread
    - Serves the latest snapshot at ``GET /metrics`` on a second thread
    - Does nothing at all when the configuration disables it

    Call ``close`` (or use the exporter as a context manager) before
    dropping it; both threads are joined before ``close`` returns.
    """

    def __init__(
        self,
        config: ExporterConfig,
        source: Optional[MetricsSource] = None,
        identity_provider: Callable[[], Tuple[str, int]] = get_process_identity,
        engine_names: Sequence[str] = ENGINE_NAMES,
    ):
        # Private copy, later changes by the caller do not apply
        self.config = dataclasses.replace(config)
        self.enabled = bool(self.config.enabled)
        self.store = SnapshotStore()
        self.target: Optional[BindTarget] = None
        self.sampler: Optional[Sampler] = None
        self.listener: Optional[MetricsHTTPListener] = None

        self._stop = threading.Event()
        self._lifecycle_lock = threading.Lock()
        self._server_thread: Optional[threading.Thread] = None
        self._metrics_thread: Optional[threading.Thread] = None
        self._state = ExporterState.IDLE if self.enabled else ExporterState.DISABLED

        if not self.enabled:
            return

        self.target = resolve_bind_address(self.config.bind_address)
        self.sampler = Sampler(
            self.store,
            source if source is not None else LocalCollector(),
            self.config.update_interval_seconds,
            self._stop,
            identity_provider=identity_provider,
            engine_names=engine_names,
        )
        self.listener = MetricsHTTPListener(self.target, self.generate_metrics, self._stop)
        logger.info(f"Metrics exporter initialized on {self.target}")

    @property
    def state(self) -> ExporterState:
        """Current lifecycle state."""
        if self._state is ExporterState.STARTING and self.listener.serving.is_set():
            return ExporterState.RUNNING
        return self._state

    @property
    def server_address(self) -> Optional[Tuple[str, int]]:
        """Address the listener is bound to, once it is listening."""
        return self.listener.server_address if self.listener else None

    def wait_until_serving(self, timeout: Optional[float] = None) -> bool:
        """Block until the listener accepts connections or ``timeout`` expires."""
        if self.listener is None:
            return False
        return self.listener.serving.wait(timeout)

    def start(self):
        """Start the sampler and the delayed listener."""
        if not self.enabled:
            return

        with self._lifecycle_lock:
            if self._server_thread is not None:
                return
            if self._state is not ExporterState.IDLE:
                logger.debug(f"Not starting metrics exporter in state {self._state.value}")
                return

            self._state = ExporterState.STARTING
            self._server_thread = threading.Thread(
                target=self._delayed_start,
                name="hud-exporter-listener",
                daemon=True,
            )
            self._metrics_thread = threading.Thread(
                target=self.sampler.run,
                name="hud-exporter-sampler",
                daemon=True,
            )
            self._server_thread.start()
            self._metrics_thread.start()
            atexit.register(self.stop)

    def _delayed_start(self):
        """Wait out the start delay, then serve until stopped."""
        delay = self.config.start_delay_seconds
        if delay > 0:
            logger.info(f"Metrics exporter starting in {delay} seconds")
            if self._stop.wait(delay):
                return

        if not self._stop.is_set():
            self.listener.run()

        with self._lifecycle_lock:
            if self._state is ExporterState.STARTING and not self._stop.is_set():
                logger.warning("Metrics exporter listener is not serving")
                self._state = ExporterState.FAILED

    def stop(self):
        """Stop both background tasks and wait for them to finish."""
        if not self.enabled:
            return

        with self._lifecycle_lock:
            if self._state is ExporterState.STOPPED:
                return
            was_started = self._server_thread is not None
            self._state = ExporterState.STOPPING

        self._stop.set()
        self.listener.close()
        self.sampler.wake()

        current = threading.current_thread()
        for thread in (self._server_thread, self._metrics_thread):
            if thread is not None and thread is not current:
                thread.join()

        with self._lifecycle_lock:
            self._state = ExporterState.STOPPED
        if was_started:
            atexit.unregister(self.stop)
            logger.info("Metrics exporter stopped")

    def close(self):
        """Release all exporter resources."""
        self.stop()

    def update_metrics(self) -> bool:
        """Take one sample immediately."""
        if self.sampler is None:
            return False
        return self.sampler.sample_once()

    def generate_metrics(self) -> str:
        """Render the current snapshot in the exposition format."""
        with self.store.locked() as snapshot:
            return render_metrics(snapshot)

    def __enter__(self) -> "MetricsExporter":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
