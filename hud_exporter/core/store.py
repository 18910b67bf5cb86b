"""
Snapshot Store - shared state between the sampler and the responder.

Holds the most recent metrics snapshot behind a single lock. The
condition variable used to pace the sampler is built on the same lock.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from .models import MetricsSnapshot


logger = logging.getLogger(__name__)


class SnapshotStore:
    """
    Latest-value store for exported metrics.

    The sampler is the only writer and the HTTP responder the only
    reader. No history is kept.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.condition = threading.Condition(self._lock)
        self._snapshot = MetricsSnapshot()
        self._sampled = False

    @property
    def has_sampled(self) -> bool:
        """Whether at least one sample has been stored."""
        return self._sampled

    def update(self, snapshot: MetricsSnapshot):
        """Replace the current snapshot wholesale."""
        with self._lock:
            self._snapshot = snapshot
            if not self._sampled:
                self._sampled = True
                logger.debug("First metrics sample stored")

    def current(self) -> MetricsSnapshot:
        """Get the current snapshot."""
        with self._lock:
            return self._snapshot

    @contextmanager
    def locked(self) -> Iterator[MetricsSnapshot]:
        """Hold the store lock while the caller reads the snapshot."""
        with self._lock:
            yield self._snapshot
