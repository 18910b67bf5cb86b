"""
Local Metrics Collector.

Collects host metrics from the local machine using psutil, for hosts
that do not publish their own live metrics. Frame timing and GPU
values are not available here and stay at zero.
"""

import logging
import os
import platform
import sys
import time
from pathlib import Path
from typing import Optional, Tuple

import psutil

from ..core.models import LiveMetrics


logger = logging.getLogger(__name__)

_GIB = 1024 ** 3


def get_process_identity() -> Tuple[str, int]:
    """Get the current program name and process id."""
    pid = os.getpid()
    try:
        name = psutil.Process(pid).name()
    except (psutil.Error, OSError):
        name = ""
    if not name:
        name = Path(sys.argv[0]).name if sys.argv and sys.argv[0] else "unknown"
    return name, pid


class LocalCollector:
    """
    Collects CPU and memory metrics from the local machine.

    Uses psutil for cross-platform hardware monitoring.
    """

    def __init__(self):
        self._process = psutil.Process(os.getpid())
        self._rapl_sample: Optional[Tuple[int, float]] = None
        # Prime the counter so the first real reading is meaningful
        psutil.cpu_percent(interval=None)

    def get_cpu_load(self) -> float:
        """CPU usage since the previous call, in percent."""
        try:
            return psutil.cpu_percent(interval=None)
        except Exception:
            return 0.0

    def get_cpu_frequency(self) -> int:
        """Current CPU frequency in MHz."""
        try:
            cpu_freq = psutil.cpu_freq()
            return int(cpu_freq.current) if cpu_freq else 0
        except Exception:
            return 0

    def get_cpu_temperature(self) -> int:
        """Attempt to get CPU temperature in Celsius."""
        try:
            temps = psutil.sensors_temperatures()
            if temps:
                # Try common sensor names
                for name in ["coretemp", "cpu_thermal", "k10temp", "zenpower", "cpu-thermal"]:
                    readings = temps.get(name)
                    if readings:
                        return int(readings[0].current)
                # Fall back to first available sensor
                for sensor_list in temps.values():
                    if sensor_list:
                        return int(sensor_list[0].current)
        except (AttributeError, Exception):
            pass
        return 0

    def get_cpu_power(self) -> float:
        """
        Attempt to get CPU package power using Intel RAPL.

        Power is the energy delta since the previous call, so the first
        call returns 0. Requires read access to the powercap interface.
        """
        if platform.system() != "Linux":
            return 0.0
        energy_file = Path("/sys/class/powercap/intel-rapl/intel-rapl:0/energy_uj")
        try:
            energy = int(energy_file.read_text())
        except (OSError, ValueError):
            return 0.0

        now = time.monotonic()
        previous = self._rapl_sample
        self._rapl_sample = (energy, now)
        if previous is None or energy < previous[0] or now <= previous[1]:
            return 0.0
        return (energy - previous[0]) / (now - previous[1]) / 1_000_000

    def get_memory_usage(self) -> Tuple[float, float, float]:
        """Get RAM used, swap used and process RSS in GB."""
        mem = psutil.virtual_memory()
        swap = psutil.swap_memory()
        try:
            rss = self._process.memory_info().rss
        except psutil.Error:
            rss = 0
        return mem.used / _GIB, swap.used / _GIB, rss / _GIB

    def read_live_metrics(self) -> LiveMetrics:
        """Collect all available local metrics."""
        try:
            ram_used, swap_used, process_rss = self.get_memory_usage()
        except Exception as e:
            logger.debug(f"Could not read memory metrics: {e}")
            ram_used = swap_used = process_rss = 0.0

        return LiveMetrics(
            cpu_load=self.get_cpu_load(),
            cpu_power=self.get_cpu_power(),
            cpu_mhz=self.get_cpu_frequency(),
            cpu_temp=self.get_cpu_temperature(),
            ram_used=ram_used,
            swap_used=swap_used,
            process_rss=process_rss,
        )
