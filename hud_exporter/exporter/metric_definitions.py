"""
Metric Definitions for the exposition document.

Defines the fixed set of metric families served at ``/metrics``, in
the order they are emitted.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class MetricDefinition:
    """Definition for a single metric family."""
    name: str
    attribute: str  # MetricsSnapshot field holding the value
    description: str
    precision: Optional[int] = None  # decimals, None for integers
    metric_type: str = "gauge"

    def format_value(self, value) -> str:
        """Format a sample value with this metric's precision."""
        if self.precision is None:
            return str(int(value))
        return f"{float(value):.{self.precision}f}"


class MetricDefinitions:
    """
    Metric families exported for the running application.

    Every family shares the ``process_name``, ``graphics_api`` and
    ``pid`` labels.
    """

    PREFIX = "mangohud"

    # Frame timing
    FPS = MetricDefinition(
        name=f"{PREFIX}_fps_current",
        attribute="fps",
        description="Current frames per second",
        precision=2,
    )
    FRAMETIME = MetricDefinition(
        name=f"{PREFIX}_frametime_ms",
        attribute="frametime",
        description="Current frame time in milliseconds",
        precision=3,
    )

    # CPU
    CPU_LOAD = MetricDefinition(
        name=f"{PREFIX}_cpu_load_percent",
        attribute="cpu_load",
        description="CPU load percentage",
        precision=1,
    )
    CPU_POWER = MetricDefinition(
        name=f"{PREFIX}_cpu_power_watts",
        attribute="cpu_power",
        description="CPU power consumption in watts",
        precision=1,
    )
    CPU_FREQUENCY = MetricDefinition(
        name=f"{PREFIX}_cpu_frequency_mhz",
        attribute="cpu_mhz",
        description="CPU frequency in MHz",
    )
    CPU_TEMPERATURE = MetricDefinition(
        name=f"{PREFIX}_cpu_temperature_celsius",
        attribute="cpu_temp",
        description="CPU temperature in Celsius",
    )

    # GPU
    GPU_LOAD = MetricDefinition(
        name=f"{PREFIX}_gpu_load_percent",
        attribute="gpu_load",
        description="GPU load percentage",
        precision=1,
    )
    GPU_TEMPERATURE = MetricDefinition(
        name=f"{PREFIX}_gpu_temperature_celsius",
        attribute="gpu_temp",
        description="GPU temperature in Celsius",
    )
    GPU_CORE_CLOCK = MetricDefinition(
        name=f"{PREFIX}_gpu_core_clock_mhz",
        attribute="gpu_core_clock",
        description="GPU core clock in MHz",
    )
    GPU_MEMORY_CLOCK = MetricDefinition(
        name=f"{PREFIX}_gpu_memory_clock_mhz",
        attribute="gpu_mem_clock",
        description="GPU memory clock in MHz",
    )
    GPU_POWER = MetricDefinition(
        name=f"{PREFIX}_gpu_power_watts",
        attribute="gpu_power",
        description="GPU power consumption in watts",
        precision=1,
    )
    GPU_VRAM_USED = MetricDefinition(
        name=f"{PREFIX}_gpu_vram_used_gb",
        attribute="gpu_vram_used",
        description="GPU VRAM used in GB",
        precision=3,
    )

    # Memory
    RAM_USED = MetricDefinition(
        name=f"{PREFIX}_ram_used_gb",
        attribute="ram_used",
        description="System RAM used in GB",
        precision=3,
    )
    SWAP_USED = MetricDefinition(
        name=f"{PREFIX}_swap_used_gb",
        attribute="swap_used",
        description="System swap used in GB",
        precision=3,
    )
    PROCESS_RSS = MetricDefinition(
        name=f"{PREFIX}_process_rss_gb",
        attribute="process_rss",
        description="Process RSS memory in GB",
        precision=3,
    )

    @classmethod
    def all(cls) -> Tuple[MetricDefinition, ...]:
        """Get every metric family in emission order."""
        return (
            cls.FPS,
            cls.FRAMETIME,
            cls.CPU_LOAD,
            cls.CPU_POWER,
            cls.CPU_FREQUENCY,
            cls.CPU_TEMPERATURE,
            cls.GPU_LOAD,
            cls.GPU_TEMPERATURE,
            cls.GPU_CORE_CLOCK,
            cls.GPU_MEMORY_CLOCK,
            cls.GPU_POWER,
            cls.GPU_VRAM_USED,
            cls.RAM_USED,
            cls.SWAP_USED,
            cls.PROCESS_RSS,
        )
