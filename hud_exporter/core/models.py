"""
Data models for exported performance metrics.

These dataclasses represent the live values read from the HUD and
the snapshot served to Prometheus scrapers.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


# Indexed by the HUD's engine type
ENGINE_NAMES = (
    "Unknown",
    "OpenGL",
    "VULKAN",
    "DXVK",
    "VKD3D",
    "DAMAVAND",
    "ZINK",
    "WINED3D",
    "Feral3D",
    "ToGL",
    "GAMESCOPE",
)

UNKNOWN_GRAPHICS_API = "unknown"


@dataclass(frozen=True)
class BindTarget:
    """Resolved address and port for the HTTP listener."""

    address: str = "0.0.0.0"
    port: int = 16969

    def __str__(self) -> str:
        return f"{self.address}:{self.port}"


@dataclass
class LiveMetrics:
    """Raw values as published by the HUD for the current frame."""

    fps: float = 0.0
    frametime: float = 0.0
    cpu_load: float = 0.0
    cpu_power: float = 0.0
    cpu_mhz: int = 0
    cpu_temp: int = 0
    gpu_load: float = 0.0
    gpu_temp: int = 0
    gpu_core_clock: int = 0
    gpu_mem_clock: int = 0
    gpu_power: float = 0.0
    gpu_vram_used: float = 0.0
    ram_used: float = 0.0
    swap_used: float = 0.0
    process_rss: float = 0.0
    engine: Optional[int] = None  # None when no swapchain stats exist yet


@dataclass(frozen=True)
class MetricsSnapshot:
    """
    Complete set of exported values at one sampling tick.

    Snapshots are never mutated; the sampler builds a new one on every
    tick and swaps it into the store.
    """

    fps: float = 0.0
    frametime: float = 0.0
    cpu_load: float = 0.0
    cpu_power: float = 0.0
    cpu_mhz: int = 0
    cpu_temp: int = 0
    gpu_load: float = 0.0
    gpu_temp: int = 0
    gpu_core_clock: int = 0
    gpu_mem_clock: int = 0
    gpu_power: float = 0.0
    gpu_vram_used: float = 0.0
    ram_used: float = 0.0
    swap_used: float = 0.0
    process_rss: float = 0.0
    process_name: str = ""
    graphics_api: str = ""
    process_pid: int = 0
    timestamp: Optional[datetime] = None

    @classmethod
    def from_live(
        cls,
        live: LiveMetrics,
        process_name: str,
        process_pid: int,
        graphics_api: str,
        timestamp: Optional[datetime] = None,
    ) -> "MetricsSnapshot":
        """Build a snapshot from live values plus process identity."""
        return cls(
            fps=float(live.fps),
            frametime=float(live.frametime),
            cpu_load=float(live.cpu_load),
            cpu_power=float(live.cpu_power),
            cpu_mhz=int(live.cpu_mhz),
            cpu_temp=int(live.cpu_temp),
            gpu_load=float(live.gpu_load),
            gpu_temp=int(live.gpu_temp),
            gpu_core_clock=int(live.gpu_core_clock),
            gpu_mem_clock=int(live.gpu_mem_clock),
            gpu_power=float(live.gpu_power),
            gpu_vram_used=float(live.gpu_vram_used),
            ram_used=float(live.ram_used),
            swap_used=float(live.swap_used),
            process_rss=float(live.process_rss),
            process_name=process_name,
            graphics_api=graphics_api,
            process_pid=process_pid,
            timestamp=timestamp or datetime.now(),
        )


def graphics_api_name(engine: Optional[int], names=ENGINE_NAMES) -> str:
    """Look up the graphics API name for an engine index."""
    if engine is None or engine < 0 or engine >= len(names):
        return UNKNOWN_GRAPHICS_API
    return names[engine]
