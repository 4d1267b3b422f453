"""
Sampling — Snapshot source for process and host health readings.
"""

from .loop_monitor import LoopDelayMonitor
from .process_metrics import ProcessMetrics
from .runtime import runtime_versions
from .snapshot import MemoryUsage, ProcessInfo, Snapshot, SystemInfo

__all__ = [
    "ProcessMetrics",
    "LoopDelayMonitor",
    "runtime_versions",
    "Snapshot",
    "ProcessInfo",
    "SystemInfo",
    "MemoryUsage",
]
