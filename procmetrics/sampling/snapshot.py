"""
Snapshot Models — Pydantic schemas for one sample of process and host health.

A Snapshot is produced per collection and discarded afterwards; models are
frozen so a consumer cannot mutate a reading another consumer also holds.
"""

from __future__ import annotations

import math
from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field


class MemoryUsage(BaseModel):
    """Process memory breakdown in bytes."""

    model_config = ConfigDict(frozen=True)

    rss: int
    heap_total: int
    heap_used: int
    external: int


class ProcessInfo(BaseModel):
    """Process-level readings and identifiers."""

    model_config = ConfigDict(frozen=True)

    memory_usage: MemoryUsage
    uptime: float
    exec_path: str
    main_module: str
    title: str
    pid: int
    versions: Dict[str, str] = Field(default_factory=dict)


class SystemInfo(BaseModel):
    """Host-level readings and identifiers."""

    model_config = ConfigDict(frozen=True)

    arch: str
    hostname: str
    platform: str
    totalmem: int
    freemem: int
    loadavg: Tuple[float, float, float]
    uptime: float


class Snapshot(BaseModel):
    """One point-in-time bundle of process and system health readings."""

    model_config = ConfigDict(frozen=True)

    process: ProcessInfo
    system: SystemInfo
    # Milliseconds; NaN when loop monitoring is disabled
    loop: float = math.nan
    handles: int = 0
    requests: int = 0

    @property
    def loop_enabled(self) -> bool:
        return not math.isnan(self.loop)
