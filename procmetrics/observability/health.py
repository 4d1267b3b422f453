"""
Health Check — Exporter health status for monitoring.

Provides a structured health check with component status.

## Usage

    from procmetrics.observability.health import HealthChecker

    checker = HealthChecker(emitter)
    status = checker.check()

    if status.healthy:
        print("Exporter operational")
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from ..sampling import ProcessMetrics
from .emitter import ProcessMetricsEmitter

logger = logging.getLogger(__name__)


class HealthStatus(str, Enum):
    """Health status levels."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class ComponentHealth:
    """Health status of a single component."""

    name: str
    status: HealthStatus
    message: str = ""
    latency_ms: Optional[float] = None
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SystemHealth:
    """Overall exporter health status."""

    status: HealthStatus
    timestamp: str
    uptime_seconds: float
    components: List[ComponentHealth]

    @property
    def healthy(self) -> bool:
        return self.status == HealthStatus.HEALTHY

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "timestamp": self.timestamp,
            "uptime_seconds": self.uptime_seconds,
            "healthy": self.healthy,
            "components": [
                {
                    "name": c.name,
                    "status": c.status.value,
                    "message": c.message,
                    "latency_ms": c.latency_ms,
                    "details": c.details,
                }
                for c in self.components
            ],
        }


class HealthChecker:
    """
    Exporter health checker.

    Checks the emitter, its snapshot source, and its registries.
    """

    def __init__(self, emitter: ProcessMetricsEmitter):
        self.emitter = emitter
        self._start_time = time.time()

    def check(self) -> SystemHealth:
        """Run all health checks and return status."""
        components = [self._check_emitter()]

        # Source and registries are unreachable once the emitter is gone
        if not self.emitter.destroyed:
            components.append(self._check_snapshot_source())
            components.append(self._check_registries())

        statuses = [c.status for c in components]
        if HealthStatus.UNHEALTHY in statuses:
            overall = HealthStatus.UNHEALTHY
        elif HealthStatus.DEGRADED in statuses:
            overall = HealthStatus.DEGRADED
        else:
            overall = HealthStatus.HEALTHY

        return SystemHealth(
            status=overall,
            timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            uptime_seconds=time.time() - self._start_time,
            components=components,
        )

    def _check_emitter(self) -> ComponentHealth:
        if self.emitter.destroyed:
            return ComponentHealth(
                name="emitter",
                status=HealthStatus.UNHEALTHY,
                message="Emitter has been destroyed",
            )
        return ComponentHealth(
            name="emitter",
            status=HealthStatus.HEALTHY,
            message="Emitter active",
            details={"initialized": self.emitter.initialized},
        )

    def _check_snapshot_source(self) -> ComponentHealth:
        """Take one snapshot and time it, leaving the loop delay window intact."""
        source = self.emitter.source
        start = time.time()

        try:
            if isinstance(source, ProcessMetrics):
                snapshot = source.metrics(reset_loop=False)
            else:
                snapshot = source.metrics()
        except Exception as e:
            logger.warning(f"Snapshot source check failed: {e}")
            return ComponentHealth(
                name="snapshot_source",
                status=HealthStatus.UNHEALTHY,
                message=f"Snapshot failed: {e}",
            )

        latency = (time.time() - start) * 1000
        return ComponentHealth(
            name="snapshot_source",
            status=HealthStatus.HEALTHY,
            message="Snapshot taken successfully",
            latency_ms=latency,
            details={
                "pid": snapshot.process.pid,
                "rss_bytes": snapshot.process.memory_usage.rss,
            },
        )

    def _check_registries(self) -> ComponentHealth:
        count = len(self.emitter.registries)
        if count == 0:
            return ComponentHealth(
                name="registries",
                status=HealthStatus.DEGRADED,
                message="No registries configured; reports are empty",
                details={"count": 0},
            )
        return ComponentHealth(
            name="registries",
            status=HealthStatus.HEALTHY,
            message=f"{count} registries configured",
            details={"count": count},
        )
