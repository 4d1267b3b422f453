"""
Observability Module — Gauge catalog, emitter, registries, and health checks.
"""

from .catalog import CATALOG_SCHEMA, GaugeCatalog, build_catalog
from .emitter import ProcessMetricsEmitter
from .health import ComponentHealth, HealthChecker, HealthStatus, SystemHealth
from .registry import GaugeHandle, create_gauge, default_registry, render, unregister

__all__ = [
    "ProcessMetricsEmitter",
    "GaugeCatalog",
    "CATALOG_SCHEMA",
    "build_catalog",
    "GaugeHandle",
    "create_gauge",
    "unregister",
    "render",
    "default_registry",
    "HealthChecker",
    "HealthStatus",
    "SystemHealth",
    "ComponentHealth",
]
