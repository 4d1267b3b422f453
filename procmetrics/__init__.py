"""
procmetrics — Publish Python process and host health as Prometheus gauges.
"""

from .observability import ProcessMetricsEmitter, default_registry
from .sampling import ProcessMetrics, Snapshot
from .validation import ConfigurationError, InvalidArgumentError, InvalidStateError

__version__ = "1.0.0"

__all__ = [
    "ProcessMetricsEmitter",
    "ProcessMetrics",
    "Snapshot",
    "default_registry",
    "InvalidArgumentError",
    "InvalidStateError",
    "ConfigurationError",
]
