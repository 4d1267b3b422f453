"""
Shared fixtures for emitter, registry, and server tests.

Provides a deterministic snapshot source so collection tests do not depend
on the readings of the machine running them.
"""

from __future__ import annotations

import math
from typing import Any, Dict

import pytest
from prometheus_client import CollectorRegistry

from procmetrics.events import EventEmitter
from procmetrics.observability.emitter import ProcessMetricsEmitter
from procmetrics.sampling import MemoryUsage, ProcessInfo, Snapshot, SystemInfo, runtime_versions
from procmetrics.server import create_app


def make_snapshot(
    loop: float = 1.5,
    freemem: int = 4_000_000_000,
    totalmem: int = 16_000_000_000,
    process_uptime: float = 100.0,
    system_uptime: float = 86_400.0,
    **overrides: Any,
) -> Snapshot:
    """Build a Snapshot with fixed readings."""
    process = ProcessInfo(
        memory_usage=MemoryUsage(
            rss=50_000_000,
            heap_total=40_000_000,
            heap_used=30_000_000,
            external=20_000_000,
        ),
        uptime=process_uptime,
        exec_path="/usr/bin/python3",
        main_module="/srv/app/main.py",
        title="python3",
        pid=4242,
        versions=runtime_versions(),
    )
    system = SystemInfo(
        arch="x86_64",
        hostname="test-host",
        platform="linux",
        totalmem=totalmem,
        freemem=freemem,
        loadavg=(0.25, 0.5, 0.75),
        uptime=system_uptime,
    )
    fields: Dict[str, Any] = {
        "process": process,
        "system": system,
        "loop": loop,
        "handles": 12,
        "requests": 3,
    }
    fields.update(overrides)
    return Snapshot(**fields)


class FakeSource(EventEmitter):
    """Snapshot source returning a preset snapshot."""

    def __init__(self, snapshot: Snapshot | None = None):
        super().__init__()
        self.snapshot = snapshot or make_snapshot()
        self.calls = 0
        self.stopped = False

    def metrics(self) -> Snapshot:
        self.calls += 1
        return self.snapshot

    def stop(self) -> None:
        self.stopped = True


@pytest.fixture
def source():
    """Deterministic snapshot source."""
    return FakeSource()


@pytest.fixture
def nan_source():
    """Source reporting loop monitoring as disabled."""
    return FakeSource(make_snapshot(loop=math.nan))


@pytest.fixture
def registry():
    """Fresh, empty collector registry."""
    return CollectorRegistry()


@pytest.fixture
def emitter(source, registry):
    """Emitter over the fake source and one fresh registry."""
    ee = ProcessMetricsEmitter(metrics=source, registries=[registry])
    yield ee
    ee.destroy()


@pytest.fixture
def app(emitter):
    """Flask test app around the emitter fixture."""
    app = create_app(emitter)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()
