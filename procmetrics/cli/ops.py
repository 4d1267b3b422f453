"""
CLI ops commands — one-off report, raw snapshot, and health.

Usage:
    procmetrics report
    procmetrics snapshot [--json]
    procmetrics health [--json]
"""

from __future__ import annotations

import json

import click
from prometheus_client import CollectorRegistry

from ..config.loader import Settings
from ..observability.emitter import ProcessMetricsEmitter
from ..sampling import ProcessMetrics


def _source(settings: Settings) -> ProcessMetrics:
    return ProcessMetrics(loop=settings.loop, resolution=settings.loop_resolution)


@click.command("report")
@click.pass_context
def report_cmd(ctx: click.Context) -> None:
    """Collect once and print the Prometheus report."""
    source = _source(ctx.obj["settings"])
    emitter = ProcessMetricsEmitter(metrics=source, registries=[CollectorRegistry()])
    try:
        click.echo(emitter.metrics(), nl=False)
    finally:
        emitter.destroy()
        source.stop()


@click.command("snapshot")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def snapshot_cmd(ctx: click.Context, as_json: bool) -> None:
    """Print one raw process snapshot."""
    source = _source(ctx.obj["settings"])
    try:
        snapshot = source.metrics()
    finally:
        source.stop()

    if as_json:
        click.echo(snapshot.model_dump_json(indent=2))
        return

    memory = snapshot.process.memory_usage
    loadavg = ", ".join(f"{value:.2f}" for value in snapshot.system.loadavg)
    loop = f"{snapshot.loop:.3f}ms" if snapshot.loop_enabled else "disabled"

    click.echo()
    click.secho(f"📊 Process {snapshot.process.pid} ({snapshot.process.title})", bold=True)
    click.echo(f"   RSS:       {memory.rss:,} bytes")
    click.echo(f"   Heap:      {memory.heap_used:,} / {memory.heap_total:,} bytes")
    click.echo(f"   Handles:   {snapshot.handles}")
    click.echo(f"   Requests:  {snapshot.requests}")
    click.echo(f"   Loop:      {loop}")
    click.echo()
    click.secho(f"🖥  {snapshot.system.hostname} ({snapshot.system.platform}/{snapshot.system.arch})", bold=True)
    click.echo(f"   Memory:    {snapshot.system.freemem:,} free of {snapshot.system.totalmem:,} bytes")
    click.echo(f"   Load:      {loadavg}")
    click.echo()


@click.command("health")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def health(ctx: click.Context, as_json: bool) -> None:
    """Check exporter health status."""
    from ..observability.health import HealthChecker, HealthStatus

    source = _source(ctx.obj["settings"])
    emitter = ProcessMetricsEmitter(metrics=source, registries=[CollectorRegistry()])
    try:
        result = HealthChecker(emitter).check()
    finally:
        emitter.destroy()
        source.stop()

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        status_colors = {
            HealthStatus.HEALTHY: ("✅", "green"),
            HealthStatus.DEGRADED: ("⚠️", "yellow"),
            HealthStatus.UNHEALTHY: ("❌", "red"),
        }
        icon, color = status_colors.get(result.status, ("❓", "white"))

        click.echo()
        click.secho(f"{icon} Exporter Health: {result.status.value.upper()}", fg=color, bold=True)
        click.echo()

        click.echo("Components:")
        for component in result.components:
            c_icon, c_color = status_colors.get(component.status, ("❓", "white"))
            click.echo(f"  {c_icon} ", nl=False)
            click.secho(f"{component.name}", fg=c_color, bold=True, nl=False)
            click.echo(f": {component.message}")
            if component.latency_ms:
                click.echo(f"      Latency: {component.latency_ms:.1f}ms")

        click.echo()

    if result.status == HealthStatus.UNHEALTHY:
        raise SystemExit(1)
