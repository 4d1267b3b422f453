"""
procmetrics — CLI Entry Point

Usage:
    procmetrics serve [--host H] [--port N] [--period S]
    procmetrics report
    procmetrics snapshot [--json]
    procmetrics health [--json]
    procmetrics config
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv

from .cli.ops import health, report_cmd, snapshot_cmd
from .config.loader import load_settings
from .logging_config import setup_logging
from .validation import ConfigurationError


@click.group()
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              help="YAML settings file")
@click.option("--env-file", type=click.Path(dir_okay=False, path_type=Path), default=".env",
              show_default=True, help="Environment file loaded before settings")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], env_file: Path) -> None:
    """procmetrics — Python process metrics for Prometheus."""
    if env_file.exists():
        load_dotenv(env_file)

    try:
        settings = load_settings(config_path)
    except ConfigurationError as e:
        raise click.ClickException(str(e))

    setup_logging(settings.log_level, settings.log_format)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@cli.command()
@click.option("--host", default=None, help="Bind address (overrides settings)")
@click.option("--port", type=int, default=None, help="Port (overrides settings)")
@click.option("--period", type=float, default=None, help="Seconds between samples")
@click.pass_context
def serve(
    ctx: click.Context,
    host: Optional[str],
    port: Optional[int],
    period: Optional[float],
) -> None:
    """Serve /metrics and /health over HTTP."""
    from .server import run_server

    settings = ctx.obj["settings"]
    if host is not None:
        settings.host = host
    if port is not None:
        settings.port = port
    if period is not None:
        settings.period = period

    try:
        settings.validate()
    except ConfigurationError as e:
        raise click.ClickException(str(e))

    run_server(settings)


@cli.command("config")
@click.pass_context
def config_cmd(ctx: click.Context) -> None:
    """Show the effective settings."""
    click.echo(json.dumps(ctx.obj["settings"].to_dict(), indent=2))


cli.add_command(report_cmd)
cli.add_command(snapshot_cmd)
cli.add_command(health)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
