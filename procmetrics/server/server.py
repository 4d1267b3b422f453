"""
Exporter Server — Flask-based scrape endpoint.

Serves the emitter's reports for a Prometheus scraper. Flask's built-in
server is enough for one scraper polling every few seconds; put a WSGI
server in front for anything heavier.
"""

from __future__ import annotations

import logging

from flask import Flask

from ..config.loader import Settings
from ..observability.emitter import ProcessMetricsEmitter
from ..observability.health import HealthChecker
from ..sampling import ProcessMetrics
from .routes import metrics_bp

logger = logging.getLogger(__name__)


def create_app(emitter: ProcessMetricsEmitter) -> Flask:
    """Create the Flask application around an emitter."""
    app = Flask(__name__)

    app.config["EMITTER"] = emitter
    app.config["HEALTH_CHECKER"] = HealthChecker(emitter)

    app.register_blueprint(metrics_bp)

    return app


def run_server(settings: Settings) -> None:
    """
    Sample on a timer and serve /metrics until interrupted.

    Args:
        settings: Loaded settings (period, loop, host, port)
    """
    source = ProcessMetrics(
        period=settings.period,
        loop=settings.loop,
        resolution=settings.loop_resolution,
    )
    emitter = ProcessMetricsEmitter(metrics=source)
    emitter.on(
        "metrics",
        lambda report: logger.debug(f"Pushed report ({len(report or '')} bytes)"),
    )

    app = create_app(emitter)

    logger.info(f"Serving metrics on http://{settings.host}:{settings.port}/metrics")
    try:
        app.run(host=settings.host, port=settings.port, debug=False, use_reloader=False)
    finally:
        emitter.destroy()
        source.stop()
        logger.info("Exporter stopped")
