"""
Exporter API — Scrape and health endpoints.

Blueprint: metrics_bp
Routes:
    /metrics   (Prometheus text exposition of the first registry)
    /health    (JSON health status)
"""

from __future__ import annotations

import logging

from flask import Blueprint, Response, current_app, jsonify
from prometheus_client import CONTENT_TYPE_LATEST

from ..observability.health import HealthChecker, HealthStatus
from ..validation import InvalidStateError

logger = logging.getLogger(__name__)

metrics_bp = Blueprint("metrics", __name__)


def _emitter():
    return current_app.config["EMITTER"]


@metrics_bp.route("/metrics")
def scrape():
    """
    Collect once and return the first registry's report.

    Every registry carries the same catalog, and one exposition body may not
    repeat a metric family, so only the first report is served.
    """
    try:
        report = _emitter().metrics()
    except InvalidStateError as e:
        return jsonify({"error": str(e)}), 503

    if report is None:
        return Response(status=204)
    if isinstance(report, list):
        report = report[0]
    return Response(report, content_type=CONTENT_TYPE_LATEST)


@metrics_bp.route("/health")
def health():
    """Report exporter health; 503 when unhealthy."""
    checker: HealthChecker = current_app.config["HEALTH_CHECKER"]
    result = checker.check()
    status_code = 503 if result.status == HealthStatus.UNHEALTHY else 200
    return jsonify(result.to_dict()), status_code
