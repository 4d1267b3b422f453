"""
Tests for the exporter HTTP routes.
"""

from prometheus_client import CollectorRegistry

from procmetrics.observability.emitter import ProcessMetricsEmitter
from procmetrics.observability.registry import render
from procmetrics.server import create_app


class TestMetricsRoute:
    """Tests for GET /metrics."""

    def test_scrape(self, client):
        """Test the report is served as Prometheus text."""
        resp = client.get("/metrics")

        assert resp.status_code == 200
        assert resp.content_type.startswith("text/plain")
        body = resp.get_data(as_text=True)
        assert "process_resident_memory_bytes " in body
        assert "python_versions{" in body

    def test_no_registries(self, source):
        """Test zero registries answer 204."""
        emitter = ProcessMetricsEmitter(metrics=source, registries=[])
        client = create_app(emitter).test_client()

        resp = client.get("/metrics")

        assert resp.status_code == 204
        assert resp.get_data() == b""
        emitter.destroy()

    def test_multiple_registries_serve_first(self, source):
        """Test only the first registry is exposed, so each family appears once."""
        first = CollectorRegistry()
        emitter = ProcessMetricsEmitter(metrics=source, registries=[first, CollectorRegistry()])
        client = create_app(emitter).test_client()

        body = client.get("/metrics").get_data(as_text=True)

        assert body.count("# TYPE process_resident_memory_bytes gauge") == 1
        assert body == render(first)
        emitter.destroy()

    def test_destroyed_emitter(self, app, client, emitter):
        """Test a destroyed emitter answers 503."""
        emitter.destroy()

        resp = client.get("/metrics")

        assert resp.status_code == 503
        assert "destroyed" in resp.get_json()["error"]


class TestHealthRoute:
    """Tests for GET /health."""

    def test_healthy(self, client):
        resp = client.get("/health")

        assert resp.status_code == 200
        data = resp.get_json()
        assert data["status"] == "healthy"
        assert {c["name"] for c in data["components"]} == {"emitter", "snapshot_source", "registries"}

    def test_unhealthy_after_destroy(self, client, emitter):
        emitter.destroy()

        resp = client.get("/health")

        assert resp.status_code == 503
        assert resp.get_json()["status"] == "unhealthy"
