"""
Tests for the Gauge Catalog.
"""

import pytest
from prometheus_client import CollectorRegistry

from procmetrics.observability.catalog import CATALOG_SCHEMA, LOADAVG_SPANS, build_catalog
from procmetrics.observability.registry import registered_names


class TestBuildCatalog:
    """Tests for build_catalog."""

    def test_creates_every_gauge(self, registry):
        """Test one gauge per schema entry."""
        catalog = build_catalog([registry], ["python", "zlib"])

        assert len(catalog.gauges) == len(CATALOG_SCHEMA) == 15
        assert registered_names(registry) == {entry[1] for entry in CATALOG_SCHEMA}

    def test_named_fields_match_schema(self, registry):
        """Test each field holds the gauge of its schema row."""
        catalog = build_catalog([registry], ["python"])

        for field_name, metric, _, _ in CATALOG_SCHEMA:
            assert getattr(catalog, field_name).name == metric

    def test_version_labels(self, registry):
        """Test the versions gauge takes the given components as labels."""
        catalog = build_catalog([registry], ["python", "openssl"])

        assert catalog.versions.labels == ("python", "openssl")
        assert catalog.loadavg.labels == ("span",)
        assert catalog.rss.labels == ()

    def test_unregister(self):
        """Test a catalog can be removed from one registry."""
        cr1 = CollectorRegistry()
        cr2 = CollectorRegistry()
        catalog = build_catalog([cr1, cr2], ["python"])

        catalog.unregister(cr1)

        assert registered_names(cr1) == set()
        assert len(registered_names(cr2)) == 15

    def test_rebuild_in_same_registry_fails(self, registry):
        """Test a second catalog collides and leaves the first intact."""
        build_catalog([registry], ["python"])

        with pytest.raises(ValueError):
            build_catalog([registry], ["python"])

        assert len(registered_names(registry)) == 15

    def test_any_failure_rolls_back(self, registry, monkeypatch):
        """Test a non-collision error mid-build also unregisters earlier gauges."""
        from procmetrics.observability import catalog as catalog_module

        real_create = catalog_module.create_gauge

        def create_gauge(metric, *args):
            if metric == "python_event_loop_delay":
                raise RuntimeError("registry unavailable")
            return real_create(metric, *args)

        monkeypatch.setattr(catalog_module, "create_gauge", create_gauge)

        with pytest.raises(RuntimeError):
            build_catalog([registry], ["python"])

        assert registered_names(registry) == set()


def test_loadavg_spans():
    """Test span label values."""
    assert LOADAVG_SPANS == ("1min", "5min", "15min")
