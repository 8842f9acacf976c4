"""Tests for the Prometheus request middleware and engine metrics."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from prometheus_client import CollectorRegistry

from sol_dashboard.metrics.collector import EngineMetrics
from sol_dashboard.metrics.middleware import PrometheusMiddleware


@pytest.fixture
def _app_with_metrics() -> tuple[FastAPI, CollectorRegistry]:
    registry = CollectorRegistry()
    app = FastAPI()
    app.add_middleware(PrometheusMiddleware, registry=registry)

    @app.get("/items/{item_id}")
    async def get_item(item_id: str) -> dict[str, str]:
        return {"id": item_id}

    return app, registry


class TestPrometheusMiddleware:
    def test_labels_by_route_template(self, _app_with_metrics: tuple) -> None:
        app, registry = _app_with_metrics
        client = TestClient(app)
        client.get("/items/a")
        client.get("/items/b")

        value = registry.get_sample_value(
            "http_request_total",
            {"method": "GET", "path": "/items/{item_id}", "status_code": "200", "app": "sol-dashboard"},
        )
        assert value == 2.0

    def test_records_duration(self, _app_with_metrics: tuple) -> None:
        app, registry = _app_with_metrics
        TestClient(app).get("/items/a")
        metric_names = [m.name for m in registry.collect()]
        assert "http_request_duration_seconds" in metric_names

    def test_unmatched_path_uses_url(self, _app_with_metrics: tuple) -> None:
        app, registry = _app_with_metrics
        TestClient(app).get("/nowhere")
        value = registry.get_sample_value(
            "http_request_total",
            {"method": "GET", "path": "/nowhere", "status_code": "404", "app": "sol-dashboard"},
        )
        assert value == 1.0


class TestEngineMetrics:
    def test_independent_registries(self) -> None:
        # Each instance owns its registry, so several can coexist.
        first, second = EngineMetrics(), EngineMetrics()
        first.record_enrichment("enriched")
        assert second.registry.get_sample_value(
            "soldash_enrichment_total", {"outcome": "enriched"}
        ) is None

    def test_pending_gauge(self) -> None:
        metrics = EngineMetrics()
        metrics.set_pending_count(4)
        assert metrics.registry.get_sample_value("soldash_pending_transactions") == 4.0

    def test_track_cron(self) -> None:
        metrics = EngineMetrics()
        with metrics.track_cron("reconcile"):
            pass
        assert metrics.registry.get_sample_value(
            "soldash_cron_histogram_count", {"job_name": "reconcile"}
        ) == 1.0
        assert metrics.registry.get_sample_value(
            "soldash_cron_last_execution_gauge", {"job_name": "reconcile"}
        ) > 0
