"""Prometheus metrics — engine collectors and HTTP request middleware."""

from sol_dashboard.metrics.collector import EngineMetrics, MetricsCollector
from sol_dashboard.metrics.middleware import PrometheusMiddleware

__all__ = ["EngineMetrics", "MetricsCollector", "PrometheusMiddleware"]
