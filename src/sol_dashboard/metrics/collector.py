"""Metrics collector — Prometheus counters, gauges, histograms.

- ``soldash_record_transaction_histogram``
- ``soldash_reconcile_transaction_histogram``
- ``soldash_query_transaction_histogram``
- ``soldash_enrichment_total`` (counter by outcome)
- ``soldash_pending_transactions`` (gauge)
- ``soldash_cron_histogram`` / ``soldash_cron_last_execution_gauge``
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import TYPE_CHECKING

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

if TYPE_CHECKING:
    from collections.abc import Iterator


_PREFIX = "soldash"


class MetricsCollector:
    """Low-level Prometheus collector that owns the registry.

    Use :class:`EngineMetrics` for the high-level tracking interface.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry or CollectorRegistry()

    @property
    def registry(self) -> CollectorRegistry:
        """Return the underlying Prometheus registry."""
        return self._registry

    def gauge(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Gauge:
        """Register and return a Gauge."""
        return Gauge(name, doc, labels, registry=self._registry)

    def histogram(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Histogram:
        """Register and return a Histogram."""
        return Histogram(name, doc, labels, registry=self._registry)

    def counter(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Counter:
        """Register and return a Counter."""
        return Counter(name, doc, labels, registry=self._registry)


class EngineMetrics:
    """High-level ledger metrics.

    All histograms track operation duration in seconds.
    """

    def __init__(self, collector: MetricsCollector | None = None) -> None:
        self._collector = collector or MetricsCollector()

        self._record_tx = self._collector.histogram(
            f"{_PREFIX}_record_transaction_histogram",
            "Duration of transaction recording operations",
        )
        self._reconcile_tx = self._collector.histogram(
            f"{_PREFIX}_reconcile_transaction_histogram",
            "Duration of transaction status updates",
        )
        self._query_tx = self._collector.histogram(
            f"{_PREFIX}_query_transaction_histogram",
            "Duration of transaction history queries",
        )
        self._enrichment = self._collector.counter(
            f"{_PREFIX}_enrichment",
            "Chain enrichment lookups by outcome",
            ("outcome",),
        )
        self._pending = self._collector.gauge(
            f"{_PREFIX}_pending_transactions",
            "Records still awaiting a terminal status",
        )

        self._cron_histogram = self._collector.histogram(
            f"{_PREFIX}_cron_histogram",
            "Duration of cron job executions",
            ("job_name",),
        )
        self._cron_last = self._collector.gauge(
            f"{_PREFIX}_cron_last_execution_gauge",
            "Timestamp of last cron execution",
            ("job_name",),
        )

    @property
    def registry(self) -> CollectorRegistry:
        """Return the underlying Prometheus registry."""
        return self._collector.registry

    def record_enrichment(self, outcome: str) -> None:
        """Count one chain enrichment lookup."""
        self._enrichment.labels(outcome=outcome).inc()

    def set_pending_count(self, count: int) -> None:
        """Set the number of records still pending."""
        self._pending.set(count)

    @contextmanager
    def track_record_transaction(self) -> Iterator[None]:
        """Track the duration of a transaction recording."""
        start = time.monotonic()
        try:
            yield
        finally:
            self._record_tx.observe(time.monotonic() - start)

    @contextmanager
    def track_reconcile_transaction(self) -> Iterator[None]:
        """Track the duration of a status update."""
        start = time.monotonic()
        try:
            yield
        finally:
            self._reconcile_tx.observe(time.monotonic() - start)

    @contextmanager
    def track_query_transaction(self) -> Iterator[None]:
        """Track the duration of a history query."""
        start = time.monotonic()
        try:
            yield
        finally:
            self._query_tx.observe(time.monotonic() - start)

    @contextmanager
    def track_cron(self, job_name: str) -> Iterator[None]:
        """Track the duration of a cron job and record last execution time."""
        start = time.monotonic()
        try:
            yield
        finally:
            self._cron_histogram.labels(job_name=job_name).observe(time.monotonic() - start)
            self._cron_last.labels(job_name=job_name).set(time.time())
