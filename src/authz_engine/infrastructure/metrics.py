"""Prometheus metrics for the authorization engine."""

from __future__ import annotations

from prometheus_client import (
    Counter, Histogram, Info, start_http_server, REGISTRY, CollectorRegistry,
)


class MetricsRegistry:
    """Registry of all authorization engine metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry or REGISTRY

        # Decision metrics
        self.decisions_total = Counter(
            "authz_decisions_total", "Authorization decisions", ["outcome", "reason"],
            registry=self._registry,
        )

        self.evaluation_latency_seconds = Histogram(
            "authz_evaluation_latency_seconds", "Authorization evaluation latency",
            buckets=(0.00005, 0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05),
            registry=self._registry,
        )

        # Store metrics
        self.store_mutations_total = Counter(
            "authz_store_mutations_total", "In-memory store mutations", ["store", "operation"],
            registry=self._registry,
        )

        self.info = Info("authz_engine", "Authorization engine information", registry=self._registry)

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry


_metrics: MetricsRegistry | None = None


def setup_metrics(port: int = 9108, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """Set up Prometheus metrics and start the exporter."""
    global _metrics
    _metrics = MetricsRegistry(registry)
    from authz_engine import __version__
    _metrics.info.info({"version": __version__})
    start_http_server(port, registry=registry or REGISTRY)
    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
