"""Prometheus metrics for flat_db."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)


class MetricsRegistry:
    """Registry of all flat_db metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Statement metrics
        self.statements_total = Counter(
            "flatdb_statements_total",
            "Total number of statements executed",
            ["statement_type", "status"],  # status: success, error
            registry=self._registry,
        )

        self.statement_latency_seconds = Histogram(
            "flatdb_statement_latency_seconds",
            "Statement latency in seconds",
            ["statement_type"],  # create_table, insert, select, unknown
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
            registry=self._registry,
        )

        self.rows_inserted_total = Counter(
            "flatdb_rows_inserted_total",
            "Total rows inserted",
            ["table"],
            registry=self._registry,
        )

        # Storage metrics
        self.table_loads_total = Counter(
            "flatdb_table_loads_total",
            "Total full-table loads from storage",
            registry=self._registry,
        )

        self.table_saves_total = Counter(
            "flatdb_table_saves_total",
            "Total full-table rewrites to storage",
            registry=self._registry,
        )

        # Server info
        self.info = Info(
            "flatdb",
            "flat_db information",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        """The underlying Prometheus collector registry."""
        return self._registry


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(port: int = 8001, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up Prometheus metrics server.

    Args:
        port: Port for the metrics HTTP server
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    _metrics = MetricsRegistry(registry)

    # Set server info
    from flat_db import __version__
    _metrics.info.info({
        "version": __version__,
    })

    # Start HTTP server for Prometheus scraping
    start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
