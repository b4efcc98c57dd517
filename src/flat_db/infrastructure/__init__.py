"""Infrastructure layer - cross-cutting concerns."""

from flat_db.infrastructure.config import Config, get_config
from flat_db.infrastructure.logging import (
    get_logger,
    setup_logging,
    setup_logging_from,
    statement_context,
)
from flat_db.infrastructure.metrics import setup_metrics, get_metrics, MetricsRegistry
from flat_db.infrastructure.tracing import get_tracer, mark_failed, setup_tracing, trace_span

__all__ = [
    "Config",
    "get_config",
    "setup_logging",
    "setup_logging_from",
    "get_logger",
    "statement_context",
    "setup_metrics",
    "get_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "get_tracer",
    "trace_span",
    "mark_failed",
]
