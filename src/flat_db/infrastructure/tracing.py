"""OpenTelemetry tracing for statements and table storage.

Span names used by flat_db:
    statement.execute   one per statement, tagged with its type and table
    table_store.load    one per full-table read
    table_store.save    one per full-table rewrite

Without setup_tracing the API's no-op tracer is used and spans cost nothing.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.trace import Status, StatusCode

from flat_db.infrastructure.config import ObservabilityConfig

TRACER_NAME = "flat_db"

_tracer: trace.Tracer | None = None


def setup_tracing(
    config: ObservabilityConfig | None = None,
    console_export: bool = False,
) -> trace.Tracer:
    """
    Install a tracer provider for flat_db.

    Spans go to the OTLP collector named by ``config.otel_endpoint`` when it
    is set, and to stdout when ``console_export`` is True.

    Args:
        config: Observability settings (service name and collector endpoint)
        console_export: Also print finished spans, for debugging

    Returns:
        The flat_db tracer
    """
    global _tracer

    from flat_db import __version__

    config = config or ObservabilityConfig()
    provider = TracerProvider(
        resource=Resource.create(
            {
                "service.name": config.otel_service_name,
                "service.version": __version__,
            }
        )
    )

    if config.otel_endpoint:
        exporter = OTLPSpanExporter(endpoint=config.otel_endpoint, insecure=True)
        provider.add_span_processor(BatchSpanProcessor(exporter))

    if console_export:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    _tracer = trace.get_tracer(TRACER_NAME, __version__)
    return _tracer


def get_tracer() -> trace.Tracer:
    """Get the flat_db tracer, falling back to the global provider."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(TRACER_NAME)
    return _tracer


@contextmanager
def trace_span(
    name: str,
    attributes: dict[str, Any] | None = None,
) -> Generator[trace.Span, None, None]:
    """
    Run a block inside a span. Attributes whose value is None are skipped.

    Args:
        name: Span name, e.g. ``table_store.save``
        attributes: Initial span attributes

    Yields:
        The active span
    """
    with get_tracer().start_as_current_span(name) as span:
        for key, value in (attributes or {}).items():
            if value is not None:
                span.set_attribute(key, value)
        yield span


def mark_failed(span: trace.Span, error: Exception) -> None:
    """Record a handled statement failure on a span.

    The error is caught before it leaves the span, so the span would
    otherwise end with an unset status.
    """
    span.set_attribute("statement.error", type(error).__name__)
    span.set_status(Status(StatusCode.ERROR, str(error)))
