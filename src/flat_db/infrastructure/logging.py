"""Structured logging for flat_db.

Statement results are written to stdout, so log lines default to stderr.
Events logged while a statement runs carry that statement's type through
``statement_context``.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import Any, Generator, TextIO

import structlog
from structlog.types import Processor

from flat_db.infrastructure.config import ObservabilityConfig


def setup_logging(
    level: str = "WARNING",
    log_format: str = "console",
    stream: TextIO | None = None,
) -> None:
    """
    Set up structured logging with structlog.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format ('json' or 'console')
        stream: Where log lines are written (default stderr)
    """
    stream = stream or sys.stderr
    numeric_level = getattr(logging, level.upper())

    logging.basicConfig(format="%(message)s", stream=stream, level=numeric_level)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    renderer: Processor
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )


def setup_logging_from(config: ObservabilityConfig, stream: TextIO | None = None) -> None:
    """Set up logging from the observability section of the configuration."""
    setup_logging(level=config.log_level, log_format=config.log_format, stream=stream)


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """
    Get a bound logger instance.

    Args:
        name: Logger name (module name typically)
        **initial_context: Initial context to bind to the logger

    Returns:
        A bound structlog logger
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger


@contextmanager
def statement_context(**context: Any) -> Generator[None, None, None]:
    """Bind statement fields to every event logged inside the block.

    Fields whose value is None are left out.
    """
    bound = {key: value for key, value in context.items() if value is not None}
    with structlog.contextvars.bound_contextvars(**bound):
        yield
