"""Database Engine - Unified entry point for the database.

This module provides the DatabaseEngine class that wires the statement
parser, the executor and the table store together, and is the single place
where statement errors are caught and turned into a failure line.

Usage:
    from flat_db.application import DatabaseEngine

    with DatabaseEngine(data_dir="/path/to/data") as db:
        db.run("CREATE TABLE users (id INTEGER, name VARCHAR(20))")
        db.run("INSERT INTO users VALUES (1, 'Alice')")
        db.run("SELECT * FROM users")

``run`` writes result lines to stdout and the error line to stderr;
``execute`` returns the same information as an ExecutionResult.
"""

from __future__ import annotations

import sys
import time
from pathlib import Path
from typing import TextIO

from flat_db.adapters.inbound.sql_parser import SQLParser
from flat_db.adapters.outbound.csv_table_store import CsvTableStore
from flat_db.application.executor import ExecutionResult, StatementExecutor
from flat_db.domain.errors import FlatDBError
from flat_db.infrastructure.config import Config
from flat_db.infrastructure.logging import get_logger, statement_context
from flat_db.infrastructure.metrics import MetricsRegistry, get_metrics
from flat_db.infrastructure.tracing import mark_failed, trace_span
from flat_db.ports.outbound import TableStore

logger = get_logger(__name__)


class DatabaseEngine:
    """Main database engine that orchestrates all components.

    Statements run one at a time and synchronously. The engine keeps no
    table state between statements; the table store is the only state.
    """

    def __init__(
        self,
        data_dir: str | Path | None = None,
        config: Config | None = None,
        store: TableStore | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the database engine.

        Args:
            data_dir: Directory for table files. Overrides config.storage.data_dir.
            config: Configuration (default: built from the environment).
            store: Table store to use instead of the CSV store.
            metrics: Metrics registry (default: the global registry).
        """
        config = config or Config()
        if data_dir is not None:
            storage = config.storage.model_copy(update={"data_dir": Path(data_dir)})
            config = config.model_copy(update={"storage": storage})
        self._config = config
        self._metrics = metrics or get_metrics()
        self._store = store

        self._parser: SQLParser | None = None
        self._executor: StatementExecutor | None = None

        self._statements_executed = 0
        self._statements_failed = 0
        self._started = False

    @property
    def config(self) -> Config:
        return self._config

    @property
    def data_dir(self) -> Path:
        """Get the data directory path."""
        return self._config.storage.data_dir

    @property
    def is_started(self) -> bool:
        """Check if the database is started."""
        return self._started

    @property
    def store(self) -> TableStore:
        if self._store is None:
            raise RuntimeError("Database engine not started")
        return self._store

    def start(self) -> None:
        """Start the database engine.

        Creates the data directory if absent and builds the parser and
        executor. Must be called before executing any statement.

        Raises:
            RuntimeError: If already started.
        """
        if self._started:
            raise RuntimeError("Database engine already started")

        if self._store is None:
            self._config.ensure_directories()
            self._store = CsvTableStore(
                storage_config=self._config.storage,
                metrics=self._metrics,
            )

        self._parser = SQLParser()
        self._executor = StatementExecutor(
            store=self._store,
            strict_decimal_scale=self._config.validation.strict_decimal_scale,
            metrics=self._metrics,
        )
        self._started = True
        logger.debug("engine_started", data_dir=str(self.data_dir))

    def stop(self) -> None:
        """Stop the database engine.

        Raises:
            RuntimeError: If not started.
        """
        if not self._started:
            raise RuntimeError("Database engine not started")

        self._parser = None
        self._executor = None
        self._started = False
        logger.debug("engine_stopped")

    def execute(self, sql: str) -> ExecutionResult:
        """Execute one statement.

        Any FlatDBError is caught here and reported through
        ``ExecutionResult.error`` as a single descriptive line.

        Args:
            sql: The statement text.

        Returns:
            ExecutionResult with output lines or an error.

        Raises:
            RuntimeError: If database not started.
        """
        if not self._started or self._parser is None or self._executor is None:
            raise RuntimeError("Database engine not started")

        statement_type = "unknown"
        start = time.perf_counter()
        with trace_span("statement.execute") as span:
            try:
                statement = self._parser.parse(sql)
                statement_type = statement.statement_type.value
                span.set_attribute("statement.type", statement_type)
                span.set_attribute("statement.table", statement.table_name)
                with statement_context(statement_type=statement_type, table=statement.table_name):
                    result = self._executor.execute(statement)
            except FlatDBError as e:
                mark_failed(span, e)
                logger.info(
                    "statement_failed",
                    statement_type=statement_type,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                result = ExecutionResult(error=f"Error: {e}")

        self._statements_executed += 1
        if not result.success:
            self._statements_failed += 1
        self._metrics.statements_total.labels(
            statement_type=statement_type,
            status="success" if result.success else "error",
        ).inc()
        self._metrics.statement_latency_seconds.labels(statement_type=statement_type).observe(
            time.perf_counter() - start
        )
        return result

    def run(self, sql: str, out: TextIO | None = None, err: TextIO | None = None) -> None:
        """Execute a statement and print its outcome.

        Result lines go to ``out`` (default stdout); the error line goes to
        ``err`` (default stderr).
        """
        result = self.execute(sql)
        if result.success:
            stream = out or sys.stdout
            for line in result.lines:
                print(line, file=stream)
        else:
            print(result.error, file=err or sys.stderr)

    def execute_many(self, statements: list[str]) -> list[ExecutionResult]:
        """Execute statements in order. A failure does not stop the rest."""
        return [self.execute(sql) for sql in statements]

    def get_stats(self) -> dict:
        """Get database statistics.

        Returns:
            Dictionary with various statistics.
        """
        stats: dict = {
            "started": self._started,
            "data_dir": str(self.data_dir),
            "statements_executed": self._statements_executed,
            "statements_failed": self._statements_failed,
        }
        if self._started and self._store is not None:
            stats["tables"] = self._store.list_tables()
        return stats

    def __enter__(self) -> "DatabaseEngine":
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.stop()
