"""Statement executor.

Each statement runs against a fresh copy of its table loaded from the
TableStore; nothing is cached between statements. Mutating statements
rewrite the table in full. Every check that can fail runs before the save,
so a rejected statement never touches the files.

State machine per statement:
    CREATE TABLE: exists? -> (IF NOT EXISTS: no-op | fail) ; resolve types -> save
    INSERT:       exists? -> load -> count check -> validate values -> append -> save
    SELECT:       exists? -> load -> resolve column list -> render lines
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import assert_never

from flat_db.adapters.inbound.sql_parser import (
    CreateTableStatement,
    InsertStatement,
    SelectStatement,
    Statement,
    StatementType,
)
from flat_db.domain.entities import Column, Table
from flat_db.domain.errors import TableAlreadyExistsError, TableNotFoundError
from flat_db.infrastructure.logging import get_logger
from flat_db.infrastructure.metrics import MetricsRegistry, get_metrics
from flat_db.ports.outbound import TableStore

NULL_DISPLAY = "NULL"
COLUMN_SEPARATOR = "\t"
HEADER_RULE = "---"

logger = get_logger(__name__)


@dataclass
class ExecutionResult:
    """Result of statement execution.

    ``lines`` is the human-readable output. For SELECT, ``columns`` and
    ``rows`` also carry the projected result.
    """

    statement_type: StatementType | None = None
    lines: list[str] = field(default_factory=list)
    error: str | None = None
    columns: list[Column] = field(default_factory=list)
    rows: list[tuple[str | None, ...]] = field(default_factory=list)
    affected_rows: int = 0

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def output(self) -> str:
        """All output lines joined with newlines."""
        return "\n".join(self.lines)


class StatementExecutor:
    """Executes recognized statements against a TableStore."""

    def __init__(
        self,
        store: TableStore,
        strict_decimal_scale: bool = False,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        self._store = store
        self._strict_decimal_scale = strict_decimal_scale
        self._metrics = metrics or get_metrics()

    def execute(self, statement: Statement) -> ExecutionResult:
        """Execute one statement.

        Raises:
            FlatDBError: Any subclass; the caller decides how to report it.
        """
        if isinstance(statement, CreateTableStatement):
            return self._execute_create_table(statement)
        elif isinstance(statement, InsertStatement):
            return self._execute_insert(statement)
        elif isinstance(statement, SelectStatement):
            return self._execute_select(statement)
        else:
            assert_never(statement)

    def _execute_create_table(self, statement: CreateTableStatement) -> ExecutionResult:
        name = statement.table_name
        if self._store.exists(name):
            if statement.if_not_exists:
                logger.info("table_exists_skipped", table=name)
                return ExecutionResult(
                    statement_type=statement.statement_type,
                    lines=[f"Table already exists: {name}"],
                )
            raise TableAlreadyExistsError(name)

        # Resolve every type before anything is written.
        columns = tuple(
            Column.from_descriptor(definition.name, definition.type_descriptor)
            for definition in statement.columns
        )
        table = Table(name=name, columns=columns)
        self._store.save(table)

        logger.info("table_created", table=name, columns=len(columns))
        lines = [f"Table created: {name}", "Columns:"]
        lines.extend(f"  {column.name} {column.descriptor}" for column in columns)
        return ExecutionResult(statement_type=statement.statement_type, lines=lines)

    def _execute_insert(self, statement: InsertStatement) -> ExecutionResult:
        table = self._load(statement.table_name)
        row = table.insert(statement.values, strict_decimal_scale=self._strict_decimal_scale)
        self._store.save(table)

        self._metrics.rows_inserted_total.labels(table=table.name).inc()
        logger.info("row_inserted", table=table.name, rows=len(table.rows))
        return ExecutionResult(
            statement_type=statement.statement_type,
            lines=[f"Row inserted into: {table.name}"],
            rows=[row.values],
            affected_rows=1,
        )

    def _execute_select(self, statement: SelectStatement) -> ExecutionResult:
        table = self._load(statement.table_name)
        indexes = table.resolve_columns(statement.columns)
        columns = [table.columns[i] for i in indexes]
        rows = [tuple(row[i] for i in indexes) for row in table.rows]

        lines = [
            COLUMN_SEPARATOR.join(str(column) for column in columns),
            COLUMN_SEPARATOR.join(HEADER_RULE for _ in columns),
        ]
        lines.extend(
            COLUMN_SEPARATOR.join(NULL_DISPLAY if value is None else value for value in row)
            for row in rows
        )

        logger.debug("table_selected", table=table.name, columns=len(columns), rows=len(rows))
        return ExecutionResult(
            statement_type=statement.statement_type,
            lines=lines,
            columns=columns,
            rows=rows,
        )

    def _load(self, table_name: str) -> Table:
        if not self._store.exists(table_name):
            raise TableNotFoundError(table_name)
        return self._store.load(table_name)
