"""CSV-based Table Store implementation.

This adapter implements the TableStore protocol with two comma-separated
files per table, both kept under a single data directory.

File Format:
    <table>_schema.csv:
        One record per column: name, type descriptor. Declaration order.
        The presence of this file is what makes the table exist.
    <table>_data.csv:
        First record: column names (informational; the loader takes column
        order from the schema file).
        One record per row: each field is the canonical value or the null
        token (NULL by default).

Every save rewrites both files in full, schema first. A crash between or
during the two writes can leave them inconsistent; nothing here guards
against that.
"""

from __future__ import annotations

import csv
import re
from pathlib import Path

from flat_db.domain.entities import Column, Row, Table
from flat_db.domain.errors import (
    ColumnCountMismatchError,
    StorageError,
    TableNotFoundError,
    UnsupportedTypeError,
    ValueValidationError,
)
from flat_db.infrastructure.config import StorageConfig
from flat_db.infrastructure.logging import get_logger
from flat_db.infrastructure.metrics import MetricsRegistry, get_metrics
from flat_db.infrastructure.tracing import trace_span

_TABLE_NAME = re.compile(r"\w+", re.ASCII)

logger = get_logger(__name__)


class CsvTableStore:
    """File-based implementation of the TableStore protocol.

    Attributes:
        data_dir: Directory holding every table's schema and data files.
    """

    def __init__(
        self,
        data_dir: str | Path | None = None,
        storage_config: StorageConfig | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            data_dir: Directory for table files (default from storage_config).
            storage_config: File naming and encoding settings.
            metrics: Metrics registry (default: the global registry).
        """
        self._config = storage_config or StorageConfig()
        self._data_dir = Path(data_dir) if data_dir is not None else self._config.data_dir
        self._metrics = metrics or get_metrics()

        self._data_dir.mkdir(parents=True, exist_ok=True)

    @property
    def data_dir(self) -> Path:
        """Directory holding the table files."""
        return self._data_dir

    def schema_path(self, table_name: str) -> Path:
        """Path of a table's schema file."""
        return self._data_dir / f"{_checked_name(table_name)}{self._config.schema_suffix}"

    def data_path(self, table_name: str) -> Path:
        """Path of a table's data file."""
        return self._data_dir / f"{_checked_name(table_name)}{self._config.data_suffix}"

    def exists(self, table_name: str) -> bool:
        return self.schema_path(table_name).is_file()

    def list_tables(self) -> list[str]:
        suffix = self._config.schema_suffix
        return sorted(
            path.name[: -len(suffix)]
            for path in self._data_dir.glob(f"*{suffix}")
            if path.is_file()
        )

    def save(self, table: Table) -> None:
        """Rewrite both files for a table."""
        with trace_span("table_store.save", {"table": table.name, "rows": len(table.rows)}):
            try:
                self._write_schema(table)
                self._write_data(table)
            except OSError as e:
                raise StorageError(f"Failed to save table {table.name}: {e}") from e

        self._metrics.table_saves_total.inc()
        logger.debug("table_saved", table=table.name, rows=len(table.rows))

    def load(self, table_name: str) -> Table:
        """Load a table; values are re-validated against their column types."""
        if not self.exists(table_name):
            raise TableNotFoundError(table_name)

        with trace_span("table_store.load", {"table": table_name}):
            try:
                table = Table(name=table_name, columns=self._read_schema(table_name))
                table.rows.extend(self._read_rows(table))
            except OSError as e:
                raise StorageError(f"Failed to load table {table_name}: {e}") from e

        self._metrics.table_loads_total.inc()
        logger.debug("table_loaded", table=table_name, rows=len(table.rows))
        return table

    def _write_schema(self, table: Table) -> None:
        with open(
            self.schema_path(table.name), "w", newline="", encoding=self._config.encoding
        ) as f:
            writer = csv.writer(f)
            for column in table.columns:
                writer.writerow([column.name, column.descriptor])

    def _write_data(self, table: Table) -> None:
        null_token = self._config.null_token
        with open(
            self.data_path(table.name), "w", newline="", encoding=self._config.encoding
        ) as f:
            writer = csv.writer(f)
            writer.writerow(table.column_names)
            for row in table.rows:
                writer.writerow([null_token if v is None else v for v in row.values])

    def _read_schema(self, table_name: str) -> tuple[Column, ...]:
        columns = []
        with open(
            self.schema_path(table_name), newline="", encoding=self._config.encoding
        ) as f:
            for line_no, record in enumerate(csv.reader(f), start=1):
                if not record:
                    continue
                if len(record) != 2:
                    raise StorageError(
                        f"Corrupt schema for {table_name}: record {line_no} has "
                        f"{len(record)} fields, expected 2"
                    )
                name, descriptor = record
                try:
                    columns.append(Column.from_descriptor(name, descriptor))
                except UnsupportedTypeError as e:
                    raise StorageError(f"Corrupt schema for {table_name}: {e}") from e
        return tuple(columns)

    def _read_rows(self, table: Table) -> list[Row]:
        path = self.data_path(table.name)
        if not path.is_file():
            return []

        null_token = self._config.null_token.casefold()
        rows = []
        with open(path, newline="", encoding=self._config.encoding) as f:
            reader = csv.reader(f)
            next(reader, None)  # header
            for line_no, record in enumerate(reader, start=2):
                if not record:
                    continue
                values = [None if v.casefold() == null_token else v for v in record]
                try:
                    rows.append(table.validate_row(values))
                except (ColumnCountMismatchError, ValueValidationError) as e:
                    raise StorageError(
                        f"Corrupt data for {table.name} at record {line_no}: {e}"
                    ) from e
        return rows


def _checked_name(table_name: str) -> str:
    if not _TABLE_NAME.fullmatch(table_name):
        raise StorageError(f"Invalid table name: {table_name!r}")
    return table_name
