"""In-memory table store adapter.

A simple in-memory implementation of the TableStore protocol for testing
and embedding. Data is not persisted across restarts.

Tables are copied on save and on load, so an in-memory copy mutated by a
statement is only visible to later statements once it has been saved,
exactly as with the CSV store.

Usage:
    store = InMemoryTableStore()
    store.save(table)
    table = store.load("users")
"""

from __future__ import annotations

from flat_db.domain.entities import Table
from flat_db.domain.errors import TableNotFoundError


class InMemoryTableStore:
    """In-memory implementation of the TableStore protocol."""

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._tables: dict[str, Table] = {}

    def exists(self, table_name: str) -> bool:
        return table_name in self._tables

    def load(self, table_name: str) -> Table:
        stored = self._tables.get(table_name)
        if stored is None:
            raise TableNotFoundError(table_name)
        return _copy(stored)

    def save(self, table: Table) -> None:
        self._tables[table.name] = _copy(table)

    def list_tables(self) -> list[str]:
        return sorted(self._tables)


def _copy(table: Table) -> Table:
    # Columns and rows are immutable; copying the row list is enough.
    return Table(name=table.name, columns=table.columns, rows=list(table.rows))
