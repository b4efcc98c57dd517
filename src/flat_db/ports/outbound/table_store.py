"""Table Store port for table persistence.

This outbound port defines the contract for persisting whole tables. The
store is the only source of truth for whether a table exists; there is no
in-memory catalog.

Every statement loads the full table, mutates the in-memory copy and saves
it back in full. Implementations give no atomicity guarantee across a save.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol

from flat_db.domain.entities import Table


class TableStore(Protocol):
    """Protocol for loading and saving tables."""

    @abstractmethod
    def exists(self, table_name: str) -> bool:
        """Return True if a table with this name has been saved."""
        ...

    @abstractmethod
    def load(self, table_name: str) -> Table:
        """Load a table with all of its rows.

        Raises:
            TableNotFoundError: If the table does not exist.
            StorageError: If the persisted state cannot be read back.
        """
        ...

    @abstractmethod
    def save(self, table: Table) -> None:
        """Persist a table's schema and all of its rows, replacing any previous state.

        Raises:
            StorageError: If the write fails.
        """
        ...

    @abstractmethod
    def list_tables(self) -> list[str]:
        """Return the names of all existing tables, sorted."""
        ...
