"""Outbound adapters - implementations of outbound ports.

These adapters implement table persistence: the CSV file pair used in
production and an in-memory store for tests.
"""

from flat_db.adapters.outbound.csv_table_store import CsvTableStore
from flat_db.adapters.outbound.memory_table_store import InMemoryTableStore

__all__ = [
    "CsvTableStore",
    "InMemoryTableStore",
]
