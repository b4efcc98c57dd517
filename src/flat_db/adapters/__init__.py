"""Adapters layer - concrete implementations of port interfaces.

Adapters provide the actual implementations:
- Inbound adapters: Handle incoming requests (statement text, REST)
- Outbound adapters: Implement external dependencies (table files)
"""

from flat_db.adapters.outbound import (
    CsvTableStore,
    InMemoryTableStore,
)

__all__ = [
    # Outbound adapters
    "CsvTableStore",
    "InMemoryTableStore",
]
