"""Domain entities for flat_db.

Exports:
    Table:
        - Column: Declared column (name + resolved type)
        - Row: Positional tuple of canonical values, None for NULL
        - Table: Columns plus accumulated rows
"""

from flat_db.domain.entities.table import Column, Row, Table

__all__ = [
    "Column",
    "Row",
    "Table",
]
