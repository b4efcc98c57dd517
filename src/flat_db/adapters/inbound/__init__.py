"""Inbound adapters for flat_db.

Inbound adapters handle incoming requests and convert them to
internal domain operations.

Exports:
    SQL Parser:
        - SQLParser: Recognizer that converts statement text to statements
        - Statement: Union of the supported statement variants
        - StatementType: Statement kind tag

The REST API lives in ``flat_db.adapters.inbound.rest_api`` and is imported
from there directly.
"""

from flat_db.adapters.inbound.sql_parser import (
    ColumnDefinition,
    CreateTableStatement,
    InsertStatement,
    SelectStatement,
    SQLParser,
    Statement,
    StatementType,
    split_top_level,
)

__all__ = [
    # SQL Parser
    "SQLParser",
    "split_top_level",
    # Statements
    "Statement",
    "StatementType",
    "ColumnDefinition",
    "CreateTableStatement",
    "InsertStatement",
    "SelectStatement",
]
