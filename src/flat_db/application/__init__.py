"""Application layer for flat_db.

The application layer orchestrates domain logic to fulfill use cases.

Exports:
    DatabaseEngine:
        - DatabaseEngine: Main entry point; parses, executes and reports errors
    Executor:
        - StatementExecutor: Runs CREATE TABLE / INSERT / SELECT against a TableStore
        - ExecutionResult: Result of statement execution
"""

from flat_db.application.database_engine import DatabaseEngine
from flat_db.application.executor import ExecutionResult, StatementExecutor

__all__ = [
    "DatabaseEngine",
    "StatementExecutor",
    "ExecutionResult",
]
