"""Error taxonomy for the flat-file database.

Every failure a statement can hit is a subclass of FlatDBError. Domain and
adapter code raise these; the DatabaseEngine is the only place that catches
them and turns them into a single failure line.
"""

from __future__ import annotations


class FlatDBError(Exception):
    """Base class for all flat_db errors."""

    pass


# Statement recognition


class StatementError(FlatDBError):
    """Statement text could not be recognized."""

    pass


class MalformedStatementError(StatementError):
    """Statement starts with a known keyword but does not match its grammar."""

    pass


class UnsupportedStatementError(StatementError):
    """Statement does not start with a supported keyword."""

    pass


class MalformedColumnDefinitionError(StatementError):
    """A CREATE TABLE column definition lacks a name or a type."""

    pass


# Types


class UnsupportedTypeError(FlatDBError):
    """Type descriptor does not name a supported type."""

    pass


# Catalog


class TableAlreadyExistsError(FlatDBError):
    """CREATE TABLE on a name that already has a schema file."""

    def __init__(self, table_name: str) -> None:
        super().__init__(f"Table already exists: {table_name}")
        self.table_name = table_name


class TableNotFoundError(FlatDBError):
    """Statement references a table with no schema file."""

    def __init__(self, table_name: str) -> None:
        super().__init__(f"Table does not exist: {table_name}")
        self.table_name = table_name


class ColumnCountMismatchError(FlatDBError):
    """INSERT supplied a different number of values than declared columns."""

    def __init__(self, expected: int, given: int) -> None:
        super().__init__(f"Column count mismatch. Expected: {expected}, Got: {given}")
        self.expected = expected
        self.given = given


# Value validation


class ValueValidationError(FlatDBError):
    """A value is not acceptable for its column type."""

    pass


class NumericOverflowOrFormatError(ValueValidationError):
    pass


class LengthExceededError(ValueValidationError):
    pass


class InvalidBooleanError(ValueValidationError):
    pass


class InvalidDateError(ValueValidationError):
    pass


class InvalidTimestampError(ValueValidationError):
    pass


class DecimalIntegerPartTooLargeError(ValueValidationError):
    pass


class DecimalScaleTooLargeError(ValueValidationError):
    pass


# Storage


class StorageError(FlatDBError):
    """Persisted table files could not be read or written."""

    pass
