"""Statement recognizer.

This module turns raw statement text into one of a closed set of statement
variants. The leading keywords are classified with the sqlglot tokenizer;
the rest of each statement is matched against a fixed grammar.

Supported statements:
    - CREATE TABLE [IF NOT EXISTS] name (col TYPE, ...)
    - INSERT INTO name VALUES (v1, v2, ...)
    - SELECT * | col, ... FROM name

Each may end with a single optional semicolon.

Known limitation: INSERT values are split on every comma. A comma inside a
quoted literal is a split point, so 'a,b' arrives as two values.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import assert_never

import sqlglot
from sqlglot.errors import TokenError
from sqlglot.tokens import TokenType

from flat_db.domain.errors import (
    MalformedColumnDefinitionError,
    MalformedStatementError,
    UnsupportedStatementError,
)


class StatementType(Enum):
    """Types of statements."""

    CREATE_TABLE = "create_table"
    INSERT = "insert"
    SELECT = "select"


@dataclass(frozen=True, slots=True)
class ColumnDefinition:
    """Column definition for CREATE TABLE, with its type still unresolved."""

    name: str
    type_descriptor: str


@dataclass(frozen=True, slots=True)
class CreateTableStatement:
    """Create a new table."""

    table_name: str
    columns: tuple[ColumnDefinition, ...]
    if_not_exists: bool = False

    @property
    def statement_type(self) -> StatementType:
        return StatementType.CREATE_TABLE

    def __str__(self) -> str:
        cols = ", ".join(f"{c.name} {c.type_descriptor}" for c in self.columns)
        return f"CreateTable({self.table_name}, [{cols}])"


@dataclass(frozen=True, slots=True)
class InsertStatement:
    """Insert one row. None marks an absent value."""

    table_name: str
    values: tuple[str | None, ...]

    @property
    def statement_type(self) -> StatementType:
        return StatementType.INSERT

    def __str__(self) -> str:
        return f"Insert({self.table_name}, values={len(self.values)})"


@dataclass(frozen=True, slots=True)
class SelectStatement:
    """Select columns from a table. ``columns`` is None for SELECT *."""

    table_name: str
    columns: tuple[str, ...] | None = None

    @property
    def statement_type(self) -> StatementType:
        return StatementType.SELECT

    @property
    def is_wildcard(self) -> bool:
        return self.columns is None

    def __str__(self) -> str:
        cols = "*" if self.columns is None else ", ".join(self.columns)
        return f"Select({cols} FROM {self.table_name})"


Statement = CreateTableStatement | InsertStatement | SelectStatement


_FLAGS = re.IGNORECASE | re.DOTALL | re.ASCII

_LEADING_WORDS = re.compile(r"[A-Za-z]+(?:\s+[A-Za-z]+)?")
_CREATE_TABLE = re.compile(
    r"CREATE\s+TABLE\s+(?:(IF\s+NOT\s+EXISTS)\s+)?(\w+)\s*\((.+)\)\s*;?", _FLAGS
)
_INSERT = re.compile(r"INSERT\s+INTO\s+(\w+)\s+VALUES\s*\((.+)\)\s*;?", _FLAGS)
_SELECT = re.compile(r"SELECT\s+(.+?)\s+FROM\s+(\w+)\s*;?", _FLAGS)
_IDENTIFIER = re.compile(r"\w+", re.ASCII)

NULL_KEYWORD = "NULL"


class SQLParser:
    """Statement recognizer.

    Example:
        >>> parser = SQLParser()
        >>> print(parser.parse("SELECT id, name FROM users"))
        Select(id, name FROM users)
    """

    def __init__(self, dialect: str = "sqlite") -> None:
        """Initialize the parser.

        Args:
            dialect: sqlglot dialect used to tokenize the leading keywords.
        """
        self._dialect = dialect

    def parse(self, sql: str) -> Statement:
        """Parse statement text.

        Args:
            sql: The statement to parse.

        Returns:
            The recognized statement.

        Raises:
            UnsupportedStatementError: If the text does not start with a
                supported keyword.
            MalformedStatementError: If the text does not match the grammar
                of its statement.
            MalformedColumnDefinitionError: If a CREATE TABLE column lacks
                a name or a type.
        """
        text = sql.strip()
        statement_type = self.classify(text)

        if statement_type is StatementType.CREATE_TABLE:
            return self._parse_create_table(text)
        elif statement_type is StatementType.INSERT:
            return self._parse_insert(text)
        elif statement_type is StatementType.SELECT:
            return self._parse_select(text)
        else:
            assert_never(statement_type)

    def classify(self, text: str) -> StatementType:
        """Classify a statement by its leading keywords, case-insensitively."""
        leading = _LEADING_WORDS.match(text.lstrip())
        if leading is None:
            raise UnsupportedStatementError(f"Unsupported statement: {text}")

        try:
            tokens = sqlglot.tokenize(leading.group(0), read=self._dialect)
        except TokenError as e:
            raise UnsupportedStatementError(f"Unsupported statement: {text}") from e

        kinds = [token.token_type for token in tokens]
        if kinds[:2] == [TokenType.CREATE, TokenType.TABLE]:
            return StatementType.CREATE_TABLE
        if kinds[:2] == [TokenType.INSERT, TokenType.INTO]:
            return StatementType.INSERT
        if kinds[:1] == [TokenType.SELECT]:
            return StatementType.SELECT
        raise UnsupportedStatementError(f"Unsupported statement: {text}")

    def _parse_create_table(self, text: str) -> CreateTableStatement:
        match = _CREATE_TABLE.fullmatch(text)
        if match is None:
            raise MalformedStatementError("Invalid CREATE TABLE syntax")

        if_not_exists = match.group(1) is not None
        table_name = match.group(2)

        columns = []
        for definition in split_top_level(match.group(3)):
            parts = definition.split(None, 1)
            if len(parts) < 2:
                raise MalformedColumnDefinitionError(
                    f"Invalid column definition: {definition!r}"
                )
            name, descriptor = parts[0], parts[1].strip()
            if not _IDENTIFIER.fullmatch(name):
                raise MalformedColumnDefinitionError(f"Invalid column name: {name!r}")
            columns.append(ColumnDefinition(name=name, type_descriptor=descriptor))

        return CreateTableStatement(
            table_name=table_name, columns=tuple(columns), if_not_exists=if_not_exists
        )

    def _parse_insert(self, text: str) -> InsertStatement:
        match = _INSERT.fullmatch(text)
        if match is None:
            raise MalformedStatementError("Invalid INSERT syntax")

        values = tuple(_clean_value(raw) for raw in match.group(2).split(","))
        return InsertStatement(table_name=match.group(1), values=values)

    def _parse_select(self, text: str) -> SelectStatement:
        match = _SELECT.fullmatch(text)
        if match is None:
            raise MalformedStatementError("Invalid SELECT syntax")

        columns_text = match.group(1).strip()
        table_name = match.group(2)
        if columns_text == "*":
            return SelectStatement(table_name=table_name, columns=None)

        columns = tuple(name.strip() for name in columns_text.split(","))
        for name in columns:
            if not _IDENTIFIER.fullmatch(name):
                raise MalformedStatementError(f"Invalid column in SELECT list: {name!r}")
        return SelectStatement(table_name=table_name, columns=columns)


def split_top_level(text: str, separator: str = ",") -> list[str]:
    """Split on separators outside parentheses, trimming each piece.

    ``"a INT, b DECIMAL(10,2)"`` splits into ``["a INT", "b DECIMAL(10,2)"]``.

    Raises:
        MalformedStatementError: If the parentheses are unbalanced.
    """
    pieces = []
    depth = 0
    current: list[str] = []
    for char in text:
        if char == separator and depth == 0:
            pieces.append("".join(current).strip())
            current = []
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise MalformedStatementError(f"Unbalanced parentheses in: {text}")
        current.append(char)

    if depth != 0:
        raise MalformedStatementError(f"Unbalanced parentheses in: {text}")
    pieces.append("".join(current).strip())
    return pieces


def _clean_value(raw: str) -> str | None:
    """Trim a value token and strip one pair of surrounding single quotes.

    An unquoted NULL keyword is an absent value.
    """
    value = raw.strip()
    if len(value) >= 2 and value.startswith("'") and value.endswith("'"):
        return value[1:-1]
    if value.upper() == NULL_KEYWORD:
        return None
    return value
