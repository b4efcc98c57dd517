"""Table and row model.

A Table holds its declared columns and the rows accumulated so far. Columns
are fixed when the table is created. Each Row is positionally aligned with
the table's columns; None is NULL and is distinct from the empty string.
Values stored in a Row are always in their column type's canonical form.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from flat_db.domain.errors import ColumnCountMismatchError
from flat_db.domain.value_objects import ResolvedType, render, resolve, validate


@dataclass(frozen=True, slots=True)
class Column:
    """A declared column. Names are matched case-insensitively."""

    name: str
    type: ResolvedType

    @classmethod
    def from_descriptor(cls, name: str, descriptor: str) -> Column:
        """Build a column from a raw type descriptor.

        Raises:
            UnsupportedTypeError: If the descriptor cannot be resolved.
        """
        return cls(name=name, type=resolve(descriptor))

    @property
    def descriptor(self) -> str:
        return render(self.type)

    def matches(self, name: str) -> bool:
        return self.name.casefold() == name.casefold()

    def validate(self, value: str | None, *, strict_decimal_scale: bool = False) -> str | None:
        return validate(self.type, value, strict_decimal_scale=strict_decimal_scale)

    def __str__(self) -> str:
        return f"{self.name} ({self.descriptor})"


@dataclass(frozen=True, slots=True)
class Row:
    """One stored row."""

    values: tuple[str | None, ...]

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, index: int) -> str | None:
        return self.values[index]


@dataclass
class Table:
    """In-memory copy of one table.

    Example:
        >>> table = Table("t", (Column.from_descriptor("a", "INT"),))
        >>> table.insert(["42"])
        Row(values=('42',))
    """

    name: str
    columns: tuple[Column, ...]
    rows: list[Row] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.columns = tuple(self.columns)

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in self.columns]

    def find_column(self, name: str) -> int | None:
        """Return the index of the first column matching ``name``, or None."""
        for index, column in enumerate(self.columns):
            if column.matches(name):
                return index
        return None

    def resolve_columns(self, names: Iterable[str] | None) -> list[int]:
        """Map requested column names to column indexes.

        None means every column in declaration order. Unknown names are
        skipped.
        """
        if names is None:
            return list(range(len(self.columns)))
        indexes = []
        for name in names:
            index = self.find_column(name)
            if index is not None:
                indexes.append(index)
        return indexes

    def validate_row(
        self,
        values: Sequence[str | None],
        *,
        strict_decimal_scale: bool = False,
    ) -> Row:
        """Validate values positionally and return a canonical Row.

        Raises:
            ColumnCountMismatchError: If the value count differs from the column count.
            ValueValidationError: On the first value its column type rejects.
        """
        if len(values) != len(self.columns):
            raise ColumnCountMismatchError(expected=len(self.columns), given=len(values))
        return Row(
            tuple(
                column.validate(value, strict_decimal_scale=strict_decimal_scale)
                for column, value in zip(self.columns, values)
            )
        )

    def insert(
        self,
        values: Sequence[str | None],
        *,
        strict_decimal_scale: bool = False,
    ) -> Row:
        """Validate a row and append it. Nothing is appended on failure."""
        row = self.validate_row(values, strict_decimal_scale=strict_decimal_scale)
        self.rows.append(row)
        return row
