"""Column type system.

A type descriptor is the raw text a user writes in CREATE TABLE, for example
``VARCHAR(20)`` or ``decimal(10,2)``. ``resolve`` turns it into an immutable
ResolvedType, ``render`` turns a ResolvedType back into its descriptor, and
``validate`` checks a textual value against a ResolvedType and returns the
value's canonical form.

Canonical forms:
    - Integers: the decimal string of the parsed value ("+007" -> "7")
    - CHAR(n): right-padded with spaces to exactly n characters
    - BOOLEAN: "true" or "false"
    - DECIMAL(p,s): plain notation with exactly s fractional digits
    - FLOAT/DOUBLE: the shortest repr of the parsed value at that width
    - Everything else: the input unchanged

Blank or absent input always validates to None (NULL).
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Context, Decimal
from enum import Enum
from typing import assert_never

import numpy as np

from flat_db.domain.errors import (
    DecimalIntegerPartTooLargeError,
    DecimalScaleTooLargeError,
    InvalidBooleanError,
    InvalidDateError,
    InvalidTimestampError,
    LengthExceededError,
    NumericOverflowOrFormatError,
    UnsupportedTypeError,
)


class TypeKind(Enum):
    """Supported column type kinds."""

    INTEGER = "INTEGER"
    BIGINT = "BIGINT"
    SMALLINT = "SMALLINT"
    TEXT = "TEXT"
    BOOLEAN = "BOOLEAN"
    DATE = "DATE"
    TIMESTAMP = "TIMESTAMP"
    FLOAT = "FLOAT"
    DOUBLE = "DOUBLE"
    BLOB = "BLOB"
    VARCHAR = "VARCHAR"
    CHAR = "CHAR"
    DECIMAL = "DECIMAL"


@dataclass(frozen=True, slots=True)
class LengthParams:
    """Parameters of VARCHAR(n) and CHAR(n)."""

    length: int


@dataclass(frozen=True, slots=True)
class DecimalParams:
    """Parameters of DECIMAL(p,s)."""

    precision: int
    scale: int


TypeParams = LengthParams | DecimalParams | None

_LENGTH_KINDS = frozenset({TypeKind.VARCHAR, TypeKind.CHAR})


@dataclass(frozen=True, slots=True)
class ResolvedType:
    """A parsed type descriptor.

    Parameterized kinds carry their payload in ``params``: LengthParams for
    VARCHAR and CHAR, DecimalParams for DECIMAL, None for every other kind.

    Example:
        >>> resolve("varchar(20)")
        ResolvedType(kind=<TypeKind.VARCHAR: 'VARCHAR'>, params=LengthParams(length=20))
        >>> render(resolve("varchar(20)"))
        'VARCHAR(20)'
    """

    kind: TypeKind
    params: TypeParams = None

    def __post_init__(self) -> None:
        """Check that the payload matches the kind."""
        if self.kind in _LENGTH_KINDS:
            if not isinstance(self.params, LengthParams):
                raise ValueError(f"{self.kind.value} requires a length")
        elif self.kind is TypeKind.DECIMAL:
            if not isinstance(self.params, DecimalParams):
                raise ValueError("DECIMAL requires precision and scale")
        elif self.params is not None:
            raise ValueError(f"{self.kind.value} takes no parameters")

    @classmethod
    def simple(cls, kind: TypeKind) -> ResolvedType:
        return cls(kind=kind)

    @classmethod
    def varchar(cls, length: int) -> ResolvedType:
        return cls(kind=TypeKind.VARCHAR, params=LengthParams(length))

    @classmethod
    def char(cls, length: int) -> ResolvedType:
        return cls(kind=TypeKind.CHAR, params=LengthParams(length))

    @classmethod
    def decimal(cls, precision: int, scale: int = 0) -> ResolvedType:
        return cls(kind=TypeKind.DECIMAL, params=DecimalParams(precision, scale))

    @property
    def length(self) -> int | None:
        return self.params.length if isinstance(self.params, LengthParams) else None

    @property
    def precision(self) -> int | None:
        return self.params.precision if isinstance(self.params, DecimalParams) else None

    @property
    def scale(self) -> int | None:
        return self.params.scale if isinstance(self.params, DecimalParams) else None

    def __str__(self) -> str:
        return render(self)


# Descriptor grammars. Whitespace is tolerated inside the parentheses.
_VARCHAR_PATTERN = re.compile(r"VARCHAR\s*\(\s*(\d+)\s*\)", re.IGNORECASE | re.ASCII)
_CHAR_PATTERN = re.compile(r"CHAR\s*\(\s*(\d+)\s*\)", re.IGNORECASE | re.ASCII)
_DECIMAL_PATTERN = re.compile(
    r"DECIMAL\s*\(\s*(\d+)\s*(?:,\s*(\d+)\s*)?\)", re.IGNORECASE | re.ASCII
)

_SIMPLE_KEYWORDS: dict[str, TypeKind] = {
    "INT": TypeKind.INTEGER,
    "INTEGER": TypeKind.INTEGER,
    "BIGINT": TypeKind.BIGINT,
    "SMALLINT": TypeKind.SMALLINT,
    "TEXT": TypeKind.TEXT,
    "BOOLEAN": TypeKind.BOOLEAN,
    "BOOL": TypeKind.BOOLEAN,
    "DATE": TypeKind.DATE,
    "TIMESTAMP": TypeKind.TIMESTAMP,
    "FLOAT": TypeKind.FLOAT,
    "DOUBLE": TypeKind.DOUBLE,
    "BLOB": TypeKind.BLOB,
}


def resolve(descriptor: str) -> ResolvedType:
    """Resolve a type descriptor string.

    Args:
        descriptor: Type text as written by the user, matched case-insensitively.

    Returns:
        The ResolvedType for the descriptor.

    Raises:
        UnsupportedTypeError: If the descriptor names no supported type or
            carries out-of-range parameters.
    """
    normalized = descriptor.strip()

    match = _VARCHAR_PATTERN.fullmatch(normalized)
    if match:
        return ResolvedType.varchar(_positive_length(descriptor, match.group(1)))

    match = _CHAR_PATTERN.fullmatch(normalized)
    if match:
        return ResolvedType.char(_positive_length(descriptor, match.group(1)))

    match = _DECIMAL_PATTERN.fullmatch(normalized)
    if match:
        precision = int(match.group(1))
        scale = int(match.group(2)) if match.group(2) is not None else 0
        if precision < 1 or scale > precision:
            raise UnsupportedTypeError(
                f"Unsupported data type: {descriptor} "
                f"(precision must be >= 1 and scale <= precision)"
            )
        return ResolvedType.decimal(precision, scale)

    kind = _SIMPLE_KEYWORDS.get(normalized.upper())
    if kind is None:
        raise UnsupportedTypeError(f"Unsupported data type: {descriptor}")
    return ResolvedType.simple(kind)


def _positive_length(descriptor: str, digits: str) -> int:
    length = int(digits)
    if length < 1:
        raise UnsupportedTypeError(f"Unsupported data type: {descriptor} (length must be >= 1)")
    return length


def render(resolved: ResolvedType) -> str:
    """Render a ResolvedType back to its descriptor string.

    ``resolve(render(t)) == t`` holds for every ResolvedType.
    """
    params = resolved.params
    if isinstance(params, LengthParams):
        return f"{resolved.kind.value}({params.length})"
    elif isinstance(params, DecimalParams):
        return f"{resolved.kind.value}({params.precision},{params.scale})"
    elif params is None:
        return resolved.kind.value
    else:
        assert_never(params)


# Value validation

_INTEGER_LITERAL = re.compile(r"[+-]?\d+", re.ASCII)
_NUMERIC_LITERAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_DATE_LITERAL = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
_TIMESTAMP_LITERAL = re.compile(r"\d{4}-\d{2}-\d{2}[ T]\d{2}:\d{2}:\d{2}", re.ASCII)

_INTEGER_RANGES: dict[TypeKind, tuple[int, int]] = {
    TypeKind.SMALLINT: (-(2**15), 2**15 - 1),
    TypeKind.INTEGER: (-(2**31), 2**31 - 1),
    TypeKind.BIGINT: (-(2**63), 2**63 - 1),
}

_TRUE_WORDS = frozenset({"true", "1", "yes"})
_FALSE_WORDS = frozenset({"false", "0", "no"})

_DATE_FORMAT = "%Y-%m-%d"
# Tried in order; the second only if the first fails.
_TIMESTAMP_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%dT%H:%M:%S")

_FLOAT32_MAX = float(np.finfo(np.float32).max)


def validate(
    resolved: ResolvedType,
    value: str | None,
    *,
    strict_decimal_scale: bool = False,
) -> str | None:
    """Validate a value and return its canonical form.

    Args:
        resolved: The column type.
        value: Raw textual value, or None for an absent value.
        strict_decimal_scale: Reject DECIMAL values with more fractional
            digits than the declared scale instead of rounding them.

    Returns:
        The canonical string, or None when the input is absent or blank.

    Raises:
        ValueValidationError: One of its subclasses, naming the failed rule.
    """
    if value is None or not value.strip():
        return None

    kind = resolved.kind
    if kind is TypeKind.INTEGER or kind is TypeKind.BIGINT or kind is TypeKind.SMALLINT:
        return _validate_integer(kind, value)
    elif kind is TypeKind.VARCHAR:
        _check_length(resolved, value)
        return value
    elif kind is TypeKind.CHAR:
        length = _check_length(resolved, value)
        return value.ljust(length)
    elif kind is TypeKind.TEXT or kind is TypeKind.BLOB:
        # BLOB values are opaque pre-encoded text.
        return value
    elif kind is TypeKind.BOOLEAN:
        return _validate_boolean(value)
    elif kind is TypeKind.DATE:
        return _validate_date(value)
    elif kind is TypeKind.TIMESTAMP:
        return _validate_timestamp(value)
    elif kind is TypeKind.DECIMAL:
        assert isinstance(resolved.params, DecimalParams)
        return _validate_decimal(resolved.params, value, strict_decimal_scale)
    elif kind is TypeKind.FLOAT:
        return _validate_float(value)
    elif kind is TypeKind.DOUBLE:
        return _validate_double(value)
    else:
        assert_never(kind)


def _validate_integer(kind: TypeKind, value: str) -> str:
    if not _INTEGER_LITERAL.fullmatch(value):
        raise NumericOverflowOrFormatError(f"Invalid value '{value}' for type {kind.value}")
    number = int(value)
    low, high = _INTEGER_RANGES[kind]
    if not low <= number <= high:
        raise NumericOverflowOrFormatError(
            f"Value '{value}' out of range for type {kind.value} [{low}, {high}]"
        )
    return str(number)


def _check_length(resolved: ResolvedType, value: str) -> int:
    length = resolved.length
    assert length is not None
    if len(value) > length:
        raise LengthExceededError(
            f"{resolved.kind.value} value exceeds maximum length: {length}"
        )
    return length


def _validate_boolean(value: str) -> str:
    lowered = value.lower()
    if lowered in _TRUE_WORDS:
        return "true"
    if lowered in _FALSE_WORDS:
        return "false"
    raise InvalidBooleanError(f"Invalid boolean value: {value}")


def _validate_date(value: str) -> str:
    if _DATE_LITERAL.fullmatch(value):
        try:
            datetime.strptime(value, _DATE_FORMAT)
            return value
        except ValueError:
            pass
    raise InvalidDateError(f"Invalid date '{value}', expected yyyy-MM-dd")


def _validate_timestamp(value: str) -> str:
    if _TIMESTAMP_LITERAL.fullmatch(value):
        for fmt in _TIMESTAMP_FORMATS:
            try:
                datetime.strptime(value, fmt)
                return value
            except ValueError:
                continue
    raise InvalidTimestampError(
        f"Invalid timestamp '{value}', expected yyyy-MM-dd HH:mm:ss or yyyy-MM-dd'T'HH:mm:ss"
    )


def _validate_decimal(params: DecimalParams, value: str, strict_scale: bool) -> str:
    """Check a DECIMAL value against precision and scale, then round half-up.

    Trailing fractional zeros do not count toward the value's scale, and zero
    has no integer digits.
    """
    if not _NUMERIC_LITERAL.fullmatch(value):
        raise NumericOverflowOrFormatError(f"Invalid value '{value}' for type DECIMAL")

    number = Decimal(value)
    max_integer_digits = params.precision - params.scale

    if number.is_zero():
        integer_digits = 0
        value_scale = 0
    else:
        _, digits, exponent = number.as_tuple()
        assert isinstance(exponent, int)
        trailing_zeros = len(digits) - len("".join(map(str, digits)).rstrip("0"))
        value_scale = -(exponent + trailing_zeros)
        integer_digits = number.adjusted() + 1

    if integer_digits > max_integer_digits:
        raise DecimalIntegerPartTooLargeError(
            f"DECIMAL value exceeds max digits before decimal: allowed {max_integer_digits}"
        )
    if strict_scale and value_scale > params.scale:
        raise DecimalScaleTooLargeError(f"DECIMAL value exceeds scale: allowed {params.scale}")

    context = Context(prec=max(params.precision, len(value)) + 2, rounding=ROUND_HALF_UP)
    rounded = number.quantize(Decimal(1).scaleb(-params.scale), context=context)
    if rounded.is_zero():
        rounded = rounded.copy_abs()
    elif rounded.adjusted() + 1 > max_integer_digits:
        # Rounding carried into a new integer digit (9.995 -> 10.00).
        raise DecimalIntegerPartTooLargeError(
            f"DECIMAL value exceeds max digits before decimal after rounding: "
            f"allowed {max_integer_digits}"
        )
    return format(rounded, "f")


def _parse_float(value: str, type_name: str) -> float:
    if not _NUMERIC_LITERAL.fullmatch(value):
        raise NumericOverflowOrFormatError(f"Invalid value '{value}' for type {type_name}")
    parsed = float(value)
    if not math.isfinite(parsed):
        raise NumericOverflowOrFormatError(f"Value '{value}' out of range for type {type_name}")
    return parsed


def _validate_float(value: str) -> str:
    parsed = _parse_float(value, "FLOAT")
    if abs(parsed) > _FLOAT32_MAX:
        raise NumericOverflowOrFormatError(f"Value '{value}' out of range for type FLOAT")
    return str(np.float32(parsed))


def _validate_double(value: str) -> str:
    return repr(_parse_float(value, "DOUBLE"))
