"""Unit tests for the column type system."""

from __future__ import annotations

import pytest

from flat_db.domain.errors import (
    DecimalIntegerPartTooLargeError,
    DecimalScaleTooLargeError,
    InvalidBooleanError,
    InvalidDateError,
    InvalidTimestampError,
    LengthExceededError,
    NumericOverflowOrFormatError,
    UnsupportedTypeError,
    ValueValidationError,
)
from flat_db.domain.value_objects import (
    DecimalParams,
    LengthParams,
    ResolvedType,
    TypeKind,
    render,
    resolve,
    validate,
)


@pytest.mark.unit
class TestResolve:
    """Tests for resolving type descriptors."""

    @pytest.mark.parametrize(
        "descriptor,kind",
        [
            ("INT", TypeKind.INTEGER),
            ("integer", TypeKind.INTEGER),
            ("BIGINT", TypeKind.BIGINT),
            ("smallint", TypeKind.SMALLINT),
            ("TEXT", TypeKind.TEXT),
            ("bool", TypeKind.BOOLEAN),
            ("Boolean", TypeKind.BOOLEAN),
            ("DATE", TypeKind.DATE),
            ("timestamp", TypeKind.TIMESTAMP),
            ("FLOAT", TypeKind.FLOAT),
            ("double", TypeKind.DOUBLE),
            ("BLOB", TypeKind.BLOB),
        ],
    )
    def test_simple_keywords(self, descriptor: str, kind: TypeKind) -> None:
        """Simple keywords resolve case-insensitively and carry no params."""
        resolved = resolve(descriptor)

        assert resolved.kind is kind
        assert resolved.params is None

    def test_varchar(self) -> None:
        """VARCHAR(n) carries its length."""
        resolved = resolve("varchar(20)")

        assert resolved == ResolvedType.varchar(20)
        assert resolved.params == LengthParams(20)
        assert resolved.length == 20

    def test_char(self) -> None:
        """CHAR(n) is distinct from VARCHAR(n)."""
        resolved = resolve("CHAR(5)")

        assert resolved.kind is TypeKind.CHAR
        assert resolved.length == 5

    def test_decimal_with_scale(self) -> None:
        """DECIMAL(p,s) carries precision and scale."""
        resolved = resolve("DECIMAL(10,2)")

        assert resolved.params == DecimalParams(precision=10, scale=2)
        assert resolved.precision == 10
        assert resolved.scale == 2

    def test_decimal_scale_defaults_to_zero(self) -> None:
        """DECIMAL(p) has scale 0."""
        assert resolve("decimal(7)") == ResolvedType.decimal(7, 0)

    def test_whitespace_inside_parameters(self) -> None:
        """Whitespace around parameters is tolerated."""
        assert resolve(" DECIMAL( 10 , 2 ) ") == ResolvedType.decimal(10, 2)
        assert resolve("VARCHAR (8)") == ResolvedType.varchar(8)

    @pytest.mark.parametrize(
        "descriptor",
        ["FOO", "VARCHAR", "CHAR()", "DECIMAL(a,b)", "INT(4)", "", "VARCHAR(10"],
    )
    def test_unsupported(self, descriptor: str) -> None:
        """Unknown or malformed descriptors are rejected."""
        with pytest.raises(UnsupportedTypeError):
            resolve(descriptor)

    @pytest.mark.parametrize("descriptor", ["VARCHAR(0)", "CHAR(0)", "DECIMAL(0)", "DECIMAL(2,5)"])
    def test_out_of_range_parameters(self, descriptor: str) -> None:
        """Zero lengths, zero precision and scale above precision are rejected."""
        with pytest.raises(UnsupportedTypeError):
            resolve(descriptor)

    def test_error_names_descriptor(self) -> None:
        """The error message carries the descriptor as written."""
        with pytest.raises(UnsupportedTypeError, match="Unsupported data type: FOO"):
            resolve("FOO")


@pytest.mark.unit
class TestRender:
    """Tests for rendering resolved types."""

    def test_render_forms(self) -> None:
        """Rendering uses canonical upper-case keywords."""
        assert render(resolve("int")) == "INTEGER"
        assert render(resolve("bool")) == "BOOLEAN"
        assert render(resolve("varchar(20)")) == "VARCHAR(20)"
        assert render(resolve("decimal(10, 2)")) == "DECIMAL(10,2)"
        assert render(resolve("decimal(4)")) == "DECIMAL(4,0)"

    @pytest.mark.parametrize(
        "resolved",
        [
            ResolvedType.simple(TypeKind.TIMESTAMP),
            ResolvedType.varchar(255),
            ResolvedType.char(1),
            ResolvedType.decimal(18, 6),
        ],
    )
    def test_resolve_render_identity(self, resolved: ResolvedType) -> None:
        """Resolving a rendered type gives the same type back."""
        assert resolve(render(resolved)) == resolved

    def test_str_is_rendered_form(self) -> None:
        assert str(ResolvedType.char(3)) == "CHAR(3)"


@pytest.mark.unit
class TestResolvedTypeInvariants:
    """Tests for ResolvedType payload checks."""

    def test_varchar_requires_length(self) -> None:
        with pytest.raises(ValueError):
            ResolvedType(TypeKind.VARCHAR)

    def test_decimal_requires_params(self) -> None:
        with pytest.raises(ValueError):
            ResolvedType(TypeKind.DECIMAL, LengthParams(3))

    def test_simple_kind_rejects_params(self) -> None:
        with pytest.raises(ValueError):
            ResolvedType(TypeKind.INTEGER, LengthParams(3))


@pytest.mark.unit
class TestValidateAbsent:
    """Tests for blank and absent values."""

    @pytest.mark.parametrize("descriptor", ["INT", "VARCHAR(3)", "DECIMAL(5,2)", "DATE", "BOOLEAN"])
    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_is_null(self, descriptor: str, value: str | None) -> None:
        """Absent or blank input is NULL for every type."""
        assert validate(resolve(descriptor), value) is None


@pytest.mark.unit
class TestValidateIntegers:
    """Tests for INTEGER, BIGINT and SMALLINT."""

    def test_canonical_form(self) -> None:
        """Integers are stored as the decimal string of the parsed value."""
        assert validate(resolve("INT"), "42") == "42"
        assert validate(resolve("INT"), "+007") == "7"
        assert validate(resolve("INT"), "-15") == "-15"

    def test_integer_bounds(self) -> None:
        integer = resolve("INTEGER")

        assert validate(integer, "2147483647") == "2147483647"
        assert validate(integer, "-2147483648") == "-2147483648"
        with pytest.raises(NumericOverflowOrFormatError):
            validate(integer, "2147483648")

    def test_smallint_bounds(self) -> None:
        smallint = resolve("SMALLINT")

        assert validate(smallint, "32767") == "32767"
        with pytest.raises(NumericOverflowOrFormatError):
            validate(smallint, "32768")

    def test_bigint_bounds(self) -> None:
        bigint = resolve("BIGINT")

        assert validate(bigint, "9223372036854775807") == "9223372036854775807"
        with pytest.raises(NumericOverflowOrFormatError):
            validate(bigint, "9223372036854775808")

    @pytest.mark.parametrize("value", ["abc", "1.5", "1e3", "12a"])
    def test_invalid_format(self, value: str) -> None:
        with pytest.raises(NumericOverflowOrFormatError):
            validate(resolve("INT"), value)


@pytest.mark.unit
class TestValidateStrings:
    """Tests for VARCHAR, CHAR, TEXT and BLOB."""

    def test_varchar_within_length(self) -> None:
        """VARCHAR values are stored unchanged."""
        assert validate(resolve("VARCHAR(5)"), "Alice") == "Alice"
        assert validate(resolve("VARCHAR(5)"), "Al") == "Al"

    def test_varchar_too_long(self) -> None:
        with pytest.raises(LengthExceededError, match="exceeds maximum length: 5"):
            validate(resolve("VARCHAR(5)"), "Alicia")

    def test_char_is_padded(self) -> None:
        """CHAR values are right-padded to the declared length."""
        assert validate(resolve("CHAR(5)"), "ab") == "ab   "
        assert validate(resolve("CHAR(5)"), "abcde") == "abcde"

    def test_char_too_long(self) -> None:
        with pytest.raises(LengthExceededError):
            validate(resolve("CHAR(2)"), "abc")

    def test_text_and_blob_pass_through(self) -> None:
        long_value = "x" * 10_000
        assert validate(resolve("TEXT"), long_value) == long_value
        assert validate(resolve("BLOB"), "3q2+7w==") == "3q2+7w=="


@pytest.mark.unit
class TestValidateBoolean:
    """Tests for BOOLEAN."""

    @pytest.mark.parametrize("value", ["true", "TRUE", "1", "yes", "YES"])
    def test_true_words(self, value: str) -> None:
        assert validate(resolve("BOOLEAN"), value) == "true"

    @pytest.mark.parametrize("value", ["false", "False", "0", "no", "NO"])
    def test_false_words(self, value: str) -> None:
        assert validate(resolve("BOOLEAN"), value) == "false"

    @pytest.mark.parametrize("value", ["maybe", "2", "t", "y"])
    def test_invalid(self, value: str) -> None:
        with pytest.raises(InvalidBooleanError, match="Invalid boolean value"):
            validate(resolve("BOOLEAN"), value)


@pytest.mark.unit
class TestValidateTemporal:
    """Tests for DATE and TIMESTAMP."""

    def test_date(self) -> None:
        assert validate(resolve("DATE"), "2024-02-29") == "2024-02-29"

    @pytest.mark.parametrize("value", ["2023-02-29", "2024-2-5", "2024/01/01", "2024-13-01"])
    def test_invalid_date(self, value: str) -> None:
        with pytest.raises(InvalidDateError):
            validate(resolve("DATE"), value)

    @pytest.mark.parametrize("value", ["2024-01-15 10:30:00", "2024-01-15T10:30:00"])
    def test_timestamp_forms(self, value: str) -> None:
        """Both the space and the T separator are accepted and kept."""
        assert validate(resolve("TIMESTAMP"), value) == value

    @pytest.mark.parametrize(
        "value", ["2024-01-15", "2024-01-15 25:00:00", "2024-01-15 10:30", "yesterday"]
    )
    def test_invalid_timestamp(self, value: str) -> None:
        with pytest.raises(InvalidTimestampError):
            validate(resolve("TIMESTAMP"), value)


@pytest.mark.unit
class TestValidateDecimal:
    """Tests for DECIMAL(p,s)."""

    def test_pads_to_scale(self) -> None:
        """Values are rendered with exactly s fractional digits."""
        assert validate(resolve("DECIMAL(5,2)"), "1.5") == "1.50"
        assert validate(resolve("DECIMAL(5,2)"), "3") == "3.00"

    def test_rounds_half_up(self) -> None:
        """Extra fractional digits are rounded half-up by default."""
        assert validate(resolve("DECIMAL(10,2)"), "10.005") == "10.01"
        assert validate(resolve("DECIMAL(10,2)"), "10.004") == "10.00"
        assert validate(resolve("DECIMAL(10,2)"), "-1.005") == "-1.01"

    def test_integer_part_too_large(self) -> None:
        """DECIMAL(3,2) allows a single integer digit."""
        with pytest.raises(DecimalIntegerPartTooLargeError):
            validate(resolve("DECIMAL(3,2)"), "12.3")

    def test_rounding_into_new_integer_digit(self) -> None:
        """A value that rounds past the integer digit limit is rejected."""
        with pytest.raises(DecimalIntegerPartTooLargeError):
            validate(resolve("DECIMAL(3,2)"), "9.995")

    def test_strict_scale(self) -> None:
        """Strict mode rejects extra fractional digits instead of rounding."""
        decimal = resolve("DECIMAL(5,2)")

        assert validate(decimal, "1.234") == "1.23"
        with pytest.raises(DecimalScaleTooLargeError):
            validate(decimal, "1.234", strict_decimal_scale=True)

    def test_strict_scale_ignores_trailing_zeros(self) -> None:
        assert validate(resolve("DECIMAL(3,1)"), "1.50", strict_decimal_scale=True) == "1.5"

    def test_zero(self) -> None:
        """Zero has no integer digits, so it fits DECIMAL(p,p)."""
        assert validate(resolve("DECIMAL(2,2)"), "0") == "0.00"
        assert validate(resolve("DECIMAL(5,2)"), "-0.001") == "0.00"

    def test_scale_zero(self) -> None:
        assert validate(resolve("DECIMAL(5)"), "100") == "100"
        assert validate(resolve("DECIMAL(5)"), "2.5") == "3"

    def test_exponent_notation(self) -> None:
        assert validate(resolve("DECIMAL(5,0)"), "1e2") == "100"

    @pytest.mark.parametrize("value", ["abc", "1.2.3", "--1", "NaN"])
    def test_invalid_format(self, value: str) -> None:
        with pytest.raises(NumericOverflowOrFormatError):
            validate(resolve("DECIMAL(5,2)"), value)


@pytest.mark.unit
class TestValidateFloatingPoint:
    """Tests for FLOAT and DOUBLE."""

    def test_float_canonical(self) -> None:
        """FLOAT values are rendered at single precision."""
        assert validate(resolve("FLOAT"), "1.5") == "1.5"
        assert validate(resolve("FLOAT"), "0.1") == "0.1"

    def test_double_canonical(self) -> None:
        assert validate(resolve("DOUBLE"), "3.14") == "3.14"
        assert validate(resolve("DOUBLE"), "1e3") == "1000.0"
        assert validate(resolve("DOUBLE"), "2") == "2.0"

    def test_float_overflow(self) -> None:
        """Values beyond single precision range are rejected for FLOAT only."""
        with pytest.raises(NumericOverflowOrFormatError):
            validate(resolve("FLOAT"), "1e39")
        assert validate(resolve("DOUBLE"), "1e39") == "1e+39"

    @pytest.mark.parametrize("value", ["abc", "inf", "nan", "1e400"])
    def test_invalid_double(self, value: str) -> None:
        with pytest.raises(NumericOverflowOrFormatError):
            validate(resolve("DOUBLE"), value)

    def test_errors_share_base(self) -> None:
        """Every value rule failure is a ValueValidationError."""
        with pytest.raises(ValueValidationError):
            validate(resolve("FLOAT"), "x")
