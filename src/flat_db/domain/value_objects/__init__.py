"""Value objects for the flat_db domain.

Value objects are immutable types that represent domain concepts.
They have no identity - two value objects with the same attributes are equal.

Exports:
    Data Types:
        - TypeKind: Enumeration of supported column type kinds
        - ResolvedType: Parsed type descriptor with per-kind parameters
        - LengthParams, DecimalParams: Parameter payloads
        - resolve, render, validate: Type system operations
"""

from flat_db.domain.value_objects.data_types import (
    DecimalParams,
    LengthParams,
    ResolvedType,
    TypeKind,
    render,
    resolve,
    validate,
)

__all__ = [
    "TypeKind",
    "ResolvedType",
    "LengthParams",
    "DecimalParams",
    "resolve",
    "render",
    "validate",
]
