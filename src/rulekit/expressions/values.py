"""Runtime value model for expression evaluation.

Values flowing through the evaluator are plain Python objects. Each one maps
onto exactly one ValueKind; anything outside this closed set is rejected by
kind_of() with TypeMismatchError.

    bool      -> BOOL
    int       -> INT       (bool excluded)
    float     -> FLOAT
    Decimal   -> DECIMAL   (result of + - *)
    str       -> STRING
    Mapping   -> MAP
    list/tuple-> LIST
    None      -> NULL
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from typing import Any

from rulekit.expressions.errors import NotNumberError, TypeMismatchError

__all__ = [
    "ValueKind",
    "kind_of",
    "describe",
    "check_value",
    "NUMERIC_KINDS",
    "is_number",
    "is_integer",
    "to_float",
    "to_decimal",
]


class ValueKind(str, Enum):
    """Kind of runtime value."""

    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    DECIMAL = "decimal"
    STRING = "string"
    MAP = "map"
    LIST = "list"
    NULL = "null"


NUMERIC_KINDS = frozenset({ValueKind.INT, ValueKind.FLOAT, ValueKind.DECIMAL})


def kind_of(value: Any) -> ValueKind:
    """Classify a value.

    Args:
        value: Any value produced by evaluation or supplied in a context.

    Returns:
        The value's kind.

    Raises:
        TypeMismatchError: If the value is not part of the value model.

    Examples:
        >>> kind_of(True)
        <ValueKind.BOOL: 'bool'>
        >>> kind_of(3)
        <ValueKind.INT: 'int'>
    """
    # bool first: it is a subclass of int
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, int):
        return ValueKind.INT
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, Decimal):
        return ValueKind.DECIMAL
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, Mapping):
        return ValueKind.MAP
    if isinstance(value, (list, tuple)):
        return ValueKind.LIST
    if value is None:
        return ValueKind.NULL
    raise TypeMismatchError(
        f"Unsupported value of type {type(value).__name__}"
    )


def check_value(value: Any) -> Any:
    """Return value unchanged if it belongs to the value model.

    Raises:
        TypeMismatchError: If the value is not part of the value model.
    """
    kind_of(value)
    return value


def describe(value: Any) -> str:
    """Name a value's kind for error messages, tolerating foreign values."""
    try:
        return kind_of(value).value
    except TypeMismatchError:
        return type(value).__name__


def is_number(value: Any) -> bool:
    """Return True for int, float and Decimal values (bool excluded)."""
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def is_integer(value: Any) -> bool:
    """Return True for int values (bool excluded)."""
    return isinstance(value, int) and not isinstance(value, bool)


def to_float(value: Any) -> float:
    """Widen a numeric value to float.

    Raises:
        NotNumberError: If the value is not numeric.
    """
    if not is_number(value):
        raise NotNumberError(f"Expected a number, got {describe(value)}")
    return float(value)


def to_decimal(value: Any) -> Decimal:
    """Convert a numeric value to Decimal without binary rounding noise.

    Floats enter through their shortest round-tripping repr, so 0.1 becomes
    Decimal("0.1") rather than the exact binary expansion.

    Raises:
        NotNumberError: If the value is not numeric.

    Examples:
        >>> to_decimal(0.1) + to_decimal(0.2)
        Decimal('0.3')
    """
    if not is_number(value):
        raise NotNumberError(f"Expected a number, got {describe(value)}")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)
