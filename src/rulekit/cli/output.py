"""Output formatting utilities for the rulekit CLI."""

from __future__ import annotations

import json
from decimal import Decimal
from enum import Enum
from typing import Any

__all__ = [
    "ResultType",
    "format_error",
    "format_value",
]


class ResultType(str, Enum):
    """Type the evaluated result is asserted to before printing.

    Values:
        AUTO: Print whatever the expression produces.
        BOOL: Require a boolean.
        INT: Require a number, truncated to an integer.
        FLOAT: Require a number, widened to a float.
    """

    AUTO = "auto"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"


def format_error(
    message: str, details: list[str] | None = None, suggestion: str | None = None
) -> str:
    """Format an error message with optional details and suggestion.

    Example:
        >>> print(format_error("Key 'x' not found", details=["in expression: x"]))
        Error: Key 'x' not found
          in expression: x
    """
    lines = [f"Error: {message}"]

    if details:
        for detail in details:
            lines.append(f"  {detail}")

    if suggestion:
        lines.append(f"Suggestion: {suggestion}")

    return "\n".join(lines)


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    return repr(value)


def format_value(value: Any) -> str:
    """Render an evaluation result for the terminal.

    Booleans and null use expression spelling; containers render as JSON.

    Examples:
        >>> format_value(True)
        'true'
        >>> format_value(Decimal("0.3"))
        '0.3'
        >>> format_value({"a": [1, 2]})
        '{"a": [1, 2]}'
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, default=_json_default)
    return str(value)
