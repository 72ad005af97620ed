"""Expression-specific error types for rulekit.

This module defines exceptions for expression parsing and evaluation,
following the pattern from rulekit.exceptions. Every evaluation failure is a
subclass of ExpressionEvaluationError so callers can catch the whole family
or a single kind (missing key, non-boolean operand, ...).
"""

from __future__ import annotations

from collections.abc import Iterable

from rulekit.exceptions import RulekitError

__all__ = [
    "ExpressionError",
    "ExpressionSyntaxError",
    "EmptyExpressionError",
    "ExpressionEvaluationError",
    "UnsupportedExpressionError",
    "UnsupportedParamError",
    "LiteralParseError",
    "NotNumberError",
    "IndexNotNumberError",
    "IndexOutOfRangeError",
    "NotBoolError",
    "KeyNotFoundError",
    "DivisionByZeroError",
    "UnknownFunctionError",
    "TypeMismatchError",
    "NestingTooDeepError",
    "DuplicateFunctionError",
    "FunctionArgumentError",
]


class ExpressionError(RulekitError):
    """Base exception for all expression-related errors.

    This is the parent class for all exceptions that can occur during
    expression parsing or evaluation. It provides context about the
    expression that failed.

    Attributes:
        message: Human-readable error message.
        expression: The expression that caused the error (if known).
    """

    def __init__(
        self,
        message: str,
        expression: str | None = None,
    ) -> None:
        """Initialize the ExpressionError.

        Args:
            message: Human-readable error message.
            expression: The expression that caused the error.
        """
        self.expression = expression
        super().__init__(message)


class ExpressionSyntaxError(ExpressionError):
    """Exception raised when an expression does not match the grammar.

    Attributes:
        message: Human-readable error message.
        expression: The expression that failed to parse.
        position: 0-based character position where the error occurred.
    """

    def __init__(
        self,
        message: str,
        expression: str,
        position: int = 0,
    ) -> None:
        """Initialize the ExpressionSyntaxError.

        Args:
            message: Human-readable error message.
            expression: The expression that failed to parse.
            position: Character position where the error occurred.
        """
        self.position = position
        # Format message with position indicator if available
        if position > 0 and expression:
            error_line = f"{expression}\n{' ' * position}^"
            full_message = f"{message} at position {position}:\n{error_line}"
        else:
            full_message = f"{message}: {expression}"
        super().__init__(full_message, expression=expression)


class EmptyExpressionError(ExpressionSyntaxError):
    """Exception raised when the expression text is empty or blank."""

    def __init__(self, expression: str = "") -> None:
        self.position = 0
        ExpressionError.__init__(self, "Rule is empty", expression=expression)


class ExpressionEvaluationError(ExpressionError):
    """Exception raised for runtime evaluation errors in expressions.

    Raised when an expression parses correctly but fails during evaluation,
    such as looking up undefined variables, type mismatches, or division by
    zero. Errors raised deep inside the tree do not know the source text;
    the evaluator attaches it on the way out via attach().

    Attributes:
        message: Human-readable error message (with expression once attached).
        detail: The message without expression context.
        expression: The expression that failed to evaluate.
        context_vars: Names of available variables in the context (for debugging).
    """

    def __init__(
        self,
        message: str,
        expression: str | None = None,
        context_vars: tuple[str, ...] = (),
    ) -> None:
        """Initialize the ExpressionEvaluationError.

        Args:
            message: Human-readable error message.
            expression: The expression that failed to evaluate.
            context_vars: Names of available variables in the context.
        """
        self.detail = message
        self.context_vars = context_vars
        super().__init__(
            self._format(message, expression, context_vars),
            expression=expression,
        )

    @staticmethod
    def _format(
        message: str,
        expression: str | None,
        context_vars: tuple[str, ...],
    ) -> str:
        if expression is None:
            return message
        if context_vars:
            available = ", ".join(sorted(context_vars))
            return (
                f"{message} in expression: {expression}\n"
                f"Available variables: {available}"
            )
        return f"{message} in expression: {expression}"

    def attach(self, expression: str, context_vars: Iterable[str] = ()) -> None:
        """Bind the source expression to an error raised without one.

        Errors that already carry an expression are left untouched.

        Args:
            expression: Raw text of the expression being evaluated.
            context_vars: Names of the top-level context keys.
        """
        if self.expression is not None:
            return
        self.expression = expression
        self.context_vars = tuple(context_vars)
        self.message = self._format(self.detail, expression, self.context_vars)
        self.args = (self.message,)


class UnsupportedExpressionError(ExpressionEvaluationError):
    """Raised for an AST node kind that has no evaluation rule."""


class UnsupportedParamError(ExpressionEvaluationError):
    """Raised when a literal kind cannot be converted into a value."""


class LiteralParseError(ExpressionEvaluationError):
    """Raised when numeric literal text cannot be converted.

    Attributes:
        text: The literal source text.
    """

    def __init__(self, message: str, text: str) -> None:
        self.text = text
        super().__init__(message)


class NotNumberError(ExpressionEvaluationError):
    """Raised when an arithmetic or comparison operand is not numeric."""


class IndexNotNumberError(ExpressionEvaluationError):
    """Raised when a list index does not evaluate to an integer."""


class IndexOutOfRangeError(ExpressionEvaluationError):
    """Raised when a list index falls outside the list.

    Attributes:
        index: The requested index.
        length: Length of the indexed list.
    """

    def __init__(self, index: int, length: int) -> None:
        self.index = index
        self.length = length
        super().__init__(f"List index {index} out of range (length: {length})")


class NotBoolError(ExpressionEvaluationError):
    """Raised when a logical operand or asserted result is not a boolean."""


class KeyNotFoundError(ExpressionEvaluationError):
    """Raised when an identifier or member lookup misses.

    Attributes:
        key: The key that was not found.
    """

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Key '{key}' not found")


class DivisionByZeroError(ExpressionEvaluationError):
    """Raised when the divisor of '/' is exactly zero."""


class UnknownFunctionError(ExpressionEvaluationError):
    """Raised when a call references an unregistered function name.

    Attributes:
        name: The function name.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown function '{name}'")


class TypeMismatchError(ExpressionEvaluationError):
    """Raised when a value has the wrong kind for the operation applied to it."""


class NestingTooDeepError(ExpressionEvaluationError):
    """Raised when an expression tree is too deep to evaluate recursively."""


class DuplicateFunctionError(ExpressionError):
    """Raised when a function name is registered twice.

    Attributes:
        name: The function name.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Function '{name}' is already registered")


class FunctionArgumentError(ExpressionEvaluationError):
    """Raised by built-in functions when called with the wrong arguments."""
