"""Expression evaluator for rulekit.

This module provides the ExpressionEvaluator class for evaluating parsed
expressions against a caller-supplied context mapping.

Expression evaluation:
- Identifiers: ``amount`` -> context["amount"]; ``true``/``false`` are booleans
- Member access: ``user.age`` -> context["user"]["age"]
- Index access: ``items[0]``, ``attrs["color"]``
- Arithmetic: ``+ - *`` in decimal, ``/`` in float
- Comparison: numeric, operands widened to float
- Logic: ``&& || !`` on booleans only (no truthiness)
- Calls: dispatched to a FunctionRegistry

Evaluation is a pure recursive walk: nodes are passed down as arguments and
never written to, so one parsed Expression can be evaluated repeatedly and
from several threads at once.
"""

from __future__ import annotations

import math
import operator
import re
from collections.abc import Callable, Mapping
from decimal import Decimal, DecimalException, localcontext
from typing import Any

from rulekit.config import EvaluationSettings
from rulekit.expressions.errors import (
    DivisionByZeroError,
    ExpressionEvaluationError,
    IndexNotNumberError,
    IndexOutOfRangeError,
    KeyNotFoundError,
    LiteralParseError,
    NestingTooDeepError,
    NotBoolError,
    NotNumberError,
    TypeMismatchError,
    UnknownFunctionError,
    UnsupportedExpressionError,
    UnsupportedParamError,
)
from rulekit.expressions.functions import FunctionRegistry, default_registry
from rulekit.expressions.nodes import (
    Binary,
    Call,
    Identifier,
    Index,
    Literal,
    LiteralKind,
    Member,
    Node,
    Parenthesized,
    Unary,
)
from rulekit.expressions.parser import Expression, parse_expression
from rulekit.expressions.values import (
    check_value,
    describe,
    is_integer,
    is_number,
    to_decimal,
    to_float,
)
from rulekit.logging import get_logger

__all__ = ["ExpressionEvaluator", "evaluate"]

logger = get_logger(__name__)

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_DECIMAL_OPS: dict[str, Callable[[Decimal, Decimal], Decimal]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
}

_COMPARISONS: dict[str, Callable[[float, float], bool]] = {
    "<": operator.lt,
    ">": operator.gt,
    "<=": operator.le,
    ">=": operator.ge,
    "==": operator.eq,
    "!=": operator.ne,
}

_LOGICAL: dict[str, Callable[[bool, bool], bool]] = {
    "&&": lambda a, b: a and b,
    "||": lambda a, b: a or b,
}

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "\\": "\\",
    '"': '"',
    "'": "'",
}
_ESCAPE_PATTERN = re.compile(r"\\(.)")


def _unquote_string(text: str) -> str:
    """Strip the quotes from a string literal and resolve its escapes."""
    return _ESCAPE_PATTERN.sub(
        lambda m: _ESCAPES.get(m.group(1), m.group(1)), text[1:-1]
    )


def _lookup(name: str, source: Mapping[str, Any]) -> Any:
    """Resolve a name: booleans first, then a key in source."""
    if name == "true":
        return True
    if name == "false":
        return False
    if name in source:
        return check_value(source[name])
    raise KeyNotFoundError(name)


class ExpressionEvaluator:
    """Evaluates parsed expressions against a context.

    The evaluator holds only its function registry and settings; the
    context is supplied per call.

    Attributes:
        functions: Registry consulted for call expressions.
        settings: Evaluation settings.

    Example:
        ```python
        evaluator = ExpressionEvaluator()
        expr = parse_expression("amount * rate > 100 && member")

        evaluator.evaluate(expr, {"amount": 250, "rate": 0.5, "member": True})
        # True

        evaluator.evaluate_float(parse_expression("0.1 + 0.2"), {})
        # 0.3
        ```
    """

    def __init__(
        self,
        functions: FunctionRegistry | None = None,
        settings: EvaluationSettings | None = None,
    ) -> None:
        """Initialize the ExpressionEvaluator.

        Args:
            functions: Function registry for call expressions. Defaults to
                the process-wide registry.
            settings: Evaluation settings. Defaults to EvaluationSettings().
        """
        self.functions = functions if functions is not None else default_registry()
        self.settings = settings if settings is not None else EvaluationSettings()

    def evaluate(
        self,
        expr: Expression,
        context: Mapping[str, Any] | None = None,
    ) -> Any:
        """Evaluate an expression against the context.

        Args:
            expr: Parsed expression.
            context: Mapping of names to values. Not modified.

        Returns:
            The resulting value: bool, int, float, Decimal, str, mapping,
            list or None.

        Raises:
            ExpressionEvaluationError: Any evaluation failure; the first
                failing sub-expression aborts the whole evaluation.
            NestingTooDeepError: If the tree is deeper than the interpreter
                recursion limit allows.

        Examples:
            >>> evaluator = ExpressionEvaluator()
            >>> evaluator.evaluate(parse_expression("a.b"), {"a": {"b": 42}})
            42
        """
        data = context if context is not None else {}
        try:
            return self.evaluate_node(expr.root, data)
        except ExpressionEvaluationError as e:
            e.attach(expr.raw, data.keys())
            raise
        except RecursionError as e:
            error = NestingTooDeepError("Expression too deeply nested to evaluate")
            error.attach(expr.raw, data.keys())
            raise error from e

    def evaluate_bool(
        self,
        expr: Expression,
        context: Mapping[str, Any] | None = None,
    ) -> bool:
        """Evaluate and require a boolean result.

        Raises:
            NotBoolError: If the result is not a boolean.
        """
        result = self.evaluate(expr, context)
        if isinstance(result, bool):
            return result
        raise self._bind(
            NotBoolError(f"Expected a boolean result, got {describe(result)}"),
            expr,
            context,
        )

    def evaluate_int(
        self,
        expr: Expression,
        context: Mapping[str, Any] | None = None,
    ) -> int:
        """Evaluate and require a numeric result, truncated to int.

        Raises:
            TypeMismatchError: If the result is not numeric or not finite.
        """
        result = self.evaluate(expr, context)
        if is_integer(result):
            return result
        if is_number(result):
            try:
                return int(result)
            except (OverflowError, ValueError) as e:
                raise self._bind(
                    TypeMismatchError(f"Result {result} is not a finite number"),
                    expr,
                    context,
                ) from e
        raise self._bind(
            TypeMismatchError(f"Expected an integer result, got {describe(result)}"),
            expr,
            context,
        )

    def evaluate_float(
        self,
        expr: Expression,
        context: Mapping[str, Any] | None = None,
    ) -> float:
        """Evaluate and require a numeric result, widened to float.

        Raises:
            TypeMismatchError: If the result is not numeric.
        """
        result = self.evaluate(expr, context)
        if is_number(result):
            return float(result)
        raise self._bind(
            TypeMismatchError(f"Expected a float result, got {describe(result)}"),
            expr,
            context,
        )

    @staticmethod
    def _bind(
        error: ExpressionEvaluationError,
        expr: Expression,
        context: Mapping[str, Any] | None,
    ) -> ExpressionEvaluationError:
        error.attach(expr.raw, (context or {}).keys())
        return error

    def evaluate_node(self, node: Node, context: Mapping[str, Any]) -> Any:
        """Evaluate a single node and, recursively, its children.

        Args:
            node: Node to evaluate.
            context: Mapping of names to values.

        Returns:
            The node's value.
        """
        if isinstance(node, Binary):
            return self._evaluate_binary(node, context)
        if isinstance(node, Identifier):
            return _lookup(node.name, context)
        if isinstance(node, Literal):
            return self._evaluate_literal(node)
        if isinstance(node, Unary):
            return self._evaluate_unary(node, context)
        if isinstance(node, Parenthesized):
            return self.evaluate_node(node.inner, context)
        if isinstance(node, Member):
            return self._evaluate_member(node, context)
        if isinstance(node, Index):
            return self._evaluate_index(node, context)
        if isinstance(node, Call):
            return self._evaluate_call(node, context)
        raise UnsupportedExpressionError(
            f"Unsupported expression node {type(node).__name__}"
        )

    def _evaluate_literal(self, node: Literal) -> Any:
        if node.kind == LiteralKind.STRING:
            return _unquote_string(node.text)

        if node.kind == LiteralKind.INT:
            try:
                value = int(node.text, 10)
            except ValueError as e:
                raise LiteralParseError(
                    f"Invalid integer literal '{node.text}'", text=node.text
                ) from e
            if not INT64_MIN <= value <= INT64_MAX:
                raise LiteralParseError(
                    f"Integer literal '{node.text}' out of range", text=node.text
                )
            return value

        if node.kind == LiteralKind.FLOAT:
            try:
                number = float(node.text)
            except ValueError as e:
                raise LiteralParseError(
                    f"Invalid float literal '{node.text}'", text=node.text
                ) from e
            if math.isinf(number):
                raise LiteralParseError(
                    f"Float literal '{node.text}' out of range", text=node.text
                )
            return number

        raise UnsupportedParamError(
            f"Unsupported {node.kind.value} literal {node.text}"
        )

    def _evaluate_unary(self, node: Unary, context: Mapping[str, Any]) -> Any:
        operand = self.evaluate_node(node.operand, context)

        if node.op == "!":
            if not isinstance(operand, bool):
                raise NotBoolError(
                    f"Operator '!' requires a boolean, got {describe(operand)}"
                )
            return not operand

        if node.op == "-":
            return -1.0 * to_float(operand)

        raise UnsupportedExpressionError(f"Unsupported unary operator '{node.op}'")

    def _evaluate_binary(self, node: Binary, context: Mapping[str, Any]) -> Any:
        """Evaluate an infix operation.

        Both operands are always evaluated, left first; && and || do not
        short-circuit.
        """
        left = self.evaluate_node(node.left, context)
        right = self.evaluate_node(node.right, context)
        op = node.op

        if op in _DECIMAL_OPS:
            a = to_decimal(left)
            b = to_decimal(right)
            with localcontext() as ctx:
                ctx.prec = self.settings.decimal_precision
                try:
                    return _DECIMAL_OPS[op](a, b)
                except DecimalException as e:
                    raise NotNumberError(
                        f"Invalid arithmetic: {left} {op} {right}"
                    ) from e

        if op == "/":
            dividend = to_float(left)
            divisor = to_float(right)
            if divisor == 0:
                raise DivisionByZeroError(f"Division by zero: {left} / {right}")
            return dividend / divisor

        if op in _COMPARISONS:
            return _COMPARISONS[op](to_float(left), to_float(right))

        if op in _LOGICAL:
            if not isinstance(left, bool) or not isinstance(right, bool):
                raise NotBoolError(
                    f"Operator '{op}' requires booleans, "
                    f"got {describe(left)} and {describe(right)}"
                )
            return _LOGICAL[op](left, right)

        raise UnsupportedExpressionError(f"Unsupported binary operator '{op}'")

    def _evaluate_member(self, node: Member, context: Mapping[str, Any]) -> Any:
        target = self.evaluate_node(node.target, context)
        if not isinstance(target, Mapping):
            raise TypeMismatchError(
                f"Cannot access member '{node.name}' on {describe(target)} value"
            )
        return _lookup(node.name, target)

    def _evaluate_index(self, node: Index, context: Mapping[str, Any]) -> Any:
        target = self.evaluate_node(node.target, context)
        index = self.evaluate_node(node.index, context)

        if isinstance(target, Mapping):
            if not isinstance(index, str):
                raise TypeMismatchError(
                    f"Map index must be a string, got {describe(index)}"
                )
            return check_value(target.get(index))

        if isinstance(target, (list, tuple)):
            if not is_integer(index):
                raise IndexNotNumberError(
                    f"List index must be an integer, got {describe(index)}"
                )
            if not 0 <= index < len(target):
                raise IndexOutOfRangeError(index, len(target))
            return check_value(target[index])

        raise TypeMismatchError(f"Cannot index {describe(target)} value")

    def _evaluate_call(self, node: Call, context: Mapping[str, Any]) -> Any:
        fn = self.functions.lookup(node.name)
        if fn is None:
            raise UnknownFunctionError(node.name)

        args = [self._evaluate_argument(arg, context) for arg in node.args]
        logger.debug("function_called", function=node.name, arg_count=len(args))
        return check_value(fn(args))

    def _evaluate_argument(self, node: Node, context: Mapping[str, Any]) -> Any:
        if isinstance(node, Literal) and self.settings.raw_literal_args:
            return node.text
        return self.evaluate_node(node, context)


def evaluate(
    expression: Expression | str,
    context: Mapping[str, Any] | None = None,
    *,
    functions: FunctionRegistry | None = None,
    settings: EvaluationSettings | None = None,
) -> Any:
    """Parse (if needed) and evaluate an expression in one call.

    Args:
        expression: Parsed Expression or expression text.
        context: Mapping of names to values.
        functions: Optional function registry.
        settings: Optional evaluation settings.

    Returns:
        The resulting value.

    Examples:
        >>> evaluate("a > 5 && a < 10", {"a": 7})
        True
    """
    expr = (
        parse_expression(expression) if isinstance(expression, str) else expression
    )
    return ExpressionEvaluator(functions=functions, settings=settings).evaluate(
        expr, context
    )
