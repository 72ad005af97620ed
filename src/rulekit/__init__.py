"""rulekit - embedded rule expression evaluator.

Parse boolean/arithmetic/string expressions once and evaluate them against
key-value contexts:

    from rulekit import Rule

    rule = Rule.compile("a > 5 && a < 10")
    rule.bool({"a": 7})  # True
"""

from __future__ import annotations

from rulekit.exceptions import ConfigError, RulekitError
from rulekit.expressions import (
    DivisionByZeroError,
    EmptyExpressionError,
    Expression,
    ExpressionError,
    ExpressionEvaluationError,
    ExpressionEvaluator,
    ExpressionSyntaxError,
    FunctionRegistry,
    IndexNotNumberError,
    IndexOutOfRangeError,
    KeyNotFoundError,
    NestingTooDeepError,
    NotBoolError,
    NotNumberError,
    TypeMismatchError,
    UnknownFunctionError,
    create_registry,
    default_registry,
    evaluate,
    parse_expression,
    register_function,
)
from rulekit.rule import Rule

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Rule",
    "Expression",
    "ExpressionEvaluator",
    "FunctionRegistry",
    "create_registry",
    "default_registry",
    "register_function",
    "evaluate",
    "parse_expression",
    "RulekitError",
    "ConfigError",
    "ExpressionError",
    "ExpressionSyntaxError",
    "EmptyExpressionError",
    "ExpressionEvaluationError",
    "DivisionByZeroError",
    "IndexNotNumberError",
    "IndexOutOfRangeError",
    "KeyNotFoundError",
    "NestingTooDeepError",
    "NotBoolError",
    "NotNumberError",
    "TypeMismatchError",
    "UnknownFunctionError",
]
