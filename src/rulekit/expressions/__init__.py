"""Expression parsing and evaluation for rulekit.

This package parses rule text into an immutable syntax tree and evaluates the
tree against a context mapping.

Expression Syntax
-----------------
- Literals: "text", 42, 4.2, true, false
- Context lookups: amount, user.age, items[0], attrs["color"]
- Arithmetic: + - * / (decimal-accurate + - *)
- Comparison: < > <= >= == !=
- Logic: && || !
- Function calls: contains(tags, "vip")

Examples
--------
    expr = parse_expression("amount > 100 && contains(tags, \\"vip\\")")
    ExpressionEvaluator().evaluate_bool(expr, {"amount": 120, "tags": ["vip"]})

Module Structure
----------------
- grammar.lark: EBNF grammar
- nodes.py: AST node types
- parser.py: Text -> Expression
- values.py: Value kinds and numeric coercion
- evaluator.py: Expression + context -> value
- functions.py: Function registry for call expressions
- errors.py: Expression-specific error types

The evaluator is stateless and thread-safe, operating purely on the provided
context at evaluation time.
"""

from __future__ import annotations

from rulekit.expressions.errors import (
    DivisionByZeroError,
    DuplicateFunctionError,
    EmptyExpressionError,
    ExpressionError,
    ExpressionEvaluationError,
    ExpressionSyntaxError,
    FunctionArgumentError,
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
from rulekit.expressions.evaluator import ExpressionEvaluator, evaluate
from rulekit.expressions.functions import (
    FunctionRegistry,
    RuleFunction,
    create_registry,
    default_registry,
    register_function,
)
from rulekit.expressions.parser import Expression, parse_expression
from rulekit.expressions.values import ValueKind, kind_of

__all__: list[str] = [
    # Error types
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
    "NestingTooDeepError",
    "DivisionByZeroError",
    "UnknownFunctionError",
    "TypeMismatchError",
    "DuplicateFunctionError",
    "FunctionArgumentError",
    # Parser
    "Expression",
    "parse_expression",
    # Values
    "ValueKind",
    "kind_of",
    # Evaluator
    "ExpressionEvaluator",
    "evaluate",
    # Functions
    "FunctionRegistry",
    "RuleFunction",
    "create_registry",
    "default_registry",
    "register_function",
]
