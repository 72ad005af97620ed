"""Unit tests for the Rule facade."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import pytest

from rulekit import Rule
from rulekit.config import EvaluationSettings
from rulekit.expressions.errors import (
    EmptyExpressionError,
    ExpressionSyntaxError,
    KeyNotFoundError,
    NotBoolError,
    TypeMismatchError,
)
from rulekit.expressions.functions import FunctionRegistry


class TestCompile:
    """Test Rule.compile()."""

    def test_compile_keeps_text(self) -> None:
        rule = Rule.compile("a > 5 && a < 10")
        assert rule.text == "a > 5 && a < 10"
        assert repr(rule) == "Rule('a > 5 && a < 10')"

    def test_compile_empty(self) -> None:
        with pytest.raises(EmptyExpressionError):
            Rule.compile("  ")

    def test_compile_invalid(self) -> None:
        with pytest.raises(ExpressionSyntaxError):
            Rule.compile("a > > 1")

    def test_compile_with_custom_functions(self) -> None:
        functions = FunctionRegistry()

        @functions.register("double")
        def double(args: list[Any]) -> Any:
            return args[0] * 2

        rule = Rule.compile("double(a)", functions=functions)
        assert rule.eval({"a": 4}) == 8

    def test_compile_with_settings(self) -> None:
        settings = EvaluationSettings(raw_literal_args=False)
        functions = FunctionRegistry({"first": lambda args: args[0]})
        rule = Rule.compile('first("abc")', functions=functions, settings=settings)
        assert rule.eval() == "abc"


class TestEvaluation:
    """Test evaluating a compiled rule."""

    def test_bool(self) -> None:
        rule = Rule.compile("a > 5 && a < 10")
        assert rule.bool({"a": 7}) is True
        assert rule.bool({"a": 12}) is False

    def test_rule_is_reusable(self) -> None:
        rule = Rule.compile("user.age >= 18")
        results = [rule.bool({"user": {"age": age}}) for age in (10, 18, 40)]
        assert results == [False, True, True]

    def test_eval_returns_decimal_for_arithmetic(self) -> None:
        assert Rule.compile("0.1 + 0.2").eval() == Decimal("0.3")

    def test_float(self) -> None:
        assert Rule.compile("0.1 + 0.2").float() == 0.3
        assert Rule.compile("7 / 2").float() == 3.5

    def test_int_truncates(self) -> None:
        assert Rule.compile("2 * 3.5").int() == 7
        assert Rule.compile("7 / 2").int() == 3

    def test_bool_rejects_numbers(self) -> None:
        with pytest.raises(NotBoolError):
            Rule.compile("1 + 1").bool()

    def test_int_rejects_strings(self) -> None:
        with pytest.raises(TypeMismatchError):
            Rule.compile("name").int({"name": "bob"})

    def test_missing_key_reports_expression(self) -> None:
        rule = Rule.compile("missing > 1")
        with pytest.raises(KeyNotFoundError) as exc_info:
            rule.bool({"present": 1})
        error = exc_info.value
        assert error.key == "missing"
        assert error.expression == "missing > 1"
        assert "Available variables: present" in str(error)

    def test_context_defaults_to_empty(self) -> None:
        assert Rule.compile("true").bool() is True
