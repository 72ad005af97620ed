"""Unit tests for the function registry."""

from __future__ import annotations

from typing import Any

import pytest

from rulekit.expressions.errors import DuplicateFunctionError, FunctionArgumentError
from rulekit.expressions.functions import (
    FunctionRegistry,
    contains,
    create_registry,
    default_registry,
    register_function,
)


class TestFunctionRegistry:
    """Test registration and lookup."""

    def test_register_and_lookup(self) -> None:
        functions = FunctionRegistry()

        def first(args: list[Any]) -> Any:
            return args[0]

        assert functions.register("first", first) is first
        assert functions.lookup("first") is first
        assert "first" in functions
        assert len(functions) == 1

    def test_lookup_unknown_returns_none(self) -> None:
        assert FunctionRegistry().lookup("missing") is None

    def test_decorator_registration(self) -> None:
        functions = FunctionRegistry()

        @functions.register("double")
        def double(args: list[Any]) -> Any:
            return args[0] * 2

        assert functions.lookup("double") is double
        assert double([2]) == 4

    def test_duplicate_registration(self) -> None:
        functions = FunctionRegistry({"f": lambda args: None})
        with pytest.raises(DuplicateFunctionError):
            functions.register("f", lambda args: None)

    @pytest.mark.parametrize("name", ["", "1abc", "a-b", "a.b"])
    def test_invalid_names(self, name: str) -> None:
        with pytest.raises(ValueError):
            FunctionRegistry().register(name, lambda args: None)

    def test_names_sorted(self) -> None:
        functions = FunctionRegistry({"b": lambda a: 1, "a": lambda a: 2})
        assert functions.names() == ["a", "b"]

    def test_copy_is_independent(self) -> None:
        functions = FunctionRegistry({"a": lambda args: 1})
        clone = functions.copy()
        clone.register("b", lambda args: 2)
        assert "b" in clone
        assert "b" not in functions


class TestBuiltins:
    """Test built-in functions and the default registry."""

    def test_create_registry_has_contains(self) -> None:
        functions = create_registry()
        assert functions.lookup("contains") is contains

    def test_create_registry_is_fresh(self) -> None:
        assert create_registry() is not create_registry()

    def test_default_registry_is_shared(self) -> None:
        assert default_registry() is default_registry()
        assert "contains" in default_registry()

    def test_register_function_into_given_registry(self) -> None:
        functions = FunctionRegistry()

        @register_function("answer", registry=functions)
        def answer(args: list[Any]) -> int:
            return 42

        assert functions.lookup("answer") is answer
        assert "answer" not in default_registry()

    def test_contains_substring(self) -> None:
        assert contains(["hello", "ell"]) is True
        assert contains(["hello", "xyz"]) is False

    def test_contains_trims_raw_literal_quotes(self) -> None:
        assert contains(["123555", '"123"']) is True

    def test_contains_list_and_map(self) -> None:
        assert contains([["a", "b"], "b"]) is True
        assert contains([{"k": 1}, "k"]) is True
        assert contains([{"k": 1}, "v"]) is False

    def test_contains_arity(self) -> None:
        with pytest.raises(FunctionArgumentError):
            contains(["only"])

    def test_contains_unsearchable(self) -> None:
        with pytest.raises(FunctionArgumentError):
            contains([5, 1])
