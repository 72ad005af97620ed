"""Function registry for call expressions.

Call expressions such as ``contains(tags, "vip")`` are dispatched by name to
host functions held in a FunctionRegistry. A function receives the list of
evaluated arguments and returns a value; any exception it raises propagates
out of the evaluation unchanged.

Registries are plain objects that are passed to the evaluator. The module
keeps one process-wide default registry for convenience; tests and
applications that need isolation should build their own with
create_registry().
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from rulekit.expressions.errors import DuplicateFunctionError, FunctionArgumentError

__all__ = [
    "RuleFunction",
    "FunctionRegistry",
    "contains",
    "create_registry",
    "default_registry",
    "register_function",
]

#: Signature of a host function callable from expressions
RuleFunction = Callable[[list[Any]], Any]


class FunctionRegistry:
    """Registry mapping function names to host implementations.

    The registry is filled during setup and only read during evaluation.
    Mutating it while other threads evaluate requires external locking.

    Example:
        ```python
        functions = FunctionRegistry()

        # Direct registration
        functions.register("upper", lambda args: str(args[0]).upper())

        # Using decorator registration
        @functions.register("double")
        def double(args: list[Any]) -> Any:
            return args[0] * 2

        functions.lookup("upper")  # <function <lambda> ...>
        functions.names()  # ['double', 'upper']
        ```
    """

    def __init__(self, functions: Mapping[str, RuleFunction] | None = None) -> None:
        """Initialize the registry.

        Args:
            functions: Optional initial name -> function mapping.
        """
        self._functions: dict[str, RuleFunction] = {}
        for name, fn in (functions or {}).items():
            self._register_impl(name, fn)

    def register(
        self,
        name: str,
        fn: RuleFunction | None = None,
    ) -> RuleFunction | Callable[[RuleFunction], RuleFunction]:
        """Register a function under a name.

        Can be used as a decorator or called directly.

        Args:
            name: Name used in call expressions; must be a valid identifier.
            fn: Function to register (None when used as decorator).

        Returns:
            The registered function when called directly, or a decorator.

        Raises:
            DuplicateFunctionError: If the name is already registered.
            ValueError: If the name is not a valid identifier.
        """
        if fn is None:

            def decorator(func: RuleFunction) -> RuleFunction:
                self._register_impl(name, func)
                return func

            return decorator

        self._register_impl(name, fn)
        return fn

    def _register_impl(self, name: str, fn: RuleFunction) -> None:
        if not name.isidentifier():
            raise ValueError(f"Invalid function name: {name!r}")
        if name in self._functions:
            raise DuplicateFunctionError(name)
        self._functions[name] = fn

    def lookup(self, name: str) -> RuleFunction | None:
        """Look up a function by name, returning None when unregistered."""
        return self._functions.get(name)

    def names(self) -> list[str]:
        """Sorted list of registered function names."""
        return sorted(self._functions)

    def copy(self) -> FunctionRegistry:
        """Return an independent registry with the same functions."""
        return FunctionRegistry(self._functions)

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __len__(self) -> int:
        return len(self._functions)


def _unquote(value: Any) -> Any:
    # Raw literal arguments keep their double quotes
    if isinstance(value, str) and len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def contains(args: list[Any]) -> bool:
    """Report whether the second argument is contained in the first.

    ``contains(haystack, needle)``: substring test for strings, membership
    for lists, key membership for maps. String literal arguments may arrive
    as raw source text, so surrounding double quotes are trimmed first.

    Raises:
        FunctionArgumentError: If not called with exactly two arguments, or
            the first argument is not a string, list or map.
    """
    if len(args) != 2:
        raise FunctionArgumentError(
            f"contains() requires 2 arguments, got {len(args)}"
        )
    haystack, needle = (_unquote(arg) for arg in args)
    if isinstance(haystack, str):
        return str(needle) in haystack
    if isinstance(haystack, (list, tuple, Mapping)):
        return needle in haystack
    raise FunctionArgumentError(
        f"contains() cannot search a {type(haystack).__name__} value"
    )


_BUILTINS: dict[str, RuleFunction] = {
    "contains": contains,
}


def create_registry() -> FunctionRegistry:
    """Create a fresh registry holding the built-in functions."""
    return FunctionRegistry(_BUILTINS)


# =============================================================================
# Module-level default instance
# =============================================================================

_default = create_registry()


def default_registry() -> FunctionRegistry:
    """Return the process-wide default registry."""
    return _default


def register_function(
    name: str,
    registry: FunctionRegistry | None = None,
) -> Callable[[RuleFunction], RuleFunction]:
    """Decorator for registering functions.

    Args:
        name: Name used in call expressions.
        registry: Registry to use (defaults to the process-wide registry).

    Example:
        ```python
        @register_function("startswith")
        def startswith(args: list[Any]) -> bool:
            return str(args[0]).startswith(str(args[1]))
        ```
    """
    target = registry if registry is not None else _default

    def decorator(fn: RuleFunction) -> RuleFunction:
        target.register(name, fn)
        return fn

    return decorator
