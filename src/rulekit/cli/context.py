"""Evaluation context loading for the rulekit CLI.

A context is assembled from an optional YAML (or JSON) file plus
``KEY=VALUE`` overrides. Values are parsed as YAML scalars, so ``7`` is an
int, ``0.5`` a float, ``true`` a bool and ``[1, 2]`` a list. Dotted keys
create nested maps: ``user.age=30`` -> {"user": {"age": 30}}.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import IntEnum
from pathlib import Path
from typing import Any

import yaml

__all__ = [
    "ExitCode",
    "ContextError",
    "load_context",
    "parse_assignment",
]


class ExitCode(IntEnum):
    """Standard exit codes for the rulekit CLI."""

    SUCCESS = 0
    FAILURE = 1


class ContextError(ValueError):
    """Raised when the evaluation context cannot be built."""


def parse_assignment(assignment: str) -> tuple[list[str], Any]:
    """Split ``KEY=VALUE`` into a key path and a YAML-parsed value.

    Raises:
        ContextError: If there is no '=' or the key is empty.

    Examples:
        >>> parse_assignment("user.age=30")
        (['user', 'age'], 30)
    """
    key, sep, raw = assignment.partition("=")
    key = key.strip()
    if not sep or not key:
        raise ContextError(f"Expected KEY=VALUE, got '{assignment}'")
    try:
        value = yaml.safe_load(raw) if raw.strip() else ""
    except yaml.YAMLError:
        value = raw
    return key.split("."), value


def load_context(
    context_file: Path | None = None,
    assignments: Iterable[str] = (),
) -> dict[str, Any]:
    """Build an evaluation context.

    Args:
        context_file: Optional YAML/JSON file holding a mapping.
        assignments: ``KEY=VALUE`` overrides applied after the file.

    Returns:
        The context mapping.

    Raises:
        ContextError: If the file is unreadable, not a mapping, or an
            assignment is malformed.
    """
    context: dict[str, Any] = {}

    if context_file is not None:
        try:
            loaded = yaml.safe_load(context_file.read_text())
        except (OSError, yaml.YAMLError) as e:
            raise ContextError(f"Cannot load context file {context_file}: {e}") from e
        if loaded is not None:
            if not isinstance(loaded, dict):
                raise ContextError(
                    f"Context file {context_file} must contain a mapping"
                )
            context.update(loaded)

    for assignment in assignments:
        path, value = parse_assignment(assignment)
        target = context
        for part in path[:-1]:
            nested = target.get(part)
            if not isinstance(nested, dict):
                nested = {}
                target[part] = nested
            target = nested
        target[path[-1]] = value

    return context
