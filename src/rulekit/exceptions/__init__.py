"""rulekit exception hierarchy.

All exceptions can be imported from this package:
    from rulekit.exceptions import RulekitError, ConfigError

Expression parsing and evaluation errors live in
``rulekit.expressions.errors`` and also derive from ``RulekitError``.
"""

from __future__ import annotations

# Base exception
from rulekit.exceptions.base import RulekitError

# Configuration exceptions
from rulekit.exceptions.config import ConfigError

__all__ = [
    "RulekitError",
    "ConfigError",
]
