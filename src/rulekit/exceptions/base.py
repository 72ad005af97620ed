from __future__ import annotations


class RulekitError(Exception):
    """Base exception class for all rulekit-specific errors.

    This is the root of the rulekit exception hierarchy. Embedding
    applications can catch this at their boundary to decide whether a failed
    rule is fatal or falls back to a default value, while letting system
    exceptions propagate naturally.

    Attributes:
        message: Human-readable error message describing what went wrong.

    Example:
        ```python
        try:
            allowed = rule.bool(context)
        except RulekitError as e:
            logger.warning("rule_failed", error=e.message)
            allowed = False
        ```
    """

    def __init__(self, message: str) -> None:
        """Initialize the RulekitError.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(message)
