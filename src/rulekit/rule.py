"""Compiled rule facade.

A Rule parses its text once and evaluates it many times, each call with a
fresh context. It is the object most embedding applications hold on to:

    rule = Rule.compile("order.total >= 100 && !order.flagged")
    if rule.bool({"order": {"total": 120, "flagged": False}}):
        ...
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from rulekit.config import EvaluationSettings
from rulekit.expressions.errors import ExpressionEvaluationError
from rulekit.expressions.evaluator import ExpressionEvaluator
from rulekit.expressions.functions import FunctionRegistry
from rulekit.expressions.parser import Expression, parse_expression
from rulekit.logging import get_logger

__all__ = ["Rule"]

logger = get_logger(__name__)


class Rule:
    """A parsed expression bound to an evaluator.

    Attributes:
        expression: The parsed expression.
    """

    def __init__(
        self,
        expression: Expression,
        evaluator: ExpressionEvaluator | None = None,
    ) -> None:
        self.expression = expression
        self._evaluator = evaluator if evaluator is not None else ExpressionEvaluator()

    @classmethod
    def compile(
        cls,
        text: str,
        *,
        functions: FunctionRegistry | None = None,
        settings: EvaluationSettings | None = None,
    ) -> Rule:
        """Parse rule text.

        Raises:
            EmptyExpressionError: If the text is empty.
            ExpressionSyntaxError: If the text does not parse.
        """
        return cls(
            parse_expression(text),
            ExpressionEvaluator(functions=functions, settings=settings),
        )

    @property
    def text(self) -> str:
        return self.expression.raw

    def eval(self, context: Mapping[str, Any] | None = None) -> Any:
        return self._run(self._evaluator.evaluate, context)

    def bool(self, context: Mapping[str, Any] | None = None) -> bool:
        return self._run(self._evaluator.evaluate_bool, context)

    def int(self, context: Mapping[str, Any] | None = None) -> int:
        return self._run(self._evaluator.evaluate_int, context)

    def float(self, context: Mapping[str, Any] | None = None) -> float:
        return self._run(self._evaluator.evaluate_float, context)

    def _run(self, method: Any, context: Mapping[str, Any] | None) -> Any:
        try:
            return method(self.expression, context)
        except ExpressionEvaluationError as e:
            logger.debug(
                "rule_evaluation_failed",
                rule=self.expression.raw,
                error_kind=type(e).__name__,
                error=e.detail,
            )
            raise

    def __repr__(self) -> str:
        return f"Rule({self.expression.raw!r})"
