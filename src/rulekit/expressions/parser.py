"""Expression parser models and functions.

This module turns rule text into an immutable AST. The dialect is a standard
infix expression language:

- Literals: "text", 'c', 42, 4.2, 1e3
- Booleans: true / false
- Identifiers resolved against the evaluation context: amount
- Member access: user.age
- Index access: items[0], attrs["name"]
- Calls to registered functions: contains(tags, "vip")
- Unary operators: !flag, -amount
- Arithmetic: + - * /
- Comparison: < > <= >= == !=
- Logic: && ||

Implementation:
This module uses a Lark-based LALR parser with a formal EBNF grammar
(grammar.lark). Parse failures are reported as ExpressionSyntaxError with the
column of the offending character or token.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from lark import (
    Lark,
    LarkError,
    Token,
    Transformer,
    UnexpectedCharacters,
    UnexpectedEOF,
    UnexpectedToken,
)

from rulekit.expressions.errors import EmptyExpressionError, ExpressionSyntaxError
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
from rulekit.logging import get_logger

__all__ = [
    "Expression",
    "parse_expression",
]

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Expression:
    """Parsed rule expression.

    Attributes:
        raw: Original expression text.
        root: Root node of the syntax tree.

    Examples:
        >>> expr = parse_expression("a > 5 && a < 10")
        >>> expr.root.op
        '&&'
    """

    raw: str
    root: Node

    def __str__(self) -> str:
        return self.raw


class _NodeTransformer(Transformer[Token, Node]):
    """Transform the Lark parse tree into AST nodes."""

    def binary(self, items: list[object]) -> Binary:
        """Handle infix operators.

        Grammar: ?or_expr: or_expr OR and_expr -> binary (and every tier below)
        items[0] = left operand, items[1] = operator token, items[2] = right
        """
        left, op, right = items
        return Binary(op=str(op), left=left, right=right)  # type: ignore[arg-type]

    def unary(self, items: list[object]) -> Unary:
        op, operand = items
        return Unary(op=str(op), operand=operand)  # type: ignore[arg-type]

    def index(self, items: list[Node]) -> Index:
        return Index(target=items[0], index=items[1])

    def member(self, items: list[object]) -> Member:
        target, name = items
        return Member(target=target, name=str(name))  # type: ignore[arg-type]

    def identifier(self, items: list[Token]) -> Identifier:
        return Identifier(name=str(items[0]))

    def call(self, items: list[object]) -> Call:
        """Handle function calls.

        Grammar: NAME "(" [arguments] ")" -> call
        The optional arguments placeholder is None for an empty call.
        """
        name, args = items
        return Call(name=str(name), args=args or ())  # type: ignore[arg-type]

    def arguments(self, items: list[Node]) -> tuple[Node, ...]:
        return tuple(items)

    def paren(self, items: list[Node]) -> Parenthesized:
        return Parenthesized(inner=items[0])

    def string_lit(self, items: list[Token]) -> Literal:
        return Literal(kind=LiteralKind.STRING, text=str(items[0]))

    def char_lit(self, items: list[Token]) -> Literal:
        return Literal(kind=LiteralKind.CHAR, text=str(items[0]))

    def int_lit(self, items: list[Token]) -> Literal:
        return Literal(kind=LiteralKind.INT, text=str(items[0]))

    def float_lit(self, items: list[Token]) -> Literal:
        return Literal(kind=LiteralKind.FLOAT, text=str(items[0]))


# Load grammar from file
_GRAMMAR_PATH = Path(__file__).parent / "grammar.lark"
_GRAMMAR = _GRAMMAR_PATH.read_text()

# Create Lark parser instance (cached). The transformer holds no state, so it
# is applied inline while parsing.
_parser = Lark(
    _GRAMMAR,
    parser="lalr",
    start="start",
    transformer=_NodeTransformer(),
)


def _column_to_position(column: object) -> int:
    """Convert a 1-based Lark column into a 0-based position."""
    if isinstance(column, int) and column > 0:
        return column - 1
    return 0


def parse_expression(text: str) -> Expression:
    """Parse rule text into an Expression.

    Args:
        text: Expression source text.

    Returns:
        Parsed Expression holding the syntax tree.

    Raises:
        EmptyExpressionError: If the text is empty or whitespace only.
        ExpressionSyntaxError: For any text that does not match the grammar.

    Examples:
        >>> parse_expression("1 + 2").root  # doctest: +ELLIPSIS
        Binary(op='+', left=Literal(...), right=Literal(...))
        >>> parse_expression("user.age >= 18")  # doctest: +ELLIPSIS
        Expression(raw='user.age >= 18', root=Binary(...))
    """
    if not text or text.isspace():
        raise EmptyExpressionError(text)

    try:
        root = _parser.parse(text)

    except UnexpectedCharacters as e:
        pos = _column_to_position(e.column)
        char = e.char if hasattr(e, "char") else "unknown"
        raise ExpressionSyntaxError(
            f"Invalid character '{char}' in expression",
            expression=text,
            position=pos,
        ) from e

    except UnexpectedToken as e:
        if e.token.type == "$END":
            raise ExpressionSyntaxError(
                "Unexpected end of expression",
                expression=text,
                position=len(text.rstrip()),
            ) from e
        raise ExpressionSyntaxError(
            f"Unexpected token '{e.token}' in expression",
            expression=text,
            position=_column_to_position(e.column),
        ) from e

    except UnexpectedEOF as e:
        raise ExpressionSyntaxError(
            "Unexpected end of expression",
            expression=text,
            position=len(text.rstrip()),
        ) from e

    except LarkError as e:
        # Catch any other Lark exceptions
        error_msg = str(e) if str(e) else "Invalid expression syntax"
        raise ExpressionSyntaxError(
            error_msg,
            expression=text,
            position=0,
        ) from e

    logger.debug("expression_parsed", expression=text)
    return Expression(raw=text, root=root)
