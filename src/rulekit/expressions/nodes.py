"""AST node types for rule expressions.

The node set is closed: every parsed expression is a tree built only from the
classes below. Nodes are frozen so a parsed tree can be shared and evaluated
repeatedly, including from several threads at once.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal as TypingLiteral

__all__ = [
    "LiteralKind",
    "Literal",
    "Identifier",
    "Unary",
    "Binary",
    "Parenthesized",
    "Index",
    "Member",
    "Call",
    "Node",
    "UnaryOperator",
    "BinaryOperator",
]


UnaryOperator = TypingLiteral["!", "-"]
BinaryOperator = TypingLiteral[
    "||", "&&", "==", "!=", "<", ">", "<=", ">=", "+", "-", "*", "/"
]


class LiteralKind(str, Enum):
    """Kind of literal token."""

    STRING = "string"  # "text"
    INT = "int"  # 42
    FLOAT = "float"  # 4.2
    CHAR = "char"  # 'c'


@dataclass(frozen=True, slots=True)
class Literal:
    """Literal value as written in the source.

    The text is kept raw (quotes included for strings) and converted at
    evaluation time.

    Attributes:
        kind: Literal token kind.
        text: Source text of the literal.
    """

    kind: LiteralKind
    text: str


@dataclass(frozen=True, slots=True)
class Identifier:
    """Bare name, resolved against the context (or true/false)."""

    name: str


@dataclass(frozen=True, slots=True)
class Unary:
    """Prefix operator applied to one operand."""

    op: UnaryOperator
    operand: Node


@dataclass(frozen=True, slots=True)
class Binary:
    """Infix operator applied to two operands."""

    op: BinaryOperator
    left: Node
    right: Node


@dataclass(frozen=True, slots=True)
class Parenthesized:
    """Expression wrapped in parentheses."""

    inner: Node


@dataclass(frozen=True, slots=True)
class Index:
    """Bracket access: target[index]."""

    target: Node
    index: Node


@dataclass(frozen=True, slots=True)
class Member:
    """Dot access: target.name."""

    target: Node
    name: str


@dataclass(frozen=True, slots=True)
class Call:
    """Function call: name(arg, ...)."""

    name: str
    args: tuple[Node, ...] = ()


# Type alias for any node
Node = Literal | Identifier | Unary | Binary | Parenthesized | Index | Member | Call
