"""Syntax tree nodes produced by the expression parser."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Union


@dataclass
class Literal:
    """A literal: bool, int, float, str, or None for the `None` keyword."""
    value: Any


@dataclass
class Path:
    """An identifier or `a::b` path."""
    segments: list[str]

    @property
    def name(self) -> str:
        return "::".join(self.segments)


@dataclass
class Unary:
    """Prefix negation (`-`) or logical not (`!`)."""
    op: str
    operand: Node


@dataclass
class Reference:
    """`&expr`, which has no effect on the value."""
    operand: Node


@dataclass
class Binary:
    op: str
    left: Node
    right: Node


@dataclass
class MethodCall:
    """receiver.method(args)"""
    receiver: Node
    method: str
    args: list[Node] = field(default_factory=list)


@dataclass
class Call:
    """A function call such as Some(x)."""
    func: Path
    args: list[Node] = field(default_factory=list)


@dataclass
class Field:
    """receiver.name without a call."""
    receiver: Node
    name: str


@dataclass
class Array:
    elements: list[Node] = field(default_factory=list)


@dataclass
class Index:
    target: Node
    index: Node


@dataclass
class RangeExpr:
    start: Node
    end: Node
    inclusive: bool = False


@dataclass
class Paren:
    """A parenthesized group; binary folding never crosses it."""
    inner: Node


Node = Union[Literal, Path, Unary, Reference, Binary, MethodCall, Call, Field, Array, Index, RangeExpr, Paren]


def _format_literal(value: Any) -> str:
    if value is None:
        return "None"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        escaped = escaped.replace("\n", "\\n").replace("\t", "\\t").replace("\r", "\\r")
        return f'"{escaped}"'
    if isinstance(value, float):
        if math.isinf(value):
            # the lexer reads an overflowing literal as infinity
            return "1e400" if value > 0 else "-1e400"
        return repr(value)
    return str(value)


def unparse(node: Node) -> str:
    """Format a syntax tree back into expression source."""
    if isinstance(node, Literal):
        return _format_literal(node.value)
    if isinstance(node, Path):
        return node.name
    if isinstance(node, Unary):
        return f"{node.op}{unparse(node.operand)}"
    if isinstance(node, Reference):
        operand = unparse(node.operand)
        # `&&` would lex as one token
        return f"& {operand}" if operand.startswith("&") else f"&{operand}"
    if isinstance(node, Binary):
        return f"{unparse(node.left)} {node.op} {unparse(node.right)}"
    if isinstance(node, MethodCall):
        args_str = ", ".join(unparse(a) for a in node.args)
        return f"{unparse(node.receiver)}.{node.method}({args_str})"
    if isinstance(node, Call):
        args_str = ", ".join(unparse(a) for a in node.args)
        return f"{node.func.name}({args_str})"
    if isinstance(node, Field):
        return f"{unparse(node.receiver)}.{node.name}"
    if isinstance(node, Array):
        elements = ", ".join(unparse(e) for e in node.elements)
        return f"[{elements}]"
    if isinstance(node, Index):
        return f"{unparse(node.target)}[{unparse(node.index)}]"
    if isinstance(node, RangeExpr):
        limits = "..=" if node.inclusive else ".."
        return f"{unparse(node.start)}{limits}{unparse(node.end)}"
    if isinstance(node, Paren):
        return f"({unparse(node.inner)})"
    raise TypeError(f"Not a syntax node: {node!r}")
