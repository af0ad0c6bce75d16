"""Parsing module for the expression language."""

from veval.parsing.expr_parser import ExprParser, parse_expression
from veval.parsing.nodes import (
    Array,
    Binary,
    Call,
    Field,
    Index,
    Literal,
    MethodCall,
    Node,
    Paren,
    Path,
    RangeExpr,
    Reference,
    Unary,
    unparse,
)

__all__ = [
    "Array",
    "Binary",
    "Call",
    "ExprParser",
    "Field",
    "Index",
    "Literal",
    "MethodCall",
    "Node",
    "Paren",
    "Path",
    "RangeExpr",
    "Reference",
    "Unary",
    "parse_expression",
    "unparse",
]
