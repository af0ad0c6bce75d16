"""veval - evaluate small Rust-flavoured expressions against a context of named expressions."""

from veval.context import Context, evaluate
from veval.errors import (
    AmbiguousXor,
    ArithmeticFault,
    ArityMismatch,
    CyclicReference,
    EvaluationError,
    IndexOutOfRange,
    NoneInCollection,
    OperandMismatch,
    ParseError,
    RecursionLimitExceeded,
    UnknownMethod,
    UnresolvedName,
    UnsupportedSyntax,
    UnwrapNone,
)
from veval.parsing import parse_expression, unparse
from veval.value import NONE, Bool, Float, Int, NoneValue, Range, Str, Value, Vec

__all__ = [
    # Main API
    "Context",
    "evaluate",
    "parse_expression",
    "unparse",
    # Values
    "Value",
    "Bool",
    "Int",
    "Float",
    "Str",
    "Vec",
    "Range",
    "NoneValue",
    "NONE",
    # Errors
    "ParseError",
    "EvaluationError",
    "UnresolvedName",
    "OperandMismatch",
    "UnknownMethod",
    "ArityMismatch",
    "IndexOutOfRange",
    "ArithmeticFault",
    "UnwrapNone",
    "AmbiguousXor",
    "NoneInCollection",
    "UnsupportedSyntax",
    "CyclicReference",
    "RecursionLimitExceeded",
]

__version__ = "0.1.0"
