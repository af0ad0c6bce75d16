"""Exceptions raised while parsing and evaluating expressions.

`Context.evaluate` turns every one of these into an absent result; they stay
distinct so callers of `Context.evaluate_or_raise` can tell causes apart.
"""


class ParseError(SyntaxError):
    """Expression source could not be tokenized or parsed."""

    pass


class EvaluationError(Exception):
    """Base class for every reason an expression cannot be evaluated."""

    pass


class UnresolvedName(EvaluationError):
    """An identifier is not bound in the context."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unresolved name: {name}")
        self.name = name


class OperandMismatch(EvaluationError):
    """The operands are not permitted for the operator."""

    pass


class UnknownMethod(EvaluationError):
    pass


class ArityMismatch(EvaluationError):
    pass


class IndexOutOfRange(EvaluationError):
    pass


class ArithmeticFault(EvaluationError):
    """Integer overflow, integer division by zero, or a non-finite value where an integer is required."""

    pass


class UnwrapNone(EvaluationError):
    pass


class AmbiguousXor(EvaluationError):
    """Both sides of xor hold a value."""

    pass


class NoneInCollection(EvaluationError):
    pass


class UnsupportedSyntax(EvaluationError):
    pass


class CyclicReference(EvaluationError):
    def __init__(self, chain: list[str]) -> None:
        super().__init__("Cyclic reference: " + " -> ".join(chain))
        self.chain = chain


class RecursionLimitExceeded(EvaluationError):
    pass
