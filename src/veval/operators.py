"""Operator table, operand-compatibility gate, and precedence folding."""

from __future__ import annotations

import math
from enum import Enum

from veval.errors import ArithmeticFault, OperandMismatch
from veval.value import Bool, Float, Int, Range, Str, Value, Vec, fits_int64


class Operator(Enum):
    """Binary operators, keyed by their source symbol."""

    MUL = "*"
    DIV = "/"
    REM = "%"

    ADD = "+"
    SUB = "-"

    EQ = "=="
    NE = "!="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="

    AND = "&&"
    OR = "||"

    @property
    def precedence(self) -> int:
        """Binding strength; higher binds tighter."""
        return _PRECEDENCE[self]

    @classmethod
    def from_symbol(cls, symbol: str) -> Operator:
        return cls(symbol)


class UnaryOperator(Enum):
    NEG = "-"
    NOT = "!"


# Parentheses and unary operators bind tighter than everything here; both are
# handled as single operands before folding.
_PRECEDENCE: dict[Operator, int] = {
    Operator.MUL: 4,
    Operator.DIV: 4,
    Operator.REM: 4,
    Operator.ADD: 3,
    Operator.SUB: 3,
    Operator.EQ: 2,
    Operator.NE: 2,
    Operator.GT: 2,
    Operator.LT: 2,
    Operator.GE: 2,
    Operator.LE: 2,
    Operator.AND: 1,
    Operator.OR: 1,
}

# Longest string that `*` repetition may produce.
MAX_REPEAT_LENGTH = 1 << 24

_ARITHMETIC = frozenset({Operator.ADD, Operator.SUB, Operator.MUL, Operator.DIV, Operator.REM})
_EQUALITY = frozenset({Operator.EQ, Operator.NE})
_ORDERING = frozenset({Operator.GT, Operator.LT, Operator.GE, Operator.LE})


def is_permitted(op: Operator, left: Value, right: Value) -> bool:
    """Decide whether `op` may combine these operand variants."""
    if isinstance(left, Int):
        if op is Operator.MUL and isinstance(right, Str):
            return True
        return (op in _ARITHMETIC or op in _EQUALITY or op in _ORDERING) and left.is_same(right)
    if isinstance(left, Float):
        return (op in _ARITHMETIC or op in _EQUALITY or op in _ORDERING) and left.is_same(right)
    if isinstance(left, Str):
        if op is Operator.MUL:
            return isinstance(right, Int)
        return op in (Operator.ADD, Operator.EQ, Operator.NE) and left.is_same(right)
    if isinstance(left, (Vec, Range)):
        return op in _EQUALITY and left.is_same(right)
    if isinstance(left, Bool):
        return op in (Operator.EQ, Operator.NE, Operator.AND, Operator.OR) and left.is_same(right)
    # None combines only through methods
    return False


def is_permitted_unary(op: UnaryOperator, operand: Value) -> bool:
    if op is UnaryOperator.NEG:
        return isinstance(operand, (Int, Float))
    return isinstance(operand, Bool)


def checked_int(n: int) -> Int:
    """Wrap an integer result, failing if it leaves the 64-bit range."""
    if not fits_int64(n):
        raise ArithmeticFault(f"Integer overflow: {n}")
    return Int(n)


def _int_div(a: int, b: int) -> int:
    if b == 0:
        raise ArithmeticFault("Integer division by zero")
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def _int_rem(a: int, b: int) -> int:
    if b == 0:
        raise ArithmeticFault("Integer remainder by zero")
    return a - b * _int_div(a, b)


def float_div(a: float, b: float) -> float:
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _float_rem(a: float, b: float) -> float:
    if b == 0.0 or math.isinf(a) or math.isnan(a) or math.isnan(b):
        return math.nan
    return math.fmod(a, b)


def _repeat(text: str, times: int) -> Str:
    if times <= 0 or not text:
        return Str("")
    if len(text) * times > MAX_REPEAT_LENGTH:
        raise ArithmeticFault(f"Repeated string would exceed {MAX_REPEAT_LENGTH} characters")
    return Str(text * times)


def _order(op: Operator, a: int | float, b: int | float) -> Bool:
    if isinstance(a, float) and (math.isnan(a) or math.isnan(b)):
        raise OperandMismatch(f"No ordering between {a} and {b}")
    if op is Operator.GT:
        return Bool(a > b)
    if op is Operator.LT:
        return Bool(a < b)
    if op is Operator.GE:
        return Bool(a >= b)
    return Bool(a <= b)


def apply_binary(op: Operator, left: Value, right: Value) -> Value:
    """Apply a binary operator after checking the gate."""
    if not is_permitted(op, left, right):
        raise OperandMismatch(f"Operator {op.value} not permitted for {type(left).__name__} and {type(right).__name__}")

    if op is Operator.EQ:
        return Bool(left == right)
    if op is Operator.NE:
        return Bool(left != right)
    if op is Operator.AND:
        return Bool(left.value and right.value)
    if op is Operator.OR:
        return Bool(left.value or right.value)
    if op in _ORDERING:
        return _order(op, left.value, right.value)

    if isinstance(left, Str):
        if op is Operator.MUL:
            return _repeat(left.value, right.value)
        return Str(left.value + right.value)

    if isinstance(left, Int):
        if isinstance(right, Str):
            return _repeat(right.value, left.value)
        a, b = left.value, right.value
        if op is Operator.ADD:
            return checked_int(a + b)
        if op is Operator.SUB:
            return checked_int(a - b)
        if op is Operator.MUL:
            return checked_int(a * b)
        if op is Operator.DIV:
            return checked_int(_int_div(a, b))
        return checked_int(_int_rem(a, b))

    x, y = left.value, right.value
    if op is Operator.ADD:
        return Float(x + y)
    if op is Operator.SUB:
        return Float(x - y)
    if op is Operator.MUL:
        return Float(x * y)
    if op is Operator.DIV:
        return Float(float_div(x, y))
    return Float(_float_rem(x, y))


def apply_unary(op: UnaryOperator, operand: Value) -> Value:
    if not is_permitted_unary(op, operand):
        raise OperandMismatch(f"Unary {op.value} not permitted for {type(operand).__name__}")
    if op is UnaryOperator.NOT:
        return Bool(not operand.value)
    if isinstance(operand, Int):
        return checked_int(-operand.value)
    return Float(-operand.value)


def fold(operands: list[Value], operators: list[Operator]) -> Value:
    """Reduce a left-to-right chain of operands and operators.

    Operands are pushed as they come; before pushing an operator, every
    pending operator of higher or equal precedence is applied to the top two
    values. Equal precedence therefore associates to the left.
    """
    if len(operands) != len(operators) + 1:
        raise ValueError("Operand/operator chain is malformed")

    values: list[Value] = [operands[0]]
    pending: list[Operator] = []

    def reduce_top() -> None:
        op = pending.pop()
        right = values.pop()
        left = values.pop()
        values.append(apply_binary(op, left, right))

    for op, operand in zip(operators, operands[1:]):
        while pending and pending[-1].precedence >= op.precedence:
            reduce_top()
        pending.append(op)
        values.append(operand)

    while pending:
        reduce_top()
    return values[0]
