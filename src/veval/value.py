"""Runtime values produced by the evaluator."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def fits_int64(n: int) -> bool:
    return INT64_MIN <= n <= INT64_MAX


@dataclass(frozen=True)
class Value:
    """Base class for all runtime values.

    Equality is variant-exact: values of different subclasses never compare
    equal, so `Bool(True) != Int(1)` and `Int(1) != Float(1.0)`.
    """

    def is_same(self, other: Value) -> bool:
        """Return whether both values have the same variant, ignoring contents."""
        return type(self) is type(other)

    def to_python(self) -> Any:
        """Convert to the matching plain Python object."""
        raise NotImplementedError


@dataclass(frozen=True)
class Bool(Value):
    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"

    def to_python(self) -> bool:
        return self.value


@dataclass(frozen=True)
class Int(Value):
    """A 64-bit signed integer."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not fits_int64(self.value):
            raise ValueError(f"Not a 64-bit integer: {self.value!r}")

    def __str__(self) -> str:
        return str(self.value)

    def to_python(self) -> int:
        return self.value


@dataclass(frozen=True, eq=False)
class Float(Value):
    value: float

    # NaN never equals itself, even when both sides hold the same object
    def __eq__(self, other: object) -> bool:
        if type(other) is not Float:
            return NotImplemented
        return self.value == other.value

    def __hash__(self) -> int:
        return hash((Float, self.value))

    def __str__(self) -> str:
        return format_float(self.value)

    def to_python(self) -> float:
        return self.value


@dataclass(frozen=True)
class Str(Value):
    value: str

    def __str__(self) -> str:
        return f'"{self.value}"'

    def to_python(self) -> str:
        return self.value


@dataclass(frozen=True, eq=False)
class Vec(Value):
    """An ordered, possibly heterogeneous sequence of values."""

    items: tuple[Value, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))

    def __eq__(self, other: object) -> bool:
        if type(other) is not Vec:
            return NotImplemented
        return len(self.items) == len(other.items) and all(a == b for a, b in zip(self.items, other.items))

    def __hash__(self) -> int:
        return hash((Vec, self.items))

    def __len__(self) -> int:
        return len(self.items)

    def __str__(self) -> str:
        return "[" + "".join(f"{item}," for item in self.items) + "]"

    def to_python(self) -> list:
        return [item.to_python() for item in self.items]


@dataclass(frozen=True)
class Range(Value):
    """Half-open integer range; `end < start` is empty but valid."""

    start: int
    end: int

    def __str__(self) -> str:
        return f"{self.start}..{self.end}"

    def to_python(self) -> range:
        return range(self.start, self.end)


@dataclass(frozen=True)
class NoneValue(Value):
    """The in-language `None` literal."""

    def __str__(self) -> str:
        return "None"

    def to_python(self) -> None:
        return None


NONE = NoneValue()


@dataclass(frozen=True)
class Resolved:
    """An evaluated value plus whether it came from option-producing syntax.

    The flag is only consulted by `is_option` and never affects equality of
    the wrapped value.
    """

    value: Value
    optional: bool = False


def format_float(x: float) -> str:
    """Format a float the way Rust's Display does: no exponent, no trailing `.0`."""
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "inf" if x > 0 else "-inf"
    text = format(Decimal(repr(x)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
