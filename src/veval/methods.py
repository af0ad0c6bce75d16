"""Method dispatch: option combinators, numeric functions, and type predicates."""

from __future__ import annotations

import math
from typing import Callable

from veval.errors import AmbiguousXor, ArithmeticFault, ArityMismatch, OperandMismatch, UnknownMethod, UnwrapNone
from veval.operators import checked_int, float_div
from veval.value import NONE, Bool, Float, Int, NoneValue, Range, Resolved, Str, Value, Vec, fits_int64

# A deferred argument. Option combinators only evaluate what they return.
Thunk = Callable[[], "Resolved | None"]

# Methods whose receiver may be an unbound name; it is treated as None.
TOLERANT_METHODS = frozenset({"is_none", "is_some", "unwrap_or", "or", "xor", "is_option"})

# Methods whose argument may be an unbound name.
TOLERANT_ARGUMENTS = frozenset({"xor"})


def _expect(name: str, args: list[Thunk], count: int) -> list[Thunk]:
    if len(args) != count:
        raise ArityMismatch(f"{name}() takes {count} argument(s), got {len(args)}")
    return args


def _present(resolved: Resolved | None) -> bool:
    return resolved is not None and not isinstance(resolved.value, NoneValue)


def _force(thunk: Thunk) -> Resolved:
    resolved = thunk()
    if resolved is None:
        # only tolerant arguments may come back empty
        return Resolved(NONE, optional=True)
    return resolved


# ---- Option combinators ----


def _and(receiver: Resolved, args: list[Thunk]) -> Resolved:
    (arg,) = _expect("and", args, 1)
    if isinstance(receiver.value, NoneValue):
        return Resolved(NONE, optional=True)
    return Resolved(_force(arg).value, optional=True)


def _or(receiver: Resolved | None, args: list[Thunk]) -> Resolved:
    (arg,) = _expect("or", args, 1)
    if _present(receiver):
        return Resolved(receiver.value, optional=True)
    return Resolved(_force(arg).value, optional=True)


def _xor(receiver: Resolved | None, args: list[Thunk]) -> Resolved:
    (arg,) = _expect("xor", args, 1)
    other = arg()
    mine, theirs = _present(receiver), _present(other)
    if mine and theirs:
        raise AmbiguousXor(f"xor() with two values: {receiver.value} and {other.value}")
    if mine:
        return Resolved(receiver.value, optional=True)
    if theirs:
        return Resolved(other.value, optional=True)
    return Resolved(NONE, optional=True)


def _unwrap(receiver: Resolved, args: list[Thunk]) -> Resolved:
    _expect("unwrap", args, 0)
    if not _present(receiver):
        raise UnwrapNone("unwrap() on None")
    return Resolved(receiver.value)


def _unwrap_or(receiver: Resolved | None, args: list[Thunk]) -> Resolved:
    (default,) = _expect("unwrap_or", args, 1)
    if _present(receiver):
        return Resolved(receiver.value)
    return Resolved(_force(default).value)


def _is_none(receiver: Resolved | None, args: list[Thunk]) -> Resolved:
    _expect("is_none", args, 0)
    return Resolved(Bool(not _present(receiver)))


def _is_some(receiver: Resolved | None, args: list[Thunk]) -> Resolved:
    _expect("is_some", args, 0)
    return Resolved(Bool(_present(receiver)))


OPTION_METHODS: dict[str, Callable[..., Resolved]] = {
    "and": _and,
    "or": _or,
    "xor": _xor,
    "unwrap": _unwrap,
    "unwrap_or": _unwrap_or,
    "is_none": _is_none,
    "is_some": _is_some,
}


# ---- Type predicates ----


TYPE_PREDICATES: dict[str, type[Value]] = {
    "is_bool": Bool,
    "is_int": Int,
    "is_float": Float,
    "is_str": Str,
    "is_vec": Vec,
    "is_range": Range,
}


# ---- Numeric methods ----


def _ieee(func: Callable[[float], float], overflow: Callable[[float], float] = lambda x: math.inf) -> Callable[[float], float]:
    """Wrap a math function so domain errors give NaN and overflow gives an infinity."""

    def wrapped(x: float) -> float:
        try:
            return func(x)
        except ValueError:
            return math.nan
        except OverflowError:
            return overflow(x)

    return wrapped


def _logarithm(func: Callable[[float], float]) -> Callable[[float], float]:
    def wrapped(x: float) -> float:
        if x == 0.0:
            return -math.inf
        if x < 0.0 or math.isnan(x):
            return math.nan
        if math.isinf(x):
            return math.inf
        return func(x)

    return wrapped


def _ln_1p(x: float) -> float:
    if x == -1.0:
        return -math.inf
    return _ieee(math.log1p)(x)


def _atanh(x: float) -> float:
    if abs(x) == 1.0:
        return math.copysign(math.inf, x)
    return _ieee(math.atanh)(x)


def _ftrunc(x: float) -> float:
    if math.isinf(x) or math.isnan(x):
        return x
    return float(math.trunc(x))


def _signum(x: float) -> float:
    if math.isnan(x):
        return math.nan
    return math.copysign(1.0, x)


def _powf(x: float, y: float) -> float:
    try:
        return math.pow(x, y)
    except OverflowError:
        if x < 0.0 and y.is_integer() and int(y) % 2 == 1:
            return -math.inf
        return math.inf
    except ValueError:
        if x == 0.0:
            return math.inf
        return math.nan


def _max(x: float, y: float) -> float:
    if math.isnan(x):
        return y
    if math.isnan(y):
        return x
    return max(x, y)


def _min(x: float, y: float) -> float:
    if math.isnan(x):
        return y
    if math.isnan(y):
        return x
    return min(x, y)


_ln = _logarithm(math.log)

_FLOAT_FUNCS_1: dict[str, Callable[[float], float]] = {
    "fract": lambda x: x - _ftrunc(x),
    "recip": lambda x: float_div(1.0, x),
    "sqrt": _ieee(math.sqrt),
    "cbrt": math.cbrt,
    "exp": _ieee(math.exp),
    "exp2": _ieee(math.exp2),
    "exp_m1": _ieee(math.expm1),
    "ln": _ln,
    "ln_1p": _ln_1p,
    "log2": _logarithm(math.log2),
    "log10": _logarithm(math.log10),
    "to_degrees": _ieee(math.degrees),
    "to_radians": math.radians,
    "sin": _ieee(math.sin),
    "cos": _ieee(math.cos),
    "tan": _ieee(math.tan),
    "asin": _ieee(math.asin),
    "acos": _ieee(math.acos),
    "atan": math.atan,
    "sinh": _ieee(math.sinh, overflow=lambda x: math.copysign(math.inf, x)),
    "cosh": _ieee(math.cosh),
    "tanh": math.tanh,
    "asinh": math.asinh,
    "acosh": _ieee(math.acosh),
    "atanh": _atanh,
}

_FLOAT_FUNCS_2: dict[str, Callable[[float, float], float]] = {
    "atan2": math.atan2,
    "hypot": math.hypot,
    "powf": _powf,
    "log": lambda x, base: float_div(_ln(x), _ln(base)),
}


def _round_half_away(x: float) -> int:
    t = math.trunc(x)
    if abs(x - t) >= 0.5:
        t += 1 if x > 0 else -1
    return t


_TRUNCATING: dict[str, Callable[[float], int]] = {
    "trunc": math.trunc,
    "floor": math.floor,
    "ceil": math.ceil,
    "round": _round_half_away,
}


def _to_int(x: float, method: str) -> Int:
    if math.isnan(x) or math.isinf(x):
        raise ArithmeticFault(f"{method}() of {x} has no integer value")
    n = _TRUNCATING[method](x)
    if not fits_int64(n):
        raise ArithmeticFault(f"{method}() result {n} does not fit in 64 bits")
    return Int(n)


def _numeric_arg(name: str, resolved: Resolved) -> float:
    value = resolved.value
    if not isinstance(value, (Int, Float)):
        raise OperandMismatch(f"{name}() expects a number, got {type(value).__name__}")
    return float(value.value)


def _call_numeric(name: str, receiver: Int | Float, args: list[Thunk]) -> Value:
    x = receiver.value

    if name in _TRUNCATING:
        _expect(name, args, 0)
        if isinstance(receiver, Int):
            return receiver
        return _to_int(x, name)

    if name == "abs":
        _expect(name, args, 0)
        if isinstance(receiver, Int):
            return checked_int(abs(x))
        return Float(abs(x))

    if name == "signum":
        _expect(name, args, 0)
        if isinstance(receiver, Int):
            return Int((x > 0) - (x < 0))
        return Float(_signum(x))

    if name in ("max", "min"):
        (arg,) = _expect(name, args, 1)
        other = _force(arg).value
        if isinstance(receiver, Int) and isinstance(other, Int):
            return Int(max(x, other.value) if name == "max" else min(x, other.value))
        y = _numeric_arg(name, Resolved(other))
        return Float(_max(float(x), y) if name == "max" else _min(float(x), y))

    if name == "powi":
        (arg,) = _expect(name, args, 1)
        exponent = _force(arg).value
        if not isinstance(exponent, Int):
            raise OperandMismatch(f"powi() expects an integer exponent, got {type(exponent).__name__}")
        return Float(_powf(float(x), float(exponent.value)))

    func1 = _FLOAT_FUNCS_1.get(name)
    if func1 is not None:
        _expect(name, args, 0)
        return Float(func1(float(x)))

    func2 = _FLOAT_FUNCS_2.get(name)
    if func2 is not None:
        (arg,) = _expect(name, args, 1)
        return Float(func2(float(x), _numeric_arg(name, _force(arg))))

    raise UnknownMethod(f"Unknown method for {type(receiver).__name__}: {name}()")


NUMERIC_METHODS = frozenset(
    set(_TRUNCATING) | set(_FLOAT_FUNCS_1) | set(_FLOAT_FUNCS_2) | {"abs", "signum", "max", "min", "powi"}
)


def call_method(name: str, receiver: Resolved | None, args: list[Thunk]) -> Resolved:
    """Dispatch a method call.

    `receiver` is None only for methods in TOLERANT_METHODS whose receiver was
    an unbound name.
    """
    combinator = OPTION_METHODS.get(name)
    if combinator is not None:
        return combinator(receiver, args)

    if name == "is_option":
        _expect(name, args, 0)
        return Resolved(Bool(receiver is None or receiver.optional))

    if receiver is None:
        raise UnknownMethod(f"{name}() needs a bound receiver")
    value = receiver.value

    variant = TYPE_PREDICATES.get(name)
    if variant is not None:
        _expect(name, args, 0)
        return Resolved(Bool(isinstance(value, variant)))

    if name == "is_same":
        (arg,) = _expect(name, args, 1)
        return Resolved(Bool(value.is_same(_force(arg).value)))

    if name in NUMERIC_METHODS and isinstance(value, (Int, Float)):
        return Resolved(_call_numeric(name, value, args))

    raise UnknownMethod(f"Unknown method for {type(value).__name__}: {name}()")
