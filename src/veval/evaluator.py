"""Tree-walking evaluator over parsed expressions."""

from __future__ import annotations

from typing import Mapping

from veval.errors import (
    CyclicReference,
    IndexOutOfRange,
    NoneInCollection,
    OperandMismatch,
    RecursionLimitExceeded,
    UnknownMethod,
    UnresolvedName,
    UnsupportedSyntax,
)
from veval.methods import TOLERANT_ARGUMENTS, TOLERANT_METHODS, Thunk, call_method
from veval.operators import Operator, UnaryOperator, apply_unary, checked_int, fold
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
)
from veval.value import NONE, Bool, Float, Int, NoneValue, Range, Resolved, Str, Value, Vec, fits_int64

DEFAULT_MAX_DEPTH = 64


class Evaluator:
    """Evaluates syntax trees against a mapping of named expression subtrees.

    Context entries are evaluated afresh every time they are referenced. A
    name that is still being resolved further up the chain is a cycle, and
    chains longer than `max_depth` are cut off.
    """

    def __init__(self, entries: Mapping[str, Node], max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.entries = entries
        self.max_depth = max_depth
        self._resolving: list[str] = []

    def evaluate(self, node: Node) -> Value:
        """Evaluate a tree, raising an EvaluationError subclass on failure."""
        self._resolving = []
        return self._resolve(node).value

    def _resolve(self, node: Node) -> Resolved:
        if isinstance(node, Literal):
            return self._resolve_literal(node.value)
        if isinstance(node, Path):
            return self._resolve_name(node.name)
        if isinstance(node, (Paren, Reference)):
            inner = node.inner if isinstance(node, Paren) else node.operand
            return self._resolve(inner)
        if isinstance(node, Unary):
            operand = self._resolve(node.operand).value
            return Resolved(apply_unary(UnaryOperator(node.op), operand))
        if isinstance(node, Binary):
            return Resolved(self._resolve_binary(node))
        if isinstance(node, MethodCall):
            return self._resolve_method_call(node)
        if isinstance(node, Call):
            return self._resolve_call(node)
        if isinstance(node, Array):
            return Resolved(self._resolve_array(node))
        if isinstance(node, RangeExpr):
            return Resolved(self._resolve_range(node))
        if isinstance(node, Index):
            return Resolved(self._resolve_index(node))
        if isinstance(node, Field):
            raise UnsupportedSyntax(f"Field access is not supported: .{node.name}")
        raise UnsupportedSyntax(f"Cannot evaluate node: {node!r}")

    @staticmethod
    def _resolve_literal(value: object) -> Resolved:
        if value is None:
            return Resolved(NONE, optional=True)
        if isinstance(value, bool):
            return Resolved(Bool(value))
        if isinstance(value, int):
            if not fits_int64(value):
                raise OperandMismatch(f"Integer literal out of range: {value}")
            return Resolved(Int(value))
        if isinstance(value, float):
            return Resolved(Float(value))
        if isinstance(value, str):
            return Resolved(Str(value))
        raise UnsupportedSyntax(f"Unknown literal: {value!r}")

    def _resolve_name(self, name: str) -> Resolved:
        subtree = self.entries.get(name)
        if subtree is None:
            raise UnresolvedName(name)
        if name in self._resolving:
            raise CyclicReference(self._resolving[self._resolving.index(name):] + [name])
        if len(self._resolving) >= self.max_depth:
            raise RecursionLimitExceeded(f"Context references nest deeper than {self.max_depth}")
        self._resolving.append(name)
        try:
            return self._resolve(subtree)
        finally:
            self._resolving.pop()

    def _resolve_tolerant(self, node: Node) -> Resolved | None:
        """Resolve `node`, or return None when it is a name missing from the context."""
        if isinstance(node, Path) and node.name not in self.entries:
            return None
        return self._resolve(node)

    # ---- Operators ----

    @staticmethod
    def _linearize(node: Binary, operands: list[Node], operators: list[Operator]) -> None:
        """Flatten a run of binary nodes into in-order operands and operators.

        Walks with an explicit stack; long operator chains build deep trees.
        """
        pending: list[Binary] = []
        current: Node = node
        while True:
            while isinstance(current, Binary):
                pending.append(current)
                current = current.left
            operands.append(current)
            if not pending:
                return
            parent = pending.pop()
            operators.append(Operator.from_symbol(parent.op))
            current = parent.right

    def _resolve_binary(self, node: Binary) -> Value:
        operand_nodes: list[Node] = []
        operators: list[Operator] = []
        self._linearize(node, operand_nodes, operators)
        operands = [self._resolve(n).value for n in operand_nodes]
        return fold(operands, operators)

    # ---- Calls ----

    def _resolve_method_call(self, node: MethodCall) -> Resolved:
        if node.method in TOLERANT_METHODS:
            receiver = self._resolve_tolerant(node.receiver)
        else:
            receiver = self._resolve(node.receiver)

        tolerant_args = node.method in TOLERANT_ARGUMENTS
        args: list[Thunk] = [self._defer(arg, tolerant_args) for arg in node.args]
        return call_method(node.method, receiver, args)

    def _defer(self, node: Node, tolerant: bool) -> Thunk:
        if tolerant:
            return lambda: self._resolve_tolerant(node)
        return lambda: self._resolve(node)

    def _resolve_call(self, node: Call) -> Resolved:
        if node.func.name == "Some" and len(node.args) == 1:
            return Resolved(self._resolve(node.args[0]).value, optional=True)
        raise UnknownMethod(f"Unknown function: {node.func.name}()")

    # ---- Collections ----

    def _resolve_array(self, node: Array) -> Vec:
        items = []
        for element in node.elements:
            value = self._resolve(element).value
            if isinstance(value, NoneValue):
                raise NoneInCollection("None cannot be stored in a collection literal")
            items.append(value)
        return Vec(tuple(items))

    def _resolve_range(self, node: RangeExpr) -> Range:
        start = self._resolve(node.start).value
        end = self._resolve(node.end).value
        if not isinstance(start, Int) or not isinstance(end, Int):
            raise OperandMismatch(f"Range bounds must be integers, got {type(start).__name__} and {type(end).__name__}")
        stop = checked_int(end.value + 1).value if node.inclusive else end.value
        return Range(start.value, stop)

    def _resolve_index(self, node: Index) -> Value:
        target = self._resolve(node.target).value
        index = self._resolve(node.index).value

        if isinstance(target, Vec) and isinstance(index, Int):
            if not 0 <= index.value < len(target.items):
                raise IndexOutOfRange(f"Index {index.value} out of range for length {len(target.items)}")
            return target.items[index.value]

        if isinstance(target, Str) and isinstance(index, Range):
            length = len(target.value)
            if not 0 <= index.start <= index.end <= length:
                raise IndexOutOfRange(f"Slice {index} out of range for length {length}")
            return Str(target.value[index.start:index.end])

        raise OperandMismatch(f"Cannot index {type(target).__name__} with {type(index).__name__}")
