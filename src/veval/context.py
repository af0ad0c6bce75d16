"""Named expression bindings and the evaluation entry points."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterator, Mapping

from veval.errors import EvaluationError, ParseError
from veval.evaluator import DEFAULT_MAX_DEPTH, Evaluator
from veval.parsing import Node, parse_expression, unparse
from veval.value import Value

logger = logging.getLogger(__name__)


class Context:
    """An immutable mapping from names to parsed expressions.

    Entries are stored unevaluated and resolved lazily each time an expression
    refers to them, so an entry may name other entries inserted later.
    `insert` and `remove` return new contexts and leave this one unchanged.
    """

    def __init__(self, entries: Mapping[str, Node] | None = None, *, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self._entries: Mapping[str, Node] = MappingProxyType(dict(entries or {}))
        self.max_depth = max_depth

    @classmethod
    def empty(cls) -> Context:
        return cls()

    @classmethod
    def from_sources(cls, sources: Mapping[str, str], *, max_depth: int = DEFAULT_MAX_DEPTH) -> Context:
        """Build a context by parsing each source. Raises ParseError on the first bad one."""
        return cls({name: parse_expression(source) for name, source in sources.items()}, max_depth=max_depth)

    def insert(self, name: str, source: str) -> Context:
        """Return a new context with `name` bound to the parsed `source`.

        An existing binding for `name` is replaced. Raises ParseError if the
        source does not parse; this context is left untouched either way.
        """
        node = parse_expression(source)
        entries = dict(self._entries)
        entries[name] = node
        return Context(entries, max_depth=self.max_depth)

    def remove(self, name: str) -> Context:
        """Return a new context without `name`. Removing an absent name is a no-op."""
        entries = dict(self._entries)
        entries.pop(name, None)
        return Context(entries, max_depth=self.max_depth)

    def names(self) -> list[str]:
        return sorted(self._entries)

    def source_of(self, name: str) -> str:
        """Render the expression bound to `name`. Raises KeyError if unbound."""
        return unparse(self._entries[name])

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __repr__(self) -> str:
        return f"Context({self.names()!r})"

    def evaluate_or_raise(self, source: str) -> Value:
        """Parse and evaluate `source`.

        Raises:
            ParseError: the source does not parse.
            EvaluationError: evaluation failed; the subclass names the cause.
        """
        node = parse_expression(source)
        evaluator = Evaluator(self._entries, max_depth=self.max_depth)
        try:
            return evaluator.evaluate(node)
        except RecursionError as e:
            raise EvaluationError(f"Expression nests too deeply: {source!r}") from e

    def evaluate(self, source: str) -> Value | None:
        """Parse and evaluate `source`, returning None if either step fails."""
        try:
            return self.evaluate_or_raise(source)
        except ParseError as e:
            logger.debug("Cannot parse %r: %s", source, e)
        except EvaluationError as e:
            logger.debug("Cannot evaluate %r: %s: %s", source, type(e).__name__, e)
        return None


def evaluate(context: Context, source: str) -> Value | None:
    """Evaluate `source` against `context`; None means it cannot be evaluated."""
    return context.evaluate(source)
