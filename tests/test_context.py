"""Tests for the Context API."""

import logging

import pytest

from veval import Context, evaluate
from veval.errors import EvaluationError, ParseError
from veval.value import Bool, Int


@pytest.fixture
def ctx():
    return Context.empty().insert("foo", "true").insert("bar", "1 + 2")


class TestConstruction:
    def test_empty(self):
        ctx = Context.empty()
        assert len(ctx) == 0
        assert ctx.names() == []

    def test_from_sources(self):
        ctx = Context.from_sources({"a": "1", "b": "a + 1"})
        assert ctx.names() == ["a", "b"]
        assert ctx.evaluate("b") == Int(2)

    def test_from_sources_parse_error(self):
        with pytest.raises(ParseError):
            Context.from_sources({"a": "1 +"})


class TestInsertRemove:
    def test_insert_returns_new_context(self, ctx):
        updated = ctx.insert("baz", "3")
        assert "baz" in updated
        assert "baz" not in ctx
        assert len(updated) == len(ctx) + 1

    def test_insert_replaces(self, ctx):
        updated = ctx.insert("foo", "false")
        assert updated.evaluate("foo") == Bool(False)
        assert ctx.evaluate("foo") == Bool(True)

    def test_insert_parse_error(self, ctx):
        with pytest.raises(ParseError):
            ctx.insert("bad", "1 +")
        assert "bad" not in ctx

    def test_remove(self, ctx):
        updated = ctx.remove("foo")
        assert "foo" not in updated
        assert "foo" in ctx
        assert updated.evaluate("foo") is None

    def test_remove_absent(self, ctx):
        assert ctx.remove("nope").names() == ctx.names()

    def test_max_depth_is_kept(self):
        ctx = Context(max_depth=5).insert("a", "1").remove("a")
        assert ctx.max_depth == 5


class TestQueries:
    def test_names_sorted(self, ctx):
        assert ctx.names() == ["bar", "foo"]
        assert list(ctx) == ["bar", "foo"]

    def test_source_of(self, ctx):
        assert ctx.source_of("bar") == "1 + 2"

    def test_source_of_missing(self, ctx):
        with pytest.raises(KeyError):
            ctx.source_of("nope")

    def test_entries_are_read_only(self, ctx):
        with pytest.raises(TypeError):
            ctx._entries["x"] = None


class TestEvaluate:
    def test_module_function(self, ctx):
        assert evaluate(ctx, "bar * 2") == Int(6)

    def test_parse_failure_is_absent(self, ctx):
        assert ctx.evaluate("1 +") is None
        assert evaluate(ctx, ")") is None

    def test_evaluate_or_raise_parse_error(self, ctx):
        with pytest.raises(ParseError):
            ctx.evaluate_or_raise("1 +")

    def test_evaluate_or_raise_evaluation_error(self, ctx):
        with pytest.raises(EvaluationError):
            ctx.evaluate_or_raise("foo + 1")

    def test_failures_are_logged(self, ctx, caplog):
        with caplog.at_level(logging.DEBUG, logger="veval.context"):
            assert ctx.evaluate("not_exist") is None
        assert "UnresolvedName" in caplog.text
        assert "not_exist" in caplog.text

    def test_parse_failures_are_logged(self, ctx, caplog):
        with caplog.at_level(logging.DEBUG, logger="veval.context"):
            ctx.evaluate("1 +")
        assert "Cannot parse" in caplog.text
