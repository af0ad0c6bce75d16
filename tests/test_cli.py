"""Tests for the veval command line."""

from pathlib import Path

import pytest

from veval.cli import CANNOT_EVALUATE, build_context, execute_line, format_result, main, parse_definition, run_file
from veval.context import Context
from veval.errors import ParseError
from veval.value import Int


class TestHelperFunctions:
    def test_format_result(self):
        assert format_result(Int(3)) == "3"
        assert format_result(None) == CANNOT_EVALUATE

    def test_parse_definition(self):
        assert parse_definition("x=1") == ("x", "1")
        assert parse_definition("x = 1 == 2") == ("x", "1 == 2")

    @pytest.mark.parametrize("text", ["x", "=1", "1x=2", "a b=1"])
    def test_parse_definition_rejected(self, text):
        with pytest.raises(ValueError):
            parse_definition(text)

    def test_build_context(self):
        ctx = build_context(["a=1", "b=a + 1"], max_depth=8)
        assert ctx.names() == ["a", "b"]
        assert ctx.max_depth == 8


class TestExecuteLine:
    def test_let_and_evaluate(self):
        ctx, output = execute_line(Context.empty(), "let x = 20 + 1")
        assert output is None
        ctx, output = execute_line(ctx, "x * 2")
        assert output == "42"

    def test_unset(self):
        ctx = Context.empty().insert("x", "1")
        ctx, output = execute_line(ctx, "unset x")
        assert output is None
        assert "x" not in ctx

    def test_unset_missing(self):
        with pytest.raises(ValueError):
            execute_line(Context.empty(), "unset x")

    def test_let_parse_error(self):
        with pytest.raises(ParseError):
            execute_line(Context.empty(), "let x = (")

    def test_context_listing(self):
        ctx = Context.empty().insert("b", "1 + 2").insert("a", '"x"')
        _, output = execute_line(ctx, "context")
        assert output == 'a = "x"\nb = 1 + 2'

    def test_empty_context_listing(self):
        _, output = execute_line(Context.empty(), "context")
        assert output == "(empty)"

    def test_cannot_evaluate(self):
        _, output = execute_line(Context.empty(), "nope")
        assert output == CANNOT_EVALUATE


class TestRunFile:
    def test_runs_statements(self, tmp_path: Path, capsys):
        script = tmp_path / "test.veval"
        script.write_text("""
# set up
let x = 3
x * 2

unset x
x
""")
        assert run_file(script, Context.empty()) == 0
        assert capsys.readouterr().out == f"6\n{CANNOT_EVALUATE}\n"

    def test_verbose_echoes(self, tmp_path: Path, capsys):
        script = tmp_path / "test.veval"
        script.write_text("1 + 1\n")
        assert run_file(script, Context.empty(), verbose=True) == 0
        assert capsys.readouterr().out == "> 1 + 1\n2\n"

    def test_syntax_error_stops(self, tmp_path: Path, capsys):
        script = tmp_path / "test.veval"
        script.write_text("let x = (\n1\n")
        assert run_file(script, Context.empty()) == 1
        captured = capsys.readouterr()
        assert "line 1" in captured.err
        assert captured.out == ""

    def test_missing_file(self, tmp_path: Path):
        assert run_file(tmp_path / "nope.veval", Context.empty()) == 1


class TestMain:
    def test_command(self, capsys):
        assert main(["-c", "1 + 2"]) == 0
        assert capsys.readouterr().out == "3\n"

    def test_command_with_definitions(self, capsys):
        assert main(["-D", "x=2", "--define", "y=x * 21", "-c", "y"]) == 0
        assert capsys.readouterr().out == "42\n"

    def test_command_cannot_evaluate(self, capsys):
        assert main(["-c", "not_exist"]) == 1
        assert capsys.readouterr().out == f"{CANNOT_EVALUATE}\n"

    def test_command_oversized_repetition(self, capsys):
        assert main(["-c", '"ab" * 9223372036854775807']) == 1
        assert capsys.readouterr().out == f"{CANNOT_EVALUATE}\n"

    def test_command_syntax_error(self, capsys):
        assert main(["-c", "1 +"]) == 1
        assert "Syntax error" in capsys.readouterr().err

    def test_max_depth(self, capsys):
        assert main(["--max-depth", "1", "-D", "a=1", "-D", "b=a", "-c", "b"]) == 1
        assert main(["--max-depth", "2", "-D", "a=1", "-D", "b=a", "-c", "b"]) == 0

    def test_bad_definition(self, capsys):
        assert main(["-D", "oops", "-c", "1"]) == 1
        assert "Error in definition" in capsys.readouterr().err

    def test_file(self, tmp_path: Path, capsys):
        script = tmp_path / "test.veval"
        script.write_text("x + 1\n")
        assert main(["-D", "x=1", "-f", str(script)]) == 0
        assert capsys.readouterr().out == "2\n"

    def test_file_not_found(self, tmp_path: Path, capsys):
        assert main(["-f", str(tmp_path / "nope.veval")]) == 1
        assert "File not found" in capsys.readouterr().err
