"""Interactive REPL for veval expressions."""

from __future__ import annotations

import argparse
import logging
import readline  # noqa: F401 - enables line editing in input()
import sys
from pathlib import Path

from veval.context import Context
from veval.errors import EvaluationError, ParseError
from veval.evaluator import DEFAULT_MAX_DEPTH
from veval.value import Value

CANNOT_EVALUATE = "<cannot evaluate>"


def format_result(value: Value | None) -> str:
    """Format an evaluation result for display."""
    if value is None:
        return CANNOT_EVALUATE
    return str(value)


def parse_definition(text: str) -> tuple[str, str]:
    """Split `NAME=EXPR` (or `NAME = EXPR`) into its name and source."""
    name, sep, source = text.partition("=")
    name = name.strip()
    if not sep or not name.isidentifier():
        raise ValueError(f"Expected NAME=EXPR, got {text!r}")
    return name, source.strip()


def execute_line(context: Context, line: str) -> tuple[Context, str | None]:
    """Run one statement against `context`.

    Returns the (possibly updated) context and the text to print, if any.
    Statement errors raise ValueError or ParseError; expressions that cannot
    be evaluated print CANNOT_EVALUATE instead.
    """
    if line.startswith("let "):
        name, source = parse_definition(line[4:])
        return context.insert(name, source), None

    if line.startswith("unset "):
        name = line[6:].strip()
        if name not in context:
            raise ValueError(f"Not defined: {name}")
        return context.remove(name), None

    if line == "context":
        if not len(context):
            return context, "(empty)"
        return context, "\n".join(f"{name} = {context.source_of(name)}" for name in context.names())

    return context, format_result(context.evaluate(line))


def run_repl(context: Context) -> int:
    """Run the interactive REPL."""
    print("veval REPL - expression evaluator")
    print("Type 'help' for commands, 'exit' to quit.\n")

    # Command history
    history_file = Path.home() / ".veval_history"
    try:
        readline.read_history_file(history_file)
    except FileNotFoundError:
        pass

    try:
        while True:
            try:
                line = input("veval> ").strip()
            except EOFError:
                print()
                break
            except KeyboardInterrupt:
                print()
                continue

            if not line:
                continue

            if line.lower() == "exit" or line.lower() == "quit":
                break
            elif line.lower() == "help":
                print_help()
                continue

            try:
                context, output = execute_line(context, line)
                if output is not None:
                    print(output)
            except SyntaxError as e:
                print(f"Syntax error: {e}")
            except ValueError as e:
                print(f"Error: {e}")

    finally:
        # Save history
        try:
            readline.set_history_length(1000)
            readline.write_history_file(history_file)
        except OSError:
            pass

    return 0


def print_help() -> None:
    """Print help information."""
    print("""
veval - expression evaluator

STATEMENTS:
  let <name> = <expr>      Bind a name to an expression (evaluated lazily)
  unset <name>             Remove a binding
  context                  List all bindings
  <expr>                   Evaluate an expression and print the result

EXPRESSIONS:
  Literals                 1  1_000  2.5  1e3  "text"  true  false  None
  Arithmetic               + - * / %   (strings: "a" + "b", "ab" * 3)
  Comparison               == != < > <= >=
  Logic                    && || !     (both sides are always evaluated)
  Ranges                   0..3  0..=3
  Arrays and indexing      [1, 2, 3][0]   "hello"[1..3]
  Options                  Some(x)  .unwrap()  .unwrap_or(y)  .and(y)  .or(y)  .xor(y)
                           .is_some()  .is_none()  .is_option()
  Type checks              .is_int()  .is_float()  .is_str()  .is_bool()  .is_vec()
                           .is_range()  .is_same(y)
  Numbers                  .abs()  .sqrt()  .powi(n)  .powf(x)  .ln()  .log10()  .sin()
                           .trunc()  .round()  .floor()  .ceil()  .max(y)  .min(y)  ...

Operators * / % bind tightest, then + -, then comparisons, then && and ||
(which share one level). Operators on the same level group left to right.

OTHER:
  help                     Show this help
  exit, quit               Exit the REPL
""")


def run_file(file_path: Path, context: Context, verbose: bool = False) -> int:
    """Execute statements from a file, one per line.

    Args:
        file_path: Path to the file containing statements
        context: Initial context
        verbose: If True, print each statement before executing

    Returns:
        0 on success, 1 on error
    """
    try:
        content = file_path.read_text()
    except OSError as e:
        print(f"Error reading file: {e}", file=sys.stderr)
        return 1

    for line_number, line in enumerate(content.split("\n"), start=1):
        line = line.strip()
        # Skip blanks and comments
        if not line or line.startswith("#"):
            continue

        if verbose:
            print(f"> {line}")

        try:
            context, output = execute_line(context, line)
        except SyntaxError as e:
            print(f"Syntax error on line {line_number}: {e}", file=sys.stderr)
            return 1
        except ValueError as e:
            print(f"Error on line {line_number}: {e}", file=sys.stderr)
            return 1

        if output is not None:
            print(output)

    return 0


def build_context(definitions: list[str], max_depth: int) -> Context:
    context = Context(max_depth=max_depth)
    for definition in definitions:
        name, source = parse_definition(definition)
        context = context.insert(name, source)
    return context


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    arg_parser = argparse.ArgumentParser(
        description="Evaluate veval expressions interactively or from the command line"
    )
    arg_parser.add_argument(
        "-D", "--define",
        action="append",
        default=[],
        metavar="NAME=EXPR",
        help="Bind NAME to EXPR in the context (repeatable)",
    )
    arg_parser.add_argument(
        "-c", "--command",
        type=str,
        help="Evaluate a single expression and exit",
    )
    arg_parser.add_argument(
        "-f", "--file",
        type=Path,
        help="Execute statements from a file and exit",
    )
    arg_parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help=f"Maximum nesting of context references (default: {DEFAULT_MAX_DEPTH})",
    )
    arg_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log why expressions cannot be evaluated, and echo statements for -f/--file",
    )

    args = arg_parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        context = build_context(args.define, args.max_depth)
    except (ValueError, SyntaxError) as e:
        print(f"Error in definition: {e}", file=sys.stderr)
        return 1

    # Handle file execution
    if args.file:
        if not args.file.exists():
            print(f"Error: File not found: {args.file}", file=sys.stderr)
            return 1
        return run_file(args.file, context, args.verbose)

    if args.command:
        # Evaluate single expression
        try:
            value = context.evaluate_or_raise(args.command)
        except ParseError as e:
            print(f"Syntax error: {e}", file=sys.stderr)
            return 1
        except EvaluationError as e:
            print(format_result(None))
            if args.verbose:
                print(f"{type(e).__name__}: {e}", file=sys.stderr)
            return 1
        print(format_result(value))
        return 0

    return run_repl(context)


if __name__ == "__main__":
    sys.exit(main())
