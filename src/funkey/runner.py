from __future__ import annotations

import logging
import sys
import traceback
from pathlib import Path
from typing import Callable, List, Optional

from .ast import Program, to_tree
from .evaluator import evaluate
from .lexer import Lexer, tokenize
from .parser import ParseError, Parser
from .runtime import init_stdlib, make_print_builtin
from .token_types import TT
from .types import NULL, Environment, EvaluationError, FkValue, FunkeyRuntimeError
from .utils import debug_py_trace_enabled

logger = logging.getLogger(__name__)

PrintSink = Callable[..., None]

USAGE = "usage: funkey [--ast] [--tokens] [--verbose] [FILE | - | SOURCE]"


def parse(source: str) -> Program:
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    errors = parser.errors()

    if errors:
        logger.debug("parse failed with %d error(s)", len(errors))
        raise ParseError(errors)

    logger.debug("parsed %d top-level statement(s)", len(program.statements))
    return program


def stdout_sink(*values: FkValue) -> None:
    print(" ".join(v.inspect() for v in values))


def make_environment(print_sink: Optional[PrintSink] = None) -> Environment:
    """Root environment, with a `print` built-in when a sink is given."""
    init_stdlib()
    env = Environment()

    if print_sink is not None:
        env.define("print", make_print_builtin(print_sink))

    return env


def run(source: str, env: Optional[Environment] = None) -> None:
    _run(source, env)


def run_and_capture(source: str, print_sink: PrintSink) -> None:
    _run(source, make_environment(print_sink))


def evaluate_to_text(source: str, env: Optional[Environment] = None) -> str:
    return _run(source, env).inspect()


def repl_eval(source: str, env: Environment) -> FkValue:
    """Evaluate one submission against a long-lived environment."""
    return _run(source, env)


def _run(source: str, env: Optional[Environment]) -> FkValue:
    program = parse(source)

    if env is None:
        env = make_environment()

    result = evaluate(program, env)
    logger.debug("evaluated program to %s", result.type_name)
    return result


def describe_error(exc: EvaluationError) -> str:
    inner = exc.inner

    if isinstance(inner, FunkeyRuntimeError):
        return inner.location()

    return str(inner)


def print_py_trace(exc: BaseException) -> None:
    print("\nPython traceback:", file=sys.stderr)
    print("".join(traceback.format_exception(exc)), file=sys.stderr, end="")

# ---------------- CLI ----------------

def _load_source(arg: Optional[str]) -> str:
    """Program text for the CLI: stdin for None or "-", a file if the
    argument names one, else the argument itself."""

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    try:
        is_file = candidate.is_file()
    except OSError:
        # Source text too long to be a path name.
        is_file = False

    if is_file:
        return candidate.read_text(encoding="utf-8")

    return arg


def _dump_tokens(source: str) -> None:
    for tok in tokenize(source):
        if tok.type == TT.EOF:
            break
        print(f"{tok.line}:{tok.column}\t{tok.type.name}\t{tok.value!r}")


def main(argv: Optional[List[str]] = None) -> int:
    show_ast = False
    show_tokens = False
    verbose = False
    arg = None

    for token in sys.argv[1:] if argv is None else argv:
        if token in ("-h", "--help"):
            print(USAGE)
            return 0

        if token == "--ast":
            show_ast = True
            continue

        if token == "--tokens":
            show_tokens = True
            continue

        if token in ("-v", "--verbose"):
            verbose = True
            continue

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if arg is None and sys.stdin.isatty():
        from .repl import repl  # prompt_toolkit is only needed interactively

        repl()
        return 0

    source = _load_source(arg)

    if show_tokens:
        _dump_tokens(source)
        return 0

    try:
        program = parse(source)
    except ParseError as exc:
        for msg in exc.errors:
            print(msg, file=sys.stderr)
        return 1

    if show_ast:
        print(to_tree(program).pretty(), end="")
        return 0

    try:
        result = evaluate(program, make_environment(stdout_sink))
    except EvaluationError as exc:
        print(f"Error: {describe_error(exc)}", file=sys.stderr)
        if debug_py_trace_enabled():
            print_py_trace(exc.inner)
        return 1

    if result is not NULL:
        print(result.inspect())

    return 0


if __name__ == "__main__":
    sys.exit(main())
