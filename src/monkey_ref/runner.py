from __future__ import annotations

import sys
import traceback
from pathlib import Path
from typing import Optional, Tuple

from .environment import Environment
from .evaluator import evaluate
from .parser_rd import ParseError, parse_source
from .runtime import NULL, MkError, MkObject, MonkeyRuntimeError, init_stdlib
from .tree import Program, to_lark
from .utils import debug_py_trace_enabled

def parse_program(source: str) -> Program:
    return parse_source(source)

def run(src: str, env: Optional[Environment]=None) -> MkObject:
    init_stdlib()

    program = parse_program(src)
    return evaluate(program, env if env is not None else Environment())

def repl_eval(source: str, env: Environment) -> Tuple[str, bool]:
    """Evaluate one REPL submission against a persistent environment.

    Returns (display_text, is_error). Null results display as the empty
    string so statements like `let` print nothing. Neither parse failures
    nor host errors escape.
    """
    display, is_error, _ = eval_submission(source, env)
    return display, is_error

def eval_submission(source: str, env: Environment) -> Tuple[str, bool, Optional[Exception]]:
    """Like repl_eval, but also hands back the exception behind an error.

    Front-ends use it to label parse errors and to print Python tracebacks.
    """
    try:
        result = run(source, env)
    except ParseError as exc:
        return str(exc), True, exc
    except (MonkeyRuntimeError, RecursionError) as exc:
        return f"ERROR: {exc}", True, exc

    display, is_error = format_result(result)
    return display, is_error, None

def format_result(result: MkObject) -> Tuple[str, bool]:
    if isinstance(result, MkError):
        return result.inspect(), True
    if result is NULL:
        return "", False

    return result.inspect(), False

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    if candidate.is_file():
        return candidate.read_text(encoding="utf-8")

    return arg

def print_py_traceback(exc: BaseException) -> None:
    if debug_py_trace_enabled():
        print("\nPython traceback:", file=sys.stderr)
        print("".join(traceback.format_tb(exc.__traceback__)), file=sys.stderr, end="")

def main(argv: Optional[list[str]]=None) -> int:
    show_ast = False
    arg = None
    it = iter(sys.argv[1:] if argv is None else argv)

    for token in it:
        if token == "--ast":
            show_ast = True
            continue

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    source = _load_source(arg or "-")

    try:
        program = parse_program(source)
    except ParseError as exc:
        print(f"parse error: {exc}", file=sys.stderr)
        return 1

    if show_ast:
        print(to_lark(program).pretty(), end="")
        return 0

    init_stdlib()

    try:
        display, is_error = format_result(evaluate(program, Environment()))
    except (MonkeyRuntimeError, RecursionError) as exc:
        print(f"runtime error: {exc}", file=sys.stderr)
        print_py_traceback(exc)
        return 1

    if is_error:
        print(display, file=sys.stderr)
        return 1

    if display:
        print(display)
    return 0

if __name__ == "__main__":
    sys.exit(main())
