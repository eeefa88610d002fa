from __future__ import annotations

import sys
import traceback
from pathlib import Path
from typing import List, Optional

from .ast_nodes import Program
from .evaluator import evaluate
from .parser import ParseError, parse
from .runtime import Environment, MkError, MkNull, MkValue, new_environment
from .utils import debug_py_trace_enabled, set_debug_py_trace

def run(src: str, env: Optional[Environment]=None) -> MkValue:
    """
    Parse and evaluate src. Syntax errors raise ParseError before anything
    runs; runtime failures come back as an MkError value.
    """
    program, errors = parse(src)

    if errors:
        raise ParseError(errors)

    return run_parsed(program, env)

def run_parsed(program: Program, env: Optional[Environment]=None) -> MkValue:
    """Evaluate an already parsed program; the REPL uses this to parse once."""
    if env is None:
        env = new_environment()

    return evaluate(program, env)

def format_parse_errors(errors: List[str]) -> str:
    return "\n".join(f"\t{err}" for err in errors)

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

def main(argv: Optional[List[str]]=None) -> int:
    arg = None

    for token in sys.argv[1:] if argv is None else argv:
        if token == "--py-traceback":
            set_debug_py_trace(True)
            continue

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    source = _load_source(arg or "-")

    try:
        result = run(source)
    except ParseError as exc:
        print("parser errors:", file=sys.stderr)
        print(format_parse_errors(exc.errors), file=sys.stderr)
        return 1
    except RecursionError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        if debug_py_trace_enabled():
            traceback.print_exc()
        return 1

    if isinstance(result, MkError):
        print(repr(result), file=sys.stderr)
        return 1

    if not isinstance(result, MkNull):
        print(repr(result))
    return 0

if __name__ == "__main__":
    sys.exit(main())
