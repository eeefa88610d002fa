from __future__ import annotations

import os as _os
import sys
from contextlib import contextmanager
from typing import Iterator

from .types import MkArray, MkBool, MkBuiltin, MkError, MkInteger, MkNull, MkString, MkValue

DEBUG_PY_TRACE_ENV = "MONKEY_DEBUG_PY_TRACE"
REPL_PROMPT_ENV = "MONKEY_REPL_PROMPT"
DEFAULT_PROMPT = ">> "
RECURSION_LIMIT_ENV = "MONKEY_RECURSION_LIMIT"
DEFAULT_RECURSION_LIMIT = 10_000


def debug_py_trace_enabled() -> bool:
    """Whether outer surfaces should print Python tracebacks for host failures."""
    return bool(_os.environ.get(DEBUG_PY_TRACE_ENV))


def set_debug_py_trace(enabled: bool) -> None:
    if enabled:
        _os.environ[DEBUG_PY_TRACE_ENV] = "1"
    else:
        _os.environ.pop(DEBUG_PY_TRACE_ENV, None)


def repl_prompt() -> str:
    return _os.environ.get(REPL_PROMPT_ENV) or DEFAULT_PROMPT


def recursion_limit() -> int:
    raw = _os.environ.get(RECURSION_LIMIT_ENV)
    if not raw:
        return DEFAULT_RECURSION_LIMIT
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{RECURSION_LIMIT_ENV} must be an integer, got {raw!r}") from None


@contextmanager
def raised_recursion_limit() -> Iterator[None]:
    """Raise the interpreter recursion limit for the duration of an evaluation; never lowers it."""
    previous = sys.getrecursionlimit()
    wanted = recursion_limit()
    if wanted > previous:
        sys.setrecursionlimit(wanted)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


def values_equal(lhs: MkValue, rhs: MkValue) -> bool:
    match (lhs, rhs):
        case (MkNull(), MkNull()):
            return True
        case (MkInteger(value=a), MkInteger(value=b)) | (MkBool(value=a), MkBool(value=b)):
            return a == b
        case (MkString(value=a), MkString(value=b)):
            return a == b
        case (MkArray(items=a), MkArray(items=b)):
            if len(a) != len(b):
                return False
            return all(values_equal(x, y) for x, y in zip(a, b))
        case (MkBuiltin(name=a), MkBuiltin(name=b)):
            return a == b
        case (MkError(message=a), MkError(message=b)):
            return a == b
        case _:
            # Functions compare by identity
            return lhs is rhs
