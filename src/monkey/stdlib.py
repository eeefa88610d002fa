"""Built-in functions (len, first, ...) registered via runtime.register_builtin.

Arity is checked by the caller before these run, so each one can index
args directly.
"""

from __future__ import annotations

from typing import List

from .runtime import register_builtin, MkArray, MkError, MkInteger, MkString, MkValue, NULL

def _expect_array(name: str, arg: MkValue) -> MkError | None:
    if isinstance(arg, MkArray):
        return None

    return MkError(f"argument to '{name}' must be ARRAY, got {arg.kind}")

@register_builtin("len", arity=1)
def builtin_len(args: List[MkValue]) -> MkValue:
    match args[0]:
        case MkString(value=s):
            return MkInteger(len(s))
        case MkArray(items=items):
            return MkInteger(len(items))
        case other:
            return MkError(f"argument to 'len' not supported, got {other.kind}")

@register_builtin("first", arity=1)
def builtin_first(args: List[MkValue]) -> MkValue:
    err = _expect_array("first", args[0])
    if err is not None:
        return err

    items = args[0].items
    return items[0] if items else NULL

@register_builtin("last", arity=1)
def builtin_last(args: List[MkValue]) -> MkValue:
    err = _expect_array("last", args[0])
    if err is not None:
        return err

    items = args[0].items
    return items[-1] if items else NULL

@register_builtin("rest", arity=1)
def builtin_rest(args: List[MkValue]) -> MkValue:
    err = _expect_array("rest", args[0])
    if err is not None:
        return err

    items = args[0].items
    if len(items) <= 1:
        return NULL

    return MkArray(list(items[1:]))

@register_builtin("push", arity=2)
def builtin_push(args: List[MkValue]) -> MkValue:
    err = _expect_array("push", args[0])
    if err is not None:
        return err

    # Copy: the caller's array must stay unchanged
    return MkArray([*args[0].items, args[1]])
