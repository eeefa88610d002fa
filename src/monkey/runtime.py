from __future__ import annotations

import importlib
from typing import Callable, Dict, List, Optional

from .ast_nodes import Node
from .types import (
    MkNull, MkInteger, MkBool, MkString, MkArray, MkFn, MkBuiltin, MkError, MkReturn,
    MkValue, BuiltinFn, BuiltinRegistry, Environment,
    NULL, INT64_MIN, INT64_MAX, native_bool, is_error,
)

EvalFunc = Callable[[Node, Environment], MkValue]

_REGISTERED: Dict[str, MkBuiltin] = {}
_DEFAULT_REGISTRY: Optional[BuiltinRegistry] = None

def init_stdlib() -> None:
    """Load stdlib modules (idempotent) so register_builtin hooks run."""
    importlib.import_module("monkey.stdlib")

def register_builtin(name: str, *, arity: int):
    def dec(fn: BuiltinFn):
        _REGISTERED[name] = MkBuiltin(name=name, arity=arity, fn=fn)
        return fn

    return dec

def default_builtins() -> BuiltinRegistry:
    """Freeze the registered builtins into the shared registry on first use."""
    global _DEFAULT_REGISTRY

    if _DEFAULT_REGISTRY is None:
        init_stdlib()
        _DEFAULT_REGISTRY = BuiltinRegistry.from_builtins(_REGISTERED)

    return _DEFAULT_REGISTRY

def new_environment(builtins: Optional[BuiltinRegistry]=None) -> Environment:
    """Root scope for an interpreter session."""
    return Environment(builtins=builtins if builtins is not None else default_builtins())

def call_builtin(builtin: MkBuiltin, args: List[MkValue]) -> MkValue:
    if len(args) != builtin.arity:
        return MkError(f"wrong number of arguments. got={len(args)}, want={builtin.arity}")

    return builtin.fn(args)

def call_function(fn: MkValue, args: List[MkValue], eval_func: EvalFunc) -> MkValue:
    match fn:
        case MkFn():
            callee_env = extend_function_env(fn, args)
            return unwrap_return(eval_func(fn.body, callee_env))
        case MkBuiltin():
            return call_builtin(fn, args)
        case _:
            return MkError(f"not a function: {fn.kind}")

def extend_function_env(fn: MkFn, args: List[MkValue]) -> Environment:
    """
    Bind parameters positionally in a child of the closure scope.
    Missing arguments bind null; extra arguments are dropped.
    """
    env = fn.env.enclosed()

    for idx, param in enumerate(fn.parameters):
        env.set(param.name, args[idx] if idx < len(args) else NULL)

    return env

def unwrap_return(value: MkValue) -> MkValue:
    if isinstance(value, MkReturn):
        return value.value
    return value
