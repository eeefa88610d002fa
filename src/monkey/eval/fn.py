from __future__ import annotations

from typing import Callable

from ..ast_nodes import CallExpression, FunctionLiteral, Node
from ..runtime import Environment, MkFn, MkValue, call_function, is_error
from .collections import eval_expressions

EvalFunc = Callable[[Node, Environment], MkValue]

def eval_function_literal(node: FunctionLiteral, env: Environment, _eval_func: EvalFunc) -> MkValue:
    # Closure: captures the defining scope by reference
    return MkFn(parameters=node.parameters, body=node.body, env=env)

def eval_call(node: CallExpression, env: Environment, eval_func: EvalFunc) -> MkValue:
    fn = eval_func(node.function, env)
    if is_error(fn):
        return fn

    args = eval_expressions(node.arguments, env, eval_func)
    if is_error(args):
        return args

    return call_function(fn, args, eval_func)
