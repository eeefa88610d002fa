from __future__ import annotations

from typing import Callable, List, Sequence, Union

from ..ast_nodes import ArrayLiteral, Expression, Node
from ..runtime import Environment, MkArray, MkError, MkInteger, MkValue, NULL, is_error

EvalFunc = Callable[[Node, Environment], MkValue]

def eval_expressions(exprs: Sequence[Expression], env: Environment, eval_func: EvalFunc) -> Union[List[MkValue], MkError]:
    """Evaluate left to right; the first error stops the rest."""
    result: List[MkValue] = []

    for expr in exprs:
        val = eval_func(expr, env)
        if is_error(val):
            return val
        result.append(val)

    return result

def eval_array(node: ArrayLiteral, env: Environment, eval_func: EvalFunc) -> MkValue:
    items = eval_expressions(node.elements, env, eval_func)
    if is_error(items):
        return items

    return MkArray(items)

def eval_index(left: MkValue, index: MkValue) -> MkValue:
    match (left, index):
        case (MkArray(items=items), MkInteger(value=idx)):
            # Out of range (including negative) is null, not an error
            if idx < 0 or idx >= len(items):
                return NULL
            return items[idx]
        case _:
            return MkError(f"index operator not supported: {left.kind}")
