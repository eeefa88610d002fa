from __future__ import annotations

from typing import Callable

from ..ast_nodes import BlockStatement, ExpressionStatement, Node, Program
from ..runtime import Environment, MkError, MkReturn, MkValue, NULL

EvalFunc = Callable[[Node, Environment], MkValue]

def eval_program(node: Program, env: Environment, eval_func: EvalFunc) -> MkValue:
    """Run top-level statements; a `return` here ends the program with its value."""
    result: MkValue = NULL

    for stmt in node.statements:
        if isinstance(stmt, ExpressionStatement):
            result = eval_func(stmt.expression, env)
        else:
            result = eval_func(stmt, env)

        match result:
            case MkReturn(value=value):
                return value
            case MkError():
                return result

    return result

def eval_block(node: BlockStatement, env: Environment, eval_func: EvalFunc) -> MkValue:
    """Run a block, handing MkReturn/MkError back still wrapped."""
    result: MkValue = NULL

    for stmt in node.statements:
        # Expression statements are unwrapped here, not dispatched
        if isinstance(stmt, ExpressionStatement):
            result = eval_func(stmt.expression, env)
        else:
            result = eval_func(stmt, env)

        if isinstance(result, (MkReturn, MkError)):
            return result

    return result
