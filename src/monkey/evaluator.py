from __future__ import annotations

from typing import Callable, Dict, Optional

from .ast_nodes import (
    ArrayLiteral,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    ExpressionStatement,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    Node,
    PrefixExpression,
    Program,
    ReturnStatement,
    StringLiteral,
)
from .runtime import (
    Environment,
    MkError,
    MkInteger,
    MkReturn,
    MkString,
    MkValue,
    is_error,
    native_bool,
    new_environment,
)
from .utils import raised_recursion_limit

from .eval.blocks import eval_block, eval_program
from .eval.collections import eval_array, eval_index
from .eval.expr import eval_if, eval_infix, eval_prefix
from .eval.fn import eval_call, eval_function_literal

EvalFunc = Callable[[Node, Environment], MkValue]
NodeHandler = Callable[[Node, Environment, EvalFunc], MkValue]

# ---------------- Public API ----------------

def evaluate(node: Node, env: Optional[Environment]=None) -> MkValue:
    """Evaluate a node (usually a Program) in env, or in a fresh root scope."""
    if env is None:
        env = new_environment()

    with raised_recursion_limit():
        return eval_node(node, env)

# ---------------- Core evaluator ----------------

def eval_node(n: Node, env: Environment) -> MkValue:
    handler = _NODE_DISPATCH.get(type(n))
    if handler is not None:
        return handler(n, env, eval_node)

    match n:
        case HashLiteral():
            return MkError("hash literals are not supported")
        case _:
            return MkError(f"unknown node: {type(n).__name__}")

# ---------------- Statements ----------------

def _eval_expression_stmt(n: ExpressionStatement, env: Environment, eval_func: EvalFunc) -> MkValue:
    return eval_func(n.expression, env)

def _eval_let(n: LetStatement, env: Environment, eval_func: EvalFunc) -> MkValue:
    val = eval_func(n.value, env)
    if is_error(val):
        return val

    return env.set(n.name.name, val)

def _eval_return(n: ReturnStatement, env: Environment, eval_func: EvalFunc) -> MkValue:
    val = eval_func(n.value, env)
    if is_error(val):
        return val

    return MkReturn(val)

# ---------------- Expressions ----------------

def _eval_integer(n: IntegerLiteral, _env: Environment, _eval_func: EvalFunc) -> MkValue:
    return MkInteger(n.value)

def _eval_boolean(n: BooleanLiteral, _env: Environment, _eval_func: EvalFunc) -> MkValue:
    return native_bool(n.value)

def _eval_string(n: StringLiteral, _env: Environment, _eval_func: EvalFunc) -> MkValue:
    return MkString(n.value)

def _eval_identifier(n: Identifier, env: Environment, _eval_func: EvalFunc) -> MkValue:
    val = env.get(n.name)
    if val is not None:
        return val

    builtin = env.builtins.get(n.name)
    if builtin is not None:
        return builtin

    return MkError(f"identifier not found: {n.name}")

def _eval_prefix(n: PrefixExpression, env: Environment, eval_func: EvalFunc) -> MkValue:
    right = eval_func(n.right, env)
    if is_error(right):
        return right

    return eval_prefix(n.operator, right)

def _eval_infix(n: InfixExpression, env: Environment, eval_func: EvalFunc) -> MkValue:
    left = eval_func(n.left, env)
    if is_error(left):
        return left

    right = eval_func(n.right, env)
    if is_error(right):
        return right

    return eval_infix(n.operator, left, right)

def _eval_index(n: IndexExpression, env: Environment, eval_func: EvalFunc) -> MkValue:
    left = eval_func(n.left, env)
    if is_error(left):
        return left

    index = eval_func(n.index, env)
    if is_error(index):
        return index

    return eval_index(left, index)

_NODE_DISPATCH: Dict[type, NodeHandler] = {
    Program: eval_program,
    BlockStatement: eval_block,
    ExpressionStatement: _eval_expression_stmt,
    LetStatement: _eval_let,
    ReturnStatement: _eval_return,
    IntegerLiteral: _eval_integer,
    BooleanLiteral: _eval_boolean,
    StringLiteral: _eval_string,
    Identifier: _eval_identifier,
    PrefixExpression: _eval_prefix,
    InfixExpression: _eval_infix,
    IfExpression: eval_if,
    FunctionLiteral: eval_function_literal,
    CallExpression: eval_call,
    ArrayLiteral: eval_array,
    IndexExpression: _eval_index,
}
