from __future__ import annotations

from typing import Callable

from ..ast_nodes import IfExpression, Node
from ..runtime import (
    INT64_MAX,
    INT64_MIN,
    Environment,
    MkError,
    MkInteger,
    MkString,
    MkValue,
    NULL,
    is_error,
    native_bool,
)
from ..utils import values_equal
from .blocks import eval_block
from .helpers import is_truthy

EvalFunc = Callable[[Node, Environment], MkValue]

def eval_prefix(op: str, right: MkValue) -> MkValue:
    match op:
        case '!':
            return native_bool(not is_truthy(right))
        case '-':
            if not isinstance(right, MkInteger):
                return MkError(f"unknown operator: -{right.kind}")
            return _checked_int(-right.value)
        case _:
            return MkError(f"unknown operator: {op}{right.kind}")

def eval_infix(op: str, left: MkValue, right: MkValue) -> MkValue:
    match (left, right):
        case (MkInteger(value=lhs), MkInteger(value=rhs)):
            return _integer_infix(op, lhs, rhs)
        case (MkString(value=lhs), MkString(value=rhs)):
            return _string_infix(op, lhs, rhs)

    if type(left) is not type(right):
        return MkError(f"type mismatch: {left.kind} {op} {right.kind}")

    if op == '==':
        return native_bool(values_equal(left, right))
    if op == '!=':
        return native_bool(not values_equal(left, right))

    return MkError(f"unknown operator: {left.kind} {op} {right.kind}")

def _integer_infix(op: str, lhs: int, rhs: int) -> MkValue:
    match op:
        case '+':
            return _checked_int(lhs + rhs)
        case '-':
            return _checked_int(lhs - rhs)
        case '*':
            return _checked_int(lhs * rhs)
        case '/':
            if rhs == 0:
                return MkError("division by zero")
            return _checked_int(_div_trunc(lhs, rhs))
        case '<':
            return native_bool(lhs < rhs)
        case '>':
            return native_bool(lhs > rhs)
        case '==':
            return native_bool(lhs == rhs)
        case '!=':
            return native_bool(lhs != rhs)
        case _:
            return MkError(f"unknown operator: INTEGER {op} INTEGER")

def _checked_int(value: int) -> MkValue:
    # Integers are signed 64-bit; leaving the range is an error, never a wrap
    if value < INT64_MIN or value > INT64_MAX:
        return MkError("integer overflow")
    return MkInteger(value)

def _div_trunc(lhs: int, rhs: int) -> int:
    """Integer division rounding toward zero (Python's // floors)."""
    q = abs(lhs) // abs(rhs)
    return q if (lhs < 0) == (rhs < 0) else -q

def _string_infix(op: str, lhs: str, rhs: str) -> MkValue:
    if op != '+':
        return MkError(f"unknown operator: STRING {op} STRING")

    return MkString(lhs + rhs)

def eval_if(node: IfExpression, env: Environment, eval_func: EvalFunc) -> MkValue:
    condition = eval_func(node.condition, env)
    if is_error(condition):
        return condition

    # Branches are always blocks
    if is_truthy(condition):
        return eval_block(node.consequence, env, eval_func)

    if node.alternative is not None:
        return eval_block(node.alternative, env, eval_func)

    return NULL
