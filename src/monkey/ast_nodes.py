"""AST node set produced by the parser.

Nodes are frozen dataclasses: once the parser builds a node it is never
mutated, and every child belongs to exactly one parent. Besides the data
there are two projections: to_source_string() (fully parenthesised source
text, used to check precedence) and as_tree() (a lark Tree for debugging).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from lark import Token, Tree
from typing_extensions import TypeAlias

# ---------- Expressions ----------

@dataclass(frozen=True)
class Identifier:
    name: str

@dataclass(frozen=True)
class IntegerLiteral:
    value: int

@dataclass(frozen=True)
class BooleanLiteral:
    value: bool

@dataclass(frozen=True)
class StringLiteral:
    value: str

@dataclass(frozen=True)
class PrefixExpression:
    operator: str
    right: 'Expression'

@dataclass(frozen=True)
class InfixExpression:
    left: 'Expression'
    operator: str
    right: 'Expression'

@dataclass(frozen=True)
class IfExpression:
    condition: 'Expression'
    consequence: 'BlockStatement'
    alternative: Optional['BlockStatement'] = None

@dataclass(frozen=True)
class FunctionLiteral:
    parameters: Tuple[Identifier, ...]
    body: 'BlockStatement'

@dataclass(frozen=True)
class CallExpression:
    function: 'Expression'
    arguments: Tuple['Expression', ...]

@dataclass(frozen=True)
class ArrayLiteral:
    elements: Tuple['Expression', ...]

@dataclass(frozen=True)
class IndexExpression:
    left: 'Expression'
    index: 'Expression'

@dataclass(frozen=True)
class HashLiteral:
    # Ordered (key, value) pairs; keys are unique by structural equality.
    pairs: Tuple[Tuple['Expression', 'Expression'], ...]

Expression: TypeAlias = Union[
    Identifier,
    IntegerLiteral,
    BooleanLiteral,
    StringLiteral,
    PrefixExpression,
    InfixExpression,
    IfExpression,
    FunctionLiteral,
    CallExpression,
    ArrayLiteral,
    IndexExpression,
    HashLiteral,
]

# ---------- Statements ----------

@dataclass(frozen=True)
class LetStatement:
    name: Identifier
    value: Expression

@dataclass(frozen=True)
class ReturnStatement:
    value: Expression

@dataclass(frozen=True)
class ExpressionStatement:
    expression: Expression

@dataclass(frozen=True)
class BlockStatement:
    statements: Tuple['Statement', ...]

Statement: TypeAlias = Union[LetStatement, ReturnStatement, ExpressionStatement, BlockStatement]

@dataclass(frozen=True)
class Program:
    statements: Tuple[Statement, ...]

Node: TypeAlias = Union[Program, Statement, Expression]

# ---------- Source rendering ----------

def _join(nodes) -> str:
    return ", ".join(to_source_string(n) for n in nodes)

def to_source_string(node: Node) -> str:
    """Render a subtree back to source, parenthesising every operator."""
    match node:
        case Program(statements=stmts) | BlockStatement(statements=stmts):
            return "".join(to_source_string(s) for s in stmts)
        case LetStatement(name=name, value=value):
            return f"let {name.name} = {to_source_string(value)};"
        case ReturnStatement(value=value):
            return f"return {to_source_string(value)};"
        case ExpressionStatement(expression=expr):
            return to_source_string(expr)
        case Identifier(name=name):
            return name
        case IntegerLiteral(value=value):
            return str(value)
        case BooleanLiteral(value=value):
            return "true" if value else "false"
        case StringLiteral(value=value):
            return value
        case PrefixExpression(operator=op, right=right):
            return f"({op}{to_source_string(right)})"
        case InfixExpression(left=left, operator=op, right=right):
            return f"({to_source_string(left)} {op} {to_source_string(right)})"
        case IfExpression(condition=cond, consequence=cons, alternative=alt):
            out = f"if{to_source_string(cond)} {to_source_string(cons)}"
            if alt is not None:
                out += f"else {to_source_string(alt)}"
            return out
        case FunctionLiteral(parameters=params, body=body):
            return f"fn({_join(params)}){{ {to_source_string(body)} }}"
        case CallExpression(function=fn, arguments=args):
            return f"{to_source_string(fn)}({_join(args)})"
        case ArrayLiteral(elements=elements):
            return f"[{_join(elements)}]"
        case IndexExpression(left=left, index=index):
            return f"({to_source_string(left)}[{to_source_string(index)}])"
        case HashLiteral(pairs=pairs):
            inner = ", ".join(f"{to_source_string(k)}: {to_source_string(v)}" for k, v in pairs)
            return "{" + inner + "}"
        case _:
            raise TypeError(f"Cannot render {type(node).__name__}")

# ---------- lark projection ----------

def as_tree(node: Node) -> Union[Tree, Token]:
    """Project a subtree onto lark Tree/Token for pretty-printing."""
    match node:
        case Program(statements=stmts):
            return Tree('program', [as_tree(s) for s in stmts])
        case BlockStatement(statements=stmts):
            return Tree('block', [as_tree(s) for s in stmts])
        case LetStatement(name=name, value=value):
            return Tree('let', [Token('IDENT', name.name), as_tree(value)])
        case ReturnStatement(value=value):
            return Tree('return', [as_tree(value)])
        case ExpressionStatement(expression=expr):
            return Tree('exprstmt', [as_tree(expr)])
        case Identifier(name=name):
            return Token('IDENT', name)
        case IntegerLiteral(value=value):
            return Token('INT', str(value))
        case BooleanLiteral(value=value):
            return Token('TRUE' if value else 'FALSE', "true" if value else "false")
        case StringLiteral(value=value):
            return Token('STRING', value)
        case PrefixExpression(operator=op, right=right):
            return Tree('prefix', [Token('OP', op), as_tree(right)])
        case InfixExpression(left=left, operator=op, right=right):
            return Tree('infix', [as_tree(left), Token('OP', op), as_tree(right)])
        case IfExpression(condition=cond, consequence=cons, alternative=alt):
            children = [as_tree(cond), as_tree(cons)]
            if alt is not None:
                children.append(as_tree(alt))
            return Tree('if', children)
        case FunctionLiteral(parameters=params, body=body):
            paramlist = Tree('paramlist', [Token('IDENT', p.name) for p in params])
            return Tree('fn', [paramlist, as_tree(body)])
        case CallExpression(function=fn, arguments=args):
            return Tree('call', [as_tree(fn), Tree('args', [as_tree(a) for a in args])])
        case ArrayLiteral(elements=elements):
            return Tree('array', [as_tree(e) for e in elements])
        case IndexExpression(left=left, index=index):
            return Tree('index', [as_tree(left), as_tree(index)])
        case HashLiteral(pairs=pairs):
            return Tree('hash', [Tree('pair', [as_tree(k), as_tree(v)]) for k, v in pairs])
        case _:
            raise TypeError(f"Cannot project {type(node).__name__}")
