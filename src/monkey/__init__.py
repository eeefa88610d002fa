"""Monkey: a tree-walking interpreter for a small expression language."""

from .ast_nodes import as_tree, to_source_string
from .evaluator import evaluate
from .lexer import Lexer, tokenize
from .parser import ParseError, Parser, parse
from .runner import run
from .runtime import new_environment
from .types import Environment

__all__ = [
    "Environment",
    "Lexer",
    "ParseError",
    "Parser",
    "as_tree",
    "evaluate",
    "new_environment",
    "parse",
    "run",
    "to_source_string",
    "tokenize",
]
