"""
Token Types for the Monkey lexer and parser

Shared between lexer and parser to avoid circular dependencies.
"""

from typing import Dict
from dataclasses import dataclass, field
from enum import Enum


class TT(Enum):
    """Token Types. The value is the display text used in parse errors."""

    ILLEGAL = "ILLEGAL"
    EOF = "EOF"

    # Identifiers + literals
    IDENT = "IDENT"
    INT = "INT"
    STRING = "STRING"

    # Operators
    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    BANG = "!"
    ASTERISK = "*"
    SLASH = "/"
    LT = "<"
    GT = ">"
    EQ = "=="
    NOT_EQ = "!="

    # Delimiters
    COMMA = ","
    SEMICOLON = ";"
    COLON = ":"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"

    # Keywords
    FUNCTION = "FUNCTION"
    LET = "LET"
    TRUE = "TRUE"
    FALSE = "FALSE"
    IF = "IF"
    ELSE = "ELSE"
    RETURN = "RETURN"

    def __str__(self) -> str:
        return self.value


KEYWORDS: Dict[str, TT] = {
    'fn': TT.FUNCTION,
    'let': TT.LET,
    'true': TT.TRUE,
    'false': TT.FALSE,
    'if': TT.IF,
    'else': TT.ELSE,
    'return': TT.RETURN,
}


def lookup_ident(ident: str) -> TT:
    """Resolve reserved words to their keyword kind"""
    return KEYWORDS.get(ident, TT.IDENT)


@dataclass(frozen=True)
class Tok:
    """Token with position info (position does not take part in equality)"""

    type: TT
    value: str
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, {self.line}:{self.column})"
