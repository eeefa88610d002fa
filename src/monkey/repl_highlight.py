"""prompt_toolkit lexer for live Monkey syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer import Lexer as MkLexer
from .token_types import KEYWORDS, TT, Tok

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "builtin": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
    "error": "bold ansired",
}

_OPERATORS = {
    TT.ASSIGN, TT.PLUS, TT.MINUS, TT.BANG, TT.ASTERISK, TT.SLASH,
    TT.LT, TT.GT, TT.EQ, TT.NOT_EQ,
}
_PUNCTUATION = {
    TT.COMMA, TT.SEMICOLON, TT.COLON, TT.LPAREN, TT.RPAREN,
    TT.LBRACE, TT.RBRACE, TT.LBRACKET, TT.RBRACKET,
}


def _token_group(tok: Tok, builtin_names: frozenset[str]) -> str:
    if tok.type in (TT.TRUE, TT.FALSE):
        return "boolean"
    if tok.type in KEYWORDS.values():
        return "keyword"
    if tok.type == TT.INT:
        return "number"
    if tok.type == TT.STRING:
        return "string"
    if tok.type == TT.IDENT:
        return "builtin" if tok.value in builtin_names else "identifier"
    if tok.type in _OPERATORS:
        return "operator"
    if tok.type in _PUNCTUATION:
        return "punctuation"
    return "error"


def _token_width(tok: Tok) -> int:
    # STRING values exclude their quotes
    if tok.type == TT.STRING:
        return len(tok.value) + 2
    return len(tok.value)


def highlight_line(text: str, builtin_names: frozenset[str] = frozenset()) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    result: StyleAndTextTuples = []
    pos = 0

    for tok in MkLexer(text):
        if tok.type == TT.EOF:
            break

        start = tok.column - 1
        if start > pos:
            result.append(("", text[pos:start]))

        end = start + _token_width(tok)
        style = GROUP_STYLE.get(_token_group(tok, builtin_names), "")
        result.append((style, text[start:end]))
        pos = end

    # Trailing unstyled text.
    if pos < len(text):
        result.append(("", text[pos:]))

    return result if result else [("", text)]


class MonkeyLexer(Lexer):
    """prompt_toolkit Lexer that highlights Monkey source using the interpreter's lexer."""

    def __init__(self, builtin_names: frozenset[str] = frozenset()):
        self.builtin_names = builtin_names

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        # Pre-compute highlights lazily, once per line.
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = highlight_line(lines[lineno], self.builtin_names)
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
