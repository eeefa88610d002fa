"""
Lexer for Monkey

Scans source text into a lazy stream of tokens, one per next_token() call.

Features:
- Single-pass, on-demand tokenization
- Two-character lookahead for == and !=
- Position tracking (line, column)
- Never raises: unknown characters become ILLEGAL tokens
"""

from typing import Iterator, List

from .token_types import TT, Tok, lookup_ident

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    Monkey lexer.

    The stream ends with EOF; once exhausted every further call keeps
    returning EOF. A lexer cannot be rewound, build a new one to re-scan.
    """

    WHITESPACE = (' ', '\t', '\n', '\r')

    # Single-character tokens
    SINGLE_CHAR = {
        '+': TT.PLUS,
        '-': TT.MINUS,
        '*': TT.ASTERISK,
        '/': TT.SLASH,
        '<': TT.LT,
        '>': TT.GT,
        ',': TT.COMMA,
        ';': TT.SEMICOLON,
        ':': TT.COLON,
        '(': TT.LPAREN,
        ')': TT.RPAREN,
        '{': TT.LBRACE,
        '}': TT.RBRACE,
        '[': TT.LBRACKET,
        ']': TT.RBRACKET,
    }

    # Characters with a two-character form: ch -> (single, double)
    PAIRED = {
        '=': (TT.ASSIGN, TT.EQ),
        '!': (TT.BANG, TT.NOT_EQ),
    }

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

    def __iter__(self) -> Iterator[Tok]:
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == TT.EOF:
                return

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def next_token(self) -> Tok:
        """Scan and return the next token"""
        self.skip_whitespace()

        line, column = self.line, self.column
        ch = self.peek()

        if ch == '':
            return Tok(TT.EOF, '', line, column)

        if ch in self.PAIRED:
            single, double = self.PAIRED[ch]
            if self.peek(1) == '=':
                return Tok(double, self.advance(2), line, column)
            return Tok(single, self.advance(), line, column)

        if ch in self.SINGLE_CHAR:
            return Tok(self.SINGLE_CHAR[ch], self.advance(), line, column)

        if ch == '"':
            return self.scan_string(line, column)

        if is_letter(ch):
            ident = self.scan_while(is_letter)
            return Tok(lookup_ident(ident), ident, line, column)

        if is_digit(ch):
            return Tok(TT.INT, self.scan_while(is_digit), line, column)

        return Tok(TT.ILLEGAL, self.advance(), line, column)

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_string(self, line: int, column: int) -> Tok:
        """Scan "..." into a STRING token. Backslashes are literal."""
        self.advance()  # opening quote
        value = ''

        while self.pos < len(self.source) and self.peek() != '"':
            value += self.advance()

        # No closing quote: the raw text up to end-of-input is ILLEGAL
        if self.pos >= len(self.source):
            return Tok(TT.ILLEGAL, '"' + value, line, column)

        self.advance()
        return Tok(TT.STRING, value, line, column)

    def scan_while(self, predicate) -> str:
        value = ''
        while self.pos < len(self.source) and predicate(self.peek()):
            value += self.advance()
        return value

    # ========================================================================
    # Utilities
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character, '' past the end"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return ''

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        result = self.source[self.pos:self.pos + n]
        for ch in result:
            if ch == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
        self.pos += len(result)
        return result

    def skip_whitespace(self) -> None:
        while self.peek() in self.WHITESPACE and self.pos < len(self.source):
            self.advance()


def is_letter(ch: str) -> bool:
    return ('a' <= ch <= 'z') or ('A' <= ch <= 'Z') or ch == '_'


def is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


def tokenize(source: str) -> List[Tok]:
    """Convenience function: every token of source, EOF included"""
    return list(Lexer(source))
