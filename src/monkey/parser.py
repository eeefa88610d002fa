"""
Pratt Parser for Monkey

Structure:
- Lexer: lazy token stream, pulled one token at a time
- Parser: statements by recursive descent, expressions by precedence
  climbing over prefix/infix handler tables keyed by token type
- AST: frozen dataclasses from ast_nodes

Syntax errors never abort the parse. They are collected as strings on
Parser.errors and the parser moves on to the next statement.
"""

from enum import IntEnum
from typing import Callable, Dict, List, Optional, Tuple

from .ast_nodes import (
    ArrayLiteral,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
    StringLiteral,
)
from .lexer import Lexer
from .token_types import TT, Tok
from .types import INT64_MAX, MonkeyError

# ============================================================================
# Precedence
# ============================================================================

class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2       # ==
    LESSGREATER = 3  # > or <
    SUM = 4          # +
    PRODUCT = 5      # *
    PREFIX = 6       # -X or !X
    CALL = 7         # myFunction(X)
    INDEX = 8        # array[index]

PRECEDENCES: Dict[TT, Precedence] = {
    TT.EQ: Precedence.EQUALS,
    TT.NOT_EQ: Precedence.EQUALS,
    TT.LT: Precedence.LESSGREATER,
    TT.GT: Precedence.LESSGREATER,
    TT.PLUS: Precedence.SUM,
    TT.MINUS: Precedence.SUM,
    TT.SLASH: Precedence.PRODUCT,
    TT.ASTERISK: Precedence.PRODUCT,
    TT.LPAREN: Precedence.CALL,
    TT.LBRACKET: Precedence.INDEX,
}

# ============================================================================
# Parser
# ============================================================================

class ParseError(MonkeyError):
    """Raised at the outer surfaces when a source has syntax errors"""
    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) if self.errors else "parse error")

class Parser:
    """
    Pratt parser for Monkey.

    Holds two tokens of state: `current` is the token being parsed and
    `peek` is the next one, already pulled from the lexer.
    """

    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.errors: List[str] = []
        self.current: Tok = Tok(TT.EOF, '')
        self.peek: Tok = Tok(TT.EOF, '')
        # Fill current and peek
        self.advance()
        self.advance()

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def advance(self) -> None:
        """Shift peek into current and pull a fresh peek from the lexer"""
        self.current = self.peek
        self.peek = self.lexer.next_token()

    def check(self, token_type: TT) -> bool:
        return self.current.type == token_type

    def check_peek(self, token_type: TT) -> bool:
        return self.peek.type == token_type

    def expect_peek(self, token_type: TT) -> bool:
        """Advance if peek matches, else record an error"""
        if self.check_peek(token_type):
            self.advance()
            return True
        self.peek_error(token_type)
        return False

    def peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.peek.type, Precedence.LOWEST)

    def current_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.current.type, Precedence.LOWEST)

    # ========================================================================
    # Errors
    # ========================================================================

    def peek_error(self, token_type: TT) -> None:
        self.errors.append(
            f"expected next token to be {token_type}, got {self.peek.type} instead"
        )

    def no_prefix_parse_fn_error(self, token_type: TT) -> None:
        self.errors.append(f"no prefix parse function for {token_type} found")

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse_program(self) -> Program:
        """Parse statements until EOF"""
        statements: List[Statement] = []

        while not self.check(TT.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.advance()

        return Program(tuple(statements))

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Optional[Statement]:
        if self.check(TT.LET):
            return self.parse_let_statement()
        if self.check(TT.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self) -> Optional[LetStatement]:
        """let IDENT = EXPR [;]"""
        if not self.expect_peek(TT.IDENT):
            return None

        name = Identifier(self.current.value)

        if not self.expect_peek(TT.ASSIGN):
            return None

        self.advance()
        value = self.parse_expression(Precedence.LOWEST)

        if self.check_peek(TT.SEMICOLON):
            self.advance()

        if value is None:
            return None
        return LetStatement(name, value)

    def parse_return_statement(self) -> Optional[ReturnStatement]:
        """return EXPR [;]"""
        self.advance()
        value = self.parse_expression(Precedence.LOWEST)

        if self.check_peek(TT.SEMICOLON):
            self.advance()

        if value is None:
            return None
        return ReturnStatement(value)

    def parse_expression_statement(self) -> Optional[ExpressionStatement]:
        expr = self.parse_expression(Precedence.LOWEST)

        # Optional semicolon so one-liners like `5 + 5` work in the REPL
        if self.check_peek(TT.SEMICOLON):
            self.advance()

        if expr is None:
            return None
        return ExpressionStatement(expr)

    def parse_block_statement(self) -> BlockStatement:
        """Statements up to `}` or EOF; current is `{` on entry"""
        statements: List[Statement] = []
        self.advance()

        while not self.check(TT.RBRACE) and not self.check(TT.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.advance()

        return BlockStatement(tuple(statements))

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expression(self, precedence: Precedence) -> Optional[Expression]:
        prefix = PREFIX_PARSERS.get(self.current.type)
        if prefix is None:
            self.no_prefix_parse_fn_error(self.current.type)
            return None

        left = prefix(self)

        while (
            left is not None
            and not self.check_peek(TT.SEMICOLON)
            and precedence < self.peek_precedence()
        ):
            infix = INFIX_PARSERS.get(self.peek.type)
            if infix is None:
                return left

            self.advance()
            left = infix(self, left)

        return left

    def parse_expression_list(self, end: TT) -> Optional[Tuple[Expression, ...]]:
        """Comma separated expressions up to the closing `end` token"""
        items: List[Expression] = []

        if self.check_peek(end):
            self.advance()
            return ()

        self.advance()
        item = self.parse_expression(Precedence.LOWEST)
        if item is None:
            return None
        items.append(item)

        while self.check_peek(TT.COMMA):
            self.advance()
            self.advance()
            item = self.parse_expression(Precedence.LOWEST)
            if item is None:
                return None
            items.append(item)

        if not self.expect_peek(end):
            return None

        return tuple(items)

    def parse_function_parameters(self) -> Optional[Tuple[Identifier, ...]]:
        params: List[Identifier] = []

        if self.check_peek(TT.RPAREN):
            self.advance()
            return ()

        if not self.expect_peek(TT.IDENT):
            return None
        params.append(Identifier(self.current.value))

        while self.check_peek(TT.COMMA):
            self.advance()
            if not self.expect_peek(TT.IDENT):
                return None
            params.append(Identifier(self.current.value))

        if not self.expect_peek(TT.RPAREN):
            return None

        return tuple(params)

# ============================================================================
# Prefix handlers
# ============================================================================

def parse_identifier(p: Parser) -> Expression:
    return Identifier(p.current.value)

def parse_integer_literal(p: Parser) -> Optional[Expression]:
    literal = p.current.value
    value = int(literal)
    if value > INT64_MAX:
        p.errors.append(f"could not parse {literal} as integer")
        return None
    return IntegerLiteral(value)

def parse_string_literal(p: Parser) -> Expression:
    return StringLiteral(p.current.value)

def parse_boolean(p: Parser) -> Expression:
    return BooleanLiteral(p.check(TT.TRUE))

def parse_prefix_expression(p: Parser) -> Optional[Expression]:
    operator = p.current.value
    p.advance()
    right = p.parse_expression(Precedence.PREFIX)
    if right is None:
        return None
    return PrefixExpression(operator, right)

def parse_grouped_expression(p: Parser) -> Optional[Expression]:
    p.advance()
    expr = p.parse_expression(Precedence.LOWEST)

    if not p.expect_peek(TT.RPAREN):
        return None
    return expr

def parse_if_expression(p: Parser) -> Optional[Expression]:
    """if (COND) { ... } [else { ... }]"""
    if not p.expect_peek(TT.LPAREN):
        return None

    p.advance()
    condition = p.parse_expression(Precedence.LOWEST)

    if not p.expect_peek(TT.RPAREN):
        return None
    if not p.expect_peek(TT.LBRACE):
        return None

    consequence = p.parse_block_statement()
    alternative = None

    if p.check_peek(TT.ELSE):
        p.advance()

        if not p.expect_peek(TT.LBRACE):
            return None

        alternative = p.parse_block_statement()

    if condition is None:
        return None
    return IfExpression(condition, consequence, alternative)

def parse_function_literal(p: Parser) -> Optional[Expression]:
    """fn(a, b) { ... }"""
    if not p.expect_peek(TT.LPAREN):
        return None

    params = p.parse_function_parameters()
    if params is None:
        return None

    if not p.expect_peek(TT.LBRACE):
        return None

    return FunctionLiteral(params, p.parse_block_statement())

def parse_array_literal(p: Parser) -> Optional[Expression]:
    elements = p.parse_expression_list(TT.RBRACKET)
    if elements is None:
        return None
    return ArrayLiteral(elements)

def parse_hash_literal(p: Parser) -> Optional[Expression]:
    """{k: v, ...}; a repeated key keeps its first position, last value"""
    pairs: Dict[Expression, Expression] = {}

    while not p.check_peek(TT.RBRACE):
        p.advance()
        key = p.parse_expression(Precedence.LOWEST)

        if not p.expect_peek(TT.COLON):
            return None

        p.advance()
        value = p.parse_expression(Precedence.LOWEST)

        if key is None or value is None:
            return None
        pairs[key] = value

        if not p.check_peek(TT.RBRACE) and not p.expect_peek(TT.COMMA):
            return None

    if not p.expect_peek(TT.RBRACE):
        return None

    return HashLiteral(tuple(pairs.items()))

# ============================================================================
# Infix handlers
# ============================================================================

def parse_infix_expression(p: Parser, left: Expression) -> Optional[Expression]:
    operator = p.current.value
    precedence = p.current_precedence()
    p.advance()
    right = p.parse_expression(precedence)
    if right is None:
        return None
    return InfixExpression(left, operator, right)

def parse_call_expression(p: Parser, function: Expression) -> Optional[Expression]:
    arguments = p.parse_expression_list(TT.RPAREN)
    if arguments is None:
        return None
    return CallExpression(function, arguments)

def parse_index_expression(p: Parser, left: Expression) -> Optional[Expression]:
    p.advance()
    index = p.parse_expression(Precedence.LOWEST)

    if not p.expect_peek(TT.RBRACKET):
        return None
    if index is None:
        return None
    return IndexExpression(left, index)

PrefixParseFn = Callable[[Parser], Optional[Expression]]
InfixParseFn = Callable[[Parser, Expression], Optional[Expression]]

PREFIX_PARSERS: Dict[TT, PrefixParseFn] = {
    TT.IDENT: parse_identifier,
    TT.INT: parse_integer_literal,
    TT.STRING: parse_string_literal,
    TT.TRUE: parse_boolean,
    TT.FALSE: parse_boolean,
    TT.BANG: parse_prefix_expression,
    TT.MINUS: parse_prefix_expression,
    TT.LPAREN: parse_grouped_expression,
    TT.IF: parse_if_expression,
    TT.FUNCTION: parse_function_literal,
    TT.LBRACKET: parse_array_literal,
    TT.LBRACE: parse_hash_literal,
}

INFIX_PARSERS: Dict[TT, InfixParseFn] = {
    TT.PLUS: parse_infix_expression,
    TT.MINUS: parse_infix_expression,
    TT.SLASH: parse_infix_expression,
    TT.ASTERISK: parse_infix_expression,
    TT.EQ: parse_infix_expression,
    TT.NOT_EQ: parse_infix_expression,
    TT.LT: parse_infix_expression,
    TT.GT: parse_infix_expression,
    TT.LPAREN: parse_call_expression,
    TT.LBRACKET: parse_index_expression,
}

# ============================================================================
# Convenience
# ============================================================================

def parse(source: str) -> Tuple[Program, List[str]]:
    """Parse source, returning the (possibly partial) program and its errors"""
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    return program, parser.errors
