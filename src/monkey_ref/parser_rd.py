"""
Recursive Descent Parser for Monkey

Structure:
- Lexer: tokens pulled lazily, one current token plus one peek token
- Parser: recursive descent for statements, Pratt parsing for expressions
- AST: node classes from tree.py

Pratt parsing: every token type has at most one prefix rule and at most one
infix rule. parse_expression(p) runs the current token's prefix rule, then
keeps folding infix rules while the peek token binds tighter than p.
"""

from enum import IntEnum
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from .lexer_rd import Lexer
from .token_types import TT, Tok
from .tree import (
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

# ============================================================================
# Parser
# ============================================================================

class ParseError(Exception):
    """Parse error with position info"""
    def __init__(self, message: str, token: Optional[Tok] = None):
        self.message = message
        self.token = token
        super().__init__(
            f"{message} at line {token.line}, col {token.column}" if token else message
        )


class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2       # ==, !=
    LESSGREATER = 3  # <, >
    SUM = 4          # +, -
    PRODUCT = 5      # *, /
    PREFIX = 6       # -x, !x
    CALL = 7         # f(x), a[i]


PRECEDENCES: Mapping[TT, Precedence] = MappingProxyType({
    TT.EQ: Precedence.EQUALS,
    TT.NOT_EQ: Precedence.EQUALS,
    TT.LT: Precedence.LESSGREATER,
    TT.GT: Precedence.LESSGREATER,
    TT.PLUS: Precedence.SUM,
    TT.MINUS: Precedence.SUM,
    TT.SLASH: Precedence.PRODUCT,
    TT.ASTERISK: Precedence.PRODUCT,
    TT.LPAREN: Precedence.CALL,
    TT.LBRACKET: Precedence.CALL,
})

PrefixParseFn = Callable[[], Expression]
InfixParseFn = Callable[[Expression], Expression]


class Parser:
    """
    Pratt parser for Monkey.

    Expression precedence (lowest to highest):
    1. equality (==, !=)
    2. relational (<, >)
    3. additive (+, -)
    4. multiplicative (*, /)
    5. prefix (!, -)
    6. call / index ((, [)

    The first structural error raises ParseError; there is no recovery.
    """

    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.cur_token = lexer.next_token()
        self.peek_token = lexer.next_token()

        prefix: Dict[TT, PrefixParseFn] = {
            TT.IDENT: self.parse_identifier,
            TT.INT: self.parse_integer_literal,
            TT.STRING: self.parse_string_literal,
            TT.TRUE: self.parse_boolean,
            TT.FALSE: self.parse_boolean,
            TT.BANG: self.parse_prefix_expression,
            TT.MINUS: self.parse_prefix_expression,
            TT.LPAREN: self.parse_grouped_expression,
            TT.IF: self.parse_if_expression,
            TT.FUNCTION: self.parse_function_literal,
            TT.LBRACKET: self.parse_array_literal,
            TT.LBRACE: self.parse_hash_literal,
        }

        infix: Dict[TT, InfixParseFn] = {
            TT.PLUS: self.parse_infix_expression,
            TT.MINUS: self.parse_infix_expression,
            TT.SLASH: self.parse_infix_expression,
            TT.ASTERISK: self.parse_infix_expression,
            TT.EQ: self.parse_infix_expression,
            TT.NOT_EQ: self.parse_infix_expression,
            TT.LT: self.parse_infix_expression,
            TT.GT: self.parse_infix_expression,
            TT.LPAREN: self.parse_call_expression,
            TT.LBRACKET: self.parse_index_expression,
        }

        # Tables are fixed once the parser exists.
        self.prefix_parse_fns: Mapping[TT, PrefixParseFn] = MappingProxyType(prefix)
        self.infix_parse_fns: Mapping[TT, InfixParseFn] = MappingProxyType(infix)

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def next_token(self) -> None:
        self.cur_token = self.peek_token
        self.peek_token = self.lexer.next_token()

    def cur_token_is(self, token_type: TT) -> bool:
        return self.cur_token.type == token_type

    def peek_token_is(self, token_type: TT) -> bool:
        return self.peek_token.type == token_type

    def expect_peek(self, token_type: TT) -> None:
        """Advance if the peek token has the expected type, else raise"""
        if not self.peek_token_is(token_type):
            raise ParseError(
                f"expected next token to be {token_type.name}, got {self.peek_token.type.name} instead",
                self.peek_token,
            )
        self.next_token()

    def peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.peek_token.type, Precedence.LOWEST)

    def cur_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.cur_token.type, Precedence.LOWEST)

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse_program(self) -> Program:
        """Parse statements until EOF"""
        statements: List[Statement] = []

        while not self.cur_token_is(TT.EOF):
            statements.append(self.parse_statement())
            self.next_token()

        return Program(tuple(statements))

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Statement:
        if self.cur_token_is(TT.LET):
            return self.parse_let_statement()
        if self.cur_token_is(TT.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self) -> LetStatement:
        """let <ident> = <expr> [;]"""
        let_tok = self.cur_token

        self.expect_peek(TT.IDENT)
        name = Identifier(self.cur_token, self.cur_token.literal)

        self.expect_peek(TT.ASSIGN)
        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)

        if self.peek_token_is(TT.SEMICOLON):
            self.next_token()

        return LetStatement(let_tok, name, value)

    def parse_return_statement(self) -> ReturnStatement:
        """return [<expr>] [;]"""
        return_tok = self.cur_token

        # Bare `return` leaves the current token on `return` itself so the
        # caller's advance lands on the terminator.
        if self.peek_token_is(TT.SEMICOLON):
            self.next_token()
            return ReturnStatement(return_tok)
        if self.peek_token_is(TT.RBRACE) or self.peek_token_is(TT.EOF):
            return ReturnStatement(return_tok)

        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)

        if self.peek_token_is(TT.SEMICOLON):
            self.next_token()

        return ReturnStatement(return_tok, value)

    def parse_expression_statement(self) -> ExpressionStatement:
        tok = self.cur_token
        expression = self.parse_expression(Precedence.LOWEST)

        if self.peek_token_is(TT.SEMICOLON):
            self.next_token()

        return ExpressionStatement(tok, expression)

    def parse_block_statement(self) -> BlockStatement:
        """{ <stmt>* } -- current token is the opening brace"""
        block_tok = self.cur_token
        statements: List[Statement] = []
        self.next_token()

        while not self.cur_token_is(TT.RBRACE):
            if self.cur_token_is(TT.EOF):
                raise ParseError("expected next token to be RBRACE, got EOF instead", self.cur_token)
            statements.append(self.parse_statement())
            self.next_token()

        return BlockStatement(block_tok, tuple(statements))

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expression(self, precedence: Precedence) -> Expression:
        prefix = self.prefix_parse_fns.get(self.cur_token.type)
        if prefix is None:
            raise ParseError(
                f"no prefix parse function for {self.cur_token.type.name} found",
                self.cur_token,
            )
        left = prefix()

        # Strict '<' keeps equal-precedence operators left associative.
        while not self.peek_token_is(TT.SEMICOLON) and precedence < self.peek_precedence():
            infix = self.infix_parse_fns.get(self.peek_token.type)
            if infix is None:
                return left

            self.next_token()
            left = infix(left)

        return left

    def parse_identifier(self) -> Expression:
        return Identifier(self.cur_token, self.cur_token.literal)

    def parse_integer_literal(self) -> Expression:
        tok = self.cur_token
        try:
            value = int(tok.literal)
        except ValueError:
            raise ParseError(f"could not parse {tok.literal!r} as integer", tok) from None
        return IntegerLiteral(tok, value)

    def parse_string_literal(self) -> Expression:
        return StringLiteral(self.cur_token, self.cur_token.literal)

    def parse_boolean(self) -> Expression:
        return BooleanLiteral(self.cur_token, self.cur_token_is(TT.TRUE))

    def parse_prefix_expression(self) -> Expression:
        tok = self.cur_token
        self.next_token()
        right = self.parse_expression(Precedence.PREFIX)
        return PrefixExpression(tok, tok.literal, right)

    def parse_infix_expression(self, left: Expression) -> Expression:
        tok = self.cur_token
        precedence = self.cur_precedence()
        self.next_token()
        right = self.parse_expression(precedence)
        return InfixExpression(tok, left, tok.literal, right)

    def parse_grouped_expression(self) -> Expression:
        self.next_token()
        expr = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(TT.RPAREN)
        return expr

    def parse_if_expression(self) -> Expression:
        """if (<cond>) { ... } [else { ... }]"""
        tok = self.cur_token

        self.expect_peek(TT.LPAREN)
        self.next_token()
        condition = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(TT.RPAREN)

        self.expect_peek(TT.LBRACE)
        consequence = self.parse_block_statement()

        alternative = None
        if self.peek_token_is(TT.ELSE):
            self.next_token()
            self.expect_peek(TT.LBRACE)
            alternative = self.parse_block_statement()

        return IfExpression(tok, condition, consequence, alternative)

    def parse_function_literal(self) -> Expression:
        """fn(<params>) { ... }"""
        tok = self.cur_token

        self.expect_peek(TT.LPAREN)
        parameters = self.parse_function_parameters()

        self.expect_peek(TT.LBRACE)
        body = self.parse_block_statement()

        return FunctionLiteral(tok, parameters, body)

    def parse_function_parameters(self) -> Tuple[Identifier, ...]:
        params: List[Identifier] = []

        if self.peek_token_is(TT.RPAREN):
            self.next_token()
            return ()

        self.expect_peek(TT.IDENT)
        params.append(Identifier(self.cur_token, self.cur_token.literal))

        while self.peek_token_is(TT.COMMA):
            self.next_token()
            self.expect_peek(TT.IDENT)
            params.append(Identifier(self.cur_token, self.cur_token.literal))

        self.expect_peek(TT.RPAREN)
        return tuple(params)

    def parse_call_expression(self, function: Expression) -> Expression:
        tok = self.cur_token
        arguments = self.parse_expression_list(TT.RPAREN)
        return CallExpression(tok, function, arguments)

    def parse_index_expression(self, left: Expression) -> Expression:
        tok = self.cur_token
        self.next_token()
        index = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(TT.RBRACKET)
        return IndexExpression(tok, left, index)

    def parse_array_literal(self) -> Expression:
        tok = self.cur_token
        return ArrayLiteral(tok, self.parse_expression_list(TT.RBRACKET))

    def parse_expression_list(self, end: TT) -> Tuple[Expression, ...]:
        """Comma-separated expressions up to `end`; current token is the opener"""
        items: List[Expression] = []

        if self.peek_token_is(end):
            self.next_token()
            return ()

        self.next_token()
        items.append(self.parse_expression(Precedence.LOWEST))

        while self.peek_token_is(TT.COMMA):
            self.next_token()
            self.next_token()
            items.append(self.parse_expression(Precedence.LOWEST))

        self.expect_peek(end)
        return tuple(items)

    def parse_hash_literal(self) -> Expression:
        """{ <expr> : <expr>, ... }"""
        tok = self.cur_token
        pairs: List[Tuple[Expression, Expression]] = []

        # Hitting EOF falls through to the closing-brace check below.
        while not self.peek_token_is(TT.RBRACE) and not self.peek_token_is(TT.EOF):
            self.next_token()
            key = self.parse_expression(Precedence.LOWEST)

            self.expect_peek(TT.COLON)
            self.next_token()
            value = self.parse_expression(Precedence.LOWEST)
            pairs.append((key, value))

            if not self.peek_token_is(TT.RBRACE) and not self.peek_token_is(TT.EOF):
                self.expect_peek(TT.COMMA)

        self.expect_peek(TT.RBRACE)
        return HashLiteral(tok, tuple(pairs))


# ============================================================================
# Usage Example
# ============================================================================

def parse_source(source: str) -> Program:
    """
    Parse Monkey source code to AST.

    Raises ParseError on the first structural error.
    """
    return Parser(Lexer(source)).parse_program()


# ============================================================================
# Main - AST dump
# ============================================================================

if __name__ == '__main__':
    import sys

    from .tree import to_lark

    args = sys.argv[1:]

    # Read source from file or stdin
    if args and args[0] != '-':
        with open(args[0], 'r', encoding='utf-8') as f:
            source = f.read()
    else:
        source = sys.stdin.read()

    try:
        program = parse_source(source)
        print(to_lark(program).pretty())
    except ParseError as e:
        print(f"Parse error: {e}", file=sys.stderr)
        sys.exit(1)
