"""
Lexer for Monkey - Recursive Descent Parser

Turns Monkey source text into tokens, one at a time.

Features:
- Lazy tokenization (the parser pulls tokens on demand)
- Position tracking (line, column)
- Raw string literals (no escape processing)
"""

from typing import Iterator, List

from .token_types import KEYWORDS, TT, Tok, lookup_ident

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    Monkey lexer.

    Keeps a read cursor over an immutable source string. Every call to
    next_token() consumes exactly one token; once the input is exhausted
    it keeps returning EOF.
    """

    KEYWORDS = KEYWORDS

    # Single-character tokens. '=' and '!' are also prefixes of '==' / '!='.
    SINGLE_CHARS = {
        '=': TT.ASSIGN,
        '+': TT.PLUS,
        '-': TT.MINUS,
        '!': TT.BANG,
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

    TWO_CHARS = {
        '==': TT.EQ,
        '!=': TT.NOT_EQ,
    }

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

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

        two = ch + self.peek(1)
        if two in self.TWO_CHARS:
            self.advance(2)
            return Tok(self.TWO_CHARS[two], two, line, column)

        if ch in self.SINGLE_CHARS:
            self.advance()
            return Tok(self.SINGLE_CHARS[ch], ch, line, column)

        if ch == '"':
            return Tok(TT.STRING, self.scan_string(), line, column)

        if is_letter(ch):
            literal = self.scan_while(is_letter)
            return Tok(lookup_ident(literal), literal, line, column)

        if is_digit(ch):
            return Tok(TT.INT, self.scan_while(is_digit), line, column)

        self.advance()
        return Tok(TT.ILLEGAL, ch, line, column)

    def __iter__(self) -> Iterator[Tok]:
        """Yield tokens lazily, ending with (and including) EOF"""
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == TT.EOF:
                return

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_string(self) -> str:
        """Scan "...": content is returned verbatim.

        An unterminated string runs to the end of input instead of failing.
        """
        self.advance()  # opening quote
        start = self.pos

        while self.peek() not in ('"', ''):
            self.advance()

        content = self.source[start:self.pos]
        if self.peek() == '"':
            self.advance()  # closing quote

        return content

    def scan_while(self, predicate) -> str:
        start = self.pos
        while self.peek() and predicate(self.peek()):
            self.advance()
        return self.source[start:self.pos]

    # ========================================================================
    # Utilities
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character; '' past the end"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return ''

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        if n < 0:
            raise ValueError(f"advance() requires n >= 0, got {n}")
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
        while self.peek() and self.peek().isspace():
            self.advance()


def is_letter(ch: str) -> bool:
    return ('a' <= ch <= 'z') or ('A' <= ch <= 'Z') or ch == '_'


def is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


def tokenize(source: str) -> List[Tok]:
    """Convenience function: tokenize the whole source, EOF included"""
    return list(Lexer(source))


if __name__ == '__main__':
    test_source = '''
let add = fn(x, y) { x + y; };
let result = add(5, 10);
'''

    for tok in tokenize(test_source):
        print(tok)
