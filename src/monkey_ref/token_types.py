"""
Token Types for Monkey Parser

Shared between lexer and parser to avoid circular dependencies.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict


class TT(Enum):
    """Token Types"""

    # Special
    ILLEGAL = auto()
    EOF = auto()

    # Identifiers + literals
    IDENT = auto()
    INT = auto()
    STRING = auto()

    # Operators
    ASSIGN = auto()  # =
    PLUS = auto()
    MINUS = auto()
    BANG = auto()  # !
    ASTERISK = auto()
    SLASH = auto()
    LT = auto()
    GT = auto()
    EQ = auto()  # ==
    NOT_EQ = auto()  # !=

    # Delimiters
    COMMA = auto()
    SEMICOLON = auto()
    COLON = auto()
    LPAREN = auto()
    RPAREN = auto()
    LBRACE = auto()
    RBRACE = auto()
    LBRACKET = auto()
    RBRACKET = auto()

    # Keywords
    FUNCTION = auto()
    LET = auto()
    TRUE = auto()
    FALSE = auto()
    IF = auto()
    ELSE = auto()
    RETURN = auto()


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
    """Reclassify an identifier as a keyword when it is one."""
    return KEYWORDS.get(ident, TT.IDENT)


@dataclass(frozen=True)
class Tok:
    """Token with position info"""

    type: TT
    literal: str
    line: int = 0
    column: int = 0

    def __repr__(self):
        return f"Tok({self.type.name}, {self.literal!r}, {self.line}:{self.column})"
