"""prompt_toolkit lexer for live Monkey syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer_rd import tokenize
from .token_types import TT, Tok

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

# Token type → highlight group.
_TT_GROUP = {
    TT.FUNCTION: "keyword",
    TT.LET: "keyword",
    TT.IF: "keyword",
    TT.ELSE: "keyword",
    TT.RETURN: "keyword",
    TT.TRUE: "boolean",
    TT.FALSE: "boolean",
    TT.INT: "number",
    TT.STRING: "string",
    TT.IDENT: "identifier",
    TT.ASSIGN: "operator",
    TT.PLUS: "operator",
    TT.MINUS: "operator",
    TT.BANG: "operator",
    TT.ASTERISK: "operator",
    TT.SLASH: "operator",
    TT.LT: "operator",
    TT.GT: "operator",
    TT.EQ: "operator",
    TT.NOT_EQ: "operator",
    TT.COMMA: "punctuation",
    TT.SEMICOLON: "punctuation",
    TT.COLON: "punctuation",
    TT.LPAREN: "punctuation",
    TT.RPAREN: "punctuation",
    TT.LBRACE: "punctuation",
    TT.RBRACE: "punctuation",
    TT.LBRACKET: "punctuation",
    TT.RBRACKET: "punctuation",
    TT.ILLEGAL: "error",
}

BUILTIN_NAMES = frozenset({"len", "first", "last", "rest", "push", "puts"})


def _token_width(tok: Tok, text: str, start: int) -> int:
    if tok.type != TT.STRING:
        return len(tok.literal)

    # Literal excludes the quotes; an unterminated string has no closing one.
    end = start + 1 + len(tok.literal)
    closed = end < len(text) and text[end] == '"'
    return len(tok.literal) + (2 if closed else 1)


def _group_for(tok: Tok) -> str:
    if tok.type == TT.IDENT and tok.literal in BUILTIN_NAMES:
        return "builtin"
    return _TT_GROUP.get(tok.type, "")


def _highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    result: StyleAndTextTuples = []
    pos = 0

    for tok in tokenize(text):
        if tok.type == TT.EOF:
            break

        tok_start = tok.column - 1
        width = _token_width(tok, text, tok_start)
        if width == 0:
            continue

        # Unstyled gap before token.
        if tok_start > pos:
            result.append(("", text[pos:tok_start]))

        style = GROUP_STYLE.get(_group_for(tok), "")
        result.append((style, text[tok_start:tok_start + width]))
        pos = tok_start + width

    # Trailing unstyled text.
    if pos < len(text):
        result.append(("", text[pos:]))

    return result if result else [("", text)]


class MonkeyLexer(Lexer):
    """prompt_toolkit Lexer that highlights Monkey source using the RD lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        # Pre-compute highlights for all lines.
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = _highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
