"""AST node classes produced by the parser and read by the evaluator.

Every node can render itself back to source-like text with ``str(node)``;
the rendering is fully parenthesised for prefix/infix expressions so it
doubles as a readable dump of how operators were bound.

``to_lark`` converts a node into a ``lark.Tree`` for ``pretty()`` dumps.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from lark import Token as LarkToken, Tree as LarkTree
from typing_extensions import TypeAlias

from .token_types import Tok


@dataclass(frozen=True)
class Node:
    token: Tok

    def token_literal(self) -> str:
        return self.token.literal


# ---------- Expressions ----------

@dataclass(frozen=True)
class Identifier(Node):
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class IntegerLiteral(Node):
    value: int

    def __str__(self) -> str:
        return self.token.literal


@dataclass(frozen=True)
class BooleanLiteral(Node):
    value: bool

    def __str__(self) -> str:
        return self.token.literal


@dataclass(frozen=True)
class StringLiteral(Node):
    value: str

    def __str__(self) -> str:
        return self.token.literal


@dataclass(frozen=True)
class PrefixExpression(Node):
    operator: str
    right: 'Expression'

    def __str__(self) -> str:
        return f"({self.operator}{self.right})"


@dataclass(frozen=True)
class InfixExpression(Node):
    left: 'Expression'
    operator: str
    right: 'Expression'

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


@dataclass(frozen=True)
class IfExpression(Node):
    condition: 'Expression'
    consequence: 'BlockStatement'
    alternative: Optional['BlockStatement'] = None

    def __str__(self) -> str:
        out = f"if{self.condition} {self.consequence}"
        if self.alternative is not None:
            out += f"else {self.alternative}"
        return out


@dataclass(frozen=True)
class FunctionLiteral(Node):
    parameters: Tuple[Identifier, ...]
    body: 'BlockStatement'

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"{self.token_literal()}({params}) {self.body}"


@dataclass(frozen=True)
class CallExpression(Node):
    function: 'Expression'
    arguments: Tuple['Expression', ...]

    def __str__(self) -> str:
        args = ",".join(str(a) for a in self.arguments)
        return f"{self.function}({args})"


@dataclass(frozen=True)
class ArrayLiteral(Node):
    elements: Tuple['Expression', ...]

    def __str__(self) -> str:
        return "[" + ", ".join(str(e) for e in self.elements) + "]"


@dataclass(frozen=True)
class IndexExpression(Node):
    left: 'Expression'
    index: 'Expression'

    def __str__(self) -> str:
        return f"({self.left}[{self.index}])"


@dataclass(frozen=True)
class HashLiteral(Node):
    # Ordered (key, value) pairs; keys are arbitrary expressions.
    pairs: Tuple[Tuple['Expression', 'Expression'], ...]

    def __str__(self) -> str:
        return "{" + ", ".join(f"{k}:{v}" for k, v in self.pairs) + "}"


# ---------- Statements ----------

@dataclass(frozen=True)
class LetStatement(Node):
    name: Identifier
    value: 'Expression'

    def __str__(self) -> str:
        return f"{self.token_literal()} {self.name} = {self.value};"


@dataclass(frozen=True)
class ReturnStatement(Node):
    return_value: Optional['Expression'] = None

    def __str__(self) -> str:
        if self.return_value is None:
            return f"{self.token_literal()};"
        return f"{self.token_literal()} {self.return_value};"


@dataclass(frozen=True)
class ExpressionStatement(Node):
    expression: 'Expression'

    def __str__(self) -> str:
        return str(self.expression)


@dataclass(frozen=True)
class BlockStatement(Node):
    statements: Tuple['Statement', ...]

    def __str__(self) -> str:
        return "".join(str(s) for s in self.statements)


@dataclass(frozen=True)
class Program:
    statements: Tuple['Statement', ...]

    def token_literal(self) -> str:
        if self.statements:
            return self.statements[0].token_literal()
        return ""

    def __str__(self) -> str:
        return "".join(str(s) for s in self.statements)


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

Statement: TypeAlias = Union[LetStatement, ReturnStatement, ExpressionStatement]

AnyNode: TypeAlias = Union[Program, BlockStatement, Statement, Expression]


# ---------- Lark conversion ----------

def to_lark(node: AnyNode) -> LarkTree:
    """Convert an AST node into a lark Tree (rule names are snake_case)."""
    match node:
        case Program(statements=stmts):
            return LarkTree('program', [to_lark(s) for s in stmts])
        case BlockStatement(statements=stmts):
            return LarkTree('block', [to_lark(s) for s in stmts])
        case LetStatement(name=name, value=value):
            return LarkTree('let_stmt', [_leaf('IDENT', name.value), to_lark(value)])
        case ReturnStatement(return_value=value):
            return LarkTree('return_stmt', [] if value is None else [to_lark(value)])
        case ExpressionStatement(expression=expr):
            return LarkTree('expr_stmt', [to_lark(expr)])
        case Identifier(value=name):
            return LarkTree('ident', [_leaf('IDENT', name)])
        case IntegerLiteral(token=tok):
            return LarkTree('int', [_leaf('INT', tok.literal)])
        case BooleanLiteral(token=tok):
            return LarkTree('bool', [_leaf(tok.type.name, tok.literal)])
        case StringLiteral(value=value):
            return LarkTree('string', [_leaf('STRING', value)])
        case PrefixExpression(operator=op, right=right):
            return LarkTree('prefix', [_leaf('OP', op), to_lark(right)])
        case InfixExpression(left=left, operator=op, right=right):
            return LarkTree('infix', [to_lark(left), _leaf('OP', op), to_lark(right)])
        case IfExpression(condition=cond, consequence=cons, alternative=alt):
            children: List[Union[LarkTree, LarkToken]] = [to_lark(cond), to_lark(cons)]
            if alt is not None:
                children.append(to_lark(alt))
            return LarkTree('if_expr', children)
        case FunctionLiteral(parameters=params, body=body):
            paramlist = LarkTree('paramlist', [_leaf('IDENT', p.value) for p in params])
            return LarkTree('fn', [paramlist, to_lark(body)])
        case CallExpression(function=fn, arguments=args):
            return LarkTree('call', [to_lark(fn), LarkTree('args', [to_lark(a) for a in args])])
        case ArrayLiteral(elements=elements):
            return LarkTree('array', [to_lark(e) for e in elements])
        case IndexExpression(left=left, index=index):
            return LarkTree('index', [to_lark(left), to_lark(index)])
        case HashLiteral(pairs=pairs):
            return LarkTree('hash', [LarkTree('pair', [to_lark(k), to_lark(v)]) for k, v in pairs])
        case _:
            raise TypeError(f"Cannot convert {type(node).__name__} to a lark tree")


def _leaf(type_: str, value: str) -> LarkToken:
    return LarkToken(type_, value)
