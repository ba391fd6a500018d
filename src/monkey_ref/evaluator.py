from __future__ import annotations

import sys
from typing import Callable, Dict, Optional, Type

from .environment import Environment
from .runtime import MkInteger, MkObject, MonkeyRuntimeError, init_stdlib, native_bool_to_boolean
from .tree import (
    AnyNode,
    ArrayLiteral,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
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
    StringLiteral,
)

from .eval.blocks import eval_block, eval_if, eval_let, eval_program, eval_return
from .eval.expr import eval_infix, eval_prefix
from .eval.fn import eval_call, eval_function_literal
from .eval.index import eval_index
from .eval.literals import eval_array_literal, eval_hash_literal, eval_identifier, eval_string_literal

# Each Monkey call costs roughly fifteen Python frames.
EVAL_RECURSION_LIMIT = 10_000

# ---------------- Public API ----------------

def evaluate(node: AnyNode, env: Optional[Environment]=None) -> MkObject:
    """Evaluate a parsed program (or any node) and return its value.

    Monkey-level failures come back as MkError values. A fresh top-level
    environment is created when none is given; pass one in to keep
    bindings across calls, as the REPL does.
    """
    init_stdlib()

    if env is None:
        env = Environment()

    previous = sys.getrecursionlimit()
    sys.setrecursionlimit(max(previous, EVAL_RECURSION_LIMIT))
    try:
        return eval_node(node, env)
    finally:
        sys.setrecursionlimit(previous)

# ---------------- Core evaluator ----------------

def eval_node(n: AnyNode, env: Environment) -> MkObject:
    handler = _NODE_DISPATCH.get(type(n))
    if handler is not None:
        return handler(n, env)

    match n:
        case Program():
            return eval_program(n, env, eval_node)
        case ExpressionStatement():
            return eval_node(n.expression, env)
        case BlockStatement():
            return eval_block(n, env, eval_node)
        case LetStatement():
            return eval_let(n, env, eval_node)
        case ReturnStatement():
            return eval_return(n, env, eval_node)
        case IfExpression():
            return eval_if(n, env, eval_node)
        case PrefixExpression():
            return eval_prefix(n, env, eval_node)
        case InfixExpression():
            return eval_infix(n, env, eval_node)
        case CallExpression():
            return eval_call(n, env, eval_node)
        case IndexExpression():
            return eval_index(n, env, eval_node)
        case ArrayLiteral():
            return eval_array_literal(n, env, eval_node)
        case HashLiteral():
            return eval_hash_literal(n, env, eval_node)
        case _:
            raise MonkeyRuntimeError(f"Unknown node: {type(n).__name__}")

# ---------------- Leaf dispatch ----------------

_NODE_DISPATCH: Dict[Type, Callable[[AnyNode, Environment], MkObject]] = {
    IntegerLiteral: lambda n, env: MkInteger(n.value),
    BooleanLiteral: lambda n, env: native_bool_to_boolean(n.value),
    StringLiteral: lambda n, env: eval_string_literal(n),
    Identifier: lambda n, env: eval_identifier(n, env),
    FunctionLiteral: lambda n, env: eval_function_literal(n, env),
}
