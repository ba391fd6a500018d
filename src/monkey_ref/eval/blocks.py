from __future__ import annotations

from typing import Callable, Iterable

from ..environment import Environment
from ..runtime import NULL, MkError, MkObject, MkReturnValue, is_error
from ..tree import AnyNode, BlockStatement, IfExpression, LetStatement, Program, ReturnStatement, Statement
from .helpers import is_truthy

EvalFunc = Callable[[AnyNode, Environment], MkObject]

def eval_program(program: Program, env: Environment, eval_func: EvalFunc) -> MkObject:
    result = _eval_statements(program.statements, env, eval_func)

    # Top level: a pending return is unwrapped here.
    if isinstance(result, MkReturnValue):
        return result.value
    return result

def eval_block(block: BlockStatement, env: Environment, eval_func: EvalFunc) -> MkObject:
    # Nested blocks hand the wrapped return upward so outer blocks stop too.
    return _eval_statements(block.statements, env, eval_func)

def _eval_statements(statements: Iterable[Statement], env: Environment, eval_func: EvalFunc) -> MkObject:
    result: MkObject = NULL

    for stmt in statements:
        result = eval_func(stmt, env)

        if isinstance(result, (MkReturnValue, MkError)):
            return result

    return result

def eval_if(node: IfExpression, env: Environment, eval_func: EvalFunc) -> MkObject:
    condition = eval_func(node.condition, env)
    if is_error(condition):
        return condition

    if is_truthy(condition):
        return eval_func(node.consequence, env)

    if node.alternative is not None:
        return eval_func(node.alternative, env)

    return NULL

def eval_let(node: LetStatement, env: Environment, eval_func: EvalFunc) -> MkObject:
    value = eval_func(node.value, env)
    if is_error(value):
        return value

    env.define(node.name.value, value)
    return NULL

def eval_return(node: ReturnStatement, env: Environment, eval_func: EvalFunc) -> MkObject:
    if node.return_value is None:
        return MkReturnValue(NULL)

    value = eval_func(node.return_value, env)
    if is_error(value):
        return value

    return MkReturnValue(value)
