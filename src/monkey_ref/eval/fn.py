from __future__ import annotations

from typing import Callable, List, Sequence, Union

from ..environment import Environment
from ..runtime import (
    MkBuiltin,
    MkError,
    MkFunction,
    MkObject,
    MkReturnValue,
    call_builtin,
    is_error,
    type_name,
)
from ..tree import AnyNode, CallExpression, Expression, FunctionLiteral
from .helpers import new_error

EvalFunc = Callable[[AnyNode, Environment], MkObject]

def eval_function_literal(node: FunctionLiteral, env: Environment) -> MkFunction:
    # Capture by reference: later bindings in `env` stay visible to the body.
    return MkFunction(parameters=node.parameters, body=node.body, env=env)

def eval_call(node: CallExpression, env: Environment, eval_func: EvalFunc) -> MkObject:
    function = eval_func(node.function, env)
    if is_error(function):
        return function

    args = eval_expressions(node.arguments, env, eval_func)
    if isinstance(args, MkError):
        return args

    return apply_function(function, args, eval_func)

def eval_expressions(
    exprs: Sequence[Expression], env: Environment, eval_func: EvalFunc
) -> Union[List[MkObject], MkError]:
    """Evaluate left to right; the first error aborts the whole list."""
    result: List[MkObject] = []

    for expr in exprs:
        evaluated = eval_func(expr, env)
        if is_error(evaluated):
            return evaluated
        result.append(evaluated)

    return result

def apply_function(fn: MkObject, args: List[MkObject], eval_func: EvalFunc) -> MkObject:
    match fn:
        case MkFunction():
            extended = extend_function_env(fn, args)
            evaluated = eval_func(fn.body, extended)
            return unwrap_return_value(evaluated)
        case MkBuiltin():
            return call_builtin(fn, args)
        case _:
            return new_error(f"not a function: {type_name(fn)}")

def extend_function_env(fn: MkFunction, args: List[MkObject]) -> Environment:
    """Child of the captured scope with parameters bound positionally.

    Arity is not checked: missing parameters stay unbound and extra
    arguments are dropped.
    """
    env = fn.env.enclosed()

    for param, arg in zip(fn.parameters, args):
        env.define(param.value, arg)

    return env

def unwrap_return_value(obj: MkObject) -> MkObject:
    if isinstance(obj, MkReturnValue):
        return obj.value
    return obj
