from __future__ import annotations

from typing import Callable

from ..environment import Environment
from ..runtime import (
    MkInteger,
    MkObject,
    MkString,
    is_error,
    native_bool_to_boolean,
    type_name,
)
from ..tree import AnyNode, InfixExpression, PrefixExpression
from .helpers import is_truthy, new_error, type_mismatch, unknown_infix

EvalFunc = Callable[[AnyNode, Environment], MkObject]

def eval_prefix(node: PrefixExpression, env: Environment, eval_func: EvalFunc) -> MkObject:
    right = eval_func(node.right, env)
    if is_error(right):
        return right

    return apply_prefix_operator(node.operator, right)

def apply_prefix_operator(operator: str, right: MkObject) -> MkObject:
    match operator:
        case '!':
            return native_bool_to_boolean(not is_truthy(right))
        case '-':
            if not isinstance(right, MkInteger):
                return new_error(f"unknown operator: -{type_name(right)}")
            return MkInteger(-right.value)
        case _:
            return new_error(f"unknown operator: {operator}{type_name(right)}")

def eval_infix(node: InfixExpression, env: Environment, eval_func: EvalFunc) -> MkObject:
    left = eval_func(node.left, env)
    if is_error(left):
        return left

    right = eval_func(node.right, env)
    if is_error(right):
        return right

    return apply_binary_operator(node.operator, left, right)

def apply_binary_operator(operator: str, left: MkObject, right: MkObject) -> MkObject:
    match (left, right):
        case (MkInteger(), MkInteger()):
            return _integer_infix(operator, left, right)
        case (MkString(), MkString()):
            return _string_infix(operator, left, right)

    # Booleans and null are singletons, so identity gives value equality.
    if operator == '==':
        return native_bool_to_boolean(left is right)
    if operator == '!=':
        return native_bool_to_boolean(left is not right)

    if left.get_type() != right.get_type():
        return type_mismatch(left, operator, right)
    return unknown_infix(left, operator, right)

def _integer_infix(operator: str, left: MkInteger, right: MkInteger) -> MkObject:
    a, b = left.value, right.value

    match operator:
        case '+':
            return MkInteger(a + b)
        case '-':
            return MkInteger(a - b)
        case '*':
            return MkInteger(a * b)
        case '/':
            if b == 0:
                return new_error("division by zero")
            return MkInteger(_truncating_div(a, b))
        case '<':
            return native_bool_to_boolean(a < b)
        case '>':
            return native_bool_to_boolean(a > b)
        case '==':
            return native_bool_to_boolean(a == b)
        case '!=':
            return native_bool_to_boolean(a != b)
        case _:
            return unknown_infix(left, operator, right)

def _truncating_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q

def _string_infix(operator: str, left: MkString, right: MkString) -> MkObject:
    if operator != '+':
        return unknown_infix(left, operator, right)

    return MkString(left.value + right.value)
