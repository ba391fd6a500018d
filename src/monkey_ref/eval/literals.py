from __future__ import annotations

from typing import Callable, Dict

from ..environment import Environment
from ..runtime import (
    HashKey,
    HashPair,
    MkArray,
    MkError,
    MkHash,
    MkObject,
    MkString,
    is_error,
    is_hashable,
    lookup_builtin,
    type_name,
)
from ..tree import AnyNode, ArrayLiteral, HashLiteral, Identifier, StringLiteral
from .fn import eval_expressions
from .helpers import new_error

EvalFunc = Callable[[AnyNode, Environment], MkObject]

def eval_identifier(node: Identifier, env: Environment) -> MkObject:
    # User bindings shadow builtins of the same name.
    val = env.get(node.value)
    if val is not None:
        return val

    builtin = lookup_builtin(node.value)
    if builtin is not None:
        return builtin

    return new_error(f"identifier not found: {node.value}")

def eval_string_literal(node: StringLiteral) -> MkString:
    return MkString(node.value)

def eval_array_literal(node: ArrayLiteral, env: Environment, eval_func: EvalFunc) -> MkObject:
    elements = eval_expressions(node.elements, env, eval_func)
    if isinstance(elements, MkError):
        return elements

    return MkArray(elements)

def eval_hash_literal(node: HashLiteral, env: Environment, eval_func: EvalFunc) -> MkObject:
    """Pairs are evaluated in source order; a repeated key keeps the last value."""
    pairs: Dict[HashKey, HashPair] = {}

    for key_node, value_node in node.pairs:
        key = eval_func(key_node, env)
        if is_error(key):
            return key

        if not is_hashable(key):
            return unusable_key(key)

        value = eval_func(value_node, env)
        if is_error(value):
            return value

        pairs[key.hash_key()] = HashPair(key=key, value=value)

    return MkHash(pairs)

def unusable_key(key: MkObject) -> MkError:
    return new_error(f"unusable as hash key: {type_name(key)}")
