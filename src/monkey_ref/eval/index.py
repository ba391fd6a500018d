from __future__ import annotations

from typing import Callable

from ..environment import Environment
from ..runtime import NULL, MkArray, MkHash, MkInteger, MkObject, is_error, is_hashable, type_name
from ..tree import AnyNode, IndexExpression
from .helpers import new_error
from .literals import unusable_key

EvalFunc = Callable[[AnyNode, Environment], MkObject]

def eval_index(node: IndexExpression, env: Environment, eval_func: EvalFunc) -> MkObject:
    left = eval_func(node.left, env)
    if is_error(left):
        return left

    index = eval_func(node.index, env)
    if is_error(index):
        return index

    return apply_index(left, index)

def apply_index(left: MkObject, index: MkObject) -> MkObject:
    match (left, index):
        case (MkArray(), MkInteger()):
            return _array_index(left, index)
        case (MkHash(), _):
            return _hash_index(left, index)
        case _:
            return new_error(f"index operator not supported: {type_name(left)}")

def _array_index(arr: MkArray, index: MkInteger) -> MkObject:
    # No negative indexing: anything outside [0, len) is null.
    i = index.value
    if i < 0 or i >= len(arr.elements):
        return NULL

    return arr.elements[i]

def _hash_index(h: MkHash, index: MkObject) -> MkObject:
    if not is_hashable(index):
        return unusable_key(index)

    pair = h.pairs.get(index.hash_key())
    if pair is None:
        return NULL

    return pair.value
