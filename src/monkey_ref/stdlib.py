"""Built-in functions (len, first, last, rest, push, puts) registered via runtime."""

from __future__ import annotations

from typing import List

from .runtime import (
    NULL,
    MkArray,
    MkInteger,
    MkObject,
    MkString,
    MonkeyTypeError,
    expect_arity,
    register_builtin,
    type_name,
)

def _array_arg(name: str, arg: MkObject) -> MkArray:
    if isinstance(arg, MkArray):
        return arg

    raise MonkeyTypeError(f"argument to `{name}` must be ARRAY, got {type_name(arg)}")

@register_builtin("len")
def std_len(args: List[MkObject]) -> MkObject:
    expect_arity(args, 1)
    arg = args[0]

    if isinstance(arg, MkString):
        return MkInteger(len(arg.value))

    raise MonkeyTypeError(f"argument to `len` not supported, got {type_name(arg)}")

@register_builtin("first")
def std_first(args: List[MkObject]) -> MkObject:
    expect_arity(args, 1)
    arr = _array_arg("first", args[0])

    return arr.elements[0] if arr.elements else NULL

@register_builtin("last")
def std_last(args: List[MkObject]) -> MkObject:
    expect_arity(args, 1)
    arr = _array_arg("last", args[0])

    return arr.elements[-1] if arr.elements else NULL

@register_builtin("rest")
def std_rest(args: List[MkObject]) -> MkObject:
    expect_arity(args, 1)
    arr = _array_arg("rest", args[0])

    if not arr.elements:
        return NULL
    return MkArray(list(arr.elements[1:]))

@register_builtin("push")
def std_push(args: List[MkObject]) -> MkObject:
    expect_arity(args, 2)
    arr = _array_arg("push", args[0])

    # The input array is never mutated.
    return MkArray([*arr.elements, args[1]])

@register_builtin("puts")
def std_puts(args: List[MkObject]) -> MkObject:
    for arg in args:
        print(arg.inspect())
    return NULL
