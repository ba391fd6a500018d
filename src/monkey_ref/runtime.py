from __future__ import annotations

import importlib
from typing import Dict, List, Optional

from .types import (
    MkArray, MkBoolean, MkBuiltin, MkError, MkFunction, MkHash, MkInteger, MkNull,
    MkObject, MkReturnValue, MkString, BuiltinFn, HashKey, HashPair, ObjectType,
    TRUE, FALSE, NULL, native_bool_to_boolean, is_error, is_hashable,
    MonkeyRuntimeError, MonkeyTypeError, MonkeyArityError,
)
from .environment import Environment

_STDLIB_INITIALIZED = False

def init_stdlib() -> None:
    """Load stdlib modules (idempotent) so register_builtin hooks run."""
    global _STDLIB_INITIALIZED

    if _STDLIB_INITIALIZED:
        return

    importlib.import_module("monkey_ref.stdlib")
    _STDLIB_INITIALIZED = True


class Builtins:
    functions: Dict[str, MkBuiltin] = {}


def register_builtin(name: str):
    def dec(fn: BuiltinFn):
        Builtins.functions[name] = MkBuiltin(name=name, fn=fn)
        return fn

    return dec


def lookup_builtin(name: str) -> Optional[MkBuiltin]:
    init_stdlib()
    return Builtins.functions.get(name)


def call_builtin(builtin: MkBuiltin, args: List[MkObject]) -> MkObject:
    """Invoke a native function; its argument errors become Monkey errors."""
    try:
        return builtin.fn(args)
    except MonkeyRuntimeError as exc:
        return MkError(str(exc))


def expect_arity(args: List[MkObject], expected: int) -> None:
    if len(args) != expected:
        raise MonkeyArityError(f"wrong number of arguments. got = {len(args)}, want = {expected}")


def type_name(value: MkObject) -> str:
    return value.get_type().value


__all__ = [
    "MkArray", "MkBoolean", "MkBuiltin", "MkError", "MkFunction", "MkHash",
    "MkInteger", "MkNull", "MkObject", "MkReturnValue", "MkString",
    "HashKey", "HashPair", "ObjectType", "TRUE", "FALSE", "NULL",
    "native_bool_to_boolean", "is_error", "is_hashable",
    "MonkeyRuntimeError", "MonkeyTypeError", "MonkeyArityError",
    "Environment", "Builtins", "register_builtin", "lookup_builtin",
    "call_builtin", "expect_arity", "type_name", "init_stdlib",
]
