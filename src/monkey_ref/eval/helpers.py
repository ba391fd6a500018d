from __future__ import annotations

from ..runtime import FALSE, NULL, MkError, MkObject, type_name


def is_truthy(val: MkObject) -> bool:
    """Only `false` and `null` are falsy; 0, "" and [] are truthy."""
    return val is not FALSE and val is not NULL


def new_error(message: str) -> MkError:
    return MkError(message)


def type_mismatch(left: MkObject, operator: str, right: MkObject) -> MkError:
    return new_error(f"type mismatch: {type_name(left)} {operator} {type_name(right)}")


def unknown_infix(left: MkObject, operator: str, right: MkObject) -> MkError:
    return new_error(f"unknown operator: {type_name(left)} {operator} {type_name(right)}")
