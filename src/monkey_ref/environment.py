from __future__ import annotations

from typing import Dict, Optional

from .types import MkObject


class Environment:
    """Name -> object bindings plus an optional enclosing scope.

    Lookups walk outward through `outer`; `define` only ever writes the
    local store, so inner bindings shadow outer ones without touching them.
    """

    def __init__(self, outer: Optional['Environment'] = None):
        self.outer = outer
        self.store: Dict[str, MkObject] = {}

    def get(self, name: str) -> Optional[MkObject]:
        env: Optional[Environment] = self

        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer

        return None

    def define(self, name: str, val: MkObject) -> MkObject:
        self.store[name] = val
        return val

    def enclosed(self) -> 'Environment':
        return Environment(outer=self)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

