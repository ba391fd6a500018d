from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, ClassVar, Dict, List, Optional, Tuple, Union
from typing_extensions import Protocol, TypeAlias, TypeGuard, runtime_checkable

from .tree import BlockStatement, Identifier

if TYPE_CHECKING:
    from .environment import Environment

# ---------- Value Model ----------

class ObjectType(Enum):
    INTEGER = 'INTEGER'
    BOOLEAN = 'BOOLEAN'
    NULL = 'NULL'
    RETURN_VALUE = 'RETURN_VALUE'
    ERROR = 'ERROR'
    FUNCTION = 'FUNCTION'
    STRING = 'STRING'
    BUILTIN = 'BUILTIN'
    ARRAY = 'ARRAY'
    HASH = 'HASH'


@dataclass(frozen=True)
class HashKey:
    """Hash-map key: equal iff both the type tag and numeric value match."""
    type: ObjectType
    value: int


@runtime_checkable
class MkHashable(Protocol):
    def hash_key(self) -> HashKey: ...


class MkBase:
    TYPE: ClassVar[ObjectType]

    def get_type(self) -> ObjectType:
        return self.TYPE

    def inspect(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.inspect()


@dataclass(eq=False)
class MkInteger(MkBase):
    TYPE: ClassVar[ObjectType] = ObjectType.INTEGER
    value: int

    def hash_key(self) -> HashKey:
        return HashKey(self.TYPE, self.value)

    def inspect(self) -> str:
        return str(self.value)


@dataclass(eq=False)
class MkBoolean(MkBase):
    TYPE: ClassVar[ObjectType] = ObjectType.BOOLEAN
    value: bool

    def hash_key(self) -> HashKey:
        return HashKey(self.TYPE, 1 if self.value else 0)

    def inspect(self) -> str:
        return "true" if self.value else "false"


@dataclass(eq=False)
class MkString(MkBase):
    TYPE: ClassVar[ObjectType] = ObjectType.STRING
    value: str

    def hash_key(self) -> HashKey:
        return HashKey(self.TYPE, djb2(self.value))

    def inspect(self) -> str:
        return self.value


class MkNull(MkBase):
    TYPE: ClassVar[ObjectType] = ObjectType.NULL

    def inspect(self) -> str:
        return "null"

    def __repr__(self) -> str:
        return "NULL"


@dataclass(eq=False)
class MkReturnValue(MkBase):
    """Marks an early return while it bubbles out of nested blocks."""
    TYPE: ClassVar[ObjectType] = ObjectType.RETURN_VALUE
    value: 'MkObject'

    def inspect(self) -> str:
        return self.value.inspect()


@dataclass(eq=False)
class MkError(MkBase):
    TYPE: ClassVar[ObjectType] = ObjectType.ERROR
    message: str

    def inspect(self) -> str:
        return f"ERROR: {self.message}"


@dataclass(eq=False)
class MkFunction(MkBase):
    TYPE: ClassVar[ObjectType] = ObjectType.FUNCTION
    parameters: Tuple[Identifier, ...]
    body: BlockStatement            # shared with the FunctionLiteral
    env: 'Environment' = field(repr=False)  # defining scope, kept alive by the closure

    def inspect(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fn({params}) {{\n{self.body}\n}}"


BuiltinFn = Callable[[List['MkObject']], 'MkObject']

@dataclass(eq=False)
class MkBuiltin(MkBase):
    TYPE: ClassVar[ObjectType] = ObjectType.BUILTIN
    name: str
    fn: BuiltinFn = field(repr=False)

    def inspect(self) -> str:
        return "builtin function"


@dataclass(eq=False)
class MkArray(MkBase):
    TYPE: ClassVar[ObjectType] = ObjectType.ARRAY
    elements: List['MkObject']

    def inspect(self) -> str:
        return "[" + ", ".join(e.inspect() for e in self.elements) + "]"


@dataclass(frozen=True)
class HashPair:
    key: 'MkObject'
    value: 'MkObject'


@dataclass(eq=False)
class MkHash(MkBase):
    TYPE: ClassVar[ObjectType] = ObjectType.HASH
    pairs: Dict[HashKey, HashPair] = field(default_factory=dict)

    def inspect(self) -> str:
        items = [f"{p.key.inspect()}: {p.value.inspect()}" for p in self.pairs.values()]
        return "{" + ", ".join(items) + "}"


MkObject: TypeAlias = Union[
    MkInteger,
    MkBoolean,
    MkString,
    MkNull,
    MkReturnValue,
    MkError,
    MkFunction,
    MkBuiltin,
    MkArray,
    MkHash,
]

HASHABLE_TYPES: Tuple[type, ...] = (MkInteger, MkBoolean, MkString)

# Process-wide constants; compared by identity.
TRUE = MkBoolean(True)
FALSE = MkBoolean(False)
NULL = MkNull()


def native_bool_to_boolean(value: bool) -> MkBoolean:
    return TRUE if value else FALSE


def is_hashable(value: MkObject) -> TypeGuard[MkHashable]:
    return isinstance(value, HASHABLE_TYPES)


def is_error(value: Optional[MkObject]) -> TypeGuard[MkError]:
    return isinstance(value, MkError)


def djb2(text: str) -> int:
    """DJB2 over UTF-16 code units, signed 32-bit per step, unsigned result."""
    data = text.encode('utf-16-le')
    h = 5381

    for (unit,) in struct.iter_unpack('<H', data):
        h = _to_int32(h * 33 + unit)

    return h & 0xFFFFFFFF


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value

# ---------- Exceptions ----------

class MonkeyRuntimeError(Exception):
    """Host-level evaluation failure (never a Monkey-level error value)."""
    pass

class MonkeyTypeError(MonkeyRuntimeError):
    pass

class MonkeyArityError(MonkeyRuntimeError):
    pass
