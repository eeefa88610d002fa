from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, ClassVar, Dict, Iterator, List, Mapping, Optional, Tuple
from typing_extensions import TypeAlias, TypeGuard

from .ast_nodes import BlockStatement, Identifier, to_source_string

# Integers are signed 64-bit
INT64_MIN = -2**63
INT64_MAX = 2**63 - 1

# ---------- Value Model ----------
# Every value carries a `kind` discriminant; it is what error messages print.

@dataclass
class MkNull:
    kind: ClassVar[str] = "NULL"
    def __repr__(self) -> str:
        return "null"

@dataclass
class MkInteger:
    kind: ClassVar[str] = "INTEGER"
    value: int
    def __repr__(self) -> str:
        return str(self.value)

@dataclass
class MkBool:
    kind: ClassVar[str] = "BOOLEAN"
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

@dataclass
class MkString:
    kind: ClassVar[str] = "STRING"
    value: str
    def __repr__(self) -> str:
        return f'"{self.value}"'

@dataclass
class MkArray:
    kind: ClassVar[str] = "ARRAY"
    items: List['MkValue']
    def __repr__(self) -> str:
        return "[" + ", ".join(repr(x) for x in self.items) + "]"

@dataclass(eq=False)
class MkFn:
    kind: ClassVar[str] = "FUNCTION"
    parameters: Tuple[Identifier, ...]
    body: BlockStatement
    env: 'Environment'  # closure, shared with every fn created in the same scope
    def __repr__(self) -> str:
        params = ", ".join(p.name for p in self.parameters)
        return f"fn({params}) {{\n{to_source_string(self.body)}\n}}"

BuiltinFn = Callable[[List['MkValue']], 'MkValue']

@dataclass(frozen=True)
class MkBuiltin:
    kind: ClassVar[str] = "BUILTIN"
    name: str
    arity: int
    fn: BuiltinFn
    def __repr__(self) -> str:
        return "builtin function"

@dataclass
class MkError:
    kind: ClassVar[str] = "ERROR"
    message: str
    def __repr__(self) -> str:
        return f"ERROR: {self.message}"

@dataclass
class MkReturn:
    """Carries a `return` value up through nested blocks to the call boundary."""
    kind: ClassVar[str] = "RETURN_VALUE"
    value: 'MkValue'
    def __repr__(self) -> str:
        return repr(self.value)

MkValue: TypeAlias = (
    MkNull
    | MkInteger
    | MkBool
    | MkString
    | MkArray
    | MkFn
    | MkBuiltin
    | MkError
    | MkReturn
)

NULL = MkNull()
TRUE = MkBool(True)
FALSE = MkBool(False)

def native_bool(value: bool) -> MkBool:
    return TRUE if value else FALSE

def is_error(value: object) -> TypeGuard[MkError]:
    return isinstance(value, MkError)

# ---------- Builtin registry ----------

@dataclass(frozen=True)
class BuiltinRegistry:
    """Read-only name -> builtin table, built once and shared by reference."""
    entries: Mapping[str, MkBuiltin] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_builtins(cls, builtins: Dict[str, MkBuiltin]) -> 'BuiltinRegistry':
        return cls(MappingProxyType(dict(builtins)))

    def get(self, name: str) -> Optional[MkBuiltin]:
        return self.entries.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

# ---------- Environment ----------

class Environment:
    def __init__(self, outer: Optional['Environment']=None, builtins: Optional[BuiltinRegistry]=None):
        self.outer = outer
        self.store: Dict[str, MkValue] = {}

        if builtins is not None:
            self.builtins = builtins
        elif outer is not None:
            self.builtins = outer.builtins
        else:
            self.builtins = BuiltinRegistry()

    def get(self, name: str) -> Optional[MkValue]:
        if name in self.store:
            return self.store[name]

        if self.outer is not None:
            return self.outer.get(name)

        return None

    def set(self, name: str, val: MkValue) -> MkValue:
        # Always local: shadows, never rebinds an outer scope
        self.store[name] = val
        return val

    def enclosed(self) -> 'Environment':
        return Environment(outer=self)

# ---------- Exceptions (outer surfaces only) ----------

class MonkeyError(Exception):
    """Base for host exceptions raised by the runner/REPL layer.

    Runtime failures inside the language are MkError values, not these.
    """
