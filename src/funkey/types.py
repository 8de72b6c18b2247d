from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, ClassVar, Dict, List, Optional

from typing_extensions import TypeAlias

from .ast import BlockStatement, Identifier

# ---------- Value Model ----------

INT_BITS = 64
INT_MIN = -(1 << (INT_BITS - 1))
INT_MAX = (1 << (INT_BITS - 1)) - 1


def wrap_int(value: int) -> int:
    """Reduce a Python int to signed 64-bit two's-complement."""
    value &= (1 << INT_BITS) - 1

    if value > INT_MAX:
        value -= 1 << INT_BITS

    return value


class FkObject:
    """Every runtime value exposes a type tag, its text form and equality."""

    type_name: ClassVar[str] = "Object"

    def inspect(self) -> str:
        raise NotImplementedError

    def equals(self, other: 'FkValue') -> bool:
        # Reference equality unless the value type says otherwise.
        return self is other

    def __repr__(self) -> str:
        return self.inspect()


@dataclass(frozen=True, repr=False)
class FkInteger(FkObject):
    value: int
    type_name: ClassVar[str] = "Integer"

    def inspect(self) -> str:
        return str(self.value)

    def equals(self, other: 'FkValue') -> bool:
        return isinstance(other, FkInteger) and other.value == self.value


@dataclass(frozen=True, repr=False)
class FkBoolean(FkObject):
    value: bool
    type_name: ClassVar[str] = "Boolean"

    def inspect(self) -> str:
        return "true" if self.value else "false"

    def equals(self, other: 'FkValue') -> bool:
        return isinstance(other, FkBoolean) and other.value == self.value

    def invert(self) -> 'FkBoolean':
        return FALSE if self.value else TRUE


@dataclass(frozen=True, repr=False)
class FkString(FkObject):
    value: str
    type_name: ClassVar[str] = "String"

    def inspect(self) -> str:
        return self.value

    def equals(self, other: 'FkValue') -> bool:
        return isinstance(other, FkString) and other.value == self.value


@dataclass(eq=False, repr=False)
class FkArray(FkObject):
    elements: List['FkValue']
    type_name: ClassVar[str] = "Array"

    def inspect(self) -> str:
        return "[" + ", ".join(e.inspect() for e in self.elements) + "]"


@dataclass(eq=False, repr=False)
class FkMap(FkObject):
    """String-keyed mapping; text form follows insertion order."""

    entries: Dict[str, 'FkValue']
    type_name: ClassVar[str] = "Map"

    def inspect(self) -> str:
        pairs = []

        for k, v in self.entries.items():
            pairs.append(f"{k}:{v.inspect()}")

        return "{" + ", ".join(pairs) + "}"

    def get(self, key: str) -> 'FkValue':
        return self.entries.get(key, NULL)


@dataclass(eq=False, repr=False)
class FkFunction(FkObject):
    parameters: List[Identifier]
    body: BlockStatement
    env: 'Environment'  # closure environment
    type_name: ClassVar[str] = "Function"

    def inspect(self) -> str:
        params = ", ".join(p.name for p in self.parameters)
        return f"fn({params}) {{\n{self.body}\n}}"


BuiltinFn = Callable[..., 'FkValue']


@dataclass(eq=False, repr=False)
class FkBuiltin(FkObject):
    name: str
    fn: BuiltinFn
    type_name: ClassVar[str] = "BuiltinFunction"

    def inspect(self) -> str:
        return f"[Builtin: {self.name}]"

    def apply(self, args: List['FkValue']) -> 'FkValue':
        return self.fn(*args)


@dataclass(eq=False, repr=False)
class FkNull(FkObject):
    type_name: ClassVar[str] = "Null"

    def inspect(self) -> str:
        return "null"

    def equals(self, other: 'FkValue') -> bool:
        return isinstance(other, FkNull)


TRUE = FkBoolean(True)
FALSE = FkBoolean(False)
NULL = FkNull()


def native_bool(value: bool) -> FkBoolean:
    return TRUE if value else FALSE


FkValue: TypeAlias = (
    FkInteger
    | FkBoolean
    | FkString
    | FkArray
    | FkMap
    | FkFunction
    | FkBuiltin
    | FkNull
)


@dataclass(frozen=True)
class ReturnValue:
    """Outcome of a statement that hit `return`; unwrapped at function and
    program boundaries."""

    value: FkValue


# ---------- Errors ----------

class FunkeyRuntimeError(Exception):
    line: Optional[int]
    column: Optional[int]

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.line = None
        self.column = None

    def location(self) -> str:
        if self.line is None:
            return self.message

        return f"{self.message} (line {self.line}, col {self.column})"


class FunkeyNameError(FunkeyRuntimeError):
    pass


class FunkeyTypeError(FunkeyRuntimeError):
    pass


class FunkeyArityError(FunkeyRuntimeError):
    pass


class FunkeyIndexError(FunkeyRuntimeError):
    def __init__(self, message: str = "index out of bound"):
        super().__init__(message)


class EvaluationError(Exception):
    """Single reportable failure raised at the Program boundary."""

    def __init__(self, inner: Exception):
        super().__init__(str(inner))
        self.inner = inner


# ---------- Environment ----------

@dataclass
class Cell:
    value: FkValue = field(default_factory=lambda: NULL)


class Environment:
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.vars: Dict[str, Cell] = {}

    def _find(self, name: str) -> Optional[Cell]:
        env: Optional[Environment] = self

        while env is not None:
            cell = env.vars.get(name)
            if cell is not None:
                return cell
            env = env.parent

        return None

    def declare(self, name: str) -> Cell:
        if name in self.vars:
            raise FunkeyNameError(f"identifier has been declared: {name}")

        cell = Cell()
        self.vars[name] = cell
        return cell

    def define(self, name: str, value: FkValue) -> None:
        self.declare(name).value = value

    def has(self, name: str) -> bool:
        return self._find(name) is not None

    def get(self, name: str) -> FkValue:
        cell = self._find(name)
        if cell is None:
            raise FunkeyNameError(f"identifier not found: {name}")

        return cell.value

    def set(self, name: str, value: FkValue) -> None:
        cell = self._find(name)
        if cell is None:
            raise FunkeyNameError(f"identifier not found: {name}")

        cell.value = value
