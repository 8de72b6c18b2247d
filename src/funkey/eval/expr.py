from __future__ import annotations

from typing import Callable, Dict

from ..types import (
    FkInteger,
    FkString,
    FkValue,
    FunkeyRuntimeError,
    FunkeyTypeError,
    native_bool,
    wrap_int,
)
from .helpers import is_truthy


def eval_prefix(op: str, rhs: FkValue) -> FkValue:
    match op:
        case '!':
            return native_bool(not is_truthy(rhs))
        case '-':
            if not isinstance(rhs, FkInteger):
                raise FunkeyTypeError(f"unknown operator: -{rhs.type_name}")
            return FkInteger(wrap_int(-rhs.value))
        case _:
            raise FunkeyTypeError(f"unknown operator: {op}{rhs.type_name}")


# ---------------- integer arithmetic ----------------

def _div(a: int, b: int) -> int:
    if b == 0:
        raise FunkeyRuntimeError("division by zero")

    q = abs(a) // abs(b)
    return -q if (a < 0) != (b < 0) else q


def _mod(a: int, b: int) -> int:
    if b == 0:
        raise FunkeyRuntimeError("division by zero")

    r = abs(a) % abs(b)
    return -r if a < 0 else r


_INT_ARITH: Dict[str, Callable[[int, int], int]] = {
    '+': lambda a, b: a + b,
    '-': lambda a, b: a - b,
    '*': lambda a, b: a * b,
    '/': _div,
    '%': _mod,
}

_INT_COMPARE: Dict[str, Callable[[int, int], bool]] = {
    '<': lambda a, b: a < b,
    '<=': lambda a, b: a <= b,
    '>': lambda a, b: a > b,
    '>=': lambda a, b: a >= b,
}


def eval_infix(op: str, lhs: FkValue, rhs: FkValue) -> FkValue:
    if op == '==':
        return native_bool(lhs.equals(rhs))
    if op == '!=':
        return native_bool(lhs.equals(rhs)).invert()

    match lhs, rhs:
        case FkInteger(value=a), FkInteger(value=b):
            if op in _INT_ARITH:
                return FkInteger(wrap_int(_INT_ARITH[op](a, b)))
            if op in _INT_COMPARE:
                return native_bool(_INT_COMPARE[op](a, b))
        case FkString(value=a), FkString(value=b) if op == '+':
            return FkString(a + b)

    if type(lhs) is not type(rhs):
        raise FunkeyTypeError(f"type mismatch: {lhs.type_name} {op} {rhs.type_name}")

    raise FunkeyTypeError(f"unknown operator: {lhs.type_name} {op} {rhs.type_name}")
