from __future__ import annotations

import importlib
from typing import Callable, Dict, List, Optional

from .types import (
    Environment,
    FkBuiltin,
    FkFunction,
    FkValue,
    FunkeyArityError,
    FunkeyTypeError,
    NULL,
    ReturnValue,
)

_STDLIB_INITIALIZED = False


class Builtins:
    """Native functions visible to every program after the environment chain."""

    functions: Dict[str, FkBuiltin] = {}


def init_stdlib() -> None:
    """Load stdlib modules (idempotent) so register_builtin hooks run."""
    global _STDLIB_INITIALIZED

    if _STDLIB_INITIALIZED:
        return

    importlib.import_module("funkey.stdlib")
    _STDLIB_INITIALIZED = True


def register_builtin(name: str):
    def dec(fn: Callable[..., FkValue]):
        Builtins.functions[name] = FkBuiltin(name=name, fn=fn)
        return fn

    return dec


def lookup_builtin(name: str) -> Optional[FkBuiltin]:
    return Builtins.functions.get(name)


def expect_arity(args: List[FkValue], expected: int) -> None:
    if len(args) != expected:
        raise FunkeyArityError(f"wrong number of arguments. got={len(args)}, want={expected}")


def make_print_builtin(sink: Callable[..., None]) -> FkBuiltin:
    """Wrap a host callback as a `print` built-in that yields null."""

    def _print(*args: FkValue) -> FkValue:
        sink(*args)
        return NULL

    return FkBuiltin(name="print", fn=_print)


def call_function(callee: FkValue, args: List[FkValue]) -> FkValue:
    match callee:
        case FkFunction():
            return _call_fkfn(callee, args)
        case FkBuiltin():
            return callee.apply(args)
        case _:
            raise FunkeyTypeError("it is not a function")


def _call_fkfn(fn: FkFunction, args: List[FkValue]) -> FkValue:
    from .evaluator import eval_node  # local import to avoid cycle

    if len(args) != len(fn.parameters):
        raise FunkeyArityError(
            f"arguments count mismatch: got={len(args)}, want={len(fn.parameters)}"
        )

    # Child of the closure environment, not the caller's.
    callee_env = Environment(parent=fn.env)

    for param, val in zip(fn.parameters, args):
        callee_env.define(param.name, val)

    result = eval_node(fn.body, callee_env)

    if isinstance(result, ReturnValue):
        return result.value

    return result
