from __future__ import annotations

from .runtime import expect_arity, register_builtin
from .types import FkArray, FkInteger, FkString, FkValue, FunkeyTypeError


@register_builtin("len")
def _len(*args: FkValue) -> FkInteger:
    expect_arity(list(args), 1)
    arg = args[0]

    match arg:
        case FkString(value=s):
            return FkInteger(len(s))
        case FkArray(elements=elements):
            return FkInteger(len(elements))
        case _:
            raise FunkeyTypeError(f"argument to `len` not supported, got {arg.type_name}")
