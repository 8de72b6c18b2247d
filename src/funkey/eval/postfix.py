from __future__ import annotations

from ..ast import CallExpression
from ..runtime import call_function
from ..types import (
    Environment,
    FkArray,
    FkInteger,
    FkMap,
    FkString,
    FkValue,
    FunkeyIndexError,
    FunkeyTypeError,
    ReturnValue,
)
from .helpers import EvalFunc, Outcome, eval_all


def eval_call(node: CallExpression, env: Environment, eval_func: EvalFunc) -> Outcome:
    callee = eval_func(node.function, env)
    if isinstance(callee, ReturnValue):
        return callee

    args = eval_all(node.arguments, env, eval_func)
    if isinstance(args, ReturnValue):
        return args

    return call_function(callee, args)


def eval_index(target: FkValue, index: FkValue) -> FkValue:
    match target, index:
        case FkArray(elements=elements), FkInteger(value=i):
            if i < 0 or i >= len(elements):
                raise FunkeyIndexError()
            return elements[i]
        case FkMap(), FkString(value=key):
            return target.get(key)
        case _:
            raise FunkeyTypeError("index expression is not valid")


def eval_dot(target: FkValue, name: str) -> FkValue:
    """Member access: `.length` on strings and arrays, keys on maps."""
    match target:
        case FkString(value=s) if name == 'length':
            return FkInteger(len(s))
        case FkArray(elements=elements) if name == 'length':
            return FkInteger(len(elements))
        case FkMap():
            return target.get(name)
        case _:
            raise FunkeyTypeError(f"invalid operation: {target.type_name}.{name}")
