from __future__ import annotations

from typing import Dict

from ..ast import ArrayLiteral, FunctionLiteral, MapLiteral
from ..types import Environment, FkArray, FkFunction, FkMap, FkString, FkValue, FunkeyTypeError, ReturnValue
from .helpers import EvalFunc, Outcome, eval_all


def eval_array(node: ArrayLiteral, env: Environment, eval_func: EvalFunc) -> Outcome:
    elements = eval_all(node.elements, env, eval_func)
    if isinstance(elements, ReturnValue):
        return elements

    return FkArray(elements)


def eval_map(node: MapLiteral, env: Environment, eval_func: EvalFunc) -> Outcome:
    """Keys must be Strings; a later duplicate key overwrites the earlier value."""
    entries: Dict[str, FkValue] = {}

    for key_node, value_node in node.pairs:
        key = eval_func(key_node, env)
        if isinstance(key, ReturnValue):
            return key

        if not isinstance(key, FkString):
            raise FunkeyTypeError(f"unusable as map key: {key.type_name}")

        value = eval_func(value_node, env)
        if isinstance(value, ReturnValue):
            return value

        entries[key.value] = value

    return FkMap(entries)


def eval_function_literal(node: FunctionLiteral, env: Environment) -> FkFunction:
    # Captures the defining environment by reference.
    return FkFunction(list(node.parameters), node.body, env)
