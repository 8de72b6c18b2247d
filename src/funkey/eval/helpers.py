from __future__ import annotations

from typing import Callable, Iterable, List, Union

from ..ast import AnyNode
from ..types import Environment, FkBoolean, FkInteger, FkValue, ReturnValue

Outcome = Union[FkValue, ReturnValue]
EvalFunc = Callable[[AnyNode, Environment], Outcome]


def is_truthy(val: FkValue) -> bool:
    match val:
        case FkBoolean(value=b):
            return b
        case FkInteger(value=num):
            return num != 0
        case _:
            return False


def eval_all(
    nodes: Iterable[AnyNode], env: Environment, eval_func: EvalFunc
) -> Union[List[FkValue], ReturnValue]:
    """Evaluate left to right; a `return` stops the rest and is handed back."""
    values: List[FkValue] = []

    for node in nodes:
        outcome = eval_func(node, env)
        if isinstance(outcome, ReturnValue):
            return outcome
        values.append(outcome)

    return values


def unwrap(result: Outcome) -> FkValue:
    """Function and Program boundaries want the value a `return` carried."""
    if isinstance(result, ReturnValue):
        return result.value

    return result
