from __future__ import annotations

from typing import Iterable

from ..ast import AssignExpression, ForStatement, Identifier, LetStatement, Statement
from ..types import NULL, Environment, FunkeyNameError, ReturnValue
from .helpers import EvalFunc, Outcome, is_truthy


def eval_statements(statements: Iterable[Statement], env: Environment, eval_func: EvalFunc) -> Outcome:
    """Run statements in order, stopping at the first `return`.

    The result is the last expression statement's value; let and for
    statements leave it unchanged.
    """
    result: Outcome = NULL

    for stmt in statements:
        outcome = eval_func(stmt, env)

        if isinstance(outcome, ReturnValue):
            return outcome

        if not isinstance(stmt, (LetStatement, ForStatement)):
            result = outcome

    return result


def eval_let(node: LetStatement, env: Environment, eval_func: EvalFunc) -> Outcome:
    cell = env.declare(node.name.name)

    if node.value is not None:
        value = eval_func(node.value, env)
        if isinstance(value, ReturnValue):
            return value
        cell.value = value

    return NULL


def eval_for(node: ForStatement, env: Environment, eval_func: EvalFunc) -> Outcome:
    if node.init is not None:
        init = eval_func(node.init, env)
        if isinstance(init, ReturnValue):
            return init

    while True:
        cond = NULL if node.condition is None else eval_func(node.condition, env)
        if isinstance(cond, ReturnValue):
            return cond
        if node.condition is not None and not is_truthy(cond):
            return NULL

        outcome = eval_func(node.body, env)
        if isinstance(outcome, ReturnValue):
            return outcome

        if node.update is not None:
            update = eval_func(node.update, env)
            if isinstance(update, ReturnValue):
                return update


def eval_assign(node: AssignExpression, env: Environment, eval_func: EvalFunc) -> Outcome:
    target = node.target

    if not isinstance(target, Identifier) or not env.has(target.name):
        raise FunkeyNameError("invalid assignment target")

    value = eval_func(node.value, env)
    if isinstance(value, ReturnValue):
        return value

    env.set(target.name, value)
    return value
