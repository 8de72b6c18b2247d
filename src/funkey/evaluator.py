from __future__ import annotations

from typing import Optional

from typing_extensions import assert_never

from .ast import (
    AnyNode,
    ArrayLiteral,
    AssignExpression,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    DotExpression,
    ExpressionStatement,
    ForStatement,
    FunctionLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    MapLiteral,
    PrefixExpression,
    Program,
    ReturnStatement,
    StringLiteral,
)
from .eval.blocks import eval_assign, eval_for, eval_let, eval_statements
from .eval.expr import eval_infix, eval_prefix
from .eval.helpers import Outcome, eval_all, is_truthy, unwrap
from .eval.literals import eval_array, eval_function_literal, eval_map
from .eval.postfix import eval_call, eval_dot, eval_index
from .runtime import init_stdlib, lookup_builtin
from .types import (
    NULL,
    Environment,
    EvaluationError,
    FkInteger,
    FkString,
    FkValue,
    FunkeyRuntimeError,
    ReturnValue,
    native_bool,
)

def _maybe_attach_location(exc: FunkeyRuntimeError, node: AnyNode) -> None:
    # First attachment wins, so the innermost failing node is reported.
    if exc.line is not None:
        return

    tok = getattr(node, 'token', None)
    if tok is None or not tok.line:
        return

    exc.line = tok.line
    exc.column = tok.column

# ---------------- Public API ----------------

def evaluate(node: AnyNode, env: Optional[Environment] = None) -> FkValue:
    """Evaluate a node and return its value.

    A Program is the reporting boundary: any failure under it comes out as a
    single EvaluationError chained to the original error, including errors
    raised by host callbacks such as a `print` sink. Stack exhaustion is not
    wrapped. Other nodes raise the FunkeyRuntimeError itself. A pending
    `return` is unwrapped.
    """
    init_stdlib()

    if env is None:
        env = Environment()

    if isinstance(node, Program):
        try:
            return unwrap(eval_node(node, env))
        except RecursionError:
            raise
        except Exception as e:
            raise EvaluationError(e) from e

    return unwrap(eval_node(node, env))

# ---------------- Core evaluator ----------------

def eval_node(n: AnyNode, env: Environment) -> Outcome:
    try:
        return _eval_node_inner(n, env)
    except FunkeyRuntimeError as e:
        _maybe_attach_location(e, n)
        raise


def _eval_identifier(name: str, env: Environment) -> FkValue:
    if env.has(name):
        return env.get(name)

    builtin = lookup_builtin(name)
    if builtin is not None:
        return builtin

    # Raises the not-found error.
    return env.get(name)


def _eval_node_inner(n: AnyNode, env: Environment) -> Outcome:
    match n:
        case Program(statements=stmts):
            return eval_statements(stmts, env, eval_node)
        case BlockStatement(statements=stmts):
            return eval_statements(stmts, env, eval_node)
        case ExpressionStatement(expression=expr):
            return eval_node(expr, env)
        case LetStatement():
            return eval_let(n, env, eval_node)
        case ReturnStatement(value=None):
            return ReturnValue(NULL)
        case ReturnStatement(value=value):
            outcome = eval_node(value, env)
            if isinstance(outcome, ReturnValue):
                return outcome
            return ReturnValue(outcome)
        case ForStatement():
            return eval_for(n, env, eval_node)
        case IntegerLiteral(value=v):
            return FkInteger(v)
        case BooleanLiteral(value=v):
            return native_bool(v)
        case StringLiteral(value=v):
            return FkString(v)
        case Identifier(name=name):
            return _eval_identifier(name, env)
        case ArrayLiteral():
            return eval_array(n, env, eval_node)
        case MapLiteral():
            return eval_map(n, env, eval_node)
        case FunctionLiteral():
            return eval_function_literal(n, env)
        case IfExpression(condition=cond, consequence=cons, alternative=alt):
            test = eval_node(cond, env)
            if isinstance(test, ReturnValue):
                return test
            if is_truthy(test):
                return eval_node(cons, env)
            if alt is not None:
                return eval_node(alt, env)
            return NULL
        case PrefixExpression(operator=op, right=right):
            rhs = eval_node(right, env)
            if isinstance(rhs, ReturnValue):
                return rhs
            return eval_prefix(op, rhs)
        case InfixExpression(left=left, operator=op, right=right):
            operands = eval_all((left, right), env, eval_node)
            if isinstance(operands, ReturnValue):
                return operands
            return eval_infix(op, *operands)
        case CallExpression():
            return eval_call(n, env, eval_node)
        case IndexExpression(left=left, index=index):
            operands = eval_all((left, index), env, eval_node)
            if isinstance(operands, ReturnValue):
                return operands
            return eval_index(*operands)
        case DotExpression(left=left, member=member):
            target = eval_node(left, env)
            if isinstance(target, ReturnValue):
                return target
            return eval_dot(target, member.name)
        case AssignExpression():
            return eval_assign(n, env, eval_node)
        case _:
            assert_never(n)
