"""AST node model for Funkey.

Every node is a frozen dataclass that owns its children outright; sequences
are stored as tuples. Each node also keeps the token that introduced it so the
evaluator can attach a source position to runtime errors. The token never
takes part in equality.

Two consumers live here next to the nodes:

- ``render`` produces the canonical parenthesized text form used by
  diagnostics and golden tests (``str(node)`` delegates to it).
- ``to_tree`` projects a node into a ``lark.Tree`` so ``Tree.pretty()`` can
  dump a parse.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from lark import Token, Tree
from typing_extensions import TypeAlias, assert_never

from .token_types import Tok


class Node:
    """Common base: text rendering for every node kind."""

    def __str__(self) -> str:
        return render(self)  # type: ignore[arg-type]


# ---------------- Expressions ----------------

@dataclass(frozen=True)
class IntegerLiteral(Node):
    token: Tok = field(compare=False, repr=False)
    value: int


@dataclass(frozen=True)
class BooleanLiteral(Node):
    token: Tok = field(compare=False, repr=False)
    value: bool


@dataclass(frozen=True)
class StringLiteral(Node):
    token: Tok = field(compare=False, repr=False)
    value: str


@dataclass(frozen=True)
class Identifier(Node):
    token: Tok = field(compare=False, repr=False)
    name: str


@dataclass(frozen=True)
class ArrayLiteral(Node):
    token: Tok = field(compare=False, repr=False)
    elements: Tuple['Expression', ...]


@dataclass(frozen=True)
class MapLiteral(Node):
    """Key/value expression pairs in source order; duplicates are kept."""

    token: Tok = field(compare=False, repr=False)
    pairs: Tuple[Tuple['Expression', 'Expression'], ...]


@dataclass(frozen=True)
class FunctionLiteral(Node):
    token: Tok = field(compare=False, repr=False)
    parameters: Tuple[Identifier, ...]
    body: 'BlockStatement'


@dataclass(frozen=True)
class IfExpression(Node):
    token: Tok = field(compare=False, repr=False)
    condition: 'Expression'
    consequence: 'BlockStatement'
    alternative: Optional['BlockStatement'] = None


@dataclass(frozen=True)
class PrefixExpression(Node):
    token: Tok = field(compare=False, repr=False)
    operator: str
    right: 'Expression'


@dataclass(frozen=True)
class InfixExpression(Node):
    token: Tok = field(compare=False, repr=False)
    left: 'Expression'
    operator: str
    right: 'Expression'


@dataclass(frozen=True)
class CallExpression(Node):
    token: Tok = field(compare=False, repr=False)
    function: 'Expression'
    arguments: Tuple['Expression', ...]


@dataclass(frozen=True)
class IndexExpression(Node):
    token: Tok = field(compare=False, repr=False)
    left: 'Expression'
    index: 'Expression'


@dataclass(frozen=True)
class DotExpression(Node):
    token: Tok = field(compare=False, repr=False)
    left: 'Expression'
    member: Identifier


@dataclass(frozen=True)
class AssignExpression(Node):
    token: Tok = field(compare=False, repr=False)
    target: 'Expression'
    value: 'Expression'


# ---------------- Statements ----------------

@dataclass(frozen=True)
class ExpressionStatement(Node):
    token: Tok = field(compare=False, repr=False)
    expression: 'Expression'


@dataclass(frozen=True)
class LetStatement(Node):
    token: Tok = field(compare=False, repr=False)
    name: Identifier
    value: Optional['Expression'] = None


@dataclass(frozen=True)
class ReturnStatement(Node):
    token: Tok = field(compare=False, repr=False)
    value: Optional['Expression'] = None


@dataclass(frozen=True)
class BlockStatement(Node):
    token: Tok = field(compare=False, repr=False)
    statements: Tuple['Statement', ...]


@dataclass(frozen=True)
class ForStatement(Node):
    token: Tok = field(compare=False, repr=False)
    init: Optional['Statement']
    condition: Optional[ExpressionStatement]
    update: Optional['Statement']
    body: BlockStatement


@dataclass(frozen=True)
class Program(Node):
    statements: Tuple['Statement', ...]


Expression: TypeAlias = Union[
    IntegerLiteral,
    BooleanLiteral,
    StringLiteral,
    Identifier,
    ArrayLiteral,
    MapLiteral,
    FunctionLiteral,
    IfExpression,
    PrefixExpression,
    InfixExpression,
    CallExpression,
    IndexExpression,
    DotExpression,
    AssignExpression,
]

Statement: TypeAlias = Union[
    ExpressionStatement,
    LetStatement,
    ReturnStatement,
    BlockStatement,
    ForStatement,
]

AnyNode: TypeAlias = Union[Program, Statement, Expression]


# ---------------- Rendering ----------------

def _join(nodes, sep: str = ', ') -> str:
    return sep.join(render(n) for n in nodes)


def _braced(block: BlockStatement) -> str:
    return '{\n\t' + _join(block.statements, '\n\t') + '\n}'


def _clause(stmt: Optional[Statement]) -> str:
    if stmt is None:
        return ''

    # Drop only the statement terminator; a string literal may end in ';'.
    text = render(stmt)
    return text[:-1] if text.endswith(';') else text


def render(node: AnyNode) -> str:
    """Canonical text form of a node."""
    match node:
        case Program(statements=stmts):
            return _join(stmts, '\n')
        case ExpressionStatement(expression=expr):
            return f"{render(expr)};"
        case LetStatement(name=name, value=None):
            return f"let {name.name};"
        case LetStatement(name=name, value=value):
            return f"let {name.name} = {render(value)};"
        case ReturnStatement(value=None):
            return "return;"
        case ReturnStatement(value=value):
            return f"return {render(value)};"
        case BlockStatement(statements=stmts):
            return _join(stmts, '\n')
        case ForStatement(init=init, condition=cond, update=update, body=body):
            return f"for ({_clause(init)}; {_clause(cond)}; {_clause(update)}) {_braced(body)}"
        case IntegerLiteral(value=v):
            return str(v)
        case BooleanLiteral(value=v):
            return "true" if v else "false"
        case StringLiteral(value=v):
            return v
        case Identifier(name=name):
            return name
        case ArrayLiteral(elements=elements):
            return f"[{_join(elements)}]"
        case MapLiteral(pairs=pairs):
            entries = ', '.join(f"{render(k)}:{render(v)}" for k, v in pairs)
            return f"{{{entries}}}"
        case FunctionLiteral(parameters=params, body=body):
            return f"fn ({_join(params)}) {_braced(body)}"
        case IfExpression(condition=cond, consequence=cons, alternative=alt):
            text = f"if ({render(cond)}) {render(cons)}"
            if alt is not None:
                text += f" else {render(alt)}"
            return text
        case PrefixExpression(operator=op, right=right):
            return f"({op}{render(right)})"
        case InfixExpression(left=left, operator=op, right=right):
            return f"({render(left)} {op} {render(right)})"
        case CallExpression(function=fn, arguments=args):
            return f"{render(fn)}({_join(args)})"
        case IndexExpression(left=left, index=index):
            return f"({render(left)}[{render(index)}])"
        case DotExpression(left=left, member=name):
            return f"({render(left)}.{name.name})"
        case AssignExpression(target=target, value=value):
            return f"({render(target)} = {render(value)})"
        case _:
            assert_never(node)


# ---------------- Tree projection ----------------

def _opt(node: Optional[AnyNode], label: str) -> Tree:
    return Tree(label, [] if node is None else [to_tree(node)])


def to_tree(node: AnyNode) -> Tree:
    """Project a node into a lark Tree (for ``Tree.pretty()`` dumps)."""
    match node:
        case Program(statements=stmts):
            return Tree('program', [to_tree(s) for s in stmts])
        case ExpressionStatement(expression=expr):
            return Tree('expression_statement', [to_tree(expr)])
        case LetStatement(name=name, value=value):
            children = [Token('IDENT', name.name)]
            if value is not None:
                children.append(to_tree(value))
            return Tree('let_statement', children)
        case ReturnStatement(value=value):
            return Tree('return_statement', [] if value is None else [to_tree(value)])
        case BlockStatement(statements=stmts):
            return Tree('block', [to_tree(s) for s in stmts])
        case ForStatement(init=init, condition=cond, update=update, body=body):
            return Tree('for_statement', [
                _opt(init, 'init'),
                _opt(cond, 'condition'),
                _opt(update, 'update'),
                to_tree(body),
            ])
        case IntegerLiteral(value=v):
            return Tree('integer', [Token('INT', str(v))])
        case BooleanLiteral(value=v):
            return Tree('boolean', [Token('TRUE' if v else 'FALSE', render(node))])
        case StringLiteral(value=v):
            return Tree('string', [Token('STRING', v)])
        case Identifier(name=name):
            return Tree('identifier', [Token('IDENT', name)])
        case ArrayLiteral(elements=elements):
            return Tree('array', [to_tree(e) for e in elements])
        case MapLiteral(pairs=pairs):
            return Tree('map', [Tree('pair', [to_tree(k), to_tree(v)]) for k, v in pairs])
        case FunctionLiteral(parameters=params, body=body):
            return Tree('function', [
                Tree('parameters', [Token('IDENT', p.name) for p in params]),
                to_tree(body),
            ])
        case IfExpression(condition=cond, consequence=cons, alternative=alt):
            children = [to_tree(cond), to_tree(cons)]
            if alt is not None:
                children.append(to_tree(alt))
            return Tree('if_expression', children)
        case PrefixExpression(operator=op, right=right):
            return Tree('prefix', [Token('OP', op), to_tree(right)])
        case InfixExpression(left=left, operator=op, right=right):
            return Tree('infix', [to_tree(left), Token('OP', op), to_tree(right)])
        case CallExpression(function=fn, arguments=args):
            return Tree('call', [to_tree(fn), Tree('arguments', [to_tree(a) for a in args])])
        case IndexExpression(left=left, index=index):
            return Tree('index', [to_tree(left), to_tree(index)])
        case DotExpression(left=left, member=name):
            return Tree('dot', [to_tree(left), Token('IDENT', name.name)])
        case AssignExpression(target=target, value=value):
            return Tree('assign', [to_tree(target), to_tree(value)])
        case _:
            assert_never(node)
