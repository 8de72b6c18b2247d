from __future__ import annotations

from typing import Optional

import pytest
from lark import Token, Tree

from funkey.ast import (
    BlockStatement,
    ExpressionStatement,
    ForStatement,
    Identifier,
    IntegerLiteral,
    LetStatement,
    Program,
    ReturnStatement,
    render,
    to_tree,
)
from funkey.token_types import TT, Tok
from tests.support.harness import parse_program

T = Tok(TT.ILLEGAL, "")


def _first(tree: Tree) -> Tree:
    return tree.children[0]


def check_let_infix(tree: Tree) -> Optional[str]:
    stmt = _first(tree)
    if stmt.data != "let_statement":
        return "let_statement missing"
    if stmt.children[0] != Token("IDENT", "x"):
        return "binding name missing"

    infix = stmt.children[1]
    if infix.data != "infix" or infix.children[1] != Token("OP", "+"):
        return "infix node malformed"
    return None


def check_function_params(tree: Tree) -> Optional[str]:
    fn = _first(_first(tree))
    if fn.data != "function":
        return "function node missing"

    params = fn.children[0]
    if params.data != "parameters":
        return "parameters subtree missing"
    if [str(p) for p in params.children] != ["a", "b"]:
        return f"unexpected params {params.children}"
    if fn.children[1].data != "block":
        return "function body is not a block"
    return None


def check_for_clauses(tree: Tree) -> Optional[str]:
    loop = _first(tree)
    if loop.data != "for_statement":
        return "for_statement missing"

    labels = [c.data for c in loop.children]
    if labels != ["init", "condition", "update", "block"]:
        return f"unexpected clause labels {labels}"
    if loop.children[0].children:
        return "empty init should have no children"
    if loop.children[1].children[0].data != "expression_statement":
        return "condition should wrap an expression statement"
    return None


def check_call_chain(tree: Tree) -> Optional[str]:
    call = _first(_first(tree))
    if call.data != "call":
        return "call node missing"

    callee = call.children[0]
    if callee.data != "dot" or callee.children[1] != Token("IDENT", "f"):
        return "dot callee malformed"

    args = call.children[1]
    if args.data != "arguments" or len(args.children) != 2:
        return "arguments malformed"
    if args.children[1].data != "index":
        return "second argument should be an index expression"
    return None


def check_if_else(tree: Tree) -> Optional[str]:
    node = _first(_first(tree))
    if node.data != "if_expression":
        return "if_expression missing"
    if len(node.children) != 3:
        return "else branch missing"
    return None


def check_map_pairs(tree: Tree) -> Optional[str]:
    node = _first(_first(tree))
    if node.data != "map":
        return "map node missing"
    if [p.data for p in node.children] != ["pair", "pair"]:
        return "pairs missing"
    return None


AST_CASES = [
    pytest.param("let x = 1 + 2;", check_let_infix, id="let-infix"),
    pytest.param("fn(a, b) { a }", check_function_params, id="function-params"),
    pytest.param("for (; i < 3; i = i + 1) { }", check_for_clauses, id="for-clauses"),
    pytest.param("m.f(1, xs[0])", check_call_chain, id="call-on-dot"),
    pytest.param("if (true) { 1 } else { 2 }", check_if_else, id="if-else"),
    pytest.param('{"a": 1, "b": 2}', check_map_pairs, id="map-pairs"),
]


@pytest.mark.parametrize("source, checker", AST_CASES)
def test_tree_projection(source: str, checker) -> None:
    problem = checker(to_tree(parse_program(source)))
    assert problem is None, problem


def test_tree_projection_exact() -> None:
    tree = to_tree(parse_program("let x = -1;\nreturn x;"))

    assert tree == Tree(
        "program",
        [
            Tree(
                "let_statement",
                [
                    Token("IDENT", "x"),
                    Tree("prefix", [Token("OP", "-"), Tree("integer", [Token("INT", "1")])]),
                ],
            ),
            Tree("return_statement", [Tree("identifier", [Token("IDENT", "x")])]),
        ],
    )


def test_tree_pretty_dump() -> None:
    text = to_tree(parse_program("a + 1")).pretty()

    assert text.splitlines()[0] == "program"
    assert "infix" in text
    assert "expression_statement" in text


def test_render_built_nodes() -> None:
    let = LetStatement(T, Identifier(T, "myVar"), Identifier(T, "anotherVar"))
    assert render(let) == "let myVar = anotherVar;"
    assert str(Program((let, ReturnStatement(T)))) == "let myVar = anotherVar;\nreturn;"


def test_render_block_and_for() -> None:
    body = BlockStatement(T, (ExpressionStatement(T, Identifier(T, "a")), ExpressionStatement(T, IntegerLiteral(T, 1))))
    loop = ForStatement(T, None, None, None, body)

    assert render(body) == "a;\n1;"
    assert render(loop) == "for (; ; ) {\n\ta;\n\t1;\n}"


def test_for_clause_keeps_semicolon_inside_string() -> None:
    program = parse_program('for (let s = ";"; s; s = ";") { s }')

    assert str(program) == "for (let s = ;; s; (s = ;)) {\n\ts;\n}"


def test_program_render_has_no_trailing_newline() -> None:
    assert str(parse_program("1; 2;")) == "1;\n2;"
    assert str(parse_program("")) == ""


def test_nodes_compare_without_tokens() -> None:
    a = IntegerLiteral(Tok(TT.INT, "1", 1, 1), 1)
    b = IntegerLiteral(Tok(TT.INT, "1", 9, 9), 1)

    assert a == b
    assert a != IntegerLiteral(T, 2)


def test_nodes_are_immutable() -> None:
    node = Identifier(T, "x")

    with pytest.raises(AttributeError):
        node.name = "y"  # type: ignore[misc]
