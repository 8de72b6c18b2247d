from __future__ import annotations

from textwrap import dedent

import pytest

from funkey.runner import evaluate_to_text
from tests.support.harness import run_error_case, run_runtime_case

ARRAY_SCENARIOS = [
    pytest.param("[1, 2 * 2, 3 + 3]", ("array", [1, 4, 6]), None, id="literal"),
    pytest.param("[]", ("array", []), None, id="empty"),
    pytest.param("[[1, 2], [3]]", ("array", [[1, 2], [3]]), None, id="nested"),
    pytest.param('[1, "two", true]', ("array", [1, "two", True]), None, id="mixed-types"),
    pytest.param("[1, 2, 3][0]", ("int", 1), None, id="index-first"),
    pytest.param("[1, 2, 3][2]", ("int", 3), None, id="index-last"),
    pytest.param("[1, 2, 3][1 + 1]", ("int", 3), None, id="index-expression"),
    pytest.param("let i = 0; [1][i]", ("int", 1), None, id="index-variable"),
    pytest.param("let myArray = [1, 2, 3]; myArray[2];", ("int", 3), None, id="index-named"),
    pytest.param(
        "let myArray = [1, 2, 3]; myArray[0] + myArray[1] + myArray[2];",
        ("int", 6),
        None,
        id="index-sum",
    ),
    pytest.param(
        "let myArray = [1, 2, 3]; let i = myArray[0]; myArray[i]",
        ("int", 2),
        None,
        id="index-by-element",
    ),
    pytest.param("[[1, 2], [3]][0][1]", ("int", 2), None, id="index-nested"),
    pytest.param("len([1, 2, 3])", ("int", 3), None, id="len"),
    pytest.param("len([])", ("int", 0), None, id="len-empty"),
    pytest.param("[1, 2].length", ("int", 2), None, id="length-member"),
]

MAP_SCENARIOS = [
    pytest.param('{"one": 1, "two": 2}', ("map", {"one": 1, "two": 2}), None, id="literal"),
    pytest.param("{}", ("map", {}), None, id="empty"),
    pytest.param('{"a": 1, "a": 2}', ("map", {"a": 2}), None, id="duplicate-last-wins"),
    pytest.param('let k = "x"; {k: 1 + 1}', ("map", {"x": 2}), None, id="computed-key"),
    pytest.param('{"a" + "b": 1}["ab"]', ("int", 1), None, id="concat-key"),
    pytest.param('{"a": 1}["a"]', ("int", 1), None, id="index-hit"),
    pytest.param('{"a": 1}["b"]', ("null", None), None, id="index-miss-is-null"),
    pytest.param('{"a": 1}.a', ("int", 1), None, id="dot-hit"),
    pytest.param('{"a": 1}.b', ("null", None), None, id="dot-miss-is-null"),
    pytest.param('let m = {"k": [1, 2]}; m.k[1]', ("int", 2), None, id="dot-then-index"),
    pytest.param('let m = {"in": {"deep": 7}}; m.in.deep', ("int", 7), None, id="dot-chain"),
    pytest.param('{"length": 5}.length', ("int", 5), None, id="length-is-a-key"),
    pytest.param(
        dedent(
            """\
            let people = [{"name": "Alice", "age": 24}, {"name": "Anna", "age": 28}];
            people[1].name
            """
        ),
        ("string", "Anna"),
        None,
        id="array-of-maps",
    ),
]


@pytest.mark.parametrize("source, expectation, expected_exc", ARRAY_SCENARIOS)
def test_arrays(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


@pytest.mark.parametrize("source, expectation, expected_exc", MAP_SCENARIOS)
def test_maps(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


ERROR_SCENARIOS = [
    pytest.param("[1, 2, 3][3]", "index out of bound", id="index-equal-to-length"),
    pytest.param("[1, 2, 3][99]", "index out of bound", id="index-past-end"),
    pytest.param("[1, 2, 3][-1]", "index out of bound", id="index-negative"),
    pytest.param("[][0]", "index out of bound", id="index-empty"),
    pytest.param("1[0]", "index expression is not valid", id="index-integer"),
    pytest.param('"abc"[0]', "index expression is not valid", id="index-string"),
    pytest.param('[1]["a"]', "index expression is not valid", id="array-string-index"),
    pytest.param('{"a": 1}[1]', "index expression is not valid", id="map-integer-index"),
    pytest.param("{1: 2}", "unusable as map key: Integer", id="integer-key"),
    pytest.param("{true: 2}", "unusable as map key: Boolean", id="boolean-key"),
    pytest.param("[1, 2].size", "invalid operation: Array.size", id="array-unknown-member"),
    pytest.param("5.x", "invalid operation: Integer.x", id="integer-member"),
    pytest.param("len.name", "invalid operation: BuiltinFunction.name", id="builtin-member"),
]


@pytest.mark.parametrize("source, message", ERROR_SCENARIOS)
def test_collection_errors(source: str, message: str) -> None:
    run_error_case(source, message)


@pytest.mark.parametrize(
    "source, text",
    [
        pytest.param("[1, true, \"s\"]", "[1, true, s]", id="array"),
        pytest.param('{"a": 1, "b": [1, "x"]}', "{a:1, b:[1, x]}", id="map-nested"),
        pytest.param('{"z": 1, "a": 2}', "{z:1, a:2}", id="map-insertion-order"),
        pytest.param("{}", "{}", id="map-empty"),
        pytest.param("[]", "[]", id="array-empty"),
    ],
)
def test_collection_inspect(source: str, text: str) -> None:
    assert evaluate_to_text(source) == text
