from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import capture_prints, run_runtime_case

IF_SCENARIOS = [
    pytest.param("if (true) { 10 }", ("int", 10), None, id="true"),
    pytest.param("if (false) { 10 }", ("null", None), None, id="false-no-else"),
    pytest.param("if (1) { 10 }", ("int", 10), None, id="nonzero-truthy"),
    pytest.param("if (0) { 1 } else { 2 }", ("int", 2), None, id="zero-falsy"),
    pytest.param("if (1 < 2) { 10 }", ("int", 10), None, id="comparison"),
    pytest.param("if (1 > 2) { 10 }", ("null", None), None, id="comparison-false"),
    pytest.param("if (1 > 2) { 10 } else { 20 }", ("int", 20), None, id="else-branch"),
    pytest.param("if (1 < 2) { 10 } else { 20 }", ("int", 10), None, id="then-branch"),
    pytest.param('if ("x") { 1 } else { 2 }', ("int", 2), None, id="string-falsy"),
    pytest.param("if ([1]) { 1 } else { 2 }", ("int", 2), None, id="array-falsy"),
    pytest.param("let x = if (true) { 5 } else { 6 }; x * 2", ("int", 10), None, id="if-as-value"),
    pytest.param("if (true) { }", ("null", None), None, id="empty-block"),
    pytest.param("if (true) { 5; let y = 1; }", ("int", 5), None, id="let-keeps-block-value"),
]

RETURN_SCENARIOS = [
    pytest.param("return 10;", ("int", 10), None, id="top-level"),
    pytest.param("return 10; 9;", ("int", 10), None, id="skips-rest"),
    pytest.param("return 2 * 5; 9;", ("int", 10), None, id="expression"),
    pytest.param("9; return 2 * 5; 9;", ("int", 10), None, id="after-statement"),
    pytest.param("return;", ("null", None), None, id="bare"),
    pytest.param(
        dedent(
            """\
            if (10 > 1) {
              if (10 > 1) {
                return 10;
              }
              return 1;
            }
            """
        ),
        ("int", 10),
        None,
        id="nested-blocks",
    ),
    pytest.param(
        "let f = fn(x) { if (x > 0) { return 1; } return -1; }; f(5) + f(-5)",
        ("int", 0),
        None,
        id="early-return-in-function",
    ),
    pytest.param(
        "let f = fn() { let g = fn() { return 1; }; g(); 2 }; f()",
        ("int", 2),
        None,
        id="inner-return-stays-inner",
    ),
    pytest.param(
        "let f = fn() { return 1; 2 }; f() + 10",
        ("int", 11),
        None,
        id="function-result-unwrapped",
    ),
    pytest.param(
        "let f = fn() { 1 + if (true) { return 5; } }; f()",
        ("int", 5),
        None,
        id="return-in-operand-leaves-function",
    ),
    pytest.param(
        "let f = fn() { let x = if (true) { return 1; }; 2 }; f()",
        ("int", 1),
        None,
        id="return-in-let-initializer",
    ),
    pytest.param(
        "let f = fn() { len(if (true) { return 3; }); 2 }; f()",
        ("int", 3),
        None,
        id="return-in-call-argument",
    ),
    pytest.param(
        "let f = fn() { let x = 0; x = if (true) { return 6; }; x }; f()",
        ("int", 6),
        None,
        id="return-in-assigned-value",
    ),
    pytest.param(
        "let f = fn() { [1, if (true) { return 4; }, 3]; 9 }; f()",
        ("int", 4),
        None,
        id="return-in-array-element",
    ),
    pytest.param(
        "let f = fn() { {\"a\": if (true) { return 8; }}; 9 }; f()",
        ("int", 8),
        None,
        id="return-in-map-value",
    ),
    pytest.param(
        "let f = fn() { -if (true) { return 2; } }; f()",
        ("int", 2),
        None,
        id="return-in-prefix-operand",
    ),
    pytest.param(
        "let f = fn() { [1][if (true) { return 12; }] }; f()",
        ("int", 12),
        None,
        id="return-in-index",
    ),
    pytest.param(
        "let f = fn() { if (if (true) { return 7; }) { 1 } else { 0 } }; f()",
        ("int", 7),
        None,
        id="return-in-if-condition",
    ),
    pytest.param(
        "let f = fn() { for (; if (true) { return 11; }; ) { } 0 }; f()",
        ("int", 11),
        None,
        id="return-in-loop-condition",
    ),
    pytest.param(
        "let f = fn() { return if (true) { return 1; } else { 2 }; }; f()",
        ("int", 1),
        None,
        id="return-of-returning-if",
    ),
    pytest.param("1 + if (true) { return 5; }", ("int", 5), None, id="return-in-operand-at-top-level"),
    pytest.param(
        "let f = fn() { for (;;) { return 7; } }; f()",
        ("int", 7),
        None,
        id="return-exits-loop",
    ),
]

PROGRAM_VALUE_SCENARIOS = [
    pytest.param("", ("null", None), None, id="empty-program"),
    pytest.param("let x = 1;", ("null", None), None, id="let-only"),
    pytest.param("1; let x = 2;", ("int", 1), None, id="let-keeps-value"),
    pytest.param("1; 2; 3", ("int", 3), None, id="last-expression"),
    pytest.param("7; for (;false;) { }", ("int", 7), None, id="for-keeps-value"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", IF_SCENARIOS)
def test_if_expressions(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


@pytest.mark.parametrize("source, expectation, expected_exc", RETURN_SCENARIOS)
def test_return(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


@pytest.mark.parametrize("source, expectation, expected_exc", PROGRAM_VALUE_SCENARIOS)
def test_program_value(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_return_in_argument_skips_the_call() -> None:
    lines = capture_prints(
        'let f = fn() { print(if (true) { return 1; }); print("after"); 2 }; print(f());'
    )
    assert lines == ["1"]


def test_return_in_left_operand_skips_right_operand() -> None:
    lines = capture_prints('let f = fn() { if (true) { return 1; } + print("right") }; print(f());')
    assert lines == ["1"]
