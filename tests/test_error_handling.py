from __future__ import annotations

from textwrap import dedent

import pytest

from monkey_ref.evaluator import eval_node, evaluate
from monkey_ref.environment import Environment
from monkey_ref.runtime import MonkeyRuntimeError
from tests.support.harness import ParseError, run_program, run_runtime_case

SCENARIOS = [
    pytest.param("if (10 > 1) { true + false; }", ("error", "unknown operator: BOOLEAN + BOOLEAN"), None, id="error-in-if"),
    pytest.param(
        dedent(
            """\
            if (10 > 1) {
              if (10 > 1) {
                return true + false;
              }
              return 1;
            }
            """
        ),
        ("error", "unknown operator: BOOLEAN + BOOLEAN"),
        None,
        id="error-in-nested-return",
    ),
    pytest.param(
        "if (missing) { 1 } else { 2 }",
        ("error", "identifier not found: missing"),
        None,
        id="condition-error-propagates",
    ),
    pytest.param(
        "let x = 1 / 0; x",
        ("error", "division by zero"),
        None,
        id="let-stops-on-error",
    ),
    pytest.param(
        "let f = fn() { 1 / 0; 5 }; f()",
        ("error", "division by zero"),
        None,
        id="error-stops-function-body",
    ),
    pytest.param(
        "let f = fn() { return 1 / 0; }; f() + 1",
        ("error", "division by zero"),
        None,
        id="return-of-error",
    ),
    pytest.param("missing(1)", ("error", "identifier not found: missing"), None, id="unknown-callee"),
    pytest.param("let x = ;", None, ParseError, id="parse-error-raises"),
    pytest.param("if (1) { 2 ", None, ParseError, id="unterminated-block-raises"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_error_handling(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


@pytest.mark.parametrize(
    "source, expected",
    [
        pytest.param("if (true) { 10 }", ("integer", 10), id="if-true"),
        pytest.param("if (false) { 10 }", ("null", None), id="if-false-no-else"),
        pytest.param("if (1) { 10 }", ("integer", 10), id="if-truthy-int"),
        pytest.param("if (0) { 10 } else { 20 }", ("integer", 10), id="zero-is-truthy"),
        pytest.param("if (1 < 2) { 10 }", ("integer", 10), id="if-compare"),
        pytest.param("if (1 > 2) { 10 }", ("null", None), id="if-compare-false"),
        pytest.param("if (1 > 2) { 10 } else { 20 }", ("integer", 20), id="if-else"),
        pytest.param("if (1 < 2) { 10 } else { 20 }", ("integer", 10), id="if-else-true"),
        pytest.param('if ("") { 1 } else { 2 }', ("integer", 1), id="empty-string-truthy"),
        pytest.param("if ([]) { 1 } else { 2 }", ("integer", 1), id="empty-array-truthy"),
        pytest.param("if (if (false) { 1 }) { 1 } else { 2 }", ("integer", 2), id="null-falsy"),
    ],
)
def test_conditionals(source: str, expected) -> None:
    run_runtime_case(source, expected, None)


@pytest.mark.parametrize(
    "source, expected",
    [
        pytest.param("return 10;", 10, id="top-level-return"),
        pytest.param("return 10; 9;", 10, id="return-stops-program"),
        pytest.param("return 2 * 5; 9;", 10, id="return-expr"),
        pytest.param("9; return 2 * 5; 9;", 10, id="return-mid-program"),
        pytest.param("if (10 > 1) { if (10 > 1) { return 10; } return 1; }", 10, id="nested-block-return"),
        pytest.param(
            "let f = fn(x) { return x; x + 10; }; f(10);",
            10,
            id="return-in-function",
        ),
        pytest.param(
            "let f = fn(x) { let result = x + 10; return result; return 10; }; f(10);",
            20,
            id="first-return-wins",
        ),
        pytest.param(
            "let inner = fn() { return 1; }; let outer = fn() { inner(); 10 }; outer()",
            10,
            id="return-does-not-escape-callee",
        ),
    ],
)
def test_return_statements(source: str, expected: int) -> None:
    run_runtime_case(source, ("integer", expected), None)


def test_unknown_node_raises() -> None:
    with pytest.raises(MonkeyRuntimeError, match="Unknown node"):
        eval_node(object(), Environment())  # type: ignore[arg-type]


def test_evaluate_defaults_to_fresh_environment() -> None:
    from monkey_ref.parser_rd import parse_source

    result = evaluate(parse_source("let a = 3; a * a"))
    assert result.value == 9


def test_deep_recursion_surfaces_as_recursion_error() -> None:
    source = "let f = fn(n) { f(n + 1) }; f(0)"

    with pytest.raises(RecursionError):
        run_program(source)


def test_error_values_are_not_host_exceptions() -> None:
    result = run_program("-true")
    assert result.inspect() == "ERROR: unknown operator: -BOOLEAN"
