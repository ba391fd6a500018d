from __future__ import annotations

import io
from pathlib import Path

import pytest

from monkey_ref.environment import Environment
from monkey_ref.runner import main, repl_eval, run
from monkey_ref.utils import DEBUG_PY_TRACE_VAR, PROMPT_VAR, debug_py_trace_enabled, prompt_text


@pytest.mark.parametrize(
    "source, expected",
    [
        pytest.param("1 + 2", ("3", False), id="value"),
        pytest.param("let a = 1;", ("", False), id="let-prints-nothing"),
        pytest.param('"hi"', ("hi", False), id="string-unquoted"),
        pytest.param("if (false) { 1 }", ("", False), id="null-prints-nothing"),
        pytest.param("5 + true", ("ERROR: type mismatch: INTEGER + BOOLEAN", True), id="runtime-error"),
        pytest.param(
            "let = 1",
            ("expected next token to be IDENT, got ASSIGN instead at line 1, col 5", True),
            id="parse-error",
        ),
    ],
)
def test_repl_eval(source: str, expected) -> None:
    assert repl_eval(source, Environment()) == expected


def test_repl_eval_accumulates_bindings(env: Environment) -> None:
    assert repl_eval("let x = 5;", env) == ("", False)
    assert repl_eval("let double = fn(n) { n * 2 };", env) == ("", False)
    assert repl_eval("double(x)", env) == ("10", False)


def test_run_returns_object() -> None:
    assert run("[1, 2]").inspect() == "[1, 2]"


def test_main_runs_inline_source(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["let a = 20; a + 1"]) == 0
    assert capsys.readouterr().out == "21\n"


def test_main_runs_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    script = tmp_path / "prog.mk"
    script.write_text('puts("from file"); 7', encoding="utf-8")

    assert main([str(script)]) == 0
    assert capsys.readouterr().out == "from file\n7\n"


def test_main_reads_stdin(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("2 * 21"))

    assert main(["-"]) == 0
    assert capsys.readouterr().out == "42\n"


def test_main_reports_runtime_error(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["-true"]) == 1

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == "ERROR: unknown operator: -BOOLEAN\n"


def test_main_reports_parse_error(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["let x 1"]) == 1
    assert capsys.readouterr().err.startswith("parse error: expected next token to be ASSIGN")


def test_main_dumps_ast(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--ast", "let a = 1;"]) == 0

    out = capsys.readouterr().out
    assert out.splitlines()[0] == "program"
    assert "let_stmt" in out


def test_main_rejects_extra_arguments() -> None:
    with pytest.raises(SystemExit):
        main(["1", "2"])


def test_main_reports_deep_recursion(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.delenv(DEBUG_PY_TRACE_VAR, raising=False)

    assert main(["let f = fn() { f() }; f()"]) == 1
    err = capsys.readouterr().err
    assert err.startswith("runtime error: maximum recursion depth exceeded")
    assert "Python traceback" not in err


def test_main_prints_traceback_when_enabled(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv(DEBUG_PY_TRACE_VAR, "1")

    assert main(["let f = fn() { f() }; f()"]) == 1
    assert "Python traceback:" in capsys.readouterr().err


@pytest.mark.parametrize(
    "value, expected",
    [
        pytest.param("1", True, id="one"),
        pytest.param("yes", True, id="yes"),
        pytest.param("0", False, id="zero"),
        pytest.param("", False, id="empty"),
    ],
)
def test_debug_py_trace_flag(monkeypatch: pytest.MonkeyPatch, value: str, expected: bool) -> None:
    monkeypatch.setenv(DEBUG_PY_TRACE_VAR, value)
    assert debug_py_trace_enabled() is expected


def test_prompt_text(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(PROMPT_VAR, raising=False)
    assert prompt_text() == ">> "

    monkeypatch.setenv(PROMPT_VAR, "monkey> ")
    assert prompt_text() == "monkey> "


def test_repl_eval_survives_runaway_recursion(env: Environment) -> None:
    display, is_error = repl_eval("let f = fn(n) { f(n + 1) }; f(0)", env)

    assert is_error
    assert display.startswith("ERROR: maximum recursion depth exceeded")
    assert repl_eval("1 + 1", env) == ("2", False)
