from __future__ import annotations

import pytest
from lark import Token, Tree

from monkey_ref.parser_rd import parse_source
from monkey_ref.token_types import TT, Tok
from monkey_ref.tree import Identifier, LetStatement, Program, to_lark
from tests.support.harness import parse_render


def test_let_statement_renders_from_hand_built_tree() -> None:
    program = Program(
        (
            LetStatement(
                Tok(TT.LET, "let"),
                Identifier(Tok(TT.IDENT, "myVar"), "myVar"),
                Identifier(Tok(TT.IDENT, "anotherVar"), "anotherVar"),
            ),
        )
    )

    assert str(program) == "let myVar = anotherVar;"


@pytest.mark.parametrize(
    "code",
    [
        pytest.param("let x = y;", id="let-ident"),
        pytest.param("let x = (1 + 2);", id="let-infix"),
        pytest.param("return (a * b);", id="return-infix"),
        pytest.param("add(1,(2 * 3))", id="call"),
        pytest.param("[1, 2, 3]", id="array"),
        pytest.param("(arr[0])", id="index"),
    ],
)
def test_canonical_rendering_round_trips(code: str) -> None:
    first = parse_render(code)
    assert first == code
    assert parse_render(first) == first


AST_CASES = [
    pytest.param(
        "let x = 1 + 2;",
        Tree(
            "program",
            [
                Tree(
                    "let_stmt",
                    [
                        Token("IDENT", "x"),
                        Tree(
                            "infix",
                            [
                                Tree("int", [Token("INT", "1")]),
                                Token("OP", "+"),
                                Tree("int", [Token("INT", "2")]),
                            ],
                        ),
                    ],
                )
            ],
        ),
        id="let-infix",
    ),
    pytest.param(
        "fn(a) { return -a; }",
        Tree(
            "program",
            [
                Tree(
                    "expr_stmt",
                    [
                        Tree(
                            "fn",
                            [
                                Tree("paramlist", [Token("IDENT", "a")]),
                                Tree(
                                    "block",
                                    [
                                        Tree(
                                            "return_stmt",
                                            [
                                                Tree(
                                                    "prefix",
                                                    [
                                                        Token("OP", "-"),
                                                        Tree("ident", [Token("IDENT", "a")]),
                                                    ],
                                                )
                                            ],
                                        )
                                    ],
                                ),
                            ],
                        )
                    ],
                )
            ],
        ),
        id="fn-return-prefix",
    ),
    pytest.param(
        '{"k": [true]}["k"]',
        Tree(
            "program",
            [
                Tree(
                    "expr_stmt",
                    [
                        Tree(
                            "index",
                            [
                                Tree(
                                    "hash",
                                    [
                                        Tree(
                                            "pair",
                                            [
                                                Tree("string", [Token("STRING", "k")]),
                                                Tree("array", [Tree("bool", [Token("TRUE", "true")])]),
                                            ],
                                        )
                                    ],
                                ),
                                Tree("string", [Token("STRING", "k")]),
                            ],
                        )
                    ],
                )
            ],
        ),
        id="hash-index",
    ),
]


@pytest.mark.parametrize("code, expected", AST_CASES)
def test_ast_cases(code: str, expected: Tree) -> None:
    assert to_lark(parse_source(code)) == expected


def test_lark_tree_pretty_dump() -> None:
    dump = to_lark(parse_source("if (x) { f(1) } else { }")).pretty()
    lines = dump.splitlines()

    assert lines[0] == "program"
    assert "if_expr" in dump
    assert "call" in dump
    assert "args" in dump


def test_to_lark_rejects_non_nodes() -> None:
    with pytest.raises(TypeError):
        to_lark("not a node")  # type: ignore[arg-type]


def test_nodes_are_immutable() -> None:
    stmt = parse_source("let a = 1;").statements[0]
    with pytest.raises(AttributeError):
        stmt.name = Identifier(Tok(TT.IDENT, "b"), "b")  # type: ignore[misc]
