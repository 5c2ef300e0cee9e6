from __future__ import annotations

import threading

import pytest

from lltab import (
    EOF, IterTokenStream, LexTok, NoApplicableProductionError, ParseError,
    PrematureEndOfInputError, Production, UnexpectedTerminalError, build_parser,
)
from lltab.lex import TokenStream


def test_expr_accepts_id_plus_id_times_id(expr_parser):
    # id + id * id $
    toks = [("id", "1"), ("+", "+"), ("id", "2"), ("*", "*"), ("id", "3")]
    res = expr_parser.parse_tokens(toks)
    assert res.accepted
    assert res.consumed == 5
    assert [str(p) for p in res.derivation] == [
        "E -> T E′",
        "T -> F T′",
        "F -> id",
        "T′ -> ε",
        "E′ -> + T E′",
        "T -> F T′",
        "F -> id",
        "T′ -> * F T′",
        "F -> id",
        "T′ -> ε",
        "E′ -> ε",
    ]


def test_trace_callback_sees_every_production(expr_parser):
    seen = []
    res = expr_parser.parse_tokens(["(", "id", ")"], trace=seen.append)
    assert tuple(seen) == res.derivation
    assert seen[0] == Production.of("E", ["T", "E′"])


def test_nullable_chain_accepts_single_c(chain_parser):
    res = chain_parser.parse_tokens(["c"])
    assert [str(p) for p in res.derivation] == [
        "S -> A B",
        "A -> C D",
        "C -> c",
        "D -> ε",
        "B -> ε",
    ]


def test_nullable_chain_nested(chain_parser):
    assert chain_parser.parse_tokens(list("dcbcea" "c")).accepted


def test_no_production_on_first_token(expr_parser):
    stream = IterTokenStream([("+", "+"), ("id", "x")])
    with pytest.raises(NoApplicableProductionError) as exc:
        expr_parser.parse(stream)
    err = exc.value
    assert err.nonterminal == "E"
    assert err.found == LexTok("+", "+")
    assert err.expected == expr_parser.table.expected("E") == {"(", "id"}
    # 스트림의 error 콜백도 같은 정보를 받음
    assert stream.errors == [(LexTok("+", "+"), {"(", "id"})]
    assert not isinstance(err, PrematureEndOfInputError)


def test_premature_end_of_input(expr_parser):
    with pytest.raises(PrematureEndOfInputError) as exc:
        expr_parser.parse_tokens([("id", "1"), ("+", "+")])
    err = exc.value
    assert isinstance(err, NoApplicableProductionError)
    assert err.found is None
    assert err.at_eof
    assert err.nonterminal == "T"
    assert err.expected == {"(", "id"}


def test_empty_input_is_premature(expr_parser):
    with pytest.raises(PrematureEndOfInputError):
        expr_parser.parse_tokens([])


def test_terminal_mismatch_does_not_consume():
    # S -> a b : 스택 꼭대기 'b'와 입력 'a' 불일치
    parser = build_parser({"a", "b"}, {"S"}, {"S": [["a", "b"]]}, "S")
    stream = IterTokenStream([("a", "a"), ("a", "a2")])
    with pytest.raises(UnexpectedTerminalError) as exc:
        parser.parse(stream)
    err = exc.value
    assert err.found == LexTok("a", "a2")
    assert err.expected == {"b"}
    assert err.expected_terminal == "b"
    # 불일치한 토큰은 그대로 남아 있음
    assert stream.peek() == LexTok("a", "a2")


def test_mismatch_at_end_of_input():
    parser = build_parser({"a", "b"}, {"S"}, {"S": [["a", "b"]]}, "S")
    with pytest.raises(UnexpectedTerminalError) as exc:
        parser.parse_tokens(["a"])
    assert exc.value.found is None
    assert exc.value.expected == {"b"}


def test_trailing_input_after_accepting_stack(expr_parser):
    with pytest.raises(ParseError) as exc:
        expr_parser.parse_tokens(["id", ")"])
    # E′ 를 ε 로 줄인 뒤 ')' 가 남음 → 스택 바닥 '$' 와 불일치
    assert exc.value.found == LexTok(")", ")")


def test_undeclared_token_kind_is_rejected(expr_parser):
    with pytest.raises(NoApplicableProductionError) as exc:
        expr_parser.parse_tokens([("num", "42")])
    assert exc.value.found.type == "num"


def test_eof_marker_token_cannot_fake_end_of_input():
    parser = build_parser({"a"}, {"S"}, {"S": [["a"], []]}, "S")
    with pytest.raises(NoApplicableProductionError) as exc:
        parser.parse_tokens([(EOF, "")])
    assert not exc.value.at_eof


def test_error_handler_may_raise_its_own_exception(expr_parser):
    class Strict(IterTokenStream):
        def error(self, found, expected):
            raise ValueError(f"found {found}, expected {sorted(expected)}")

    with pytest.raises(ValueError, match="expected"):
        expr_parser.parse(Strict([")"]))


def test_error_message_lists_expected_in_stable_order(expr_parser):
    with pytest.raises(NoApplicableProductionError) as exc:
        expr_parser.parse_tokens([LexTok("*", "*", line=1, col=3)])
    msg = str(exc.value)
    assert "at 1:3" in msg
    assert "{(, id}" in msg


def test_parse_errors_are_syntax_errors(expr_parser):
    with pytest.raises(SyntaxError):
        expr_parser.parse_tokens(["+"])


def test_parses_are_independent(expr_parser):
    with pytest.raises(ParseError):
        expr_parser.parse_tokens(["("])
    assert expr_parser.parse_tokens(["(", "id", ")"]).accepted


def test_concurrent_parses_share_one_parser(expr_parser):
    good = ["(", "id", "+", "id", ")", "*", "id"]
    results = []

    def work():
        for _ in range(50):
            results.append(expr_parser.parse_tokens(good).consumed)

    threads = [threading.Thread(target=work) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert results == [len(good)] * 200


def test_custom_token_stream(expr_parser):
    class Countdown(TokenStream):
        def __init__(self):
            self.items = [LexTok("id", "x")]
        def peek(self):
            return self.items[0] if self.items else None
        def next(self):
            return self.items.pop(0) if self.items else None

    assert expr_parser.parse(Countdown()).consumed == 1


def test_queries(expr_parser):
    assert expr_parser.first_of("F") == {"(", "id"}
    assert expr_parser.follow_of("E") == {")", EOF}
    assert str(expr_parser.production_for("E′", ")")) == "E′ -> ε"
    assert expr_parser.production_for("F", "+") is None
