from __future__ import annotations

import pytest

from lltab import (
    IterTokenStream, LexTok, LL1Parser, NoApplicableProductionError, PrematureEndOfInputError,
    UnexpectedTerminalError, parse_string,
)
from lltab.grammar import load_grammar_text, parse_grammar, to_grammar
from lltab.lex import SimpleLexer, as_token


@pytest.fixture
def expr_ast(grammar_path):
    return parse_grammar(load_grammar_text(grammar_path("expr.g")))


def _kinds(lexer, text):
    return [(t.type, t.text) for t in lexer.reset(text).tokens()]


def test_keywords_and_tokens(expr_ast):
    lx = SimpleLexer.from_grammar(expr_ast)
    assert _kinds(lx, "a1 + (b*42)") == [
        ("id", "a1"), ("+", "+"), ("(", "("), ("id", "b"), ("*", "*"), ("id", "42"), (")", ")"),
    ]


def test_positions_track_lines(expr_ast):
    lx = SimpleLexer.from_grammar(expr_ast).reset("x\n  + y")
    toks = list(lx.tokens())
    assert [(t.line, t.col, t.pos) for t in toks] == [(1, 1, 0), (2, 3, 4), (2, 5, 6)]


def test_peek_is_idempotent(expr_ast):
    lx = SimpleLexer.from_grammar(expr_ast).reset("x + y")
    assert lx.peek() == lx.peek()
    assert lx.next().text == "x"
    assert lx.peek().type == "+"


def test_word_keywords_need_identifier_boundary():
    ast = parse_grammar('%token ID /[a-z]+/ ;\n%ignore /\\s+/ ;\nS : "if" ID | ID ;')
    lx = SimpleLexer.from_grammar(ast)
    assert _kinds(lx, "if iffy") == [("if", "if"), ("ID", "iffy")]


def test_longest_keyword_wins():
    ast = parse_grammar('%ignore /\\s+/ ;\nS : "<" S | "<=" S | ;')
    lx = SimpleLexer.from_grammar(ast)
    assert [t for t, _ in _kinds(lx, "<= <")] == ["<=", "<"]


def test_unexpected_character(expr_ast):
    lx = SimpleLexer.from_grammar(expr_ast).reset("x + ?")
    lx.next(); lx.next()
    with pytest.raises(SyntaxError, match=r"unexpected character '\?' at 1:5"):
        lx.next()


def test_regex_flags():
    ast = parse_grammar("%token KW /select/i ;\nS : KW ;")
    lx = SimpleLexer.from_grammar(ast)
    assert _kinds(lx, "SeLeCt") == [("KW", "SeLeCt")]


def test_end_to_end_parse_string(expr_ast):
    parser = LL1Parser.from_grammar(to_grammar(expr_ast))
    lx = SimpleLexer.from_grammar(expr_ast)
    res = parse_string("id + id * id", parser, lx)
    assert res.consumed == 5
    assert parse_string("(a + b) * c", parser, lx).accepted


def test_parse_string_error_has_caret(expr_ast):
    parser = LL1Parser.from_grammar(to_grammar(expr_ast))
    lx = SimpleLexer.from_grammar(expr_ast)
    with pytest.raises(NoApplicableProductionError) as exc:
        parse_string("a + * b", parser, lx)
    msg = str(exc.value)
    assert "at 1:5" in msg
    assert msg.endswith("a + * b\n    ^")


def test_parse_string_error_at_eof(grammar_path):
    ast = parse_grammar(load_grammar_text(grammar_path("nullable.g")))
    parser = LL1Parser.from_grammar(to_grammar(ast))
    lx = SimpleLexer.from_grammar(ast)
    assert parse_string("c", parser, lx).accepted
    with pytest.raises(PrematureEndOfInputError) as exc:
        parse_string("d", parser, lx)
    assert str(exc.value).endswith("d\n ^")
    # 'e'가 빠짐: 스택 꼭대기 단말 불일치
    with pytest.raises(UnexpectedTerminalError) as exc:
        parse_string("d c", parser, lx)
    assert exc.value.expected == {"e"}
    assert str(exc.value).endswith("d c\n   ^")


def test_iter_stream_accepts_mixed_items():
    s = IterTokenStream([LexTok("a", "1"), ("b", "2"), "c"])
    assert [s.next(), s.next(), s.next(), s.next()] == [
        LexTok("a", "1"), LexTok("b", "2"), LexTok("c", "c"), None,
    ]
    assert s.peek() is None


def test_iter_stream_rejects_none_item_instead_of_ending():
    s = IterTokenStream([("a", "1"), None, ("b", "2")])
    assert s.next() == LexTok("a", "1")
    with pytest.raises(TypeError, match="cannot use None as a token"):
        s.peek()


def test_iter_stream_end_is_sticky():
    s = IterTokenStream(iter([("a", "1")]))
    assert s.next() == LexTok("a", "1")
    assert s.next() is None
    assert s.peek() is None


def test_as_token_passthrough():
    t = LexTok("x", "y", 1, 2, 3)
    assert as_token(t) is t
