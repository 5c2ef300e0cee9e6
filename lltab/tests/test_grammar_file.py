from __future__ import annotations

import pytest

from lltab import EOF, GrammarError, LL1Parser, Production
from lltab.grammar import load_grammar_text, parse_grammar, to_grammar


def _grammar(src: str):
    return to_grammar(parse_grammar(src))


def test_expr_file_matches_textbook_grammar(grammar_path, expr_grammar):
    g = to_grammar(parse_grammar(load_grammar_text(grammar_path("expr.g"))))
    assert g.start == "E"
    assert g.terminals == expr_grammar.terminals
    assert g.nonterminals == expr_grammar.nonterminals
    assert g.all_productions() == expr_grammar.all_productions()


def test_declarations_are_collected(grammar_path):
    ast = parse_grammar(load_grammar_text(grammar_path("expr.g")))
    assert [t.name for t in ast.decl_tokens] == ["id"]
    assert ast.decl_tokens[0].pattern == "[A-Za-z_][A-Za-z0-9_]*|[0-9]+"
    assert len(ast.decl_ignores) == 1
    assert set(ast.keywords()) == {"+", "*", "(", ")"}
    assert ast.rules[1].alts[1].items == []


def test_start_defaults_to_first_rule():
    g = _grammar('S : "x" T ; T : "y" ;')
    assert g.start == "S"


def test_empty_alternative_forms():
    g = _grammar('A : "a" A | ; B : %empty | "b" ; S : A B ;')
    assert Production.of("A", []) in g.productions_of("A")
    assert Production.of("B", []) in g.productions_of("B")


def test_repeated_rule_names_merge_alternatives():
    g = _grammar('S : "a" ; S : "b" ;')
    assert len(g.productions_of("S")) == 2


def test_single_quoted_literals():
    g = _grammar("S : 'if' S | 'x' ;")
    assert {"if", "x"} == g.terminals


def test_comments_are_skipped():
    g = _grammar('// line\n/* block\n comment */ S : "a" ; // tail\n')
    assert g.terminals == {"a"}


def test_missing_semicolon_reports_location(grammar_path):
    with pytest.raises(SyntaxError) as exc:
        parse_grammar(load_grammar_text(grammar_path("broken.g")))
    msg = str(exc.value)
    assert "Missing ';' after rule 'Expr'" in msg
    assert "^" in msg


def test_ebnf_operators_are_rejected():
    with pytest.raises(SyntaxError, match="EBNF operator"):
        parse_grammar('S : "a"* ;')


def test_unknown_directive():
    with pytest.raises(SyntaxError, match="Unknown directive %left"):
        parse_grammar("%left PLUS ;\nS : PLUS ;")


def test_unknown_directive_inside_rule():
    with pytest.raises(SyntaxError, match="did you mean '%empty'"):
        parse_grammar('S : %eps ;')


def test_undefined_identifier_is_a_grammar_error():
    with pytest.raises(GrammarError) as exc:
        _grammar('S : "a" Missing ;')
    assert any("undeclared symbol 'Missing'" in p for p in exc.value.problems)


def test_rule_named_like_token_is_rejected():
    with pytest.raises(GrammarError, match="same name as a %token"):
        _grammar("%token NUM /[0-9]+/ ;\nNUM : NUM ;")


def test_no_rules():
    with pytest.raises(GrammarError, match="no rules"):
        _grammar("%token NUM /[0-9]+/ ;")


def test_nullable_file_builds_ll1_parser(grammar_path):
    g = to_grammar(parse_grammar(load_grammar_text(grammar_path("nullable.g"))))
    parser = LL1Parser.from_grammar(g)
    assert parser.follow_of("C") == {"a", "b", "e", EOF}


def test_crlf_is_normalized(tmp_path):
    p = tmp_path / "crlf.g"
    p.write_bytes(b'S : "a"\r\n  | "b" ;\r\n')
    assert load_grammar_text(str(p)) == 'S : "a"\n  | "b" ;\n'
