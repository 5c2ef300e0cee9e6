from __future__ import annotations
from pathlib import Path

import pytest

from lltab import Grammar, LL1Parser

GRAMMAR_DIR = Path(__file__).parent / "grammar_test"

# E  -> T E′ ;  E′ -> + T E′ | ε ;  T -> F T′ ;  T′ -> * F T′ | ε ;  F -> ( E ) | id
EXPR_TERMS = {"id", "(", ")", "*", "+"}
EXPR_NONTERMS = {"E", "E′", "T", "T′", "F"}
EXPR_PRODS = {
    "E": [["T", "E′"]],
    "E′": [["+", "T", "E′"], ["ε"]],
    "T": [["F", "T′"]],
    "T′": [["*", "F", "T′"], ["ε"]],
    "F": [["(", "E", ")"], ["id"]],
}

# S -> A B ;  B -> a A B | ε ;  A -> C D ;  D -> b C D | ε ;  C -> d S e | c
CHAIN_TERMS = {"a", "b", "c", "d", "e"}
CHAIN_NONTERMS = {"S", "A", "B", "C", "D"}
CHAIN_PRODS = {
    "S": [["A", "B"]],
    "B": [["a", "A", "B"], ["ε"]],
    "A": [["C", "D"]],
    "D": [["b", "C", "D"], []],
    "C": [["d", "S", "e"], ["c"]],
}


@pytest.fixture
def expr_grammar() -> Grammar:
    return Grammar(EXPR_TERMS, EXPR_NONTERMS, EXPR_PRODS, "E")


@pytest.fixture
def chain_grammar() -> Grammar:
    return Grammar(CHAIN_TERMS, CHAIN_NONTERMS, CHAIN_PRODS, "S")


@pytest.fixture
def expr_parser(expr_grammar) -> LL1Parser:
    return LL1Parser.from_grammar(expr_grammar)


@pytest.fixture
def chain_parser(chain_grammar) -> LL1Parser:
    return LL1Parser.from_grammar(chain_grammar)


@pytest.fixture
def grammar_path():
    def _path(name: str) -> str:
        return str(GRAMMAR_DIR / name)
    return _path
