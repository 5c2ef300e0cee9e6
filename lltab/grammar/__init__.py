# lltab/grammar/__init__.py
"""`.g` 문법 파일 프런트엔드: 로더 → 파서(AST) → 핵심 Grammar 모델."""

from .ast import GrammarFile, Rule, Alt, Sym, TokenDecl, IgnoreDecl
from .loader import load_grammar_text
from .parser import parse_grammar
from .build import to_grammar
