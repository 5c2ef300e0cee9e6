# lltab/grammar/build.py
"""문법 파일 AST(GrammarFile) → 검증된 핵심 모델(ll1.Grammar).

- 단말: %token 이름 + 규칙 본문의 리터럴("+" 등)
- 비단말: 규칙 좌변 이름(같은 이름의 규칙이 여러 번 나오면 대안을 합침)
- 그 외 IDENT는 미선언 심볼로 남겨 두고, Grammar 검증이 GrammarError로 보고합니다.
"""

from __future__ import annotations
from typing import Dict, List, Set

from .ast import GrammarFile
from ..ll1.grammar import Grammar, Production
from ..ll1.errors import GrammarError


def to_grammar(g: GrammarFile) -> Grammar:
    """GrammarFile → Grammar. 문법이 비었거나 불변식을 어기면 GrammarError."""
    if not g.rules:
        raise GrammarError(["grammar file defines no rules"])

    token_names: Set[str] = set(g.token_names())
    terms: Set[str] = set(token_names)
    nonterms: List[str] = []
    problems: List[str] = []

    for r in g.rules:
        if r.name in token_names:
            problems.append(f"rule {r.name!r} has the same name as a %token")
        if r.name not in nonterms:
            nonterms.append(r.name)

    prods: List[Production] = []
    for r in g.rules:
        for alt in r.alts:
            rhs: List[str] = []
            for s in alt.items:
                if s.literal:
                    terms.add(s.text)
                rhs.append(s.text)
            prods.append(Production.of(r.name, rhs))

    if problems:
        raise GrammarError(problems)

    return Grammar(terms, nonterms, prods, g.start or nonterms[0])


def describe(g: GrammarFile) -> Dict[str, int]:
    """CLI 디버그 출력용 요약."""
    return {
        "tokens": len(g.decl_tokens),
        "ignores": len(g.decl_ignores),
        "keywords": len(set(g.keywords())),
        "rules": len(g.rules),
        "alternatives": sum(len(r.alts) for r in g.rules),
    }
