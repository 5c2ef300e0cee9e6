# lltab/ll1/grammar.py
"""문법 모델: Production / Grammar.

Grammar는 생성 시점에 구조적 불변식을 모두 검증하고, 이후에는 읽기 전용입니다.
FIRST/FOLLOW/파싱 테이블은 이 객체를 입력으로 한 번만 계산됩니다.
"""

from __future__     import annotations
from dataclasses    import dataclass
from types          import MappingProxyType
from typing         import Dict, FrozenSet, Iterable, List, Mapping, Sequence, Tuple, Union

from .errors import GrammarError
from .symbols import EPSILON, RESERVED, SymbolTable


@dataclass(frozen=True)
class Production:
    """
    BNF 프로덕션 1개.
    - lhs: 좌변 비단말 이름
    - rhs: 우변 심볼 튜플. ε-프로덕션은 항상 (ε,) 로 정규화됩니다.
    """
    lhs: str
    rhs: Tuple[str, ...]

    @classmethod
    def of(cls, lhs: str, rhs: Iterable[str]) -> "Production":
        body = tuple(rhs)
        return cls(lhs, body if body else (EPSILON,))

    @property
    def is_epsilon(self) -> bool:
        return self.rhs == (EPSILON,)

    @property
    def body(self) -> Tuple[str, ...]:
        """스택에 넣을 심볼들(ε-프로덕션이면 빈 튜플)."""
        return () if self.is_epsilon else self.rhs

    def __str__(self) -> str:
        return f"{self.lhs} -> {' '.join(self.rhs)}"


ProductionsArg = Union[Mapping[str, Iterable[Sequence[str]]], Iterable[Production]]


def _collect_productions(productions: ProductionsArg, problems: List[str]) -> List[Production]:
    """입력 형태(매핑 또는 Production 목록)를 Production 리스트로 통일."""
    out: List[Production] = []
    if isinstance(productions, Mapping):
        for lhs, bodies in productions.items():
            if isinstance(bodies, str):
                problems.append(f"productions of {lhs!r} must be a list of symbol sequences, got string {bodies!r}")
                continue
            for body in bodies:
                if isinstance(body, str):
                    problems.append(f"production body {body!r} of {lhs!r} must be a sequence of symbols, not a string")
                    continue
                out.append(Production.of(lhs, body))
        return out

    for p in productions:
        if not isinstance(p, Production):
            problems.append(f"expected Production, got {type(p).__name__}: {p!r}")
            continue
        out.append(Production.of(p.lhs, p.rhs))
    return out


class Grammar:
    """
    Grammar
    =======
    단말/비단말 집합, 비단말별 프로덕션, 시작 기호를 소유하는 **불변** 문법.

    생성 시 검증하는 불변식
    --------------------
    - 단말, 비단말 집합은 비어 있지 않음
    - 단말 ∩ 비단말 = ∅
    - 어느 쪽에도 예약 심볼(ε, $)이 없음
    - 모든 비단말에 프로덕션이 1개 이상
    - 모든 프로덕션의 좌변은 선언된 비단말
    - 우변의 모든 심볼은 선언된 단말/비단말, 또는 **단독** ε
    - 시작 기호는 선언된 비단말

    위반 사항은 한꺼번에 모아 GrammarError 하나로 보고합니다.
    """

    def __init__(self,
                 terminals: Iterable[str],
                 nonterminals: Iterable[str],
                 productions: ProductionsArg,
                 start: str):
        terms = frozenset(terminals)
        nonterms = frozenset(nonterminals)
        problems: List[str] = []

        if not terms:
            problems.append("terminal set is empty")
        if not nonterms:
            problems.append("nonterminal set is empty")
        for s in sorted(terms & nonterms):
            problems.append(f"symbol {s!r} is declared both terminal and nonterminal")
        for marker in sorted(RESERVED):
            if marker in terms:
                problems.append(f"terminal set contains reserved symbol {marker!r}")
            if marker in nonterms:
                problems.append(f"nonterminal set contains reserved symbol {marker!r}")
        if start not in nonterms:
            problems.append(f"start symbol {start!r} is not a declared nonterminal")

        prods = _collect_productions(productions, problems)

        by_lhs: Dict[str, List[Production]] = {}
        for p in prods:
            if p.lhs not in nonterms:
                problems.append(f"left-hand side of '{p}' is not a declared nonterminal")
                continue
            for X in p.rhs:
                if X == EPSILON:
                    if len(p.rhs) != 1:
                        problems.append(f"'{EPSILON}' must be the only symbol of its production: '{p}'")
                elif X not in terms and X not in nonterms:
                    problems.append(f"production '{p}' uses undeclared symbol {X!r}")
            bucket = by_lhs.setdefault(p.lhs, [])
            if p not in bucket:
                bucket.append(p)

        for A in sorted(nonterms - RESERVED):
            if A not in by_lhs:
                problems.append(f"nonterminal {A!r} has no productions")

        if problems:
            raise GrammarError(problems)

        self._terms: FrozenSet[str] = terms
        self._nonterms: FrozenSet[str] = nonterms
        self._start = start
        self._prods = MappingProxyType({A: tuple(ps) for A, ps in by_lhs.items()})
        self._symbols = SymbolTable()
        self._symbols.freeze(terms, nonterms)

    # ----- 조회 -----
    @property
    def terminals(self) -> FrozenSet[str]:
        return self._terms

    @property
    def nonterminals(self) -> FrozenSet[str]:
        return self._nonterms

    @property
    def start(self) -> str:
        return self._start

    @property
    def symbols(self) -> SymbolTable:
        return self._symbols

    @property
    def productions(self) -> Mapping[str, Tuple[Production, ...]]:
        return self._prods

    def productions_of(self, nonterminal: str) -> Tuple[Production, ...]:
        """비단말의 프로덕션들. 비단말이 아니면 KeyError(빈 튜플로 대체하지 않음)."""
        try:
            return self._prods[nonterminal]
        except KeyError:
            raise KeyError(f"{nonterminal!r} is not a nonterminal of this grammar") from None

    def all_productions(self) -> List[Production]:
        """비단말 이름순 → 선언 순서. 에러 메시지/출력 재현성을 위한 고정 순서."""
        out: List[Production] = []
        for A in sorted(self._prods):
            out.extend(self._prods[A])
        return out

    def is_terminal(self, name: str) -> bool:
        return name in self._terms

    def is_nonterminal(self, name: str) -> bool:
        return name in self._nonterms

    def __repr__(self) -> str:
        return (f"Grammar(start={self._start!r}, terminals={sorted(self._terms)}, "
                f"nonterminals={sorted(self._nonterms)}, productions={len(self.all_productions())})")
