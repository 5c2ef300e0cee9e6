from __future__ import annotations
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Mapping, Set

from .grammar import Grammar
from .symbols import EOF, EPSILON


@dataclass(frozen=True, eq=False)
class FirstSets:
    """
    FirstSets
    =========
    FIRST 계산 결과(읽기 전용).

    - first: 각 **심볼 이름** → FIRST 집합
      * 단말 a: FIRST(a) = { a }
      * ε     : FIRST(ε) = { ε }
      * 비단말 A: 고정점 계산 결과 (ε 포함 가능)
    """
    first: Mapping[str, FrozenSet[str]]

    def of(self, symbol: str) -> FrozenSet[str]:
        """FIRST(symbol). 문법에 없는 심볼은 KeyError(빈 집합으로 대체하지 않음)."""
        try:
            return self.first[symbol]
        except KeyError:
            raise KeyError(f"no FIRST set for unknown symbol {symbol!r}") from None

    def of_sequence(self, seq: Iterable[str]) -> FrozenSet[str]:
        """
        임의의 심볼 시퀀스 X1 X2 ... Xn 의 FIRST.
        왼쪽부터 훑으며 FIRST(Xi) - {ε} 를 더하고, ε ∉ FIRST(Xi) 이면 멈춥니다.
        시퀀스가 비었거나 모든 Xi가 ε을 허용하면 결과에 ε이 들어갑니다.
        """
        out: Set[str] = set()
        for X in seq:
            fx = self.of(X)
            out |= fx - {EPSILON}
            if EPSILON not in fx:
                return frozenset(out)
        out.add(EPSILON)
        return frozenset(out)

    def nullable(self, symbol: str) -> bool:
        return EPSILON in self.of(symbol)


@dataclass(frozen=True, eq=False)
class FollowSets:
    """
    FollowSets
    ==========
    - follow: 각 **비단말 이름** → FOLLOW 집합(단말과 '$', ε는 절대 없음)
      * 시작 기호에는 항상 '$'가 포함됩니다.
    """
    follow: Mapping[str, FrozenSet[str]]

    def of(self, nonterminal: str) -> FrozenSet[str]:
        try:
            return self.follow[nonterminal]
        except KeyError:
            raise KeyError(f"no FOLLOW set for {nonterminal!r} (not a nonterminal)") from None


def _freeze(sets: Dict[str, Set[str]]) -> Mapping[str, FrozenSet[str]]:
    return MappingProxyType({k: frozenset(v) for k, v in sets.items()})


def compute_first(g: Grammar) -> FirstSets:
    """
    compute_first
    =============
    모든 심볼의 FIRST 집합을 고정점 반복으로 계산합니다.

    알고리즘
    -------
    - 단말 t: FIRST(t) = { t },  FIRST(ε) = { ε }
    - 비단말은 빈 집합에서 시작
    - 모든 프로덕션 A -> X1 X2 ... Xn 에 대해 변화가 없을 때까지:
        - Xi를 왼쪽부터 훑으며 FIRST(Xi) - {ε} 를 FIRST(A)에 더함
        - ε ∉ FIRST(Xi) 이면 중단
        - 끝까지 모두 ε을 허용하면(ε-프로덕션 포함) FIRST(A)에 ε 추가

    집합은 단조 증가하고 심볼 알파벳이 유한하므로 반드시 종료합니다.
    좌재귀 문법에서도 별도 순환 방지 장치가 필요 없습니다.
    """
    first: Dict[str, Set[str]] = {}

    # 단말의 FIRST는 자기 자신
    for t in g.terminals:
        first[t] = {t}
    first[EPSILON] = {EPSILON}
    # 비단말은 일단 빈 집합
    for A in g.nonterminals:
        first[A] = set()

    prods = g.all_productions()
    changed = True
    while changed:
        changed = False
        for p in prods:
            target = first[p.lhs]
            before = len(target)
            all_eps = True
            for X in p.rhs:
                fx = first[X]
                target |= fx - {EPSILON}
                if EPSILON not in fx:
                    all_eps = False
                    break
            if all_eps:
                target.add(EPSILON)
            if len(target) != before:
                changed = True

    return FirstSets(first=_freeze(first))


def compute_follow(g: Grammar, first: FirstSets) -> FollowSets:
    """
    FOLLOW 고정점.
    - FOLLOW(start) 에 '$' 추가
    - A -> α B β 인 모든 비단말 B에 대해
        - FIRST(β) - {ε} 를 FOLLOW(B)에 더함
        - β가 비었거나 ε ∈ FIRST(β) 이면 FOLLOW(A)도 더함
    """
    follow: Dict[str, Set[str]] = {A: set() for A in g.nonterminals}
    follow[g.start].add(EOF)

    prods = g.all_productions()
    changed = True
    while changed:
        changed = False
        for p in prods:
            body = p.body
            for i, B in enumerate(body):
                if B not in follow:
                    continue
                target = follow[B]
                before = len(target)
                f_beta = first.of_sequence(body[i + 1:])
                target |= f_beta - {EPSILON}
                if EPSILON in f_beta:
                    target |= follow[p.lhs]
                if len(target) != before:
                    changed = True

    return FollowSets(follow=_freeze(follow))
