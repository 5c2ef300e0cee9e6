# table.py
"""LL(1) 예측 파싱 테이블 M[A, a] 생성."""
from __future__ import annotations
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Optional, Tuple

from .errors import TableConflictError
from .first_follow import FirstSets, FollowSets
from .grammar import Grammar, Production
from .symbols import EOF, EPSILON, SymbolTable


@dataclass(frozen=True)
class Conflict:
    """한 칸(nonterminal, lookahead)에 두 프로덕션이 겹친 기록."""
    nonterminal: str
    lookahead: str
    existing: Production
    incoming: Production

    def __str__(self) -> str:
        return f"M[{self.nonterminal}, {self.lookahead}]: {self.existing}  /  {self.incoming}"


@dataclass(frozen=True, eq=False)
class ParseTable:
    """
    ParseTable
    ==========
    LL(1) 파싱 테이블과 충돌 보고를 담는 컨테이너.

    필드
    ----
    - cells    : (nonterm, term | '$') -> Production
    - conflicts: 충돌 목록. 비어 있어야 LL(1) 문법입니다.
        충돌 칸에는 먼저 기록된 프로덕션이 남아 있지만, 그런 테이블로는 파싱하지 않습니다.
    - symbols  : 출력 순서를 정하는 SymbolTable

    사용
    ----
    - 런타임 파서는 get(X, a)로 칸을 조회합니다.
    - 에러 메시지의 expected-set은 expected(X) = M[X, ·]의 정의역입니다.
    """
    cells: Mapping[Tuple[str, str], Production]
    conflicts: Tuple[Conflict, ...]
    symbols: SymbolTable

    @property
    def is_ll1(self) -> bool:
        return not self.conflicts

    def get(self, nonterminal: str, lookahead: str) -> Optional[Production]:
        return self.cells.get((nonterminal, lookahead))

    def expected(self, nonterminal: str) -> FrozenSet[str]:
        return frozenset(a for (A, a) in self.cells if A == nonterminal)

    def rows(self) -> List[Tuple[str, List[Tuple[str, Production]]]]:
        """출력용: 비단말 순서대로 (비단말, [(선행, 프로덕션) ...])."""
        by_row: Dict[str, Dict[str, Production]] = {}
        for (A, a), p in self.cells.items():
            by_row.setdefault(A, {})[a] = p
        out = []
        for A in self.symbols.ordered(by_row):
            row = by_row[A]
            out.append((A, [(a, row[a]) for a in self.symbols.ordered(row)]))
        return out

    def pretty_conflicts(self) -> str:
        """
        충돌 목록을 사람이 읽기 좋은 문자열로 변환합니다.
        충돌이 없으면 '(no conflicts)' 반환.
        """
        if not self.conflicts:
            return "(no conflicts)"
        return "\n".join(str(c) for c in self.conflicts)


def build_ll1_table(g: Grammar,
                    first: FirstSets,
                    follow: FollowSets,
                    *,
                    strict: bool = True) -> ParseTable:
    """
    모든 프로덕션 A -> α 에 대해 (S = FIRST(α)):
      - S - {ε} 의 각 단말 a 에 M[A, a] = A -> α
      - ε ∈ S 이면 FOLLOW(A)의 각 b('$' 포함)에 M[A, b] = A -> α
    ε 자체는 테이블 키로 쓰이지 않습니다.

    이미 다른 프로덕션이 있는 칸에는 덮어쓰지 않고 Conflict를 기록합니다.
    strict=True(기본)면 충돌이 하나라도 있을 때 TableConflictError를 던지고,
    strict=False면 충돌 목록이 채워진 테이블을 그대로 돌려줍니다(진단 도구용).
    """
    cells: Dict[Tuple[str, str], Production] = {}
    conflicts: List[Conflict] = []

    def put(A: str, a: str, p: Production) -> None:
        cur = cells.get((A, a))
        if cur is None:
            cells[(A, a)] = p
        elif cur != p:
            conflicts.append(Conflict(A, a, cur, p))

    for p in g.all_productions():
        S = first.of_sequence(p.rhs)
        for a in g.symbols.ordered(S - {EPSILON}):
            put(p.lhs, a, p)
        if EPSILON in S:
            for b in g.symbols.ordered(follow.of(p.lhs)):
                put(p.lhs, b, p)

    table = ParseTable(
        cells=MappingProxyType(cells),
        conflicts=tuple(conflicts),
        symbols=g.symbols,
    )
    if strict and conflicts:
        raise TableConflictError(conflicts)
    return table
