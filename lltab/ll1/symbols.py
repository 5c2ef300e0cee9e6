"""예약 심볼(ε, $)과 출력용 심볼 순서."""
from __future__     import annotations
from dataclasses    import dataclass, field
from typing         import Dict, FrozenSet, Iterable, List

# 빈 유도(empty derivation) 표시. 단독 원소 프로덕션(A -> ε)에서만 허용됩니다.
EPSILON = "ε"

# 입력 끝 / 스택 바닥 표시
EOF = "$"

RESERVED: FrozenSet[str] = frozenset({EPSILON, EOF})


@dataclass
class SymbolTable:
    """
    SymbolTable
    ===========
    출력용 **안정적인 심볼 순서**를 관리합니다.
    테이블 행/열, 에러 메시지의 expected 목록, CLI 덤프가 모두 같은 순서를 쓰도록
    Grammar 생성 시 한 번 '고정(freeze)'합니다.

    - 순서: 단말(이름순) → '$' → 비단말(이름순). ε는 항상 맨 뒤.
    - 심볼 분류(단말/비단말)는 Grammar.is_terminal / is_nonterminal 이 담당합니다.
    """

    _rank: Dict[str, int] = field(default_factory=dict)
    _frozen: bool = False

    def freeze(self, terms: Iterable[str], nonterms: Iterable[str]) -> None:
        if self._frozen:
            return
        order: List[str] = sorted(terms) + [EOF] + sorted(nonterms) + [EPSILON]
        self._rank = {nm: i for i, nm in enumerate(order)}
        self._frozen = True

    def ordered(self, names: Iterable[str]) -> List[str]:
        """알려진 심볼은 테이블 순서로, 모르는 이름은 맨 뒤에 이름순으로."""
        tail = len(self._rank)
        return sorted(names, key=lambda nm: (self._rank.get(nm, tail), nm))
