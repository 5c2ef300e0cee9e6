"""lltab 예외 계층.

- 문법 자체가 잘못된 경우(GrammarError, TableConflictError)와
- 특정 입력이 거부된 경우(ParseError 계열)를
서로 다른 예외 타입으로 구분합니다.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, FrozenSet, Iterable, List, Optional, Sequence

from .symbols import EOF

if TYPE_CHECKING:
    from ..lex import LexTok
    from .table import Conflict


class LL1Error(Exception):
    """lltab에서 발생하는 모든 예외의 기반 클래스."""


class GrammarError(LL1Error, ValueError):
    """
    문법 구성 시점 검증 실패.

    `problems`에는 위반된 규칙들이 **모두** 담깁니다(첫 번째 위반에서 멈추지 않음).
    """

    def __init__(self, problems: Sequence[str]):
        self.problems: List[str] = list(problems)
        lines = "\n".join(f"  - {p}" for p in self.problems)
        super().__init__(f"invalid grammar ({len(self.problems)} problem(s)):\n{lines}")


class TableConflictError(LL1Error):
    """같은 (비단말, 선행 단말) 칸에 서로 다른 프로덕션이 두 개 이상 들어가려 함 → LL(1) 아님."""

    def __init__(self, conflicts: Sequence["Conflict"]):
        self.conflicts: List["Conflict"] = list(conflicts)
        lines = "\n".join(f"  {c}" for c in self.conflicts)
        super().__init__(f"grammar is not LL(1): {len(self.conflicts)} conflict(s)\n{lines}")


def _describe(tok: Optional["LexTok"]) -> str:
    if tok is None:
        return "end of input"
    if tok.text and tok.text != tok.type:
        return f"{tok.type!r} ({tok.text!r})"
    return repr(tok.type)


def _where(tok: Optional["LexTok"]) -> str:
    if tok is None or not tok.line:
        return ""
    return f" at {tok.line}:{tok.col}"


class ParseError(LL1Error, SyntaxError):
    """
    ParseError
    ==========
    파싱 실행 1회를 종료시키는 입력 오류. 다른 파싱이나 공유 테이블에는 영향이 없습니다.

    속성
    ----
    - found      : 문제가 된 토큰(LexTok), 입력이 끝났으면 None
    - expected   : 그 자리에서 허용되었을 단말 이름들(frozenset, '$' 포함 가능)
    - nonterminal: 테이블 조회에 실패한 비단말(단말 불일치 오류면 None)
    """

    def __init__(self,
                 found: Optional["LexTok"],
                 expected: Iterable[str],
                 nonterminal: Optional[str] = None,
                 order: Optional[List[str]] = None):
        self.found = found
        self.expected: FrozenSet[str] = frozenset(expected)
        self.nonterminal = nonterminal
        shown = order if order is not None else sorted(self.expected)
        self.expected_sorted: List[str] = list(shown)
        super().__init__(self._message())

    def _message(self) -> str:
        exp = ", ".join(self.expected_sorted)
        return f"Parse error{_where(self.found)}: unexpected {_describe(self.found)}, expected one of {{{exp}}}"

    @property
    def at_eof(self) -> bool:
        return self.found is None


class UnexpectedTerminalError(ParseError):
    """스택 꼭대기 단말과 선행 토큰이 다름. expected는 항상 단말 1개."""

    def __init__(self, found: Optional["LexTok"], expected_terminal: str):
        self.expected_terminal = expected_terminal
        super().__init__(found, {expected_terminal})

    def _message(self) -> str:
        return (f"Parse error{_where(self.found)}: unexpected {_describe(self.found)}, "
                f"expected {self.expected_terminal!r}")


class NoApplicableProductionError(ParseError):
    """M[X, a] 칸이 비어 있음. expected = M[X, ·]의 정의역."""

    def _message(self) -> str:
        exp = ", ".join(self.expected_sorted)
        return (f"Parse error{_where(self.found)}: no rule of {self.nonterminal} starts with "
                f"{_describe(self.found)}, expected one of {{{exp}}}")


class PrematureEndOfInputError(NoApplicableProductionError):
    """입력이 끝났는데(선행 = '$') 스택이 수락 상태로 줄어들 수 없음."""

    def _message(self) -> str:
        exp = ", ".join(t for t in self.expected_sorted if t != EOF)
        return f"Parse error: unexpected end of input while expanding {self.nonterminal}, expected one of {{{exp}}}"
