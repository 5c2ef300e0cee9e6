# lltab/ll1/runtime.py
"""LL(1) 예측 파서 런타임(스택 머신).

- Grammar + FIRST/FOLLOW + ParseTable을 묶은 `LL1Parser`가 토큰 스트림을 받아
  **accept/reject** 를 판정합니다.
- 테이블은 읽기 전용이라 하나의 파서를 여러 파싱(스레드)이 공유해도 됩니다.
  스택과 입력 커서는 parse() 호출마다 새로 만들어집니다.
- 에러 시, 스트림의 error() 콜백을 먼저 부르고 같은 ParseError를 던집니다.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Iterable, List, NoReturn, Optional, Tuple

from .errors import (
    NoApplicableProductionError,
    ParseError,
    PrematureEndOfInputError,
    TableConflictError,
    UnexpectedTerminalError,
)
from .first_follow import FirstSets, FollowSets, compute_first, compute_follow
from .grammar import Grammar, Production, ProductionsArg
from .symbols import EOF
from .table import ParseTable, build_ll1_table
from ..lex import IterTokenStream, LexTok, TokenLike, TokenStream

Trace = Callable[[Production], None]


@dataclass(frozen=True)
class ParseResult:
    """
    성공한 파싱 1회의 결과.
    - derivation: 적용된 프로덕션들(좌측 유도 순서)
    - consumed  : 소비한 토큰 수
    """
    accepted: bool
    derivation: Tuple[Production, ...]
    consumed: int


def _line_bounds(src: str, pos: int) -> Tuple[int, int]:
    """pos가 속한 라인의 [start, end) 범위를 반환."""
    start = src.rfind("\n", 0, pos)
    start = 0 if start < 0 else start + 1
    end = src.find("\n", pos)
    end = len(src) if end < 0 else end
    return start, end

def _caret_snippet(src: str, pos: int) -> str:
    """해당 절대 오프셋 pos에 캐럿(^)을 찍은 스니펫을 생성."""
    start, end = _line_bounds(src, pos)
    line = src[start:end]
    caret = " " * (pos - start) + "^"
    return f"{line}\n{caret}"


class LL1Parser:
    """
    LL1Parser
    =========
    한 문법에 대해 FIRST/FOLLOW/테이블을 한 번 계산해 두고, parse()로 입력을 판정합니다.

    Parameters
    ----------
    grammar : Grammar
    first, follow : FirstSets, FollowSets
    table : ParseTable
        충돌이 있는 테이블은 받지 않습니다(TableConflictError).
    """

    def __init__(self, grammar: Grammar, first: FirstSets, follow: FollowSets, table: ParseTable):
        if table.conflicts:
            raise TableConflictError(table.conflicts)
        self.grammar = grammar
        self.first = first
        self.follow = follow
        self.table = table

    @classmethod
    def from_grammar(cls, grammar: Grammar) -> "LL1Parser":
        first = compute_first(grammar)
        follow = compute_follow(grammar, first)
        table = build_ll1_table(grammar, first, follow)
        return cls(grammar, first, follow, table)

    # ---- 파싱 ----
    def parse(self, stream: TokenStream, trace: Optional[Trace] = None) -> ParseResult:
        """
        스택 [$, Start]에서 시작해 입력을 끝까지 소비합니다.

        - X = $ 이고 a = $           → accept
        - X 가 단말: X = a 면 pop + 소비, 아니면 UnexpectedTerminalError (토큰은 소비하지 않음)
        - X 가 비단말: M[X, a] 없으면 NoApplicableProductionError
          (a = $ 면 PrematureEndOfInputError), 있으면 X를 pop하고 우변을 역순으로 push

        Returns
        -------
        ParseResult
            성공 시. 실패하면 stream.error(found, expected)를 호출한 뒤 ParseError를 던집니다.
        """
        g = self.grammar
        stack: List[str] = [EOF, g.start]
        derivation: List[Production] = []
        consumed = 0

        look: Optional[LexTok] = stream.peek()

        while True:
            X = stack[-1]
            if look is None:
                a: Optional[str] = EOF
            elif g.is_terminal(look.type):
                a = look.type
            else:
                # 선언되지 않은 단말(렉서/문법 불일치)은 어떤 칸과도 맞지 않음
                a = None

            if X == EOF:
                if a == EOF:
                    return ParseResult(True, tuple(derivation), consumed)
                self._fail(stream, UnexpectedTerminalError(look, EOF))

            if g.is_terminal(X):
                if X != a:
                    self._fail(stream, UnexpectedTerminalError(look, X))
                stack.pop()
                stream.next()
                consumed += 1
                look = stream.peek()
                continue

            prod = self.table.get(X, a) if a is not None else None
            if prod is None:
                expected = self.table.expected(X)
                order = g.symbols.ordered(expected)
                err_cls = PrematureEndOfInputError if a == EOF else NoApplicableProductionError
                self._fail(stream, err_cls(look, expected, nonterminal=X, order=order))

            stack.pop()
            stack.extend(reversed(prod.body))
            derivation.append(prod)
            if trace is not None:
                trace(prod)

    def parse_tokens(self, tokens: Iterable[TokenLike], trace: Optional[Trace] = None) -> ParseResult:
        """LexTok 또는 (type, value) 쌍의 이터러블을 바로 파싱."""
        return self.parse(IterTokenStream(tokens), trace=trace)

    @staticmethod
    def _fail(stream: TokenStream, err: ParseError) -> NoReturn:
        stream.error(err.found, set(err.expected))
        raise err

    # ---- 조회(테스트/도구용) ----
    def first_of(self, symbol: str):
        return self.first.of(symbol)

    def follow_of(self, nonterminal: str):
        return self.follow.of(nonterminal)

    def production_for(self, nonterminal: str, lookahead: str) -> Optional[Production]:
        return self.table.get(nonterminal, lookahead)


def build_parser(terminals: Iterable[str],
                 nonterminals: Iterable[str],
                 productions: ProductionsArg,
                 start: str) -> LL1Parser:
    """
    단일 생성 진입점. 문법을 검증하고 FIRST/FOLLOW/테이블을 계산한 파서를 돌려줍니다.
    실패 시 GrammarError 또는 TableConflictError.
    """
    return LL1Parser.from_grammar(Grammar(terminals, nonterminals, productions, start))


def parse_string(text: str, parser: LL1Parser, lexer, trace: Optional[Trace] = None) -> ParseResult:
    """렉서로 text를 토큰화하며 파싱합니다. 실패 시 메시지에 캐럿 스니펫을 붙인 같은 종류의 오류를 던집니다.

    Parameters
    ----------
    text : str
        파싱할 원문.
    parser : LL1Parser
    lexer : SimpleLexer
        reset(text)를 지원하는 TokenStream.
    """
    lexer.reset(text)
    try:
        return parser.parse(lexer, trace=trace)
    except ParseError as e:
        pos = e.found.pos if e.found is not None else len(text)
        e.msg = f"{e.msg}\n{_caret_snippet(text, pos)}"
        e.args = (e.msg,)
        raise
