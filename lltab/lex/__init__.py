# lltab/lex/__init__.py
"""lltab 토큰 소스: 파서가 소비하는 (단말 이름, 값) 스트림.

파서(런타임)는 특정 토크나이저에 묶이지 않고 아래 `TokenStream` 인터페이스만 사용합니다.

API
---
- `LexTok(type, text, line, col, pos)`: 토큰 단위. type = 단말 이름, text = 원문 값
- `TokenStream`
    - `peek() -> Optional[LexTok]`   다음 토큰(소비하지 않음, 끝이면 None)
    - `next() -> Optional[LexTok]`   다음 토큰 소비(끝이면 None)
    - `error(found, expected)`       파서가 오류를 던지기 직전에 호출하는 콜백
- `IterTokenStream(iterable)`: LexTok 또는 (type, value) 쌍의 이터러블을 감싼 스트림
- `SimpleLexer.from_grammar(g)`: 문법 파일 선언(%token, %ignore, "키워드")으로 만든 렉서

SimpleLexer 매칭 순서:
  1) %ignore 패턴을 가능한 만큼 스킵
  2) 키워드(리터럴): **길이 내림차순(최장일치)**, 단어형 키워드는 유니코드 단어경계 검사
  3) %token 정규식: **가장 긴 매치**(동률이면 선언 순서)
  4) 모두 불일치 → SyntaxError
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Pattern, Set, Tuple, Union
import re

import regex as _uregex

_RE_XID_CONT = _uregex.compile(r"\p{XID_Continue}")


def _is_ident_continue(ch: str) -> bool:
    """유니코드 식별자 이어붙임 문자(XID_Continue) 판정."""
    return bool(_RE_XID_CONT.fullmatch(ch))


def _is_word_keyword(s: str) -> bool:
    """키워드가 '단어' 성격(식별자 문자 포함)을 가지면 True."""
    return any(_is_ident_continue(c) for c in s)

# --------- Public datatypes ---------

@dataclass(frozen=True)
class LexTok:
    type: str       # 단말 이름(키워드 리터럴 또는 %token 이름)
    text: str       # 원문 lexeme(값)
    line: int = 0   # 1-based, 위치를 모르면 0
    col: int = 0    # 1-based
    pos: int = 0    # 원문 내 절대 오프셋


TokenLike = Union[LexTok, Tuple[str, str], str]


def as_token(item: TokenLike) -> LexTok:
    """LexTok / (type, value) / "type" 을 LexTok으로."""
    if isinstance(item, LexTok):
        return item
    if isinstance(item, str):
        return LexTok(type=item, text=item)
    if isinstance(item, (tuple, list)) and len(item) == 2:
        kind, value = item
        return LexTok(type=kind, text=value)
    raise TypeError(f"cannot use {item!r} as a token (expected LexTok, (type, value) or str)")


class TokenStream:
    """파서가 기대하는 최소 인터페이스."""
    def peek(self) -> Optional[LexTok]:
        raise NotImplementedError

    def next(self) -> Optional[LexTok]:
        raise NotImplementedError

    def error(self, found: Optional[LexTok], expected: Set[str]) -> None:
        """
        파싱 오류 콜백. found는 문제 토큰(입력 끝이면 None), expected는 허용되었을 단말들.
        기본 구현은 아무것도 하지 않습니다(파서가 곧바로 ParseError를 던짐).
        직접 예외를 던지도록 재정의해도 됩니다.
        """
        return None


# 이터러블 소진 표시. None은 잘못된 원소로 보고 as_token이 거부합니다.
_END = object()


class IterTokenStream(TokenStream):
    """이터러블을 한 번만 훑는 peek 가능 스트림."""

    def __init__(self, items: Iterable[TokenLike]):
        self._it: Iterator[TokenLike] = iter(items)
        self._peek_cache: Optional[LexTok] = None
        self._peeked = False
        self.errors: List[Tuple[Optional[LexTok], Set[str]]] = []

    def peek(self) -> Optional[LexTok]:
        if not self._peeked:
            nxt = next(self._it, _END)
            self._peek_cache = None if nxt is _END else as_token(nxt)
            self._peeked = True
        return self._peek_cache

    def next(self) -> Optional[LexTok]:
        t = self.peek()
        self._peeked = False
        self._peek_cache = None
        return t

    def error(self, found: Optional[LexTok], expected: Set[str]) -> None:
        self.errors.append((found, set(expected)))

# --------- Helpers ---------

_FLAG_MAP = {
    'i': re.IGNORECASE,
    'm': re.MULTILINE,
    's': re.DOTALL,
    'x': re.VERBOSE,
    'A': re.ASCII,
    # 'U'는 Py3 기본 유니코드라 무시
}

def _compile_regex(pat: str, flags: str) -> Pattern[str]:
    f = 0
    for ch in flags:
        f |= _FLAG_MAP.get(ch, 0)
    return re.compile(pat, f)

# --------- Core implementation ---------

class SimpleLexer(TokenStream):
    """
    SimpleLexer
    ===========
    문법 파일의 선언부를 사용해 작동하는 참조 구현(키워드 => 정규식).
    reset(text)로 입력을 바꿔 가며 여러 번 쓸 수 있지만, 한 순간에는 입력 하나만 다룹니다.
    """
    def __init__(self,
            keywords: List[str],
            tokens: List[Tuple[str, Pattern[str]]],
            ignores: List[Pattern[str]]):
            self._keywords = keywords[:]         # 리터럴 문자열(길이 내림차순)
            self._tokens = tokens[:]             # (name, compiled_regex)
            self._ignores = ignores[:]           # compiled_regex
            self._text = ""
            self._i = 0
            self._line = 1
            self._col = 1
            self._peek_cache: Optional[LexTok] = None

    # ---- Constructors ----
    @classmethod
    def from_grammar(cls, g) -> "SimpleLexer":
        """GrammarFile(AST)의 선언부로부터 렉서를 생성."""
        # 1) 키워드: 중복 제거(첫 등장만 유지) + 길이 내림차순(동길이면 등장 순서)
        seen = set()
        kws_pairs = []
        for idx, lit in enumerate(g.keywords()):
            if lit in seen:
                continue
            seen.add(lit)
            kws_pairs.append((lit, idx))
        kws_pairs.sort(key=lambda p: (-len(p[0]), p[1]))
        keywords = [lit for (lit, _idx) in kws_pairs]

        # 2) %token 정규식
        tokens: List[Tuple[str, Pattern[str]]] = []
        for td in g.decl_tokens:
            tokens.append((td.name, _compile_regex(td.pattern, td.flags or "")))

        # 3) %ignore
        ignores = [_compile_regex(ig.pattern, ig.flags or "") for ig in g.decl_ignores]

        return cls(keywords, tokens, ignores)

    # ---- Input binding ----
    def reset(self, text: str, *, line: int = 1, col: int = 1) -> "SimpleLexer":
        self._text = text
        self._i = 0
        self._line = line
        self._col = col
        self._peek_cache = None
        return self

    @property
    def text(self) -> str:
        return self._text

    # ---- Public API ----
    def peek(self) -> Optional[LexTok]:
        if self._peek_cache is None:
            self._peek_cache = self._next_token()
        return self._peek_cache

    def next(self) -> Optional[LexTok]:
        if self._peek_cache is not None:
            t = self._peek_cache
            self._peek_cache = None
            return t
        return self._next_token()

    def tokens(self) -> Iterator[LexTok]:
        """남은 입력을 끝까지 토큰화."""
        while True:
            tok = self.next()
            if tok is None:
                return
            yield tok

    # ---- Internals ----
    def _advance_text(self, consumed: str) -> None:
        """소비된 텍스트 길이만큼 내부 포인터/행렬을 갱신."""
        nl = consumed.count("\n")
        if nl:
            self._line += nl
            self._col = len(consumed) - consumed.rfind("\n")
        else:
            self._col += len(consumed)
        self._i += len(consumed)

    def _skip_ignores(self) -> None:
        while self._i < len(self._text):
            progressed = False
            for rgx in self._ignores:
                m = rgx.match(self._text, self._i)
                if m and m.end() > self._i:
                    self._advance_text(m.group(0))
                    progressed = True
                    break
            if not progressed:
                return

    def _match_keyword(self) -> Optional[LexTok]:
        s = self._text
        i = self._i
        for lit in self._keywords:  # 이미 길이 내림차순으로 정렬됨
            if not s.startswith(lit, i):
                continue
            # 단어 키워드는 앞/뒤 경계 검사
            if _is_word_keyword(lit):
                j = i + len(lit)
                if i > 0 and _is_ident_continue(s[i-1]):
                    continue
                if j < len(s) and _is_ident_continue(s[j]):
                    continue
            return LexTok(type=lit, text=lit, line=self._line, col=self._col, pos=i)
        return None

    def _match_token_regex(self) -> Optional[LexTok]:
        best_name = None
        best_text = ""
        for name, rgx in self._tokens:
            m = rgx.match(self._text, self._i)
            if m and len(m.group(0)) > len(best_text):
                best_name = name
                best_text = m.group(0)
        if best_name is not None:
            return LexTok(type=best_name, text=best_text, line=self._line, col=self._col, pos=self._i)
        return None

    def _next_token(self) -> Optional[LexTok]:
        self._skip_ignores()
        if self._i >= len(self._text):
            return None

        kw = self._match_keyword()
        rx = self._match_token_regex()
        # 정규식 매치가 키워드보다 길면(예: "if" vs "iffy") 정규식 우선
        if kw is not None and (rx is None or len(rx.text) <= len(kw.text)):
            self._advance_text(kw.text)
            return kw
        if rx is not None:
            self._advance_text(rx.text)
            return rx

        ch = self._text[self._i]
        raise SyntaxError(f"Lexing error: unexpected character {ch!r} at {self._line}:{self._col}")
