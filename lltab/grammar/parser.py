"""lltab 문법 파일 파서
- %token NAME /regex/flags ;
- %ignore /regex/ ;
- %start NAME ;
- 규칙: Rule : alt | alt ... ;
    alt은 IDENT / "lit" / 'lit' 의 나열. 빈 대안 또는 %empty 는 ε.
- 세미콜론(;)은 모든 선언/규칙 종료에 **반드시 필요**
- EBNF 수식자(?, *, +)와 그룹은 지원하지 않습니다(문법 변환 없음).
"""

from __future__ import annotations
import regex as re
from dataclasses import dataclass
from typing import List, Optional, Tuple
from .ast import Alt, GrammarFile, IgnoreDecl, Rule, Span, Sym, TokenDecl
import ast as _pyast

# ---- Lexer 토큰 ----
_TOKEN_SPEC = [
    ("WS",       r"[ \t\f]+"),
    ("NEWLINE",  r"\n"),
    ("COMMENT",  r"//[^\n]*"),
    ("MCOMMENT", r"/\*.*?\*/"),
    ("PERCENT",  r"%"),
    ("COLON",    r":"),
    ("SEMI",     r";"),
    ("OR",       r"\|"),
    ("EBNF",     r"[?*+()]"),
    ("REGEX",    r"/(?:\\.|[^/\n])+/[imxsAU]*"),
    ("STRING",   r'"(?:\\.|[^"\\])*"'),
    ("SSTRING",  r"'(?:\\.|[^'\\])*'"),
    ("IDENT",    r"[\p{XID_Start}_][\p{XID_Continue}′]*"),
]
MASTER_RE = re.compile("|".join(f"(?P<{n}>{p})" for n,p in _TOKEN_SPEC), re.S)

@dataclass
class Tok:
    kind: str
    lexeme: str
    start: int
    end: int
    line: int
    col: int

    def span(self) -> Span:
        return Span(self.start, self.end, self.line, self.col)

def _scan(src: str) -> List[Tok]:
    """개행은 줄/칼럼 갱신만 하고 토큰스트림에는 **넣지 않는다**."""
    toks: List[Tok] = []
    line = col = 1
    i = 0
    while i < len(src):
        m = MASTER_RE.match(src, i)
        if not m:
            raise SyntaxError(f"Unexpected char {src[i]!r} at {line}:{col}\n" + _snippet_caret_at_pos(src, i))
        kind = m.lastgroup or ""
        lex = m.group(0)
        start, end = i, m.end()

        if kind not in ("WS", "COMMENT", "MCOMMENT", "NEWLINE"):
            toks.append(Tok(kind, lex, start, end, line, col))

        # 위치 갱신
        nl_count = lex.count("\n")
        if nl_count:
            line += nl_count
            col = len(lex) - lex.rfind("\n")
        else:
            col += len(lex)
        i = end

    toks.append(Tok("EOF", "", len(src), len(src), line, col))
    return toks


# ---------- error handling utils ----------
def _line_bounds(src: str, pos: int) -> Tuple[int, int]:
    """pos가 속한 라인의 [시작, 끝+1) 범위"""
    start = src.rfind("\n", 0, pos)
    start = 0 if start == -1 else start + 1
    end = src.find("\n", pos)
    if end == -1:
        end = len(src)
    return start, end

def _snippet_with_caret(src: str, tok: Tok) -> str:
    """토큰 시작 위치에 캐럿"""
    return _snippet_caret_at_pos(src, tok.start)

def _snippet_caret_at_pos(src: str, pos: int) -> str:
    """임의의 절대 위치 pos에 캐럿(세미콜론 '바로 있어야 할 자리' 같은 곳)"""
    start, end = _line_bounds(src, pos)
    line_text = src[start:end]
    caret = " " * (pos - start) + "^"
    return f"{line_text}\n{caret}"

# --- 토큰 스트림 ---
class _TS:
    def __init__(self, toks: List[Tok], src: str):
        self.toks = toks
        self.i = 0
        self.src = src

    def la(self) -> Tok:
        return self.toks[self.i]

    def prev(self) -> Optional[Tok]:
        return self.toks[self.i - 1] if self.i > 0 else None

    def eat(self, kind: str) -> Tok:
        t = self.la()
        if t.kind != kind:
            snippet = _snippet_with_caret(self.src, t)
            raise SyntaxError(
                f"Expected {kind}, got {t.kind} at {t.line}:{t.col}\n{snippet}"
            )
        self.i += 1
        return t

    def match(self, kind: str) -> Optional[Tok]:
        if self.la().kind == kind:
            return self.eat(kind)
        return None

def _unquote(s: str) -> str:
    # 따옴표를 포함한 토큰 원문. Python의 안전한 리터럴 파서로 정확히 복원.
    return _pyast.literal_eval(s)

def _strip_regex(s: str) -> Tuple[str, str]:
    last = s.rfind("/")
    return s[1:last], s[last + 1:]

def _require_semi(ts: _TS, context: str, example: str, anchor: Optional[Tok] = None) -> None:
    """
    세미콜론 강제. 없으면:
      - Found: 다음 토큰/EOF 위치는 부가 정보로,
      - 캐럿은 anchor(직전 토큰)의 '끝 위치'에 찍음 → 올바른 줄에 표시됨.
    """
    if ts.match("SEMI"):
        return
    got = ts.la()
    found = "EOF" if got.kind == "EOF" else got.kind
    if anchor is not None:
        snippet = _snippet_caret_at_pos(ts.src, anchor.end)
    else:
        snippet = _snippet_with_caret(ts.src, got)
    raise SyntaxError(
        f"Missing ';' after {context} (semicolon is mandatory).\n"
        f"- Found: {found} at {got.line}:{got.col}\n"
        f"- Example: {example}\n\n"
        f"{snippet}"
    )


# --- 선언부 ---
def _parse_directive(ts: _TS, g: GrammarFile) -> None:
    """'%'는 이미 소비된 상태에서 호출."""
    look = ts.la()
    if look.kind != "IDENT":
        snippet = _snippet_with_caret(ts.src, look)
        raise SyntaxError(f"Expected directive name after '%', got {look.kind} at {look.line}:{look.col}\n{snippet}")
    ident_tok = ts.eat("IDENT")
    ident = ident_tok.lexeme

    if ident == "token":
        name_tok = ts.eat("IDENT")
        regex_tok = ts.eat("REGEX")
        pat, flags = _strip_regex(regex_tok.lexeme)
        g.decl_tokens.append(TokenDecl(name_tok.lexeme, pat, flags, span=name_tok.span()))
        _require_semi(ts, "%token declaration", '%token NAME /regex/;', anchor=regex_tok)
    elif ident == "ignore":
        regex_tok = ts.eat("REGEX")
        pat, flags = _strip_regex(regex_tok.lexeme)
        g.decl_ignores.append(IgnoreDecl(pat, flags, span=regex_tok.span()))
        _require_semi(ts, "%ignore declaration", r'%ignore /\s+/;', anchor=regex_tok)
    elif ident == "start":
        start_tok = ts.eat("IDENT")
        g.start = start_tok.lexeme
        _require_semi(ts, "%start declaration", '%start StartSymbol;', anchor=start_tok)
    else:
        snippet = _snippet_with_caret(ts.src, ident_tok)
        raise SyntaxError(
            f"Unknown directive %{ident} at {ident_tok.line}:{ident_tok.col}\n{snippet}"
        )


# --- Grammar Parsing ---
def parse_grammar(src: str) -> GrammarFile:
    ts = _TS(_scan(src), src)
    g = GrammarFile()

    # 선언부
    while ts.match("PERCENT"):
        _parse_directive(ts, g)

    # 규칙부
    while ts.la().kind != "EOF":
        lhs_tok = ts.eat("IDENT")
        ts.eat("COLON")
        alts = _parse_alts(ts)
        _require_semi(ts, f"rule '{lhs_tok.lexeme}'", f"{lhs_tok.lexeme} : ... ;", anchor=ts.prev())
        g.rules.append(Rule(lhs_tok.lexeme, alts, span=lhs_tok.span()))

    if not g.start and g.rules:
        g.start = g.rules[0].name

    return g

def _parse_alts(ts: _TS) -> List[Alt]:
    alts = [_parse_alt(ts)]
    while ts.match("OR"):
        alts.append(_parse_alt(ts))
    return alts

def _parse_alt(ts: _TS) -> Alt:
    """
    대안: (IDENT | STRING | SSTRING)*  또는  %empty
    """
    first = ts.la()
    span = first.span()
    if first.kind == "PERCENT":
        ts.eat("PERCENT")
        kw = ts.eat("IDENT")
        if kw.lexeme != "empty":
            snippet = _snippet_with_caret(ts.src, kw)
            raise SyntaxError(f"Unknown %directive %{kw.lexeme} inside a rule; did you mean '%empty'?\n{snippet}")
        return Alt([], span=span)

    items: List[Sym] = []
    while True:
        t = ts.la()
        if t.kind == "IDENT":
            ts.eat("IDENT")
            items.append(Sym(t.lexeme, span=t.span()))
        elif t.kind in ("STRING", "SSTRING"):
            ts.eat(t.kind)
            text = _unquote(t.lexeme)
            if not text:
                snippet = _snippet_with_caret(ts.src, t)
                raise SyntaxError(f"Empty literal at {t.line}:{t.col}; use %empty for ε\n{snippet}")
            items.append(Sym(text, literal=True, span=t.span()))
        elif t.kind == "EBNF":
            snippet = _snippet_with_caret(ts.src, t)
            raise SyntaxError(
                f"EBNF operator {t.lexeme!r} at {t.line}:{t.col} is not supported; "
                f"write the rule in plain BNF\n{snippet}"
            )
        else:
            break
    return Alt(items, span=span)
