# lltab/lltabc.py
"""lltabc – lltab CLI

사용 예)
    $ python -m lltab.lltabc check lltab/tests/grammar_test/expr.g -D
    $ python -m lltab.lltabc parse lltab/tests/grammar_test/expr.g --text "1 + 2 * (3 + 4)" --trace
    $ python -m lltab.lltabc lex   lltab/tests/grammar_test/expr.g --text "1 + 2"

기능
----
- check : 문법을 읽어 파이프라인(AST→Grammar→FIRST/FOLLOW→LL(1) 테이블) 검증 및 요약 출력
- parse : 문법으로 렉서/파서를 만들어 입력을 판정(필요하면 유도 과정 출력)
- lex   : 문법의 토큰 선언으로 입력을 토크나이즈

디버그 모드(-D/--debug)를 켜면 FIRST/FOLLOW/테이블과 충돌 리포트를 stderr로 출력합니다.

종료 코드: 0 성공, 1 LL(1) 충돌, 2 문법/입력 오류
"""

from __future__ import annotations
import argparse
import sys
from typing import Optional

# ------------------------------
# 헬퍼
# ------------------------------

def _eprint(*args, **kw) -> None:
    print(*args, file=sys.stderr, **kw)


def _fmt_set(items) -> str:
    return "{" + ", ".join(items) + "}"

# ------------------------------
# 파이프라인 로딩
# ------------------------------

def _load_pipeline(grammar_path: str, debug: bool):
    """
    .g 파일을 읽어 AST→Grammar→FIRST/FOLLOW→LL(1) 테이블까지 생성.
    테이블은 strict=False로 만들어 충돌을 보고용으로 남깁니다.
    """
    from .grammar.loader import load_grammar_text
    from .grammar.parser import parse_grammar
    from .grammar.build import to_grammar, describe
    from .ll1.first_follow import compute_first, compute_follow
    from .ll1.table import build_ll1_table

    src = load_grammar_text(grammar_path)
    ast = parse_grammar(src)
    if debug: _eprint("[DEBUG] AST ready | %s" % ", ".join(f"{k}={v}" for k, v in describe(ast).items()))

    g = to_grammar(ast)
    if debug: _eprint("[DEBUG] Grammar ready | terms=%d nonterms=%d prods=%d start=%s" %
                      (len(g.terminals), len(g.nonterminals), len(g.all_productions()), g.start))

    first = compute_first(g)
    follow = compute_follow(g, first)
    if debug: _eprint("[DEBUG] FIRST/FOLLOW computed")

    tbl = build_ll1_table(g, first, follow, strict=False)
    if debug: _eprint("[DEBUG] LL(1) table built | cells=%d conflicts=%d" %
                      (len(tbl.cells), len(tbl.conflicts)))

    return ast, g, first, follow, tbl

# ------------------------------
# 디버그 출력 헬퍼
# ------------------------------

def _print_first_follow(g, first, follow) -> None:
    sym = g.symbols
    width = max(len(A) for A in g.nonterminals)
    _eprint("\n[FIRST(nonterminals)]")
    for A in sym.ordered(g.nonterminals):
        _eprint(f"  {A:>{width}} : {_fmt_set(sym.ordered(first.of(A)))}")
    _eprint("\n[FOLLOW(nonterminals)]")
    for A in sym.ordered(g.nonterminals):
        _eprint(f"  {A:>{width}} : {_fmt_set(sym.ordered(follow.of(A)))}")


def _print_table(tbl) -> None:
    _eprint("\n[LL(1) Table]")
    for A, row in tbl.rows():
        for a, p in row:
            _eprint(f"  M[{A}, {a}] = {p}")
    _eprint(f"\nConflicts: {len(tbl.conflicts)}")
    if tbl.conflicts:
        _eprint("\n[Conflicts Detail]")
        _eprint(tbl.pretty_conflicts())


def _read_input(args) -> str:
    if args.text is not None:
        return args.text
    with open(args.input, "r", encoding="utf-8") as f:
        return f.read()

# ------------------------------
# 커맨드 구현
# ------------------------------

def cmd_check(args) -> int:
    try:
        ast, g, first, follow, tbl = _load_pipeline(args.file, debug=args.debug)
    except SyntaxError as e:
        _eprint("[SYNTAX ERROR]")
        _eprint(str(e))
        return 2
    except Exception as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    if args.debug:
        _print_first_follow(g, first, follow)
        _print_table(tbl)

    if tbl.conflicts:
        _eprint("[NOT LL(1)]")
        _eprint(tbl.pretty_conflicts())
        print(f"[CHECK FAIL] start={g.start} prods={len(g.all_productions())} conflicts={len(tbl.conflicts)}")
        return 1

    print(f"[CHECK OK] start={g.start} prods={len(g.all_productions())} cells={len(tbl.cells)} conflicts=0")
    return 0


def cmd_parse(args) -> int:
    from .lex import SimpleLexer
    from .ll1.errors import ParseError
    from .ll1.runtime import LL1Parser, parse_string

    try:
        ast, g, first, follow, tbl = _load_pipeline(args.file, debug=args.debug)
        parser = LL1Parser(g, first, follow, tbl)
        lexer = SimpleLexer.from_grammar(ast)
        text = _read_input(args)
    except SyntaxError as e:
        _eprint("[SYNTAX ERROR]")
        _eprint(str(e))
        return 2
    except Exception as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    trace = (lambda p: print(f"  {p}")) if args.trace else None
    if trace is not None:
        print("[DERIVATION]")
    try:
        res = parse_string(text, parser, lexer, trace=trace)
    except ParseError as e:
        _eprint("[PARSE ERROR]")
        _eprint(str(e))
        return 2
    except SyntaxError as e:
        _eprint("[LEX ERROR]", str(e))
        return 2

    print(f"[ACCEPT] tokens={res.consumed} steps={len(res.derivation)}")
    return 0


def cmd_lex(args) -> int:
    """문법으로 간단 토크나이즈를 수행해 결과를 표준출력으로 보여줍니다."""
    try:
        from .grammar.loader import load_grammar_text
        from .grammar.parser import parse_grammar
        from .lex import SimpleLexer
        src = load_grammar_text(args.file)
        lx = SimpleLexer.from_grammar(parse_grammar(src))
        lx.reset(_read_input(args))
        for i, tok in enumerate(lx.tokens()):
            print(f"{i:03d}: {tok.type:<12} {tok.text!r}  @{tok.line}:{tok.col}")
        return 0
    except SyntaxError as e:
        _eprint("[LEX ERROR]", str(e))
        return 2
    except Exception as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2


# ------------------------------
# 엔트리포인트
# ------------------------------

def _add_input_args(p) -> None:
    src_group = p.add_mutually_exclusive_group(required=True)
    src_group.add_argument("--text", help="직접 입력 텍스트")
    src_group.add_argument("--input", help="입력 텍스트 파일 경로")


def main(argv: Optional[list[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="lltabc", description="lltab LL(1) parser toolkit CLI")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_check = sub.add_parser("check", help="문법을 검사하고 LL(1) 테이블을 생성해 충돌 유무를 확인합니다")
    p_check.add_argument("file", help=".g 문법 파일")
    p_check.add_argument("-D", "--debug", action="store_true", help="디버그 정보를 상세 출력")
    p_check.set_defaults(func=cmd_check)

    p_parse = sub.add_parser("parse", help="문법으로 입력 텍스트를 파싱합니다")
    p_parse.add_argument("file", help=".g 문법 파일")
    _add_input_args(p_parse)
    p_parse.add_argument("--trace", action="store_true", help="적용된 프로덕션을 순서대로 출력")
    p_parse.add_argument("-D", "--debug", action="store_true", help="디버그 정보를 상세 출력")
    p_parse.set_defaults(func=cmd_parse)

    p_lex = sub.add_parser("lex", help="문법을 이용해 입력 텍스트를 토크나이즈합니다")
    p_lex.add_argument("file", help=".g 문법 파일")
    _add_input_args(p_lex)
    p_lex.set_defaults(func=cmd_lex)

    args = ap.parse_args(argv)
    return int(args.func(args))

if __name__ == "__main__":
    sys.exit(main())
