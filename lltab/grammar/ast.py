# lltab/grammar/ast.py
"""Grammar file AST
- TokenDecl: %token NAME /PATTERN/
- IgnoreDecl: %ignore /PATTERN/
- Rule/Alt/Sym: 순수 BNF (EBNF 수식자 없음, 빈 대안 = ε)
"""

from __future__     import annotations
from dataclasses    import dataclass, field
from typing         import List, Optional

@dataclass
class Span:
    start: int
    end: int
    line: int
    col: int

@dataclass
class TokenDecl:
    name: str
    pattern: str    # 원본 정규식 문자열
    flags: str = ""
    span: Optional[Span] = None

@dataclass
class IgnoreDecl:
    pattern: str
    flags: str = ""
    span: Optional[Span] = None

@dataclass
class Sym:
    """
    우변 심볼 1개.
    - text   : 이름(IDENT) 또는 리터럴 내용("+" → +)
    - literal: 따옴표 리터럴이면 True (키워드 단말)
    """
    text: str
    literal: bool = False
    span: Optional[Span] = None

@dataclass
class Alt:
    """대안 하나. items가 비어 있으면 ε."""
    items: List[Sym] = field(default_factory=list)
    span: Optional[Span] = None

@dataclass
class Rule:
    name: str
    alts: List[Alt]
    span: Optional[Span] = None


@dataclass
class GrammarFile:
    # 선언(Decl) 섹션
    decl_tokens: List[TokenDecl] = field(default_factory=list)
    decl_ignores: List[IgnoreDecl] = field(default_factory=list)

    # 규칙 섹션
    rules: List[Rule] = field(default_factory=list)
    start: Optional[str] = None

    def keywords(self) -> List[str]:
        """규칙 본문에 등장한 리터럴들(등장 순서, 중복 포함)."""
        return [s.text for r in self.rules for a in r.alts for s in a.items if s.literal]

    def token_names(self) -> List[str]:
        return [t.name for t in self.decl_tokens]
