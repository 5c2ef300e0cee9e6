"""`.g` 문법 파일 로더"""

from __future__ import annotations
from pathlib    import Path
from typing     import Union


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def load_grammar_text(path: Union[str, Path]) -> str:
    """UTF-8로 읽고 개행을 '\\n'으로 통일합니다. BOM은 제거."""
    text = Path(path).read_text(encoding="utf-8-sig")
    return normalize_newlines(text)
