# lltab/ll1/__init__.py
"""LL(1) 핵심 파이프라인: Grammar → FIRST → FOLLOW → 테이블 → 예측 파서."""

from .symbols import EPSILON, EOF, SymbolTable
from .grammar import Grammar, Production
from .first_follow import FirstSets, FollowSets, compute_first, compute_follow
from .table import Conflict, ParseTable, build_ll1_table
from .runtime import LL1Parser, ParseResult, build_parser, parse_string
from .errors import (
    LL1Error, GrammarError, TableConflictError,
    ParseError, UnexpectedTerminalError, NoApplicableProductionError, PrematureEndOfInputError,
)
