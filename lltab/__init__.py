# lltab/__init__.py
"""lltab: LL(1) predictive parser toolkit.

This package provides:
- an immutable grammar model with construction-time validation
- FIRST / FOLLOW fixed-point engines and the LL(1) table builder
- a table-driven predictive parser over any peekable token stream
- a small `.g` grammar-file front end and regex lexer (see `lltab.grammar`, `lltab.lex`)
"""

from .ll1 import (
    EPSILON, EOF,
    Grammar, Production,
    FirstSets, FollowSets, compute_first, compute_follow,
    Conflict, ParseTable, build_ll1_table,
    LL1Parser, ParseResult, build_parser, parse_string,
    LL1Error, GrammarError, TableConflictError,
    ParseError, UnexpectedTerminalError, NoApplicableProductionError, PrematureEndOfInputError,
)
from .lex import LexTok, TokenStream, IterTokenStream, SimpleLexer
