"""Solidity syntax trees: tree-sitter parsing, lossless trees, cursors, queries and typed views."""

from syntax.cursor import Cursor
from syntax.kinds import NonterminalKind, TerminalKind
from syntax.parser import Language, ParseError, ParseOutput, UnsupportedLanguageVersionError
from syntax.query import QueryMatch, compile_query, run_query
from syntax.tree import NonterminalNode, TerminalNode, TextIndex, TextRange

__all__ = [
    "Cursor",
    "Language",
    "NonterminalKind",
    "NonterminalNode",
    "ParseError",
    "ParseOutput",
    "QueryMatch",
    "TerminalKind",
    "TerminalNode",
    "TextIndex",
    "TextRange",
    "UnsupportedLanguageVersionError",
    "compile_query",
    "run_query",
]
